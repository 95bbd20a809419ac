"""Configuration loader for the page grader.

Loads the JSON configuration file and returns a validated GraderConfig instance.
Uses module-level caching so the config is only parsed once per process.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from page_grader.config.models import GraderConfig
from page_grader.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Module-level cache
_config_cache: dict[str, GraderConfig] = {}

# Default config path — lives next to this module
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "grader_default.json"


def load_config(path: Optional[Path] = None) -> GraderConfig:
    """Load and validate grader config from a JSON file.

    Parameters
    ----------
    path : Path | None
        Path to a custom JSON config file.
        If ``None``, the built-in ``grader_default.json`` is used.

    Returns
    -------
    GraderConfig
        Validated configuration instance.

    Raises
    ------
    FileNotFoundError
        If the specified path does not exist.
    ConfigurationError
        If the file is not valid JSON.
    pydantic.ValidationError
        If the JSON content does not match the expected schema.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH
    cache_key = str(config_path.resolve())

    if cache_key in _config_cache:
        return _config_cache[cache_key]

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {exc}") from exc

    config = GraderConfig.model_validate(raw)
    logger.debug("Loaded grader config from %s", config_path)
    _config_cache[cache_key] = config
    return config


def get_config() -> GraderConfig:
    """Get the default grader configuration (cached)."""
    return load_config()


def clear_cache() -> None:
    """Clear the config cache — useful for testing."""
    _config_cache.clear()

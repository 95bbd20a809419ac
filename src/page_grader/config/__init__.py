"""Grader configuration package."""

from page_grader.config.loader import get_config, load_config
from page_grader.config.models import GraderConfig

__all__ = ["GraderConfig", "get_config", "load_config"]

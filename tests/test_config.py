"""Tests for the grader configuration system."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from page_grader.config.loader import clear_cache, get_config, load_config
from page_grader.config.models import GraderConfig, MarkupLintConfig
from page_grader.domain.errors import ConfigurationError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_cache():
    """Ensure a clean config cache for every test."""
    clear_cache()
    yield
    clear_cache()


# ---------------------------------------------------------------------------
# Default config loading
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    """Tests for loading the built-in grader_default.json."""

    def test_loads_without_error(self):
        cfg = load_config()
        assert isinstance(cfg, GraderConfig)

    def test_paths(self):
        cfg = load_config()
        assert cfg.paths.document == "index.html"
        assert cfg.paths.stylesheet == "css/style.css"

    def test_markup_rules(self):
        m = load_config().markup_lint
        assert "style" in m.attr_bans
        assert "height" in m.attr_bans
        assert len(m.attr_bans) == 11
        assert m.doctype_first is True
        assert m.doctype_html5 is True
        assert m.html_req_lang is True
        assert m.line_end_style is False
        assert m.indent_style is False
        assert m.indent_width is False

    def test_placeholders(self):
        s = load_config().structure
        assert s.title_placeholder == "My Page Title"
        assert s.author_placeholder == "your name"
        assert s.min_list_items == 3

    def test_style_expectations(self):
        s = load_config().styles
        assert s.body_font_size == "16px"
        assert s.paragraph_line_height == "1.5"
        assert s.image_max_height == "400px"

    def test_json_matches_model_defaults(self):
        assert load_config() == GraderConfig()

    def test_cached(self):
        assert load_config() is get_config()


# ---------------------------------------------------------------------------
# Custom config files
# ---------------------------------------------------------------------------


class TestCustomConfig:
    def test_partial_override(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"styles": {"body_font_size": "18px"}}), encoding="utf-8")
        cfg = load_config(path)
        assert cfg.styles.body_font_size == "18px"
        assert cfg.styles.image_max_height == "400px"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_severity(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps({"stylesheet_lint": {"rules": {"block-no-empty": "fatal"}}}),
            encoding="utf-8",
        )
        with pytest.raises(ValidationError):
            load_config(path)

    def test_invalid_pattern(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"structure": {"link_href_pattern": "("}}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)


class TestMarkupLintConfig:
    def test_bans_are_lowercased(self):
        cfg = MarkupLintConfig(attr_bans=["STYLE"], tag_bans=["B"])
        assert cfg.attr_bans == ["style"]
        assert cfg.tag_bans == ["b"]

    def test_indent_options(self):
        cfg = MarkupLintConfig(line_end_style="lf", indent_style="spaces", indent_width=2)
        assert cfg.line_end_style == "lf"
        assert cfg.indent_width == 2

    def test_rejects_unknown_line_end_style(self):
        with pytest.raises(ValidationError):
            MarkupLintConfig(line_end_style="cr")

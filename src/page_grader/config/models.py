"""Pydantic models for the grader configuration.

These models validate and type the JSON configuration file that drives
every rule set and expected value used when grading a submission.
"""

from __future__ import annotations

import re
from typing import Literal, Union

from pydantic import BaseModel, Field, field_validator

Severity = Literal["error", "warning", "off"]


def _check_pattern(value: str) -> str:
    try:
        re.compile(value)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {value!r}: {exc}") from exc
    return value


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class PathsConfig(BaseModel):
    """Location of the submission files, relative to the working directory."""

    document: str = "index.html"
    stylesheet: str = "css/style.css"


# ---------------------------------------------------------------------------
# Markup linting
# ---------------------------------------------------------------------------


class MarkupLintConfig(BaseModel):
    """Rule options for the markup linter (htmllint rule vocabulary)."""

    attr_bans: list[str] = Field(
        default_factory=lambda: [
            "align",
            "background",
            "bgcolor",
            "border",
            "frameborder",
            "marginwidth",
            "marginheight",
            "scrolling",
            "style",
            "width",
            "height",
        ]
    )
    tag_bans: list[str] = Field(default_factory=lambda: ["style", "b", "i"])
    doctype_first: bool = True
    doctype_html5: bool = True
    html_req_lang: bool = True
    img_req_alt: bool = True
    img_req_src: bool = True
    id_no_dup: bool = True
    head_req_title: bool = True
    title_no_dup: bool = True
    line_end_style: Literal[False, "lf", "crlf"] = False
    indent_style: Literal[False, "tabs", "spaces", "nonmixed"] = False
    indent_width: Union[Literal[False], int] = False
    report_parse_errors: bool = True

    @field_validator("attr_bans", "tag_bans")
    @classmethod
    def _lowercase(cls, value: list[str]) -> list[str]:
        return [item.lower() for item in value]


# ---------------------------------------------------------------------------
# Stylesheet linting
# ---------------------------------------------------------------------------


class StylesheetLintConfig(BaseModel):
    """Severity per stylesheet rule (stylelint rule vocabulary)."""

    rules: dict[str, Severity] = Field(
        default_factory=lambda: {
            "parse-error": "error",
            "no-empty-source": "error",
            "block-no-empty": "error",
            "declaration-block-no-duplicate-properties": "error",
            "color-no-invalid-hex": "error",
            "unit-no-unknown": "error",
            "font-family-no-missing-generic-family-keyword": "warning",
            "declaration-no-important": "off",
        }
    )

    def severity(self, rule: str) -> Severity:
        return self.rules.get(rule, "off")


# ---------------------------------------------------------------------------
# Required HTML
# ---------------------------------------------------------------------------


class StructureConfig(BaseModel):
    """Expected values for the structural checks on the parsed document."""

    title_placeholder: str = "My Page Title"
    author_placeholder: str = "your name"
    image_src_prefix: str = "img/"
    link_href_pattern: str = r"^https?://"
    min_list_items: int = Field(default=3, ge=1)

    @field_validator("link_href_pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        return _check_pattern(value)


# ---------------------------------------------------------------------------
# Required CSS
# ---------------------------------------------------------------------------


class StylesConfig(BaseModel):
    """Expected computed style values after the stylesheet is inlined."""

    stylesheet_href: str = "css/style.css"
    body_font_size: str = "16px"
    body_font_family_pattern: str = r"'Helvetica Neue', '?Helvetica'?, '?Arial'?, sans-serif"
    paragraph_line_height: str = "1.5"
    image_max_height: str = "400px"

    @field_validator("body_font_family_pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        return _check_pattern(value)


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class GraderConfig(BaseModel):
    """Root configuration model for one graded exercise."""

    exercise: str = "problem1"
    paths: PathsConfig = Field(default_factory=PathsConfig)
    markup_lint: MarkupLintConfig = Field(default_factory=MarkupLintConfig)
    stylesheet_lint: StylesheetLintConfig = Field(default_factory=StylesheetLintConfig)
    structure: StructureConfig = Field(default_factory=StructureConfig)
    styles: StylesConfig = Field(default_factory=StylesConfig)

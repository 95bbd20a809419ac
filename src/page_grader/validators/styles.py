"""Required-CSS checks on the style-inlined document tree.

After inlining, every element carries its matched declarations in its
``style`` attribute; :func:`css_value` reads one property back, the same
way a DOM wrapper's ``.css()`` accessor would.
"""

from __future__ import annotations

import re
from typing import Optional

import tinycss2
from bs4 import BeautifulSoup, Tag

from page_grader.config.models import StylesConfig
from page_grader.validators.checker import CheckResult


def declarations(style: str) -> dict[str, str]:
    """Parse an inline ``style`` attribute into ``{property: value}``.

    Later declarations win, except over an earlier ``!important`` one.
    """
    values: dict[str, str] = {}
    important: set[str] = set()
    for node in tinycss2.parse_declaration_list(style, skip_comments=True, skip_whitespace=True):
        if node.type != "declaration":
            continue
        if node.lower_name in important and not node.important:
            continue
        values[node.lower_name] = tinycss2.serialize(node.value).strip()
        if node.important:
            important.add(node.lower_name)
    return values


def css_value(tag: Optional[Tag], prop: str) -> Optional[str]:
    """Computed value of ``prop`` on ``tag``, or ``None`` when unset."""
    if tag is None:
        return None
    return declarations(tag.get("style", "")).get(prop.lower())


def normalize_font_family(value: str) -> str:
    """Use single quotes and ``", "`` separators throughout a font stack."""
    return re.sub(r"\s*,\s*", ", ", value.replace('"', "'")).strip()


class StyleChecker:
    """Check the inlined submission for the required style values."""

    RULES = (
        "Links in local stylesheet",
        "Body has default font size",
        "Body has default font family",
        "Paragraphs have specified line height",
        "Images have constrained height",
        "Important list item is colored",
    )

    def __init__(self, soup: BeautifulSoup, config: StylesConfig) -> None:
        self._soup = soup
        self._config = config

    def check(self) -> list[CheckResult]:
        return [
            self._check_stylesheet_link(),
            self._check_font_size(),
            self._check_font_family(),
            self._check_line_height(),
            self._check_image_height(),
            self._check_important_item(),
        ]

    def _check_stylesheet_link(self) -> CheckResult:
        links = self._soup.select("head > link")
        href = links[0].get("href") if links else None
        expected = self._config.stylesheet_href
        return CheckResult(
            rule="Links in local stylesheet",
            passed=len(links) == 1 and href == expected,
            expected=f"Exactly 1 <link> to {expected!r}",
            actual=f"{len(links)} <link>" + (f", href={href!r}" if links else ""),
        )

    def _check_font_size(self) -> CheckResult:
        size = css_value(self._soup.body, "font-size")
        return CheckResult(
            rule="Body has default font size",
            passed=size == self._config.body_font_size,
            expected=self._config.body_font_size,
            actual=size or "Not set",
        )

    def _check_font_family(self) -> CheckResult:
        family = css_value(self._soup.body, "font-family")
        normalized = normalize_font_family(family) if family else ""
        pattern = self._config.body_font_family_pattern
        return CheckResult(
            rule="Body has default font family",
            passed=bool(family) and re.search(pattern, normalized) is not None,
            expected=pattern,
            actual=normalized or "Not set",
        )

    def _check_line_height(self) -> CheckResult:
        expected = self._config.paragraph_line_height
        paragraphs = self._soup.select("p")
        problems = []
        for index, p in enumerate(paragraphs, start=1):
            value = css_value(p, "line-height")
            if value is None or expected not in value:
                problems.append(f"<p> #{index} line-height={value or 'unset'}")
            if p.has_attr("id") or p.has_attr("class"):
                problems.append(f"<p> #{index} has id/class")
        return CheckResult(
            rule="Paragraphs have specified line height",
            passed=bool(paragraphs) and not problems,
            expected=f"line-height {expected}, no id or class",
            actual="; ".join(problems) if problems else f"{len(paragraphs)} <p>",
        )

    def _check_image_height(self) -> CheckResult:
        expected = self._config.image_max_height
        values = [css_value(img, "max-height") for img in self._soup.select("img")]
        return CheckResult(
            rule="Images have constrained height",
            passed=bool(values) and all(value == expected for value in values),
            expected=f"max-height: {expected}",
            actual=", ".join(value or "unset" for value in values) if values else "No <img>",
        )

    def _check_important_item(self) -> CheckResult:
        items = self._soup.select("li[class]")
        color = css_value(items[0], "color") if len(items) == 1 else None
        return CheckResult(
            rule="Important list item is colored",
            passed=len(items) == 1 and color is not None,
            expected="Exactly 1 <li> with a class, with a color",
            actual=f"{len(items)} classed <li>" + (f", color={color}" if color else ""),
        )

"""Required-HTML checks on the parsed document tree.

Every check is a presence or count query through a CSS selector; none
depends on another's outcome. Text that is only whitespace counts as empty
throughout.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from page_grader.config.models import StructureConfig
from page_grader.validators.checker import CheckResult


class StructureChecker:
    """Check a parsed submission for the required elements."""

    RULES = (
        "Specifies charset",
        "Includes page title",
        "Includes author metadata",
        "Has a top-level heading",
        "Has an image",
        "Includes a paragraph",
        "Includes a hyperlink in the paragraph",
        "Includes a list",
        "List has at least 3 items",
    )

    def __init__(self, soup: BeautifulSoup, config: StructureConfig) -> None:
        self._soup = soup
        self._config = config

    def check(self) -> list[CheckResult]:
        """Run all structural checks in declaration order."""
        return [
            self._check_charset(),
            self._check_title(),
            self._check_author(),
            self._check_heading(),
            self._check_image(),
            self._check_paragraph(),
            self._check_hyperlink(),
            self._check_list(),
            self._check_list_items(),
        ]

    # ------------------------------------------------------------------
    # Head
    # ------------------------------------------------------------------

    def _check_charset(self) -> CheckResult:
        count = len(self._soup.select("meta[charset]"))
        return CheckResult(
            rule="Specifies charset",
            passed=count == 1,
            expected="Exactly 1 <meta charset>",
            actual=f"{count} found",
        )

    def _check_title(self) -> CheckResult:
        titles = self._soup.select("head > title")
        text = titles[0].get_text().strip() if titles else ""
        placeholder = self._config.title_placeholder
        if len(titles) != 1:
            actual = f"{len(titles)} <title> elements"
        elif not text:
            actual = "Empty title"
        else:
            actual = repr(text)
        return CheckResult(
            rule="Includes page title",
            passed=len(titles) == 1 and len(text) > 0 and text != placeholder,
            expected=f"One non-empty <title> other than {placeholder!r}",
            actual=actual,
        )

    def _check_author(self) -> CheckResult:
        authors = self._soup.select('head > meta[name="author"]')
        content = authors[0].get("content", "").strip() if authors else ""
        placeholder = self._config.author_placeholder
        if len(authors) != 1:
            actual = f"{len(authors)} author <meta> tags"
        elif not content:
            actual = "Empty content"
        else:
            actual = repr(content)
        return CheckResult(
            rule="Includes author metadata",
            passed=len(authors) == 1 and len(content) > 0 and content != placeholder,
            expected=f"One <meta name=\"author\"> with content other than {placeholder!r}",
            actual=actual,
        )

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def _check_heading(self) -> CheckResult:
        headings = self._soup.select("h1")
        text = headings[0].get_text().strip() if headings else ""
        return CheckResult(
            rule="Has a top-level heading",
            passed=len(headings) == 1 and bool(text),
            expected="Exactly 1 non-empty <h1>",
            actual=f"{len(headings)} <h1>" + ("" if text or not headings else ", empty"),
        )

    def _check_image(self) -> CheckResult:
        prefix = self._config.image_src_prefix
        sources = [img.get("src", "") for img in self._soup.select("img")]
        matching = [src for src in sources if src.startswith(prefix)]
        return CheckResult(
            rule="Has an image",
            passed=len(matching) >= 1,
            expected=f"At least 1 <img> with src under {prefix!r}",
            actual=", ".join(repr(src) for src in sources) if sources else "No <img>",
        )

    def _check_paragraph(self) -> CheckResult:
        paragraphs = self._soup.select("p")
        text = "".join(p.get_text() for p in paragraphs).strip()
        return CheckResult(
            rule="Includes a paragraph",
            passed=len(paragraphs) >= 1 and bool(text),
            expected="At least 1 <p> with text",
            actual=f"{len(paragraphs)} <p>" + ("" if text or not paragraphs else ", all empty"),
        )

    def _check_hyperlink(self) -> CheckResult:
        pattern = re.compile(self._config.link_href_pattern)
        hrefs = [a.get("href", "") for a in self._soup.select("p a")]
        external = [href for href in hrefs if pattern.search(href)]
        return CheckResult(
            rule="Includes a hyperlink in the paragraph",
            passed=len(external) >= 1,
            expected="At least 1 <a> inside a <p> linking to an http(s) URL",
            actual=", ".join(repr(href) for href in hrefs) if hrefs else "No <a> inside <p>",
        )

    def _check_list(self) -> CheckResult:
        count = len(self._soup.select("ul, ol"))
        return CheckResult(
            rule="Includes a list",
            passed=count >= 1,
            expected="At least 1 <ul> or <ol>",
            actual=f"{count} found",
        )

    def _check_list_items(self) -> CheckResult:
        minimum = self._config.min_list_items
        items = self._soup.select("ul > li, ol > li")
        empty = [li for li in items if not li.get_text().strip()]
        actual = f"{len(items)} item(s)"
        if empty:
            actual += f", {len(empty)} empty"
        return CheckResult(
            rule="List has at least 3 items",
            passed=len(items) >= minimum and not empty,
            expected=f"At least {minimum} non-empty <li>",
            actual=actual,
        )

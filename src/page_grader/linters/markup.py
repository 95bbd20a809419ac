"""Markup linter for the submitted HTML document.

Two sources of violations are merged into one list:

* **Parse errors** from html5lib, which implements the HTML5 parsing
  algorithm and reports every standard-defined parse error with its
  position.
  Doctype errors are folded into the ``doctype-first`` and
  ``doctype-html5`` rules.
* **Rule checks** evaluated on a ``html.parser`` BeautifulSoup tree, which
  keeps the markup exactly as written and records source positions.

Rule names follow the htmllint vocabulary so diagnostics read the same as
the course material.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

import html5lib
from bs4 import BeautifulSoup, Tag
from html5lib.constants import E as PARSE_ERROR_MESSAGES

from page_grader.config.models import MarkupLintConfig

logger = logging.getLogger(__name__)

# html5lib error codes owned by a configurable rule
_CODE_RULES = {
    "expected-doctype-but-got-start-tag": "doctype-first",
    "expected-doctype-but-got-end-tag": "doctype-first",
    "expected-doctype-but-got-chars": "doctype-first",
    "expected-doctype-but-got-eof": "doctype-first",
    "unexpected-doctype": "doctype-first",
    "unknown-doctype": "doctype-html5",
}


@dataclass(frozen=True)
class MarkupViolation:
    """A single markup lint finding."""

    rule: str
    line: int
    column: int
    message: str = ""


class MarkupLinter:
    """Lint HTML text against a fixed ``MarkupLintConfig``."""

    def __init__(self, config: MarkupLintConfig) -> None:
        self._config = config

    def lint(self, text: str) -> list[MarkupViolation]:
        """Return every violation, ordered by position. Empty means valid."""
        violations = list(self._parse_errors(text))
        soup = BeautifulSoup(text, "html.parser")
        violations.extend(self._tag_rules(soup))
        violations.extend(self._whitespace_rules(text))
        violations.sort(key=lambda v: (v.line, v.column, v.rule))
        logger.debug("Markup lint found %d violation(s)", len(violations))
        return violations

    # ------------------------------------------------------------------
    # html5lib parse errors
    # ------------------------------------------------------------------

    def _parse_errors(self, text: str) -> Iterator[MarkupViolation]:
        parser = html5lib.HTMLParser(namespaceHTMLElements=False)
        parser.parse(text)
        for (line, col), code, datavars in parser.errors:
            rule = _CODE_RULES.get(code)
            if rule is None:
                if not self._config.report_parse_errors:
                    continue
                rule = code
            elif not self._rule_enabled(rule):
                continue
            message = PARSE_ERROR_MESSAGES.get(code, code) % (datavars or {})
            yield MarkupViolation(rule=rule, line=line, column=col + 1, message=message)

    def _rule_enabled(self, rule: str) -> bool:
        return bool(getattr(self._config, rule.replace("-", "_")))

    # ------------------------------------------------------------------
    # Rules on the as-written tree
    # ------------------------------------------------------------------

    def _tag_rules(self, soup: BeautifulSoup) -> Iterator[MarkupViolation]:
        cfg = self._config
        seen_ids: set[str] = set()

        for tag in soup.find_all(True):
            if tag.name in cfg.tag_bans:
                yield _at(tag, "tag-bans", f"Tag <{tag.name}> is banned")

            for attr in tag.attrs:
                if attr.lower() in cfg.attr_bans:
                    yield _at(tag, "attr-bans", f"Attribute '{attr}' is banned")

            if cfg.id_no_dup and tag.get("id"):
                if tag["id"] in seen_ids:
                    yield _at(tag, "id-no-dup", f"Duplicate id '{tag['id']}'")
                seen_ids.add(tag["id"])

            if tag.name == "img":
                if cfg.img_req_alt and not tag.has_attr("alt"):
                    yield _at(tag, "img-req-alt", "Image has no alt attribute")
                if cfg.img_req_src and not tag.get("src", "").strip():
                    yield _at(tag, "img-req-src", "Image has no src")

        if cfg.html_req_lang:
            html = soup.find("html")
            if html is None or not html.get("lang", "").strip():
                yield _at(html, "html-req-lang", "The <html> tag needs a lang attribute")

        head = soup.find("head")
        titles = head.find_all("title") if head is not None else []
        if cfg.head_req_title and not titles:
            yield _at(head, "head-req-title", "The <head> has no <title>")
        if cfg.title_no_dup:
            for extra in titles[1:]:
                yield _at(extra, "title-no-dup", "The <head> has more than one <title>")

    # ------------------------------------------------------------------
    # Line ending and indentation rules
    # ------------------------------------------------------------------

    def _whitespace_rules(self, text: str) -> Iterator[MarkupViolation]:
        cfg = self._config
        for number, line in enumerate(text.splitlines(keepends=True), start=1):
            body = line.rstrip("\r\n")

            if cfg.line_end_style == "lf" and line.endswith("\r\n"):
                yield MarkupViolation("line-end-style", number, len(body) + 1, "Expected LF")
            elif cfg.line_end_style == "crlf" and line.endswith("\n") and not line.endswith("\r\n"):
                yield MarkupViolation("line-end-style", number, len(body) + 1, "Expected CRLF")

            indent = body[: len(body) - len(body.lstrip(" \t"))]
            if not indent or not body.strip():
                continue

            style = cfg.indent_style
            if style == "tabs" and " " in indent:
                yield MarkupViolation("indent-style", number, 1, "Indent with tabs")
            elif style == "spaces" and "\t" in indent:
                yield MarkupViolation("indent-style", number, 1, "Indent with spaces")
            elif style == "nonmixed" and " " in indent and "\t" in indent:
                yield MarkupViolation("indent-style", number, 1, "Mixed tabs and spaces")

            width = cfg.indent_width
            if width is not False and width > 0 and "\t" not in indent and len(indent) % width:
                yield MarkupViolation(
                    "indent-width", number, 1, f"Indent is not a multiple of {width}"
                )


def _at(tag: Optional[Tag], rule: str, message: str) -> MarkupViolation:
    """Build a violation positioned at ``tag`` (start of file when unknown)."""
    line = getattr(tag, "sourceline", None) or 1
    column = (getattr(tag, "sourcepos", None) or 0) + 1
    return MarkupViolation(rule=rule, line=line, column=column, message=message)

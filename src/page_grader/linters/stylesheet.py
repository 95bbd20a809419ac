"""Stylesheet linter built on tinycss2.

tinycss2 tokenizes and parses the stylesheet following CSS Syntax Level 3
and reports recoverable parse errors as ``ParseError`` nodes. The rules
below walk that tree; rule names and the report shape follow stylelint so
the diagnostics match what students see in their editor.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

import tinycss2
from pydantic import BaseModel, Field

from page_grader.config.models import StylesheetLintConfig
from page_grader.domain.errors import DocumentLoadError

logger = logging.getLogger(__name__)

_HEX_COLOR_RE = re.compile(r"[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8}")

_KNOWN_UNITS = frozenset(
    {
        # relative lengths
        "em", "rem", "ex", "rex", "cap", "rcap", "ch", "rch", "ic", "ric", "lh", "rlh",
        # viewport and container lengths
        "vw", "vh", "vi", "vb", "vmin", "vmax",
        "svw", "svh", "svi", "svb", "svmin", "svmax",
        "lvw", "lvh", "lvi", "lvb", "lvmin", "lvmax",
        "dvw", "dvh", "dvi", "dvb", "dvmin", "dvmax",
        "cqw", "cqh", "cqi", "cqb", "cqmin", "cqmax",
        # absolute lengths
        "cm", "mm", "q", "in", "pt", "pc", "px",
        # angles, time, frequency, resolution, flex
        "deg", "grad", "rad", "turn", "s", "ms", "hz", "khz",
        "dpi", "dpcm", "dppx", "x", "fr",
    }
)

_GENERIC_FAMILIES = frozenset(
    {
        "serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui",
        "ui-serif", "ui-sans-serif", "ui-monospace", "ui-rounded",
        "emoji", "math", "fangsong",
    }
)

_CSS_WIDE_KEYWORDS = frozenset({"inherit", "initial", "unset", "revert", "revert-layer"})

# At-rules whose block holds nested rules rather than declarations
_GROUPING_AT_RULES = frozenset(
    {
        "media", "supports", "layer", "container", "document", "scope",
        "keyframes", "-webkit-keyframes", "-moz-keyframes", "font-feature-values",
    }
)


# ---------------------------------------------------------------------------
# Report models
# ---------------------------------------------------------------------------


class StylesheetWarning(BaseModel):
    """One finding, shaped like a stylelint warning."""

    rule: str
    severity: str
    text: str
    line: int
    column: int


class StylesheetFileResult(BaseModel):
    """Findings for a single stylesheet file."""

    source: str
    errored: bool = False
    warnings: list[StylesheetWarning] = Field(default_factory=list)


class StylesheetLintReport(BaseModel):
    """Aggregated lint result; ``errored`` is the pass/fail flag."""

    errored: bool = False
    results: list[StylesheetFileResult] = Field(default_factory=list)

    @property
    def output(self) -> str:
        """Raw structured output: the per-file results as a JSON array."""
        return json.dumps([result.model_dump(mode="json") for result in self.results])


# ---------------------------------------------------------------------------
# Linter
# ---------------------------------------------------------------------------


class StylesheetLinter:
    """Lint CSS files against a ``StylesheetLintConfig``."""

    def __init__(self, config: StylesheetLintConfig) -> None:
        self._config = config

    def lint(self, *paths: Path) -> StylesheetLintReport:
        """Lint each file and aggregate the results.

        Raises:
            DocumentLoadError: A stylesheet is missing or unreadable.
        """
        results = []
        for path in paths:
            path = Path(path)
            if not path.is_file():
                raise DocumentLoadError(f"Stylesheet not found: {path}")
            try:
                css = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise DocumentLoadError(f"Cannot read {path}: {exc}") from exc
            results.append(self.lint_text(css, source=str(path)))
        return StylesheetLintReport(
            errored=any(result.errored for result in results), results=results
        )

    def lint_text(self, css: str, source: str = "<input css>") -> StylesheetFileResult:
        warnings = [
            StylesheetWarning(
                rule=rule,
                severity=self._config.severity(rule),
                text=f"{text} ({rule})",
                line=line,
                column=column,
            )
            for rule, text, line, column in self._findings(css)
            if self._config.severity(rule) != "off"
        ]
        warnings.sort(key=lambda w: (w.line, w.column))
        errored = any(w.severity == "error" for w in warnings)
        logger.debug("Stylesheet %s: %d warning(s), errored=%s", source, len(warnings), errored)
        return StylesheetFileResult(source=source, errored=errored, warnings=warnings)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _findings(self, css: str) -> Iterator[tuple[str, str, int, int]]:
        if not css.strip():
            yield "no-empty-source", "Unexpected empty source", 1, 1
            return
        nodes = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
        yield from self._walk_rules(nodes)

    def _walk_rules(self, nodes: Iterable) -> Iterator[tuple[str, str, int, int]]:
        for node in nodes:
            if node.type == "error":
                yield _parse_error(node)
            elif node.type == "qualified-rule":
                yield from self._check_block(node)
            elif node.type == "at-rule" and node.content is not None:
                if node.lower_at_keyword in _GROUPING_AT_RULES:
                    nested = tinycss2.parse_rule_list(
                        node.content, skip_comments=True, skip_whitespace=True
                    )
                    yield from self._walk_rules(nested)
                else:
                    yield from self._check_block(node)

    def _check_block(self, rule) -> Iterator[tuple[str, str, int, int]]:
        # Style blocks may mix declarations with nested rules
        items = tinycss2.parse_blocks_contents(
            rule.content, skip_comments=True, skip_whitespace=True
        )
        declarations = [item for item in items if item.type == "declaration"]

        for item in items:
            if item.type == "error":
                yield _parse_error(item)
            elif item.type in ("qualified-rule", "at-rule") and item.content is not None:
                yield from self._check_block(item)

        if not items:
            yield "block-no-empty", "Unexpected empty block", rule.source_line, rule.source_column

        seen: set[str] = set()
        for decl in declarations:
            if decl.lower_name in seen and not decl.lower_name.startswith("--"):
                yield (
                    "declaration-block-no-duplicate-properties",
                    f'Unexpected duplicate "{decl.lower_name}"',
                    decl.source_line,
                    decl.source_column,
                )
            seen.add(decl.lower_name)

            if decl.important:
                yield (
                    "declaration-no-important",
                    "Unexpected !important",
                    decl.source_line,
                    decl.source_column,
                )

            if decl.lower_name == "font-family" and not _has_generic_family(decl.value):
                yield (
                    "font-family-no-missing-generic-family-keyword",
                    "Unexpected missing generic font family",
                    decl.source_line,
                    decl.source_column,
                )

            yield from _check_values(decl.value)


def _check_values(tokens: Iterable) -> Iterator[tuple[str, str, int, int]]:
    for token in tokens:
        if token.type == "hash" and not _HEX_COLOR_RE.fullmatch(token.value):
            yield (
                "color-no-invalid-hex",
                f'Unexpected invalid hex color "#{token.value}"',
                token.source_line,
                token.source_column,
            )
        elif token.type == "dimension" and token.lower_unit not in _KNOWN_UNITS:
            yield (
                "unit-no-unknown",
                f'Unexpected unknown unit "{token.unit}"',
                token.source_line,
                token.source_column,
            )
        elif token.type == "function":
            yield from _check_values(token.arguments)
        elif token.type in ("() block", "[] block", "{} block"):
            yield from _check_values(token.content)


def _has_generic_family(tokens: list) -> bool:
    idents = [token.lower_value for token in tokens if token.type == "ident"]
    if any(token.type == "function" and token.lower_name == "var" for token in tokens):
        return True
    if len(idents) == 1 and idents[0] in _CSS_WIDE_KEYWORDS:
        return True
    return any(ident in _GENERIC_FAMILIES for ident in idents)


def _parse_error(error) -> tuple[str, str, int, int]:
    return "parse-error", error.message, error.source_line, error.source_column

"""Result matchers for linter output.

Each matcher turns a linter's native result shape into a pass/fail flag and
a human-readable message, so checks never depend on a linter's schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from page_grader.linters.markup import MarkupViolation
from page_grader.linters.stylesheet import StylesheetLintReport


@dataclass(frozen=True)
class MatchResult:
    passed: bool
    message: str


def markup_lint_contains_no_errors(violations: Sequence[MarkupViolation]) -> MatchResult:
    """Pass when the markup linter reported nothing."""
    if len(violations) == 0:
        return MatchResult(passed=True, message="expected html to contain validity errors")
    message = "".join(
        f"Error: '{v.rule}' at line {v.line}, column {v.column}.\n" for v in violations
    )
    return MatchResult(passed=False, message=message)


def stylesheet_lint_contains_no_errors(report: StylesheetLintReport) -> MatchResult:
    """Pass when the stylesheet linter's ``errored`` flag is false."""
    if report.errored is False:
        return MatchResult(passed=True, message="expected CSS to contain validity errors")
    warnings = report.results[0].warnings if report.results else []
    message = "".join(
        f"{w.severity}: {w.text}\n       At line {w.line}, column {w.column}.\n"
        for w in warnings
    )
    return MatchResult(passed=False, message=message)

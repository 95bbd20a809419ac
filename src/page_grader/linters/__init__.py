"""Markup and stylesheet linters used by the source validity checks."""

from page_grader.linters.markup import MarkupLinter, MarkupViolation
from page_grader.linters.stylesheet import (
    StylesheetFileResult,
    StylesheetLinter,
    StylesheetLintReport,
    StylesheetWarning,
)

__all__ = [
    "MarkupLinter",
    "MarkupViolation",
    "StylesheetFileResult",
    "StylesheetLintReport",
    "StylesheetLinter",
    "StylesheetWarning",
]

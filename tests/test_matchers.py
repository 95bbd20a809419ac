"""Tests for the linter result matchers."""

from __future__ import annotations

from page_grader.linters.markup import MarkupViolation
from page_grader.linters.stylesheet import (
    StylesheetFileResult,
    StylesheetLintReport,
    StylesheetWarning,
)
from page_grader.validators.matchers import (
    markup_lint_contains_no_errors,
    stylesheet_lint_contains_no_errors,
)


class TestMarkupMatcher:
    def test_no_violations_passes(self):
        result = markup_lint_contains_no_errors([])
        assert result.passed is True
        assert result.message == "expected html to contain validity errors"

    def test_violations_are_listed(self):
        violations = [
            MarkupViolation(rule="doctype-first", line=1, column=1),
            MarkupViolation(rule="attr-bans", line=12, column=5, message="Attribute 'style' is banned"),
        ]
        result = markup_lint_contains_no_errors(violations)
        assert result.passed is False
        assert result.message == (
            "Error: 'doctype-first' at line 1, column 1.\n"
            "Error: 'attr-bans' at line 12, column 5.\n"
        )


class TestStylesheetMatcher:
    def test_not_errored_passes(self):
        report = StylesheetLintReport(
            errored=False,
            results=[
                StylesheetFileResult(
                    source="style.css",
                    warnings=[
                        StylesheetWarning(
                            rule="font-family-no-missing-generic-family-keyword",
                            severity="warning",
                            text="Unexpected missing generic font family",
                            line=2,
                            column=3,
                        )
                    ],
                )
            ],
        )
        result = stylesheet_lint_contains_no_errors(report)
        assert result.passed is True
        assert result.message == "expected CSS to contain validity errors"

    def test_first_file_warnings_are_listed(self):
        report = StylesheetLintReport(
            errored=True,
            results=[
                StylesheetFileResult(
                    source="style.css",
                    errored=True,
                    warnings=[
                        StylesheetWarning(
                            rule="block-no-empty",
                            severity="error",
                            text="Unexpected empty block (block-no-empty)",
                            line=4,
                            column=1,
                        )
                    ],
                ),
                StylesheetFileResult(
                    source="other.css",
                    errored=True,
                    warnings=[
                        StylesheetWarning(
                            rule="parse-error", severity="error", text="ignored", line=1, column=1
                        )
                    ],
                ),
            ],
        )
        result = stylesheet_lint_contains_no_errors(report)
        assert result.passed is False
        assert result.message == (
            "error: Unexpected empty block (block-no-empty)\n"
            "       At line 4, column 1.\n"
        )

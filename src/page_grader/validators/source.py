"""Source validity checks: markup and stylesheet linting."""

from __future__ import annotations

from pathlib import Path

from page_grader.config.models import MarkupLintConfig, StylesheetLintConfig
from page_grader.document import SourceDocument
from page_grader.domain.errors import GraderError
from page_grader.linters.markup import MarkupLinter
from page_grader.linters.stylesheet import StylesheetLinter
from page_grader.validators.checker import CheckResult
from page_grader.validators.matchers import (
    markup_lint_contains_no_errors,
    stylesheet_lint_contains_no_errors,
)


class SourceValidator:
    """Lint the document and its stylesheet.

    The two checks share no setup, so a missing stylesheet fails only the
    CSS check.
    """

    RULES = ("HTML validates without errors", "CSS validates without errors")

    def __init__(
        self,
        document: SourceDocument,
        stylesheet: Path,
        markup_config: MarkupLintConfig,
        stylesheet_config: StylesheetLintConfig,
    ) -> None:
        self._document = document
        self._stylesheet = Path(stylesheet)
        self._markup_linter = MarkupLinter(markup_config)
        self._stylesheet_linter = StylesheetLinter(stylesheet_config)

    def check(self) -> list[CheckResult]:
        return [self._check_markup(), self._check_stylesheet()]

    def _check_markup(self) -> CheckResult:
        violations = self._markup_linter.lint(self._document.text)
        match = markup_lint_contains_no_errors(violations)
        return CheckResult(
            rule="HTML validates without errors",
            passed=match.passed,
            expected="No markup lint errors",
            actual=f"{len(violations)} error(s)",
            details="" if match.passed else match.message,
        )

    def _check_stylesheet(self) -> CheckResult:
        rule = "CSS validates without errors"
        try:
            report = self._stylesheet_linter.lint(self._stylesheet)
        except GraderError as e:
            return CheckResult(rule=rule, passed=False, expected="Readable stylesheet", actual=str(e))

        match = stylesheet_lint_contains_no_errors(report)
        warnings = report.results[0].warnings if report.results else []
        return CheckResult(
            rule=rule,
            passed=match.passed,
            expected="No stylesheet lint errors",
            actual=f"{len(warnings)} warning(s)",
            details="" if match.passed else match.message,
        )

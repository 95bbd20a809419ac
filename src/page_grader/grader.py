"""Grade one submission: run every check group and collect a report.

Groups run in order over a single loaded copy of the document:

1. **Source code is valid** — markup and stylesheet linting.
2. **Has required HTML** — structural checks on the parsed tree.
3. **Has required CSS** — style checks on the stylesheet-inlined tree.

A group's setup (parsing, inlining) runs once before its checks. If setup
raises, every check in that group fails with the setup error; a failed
check never affects any other check.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from page_grader.config import GraderConfig, get_config
from page_grader.document import SourceDocument
from page_grader.domain.errors import GraderError
from page_grader.validators.checker import CheckGroup, CheckResult, GradeReport, failed_setup
from page_grader.validators.source import SourceValidator
from page_grader.validators.structure import StructureChecker
from page_grader.validators.styles import StyleChecker

logger = logging.getLogger(__name__)

VALIDITY_GROUP = "Source code is valid"
STRUCTURE_GROUP = "Has required HTML"
STYLE_GROUP = "Has required CSS"


class ExerciseGrader:
    """Grade an HTML/CSS submission against a ``GraderConfig``."""

    def __init__(self, config: Optional[GraderConfig] = None) -> None:
        self._config = config or get_config()

    @property
    def config(self) -> GraderConfig:
        return self._config

    def grade(self, document_path: Optional[Path] = None) -> GradeReport:
        """Run all check groups against the document.

        Args:
            document_path: The submitted HTML file. Defaults to the
                configured ``paths.document``.

        Raises:
            DocumentLoadError: The document itself cannot be read.
        """
        path = Path(document_path or self._config.paths.document)
        document = SourceDocument.load(path)
        logger.info("Grading %s", path)

        report = GradeReport(file_path=str(path))
        report.groups.append(self.check_validity(document))
        report.groups.append(self.check_structure(document))
        report.groups.append(self.check_styles(document))

        logger.info("Graded %s: %d/%d passed", path, report.passed, report.total)
        return report

    def check_validity(self, document: SourceDocument) -> CheckGroup:
        def setup() -> Callable[[], list[CheckResult]]:
            validator = SourceValidator(
                document,
                document.resolve(self._config.paths.stylesheet),
                self._config.markup_lint,
                self._config.stylesheet_lint,
            )
            return validator.check

        return _run_group(VALIDITY_GROUP, SourceValidator.RULES, setup)

    def check_structure(self, document: SourceDocument) -> CheckGroup:
        def setup() -> Callable[[], list[CheckResult]]:
            return StructureChecker(document.parse(), self._config.structure).check

        return _run_group(STRUCTURE_GROUP, StructureChecker.RULES, setup)

    def check_styles(self, document: SourceDocument) -> CheckGroup:
        def setup() -> Callable[[], list[CheckResult]]:
            return StyleChecker(document.inline_styles(), self._config.styles).check

        return _run_group(STYLE_GROUP, StyleChecker.RULES, setup)


def _run_group(
    name: str,
    rules: tuple[str, ...],
    setup: Callable[[], Callable[[], list[CheckResult]]],
) -> CheckGroup:
    group = CheckGroup(name=name)
    try:
        run_checks = setup()
    except GraderError as exc:
        logger.warning("Setup failed for %r: %s", name, exc)
        group.setup_error = str(exc)
        group.results = failed_setup(rules, exc)
        return group

    group.results = run_checks()
    logger.debug("%s: %d/%d passed", name, sum(r.passed for r in group.results), len(rules))
    return group

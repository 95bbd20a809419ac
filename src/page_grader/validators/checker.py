"""Check results and the grade report they roll up into."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CheckResult:
    """Result of a single grading check."""

    rule: str
    passed: bool
    expected: str
    actual: str
    details: str = ""  # formatted linter diagnostics, one per line

    @property
    def icon(self) -> str:
        return "✅" if self.passed else "❌"


@dataclass
class CheckGroup:
    """A named set of checks sharing one setup step."""

    name: str
    results: list[CheckResult] = field(default_factory=list)
    setup_error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)


@dataclass
class GradeReport:
    """Full grading report for one submission."""

    file_path: str
    groups: list[CheckGroup] = field(default_factory=list)

    @property
    def results(self) -> list[CheckResult]:
        return [r for group in self.groups for r in group.results]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def score(self) -> float:
        return (self.passed / self.total * 100) if self.total else 0.0

    @property
    def is_passing(self) -> bool:
        return self.total > 0 and self.failed == 0

    def get(self, rule: str) -> Optional[CheckResult]:
        """Find a result by rule name."""
        for r in self.results:
            if r.rule == rule:
                return r
        return None


def failed_setup(rules: tuple[str, ...], error: Exception) -> list[CheckResult]:
    """Fail every rule of a group whose setup raised ``error``."""
    return [
        CheckResult(
            rule=rule,
            passed=False,
            expected="Setup completes",
            actual=f"Setup failed: {error}",
        )
        for rule in rules
    ]

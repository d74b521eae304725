"""Dataclasses for coverage enhancement."""

from dataclasses import dataclass, field

from ...constants import DEFAULT_MAX_ENHANCEMENT_ATTEMPTS
from ..coverage import CoverageReport, CoverageThresholds


@dataclass
class CoverageConfig:
    """Minimum coverage to reach and the attempt budget."""
    thresholds: CoverageThresholds = field(default_factory=CoverageThresholds)
    max_attempts: int = DEFAULT_MAX_ENHANCEMENT_ATTEMPTS


@dataclass(frozen=True)
class EnhancementInput:
    """
    A passing test file to improve.

    Attributes:
        target_code: Code under test, shown to the model
        test_file: Path of the test file (overwritten by each attempt)
        test_code: Current content of the test file
        baseline: Coverage of `test_code`
        source_file: Source file to scope coverage to (optional)
        framework: Jest profile used when the project has no config (optional)
    """
    target_code: str
    test_file: str
    test_code: str
    baseline: CoverageReport
    source_file: str | None = None
    framework: str | None = None


@dataclass(frozen=True)
class CoverageAttempt:
    """One enhancement attempt and the coverage it produced."""
    attempt_number: int
    coverage: CoverageReport
    test_code: str
    success: bool
    tests_passed: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "attempt_number": self.attempt_number,
            "coverage": self.coverage.to_dict(),
            "success": self.success,
            "tests_passed": self.tests_passed,
        }


@dataclass
class EnhancementResult:
    """Best adopted test code and its coverage."""
    is_enhanced: bool
    final_coverage: CoverageReport
    test_code: str
    attempts: list[CoverageAttempt] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "is_enhanced": self.is_enhanced,
            "final_coverage": self.final_coverage.to_dict(),
            "attempts": [a.to_dict() for a in self.attempts],
            "test_code": self.test_code,
        }

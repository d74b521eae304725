"""Dataclasses and types for test healing."""

from dataclasses import dataclass, field
from enum import Enum

from ...constants import DEFAULT_MAX_RETRIES
from ..runner import ClassifiedError, RunStatus


class HealingStrategy(str, Enum):
    """How to react when a fix produces a different failure."""
    CONSERVATIVE = "conservative"
    AGGRESSIVE = "aggressive"


@dataclass
class HealingConfig:
    """Retry budget and strategy (per error)."""
    max_retries: int = DEFAULT_MAX_RETRIES
    strategy: HealingStrategy = HealingStrategy.CONSERVATIVE
    timeout_per_attempt: float | None = None


@dataclass(frozen=True)
class HealingInput:
    """
    What to heal.

    Attributes:
        source_code: Code under test, shown to the model
        test_file: Path of the failing test file (overwritten by each attempt)
        test_code: Current content of the test file
        errors: Errors as first observed, in discovery order
        source_file: Source file for coverage scoping on reruns (optional)
        framework: Jest profile used when the project has no config (optional)
    """
    source_code: str
    test_file: str
    test_code: str
    errors: tuple[ClassifiedError, ...]
    source_file: str | None = None
    framework: str | None = None


@dataclass(frozen=True)
class HealingAttempt:
    """One repair attempt for one error."""
    attempt_number: int
    error: ClassifiedError
    fix: str
    success: bool
    result_status: RunStatus | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "attempt_number": self.attempt_number,
            "error": self.error.to_dict(),
            "success": self.success,
            "fix": self.fix,
        }
        if self.result_status:
            result["result_status"] = self.result_status.value
        return result


@dataclass
class HealingResult:
    """Outcome of a healing run: final code, attempt history and unresolved errors."""
    is_fixed: bool
    test_code: str
    attempts: list[HealingAttempt] = field(default_factory=list)
    remaining_errors: list[ClassifiedError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.is_fixed

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "is_fixed": self.is_fixed,
            "success": self.success,
            "attempts": [a.to_dict() for a in self.attempts],
            "remaining_errors": [e.to_dict() for e in self.remaining_errors],
            "test_code": self.test_code,
        }

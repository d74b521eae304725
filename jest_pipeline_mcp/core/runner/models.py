"""Data models for the Jest test runner."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from ..coverage.models import CoverageReport

Framework = Literal["default", "react", "nextjs", "express", "nestjs", "nodejs"]


class RunStatus(str, Enum):
    """Overall outcome of one test run."""
    SUCCESS = "SUCCESS"
    TEST_FAILURES = "TEST_FAILURES"
    EXECUTION_ERROR = "EXECUTION_ERROR"


class ErrorKind(str, Enum):
    """Classification of a test failure, in matching priority order."""
    SYNTAX = "SYNTAX"
    DEPENDENCY = "DEPENDENCY"
    ASSERTION = "ASSERTION"
    RUNTIME = "RUNTIME"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ErrorLocation:
    """Where an error was raised."""
    file: str
    line: int
    column: int

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class ClassifiedError:
    """A failure reported by Jest, with its classification."""
    kind: ErrorKind
    message: str
    stack: str | None = None
    location: ErrorLocation | None = None

    def is_same_as(self, other: "ClassifiedError") -> bool:
        """Compare by kind, message and the line it was raised on."""
        return (
            self.kind == other.kind
            and self.message == other.message
            and _line(self.location) == _line(other.location)
        )

    def to_prompt_string(self) -> str:
        """Format the error for an AI prompt."""
        lines = [
            f"Type: {self.kind.value}",
            f"Message: {self.message}",
        ]
        if self.location:
            lines.append(f"Location: Line {self.location.line}, Column {self.location.column}")
        if self.stack:
            lines.append(f"Stack: {self.stack}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.kind.value,
            "message": self.message,
        }
        if self.stack:
            result["stack"] = self.stack
        if self.location:
            result["location"] = self.location.to_dict()
        return result


def _line(location: ErrorLocation | None) -> int | None:
    return location.line if location else None


@dataclass(frozen=True)
class RunStats:
    """Counts from the Jest summary line."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class ExecutionResult:
    """Immutable snapshot of one Jest run."""
    status: RunStatus
    raw_output: str
    duration: float
    errors: tuple[ClassifiedError, ...] = ()
    coverage: CoverageReport | None = None
    stats: RunStats = field(default_factory=RunStats)

    @property
    def success(self) -> bool:
        return self.status == RunStatus.SUCCESS

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "status": self.status.value,
            "summary": self.stats.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
            "coverage": self.coverage.to_dict() if self.coverage else None,
            "duration": round(self.duration, 3),
        }


@dataclass
class RunOptions:
    """
    Options for one test run.

    Attributes:
        test_file: Test file to run (relative paths resolve against the project root)
        collect_coverage: Whether to collect coverage
        source_file: Scope coverage to this source file
        framework: Profile for a synthesized Jest config
        timeout: Seconds before the process is killed (default from constants)
        env: Extra environment variables
    """
    test_file: str
    collect_coverage: bool = False
    source_file: str | None = None
    framework: Framework | None = None
    timeout: float | None = None
    env: dict[str, str] | None = None

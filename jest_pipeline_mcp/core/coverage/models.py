"""Data models for coverage reports and thresholds."""

from dataclasses import dataclass

from ...constants import DEFAULT_COVERAGE_MINIMUM

METRICS = ("statements", "branches", "functions", "lines")


@dataclass(frozen=True)
class CoverageReport:
    """Normalized coverage numbers plus the items still uncovered."""
    statements: float = 0.0
    branches: float = 0.0
    functions: float = 0.0
    lines: float = 0.0
    uncovered_lines: tuple[int, ...] = ()
    uncovered_functions: tuple[str, ...] = ()
    uncovered_branches: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "CoverageReport":
        """Zero coverage, used when artifacts are missing or unreadable."""
        return cls()

    def metrics(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in METRICS}

    def improves_on(self, other: "CoverageReport") -> bool:
        """True if at least one metric is strictly higher than in `other`."""
        return any(getattr(self, name) > getattr(other, name) for name in METRICS)

    def dominates(self, other: "CoverageReport") -> bool:
        """True if no metric is lower than in `other` and at least one is higher."""
        no_regression = all(getattr(self, name) >= getattr(other, name) for name in METRICS)
        return no_regression and self.improves_on(other)

    def to_prompt_string(self) -> str:
        """Format numbers and uncovered items for an AI prompt."""
        lines = [f"- {name.capitalize()}: {value}%" for name, value in self.metrics().items()]
        lines.append("")
        lines.append("Uncovered Areas:")
        lines.append(
            f"Lines: {', '.join(str(n) for n in self.uncovered_lines)}"
            if self.uncovered_lines else "All lines covered"
        )
        lines.append(
            f"Functions: {', '.join(self.uncovered_functions)}"
            if self.uncovered_functions else "All functions covered"
        )
        lines.append(
            f"Branches: {', '.join(self.uncovered_branches)}"
            if self.uncovered_branches else "All branches covered"
        )
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            **{name: round(value, 2) for name, value in self.metrics().items()},
            "uncovered_lines": list(self.uncovered_lines),
            "uncovered_functions": list(self.uncovered_functions),
            "uncovered_branches": list(self.uncovered_branches),
        }


@dataclass(frozen=True)
class CoverageThresholds:
    """Minimum percentage required for each metric."""
    statements: float = DEFAULT_COVERAGE_MINIMUM
    branches: float = DEFAULT_COVERAGE_MINIMUM
    functions: float = DEFAULT_COVERAGE_MINIMUM
    lines: float = DEFAULT_COVERAGE_MINIMUM

    def is_met_by(self, report: CoverageReport) -> bool:
        """All four metrics must meet or exceed their minimum."""
        return all(getattr(report, name) >= getattr(self, name) for name in METRICS)

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in METRICS}

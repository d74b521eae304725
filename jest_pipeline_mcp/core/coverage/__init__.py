"""Coverage - parse Jest coverage artifacts into normalized reports."""

from .analyzer import match_coverage_key, parse_coverage
from .models import CoverageReport, CoverageThresholds

__all__ = [
    "parse_coverage",
    "match_coverage_key",
    "CoverageReport",
    "CoverageThresholds",
]

"""Convert Jest (istanbul) coverage artifacts into a CoverageReport."""

import asyncio
import json
import logging
import time
from pathlib import Path

from ...constants import COVERAGE_DETAIL_FILE, COVERAGE_FLUSH_TIMEOUT, COVERAGE_SUMMARY_FILE
from .models import METRICS, CoverageReport

logger = logging.getLogger(__name__)


async def parse_coverage(
    coverage_dir: str | Path,
    target_file: str | None = None,
    flush_timeout: float = COVERAGE_FLUSH_TIMEOUT,
) -> CoverageReport:
    """
    Read coverage-summary.json and coverage-final.json from `coverage_dir`.

    Args:
        coverage_dir: Directory Jest wrote its json/json-summary reports to
        target_file: Restrict the report to this source file (optional)
        flush_timeout: How long to wait for reports not yet on disk

    Returns:
        CoverageReport; zero coverage if the artifacts are missing,
        unreadable, or do not mention `target_file`
    """
    coverage_dir = Path(coverage_dir)
    summary_path = coverage_dir / COVERAGE_SUMMARY_FILE
    detail_path = coverage_dir / COVERAGE_DETAIL_FILE

    await _wait_for_files([summary_path, detail_path], flush_timeout)

    try:
        summary = json.loads(summary_path.read_text(encoding="utf-8"))
        detail = json.loads(detail_path.read_text(encoding="utf-8"))

        if target_file:
            key = match_coverage_key(detail, target_file)
            if key is None:
                logger.warning("No coverage recorded for %s", target_file)
                return CoverageReport.empty()
            file_details = {key: detail[key]}
            percentages = _summary_percentages(summary.get(key)) or _detail_percentages(detail[key])
        else:
            file_details = detail
            percentages = _summary_percentages(summary.get("total")) or _aggregate_percentages(detail)

        return _build_report(percentages, file_details)

    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Error parsing coverage results in %s: %s", coverage_dir, e)
        return CoverageReport.empty()


def match_coverage_key(detail: dict, target_file: str) -> str | None:
    """Find the detail-map key for `target_file` by normalized substring match."""

    needle = _normalize(target_file)
    if needle.startswith("./"):
        needle = needle[2:]

    for key in detail:
        if needle in _normalize(key):
            return key
    return None


def _normalize(path: str) -> str:
    return path.replace("\\", "/")


async def _wait_for_files(paths: list[Path], timeout: float) -> None:
    """Poll until every path exists or the timeout elapses."""

    deadline = time.monotonic() + timeout
    while not all(path.exists() for path in paths):
        if time.monotonic() >= deadline:
            return
        await asyncio.sleep(0.1)


# =============================================================================
# Percentages
# =============================================================================

def _summary_percentages(entry: dict | None) -> dict[str, float] | None:
    """Read pct values from one json-summary entry."""

    if not entry:
        return None
    return {name: _pct(entry[name]) for name in METRICS}


def _pct(metric: dict) -> float:
    """Istanbul reports "Unknown" for metrics with nothing to cover."""

    pct = metric.get("pct")
    if isinstance(pct, (int, float)):
        return float(pct)
    return _ratio(metric.get("covered", 0), metric.get("total", 0))


def _ratio(covered: int, total: int) -> float:
    if total == 0:
        return 100.0
    return round(covered / total * 100, 2)


def _counts(file_detail: dict) -> dict[str, tuple[int, int]]:
    """(covered, total) per metric for one file of the detail map."""

    statements = file_detail.get("s", {})
    functions = file_detail.get("f", {})
    branches = [count for counts in file_detail.get("b", {}).values() for count in counts]

    line_hits: dict[int, int] = {}
    for statement_id, hits in statements.items():
        line = file_detail["statementMap"][statement_id]["start"]["line"]
        line_hits[line] = max(line_hits.get(line, 0), hits)

    return {
        "statements": (sum(1 for h in statements.values() if h > 0), len(statements)),
        "branches": (sum(1 for h in branches if h > 0), len(branches)),
        "functions": (sum(1 for h in functions.values() if h > 0), len(functions)),
        "lines": (sum(1 for h in line_hits.values() if h > 0), len(line_hits)),
    }


def _detail_percentages(file_detail: dict) -> dict[str, float]:
    return {name: _ratio(*counts) for name, counts in _counts(file_detail).items()}


def _aggregate_percentages(detail: dict) -> dict[str, float]:
    covered = dict.fromkeys(METRICS, 0)
    total = dict.fromkeys(METRICS, 0)
    for file_detail in detail.values():
        for name, (c, t) in _counts(file_detail).items():
            covered[name] += c
            total[name] += t
    return {name: _ratio(covered[name], total[name]) for name in METRICS}


# =============================================================================
# Uncovered items
# =============================================================================

def _build_report(percentages: dict[str, float], file_details: dict) -> CoverageReport:
    """Combine percentages with the uncovered items of the given files."""

    uncovered_lines: set[int] = set()
    uncovered_functions: list[str] = []
    uncovered_branches: list[str] = []

    for file_detail in file_details.values():
        statement_map = file_detail.get("statementMap", {})
        for statement_id, hits in file_detail.get("s", {}).items():
            if hits == 0:
                uncovered_lines.add(statement_map[statement_id]["start"]["line"])

        fn_map = file_detail.get("fnMap", {})
        for fn_id, hits in file_detail.get("f", {}).items():
            if hits == 0:
                uncovered_functions.append(fn_map[fn_id]["name"])

        branch_map = file_detail.get("branchMap", {})
        for branch_id, counts in file_detail.get("b", {}).items():
            if any(count == 0 for count in counts):
                branch = branch_map[branch_id]
                line = branch.get("line") or branch["loc"]["start"]["line"]
                uncovered_branches.append(f"Line {line}: {branch['type']} branch")

    return CoverageReport(
        statements=percentages["statements"],
        branches=percentages["branches"],
        functions=percentages["functions"],
        lines=percentages["lines"],
        uncovered_lines=tuple(sorted(uncovered_lines)),
        uncovered_functions=tuple(uncovered_functions),
        uncovered_branches=tuple(uncovered_branches),
    )

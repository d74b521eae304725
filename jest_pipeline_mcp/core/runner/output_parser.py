"""
Output Parser - Turn raw Jest console output into structured results.

Free-text scraping is tied to Jest's reporter format, so it lives behind
the OutputParser interface; a structured reporter can replace it without
touching the runner, healer or enhancer.
"""

import re
from abc import ABC, abstractmethod
from typing import Final

from .models import ClassifiedError, ErrorKind, ErrorLocation, RunStats

SUITE_FAILED_MARKER: Final[str] = "Test suite failed to run"

# Checked in order; the first kind with a matching pattern wins
ERROR_PATTERNS: Final[tuple[tuple[ErrorKind, tuple[str, ...]], ...]] = (
    (ErrorKind.SYNTAX, (
        "unexpected token",
        "unexpected end of input",
        "unexpected identifier",
        "syntax error",
        "syntaxerror",
        "error ts",
    )),
    (ErrorKind.DEPENDENCY, (
        "cannot find module",
        "module not found",
        "is not defined",
        "reference error",
        "referenceerror",
    )),
    (ErrorKind.ASSERTION, (
        "expected",
        "assertion",
        "expect(",
        "matcher",
        "received",
    )),
    (ErrorKind.RUNTIME, (
        "type error",
        "typeerror",
        "cannot read propert",
        "is not a function",
        "undefined is not an object",
    )),
    (ErrorKind.TIMEOUT, (
        "timeout",
        "timed out",
        "async callback was not invoked",
    )),
)

_LOCATION = re.compile(r"^at (?:.*?\()?(?P<file>[^()]+?):(?P<line>\d+):(?P<column>\d+)\)?$")
_CODE_FRAME = re.compile(r"^(>\s*)?\d*\s*\|")
_SUMMARY_COUNT = re.compile(r"(\d+)\s+(failed|passed|skipped|todo|total)")


def classify_error(text: str) -> ErrorKind:
    """Classify failure text by case-insensitive substring matching."""

    lowered = text.lower()
    for kind, patterns in ERROR_PATTERNS:
        if any(pattern in lowered for pattern in patterns):
            return kind
    return ErrorKind.UNKNOWN


class OutputParser(ABC):
    """Extracts errors, counts and suite-level failures from runner output."""

    @abstractmethod
    def parse_errors(self, output: str) -> list[ClassifiedError]:
        """Return one classified error per reported failure, in output order."""

    @abstractmethod
    def parse_stats(self, output: str) -> RunStats:
        """Return pass/fail/skip counts."""

    @abstractmethod
    def has_execution_error(self, output: str) -> bool:
        """True if the suite could not run at all."""


class JestOutputParser(OutputParser):
    """Parser for Jest's default console reporter."""

    def parse_errors(self, output: str) -> list[ClassifiedError]:
        errors = []
        block: dict | None = None

        for line in output.splitlines():
            stripped = line.strip()

            if stripped.startswith("● "):
                if block:
                    errors.append(self._build_error(block))
                title = stripped[2:].strip()
                # Captured console output is reported as a block too
                block = None if title == "Console" else {"title": title, "details": [], "stack": []}
                continue

            if block is None:
                continue

            if stripped.startswith(("Test Suites:", "Tests:")):
                errors.append(self._build_error(block))
                block = None
            elif stripped.startswith("at "):
                block["stack"].append(stripped)
            elif stripped and not _CODE_FRAME.match(stripped):
                block["details"].append(stripped)

        if block:
            errors.append(self._build_error(block))

        return errors

    def parse_stats(self, output: str) -> RunStats:
        for line in output.splitlines():
            stripped = line.strip()
            if not stripped.startswith("Tests:"):
                continue

            counts = {label: int(n) for n, label in _SUMMARY_COUNT.findall(stripped)}
            total = counts.get("total", 0)
            failed = counts.get("failed", 0)
            skipped = counts.get("skipped", 0) + counts.get("todo", 0)
            passed = counts.get("passed", max(total - failed - skipped, 0))
            return RunStats(total=total, passed=passed, failed=failed, skipped=skipped)

        return RunStats()

    def has_execution_error(self, output: str) -> bool:
        return SUITE_FAILED_MARKER in output

    def _build_error(self, block: dict) -> ClassifiedError:
        title = block["title"]
        details = block["details"]
        stack = block["stack"]

        # The title is the test name; classify the failure text first
        kind = classify_error(" ".join(details))
        if kind == ErrorKind.UNKNOWN:
            kind = classify_error(title)

        message = f"{title}: {details[0]}" if details else title
        return ClassifiedError(
            kind=kind,
            message=message,
            stack="\n".join(stack) or None,
            location=_find_location(stack),
        )


def _find_location(stack: list[str]) -> ErrorLocation | None:
    """First frame outside node_modules, falling back to the first frame."""

    frames = []
    for frame in stack:
        match = _LOCATION.match(frame)
        if match:
            frames.append(ErrorLocation(
                file=match.group("file"),
                line=int(match.group("line")),
                column=int(match.group("column")),
            ))

    for location in frames:
        if "node_modules" not in location.file:
            return location
    return frames[0] if frames else None

"""Tests for Jest output parsing and error classification."""

import pytest

from jest_pipeline_mcp.core.runner import ErrorKind, JestOutputParser, RunStats, classify_error

ASSERTION_OUTPUT = """
FAIL src/math.add.test.ts
  add
    ✓ adds positive numbers (2 ms)
    ✕ returns the sum (4 ms)

  ● add › returns the sum

    expect(received).toBe(expected) // Object.is equality

    Expected: 4
    Received: 5

      3 | describe('add', () => {
      4 |   it('returns the sum', () => {
    > 5 |     expect(add(2, 2)).toBe(4);
        |                       ^
      6 |   });

      at Object.<anonymous> (src/math.add.test.ts:5:23)

Test Suites: 1 failed, 1 total
Tests:       1 failed, 1 passed, 2 total
Snapshots:   0 total
Time:        1.2 s
"""

MISSING_MODULE_OUTPUT = """
FAIL src/x.test.ts
  ● Test suite failed to run

    Cannot find module './x' from 'src/x.test.ts'

      at Resolver._throwModNotFoundError (node_modules/jest-resolve/build/resolver.js:427:11)

Test Suites: 1 failed, 1 total
Tests:       0 total
"""

TWO_FAILURES_OUTPUT = """
  ● Console

    console.log
      expected something noisy

  ● calc › divides

    TypeError: calc.divide is not a function

      at Object.<anonymous> (src/calc.test.ts:10:17)

  ● calc › waits

    thrown: "Exceeded timeout of 5000 ms for a test."

      at node_modules/jest-circus/build/index.js:1:1
      at src/calc.test.ts:20:3

Test Suites: 1 failed, 1 total
Tests:       2 failed, 3 passed, 5 total
"""


# =============================================================================
# Classification
# =============================================================================

class TestClassifyError:
    """Substring classification in priority order."""

    @pytest.mark.parametrize("text,kind", [
        ("SyntaxError: Unexpected token '}'", ErrorKind.SYNTAX),
        ("error TS2304: Cannot find name 'foo'", ErrorKind.SYNTAX),
        ("Cannot find module './x' from 'a.test.ts'", ErrorKind.DEPENDENCY),
        ("ReferenceError: foo is not defined", ErrorKind.DEPENDENCY),
        ("expect(received).toEqual(expected)", ErrorKind.ASSERTION),
        ("TypeError: Cannot read properties of undefined", ErrorKind.RUNTIME),
        ("service.run is not a function", ErrorKind.RUNTIME),
        ("Exceeded timeout of 5000 ms for a test", ErrorKind.TIMEOUT),
        ("something odd happened", ErrorKind.UNKNOWN),
    ])
    def test_kinds(self, text, kind):
        assert classify_error(text) == kind

    def test_case_insensitive(self):
        assert classify_error("CANNOT FIND MODULE 'x'") == ErrorKind.DEPENDENCY

    def test_earlier_kind_wins(self):
        """Text matching several kinds takes the first in priority order."""
        assert classify_error("SyntaxError while resolving: Cannot find module 'x'") == ErrorKind.SYNTAX
        assert classify_error("TypeError: expected a function") == ErrorKind.ASSERTION


# =============================================================================
# Errors
# =============================================================================

class TestParseErrors:
    """Failure blocks of the default reporter."""

    def setup_method(self):
        self.parser = JestOutputParser()

    def test_assertion_failure(self):
        errors = self.parser.parse_errors(ASSERTION_OUTPUT)

        assert len(errors) == 1
        error = errors[0]
        assert error.kind == ErrorKind.ASSERTION
        assert error.message == (
            "add › returns the sum: expect(received).toBe(expected) // Object.is equality"
        )
        assert error.location.file == "src/math.add.test.ts"
        assert error.location.line == 5
        assert error.location.column == 23

    def test_code_frame_is_not_detail(self):
        """Source lines of the code frame never reach the message or classification."""
        output = """
  ● runner › starts

    TypeError: runner.start is not a function

      10 |   it('starts', () => {
    > 11 |     expect(runner.start()).toBe(true);
         |                   ^

      at Object.<anonymous> (src/runner.test.ts:11:19)

Tests:       1 failed, 1 total
"""
        errors = self.parser.parse_errors(output)

        assert errors[0].kind == ErrorKind.RUNTIME
        assert errors[0].message == "runner › starts: TypeError: runner.start is not a function"

    def test_test_name_does_not_decide_kind(self):
        output = """
  ● add › returns expected sum

    TypeError: add is not a function

      at Object.<anonymous> (src/math.add.test.ts:4:12)

Tests:       1 failed, 1 total
"""
        errors = self.parser.parse_errors(output)

        assert errors[0].kind == ErrorKind.RUNTIME
        assert errors[0].message == "add › returns expected sum: TypeError: add is not a function"

    def test_title_classifies_when_details_say_nothing(self):
        output = """
  ● Test suite failed to run: SyntaxError in setup

Tests:       0 total
"""
        errors = self.parser.parse_errors(output)

        assert errors[0].kind == ErrorKind.SYNTAX

    def test_missing_module(self):
        errors = self.parser.parse_errors(MISSING_MODULE_OUTPUT)

        assert len(errors) == 1
        assert errors[0].kind == ErrorKind.DEPENDENCY
        assert "Cannot find module './x'" in errors[0].message

    def test_location_falls_back_to_node_modules_frame(self):
        errors = self.parser.parse_errors(MISSING_MODULE_OUTPUT)

        assert errors[0].location.file == "node_modules/jest-resolve/build/resolver.js"
        assert errors[0].location.line == 427

    def test_multiple_failures_in_order(self):
        errors = self.parser.parse_errors(TWO_FAILURES_OUTPUT)

        assert [e.kind for e in errors] == [ErrorKind.RUNTIME, ErrorKind.TIMEOUT]
        assert errors[0].message.startswith("calc › divides")

    def test_console_blocks_are_skipped(self):
        errors = self.parser.parse_errors(TWO_FAILURES_OUTPUT)

        assert all("Console" not in e.message for e in errors)

    def test_prefers_frames_outside_node_modules(self):
        errors = self.parser.parse_errors(TWO_FAILURES_OUTPUT)

        assert errors[1].location.file == "src/calc.test.ts"
        assert errors[1].location.line == 20

    def test_stack_is_kept(self):
        errors = self.parser.parse_errors(TWO_FAILURES_OUTPUT)

        assert errors[1].stack.count("\n") == 1

    def test_passing_output_has_no_errors(self):
        output = "PASS src/math.test.ts\nTests:       2 passed, 2 total\n"

        assert self.parser.parse_errors(output) == []


# =============================================================================
# Stats and suite failures
# =============================================================================

class TestParseStats:
    """Counts from the Tests: summary line."""

    def setup_method(self):
        self.parser = JestOutputParser()

    def test_failed_and_passed(self):
        assert self.parser.parse_stats(ASSERTION_OUTPUT) == RunStats(total=2, passed=1, failed=1)

    def test_skipped_and_todo(self):
        output = "Tests:       1 failed, 2 skipped, 1 todo, 3 passed, 7 total"

        assert self.parser.parse_stats(output) == RunStats(total=7, passed=3, failed=1, skipped=3)

    def test_passed_inferred_when_missing(self):
        output = "Tests:       1 failed, 1 skipped, 4 total"

        assert self.parser.parse_stats(output).passed == 2

    def test_no_summary(self):
        assert self.parser.parse_stats("npx: command not found") == RunStats()

    def test_execution_error_marker(self):
        assert self.parser.has_execution_error(MISSING_MODULE_OUTPUT) is True
        assert self.parser.has_execution_error(ASSERTION_OUTPUT) is False

"""Shared fixtures and fakes for the test suite."""

import pytest

from jest_pipeline_mcp.core.coverage import CoverageReport
from jest_pipeline_mcp.core.errors import ProviderError
from jest_pipeline_mcp.core.llm import LLMClient, LLMProvider, LLMResponse
from jest_pipeline_mcp.core.runner import (
    ClassifiedError,
    ErrorKind,
    ErrorLocation,
    ExecutionResult,
    RunStats,
    RunStatus,
)


# =============================================================================
# Fakes
# =============================================================================

class FakeLLM(LLMClient):
    """Returns queued responses in order and records every prompt.

    A queued exception instance is raised instead of returned.
    """

    provider = LLMProvider.OPENAI

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str) -> LLMResponse:
        self.prompts.append(prompt)
        if not self.responses:
            raise ProviderError("openai", "No more fake responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return LLMResponse(content=response, model="fake-model")


class FakeRunner:
    """Returns queued ExecutionResults and records the options of every run."""

    def __init__(self, *results: ExecutionResult):
        self.results = list(results)
        self.calls = []

    async def run(self, options) -> ExecutionResult:
        self.calls.append(options)
        if not self.results:
            raise AssertionError("FakeRunner ran out of results")
        return self.results.pop(0)


# =============================================================================
# Result builders
# =============================================================================

def make_error(
    kind: ErrorKind = ErrorKind.ASSERTION,
    message: str = "expect(received).toBe(expected)",
    line: int | None = None,
) -> ClassifiedError:
    location = ErrorLocation(file="src/math.test.ts", line=line, column=5) if line else None
    return ClassifiedError(kind=kind, message=message, location=location)


def passed_result(coverage: CoverageReport | None = None, total: int = 2) -> ExecutionResult:
    return ExecutionResult(
        status=RunStatus.SUCCESS,
        raw_output="Tests: 2 passed, 2 total",
        duration=0.5,
        coverage=coverage,
        stats=RunStats(total=total, passed=total),
    )


def failed_result(*errors: ClassifiedError, coverage: CoverageReport | None = None) -> ExecutionResult:
    return ExecutionResult(
        status=RunStatus.TEST_FAILURES,
        raw_output="Tests: 1 failed, 1 passed, 2 total",
        duration=0.5,
        errors=tuple(errors),
        coverage=coverage,
        stats=RunStats(total=2, passed=1, failed=1),
    )


def broken_result(*errors: ClassifiedError) -> ExecutionResult:
    return ExecutionResult(
        status=RunStatus.EXECUTION_ERROR,
        raw_output="Test suite failed to run",
        duration=0.1,
        errors=tuple(errors),
    )


def coverage(statements=0.0, branches=0.0, functions=0.0, lines=0.0, **kwargs) -> CoverageReport:
    return CoverageReport(
        statements=statements,
        branches=branches,
        functions=functions,
        lines=lines,
        **kwargs,
    )


# =============================================================================
# Fixtures
# =============================================================================

MATH_TS = """export function add(a: number, b: number): number {
  return a + b;
}
"""

SERVICE_TS = """import { Order } from './models';
import { formatTotal } from './utils/format';
import axios from 'axios';

export class OrderService {
  createOrder(items: number[]): Order {
    return { id: 1, total: items.reduce((a, b) => a + b, 0) };
  }

  describe(order: Order): string {
    return formatTotal(order.total);
  }
}
"""

MODELS_TS = """export interface Order {
  id: number;
  total: number;
}

export type OrderId = number;

const internalCounter = 0;
"""

FORMAT_TS = """import { Order } from '../models';

export function formatTotal(total: number): string {
  return `$${total.toFixed(2)}`;
}

export const CURRENCY = 'USD';
"""


@pytest.fixture
def ts_project(tmp_path):
    """A small TypeScript project with local and external imports."""

    (tmp_path / "package.json").write_text('{"name": "fixture"}', encoding="utf-8")
    src = tmp_path / "src"
    (src / "utils").mkdir(parents=True)
    (src / "math.ts").write_text(MATH_TS, encoding="utf-8")
    (src / "service.ts").write_text(SERVICE_TS, encoding="utf-8")
    (src / "models.ts").write_text(MODELS_TS, encoding="utf-8")
    (src / "utils" / "format.ts").write_text(FORMAT_TS, encoding="utf-8")
    return tmp_path

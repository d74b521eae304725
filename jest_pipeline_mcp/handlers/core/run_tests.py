"""
Run Tests Tool - Execute a Jest test file and classify the outcome.

This tool:
1. Finds the nearest Jest config (or synthesizes one for a framework profile)
2. Runs the test file in a Jest subprocess
3. Reports status, counts and classified errors
4. Optionally measures coverage scoped to a source file

Uses ExecutionService for business logic.
"""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...core.runner import ExecutionResult
from ...services import ExecutionService, ServiceResult

MAX_LISTED_LINES = 10

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="run_tests",
    description=(
        "Run a Jest test file and report SUCCESS, TEST_FAILURES or EXECUTION_ERROR "
        "with classified errors (syntax, dependency, assertion, runtime, timeout). "
        "Optionally collects statement/branch/function/line coverage."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "test_file": {
                "type": "string",
                "description": "Path to the Jest test file"
            },
            "source_file": {
                "type": "string",
                "description": "Source file to scope coverage to (optional)"
            },
            "collect_coverage": {
                "type": "boolean",
                "description": "Whether to collect coverage (default: false)"
            },
            "framework": {
                "type": "string",
                "enum": ["default", "react", "nextjs", "express", "nestjs", "nodejs"],
                "description": "Profile for a generated Jest config when the project has none"
            },
            "timeout": {
                "type": "number",
                "description": "Seconds before the run is killed (default: 120)"
            },
            "project_root": {
                "type": "string",
                "description": "Project root (detected from the test file if omitted)"
            }
        },
        "required": ["test_file"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict) -> list[TextContent]:
    """
    Handle run_tests tool call.

    Args:
        arguments: Tool arguments (test_file, source_file, collect_coverage, ...)

    Returns:
        List with single TextContent containing test results
    """
    service = ExecutionService()

    result = await service.run(
        test_file=arguments.get("test_file"),
        project_root=arguments.get("project_root"),
        collect_coverage=arguments.get("collect_coverage", False),
        source_file=arguments.get("source_file"),
        framework=arguments.get("framework"),
        timeout=arguments.get("timeout")
    )

    if not result.success:
        return _error_response(result)

    return [TextContent(
        type="text",
        text=format_test_results(result.data)
    )]


# =============================================================================
# Response Formatting
# =============================================================================

def format_test_results(run_result: ExecutionResult) -> str:
    """Format test execution results as readable text."""
    headline = {
        "SUCCESS": "✅ All tests passed!",
        "TEST_FAILURES": "❌ Some tests failed",
        "EXECUTION_ERROR": "💥 Test suite failed to run",
    }[run_result.status.value]

    stats = run_result.stats
    lines = [
        "TEST EXECUTION RESULTS",
        "=" * 50,
        "",
        headline,
        "",
        "Summary:",
        f"  • Total:   {stats.total}",
        f"  • Passed:  {stats.passed}",
        f"  • Failed:  {stats.failed}",
        f"  • Skipped: {stats.skipped}",
        f"  • Duration: {run_result.duration:.1f}s",
    ]

    if run_result.coverage:
        cov = run_result.coverage
        lines.extend([
            "",
            "Code Coverage:",
            f"  • Statements: {cov.statements:.1f}%",
            f"  • Branches:   {cov.branches:.1f}%",
            f"  • Functions:  {cov.functions:.1f}%",
            f"  • Lines:      {cov.lines:.1f}%",
        ])
        if cov.uncovered_lines:
            missing = ", ".join(str(n) for n in cov.uncovered_lines[:MAX_LISTED_LINES])
            if len(cov.uncovered_lines) > MAX_LISTED_LINES:
                missing += f"... (+{len(cov.uncovered_lines) - MAX_LISTED_LINES} more)"
            lines.append(f"  • Uncovered lines: {missing}")
        if cov.uncovered_functions:
            lines.append(f"  • Uncovered functions: {', '.join(cov.uncovered_functions)}")

    if run_result.errors:
        lines.append("")
        lines.append("Errors:")
        for error in run_result.errors:
            where = f" (line {error.location.line})" if error.location else ""
            lines.append(f"  ✗ [{error.kind.value}] {error.message}{where}")

    return "\n".join(lines)


# =============================================================================
# Helpers
# =============================================================================

def _error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]

"""Registry for core MCP tool definitions and handlers."""

# Tool definitions and handlers
from .extract_dependencies import (
    TOOL_DEFINITION as EXTRACT_DEPENDENCIES_TOOL,
    handle as handle_extract_dependencies,
)

from .generate_tests import (
    TOOL_DEFINITION as GENERATE_TESTS_TOOL,
    handle as handle_generate_tests,
)

from .run_tests import (
    TOOL_DEFINITION as RUN_TESTS_TOOL,
    handle as handle_run_tests,
)

from .heal_tests import (
    TOOL_DEFINITION as HEAL_TESTS_TOOL,
    handle as handle_heal_tests,
)

from .enhance_coverage import (
    TOOL_DEFINITION as ENHANCE_COVERAGE_TOOL,
    handle as handle_enhance_coverage,
)


# All Core tool definitions
TOOLS = [
    EXTRACT_DEPENDENCIES_TOOL,
    GENERATE_TESTS_TOOL,
    RUN_TESTS_TOOL,
    HEAL_TESTS_TOOL,
    ENHANCE_COVERAGE_TOOL,
]

# Tool name to handler mapping
HANDLERS = {
    "extract_dependencies": handle_extract_dependencies,
    "generate_tests": handle_generate_tests,
    "run_tests": handle_run_tests,
    "heal_tests": handle_heal_tests,
    "enhance_coverage": handle_enhance_coverage,
}


__all__ = [
    # Tool definitions
    "TOOLS",
    "EXTRACT_DEPENDENCIES_TOOL",
    "GENERATE_TESTS_TOOL",
    "RUN_TESTS_TOOL",
    "HEAL_TESTS_TOOL",
    "ENHANCE_COVERAGE_TOOL",
    # Handlers
    "HANDLERS",
    "handle_extract_dependencies",
    "handle_generate_tests",
    "handle_run_tests",
    "handle_heal_tests",
    "handle_enhance_coverage",
]

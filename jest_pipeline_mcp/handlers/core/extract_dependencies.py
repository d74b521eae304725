"""MCP handler for extract_dependencies (delegates to ExtractionService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...core.extractor import ExtractionResult
from ...services import ExtractionService, ServiceResult

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="extract_dependencies",
    description=(
        "Parse a TypeScript/JavaScript file, list its testable methods "
        "(class methods, functions, function-valued variables) and inline the "
        "declarations of every locally imported file into one dependency bundle."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "file_path": {
                "type": "string",
                "description": "Path to the .ts/.js source file"
            },
            "method_name": {
                "type": "string",
                "description": "Only list methods whose name contains this text (case-insensitive)"
            },
            "include_code": {
                "type": "boolean",
                "description": "Include method code and the dependency bundle (default: true)"
            }
        },
        "required": ["file_path"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict) -> list[TextContent]:
    """Extract methods and dependencies from 'file_path' and return the result text."""
    service = ExtractionService()

    result = service.extract(
        file_path=arguments.get("file_path"),
        method_name=arguments.get("method_name")
    )

    if not result.success:
        return _error_response(result)

    return [TextContent(
        type="text",
        text=format_extraction_result(result.data, arguments.get("include_code", True))
    )]


# =============================================================================
# Response Formatting
# =============================================================================

def format_extraction_result(extraction: ExtractionResult, include_code: bool = True) -> str:
    """Format an extraction result as readable text."""
    lines = [
        "DEPENDENCY EXTRACTION",
        "=" * 50,
        "",
        f"Language: {extraction.language}",
        f"Export type: {extraction.export_type.value}",
        f"Methods found: {len(extraction.methods)}",
    ]

    for method in extraction.methods:
        lines.append(f"  • {method.name}")

    if extraction.dependency_imports:
        lines.append("")
        lines.append("Imported modules:")
        for specifier in extraction.dependency_imports:
            lines.append(f"  • {specifier}")

    if extraction.class_import_statements:
        lines.append("")
        lines.append("Class imports for tests:")
        for statement in extraction.class_import_statements:
            lines.append(f"  {statement}")

    if extraction.message:
        lines.append("")
        lines.append(f"Note: {extraction.message}")

    if include_code:
        for method in extraction.methods:
            lines.extend(["", f"--- {method.name} ---", method.code])

        if extraction.dependencies_code:
            lines.extend([
                "",
                "=" * 50,
                "DEPENDENCY BUNDLE:",
                "=" * 50,
                "",
                extraction.dependencies_code,
            ])

    return "\n".join(lines)


# =============================================================================
# Helpers
# =============================================================================

def _error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]

"""Tests for the jest-pipeline MCP server."""

from unittest.mock import AsyncMock, patch

import pytest
from mcp.types import TextContent


class TestServerBasics:
    """Basic server tests."""

    def test_version(self):
        from jest_pipeline_mcp import __version__
        assert __version__ == "0.1.0"

    def test_server_creation(self):
        from jest_pipeline_mcp.server import server
        assert server.name == "jest-pipeline"

    @pytest.mark.asyncio
    async def test_list_tools(self):
        from jest_pipeline_mcp.server import list_tools

        tools = await list_tools()

        assert len(tools) == 5


class TestToolRouter:
    """call_tool routing."""

    @pytest.mark.asyncio
    async def test_routes_to_handler(self):
        from jest_pipeline_mcp import server as server_module

        handler = AsyncMock(return_value=[TextContent(type="text", text="done")])
        with patch.dict(server_module.HANDLERS, {"run_tests": handler}):
            result = await server_module.call_tool("run_tests", {"test_file": "a.test.ts"})

        handler.assert_awaited_once_with({"test_file": "a.test.ts"})
        assert result[0].text == "done"

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        from jest_pipeline_mcp.server import call_tool

        result = await call_tool("fix_code", {})

        assert result[0].text == "Unknown tool: fix_code"

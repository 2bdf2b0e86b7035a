"""Tests for the MCP server wiring."""

from __future__ import annotations

import mcp.types as types
import pytest

from courtlistener_mcp.mcp.server import create_server, list_tool_definitions
from courtlistener_mcp.models.results import UNAVAILABLE, Fetched
from tests.conftest import StubClient


def test_tool_definitions():
    tools = list_tool_definitions()

    assert len(tools) == 17
    court = next(tool for tool in tools if tool.name == "get-court")
    assert court.inputSchema["required"] == ["court_id"]
    assert court.description


@pytest.mark.asyncio
async def test_list_tools_handler():
    server = create_server(StubClient(UNAVAILABLE))

    handler = server.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest(method="tools/list"))

    assert {tool.name for tool in result.root.tools} == {tool.name for tool in list_tool_definitions()}


@pytest.mark.asyncio
async def test_call_tool_handler_returns_text():
    stub = StubClient(Fetched({"id": "ca9", "full_name": "Ninth Circuit"}))
    server = create_server(stub)

    handler = server.request_handlers[types.CallToolRequest]
    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="get-court", arguments={"court_id": "ca9"}),
        )
    )

    assert result.root.isError is False
    (content,) = result.root.content
    assert content.type == "text"
    assert content.text.startswith("Court Details:\n\n**Ninth Circuit**")
    assert stub.calls == [("/courts/ca9/", {}, None)]


@pytest.mark.asyncio
async def test_call_tool_handler_reports_invalid_arguments():
    stub = StubClient(UNAVAILABLE)
    server = create_server(stub)

    handler = server.request_handlers[types.CallToolRequest]
    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="get-docket", arguments={"docket_id": "abc"}),
        )
    )

    assert result.root.isError is True
    assert stub.calls == []

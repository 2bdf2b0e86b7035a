"""courtlistener_mcp.mcp.server

MCP (Model Context Protocol) server for the CourtListener API.

Current implementation:
- stdio transport
- Tools: see ``courtlistener_mcp.mcp.tools.TOOLS`` (dockets, clusters,
  opinions, courts, docket entries, parties, attorneys, RECAP documents)

Every tool call goes through the shared ``CourtListenerClient``, so the
credential check, rate window and sanitization apply uniformly.
"""

from __future__ import annotations

from typing import Any, Optional

import anyio
import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.stdio import stdio_server

from courtlistener_mcp.config.settings import Settings, settings
from courtlistener_mcp.core.fetcher import CourtListenerClient
from courtlistener_mcp.mcp.tools import TOOLS, run_tool
from courtlistener_mcp.utils.logger import get_logger

logger = get_logger(__name__)


SERVER_NAME = "courtlistener-mcp"


def list_tool_definitions() -> list[types.Tool]:
    return [
        types.Tool(
            name=spec.name,
            description=spec.description,
            inputSchema=spec.input_schema(),
        )
        for spec in TOOLS.values()
    ]


def create_server(client: CourtListenerClient, config: Optional[Settings] = None) -> Server:
    """
    Build the MCP server around an injected client.

    Args:
        client: Shared CourtListener client (owns the rate limiter)
        config: Settings for formatting; defaults to the process settings
    """
    config = config or settings

    server = Server(
        SERVER_NAME,
        version=config.service_version,
        instructions=(
            "CourtListener case-law tools. "
            "Use the search-* tools to find dockets, opinion clusters and opinions, "
            "then the get-* tools for full details. RECAP tools cover PACER filings."
        ),
    )

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return list_tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        text = await run_tool(
            name,
            arguments,
            client,
            site_url=config.courtlistener_site_url,
            preview_length=config.max_text_preview_length,
        )
        return [types.TextContent(type="text", text=text)]

    return server


async def _run() -> None:
    client = CourtListenerClient.from_settings(settings)
    server = create_server(client, settings)

    logger.info(f"{SERVER_NAME} {settings.service_version} running on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(
                notification_options=NotificationOptions(
                    prompts_changed=False,
                    resources_changed=False,
                    tools_changed=False,
                ),
                experimental_capabilities={},
            ),
        )


def main() -> None:
    anyio.run(_run)


if __name__ == "__main__":
    main()

"""
MCP stdio adapter.

Exposes the ToolRouter over the Model Context Protocol. One orchestrator
(and so one session) per connection; the session ends when the transport
closes.
"""

import json
import logging
from pathlib import Path
from typing import Any

import mcp.server.stdio
import mcp.types as types
from mcp.server.lowlevel import Server

from phaseguard import __version__
from phaseguard.application.workflow import WorkflowOrchestrator
from phaseguard.domain.naming import resolve_output_directory
from phaseguard.infrastructure.config import ServerSettings, load_workflow_config
from phaseguard.infrastructure.persistence import (
    FilesystemArtifactWriter,
    FilesystemWorkflowEventStore,
)
from phaseguard.server.tools import ToolRouter

logger = logging.getLogger(__name__)

SERVER_NAME = "phaseguard"


def build_router(settings: ServerSettings) -> ToolRouter:
    """Wire filesystem adapters and an orchestrator into a router."""
    writer = FilesystemArtifactWriter(settings.base_directory)
    events_root = Path(
        resolve_output_directory(settings.output_directory, settings.base_directory)
    )
    orchestrator = WorkflowOrchestrator(writer, FilesystemWorkflowEventStore(events_root))
    default_config = None
    if settings.config_file:
        default_config, _ = load_workflow_config(
            settings.config_file, default_output_directory=settings.output_directory
        )
    return ToolRouter(orchestrator, settings, default_config)


def create_server(router: ToolRouter) -> Server:
    """Register the router's tools on a low-level MCP server."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
            for spec in router.tool_specs()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        result = router.dispatch(name, arguments or {})
        return [types.TextContent(type="text", text=json.dumps(result, indent=2))]

    return server


async def serve(settings: ServerSettings) -> None:
    """Run the server on stdin/stdout until the client disconnects."""
    router = build_router(settings)
    server = create_server(router)
    logger.info(
        "Serving %d tools over stdio (output directory: %s)",
        len(router.tool_specs()),
        settings.output_directory,
    )
    try:
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        router.close()
        logger.info("Connection closed")

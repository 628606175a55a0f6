"""
Tool boundary for PhaseGuard.

ToolRouter turns tool calls into orchestrator operations; mcp_server exposes
the router over MCP stdio.
"""

from phaseguard.server.tools import ToolRouter, ToolSpec

__all__ = [
    "ToolRouter",
    "ToolSpec",
]

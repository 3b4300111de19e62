"""
Research Organizer MCP Server

Usage as standalone server:
    python -m research_organizer.presentation.mcp_server

Or in mcp.json:
    {
        "servers": {
            "research-organizer": {
                "type": "stdio",
                "command": "research-organizer-mcp",
                "env": {"RESEARCH_ORGANIZER_WORKSPACE": "~/research"}
            }
        }
    }

Usage for integration:
    from research_organizer.presentation.mcp_server import create_server

    server = create_server()
    server.run()
"""

from __future__ import annotations

from .server import create_server, main
from .tools import register_all_tools

__all__ = ["create_server", "main", "register_all_tools"]

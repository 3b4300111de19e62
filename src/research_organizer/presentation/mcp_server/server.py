"""
Research Organizer MCP Server

A standalone Model Context Protocol server that organizes research project
notes and finds reference papers for them.

Features:
- Multi-label classification of project notes into category documents
- Keyword extraction and multi-provider reference paper search
- Workbook export of ranked papers

Architecture:
- instructions.py: SERVER_INSTRUCTIONS for AI agents
- tools/: Individual tool implementations by category
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from research_organizer.container import ApplicationContainer
from research_organizer.shared.exceptions import ConfigurationError
from research_organizer.shared.settings import Settings

from .instructions import SERVER_INSTRUCTIONS
from .tools import register_all_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

logger = logging.getLogger(__name__)

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    container: ApplicationContainer,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """Create a FastMCP lifespan handler bound to *container*."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        """Application lifecycle: startup → yield → shutdown."""
        logger.info("Lifecycle: startup, resources ready")
        try:
            yield container
        finally:
            for provider in (container.ieee(), container.semantic_scholar(), container.web()):
                provider.close()
            logger.info("Lifecycle: shutdown, provider HTTP clients closed")

    return _lifespan


def create_server(settings: Settings | None = None, name: str = "research-organizer") -> FastMCP:
    """
    Create and configure the Research Organizer MCP server.

    Uses :class:`~research_organizer.container.ApplicationContainer` for
    dependency injection and lifecycle management.

    Args:
        settings: Resolved settings. Default: ``Settings.load()``.
        name: Server name.

    Returns:
        Configured FastMCP server instance.
    """
    global _container
    logger.info("Initializing Research Organizer MCP Server...")

    settings = settings or Settings.load()

    # ── DI container ────────────────────────────────────────────────────
    _container = ApplicationContainer()
    _container.config.from_dict(settings.to_dict(redact=False))

    logger.info(f"Workspace directory: {settings.workspace_dir}")
    logger.info(f"Search sources: {_container.orchestrator().available_sources()}")

    # ── Create MCP server with lifespan ─────────────────────────────────
    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        lifespan=_make_lifespan(_container),
    )

    stats = register_all_tools(mcp, _container)
    logger.info(f"Tool registration complete: {stats}")

    logger.info("Research Organizer MCP Server initialized successfully")
    return mcp


def main():
    """Run the MCP server."""

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = Settings.load()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise SystemExit(2) from e

    server = create_server(settings)

    # Run stdio MCP server (blocks)
    server.run()


if __name__ == "__main__":
    main()

"""
Research Organizer MCP Tools

✅ Workflows (3):
- organize_documents: Document/ notes -> category files + report
- search_reference_papers: project notes -> ranked papers workbook
- list_search_sources: configured search backends

✅ Analysis (3):
- extract_keywords, classify_document, plan_keyword_sets

Usage:
    from .tools import register_all_tools
    register_all_tools(mcp, container)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .analysis import register_analysis_tools
from .workflows import register_workflow_tools

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from research_organizer.container import ApplicationContainer


def register_all_tools(mcp: FastMCP, container: ApplicationContainer) -> dict[str, int]:
    """Register every tool with services resolved from ``container``."""
    # 1. Workflows (3 tools)
    register_workflow_tools(mcp, container.organizer(), container.reference_search())

    # 2. Analysis (3 tools)
    register_analysis_tools(
        mcp,
        extractor=container.extractor(),
        scorer=container.scorer(),
        classifier=container.classifier(),
        planner=container.planner(),
    )

    return {"workflow": 3, "analysis": 3}


__all__ = [
    "register_all_tools",
    "register_analysis_tools",
    "register_workflow_tools",
]

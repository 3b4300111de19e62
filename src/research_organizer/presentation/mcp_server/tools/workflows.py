"""
Workflow Tools - organize project notes and search reference papers.

Tools:
- organize_documents: classify Document/ into category files + report
- search_reference_papers: keywords -> provider chain -> workbook
- list_search_sources: which search backends are configured
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from research_organizer.application.classification.organizer import DocumentOrganizer
from research_organizer.application.search.reference_search import ReferencePaperSearch
from research_organizer.shared.progress import ProgressEvent

from ._common import InputNormalizer, ResponseFormatter

logger = logging.getLogger(__name__)


def register_workflow_tools(
    mcp: FastMCP,
    organizer: DocumentOrganizer,
    reference_search: ReferencePaperSearch,
):
    """Register the organize and search workflow tools."""

    @mcp.tool()
    def organize_documents(project: str, categories: list[str] | str | None = None) -> str:
        """
        Classify a project's Document/ notes into category documents.

        Writes one markdown file per category that received documents
        (Main_<date>.md, Topic_<date>.md, ForTech_<date>.md, ForAca_<date>.md)
        plus Organization_Report_<date>.md, next to the source notes.

        Args:
            project: Project folder, relative to the workspace directory
            categories: Categories to write (default: all). Any of
                        "Main", "Topic", "ForTech", "ForAca"

        Returns:
            JSON with classifications, written files and progress events

        Example:
            organize_documents(project="thesis-2025")
            organize_documents(project="thesis-2025", categories=["Main", "ForAca"])
        """
        if not project or not project.strip():
            return ResponseFormatter.error(
                "Project is required",
                suggestion="Pass the project folder name",
                example='organize_documents(project="thesis-2025")',
                tool_name="organize_documents",
            )

        events: list[ProgressEvent] = []
        try:
            result = organizer.organize(
                project.strip(),
                categories=InputNormalizer.normalize_list(categories),
                on_progress=events.append,
            )
        except Exception as e:
            logger.exception(f"organize_documents failed: {e}")
            return ResponseFormatter.error(e, tool_name="organize_documents")

        return ResponseFormatter.success(result.to_dict(), progress=[e.to_dict() for e in events])

    @mcp.tool()
    def search_reference_papers(project: str, source: str = "ieee") -> str:
        """
        Find reference papers for a project and save them as a workbook.

        Keywords are extracted from Document/<main> and
        Academia/Paper Topic Suggestion/Suggestion.*, searched on the
        requested backend (falling back automatically when it is not
        available) and saved to
        Academia/Reference Paper/Reference_Papers_<date>.xlsx.

        Args:
            project: Project folder, relative to the workspace directory
            source: "ieee" (default), "semantic_scholar" or "web"; anything else uses "ieee"

        Returns:
            JSON with keywords, ranked papers, the provider actually used,
            the workbook path and progress events

        Example:
            search_reference_papers(project="thesis-2025")
            search_reference_papers(project="thesis-2025", source="semantic_scholar")
        """
        if not project or not project.strip():
            return ResponseFormatter.error(
                "Project is required",
                suggestion="Pass the project folder name",
                example='search_reference_papers(project="thesis-2025")',
                tool_name="search_reference_papers",
            )

        events: list[ProgressEvent] = []
        try:
            result = reference_search.search(project.strip(), source=source, on_progress=events.append)
        except Exception as e:
            logger.exception(f"search_reference_papers failed: {e}")
            return ResponseFormatter.error(e, tool_name="search_reference_papers")

        return ResponseFormatter.success(result.to_dict(), progress=[e.to_dict() for e in events])

    @mcp.tool()
    def list_search_sources() -> str:
        """
        List the literature search backends and whether each is configured.

        The offline catalog is always available as the final fallback.

        Returns:
            JSON mapping of source name to availability
        """
        sources = reference_search.available_sources()
        return ResponseFormatter.success({"sources": sources, "fallback": "offline"})

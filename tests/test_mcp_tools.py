"""Tests for MCP tool registration and responses."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from research_organizer.container import ApplicationContainer
from research_organizer.presentation.mcp_server import server as server_module
from research_organizer.presentation.mcp_server.server import create_server, get_container
from research_organizer.presentation.mcp_server.tools import register_all_tools
from research_organizer.presentation.mcp_server.tools._common import InputNormalizer, ResponseFormatter
from research_organizer.shared.exceptions import MissingInputError
from research_organizer.shared.settings import Settings

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def container(workspace: Path) -> ApplicationContainer:
    container = ApplicationContainer()
    container.config.from_dict(Settings(workspace_dir=str(workspace)).to_dict(redact=False))
    return container


@pytest.fixture
def tools(container) -> dict:
    """Register every tool on a mock server and capture the functions."""
    captured: dict = {}
    mcp = MagicMock()
    mcp.tool = lambda: lambda func: (captured.__setitem__(func.__name__, func), func)[1]
    stats = register_all_tools(mcp, container)
    assert stats == {"workflow": 3, "analysis": 3}
    return captured


# ============================================================================
# Registration
# ============================================================================


class TestRegistration:
    def test_all_tools_registered(self, tools):
        assert set(tools) == {
            "organize_documents",
            "search_reference_papers",
            "list_search_sources",
            "extract_keywords",
            "classify_document",
            "plan_keyword_sets",
        }

    async def test_create_server(self, workspace, monkeypatch):
        monkeypatch.setattr(server_module, "_container", None)
        mcp = create_server(Settings(workspace_dir=str(workspace)))

        names = {t.name for t in await mcp.list_tools()}
        assert "search_reference_papers" in names
        assert get_container().store().root == workspace.resolve()

    def test_get_container_before_create(self, monkeypatch):
        monkeypatch.setattr(server_module, "_container", None)
        with pytest.raises(RuntimeError, match="create_server"):
            get_container()


# ============================================================================
# Workflow tools
# ============================================================================


class TestWorkflowTools:
    def test_organize_documents(self, tools, workspace):
        data = json.loads(tools["organize_documents"]("proj"))

        assert data["success"] is True
        assert data["report_file"]
        assert data["progress"][-1]["stage"] == "completed"
        for file_id in data["organized_files"].values():
            assert (workspace / file_id).is_file()

    def test_organize_with_comma_categories(self, tools, workspace):
        data = json.loads(tools["organize_documents"]("proj", categories="Main, ForTech"))
        assert data["success"] is True
        assert set(data["organized_files"]) <= {"Main", "ForTech"}
        assert data["organized_files"]

    @pytest.mark.parametrize("categories", [[], ""])
    def test_organize_with_empty_selection_writes_only_report(self, tools, workspace, categories):
        data = json.loads(tools["organize_documents"]("proj", categories=categories))

        assert data["success"] is True
        assert data["organized_files"] == {}
        written = sorted(p.name for p in (workspace / "proj" / "Document").iterdir())
        assert written == sorted([Path(data["report_file"]).name, "fortech.md", "main.md"])

    def test_organize_missing_project_folder(self, tools):
        data = json.loads(tools["organize_documents"]("nowhere"))
        assert data["success"] is False
        assert data["error_kind"] == "missing_input"
        assert data["progress"][-1]["stage"] == "error"

    def test_blank_project(self, tools):
        for name in ("organize_documents", "search_reference_papers"):
            data = json.loads(tools[name]("  "))
            assert data["success"] is False
            assert data["tool"] == name

    def test_search_reference_papers_offline(self, tools, workspace):
        # no IEEE key is configured, so the default source goes straight offline
        data = json.loads(tools["search_reference_papers"]("proj"))

        assert data["success"] is True
        assert data["provider"] == "offline"
        assert data["used_fallback"] is True
        assert data["total"] == len(data["papers"])
        assert (workspace / data["excel_file"]).is_file()

    def test_search_unknown_source_uses_default_route(self, tools):
        data = json.loads(tools["search_reference_papers"]("proj", source="arxiv"))
        assert data["success"] is True
        assert data["provider"] == "offline"

    def test_list_search_sources(self, tools):
        data = json.loads(tools["list_search_sources"]())
        assert data == {
            "sources": {"ieee": False, "semantic_scholar": True, "web": False},
            "fallback": "offline",
        }


# ============================================================================
# Analysis tools
# ============================================================================


class TestAnalysisTools:
    def test_extract_keywords(self, tools):
        data = json.loads(tools["extract_keywords"]("cloud database cloud", top_k=2))
        assert data["total_candidates"] >= 3
        assert len(data["keywords"]) == 2
        assert data["keywords"][0] == {"keyword": "cloud", "score": 2.0}

    def test_extract_keywords_empty(self, tools):
        data = json.loads(tools["extract_keywords"](""))
        assert data["success"] is False
        assert data["tool"] == "extract_keywords"

    def test_classify_document(self, tools):
        data = json.loads(tools["classify_document"]("Main.md", "# Overview\n## Goal\nproject plan vision"))
        assert list(data["categories"]) == ["Main"]
        assert set(data["scores"]) == {"Main", "Topic", "ForTech", "ForAca"}

    def test_classify_requires_file_name(self, tools):
        data = json.loads(tools["classify_document"]("", "text"))
        assert data["success"] is False

    def test_plan_keyword_sets(self, tools):
        data = json.loads(tools["plan_keyword_sets"]("cloud, database"))
        assert data["keywords"] == ["cloud", "database"]
        assert data["keyword_sets"] == [["cloud", "database"], ["cloud"], ["database"]]
        assert data["total"] == 3

    def test_plan_keyword_sets_empty(self, tools):
        data = json.loads(tools["plan_keyword_sets"]([]))
        assert data["success"] is False


# ============================================================================
# Helpers
# ============================================================================


class TestCommon:
    def test_error_from_structured_exception(self):
        data = json.loads(ResponseFormatter.error(MissingInputError("nothing", suggestion="add"), tool_name="t"))
        assert data["kind"] == "missing_input"
        assert data["suggestion"] == "add"
        assert data["tool"] == "t"

    def test_error_from_plain_exception(self):
        data = json.loads(ResponseFormatter.error(ValueError("bad"), example="x()"))
        assert data == {"success": False, "error": "bad", "example": "x()"}

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, None), ("a, ,b", ["a", "b"]), (["x", " "], ["x"]), ("", []), ([], [])],
    )
    def test_normalize_list(self, value, expected):
        assert InputNormalizer.normalize_list(value) == expected

    @pytest.mark.parametrize(("value", "expected"), [(None, 10), ("3", 3), (500, 50), (0, 1), ("many", 10)])
    def test_normalize_limit(self, value, expected):
        assert InputNormalizer.normalize_limit(value, default=10, max_val=50) == expected

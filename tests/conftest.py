"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from research_organizer.domain.entities import Document, DocumentType, PaperRecord
from research_organizer.shared.exceptions import ProviderUnavailableError

FIXED_NOW = datetime.datetime(2025, 3, 14, 9, 30, tzinfo=datetime.timezone.utc)


# ============================================================
# Domain Fixtures
# ============================================================


@pytest.fixture
def make_document():
    """Factory for Document snapshots."""

    def _make(
        content: str,
        file_name: str = "notes.md",
        document_type: DocumentType = DocumentType.GENERIC,
    ) -> Document:
        return Document(id=file_name, file_name=file_name, content=content, document_type=document_type)

    return _make


@pytest.fixture
def make_paper():
    """Factory for PaperRecords with sensible defaults."""

    def _make(title: str, relevance: float = 0.5, **kwargs) -> PaperRecord:
        kwargs.setdefault("provider_name", "stub")
        return PaperRecord(title=title, relevance_score=relevance, **kwargs)

    return _make


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


# ============================================================
# Search Provider Stubs
# ============================================================


class StubProvider:
    """
    In-memory SearchProvider.

    ``responses`` maps a keyword set (tuple) to a list of records or to an
    exception instance to raise; unmapped sets return ``default``.
    """

    def __init__(self, name, configured=True, responses=None, default=None):
        self.name = name
        self.configured = configured
        self.responses = responses or {}
        self.default = default if default is not None else []
        self.calls: list[tuple[str, ...]] = []

    def is_configured(self) -> bool:
        return self.configured

    def search(self, keyword_set, options=None):
        self.calls.append(tuple(keyword_set))
        response = self.responses.get(tuple(keyword_set), self.default)
        if isinstance(response, Exception):
            raise response
        return list(response)


class FailingProvider(StubProvider):
    """Provider whose every call raises a retryable ProviderUnavailableError."""

    def __init__(self, name, configured=True):
        super().__init__(name, configured=configured, default=ProviderUnavailableError(name, "down"))


@pytest.fixture
def stub_provider():
    return StubProvider


@pytest.fixture
def failing_provider():
    return FailingProvider


@pytest.fixture
def sleep_calls():
    """Recorded sleep durations; pass ``sleep_calls.append`` as the sleep function."""
    return []


# ============================================================
# Project Folder Fixtures
# ============================================================

MAIN_NOTES = """# Research Project Overview

## Goal
Build a cloud database system for machine learning research.

## Plan
- Survey related work on database performance
- Design the system architecture
- Evaluate the framework with experiments
"""

SUGGESTION_NOTES = """# Paper Topic Suggestion

Study database optimization and cloud performance evaluation.
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with one project laid out like a real research folder."""
    project = tmp_path / "proj"
    (project / "Document").mkdir(parents=True)
    (project / "Document" / "main.md").write_text(MAIN_NOTES, encoding="utf-8")
    (project / "Document" / "fortech.md").write_text(
        "```python\nclass Loader:\n    pass\n```\nAPI implementation and database code.\n",
        encoding="utf-8",
    )
    suggestion = project / "Academia" / "Paper Topic Suggestion"
    suggestion.mkdir(parents=True)
    (suggestion / "Suggestion.md").write_text(SUGGESTION_NOTES, encoding="utf-8")
    return tmp_path

"""
Collaborator contracts used by the application layer.

Infrastructure classes satisfy these structurally; nothing needs to
inherit from them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from research_organizer.domain.entities import KeywordSet, PaperRecord, SearchOptions


@dataclass(frozen=True, slots=True)
class DocumentRef:
    """Listing entry for one file or folder in a document store."""

    id: str
    name: str
    mime_type: str = ""
    modified_time: str = ""
    size: int = 0
    is_folder: bool = False


@dataclass(frozen=True, slots=True)
class ArtifactRef:
    """Handle to an artifact written by a document store."""

    id: str
    name: str
    location: str = ""


@runtime_checkable
class SearchProvider(Protocol):
    """
    One literature-search backend.

    ``search`` may raise ``ProviderUnavailableError`` (or a subclass) for
    transport, auth and rate-limit failures.
    """

    name: str

    def is_configured(self) -> bool: ...

    def search(self, keyword_set: KeywordSet, options: SearchOptions) -> list[PaperRecord]: ...


class DocumentStore(Protocol):
    def list_documents(self, container_id: str) -> list[DocumentRef]: ...

    def read_content(self, ref: DocumentRef) -> str: ...

    def find_folder(self, parent_id: str, name: str) -> DocumentRef | None: ...

    def ensure_folder(self, parent_id: str, name: str) -> DocumentRef: ...

    def write_text_artifact(self, container_id: str, file_name: str, content: str) -> ArtifactRef: ...

    def write_binary_artifact(
        self,
        container_id: str,
        file_name: str,
        data: bytes,
        mime_type: str,
    ) -> ArtifactRef: ...


class TabularExporter(Protocol):
    def export(
        self,
        records: Sequence[PaperRecord],
        keywords: Sequence[str],
        source_documents: Sequence[str],
        provider_name: str = "",
    ) -> bytes: ...

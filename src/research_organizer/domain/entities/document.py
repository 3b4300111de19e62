"""
Domain Entity: Document

Immutable snapshot of one project text document for the duration of a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DocumentType(str, Enum):
    """Role of a document in the project folder layout."""

    MAIN = "main"
    SUGGESTION = "suggestion"
    GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class Document:
    id: str
    file_name: str
    content: str
    document_type: DocumentType = DocumentType.GENERIC
    modified_time: str = ""
    size: int = 0
    mime_type: str = ""
    source: str = ""  # Human-readable origin, e.g. "Document/main.md"


@dataclass(frozen=True, slots=True)
class Keyword:
    """A ranked keyword. ``text`` is always lowercase."""

    text: str
    score: float = 0.0

    def __post_init__(self) -> None:
        if self.text != self.text.lower():
            object.__setattr__(self, "text", self.text.lower())


# One fan-out query unit
KeywordSet = tuple[str, ...]

"""Domain entities."""

from .classification import (
    AssignmentOrigin,
    Category,
    CategoryAssignment,
    CategoryScore,
    ClassificationResult,
)
from .document import Document, DocumentType, Keyword, KeywordSet
from .paper import PaperRecord, SearchOptions, SearchOutcome, SearchSession

__all__ = [
    "AssignmentOrigin",
    "Category",
    "CategoryAssignment",
    "CategoryScore",
    "ClassificationResult",
    "Document",
    "DocumentType",
    "Keyword",
    "KeywordSet",
    "PaperRecord",
    "SearchOptions",
    "SearchOutcome",
    "SearchSession",
]

"""
Domain Layer - Core entities and reference data

Contains:
- entities: Document, Keyword, PaperRecord, ClassificationResult
- catalogs: Read-only term catalogs and bonus tables
"""

from .entities import (
    Category,
    ClassificationResult,
    Document,
    DocumentType,
    Keyword,
    PaperRecord,
)

__all__ = [
    "Category",
    "ClassificationResult",
    "Document",
    "DocumentType",
    "Keyword",
    "PaperRecord",
]

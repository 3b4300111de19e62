"""
Keyword Scorer - rank candidates by weighted frequency across documents.

    score(k) = sum over documents of occurrences(k) * weight(document type)

Main documents weigh 1.5, everything else 1.0. Occurrences are literal,
case-insensitive substring counts; keywords are regex-escaped before use.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from research_organizer.domain.catalogs import (
    DEFAULT_DOCUMENT_WEIGHT,
    DEFAULT_TOP_K,
    MAIN_DOCUMENT_WEIGHT,
)
from research_organizer.domain.entities import Document, DocumentType, Keyword

logger = logging.getLogger(__name__)


def document_weight(document_type: DocumentType) -> float:
    if document_type is DocumentType.MAIN:
        return MAIN_DOCUMENT_WEIGHT
    return DEFAULT_DOCUMENT_WEIGHT


def count_occurrences(keyword: str, text: str) -> int:
    """Non-overlapping literal occurrences of ``keyword`` in ``text`` (case-insensitive)."""
    if not keyword:
        return 0
    return len(re.findall(re.escape(keyword.lower()), text.lower()))


class KeywordScorer:
    """Rank keyword candidates; ties keep first-discovered order."""

    def __init__(self, top_k: int = DEFAULT_TOP_K) -> None:
        if top_k < 1:
            raise ValueError("top_k must be at least 1")
        self.top_k = top_k

    def score(self, documents: Sequence[Document], candidates: Sequence[str]) -> list[Keyword]:
        """Score every candidate without truncating, in candidate order."""
        lowered = [(doc.content.lower(), document_weight(doc.document_type)) for doc in documents]
        scored = []
        for candidate in candidates:
            total = 0.0
            for content, weight in lowered:
                total += count_occurrences(candidate, content) * weight
            scored.append(Keyword(text=candidate.lower(), score=total))
        return scored

    def rank(
        self,
        documents: Sequence[Document],
        candidates: Sequence[str],
        top_k: int | None = None,
    ) -> list[Keyword]:
        """Top ``top_k`` keywords sorted by descending score (stable)."""
        limit = self.top_k if top_k is None else top_k
        ranked = sorted(self.score(documents, candidates), key=lambda k: k.score, reverse=True)
        top = ranked[:limit]
        logger.info(f"Top keywords: {', '.join(k.text for k in top)}")
        return top

    def top_keywords(
        self,
        documents: Sequence[Document],
        candidates: Sequence[str],
        top_k: int | None = None,
    ) -> list[str]:
        return [k.text for k in self.rank(documents, candidates, top_k)]

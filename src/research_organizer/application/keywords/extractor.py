"""
Keyword Extractor - catalog and pattern based keyword candidates.

Candidates come from three passes over the text, in this order:
1. technical-domain term groups
2. research-process term groups
3. "special terms": katakana runs and Latin words (length 4-15)

Each match contributes its matched literal, lowercased. The result is
deduplicated in first-discovered order so that downstream tie-breaks are
deterministic.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from research_organizer.domain.catalogs import (
    RESEARCH_PATTERNS,
    SPECIAL_TERM_MAX_LENGTH,
    SPECIAL_TERM_MIN_LENGTH,
    SPECIAL_TERM_PATTERN,
    TECHNICAL_PATTERNS,
)
from research_organizer.domain.entities import Document

logger = logging.getLogger(__name__)


class KeywordExtractor:
    """
    Extract keyword candidates from raw text.

    Example:
        >>> KeywordExtractor().extract("Cloud database API design")
        ['data', 'cloud', 'database', 'api', 'design']
    """

    def __init__(
        self,
        technical_patterns: Sequence[re.Pattern[str]] = TECHNICAL_PATTERNS,
        research_patterns: Sequence[re.Pattern[str]] = RESEARCH_PATTERNS,
    ) -> None:
        self._catalog_patterns = tuple(technical_patterns) + tuple(research_patterns)

    def extract(self, text: str) -> list[str]:
        """Return unique lowercase candidates in first-discovered order."""
        if not text:
            return []

        found: dict[str, None] = {}
        for pattern in self._catalog_patterns:
            for match in pattern.finditer(text):
                found.setdefault(match.group(0).lower(), None)

        for match in SPECIAL_TERM_PATTERN.finditer(text):
            term = match.group(0)
            if SPECIAL_TERM_MIN_LENGTH <= len(term) <= SPECIAL_TERM_MAX_LENGTH:
                found.setdefault(term.lower(), None)

        return list(found)

    def extract_all(self, documents: Iterable[Document]) -> list[str]:
        """Union of candidates across documents, in document order."""
        found: dict[str, None] = {}
        for doc in documents:
            for term in self.extract(doc.content):
                found.setdefault(term, None)
        logger.debug(f"Extracted {len(found)} keyword candidates")
        return list(found)

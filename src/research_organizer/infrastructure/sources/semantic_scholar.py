"""
Semantic Scholar Integration (secondary index)

Cross-domain academic search via the Semantic Scholar Graph API.
The API key is optional; without one the public rate limit applies.

API Documentation: https://api.semanticscholar.org/api-docs/
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

import httpx

from research_organizer.domain.entities import KeywordSet, PaperRecord, SearchOptions
from research_organizer.shared.exceptions import ProviderUnavailableError

from .base_client import BaseAPIClient
from .relevance import semantic_scholar_relevance

logger = logging.getLogger(__name__)

# Semantic Scholar API endpoints
S2_API_BASE = "https://api.semanticscholar.org/graph/v1"
S2_SEARCH_URL = f"{S2_API_BASE}/paper/search"

DEFAULT_FIELDS = [
    "paperId",
    "title",
    "abstract",
    "venue",
    "externalIds",  # Contains DOI, ArXiv, etc.
    "fieldsOfStudy",
    "year",
    "authors",
    "citationCount",
    "url",
]

MAX_LIMIT = 100
TITLE_KEYWORD_LIMIT = 5
_ALPHA_WORD = re.compile(r"^[A-Za-z]+$")


class SemanticScholarProvider(BaseAPIClient):
    """
    Semantic Scholar API client.

    Usage:
        provider = SemanticScholarProvider()
        papers = provider.search(("deep learning",), SearchOptions())
    """

    _service_name = "Semantic Scholar"
    name = "semantic_scholar"

    def __init__(
        self,
        api_key: str = "",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            api_key: Optional S2 API key (raises the rate limit)
            timeout: Request timeout in seconds
            client: Pre-built httpx.Client
            sleep: Sleep function for rate limiting / backoff
        """
        kwargs: dict[str, Any] = {"timeout": timeout, "client": client, "min_interval": 0.5}
        if sleep is not None:
            kwargs["sleep"] = sleep
        super().__init__(**kwargs)
        self._api_key = (api_key or "").strip()

    def is_configured(self) -> bool:
        return True

    def _prepare_headers(self) -> dict[str, str]:
        if self._api_key:
            return {"x-api-key": self._api_key}
        return {}

    def search(self, keyword_set: KeywordSet, options: SearchOptions) -> list[PaperRecord]:
        if not keyword_set:
            return []

        start_year, end_year = options.year_range
        params = {
            "query": " ".join(keyword_set),
            "limit": str(min(options.per_call_limit, MAX_LIMIT)),
            "fields": ",".join(DEFAULT_FIELDS),
            "year": f"{start_year}-{end_year}",
        }
        data = self._make_request(S2_SEARCH_URL, params=params)
        if not isinstance(data, dict):
            raise ProviderUnavailableError(self._service_name, "unexpected response shape")

        papers = data.get("data") or []
        logger.info(f"Semantic Scholar returned {len(papers)} papers for {list(keyword_set)}")
        return [self._normalize_paper(p, keyword_set) for p in papers if isinstance(p, dict)]

    def _normalize_paper(self, paper: dict[str, Any], keyword_set: KeywordSet) -> PaperRecord:
        external_ids = paper.get("externalIds") or {}
        fields_of_study = [f for f in (paper.get("fieldsOfStudy") or []) if isinstance(f, str)]
        title = paper.get("title") or "Untitled"
        abstract = paper.get("abstract") or ""
        citations = int(paper.get("citationCount") or 0)
        doi = external_ids.get("DOI") or ""
        paper_id = paper.get("paperId") or ""

        authors = ", ".join(
            a.get("name", "") for a in (paper.get("authors") or []) if isinstance(a, dict) and a.get("name")
        )

        return PaperRecord(
            title=title,
            authors=authors,
            year=paper.get("year") if isinstance(paper.get("year"), int) else None,
            venue=paper.get("venue") or "Semantic Scholar",
            url=paper.get("url") or "",
            abstract=abstract,
            keywords=tuple(paper_keywords(title, fields_of_study)),
            relevance_score=semantic_scholar_relevance(keyword_set, title, abstract, fields_of_study, citations),
            provider_name=self.name,
            external_id=doi or (f"s2:{paper_id}" if paper_id else None),
            doi=doi,
            publisher="Semantic Scholar",
            citation_count=citations,
        )


def paper_keywords(title: str, fields_of_study: list[str]) -> list[str]:
    """Fields of study plus up to five alphabetic title words longer than 3 chars."""
    found: dict[str, None] = {}
    for field_name in fields_of_study:
        if field_name.strip():
            found.setdefault(field_name, None)
    words = [w for w in title.split() if len(w) > 3 and _ALPHA_WORD.match(w)]
    for word in words[:TITLE_KEYWORD_LIMIT]:
        found.setdefault(word, None)
    return list(found)

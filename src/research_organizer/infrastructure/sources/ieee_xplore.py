"""
IEEE Xplore Integration (primary index)

API Documentation: https://developer.ieee.org/docs

Query: every keyword is double-quoted and the set is joined with ``OR``.
Relevance: see ``relevance.ieee_relevance``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from research_organizer.domain.entities import KeywordSet, PaperRecord, SearchOptions
from research_organizer.shared.exceptions import ProviderNotConfiguredError, ProviderUnavailableError

from .base_client import BaseAPIClient
from .relevance import ieee_relevance

logger = logging.getLogger(__name__)

IEEE_SEARCH_URL = "https://ieeexploreapi.ieee.org/api/v1/search/articles"
IEEE_DOCUMENT_URL = "https://ieeexplore.ieee.org/document"
MAX_RECORDS_PER_CALL = 200


def build_query_text(keywords: KeywordSet) -> str:
    """``("a", "b c")`` -> ``"a" OR "b c"``. Already-quoted keywords are kept."""
    quoted = []
    for keyword in keywords:
        if len(keyword) >= 2 and keyword.startswith('"') and keyword.endswith('"'):
            quoted.append(keyword)
        else:
            quoted.append(f'"{keyword}"')
    return " OR ".join(quoted)


class IEEEXploreProvider(BaseAPIClient):
    """
    IEEE Xplore metadata search.

    Usage:
        provider = IEEEXploreProvider(api_key="...")
        papers = provider.search(("deep learning", "system"), SearchOptions())
    """

    _service_name = "IEEE Xplore"
    name = "ieee"

    def __init__(
        self,
        api_key: str = "",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"timeout": timeout, "client": client}
        if sleep is not None:
            kwargs["sleep"] = sleep
        super().__init__(**kwargs)
        self._api_key = (api_key or "").strip()

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def search(self, keyword_set: KeywordSet, options: SearchOptions) -> list[PaperRecord]:
        if not self.is_configured():
            raise ProviderNotConfiguredError(self._service_name, "IEEE_API_KEY")
        if not keyword_set:
            return []

        start_year, end_year = options.year_range
        params = {
            "apikey": self._api_key,
            "querytext": build_query_text(keyword_set),
            "max_records": min(options.per_call_limit, MAX_RECORDS_PER_CALL),
            "start_year": start_year,
            "end_year": end_year,
            "content_type": ",".join(options.content_types),
            "format": "json",
        }
        data = self._make_request(IEEE_SEARCH_URL, params=params)
        if not isinstance(data, dict):
            raise ProviderUnavailableError(self._service_name, "unexpected response shape")

        articles = data.get("articles") or []
        logger.info(f"IEEE Xplore returned {len(articles)} articles for {list(keyword_set)}")
        return [self._to_record(a, keyword_set) for a in articles if isinstance(a, dict)]

    def _to_record(self, article: dict[str, Any], keyword_set: KeywordSet) -> PaperRecord:
        title = article.get("title") or "Untitled"
        abstract = article.get("abstract") or ""
        terms = extract_index_terms(article)
        doi = article.get("doi") or ""
        article_number = str(article.get("article_number") or "")

        return PaperRecord(
            title=title,
            authors=extract_authors(article.get("authors")),
            year=_parse_year(article.get("publication_year")),
            venue=article.get("publication_title") or "IEEE",
            url=build_article_url(article),
            abstract=abstract,
            keywords=tuple(terms),
            relevance_score=ieee_relevance(keyword_set, title, abstract, terms),
            provider_name=self.name,
            external_id=doi or (f"ieee:{article_number}" if article_number else None),
            doi=doi,
            pages=extract_pages(article),
            publisher=article.get("publisher") or "IEEE",
        )


def extract_authors(authors: Any) -> str:
    """Accepts both ``[{...}]`` and the API's ``{"authors": [{...}]}`` envelope."""
    if isinstance(authors, dict):
        authors = authors.get("authors")
    if not isinstance(authors, list):
        return ""
    names = []
    for author in authors:
        if isinstance(author, dict):
            name = author.get("preferred_name") or author.get("full_name") or ""
        else:
            name = str(author)
        if name.strip():
            names.append(name.strip())
    return ", ".join(names)


def extract_index_terms(article: dict[str, Any]) -> list[str]:
    """Author keywords, index terms and IEEE terms, deduplicated in order."""
    found: dict[str, None] = {}

    def add(values: Any) -> None:
        if isinstance(values, dict):
            values = values.get("terms")
        if isinstance(values, list):
            for value in values:
                if isinstance(value, str) and value.strip():
                    found.setdefault(value.strip(), None)

    add(article.get("author_keywords"))
    index_terms = article.get("index_terms")
    if isinstance(index_terms, dict):
        for values in index_terms.values():
            add(values)
    add(article.get("ieee_terms"))
    return list(found)


def extract_pages(article: dict[str, Any]) -> str:
    start = str(article.get("start_page") or "")
    end = str(article.get("end_page") or "")
    if start and end:
        return f"{start}-{end}"
    if start:
        return start
    if article.get("article_number"):
        return f"Article {article['article_number']}"
    return ""


def build_article_url(article: dict[str, Any]) -> str:
    if article.get("pdf_url"):
        return article["pdf_url"]
    if article.get("doi"):
        return f"https://doi.org/{article['doi']}"
    return f"{IEEE_DOCUMENT_URL}/{article.get('article_number') or ''}"


def _parse_year(value: Any) -> int | None:
    try:
        return int(str(value)[:4])
    except (TypeError, ValueError):
        return None

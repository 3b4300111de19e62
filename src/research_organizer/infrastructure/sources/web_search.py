"""
Google Custom Search Integration (web source)

General web results mapped onto PaperRecord. Results carry no year or
author metadata; the link doubles as the identity key.

API Documentation: https://developers.google.com/custom-search/v1/reference/rest
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from research_organizer.domain.entities import KeywordSet, PaperRecord, SearchOptions
from research_organizer.shared.exceptions import ProviderNotConfiguredError, ProviderUnavailableError

from .base_client import BaseAPIClient
from .relevance import web_relevance

logger = logging.getLogger(__name__)

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
MAX_RESULTS_PER_CALL = 10


class WebSearchProvider(BaseAPIClient):
    """Google Custom Search JSON API. Requires both an API key and an engine id."""

    _service_name = "Google Custom Search"
    name = "web"

    def __init__(
        self,
        api_key: str = "",
        engine_id: str = "",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"timeout": timeout, "client": client}
        if sleep is not None:
            kwargs["sleep"] = sleep
        super().__init__(**kwargs)
        self._api_key = (api_key or "").strip()
        self._engine_id = (engine_id or "").strip()

    def is_configured(self) -> bool:
        return bool(self._api_key and self._engine_id)

    def search(self, keyword_set: KeywordSet, options: SearchOptions) -> list[PaperRecord]:
        if not self.is_configured():
            raise ProviderNotConfiguredError(
                self._service_name, "GOOGLE_SEARCH_API_KEY and GOOGLE_SEARCH_ENGINE_ID"
            )
        query = " ".join(keyword_set).strip()
        if not query:
            return []

        params = {
            "key": self._api_key,
            "cx": self._engine_id,
            "q": query,
            "num": min(options.per_call_limit, MAX_RESULTS_PER_CALL),
            "safe": "medium",
        }
        data = self._make_request(GOOGLE_SEARCH_URL, params=params)
        if not isinstance(data, dict):
            raise ProviderUnavailableError(self._service_name, "unexpected response shape")
        if data.get("error"):
            message = (data["error"] or {}).get("message") or "search error"
            raise ProviderUnavailableError(self._service_name, message)

        items = [i for i in (data.get("items") or []) if isinstance(i, dict)]
        logger.info(f"Google Custom Search returned {len(items)} items for {query!r}")
        return [self._to_record(item, query, rank) for rank, item in enumerate(items)]

    def _to_record(self, item: dict[str, Any], query: str, rank: int) -> PaperRecord:
        title = item.get("title") or "Untitled"
        snippet = item.get("snippet") or ""
        link = item.get("link") or ""
        return PaperRecord(
            title=title,
            venue=item.get("displayLink") or "",
            url=link,
            abstract=snippet,
            relevance_score=web_relevance(query, title, snippet, rank, has_rich_result=bool(item.get("pagemap"))),
            provider_name=self.name,
            external_id=link or None,
            publisher="Web",
        )

"""
Search Orchestrator - provider fallback chain, dedup and ranking.

Provider chain per requested source:

    "semantic_scholar"  secondary -> primary (only if configured) -> offline
    "ieee" (default)    primary (only if configured) -> offline
    "web"               web (only if configured) -> offline

Each live provider runs sequentially over every KeywordSet with a fixed
delay between calls. A failing KeywordSet is logged and skipped; the
provider as a whole fails only when every KeywordSet failed (or a
non-retryable error such as a rejected credential occurred). Records are
deduplicated per provider attempt by identity key, ranked by relevance
and capped.

The offline catalog terminates every chain. It scores the full keyword
list rather than the fan-out sets and is also the destination of any
unexpected error raised during orchestration.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from research_organizer.application.keywords.planner import KeywordSetPlanner
from research_organizer.application.ports import SearchProvider
from research_organizer.domain.entities import (
    KeywordSet,
    PaperRecord,
    SearchOptions,
    SearchOutcome,
    SearchSession,
)
from research_organizer.shared.exceptions import (
    AggregateSearchFailureError,
    MissingInputError,
    ProviderUnavailableError,
)

logger = logging.getLogger(__name__)

SOURCE_PRIMARY = "ieee"
SOURCE_SECONDARY = "semantic_scholar"
SOURCE_WEB = "web"
DEFAULT_SOURCE = SOURCE_PRIMARY

SOURCE_ALIASES = {
    "ieee": SOURCE_PRIMARY,
    "ieee_xplore": SOURCE_PRIMARY,
    "semantic_scholar": SOURCE_SECONDARY,
    "semantic-scholar": SOURCE_SECONDARY,
    "s2": SOURCE_SECONDARY,
    "web": SOURCE_WEB,
    "google": SOURCE_WEB,
}

LIVE_RESULT_CAP = 20
OFFLINE_RESULT_CAP = 15
DEFAULT_CALL_DELAY = 1.0


def normalize_source(source: str | None) -> str:
    """Canonical source name. Unrecognised values select the primary index."""
    key = (source or DEFAULT_SOURCE).strip().lower()
    if key not in SOURCE_ALIASES:
        logger.warning(f"Unknown search source {source!r}; using {DEFAULT_SOURCE}")
        return DEFAULT_SOURCE
    return SOURCE_ALIASES[key]


def rank_records(records: Sequence[PaperRecord], cap: int) -> list[PaperRecord]:
    """Stable descending sort by relevance, truncated to ``cap``."""
    return sorted(records, key=lambda r: r.relevance_score, reverse=True)[:cap]


class SearchOrchestrator:
    """
    Drive the provider chain for one search run.

    Args:
        primary: Primary index provider (IEEE Xplore)
        secondary: Secondary index provider (Semantic Scholar)
        fallback: Offline provider terminating every chain
        web: Optional web-search provider
        planner: Keyword fan-out planner
        call_delay: Seconds to wait between consecutive provider calls
        sleep: Sleep function (tests pass a recorder)
    """

    def __init__(
        self,
        primary: SearchProvider,
        secondary: SearchProvider,
        fallback: SearchProvider,
        web: SearchProvider | None = None,
        planner: KeywordSetPlanner | None = None,
        call_delay: float = DEFAULT_CALL_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        live_cap: int = LIVE_RESULT_CAP,
        offline_cap: int = OFFLINE_RESULT_CAP,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.fallback = fallback
        self.web = web
        self.planner = planner or KeywordSetPlanner()
        self.call_delay = call_delay
        self._sleep = sleep
        self.live_cap = live_cap
        self.offline_cap = offline_cap

    # ------------------------------------------------------------------
    # Chain construction
    # ------------------------------------------------------------------

    def provider_chain(self, source: str | None = None) -> list[SearchProvider]:
        """Live providers to try, in order. The offline fallback is implicit."""
        source = normalize_source(source)
        chain: list[SearchProvider] = []
        if source == SOURCE_SECONDARY:
            chain.append(self.secondary)
            if self.primary.is_configured():
                chain.append(self.primary)
        elif source == SOURCE_WEB:
            if self.web is not None and self.web.is_configured():
                chain.append(self.web)
        elif self.primary.is_configured():
            chain.append(self.primary)
        return chain

    def available_sources(self) -> dict[str, bool]:
        return {
            SOURCE_PRIMARY: self.primary.is_configured(),
            SOURCE_SECONDARY: self.secondary.is_configured(),
            SOURCE_WEB: self.web is not None and self.web.is_configured(),
        }

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self,
        keywords: Sequence[str],
        source: str | None = None,
        options: SearchOptions | None = None,
    ) -> SearchOutcome:
        """Plan fan-out sets for ``keywords`` and run the chain for ``source``."""
        keywords = [k for k in keywords if k and k.strip()]
        if not keywords:
            raise MissingInputError("No keywords to search for", suggestion="Extract keywords first")
        return self.search_sets(self.planner.plan(keywords), keywords, source, options)

    def search_sets(
        self,
        keyword_sets: Sequence[KeywordSet],
        keywords: Sequence[str],
        source: str | None = None,
        options: SearchOptions | None = None,
    ) -> SearchOutcome:
        """
        Run the chain over pre-planned ``keyword_sets``.

        ``keywords`` is the full ranked list used by the offline flow.

        Raises:
            AggregateSearchFailureError: The offline provider itself failed
        """
        chain = self.provider_chain(source)
        options = options or SearchOptions()
        attempted: list[str] = []

        try:
            for position, provider in enumerate(chain):
                attempted.append(provider.name)
                try:
                    records = self._run_provider(provider, keyword_sets, options)
                except ProviderUnavailableError as e:
                    logger.warning(f"Provider {provider.name} unavailable, trying next: {e}")
                    continue

                ranked = rank_records(records, self.live_cap)
                logger.info(f"Search via {provider.name}: {len(records)} unique, returning {len(ranked)}")
                return SearchOutcome(
                    records=ranked,
                    provider_name=provider.name,
                    attempted_providers=attempted,
                    used_fallback=position > 0,
                )

            if not chain:
                logger.info(f"No live provider configured for source {source or DEFAULT_SOURCE!r}; using offline catalog")
            else:
                logger.info("All live providers failed; using offline catalog")
        except Exception:
            logger.exception("Unexpected error during search orchestration; using offline catalog")

        return self._search_offline(keywords, options, attempted)

    def _run_provider(
        self,
        provider: SearchProvider,
        keyword_sets: Sequence[KeywordSet],
        options: SearchOptions,
    ) -> list[PaperRecord]:
        """Query ``provider`` with every set; dedup into a fresh session."""
        session = SearchSession()
        failures = 0
        last_error: ProviderUnavailableError | None = None

        for index, keyword_set in enumerate(keyword_sets):
            if index and self.call_delay > 0:
                self._sleep(self.call_delay)
            try:
                results = provider.search(keyword_set, options)
            except ProviderUnavailableError as e:
                if not e.retryable:
                    raise
                failures += 1
                last_error = e
                logger.warning(f"{provider.name}: search failed for {list(keyword_set)}: {e}")
                continue

            admitted = sum(1 for record in results if session.admit(record))
            logger.debug(f"{provider.name}: {list(keyword_set)} -> {len(results)} results, {admitted} new")

        if keyword_sets and failures == len(keyword_sets):
            raise ProviderUnavailableError(
                provider.name, f"all {failures} keyword sets failed"
            ) from last_error
        return session.accumulated

    def _search_offline(
        self,
        keywords: Sequence[str],
        options: SearchOptions,
        attempted: list[str],
    ) -> SearchOutcome:
        attempted = attempted + [self.fallback.name]
        try:
            records = self.fallback.search(tuple(keywords), options)
        except Exception as e:
            logger.exception("Offline catalog failed")
            raise AggregateSearchFailureError(attempted) from e

        session = SearchSession()
        unique = [r for r in records if r.relevance_score > 0 and session.admit(r)]
        return SearchOutcome(
            records=rank_records(unique, self.offline_cap),
            provider_name=self.fallback.name,
            attempted_providers=attempted,
            used_fallback=True,
        )



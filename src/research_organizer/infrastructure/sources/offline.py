"""
Offline catalog provider - the terminal fallback.

Serves a small curated record set bundled with the package. Performs no
network I/O, so it is always configured and cannot become unavailable.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from importlib import resources
from typing import Any

import yaml

from research_organizer.domain.entities import PaperRecord, SearchOptions

from .relevance import offline_raw_score, offline_relevance

logger = logging.getLogger(__name__)

DATA_PACKAGE = "research_organizer.infrastructure.sources"
DATA_DIR = "data"
DATA_FILE = "offline_papers.yaml"


def load_offline_papers(text: str | None = None) -> tuple[PaperRecord, ...]:
    """Parse the bundled catalog (or ``text`` when given) into unscored records."""
    if text is None:
        text = resources.files(DATA_PACKAGE).joinpath(DATA_DIR).joinpath(DATA_FILE).read_text(encoding="utf-8")
    raw_data = yaml.safe_load(text) or {}
    papers: list[dict[str, Any]] = raw_data.get("papers") or []
    return tuple(
        PaperRecord(
            title=p["title"],
            authors=p.get("authors", ""),
            year=p.get("year"),
            venue=p.get("venue", ""),
            url=p.get("url", ""),
            abstract=p.get("abstract", ""),
            keywords=tuple(p.get("keywords") or ()),
            provider_name=OfflineCatalogProvider.name,
            external_id=p.get("url") or None,
        )
        for p in papers
    )


class OfflineCatalogProvider:
    """Score the curated set against the query and drop irrelevant items."""

    name = "offline"

    def __init__(self, papers: Sequence[PaperRecord] | None = None) -> None:
        self._papers = tuple(papers) if papers is not None else load_offline_papers()

    def is_configured(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._papers)

    def search(self, keyword_set: Sequence[str], options: SearchOptions | None = None) -> list[PaperRecord]:
        """Records with at least one hit, sorted by descending relevance."""
        keywords = [k for k in keyword_set if k]
        scored = []
        for paper in self._papers:
            raw = offline_raw_score(keywords, paper.title, paper.abstract, paper.keywords)
            if raw <= 0:
                continue
            scored.append(paper.with_relevance(offline_relevance(raw, len(keywords))))
        scored.sort(key=lambda p: p.relevance_score, reverse=True)
        logger.info(f"Offline catalog matched {len(scored)} of {len(self._papers)} papers")
        return scored

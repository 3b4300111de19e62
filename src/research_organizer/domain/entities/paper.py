"""
Domain Entity: PaperRecord

One retrieved literature item, normalized across providers, plus the
per-run search value objects (options, session, outcome).
"""

from __future__ import annotations

import dataclasses
import datetime
from dataclasses import dataclass, field
from typing import Any


def _normalize_title(title: str) -> str:
    return " ".join(title.split()).casefold()


@dataclass(frozen=True)
class PaperRecord:
    """
    Provider-independent paper representation.

    Identity key is the external id when the provider supplied one,
    otherwise the case-normalized title. Records are never merged:
    the first one admitted under a key wins.
    """

    title: str
    authors: str = ""
    year: int | None = None
    venue: str = ""
    url: str = ""
    abstract: str = ""
    keywords: tuple[str, ...] = ()
    relevance_score: float = 0.0
    provider_name: str = ""
    external_id: str | None = None

    # Export-only metadata
    doi: str = ""
    pages: str = ""
    publisher: str = ""
    citation_count: int = 0

    def __post_init__(self) -> None:
        if not 0.0 <= self.relevance_score <= 1.0:
            raise ValueError(f"relevance_score must be within [0, 1], got {self.relevance_score}")
        if isinstance(self.keywords, list):
            object.__setattr__(self, "keywords", tuple(self.keywords))

    @property
    def identity_key(self) -> str:
        if self.external_id and self.external_id.strip():
            return self.external_id.strip().lower()
        return "title:" + _normalize_title(self.title)

    def with_relevance(self, score: float) -> PaperRecord:
        return dataclasses.replace(self, relevance_score=score)

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["keywords"] = list(self.keywords)
        return data


def _default_year_range() -> tuple[int, int]:
    current = datetime.date.today().year
    return (current - 5, current)


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Shared options for every provider call in one run."""

    per_call_limit: int = 30
    year_range: tuple[int, int] = field(default_factory=_default_year_range)
    content_types: tuple[str, ...] = ("Conferences", "Journals")


@dataclass
class SearchSession:
    """Run-scoped dedup state. Discarded after final ranking."""

    seen_identities: set[str] = field(default_factory=set)
    accumulated: list[PaperRecord] = field(default_factory=list)

    def admit(self, record: PaperRecord) -> bool:
        """Accumulate ``record`` unless its identity was already seen."""
        key = record.identity_key
        if key in self.seen_identities:
            return False
        self.seen_identities.add(key)
        self.accumulated.append(record)
        return True


@dataclass(frozen=True)
class SearchOutcome:
    records: list[PaperRecord]
    provider_name: str
    attempted_providers: list[str] = field(default_factory=list)
    used_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider_name,
            "attempted_providers": list(self.attempted_providers),
            "used_fallback": self.used_fallback,
            "total": len(self.records),
            "papers": [r.to_dict() for r in self.records],
        }

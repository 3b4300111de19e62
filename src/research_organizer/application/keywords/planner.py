"""
Keyword Set Planner - fan ranked keywords out into several queries.

Literature backends usually AND multi-term queries, so combined and
single-term queries are issued separately:

    [all], [first 3], [first 5], [k1], [k2], [k3]

Each grouping is only emitted when enough keywords exist.
"""

from __future__ import annotations

from collections.abc import Sequence

from research_organizer.domain.entities import KeywordSet

PREFIX_SIZES = (3, 5)
SINGLETON_COUNT = 3


class KeywordSetPlanner:
    def plan(self, keywords: Sequence[str]) -> list[KeywordSet]:
        keywords = list(keywords)
        if not keywords:
            return []

        sets: list[KeywordSet] = [tuple(keywords)]
        for size in PREFIX_SIZES:
            if len(keywords) >= size:
                sets.append(tuple(keywords[:size]))
        for keyword in keywords[:SINGLETON_COUNT]:
            sets.append((keyword,))
        return sets

"""
Relevance scorers - one pure function per provider.

Every scorer accumulates weighted term hits and normalizes by a theoretical
maximum derived from the query length. Normalization constants differ per
provider and are not comparable across providers; only the [0, 1] bound and
the ordering within one provider are relied upon.

Weights:
    title hit                3
    abstract / snippet hit   2 (web snippet: 1)
    structured field hit     4 (index terms, fields of study, keyword list)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

TITLE_WEIGHT = 3
ABSTRACT_WEIGHT = 2
FIELD_WEIGHT = 4
MAX_PER_KEYWORD = TITLE_WEIGHT + ABSTRACT_WEIGHT + FIELD_WEIGHT

CITATION_BONUS_SCALE = 100.0

WEB_SNIPPET_WEIGHT = 1
WEB_RANK_WEIGHT = 2.0
WEB_RANK_WINDOW = 10
WEB_RICH_RESULT_BONUS = 0.5
WEB_MIN_WORD_LENGTH = 3


def _clamp(score: float, max_score: float) -> float:
    if max_score <= 0:
        return 0.0
    return max(0.0, min(score / max_score, 1.0))


def keyword_hits(
    keywords: Sequence[str],
    title: str,
    abstract: str,
    fields: Iterable[str],
) -> float:
    """Raw weighted hit count shared by the catalog-style scorers."""
    title = (title or "").lower()
    abstract = (abstract or "").lower()
    fields = [f.lower() for f in fields if f]

    raw = 0.0
    for keyword in keywords:
        needle = keyword.lower()
        if not needle:
            continue
        if needle in title:
            raw += TITLE_WEIGHT
        if needle in abstract:
            raw += ABSTRACT_WEIGHT
        if any(needle in f for f in fields):
            raw += FIELD_WEIGHT
    return raw


def ieee_relevance(
    keywords: Sequence[str],
    title: str,
    abstract: str,
    index_terms: Iterable[str],
) -> float:
    """IEEE Xplore: max = 9 per keyword."""
    if not keywords:
        return 0.0
    raw = keyword_hits(keywords, title, abstract, index_terms)
    return _clamp(raw, len(keywords) * MAX_PER_KEYWORD)


def semantic_scholar_relevance(
    keywords: Sequence[str],
    title: str,
    abstract: str,
    fields_of_study: Iterable[str],
    citation_count: int = 0,
) -> float:
    """Semantic Scholar: catalog hits plus a citation bonus up to 1; max = 9 per keyword + 1."""
    if not keywords:
        return 0.0
    raw = keyword_hits(keywords, title, abstract, fields_of_study)
    if citation_count and citation_count > 0:
        raw += min(citation_count / CITATION_BONUS_SCALE, 1.0)
    return _clamp(raw, len(keywords) * MAX_PER_KEYWORD + 1)


def web_relevance(
    query: str,
    title: str,
    snippet: str,
    rank: int,
    has_rich_result: bool = False,
) -> float:
    """
    Web search result: word hits plus a rank-decay bonus.

    ``rank`` is the zero-based position in the provider's ordered list.
    Words shorter than 3 characters score nothing but still count toward
    the maximum.
    """
    words = (query or "").lower().split()
    if not words:
        return 0.0

    title = (title or "").lower()
    snippet = (snippet or "").lower()

    raw = 0.0
    for word in words:
        if len(word) < WEB_MIN_WORD_LENGTH:
            continue
        if word in title:
            raw += TITLE_WEIGHT
        if word in snippet:
            raw += WEB_SNIPPET_WEIGHT

    raw += WEB_RANK_WEIGHT * max(0.0, (WEB_RANK_WINDOW - rank) / WEB_RANK_WINDOW)
    if has_rich_result:
        raw += WEB_RICH_RESULT_BONUS

    max_score = len(words) * (TITLE_WEIGHT + WEB_SNIPPET_WEIGHT) + WEB_RANK_WEIGHT + WEB_RICH_RESULT_BONUS
    return _clamp(raw, max_score)


def offline_raw_score(
    keywords: Sequence[str],
    title: str,
    abstract: str,
    keyword_list: Iterable[str],
) -> float:
    """Offline catalog: unnormalized hits. Zero means "not relevant"."""
    return keyword_hits(keywords, title, abstract, keyword_list)


def offline_relevance(raw: float, keyword_count: int) -> float:
    if keyword_count <= 0:
        return 0.0
    return _clamp(raw, keyword_count * MAX_PER_KEYWORD)

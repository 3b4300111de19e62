"""Tests for the per-provider relevance scorers."""

from __future__ import annotations

import pytest

from research_organizer.infrastructure.sources.relevance import (
    ieee_relevance,
    keyword_hits,
    offline_raw_score,
    offline_relevance,
    semantic_scholar_relevance,
    web_relevance,
)


class TestKeywordHits:
    def test_weights(self):
        assert keyword_hits(["cloud"], "Cloud Systems", "", []) == 3
        assert keyword_hits(["cloud"], "", "a cloud study", []) == 2
        assert keyword_hits(["cloud"], "", "", ["Cloud Computing"]) == 4
        assert keyword_hits(["cloud"], "cloud", "cloud", ["cloud"]) == 9

    def test_field_hit_counts_once(self):
        assert keyword_hits(["cloud"], "", "", ["cloud", "cloud native"]) == 4

    def test_blank_keywords_ignored(self):
        assert keyword_hits(["", "cloud"], "cloud", "", []) == 3


class TestIEEE:
    def test_full_match_is_one(self):
        assert ieee_relevance(["ai"], "AI", "ai", ["AI"]) == pytest.approx(1.0)

    def test_normalized_by_keyword_count(self):
        assert ieee_relevance(["ai", "cloud"], "AI", "", []) == pytest.approx(3 / 18)

    def test_empty_query(self):
        assert ieee_relevance([], "AI", "AI", ["AI"]) == 0.0


class TestSemanticScholar:
    def test_citation_bonus_is_capped(self):
        with_many = semantic_scholar_relevance(["ai"], "AI", "", [], citation_count=5000)
        assert with_many == pytest.approx((3 + 1) / 10)

    def test_partial_citation_bonus(self):
        score = semantic_scholar_relevance(["ai"], "", "", [], citation_count=50)
        assert score == pytest.approx(0.5 / 10)

    def test_bounded(self):
        assert semantic_scholar_relevance(["ai"], "ai", "ai", ["ai"], citation_count=100) == pytest.approx(1.0)

    def test_monotone_in_hits(self):
        fewer = semantic_scholar_relevance(["ai", "data"], "ai", "", [])
        more = semantic_scholar_relevance(["ai", "data"], "ai data", "", [])
        assert more > fewer


class TestWeb:
    def test_rank_decay(self):
        first = web_relevance("cloud", "", "", rank=0)
        tenth = web_relevance("cloud", "", "", rank=9)
        beyond = web_relevance("cloud", "", "", rank=10)
        assert first > tenth > beyond == 0.0

    def test_short_words_score_nothing(self):
        assert web_relevance("ai", "AI", "AI", rank=10) == 0.0

    def test_full_score(self):
        assert web_relevance("cloud", "cloud", "cloud", rank=0, has_rich_result=True) == pytest.approx(1.0)

    def test_rich_result_bonus(self):
        plain = web_relevance("cloud", "cloud", "", rank=10)
        rich = web_relevance("cloud", "cloud", "", rank=10, has_rich_result=True)
        assert rich - plain == pytest.approx(0.5 / 6.5)

    def test_empty_query(self):
        assert web_relevance("", "cloud", "cloud", rank=0) == 0.0


class TestOffline:
    def test_raw_and_normalized(self):
        raw = offline_raw_score(["database"], "Database Systems", "database performance", ["database"])
        assert raw == 9
        assert offline_relevance(raw, 1) == pytest.approx(1.0)
        assert offline_relevance(raw, 2) == pytest.approx(0.5)

    def test_no_keywords(self):
        assert offline_relevance(5, 0) == 0.0

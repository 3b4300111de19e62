"""Tests for SearchOrchestrator: provider chain, fallback, dedup and ranking."""

from __future__ import annotations

import httpx
import pytest

from research_organizer.application.search.orchestrator import (
    SearchOrchestrator,
    normalize_source,
    rank_records,
)
from research_organizer.infrastructure.sources import IEEEXploreProvider, OfflineCatalogProvider
from research_organizer.shared.exceptions import (
    AggregateSearchFailureError,
    AuthenticationError,
    MissingInputError,
    ProviderUnavailableError,
)


@pytest.fixture
def offline():
    return OfflineCatalogProvider()


def _orchestrator(primary, secondary, fallback, web=None, sleep=None, **kwargs):
    return SearchOrchestrator(
        primary=primary,
        secondary=secondary,
        fallback=fallback,
        web=web,
        sleep=sleep or (lambda _s: None),
        **kwargs,
    )


# ============================================================================
# Source handling
# ============================================================================


class TestSources:
    @pytest.mark.parametrize(
        ("given", "expected"),
        [
            (None, "ieee"),
            ("IEEE", "ieee"),
            ("ieee_xplore", "ieee"),
            ("s2", "semantic_scholar"),
            ("semantic-scholar", "semantic_scholar"),
            ("google", "web"),
        ],
    )
    def test_normalize_source(self, given, expected):
        assert normalize_source(given) == expected

    def test_unknown_source_selects_primary(self, caplog):
        assert normalize_source("arxiv") == "ieee"
        assert "Unknown search source" in caplog.text

    def test_secondary_chain_appends_configured_primary(self, stub_provider, offline):
        primary = stub_provider("ieee")
        secondary = stub_provider("semantic_scholar")
        chain = _orchestrator(primary, secondary, offline).provider_chain("semantic_scholar")
        assert [p.name for p in chain] == ["semantic_scholar", "ieee"]

    def test_secondary_chain_skips_unconfigured_primary(self, stub_provider, offline):
        primary = stub_provider("ieee", configured=False)
        secondary = stub_provider("semantic_scholar")
        chain = _orchestrator(primary, secondary, offline).provider_chain("semantic_scholar")
        assert [p.name for p in chain] == ["semantic_scholar"]

    def test_web_chain_requires_configured_web(self, stub_provider, offline):
        web = stub_provider("web", configured=False)
        orchestrator = _orchestrator(stub_provider("ieee"), stub_provider("semantic_scholar"), offline, web=web)
        assert orchestrator.provider_chain("web") == []
        assert orchestrator.available_sources() == {"ieee": True, "semantic_scholar": True, "web": False}


# ============================================================================
# Ranking helpers
# ============================================================================


class TestRankRecords:
    def test_descending_stable_and_capped(self, make_paper):
        records = [make_paper("a", 0.2), make_paper("b", 0.9), make_paper("c", 0.2), make_paper("d", 0.5)]
        ranked = rank_records(records, cap=3)
        assert [r.title for r in ranked] == ["b", "d", "a"]


# ============================================================================
# Search runs
# ============================================================================


class TestSearch:
    def test_blank_ieee_key_uses_offline_without_network(self, offline, stub_provider):
        def handler(request):
            raise AssertionError(f"unexpected request to {request.url}")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        primary = IEEEXploreProvider(api_key="   ", client=client)
        orchestrator = _orchestrator(primary, stub_provider("semantic_scholar"), offline)

        outcome = orchestrator.search(["database", "performance"])

        assert outcome.provider_name == "offline"
        assert outcome.used_fallback is True
        assert outcome.attempted_providers == ["offline"]
        assert outcome.records
        assert outcome.records[0].title.startswith("Performance Evaluation of Database Systems")
        assert all(r.relevance_score > 0 for r in outcome.records)

    def test_secondary_failure_falls_to_primary(self, stub_provider, failing_provider, make_paper, offline):
        primary = stub_provider("ieee", default=[make_paper("From IEEE", 0.7, external_id="10.1/x")])
        secondary = failing_provider("semantic_scholar")
        outcome = _orchestrator(primary, secondary, offline).search(["ai", "data"], source="semantic_scholar")

        assert outcome.provider_name == "ieee"
        assert outcome.attempted_providers == ["semantic_scholar", "ieee"]
        assert outcome.used_fallback is True
        assert [r.title for r in outcome.records] == ["From IEEE"]

    def test_secondary_failure_without_primary_key_goes_offline(self, stub_provider, failing_provider, offline):
        primary = stub_provider("ieee", configured=False)
        secondary = failing_provider("semantic_scholar")
        outcome = _orchestrator(primary, secondary, offline).search(
            ["database", "performance", "cloud"], source="semantic_scholar"
        )

        assert outcome.provider_name == "offline"
        assert outcome.attempted_providers == ["semantic_scholar", "offline"]
        assert outcome.used_fallback is True
        assert 0 < len(outcome.records) <= 15
        assert all(r.relevance_score > 0 for r in outcome.records)
        # planned sets: all, first three, then each keyword alone
        assert len(secondary.calls) == 5
        assert primary.calls == []

    def test_primary_success_is_not_fallback(self, stub_provider, make_paper, offline):
        primary = stub_provider("ieee", default=[make_paper("A", 0.4)])
        outcome = _orchestrator(primary, stub_provider("semantic_scholar"), offline).search(["ai"])
        assert outcome.provider_name == "ieee"
        assert outcome.used_fallback is False

    def test_zero_results_is_success(self, stub_provider, offline):
        outcome = _orchestrator(stub_provider("ieee"), stub_provider("semantic_scholar"), offline).search(["ai"])
        assert outcome.provider_name == "ieee"
        assert outcome.records == []

    def test_duplicates_across_sets_are_dropped(self, stub_provider, make_paper, offline):
        shared = make_paper("Same Paper", 0.6, external_id="10.1/same")
        again = make_paper("Same paper (other set)", 0.9, external_id="10.1/SAME")
        by_title = make_paper("  Title  Only ", 0.3)
        by_title_again = make_paper("title only", 0.8)
        primary = stub_provider(
            "ieee",
            responses={
                ("ai", "data"): [shared, by_title],
                ("ai",): [again, by_title_again],
            },
        )
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["ai", "data"])

        assert [r.title for r in outcome.records] == ["Same Paper", "  Title  Only "]

    def test_live_results_capped_at_twenty(self, stub_provider, make_paper, offline):
        records = [make_paper(f"Paper {i}", i / 30) for i in range(25)]
        primary = stub_provider("ieee", default=records)
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["ai"])

        assert len(outcome.records) == 20
        assert outcome.records[0].title == "Paper 24"
        scores = [r.relevance_score for r in outcome.records]
        assert scores == sorted(scores, reverse=True)

    def test_failed_set_is_skipped(self, stub_provider, make_paper, offline):
        primary = stub_provider(
            "ieee",
            responses={("ai", "data"): ProviderUnavailableError("ieee", "timeout")},
            default=[make_paper("Kept", 0.5)],
        )
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["ai", "data"])
        assert outcome.provider_name == "ieee"
        assert [r.title for r in outcome.records] == ["Kept"]
        assert len(primary.calls) == 3

    def test_all_sets_failing_falls_back(self, failing_provider, stub_provider, offline):
        primary = failing_provider("ieee")
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["database"])
        assert outcome.provider_name == "offline"
        assert outcome.attempted_providers == ["ieee", "offline"]

    def test_non_retryable_error_abandons_provider(self, stub_provider, offline):
        primary = stub_provider("ieee", default=AuthenticationError("IEEE Xplore", "bad key"))
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["database", "cloud", "data"])
        assert outcome.provider_name == "offline"
        assert len(primary.calls) == 1

    def test_delay_between_calls(self, stub_provider, offline, sleep_calls):
        primary = stub_provider("ieee")
        orchestrator = _orchestrator(primary, stub_provider("s2"), offline, sleep=sleep_calls.append, call_delay=0.25)
        orchestrator.search(["a", "b", "c"])

        # [all], [first 3], [a], [b], [c]
        assert len(primary.calls) == 5
        assert sleep_calls == [0.25] * 4

    def test_unexpected_error_resolves_to_offline(self, stub_provider, offline):
        primary = stub_provider("ieee", default=RuntimeError("boom"))
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["database"])
        assert outcome.provider_name == "offline"
        assert outcome.attempted_providers == ["ieee", "offline"]

    def test_offline_results_capped_at_fifteen(self, stub_provider, make_paper):
        catalog = OfflineCatalogProvider(
            [make_paper(f"Cloud paper {i}", 0.0, external_id=f"id-{i}") for i in range(20)]
        )
        outcome = _orchestrator(stub_provider("ieee", configured=False), stub_provider("s2"), catalog).search(
            ["cloud"]
        )
        assert len(outcome.records) == 15

    def test_offline_failure_is_aggregate(self, stub_provider):
        broken = stub_provider("offline", default=RuntimeError("corrupt"))
        orchestrator = _orchestrator(stub_provider("ieee", configured=False), stub_provider("s2"), broken)
        with pytest.raises(AggregateSearchFailureError) as exc:
            orchestrator.search(["cloud"])
        assert exc.value.attempted == ["offline"]

    def test_missing_keywords(self, stub_provider, offline):
        orchestrator = _orchestrator(stub_provider("ieee"), stub_provider("s2"), offline)
        with pytest.raises(MissingInputError):
            orchestrator.search(["", "  "])

    def test_unknown_source_uses_primary(self, stub_provider, make_paper, offline):
        primary = stub_provider("ieee", default=[make_paper("Primary Hit", 0.6, external_id="ieee:1")])
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["ai"], source="arxiv")
        assert outcome.provider_name == "ieee"
        assert outcome.used_fallback is False
        assert primary.calls

    def test_unknown_source_without_primary_key_goes_offline(self, stub_provider, offline):
        primary = stub_provider("ieee", configured=False)
        outcome = _orchestrator(primary, stub_provider("s2"), offline).search(["database"], source="arxiv")
        assert outcome.provider_name == "offline"
        assert outcome.attempted_providers == ["offline"]
        assert primary.calls == []

    def test_deterministic(self, stub_provider, make_paper, offline):
        primary = stub_provider("ieee", default=[make_paper("B", 0.5), make_paper("A", 0.5)])
        orchestrator = _orchestrator(primary, stub_provider("s2"), offline)
        first = orchestrator.search(["ai", "data"])
        second = orchestrator.search(["ai", "data"])
        assert first == second

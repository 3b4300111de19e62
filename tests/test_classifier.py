"""Tests for CategoryClassifier and the inclusion rules."""

from __future__ import annotations

import pytest

from research_organizer.application.classification.classifier import (
    FALLBACK_REASON,
    SECONDARY_REASON,
    CategoryClassifier,
    select_categories,
)
from research_organizer.domain.entities import (
    AssignmentOrigin,
    Category,
    CategoryScore,
    ClassificationResult,
)


def _evidence(main=0.0, topic=0.0, tech=0.0, aca=0.0):
    return (
        CategoryScore(Category.MAIN, main, ("m",)),
        CategoryScore(Category.TOPIC, topic, ("t",)),
        CategoryScore(Category.FOR_TECH, tech, ("ft",)),
        CategoryScore(Category.FOR_ACA, aca, ("fa",)),
    )


# ============================================================================
# Scoring
# ============================================================================


class TestScoreCategory:
    def test_main_document_with_headings_scores_full(self, make_document):
        doc = make_document("# Overview\n## Goal\nproject plan vision", file_name="Main.md")
        result = CategoryClassifier().classify(doc)

        assert result.categories == [Category.MAIN]
        main = result.get(Category.MAIN)
        assert main.confidence == pytest.approx(1.0)
        assert main.origin is AssignmentOrigin.THRESHOLD
        assert "Found 4 Main terms" in main.reasons
        assert "Has hierarchical headings" in main.reasons

    @pytest.mark.parametrize("file_name", ["topic", "topic.md", "TOPIC.txt"])
    def test_exact_marker(self, file_name):
        score = CategoryClassifier().score_category(Category.TOPIC, "", file_name.lower())
        assert score.score == pytest.approx(0.8)

    def test_hint_substring(self):
        score = CategoryClassifier().score_category(Category.FOR_TECH, "", "tech_notes.md")
        assert score.score == pytest.approx(0.4)
        assert score.reasons == ("File name contains a ForTech hint",)

    def test_exact_marker_does_not_also_add_hint(self):
        score = CategoryClassifier().score_category(Category.MAIN, "", "main.md")
        assert score.score == pytest.approx(0.8)

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("code", 0.2),
            ("code api server", 0.4),
            ("code api server cloud debug", 0.6),
        ],
    )
    def test_term_tiers(self, content, expected):
        score = CategoryClassifier().score_category(Category.FOR_TECH, content, "notes.md")
        assert score.score == pytest.approx(expected)

    def test_topic_list_structure_needs_three_items(self):
        two = "- a\n- b\n"
        three = "- a\n- b\n- c\n"
        classifier = CategoryClassifier()
        assert classifier.score_category(Category.TOPIC, two, "x.md").score == 0.0
        assert classifier.score_category(Category.TOPIC, three, "x.md").score == pytest.approx(0.3)

    def test_numbered_list_counts(self):
        content = "1. a\n2. b\n3. c\n"
        assert CategoryClassifier().score_category(Category.TOPIC, content, "x.md").score == pytest.approx(0.3)

    def test_academic_structure_and_citations(self):
        content = "abstract\nsee [1] http://example.org"
        score = CategoryClassifier().score_category(Category.FOR_ACA, content, "x.md")
        assert score.score == pytest.approx(0.4)
        assert len(score.reasons) == 2

    def test_score_is_clamped(self):
        content = "```\ncode api server cloud debug\n```"
        score = CategoryClassifier().score_category(Category.FOR_TECH, content, "fortech.md")
        assert score.score == 1.0


# ============================================================================
# Inclusion rules
# ============================================================================


class TestSelectCategories:
    def test_threshold_is_strict(self):
        assignments = select_categories(_evidence(main=0.2, topic=0.21))
        categories = [a.category for a in assignments]
        assert categories[0] is Category.TOPIC
        # Main only gets in as a secondary candidate
        assert assignments[1].category is Category.MAIN
        assert assignments[1].origin is AssignmentOrigin.SECONDARY

    def test_fallback_when_nothing_passes(self):
        assignments = select_categories(_evidence())
        assert len(assignments) == 1
        assert assignments[0].category is Category.MAIN
        assert assignments[0].confidence == pytest.approx(0.15)
        assert assignments[0].origin is AssignmentOrigin.FALLBACK
        assert assignments[0].reasons[-1] == FALLBACK_REASON

    def test_fallback_keeps_higher_score(self):
        assignments = select_categories(_evidence(aca=0.18))
        assert assignments[0].category is Category.FOR_ACA
        assert assignments[0].confidence == pytest.approx(0.18)

    def test_secondary_only_considers_top_two(self):
        assignments = select_categories(_evidence(main=0.9, topic=0.8, tech=0.15, aca=0.15))
        assert [a.category for a in assignments] == [Category.MAIN, Category.TOPIC]

    def test_secondary_requires_score_above_floor(self):
        assignments = select_categories(_evidence(main=0.9, topic=0.1))
        assert [a.category for a in assignments] == [Category.MAIN]

    def test_secondary_confidence_floor_and_reason(self):
        assignments = select_categories(_evidence(main=0.9, tech=0.12))
        secondary = assignments[1]
        assert secondary.category is Category.FOR_TECH
        assert secondary.confidence == pytest.approx(0.15)
        assert secondary.reasons == ("ft", SECONDARY_REASON)

    def test_ties_keep_declaration_order(self):
        assignments = select_categories(_evidence(tech=0.15, aca=0.15))
        assert [a.category for a in assignments] == [Category.FOR_TECH, Category.FOR_ACA]
        assert assignments[0].origin is AssignmentOrigin.FALLBACK


# ============================================================================
# Whole documents
# ============================================================================


class TestClassify:
    def test_empty_document_falls_back(self, make_document):
        result = CategoryClassifier().classify(make_document("hello", file_name="x.txt"))
        assert result.categories == [Category.MAIN]
        assert result.get(Category.MAIN).confidence == pytest.approx(0.15)

    def test_fallback_plus_secondary(self, make_document):
        result = CategoryClassifier().classify(make_document("overview of things, with a topic"))
        assert result.categories == [Category.MAIN, Category.TOPIC]
        assert result.get(Category.MAIN).origin is AssignmentOrigin.FALLBACK
        assert result.get(Category.TOPIC).origin is AssignmentOrigin.SECONDARY

    def test_technical_document(self, make_document):
        content = "```python\nclass Loader:\n    pass\n```\nAPI implementation and database code.\n"
        result = CategoryClassifier().classify(make_document(content, file_name="fortech.md"))
        assert result.categories == [Category.FOR_TECH, Category.FOR_ACA]
        assert result.get(Category.FOR_TECH).confidence == 1.0

    def test_evidence_covers_every_category(self, make_document):
        result = CategoryClassifier().classify(make_document("anything"))
        assert [e.category for e in result.evidence] == list(Category)

    def test_result_serializes(self, make_document):
        data = CategoryClassifier().classify(make_document("hello")).to_dict()
        assert data["categories"]["Main"]["origin"] == "fallback"
        assert set(data["scores"]) == {"Main", "Topic", "ForTech", "ForAca"}

    def test_empty_assignments_rejected(self):
        with pytest.raises(ValueError):
            ClassificationResult(document_id="x", file_name="x", assignments=())

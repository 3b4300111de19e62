"""
Category Classifier - multi-label scoring of one document.

Each category is scored independently in [0, 1] from four kinds of evidence:

    filename   exact canonical marker (large) or hint substring (medium)
    terms      tiered bonus from the number of distinct catalog terms present
    structure  category-specific shape (headings, lists, code, citations)

Inclusion is recall-biased and overlapping:

1. every category scoring > 0.2 is included;
2. if nothing was included, the best category is forced in with
   confidence max(score, 0.15);
3. each of the two best categories not yet included and scoring > 0.1
   is added with confidence max(score, 0.15).

The classifier is pure: scores and reasons are returned in the result and
logged at DEBUG level, never printed.
"""

from __future__ import annotations

import logging

from research_organizer.domain.catalogs import (
    ABSTRACT_MARKERS,
    BONUS_TABLES,
    CANONICAL_MARKERS,
    CANONICAL_SUFFIXES,
    CATEGORY_TERMS,
    CODE_MARKERS,
    FILENAME_HINTS,
    INCLUDE_THRESHOLD,
    LIST_MARKER_MIN_COUNT,
    LIST_MARKER_PATTERNS,
    MIN_CONFIDENCE,
    SECONDARY_CANDIDATES,
    SECONDARY_THRESHOLD,
    TERM_TIER_HIGH,
    TERM_TIER_LOW,
    TERM_TIER_MEDIUM,
)
from research_organizer.domain.entities import (
    AssignmentOrigin,
    Category,
    CategoryAssignment,
    CategoryScore,
    ClassificationResult,
    Document,
)

logger = logging.getLogger(__name__)

FALLBACK_REASON = "Selected automatically as the best-matching category"
SECONDARY_REASON = "Added as a secondary category"


class CategoryClassifier:
    """Score a document against every category and apply the inclusion rules."""

    def classify(self, document: Document) -> ClassificationResult:
        content = document.content.lower()
        file_name = document.file_name.lower()

        evidence = tuple(self.score_category(category, content, file_name) for category in Category)
        for entry in evidence:
            logger.debug(f"{document.file_name}: {entry.category.value}={entry.score:.2f} {list(entry.reasons)}")

        assignments = select_categories(evidence)
        return ClassificationResult(
            document_id=document.id,
            file_name=document.file_name,
            assignments=assignments,
            evidence=evidence,
        )

    def score_category(self, category: Category, content: str, file_name: str) -> CategoryScore:
        """Score one category. ``content`` and ``file_name`` must already be lowercase."""
        table = BONUS_TABLES[category]
        score = 0.0
        reasons: list[str] = []

        marker = CANONICAL_MARKERS[category]
        if file_name in {marker + suffix for suffix in CANONICAL_SUFFIXES}:
            score += table.exact_name
            reasons.append(f'File name exactly matches "{category.value}"')
        elif any(hint in file_name for hint in FILENAME_HINTS[category]):
            score += table.name_hint
            reasons.append(f"File name contains a {category.value} hint")

        hits = sum(1 for term in CATEGORY_TERMS[category] if term in content)
        if hits >= TERM_TIER_HIGH:
            score += table.terms_high
        elif hits >= TERM_TIER_MEDIUM:
            score += table.terms_medium
        elif hits >= TERM_TIER_LOW:
            score += table.terms_low
        if hits >= TERM_TIER_LOW:
            reasons.append(f"Found {hits} {category.value} terms")

        for reason in _structure_reasons(category, content):
            score += table.structure
            reasons.append(reason)

        return CategoryScore(category=category, score=min(score, 1.0), reasons=tuple(reasons))


def _structure_reasons(category: Category, content: str) -> list[str]:
    """Return one reason per structural bonus that applies."""
    if category is Category.MAIN:
        if "# " in content and "## " in content:
            return ["Has hierarchical headings"]
        return []

    if category is Category.TOPIC:
        if any(len(p.findall(content)) >= LIST_MARKER_MIN_COUNT for p in LIST_MARKER_PATTERNS):
            return ["Contains list-style items"]
        return []

    if category is Category.FOR_TECH:
        if any(marker in content for marker in CODE_MARKERS):
            return ["Contains code blocks or programming constructs"]
        return []

    reasons = []
    if any(marker in content for marker in ABSTRACT_MARKERS):
        reasons.append("Has academic document structure")
    if "[" in content and "]" in content and "http" in content:
        reasons.append("Contains citations or references")
    return reasons


def select_categories(evidence: tuple[CategoryScore, ...]) -> tuple[CategoryAssignment, ...]:
    """
    Apply the inclusion rules to per-category scores.

    ``evidence`` must be in category declaration order; ``sorted`` is stable,
    so equal scores keep that order.
    """
    chosen: dict[Category, CategoryAssignment] = {}

    for entry in evidence:
        if entry.score > INCLUDE_THRESHOLD:
            chosen[entry.category] = CategoryAssignment(
                category=entry.category,
                confidence=entry.score,
                reasons=entry.reasons,
                origin=AssignmentOrigin.THRESHOLD,
            )

    ranked = sorted(evidence, key=lambda e: e.score, reverse=True)

    if not chosen:
        best = ranked[0]
        chosen[best.category] = CategoryAssignment(
            category=best.category,
            confidence=max(best.score, MIN_CONFIDENCE),
            reasons=best.reasons + (FALLBACK_REASON,),
            origin=AssignmentOrigin.FALLBACK,
        )

    for entry in ranked[:SECONDARY_CANDIDATES]:
        if entry.category not in chosen and entry.score > SECONDARY_THRESHOLD:
            chosen[entry.category] = CategoryAssignment(
                category=entry.category,
                confidence=max(entry.score, MIN_CONFIDENCE),
                reasons=entry.reasons + (SECONDARY_REASON,),
                origin=AssignmentOrigin.SECONDARY,
            )

    return tuple(chosen.values())

"""
Domain Entity: ClassificationResult

Multi-label classification of one document into the four research-planning
categories, with the evidence that produced each score.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Category(str, Enum):
    """Research-planning categories. Declaration order is the tie-break order."""

    MAIN = "Main"
    TOPIC = "Topic"
    FOR_TECH = "ForTech"
    FOR_ACA = "ForAca"

    @property
    def heading(self) -> str:
        return CATEGORY_TITLES[self]

    @property
    def description(self) -> str:
        return CATEGORY_DESCRIPTIONS[self]


CATEGORY_TITLES: dict[Category, str] = {
    Category.MAIN: "Main Documents",
    Category.TOPIC: "Topic Documents",
    Category.FOR_TECH: "Technical Documents",
    Category.FOR_ACA: "Academic Documents",
}

CATEGORY_DESCRIPTIONS: dict[Category, str] = {
    Category.MAIN: "Overall project goals, direction and core plan.",
    Category.TOPIC: "Candidate topics, open issues and options under consideration.",
    Category.FOR_TECH: "Implementation, architecture and other engineering material.",
    Category.FOR_ACA: "Research method, literature and academic writing material.",
}


class AssignmentOrigin(str, Enum):
    """Which inclusion step admitted a category."""

    THRESHOLD = "threshold"
    FALLBACK = "fallback"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class CategoryScore:
    category: Category
    score: float
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CategoryAssignment:
    category: Category
    confidence: float
    reasons: tuple[str, ...] = ()
    origin: AssignmentOrigin = AssignmentOrigin.THRESHOLD


@dataclass(frozen=True)
class ClassificationResult:
    """
    Assignments for one document.

    ``assignments`` is never empty; ``evidence`` always holds one entry per
    category in declaration order.
    """

    document_id: str
    file_name: str
    assignments: tuple[CategoryAssignment, ...]
    evidence: tuple[CategoryScore, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.assignments:
            raise ValueError(f"Classification of {self.file_name!r} has no categories")
        seen = [a.category for a in self.assignments]
        if len(seen) != len(set(seen)):
            raise ValueError(f"Duplicate category in classification of {self.file_name!r}")

    @property
    def categories(self) -> list[Category]:
        return [a.category for a in self.assignments]

    def get(self, category: Category) -> CategoryAssignment | None:
        for assignment in self.assignments:
            if assignment.category is category:
                return assignment
        return None

    def __contains__(self, category: object) -> bool:
        return any(a.category == category for a in self.assignments)

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "file_name": self.file_name,
            "categories": {
                a.category.value: {
                    "confidence": round(a.confidence, 4),
                    "reasons": list(a.reasons),
                    "origin": a.origin.value,
                }
                for a in self.assignments
            },
            "scores": {e.category.value: round(e.score, 4) for e in self.evidence},
        }

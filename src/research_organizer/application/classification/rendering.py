"""
Markdown rendering for the organize workflow.

Two kinds of artifacts are produced:

  1. One category document per selected category with at least one item
     (title, description, classified items with confidence and reasons,
     truncated content, statistics)
  2. One organization report (summary, per-category statistics, source
     document list, classification details, generated files)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from research_organizer.domain.entities import (
    Category,
    CategoryAssignment,
    ClassificationResult,
    Document,
)

logger = logging.getLogger(__name__)

# ── Constants ──────────────────────────────────────────────────────────────
_CONTENT_MAX_LEN = 1000
_TRUNCATION_NOTE = "...\n\n*[Content truncated]*"


@dataclass(frozen=True, slots=True)
class CategoryItem:
    document: Document
    assignment: CategoryAssignment


def group_by_category(
    documents: Sequence[Document],
    results: Sequence[ClassificationResult],
) -> dict[Category, list[CategoryItem]]:
    """Items per category, highest confidence first (ties keep document order)."""
    grouped: dict[Category, list[CategoryItem]] = {category: [] for category in Category}
    for document, result in zip(documents, results):
        for assignment in result.assignments:
            grouped[assignment.category].append(CategoryItem(document, assignment))
    for items in grouped.values():
        items.sort(key=lambda item: item.assignment.confidence, reverse=True)
    return grouped


def _percent(value: float) -> str:
    return f"{value * 100:.1f}%"


def _mean_confidence(items: Sequence[CategoryItem]) -> float:
    return sum(i.assignment.confidence for i in items) / len(items) if items else 0.0


def _truncate(content: str) -> str:
    if len(content) > _CONTENT_MAX_LEN:
        return content[:_CONTENT_MAX_LEN] + _TRUNCATION_NOTE
    return content


# ═══════════════════════════════════════════════════════════════════════════
# Category document
# ═══════════════════════════════════════════════════════════════════════════


def render_category_document(
    category: Category,
    items: Sequence[CategoryItem],
    generated_at: datetime,
) -> str:
    parts: list[str] = [
        f"# {category.value} - {category.heading}\n",
        f"*Generated: {generated_at.strftime('%Y-%m-%d %H:%M')}*\n",
        "## Overview\n",
        f"{category.description}\n",
        "## Classified Content\n",
    ]

    for index, item in enumerate(items, 1):
        parts.append(f"### {index}. {item.document.file_name}\n")
        parts.append(f"**Confidence**: {_percent(item.assignment.confidence)}\n")
        parts.append(f"**Reasons**: {', '.join(item.assignment.reasons)}\n")
        parts.append("**Content**:\n")
        parts.append(f"{_truncate(item.document.content)}\n")
        parts.append("---\n")

    parts.append("## Statistics\n")
    parts.append(f"- Documents: {len(items)}")
    parts.append(f"- Mean confidence: {_percent(_mean_confidence(items))}")
    parts.append(f"- Highest confidence: {_percent(max(i.assignment.confidence for i in items))}")
    parts.append("")
    return "\n".join(parts)


# ═══════════════════════════════════════════════════════════════════════════
# Organization report
# ═══════════════════════════════════════════════════════════════════════════


def render_organization_report(
    documents: Sequence[Document],
    grouped: Mapping[Category, Sequence[CategoryItem]],
    generated_files: Mapping[Category, str],
    generated_at: datetime,
) -> str:
    """
    Full run report.

    Args:
        documents: Source documents in read order.
        grouped: Output of ``group_by_category``.
        generated_files: Category -> artifact file name, for written categories only.
        generated_at: Run timestamp.
    """
    parts: list[str] = [
        "# Document Organization Report\n",
        f"**Run at**: {generated_at.strftime('%Y-%m-%d %H:%M')}\n",
    ]
    parts.append(_section_summary(documents, grouped, generated_files))
    parts.append(_section_category_stats(grouped, generated_files))
    parts.append(_section_documents(documents, grouped))
    parts.append(_section_details(grouped))
    parts.append(_section_generated_files(grouped, generated_files))
    return "\n".join(parts)


def _section_summary(
    documents: Sequence[Document],
    grouped: Mapping[Category, Sequence[CategoryItem]],
    generated_files: Mapping[Category, str],
) -> str:
    total_items = sum(len(items) for items in grouped.values())
    return "\n".join(
        [
            "## Summary\n",
            f"- **Documents analyzed**: {len(documents)}",
            f"- **Category files generated**: {len(generated_files)}",
            f"- **Total classified items**: {total_items}",
            "",
        ]
    )


def _section_category_stats(
    grouped: Mapping[Category, Sequence[CategoryItem]],
    generated_files: Mapping[Category, str],
) -> str:
    parts = ["## Category Statistics\n"]
    for category, items in grouped.items():
        if not items:
            continue
        parts.append(f"### {category.value} - {category.heading}")
        parts.append(f"- **Documents**: {len(items)}")
        parts.append(f"- **Mean confidence**: {_percent(_mean_confidence(items))}")
        parts.append(f"- **Generated file**: {generated_files.get(category, 'none')}")
        parts.append("")
    return "\n".join(parts)


def _section_documents(
    documents: Sequence[Document],
    grouped: Mapping[Category, Sequence[CategoryItem]],
) -> str:
    parts = ["## Analyzed Documents\n"]
    for index, document in enumerate(documents, 1):
        size = f"{round(document.size / 1024)}KB" if document.size else "unknown"
        labels = []
        for category, items in grouped.items():
            for item in items:
                if item.document.id == document.id:
                    labels.append(f"{category.value} ({_percent(item.assignment.confidence)})")
                    break
        parts.append(f"{index}. **{document.file_name}**")
        parts.append(f"   - Size: {size}")
        parts.append(f"   - Last modified: {document.modified_time or 'unknown'}")
        parts.append(f"   - Categories: {', '.join(labels) or 'none'}")
        parts.append("")
    return "\n".join(parts)


def _section_details(grouped: Mapping[Category, Sequence[CategoryItem]]) -> str:
    parts = ["## Classification Details\n"]
    for category, items in grouped.items():
        if not items:
            continue
        parts.append(f"### {category.value} - {category.heading}\n")
        for index, item in enumerate(items, 1):
            parts.append(f"{index}. **{item.document.file_name}**")
            parts.append(f"   - Confidence: {_percent(item.assignment.confidence)}")
            parts.append(f"   - Reasons: {', '.join(item.assignment.reasons)}")
            parts.append("")
    return "\n".join(parts)


def _section_generated_files(
    grouped: Mapping[Category, Sequence[CategoryItem]],
    generated_files: Mapping[Category, str],
) -> str:
    parts = ["## Generated Files\n"]
    for category, file_name in generated_files.items():
        parts.append(f"- **{file_name}**: {category.heading} ({len(grouped[category])} items)")
    parts.append("\n---\n")
    parts.append("*Category files are saved next to the source documents.*")
    parts.append("")
    return "\n".join(parts)

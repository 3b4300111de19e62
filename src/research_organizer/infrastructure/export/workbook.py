"""
Workbook Exporter - ranked papers as an .xlsx workbook (openpyxl).

Sheets:
    Papers          one row per record, in ranked order
    Search Info     run timestamp, source documents, keywords, summary stats
    Year Histogram  paper count per year, newest first
"""

from __future__ import annotations

import datetime
import io
import logging
import unicodedata
from collections import Counter
from collections.abc import Sequence
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from research_organizer.domain.entities import PaperRecord

logger = logging.getLogger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

PAPER_COLUMNS = (
    "No.",
    "Title",
    "Authors",
    "Year",
    "Venue",
    "URL",
    "Relevance",
    "Keywords",
    "Abstract",
    "DOI",
    "Pages",
    "Publisher",
)

HEADER_COLOR = "1F4E79"
MAX_COLUMN_WIDTH = 60
MIN_COLUMN_WIDTH = 8


def display_width(value: Any) -> int:
    """Column width estimate; East Asian wide characters count double."""
    if value is None:
        return 0
    width = 0
    for ch in str(value):
        width += 2 if unicodedata.east_asian_width(ch) in {"W", "F"} else 1
    return width


def clean_cell(value: Any) -> Any:
    """Strip control characters openpyxl refuses to store."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def append_row(ws, values: Sequence[Any]) -> None:
    ws.append([clean_cell(v) for v in values])


def style_sheet(ws) -> None:
    thin = Side(style="thin", color="D9D9D9")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_fill = PatternFill(fill_type="solid", fgColor=HEADER_COLOR)
    header_font = Font(color="FFFFFF", bold=True)

    max_row = ws.max_row
    max_col = ws.max_column
    if max_row <= 0 or max_col <= 0:
        return

    for col_idx in range(1, max_col + 1):
        max_w = 0
        for row_idx in range(1, max_row + 1):
            cell = ws.cell(row=row_idx, column=col_idx)
            max_w = max(max_w, display_width(cell.value))
            cell.border = border
            if row_idx == 1:
                cell.fill = header_fill
                cell.font = header_font
                cell.alignment = Alignment(horizontal="center", vertical="center")
            else:
                cell.alignment = Alignment(vertical="top", wrap_text=True)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(MAX_COLUMN_WIDTH, max(MIN_COLUMN_WIDTH, max_w + 2))

    ws.freeze_panes = "A2"


def summary_stats(records: Sequence[PaperRecord]) -> dict[str, Any]:
    years = [r.year for r in records if r.year]
    mean = sum(r.relevance_score for r in records) / len(records) if records else 0.0
    return {
        "total": len(records),
        "mean_relevance": round(mean, 3),
        "newest_year": max(years) if years else None,
        "oldest_year": min(years) if years else None,
    }


def year_histogram(records: Sequence[PaperRecord]) -> list[tuple[int, int]]:
    counts = Counter(r.year for r in records if r.year)
    return sorted(counts.items(), key=lambda item: item[0], reverse=True)


class WorkbookExporter:
    """Build the three-sheet workbook and return it as bytes."""

    def __init__(self, clock: Any = None) -> None:
        self._clock = clock or (lambda: datetime.datetime.now().astimezone())

    def export(
        self,
        records: Sequence[PaperRecord],
        keywords: Sequence[str],
        source_documents: Sequence[str],
        provider_name: str = "",
    ) -> bytes:
        wb = Workbook()

        papers = wb.active
        papers.title = "Papers"
        append_row(papers, PAPER_COLUMNS)
        for number, record in enumerate(records, start=1):
            append_row(
                papers,
                (
                    number,
                    record.title,
                    record.authors,
                    record.year,
                    record.venue,
                    record.url,
                    round(record.relevance_score, 3),
                    ", ".join(record.keywords),
                    record.abstract,
                    record.doi,
                    record.pages,
                    record.publisher,
                ),
            )

        stats = summary_stats(records)
        info = wb.create_sheet("Search Info")
        append_row(info, ("Item", "Value"))
        append_row(info, ("Run timestamp", self._clock().isoformat(timespec="seconds")))
        append_row(info, ("Source", provider_name))
        append_row(info, ("Source documents", ", ".join(source_documents)))
        append_row(info, ("Keywords", ", ".join(keywords)))
        append_row(info, ("Total papers", stats["total"]))
        append_row(info, ("Mean relevance", stats["mean_relevance"]))
        append_row(info, ("Newest year", stats["newest_year"]))
        append_row(info, ("Oldest year", stats["oldest_year"]))

        histogram = wb.create_sheet("Year Histogram")
        append_row(histogram, ("Year", "Count"))
        for year, count in year_histogram(records):
            append_row(histogram, (year, count))

        for ws in wb.worksheets:
            style_sheet(ws)

        buffer = io.BytesIO()
        wb.save(buffer)
        logger.info(f"Built workbook with {len(records)} papers")
        return buffer.getvalue()

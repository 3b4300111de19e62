"""
Analysis Tools - inspect keywords and categories without touching files.

Tools:
- extract_keywords: ranked keywords for a piece of text
- classify_document: category assignments with evidence
- plan_keyword_sets: the query fan-out a search would issue
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from research_organizer.application.classification.classifier import CategoryClassifier
from research_organizer.application.keywords.extractor import KeywordExtractor
from research_organizer.application.keywords.planner import KeywordSetPlanner
from research_organizer.application.keywords.scorer import KeywordScorer
from research_organizer.domain.entities import Document, DocumentType

from ._common import InputNormalizer, ResponseFormatter

logger = logging.getLogger(__name__)

MAX_TOP_K = 50


def register_analysis_tools(
    mcp: FastMCP,
    extractor: KeywordExtractor,
    scorer: KeywordScorer,
    classifier: CategoryClassifier,
    planner: KeywordSetPlanner,
):
    """Register keyword and classification inspection tools."""

    @mcp.tool()
    def extract_keywords(text: str, top_k: int = 10, is_main_document: bool = False) -> str:
        """
        Extract and rank subject-matter keywords from text.

        Candidates come from technical and research-process term catalogs
        (English and Japanese) plus long alphabetic / katakana words; each is
        scored by how often it occurs.

        Args:
            text: Document text
            top_k: Number of keywords to return (1-50, default 10)
            is_main_document: Weight occurrences as in a project's main document

        Returns:
            JSON with ranked keywords and scores

        Example:
            extract_keywords("Cloud database API design for machine learning")
        """
        if not text or not text.strip():
            return ResponseFormatter.error(
                "Text is required",
                suggestion="Pass the document content",
                example='extract_keywords("Cloud database API design")',
                tool_name="extract_keywords",
            )

        top_k = InputNormalizer.normalize_limit(top_k, default=scorer.top_k, max_val=MAX_TOP_K)
        document = Document(
            id="input",
            file_name="input",
            content=text,
            document_type=DocumentType.MAIN if is_main_document else DocumentType.GENERIC,
        )
        candidates = extractor.extract(text)
        ranked = scorer.rank([document], candidates, top_k=top_k)
        return ResponseFormatter.success(
            {
                "total_candidates": len(candidates),
                "keywords": [{"keyword": k.text, "score": k.score} for k in ranked],
            }
        )

    @mcp.tool()
    def classify_document(file_name: str, content: str) -> str:
        """
        Classify one document into Main / Topic / ForTech / ForAca.

        A document may belong to several categories; every category is
        scored from filename, term and structure evidence and the result
        always contains at least one category.

        Args:
            file_name: Document file name (e.g. "main.md"); it is part of the evidence
            content: Document text

        Returns:
            JSON with assigned categories (confidence, reasons, origin) and all scores

        Example:
            classify_document("fortech.md", "```python\\nclass Api: ...\\n```")
        """
        if not file_name or not file_name.strip():
            return ResponseFormatter.error(
                "file_name is required",
                example='classify_document(file_name="main.md", content="# Goal ...")',
                tool_name="classify_document",
            )

        document = Document(id=file_name.strip(), file_name=file_name.strip(), content=content or "")
        try:
            result = classifier.classify(document)
        except Exception as e:
            logger.exception(f"classify_document failed: {e}")
            return ResponseFormatter.error(e, tool_name="classify_document")
        return ResponseFormatter.success(result.to_dict())

    @mcp.tool()
    def plan_keyword_sets(keywords: list[str] | str) -> str:
        """
        Show the keyword sets a reference search would query.

        Sets, in order: all keywords, the first 3, the first 5, then each of
        the first 3 on its own (groupings needing more keywords are skipped).

        Args:
            keywords: Ranked keywords, as a list or a comma-separated string

        Returns:
            JSON with the ordered keyword sets

        Example:
            plan_keyword_sets(["cloud", "database", "api"])
        """
        cleaned = InputNormalizer.normalize_list(keywords)
        if not cleaned:
            return ResponseFormatter.error(
                "No keywords provided",
                suggestion="Run extract_keywords first",
                example='plan_keyword_sets(["cloud", "database", "api"])',
                tool_name="plan_keyword_sets",
            )

        sets = planner.plan(cleaned)
        return ResponseFormatter.success(
            {
                "keywords": cleaned,
                "total": len(sets),
                "keyword_sets": [list(s) for s in sets],
            }
        )

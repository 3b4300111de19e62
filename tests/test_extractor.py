"""Tests for KeywordExtractor."""

from __future__ import annotations

import re

from research_organizer.application.keywords.extractor import KeywordExtractor
from research_organizer.domain.entities import DocumentType

# ============================================================================
# Single text
# ============================================================================


class TestExtract:
    def test_catalog_then_special_terms_in_discovery_order(self):
        assert KeywordExtractor().extract("Cloud database API design") == [
            "data",
            "cloud",
            "database",
            "api",
            "design",
        ]

    def test_empty_text_yields_nothing(self):
        assert KeywordExtractor().extract("") == []

    def test_matches_are_lowercased_and_deduplicated(self):
        result = KeywordExtractor().extract("SECURITY security Security")
        assert result == ["security"]

    def test_short_latin_words_are_not_special_terms(self):
        assert KeywordExtractor().extract("the cat sat") == []

    def test_long_latin_words_are_not_special_terms(self):
        word = "a" * 16
        assert word not in KeywordExtractor().extract(f"{word} here")

    def test_katakana_terms(self):
        result = KeywordExtractor().extract("クラウドとセキュリティ")
        assert "クラウド" in result
        assert "セキュリティ" in result

    def test_japanese_catalog_terms(self):
        result = KeywordExtractor().extract("機械学習の研究")
        assert result[:2] == ["機械学習", "研究"]

    def test_custom_catalog(self):
        extractor = KeywordExtractor(
            technical_patterns=[re.compile(r"rust", re.IGNORECASE)],
            research_patterns=[],
        )
        assert extractor.extract("Rust is fun") == ["rust"]

    def test_deterministic(self):
        text = "Machine learning model evaluation for cloud systems"
        extractor = KeywordExtractor()
        assert extractor.extract(text) == extractor.extract(text)


# ============================================================================
# Multiple documents
# ============================================================================


class TestExtractAll:
    def test_union_in_document_order(self, make_document):
        docs = [
            make_document("cloud computing", document_type=DocumentType.MAIN),
            make_document("cloud security"),
        ]
        result = KeywordExtractor().extract_all(docs)
        assert result.index("cloud") < result.index("security")
        assert result.count("cloud") == 1

    def test_no_documents(self):
        assert KeywordExtractor().extract_all([]) == []

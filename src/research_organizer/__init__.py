"""
Research Organizer - keyword extraction, document classification and
reference-paper search for research project folders.

Usage:
    from research_organizer import KeywordExtractor, KeywordScorer, CategoryClassifier

    extractor = KeywordExtractor()
    candidates = extractor.extract(text)

Features:
    - Keyword extraction from English and Japanese project notes
    - Multi-label classification into Main / Topic / ForTech / ForAca
    - Multi-provider literature search with offline fallback
    - Workbook export of ranked reference papers
"""

from .application.classification.classifier import CategoryClassifier
from .application.keywords.extractor import KeywordExtractor
from .application.keywords.planner import KeywordSetPlanner
from .application.keywords.scorer import KeywordScorer
from .application.search.orchestrator import SearchOrchestrator

__version__ = "0.1.0"

__all__ = [
    "CategoryClassifier",
    "KeywordExtractor",
    "KeywordScorer",
    "KeywordSetPlanner",
    "SearchOrchestrator",
    "__version__",
]

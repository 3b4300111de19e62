"""Keyword extraction, scoring and fan-out planning."""

from .extractor import KeywordExtractor
from .planner import KeywordSetPlanner
from .scorer import KeywordScorer

__all__ = ["KeywordExtractor", "KeywordScorer", "KeywordSetPlanner"]

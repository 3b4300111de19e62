"""
Literature search providers.

- IEEEXploreProvider: primary index (requires IEEE_API_KEY)
- SemanticScholarProvider: secondary index (key optional)
- WebSearchProvider: Google Custom Search (key + engine id)
- OfflineCatalogProvider: bundled curated set, terminal fallback
"""

from .ieee_xplore import IEEEXploreProvider
from .offline import OfflineCatalogProvider
from .semantic_scholar import SemanticScholarProvider
from .web_search import WebSearchProvider

__all__ = [
    "IEEEXploreProvider",
    "OfflineCatalogProvider",
    "SemanticScholarProvider",
    "WebSearchProvider",
]

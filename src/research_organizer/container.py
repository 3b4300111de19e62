"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management. The workflows are
singletons, so each one's run slot is process-wide.

Usage::

    from research_organizer.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict(Settings.load().to_dict(redact=False))

    organizer = container.organizer()
    reference_search = container.reference_search()

    # In tests, override any provider:
    container.orchestrator.override(providers.Object(mock_orchestrator))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)


def _create_store(workspace_dir: str | None) -> object:
    """Lazy factory for LocalDocumentStore (avoids top-level import)."""
    from research_organizer.infrastructure.storage.local_store import LocalDocumentStore
    from research_organizer.shared.settings import DEFAULT_WORKSPACE_DIR

    return LocalDocumentStore(workspace_dir or DEFAULT_WORKSPACE_DIR)


def _create_ieee(api_key: str | None, timeout: float | None) -> object:
    from research_organizer.infrastructure.sources import IEEEXploreProvider

    return IEEEXploreProvider(api_key=api_key or "", timeout=timeout or 30.0)


def _create_semantic_scholar(api_key: str | None, timeout: float | None) -> object:
    from research_organizer.infrastructure.sources import SemanticScholarProvider

    return SemanticScholarProvider(api_key=api_key or "", timeout=timeout or 30.0)


def _create_web(api_key: str | None, engine_id: str | None, timeout: float | None) -> object:
    from research_organizer.infrastructure.sources import WebSearchProvider

    return WebSearchProvider(api_key=api_key or "", engine_id=engine_id or "", timeout=timeout or 30.0)


def _create_offline() -> object:
    from research_organizer.infrastructure.sources import OfflineCatalogProvider

    return OfflineCatalogProvider()


def _create_orchestrator(
    primary: object,
    secondary: object,
    fallback: object,
    web: object,
    planner: object,
    search_delay: float | None,
) -> object:
    from research_organizer.application.search.orchestrator import DEFAULT_CALL_DELAY, SearchOrchestrator

    delay = DEFAULT_CALL_DELAY if search_delay is None else float(search_delay)
    return SearchOrchestrator(
        primary=primary,
        secondary=secondary,
        fallback=fallback,
        web=web,
        planner=planner,
        call_delay=delay,
    )


def _create_extractor() -> object:
    from research_organizer.application.keywords import KeywordExtractor

    return KeywordExtractor()


def _create_scorer(top_k: int | None) -> object:
    from research_organizer.application.keywords import KeywordScorer
    from research_organizer.domain.catalogs import DEFAULT_TOP_K

    return KeywordScorer(top_k=DEFAULT_TOP_K if top_k is None else int(top_k))


def _create_planner() -> object:
    from research_organizer.application.keywords import KeywordSetPlanner

    return KeywordSetPlanner()


def _create_classifier() -> object:
    from research_organizer.application.classification import CategoryClassifier

    return CategoryClassifier()


def _create_exporter() -> object:
    from research_organizer.infrastructure.export.workbook import WorkbookExporter

    return WorkbookExporter()


def _create_organizer(store: object, classifier: object) -> object:
    from research_organizer.application.classification.organizer import DocumentOrganizer

    return DocumentOrganizer(store=store, classifier=classifier)


def _create_reference_search(
    store: object,
    orchestrator: object,
    exporter: object,
    extractor: object,
    scorer: object,
) -> object:
    from research_organizer.application.search.reference_search import ReferencePaperSearch

    return ReferencePaperSearch(
        store=store,
        orchestrator=orchestrator,
        exporter=exporter,
        extractor=extractor,
        scorer=scorer,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for the Research Organizer application.

    Manages creation and lifecycle of all core services:
    - ``store``: local document store rooted at the workspace
    - ``ieee`` / ``semantic_scholar`` / ``web`` / ``offline``: search providers
    - ``orchestrator``: provider chain with fallback
    - ``organizer`` / ``reference_search``: the two workflows
    """

    config = providers.Configuration()

    store = providers.Singleton(_create_store, workspace_dir=config.workspace_dir)

    ieee = providers.Singleton(
        _create_ieee,
        api_key=config.ieee_api_key,
        timeout=config.http_timeout,
    )

    semantic_scholar = providers.Singleton(
        _create_semantic_scholar,
        api_key=config.semantic_scholar_api_key,
        timeout=config.http_timeout,
    )

    web = providers.Singleton(
        _create_web,
        api_key=config.google_api_key,
        engine_id=config.google_engine_id,
        timeout=config.http_timeout,
    )

    offline = providers.Singleton(_create_offline)

    extractor = providers.Singleton(_create_extractor)
    scorer = providers.Singleton(_create_scorer, top_k=config.top_k)
    planner = providers.Singleton(_create_planner)
    classifier = providers.Singleton(_create_classifier)
    exporter = providers.Singleton(_create_exporter)

    orchestrator = providers.Singleton(
        _create_orchestrator,
        primary=ieee,
        secondary=semantic_scholar,
        fallback=offline,
        web=web,
        planner=planner,
        search_delay=config.search_delay,
    )

    organizer = providers.Singleton(_create_organizer, store=store, classifier=classifier)

    reference_search = providers.Singleton(
        _create_reference_search,
        store=store,
        orchestrator=orchestrator,
        exporter=exporter,
        extractor=extractor,
        scorer=scorer,
    )


__all__ = ["ApplicationContainer"]

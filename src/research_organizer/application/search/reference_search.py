"""
Reference Paper Search - project documents in, ranked paper workbook out.

Workflow (progress milestones in brackets):
    scanning   [10]  locate Document/ and Academia/ in the project
    reading    [25]  read the Main document and the Suggestion document
    preparing  [40]  ensure Academia/Reference Paper/ exists
    analyzing  [55]  extract and rank keywords
    searching  [70]  run the provider chain
    creating   [85]  build the workbook
    saving     [95]  write Reference_Papers_<date>.xlsx
    completed [100]

Only one search run may be active per process. Provider problems never
fail the run (the orchestrator falls back); missing input, artifact write
failures and unexpected errors do, producing a failure result and a final
``error`` event.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from research_organizer.application.classification.organizer import (
    DOCUMENT_FOLDER,
    is_document_file,
    is_organized_output,
)
from research_organizer.application.keywords.extractor import KeywordExtractor
from research_organizer.application.keywords.scorer import KeywordScorer
from research_organizer.application.ports import DocumentRef, DocumentStore, TabularExporter
from research_organizer.application.search.orchestrator import SearchOrchestrator, normalize_source
from research_organizer.domain.entities import Document, DocumentType, PaperRecord
from research_organizer.shared.exceptions import MissingInputError, ResearchOrganizerError
from research_organizer.shared.progress import ProgressCallback, ProgressReporter
from research_organizer.shared.run_slot import RunSlot

logger = logging.getLogger(__name__)

ACADEMIA_FOLDER = "Academia"
SUGGESTION_FOLDER = "Paper Topic Suggestion"
REFERENCE_FOLDER = "Reference Paper"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class ReferenceSearchResult:
    success: bool
    source_documents: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    papers: list[PaperRecord] = field(default_factory=list)
    provider: str | None = None
    attempted_providers: list[str] = field(default_factory=list)
    used_fallback: bool = False
    excel_file: str | None = None
    error: str | None = None
    error_kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "source_documents": self.source_documents,
            "keywords": self.keywords,
            "provider": self.provider,
            "attempted_providers": self.attempted_providers,
            "used_fallback": self.used_fallback,
            "total": len(self.papers),
            "papers": [p.to_dict() for p in self.papers],
            "excel_file": self.excel_file,
        }
        if not self.success:
            data["error"] = self.error
            data["error_kind"] = self.error_kind
        return data


class ReferencePaperSearch:
    def __init__(
        self,
        store: DocumentStore,
        orchestrator: SearchOrchestrator,
        exporter: TabularExporter,
        extractor: KeywordExtractor | None = None,
        scorer: KeywordScorer | None = None,
        clock: Callable[[], datetime] | None = None,
        run_slot: RunSlot | None = None,
    ) -> None:
        self._store = store
        self._orchestrator = orchestrator
        self._exporter = exporter
        self._extractor = extractor or KeywordExtractor()
        self._scorer = scorer or KeywordScorer()
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._slot = run_slot or RunSlot("Reference paper search")

    @property
    def busy(self) -> bool:
        return self._slot.busy

    def available_sources(self) -> dict[str, bool]:
        return self._orchestrator.available_sources()

    def search(
        self,
        project_id: str,
        source: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ReferenceSearchResult:
        progress = ProgressReporter(on_progress)
        result = ReferenceSearchResult(success=False)
        try:
            with self._slot.hold():
                self._run(project_id, normalize_source(source), progress, result)
        except ResearchOrganizerError as e:
            logger.warning(f"Reference paper search failed: {e}")
            return self._fail(result, progress, e, e.kind)
        except Exception as e:
            logger.exception("Unexpected error during reference paper search")
            return self._fail(result, progress, e, "unexpected")
        return result

    @staticmethod
    def _fail(
        result: ReferenceSearchResult,
        progress: ProgressReporter,
        error: Exception,
        kind: str,
    ) -> ReferenceSearchResult:
        result.success = False
        result.error = str(error)
        result.error_kind = kind
        progress.emit("error", 0, f"Error: {error}")
        return result

    def _run(
        self,
        project_id: str,
        source: str,
        progress: ProgressReporter,
        result: ReferenceSearchResult,
    ) -> None:
        progress.emit("scanning", 10, "Scanning project structure...")
        document_folder = self._store.find_folder(project_id, DOCUMENT_FOLDER)
        academia_folder = self._store.find_folder(project_id, ACADEMIA_FOLDER)

        progress.emit("reading", 25, "Reading analysis documents...")
        documents = self.read_analysis_documents(document_folder, academia_folder)
        if not documents:
            raise MissingInputError(
                "No analysis documents found",
                suggestion=(
                    f"Add a main document to {DOCUMENT_FOLDER}/ or a Suggestion document to "
                    f"{ACADEMIA_FOLDER}/{SUGGESTION_FOLDER}/"
                ),
            )
        result.source_documents = [f"{d.source}: {d.file_name}" for d in documents]

        progress.emit("preparing", 40, f"Preparing {REFERENCE_FOLDER} folder...")
        academia_folder = academia_folder or self._store.ensure_folder(project_id, ACADEMIA_FOLDER)
        reference_folder = self._store.ensure_folder(academia_folder.id, REFERENCE_FOLDER)

        progress.emit("analyzing", 55, "Extracting keywords...")
        candidates = self._extractor.extract_all(documents)
        keywords = self._scorer.top_keywords(documents, candidates)
        if not keywords:
            raise MissingInputError(
                "No keywords could be extracted from the analysis documents",
                suggestion="Add more descriptive content to the main document",
            )
        result.keywords = keywords

        progress.emit("searching", 70, f"Searching related papers ({source})...")
        outcome = self._orchestrator.search(keywords, source)
        result.papers = outcome.records
        result.provider = outcome.provider_name
        result.attempted_providers = outcome.attempted_providers
        result.used_fallback = outcome.used_fallback

        progress.emit("creating", 85, "Creating workbook...")
        data = self._exporter.export(outcome.records, keywords, result.source_documents, outcome.provider_name)

        progress.emit("saving", 95, "Saving workbook...")
        file_name = f"Reference_Papers_{self._clock().date().isoformat()}.xlsx"
        artifact = self._store.write_binary_artifact(reference_folder.id, file_name, data, XLSX_MIME_TYPE)
        result.excel_file = artifact.id

        result.success = True
        progress.emit("completed", 100, f"Found {len(outcome.records)} reference papers")
        logger.info(f"Reference search saved {len(outcome.records)} papers from {outcome.provider_name} to {artifact.id}")

    def read_analysis_documents(
        self,
        document_folder: DocumentRef | None,
        academia_folder: DocumentRef | None,
    ) -> list[Document]:
        """The Main document and the Suggestion document, whichever exist."""
        documents: list[Document] = []

        if document_folder is not None:
            ref = self._first_matching(document_folder.id, "main")
            if ref is not None:
                documents.append(self._load(ref, DocumentType.MAIN, f"{DOCUMENT_FOLDER}/Main"))

        if academia_folder is not None:
            suggestion_folder = self._store.find_folder(academia_folder.id, SUGGESTION_FOLDER)
            if suggestion_folder is not None:
                ref = self._first_matching(suggestion_folder.id, "suggestion")
                if ref is not None:
                    documents.append(
                        self._load(ref, DocumentType.SUGGESTION, f"{ACADEMIA_FOLDER}/{SUGGESTION_FOLDER}")
                    )

        return documents

    def _first_matching(self, container_id: str, needle: str) -> DocumentRef | None:
        for ref in self._store.list_documents(container_id):
            if is_document_file(ref) and not is_organized_output(ref.name) and needle in ref.name.lower():
                return ref
        return None

    def _load(self, ref: DocumentRef, document_type: DocumentType, source: str) -> Document:
        return Document(
            id=ref.id,
            file_name=ref.name,
            content=self._store.read_content(ref),
            document_type=document_type,
            modified_time=ref.modified_time,
            size=ref.size,
            mime_type=ref.mime_type,
            source=source,
        )

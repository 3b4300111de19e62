"""
Document Organizer - classify a project's Document folder into category files.

Workflow (progress milestones in brackets):
    scanning   [10]  locate <project>/Document
    reading    [25]  read text documents, skipping already-organized outputs
    analyzing  [45]  classify every document
    creating   [65]  render one markdown file per selected category
    saving     [80]  write the category files next to the sources
    reporting  [95]  write Organization_Report_<date>.md
    completed [100]

Only one organize run may be active per process; a concurrent call is
rejected, not queued. Any run-ending error yields a failure result and a
final ``error`` event. Files already written are left in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from research_organizer.application.classification.classifier import CategoryClassifier
from research_organizer.application.classification.rendering import (
    group_by_category,
    render_category_document,
    render_organization_report,
)
from research_organizer.application.ports import DocumentRef, DocumentStore
from research_organizer.domain.entities import Category, ClassificationResult, Document, DocumentType
from research_organizer.shared.exceptions import (
    MissingInputError,
    ResearchOrganizerError,
    ValidationError,
)
from research_organizer.shared.progress import ProgressCallback, ProgressReporter
from research_organizer.shared.run_slot import RunSlot

logger = logging.getLogger(__name__)

DOCUMENT_FOLDER = "Document"
ORGANIZED_PREFIXES = ("Main_", "Topic_", "ForTech_", "ForAca_", "Organization_Report_")
DOCUMENT_SUFFIXES = (".md", ".txt", ".doc", ".docx")


@dataclass
class OrganizeResult:
    success: bool
    source_documents: list[str] = field(default_factory=list)
    classifications: list[ClassificationResult] = field(default_factory=list)
    organized_files: dict[str, str] = field(default_factory=dict)
    report_file: str | None = None
    error: str | None = None
    error_kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "source_documents": self.source_documents,
            "classifications": [c.to_dict() for c in self.classifications],
            "organized_files": self.organized_files,
            "report_file": self.report_file,
        }
        if not self.success:
            data["error"] = self.error
            data["error_kind"] = self.error_kind
        return data


def is_organized_output(name: str) -> bool:
    return name.startswith(ORGANIZED_PREFIXES)


def is_document_file(ref: DocumentRef) -> bool:
    if ref.is_folder:
        return False
    return ref.name.lower().endswith(DOCUMENT_SUFFIXES) or ref.mime_type.startswith("text/")


def parse_categories(names: Iterable[str | Category] | None) -> list[Category]:
    """Selected categories in declaration order. ``None`` selects all."""
    if names is None:
        return list(Category)
    by_name = {c.value.lower(): c for c in Category}
    selected = set()
    for name in names:
        if isinstance(name, Category):
            selected.add(name)
            continue
        category = by_name.get(str(name).strip().lower())
        if category is None:
            raise ValidationError(
                f"Unknown category {name!r}; expected one of: {', '.join(c.value for c in Category)}"
            )
        selected.add(category)
    return [c for c in Category if c in selected]


class DocumentOrganizer:
    def __init__(
        self,
        store: DocumentStore,
        classifier: CategoryClassifier | None = None,
        clock: Callable[[], datetime] | None = None,
        run_slot: RunSlot | None = None,
    ) -> None:
        self._store = store
        self._classifier = classifier or CategoryClassifier()
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._slot = run_slot or RunSlot("Document organization")

    @property
    def busy(self) -> bool:
        return self._slot.busy

    def organize(
        self,
        project_id: str,
        categories: Iterable[str | Category] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> OrganizeResult:
        progress = ProgressReporter(on_progress)
        result = OrganizeResult(success=False)
        try:
            with self._slot.hold():
                self._run(project_id, parse_categories(categories), progress, result)
        except ResearchOrganizerError as e:
            logger.warning(f"Document organization failed: {e}")
            return self._fail(result, progress, e, e.kind)
        except Exception as e:
            logger.exception("Unexpected error during document organization")
            return self._fail(result, progress, e, "unexpected")
        return result

    @staticmethod
    def _fail(result: OrganizeResult, progress: ProgressReporter, error: Exception, kind: str) -> OrganizeResult:
        result.success = False
        result.error = str(error)
        result.error_kind = kind
        progress.emit("error", 0, f"Error: {error}")
        return result

    def _run(
        self,
        project_id: str,
        selected: list[Category],
        progress: ProgressReporter,
        result: OrganizeResult,
    ) -> None:
        progress.emit("scanning", 10, "Scanning project structure...")
        folder = self._store.find_folder(project_id, DOCUMENT_FOLDER)
        if folder is None:
            raise MissingInputError(
                f"{DOCUMENT_FOLDER} folder not found in project {project_id!r}",
                suggestion=f"Create a {DOCUMENT_FOLDER}/ folder with project notes",
            )

        progress.emit("reading", 25, f"Reading {DOCUMENT_FOLDER} folder...")
        documents = self.read_documents(folder)
        if not documents:
            raise MissingInputError(
                f"No documents found in {DOCUMENT_FOLDER} folder",
                suggestion="Add .md or .txt files to organize",
            )
        result.source_documents = [d.file_name for d in documents]

        progress.emit("analyzing", 45, f"Classifying {len(documents)} documents...")
        classifications = [self._classifier.classify(d) for d in documents]
        result.classifications = classifications
        grouped = group_by_category(documents, classifications)

        progress.emit("creating", 65, "Creating organized documents...")
        now = self._clock()
        date = now.date().isoformat()
        rendered: dict[Category, tuple[str, str]] = {}
        for category in selected:
            items = grouped[category]
            if items:
                rendered[category] = (f"{category.value}_{date}.md", render_category_document(category, items, now))

        progress.emit("saving", 80, f"Saving {len(rendered)} category files...")
        generated: dict[Category, str] = {}
        for category, (file_name, content) in rendered.items():
            artifact = self._store.write_text_artifact(folder.id, file_name, content)
            generated[category] = file_name
            result.organized_files[category.value] = artifact.id

        progress.emit("reporting", 95, "Writing organization report...")
        report = render_organization_report(documents, grouped, generated, now)
        artifact = self._store.write_text_artifact(folder.id, f"Organization_Report_{date}.md", report)
        result.report_file = artifact.id

        result.success = True
        progress.emit("completed", 100, "Document organization completed")
        logger.info(f"Organized {len(documents)} documents into {len(generated)} category files")

    def read_documents(self, folder: DocumentRef) -> list[Document]:
        """Readable source documents, skipping previously generated outputs."""
        documents = []
        for ref in self._store.list_documents(folder.id):
            if not is_document_file(ref) or is_organized_output(ref.name):
                continue
            documents.append(
                Document(
                    id=ref.id,
                    file_name=ref.name,
                    content=self._store.read_content(ref),
                    document_type=DocumentType.MAIN if "main" in ref.name.lower() else DocumentType.GENERIC,
                    modified_time=ref.modified_time,
                    size=ref.size,
                    mime_type=ref.mime_type,
                    source=ref.id,
                )
            )
        return documents

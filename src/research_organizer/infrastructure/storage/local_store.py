"""
Local Document Store - filesystem implementation of the document-store port.

Container and document ids are POSIX paths relative to the store root
(``""`` is the root itself). A project folder looks like::

    <project>/
        Document/                       source notes (main.md, ...)
        Academia/
            Paper Topic Suggestion/
                Suggestion.md
            Reference Paper/            workbook output

Reads never abort a batch: an unreadable file yields a placeholder string.
Writes are the deliverable, so write failures raise ArtifactWriteFailureError.
"""

from __future__ import annotations

import datetime
import logging
import mimetypes
from pathlib import Path, PurePosixPath

from research_organizer.application.ports import ArtifactRef, DocumentRef
from research_organizer.shared.exceptions import ArtifactWriteFailureError, ValidationError

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = frozenset({".md", ".txt", ".markdown", ".rst", ".csv", ".json", ".yaml", ".yml"})
FOLDER_MIME_TYPE = "inode/directory"


def unreadable_placeholder(name: str) -> str:
    return f"[{name}: content could not be read]"


class LocalDocumentStore:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()

    # ------------------------------------------------------------------
    # Path handling
    # ------------------------------------------------------------------

    def _resolve(self, container_id: str) -> Path:
        relative = PurePosixPath(container_id or ".")
        if relative.is_absolute() or ".." in relative.parts:
            raise ValidationError(f"Invalid container id {container_id!r}")
        return self.root.joinpath(*relative.parts) if relative.parts else self.root

    def _ref_id(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def _to_ref(self, path: Path) -> DocumentRef:
        stat = path.stat()
        is_folder = path.is_dir()
        mime_type = FOLDER_MIME_TYPE if is_folder else (mimetypes.guess_type(path.name)[0] or "")
        if not mime_type and path.suffix.lower() in TEXT_SUFFIXES:
            mime_type = "text/plain"
        return DocumentRef(
            id=self._ref_id(path),
            name=path.name,
            mime_type=mime_type,
            modified_time=datetime.datetime.fromtimestamp(stat.st_mtime, tz=datetime.timezone.utc).isoformat(),
            size=0 if is_folder else stat.st_size,
            is_folder=is_folder,
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def list_documents(self, container_id: str) -> list[DocumentRef]:
        """Direct children of a container, sorted by name. Missing container -> []."""
        folder = self._resolve(container_id)
        if not folder.is_dir():
            return []
        return [self._to_ref(p) for p in sorted(folder.iterdir(), key=lambda p: p.name) if not p.name.startswith(".")]

    def read_content(self, ref: DocumentRef) -> str:
        path = self._resolve(ref.id)
        if not is_text_document(ref):
            logger.warning(f"Skipping unsupported document format: {ref.name}")
            return unreadable_placeholder(ref.name)
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Failed to read {ref.name}: {e}")
            return unreadable_placeholder(ref.name)

    def find_folder(self, parent_id: str, name: str) -> DocumentRef | None:
        path = self._resolve(parent_id) / name
        if path.is_dir():
            return self._to_ref(path)
        return None

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def ensure_folder(self, parent_id: str, name: str) -> DocumentRef:
        path = self._resolve(parent_id) / name
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactWriteFailureError(name, str(e)) from e
        return self._to_ref(path)

    def write_text_artifact(self, container_id: str, file_name: str, content: str) -> ArtifactRef:
        return self._write(container_id, file_name, content.encode("utf-8"))

    def write_binary_artifact(self, container_id: str, file_name: str, data: bytes, mime_type: str) -> ArtifactRef:
        return self._write(container_id, file_name, data)

    def _write(self, container_id: str, file_name: str, data: bytes) -> ArtifactRef:
        if not file_name or "/" in file_name or "\\" in file_name:
            raise ValidationError(f"Invalid artifact name {file_name!r}")
        folder = self._resolve(container_id)
        target = folder / file_name
        try:
            folder.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise ArtifactWriteFailureError(file_name, str(e)) from e
        logger.info(f"Wrote artifact {self._ref_id(target)} ({len(data)} bytes)")
        return ArtifactRef(id=self._ref_id(target), name=file_name, location=str(target))


def is_text_document(ref: DocumentRef) -> bool:
    if ref.is_folder:
        return False
    return PurePosixPath(ref.name).suffix.lower() in TEXT_SUFFIXES or ref.mime_type.startswith("text/")

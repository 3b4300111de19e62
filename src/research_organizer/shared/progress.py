"""
Progress events emitted by the workflows.

Advisory only: a callback that raises is logged and ignored so that UI
plumbing can never change the outcome of a run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    stage: str
    progress: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"stage": self.stage, "progress": self.progress, "message": self.message}


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressReporter:
    """Emits ordered progress events to an optional callback and keeps a log."""

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback
        self.events: list[ProgressEvent] = []

    def emit(self, stage: str, progress: int, message: str) -> None:
        event = ProgressEvent(stage=stage, progress=progress, message=message)
        self.events.append(event)
        logger.debug(f"[{progress:3d}%] {stage}: {message}")
        if self._callback is None:
            return
        try:
            self._callback(event)
        except Exception:
            logger.exception(f"Progress callback failed at stage {stage!r}")

"""
RunSlot - single-permit guard for long-running operations.

A second invocation of the same operation while one is in progress is
rejected immediately instead of being queued::

    slot = RunSlot("reference paper search")
    with slot.hold():
        ...  # raises ConcurrentRunRejectedError if already held

The permit is released on every exit path, including exceptions.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .exceptions import ConcurrentRunRejectedError

logger = logging.getLogger(__name__)


class RunSlot:
    """Non-blocking, non-reentrant run permit for one named operation."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            logger.warning(f"Rejected concurrent run of {self.operation}")
            raise ConcurrentRunRejectedError(self.operation)
        try:
            yield
        finally:
            self._lock.release()

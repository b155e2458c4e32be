"""Per-box mutual exclusion for check-then-commit sequences."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class BoxLockRegistry:
    """Hand out one re-entrant lock per box id.

    A single-threaded host never contends; a host serving several sessions
    from one store relies on these locks so that an admission check and
    its commit are observed as one step.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, box_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(box_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[box_id] = lock
            return lock

    @contextmanager
    def hold(self, box_id: str) -> Iterator[None]:
        """Hold the lock for *box_id* for the duration of the block."""
        lock = self.lock_for(box_id)
        with lock:
            yield

    def discard(self, box_id: str) -> None:
        """Forget the lock of a deleted box."""
        with self._guard:
            self._locks.pop(box_id, None)

    def clear(self) -> None:
        with self._guard:
            self._locks.clear()

    def __contains__(self, box_id: str) -> bool:
        return box_id in self._locks

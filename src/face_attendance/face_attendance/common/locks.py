from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class KeyedLock:
    """One re-entrant lock per key, created on first use.

    Used to serialize read-modify-write sequences for the same identity while
    leaving different identities free to proceed in parallel.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # Never pruned: keys are identity ids, so the map is bounded by the
        # number of enrolled people (enrollments are never deleted).
        self._locks: Dict[Hashable, threading.RLock] = {}

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield

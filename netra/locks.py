"""Per-key lock registry, so state for one source never blocks another."""

import threading
from typing import Dict


class KeyedLocks:
    """Hands out one lock per key, created on first use and kept for the
    life of the registry. The set of monitored sources is small and fixed,
    so entries are never evicted."""

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

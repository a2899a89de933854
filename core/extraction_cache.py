"""Process-lifetime memo of focus extraction results."""

from __future__ import annotations

import threading
from typing import Dict, Generic, Optional, TypeVar

V = TypeVar("V")


class ExtractionCache(Generic[V]):
    """Lock-guarded mapping from cache key to finished result.

    The lock only covers single lookups and inserts. Two callers racing on the
    same missing key may both compute; the later ``put`` wins and both values
    are interchangeable. Entries are never evicted.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, V] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, result: V) -> None:
        with self._lock:
            self._entries[key] = result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

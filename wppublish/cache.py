"""Per-run lookup caches shared by the document workers."""

import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

V = TypeVar("V")


class KeyedCache(Generic[V]):
    """Thread-safe mapping that computes each key at most once.

    Concurrent callers asking for the same key wait on that key's lock, so the
    factory runs once per key. A factory that raises caches nothing.
    """

    def __init__(self):
        self._values: Dict[Hashable, V] = {}
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key) -> Optional[V]:
        with self._guard:
            return self._values.get(key)

    def __contains__(self, key):
        with self._guard:
            return key in self._values

    def __len__(self):
        with self._guard:
            return len(self._values)

    def get_or_create(self, key, factory: Callable[[], V]) -> V:
        with self._guard:
            if key in self._values:
                return self._values[key]
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            with self._guard:
                if key in self._values:
                    return self._values[key]
            value = factory()
            with self._guard:
                self._values[key] = value
                del self._locks[key]
            return value


@dataclass(frozen=True)
class MediaAsset:
    url: str
    id: int


@dataclass
class SyncCache:
    # resolved local path -> uploaded media
    images: KeyedCache = field(default_factory=KeyedCache)
    # category slug -> category id
    categories: KeyedCache = field(default_factory=KeyedCache)

from __future__ import annotations

import hashlib
import threading
import time
from typing import Any, Callable, Protocol


class Cache(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def put(self, key: str, value: bytes, ttl: int) -> None: ...


def hash_key(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()[:16]


class InMemoryCache:
    """Process-local TTL cache; entries expire ``ttl`` seconds after ``put``."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._entries: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry and self._clock() < entry["expires_at"]:
                self._hits += 1
                return entry["value"]
            if entry:
                del self._entries[key]
            self._misses += 1
            return None

    def put(self, key: str, value: bytes, ttl: int) -> None:
        with self._lock:
            self._entries[key] = {"value": value, "expires_at": self._clock() + ttl}

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return bool(entry) and self._clock() < entry["expires_at"]

    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Connect-params cache with TTL expiry.

Caches the most recent successful getConnectParams result per extension.
Failed fetches are never cached, so an unreachable Nexus is retried on the
next lookup rather than pinned for the TTL.

An entry is valid while ``now - fetched_at < ttl``. Stale entries are
treated as misses but left in place until the next ``put`` for the same
extension overwrites them; key cardinality is bounded by the number of
active extensions.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from nexus.config import NEXUS_CACHE_TTL
from nexus.connect.models import CacheEntry, ConnectParams

logger = logging.getLogger("nexus.connect.cache")

__all__ = [
    "CacheMetrics",
    "ConnectParamsCache",
]


@dataclass
class CacheMetrics:
    """Hit/miss counters for the lifetime of a cache instance.

    Attributes
    ----------
    hits : int
        Lookups answered from a valid entry.
    misses : int
        Lookups for absent or expired entries.
    expired : int
        The subset of misses caused by an expired entry.
    """

    hits: int = 0
    misses: int = 0
    expired: int = 0

    def to_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "expired": self.expired,
        }


class ConnectParamsCache:
    """In-memory TTL cache of connect params keyed by extension.

    Thread-safe: a single ``threading.Lock`` serializes every read and
    write of the underlying mapping. The lock is only held for the dict
    access itself, never across a network call.

    Parameters
    ----------
    ttl_seconds : float
        Validity window for each entry.
    clock : callable
        Returns the current time in seconds. Defaults to
        ``time.monotonic``.
    """

    def __init__(
        self,
        ttl_seconds: float = NEXUS_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._metrics = CacheMetrics()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, extension: str) -> Optional[ConnectParams]:
        """Return cached params for ``extension`` if still valid, else ``None``."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(extension)
            if entry is None:
                self._metrics.misses += 1
                return None

            age = now - entry.fetched_at
            if age < self._ttl_seconds:
                self._metrics.hits += 1
                return entry.params

            self._metrics.misses += 1
            self._metrics.expired += 1

        logger.debug(
            "Cached connect params for extension [%s] expired (age=%.1fs, ttl=%.0fs)",
            extension,
            age,
            self._ttl_seconds,
        )
        return None

    def put(self, extension: str, params: ConnectParams) -> None:
        """Store ``params`` for ``extension``, replacing any previous entry."""
        entry = CacheEntry(params=params, fetched_at=self._clock())
        with self._lock:
            self._entries[extension] = entry

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict:
        """Return cache counters and the current number of stored entries."""
        with self._lock:
            data = self._metrics.to_dict()
            data["size"] = len(self._entries)
        data["ttl_seconds"] = self._ttl_seconds
        return data

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

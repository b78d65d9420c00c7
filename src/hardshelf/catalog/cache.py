# ABOUTME: Time-bounded memoization of search and detail lookups.
# ABOUTME: Entries expire lazily on read once older than the fixed one-hour TTL.

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

CACHE_TTL_SECONDS = 60 * 60


def cache_key(operation: str, title: str, author: str) -> str:
    """Build a cache key of the form '<operation>:<title>:<author>', lowercased."""
    return f"{operation}:{title.lower()}:{author.lower()}"


@dataclass
class CacheEntry:
    """A cached payload and the clock reading at which it was stored."""

    key: str
    payload: Any
    stored_at: float


class ResponseCache:
    """In-memory TTL cache owned by a single client.

    Not synchronized: each HardcoverClient has its own cache and is used
    from one thread at a time. There is no eviction beyond the TTL; the key
    space is bounded by the titles a caller looks up.
    """

    def __init__(
        self,
        *,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """Return the payload stored under key, or None on a miss or expiry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self._ttl:
            del self._entries[key]
            return None
        return entry.payload

    def put(self, key: str, payload: Any) -> None:
        self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())

    def __len__(self) -> int:
        return len(self._entries)

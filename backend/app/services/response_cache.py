"""In-process cache for model responses.

The cache is an owned object (one per service instance) rather than a
module-level map. Expiry is decided by a pluggable eviction policy; the
default policy checks age on read only, so stale entries for fingerprints
that are never looked up again stay in memory until the process restarts.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Number of context characters folded into a chat fingerprint
CHAT_CONTEXT_PREFIX_CHARS = 100
# Number of content characters folded into a summary fingerprint
SUMMARY_CONTENT_PREFIX_CHARS = 200


class _Miss:
    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Any = _Miss()


@dataclass
class CacheEntry:
    value: Any
    stored_at: float


class EvictionPolicy(Protocol):
    """Decides when entries leave the cache."""

    def is_expired(self, entry: CacheEntry, now: float) -> bool:
        ...

    def victims(self, entries: dict[str, CacheEntry]) -> list[str]:
        """Keys to drop after a store."""
        ...


class TTLPolicy:
    """Entries expire ``ttl_seconds`` after they were stored."""

    def __init__(self, ttl_seconds: float):
        self.ttl_seconds = ttl_seconds

    def is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def victims(self, entries: dict[str, CacheEntry]) -> list[str]:
        return []


class BoundedTTLPolicy(TTLPolicy):
    """TTL expiry plus a cap on entry count; the oldest writes go first."""

    def __init__(self, ttl_seconds: float, max_entries: int):
        super().__init__(ttl_seconds)
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries

    def victims(self, entries: dict[str, CacheEntry]) -> list[str]:
        overflow = len(entries) - self.max_entries
        if overflow <= 0:
            return []
        oldest = sorted(entries.items(), key=lambda item: item[1].stored_at)
        return [key for key, _ in oldest[:overflow]]


class ResponseCache:
    """Fingerprint -> value map with policy-driven expiry."""

    def __init__(
        self,
        policy: EvictionPolicy,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.policy = policy
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def lookup(self, fingerprint: str) -> Any:
        """Return the cached value, or ``MISS``. Expired entries are removed."""
        entry = self._entries.get(fingerprint)
        if entry is None:
            return MISS
        if self.policy.is_expired(entry, self._clock()):
            del self._entries[fingerprint]
            logger.debug("Cache entry expired: %.60s", fingerprint)
            return MISS
        return entry.value

    def store(self, fingerprint: str, value: Any) -> None:
        self._entries[fingerprint] = CacheEntry(value=value, stored_at=self._clock())
        for key in self.policy.victims(self._entries):
            self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Response cache cleared")

    def stats(self) -> dict:
        return {"size": len(self._entries), "keys": list(self._entries)}

    def __len__(self) -> int:
        return len(self._entries)


def chat_fingerprint(mode: str, message: str, context: str = "") -> str:
    """Cache key for a chat reply: mode, full message, context prefix."""
    return f"{mode}:{message}:{context[:CHAT_CONTEXT_PREFIX_CHARS]}"


def summary_fingerprint(content: str) -> str:
    """Cache key for a summary: content prefix only."""
    return f"summary:{content[:SUMMARY_CONTENT_PREFIX_CHARS]}"


def build_cache(ttl_seconds: float, max_entries: int | None = None) -> ResponseCache:
    """Create a cache with the TTL policy, bounded when ``max_entries`` is set."""
    if max_entries:
        return ResponseCache(BoundedTTLPolicy(ttl_seconds, max_entries))
    return ResponseCache(TTLPolicy(ttl_seconds))

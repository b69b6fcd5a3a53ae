"""Time-boxed cache of computed recommendation lists.

Entries are keyed by user, mode, list size and a fingerprint of the user's
interaction log, so a new interaction invalidates the user's entry even
before the TTL runs out. Superseded keys are never read again, so expired
entries are swept on every write and the map is capped in size.
"""

import threading
import time
from collections import OrderedDict
from typing import Callable, Hashable, List, Optional, Sequence, Tuple

from blendrec.config import DEFAULT_CACHE_TTL_SECONDS
from blendrec.recommender.models import Interaction, RecommendationScore

CacheKey = Tuple[Hashable, ...]

DEFAULT_MAX_ENTRIES = 10_000


def interactions_fingerprint(interactions: Sequence[Interaction]) -> Tuple[int, float]:
    """Summarize an interaction log as (count, latest timestamp)."""
    if not interactions:
        return 0, 0.0
    return len(interactions), max(i.timestamp for i in interactions)


def make_cache_key(
    user_id: str,
    mode: str,
    top_n: int,
    interactions: Sequence[Interaction],
) -> CacheKey:
    return (user_id, mode, top_n) + interactions_fingerprint(interactions)


class RecommendationCache:
    """Thread-safe TTL cache for recommendation lists.

    Entries are kept in insertion order, oldest first. Writes drop every
    expired entry and then evict the oldest ones beyond ``max_entries``.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: "OrderedDict[CacheKey, Tuple[float, List[RecommendationScore]]]" = OrderedDict()

    def get(self, key: CacheKey) -> Optional[List[RecommendationScore]]:
        """Return the cached list for ``key``, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, recommendations = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return list(recommendations)

    def set(self, key: CacheKey, recommendations: List[RecommendationScore]) -> None:
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            self._entries.pop(key, None)
            self._entries[key] = (now, list(recommendations))
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def _evict_expired(self, now: float) -> None:
        # Insertion order is also age order, so stop at the first live entry
        while self._entries:
            oldest_key, (stored_at, _) = next(iter(self._entries.items()))
            if now - stored_at < self.ttl_seconds:
                break
            del self._entries[oldest_key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

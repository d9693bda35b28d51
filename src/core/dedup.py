"""Deduplication helpers (core domain)."""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timedelta


class ProcessedMessages:
    """Bounded record of message keys that were already handled.

    Keys are kept in insertion order so eviction is O(1) from the front:
    anything older than ``ttl`` is dropped first, then the oldest keys are
    dropped until the record fits in ``max_entries``.
    """

    def __init__(self, max_entries: int, ttl: timedelta) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._ttl = ttl
        self._seen: "OrderedDict[str, datetime]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, key: str) -> bool:
        return key in self._seen

    def add_if_new(self, key: str, now: datetime) -> bool:
        """Record key and return True, or return False if it was already seen."""

        self._evict_expired(now)
        if key in self._seen:
            return False
        self._seen[key] = now
        while len(self._seen) > self._max_entries:
            self._seen.popitem(last=False)
        return True

    def _evict_expired(self, now: datetime) -> None:
        cutoff = now - self._ttl
        while self._seen:
            oldest_key = next(iter(self._seen))
            if self._seen[oldest_key] >= cutoff:
                break
            del self._seen[oldest_key]

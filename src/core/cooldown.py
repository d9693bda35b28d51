"""Per-contact reply cooldown tracking (core domain)."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Optional

_HOUR = timedelta(hours=1)


class CooldownTracker:
    """Remember when each sender last received an automated reply."""

    def __init__(self, window: timedelta) -> None:
        self._window = window
        self._last_reply: dict[str, datetime] = {}

    @property
    def window(self) -> timedelta:
        return self._window

    def last_reply(self, sender_id: str) -> Optional[datetime]:
        return self._last_reply.get(sender_id)

    def remaining(self, sender_id: str, now: datetime) -> Optional[timedelta]:
        """Return the time left in the sender's window, or None if it is open."""

        last = self._last_reply.get(sender_id)
        if last is None:
            return None
        elapsed = now - last
        if elapsed >= self._window:
            return None
        return self._window - elapsed

    def record(self, sender_id: str, at: datetime) -> None:
        """Start a new window for sender_id and prune windows that have closed."""

        self._last_reply[sender_id] = at
        expired = [key for key, last in self._last_reply.items() if at - last >= self._window]
        for key in expired:
            del self._last_reply[key]


def hours_rounded_up(delta: timedelta) -> int:
    """Whole hours in delta, rounding any partial hour up."""

    return math.ceil(delta / _HOUR)

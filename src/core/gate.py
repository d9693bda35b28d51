"""Admission gate: decides whether an inbound message gets a reply."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from core.config import CooldownConfig, DedupConfig
from core.cooldown import CooldownTracker, hours_rounded_up
from core.dedup import ProcessedMessages
from core.models import (
    DROP_COOLDOWN_ACTIVE,
    DROP_DUPLICATE,
    DROP_GROUP_CONVERSATION,
    DROP_SELF_MESSAGE,
    Decision,
    InboundMessage,
)

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AdmissionGate:
    """Apply self/group filtering, duplicate suppression and cooldown rules.

    All state lives on the instance, so independent gates never share
    processed keys or cooldown windows. None of the methods await, which
    keeps each evaluation atomic on the event loop.
    """

    def __init__(
        self,
        cooldown_config: CooldownConfig,
        dedup_config: DedupConfig,
        clock: Clock = utc_now,
    ) -> None:
        self._clock = clock
        self._processed = ProcessedMessages(
            max_entries=dedup_config.max_entries,
            ttl=timedelta(hours=dedup_config.ttl_hours),
        )
        self._cooldowns = CooldownTracker(timedelta(hours=cooldown_config.hours))

    def now(self) -> datetime:
        return self._clock()

    def evaluate(self, message: InboundMessage, now: Optional[datetime] = None) -> Decision:
        """Return Admit or Drop(reason) for message; first matching rule wins."""

        if now is None:
            now = self._clock()

        if message.is_outgoing:
            return Decision.drop(DROP_SELF_MESSAGE)

        if message.is_group:
            return Decision.drop(DROP_GROUP_CONVERSATION)

        # The key is recorded before the cooldown check so a redelivered message
        # can never be admitted, whatever the cooldown state turns out to be.
        if not self._processed.add_if_new(message.key, now):
            return Decision.drop(DROP_DUPLICATE)

        remaining = self._cooldowns.remaining(message.sender_id, now)
        if remaining is not None:
            return Decision.drop(DROP_COOLDOWN_ACTIVE, remaining_hours=hours_rounded_up(remaining))

        return Decision.admit()

    def record_reply(self, sender_id: str, at: Optional[datetime] = None) -> None:
        """Start the cooldown window for sender_id."""

        if at is None:
            at = self._clock()
        self._cooldowns.record(sender_id, at)
        LOGGER.debug("Cooldown recorded for sender %s at %s", sender_id, at.isoformat())

    @property
    def cooldown_hours(self) -> float:
        return self._cooldowns.window / timedelta(hours=1)

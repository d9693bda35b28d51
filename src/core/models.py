"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DROP_SELF_MESSAGE = "self-message"
DROP_GROUP_CONVERSATION = "group-conversation"
DROP_DUPLICATE = "duplicate"
DROP_COOLDOWN_ACTIVE = "cooldown-active"


@dataclass(frozen=True)
class InboundMessage:
    """Minimal inbound message used by the admission gate."""

    key: str
    sender_id: str
    chat_id: int
    message_id: int
    is_outgoing: bool
    is_group: bool
    body: str
    date: datetime


@dataclass(frozen=True)
class Decision:
    """Outcome of evaluating one inbound message."""

    admitted: bool
    reason: Optional[str] = None
    remaining_hours: Optional[int] = None

    @classmethod
    def admit(cls) -> "Decision":
        return cls(admitted=True)

    @classmethod
    def drop(cls, reason: str, remaining_hours: Optional[int] = None) -> "Decision":
        return cls(admitted=False, reason=reason, remaining_hours=remaining_hours)

"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Optional

from telethon.tl.custom import Message

from core.models import InboundMessage


class TelegramContactResolver:
    """Resolve a sender's display name, with a bounded sender_id cache.

    The cache is least-recently-used: a hit moves the sender to the back and
    the front is evicted once more than max_entries names are held.
    """

    def __init__(self, client, max_entries: int = 1000) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._client = client
        self._max_entries = max_entries
        self._cache: "OrderedDict[str, Optional[str]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._cache)

    async def display_name(self, message: InboundMessage) -> Optional[str]:
        if message.sender_id in self._cache:
            self._cache.move_to_end(message.sender_id)
            return self._cache[message.sender_id]
        try:
            entity = await self._client.get_entity(int(message.sender_id))
        except Exception:
            # Not cached: a later message may resolve once Telethon has the entity.
            return None
        name = contact_name_from_entity(entity)
        self._cache[message.sender_id] = name
        while len(self._cache) > self._max_entries:
            self._cache.popitem(last=False)
        return name


def contact_name_from_entity(entity) -> Optional[str]:
    """Return "First Last", then "@username", then None."""

    first = getattr(entity, "first_name", None)
    last = getattr(entity, "last_name", None)
    if first or last:
        return " ".join(part for part in [first, last] if part)
    username = getattr(entity, "username", None)
    if username:
        return f"@{username}"
    title = getattr(entity, "title", None)
    if title:
        return str(title)
    return None


def message_key(chat_id: int, message_id: int) -> str:
    """Build the delivery key; Telegram message ids are only unique per chat."""

    return f"{chat_id}:{message_id}"


def build_inbound_message(message: Message) -> InboundMessage:
    """Build a core InboundMessage from a Telethon Message."""

    chat_id = message.chat_id
    # Anything that is not a one-to-one chat (basic groups, supergroups,
    # channels) counts as a group conversation.
    is_group = not bool(getattr(message, "is_private", False))
    sender_id = message.sender_id if message.sender_id is not None else chat_id

    return InboundMessage(
        key=message_key(chat_id, message.id),
        sender_id=str(sender_id),
        chat_id=chat_id,
        message_id=message.id,
        is_outgoing=bool(getattr(message, "out", False)),
        is_group=is_group,
        body=message.raw_text or "",
        date=message.date,
    )

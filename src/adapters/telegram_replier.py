"""Telegram reply adapter.

Sends the rendered welcome message as a reply to the customer's message.
"""

from __future__ import annotations

from typing import Optional

from core.models import InboundMessage


class TelegramReplier:
    """Reply adapter that answers in the same chat, quoting the original."""

    def __init__(self, client, parse_mode: Optional[str] = "md") -> None:
        self._client = client
        self._parse_mode = parse_mode

    async def reply(self, message: InboundMessage, text: str) -> None:
        """Send text as a reply; Telethon errors propagate to the caller."""

        await self._client.send_message(
            message.chat_id,
            text,
            reply_to=message.message_id,
            parse_mode=self._parse_mode,
            link_preview=True,
        )

"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for reply delivery and contact lookup so
that the core can be reused with different messaging backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import InboundMessage


class ReplyPort(Protocol):
    """Reply delivery required by the auto responder."""

    async def reply(self, message: InboundMessage, text: str) -> None:
        """Send text as a reply to message, raising on delivery failure."""
        ...


class ContactLookupPort(Protocol):
    """Contact metadata lookup used only for log labels."""

    async def display_name(self, message: InboundMessage) -> Optional[str]:
        ...

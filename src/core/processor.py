"""Core message processing pipeline.

This module is integration-agnostic. It only relies on ports for reply
delivery and contact lookup, enabling other messaging adapters without
changes here.
"""

from __future__ import annotations

import asyncio
import logging

from core.gate import AdmissionGate
from core.models import DROP_COOLDOWN_ACTIVE, Decision, InboundMessage
from core.ports import ContactLookupPort, ReplyPort
from core.template import WelcomeTemplate

LOGGER = logging.getLogger(__name__)

DEFAULT_FALLBACK_LABEL = "Unknown contact"


class AutoResponder:
    """Orchestrates admission, template rendering, reply and cooldown."""

    def __init__(
        self,
        gate: AdmissionGate,
        template: WelcomeTemplate,
        replier: ReplyPort,
        contacts: ContactLookupPort,
        record_cooldown_on_failure: bool = False,
        fallback_label: str = DEFAULT_FALLBACK_LABEL,
    ) -> None:
        self._gate = gate
        self._template = template
        self._replier = replier
        self._contacts = contacts
        self._record_cooldown_on_failure = record_cooldown_on_failure
        self._fallback_label = fallback_label
        # Telethon runs every handler as its own task; one lock keeps the
        # cooldown check and the cooldown record for a message together.
        self._lock = asyncio.Lock()

    async def handle(self, message: InboundMessage) -> Decision:
        """Process one inbound message and return the gate's decision."""

        async with self._lock:
            now = self._gate.now()
            decision = self._gate.evaluate(message, now)

            if not decision.admitted:
                await self._log_drop(message, decision)
                return decision

            label = await self._contact_label(message)
            LOGGER.info("Message from %s: %s", label, message.body)

            delivered = await self._send_welcome(message, label)

            if delivered or self._record_cooldown_on_failure:
                self._gate.record_reply(message.sender_id, now)
                LOGGER.info("Cooldown of %gh started for %s", self._gate.cooldown_hours, label)
            return decision

    async def _send_welcome(self, message: InboundMessage, label: str) -> bool:
        text = self._template.render()
        try:
            await self._replier.reply(message, text)
        except Exception:
            LOGGER.exception("Failed to send welcome message to %s", label)
            return False
        LOGGER.info("Welcome message sent to %s", label)
        return True

    async def _log_drop(self, message: InboundMessage, decision: Decision) -> None:
        label = await self._contact_label(message)
        if decision.reason == DROP_COOLDOWN_ACTIVE:
            LOGGER.info(
                "Contact %s in cooldown, %sh left before the next automatic reply",
                label,
                decision.remaining_hours,
            )
            return
        LOGGER.info("Dropped message %s from %s (%s)", message.key, label, decision.reason)

    async def _contact_label(self, message: InboundMessage) -> str:
        """Return a display label for logs; lookup problems fall back silently."""

        try:
            name = await self._contacts.display_name(message)
        except Exception:
            LOGGER.debug("Contact lookup failed for %s", message.sender_id, exc_info=True)
            return self._fallback_label
        return name or self._fallback_label

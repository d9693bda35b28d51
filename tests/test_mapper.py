from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from adapters.telegram_mapper import (
    TelegramContactResolver,
    build_inbound_message,
    contact_name_from_entity,
)


class DummyMessage:
    def __init__(
        self,
        *,
        chat_id: int,
        message_id: int,
        text: "str | None",
        sender_id: "int | None" = None,
        is_private: bool = True,
        out: bool = False,
    ) -> None:
        self.chat_id = chat_id
        self.id = message_id
        self.raw_text = text
        self.sender_id = sender_id
        self.is_private = is_private
        self.out = out
        self.date = datetime(2024, 1, 1, tzinfo=timezone.utc)


class DummyEntity:
    def __init__(self, first_name=None, last_name=None, username=None) -> None:
        self.first_name = first_name
        self.last_name = last_name
        self.username = username


class DummyClient:
    def __init__(self, entities: dict[int, DummyEntity]) -> None:
        self._entities = entities
        self.calls = 0

    async def get_entity(self, entity_id: int) -> DummyEntity:
        self.calls += 1
        if entity_id not in self._entities:
            raise ValueError(f"Could not find the input entity for {entity_id}")
        return self._entities[entity_id]


def test_private_message_maps_to_direct_conversation() -> None:
    message = DummyMessage(chat_id=42, message_id=7, text="oi", sender_id=42)
    inbound = build_inbound_message(message)

    assert inbound.key == "42:7"
    assert inbound.sender_id == "42"
    assert inbound.chat_id == 42
    assert inbound.message_id == 7
    assert not inbound.is_group
    assert not inbound.is_outgoing
    assert inbound.body == "oi"


def test_group_and_outgoing_flags() -> None:
    message = DummyMessage(chat_id=-100123, message_id=1, text=None, sender_id=5, is_private=False, out=True)
    inbound = build_inbound_message(message)

    assert inbound.is_group
    assert inbound.is_outgoing
    assert inbound.body == ""


def test_same_message_id_in_different_chats_has_distinct_keys() -> None:
    first = build_inbound_message(DummyMessage(chat_id=1, message_id=5, text="a", sender_id=1))
    second = build_inbound_message(DummyMessage(chat_id=2, message_id=5, text="a", sender_id=2))
    assert first.key != second.key


def test_contact_name_preference() -> None:
    assert contact_name_from_entity(DummyEntity("Ana", "Souza", "ana")) == "Ana Souza"
    assert contact_name_from_entity(DummyEntity(username="ana")) == "@ana"
    assert contact_name_from_entity(DummyEntity()) is None


def test_resolver_caches_and_tolerates_missing_entities() -> None:
    client = DummyClient({42: DummyEntity("Ana")})
    resolver = TelegramContactResolver(client)
    known = build_inbound_message(DummyMessage(chat_id=42, message_id=1, text="oi", sender_id=42))
    unknown = build_inbound_message(DummyMessage(chat_id=43, message_id=1, text="oi", sender_id=43))

    assert asyncio.run(resolver.display_name(known)) == "Ana"
    assert asyncio.run(resolver.display_name(known)) == "Ana"
    assert client.calls == 1
    assert asyncio.run(resolver.display_name(unknown)) is None


def test_resolver_cache_is_bounded_and_keeps_recent_senders() -> None:
    client = DummyClient({1: DummyEntity("Ana"), 2: DummyEntity("Bia"), 3: DummyEntity("Caio")})
    resolver = TelegramContactResolver(client, max_entries=2)

    def _from(sender: int):
        return build_inbound_message(DummyMessage(chat_id=sender, message_id=1, text="oi", sender_id=sender))

    async def _lookups() -> None:
        await resolver.display_name(_from(1))
        await resolver.display_name(_from(2))
        # Touch 1 so 2 becomes the least recently used entry.
        await resolver.display_name(_from(1))
        await resolver.display_name(_from(3))

    asyncio.run(_lookups())
    assert len(resolver) == 2
    assert client.calls == 3

    assert asyncio.run(resolver.display_name(_from(1))) == "Ana"
    assert client.calls == 3
    assert asyncio.run(resolver.display_name(_from(2))) == "Bia"
    assert client.calls == 4

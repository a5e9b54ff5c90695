"""Change event wire format tests."""

import json

import pytest
from pydantic import ValidationError

from leaguecast.events.types import (
    EntityCreated,
    EntityDeleted,
    EntityUpdated,
    decode_event,
    encode_event,
)
from leaguecast.schemas.player import PlayerRead


@pytest.mark.parametrize(
    "event",
    [
        EntityCreated(payload=PlayerRead(id=1, name="Kovács", age=24, email="k@test.hu")),
        EntityUpdated(payload=PlayerRead(id=2, name="Nagy", age=None, email="n@test.hu")),
        EntityDeleted(payload=3),
    ],
    ids=["created", "updated-null-age", "deleted"],
)
def test_event_round_trip(event):
    """Decoding an encoded event gives back the same variant and fields."""
    decoded = decode_event(encode_event(event))
    assert type(decoded) is type(event)
    assert decoded == event


def test_unset_optional_fields_are_explicit_null():
    """A player without an age is sent with "age": null, not without the key."""
    raw = encode_event(
        EntityUpdated(payload=PlayerRead(id=2, name="Nagy", email="n@test.hu"))
    )
    msg = json.loads(raw)
    assert msg["type"] == "EntityUpdated"
    assert msg["entity"] == "player"
    assert "age" in msg["payload"]
    assert msg["payload"]["age"] is None


def test_deleted_event_carries_bare_id():
    msg = json.loads(encode_event(EntityDeleted(payload=42)))
    assert msg == {"entity": "player", "type": "EntityDeleted", "payload": 42}


def test_decode_rejects_unknown_type():
    with pytest.raises(ValidationError):
        decode_event('{"type": "PlayerExploded", "entity": "player", "payload": 1}')


def test_decode_rejects_wrong_payload_for_variant():
    with pytest.raises(ValidationError):
        decode_event('{"type": "EntityCreated", "entity": "player", "payload": 5}')


def test_events_are_immutable():
    event = EntityDeleted(payload=1)
    with pytest.raises(ValidationError):
        event.payload = 2

"""Change event types — the messages pushed over the live feed.

Learn: A ChangeEvent is a closed tagged union. Each variant carries a
`type` discriminator plus a payload: the full entity snapshot for
created/updated, the bare id for deleted. Pydantic's discriminated
unions give us both directions for free:

    {"type": "EntityCreated", "entity": "player", "payload": {...}}
    {"type": "EntityDeleted", "entity": "player", "payload": 7}

Defaults are always encoded, so a player without an age is sent with
"age": null and the wire shape never depends on which fields are set.
Events are immutable and live for a single broadcast; nothing here is
persisted or queued.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from leaguecast.schemas.player import PlayerRead

PLAYER = "player"


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity: Literal["player"] = PLAYER


class EntityCreated(_Event):
    type: Literal["EntityCreated"] = "EntityCreated"
    payload: PlayerRead


class EntityUpdated(_Event):
    type: Literal["EntityUpdated"] = "EntityUpdated"
    payload: PlayerRead


class EntityDeleted(_Event):
    type: Literal["EntityDeleted"] = "EntityDeleted"
    payload: int


ChangeEvent = Annotated[
    Union[EntityCreated, EntityUpdated, EntityDeleted],
    Field(discriminator="type"),
]

_adapter: TypeAdapter[ChangeEvent] = TypeAdapter(ChangeEvent)


def encode_event(event: ChangeEvent) -> str:
    """Serialize an event to its JSON wire form.

    Raises on malformed events; callers let that propagate.
    """
    return _adapter.dump_json(event).decode()


def decode_event(raw: str | bytes) -> ChangeEvent:
    """Parse a wire message back into its event variant."""
    return _adapter.validate_json(raw)

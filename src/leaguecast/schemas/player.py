"""Pydantic schemas for players.

Learn: Pydantic v2 models validate request/response data. Separate
"Create" schemas (input) from "Read" schemas (output) for clean APIs.
PlayerRead is also the payload of the live change events, so it keeps
every field present. An unknown age is sent as null, never omitted.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PlayerCreate(BaseModel):
    """Body of POST /players and PUT /players/{id}.

    Strings are stripped before the length checks, so a blank name fails
    min_length and padding never counts toward max_length.
    """

    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=100)
    age: Optional[int] = Field(default=None, ge=0, le=150)
    email: str = Field(..., min_length=3, max_length=150, pattern=r"^[^@\s]+@[^@\s]+$")


class PlayerRead(BaseModel):
    id: int
    name: str
    age: Optional[int] = None
    email: str

    model_config = {"from_attributes": True}

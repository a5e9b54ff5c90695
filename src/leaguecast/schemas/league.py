"""Pydantic schemas for the league read model — clubs, seasons, standings, matches.

Learn: Mobile clients expect camelCase keys. Fields stay snake_case in
Python and get camelCase aliases via alias_generator; routes serialize
by alias (FastAPI's default for response_model).
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ─── Clubs + seasons ────────────────────────────────────

class ClubRead(_CamelModel):
    id: int
    name: str
    address: Optional[str] = None


class SeasonRead(_CamelModel):
    id: int
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool


# ─── Teams ──────────────────────────────────────────────

class MemberRead(_CamelModel):
    user_id: int
    name: str
    is_captain: bool


class TeamStanding(_CamelModel):
    """A team with its roster and win/loss record over finished matches."""

    team_id: int
    team_name: str
    club_name: str
    division: Optional[str] = None
    members: list[MemberRead] = []
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    points: int = 0


# ─── Matches ────────────────────────────────────────────

class IndividualMatchRead(_CamelModel):
    id: int
    home_player_name: str
    guest_player_name: str
    home_score: int
    guest_score: int


class MatchParticipantRead(_CamelModel):
    id: int
    player_name: str
    team_side: str
    status: str


class MatchRead(_CamelModel):
    id: int
    round_number: int
    home_team_name: str
    guest_team_name: str
    home_score: int
    guest_score: int
    date: str
    status: str
    location: str
    individual_matches: Optional[list[IndividualMatchRead]] = None
    participants: Optional[list[MatchParticipantRead]] = None

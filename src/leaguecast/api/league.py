"""League API routes — clubs, seasons, team standings, and matches.

All read-only. Responses use camelCase keys for the mobile clients.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from leaguecast.api.params import EntityId, RoundNumber
from leaguecast.db.engine import get_db
from leaguecast.schemas.league import ClubRead, MatchRead, SeasonRead, TeamStanding
from leaguecast.services.league_service import (
    LeagueService,
    MatchNotFoundError,
    TeamNotFoundError,
)

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> LeagueService:
    return LeagueService(db)


# ─── Clubs + seasons ────────────────────────────────────

@router.get("/clubs", response_model=list[ClubRead])
async def list_clubs(svc: LeagueService = Depends(_svc)):
    return await svc.list_clubs()


@router.get("/seasons", response_model=list[SeasonRead])
async def list_seasons(
    active: Optional[bool] = None,
    svc: LeagueService = Depends(_svc),
):
    return await svc.list_seasons(active=active)


# ─── Teams ──────────────────────────────────────────────

@router.get("/teams", response_model=list[TeamStanding])
async def list_teams(svc: LeagueService = Depends(_svc)):
    """Every team with roster and record over finished matches."""
    return await svc.list_standings()


@router.get("/teams/{team_id}", response_model=TeamStanding)
async def get_team(team_id: EntityId, svc: LeagueService = Depends(_svc)):
    try:
        return await svc.get_standing(team_id)
    except TeamNotFoundError:
        raise HTTPException(status_code=404, detail="Team not found")


@router.get("/teams/{team_id}/matches", response_model=list[MatchRead])
async def list_team_matches(team_id: EntityId, svc: LeagueService = Depends(_svc)):
    try:
        return await svc.list_team_matches(team_id)
    except TeamNotFoundError:
        raise HTTPException(status_code=404, detail="Team not found")


# ─── Matches ────────────────────────────────────────────

@router.get("/matches", response_model=list[MatchRead])
async def list_matches(
    round: RoundNumber = None,
    svc: LeagueService = Depends(_svc),
):
    """All matches, or one round's with ?round=N."""
    return await svc.list_matches(round_number=round)


@router.get("/matches/{match_id}", response_model=MatchRead)
async def get_match(match_id: EntityId, svc: LeagueService = Depends(_svc)):
    try:
        return await svc.get_match(match_id)
    except MatchNotFoundError:
        raise HTTPException(status_code=404, detail="Match not found")

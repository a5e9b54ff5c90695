"""League service — read-only views over clubs, seasons, teams, and matches.

Learn: Standings are computed on the fly from finished matches:

    equal scores          → draw for both teams
    higher score          → win, the other side takes a loss
    points                = 2 * wins + draws

Relationships are eager-loaded with selectinload because async sessions
cannot lazy-load attributes after the query returns.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from leaguecast.db.models import Club, Match, Season, Team, TeamMember
from leaguecast.schemas.league import (
    IndividualMatchRead,
    MatchParticipantRead,
    MatchRead,
    MemberRead,
    TeamStanding,
)

FINISHED = "finished"
POINTS_PER_WIN = 2
POINTS_PER_DRAW = 1


class TeamNotFoundError(Exception):
    pass


class MatchNotFoundError(Exception):
    pass


def _record(team_id: int, matches: list[Match]) -> dict[str, int]:
    wins = losses = draws = 0
    for m in matches:
        if m.home_team_score == m.guest_team_score:
            draws += 1
        elif (m.home_team_id == team_id) == (m.home_team_score > m.guest_team_score):
            wins += 1
        else:
            losses += 1
    return {
        "matches_played": len(matches),
        "wins": wins,
        "losses": losses,
        "draws": draws,
        "points": wins * POINTS_PER_WIN + draws * POINTS_PER_DRAW,
    }


def _match_read(match: Match) -> MatchRead:
    return MatchRead(
        id=match.id,
        round_number=match.round_number or 0,
        home_team_name=match.home_team.name,
        guest_team_name=match.guest_team.name,
        home_score=match.home_team_score or 0,
        guest_score=match.guest_team_score or 0,
        date=match.match_date.isoformat() if match.match_date else "",
        status=match.status,
        location=match.location or "",
        individual_matches=[
            IndividualMatchRead(
                id=im.id,
                home_player_name=im.home_player_name,
                guest_player_name=im.guest_player_name,
                home_score=im.home_score,
                guest_score=im.guest_score,
            )
            for im in match.individual_matches
        ],
        participants=[
            MatchParticipantRead(
                id=p.id,
                player_name=p.player_name,
                team_side=p.team_side,
                status=p.status,
            )
            for p in match.participants
        ],
    )


class LeagueService:
    """Queries for the league read model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Clubs + seasons ────────────────────────────────

    async def list_clubs(self) -> list[Club]:
        result = await self.db.execute(select(Club).order_by(Club.name))
        return list(result.scalars().all())

    async def list_seasons(self, active: bool | None = None) -> list[Season]:
        query = select(Season).order_by(Season.start_date, Season.id)
        if active is not None:
            query = query.where(Season.is_active.is_(active))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ─── Standings ──────────────────────────────────────

    def _teams_query(self):
        return select(Team).options(
            selectinload(Team.club),
            selectinload(Team.members).selectinload(TeamMember.user),
        )

    async def _finished_matches(self, team_ids: list[int]) -> list[Match]:
        if not team_ids:
            return []
        result = await self.db.execute(
            select(Match).where(
                Match.status == FINISHED,
                or_(
                    Match.home_team_id.in_(team_ids),
                    Match.guest_team_id.in_(team_ids),
                ),
            )
        )
        return list(result.scalars().all())

    def _standing(self, team: Team, finished: list[Match]) -> TeamStanding:
        played = [
            m for m in finished
            if team.id in (m.home_team_id, m.guest_team_id)
        ]
        members = [
            MemberRead(
                user_id=tm.user.id,
                name=f"{tm.user.last_name} {tm.user.first_name}",
                is_captain=bool(tm.is_captain),
            )
            for tm in sorted(team.members, key=lambda tm: tm.id)
        ]
        return TeamStanding(
            team_id=team.id,
            team_name=team.name,
            club_name=team.club.name,
            division=team.division,
            members=members,
            **_record(team.id, played),
        )

    async def list_standings(self) -> list[TeamStanding]:
        result = await self.db.execute(self._teams_query().order_by(Team.id))
        teams = list(result.scalars().all())
        finished = await self._finished_matches([t.id for t in teams])
        return [self._standing(t, finished) for t in teams]

    async def get_standing(self, team_id: int) -> TeamStanding:
        result = await self.db.execute(
            self._teams_query().where(Team.id == team_id)
        )
        team = result.scalars().first()
        if team is None:
            raise TeamNotFoundError(team_id)
        finished = await self._finished_matches([team.id])
        return self._standing(team, finished)

    # ─── Matches ────────────────────────────────────────

    def _matches_query(self):
        return (
            select(Match)
            .options(
                selectinload(Match.home_team),
                selectinload(Match.guest_team),
                selectinload(Match.individual_matches),
                selectinload(Match.participants),
            )
            .order_by(Match.round_number, Match.id)
        )

    async def list_matches(self, round_number: int | None = None) -> list[MatchRead]:
        query = self._matches_query()
        if round_number is not None:
            query = query.where(Match.round_number == round_number)
        result = await self.db.execute(query)
        return [_match_read(m) for m in result.scalars().all()]

    async def list_team_matches(self, team_id: int) -> list[MatchRead]:
        if await self.db.get(Team, team_id) is None:
            raise TeamNotFoundError(team_id)
        result = await self.db.execute(
            self._matches_query().where(
                or_(Match.home_team_id == team_id, Match.guest_team_id == team_id)
            )
        )
        return [_match_read(m) for m in result.scalars().all()]

    async def get_match(self, match_id: int) -> MatchRead:
        result = await self.db.execute(
            self._matches_query().where(Match.id == match_id)
        )
        match = result.scalars().first()
        if match is None:
            raise MatchNotFoundError(match_id)
        return _match_read(match)

"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Relationships, constraints, and indexes defined here.

Key concepts:
- Integer auto-increment primary keys (ids are exposed to mobile clients)
- Portable column types only, so the same models run on PostgreSQL and SQLite
- server_default for DB-level defaults (work even for raw SQL inserts)
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    false,
    func,
    true,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ══════════════════════════════════════════════════════════════
# Players + push tokens (tracked by the live feed)
# ══════════════════════════════════════════════════════════════


class Player(Base):
    """A player record managed through the admin API.

    Learn: This is the only entity whose writes are broadcast to
    WebSocket clients. Everything below is read-only league data.
    """

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[Optional[int]] = mapped_column(Integer)
    email: Mapped[str] = mapped_column(String(150), nullable=False)


class FcmToken(Base):
    """Device push token, one per e-mail address."""

    __tablename__ = "fcm_tokens"

    email: Mapped[str] = mapped_column(String(150), primary_key=True)
    token: Mapped[str] = mapped_column(Text, nullable=False)


# ══════════════════════════════════════════════════════════════
# Users, clubs, teams
# ══════════════════════════════════════════════════════════════


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(20), server_default="user")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    memberships: Mapped[list["TeamMember"]] = relationship(back_populates="user")


class Club(Base):
    __tablename__ = "clubs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(255))

    teams: Mapped[list["Team"]] = relationship(back_populates="club")


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    division: Mapped[Optional[str]] = mapped_column(String(50))

    club: Mapped["Club"] = relationship(back_populates="teams")
    members: Mapped[list["TeamMember"]] = relationship(back_populates="team")


class TeamMember(Base):
    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    is_captain: Mapped[bool] = mapped_column(Boolean, server_default=false())
    joined_at: Mapped[Optional[date]] = mapped_column(Date)

    team: Mapped["Team"] = relationship(back_populates="members")
    user: Mapped["User"] = relationship(back_populates="memberships")


# ══════════════════════════════════════════════════════════════
# Seasons and matches
# ══════════════════════════════════════════════════════════════


class Season(Base):
    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=true())


class Match(Base):
    """A team fixture within a season.

    Learn: Only matches with status "finished" count towards standings.
    Individual games and participant sign-ups hang off the match.
    """

    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(ForeignKey("seasons.id"), nullable=False)
    round_number: Mapped[Optional[int]] = mapped_column(Integer)
    home_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    guest_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    home_team_score: Mapped[int] = mapped_column(Integer, server_default="0")
    guest_team_score: Mapped[int] = mapped_column(Integer, server_default="0")
    match_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    status: Mapped[str] = mapped_column(String(20), server_default="scheduled")
    location: Mapped[Optional[str]] = mapped_column(String(255))

    home_team: Mapped["Team"] = relationship(foreign_keys=[home_team_id])
    guest_team: Mapped["Team"] = relationship(foreign_keys=[guest_team_id])
    individual_matches: Mapped[list["IndividualMatch"]] = relationship(
        back_populates="match", order_by="IndividualMatch.id"
    )
    participants: Mapped[list["MatchParticipant"]] = relationship(
        back_populates="match", order_by="MatchParticipant.id"
    )


class MatchParticipant(Base):
    __tablename__ = "match_participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id"), nullable=False, index=True
    )
    player_name: Mapped[str] = mapped_column(String(100), nullable=False)
    team_side: Mapped[str] = mapped_column(String(10), nullable=False)  # HOME / GUEST
    status: Mapped[str] = mapped_column(String(20), server_default="APPLIED")

    match: Mapped["Match"] = relationship(back_populates="participants")


class IndividualMatch(Base):
    __tablename__ = "individual_matches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id"), nullable=False, index=True
    )
    home_player_name: Mapped[str] = mapped_column(String(100), nullable=False)
    guest_player_name: Mapped[str] = mapped_column(String(100), nullable=False)
    home_score: Mapped[int] = mapped_column(Integer, server_default="0")
    guest_score: Mapped[int] = mapped_column(Integer, server_default="0")
    home_sets_won: Mapped[int] = mapped_column(Integer, server_default="0")
    guest_sets_won: Mapped[int] = mapped_column(Integer, server_default="0")
    set_scores: Mapped[Optional[str]] = mapped_column(String(100))

    match: Mapped["Match"] = relationship(back_populates="individual_matches")

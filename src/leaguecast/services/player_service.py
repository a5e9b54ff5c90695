"""Player service — CRUD for players plus live change events.

Learn: Every write follows the same two steps:
1. Run the change in the request's transaction and commit
2. Only then build one ChangeEvent and broadcast it

If the transaction fails nothing is broadcast. The two steps are not
atomic together: a crash between commit and broadcast loses that one
notification, and connected clients catch up on their next GET /players.

When settings.notify_email is set, each write also sends a short push
summary to that address, after the broadcast and without waiting.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leaguecast.config import settings
from leaguecast.db.models import Player
from leaguecast.events.types import (
    ChangeEvent,
    EntityCreated,
    EntityDeleted,
    EntityUpdated,
)
from leaguecast.notifications.relay import NotificationRelay
from leaguecast.realtime.broadcaster import EventBroadcaster
from leaguecast.schemas.player import PlayerCreate, PlayerRead
from leaguecast.services.notification_service import NotificationService

logger = structlog.get_logger()


class PlayerNotFoundError(Exception):
    pass


class PlayerService:
    """Business logic for players."""

    def __init__(
        self,
        db: AsyncSession,
        broadcaster: EventBroadcaster,
        relay: NotificationRelay | None = None,
        notify_email: str | None = None,
    ):
        self.db = db
        self.broadcaster = broadcaster
        self.relay = relay
        self.notify_email = (
            settings.notify_email if notify_email is None else notify_email
        )

    # ─── Reads ──────────────────────────────────────────

    async def list_players(self) -> list[Player]:
        result = await self.db.execute(select(Player).order_by(Player.id))
        return list(result.scalars().all())

    async def get_player(self, player_id: int) -> Player | None:
        return await self.db.get(Player, player_id)

    # ─── Writes ─────────────────────────────────────────

    async def create_player(self, data: PlayerCreate) -> PlayerRead:
        player = Player(name=data.name, age=data.age, email=data.email)
        self.db.add(player)
        await self.db.commit()

        saved = PlayerRead.model_validate(player)
        logger.info("player.created", player_id=saved.id, email=saved.email)

        await self._publish(
            EntityCreated(payload=saved),
            title="New player",
            body=f"{saved.name} joined the roster.",
        )
        return saved

    async def update_player(self, player_id: int, data: PlayerCreate) -> PlayerRead:
        player = await self.db.get(Player, player_id)
        if player is None:
            logger.warning("player.not_found", player_id=player_id)
            raise PlayerNotFoundError(player_id)

        player.name = data.name
        player.age = data.age
        player.email = data.email
        await self.db.commit()

        saved = PlayerRead.model_validate(player)
        logger.info("player.updated", player_id=player_id)

        await self._publish(
            EntityUpdated(payload=saved),
            title="Player updated",
            body=f"{saved.name}'s details changed.",
        )
        return saved

    async def delete_player(self, player_id: int) -> None:
        player = await self.db.get(Player, player_id)
        if player is None:
            logger.warning("player.not_found", player_id=player_id)
            raise PlayerNotFoundError(player_id)

        name = player.name
        await self.db.delete(player)
        await self.db.commit()
        logger.info("player.deleted", player_id=player_id)

        await self._publish(
            EntityDeleted(payload=player_id),
            title="Player deleted",
            body=f"{name} was removed from the roster.",
        )

    # ─── Notifications ──────────────────────────────────

    async def _publish(self, event: ChangeEvent, title: str, body: str) -> None:
        """Broadcast a committed change, then optionally push a summary."""
        await self.broadcaster.broadcast(event)

        if not self.notify_email or self.relay is None:
            return
        try:
            token = await NotificationService(self.db, self.relay).get_token(
                self.notify_email
            )
        except SQLAlchemyError as e:
            logger.warning("notification.lookup_failed", error=repr(e))
            return
        if token is None:
            logger.warning("fcm_token.not_found", email=self.notify_email)
            return
        self.relay.dispatch(token, title, body)

"""Player API routes.

Learn: FastAPI routers define HTTP endpoints. Each route function
receives dependencies (db session, broadcaster, relay) via Depends() and
delegates to the service layer. Routes handle HTTP concerns (status
codes, error responses), services handle the write + broadcast.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from leaguecast.api.params import EntityId
from leaguecast.db.engine import get_db
from leaguecast.notifications.relay import NotificationRelay, get_relay
from leaguecast.realtime.broadcaster import EventBroadcaster, get_broadcaster
from leaguecast.schemas.player import PlayerCreate, PlayerRead
from leaguecast.services.player_service import PlayerNotFoundError, PlayerService

router = APIRouter(prefix="/players")


def _svc(
    db: AsyncSession = Depends(get_db),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
    relay: NotificationRelay = Depends(get_relay),
) -> PlayerService:
    return PlayerService(db, broadcaster, relay)


@router.get("", response_model=list[PlayerRead])
async def list_players(svc: PlayerService = Depends(_svc)):
    return await svc.list_players()


@router.get("/{player_id}", response_model=PlayerRead)
async def get_player(player_id: EntityId, svc: PlayerService = Depends(_svc)):
    player = await svc.get_player(player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.post("", response_model=PlayerRead, status_code=201)
async def create_player(body: PlayerCreate, svc: PlayerService = Depends(_svc)):
    """Create a player and announce it to live clients."""
    return await svc.create_player(body)


@router.put("/{player_id}", response_model=PlayerRead)
async def update_player(
    player_id: EntityId,
    body: PlayerCreate,
    svc: PlayerService = Depends(_svc),
):
    """Replace a player's fields and announce the new state."""
    try:
        return await svc.update_player(player_id, body)
    except PlayerNotFoundError:
        raise HTTPException(status_code=404, detail="Player not found")


@router.delete("/{player_id}")
async def delete_player(player_id: EntityId, svc: PlayerService = Depends(_svc)):
    """Delete a player and announce its id."""
    try:
        await svc.delete_player(player_id)
        return {"deleted": True}
    except PlayerNotFoundError:
        raise HTTPException(status_code=404, detail="Player not found")

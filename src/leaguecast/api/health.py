"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running, the
database is reachable, and reports how many live clients are attached.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from leaguecast import __version__
from leaguecast.db.engine import get_db
from leaguecast.realtime.broadcaster import EventBroadcaster, get_broadcaster

router = APIRouter()


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"

    return {"status": status, **checks, "live_clients": broadcaster.client_count}

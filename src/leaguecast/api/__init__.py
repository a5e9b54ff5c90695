"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Paths are served from the root (/players, /teams, ...) because
the mobile and admin clients already call them there. There is no auth
layer, so every route is open.
"""

from fastapi import APIRouter

from leaguecast.api.health import router as health_router
from leaguecast.api.league import router as league_router
from leaguecast.api.notifications import router as notifications_router
from leaguecast.api.players import router as players_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(players_router, tags=["players"])
api_router.include_router(league_router, tags=["clubs", "seasons", "teams", "matches"])
api_router.include_router(notifications_router, tags=["notifications"])

"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (tables, push relay, engine).
Middleware, CORS, exception handlers, and routers all registered here.
"""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leaguecast import __version__
from leaguecast.api import api_router
from leaguecast.api.errors import register_exception_handlers
from leaguecast.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: FastAPI lifespan replaces on_event("startup") / on_event("shutdown").
    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    from leaguecast.db.engine import engine
    from leaguecast.db.models import Base
    from leaguecast.notifications.relay import relay

    logger.info(
        "leaguecast.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("leaguecast.tables_ready")

    if relay.enabled:
        logger.info("leaguecast.push_relay_enabled")
    else:
        logger.warning("leaguecast.push_relay_disabled")

    yield

    # Shutdown
    logger.info("leaguecast.shutdown")
    await relay.aclose()
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="LeagueCast",
        description="Sports league backend with live player change notifications",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → handler

    from leaguecast.middleware.request_id import RequestIdMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    # Mount API routes
    app.include_router(api_router)

    # Mount WebSocket route (live player feed)
    from leaguecast.realtime.websocket import router as ws_router
    app.include_router(ws_router)

    return app


def run() -> None:
    """Serve the app with uvicorn, using the configured keepalive."""
    uvicorn.run(
        "leaguecast.main:app",
        host=settings.host,
        port=settings.port,
        ws_ping_interval=settings.ws_ping_interval,
        ws_ping_timeout=settings.ws_ping_timeout,
    )


# Default app instance (used by uvicorn: leaguecast.main:app)
app = create_app()

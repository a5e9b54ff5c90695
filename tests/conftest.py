"""Test fixtures — a throwaway database, recording broadcaster, and fake push provider.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool,
   so every session shares the one connection) with all tables created.
2. get_db is overridden to hand out sessions from that database, so the
   service layer's commit() calls are real and visible to later requests.
3. get_broadcaster is overridden with a RecordingBroadcaster that keeps
   every event it was asked to fan out.
4. get_relay is overridden with a relay whose HTTP transport is an
   httpx.MockTransport. No network; every push request is recorded.

Point LEAGUECAST_TEST_DATABASE_URL at a PostgreSQL database to run the
same suite against the production driver.
"""

import asyncio
import os

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from leaguecast.db.engine import get_db
from leaguecast.db.models import Base
from leaguecast.main import app
from leaguecast.notifications.relay import NotificationRelay, get_relay
from leaguecast.realtime.broadcaster import (
    EventBroadcaster,
    LiveConnection,
    get_broadcaster,
)

TEST_DB_URL = os.environ.get("LEAGUECAST_TEST_DATABASE_URL", "sqlite+aiosqlite://")
PUSH_URL = "https://push.test/v1/messages:send"


class RecordingBroadcaster(EventBroadcaster):
    """EventBroadcaster that remembers every broadcast call."""

    def __init__(self):
        super().__init__()
        self.events = []

    async def broadcast(self, event):
        self.events.append(event)
        return await super().broadcast(event)


class FakeSocket:
    """Stands in for a client socket: records frames, optionally fails."""

    def __init__(self, fail: bool = False, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.sent: list[str] = []
        self.attempts = 0

    async def send_text(self, message: str) -> None:
        self.attempts += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ConnectionResetError("peer went away")
        self.sent.append(message)


@pytest.fixture
def make_connection():
    """Factory: (LiveConnection, FakeSocket) pairs."""

    def _make(fail: bool = False, delay: float = 0.0, label: str | None = None):
        sock = FakeSocket(fail=fail, delay=delay)
        return LiveConnection(sock.send_text, label=label), sock

    return _make


@pytest_asyncio.fixture()
async def db_engine():
    """Fresh database with the full schema, dropped after the test."""
    if TEST_DB_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DB_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DB_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Session for seeding and inspecting data directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def push_requests():
    """Every request the fake push provider received."""
    return []


@pytest.fixture
def push_transport(push_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        push_requests.append(request)
        return httpx.Response(200, json={"name": "projects/test/messages/1"})

    return httpx.MockTransport(handler)


@pytest_asyncio.fixture()
async def relay(push_transport):
    r = NotificationRelay(url=PUSH_URL, api_key="test-key", transport=push_transport)
    try:
        yield r
    finally:
        await r.aclose()


@pytest_asyncio.fixture()
async def client(session_factory, broadcaster, relay):
    """HTTP client with get_db, get_broadcaster and get_relay overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    app.dependency_overrides[get_relay] = lambda: relay

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

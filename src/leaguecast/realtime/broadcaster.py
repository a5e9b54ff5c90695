"""In-process fan-out of change events to live WebSocket clients.

Learn: Three small pieces:
1. LiveConnection — one open client channel with an id and a send()
2. ConnectionRegistry — the set of live connections, guarded by a lock
3. EventBroadcaster — serializes an event once, sends it to a snapshot
   of the registry, and isolates every per-connection failure

The registry lock is a threading.Lock, held only for the dict mutation
or the snapshot copy, so sync handlers running in the threadpool and
async handlers on the event loop can both register/unregister safely.
Broadcast never holds it while awaiting a send.

A connection whose send fails is NOT removed here. Removal only happens
when the WebSocket handler sees the close/error and calls unregister().
"""

import asyncio
import threading
import uuid
from typing import Awaitable, Callable, Optional

import structlog
from fastapi import WebSocket

from leaguecast.events.types import ChangeEvent, encode_event

logger = structlog.get_logger()

SendFn = Callable[[str], Awaitable[None]]


class LiveConnection:
    """An open channel to one client.

    Sends are serialized per connection so two concurrent broadcasts
    never interleave their frames on the same socket.
    """

    def __init__(self, send: SendFn, label: Optional[str] = None):
        self.id = uuid.uuid4().hex
        self.label = label or self.id[:8]
        self._send = send
        self._send_lock = asyncio.Lock()

    @classmethod
    def from_websocket(cls, websocket: WebSocket) -> "LiveConnection":
        client = websocket.client
        label = f"{client.host}:{client.port}" if client else None
        return cls(websocket.send_text, label=label)

    async def send(self, message: str) -> None:
        async with self._send_lock:
            await self._send(message)

    def __repr__(self) -> str:
        return f"LiveConnection(id={self.id!r}, label={self.label!r})"


class ConnectionRegistry:
    """Thread-safe set of currently open connections, keyed by id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._connections: dict[str, LiveConnection] = {}

    def add(self, connection: LiveConnection) -> bool:
        """Add a connection. Returns False if it was already present."""
        with self._lock:
            if connection.id in self._connections:
                return False
            self._connections[connection.id] = connection
            return True

    def discard(self, connection: LiveConnection) -> bool:
        """Remove a connection if present. Returns whether it was removed."""
        with self._lock:
            return self._connections.pop(connection.id, None) is not None

    def snapshot(self) -> list[LiveConnection]:
        with self._lock:
            return list(self._connections.values())

    def __contains__(self, connection: LiveConnection) -> bool:
        with self._lock:
            return connection.id in self._connections

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)


class EventBroadcaster:
    """Keeps the registry of live clients and fans events out to them."""

    def __init__(self, registry: Optional[ConnectionRegistry] = None):
        self.registry = registry or ConnectionRegistry()

    def register(self, connection: LiveConnection) -> None:
        if self.registry.add(connection):
            logger.info(
                "ws.registered",
                connection=connection.label,
                clients=len(self.registry),
            )
        else:
            logger.warning("ws.duplicate_registration", connection=connection.label)

    def unregister(self, connection: LiveConnection) -> None:
        if self.registry.discard(connection):
            logger.info(
                "ws.unregistered",
                connection=connection.label,
                clients=len(self.registry),
            )

    @property
    def client_count(self) -> int:
        return len(self.registry)

    async def broadcast(self, event: ChangeEvent) -> int:
        """Send one event to every registered connection.

        Serialization happens once, up front, and is allowed to raise:
        a malformed event is a bug in the caller. After that nothing
        raises: each failed send is logged and skipped.

        Returns the number of connections that accepted the message.
        """
        message = encode_event(event)
        targets = self.registry.snapshot()
        if not targets:
            return 0

        results = await asyncio.gather(
            *(self._deliver(conn, message) for conn in targets)
        )
        delivered = sum(results)
        logger.info(
            "broadcast.sent",
            event_type=event.type,
            entity=event.entity,
            delivered=delivered,
            failed=len(targets) - delivered,
        )
        return delivered

    async def _deliver(self, connection: LiveConnection, message: str) -> bool:
        try:
            await connection.send(message)
        except Exception as e:
            logger.warning(
                "broadcast.delivery_failed",
                connection=connection.label,
                error=repr(e),
            )
            return False
        return True


# Singleton — shared by the WebSocket endpoint and the write paths
broadcaster = EventBroadcaster()


def get_broadcaster() -> EventBroadcaster:
    """FastAPI dependency for the process-wide broadcaster."""
    return broadcaster

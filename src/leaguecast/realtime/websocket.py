"""WebSocket endpoint — live player change feed for frontend clients.

Learn: Each client connects to /ws/players. The handler:
1. Accepts the upgrade and wraps the socket as a LiveConnection
2. Registers it with the broadcaster, so every player write reaches it
3. Reads client frames until disconnect (only a {"type": "ping"} text
   frame means anything; binary frames are dropped)
4. Unregisters in `finally`, whatever ended the connection

Liveness is the transport's job: uvicorn pings every ws_ping_interval
seconds and drops peers that stay silent past ws_ping_timeout, which
lands us in the `finally` below.
"""

import json

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from leaguecast.realtime.broadcaster import (
    EventBroadcaster,
    LiveConnection,
    get_broadcaster,
)

logger = structlog.get_logger()
router = APIRouter()


@router.websocket("/ws/players")
async def players_websocket(
    websocket: WebSocket,
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
):
    """Stream player change events to one client until it goes away."""
    await websocket.accept()
    connection = LiveConnection.from_websocket(websocket)
    broadcaster.register(connection)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            data = message.get("text")
            if data is None:
                continue
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if isinstance(msg, dict) and msg.get("type") == "ping":
                await connection.send(json.dumps({"type": "pong"}))
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning("ws.connection_error", connection=connection.label, error=repr(e))
    finally:
        broadcaster.unregister(connection)
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close()

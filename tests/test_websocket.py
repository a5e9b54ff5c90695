"""WebSocket endpoint tests — /ws/players registration, delivery, teardown.

Learn: Starlette's TestClient runs each websocket session on its own
event loop thread. Broadcasts are pushed through that session's portal
so they execute on the loop that owns the socket.
"""

import time

import pytest
from fastapi.testclient import TestClient

from leaguecast.events.types import EntityCreated, EntityDeleted
from leaguecast.main import app
from leaguecast.realtime.broadcaster import EventBroadcaster, get_broadcaster
from leaguecast.schemas.player import PlayerRead


@pytest.fixture
def ws_broadcaster():
    b = EventBroadcaster()
    app.dependency_overrides[get_broadcaster] = lambda: b
    yield b
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(ws_broadcaster):
    return TestClient(app)


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_ping_pong(test_client):
    with test_client.websocket_connect("/ws/players") as ws:
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}


def test_connection_registers_and_unregisters(test_client, ws_broadcaster):
    with test_client.websocket_connect("/ws/players") as ws:
        ws.send_json({"type": "ping"})
        ws.receive_json()
        assert ws_broadcaster.client_count == 1

    assert _wait_for(lambda: ws_broadcaster.client_count == 0)


def test_client_receives_broadcast(test_client, ws_broadcaster):
    event = EntityCreated(payload=PlayerRead(id=1, name="Kovács", age=24, email="k@test.hu"))

    with test_client.websocket_connect("/ws/players") as ws:
        ws.send_json({"type": "ping"})
        ws.receive_json()

        delivered = ws.portal.call(ws_broadcaster.broadcast, event)
        assert delivered == 1

        msg = ws.receive_json()
        assert msg["type"] == "EntityCreated"
        assert msg["payload"] == {"id": 1, "name": "Kovács", "age": 24, "email": "k@test.hu"}


def test_two_clients_both_receive(test_client, ws_broadcaster):
    with test_client.websocket_connect("/ws/players") as a, \
            test_client.websocket_connect("/ws/players") as b:
        for ws in (a, b):
            ws.send_json({"type": "ping"})
            ws.receive_json()
        assert ws_broadcaster.client_count == 2

        assert a.portal.call(ws_broadcaster.broadcast, EntityDeleted(payload=9)) == 2

        assert a.receive_json()["payload"] == 9
        assert b.receive_json()["payload"] == 9


def test_non_json_frames_are_ignored(test_client, ws_broadcaster):
    with test_client.websocket_connect("/ws/players") as ws:
        ws.send_text("hello?")
        ws.send_json(["not", "an", "object"])
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}
        assert ws_broadcaster.client_count == 1


def test_binary_frames_are_ignored(test_client, ws_broadcaster):
    with test_client.websocket_connect("/ws/players") as ws:
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        ws.send_bytes(b"\x00")
        ws.send_bytes(b'{"type": "ping"}')
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}
        assert ws_broadcaster.client_count == 1

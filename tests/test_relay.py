"""Notification relay tests — outcomes, fire-and-forget dispatch, shutdown."""

import asyncio

import httpx
import pytest

from leaguecast.notifications.relay import NotificationRelay, SendOutcome


def _relay(handler, **kwargs) -> NotificationRelay:
    return NotificationRelay(
        url="https://push.test/send", transport=httpx.MockTransport(handler), **kwargs
    )


@pytest.mark.asyncio
async def test_send_success():
    relay = _relay(lambda req: httpx.Response(200, json={"name": "msg/1"}))
    outcome = await relay.send("tok", "Title", "Body")
    await relay.aclose()
    assert outcome == SendOutcome(ok=True)


@pytest.mark.asyncio
async def test_send_provider_rejects():
    relay = _relay(lambda req: httpx.Response(404, text="UNREGISTERED"))
    outcome = await relay.send("stale-token", "Title", "Body")
    await relay.aclose()
    assert outcome.ok is False
    assert "404" in outcome.reason
    assert "UNREGISTERED" in outcome.reason


@pytest.mark.asyncio
async def test_send_transport_error_is_an_outcome():
    """Network failures come back as a failed outcome, never an exception."""

    def boom(req):
        raise httpx.ConnectTimeout("timed out")

    relay = _relay(boom)
    outcome = await relay.send("tok", "Title", "Body")
    await relay.aclose()
    assert outcome.ok is False
    assert "transport error" in outcome.reason


@pytest.mark.asyncio
async def test_send_disabled():
    outcome = await NotificationRelay(url="").send("tok", "Title", "Body")
    assert outcome == SendOutcome(ok=False, reason="relay disabled")


@pytest.mark.asyncio
async def test_dispatch_does_not_wait():
    """dispatch() returns before the provider answers."""
    release = asyncio.Event()
    seen = []

    async def slow_handler(req):
        await release.wait()
        seen.append(req)
        return httpx.Response(200)

    relay = NotificationRelay(
        url="https://push.test/send", transport=httpx.MockTransport(slow_handler)
    )
    assert relay.dispatch("tok", "Title", "Body") is True
    await asyncio.sleep(0)
    assert relay.pending == 1
    assert seen == []

    release.set()
    await relay.drain()
    assert len(seen) == 1
    assert relay.pending == 0
    await relay.aclose()


@pytest.mark.asyncio
async def test_dispatch_failure_is_dropped():
    def boom(req):
        raise httpx.ConnectError("down")

    relay = _relay(boom)
    relay.dispatch("tok", "Title", "Body")
    await relay.drain()
    assert relay.pending == 0
    await relay.aclose()


@pytest.mark.asyncio
async def test_dispatch_disabled_schedules_nothing():
    relay = NotificationRelay(url="")
    assert relay.dispatch("tok", "Title", "Body") is False
    assert relay.pending == 0


@pytest.mark.asyncio
async def test_aclose_cancels_in_flight():
    async def never(req):
        await asyncio.sleep(3600)
        return httpx.Response(200)

    relay = NotificationRelay(url="https://push.test/send", transport=httpx.MockTransport(never))
    relay.dispatch("tok", "Title", "Body")
    await asyncio.sleep(0)

    await relay.aclose()
    assert relay.pending == 0

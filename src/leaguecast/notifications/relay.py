"""Push notification relay — fire-and-forget delivery through a push provider.

Learn: The relay posts an FCM-style message to a configured endpoint:

    POST {push_provider_url}
    Authorization: Bearer {push_provider_key}
    {"message": {"token": ..., "notification": {"title": ..., "body": ...}}}

send() awaits the provider and reports an outcome; it never raises for
transport or provider errors. dispatch() wraps send() in a detached
asyncio task so the HTTP request that triggered it returns immediately.
Failures are logged and dropped; nobody waits on a notification.

With no push_provider_url configured the relay is disabled and every
call is a logged no-op.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from leaguecast.config import settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class SendOutcome:
    ok: bool
    reason: Optional[str] = None


class NotificationRelay:
    """Delivers push notifications via an external HTTP provider."""

    def __init__(
        self,
        url: str = "",
        api_key: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def send(self, recipient: str, title: str, body: str) -> SendOutcome:
        """Deliver one notification and report how it went."""
        if not self.enabled:
            logger.warning("relay.disabled", title=title)
            return SendOutcome(ok=False, reason="relay disabled")

        payload = {
            "message": {
                "token": recipient,
                "notification": {"title": title, "body": body},
            }
        }
        logger.info("relay.sending", title=title)
        try:
            resp = await self._get_client().post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.error("relay.transport_error", title=title, error=repr(e))
            return SendOutcome(ok=False, reason=f"transport error: {e!r}")

        if resp.status_code >= 400:
            reason = f"provider returned {resp.status_code}: {resp.text[:200]}"
            logger.error("relay.rejected", title=title, status=resp.status_code)
            return SendOutcome(ok=False, reason=reason)

        logger.info("relay.sent", title=title, status=resp.status_code)
        return SendOutcome(ok=True)

    def dispatch(self, recipient: str, title: str, body: str) -> bool:
        """Schedule a send without waiting for it.

        Returns False (and schedules nothing) when the relay is disabled.
        Must be called from inside a running event loop.
        """
        if not self.enabled:
            logger.warning("relay.disabled", title=title)
            return False

        task = asyncio.create_task(self.send(recipient, title, body))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return True

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("relay.task_failed", error=repr(exc))
        elif not task.result().ok:
            logger.warning("relay.not_delivered", reason=task.result().reason)

    async def drain(self) -> None:
        """Wait for in-flight sends (used by tests and graceful shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel in-flight sends and close the HTTP client."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton — configured from settings, closed in the app lifespan
relay = NotificationRelay(
    url=settings.push_provider_url,
    api_key=settings.push_provider_key,
    timeout=settings.push_timeout_seconds,
)


def get_relay() -> NotificationRelay:
    """FastAPI dependency for the process-wide relay."""
    return relay

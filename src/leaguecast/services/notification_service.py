"""Notification service — push token storage and targeted sends.

Learn: Tokens are keyed by e-mail, one device per address; registering
again replaces the old token. Sending resolves the e-mail to a token and
hands the message to the relay without waiting for the provider.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leaguecast.db.models import FcmToken
from leaguecast.notifications.relay import NotificationRelay

logger = structlog.get_logger()


class TokenNotFoundError(Exception):
    pass


class NotificationService:
    def __init__(self, db: AsyncSession, relay: NotificationRelay):
        self.db = db
        self.relay = relay

    async def register_token(self, email: str, token: str) -> FcmToken:
        """Insert or replace the push token for an e-mail address."""
        row = await self.db.get(FcmToken, email)
        if row is None:
            row = FcmToken(email=email, token=token)
            self.db.add(row)
        else:
            row.token = token
        await self.db.commit()
        logger.info("fcm_token.registered", email=email)
        return row

    async def get_token(self, email: str) -> str | None:
        result = await self.db.execute(
            select(FcmToken.token).where(FcmToken.email == email)
        )
        return result.scalar_one_or_none()

    async def send_to_email(self, email: str, title: str, body: str) -> bool:
        """Queue a notification for the device registered to `email`.

        Raises TokenNotFoundError if no token is stored. Returns whether
        the relay accepted the job (False when it is disabled).
        """
        token = await self.get_token(email)
        if token is None:
            logger.warning("fcm_token.not_found", email=email)
            raise TokenNotFoundError(email)
        logger.info("notification.requested", email=email, title=title)
        return self.relay.dispatch(token, title, body)

"""Push notification routes — token registration and targeted sends.

Learn: /send_fcm_notification responds as soon as the message is handed
to the relay. Delivery happens in the background; a provider failure is
logged and never changes this response.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from leaguecast.db.engine import get_db
from leaguecast.notifications.relay import NotificationRelay, get_relay
from leaguecast.schemas.notification import (
    FcmTokenRegistration,
    SendNotificationRequest,
)
from leaguecast.services.notification_service import (
    NotificationService,
    TokenNotFoundError,
)

router = APIRouter()


def _svc(
    db: AsyncSession = Depends(get_db),
    relay: NotificationRelay = Depends(get_relay),
) -> NotificationService:
    return NotificationService(db, relay)


@router.post("/register_fcm_token")
async def register_fcm_token(
    body: FcmTokenRegistration,
    svc: NotificationService = Depends(_svc),
):
    await svc.register_token(body.email, body.token)
    return {"status": "ok"}


@router.post("/send_fcm_notification")
async def send_fcm_notification(
    body: SendNotificationRequest,
    svc: NotificationService = Depends(_svc),
):
    try:
        queued = await svc.send_to_email(body.target_email, body.title, body.body)
    except TokenNotFoundError:
        raise HTTPException(
            status_code=404,
            detail=f"No token registered for {body.target_email}",
        )
    return {"status": "sent" if queued else "skipped"}

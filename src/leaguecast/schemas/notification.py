"""Pydantic schemas for push-token registration and notification requests."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FcmTokenRegistration(BaseModel):
    email: str = Field(..., min_length=1, max_length=150)
    token: str = Field(..., min_length=1)


class SendNotificationRequest(BaseModel):
    target_email: str = Field(..., min_length=1, max_length=150)
    title: str = Field(..., min_length=1)
    body: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

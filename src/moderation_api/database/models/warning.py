"""Moderation warning models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from moderation_api.database.models.base import BaseDBModel
from moderation_api.database.models.base import ContentType


class Warning(BaseDBModel):  # noqa: A001
    """Warning issued to a content author."""

    user_pk: UUID
    report_pk: UUID
    content_pk: UUID
    content_type: ContentType
    reason: str
    expires_at: datetime


class WarningCreate(BaseModel):
    """Model for creating a warning."""

    user_pk: UUID
    report_pk: UUID
    content_pk: UUID
    content_type: ContentType
    reason: str
    created_at: datetime
    expires_at: datetime

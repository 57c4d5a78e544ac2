"""Notification models delivered through the notification sink."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class NotificationType(str, Enum):
    """Notification type enumeration."""

    MODERATION_ACTION = "moderation_action"
    CRITICAL_MODERATION = "critical_moderation"


class NotificationMessage(BaseModel):
    """Structured message handed to a notification sink.

    A message without ``user_pk`` is addressed to the administrators.
    """

    type: NotificationType
    title: str
    message: str
    user_pk: UUID | None = None
    report_pk: UUID | None = None
    public_note: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(use_enum_values=True)

    @property
    def is_admin_alert(self) -> bool:
        """Whether the message targets administrators rather than a user."""
        return self.user_pk is None

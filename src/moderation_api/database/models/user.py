"""User record model for the moderation API."""

from datetime import datetime

from moderation_api.database.models.base import BaseDBModel
from moderation_api.database.models.base import UserRole


class User(BaseDBModel):
    """User database model.

    Profiles are reportable content, so a user row doubles as the content
    record for ``ContentType.PROFILE``.
    """

    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    role: UserRole = UserRole.USER
    is_suspended: bool = False
    suspended_until: datetime | None = None
    suspension_reason: str | None = None

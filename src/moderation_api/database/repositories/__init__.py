"""Database repositories for the moderation API."""

from moderation_api.database.repositories.base import BaseRepository
from moderation_api.database.repositories.content import ContentRepository
from moderation_api.database.repositories.notification import NotificationRepository
from moderation_api.database.repositories.report import ReportRepository
from moderation_api.database.repositories.user import UserRepository
from moderation_api.database.repositories.warning import WarningRepository

__all__ = [
    "BaseRepository",
    "ContentRepository",
    "NotificationRepository",
    "ReportRepository",
    "UserRepository",
    "WarningRepository",
]

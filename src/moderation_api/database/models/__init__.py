"""Database models for the moderation API."""

from moderation_api.database.models.base import BaseDBModel
from moderation_api.database.models.base import ContentType
from moderation_api.database.models.base import ModerationAction
from moderation_api.database.models.base import ReportPriority
from moderation_api.database.models.base import ReportReason
from moderation_api.database.models.base import ReportStatus
from moderation_api.database.models.base import RiskLevel
from moderation_api.database.models.base import UserRole
from moderation_api.database.models.base import ViolationType
from moderation_api.database.models.notification import NotificationMessage
from moderation_api.database.models.notification import NotificationType
from moderation_api.database.models.report import ActionOutcome
from moderation_api.database.models.report import AutomatedAnalysis
from moderation_api.database.models.report import Report
from moderation_api.database.models.report import ReportCreate
from moderation_api.database.models.report import ReportDetail
from moderation_api.database.models.report import ReportSummary
from moderation_api.database.models.report import ReviewDecision
from moderation_api.database.models.statistics import ModerationStatistics
from moderation_api.database.models.statistics import Timeframe
from moderation_api.database.models.user import User
from moderation_api.database.models.warning import Warning  # noqa: A004

__all__ = [
    "ActionOutcome",
    "AutomatedAnalysis",
    "BaseDBModel",
    "ContentType",
    "ModerationAction",
    "ModerationStatistics",
    "NotificationMessage",
    "NotificationType",
    "Report",
    "ReportCreate",
    "ReportDetail",
    "ReportPriority",
    "ReportReason",
    "ReportStatus",
    "ReportSummary",
    "ReviewDecision",
    "RiskLevel",
    "Timeframe",
    "User",
    "UserRole",
    "ViolationType",
    "Warning",
]

"""Base models and types for the moderation API database."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict


class UserRole(str, Enum):
    """User role enumeration."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ContentType(str, Enum):
    """Kinds of content that can be reported."""

    POST = "post"
    COMMENT = "comment"
    MESSAGE = "message"
    PROFILE = "profile"
    PRODUCT = "product"


class ReportReason(str, Enum):
    """Reason a reporter gives for a report."""

    SPAM = "spam"
    HARASSMENT = "harassment"
    INAPPROPRIATE = "inappropriate"
    MISINFORMATION = "misinformation"
    HATE_SPEECH = "hate_speech"
    VIOLENCE = "violence"
    OTHER = "other"


class ReportStatus(str, Enum):
    """Report lifecycle status."""

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    REVIEWED = "reviewed"
    ESCALATED = "escalated"


OPEN_REPORT_STATUSES = (ReportStatus.PENDING, ReportStatus.UNDER_REVIEW)


class ReportPriority(str, Enum):
    """Review urgency tier."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ModerationAction(str, Enum):
    """Enforcement decision taken by a reviewer."""

    APPROVE = "approve"
    REMOVE = "remove"
    WARN = "warn"
    SUSPEND_USER = "suspend_user"
    ESCALATE = "escalate"


class RiskLevel(str, Enum):
    """Risk level returned by the text-risk classifier."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ViolationType(str, Enum):
    """Violation category returned by the text-risk classifier."""

    NONE = "none"
    SPAM = "spam"
    HARASSMENT = "harassment"
    INAPPROPRIATE = "inappropriate"
    MISINFORMATION = "misinformation"
    HATE_SPEECH = "hate_speech"
    VIOLENCE = "violence"


class BaseDBModel(BaseModel):
    """Base model for database entities."""

    pk: UUID
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

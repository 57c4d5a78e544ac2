"""Moderation report models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from moderation_api.database.models.base import BaseDBModel
from moderation_api.database.models.base import ContentType
from moderation_api.database.models.base import ModerationAction
from moderation_api.database.models.base import ReportPriority
from moderation_api.database.models.base import ReportReason
from moderation_api.database.models.base import ReportStatus
from moderation_api.database.models.base import RiskLevel
from moderation_api.database.models.base import ViolationType


class AutomatedAnalysis(BaseModel):
    """Advisory verdict attached to a report at creation."""

    risk_level: RiskLevel
    violation_type: ViolationType = ViolationType.NONE
    confidence: float = Field(ge=0.0, le=1.0)
    explanation: str = ""

    model_config = ConfigDict(use_enum_values=True)


class ActionOutcome(BaseModel):
    """Result of executing a moderation action."""

    success: bool
    action: ModerationAction
    executed_at: datetime
    error: str | None = None

    model_config = ConfigDict(use_enum_values=True)


class Report(BaseDBModel):
    """Moderation report database model."""

    content_pk: UUID
    content_type: ContentType
    content_author_pk: UUID | None = None
    reporter_pk: UUID
    reason: ReportReason
    description: str | None = None
    evidence: list[str] = Field(default_factory=list)
    content_snapshot: dict[str, Any] | None = None
    automated_analysis: AutomatedAnalysis | None = None
    status: ReportStatus = ReportStatus.PENDING
    priority: ReportPriority

    reviewed_by_pk: UUID | None = None
    reviewed_at: datetime | None = None
    action: ModerationAction | None = None
    review_reason: str | None = None
    duration_days: int | None = None
    public_note: str | None = None
    action_result: ActionOutcome | None = None


class ReportCreate(BaseModel):
    """Model for submitting a new report."""

    content_id: UUID
    content_type: ContentType
    reason: ReportReason
    description: str | None = Field(None, min_length=10, max_length=500)
    evidence: list[str] = Field(default_factory=list, max_length=20)


class ReportSubmitted(BaseModel):
    """Response returned to the reporter after intake."""

    report_id: UUID
    status: str = "submitted"
    estimated_review_time: str


class ReviewDecision(BaseModel):
    """Reviewer decision for a report."""

    action: ModerationAction
    reason: str = Field(..., min_length=5, max_length=200)
    duration: int | None = Field(
        None, ge=1, le=365, description="Suspension length in days"
    )
    public_note: str | None = Field(None, max_length=1000)

    model_config = ConfigDict(use_enum_values=True)


class ReviewResult(BaseModel):
    """Response returned after a review decision was processed."""

    report_id: UUID
    action: ModerationAction
    action_result: ActionOutcome
    reviewed_at: datetime | None
    status: ReportStatus

    model_config = ConfigDict(use_enum_values=True)


class ReportSummary(BaseModel):
    """List view of a report. Never carries the content snapshot."""

    pk: UUID
    content_pk: UUID
    content_type: ContentType
    content_author_pk: UUID | None
    reporter_pk: UUID
    reason: ReportReason
    description: str | None
    evidence: list[str]
    automated_analysis: AutomatedAnalysis | None
    status: ReportStatus
    priority: ReportPriority
    created_at: datetime
    updated_at: datetime | None
    reviewed_by_pk: UUID | None
    reviewed_at: datetime | None
    action: ModerationAction | None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class IdentitySummary(BaseModel):
    """Lightweight identity shown next to a report."""

    display_name: str | None = None
    avatar_url: str | None = None
    role: str | None = None


class ReportDetail(Report):
    """Full report joined with reporter and author identities."""

    reporter_info: IdentitySummary | None = None
    author_info: IdentitySummary | None = None


class Pagination(BaseModel):
    """Pagination block for queue listings."""

    current_page: int
    total_pages: int
    total_count: int
    has_more: bool


class QueuePage(BaseModel):
    """One page of the review queue."""

    reports: list[ReportSummary]
    pagination: Pagination

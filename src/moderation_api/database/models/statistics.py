"""Moderation statistics models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel
from pydantic import Field


class Timeframe(str, Enum):
    """Lookback windows supported by the statistics endpoint."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"

    @property
    def days(self) -> int:
        """Length of the window in days."""
        return {"24h": 1, "7d": 7, "30d": 30}[self.value]


class ActionsSummary(BaseModel):
    """Counts of terminal enforcement actions."""

    approved: int = 0
    removed: int = 0
    warned: int = 0
    suspended: int = 0


class ModerationStatistics(BaseModel):
    """Rollup over reports created within a time window."""

    timeframe: Timeframe
    window_start: datetime
    total_reports: int = 0
    pending_reports: int = 0
    reviewed_reports: int = 0
    escalated_reports: int = 0
    reports_by_reason: dict[str, int] = Field(default_factory=dict)
    reports_by_content_type: dict[str, int] = Field(default_factory=dict)
    reports_by_priority: dict[str, int] = Field(default_factory=dict)
    actions_summary: ActionsSummary = Field(default_factory=ActionsSummary)
    average_review_time: float = Field(
        default=0.0, description="Average hours from creation to review"
    )

"""Moderation statistics over a lookback window."""

import logging

from collections import Counter
from datetime import UTC
from datetime import datetime
from datetime import timedelta

from moderation_api.database.models.base import ModerationAction
from moderation_api.database.models.base import ReportStatus
from moderation_api.database.models.report import Report
from moderation_api.database.models.statistics import ActionsSummary
from moderation_api.database.models.statistics import ModerationStatistics
from moderation_api.database.models.statistics import Timeframe
from moderation_api.database.repositories.report import ReportRepository
from moderation_api.services.exceptions import PersistenceError

logger = logging.getLogger(__name__)

# Action -> ActionsSummary field
ACTION_SUMMARY_FIELDS = {
    ModerationAction.APPROVE: "approved",
    ModerationAction.REMOVE: "removed",
    ModerationAction.WARN: "warned",
    ModerationAction.SUSPEND_USER: "suspended",
}


def summarize_actions(reports: list[Report]) -> ActionsSummary:
    """Count terminal actions. Escalations are counted by status instead."""
    counts: Counter[str] = Counter()
    for report in reports:
        if report.action is None:
            continue
        field = ACTION_SUMMARY_FIELDS.get(ModerationAction(report.action))
        if field:
            counts[field] += 1
    return ActionsSummary(**counts)


def average_review_hours(reports: list[Report]) -> float:
    """Mean hours between creation and review, rounded to two decimals."""
    durations = [
        (report.reviewed_at - report.created_at).total_seconds() / 3600
        for report in reports
        if report.reviewed_at is not None and report.created_at is not None
    ]
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations), 2)


class StatisticsService:
    """Service for moderation statistics."""

    def __init__(self, report_repo: ReportRepository | None = None) -> None:
        self.report_repo = report_repo or ReportRepository()

    async def get_statistics(
        self, timeframe: Timeframe = Timeframe.WEEK
    ) -> ModerationStatistics:
        """Aggregate reports created within the timeframe."""
        timeframe = Timeframe(timeframe)
        window_start = datetime.now(UTC) - timedelta(days=timeframe.days)

        try:
            reports = await self.report_repo.get_reports_since(window_start)
        except Exception as e:
            logger.exception(f"Failed to load reports since {window_start}")
            raise PersistenceError("Failed to load moderation statistics") from e

        statuses = Counter(report.status for report in reports)

        return ModerationStatistics(
            timeframe=timeframe,
            window_start=window_start,
            total_reports=len(reports),
            pending_reports=statuses[ReportStatus.PENDING.value],
            reviewed_reports=statuses[ReportStatus.REVIEWED.value],
            escalated_reports=statuses[ReportStatus.ESCALATED.value],
            reports_by_reason=dict(Counter(report.reason for report in reports)),
            reports_by_content_type=dict(
                Counter(report.content_type for report in reports)
            ),
            reports_by_priority=dict(Counter(report.priority for report in reports)),
            actions_summary=summarize_actions(reports),
            average_review_time=average_review_hours(reports),
        )


def get_statistics_service() -> StatisticsService:
    """Get statistics service instance."""
    return StatisticsService()

"""Report intake and review queue business logic."""

import logging
import math

from datetime import UTC
from datetime import datetime
from typing import Any
from uuid import UUID

import asyncpg

from moderation_api.auth.models import Identity
from moderation_api.database.models.base import ContentType
from moderation_api.database.models.base import ReportPriority
from moderation_api.database.models.base import ReportStatus
from moderation_api.database.models.base import RiskLevel
from moderation_api.database.models.notification import NotificationMessage
from moderation_api.database.models.notification import NotificationType
from moderation_api.database.models.report import AutomatedAnalysis
from moderation_api.database.models.report import IdentitySummary
from moderation_api.database.models.report import Pagination
from moderation_api.database.models.report import QueuePage
from moderation_api.database.models.report import Report
from moderation_api.database.models.report import ReportCreate
from moderation_api.database.models.report import ReportDetail
from moderation_api.database.models.report import ReportSubmitted
from moderation_api.database.models.report import ReportSummary
from moderation_api.database.repositories.content import ContentRepository
from moderation_api.database.repositories.report import ReportRepository
from moderation_api.database.repositories.user import UserRepository
from moderation_api.services.exceptions import DuplicateReportError
from moderation_api.services.exceptions import PersistenceError
from moderation_api.services.exceptions import ReportAlreadyReviewedError
from moderation_api.services.exceptions import ReportNotFoundError
from moderation_api.services.notification_sink import NotificationSink
from moderation_api.services.notification_sink import get_notification_sink
from moderation_api.services.priority import calculate_priority
from moderation_api.services.priority import estimated_review_time
from moderation_api.services.risk_classifier import RiskAssessor
from moderation_api.services.risk_classifier import get_risk_assessor

logger = logging.getLogger(__name__)

# Fields that may name the author of a content record, in lookup order
AUTHOR_FIELDS = ("author_pk", "user_pk", "sender_pk", "owner_pk")

ALL_STATUSES = "all"


def resolve_author(content: dict[str, Any], content_pk: UUID) -> UUID:
    """Find the author of a content record.

    Falls back to the content id itself, which is the user id for profiles.
    """
    for field in AUTHOR_FIELDS:
        value = content.get(field)
        if value is not None:
            return value
    return content_pk


class ReportService:
    """Service for report intake and the review queue."""

    def __init__(
        self,
        report_repo: ReportRepository | None = None,
        content_repo: ContentRepository | None = None,
        user_repo: UserRepository | None = None,
        risk_assessor: RiskAssessor | None = None,
        notification_sink: NotificationSink | None = None,
    ) -> None:
        """Initialize the report service."""
        self.report_repo = report_repo or ReportRepository()
        self.content_repo = content_repo or ContentRepository()
        self.user_repo = user_repo or UserRepository()
        self._risk_assessor = risk_assessor
        self.notification_sink = notification_sink or get_notification_sink()

    @property
    def risk_assessor(self) -> RiskAssessor:
        """Risk assessor, resolved on first use."""
        if self._risk_assessor is None:
            self._risk_assessor = get_risk_assessor()
        return self._risk_assessor

    async def submit_report(
        self, report_data: ReportCreate, reporter: Identity
    ) -> ReportSubmitted:
        """Accept a report, assess it and queue it for review."""
        content_pk = report_data.content_id
        content_type = report_data.content_type

        try:
            already_reported = await self.report_repo.has_open_report(
                content_pk, reporter.user_pk
            )
        except Exception as e:
            logger.exception(f"Failed to check open reports for {content_pk}")
            raise PersistenceError("Failed to submit report") from e

        if already_reported:
            raise DuplicateReportError("You have already reported this content")

        content = await self._fetch_content(content_type, content_pk)

        author_pk = None
        analysis = None
        if content is not None:
            author_pk = resolve_author(content, content_pk)
            analysis = await self.risk_assessor.assess(content, content_type)

        priority = calculate_priority(report_data.reason, analysis)

        report = await self._persist_report(
            {
                "content_pk": content_pk,
                "content_type": content_type.value,
                "content_author_pk": author_pk,
                "reporter_pk": reporter.user_pk,
                "reason": report_data.reason.value,
                "description": report_data.description,
                "evidence": report_data.evidence,
                "content_snapshot": content,
                "automated_analysis": (
                    analysis.model_dump(mode="json") if analysis else None
                ),
                "status": ReportStatus.PENDING.value,
                "priority": priority.value,
            }
        )
        logger.info(
            f"Report {report.pk} created for {content_type.value} {content_pk} "
            f"with priority {priority.value}"
        )

        if priority == ReportPriority.HIGH or self._is_high_risk(analysis):
            await self._flag_content(report)

        if priority == ReportPriority.CRITICAL:
            await self._alert_administrators(report)

        return ReportSubmitted(
            report_id=report.pk,
            estimated_review_time=estimated_review_time(priority),
        )

    async def _fetch_content(
        self, content_type: ContentType, content_pk: UUID
    ) -> dict[str, Any] | None:
        try:
            return await self.content_repo.get_content(content_type, content_pk)
        except Exception:
            logger.exception(f"Failed to fetch {content_type.value} {content_pk}")
            return None

    async def _persist_report(self, data: dict[str, Any]) -> Report:
        try:
            return await self.report_repo.create_report(data)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateReportError(
                "You have already reported this content"
            ) from e
        except Exception as e:
            logger.exception("Failed to store report")
            raise PersistenceError("Failed to submit report") from e

    def _is_high_risk(self, analysis: AutomatedAnalysis | None) -> bool:
        return analysis is not None and analysis.risk_level == RiskLevel.HIGH

    async def _flag_content(self, report: Report) -> None:
        try:
            flagged = await self.content_repo.flag_for_review(
                report.content_type,
                report.content_pk,
                report.pk,
                datetime.now(UTC),
            )
        except Exception:
            logger.exception(
                f"Failed to flag {report.content_type} {report.content_pk} for review"
            )
            return

        if not flagged:
            logger.warning(
                f"Content {report.content_type} {report.content_pk} not found to flag"
            )

    async def _alert_administrators(self, report: Report) -> None:
        message = NotificationMessage(
            type=NotificationType.CRITICAL_MODERATION,
            title="Critical content report",
            message=(
                f"A {report.content_type} was reported for {report.reason} "
                f"and needs immediate review."
            ),
            report_pk=report.pk,
            metadata={
                "content_pk": str(report.content_pk),
                "content_type": report.content_type,
                "reason": report.reason,
                "priority": report.priority,
            },
        )
        if not await self.notification_sink.deliver(message):
            logger.warning(f"Administrator alert for report {report.pk} not delivered")

    async def list_queue(
        self,
        status: str = ReportStatus.PENDING.value,
        priority: str | None = None,
        content_type: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> QueuePage:
        """List reports newest first, one page at a time."""
        status_filter = None if status == ALL_STATUSES else status
        offset = (page - 1) * limit

        try:
            reports = await self.report_repo.list_reports(
                status=status_filter,
                priority=priority,
                content_type=content_type,
                limit=limit,
                offset=offset,
            )
            total_count = await self.report_repo.count_by_status(status_filter)
        except Exception as e:
            logger.exception("Failed to list the review queue")
            raise PersistenceError("Failed to load the review queue") from e

        return QueuePage(
            reports=[ReportSummary.model_validate(report) for report in reports],
            pagination=Pagination(
                current_page=page,
                total_pages=math.ceil(total_count / limit),
                total_count=total_count,
                has_more=len(reports) == limit,
            ),
        )

    async def _load_report(self, report_pk: UUID) -> Report:
        try:
            report = await self.report_repo.get_by_pk(report_pk)
        except Exception as e:
            logger.exception(f"Failed to load report {report_pk}")
            raise PersistenceError("Failed to load report") from e

        if report is None:
            raise ReportNotFoundError(f"Report {report_pk} not found")
        return report

    async def get_report_detail(self, report_pk: UUID) -> ReportDetail:
        """Get a report with reporter and author identity summaries."""
        report = await self._load_report(report_pk)

        return ReportDetail(
            **report.model_dump(),
            reporter_info=await self._identity_summary(report.reporter_pk),
            author_info=await self._identity_summary(report.content_author_pk),
        )

    async def _identity_summary(self, user_pk: UUID | None) -> IdentitySummary | None:
        if user_pk is None:
            return None

        try:
            user = await self.user_repo.get_by_pk(user_pk)
        except Exception:
            logger.warning(f"Failed to look up identity {user_pk}", exc_info=True)
            return None

        if user is None:
            return None

        return IdentitySummary(
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            role=user.role,
        )

    async def claim_report(self, report_pk: UUID, reviewer: Identity) -> Report:
        """Move a pending report to under_review."""
        report = await self._load_report(report_pk)

        if report.status == ReportStatus.UNDER_REVIEW:
            return report

        if report.status != ReportStatus.PENDING:
            raise ReportAlreadyReviewedError(f"Report {report_pk} is {report.status}")

        try:
            claimed = await self.report_repo.mark_under_review(report_pk)
            current = claimed or await self.report_repo.get_by_pk(report_pk)
        except Exception as e:
            logger.exception(f"Failed to claim report {report_pk}")
            raise PersistenceError("Failed to claim report") from e

        if claimed is None:
            # Lost a race with another claim or a review
            if current is not None and current.status == ReportStatus.UNDER_REVIEW:
                return current
            raise ReportAlreadyReviewedError(f"Report {report_pk} is no longer open")

        logger.info(f"Report {report_pk} claimed by {reviewer.user_pk}")
        return claimed


def get_report_service() -> ReportService:
    """Get report service instance."""
    return ReportService()

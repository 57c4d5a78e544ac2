"""Executes reviewer decisions against content and user records."""

import logging

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from uuid import UUID

from asyncpg import Connection

from moderation_api.auth.models import Identity
from moderation_api.config.settings import ModerationSettings
from moderation_api.config.settings import get_moderation_settings
from moderation_api.database.connection import get_db_transaction
from moderation_api.database.models.base import OPEN_REPORT_STATUSES
from moderation_api.database.models.base import ModerationAction
from moderation_api.database.models.base import ReportStatus
from moderation_api.database.models.notification import NotificationMessage
from moderation_api.database.models.notification import NotificationType
from moderation_api.database.models.report import ActionOutcome
from moderation_api.database.models.report import Report
from moderation_api.database.models.report import ReviewDecision
from moderation_api.database.models.report import ReviewResult
from moderation_api.database.models.warning import WarningCreate
from moderation_api.database.repositories.content import ContentRepository
from moderation_api.database.repositories.report import ReportRepository
from moderation_api.database.repositories.user import UserRepository
from moderation_api.database.repositories.warning import WarningRepository
from moderation_api.services.exceptions import PersistenceError
from moderation_api.services.exceptions import ReportAlreadyReviewedError
from moderation_api.services.exceptions import ReportNotFoundError
from moderation_api.services.notification_sink import NotificationSink
from moderation_api.services.notification_sink import get_notification_sink

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Applies review decisions and records their outcome on the report."""

    def __init__(
        self,
        report_repo: ReportRepository | None = None,
        content_repo: ContentRepository | None = None,
        user_repo: UserRepository | None = None,
        warning_repo: WarningRepository | None = None,
        notification_sink: NotificationSink | None = None,
        settings: ModerationSettings | None = None,
    ) -> None:
        """Initialize the action executor."""
        self.report_repo = report_repo or ReportRepository()
        self.content_repo = content_repo or ContentRepository()
        self.user_repo = user_repo or UserRepository()
        self.warning_repo = warning_repo or WarningRepository()
        self.notification_sink = notification_sink or get_notification_sink()
        self.settings = settings or get_moderation_settings()

    async def review_report(
        self, report_pk: UUID, decision: ReviewDecision, reviewer: Identity
    ) -> ReviewResult:
        """Apply a reviewer's decision to a report.

        The enforcement mutation and the review write share one transaction.
        When the mutation fails the transaction is rolled back and only the
        failed outcome is recorded, leaving the report open for a retry.
        """
        try:
            report = await self.report_repo.get_by_pk(report_pk)
        except Exception as e:
            logger.exception(f"Failed to load report {report_pk}")
            raise PersistenceError("Failed to load report") from e

        if report is None:
            raise ReportNotFoundError(f"Report {report_pk} not found")

        if report.status not in OPEN_REPORT_STATUSES:
            raise ReportAlreadyReviewedError(
                f"Report {report_pk} has already been {report.status}"
            )

        executed_at = datetime.now(UTC)

        try:
            reviewed = await self._apply_and_record(
                report, decision, reviewer, executed_at
            )
        except ReportAlreadyReviewedError:
            raise
        except Exception as e:
            logger.exception(
                f"Failed to execute {decision.action} for report {report_pk}"
            )
            outcome = ActionOutcome(
                success=False,
                action=decision.action,
                executed_at=executed_at,
                error=str(e) or type(e).__name__,
            )
            await self._record_failure(report_pk, outcome)
            return ReviewResult(
                report_id=report_pk,
                action=decision.action,
                action_result=outcome,
                reviewed_at=None,
                status=report.status,
            )

        logger.info(
            f"Applied {decision.action} to report {report_pk} by {reviewer.user_pk}"
        )

        if decision.action != ModerationAction.APPROVE and report.content_author_pk:
            await self._notify_author(report, decision)

        return ReviewResult(
            report_id=report_pk,
            action=decision.action,
            action_result=reviewed.action_result,
            reviewed_at=reviewed.reviewed_at,
            status=reviewed.status,
        )

    async def _apply_and_record(
        self,
        report: Report,
        decision: ReviewDecision,
        reviewer: Identity,
        executed_at: datetime,
    ) -> Report:
        async with get_db_transaction() as connection:
            await self.execute_action(connection, report, decision, executed_at)

            outcome = ActionOutcome(
                success=True, action=decision.action, executed_at=executed_at
            )
            status = (
                ReportStatus.ESCALATED
                if decision.action == ModerationAction.ESCALATE
                else ReportStatus.REVIEWED
            )
            reviewed = await self.report_repo.record_review(
                report.pk,
                {
                    "status": status.value,
                    "reviewed_by_pk": reviewer.user_pk,
                    "reviewed_at": executed_at,
                    "action": decision.action,
                    "review_reason": decision.reason,
                    "duration_days": decision.duration,
                    "public_note": decision.public_note,
                    "action_result": outcome.model_dump(mode="json"),
                },
                connection,
            )
            if reviewed is None:
                # Raising inside the block rolls the mutation back
                raise ReportAlreadyReviewedError(
                    f"Report {report.pk} was reviewed concurrently"
                )

            return reviewed

    async def execute_action(
        self,
        connection: Connection,
        report: Report,
        decision: ReviewDecision,
        executed_at: datetime,
    ) -> None:
        """Apply the enforcement mutation for a decision.

        Every mutation is keyed by the report id, so running it again for the
        same report changes nothing. Raises ValueError when the target record
        cannot be found.
        """
        action = ModerationAction(decision.action)

        if action == ModerationAction.REMOVE:
            changed = await self.content_repo.mark_removed(
                report.content_type,
                report.content_pk,
                decision.reason,
                report.pk,
                executed_at,
                connection,
            )
            if not changed:
                logger.info(f"Content {report.content_pk} was already removed")

        elif action == ModerationAction.WARN:
            author_pk = self._require_author(report, action)
            warning = await self.warning_repo.create_warning(
                WarningCreate(
                    user_pk=author_pk,
                    report_pk=report.pk,
                    content_pk=report.content_pk,
                    content_type=report.content_type,
                    reason=decision.reason,
                    created_at=executed_at,
                    expires_at=executed_at
                    + timedelta(days=self.settings.warning_expiry_days),
                ),
                connection,
            )
            if warning is None:
                logger.info(f"Warning for report {report.pk} already exists")

        elif action == ModerationAction.SUSPEND_USER:
            author_pk = self._require_author(report, action)
            days = decision.duration or self.settings.default_suspension_days
            changed = await self.user_repo.suspend_user(
                author_pk,
                executed_at + timedelta(days=days),
                decision.reason,
                report.pk,
                connection,
            )
            if not changed:
                logger.info(f"Suspension for report {report.pk} already applied")

    def _require_author(self, report: Report, action: ModerationAction) -> UUID:
        if report.content_author_pk is None:
            raise ValueError(
                f"Cannot {action.value} without a known content author"
            )
        return report.content_author_pk

    async def _record_failure(self, report_pk: UUID, outcome: ActionOutcome) -> None:
        try:
            await self.report_repo.record_action_failure(report_pk, outcome)
        except Exception:
            logger.exception(f"Failed to record action failure for report {report_pk}")

    async def _notify_author(self, report: Report, decision: ReviewDecision) -> None:
        message = NotificationMessage(
            type=NotificationType.MODERATION_ACTION,
            title="Moderation action taken",
            message=(
                f"Action taken on your {report.content_type}: {decision.action}. "
                f"Reason: {decision.reason}"
            ),
            user_pk=report.content_author_pk,
            report_pk=report.pk,
            public_note=decision.public_note,
            metadata={
                "action": decision.action,
                "reason": decision.reason,
                "content_type": report.content_type,
                "content_pk": str(report.content_pk),
            },
        )
        if not await self.notification_sink.deliver(message):
            logger.warning(f"Moderation notice for report {report.pk} not delivered")


def get_action_executor() -> ActionExecutor:
    """Get action executor instance."""
    return ActionExecutor()

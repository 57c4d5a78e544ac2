"""Moderation API endpoints for reporting, review and statistics."""

from typing import Annotated
from typing import Literal
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import status

from moderation_api.auth.dependencies import get_current_identity
from moderation_api.auth.dependencies import require_moderator
from moderation_api.auth.models import Identity
from moderation_api.database.connection import db
from moderation_api.database.models.base import ContentType
from moderation_api.database.models.base import ReportPriority
from moderation_api.database.models.report import QueuePage
from moderation_api.database.models.report import Report
from moderation_api.database.models.report import ReportCreate
from moderation_api.database.models.report import ReportDetail
from moderation_api.database.models.report import ReportSubmitted
from moderation_api.database.models.report import ReviewDecision
from moderation_api.database.models.report import ReviewResult
from moderation_api.database.models.statistics import ModerationStatistics
from moderation_api.database.models.statistics import Timeframe
from moderation_api.services.action_executor import ActionExecutor
from moderation_api.services.action_executor import get_action_executor
from moderation_api.services.exceptions import DuplicateReportError
from moderation_api.services.exceptions import ModerationError
from moderation_api.services.exceptions import PersistenceError
from moderation_api.services.exceptions import ReportAlreadyReviewedError
from moderation_api.services.exceptions import ReportNotFoundError
from moderation_api.services.report_service import ReportService
from moderation_api.services.report_service import get_report_service
from moderation_api.services.statistics_service import StatisticsService
from moderation_api.services.statistics_service import get_statistics_service

router = APIRouter(prefix="/moderation", tags=["moderation"])

ERROR_STATUS_CODES: dict[type[ModerationError], int] = {
    DuplicateReportError: status.HTTP_409_CONFLICT,
    ReportNotFoundError: status.HTTP_404_NOT_FOUND,
    ReportAlreadyReviewedError: status.HTTP_409_CONFLICT,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

QueueStatus = Literal["pending", "under_review", "reviewed", "escalated", "all"]


def _http_error(error: ModerationError) -> HTTPException:
    return HTTPException(
        status_code=ERROR_STATUS_CODES.get(
            type(error), status.HTTP_400_BAD_REQUEST
        ),
        detail={"error": error.code, "message": str(error)},
    )


@router.post("/report", status_code=status.HTTP_201_CREATED)
async def submit_report(
    report_data: ReportCreate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
) -> ReportSubmitted:
    """Report a piece of content for moderation."""
    try:
        return await report_service.submit_report(report_data, identity)
    except ModerationError as e:
        raise _http_error(e) from e


@router.get("/queue")
async def get_queue(
    _: Annotated[Identity, Depends(require_moderator)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
    status_filter: Annotated[QueueStatus, Query(alias="status")] = "pending",
    priority: Annotated[ReportPriority | None, Query()] = None,
    content_type: Annotated[ContentType | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> QueuePage:
    """List reports awaiting review (moderators only)."""
    try:
        return await report_service.list_queue(
            status=status_filter,
            priority=priority.value if priority else None,
            content_type=content_type.value if content_type else None,
            page=page,
            limit=limit,
        )
    except ModerationError as e:
        raise _http_error(e) from e


@router.get("/report/{report_id}")
async def get_report(
    report_id: UUID,
    _: Annotated[Identity, Depends(require_moderator)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
) -> ReportDetail:
    """Get a report with reporter and author details (moderators only)."""
    try:
        return await report_service.get_report_detail(report_id)
    except ModerationError as e:
        raise _http_error(e) from e


@router.put("/report/{report_id}/claim")
async def claim_report(
    report_id: UUID,
    identity: Annotated[Identity, Depends(require_moderator)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
) -> Report:
    """Start reviewing a pending report (moderators only)."""
    try:
        return await report_service.claim_report(report_id, identity)
    except ModerationError as e:
        raise _http_error(e) from e


@router.put("/review/{report_id}")
async def review_report(
    report_id: UUID,
    decision: ReviewDecision,
    identity: Annotated[Identity, Depends(require_moderator)],
    action_executor: Annotated[ActionExecutor, Depends(get_action_executor)],
) -> ReviewResult:
    """Apply a moderation decision to a report (moderators only)."""
    try:
        return await action_executor.review_report(report_id, decision, identity)
    except ModerationError as e:
        raise _http_error(e) from e


@router.get("/statistics")
async def get_statistics(
    _: Annotated[Identity, Depends(require_moderator)],
    statistics_service: Annotated[
        StatisticsService, Depends(get_statistics_service)
    ],
    timeframe: Annotated[Timeframe, Query()] = Timeframe.WEEK,
) -> ModerationStatistics:
    """Get moderation statistics for a time window (moderators only)."""
    try:
        return await statistics_service.get_statistics(timeframe)
    except ModerationError as e:
        raise _http_error(e) from e


@router.get("/health")
async def moderation_health() -> dict:
    """Health of the moderation service and its database."""
    db_healthy = await db.health_check()

    return {
        "status": "ok" if db_healthy else "error",
        "service": "moderation",
        "database": {
            "healthy": db_healthy,
            "pool": await db.get_pool_stats(),
        },
    }

"""Tests for the moderation API endpoints."""

from datetime import UTC
from datetime import datetime
from unittest.mock import AsyncMock
from unittest.mock import MagicMock
from unittest.mock import patch
from uuid import uuid4

import asyncpg
import pytest

from fastapi import FastAPI
from fastapi import status
from fastapi.testclient import TestClient

from moderation_api.api.moderation import router as moderation_router
from moderation_api.auth.dependencies import get_current_identity
from moderation_api.database.models.base import ModerationAction
from moderation_api.database.models.base import ReportStatus
from moderation_api.database.models.report import ActionOutcome
from moderation_api.database.models.report import IdentitySummary
from moderation_api.database.models.report import Pagination
from moderation_api.database.models.report import QueuePage
from moderation_api.database.models.report import ReportDetail
from moderation_api.database.models.report import ReportSubmitted
from moderation_api.database.models.report import ReportSummary
from moderation_api.database.models.report import ReviewResult
from moderation_api.database.models.statistics import ModerationStatistics
from moderation_api.database.models.statistics import Timeframe
from moderation_api.services.action_executor import get_action_executor
from moderation_api.services.exceptions import DuplicateReportError
from moderation_api.services.exceptions import PersistenceError
from moderation_api.services.exceptions import ReportAlreadyReviewedError
from moderation_api.services.exceptions import ReportNotFoundError
from moderation_api.services.report_service import ReportService
from moderation_api.services.report_service import get_report_service
from moderation_api.services.statistics_service import get_statistics_service


def create_test_app():
    """Create FastAPI test app with just the moderation router."""
    test_app = FastAPI(title="Test API")
    test_app.include_router(moderation_router, prefix="/api/v1")
    return test_app


@pytest.fixture
def mock_report_service():
    """Mock report service."""
    return AsyncMock()


@pytest.fixture
def mock_action_executor():
    """Mock action executor."""
    return AsyncMock()


@pytest.fixture
def mock_statistics_service():
    """Mock statistics service."""
    return AsyncMock()


@pytest.fixture
def test_app(mock_report_service, mock_action_executor, mock_statistics_service):
    """Test app with services replaced by mocks."""
    app = create_test_app()
    app.dependency_overrides[get_report_service] = lambda: mock_report_service
    app.dependency_overrides[get_action_executor] = lambda: mock_action_executor
    app.dependency_overrides[get_statistics_service] = (
        lambda: mock_statistics_service
    )
    return app


@pytest.fixture
def as_identity(test_app):
    """Authenticate requests as the given identity."""

    def _as_identity(identity):
        test_app.dependency_overrides[get_current_identity] = lambda: identity
        return TestClient(test_app)

    return _as_identity


@pytest.fixture
def report_payload():
    """Valid report submission body."""
    return {
        "content_id": str(uuid4()),
        "content_type": "post",
        "reason": "spam",
        "description": "Advertising a pyramid scheme",
    }


@pytest.fixture
def review_payload():
    """Valid review decision body."""
    return {"action": "remove", "reason": "Obvious spam"}


class TestSubmitReport:
    """Test POST /moderation/report."""

    def test_requires_token(self, test_app, report_payload):
        """Test anonymous callers are rejected."""
        client = TestClient(test_app)

        response = client.post("/api/v1/moderation/report", json=report_payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_submit_success(
        self, as_identity, reporter, mock_report_service, report_payload
    ):
        """Test a report is accepted."""
        report_id = uuid4()
        mock_report_service.submit_report.return_value = ReportSubmitted(
            report_id=report_id, estimated_review_time="24 hours"
        )

        response = as_identity(reporter).post(
            "/api/v1/moderation/report", json=report_payload
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == {
            "report_id": str(report_id),
            "status": "submitted",
            "estimated_review_time": "24 hours",
        }
        report_data, identity = mock_report_service.submit_report.call_args.args
        assert report_data.reason == "spam"
        assert identity == reporter

    def test_submit_duplicate(
        self, as_identity, reporter, mock_report_service, report_payload
    ):
        """Test a second open report on the same content conflicts."""
        mock_report_service.submit_report.side_effect = DuplicateReportError(
            "You have already reported this content"
        )

        response = as_identity(reporter).post(
            "/api/v1/moderation/report", json=report_payload
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == {
            "error": "already_reported",
            "message": "You have already reported this content",
        }

    def test_submit_persistence_failure(
        self, as_identity, reporter, mock_report_service, report_payload
    ):
        """Test storage failures surface as server errors."""
        mock_report_service.submit_report.side_effect = PersistenceError(
            "Failed to submit report"
        )

        response = as_identity(reporter).post(
            "/api/v1/moderation/report", json=report_payload
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"]["error"] == "persistence_error"

    def test_submit_store_unreachable(self, test_app, reporter, report_payload):
        """Test a failing duplicate check returns a persistence error body."""
        report_repo = AsyncMock()
        report_repo.has_open_report.side_effect = asyncpg.PostgresConnectionError(
            "connection lost"
        )
        service = ReportService(
            report_repo=report_repo,
            content_repo=AsyncMock(),
            user_repo=AsyncMock(),
            risk_assessor=AsyncMock(),
            notification_sink=AsyncMock(),
        )
        test_app.dependency_overrides[get_report_service] = lambda: service
        test_app.dependency_overrides[get_current_identity] = lambda: reporter

        response = TestClient(test_app).post(
            "/api/v1/moderation/report", json=report_payload
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"]["error"] == "persistence_error"
        report_repo.create_report.assert_not_awaited()

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("reason", "boring"),
            ("content_type", "video"),
            ("description", "short"),
            ("content_id", "not-a-uuid"),
        ],
    )
    def test_submit_validation(
        self, as_identity, reporter, mock_report_service, report_payload, field, value
    ):
        """Test invalid bodies never reach the service."""
        report_payload[field] = value

        response = as_identity(reporter).post(
            "/api/v1/moderation/report", json=report_payload
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        mock_report_service.submit_report.assert_not_called()


class TestQueue:
    """Test GET /moderation/queue."""

    def test_regular_users_forbidden(self, as_identity, reporter):
        """Test the queue is moderator only."""
        response = as_identity(reporter).get("/api/v1/moderation/queue")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_defaults(self, as_identity, moderator, mock_report_service, make_report):
        """Test the default query lists pending reports."""
        report = make_report()
        mock_report_service.list_queue.return_value = QueuePage(
            reports=[ReportSummary.model_validate(report)],
            pagination=Pagination(
                current_page=1, total_pages=1, total_count=1, has_more=False
            ),
        )

        response = as_identity(moderator).get("/api/v1/moderation/queue")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["reports"][0]["pk"] == str(report.pk)
        assert "content_snapshot" not in body["reports"][0]
        assert body["pagination"]["total_count"] == 1
        mock_report_service.list_queue.assert_awaited_once_with(
            status="pending", priority=None, content_type=None, page=1, limit=20
        )

    def test_filters_forwarded(self, as_identity, moderator, mock_report_service):
        """Test query filters reach the service as plain values."""
        mock_report_service.list_queue.return_value = QueuePage(
            reports=[],
            pagination=Pagination(
                current_page=2, total_pages=0, total_count=0, has_more=False
            ),
        )

        response = as_identity(moderator).get(
            "/api/v1/moderation/queue",
            params={
                "status": "all",
                "priority": "critical",
                "content_type": "comment",
                "page": 2,
                "limit": 50,
            },
        )

        assert response.status_code == status.HTTP_200_OK
        mock_report_service.list_queue.assert_awaited_once_with(
            status="all", priority="critical", content_type="comment", page=2, limit=50
        )

    @pytest.mark.parametrize(
        "params",
        [
            {"status": "closed"},
            {"priority": "urgent"},
            {"page": 0},
            {"limit": 101},
        ],
    )
    def test_invalid_params(self, as_identity, moderator, params):
        """Test out-of-range query parameters are rejected."""
        response = as_identity(moderator).get(
            "/api/v1/moderation/queue", params=params
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_queue_store_failure(self, as_identity, moderator, mock_report_service):
        """Test queue read failures surface as server errors."""
        mock_report_service.list_queue.side_effect = PersistenceError(
            "Failed to load the review queue"
        )

        response = as_identity(moderator).get("/api/v1/moderation/queue")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"]["error"] == "persistence_error"


class TestReportDetail:
    """Test GET /moderation/report/{report_id}."""

    def test_get_report(self, as_identity, moderator, mock_report_service, make_report):
        """Test the detail view includes identities and the snapshot."""
        report = make_report()
        mock_report_service.get_report_detail.return_value = ReportDetail(
            **report.model_dump(),
            reporter_info=IdentitySummary(display_name="Ann", role="user"),
            author_info=None,
        )

        response = as_identity(moderator).get(
            f"/api/v1/moderation/report/{report.pk}"
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["reporter_info"]["display_name"] == "Ann"
        assert body["author_info"] is None
        assert body["content_snapshot"] == report.content_snapshot

    def test_get_missing_report(self, as_identity, moderator, mock_report_service):
        """Test unknown reports are 404."""
        mock_report_service.get_report_detail.side_effect = ReportNotFoundError(
            "Report not found"
        )

        response = as_identity(moderator).get(f"/api/v1/moderation/report/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["error"] == "report_not_found"


class TestClaimReport:
    """Test PUT /moderation/report/{report_id}/claim."""

    def test_claim(self, as_identity, moderator, mock_report_service, make_report):
        """Test claiming moves the report under review."""
        report = make_report(status=ReportStatus.UNDER_REVIEW)
        mock_report_service.claim_report.return_value = report

        response = as_identity(moderator).put(
            f"/api/v1/moderation/report/{report.pk}/claim"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "under_review"

    def test_claim_closed_report(self, as_identity, moderator, mock_report_service):
        """Test closed reports cannot be claimed."""
        mock_report_service.claim_report.side_effect = ReportAlreadyReviewedError(
            "Report is reviewed"
        )

        response = as_identity(moderator).put(
            f"/api/v1/moderation/report/{uuid4()}/claim"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"]["error"] == "report_closed"


class TestReviewReport:
    """Test PUT /moderation/review/{report_id}."""

    def test_review_success(
        self, as_identity, moderator, mock_action_executor, review_payload
    ):
        """Test a successful review."""
        report_id = uuid4()
        now = datetime.now(UTC)
        mock_action_executor.review_report.return_value = ReviewResult(
            report_id=report_id,
            action=ModerationAction.REMOVE,
            action_result=ActionOutcome(
                success=True, action=ModerationAction.REMOVE, executed_at=now
            ),
            reviewed_at=now,
            status=ReportStatus.REVIEWED,
        )

        response = as_identity(moderator).put(
            f"/api/v1/moderation/review/{report_id}", json=review_payload
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["status"] == "reviewed"
        assert body["action_result"]["success"] is True
        called_pk, decision, identity = mock_action_executor.review_report.call_args.args
        assert called_pk == report_id
        assert decision.action == "remove"
        assert identity == moderator

    def test_review_failed_action(
        self, as_identity, moderator, mock_action_executor, review_payload
    ):
        """Test a failed enforcement is reported in the body, not as an error."""
        report_id = uuid4()
        mock_action_executor.review_report.return_value = ReviewResult(
            report_id=report_id,
            action=ModerationAction.WARN,
            action_result=ActionOutcome(
                success=False,
                action=ModerationAction.WARN,
                executed_at=datetime.now(UTC),
                error="Cannot warn without a known content author",
            ),
            reviewed_at=None,
            status=ReportStatus.PENDING,
        )

        response = as_identity(moderator).put(
            f"/api/v1/moderation/review/{report_id}",
            json={"action": "warn", "reason": "Rude comment"},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["action_result"]["success"] is False
        assert body["reviewed_at"] is None
        assert body["status"] == "pending"

    def test_review_closed_report(
        self, as_identity, moderator, mock_action_executor, review_payload
    ):
        """Test reviewing twice conflicts."""
        mock_action_executor.review_report.side_effect = ReportAlreadyReviewedError(
            "Report has already been reviewed"
        )

        response = as_identity(moderator).put(
            f"/api/v1/moderation/review/{uuid4()}", json=review_payload
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_review_missing_report(
        self, as_identity, moderator, mock_action_executor, review_payload
    ):
        """Test reviewing an unknown report."""
        mock_action_executor.review_report.side_effect = ReportNotFoundError(
            "Report not found"
        )

        response = as_identity(moderator).put(
            f"/api/v1/moderation/review/{uuid4()}", json=review_payload
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize(
        "payload",
        [
            {"action": "ban", "reason": "Obvious spam"},
            {"action": "remove", "reason": "bad"},
            {"action": "suspend_user", "reason": "Harassment", "duration": 0},
            {"action": "suspend_user", "reason": "Harassment", "duration": 366},
        ],
    )
    def test_review_validation(
        self, as_identity, moderator, mock_action_executor, payload
    ):
        """Test invalid decisions are rejected before execution."""
        response = as_identity(moderator).put(
            f"/api/v1/moderation/review/{uuid4()}", json=payload
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        mock_action_executor.review_report.assert_not_called()

    def test_review_forbidden_for_users(self, as_identity, reporter, review_payload):
        """Test regular users cannot review."""
        response = as_identity(reporter).put(
            f"/api/v1/moderation/review/{uuid4()}", json=review_payload
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestStatistics:
    """Test GET /moderation/statistics."""

    def test_statistics(self, as_identity, moderator, mock_statistics_service):
        """Test the timeframe is passed through."""
        mock_statistics_service.get_statistics.return_value = ModerationStatistics(
            timeframe=Timeframe.DAY,
            window_start=datetime.now(UTC),
            total_reports=3,
            average_review_time=1.5,
        )

        response = as_identity(moderator).get(
            "/api/v1/moderation/statistics", params={"timeframe": "24h"}
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["timeframe"] == "24h"
        assert body["total_reports"] == 3
        assert body["actions_summary"] == {
            "approved": 0,
            "removed": 0,
            "warned": 0,
            "suspended": 0,
        }
        mock_statistics_service.get_statistics.assert_awaited_once_with(Timeframe.DAY)

    def test_invalid_timeframe(self, as_identity, moderator):
        """Test unsupported windows are rejected."""
        response = as_identity(moderator).get(
            "/api/v1/moderation/statistics", params={"timeframe": "1y"}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_statistics_store_failure(
        self, as_identity, moderator, mock_statistics_service
    ):
        """Test statistics read failures surface as server errors."""
        mock_statistics_service.get_statistics.side_effect = PersistenceError(
            "Failed to load moderation statistics"
        )

        response = as_identity(moderator).get("/api/v1/moderation/statistics")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"]["error"] == "persistence_error"


class TestHealth:
    """Test GET /moderation/health."""

    @pytest.mark.parametrize(("healthy", "expected"), [(True, "ok"), (False, "error")])
    def test_health(self, test_app, healthy, expected):
        """Test health reflects the database."""
        mock_db = MagicMock()
        mock_db.health_check = AsyncMock(return_value=healthy)
        mock_db.get_pool_stats = AsyncMock(return_value={"status": "initialized"})

        with patch("moderation_api.api.moderation.db", mock_db):
            response = TestClient(test_app).get("/api/v1/moderation/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": expected,
            "service": "moderation",
            "database": {"healthy": healthy, "pool": {"status": "initialized"}},
        }

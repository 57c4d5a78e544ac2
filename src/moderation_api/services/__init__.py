"""Service layer for the moderation API."""

from moderation_api.services.action_executor import ActionExecutor
from moderation_api.services.report_service import ReportService
from moderation_api.services.risk_classifier import RiskAssessor
from moderation_api.services.statistics_service import StatisticsService

__all__ = [
    "ActionExecutor",
    "ReportService",
    "RiskAssessor",
    "StatisticsService",
]

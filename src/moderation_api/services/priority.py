"""Priority engine for incoming reports."""

from moderation_api.database.models.base import ReportPriority
from moderation_api.database.models.base import ReportReason
from moderation_api.database.models.base import RiskLevel
from moderation_api.database.models.report import AutomatedAnalysis

CRITICAL_REASONS = frozenset(
    {ReportReason.HATE_SPEECH, ReportReason.VIOLENCE, ReportReason.HARASSMENT}
)
HIGH_REASONS = frozenset({ReportReason.MISINFORMATION, ReportReason.INAPPROPRIATE})

ESTIMATED_REVIEW_TIMES = {
    ReportPriority.CRITICAL: "1-2 hours",
    ReportPriority.HIGH: "4-8 hours",
    ReportPriority.MEDIUM: "1-2 days",
    ReportPriority.LOW: "3-5 days",
}


def calculate_priority(
    reason: ReportReason | str, analysis: AutomatedAnalysis | None
) -> ReportPriority:
    """Map a report reason and the classifier verdict to a priority tier.

    The first matching rule wins, so a critical-by-reason report stays
    critical whatever the analysis says.
    """
    reason = ReportReason(reason)

    if reason in CRITICAL_REASONS:
        return ReportPriority.CRITICAL

    if analysis is not None and analysis.risk_level == RiskLevel.HIGH:
        return ReportPriority.HIGH

    if reason in HIGH_REASONS:
        return ReportPriority.HIGH

    if reason == ReportReason.SPAM:
        return ReportPriority.MEDIUM

    return ReportPriority.LOW


def estimated_review_time(priority: ReportPriority | str) -> str:
    """Human readable review estimate for a priority tier."""
    return ESTIMATED_REVIEW_TIMES[ReportPriority(priority)]

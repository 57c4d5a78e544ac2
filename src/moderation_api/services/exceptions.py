"""Domain errors raised by the moderation services."""


class ModerationError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "moderation_error"


class DuplicateReportError(ModerationError):
    """Raised when the reporter already has an open report on the content."""

    code = "already_reported"


class ReportNotFoundError(ModerationError):
    """Raised when a report does not exist."""

    code = "report_not_found"


class ReportAlreadyReviewedError(ModerationError):
    """Raised when a review targets a report that is no longer open."""

    code = "report_closed"


class PersistenceError(ModerationError):
    """Raised when a report could not be written to the store."""

    code = "persistence_error"

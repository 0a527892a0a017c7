"""Error taxonomy for the report intake workflow."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for errors raised by the intake workflow."""

    status_code = 500
    public_message = "Internal error, see server logs."


class ValidationError(ReportError):
    """One or more required fields were missing or blank."""

    status_code = 400

    def __init__(self, missing: list[str], values: dict | None = None):
        self.missing = list(missing)
        self.values = values or {}
        super().__init__(self.public_message)

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return "Missing required field(s): " + ", ".join(self.missing)


class NotFoundError(ReportError):
    status_code = 404
    public_message = "Report not found."

    def __init__(self, report_id: object):
        self.report_id = report_id
        super().__init__(f"Report {report_id!r} not found")


class PersistenceError(ReportError):
    """The store could not complete a write or read."""

    status_code = 500
    public_message = "The report could not be saved. Please try again later."


class NotificationError(ReportError):
    """Delivery failed after the report was already persisted."""

    status_code = 502

    def __init__(self, report_id: int, reason: str = ""):
        self.report_id = report_id
        self.reason = reason
        super().__init__(f"Notification for report #{report_id} failed: {reason}")

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return (
            f"Report #{self.report_id} was saved, "
            "but the notification could not be delivered."
        )

"""Pydantic request/response schemas."""

from cirs.schemas.report import ReportSummary, ReportRead, ReportAck, ErrorBody

__all__ = [
    "ReportSummary", "ReportRead",
    "ReportAck", "ErrorBody",
]

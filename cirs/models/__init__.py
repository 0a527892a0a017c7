"""SQLAlchemy ORM models."""

from cirs.models.base import Base
from cirs.models.report import Report

__all__ = ["Base", "Report"]

"""Report submission workflow: validate, sanitize, persist, notify."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cirs.config import Settings, get_settings
from cirs.db import crud
from cirs.errors import PersistenceError
from cirs.models import Report
from cirs.services.notifier import Notifier
from cirs.services.validation import FIELD_LIMITS, sanitize_report, sanitize_text, validate_required

logger = logging.getLogger(__name__)


def server_timezone() -> str:
    """Name of the server's local timezone, e.g. 'CET' or 'UTC'."""
    return datetime.now().astimezone().tzname() or "UTC"


def resolve_timezone(client_tz: str, configured: str = "") -> str:
    if client_tz:
        return client_tz
    return sanitize_text(configured or server_timezone(), FIELD_LIMITS["tz"])


async def submit_report(
    db: AsyncSession,
    notifier: Notifier,
    raw: Mapping[str, Any],
    user_agent: str | None = None,
    settings: Settings | None = None,
) -> Report:
    """Create one report from a raw submission.

    Raises ValidationError before anything is written, PersistenceError if
    the insert fails, and NotificationError after the row is committed when
    delivery fails. The report is never rolled back because of a failed
    notification.
    """
    settings = settings or get_settings()

    validate_required(raw)

    data = sanitize_report(raw, user_agent=user_agent)
    data["tz"] = resolve_timezone(data["tz"], settings.timezone)
    data["created_at"] = datetime.now(timezone.utc).isoformat()

    try:
        report = await crud.create_report(db, data)
    except SQLAlchemyError as e:
        logger.exception("Failed to save report (category=%r, title=%r)", data["category"], data["title"])
        await db.rollback()
        raise PersistenceError(str(e)) from e

    logger.info("Saved report #%s [%s] %s", report.id, report.category, report.title)

    await notifier.notify(report)
    return report

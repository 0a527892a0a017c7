"""CRUD operations for the reports table.

Reports are append-only, so there is no update or delete.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cirs.models import Report

DEFAULT_LIST_LIMIT = 500
# Largest value SQLite can store in an INTEGER column.
MAX_REPORT_ID = 2**63 - 1


async def create_report(db: AsyncSession, data: dict) -> Report:
    report = Report(**data)
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report


async def list_reports(db: AsyncSession, limit: int = DEFAULT_LIST_LIMIT) -> list[Report]:
    """Newest first, capped at ``limit`` rows."""
    result = await db.execute(
        select(Report).order_by(Report.id.desc()).limit(max(limit, 0))
    )
    return list(result.scalars().all())


async def get_report(db: AsyncSession, report_id: int) -> Report | None:
    if not 1 <= report_id <= MAX_REPORT_ID:
        return None
    return await db.get(Report, report_id)


def parse_report_id(raw: str) -> int | None:
    """Return the id for an all-digit path segment, or None if it cannot exist."""
    if not (raw.isascii() and raw.isdigit()):
        return None
    report_id = int(raw)
    if not 1 <= report_id <= MAX_REPORT_ID:
        return None
    return report_id


async def count_reports(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Report))
    return int(result.scalar_one())

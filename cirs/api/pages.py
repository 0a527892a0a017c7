"""Server-rendered HTML views."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cirs.config import Settings
from cirs.db import crud
from cirs.dependencies import get_db, get_settings_dep
from cirs.errors import NotFoundError
from cirs.schemas import ReportRead
from cirs.services.renderer import render

router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
async def list_page(
    ok: str = "",
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    rows = await crud.list_reports(db, limit=settings.list_limit)
    return render("list", title="CIRS overview", rows=rows, ok=ok == "1")


@router.get("/new", response_class=HTMLResponse)
async def new_page(settings: Settings = Depends(get_settings_dep)):
    return render("form", title="New incident report", p={}, categories=settings.categories, readonly=False)


@router.get("/report/{report_id}", response_class=HTMLResponse)
async def report_page(
    report_id: str,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    """Show one report in the form view, read-only."""
    parsed = crud.parse_report_id(report_id)
    report = await crud.get_report(db, parsed) if parsed is not None else None
    if not report:
        raise NotFoundError(report_id)

    p = ReportRead.model_validate(report).model_dump()
    return render(
        "form",
        title=f"Report #{report.id}",
        p=p,
        categories=settings.categories,
        readonly=True,
    )

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cirs.api.negotiation import read_payload, wants_json
from cirs.config import Settings
from cirs.db import crud
from cirs.dependencies import get_db, get_notifier, get_settings_dep
from cirs.schemas import ReportAck, ReportRead, ReportSummary
from cirs.services.notifier import Notifier
from cirs.services.submission import submit_report

router = APIRouter(tags=["reports"])


async def _create(
    request: Request,
    db: AsyncSession,
    notifier: Notifier,
    settings: Settings,
):
    raw = await read_payload(request)
    report = await submit_report(
        db, notifier, raw,
        user_agent=request.headers.get("user-agent"),
        settings=settings,
    )
    if wants_json(request):
        ack = ReportAck(id=report.id)
        return JSONResponse(ack.model_dump(), status_code=201)
    return RedirectResponse("/?ok=1", status_code=303)


@router.post("/submit")
async def submit_form(
    request: Request,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings_dep),
):
    """Browser form target; answers JSON when the caller accepts it."""
    return await _create(request, db, notifier, settings)


@router.post("/api/report")
async def submit_api(
    request: Request,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings_dep),
):
    return await _create(request, db, notifier, settings)


@router.get("/api/reports", response_model=list[ReportSummary])
async def list_reports(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    return await crud.list_reports(db, limit=settings.list_limit)


@router.get("/api/reports/{report_id}", response_model=ReportRead)
async def get_report(report_id: str, db: AsyncSession = Depends(get_db)):
    parsed = crud.parse_report_id(report_id)
    report = await crud.get_report(db, parsed) if parsed is not None else None
    if not report:
        raise HTTPException(404, "Report not found")
    return report

from __future__ import annotations
from pydantic import BaseModel


class ReportSummary(BaseModel):
    id: int
    created_at: str
    category: str
    title: str
    location: str
    asset: str = ""

    model_config = {"from_attributes": True}


class ReportRead(ReportSummary):
    description: str
    immediate: str = ""
    when_ts: str
    tz: str = ""
    contact_name: str = ""
    contact_email: str = ""
    user_agent: str = ""


class ReportAck(BaseModel):
    ok: bool = True
    id: int


class ErrorBody(BaseModel):
    ok: bool = False
    error: str
    id: int | None = None
    missing: list[str] | None = None

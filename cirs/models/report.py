from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cirs.models.base import Base


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Report(Base):
    """One incident submission. Rows are append-only."""

    __tablename__ = "reports"
    # AUTOINCREMENT keeps ids strictly increasing and never reused.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    created_at: Mapped[str] = mapped_column(String(40), default=_utc_now_iso)
    category: Mapped[str] = mapped_column(Text, default="")
    title: Mapped[str] = mapped_column(Text, default="")
    location: Mapped[str] = mapped_column(Text, default="")
    asset: Mapped[str] = mapped_column(Text, default="")
    description: Mapped[str] = mapped_column(Text, default="")
    immediate: Mapped[str] = mapped_column(Text, default="")
    when_ts: Mapped[str] = mapped_column(Text, default="")
    tz: Mapped[str] = mapped_column(String(64), default="")
    contact_name: Mapped[str] = mapped_column(Text, default="")
    contact_email: Mapped[str] = mapped_column(Text, default="")
    user_agent: Mapped[str] = mapped_column(Text, default="")

    def __repr__(self) -> str:
        return f"<Report id={self.id} category={self.category!r} title={self.title!r}>"

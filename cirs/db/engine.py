"""Async SQLAlchemy engine, one-time schema setup and session dependency."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cirs.config import get_settings
from cirs.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine for the report store.

    The schema is created on first use by ``init()``; every other caller
    waits on the same lock until that has happened, so no session is handed
    out before the ``reports`` table exists.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        kwargs: dict = {"echo": echo}
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            if parsed.database in (None, "", ":memory:"):
                # One shared connection, otherwise every checkout sees an empty DB.
                kwargs["poolclass"] = StaticPool
                kwargs["connect_args"] = {"check_same_thread": False}
            else:
                Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_async_engine(url, **kwargs)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self._ready = False
        self._lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self._ready

    async def init(self) -> None:
        """Create tables if missing. Safe to call any number of times."""
        if self._ready:
            return
        async with self._lock:
            if self._ready:
                return
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self._ready = True
            logger.info("Database ready: %s", self.url)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        await self.init()
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        await self.engine.dispose()
        self._ready = False


database = Database(get_settings().resolved_database_url)


async def get_db():
    """FastAPI dependency that yields an async DB session."""
    async with database.session() as session:
        yield session

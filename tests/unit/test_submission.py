from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cirs.config import MailConfig, Settings
from cirs.db import crud
from cirs.db.engine import Database
from cirs.errors import NotificationError, PersistenceError, ValidationError
from cirs.services.notifier import Notifier
from cirs.services.submission import resolve_timezone, submit_report

RAW = {
    "category": "Occupational safety",
    "when": "02:00",
    "location": "Depot",
    "title": "Slippery  floor",
    "description": "Oil on the floor next to bay 3.",
}


class FailingTransport:
    def send(self, message):
        raise OSError("no route to host")


@pytest_asyncio.fixture
async def db():
    database = Database("sqlite+aiosqlite:///:memory:")
    async with database.session() as session:
        yield session
    await database.dispose()


@pytest.fixture
def quiet_notifier():
    return Notifier(MailConfig(host="", to=""))


@pytest.fixture
def settings():
    return Settings(timezone="")


async def test_submit_persists_sanitized_report(db, quiet_notifier, settings):
    before = datetime.now(timezone.utc)
    report = await submit_report(db, quiet_notifier, RAW, user_agent="UA", settings=settings)
    after = datetime.now(timezone.utc)

    assert report.id == 1
    assert report.title == "Slippery floor"
    assert report.user_agent == "UA"
    assert before <= datetime.fromisoformat(report.created_at) <= after
    assert await crud.count_reports(db) == 1


async def test_submit_rejects_before_writing(db, quiet_notifier, settings):
    with pytest.raises(ValidationError):
        await submit_report(db, quiet_notifier, {**RAW, "description": ""}, settings=settings)
    assert await crud.count_reports(db) == 0


async def test_submit_uses_configured_timezone(db, quiet_notifier):
    report = await submit_report(db, quiet_notifier, RAW, settings=Settings(timezone="Europe/Vienna"))
    assert report.tz == "Europe/Vienna"


async def test_notification_failure_after_commit(db, settings):
    notifier = Notifier(MailConfig(host="smtp.test", to="x@example.org"), transport=FailingTransport())

    with pytest.raises(NotificationError) as exc:
        await submit_report(db, notifier, RAW, settings=settings)

    assert exc.value.report_id == 1
    assert await crud.get_report(db, 1) is not None


async def test_storage_failure_raises_persistence_error(quiet_notifier, settings):
    # No schema: the insert fails inside the store.
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        with pytest.raises(PersistenceError):
            await submit_report(session, quiet_notifier, RAW, settings=settings)
    await engine.dispose()


def test_resolve_timezone_prefers_client_value():
    assert resolve_timezone("America/New_York", "Europe/Vienna") == "America/New_York"
    assert resolve_timezone("", "Europe/Vienna") == "Europe/Vienna"
    assert resolve_timezone("", "")

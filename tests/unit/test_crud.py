import pytest_asyncio

from cirs.db import crud
from cirs.db.engine import Database


def _data(**overrides):
    data = {
        "category": "Communication",
        "title": "Radio dropout",
        "location": "Tunnel B1",
        "description": "Lost contact for two minutes.",
        "when_ts": "10:40",
    }
    data.update(overrides)
    return data


@pytest_asyncio.fixture
async def db():
    database = Database("sqlite+aiosqlite:///:memory:")
    async with database.session() as session:
        yield session
    await database.dispose()


async def test_create_and_get_report(db):
    report = await crud.create_report(db, _data())
    assert report.id == 1
    assert report.created_at
    assert report.asset == ""

    fetched = await crud.get_report(db, report.id)
    assert fetched is not None
    assert fetched.title == "Radio dropout"


async def test_get_missing_report_returns_none(db):
    assert await crud.get_report(db, 42) is None


async def test_list_reports_newest_first(db):
    for i in range(3):
        await crud.create_report(db, _data(title=f"R{i}"))
    reports = await crud.list_reports(db)
    assert [r.id for r in reports] == [3, 2, 1]


async def test_list_reports_respects_limit(db):
    for i in range(5):
        await crud.create_report(db, _data(title=f"R{i}"))
    reports = await crud.list_reports(db, limit=2)
    assert [r.id for r in reports] == [5, 4]


async def test_count_reports(db):
    assert await crud.count_reports(db) == 0
    await crud.create_report(db, _data())
    assert await crud.count_reports(db) == 1


async def test_init_is_idempotent(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path}/nested/dir/cirs.db")
    assert (tmp_path / "nested" / "dir").is_dir()

    await database.init()
    await database.init()
    assert database.ready

    async with database.session() as session:
        await crud.create_report(session, _data())
    await database.dispose()

    # A fresh handle on the same file keeps existing rows.
    reopened = Database(f"sqlite+aiosqlite:///{tmp_path}/nested/dir/cirs.db")
    async with reopened.session() as session:
        assert await crud.count_reports(session) == 1
    await reopened.dispose()


async def test_get_report_out_of_range_returns_none(db):
    await crud.create_report(db, _data())
    assert await crud.get_report(db, 0) is None
    assert await crud.get_report(db, 2**63) is None
    assert await crud.get_report(db, 10**30) is None


def test_parse_report_id():
    assert crud.parse_report_id("17") == 17
    assert crud.parse_report_id(str(crud.MAX_REPORT_ID)) == crud.MAX_REPORT_ID
    assert crud.parse_report_id(str(crud.MAX_REPORT_ID + 1)) is None
    assert crud.parse_report_id("0") is None
    assert crud.parse_report_id("abc") is None
    assert crud.parse_report_id("-3") is None
    assert crud.parse_report_id("²") is None

"""Seed the database with a few demo incident reports."""

import asyncio
from datetime import datetime, timezone

from cirs.db.engine import database
from cirs.db import crud

DEMO_REPORTS = [
    {
        "category": "Medication",
        "title": "Look-alike ampoules in drug box",
        "location": "Station Nord, RTW 2",
        "asset": "Drug box B",
        "description": "Two ampoules with near-identical labels stored side by side.",
        "immediate": "Separated the ampoules and labelled the compartments.",
        "when_ts": "yesterday, 14:30",
    },
    {
        "category": "Vehicle / equipment",
        "title": "Stretcher lock did not engage",
        "location": "Hospital ramp, ER entrance",
        "asset": "RTW 5",
        "description": "Stretcher slipped back during loading; the lock needed a second push.",
        "immediate": "Vehicle taken out of service for inspection.",
        "when_ts": "last night",
    },
]


async def seed():
    async with database.session() as db:
        if await crud.count_reports(db):
            print("Reports already exist, skipping seed.")
            return

        for data in DEMO_REPORTS:
            report = await crud.create_report(db, {
                **data,
                "created_at": datetime.now(timezone.utc).isoformat(),
                "tz": "Europe/Vienna",
            })
            print(f"Created report #{report.id}: {report.title}")

    await database.dispose()
    print("\nSeed complete. Start the server with: cirs serve")


if __name__ == "__main__":
    asyncio.run(seed())

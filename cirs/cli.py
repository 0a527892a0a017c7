"""CLI for CIRS — run the server, inspect reports, check mail delivery."""

from __future__ import annotations

import argparse
import asyncio
import sys


def cmd_serve(args):
    """Run the web app with uvicorn."""
    import uvicorn
    from cirs.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "cirs.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


async def cmd_init_db(args):
    """Create the reports table if it does not exist yet."""
    from cirs.db.engine import database

    await database.init()
    print(f"Database ready: {database.url}")
    await database.dispose()


async def cmd_list(args):
    from cirs.db import crud
    from cirs.db.engine import database

    async with database.session() as db:
        total = await crud.count_reports(db)
        reports = await crud.list_reports(db, limit=args.limit)
    await database.dispose()

    if not reports:
        print("No reports.")
        return
    for r in reports:
        print(f"#{r.id:<5} {r.created_at}  [{r.category}] {r.title} @ {r.location}")
    print(f"\n{len(reports)} of {total} report(s) shown.")


async def cmd_show(args):
    from cirs.db import crud
    from cirs.db.engine import database
    from cirs.services.notifier import compose_body

    async with database.session() as db:
        report = await crud.get_report(db, args.id)
    await database.dispose()

    if not report:
        print(f"Report #{args.id} not found")
        sys.exit(1)
    print(compose_body(report), end="")


async def cmd_test_mail(args):
    """Send a notification for a sample (unsaved) report."""
    from datetime import datetime, timezone

    from cirs.errors import NotificationError
    from cirs.models import Report
    from cirs.services.notifier import notifier

    if not notifier.is_configured:
        print("Mail is not configured (set MAIL_TO and MAIL_HOST or MAIL_RESEND_API_KEY)")
        sys.exit(1)

    sample = Report(
        id=0,
        created_at=datetime.now(timezone.utc).isoformat(),
        category="Test",
        title="Mail delivery check",
        location="-",
        description="This is a test notification sent from the CIRS command line.",
        when_ts="now",
    )
    try:
        await notifier.notify(sample)
    except NotificationError as e:
        print(f"Delivery failed: {e.reason}")
        sys.exit(1)
    print(f"Test notification sent to {notifier.config.to}")


def main():
    from cirs.config import get_settings
    from cirs.logging_setup import configure_logging

    parser = argparse.ArgumentParser(description="CIRS CLI")
    subparsers = parser.add_subparsers(dest="command")

    # serve
    sv = subparsers.add_parser("serve", help="Run the web server")
    sv.add_argument("--host", default="", help="Bind address (default: HOST or 0.0.0.0)")
    sv.add_argument("--port", type=int, default=0, help="Port (default: PORT or 3000)")
    sv.add_argument("--reload", action="store_true", help="Reload on code changes")

    # init-db
    subparsers.add_parser("init-db", help="Create the database schema")

    # list
    ls = subparsers.add_parser("list", help="List the newest reports")
    ls.add_argument("--limit", type=int, default=20, help="Number of reports to show")

    # show
    sh = subparsers.add_parser("show", help="Print one report")
    sh.add_argument("id", type=int, help="Report id")

    # test-mail
    subparsers.add_parser("test-mail", help="Send a sample notification")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        cmd_serve(args)
        return

    configure_logging(get_settings().log_level)
    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "list":
        asyncio.run(cmd_list(args))
    elif args.command == "show":
        asyncio.run(cmd_show(args))
    elif args.command == "test-mail":
        asyncio.run(cmd_test_mail(args))


if __name__ == "__main__":
    main()

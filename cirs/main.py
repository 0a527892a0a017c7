"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from cirs.api.errors import register_exception_handlers
from cirs.api.router import api_router
from cirs.config import get_settings
from cirs.db.engine import database
from cirs.logging_setup import configure_logging
from cirs.middleware import install_middleware
from cirs.services.notifier import notifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)

    # Schema must exist before the first request is served.
    await database.init()
    if notifier.is_configured:
        logger.info("Notifications enabled via %s to %s", notifier.config.provider, notifier.config.to)
    else:
        logger.info("Notifications disabled (MAIL_TO / transport not configured)")
    yield
    await database.dispose()


app = FastAPI(
    title="CIRS",
    description="Critical incident reporting: submit, store and review incident reports.",
    version="1.0.0",
    lifespan=lifespan,
)

install_middleware(app)
register_exception_handlers(app)

app.include_router(api_router)

_static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(_static_dir)), name="static")


@app.get("/healthz", response_class=PlainTextResponse)
async def healthz():
    return "ok"

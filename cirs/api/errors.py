"""Map workflow errors to HTML or JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cirs.api.negotiation import wants_json
from cirs.config import get_settings
from cirs.errors import (
    NotFoundError, NotificationError, PersistenceError, ReportError, ValidationError,
)
from cirs.middleware import apply_security_headers, logger as access_logger
from cirs.schemas import ErrorBody
from cirs.services.renderer import render

logger = logging.getLogger(__name__)


def _json_error(status: int, message: str, **extra) -> JSONResponse:
    body = ErrorBody(error=message, **extra)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status)


def _html_error(status: int, title: str, message: str, report_id: int | None = None) -> HTMLResponse:
    html = render("error", title=title, message=message, report_id=report_id)
    return HTMLResponse(html, status_code=status)


async def validation_error_handler(request: Request, exc: ValidationError):
    if wants_json(request):
        return _json_error(exc.status_code, exc.public_message, missing=exc.missing)
    html = render(
        "form",
        title="New incident report",
        p=exc.values,
        error=exc.public_message,
        categories=get_settings().categories,
        readonly=False,
    )
    return HTMLResponse(html, status_code=exc.status_code)


async def not_found_handler(request: Request, exc: NotFoundError):
    if wants_json(request):
        return _json_error(exc.status_code, exc.public_message)
    return PlainTextResponse(exc.public_message, status_code=exc.status_code)


async def persistence_error_handler(request: Request, exc: PersistenceError):
    # Details were logged where the error was raised.
    if wants_json(request):
        return _json_error(exc.status_code, exc.public_message)
    return _html_error(exc.status_code, "Report not saved", exc.public_message)


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return await persistence_error_handler(request, PersistenceError(str(exc)))


async def notification_error_handler(request: Request, exc: NotificationError):
    if wants_json(request):
        return _json_error(exc.status_code, exc.public_message, id=exc.report_id)
    return _html_error(exc.status_code, "Notification failed", exc.public_message, exc.report_id)


async def report_error_handler(request: Request, exc: ReportError):
    logger.error("Unhandled report error: %s", exc)
    if wants_json(request):
        return _json_error(exc.status_code, exc.public_message)
    return PlainTextResponse(exc.public_message, status_code=exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if wants_json(request) or request.url.path.startswith("/api/"):
        return _json_error(exc.status_code, str(exc.detail))
    message = str(exc.detail)
    if exc.status_code == 404 and message == "Not Found":
        message = "Page not found"
    return PlainTextResponse(message, status_code=exc.status_code, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # Runs outside the http middleware stack, so headers and access log are applied here.
    if wants_json(request):
        response = _json_error(500, "Internal error, see server logs.")
    else:
        response = PlainTextResponse("Internal error, see server logs.", status_code=500)
    apply_security_headers(response)
    access_logger.info("%s %s %s", request.method, request.url.path, response.status_code)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(NotificationError, notification_error_handler)
    app.add_exception_handler(ReportError, report_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

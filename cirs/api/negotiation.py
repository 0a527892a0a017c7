"""Decide between HTML and JSON responses, and read submitted payloads."""

from __future__ import annotations

import json

from fastapi import HTTPException, Request


def _is_json_body(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


def wants_json(request: Request) -> bool:
    """True if the caller asked for (or implicitly expects) a JSON reply."""
    accept = request.headers.get("accept", "").lower()
    if "application/json" in accept:
        return True
    return _is_json_body(request) and "text/html" not in accept


async def read_payload(request: Request) -> dict:
    """Return the submitted fields from a JSON or form-encoded body."""
    if _is_json_body(request):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(400, "Malformed JSON body")
        if not isinstance(body, dict):
            raise HTTPException(400, "Expected a JSON object")
        return body
    form = await request.form()
    return {k: v for k, v in form.items() if isinstance(v, str)}

"""Required-field checks and free-text normalization for incoming reports."""

from __future__ import annotations

from typing import Any, Mapping

from cirs.errors import ValidationError

# Submitted name -> column name, in the order errors are reported.
REQUIRED_FIELDS: dict[str, str] = {
    "category": "category",
    "when": "when_ts",
    "location": "location",
    "title": "title",
    "description": "description",
}

# Column name -> accepted submitted names (first match wins).
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "category": ("category",),
    "title": ("title",),
    "location": ("location",),
    "asset": ("asset",),
    "description": ("description",),
    "immediate": ("immediate",),
    "when_ts": ("when", "when_ts"),
    "tz": ("tz", "timezone"),
    "contact_name": ("contactName", "contact_name"),
    "contact_email": ("contactEmail", "contact_email"),
}

FIELD_LIMITS: dict[str, int] = {
    "category": 200,
    "title": 300,
    "location": 300,
    "asset": 300,
    "description": 5000,
    "immediate": 2000,
    "when_ts": 100,
    "tz": 64,
    "contact_name": 200,
    "contact_email": 300,
    "user_agent": 500,
}


def _lookup(raw: Mapping[str, Any], column: str) -> Any:
    for name in FIELD_ALIASES.get(column, (column,)):
        value = raw.get(name)
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def validate_required(raw: Mapping[str, Any]) -> None:
    """Raise ValidationError listing every required field that is blank."""
    missing = [
        submitted
        for submitted, column in REQUIRED_FIELDS.items()
        if not _as_text(_lookup(raw, column)).strip()
    ]
    if missing:
        raise ValidationError(missing, values=dict(raw))


def sanitize_text(value: Any, max_length: int) -> str:
    """Collapse whitespace, trim, and cap at ``max_length`` characters.

    Applying it twice gives the same result as applying it once.
    """
    text = " ".join(_as_text(value).split())
    if len(text) > max_length:
        text = text[:max_length].rstrip()
    return text


def sanitize_report(raw: Mapping[str, Any], user_agent: str | None = None) -> dict[str, str]:
    """Map submitted names to columns and normalize every free-text field."""
    data = {
        column: sanitize_text(_lookup(raw, column), FIELD_LIMITS[column])
        for column in FIELD_ALIASES
    }
    data["user_agent"] = sanitize_text(user_agent, FIELD_LIMITS["user_agent"])
    return data

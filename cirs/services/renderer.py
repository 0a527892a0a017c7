"""Render HTML views with Jinja2."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
)


def render(view: str, **context) -> str:
    """Render ``<view>.html.j2``; layout inheritance is handled by the templates."""
    template = _env.get_template(f"{view}.html.j2")
    return template.render(**context)

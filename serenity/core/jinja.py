"""Jinja2 environment with the formatting filters the pages use."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from fastapi.templating import Jinja2Templates

from ..services.moods import describe_mood_score


def _to_dt(value: Any, tz: ZoneInfo | None) -> datetime | None:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None and tz:
        dt = dt.replace(tzinfo=tz)
    if tz:
        dt = dt.astimezone(tz)
    return dt


def get_templates(settings) -> Jinja2Templates:
    """Create a ``Jinja2Templates`` instance with our standard filters registered."""

    tz = ZoneInfo(settings.TZ) if settings.TZ else None

    def fmt_dt(value: Any, fmt: str = "%Y-%m-%d %I:%M %p") -> str:
        dt = _to_dt(value, tz)
        return dt.strftime(fmt) if dt else ""

    def fmt_date(value: Any, fmt: str = "%b %d, %Y") -> str:
        dt = _to_dt(value, tz)
        return dt.strftime(fmt) if dt else ""

    templates = Jinja2Templates(directory=str(settings.templates_dir))
    env = templates.env
    env.filters["fmt_dt"] = fmt_dt
    env.filters["fmt_date"] = fmt_date
    env.filters["mood"] = describe_mood_score
    env.globals["app_name"] = settings.APP_NAME
    return templates

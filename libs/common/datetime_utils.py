"""Datetime utilities for timezone-aware timestamps.

Usage:
    from libs.common.datetime_utils import utc_now, local_today
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from libs.common.config import get_settings


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    This replaces the deprecated datetime.utcnow() which returns naive datetimes.
    Always use this for timestamps sent to the backend.
    """
    return datetime.now(timezone.utc)


def local_today() -> date:
    """Return today's date in the chapter's configured timezone."""
    return datetime.now(ZoneInfo(get_settings().TIMEZONE)).date()


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO timestamp from the backend into an aware datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_relative(value: str | datetime, now: datetime | None = None) -> str:
    """Render a timestamp the way post listings show it ("5m ago", "2d ago")."""
    moment = parse_timestamp(value)
    now = now or utc_now()
    seconds = (now - moment).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return moment.date().isoformat()

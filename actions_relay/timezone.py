"""Timezone helpers."""

from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "UTC"


def load_timezone(name: str | None, fallback: str = DEFAULT_TIMEZONE) -> tuple[dt.tzinfo, str]:
    """Return a tzinfo and its canonical name, falling back to UTC."""

    for candidate in (name, fallback):
        if not candidate:
            continue
        if candidate.upper() == "UTC":
            return dt.timezone.utc, "UTC"
        try:
            return ZoneInfo(candidate), candidate
        except (ZoneInfoNotFoundError, ValueError):
            continue
    return dt.timezone.utc, "UTC"


def parse_github_timestamp(value: str | None) -> dt.datetime | None:
    """Parse GitHub's ``2024-01-01T12:00:00Z`` timestamps; ``None`` on junk."""
    if not value:
        return None
    try:
        parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def format_local(moment: dt.datetime, tz_name: str | None) -> str:
    """Render ``moment`` in ``tz_name`` as ``YYYY-MM-DD HH:MM TZ``."""
    tz, _ = load_timezone(tz_name)
    return moment.astimezone(tz).strftime("%Y-%m-%d %H:%M %Z")

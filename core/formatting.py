"""Duration and date-stamp formatting."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, tzinfo

from core.calendar_context import ensure_aware
from core.geometry import round_half_away
from core.models import MediaRecord

# strftime patterns offered for the date stamp
DATE_STAMP_FORMATS: list[str] = ["%y.%m.%d", "%Y.%m.%d", "%m.%d"]
DEFAULT_DATE_STAMP_FORMAT = DATE_STAMP_FORMATS[0]

NO_DURATION = None


def format_clock(total_seconds: float) -> str:
    """Format seconds as H:MM:SS (one hour or more) or M:SS.

    Args:
        total_seconds: Duration in seconds; rounded to the nearest second.

    Returns:
        str: Formatted duration string, "0:00" for zero or negative input.
    """
    seconds = max(0, round_half_away(total_seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_duration(total_seconds: float) -> str | None:
    """Format a duration badge; None when there is nothing to show."""
    if round_half_away(total_seconds) <= 0:
        return NO_DURATION
    return format_clock(total_seconds)


def total_duration_label(records: Iterable[MediaRecord]) -> str | None:
    """Badge for the summed duration of `records`."""
    return format_duration(sum(r.duration_seconds for r in records))


def format_date_stamp(instant: datetime, fmt: str = DEFAULT_DATE_STAMP_FORMAT, tz: tzinfo | None = None) -> str:
    """Render `instant` with a strftime pattern in timezone `tz` (UTC when None)."""
    aware = ensure_aware(instant)
    if tz is not None:
        aware = aware.astimezone(tz)
    return aware.strftime(fmt)

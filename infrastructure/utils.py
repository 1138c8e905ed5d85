"""Utilities for timestamp and number parsing/formatting.

This module centralizes parsing of index values so the rest of the app can
depend on a single behavior. It uses best-effort parsing and will not raise on
errors; callers should expect `None` when data is not available.
"""

from __future__ import annotations

from datetime import datetime, timezone
import math

from loguru import logger

CSV_DT_FMT = "%Y-%m-%d %H:%M:%S"


def parse_csv_datetime(value: str | None) -> datetime | None:
    """Parse an ISO 8601 or `CSV_DT_FMT` timestamp as an aware UTC-based datetime.

    Naive values are taken as UTC. Returns None on empty or invalid input.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        try:
            dt = datetime.strptime(text, CSV_DT_FMT)
        except ValueError:
            logger.debug("Unparseable timestamp: {}", value)
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_csv_datetime(dt: datetime | None) -> str:
    """Format datetime as ISO 8601 in UTC; empty string when None."""
    if dt is None:
        return ""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def parse_float(value: str | None) -> float | None:
    """Parse a finite float field; None when empty, invalid, NaN or infinite."""
    if value is None or not str(value).strip():
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        logger.debug("Unparseable number: {}", value)
        return None
    if not math.isfinite(number):
        logger.debug("Non-finite number: {}", value)
        return None
    return number

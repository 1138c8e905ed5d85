"""Error types raised by the core services."""

from __future__ import annotations


class DaylogError(Exception):
    """Base class for core errors."""


class EmptyInputError(DaylogError, ValueError):
    """A composition was requested for zero records."""


class MalformedCalendarDataError(DaylogError):
    """A month could not be resolved by the calendar.

    Raised by `CalendarContext` and handled by month grouping, which skips the
    affected month.
    """

    def __init__(self, year: int, month: int, reason: str = "") -> None:
        self.year = year
        self.month = month
        super().__init__(f"cannot resolve {year}-{month:02d}: {reason}".rstrip(": "))


class UndefinedCentroidError(DaylogError):
    """A day bucket has no geotagged assets, so it has no centroid."""

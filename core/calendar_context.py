"""Calendar and timezone rules used for day/month grouping."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from core.errors import MalformedCalendarDataError


def ensure_aware(instant: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


@dataclass(frozen=True)
class CalendarContext:
    """Day/month boundaries and first-weekday convention.

    Attributes:
        tz: Timezone in which calendar days are evaluated.
        first_weekday: First column of a month grid, Monday = 0 ... Sunday = 6.
    """

    tz: tzinfo = field(default=timezone.utc)
    first_weekday: int = calendar.SUNDAY

    @classmethod
    def from_names(cls, tz_name: str | None, first_weekday: int = calendar.SUNDAY) -> CalendarContext:
        """Build a context from an IANA timezone name, falling back to UTC."""
        tz: tzinfo = timezone.utc
        if tz_name and tz_name.upper() != "UTC":
            try:
                tz = ZoneInfo(tz_name)
            except (ZoneInfoNotFoundError, ValueError) as ex:
                logger.warning("Unknown timezone {}: {}; using UTC", tz_name, ex)
        if not 0 <= int(first_weekday) <= 6:
            logger.warning("first_weekday {} out of range; using Sunday", first_weekday)
            first_weekday = calendar.SUNDAY
        return cls(tz=tz, first_weekday=int(first_weekday))

    def localize(self, instant: datetime) -> datetime:
        return ensure_aware(instant).astimezone(self.tz)

    def start_of_day(self, instant: datetime) -> datetime:
        local = self.localize(instant)
        return datetime(local.year, local.month, local.day, tzinfo=self.tz)

    def first_of_month(self, year: int, month: int) -> datetime:
        try:
            return datetime(year, month, 1, tzinfo=self.tz)
        except (ValueError, OverflowError) as ex:
            raise MalformedCalendarDataError(year, month, str(ex)) from ex

    def days_in_month(self, year: int, month: int) -> int:
        try:
            return calendar.monthrange(year, month)[1]
        except (ValueError, calendar.IllegalMonthError) as ex:
            raise MalformedCalendarDataError(year, month, str(ex)) from ex

    def weekday(self, instant: datetime) -> int:
        """Weekday of `instant` in this timezone, Monday = 0."""
        return self.localize(instant).weekday()

    def leading_blank_cells(self, first_day: datetime) -> int:
        """Empty grid cells before day 1 of a month."""
        return (self.weekday(first_day) - self.first_weekday + 7) % 7

    def weekday_symbols(self) -> list[str]:
        """Short weekday names starting at `first_weekday`."""
        names = list(calendar.day_abbr)
        return names[self.first_weekday :] + names[: self.first_weekday]

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from core.calendar_context import CalendarContext
from core.errors import MalformedCalendarDataError


def test_start_of_day_uses_calendar_timezone() -> None:
    ctx = CalendarContext(tz=ZoneInfo("Asia/Tokyo"))
    # 2024-03-01 20:00 UTC is already 2024-03-02 in Tokyo
    start = ctx.start_of_day(datetime(2024, 3, 1, 20, 0, tzinfo=timezone.utc))

    assert (start.year, start.month, start.day, start.hour) == (2024, 3, 2, 0)


def test_naive_datetimes_are_treated_as_utc() -> None:
    ctx = CalendarContext()

    assert ctx.start_of_day(datetime(2024, 3, 1, 23, 59)) == datetime(
        2024, 3, 1, tzinfo=timezone.utc
    )


def test_leading_blank_cells_follow_first_weekday() -> None:
    # March 1st 2024 is a Friday
    first = datetime(2024, 3, 1, tzinfo=timezone.utc)

    assert CalendarContext(first_weekday=calendar.SUNDAY).leading_blank_cells(first) == 5
    assert CalendarContext(first_weekday=calendar.MONDAY).leading_blank_cells(first) == 4
    assert CalendarContext(first_weekday=calendar.FRIDAY).leading_blank_cells(first) == 0


def test_first_of_month_rejects_invalid_month() -> None:
    with pytest.raises(MalformedCalendarDataError):
        CalendarContext().first_of_month(2024, 13)


def test_weekday_symbols_rotate_to_first_weekday() -> None:
    symbols = CalendarContext(first_weekday=calendar.SUNDAY).weekday_symbols()

    assert len(symbols) == 7
    assert symbols[0] == calendar.day_abbr[calendar.SUNDAY]
    assert symbols[1] == calendar.day_abbr[calendar.MONDAY]


def test_from_names_falls_back_to_utc_for_unknown_zone() -> None:
    ctx = CalendarContext.from_names("Not/AZone", 9)

    assert ctx.tz == timezone.utc
    assert ctx.first_weekday == calendar.SUNDAY

"""Calendar day and month grouping for media records.

Both operations are pure: they read records and a `CalendarContext` and build
fresh `DayBucket`/`MonthSection` lists.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timezone

from loguru import logger

from core.calendar_context import CalendarContext
from core.errors import MalformedCalendarDataError
from core.models import DayBucket, MediaRecord, MonthSection
from core.services.sort_service import SortService


def sort_oldest_first(records: Iterable[MediaRecord]) -> list[MediaRecord]:
    """Return `records` ordered for playback, oldest first."""
    return SortService().oldest_first(records)


class DayGroupingService:
    """Groups records into day buckets and month sections."""

    def __init__(self, calendar: CalendarContext | None = None) -> None:
        self._calendar = calendar or CalendarContext()

    @property
    def calendar(self) -> CalendarContext:
        return self._calendar

    def group_by_day(
        self, records: Iterable[MediaRecord], now: datetime | None = None
    ) -> list[DayBucket]:
        """Group records by the calendar day of `created_at`.

        Args:
            records: Records in library fetch order.
            now: Instant used for records without a timestamp. Defaults to the
                current time; pass a fixed value for reproducible output.

        Returns:
            Day buckets sorted by date, most recent first.
        """
        fallback = now or datetime.now(timezone.utc)
        by_day: dict[datetime, list[MediaRecord]] = defaultdict(list)
        for record in records:
            created = record.created_at
            if created is None:
                logger.debug("Record {} has no timestamp; assigning to {}", record.id, fallback)
                created = fallback
            by_day[self._calendar.start_of_day(created)].append(record)

        buckets = [DayBucket(date=day, assets=assets) for day, assets in by_day.items()]
        buckets.sort(key=lambda b: b.date, reverse=True)
        return buckets

    def build_month_sections(self, day_buckets: Iterable[DayBucket]) -> list[MonthSection]:
        """Lay out day buckets as calendar months.

        Months that the calendar cannot resolve are logged and skipped.

        Returns:
            Month sections sorted by first day, most recent first.
        """
        by_month: dict[tuple[int, int], list[DayBucket]] = defaultdict(list)
        for bucket in day_buckets:
            local = self._calendar.localize(bucket.date)
            by_month[(local.year, local.month)].append(bucket)

        sections: list[MonthSection] = []
        for (year, month), buckets in by_month.items():
            try:
                sections.append(self._build_section(year, month, buckets))
            except MalformedCalendarDataError as ex:
                logger.warning("Skipping month {}-{}: {}", year, month, ex)
                continue

        sections.sort(key=lambda s: s.first_day, reverse=True)
        return sections

    def _build_section(self, year: int, month: int, buckets: list[DayBucket]) -> MonthSection:
        first_day = self._calendar.first_of_month(year, month)
        number_of_days = self._calendar.days_in_month(year, month)

        assets_by_day: dict[int, list[MediaRecord]] = {}
        for bucket in buckets:
            day = self._calendar.localize(bucket.date).day
            if not 1 <= day <= number_of_days:
                raise MalformedCalendarDataError(year, month, f"day {day} outside month")
            assets_by_day.setdefault(day, []).extend(bucket.assets)

        return MonthSection(
            year=year,
            month=month,
            first_day=first_day,
            number_of_days=number_of_days,
            leading_blank_cells=self._calendar.leading_blank_cells(first_day),
            assets_by_day=assets_by_day,
        )

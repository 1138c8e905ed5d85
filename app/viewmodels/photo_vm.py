"""Lightweight view model wrapper around `MediaRecord`."""

from __future__ import annotations

from dataclasses import dataclass

from core.calendar_context import CalendarContext
from core.formatting import format_duration
from core.models import MediaRecord


@dataclass
class MediaVM:
    """Expose convenient properties for bindings/templates."""

    record: MediaRecord
    calendar: CalendarContext

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def duration_label(self) -> str | None:
        """Per-clip duration badge, hidden (None) for zero-length clips."""
        return format_duration(self.record.duration_seconds)

    @property
    def day_title(self) -> str:
        """Creation day as YYYY/MM/DD, empty when the record has no timestamp."""
        if self.record.created_at is None:
            return ""
        return self.calendar.localize(self.record.created_at).strftime("%Y/%m/%d")

    @property
    def weekday_short(self) -> str:
        if self.record.created_at is None:
            return ""
        return self.calendar.localize(self.record.created_at).strftime("%a")

    @property
    def has_location(self) -> bool:
        """True if the record is geotagged."""
        return self.record.location is not None

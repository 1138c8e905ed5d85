"""Core domain models for media records, groupings and composition plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from core.geometry import AffineTransform, Rect, Size, round_half_away


@dataclass(frozen=True)
class GeoLocation:
    """A geotag with optional horizontal accuracy in metres."""

    latitude: float
    longitude: float
    horizontal_accuracy: float | None = None


@dataclass(frozen=True)
class MediaRecord:
    """A single captured clip as supplied by the photo library."""

    id: str
    created_at: datetime | None
    duration_seconds: float
    natural_size: Size
    preferred_transform: AffineTransform = field(default_factory=AffineTransform)
    location: GeoLocation | None = None
    file_path: str | None = None

    @property
    def is_geotagged(self) -> bool:
        return self.location is not None


@dataclass
class DayBucket:
    """All records created on one calendar day.

    `assets` keeps library fetch order; sort with `SortService.oldest_first`
    when temporal order matters.
    """

    date: datetime
    assets: list[MediaRecord] = field(default_factory=list)

    @property
    def asset_ids(self) -> list[str]:
        return [a.id for a in self.assets]

    @property
    def total_duration(self) -> float:
        return sum(a.duration_seconds for a in self.assets)

    @property
    def geotagged_assets(self) -> list[MediaRecord]:
        return [a for a in self.assets if a.location is not None]


@dataclass
class MonthSection:
    """One calendar month laid out as a grid."""

    year: int
    month: int
    first_day: datetime
    number_of_days: int
    leading_blank_cells: int
    assets_by_day: dict[int, list[MediaRecord]] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def days(self) -> list[int]:
        """Days of month that hold at least one record, ascending."""
        return sorted(self.assets_by_day)

    def all_assets(self) -> list[MediaRecord]:
        """Records of the whole month, flattened by ascending day."""
        return [a for day in self.days for a in self.assets_by_day[day]]

    def date_for_day(self, day: int) -> datetime:
        return self.first_day + timedelta(days=day - 1)


@dataclass
class PlaceCluster:
    """Day buckets whose average geolocation falls in one grid cell."""

    days: list[DayBucket]
    centroid: GeoLocation
    bucket_key: tuple[int, int]

    @property
    def most_recent_date(self) -> datetime:
        return max(d.date for d in self.days)

    @property
    def assets(self) -> list[MediaRecord]:
        """Every asset of every member day, geotagged or not."""
        return [a for d in self.days for a in d.assets]


@dataclass(frozen=True)
class TimelineSegment:
    """Placement of one source clip in the composition timeline."""

    source_id: str
    start: float
    duration: float
    transform: AffineTransform
    scale: float
    upside_down_corrected: bool = False

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass(frozen=True)
class OverlaySpec:
    """A text overlay anchored to the start of the composition."""

    text: str
    visible_from: float
    visible_until: float
    fade_out_duration: float
    font_size: float = 0.0
    frame: Rect | None = None
    alignment: str = "right"

    @property
    def hidden_at(self) -> float:
        """Time at which the fade-out completes."""
        return self.visible_until + self.fade_out_duration

    def opacity_at(self, t: float) -> float:
        """Overlay opacity at composition time `t`."""
        if t < self.visible_from:
            return 0.0
        if t <= self.visible_until:
            return 1.0
        if self.fade_out_duration <= 0 or t >= self.hidden_at:
            return 0.0
        return 1.0 - (t - self.visible_until) / self.fade_out_duration


@dataclass(frozen=True)
class CompositionPlan:
    """Timing and transform schedule handed to an external renderer."""

    render_size: Size
    timeline: tuple[TimelineSegment, ...]
    overlay: OverlaySpec | None = None
    frame_rate: int = 30

    @property
    def total_duration(self) -> float:
        if not self.timeline:
            return 0.0
        last = self.timeline[-1]
        return last.start + last.duration

    @property
    def frame_duration(self) -> float:
        return 1.0 / self.frame_rate

    @property
    def frame_count(self) -> int:
        return round_half_away(self.total_duration * self.frame_rate)

    @property
    def source_ids(self) -> list[str]:
        return [s.source_id for s in self.timeline]

    def segment_at(self, t: float) -> TimelineSegment | None:
        """Return the segment playing at composition time `t`."""
        for segment in self.timeline:
            if segment.start <= t < segment.end:
                return segment
        return None

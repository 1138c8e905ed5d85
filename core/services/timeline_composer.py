"""Composition planning for concatenated clip exports.

The composer decides the render frame, where each clip starts on the output
timeline, how each clip is rotated/scaled/centered into the frame, and when
the date-stamp overlay is shown. It performs no I/O; an external renderer
consumes the resulting `CompositionPlan`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo

from loguru import logger

from core.calendar_context import ensure_aware
from core.errors import EmptyInputError
from core.formatting import DEFAULT_DATE_STAMP_FORMAT, format_date_stamp
from core.geometry import AffineTransform, Rect, Size
from core.models import CompositionPlan, MediaRecord, OverlaySpec, TimelineSegment

# Overlay layout relative to the render frame
OVERLAY_FONT_RATIO = 0.055
OVERLAY_TOP_MARGIN_RATIO = 0.04
OVERLAY_RIGHT_MARGIN_RATIO = 0.05
OVERLAY_HEIGHT_RATIO = 0.1

UPSIDE_DOWN_TOLERANCE_DEGREES = 45.0

# Exact half turn; avoids the rounding residue of cos/sin(pi)
_HALF_TURN = AffineTransform.scaling(-1.0, -1.0)


@dataclass
class ComposerConfig:
    overlay_visible_seconds: float = 2.0
    overlay_fade_out_seconds: float = 0.5
    frame_rate: int = 30
    date_stamp_format: str = DEFAULT_DATE_STAMP_FORMAT
    tz: tzinfo = field(default=timezone.utc)


def oriented_rect(record: MediaRecord) -> Rect:
    """Bounding box of the record's frame under its preferred transform."""
    return record.preferred_transform.apply_to_rect(Rect.from_size(record.natural_size))


def render_size_for(record: MediaRecord) -> Size:
    return oriented_rect(record).size


def is_upside_down(transform: AffineTransform) -> bool:
    """True when the transform's rotation is within 45 degrees of a half turn."""
    return abs(abs(transform.rotation_degrees) - 180.0) < UPSIDE_DOWN_TOLERANCE_DEGREES


class TimelineComposer:
    """Builds `CompositionPlan`s from ordered records."""

    def __init__(self, config: ComposerConfig | None = None) -> None:
        self._config = config or ComposerConfig()

    def compose_plan(
        self,
        records: Sequence[MediaRecord],
        overlay_text: str | None = None,
        overlay_format: str | None = None,
        reference_instant: datetime | None = None,
        now: datetime | None = None,
    ) -> CompositionPlan:
        """Plan the concatenation of `records` in the given order.

        Args:
            records: Clips in playback order.
            overlay_text: Literal overlay text. Takes precedence over
                `overlay_format`.
            overlay_format: strftime pattern for a date-stamp overlay built from
                `reference_instant`.
            reference_instant: Instant to stamp; defaults to the earliest
                `created_at` among the records.
            now: Fallback instant when no record carries a timestamp.

        Raises:
            EmptyInputError: If `records` is empty.
        """
        if not records:
            raise EmptyInputError("cannot compose a plan from zero records")

        render_size = render_size_for(records[0])
        if render_size.width <= 0 or render_size.height <= 0:
            raise ValueError(f"record {records[0].id} has an empty frame")

        timeline: list[TimelineSegment] = []
        cursor = 0.0
        for record in records:
            timeline.append(self._segment(record, cursor, render_size))
            cursor = cursor + record.duration_seconds

        overlay = None
        if overlay_text is not None or overlay_format is not None:
            if overlay_text is None:
                instant = (
                    reference_instant
                    or self._earliest(records)
                    or now
                    or datetime.now(timezone.utc)
                )
                overlay_text = format_date_stamp(
                    instant, overlay_format or self._config.date_stamp_format, self._config.tz
                )
            overlay = self._overlay(overlay_text, render_size)

        plan = CompositionPlan(
            render_size=render_size,
            timeline=tuple(timeline),
            overlay=overlay,
            frame_rate=self._config.frame_rate,
        )
        logger.debug(
            "Composed plan: {} segments, {:.3f}s, render {}x{}",
            len(timeline),
            plan.total_duration,
            render_size.width,
            render_size.height,
        )
        return plan

    def compose_date_stamp_plan(
        self,
        record: MediaRecord,
        stamp_format: str | None = None,
        stamped_at: datetime | None = None,
    ) -> CompositionPlan:
        """Plan a single-clip export with the capture date stamped on it."""
        instant = stamped_at or record.created_at or datetime.now(timezone.utc)
        return self.compose_plan(
            [record],
            overlay_format=stamp_format or self._config.date_stamp_format,
            reference_instant=instant,
        )

    def _segment(self, record: MediaRecord, start: float, render_size: Size) -> TimelineSegment:
        rect = oriented_rect(record)
        rw, rh = rect.size.width, rect.size.height
        if rw <= 0 or rh <= 0:
            raise ValueError(f"record {record.id} has an empty frame")
        scale = min(render_size.width / rw, render_size.height / rh)

        transform = record.preferred_transform
        corrected = is_upside_down(transform)
        if corrected:
            # Half turn about the frame center; the bounding box is unchanged
            transform = (
                transform.concatenating(AffineTransform.translation(-rect.mid_x, -rect.mid_y))
                .concatenating(_HALF_TURN)
                .concatenating(AffineTransform.translation(rect.mid_x, rect.mid_y))
            )
            logger.debug("Record {} is upside down; applying half-turn correction", record.id)

        transform = (
            transform.concatenating(AffineTransform.translation(-rect.min_x, -rect.min_y))
            .concatenating(AffineTransform.scaling(scale, scale))
            .concatenating(
                AffineTransform.translation(
                    (render_size.width - rw * scale) / 2,
                    (render_size.height - rh * scale) / 2,
                )
            )
        )
        return TimelineSegment(
            source_id=record.id,
            start=start,
            duration=record.duration_seconds,
            transform=transform,
            scale=scale,
            upside_down_corrected=corrected,
        )

    def _overlay(self, text: str, render_size: Size) -> OverlaySpec:
        w, h = render_size.width, render_size.height
        return OverlaySpec(
            text=text,
            visible_from=0.0,
            visible_until=self._config.overlay_visible_seconds,
            fade_out_duration=self._config.overlay_fade_out_seconds,
            font_size=h * OVERLAY_FONT_RATIO,
            frame=Rect(
                0.0,
                h * OVERLAY_TOP_MARGIN_RATIO,
                w - w * OVERLAY_RIGHT_MARGIN_RATIO,
                h * OVERLAY_HEIGHT_RATIO,
            ),
        )

    @staticmethod
    def _earliest(records: Sequence[MediaRecord]) -> datetime | None:
        stamps = [r.created_at for r in records if r.created_at is not None]
        if not stamps:
            return None
        return min(stamps, key=ensure_aware)

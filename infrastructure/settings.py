"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.calendar_context import CalendarContext
from core.formatting import DEFAULT_DATE_STAMP_FORMAT
from core.services.place_clustering_service import DEFAULT_GRID_RESOLUTION_DEGREES
from core.services.timeline_composer import ComposerConfig


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


def _positive_float(settings: JsonSettings, key: str, default: float) -> float:
    raw = settings.get(key, default)
    try:
        value = float(raw)
    except (ValueError, TypeError):
        logger.warning("Invalid {}: {!r}; using {}", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive {}: {}; using {}", key, value, default)
        return default
    return value


def _int(settings: JsonSettings, key: str, default: int) -> int:
    raw = settings.get(key, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        logger.warning("Invalid {}: {!r}; using {}", key, raw, default)
        return default


@dataclass
class BrowserConfig:
    """Resolved configuration for grouping, clustering and export."""

    calendar: CalendarContext = field(default_factory=CalendarContext)
    grid_resolution_degrees: float = DEFAULT_GRID_RESOLUTION_DEGREES
    date_stamp_enabled: bool = True
    date_stamp_format: str = DEFAULT_DATE_STAMP_FORMAT
    overlay_visible_seconds: float = 2.0
    overlay_fade_out_seconds: float = 0.5
    frame_rate: int = 30
    album: str = "daylog"
    index_path: str | None = None
    delete_log_dir: str | None = None

    @classmethod
    def from_settings(cls, settings: JsonSettings) -> BrowserConfig:
        """Read configuration values, falling back to defaults on bad input."""
        calendar = CalendarContext.from_names(
            settings.get("calendar.timezone", "UTC"),
            _int(settings, "calendar.first_weekday", 6),
        )
        fmt = settings.get("date_stamp.format", DEFAULT_DATE_STAMP_FORMAT)
        if not isinstance(fmt, str) or not fmt:
            logger.warning("Invalid date_stamp.format: {!r}", fmt)
            fmt = DEFAULT_DATE_STAMP_FORMAT
        frame_rate = _int(settings, "export.frame_rate", 30)
        if frame_rate <= 0:
            logger.warning("Non-positive export.frame_rate: {}; using 30", frame_rate)
            frame_rate = 30
        index_path = settings.get("library.index_path")
        delete_log_dir = settings.get("delete.log_dir")
        return cls(
            calendar=calendar,
            grid_resolution_degrees=_positive_float(
                settings, "places.grid_resolution_degrees", DEFAULT_GRID_RESOLUTION_DEGREES
            ),
            date_stamp_enabled=bool(settings.get("date_stamp.enabled", True)),
            date_stamp_format=fmt,
            overlay_visible_seconds=_positive_float(settings, "overlay.visible_seconds", 2.0),
            overlay_fade_out_seconds=_positive_float(settings, "overlay.fade_out_seconds", 0.5),
            frame_rate=frame_rate,
            album=str(settings.get("library.album", "daylog") or "daylog"),
            index_path=str(index_path) if index_path else None,
            delete_log_dir=str(delete_log_dir) if delete_log_dir else None,
        )

    def composer_config(self) -> ComposerConfig:
        return ComposerConfig(
            overlay_visible_seconds=self.overlay_visible_seconds,
            overlay_fade_out_seconds=self.overlay_fade_out_seconds,
            frame_rate=self.frame_rate,
            date_stamp_format=self.date_stamp_format,
            tz=self.calendar.tz,
        )

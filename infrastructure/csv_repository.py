"""CSV-backed media library.

The album index is a CSV file with one row per clip. Rows carry the clip's
timestamp, duration, natural size, orientation and optional geotag. Malformed
rows are logged and skipped.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import csv
from pathlib import Path

from loguru import logger

from core.geometry import AffineTransform, Size
from core.models import GeoLocation, MediaRecord
from core.services.interfaces import DeleteResult, IMediaLibrary
from core.services.sort_service import SortService
from infrastructure.delete_service import DeleteService
from infrastructure.utils import format_csv_datetime, parse_csv_datetime, parse_float

REQUIRED_HEADERS = ["Id", "CreatedAt", "DurationSeconds", "Width", "Height"]
TRANSFORM_HEADERS = [
    "TransformA",
    "TransformB",
    "TransformC",
    "TransformD",
    "TransformTx",
    "TransformTy",
]
CSV_HEADERS = [
    *REQUIRED_HEADERS,
    "Album",
    *TRANSFORM_HEADERS,
    "Latitude",
    "Longitude",
    "HorizontalAccuracy",
    "FilePath",
]


def _parse_transform(row: dict[str, str], width: float, height: float) -> AffineTransform:
    """Explicit matrix columns win; a `Rotation` column in degrees is the fallback."""
    values = [parse_float(row.get(h)) for h in TRANSFORM_HEADERS]
    if all(v is not None for v in values):
        return AffineTransform(*values)  # type: ignore[arg-type]
    rotation = parse_float(row.get("Rotation"))
    if rotation is not None:
        return AffineTransform.from_degrees(rotation, width, height)
    return AffineTransform.identity()


def _parse_location(row: dict[str, str]) -> GeoLocation | None:
    lat = parse_float(row.get("Latitude"))
    lon = parse_float(row.get("Longitude"))
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        logger.warning("Out-of-range coordinate ({}, {}); ignoring geotag", lat, lon)
        return None
    return GeoLocation(lat, lon, parse_float(row.get("HorizontalAccuracy")))


def _parse_row(row: dict[str, str]) -> MediaRecord:
    record_id = (row.get("Id") or "").strip()
    if not record_id:
        raise ValueError("missing Id")
    width = parse_float(row.get("Width"))
    height = parse_float(row.get("Height"))
    if not width or not height or width <= 0 or height <= 0:
        raise ValueError(f"invalid size {row.get('Width')}x{row.get('Height')}")
    raw_duration = (row.get("DurationSeconds") or "").strip()
    duration = parse_float(raw_duration)
    if duration is None:
        if raw_duration:
            raise ValueError(f"invalid duration {raw_duration!r}")
        duration = 0.0
    if duration < 0:
        raise ValueError(f"negative duration {duration}")
    return MediaRecord(
        id=record_id,
        created_at=parse_csv_datetime(row.get("CreatedAt")),
        duration_seconds=duration,
        natural_size=Size(width, height),
        preferred_transform=_parse_transform(row, width, height),
        location=_parse_location(row),
        file_path=(row.get("FilePath") or "").strip() or None,
    )


def _fmt_number(value: float | None) -> str:
    if value is None:
        return ""
    return repr(float(value))


class CsvMediaLibrary(IMediaLibrary):
    """Load, save and delete media records in a CSV album index."""

    def __init__(
        self,
        index_path: str | Path,
        album: str | None = None,
        delete_service: DeleteService | None = None,
        delete_log_dir: str | None = None,
    ) -> None:
        self._path = Path(index_path)
        self._album = album
        self._deleter = delete_service or DeleteService()
        self._delete_log_dir = delete_log_dir
        self._sorter = SortService()

    @property
    def index_path(self) -> Path:
        return self._path

    def load(self, csv_path: str | Path | None = None) -> Iterator[MediaRecord]:
        """Yield `MediaRecord`s from the CSV at `csv_path` (default: the index)."""
        path = Path(csv_path) if csv_path is not None else self._path
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            # Validate minimal headers (extra columns are accepted but ignored)
            missing = [h for h in REQUIRED_HEADERS if h not in (reader.fieldnames or [])]
            if missing:
                raise ValueError(f"CSV missing required headers: {missing}")

            for row in reader:
                if self._album and (row.get("Album") or "").strip() not in ("", self._album):
                    continue
                try:
                    yield _parse_row(row)
                except (ValueError, TypeError, KeyError) as ex:
                    logger.error("CSV row error: {} | row={} ", ex, row)
                    continue

    def save(self, records: Iterable[MediaRecord], csv_path: str | Path | None = None) -> None:
        """Write records using canonical headers."""
        path = Path(csv_path) if csv_path is not None else self._path
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_HEADERS)
            writer.writeheader()
            for record in records:
                t = record.preferred_transform
                loc = record.location
                writer.writerow(
                    {
                        "Id": record.id,
                        "CreatedAt": format_csv_datetime(record.created_at),
                        "DurationSeconds": _fmt_number(record.duration_seconds),
                        "Width": _fmt_number(record.natural_size.width),
                        "Height": _fmt_number(record.natural_size.height),
                        "Album": self._album or "",
                        "TransformA": _fmt_number(t.a),
                        "TransformB": _fmt_number(t.b),
                        "TransformC": _fmt_number(t.c),
                        "TransformD": _fmt_number(t.d),
                        "TransformTx": _fmt_number(t.tx),
                        "TransformTy": _fmt_number(t.ty),
                        "Latitude": _fmt_number(loc.latitude) if loc else "",
                        "Longitude": _fmt_number(loc.longitude) if loc else "",
                        "HorizontalAccuracy": _fmt_number(loc.horizontal_accuracy) if loc else "",
                        "FilePath": record.file_path or "",
                    }
                )

    def fetch_records(self) -> list[MediaRecord]:
        """Return the album's records sorted by creation date, newest first."""
        if not self._path.exists():
            logger.info("Album index not found: {}", self._path)
            return []
        records = self._sorter.newest_first(self.load())
        logger.info("Loaded {} records from {}", len(records), self._path)
        return records

    def delete_records(self, ids: list[str]) -> DeleteResult:
        """Trash the clips' files and drop their rows from the index."""
        wanted = set(ids)
        found = [r for r in self.fetch_records() if r.id in wanted]
        found_ids = {r.id for r in found}

        missing = [(i, "Not in library") for i in ids if i not in found_ids]
        result = self._deleter.execute_delete(found, self._delete_log_dir, unresolved=missing)
        if result.success_ids:
            self._remove_rows(set(result.success_ids))
        return result

    def _remove_rows(self, ids: set[str]) -> None:
        # Rewrite raw rows so other albums' columns survive untouched
        with self._path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            fieldnames = list(reader.fieldnames or CSV_HEADERS)
            rows = [row for row in reader if (row.get("Id") or "").strip() not in ids]
        with self._path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
        logger.info("Removed {} rows from {}", len(ids), self._path)

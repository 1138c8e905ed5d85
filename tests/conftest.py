from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.geometry import AffineTransform, Size
from core.models import GeoLocation, MediaRecord


def _record(
    record_id: str,
    created_at: datetime | None = None,
    duration: float = 1.0,
    size: tuple[float, float] = (1920.0, 1080.0),
    transform: AffineTransform | None = None,
    location: tuple[float, float] | None = None,
    file_path: str | None = None,
) -> MediaRecord:
    return MediaRecord(
        id=record_id,
        created_at=created_at,
        duration_seconds=duration,
        natural_size=Size(*size),
        preferred_transform=transform or AffineTransform.identity(),
        location=GeoLocation(*location) if location else None,
        file_path=file_path,
    )


@pytest.fixture()
def make_record():
    return _record


@pytest.fixture()
def utc():
    def _utc(*args: int) -> datetime:
        return datetime(*args, tzinfo=timezone.utc)

    return _utc

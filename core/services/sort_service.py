"""Sorting service for `MediaRecord` sequences.

The service performs multi-key sorting across records, handling None values and
per-key ascending/descending ordering without mutating the input.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import math
from typing import Any

from core.calendar_context import ensure_aware
from core.models import MediaRecord


def _sort_value(value: Any) -> tuple[int, Any]:
    """Map a field value onto a comparable (kind, value) pair.

    Missing values sort before everything else, so a record without a
    timestamp is treated as the distant past.
    """
    if value is None:
        return (0, -math.inf)
    if isinstance(value, datetime):
        return (0, ensure_aware(value).timestamp())
    if isinstance(value, (int, float)):
        return (0, float(value))
    return (1, str(value))


class SortService:
    """Provides sorting utilities for record lists."""

    def sort(self, records: Iterable[MediaRecord], sort_keys: list[tuple[str, bool]]) -> list[MediaRecord]:
        """Return records sorted by the provided keys.

        Args:
            records: Records to sort.
            sort_keys: List of tuples (field_name, ascending); the first key is
                the primary one.
        """
        items = list(records)
        if not sort_keys:
            return items

        # Stable sorts from the least significant key up
        for field_name, ascending in reversed(sort_keys):
            items.sort(
                key=lambda r, f=field_name: _sort_value(getattr(r, f, None)),
                reverse=not ascending,
            )
        return items

    def oldest_first(self, records: Iterable[MediaRecord]) -> list[MediaRecord]:
        """Playback order: ascending creation date, missing dates first."""
        return self.sort(records, [("created_at", True)])

    def newest_first(self, records: Iterable[MediaRecord]) -> list[MediaRecord]:
        """Library fetch order: descending creation date."""
        return self.sort(records, [("created_at", False)])

"""Core service interfaces and shared data structures.

This module defines the collaborator interfaces the core depends on (media
library, renderer) and the dataclasses that describe delete planning and
results across the infrastructure and view-model layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.models import CompositionPlan, MediaRecord


@dataclass
class DeleteResult:
    """Outcome of a delete operation.

    Attributes:
        success_ids: Record ids successfully deleted.
        failed: Tuples of (id, reason) for failures.
        log_path: Optional path to a detailed log file.
    """

    success_ids: list[str]
    failed: list[tuple[str, str]]
    log_path: str | None = None


@dataclass
class DeletePlanDaySummary:
    """Summary of delete intent for a single day.

    Attributes:
        day: Day label (ISO date).
        selected_count: Number of selected records in the day.
        total_count: Total records in the day.
        is_full_delete: Whether all records of the day are selected.
    """

    day: str
    selected_count: int
    total_count: int
    is_full_delete: bool


@dataclass
class DeletePlan:
    """Planned delete operation with per-day summaries.

    Attributes:
        delete_ids: Record ids chosen for deletion, in selection order.
        day_summaries: Day-level summaries for the confirmation prompt.
        total_duration: Summed duration of the records to delete, in seconds.
    """

    delete_ids: list[str]
    day_summaries: list[DeletePlanDaySummary] = field(default_factory=list)
    total_duration: float = 0.0

    @property
    def count(self) -> int:
        return len(self.delete_ids)


@dataclass
class RenderResult:
    """Outcome reported by an external renderer."""

    success: bool
    output_path: str | None = None
    error: str | None = None


class IMediaLibrary:
    """Interface for the photo-library collaborator."""

    def fetch_records(self) -> list[MediaRecord]:
        """Return the album's video records, newest first."""
        raise NotImplementedError

    def delete_records(self, ids: list[str]) -> DeleteResult:
        """Delete the given records from the library."""
        raise NotImplementedError


class ICompositionRenderer:
    """Interface for the video export collaborator."""

    def render(self, plan: CompositionPlan) -> RenderResult:
        """Render `plan` into an output media file."""
        raise NotImplementedError

"""ViewModel for orchestrating library IO, grouping, selection and export planning."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from loguru import logger

from app.viewmodels.group_vm import DayVM
from app.viewmodels.photo_vm import MediaVM
from core.errors import EmptyInputError
from core.models import CompositionPlan, DayBucket, MediaRecord, MonthSection, PlaceCluster
from core.services.day_grouping_service import DayGroupingService
from core.services.interfaces import (
    DeletePlan,
    DeleteResult,
    ICompositionRenderer,
    IMediaLibrary,
    RenderResult,
)
from core.services.place_clustering_service import ClusteringConfig, PlaceClusteringService
from core.services.selection_service import SelectionSet
from core.services.sort_service import SortService
from core.services.timeline_composer import TimelineComposer
from infrastructure.delete_service import DeleteService
from infrastructure.settings import BrowserConfig

SELECTED_NONE = "none"
SELECTED_PARTIAL = "partial"
SELECTED_ALL = "all"


class LibraryVM:
    """Main library view-model.

    Mediates between a media library providing `MediaRecord`s and the day,
    calendar and map views. Groupings are recomputed from scratch on every
    `refresh()`.
    """

    def __init__(
        self,
        library: IMediaLibrary,
        config: BrowserConfig | None = None,
        sorter: SortService | None = None,
        delete_planner: DeleteService | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Create a LibraryVM.

        Args:
            library: Collaborator with `fetch_records()` and `delete_records(ids)`.
            config: Resolved configuration (defaults to `BrowserConfig()`).
            sorter: Sorting service (defaults to `SortService`).
            delete_planner: Builds delete plans (defaults to `DeleteService`).
            clock: Returns "now" for records without a timestamp.
        """
        self._library = library
        self._config = config or BrowserConfig()
        self._sorter = sorter or SortService()
        self._planner = delete_planner or DeleteService()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._grouping = DayGroupingService(self._config.calendar)
        self._clustering = PlaceClusteringService(
            ClusteringConfig(grid_resolution_degrees=self._config.grid_resolution_degrees)
        )
        self._composer = TimelineComposer(self._config.composer_config())
        self.selection = SelectionSet()
        self.records: list[MediaRecord] = []
        self.days: list[DayBucket] = []
        self.months: list[MonthSection] = []
        self.places: list[PlaceCluster] = []

    def refresh(self) -> None:
        """Fetch records and rebuild day, month and place groupings."""
        self.records = list(self._library.fetch_records())
        self.days = self._grouping.group_by_day(self.records, now=self._clock())
        self.months = self._grouping.build_month_sections(self.days)
        self.places = self._clustering.cluster_by_place(self.days)
        known = {r.id for r in self.records}
        stale = [i for i in self.selection.ids if i not in known]
        if stale:
            self.selection.subtract(stale)
        logger.info(
            "Library refreshed: {} records, {} days, {} months, {} places",
            len(self.records),
            len(self.days),
            len(self.months),
            len(self.places),
        )

    def day_view_models(self) -> list[DayVM]:
        calendar = self._config.calendar
        return [
            DayVM(date=d.date, items=[MediaVM(r, calendar) for r in d.assets]) for d in self.days
        ]

    def find_record(self, record_id: str) -> MediaRecord | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    # Selection
    def toggle_item(self, record_id: str) -> bool:
        return self.selection.toggle(record_id)

    def toggle_records(self, records: Iterable[MediaRecord]) -> None:
        self.selection.toggle_bucket(r.id for r in records)

    def toggle_day(self, bucket: DayBucket) -> None:
        self.toggle_records(bucket.assets)

    def toggle_month(self, section: MonthSection) -> None:
        self.toggle_records(section.all_assets())

    def toggle_place(self, cluster: PlaceCluster) -> None:
        self.toggle_records(cluster.assets)

    def selection_state(self, records: Iterable[MediaRecord]) -> str:
        """Return "all", "partial" or "none"; empty groups are never selected."""
        ids = [r.id for r in records]
        if not ids:
            return SELECTED_NONE
        if self.selection.all_selected(ids):
            return SELECTED_ALL
        if self.selection.partially_selected(ids):
            return SELECTED_PARTIAL
        return SELECTED_NONE

    def day_state(self, bucket: DayBucket) -> str:
        return self.selection_state(bucket.assets)

    def month_state(self, section: MonthSection) -> str:
        return self.selection_state(section.all_assets())

    def select_all(self) -> None:
        self.selection.union(r.id for r in self.records)

    def clear_selection(self) -> None:
        self.selection.clear()

    def selected_records(self) -> list[MediaRecord]:
        """Selected records in library order."""
        return [r for d in self.days for r in d.assets if r.id in self.selection]

    # Playback / export
    def playback_order(self, records: Iterable[MediaRecord]) -> list[MediaRecord]:
        return self._sorter.oldest_first(records)

    def compose_export(self, records: Iterable[MediaRecord]) -> CompositionPlan:
        """Plan an export of `records` in playback order with the date overlay.

        Raises:
            EmptyInputError: If there is nothing to export.
        """
        ordered = self.playback_order(records)
        return self._composer.compose_plan(
            ordered, overlay_format=self._config.date_stamp_format, now=self._clock()
        )

    def export(
        self, records: Iterable[MediaRecord], renderer: ICompositionRenderer
    ) -> RenderResult | None:
        """Compose and hand a plan to `renderer`; None when there is nothing to export."""
        try:
            plan = self.compose_export(records)
        except EmptyInputError as ex:
            logger.info("Export skipped: {}", ex)
            return None
        return self._render(plan, renderer)

    def compose_capture_stamp(
        self, record: MediaRecord, stamped_at: datetime | None = None
    ) -> CompositionPlan | None:
        """Plan stamping a freshly captured clip; None when date stamps are disabled."""
        if not self._config.date_stamp_enabled:
            return None
        return self._composer.compose_date_stamp_plan(record, stamped_at=stamped_at)

    def stamp_capture(
        self, record: MediaRecord, renderer: ICompositionRenderer, stamped_at: datetime | None = None
    ) -> RenderResult | None:
        """Render the date-stamped copy of a new capture, if stamping is enabled."""
        plan = self.compose_capture_stamp(record, stamped_at)
        if plan is None:
            logger.debug("Date stamp disabled; keeping capture {} as recorded", record.id)
            return None
        return self._render(plan, renderer)

    @staticmethod
    def _render(plan: CompositionPlan, renderer: ICompositionRenderer) -> RenderResult:
        result = renderer.render(plan)
        if result.success:
            logger.info("Export finished: {} ({:.1f}s)", result.output_path, plan.total_duration)
        else:
            logger.error("Export failed: {}", result.error)
        return result

    # Delete
    def plan_delete(self, records: Iterable[MediaRecord] | None = None) -> DeletePlan:
        """Plan deleting `records` (default: the current selection)."""
        ids = [r.id for r in records] if records is not None else list(self.selection)
        return self._planner.plan_delete(self.days, ids)

    def delete_message(self, plan: DeletePlan) -> str:
        return self._planner.confirmation_message(plan)

    def delete(self, plan: DeletePlan) -> DeleteResult:
        """Execute `plan` through the library, then clear selection and refresh."""
        if not plan.delete_ids:
            return DeleteResult(success_ids=[], failed=[])
        result = self._library.delete_records(plan.delete_ids)
        if result.failed:
            logger.warning("Failed to delete {} records: {}", len(result.failed), result.failed)
        self.selection.clear()
        self.refresh()
        return result

    @property
    def day_count(self) -> int:
        """Number of day buckets currently loaded."""
        return len(self.days)

from __future__ import annotations

from datetime import datetime, timezone

from app.viewmodels.main_vm import SELECTED_ALL, SELECTED_NONE, SELECTED_PARTIAL, LibraryVM
from core.services.interfaces import DeleteResult, RenderResult
from infrastructure.settings import BrowserConfig

NOW = datetime(2024, 3, 10, 12, tzinfo=timezone.utc)


class FakeLibrary:
    def __init__(self, records) -> None:
        self.records = list(records)
        self.deleted: list[list[str]] = []

    def fetch_records(self):
        return sorted(self.records, key=lambda r: r.created_at, reverse=True)

    def delete_records(self, ids):
        self.deleted.append(list(ids))
        self.records = [r for r in self.records if r.id not in ids]
        return DeleteResult(success_ids=list(ids), failed=[])


class FakeRenderer:
    def __init__(self) -> None:
        self.plans = []

    def render(self, plan):
        self.plans.append(plan)
        return RenderResult(success=True, output_path="/tmp/out.mov")


def _library(make_record, utc) -> FakeLibrary:
    return FakeLibrary(
        [
            make_record("m1", utc(2024, 3, 1, 9), duration=2.0, location=(35.0, 139.0)),
            make_record("m2", utc(2024, 3, 1, 18), duration=3.0, location=(35.0002, 139.0001)),
            make_record("m3", utc(2024, 3, 5, 12), duration=4.0),
            make_record("f1", utc(2024, 2, 29, 12), duration=1.0, location=(10.0, 10.0)),
        ]
    )


def _vm(library) -> LibraryVM:
    vm = LibraryVM(library, clock=lambda: NOW)
    vm.refresh()
    return vm


def test_refresh_builds_groupings(make_record, utc) -> None:
    vm = _vm(_library(make_record, utc))

    assert [d.date.day for d in vm.days] == [5, 1, 29]
    assert [m.id for m in vm.months] == ["2024-03", "2024-02"]
    assert len(vm.places) == 2
    assert vm.places[0].bucket_key == (35000, 139000)
    assert vm.day_count == 3
    assert vm.day_view_models()[1].duration_label == "0:05"


def test_day_and_month_selection_states(make_record, utc) -> None:
    vm = _vm(_library(make_record, utc))
    march_first = vm.days[1]

    vm.toggle_item("m1")
    assert vm.day_state(march_first) == SELECTED_PARTIAL
    assert vm.month_state(vm.months[0]) == SELECTED_PARTIAL

    vm.toggle_day(march_first)
    assert vm.day_state(march_first) == SELECTED_ALL

    vm.toggle_day(march_first)
    assert vm.day_state(march_first) == SELECTED_NONE

    vm.toggle_month(vm.months[0])
    assert vm.month_state(vm.months[0]) == SELECTED_ALL
    assert vm.month_state(vm.months[1]) == SELECTED_NONE
    assert vm.selection_state([]) == SELECTED_NONE


def test_place_toggle_selects_cluster_assets(make_record, utc) -> None:
    vm = _vm(_library(make_record, utc))

    vm.toggle_place(vm.places[0])

    assert vm.selection.ids == {"m1", "m2"}


def test_export_uses_playback_order_and_date_stamp(make_record, utc) -> None:
    vm = _vm(_library(make_record, utc))
    renderer = FakeRenderer()

    result = vm.export(vm.records, renderer)

    assert result.success
    (plan,) = renderer.plans
    assert plan.source_ids == ["f1", "m1", "m2", "m3"]
    assert plan.total_duration == 10.0
    assert plan.overlay.text == "24.02.29"


def test_share_export_keeps_overlay_when_capture_stamp_disabled(make_record, utc) -> None:
    library = _library(make_record, utc)
    vm = LibraryVM(library, config=BrowserConfig(date_stamp_enabled=False), clock=lambda: NOW)
    vm.refresh()

    plan = vm.compose_export(vm.records)

    assert plan.overlay is not None
    assert plan.overlay.text == "24.02.29"


def test_capture_stamp_renders_when_enabled(make_record, utc) -> None:
    vm = LibraryVM(FakeLibrary([]), config=BrowserConfig(date_stamp_format="%Y.%m.%d"))
    renderer = FakeRenderer()
    clip = make_record("new", utc(2024, 7, 4, 12), duration=3.0)

    result = vm.stamp_capture(clip, renderer)

    assert result.success
    (plan,) = renderer.plans
    assert plan.source_ids == ["new"]
    assert plan.overlay.text == "2024.07.04"


def test_capture_stamp_skipped_when_disabled(make_record, utc) -> None:
    vm = LibraryVM(FakeLibrary([]), config=BrowserConfig(date_stamp_enabled=False))
    renderer = FakeRenderer()
    clip = make_record("new", utc(2024, 7, 4, 12))

    assert vm.compose_capture_stamp(clip) is None
    assert vm.stamp_capture(clip, renderer) is None
    assert renderer.plans == []


def test_export_of_nothing_skips_renderer(make_record, utc) -> None:
    vm = _vm(_library(make_record, utc))
    renderer = FakeRenderer()

    assert vm.export([], renderer) is None
    assert renderer.plans == []


def test_delete_selection_refreshes_library(make_record, utc) -> None:
    library = _library(make_record, utc)
    vm = _vm(library)
    vm.toggle_day(vm.days[1])

    plan = vm.plan_delete()
    assert vm.delete_message(plan) == "Items: 2  Total: 0:05\nThis cannot be undone"

    result = vm.delete(plan)

    assert sorted(result.success_ids) == ["m1", "m2"]
    assert library.deleted == [plan.delete_ids]
    assert not vm.selection
    assert [d.date.day for d in vm.days] == [5, 29]


def test_refresh_drops_stale_selection(make_record, utc) -> None:
    library = _library(make_record, utc)
    vm = _vm(library)
    vm.select_all()
    library.records = [r for r in library.records if r.id != "m3"]

    vm.refresh()

    assert vm.selection.ids == {"m1", "m2", "f1"}
    assert [r.id for r in vm.selected_records()] == ["m2", "m1", "f1"]


def test_empty_delete_plan_is_noop(make_record, utc) -> None:
    library = _library(make_record, utc)
    vm = _vm(library)

    result = vm.delete(vm.plan_delete())

    assert result.success_ids == []
    assert library.deleted == []

from __future__ import annotations

from core.services.selection_service import SelectionSet


def test_toggle_flips_membership() -> None:
    selection = SelectionSet()

    assert selection.toggle("a") is True
    assert selection.contains("a")
    assert selection.toggle("a") is False
    assert "a" not in selection
    assert len(selection) == 0


def test_all_and_partial_queries() -> None:
    selection = SelectionSet(["a", "b"])

    assert selection.all_selected(["a", "b"])
    assert not selection.partially_selected(["a", "b"])
    assert not selection.all_selected(["a", "c"])
    assert selection.partially_selected(["a", "c"])
    assert not selection.partially_selected(["c", "d"])


def test_empty_bucket_is_vacuously_all_selected() -> None:
    selection = SelectionSet()

    assert selection.all_selected([])
    assert not selection.partially_selected([])


def test_union_and_subtract() -> None:
    selection = SelectionSet()

    selection.union(["a", "b", "c"])
    selection.subtract(["b", "zzz"])

    assert selection.ids == frozenset({"a", "c"})
    assert list(selection) == ["a", "c"]


def test_toggle_bucket_selects_then_clears() -> None:
    selection = SelectionSet(["a"])

    selection.toggle_bucket(["a", "b"])
    assert selection.ids == {"a", "b"}

    selection.toggle_bucket(["a", "b"])
    assert not selection


def test_toggle_bucket_ignores_empty_bucket() -> None:
    selection = SelectionSet(["a"])

    selection.toggle_bucket([])

    assert selection.ids == {"a"}

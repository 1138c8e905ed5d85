from __future__ import annotations

from core.services.sort_service import SortService


def test_multi_key_sort(make_record, utc) -> None:
    records = [
        make_record("b", utc(2024, 1, 1), duration=5.0),
        make_record("a", utc(2024, 1, 2), duration=5.0),
        make_record("c", utc(2024, 1, 3), duration=1.0),
    ]

    result = SortService().sort(records, [("duration_seconds", False), ("id", True)])

    assert [r.id for r in result] == ["a", "b", "c"]
    assert [r.id for r in records] == ["b", "a", "c"]


def test_newest_first_keeps_ties_in_input_order(make_record, utc) -> None:
    records = [
        make_record("x", utc(2024, 1, 1)),
        make_record("y", utc(2024, 1, 1)),
        make_record("z", utc(2024, 1, 5)),
    ]

    assert [r.id for r in SortService().newest_first(records)] == ["z", "x", "y"]


def test_no_keys_returns_copy(make_record) -> None:
    records = [make_record("a"), make_record("b")]

    result = SortService().sort(records, [])

    assert result == records
    assert result is not records

"""Identifier selection shared by the day, month and place views.

`SelectionSet` holds no state beyond the identifiers. It is not synchronized;
one interaction stream owns it at a time.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class SelectionSet:
    """A mutable set of selected item identifiers."""

    def __init__(self, ids: Iterable[str] | None = None) -> None:
        self._ids: set[str] = set(ids or ())

    def toggle(self, item_id: str) -> bool:
        """Flip membership of `item_id`; return True when it is now selected."""
        if item_id in self._ids:
            self._ids.discard(item_id)
            return False
        self._ids.add(item_id)
        return True

    def contains(self, item_id: str) -> bool:
        return item_id in self._ids

    def all_selected(self, ids: Iterable[str]) -> bool:
        """True iff every id is selected; vacuously True for no ids.

        Bucket views must treat an empty bucket as unselected themselves.
        """
        return self._ids.issuperset(ids)

    def partially_selected(self, ids: Iterable[str]) -> bool:
        """True iff some, but not all, of `ids` are selected."""
        wanted = set(ids)
        return bool(wanted & self._ids) and not wanted <= self._ids

    def union(self, ids: Iterable[str]) -> None:
        self._ids.update(ids)

    def subtract(self, ids: Iterable[str]) -> None:
        self._ids.difference_update(ids)

    def toggle_bucket(self, ids: Iterable[str]) -> None:
        """Deselect a fully selected bucket, otherwise select all of it.

        Empty buckets are left untouched.
        """
        wanted = set(ids)
        if not wanted:
            return
        if wanted <= self._ids:
            self.subtract(wanted)
        else:
            self.union(wanted)

    def clear(self) -> None:
        self._ids.clear()

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

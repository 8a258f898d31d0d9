"""Fixed-capacity id collections used for the per-account indices.

A BoundedIndex never grows past its bound: try_push raises IndexFullError
instead of evicting. Removal swaps the last element into the freed slot,
so ordering is not preserved across removals.
"""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class IndexFullError(Exception):
    """Raised when pushing onto a BoundedIndex that is at capacity."""

    def __init__(self, bound: int) -> None:
        self.bound = bound
        super().__init__(f"Index is full (bound {bound})")


class BoundedIndex(Generic[T]):
    """Array-backed sequence with a hard maximum length.

    Thread-safety: not thread-safe. Callers run one action at a time.
    """

    _items: list[T]
    bound: int

    def __init__(self, bound: int, items: list[T] | None = None) -> None:
        if bound < 0:
            raise ValueError(f"bound must be >= 0, got {bound}")
        initial = list(items) if items else []
        if len(initial) > bound:
            raise IndexFullError(bound)
        self.bound = bound
        self._items = initial

    def try_push(self, item: T) -> None:
        """Append item, raising IndexFullError if the index is full."""
        if len(self._items) >= self.bound:
            raise IndexFullError(self.bound)
        self._items.append(item)

    def is_full(self) -> bool:
        return len(self._items) >= self.bound

    def swap_remove(self, item: T) -> bool:
        """Remove the first occurrence of item in O(1) after lookup.

        The last element takes the removed element's place.

        Returns:
            True if the item was present and removed, False otherwise
        """
        try:
            index = self._items.index(item)
        except ValueError:
            return False
        last = self._items.pop()
        if index < len(self._items):
            self._items[index] = last
        return True

    def to_list(self) -> list[T]:
        return list(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"BoundedIndex(bound={self.bound}, items={self._items!r})"

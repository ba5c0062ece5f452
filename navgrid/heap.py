"""
Indexed binary heap used as the A* open set.

Elements are integer ids in ``[0, capacity)``. A side array maps every id to
its current slot so membership tests and in-place reprioritization are O(1)
and O(log n) respectively.
"""

from __future__ import annotations
from typing import Callable, List

Compare = Callable[[int, int], int]


class IndexedPriorityQueue:
    """
    Fixed-capacity heap ordered by a caller-supplied comparator.

    ``compare(a, b)`` returns a positive number when ``a`` should be served
    before ``b``, negative when after, zero when equal. The element comparing
    greatest always sits at slot 0.
    """

    def __init__(self, capacity: int, compare: Compare) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._compare = compare
        self._items: List[int] = [0] * capacity
        # slot of each id; only meaningful while the id is queued
        self._slots: List[int] = [0] * capacity
        self._count = 0

    @property
    def count(self) -> int:
        """Number of queued elements."""
        return self._count

    def __len__(self) -> int:
        return self._count

    def __contains__(self, item: int) -> bool:
        return self.contains(item)

    def add(self, item: int) -> None:
        """Queue ``item`` and restore heap order. Raises OverflowError when full."""
        if self._count >= self.capacity:
            raise OverflowError(
                f"priority queue capacity {self.capacity} exceeded"
            )
        slot = self._count
        self._items[slot] = item
        self._slots[item] = slot
        self._count += 1
        self._sort_up(item)

    def remove_first(self) -> int:
        """Pop and return the element that compares greatest."""
        if self._count == 0:
            raise IndexError("remove_first from an empty priority queue")
        first = self._items[0]
        self._count -= 1
        last = self._items[self._count]
        self._items[0] = last
        self._slots[last] = 0
        self._sort_down(last)
        return first

    def update_item(self, item: int) -> None:
        """Re-sift ``item`` upward after its priority improved."""
        self._sort_up(item)

    def contains(self, item: int) -> bool:
        """
        True if ``item`` is queued. The slot lookup is checked against the
        backing storage so a stale slot from an earlier search never matches.
        """
        slot = self._slots[item]
        return slot < self._count and self._items[slot] == item

    def clear(self) -> None:
        """Drop all elements in O(1); storage is overwritten on later adds."""
        self._count = 0

    def _sort_down(self, item: int) -> None:
        items = self._items
        compare = self._compare
        while True:
            slot = self._slots[item]
            left = slot * 2 + 1
            right = left + 1
            if left >= self._count:
                return
            swap_slot = left
            # right wins only when strictly greater than left
            if right < self._count and compare(items[left], items[right]) < 0:
                swap_slot = right
            if compare(item, items[swap_slot]) < 0:
                self._swap(item, items[swap_slot])
            else:
                return

    def _sort_up(self, item: int) -> None:
        items = self._items
        compare = self._compare
        slot = self._slots[item]
        while slot > 0:
            parent = items[(slot - 1) // 2]
            if compare(item, parent) > 0:
                self._swap(item, parent)
                slot = self._slots[item]
            else:
                break

    def _swap(self, a: int, b: int) -> None:
        slot_a = self._slots[a]
        slot_b = self._slots[b]
        self._items[slot_a] = b
        self._items[slot_b] = a
        self._slots[a] = slot_b
        self._slots[b] = slot_a

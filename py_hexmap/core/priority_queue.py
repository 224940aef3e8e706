"""
Bucket priority queue over cell indices.

Priorities are small non-negative integers, so instead of a heap the queue
keeps one singly linked list per priority. Links are stored by cell index in
a flat ``next`` table, which means a cell can be in the queue at most once.
"""

from typing import List

NO_CELL = -1


class HexCellPriorityQueue:
    """
    Integer-keyed priority queue with O(1) amortized enqueue and dequeue.

    Within a bucket the most recently enqueued cell comes out first. The
    minimum watermark only moves down on enqueue; dequeue scans upward from
    it, so a whole search costs O(cells + highest priority).
    """

    def __init__(self, cell_count: int):
        self._next: List[int] = [NO_CELL] * cell_count
        self._buckets: List[int] = []
        self._count = 0
        self._minimum = 0

    def __len__(self) -> int:
        return self._count

    def __bool__(self) -> bool:
        return self._count > 0

    @property
    def capacity(self) -> int:
        return len(self._next)

    def enqueue(self, cell: int, priority: int) -> None:
        """Insert ``cell`` with the given priority."""
        if priority < 0:
            raise ValueError(f"Priority must be non-negative, got {priority}")

        if self._count == 0 or priority < self._minimum:
            self._minimum = priority
        self._count += 1

        buckets = self._buckets
        if priority >= len(buckets):
            buckets.extend([NO_CELL] * (priority + 1 - len(buckets)))

        self._next[cell] = buckets[priority]
        buckets[priority] = cell

    def dequeue(self) -> int:
        """Remove and return a cell with the lowest priority."""
        if self._count == 0:
            raise IndexError("dequeue from an empty priority queue")

        buckets = self._buckets
        minimum = self._minimum
        while buckets[minimum] == NO_CELL:
            minimum += 1
        self._minimum = minimum

        cell = buckets[minimum]
        buckets[minimum] = self._next[cell]
        self._count -= 1
        return cell

    def change(self, cell: int, old_priority: int, new_priority: int) -> None:
        """Move a queued cell from ``old_priority`` to ``new_priority``."""
        buckets = self._buckets
        current = buckets[old_priority] if old_priority < len(buckets) else NO_CELL
        if current == NO_CELL:
            raise KeyError(f"Cell {cell} is not queued at priority {old_priority}")
        if current == cell:
            buckets[old_priority] = self._next[cell]
        else:
            following = self._next[current]
            while following != cell:
                if following == NO_CELL:
                    raise KeyError(f"Cell {cell} is not queued at priority {old_priority}")
                current = following
                following = self._next[current]
            self._next[current] = self._next[cell]

        self._count -= 1
        self.enqueue(cell, new_priority)

    def clear(self) -> None:
        """Empty the queue in O(1); stale links are overwritten on the next enqueue."""
        self._buckets = []
        self._count = 0
        self._minimum = 0

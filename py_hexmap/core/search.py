"""
Shared search state for all frontier-based walks over the grid.

A SearchContext owns one bucket queue and a per-cell phase tag. Each new
search bumps the phase by two, so a cell's tag tells its state without any
per-search reset:

- ``phase < current``      unvisited in this search
- ``phase == current``     in the frontier
- ``phase == current + 1`` closed (dequeued and finalized)

Contexts are not shareable between concurrent searches; callers run one
search at a time and each search clears the queue when it starts.
"""

from typing import List

from .priority_queue import NO_CELL, HexCellPriorityQueue


class SearchContext:
    """Reusable frontier queue plus per-cell distance, heuristic and phase fields."""

    def __init__(self, cell_count: int):
        self.phase = 0
        self._allocate(cell_count)

    def _allocate(self, cell_count: int) -> None:
        self.frontier = HexCellPriorityQueue(cell_count)
        self.distance: List[int] = [0] * cell_count
        self.heuristic: List[int] = [0] * cell_count
        self.search_phase: List[int] = [0] * cell_count
        self.path_from: List[int] = [NO_CELL] * cell_count

    @property
    def cell_count(self) -> int:
        return len(self.search_phase)

    def ensure_size(self, cell_count: int) -> None:
        """Reallocate per-cell fields if the grid size changed."""
        if cell_count != self.cell_count:
            self._allocate(cell_count)

    def begin_search(self) -> int:
        """Start a new independent search and return its phase."""
        self.phase += 2
        self.frontier.clear()
        return self.phase

    def reset_phases(self) -> None:
        """Mark every cell as never visited."""
        self.search_phase = [0] * self.cell_count
        self.frontier.clear()

    def priority(self, cell: int) -> int:
        return self.distance[cell] + self.heuristic[cell]

    def is_unvisited(self, cell: int) -> bool:
        return self.search_phase[cell] < self.phase

    def in_frontier(self, cell: int) -> bool:
        return self.search_phase[cell] == self.phase

    def is_closed(self, cell: int) -> bool:
        return self.search_phase[cell] > self.phase

    def open(self, cell: int, distance: int, heuristic: int = 0, path_from: int = NO_CELL) -> None:
        """Add an unvisited cell to the frontier."""
        self.search_phase[cell] = self.phase
        self.distance[cell] = distance
        self.heuristic[cell] = heuristic
        self.path_from[cell] = path_from
        self.frontier.enqueue(cell, distance + heuristic)

    def improve(self, cell: int, distance: int, path_from: int = NO_CELL) -> None:
        """Lower the distance of a cell already in the frontier."""
        old_priority = self.priority(cell)
        self.distance[cell] = distance
        self.path_from[cell] = path_from
        self.frontier.change(cell, old_priority, self.priority(cell))

    def take(self) -> int:
        """Dequeue the next cell without closing it."""
        return self.frontier.dequeue()

    def close_next(self) -> int:
        """Dequeue the next cell and mark it closed."""
        cell = self.frontier.dequeue()
        self.search_phase[cell] += 1
        return cell

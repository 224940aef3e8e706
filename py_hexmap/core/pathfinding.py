"""
Grid search: turn-based pathfinding and visibility.

Both searches run on the shared SearchContext. Pathfinding is A* with the
hex distance to the target as heuristic; visibility is a uniform-cost walk
out to a fixed range.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from .hex_grid import HexGrid
from .hex_metrics import HexDirection, HexEdgeType
from .search import SearchContext

logger = structlog.get_logger()

ROAD_COST = 1
FLAT_COST = 5
SLOPE_COST = 10


def turn_of(distance: int, speed: int) -> int:
    """Index of the turn in which a cumulative movement cost is spent."""
    if distance <= 0:
        return 0
    return (distance - 1) // speed


@dataclass
class HexPath:
    """A found path, start and target included."""

    cells: List[int]
    distances: List[int]
    speed: int
    turns: List[int] = field(init=False)

    def __post_init__(self):
        self.turns = [turn_of(d, self.speed) for d in self.distances]

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def cost(self) -> int:
        return self.distances[-1]

    @property
    def turn_count(self) -> int:
        """Turns needed to reach the end of the path."""
        return self.turns[-1] + 1 if self.cost > 0 else 0


class HexPathfinder:
    """Pathfinding and visibility queries against one grid."""

    def __init__(self, grid: HexGrid, context: Optional[SearchContext] = None):
        self.grid = grid
        self.context = context or SearchContext(grid.cell_count)

    def movement_cost(self, current: int, direction: HexDirection, neighbor: int) -> Optional[int]:
        """
        Cost of stepping from ``current`` into ``neighbor``, None if impassable.

        Roads make any passable edge cost 1. Otherwise flat edges cost 5 and
        slopes 10, plus the neighbor's urban, farm and plant levels. Cliffs
        and wall boundaries without a road block movement.
        """
        grid = self.grid
        edge_type = grid.get_edge_type(current, neighbor)
        if edge_type == HexEdgeType.CLIFF:
            return None
        if grid.roads[current, direction]:
            return ROAD_COST
        if grid.walled[current] != grid.walled[neighbor]:
            return None

        cost = FLAT_COST if edge_type == HexEdgeType.FLAT else SLOPE_COST
        cost += (
            int(grid.urban_level[neighbor])
            + int(grid.farm_level[neighbor])
            + int(grid.plant_level[neighbor])
        )
        return cost

    def is_valid_destination(self, cell: int) -> bool:
        return not self.grid.is_underwater(cell) and not self.grid.occupied[cell]

    def find_path(self, from_cell: int, to_cell: int, speed: int) -> Optional[HexPath]:
        """
        Find the cheapest path between two cells for a unit with ``speed`` points per turn.

        Movement points left over at the end of a turn are lost: a step that
        does not fit into the current turn starts the next one from scratch.

        Returns:
            HexPath, or None when the target cannot be reached
        """
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}")
        self.context.ensure_size(self.grid.cell_count)

        if not self._search(from_cell, to_cell, speed):
            logger.debug("No path found", from_cell=from_cell, to_cell=to_cell)
            return None

        ctx = self.context
        cells = []
        current = to_cell
        while current != from_cell:
            cells.append(current)
            current = ctx.path_from[current]
        cells.append(from_cell)
        cells.reverse()
        return HexPath(cells=cells, distances=[ctx.distance[c] for c in cells], speed=speed)

    def _search(self, from_cell: int, to_cell: int, speed: int) -> bool:
        grid = self.grid
        ctx = self.context
        ctx.begin_search()
        target = grid.coordinates(to_cell)
        ctx.open(from_cell, 0)

        while ctx.frontier:
            current = ctx.close_next()
            if current == to_cell:
                return True

            current_distance = ctx.distance[current]
            current_turn = turn_of(current_distance, speed)

            for direction, neighbor in grid.iter_neighbors(current):
                if ctx.is_closed(neighbor):
                    continue
                if not self.is_valid_destination(neighbor):
                    continue
                move_cost = self.movement_cost(current, direction, neighbor)
                if move_cost is None:
                    continue

                distance = current_distance + move_cost
                turn = turn_of(distance, speed)
                if turn > current_turn:
                    distance = turn * speed + move_cost

                if ctx.is_unvisited(neighbor):
                    ctx.open(
                        neighbor,
                        distance,
                        heuristic=grid.coordinates(neighbor).distance_to(target),
                        path_from=current,
                    )
                elif distance < ctx.distance[neighbor]:
                    ctx.improve(neighbor, distance, path_from=current)

        return False

    def get_visible_cells(self, from_cell: int, vision_range: int) -> List[int]:
        """All cells within ``vision_range`` steps of ``from_cell``, nearest first."""
        self.context.ensure_size(self.grid.cell_count)
        ctx = self.context
        ctx.begin_search()
        ctx.open(from_cell, 0)

        visible = []
        while ctx.frontier:
            current = ctx.close_next()
            visible.append(current)

            distance = ctx.distance[current] + 1
            if distance > vision_range:
                continue
            for _, neighbor in self.grid.iter_neighbors(current):
                if ctx.is_closed(neighbor):
                    continue
                if ctx.is_unvisited(neighbor):
                    ctx.open(neighbor, distance)
                elif distance < ctx.distance[neighbor]:
                    ctx.improve(neighbor, distance)

        return visible

    def increase_visibility(self, from_cell: int, vision_range: int) -> List[int]:
        cells = self.get_visible_cells(from_cell, vision_range)
        for cell in cells:
            self.grid.increase_visibility(cell)
        return cells

    def decrease_visibility(self, from_cell: int, vision_range: int) -> List[int]:
        cells = self.get_visible_cells(from_cell, vision_range)
        for cell in cells:
            self.grid.decrease_visibility(cell)
        return cells


"""
Mobile units on the map.

Units occupy one cell, block pathfinding into it, and reveal the cells around
them. Moving a unit updates visibility along every cell of its path, so the
cells it passes through become explored.
"""

from typing import List, Optional

import structlog

from .hex_grid import HexGrid
from .pathfinding import HexPath, HexPathfinder

logger = structlog.get_logger()


class HexUnit:
    """A unit standing on a cell."""

    VISION_RANGE = 3
    MOVEMENT_POINTS = 24

    def __init__(self, roster: "UnitRoster", location: int, orientation: float = 0.0):
        self.roster = roster
        self.location = location
        self.orientation = orientation % 360.0

    def __repr__(self) -> str:
        return f"HexUnit(location={self.location}, orientation={self.orientation})"

    def is_valid_destination(self, cell: int) -> bool:
        return self.roster.pathfinder.is_valid_destination(cell)

    def find_path(self, to_cell: int) -> Optional[HexPath]:
        return self.roster.pathfinder.find_path(self.location, to_cell, self.MOVEMENT_POINTS)


class UnitRoster:
    """Owns the units of one grid and keeps occupancy and visibility in sync."""

    def __init__(self, grid: HexGrid, pathfinder: Optional[HexPathfinder] = None):
        self.grid = grid
        self.pathfinder = pathfinder or HexPathfinder(grid)
        self.units: List[HexUnit] = []

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self):
        return iter(self.units)

    def add_unit(self, location: int, orientation: float = 0.0) -> HexUnit:
        if self.grid.occupied[location]:
            raise ValueError(f"Cell {location} is already occupied")
        unit = HexUnit(self, location, orientation)
        self.units.append(unit)
        self.grid.occupied[location] = True
        self.pathfinder.increase_visibility(location, unit.VISION_RANGE)
        logger.debug("Unit added", location=location)
        return unit

    def remove_unit(self, unit: HexUnit) -> None:
        self.units.remove(unit)
        self._die(unit)

    def clear(self) -> None:
        for unit in self.units:
            self._die(unit)
        self.units = []

    def _die(self, unit: HexUnit) -> None:
        self.pathfinder.decrease_visibility(unit.location, unit.VISION_RANGE)
        self.grid.occupied[unit.location] = False

    def travel(self, unit: HexUnit, path: HexPath) -> None:
        """Move a unit along a path found for it, revealing each cell it passes."""
        cells = path.cells
        if cells[0] != unit.location:
            raise ValueError("Path does not start at the unit's location")

        vision = unit.VISION_RANGE
        self.grid.occupied[unit.location] = False
        self.pathfinder.decrease_visibility(unit.location, vision)
        for cell in cells[1:-1]:
            self.pathfinder.increase_visibility(cell, vision)
            self.pathfinder.decrease_visibility(cell, vision)

        unit.location = cells[-1]
        self.grid.occupied[unit.location] = True
        self.pathfinder.increase_visibility(unit.location, vision)
        logger.debug("Unit travelled", to_cell=unit.location, steps=len(cells) - 1)

"""
Brush editing of map cells.

An edit applies the same set of attribute changes to every cell within a hex
distance of the brush center. When consecutive edits move between adjacent
cells (a drag), rivers and roads can be drawn along the drag direction.
"""

from enum import Enum
from typing import List, Optional

import structlog
from pydantic import BaseModel, Field

from .hex_grid import NO_CELL, HexGrid
from .hex_metrics import DIRECTIONS, HexCoordinates, HexDirection

logger = structlog.get_logger()


class OptionalToggle(str, Enum):
    IGNORE = "ignore"
    YES = "yes"
    NO = "no"


class CellEdit(BaseModel):
    """Attribute changes for one brush stroke; ``None`` leaves an attribute alone."""

    terrain_type: Optional[int] = Field(default=None, ge=0, le=4)
    elevation: Optional[int] = Field(default=None, ge=-127, le=128)
    water_level: Optional[int] = Field(default=None, ge=0, le=255)
    urban_level: Optional[int] = Field(default=None, ge=0, le=3)
    farm_level: Optional[int] = Field(default=None, ge=0, le=3)
    plant_level: Optional[int] = Field(default=None, ge=0, le=3)
    special_index: Optional[int] = Field(default=None, ge=0, le=3)
    walled: Optional[bool] = None
    river: OptionalToggle = OptionalToggle.IGNORE
    road: OptionalToggle = OptionalToggle.IGNORE


def brush_cells(grid: HexGrid, center: int, brush_size: int) -> List[int]:
    """Cells within ``brush_size`` steps of ``center``, row by row from the south."""
    origin = grid.coordinates(center)
    cells = []
    for dz in range(-brush_size, brush_size + 1):
        x_min = max(-brush_size, -brush_size - dz)
        x_max = min(brush_size, brush_size - dz)
        for dx in range(x_min, x_max + 1):
            index = grid.get_cell_index(HexCoordinates(origin.x + dx, origin.z + dz))
            if index is not None:
                cells.append(index)
    return cells


def drag_direction(grid: HexGrid, previous: Optional[int], current: int) -> Optional[HexDirection]:
    """Direction from ``previous`` to ``current`` if they are neighbors."""
    if previous is None or previous == current:
        return None
    for d in DIRECTIONS:
        if grid.get_neighbor(previous, d) == current:
            return d
    return None


def edit_cell(grid: HexGrid, cell: int, changes: CellEdit, drag: Optional[HexDirection] = None) -> None:
    if changes.terrain_type is not None:
        grid.set_terrain_type(cell, changes.terrain_type)
    if changes.elevation is not None:
        grid.set_elevation(cell, changes.elevation)
    if changes.water_level is not None:
        grid.set_water_level(cell, changes.water_level)
    if changes.special_index is not None:
        grid.set_special_index(cell, changes.special_index)
    if changes.urban_level is not None:
        grid.set_urban_level(cell, changes.urban_level)
    if changes.farm_level is not None:
        grid.set_farm_level(cell, changes.farm_level)
    if changes.plant_level is not None:
        grid.set_plant_level(cell, changes.plant_level)
    if changes.river == OptionalToggle.NO:
        grid.remove_river(cell)
    if changes.road == OptionalToggle.NO:
        grid.remove_roads(cell)
    if changes.walled is not None:
        grid.set_walled(cell, changes.walled)

    if drag is not None:
        other = grid.get_neighbor(cell, drag.opposite())
        if other != NO_CELL:
            if changes.river == OptionalToggle.YES:
                grid.set_outgoing_river(other, drag)
            if changes.road == OptionalToggle.YES:
                grid.add_road(other, drag)


def edit_cells(
    grid: HexGrid,
    center: int,
    brush_size: int,
    changes: CellEdit,
    previous: Optional[int] = None,
) -> List[int]:
    """
    Apply ``changes`` to every cell under the brush.

    Args:
        grid: Grid to edit
        center: Brush center cell
        brush_size: Brush radius in hex steps (0 edits only the center)
        changes: Attribute changes to apply
        previous: Center of the previous stroke, used to detect drags

    Returns:
        Indices of the edited cells
    """
    if brush_size < 0:
        raise ValueError(f"Brush size must not be negative, got {brush_size}")
    drag = drag_direction(grid, previous, center)
    cells = brush_cells(grid, center, brush_size)
    for cell in cells:
        edit_cell(grid, cell, changes, drag)
    logger.debug("Cells edited", center=center, brush_size=brush_size, cells=len(cells), drag=drag)
    return cells

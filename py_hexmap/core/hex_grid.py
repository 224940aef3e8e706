"""
Cell store for the hex map.

The grid is an arena of cells addressed by a stable index. Per-cell attributes
live in NumPy arrays and neighbor relations in a ``(cells, 6)`` index table,
with ``NO_CELL`` marking a missing neighbor along the map edge. All mutations
go through the grid so that river and road invariants hold after every call.
"""

from typing import Iterator, List, Optional, Tuple

import numpy as np
import structlog

from .hex_metrics import (
    CHUNK_SIZE_X,
    CHUNK_SIZE_Z,
    DIRECTIONS,
    HexCoordinates,
    HexDirection,
    HexEdgeType,
    get_edge_type,
)

logger = structlog.get_logger()

NO_CELL = -1
NO_RIVER = -1


class MapSizeError(ValueError):
    """Raised when a map size is not positive or not a whole number of chunks."""


class HexGrid:
    """Fixed-size arena of hex cells with neighbor links and terrain attributes."""

    def __init__(self, chunk_size_x: int = CHUNK_SIZE_X, chunk_size_z: int = CHUNK_SIZE_Z):
        self.chunk_size_x = chunk_size_x
        self.chunk_size_z = chunk_size_z
        self.cell_count_x = 0
        self.cell_count_z = 0
        self._allocate(0)

    # ------------------------------------------------------------------
    # Construction

    @property
    def cell_count(self) -> int:
        return self.cell_count_x * self.cell_count_z

    def validate_size(self, x: int, z: int) -> None:
        """Raise MapSizeError unless the size is positive and chunk aligned."""
        if (
            x <= 0
            or x % self.chunk_size_x != 0
            or z <= 0
            or z % self.chunk_size_z != 0
        ):
            logger.error(
                "Unsupported map size",
                width=x,
                height=z,
                chunk_size_x=self.chunk_size_x,
                chunk_size_z=self.chunk_size_z,
            )
            raise MapSizeError(
                f"Unsupported map size {x}x{z}: dimensions must be positive multiples "
                f"of {self.chunk_size_x}x{self.chunk_size_z}"
            )

    def create_map(self, x: int, z: int) -> None:
        """
        Replace the grid with a fresh flat map of ``x`` by ``z`` cells.

        The size is validated first; on failure the existing map is untouched.
        """
        self.validate_size(x, z)

        self.cell_count_x = x
        self.cell_count_z = z
        self._allocate(x * z)

        for z_row in range(z):
            for x_col in range(x):
                self._link_cell(x_col, z_row, z_row * x + x_col)

        logger.info("Map created", width=x, height=z, cells=self.cell_count)

    def _allocate(self, n_cells: int) -> None:
        self.neighbors = np.full((n_cells, 6), NO_CELL, dtype=np.int32)
        self.elevation = np.zeros(n_cells, dtype=np.int32)
        self.water_level = np.zeros(n_cells, dtype=np.int32)
        self.terrain_type = np.zeros(n_cells, dtype=np.uint8)
        self.urban_level = np.zeros(n_cells, dtype=np.uint8)
        self.farm_level = np.zeros(n_cells, dtype=np.uint8)
        self.plant_level = np.zeros(n_cells, dtype=np.uint8)
        self.special_index = np.zeros(n_cells, dtype=np.uint8)
        self.walled = np.zeros(n_cells, dtype=bool)
        self.roads = np.zeros((n_cells, 6), dtype=bool)
        self.incoming_river = np.full(n_cells, NO_RIVER, dtype=np.int8)
        self.outgoing_river = np.full(n_cells, NO_RIVER, dtype=np.int8)
        self.visibility = np.zeros(n_cells, dtype=np.int32)
        self.explored = np.zeros(n_cells, dtype=bool)
        self.occupied = np.zeros(n_cells, dtype=bool)
        self._coordinates: List[HexCoordinates] = [
            HexCoordinates.from_offset(i % self.cell_count_x, i // self.cell_count_x)
            for i in range(n_cells)
        ]

    def _link_cell(self, x: int, z: int, i: int) -> None:
        if x > 0:
            self.set_neighbor(i, HexDirection.W, i - 1)
        if z > 0:
            if z & 1 == 0:
                self.set_neighbor(i, HexDirection.SE, i - self.cell_count_x)
                if x > 0:
                    self.set_neighbor(i, HexDirection.SW, i - self.cell_count_x - 1)
            else:
                self.set_neighbor(i, HexDirection.SW, i - self.cell_count_x)
                if x < self.cell_count_x - 1:
                    self.set_neighbor(i, HexDirection.SE, i - self.cell_count_x + 1)

    def set_neighbor(self, index: int, direction: HexDirection, other: int) -> None:
        """Link two cells in both directions."""
        self.neighbors[index, direction] = other
        self.neighbors[other, direction.opposite()] = index

    # ------------------------------------------------------------------
    # Lookup

    def get_cell(self, index: int) -> "HexCell":
        if not 0 <= index < self.cell_count:
            raise IndexError(f"Cell index {index} out of range")
        return HexCell(self, index)

    def get_cell_index(self, coordinates: HexCoordinates) -> Optional[int]:
        """Index of the cell at the given axial coordinates, or None off-map."""
        z = coordinates.z
        if z < 0 or z >= self.cell_count_z:
            return None
        x = coordinates.x + z // 2
        if x < 0 or x >= self.cell_count_x:
            return None
        return x + z * self.cell_count_x

    def cell_at(self, coordinates: HexCoordinates) -> Optional["HexCell"]:
        index = self.get_cell_index(coordinates)
        if index is None:
            return None
        return HexCell(self, index)

    def offset_index(self, x: int, z: int) -> int:
        """Index of the cell at offset column ``x`` and row ``z``."""
        return x + z * self.cell_count_x

    def coordinates(self, index: int) -> HexCoordinates:
        return self._coordinates[index]

    def get_neighbor(self, index: int, direction: HexDirection) -> int:
        return int(self.neighbors[index, direction])

    def iter_neighbors(self, index: int) -> Iterator[Tuple[HexDirection, int]]:
        """Yield ``(direction, neighbor)`` for each existing neighbor, NE first."""
        row = self.neighbors[index]
        for d in DIRECTIONS:
            neighbor = int(row[d])
            if neighbor != NO_CELL:
                yield d, neighbor

    def distance(self, index1: int, index2: int) -> int:
        return self._coordinates[index1].distance_to(self._coordinates[index2])

    # ------------------------------------------------------------------
    # Derived state

    def is_underwater(self, index: int) -> bool:
        return int(self.water_level[index]) > int(self.elevation[index])

    def view_elevation(self, index: int) -> int:
        return max(int(self.elevation[index]), int(self.water_level[index]))

    def has_river(self, index: int) -> bool:
        return self.incoming_river[index] != NO_RIVER or self.outgoing_river[index] != NO_RIVER

    def has_incoming_river(self, index: int) -> bool:
        return self.incoming_river[index] != NO_RIVER

    def has_outgoing_river(self, index: int) -> bool:
        return self.outgoing_river[index] != NO_RIVER

    def has_river_through_edge(self, index: int, direction: HexDirection) -> bool:
        return (
            self.incoming_river[index] == direction
            or self.outgoing_river[index] == direction
        )

    def has_roads(self, index: int) -> bool:
        return bool(self.roads[index].any())

    def is_special(self, index: int) -> bool:
        return self.special_index[index] > 0

    def get_edge_type(self, index: int, other: int) -> HexEdgeType:
        return get_edge_type(int(self.elevation[index]), int(self.elevation[other]))

    def elevation_difference(self, index: int, direction: HexDirection) -> int:
        neighbor = self.get_neighbor(index, direction)
        return abs(int(self.elevation[index]) - int(self.elevation[neighbor]))

    def underwater_mask(self) -> np.ndarray:
        return self.water_level > self.elevation

    def view_elevation_array(self) -> np.ndarray:
        return np.maximum(self.elevation, self.water_level)

    # ------------------------------------------------------------------
    # Mutation

    def set_elevation(self, index: int, value: int) -> None:
        """Set elevation, dropping rivers that now run uphill and roads that got too steep."""
        if self.elevation[index] == value:
            return
        self.elevation[index] = value
        self._validate_rivers(index)

        for d in DIRECTIONS:
            if self.roads[index, d] and self.elevation_difference(index, d) > 1:
                self._set_road(index, d, False)

    def set_water_level(self, index: int, value: int) -> None:
        if self.water_level[index] == value:
            return
        self.water_level[index] = value
        self._validate_rivers(index)

    def set_terrain_type(self, index: int, value: int) -> None:
        self.terrain_type[index] = value

    def set_urban_level(self, index: int, value: int) -> None:
        self.urban_level[index] = value

    def set_farm_level(self, index: int, value: int) -> None:
        self.farm_level[index] = value

    def set_plant_level(self, index: int, value: int) -> None:
        self.plant_level[index] = value

    def set_walled(self, index: int, value: bool) -> None:
        self.walled[index] = value

    def set_special_index(self, index: int, value: int) -> bool:
        """Place a special feature; refused on river cells. Clears the cell's roads."""
        if self.special_index[index] == value or self.has_river(index):
            return False
        self.special_index[index] = value
        self.remove_roads(index)
        return True

    # Rivers

    def is_valid_river_destination(self, index: int, neighbor: int) -> bool:
        return neighbor != NO_CELL and (
            self.elevation[index] >= self.elevation[neighbor]
            or self.water_level[index] == self.elevation[neighbor]
        )

    def set_outgoing_river(self, index: int, direction: HexDirection) -> bool:
        """
        Route the cell's river out through ``direction``.

        Returns False without changing anything when the neighbor is missing,
        higher up (and not a lake exit), or already receives a river.
        """
        if self.outgoing_river[index] == direction:
            return True

        neighbor = self.get_neighbor(index, direction)
        if not self.is_valid_river_destination(index, neighbor):
            return False
        if self.has_incoming_river(neighbor):
            return False

        self.remove_outgoing_river(index)
        if self.incoming_river[index] == direction:
            self.remove_incoming_river(index)

        self.outgoing_river[index] = direction
        self.special_index[index] = 0

        self.incoming_river[neighbor] = direction.opposite()
        self.special_index[neighbor] = 0

        self._set_road(index, direction, False)
        return True

    def remove_outgoing_river(self, index: int) -> None:
        direction = int(self.outgoing_river[index])
        if direction == NO_RIVER:
            return
        neighbor = self.get_neighbor(index, HexDirection(direction))
        self.outgoing_river[index] = NO_RIVER
        self.incoming_river[neighbor] = NO_RIVER

    def remove_incoming_river(self, index: int) -> None:
        direction = int(self.incoming_river[index])
        if direction == NO_RIVER:
            return
        neighbor = self.get_neighbor(index, HexDirection(direction))
        self.incoming_river[index] = NO_RIVER
        self.outgoing_river[neighbor] = NO_RIVER

    def remove_river(self, index: int) -> None:
        self.remove_outgoing_river(index)
        self.remove_incoming_river(index)

    def _validate_rivers(self, index: int) -> None:
        outgoing = int(self.outgoing_river[index])
        if outgoing != NO_RIVER and not self.is_valid_river_destination(
            index, self.get_neighbor(index, HexDirection(outgoing))
        ):
            self.remove_outgoing_river(index)

        incoming = int(self.incoming_river[index])
        if incoming != NO_RIVER and not self.is_valid_river_destination(
            self.get_neighbor(index, HexDirection(incoming)), index
        ):
            self.remove_incoming_river(index)

    # Roads

    def has_road_through_edge(self, index: int, direction: HexDirection) -> bool:
        return bool(self.roads[index, direction])

    def add_road(self, index: int, direction: HexDirection) -> bool:
        """Add a road unless the edge carries a river, touches a special cell or is too steep."""
        neighbor = self.get_neighbor(index, direction)
        if (
            neighbor == NO_CELL
            or self.roads[index, direction]
            or self.has_river_through_edge(index, direction)
            or self.is_special(index)
            or self.is_special(neighbor)
            or self.elevation_difference(index, direction) > 1
        ):
            return False
        self._set_road(index, direction, True)
        return True

    def remove_roads(self, index: int) -> None:
        for d in DIRECTIONS:
            if self.roads[index, d]:
                self._set_road(index, d, False)

    def _set_road(self, index: int, direction: HexDirection, state: bool) -> None:
        neighbor = self.get_neighbor(index, direction)
        self.roads[index, direction] = state
        if neighbor != NO_CELL:
            self.roads[neighbor, direction.opposite()] = state

    # Visibility

    def increase_visibility(self, index: int) -> None:
        self.visibility[index] += 1
        if self.visibility[index] == 1:
            self.explored[index] = True

    def decrease_visibility(self, index: int) -> None:
        if self.visibility[index] > 0:
            self.visibility[index] -= 1

    def is_visible(self, index: int) -> bool:
        return self.visibility[index] > 0


class HexCell:
    """
    Lightweight view of one cell in a HexGrid.

    Holds only the grid and the index; every attribute is read from and
    written through the grid, so views can be created and dropped freely.
    """

    __slots__ = ("grid", "index")

    def __init__(self, grid: HexGrid, index: int):
        self.grid = grid
        self.index = index

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, HexCell)
            and other.grid is self.grid
            and other.index == self.index
        )

    def __hash__(self) -> int:
        return hash((id(self.grid), self.index))

    def __repr__(self) -> str:
        return f"HexCell({self.index}, {self.coordinates})"

    @property
    def coordinates(self) -> HexCoordinates:
        return self.grid.coordinates(self.index)

    def get_neighbor(self, direction: HexDirection) -> Optional["HexCell"]:
        neighbor = self.grid.get_neighbor(self.index, direction)
        if neighbor == NO_CELL:
            return None
        return HexCell(self.grid, neighbor)

    @property
    def elevation(self) -> int:
        return int(self.grid.elevation[self.index])

    @elevation.setter
    def elevation(self, value: int) -> None:
        self.grid.set_elevation(self.index, value)

    @property
    def water_level(self) -> int:
        return int(self.grid.water_level[self.index])

    @water_level.setter
    def water_level(self, value: int) -> None:
        self.grid.set_water_level(self.index, value)

    @property
    def view_elevation(self) -> int:
        return self.grid.view_elevation(self.index)

    @property
    def is_underwater(self) -> bool:
        return self.grid.is_underwater(self.index)

    @property
    def terrain_type(self) -> int:
        return int(self.grid.terrain_type[self.index])

    @terrain_type.setter
    def terrain_type(self, value: int) -> None:
        self.grid.set_terrain_type(self.index, value)

    @property
    def urban_level(self) -> int:
        return int(self.grid.urban_level[self.index])

    @urban_level.setter
    def urban_level(self, value: int) -> None:
        self.grid.set_urban_level(self.index, value)

    @property
    def farm_level(self) -> int:
        return int(self.grid.farm_level[self.index])

    @farm_level.setter
    def farm_level(self, value: int) -> None:
        self.grid.set_farm_level(self.index, value)

    @property
    def plant_level(self) -> int:
        return int(self.grid.plant_level[self.index])

    @plant_level.setter
    def plant_level(self, value: int) -> None:
        self.grid.set_plant_level(self.index, value)

    @property
    def special_index(self) -> int:
        return int(self.grid.special_index[self.index])

    @special_index.setter
    def special_index(self, value: int) -> None:
        self.grid.set_special_index(self.index, value)

    @property
    def walled(self) -> bool:
        return bool(self.grid.walled[self.index])

    @walled.setter
    def walled(self, value: bool) -> None:
        self.grid.set_walled(self.index, value)

    @property
    def has_river(self) -> bool:
        return self.grid.has_river(self.index)

    @property
    def incoming_river(self) -> Optional[HexDirection]:
        direction = int(self.grid.incoming_river[self.index])
        return None if direction == NO_RIVER else HexDirection(direction)

    @property
    def outgoing_river(self) -> Optional[HexDirection]:
        direction = int(self.grid.outgoing_river[self.index])
        return None if direction == NO_RIVER else HexDirection(direction)

    def set_outgoing_river(self, direction: HexDirection) -> bool:
        return self.grid.set_outgoing_river(self.index, direction)

    def remove_river(self) -> None:
        self.grid.remove_river(self.index)

    def has_road_through_edge(self, direction: HexDirection) -> bool:
        return self.grid.has_road_through_edge(self.index, direction)

    def add_road(self, direction: HexDirection) -> bool:
        return self.grid.add_road(self.index, direction)

    def remove_roads(self) -> None:
        self.grid.remove_roads(self.index)

    @property
    def is_visible(self) -> bool:
        return self.grid.is_visible(self.index)

    @property
    def is_explored(self) -> bool:
        return bool(self.grid.explored[self.index])

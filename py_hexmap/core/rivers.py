"""
River generation.

Rivers start at high, wet land cells and walk downhill until they reach open
water, join an existing river or get stuck, in which case a lake forms.
"""

from dataclasses import dataclass
from typing import List

import numpy as np
import structlog

from ..config.generator_settings import MapGeneratorSettings
from .alea_prng import AleaPRNG
from .hex_grid import HexGrid
from .hex_metrics import HexDirection

logger = structlog.get_logger()


@dataclass
class RiverResult:
    """Outcome of CreateRivers."""

    river_count: int
    river_cells: int
    budget_remaining: int


def origin_weights(grid: HexGrid, settings: MapGeneratorSettings, moisture: np.ndarray) -> np.ndarray:
    """Moisture scaled by height above the water level, per cell."""
    water_level = settings.water_level
    return moisture * (grid.elevation - water_level) / float(settings.elevation_maximum - water_level)


class RiverGenerator:
    def __init__(self, grid: HexGrid, settings: MapGeneratorSettings, prng: AleaPRNG):
        self.grid = grid
        self.settings = settings
        self.prng = prng

    def collect_origins(self, moisture: np.ndarray) -> List[int]:
        """
        Build the weighted origin pool.

        A dry-land cell enters the pool once per weight band it exceeds
        (0.25, 0.5, 0.75) and twice for the top band, so higher and wetter
        cells are picked more often.
        """
        weights = origin_weights(self.grid, self.settings, moisture)
        underwater = self.grid.underwater_mask()
        origins = []
        for cell in range(self.grid.cell_count):
            if underwater[cell]:
                continue
            weight = weights[cell]
            if weight > 0.75:
                origins.append(cell)
                origins.append(cell)
            if weight > 0.5:
                origins.append(cell)
            if weight > 0.25:
                origins.append(cell)
        return origins

    def is_valid_origin(self, origin: int) -> bool:
        grid = self.grid
        if grid.has_river(origin):
            return False
        for _, neighbor in grid.iter_neighbors(origin):
            if grid.has_river(neighbor) or grid.is_underwater(neighbor):
                return False
        return True

    def create_rivers(self, moisture: np.ndarray, land_cells: int) -> RiverResult:
        """Grow rivers until ``river_percentage`` of the land cells carry one or origins run out."""
        origins = self.collect_origins(moisture)
        budget = round(land_cells * self.settings.river_percentage * 0.01)
        logger.info("Creating rivers", budget=budget, origins=len(origins))

        river_count = 0
        river_cells = 0
        while budget > 0 and origins:
            index = self.prng.range(0, len(origins))
            origin = origins[index]
            origins[index] = origins[-1]
            origins.pop()

            if self.is_valid_origin(origin):
                length = self.create_river(origin)
                if length > 0:
                    river_count += 1
                    river_cells += length
                budget -= length

        if budget > 0:
            logger.warning("Failed to use up river budget", remaining=budget)
        logger.info("Rivers created", rivers=river_count, cells=river_cells)
        return RiverResult(river_count, river_cells, max(budget, 0))

    def create_river(self, origin: int) -> int:
        """
        Walk a river downhill from ``origin``.

        Returns:
            Number of cells the river covers, 0 when it could not leave the origin
        """
        grid = self.grid
        prng = self.prng
        length = 1
        cell = origin
        direction = HexDirection.NE
        flow_directions: List[HexDirection] = []

        while not grid.is_underwater(cell):
            min_neighbor_elevation = None
            flow_directions.clear()
            cell_elevation = int(grid.elevation[cell])

            for d, neighbor in grid.iter_neighbors(cell):
                neighbor_elevation = int(grid.elevation[neighbor])
                if min_neighbor_elevation is None or neighbor_elevation < min_neighbor_elevation:
                    min_neighbor_elevation = neighbor_elevation

                if neighbor == origin or grid.has_incoming_river(neighbor):
                    continue

                delta = neighbor_elevation - cell_elevation
                if delta > 0:
                    continue

                if grid.has_outgoing_river(neighbor):
                    grid.set_outgoing_river(cell, d)
                    return length

                if delta < 0:
                    flow_directions.extend((d, d, d))
                if length == 1 or (d != direction.next2() and d != direction.previous2()):
                    flow_directions.append(d)
                flow_directions.append(d)

            if not flow_directions:
                if length == 1:
                    return 0
                if min_neighbor_elevation is not None and min_neighbor_elevation >= cell_elevation:
                    grid.set_water_level(cell, min_neighbor_elevation)
                    if min_neighbor_elevation == cell_elevation:
                        grid.set_elevation(cell, min_neighbor_elevation - 1)
                break

            direction = prng.choice(flow_directions)
            grid.set_outgoing_river(cell, direction)
            length += 1

            if (
                min_neighbor_elevation is not None
                and min_neighbor_elevation >= cell_elevation
                and prng.chance(self.settings.extra_lake_probability)
            ):
                grid.set_water_level(cell, cell_elevation)
                grid.set_elevation(cell, cell_elevation - 1)

            cell = grid.get_neighbor(cell, direction)

        return length

"""
Land sculpting by budgeted flood fill.

Land is raised (or sunk) one chunk at a time. A chunk grows from a random
seed cell in priority order of distance to the seed, with random jitter
making the shape organic instead of hexagonal. The land budget counts how
many cells may still rise above the water level.
"""

from dataclasses import dataclass
from typing import List

import structlog

from ..config.generator_settings import MapGeneratorSettings
from .alea_prng import AleaPRNG
from .hex_grid import HexGrid
from .regions import MapRegion
from .search import SearchContext

logger = structlog.get_logger()

MAX_LAND_ROUNDS = 10000


@dataclass
class LandResult:
    """Outcome of CreateLand."""

    land_cells: int
    budget_remaining: int
    rounds: int


class LandSculptor:
    """Raises and sinks chunks of terrain until the land budget is used up."""

    def __init__(
        self,
        grid: HexGrid,
        settings: MapGeneratorSettings,
        prng: AleaPRNG,
        context: SearchContext,
    ):
        self.grid = grid
        self.settings = settings
        self.prng = prng
        self.context = context

    def random_cell(self, region: MapRegion) -> int:
        """Pick a uniformly random cell inside the region (x roll, then z roll)."""
        x = self.prng.range(region.x_min, region.x_max)
        z = self.prng.range(region.z_min, region.z_max)
        x = min(max(x, 0), self.grid.cell_count_x - 1)
        z = min(max(z, 0), self.grid.cell_count_z - 1)
        return self.grid.offset_index(x, z)

    def create_land(self, regions: List[MapRegion]) -> LandResult:
        """
        Sculpt land until ``land_percentage`` of the cells are at or above water.

        Each round rolls once for sinking versus raising and then shapes one
        chunk per region. If the round cap is hit first, the leftover budget
        is reported and the land it represents is simply not placed.
        """
        grid = self.grid
        settings = self.settings
        land_budget = round(grid.cell_count * settings.land_percentage * 0.01)
        land_cells = land_budget
        logger.info("Creating land", budget=land_budget, regions=len(regions))

        rounds = 0
        while rounds < MAX_LAND_ROUNDS:
            rounds += 1
            sink = self.prng.chance(settings.sink_probability)
            for region in regions:
                chunk_size = self.prng.range(settings.chunk_size_min, settings.chunk_size_max - 1)
                if sink:
                    land_budget = self.sink_terrain(chunk_size, land_budget, region)
                else:
                    land_budget = self.raise_terrain(chunk_size, land_budget, region)
                    if land_budget == 0:
                        logger.info("Land created", land_cells=land_cells, rounds=rounds)
                        return LandResult(land_cells, 0, rounds)

        logger.warning("Failed to use up land budget", remaining=land_budget, rounds=rounds)
        land_cells -= land_budget
        return LandResult(land_cells, land_budget, rounds)

    def raise_terrain(self, chunk_size: int, budget: int, region: MapRegion) -> int:
        """
        Raise a chunk by one step (two with ``high_rise_probability``).

        Returns:
            The budget left after counting cells that rose above water
        """
        return self._shape_chunk(chunk_size, budget, region, raising=True)

    def sink_terrain(self, chunk_size: int, budget: int, region: MapRegion) -> int:
        """
        Lower a chunk by one step (two with ``high_rise_probability``).

        Returns:
            The budget increased by the cells that dropped below water
        """
        return self._shape_chunk(chunk_size, budget, region, raising=False)

    def _shape_chunk(self, chunk_size: int, budget: int, region: MapRegion, raising: bool) -> int:
        grid = self.grid
        settings = self.settings
        prng = self.prng
        ctx = self.context
        water_level = settings.water_level

        ctx.begin_search()
        first_cell = self.random_cell(region)
        ctx.open(first_cell, 0)
        center = grid.coordinates(first_cell)

        step = 2 if prng.chance(settings.high_rise_probability) else 1
        if not raising:
            step = -step

        size = 0
        while size < chunk_size and ctx.frontier:
            current = ctx.take()
            original_elevation = int(grid.elevation[current])
            new_elevation = original_elevation + step

            if new_elevation > settings.elevation_maximum or new_elevation < settings.elevation_minimum:
                continue

            grid.set_elevation(current, new_elevation)
            if raising:
                if original_elevation < water_level <= new_elevation:
                    budget -= 1
                    if budget == 0:
                        break
            elif new_elevation < water_level <= original_elevation:
                budget += 1
            size += 1

            for _, neighbor in grid.iter_neighbors(current):
                if ctx.is_unvisited(neighbor):
                    heuristic = 1 if prng.chance(settings.jitter_probability) else 0
                    ctx.open(neighbor, grid.coordinates(neighbor).distance_to(center), heuristic)

        ctx.frontier.clear()
        return budget

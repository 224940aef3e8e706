"""
Procedural hex map generation.

HexMapGenerator runs the full pipeline on a grid in place:

1. Create a flat map and flood it to the configured water level
2. Partition the map into regions
3. Sculpt land until the land budget is used
4. Erode steep terrain
5. Simulate moisture and clouds
6. Grow rivers
7. Classify terrain and vegetation

All randomness comes from one PRNG seeded per run, so a fixed seed gives the
same map for the same size and settings.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog

from ..config.generator_settings import MapGeneratorSettings
from ..utils.random import create_prng, resolve_seed
from .biomes import BiomeClassifier
from .climate import ClimateData, ClimateSimulator, cell_temperatures
from .erosion import ErosionSimulator
from .hex_grid import HexGrid
from .land import LandSculptor
from .noise import NOISE_CHANNELS, noise_channels
from .regions import MapRegion, create_regions
from .rivers import RiverGenerator, origin_weights
from .search import SearchContext

logger = structlog.get_logger()


@dataclass
class GenerationReport:
    """Summary of one generation run, including any unused budgets."""

    seed: int
    width: int
    height: int
    land_cells: int
    land_budget_remaining: int
    river_budget_remaining: int
    river_count: int
    regions: List[MapRegion]

    @property
    def complete(self) -> bool:
        return self.land_budget_remaining == 0 and self.river_budget_remaining == 0


class HexMapGenerator:
    """Generates maps into a grid, reusing one search context across all stages."""

    def __init__(
        self,
        grid: HexGrid,
        settings: Optional[MapGeneratorSettings] = None,
        context: Optional[SearchContext] = None,
    ):
        self.grid = grid
        self.settings = settings or MapGeneratorSettings()
        self.context = context or SearchContext(grid.cell_count)
        self.climate: Optional[ClimateData] = None
        self.temperature: Optional[np.ndarray] = None
        self.last_report: Optional[GenerationReport] = None

    def generate_map(self, x: int, z: int) -> GenerationReport:
        """
        Generate a new ``x`` by ``z`` map into the grid.

        Raises:
            MapSizeError: If the size is not supported; the grid is left unchanged
        """
        self.grid.validate_size(x, z)
        settings = self.settings
        seed = resolve_seed(settings.seed, settings.use_fixed_seed)
        prng = create_prng(seed)
        logger.info("Starting map generation", width=x, height=z, seed=seed)

        grid = self.grid
        grid.create_map(x, z)
        self.context.ensure_size(grid.cell_count)
        grid.water_level[:] = settings.water_level

        logger.info("Creating regions", region_count=settings.region_count)
        regions = create_regions(
            x,
            z,
            settings.region_count,
            settings.map_border_x,
            settings.map_border_z,
            settings.region_border,
            prng,
        )

        land = LandSculptor(grid, settings, prng, self.context).create_land(regions)
        ErosionSimulator(grid, prng).erode(settings.erosion_percentage)
        self.climate = ClimateSimulator(grid, settings).simulate()
        rivers = RiverGenerator(grid, settings, prng).create_rivers(self.climate.moisture, land.land_cells)
        self.temperature = self._set_terrain_type(prng, seed)

        self.context.reset_phases()

        report = GenerationReport(
            seed=seed,
            width=x,
            height=z,
            land_cells=land.land_cells,
            land_budget_remaining=land.budget_remaining,
            river_budget_remaining=rivers.budget_remaining,
            river_count=rivers.river_count,
            regions=regions,
        )
        self.last_report = report
        logger.info(
            "Map generation completed",
            seed=seed,
            land_cells=land.land_cells,
            rivers=rivers.river_count,
        )
        return report

    def _set_terrain_type(self, prng, seed: int) -> np.ndarray:
        grid = self.grid
        jitter_channel = prng.range(0, NOISE_CHANNELS)
        jitter = noise_channels(grid.cell_count_x, grid.cell_count_z, seed)[jitter_channel]
        temperature = cell_temperatures(grid, self.settings, jitter)
        BiomeClassifier(grid, self.settings).classify(temperature, self.climate.moisture)
        return temperature

    def moisture_overlay(self) -> np.ndarray:
        """Final moisture per cell from the last climate simulation."""
        if self.climate is None:
            raise RuntimeError("No map has been generated yet")
        return self.climate.moisture.copy()

    def river_origin_overlay(self) -> np.ndarray:
        """River origin weight per cell, snapped to the bands 0, 0.25, 0.5 and 1."""
        if self.climate is None:
            raise RuntimeError("No map has been generated yet")
        weights = origin_weights(self.grid, self.settings, self.climate.moisture)
        return np.select(
            [weights > 0.75, weights > 0.5, weights > 0.25],
            [1.0, 0.5, 0.25],
            default=0.0,
        )

"""
Biome classification for hex maps.

Land cells look up a (terrain, plant) pair from a 4x4 matrix indexed by
temperature and moisture bands, then apply elevation and river adjustments.
Underwater cells get a terrain from their depth and the shape of the shore.
"""

from typing import NamedTuple

import numpy as np
import structlog

from ..config.generator_settings import MapGeneratorSettings
from .hex_grid import HexGrid

logger = structlog.get_logger()

# Terrain codes
SAND = 0
GRASS = 1
MUD = 2
STONE = 3
SNOW = 4

TEMPERATURE_BANDS = (0.1, 0.3, 0.6)
MOISTURE_BANDS = (0.12, 0.28, 0.85)


class Biome(NamedTuple):
    terrain: int
    plant: int


# Rows are temperature bands (cold to hot), columns moisture bands (dry to wet)
BIOMES = (
    Biome(SAND, 0), Biome(SNOW, 0), Biome(SNOW, 0), Biome(SNOW, 0),
    Biome(SAND, 0), Biome(MUD, 0), Biome(MUD, 1), Biome(MUD, 2),
    Biome(SAND, 0), Biome(GRASS, 0), Biome(GRASS, 1), Biome(GRASS, 2),
    Biome(SAND, 0), Biome(GRASS, 1), Biome(GRASS, 2), Biome(GRASS, 3),
)


def band_index(value: float, bands) -> int:
    """Index of the first band ``value`` falls below, or ``len(bands)``."""
    for i, threshold in enumerate(bands):
        if value < threshold:
            return i
    return len(bands)


class BiomeClassifier:
    def __init__(self, grid: HexGrid, settings: MapGeneratorSettings):
        self.grid = grid
        self.settings = settings

    @property
    def rock_desert_elevation(self) -> int:
        s = self.settings
        return s.elevation_maximum - (s.elevation_maximum - s.water_level) // 2

    def land_biome(self, cell: int, temperature: float, moisture: float) -> Biome:
        grid = self.grid
        elevation = int(grid.elevation[cell])
        biome = BIOMES[band_index(temperature, TEMPERATURE_BANDS) * 4 + band_index(moisture, MOISTURE_BANDS)]
        terrain, plant = biome

        if terrain == SAND and elevation >= self.rock_desert_elevation:
            terrain = STONE
        if elevation == self.settings.elevation_maximum:
            terrain = SNOW

        if terrain == SNOW:
            plant = 0
        elif plant < 3 and grid.has_river(cell):
            plant += 1
        return Biome(terrain, plant)

    def underwater_terrain(self, cell: int, temperature: float) -> int:
        grid = self.grid
        water_level = self.settings.water_level
        elevation = int(grid.elevation[cell])

        if elevation == water_level - 1:
            cell_water = int(grid.water_level[cell])
            cliffs = 0
            slopes = 0
            for _, neighbor in grid.iter_neighbors(cell):
                delta = int(grid.elevation[neighbor]) - cell_water
                if delta == 0:
                    slopes += 1
                elif delta > 0:
                    cliffs += 1

            if cliffs + slopes > 3:
                terrain = GRASS
            elif cliffs > 0:
                terrain = STONE
            elif slopes > 0:
                terrain = SAND
            else:
                terrain = GRASS
        elif elevation >= water_level:
            terrain = GRASS
        elif elevation < 0:
            terrain = STONE
        else:
            terrain = MUD

        if terrain == GRASS and temperature < TEMPERATURE_BANDS[0]:
            terrain = MUD
        return terrain

    def classify(self, temperature: np.ndarray, moisture: np.ndarray) -> None:
        """Set terrain type (and plant level on land) for every cell."""
        grid = self.grid
        for cell in range(grid.cell_count):
            t = float(temperature[cell])
            if grid.is_underwater(cell):
                grid.set_terrain_type(cell, self.underwater_terrain(cell, t))
            else:
                biome = self.land_biome(cell, t, float(moisture[cell]))
                grid.set_terrain_type(cell, biome.terrain)
                grid.set_plant_level(cell, biome.plant)

        counts = np.bincount(grid.terrain_type, minlength=SNOW + 1)
        logger.info("Terrain classified", terrain_counts=counts.tolist())

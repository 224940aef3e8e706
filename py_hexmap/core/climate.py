"""
Climate simulation for hex maps.

Moisture and clouds evolve over a fixed number of cycles as a cellular
automaton: water evaporates into clouds, clouds rain out, drift with the wind
and are capped by altitude, while ground moisture drains downhill and seeps
across level terrain. Every cell is updated from the current buffer into the
next one, so a cycle is a pure function of the previous state.

Temperature is not simulated; it is derived from latitude and elevation.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from ..config.generator_settings import HemisphereMode, MapGeneratorSettings
from .hex_grid import NO_CELL, HexGrid
from .hex_metrics import DIRECTIONS

logger = structlog.get_logger()

CLIMATE_CYCLES = 40


@dataclass
class ClimateData:
    """Per-cell climate arrays."""

    moisture: np.ndarray
    clouds: np.ndarray


class ClimateSimulator:
    """Runs the moisture/cloud automaton on a grid."""

    def __init__(self, grid: HexGrid, settings: MapGeneratorSettings):
        self.grid = grid
        self.settings = settings

    def initial_state(self) -> ClimateData:
        n = self.grid.cell_count
        return ClimateData(
            moisture=np.full(n, self.settings.starting_moisture, dtype=np.float64),
            clouds=np.zeros(n, dtype=np.float64),
        )

    def simulate(self, cycles: int = CLIMATE_CYCLES, state: Optional[ClimateData] = None) -> ClimateData:
        """Run ``cycles`` climate cycles and return the final buffers."""
        logger.info("Creating climate", cycles=cycles, cells=self.grid.cell_count)
        climate = state or self.initial_state()
        for _ in range(cycles):
            climate = self.evolve(climate)
        logger.info(
            "Climate created",
            mean_moisture=float(climate.moisture.mean()) if climate.moisture.size else 0.0,
        )
        return climate

    def evolve(self, climate: ClimateData) -> ClimateData:
        """One cycle: returns the next buffer, leaving ``climate`` untouched."""
        grid = self.grid
        s = self.settings
        n = grid.cell_count

        moisture = climate.moisture.copy()
        clouds = climate.clouds.copy()
        underwater = grid.underwater_mask()
        view_elevation = grid.view_elevation_array()

        # Evaporation
        moisture[underwater] = 1.0
        clouds[underwater] += s.evaporation_factor
        land = ~underwater
        evaporation = moisture[land] * s.evaporation_factor
        moisture[land] -= evaporation
        clouds[land] += evaporation

        # Precipitation
        precipitation = clouds * s.precipitation_factor
        clouds -= precipitation
        moisture += precipitation

        # Colder air at altitude holds less water
        cloud_maximum = 1.0 - view_elevation / (s.elevation_maximum + 1.0)
        excess = np.maximum(clouds - cloud_maximum, 0.0)
        moisture += excess
        clouds -= excess

        main_dispersal_direction = s.wind_direction.opposite()
        cloud_dispersal = clouds * (1.0 / (5.0 + s.wind_strength))
        runoff = moisture * s.runoff_factor * (1.0 / 6.0)
        seepage = moisture * s.seepage_factor * (1.0 / 6.0)

        next_moisture = np.zeros(n, dtype=np.float64)
        next_clouds = np.zeros(n, dtype=np.float64)

        for d in DIRECTIONS:
            neighbors = grid.neighbors[:, d]
            valid = neighbors != NO_CELL
            sources = np.nonzero(valid)[0]
            targets = neighbors[valid]

            dispersal = cloud_dispersal[sources]
            if d == main_dispersal_direction:
                dispersal = dispersal * s.wind_strength
            np.add.at(next_clouds, targets, dispersal)

            delta = view_elevation[targets] - view_elevation[sources]
            downhill = delta < 0
            level = delta == 0

            flow = np.where(downhill, runoff[sources], 0.0) + np.where(level, seepage[sources], 0.0)
            np.subtract.at(moisture, sources, flow)
            np.add.at(next_moisture, targets, flow)

        next_moisture += moisture
        np.minimum(next_moisture, 1.0, out=next_moisture)
        return ClimateData(moisture=next_moisture, clouds=next_clouds)


def cell_temperatures(
    grid: HexGrid,
    settings: MapGeneratorSettings,
    jitter: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Temperature per cell from latitude and view elevation.

    Args:
        grid: Grid to read coordinates and elevations from
        settings: Generator settings (temperature range, hemisphere, water level)
        jitter: Optional per-cell noise in [0, 1], scaled by ``temperature_jitter``

    Returns:
        Float array of temperatures, roughly in [0, 1]
    """
    n = grid.cell_count
    z = np.arange(n) // max(grid.cell_count_x, 1)
    latitude = z / float(max(grid.cell_count_z, 1))

    if settings.hemisphere == HemisphereMode.BOTH:
        latitude = latitude * 2.0
        latitude = np.where(latitude > 1.0, 2.0 - latitude, latitude)
    elif settings.hemisphere == HemisphereMode.NORTH:
        latitude = 1.0 - latitude

    temperature = settings.low_temperature + (settings.high_temperature - settings.low_temperature) * latitude

    water_level = settings.water_level
    view_elevation = grid.view_elevation_array()
    temperature = temperature * (
        1.0 - (view_elevation - water_level) / (settings.elevation_maximum - water_level + 1.0)
    )

    if jitter is not None:
        temperature = temperature + (jitter * 2.0 - 1.0) * settings.temperature_jitter
    return temperature

"""
Parameters for procedural map generation.

Each parameter is range-bounded and affects a single pipeline stage. The
bounds match the sliders of the map editor.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from ..core.hex_metrics import HexDirection


class HemisphereMode(str, Enum):
    """Which hemisphere(s) the map spans, used for latitude temperature."""

    BOTH = "both"
    NORTH = "north"
    SOUTH = "south"


class MapGeneratorSettings(BaseModel):
    """Settings for HexMapGenerator."""

    # Seeding
    use_fixed_seed: bool = Field(default=False, description="Use the configured seed instead of a fresh one")
    seed: int = Field(default=0, ge=0, le=2**31 - 1, description="RNG seed used when use_fixed_seed is set")

    # Land sculpting
    jitter_probability: float = Field(
        default=0.25, ge=0.0, le=0.5,
        description="Randomness of chunk shapes; 0 gives hexagon-like patches",
    )
    chunk_size_min: int = Field(default=30, ge=20, le=200, description="Smallest land chunk")
    chunk_size_max: int = Field(default=100, ge=20, le=200, description="Largest land chunk")
    high_rise_probability: float = Field(
        default=0.25, ge=0.0, le=1.0,
        description="Probability of raising or sinking by two steps, forming cliffs",
    )
    sink_probability: float = Field(
        default=0.2, ge=0.0, le=0.4,
        description="Probability of lowering land instead of raising it",
    )
    land_percentage: int = Field(default=50, ge=5, le=95, description="Share of cells that become land")

    # Regions
    map_border_x: int = Field(default=5, ge=0, le=10, description="Water border along the east and west edges")
    map_border_z: int = Field(default=5, ge=0, le=10, description="Water border along the north and south edges")
    region_border: int = Field(default=5, ge=0, le=10, description="Water separating the regions")
    region_count: int = Field(default=1, ge=1, le=4, description="Number of continents")

    # Elevation
    elevation_minimum: int = Field(default=-2, ge=-4, le=0, description="Lowest elevation")
    elevation_maximum: int = Field(default=8, ge=6, le=10, description="Highest elevation")
    water_level: int = Field(default=3, ge=1, le=5, description="Initial water level of every cell")

    # Erosion
    erosion_percentage: int = Field(
        default=50, ge=0, le=100,
        description="Share of erodible cells to smooth out; 100 removes every cliff",
    )

    # Climate
    starting_moisture: float = Field(default=0.1, ge=0.0, le=1.0, description="Initial moisture of every cell")
    evaporation_factor: float = Field(default=0.5, ge=0.0, le=1.0, description="Vapour produced per cycle")
    precipitation_factor: float = Field(default=0.25, ge=0.0, le=1.0, description="Cloud lost to rain per cycle")
    runoff_factor: float = Field(default=0.25, ge=0.0, le=1.0, description="Moisture draining downhill")
    seepage_factor: float = Field(default=0.125, ge=0.0, le=1.0, description="Moisture spreading over level terrain")
    wind_direction: HexDirection = Field(default=HexDirection.NW, description="Direction the wind blows from")
    wind_strength: float = Field(
        default=4.0, ge=1.0, le=10.0,
        description="Bias of cloud dispersal along the wind; 1 disperses evenly",
    )

    # Rivers
    river_percentage: int = Field(default=10, ge=0, le=20, description="Share of land cells carrying rivers")
    extra_lake_probability: float = Field(default=0.25, ge=0.0, le=1.0, description="Chance of a lake at a flat river step")

    # Temperature
    low_temperature: float = Field(default=0.0, ge=0.0, le=1.0, description="Temperature at the poles")
    high_temperature: float = Field(default=1.0, ge=0.0, le=1.0, description="Temperature at the equator")
    temperature_jitter: float = Field(default=0.1, ge=0.0, le=1.0, description="Noise added to temperature")
    hemisphere: HemisphereMode = Field(default=HemisphereMode.BOTH, description="Hemisphere mode")

    @model_validator(mode="after")
    def check_ranges(self) -> "MapGeneratorSettings":
        if self.chunk_size_min > self.chunk_size_max:
            raise ValueError("chunk_size_min must not exceed chunk_size_max")
        if self.low_temperature > self.high_temperature:
            raise ValueError("low_temperature must not exceed high_temperature")
        return self

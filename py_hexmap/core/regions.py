"""
Region partitioning for land generation.

The map is split into one to four axis-aligned rectangles in offset
coordinates. Land chunks are seeded inside a region, so water fills the map
borders and the gaps between regions.
"""

from dataclasses import dataclass
from typing import List

from .alea_prng import AleaPRNG


@dataclass(frozen=True)
class MapRegion:
    """Half-open rectangle ``[x_min, x_max) x [z_min, z_max)`` of offset coordinates."""

    x_min: int
    x_max: int
    z_min: int
    z_max: int

    @property
    def width(self) -> int:
        return max(self.x_max - self.x_min, 0)

    @property
    def height(self) -> int:
        return max(self.z_max - self.z_min, 0)

    def contains(self, x: int, z: int) -> bool:
        return self.x_min <= x < self.x_max and self.z_min <= z < self.z_max

    def overlaps(self, other: "MapRegion") -> bool:
        return (
            self.x_min < other.x_max
            and other.x_min < self.x_max
            and self.z_min < other.z_max
            and other.z_min < self.z_max
        )


def create_regions(
    cell_count_x: int,
    cell_count_z: int,
    region_count: int,
    map_border_x: int,
    map_border_z: int,
    region_border: int,
    prng: AleaPRNG,
) -> List[MapRegion]:
    """
    Split the map into ``region_count`` regions.

    Two regions are split vertically or horizontally at random (one roll),
    three are side by side, four are quadrants. Any other count gives a
    single region covering the map minus its border.
    """
    x_min, x_max = map_border_x, cell_count_x - map_border_x
    z_min, z_max = map_border_z, cell_count_z - map_border_z
    half_x, half_z = cell_count_x // 2, cell_count_z // 2

    if region_count == 2:
        if prng.value() < 0.5:
            return [
                MapRegion(x_min, half_x - region_border, z_min, z_max),
                MapRegion(half_x + region_border, x_max, z_min, z_max),
            ]
        return [
            MapRegion(x_min, x_max, z_min, half_z - region_border),
            MapRegion(x_min, x_max, half_z + region_border, z_max),
        ]

    if region_count == 3:
        third = cell_count_x // 3
        two_thirds = cell_count_x * 2 // 3
        return [
            MapRegion(x_min, third - region_border, z_min, z_max),
            MapRegion(third + region_border, two_thirds - region_border, z_min, z_max),
            MapRegion(two_thirds + region_border, x_max, z_min, z_max),
        ]

    if region_count == 4:
        return [
            MapRegion(x_min, half_x - region_border, z_min, half_z - region_border),
            MapRegion(half_x + region_border, x_max, z_min, half_z - region_border),
            MapRegion(half_x + region_border, x_max, half_z + region_border, z_max),
            MapRegion(x_min, half_x - region_border, half_z + region_border, z_max),
        ]

    return [MapRegion(x_min, x_max, z_min, z_max)]

"""
Hex grid geometry: directions, axial coordinates and edge classification.

Cells are laid out in offset rows (odd rows shifted half a cell to the east)
and addressed with axial coordinates, where X runs east, Z runs north-east and
the implicit third axis Y = -X - Z.
"""

from enum import IntEnum
from typing import NamedTuple, Tuple

# Maps must be a whole number of chunks in each dimension
CHUNK_SIZE_X = 5
CHUNK_SIZE_Z = 5


class HexDirection(IntEnum):
    """The six neighbor directions, clockwise from north-east."""

    NE = 0
    E = 1
    SE = 2
    SW = 3
    W = 4
    NW = 5

    def opposite(self) -> "HexDirection":
        return HexDirection((self + 3) % 6)

    def previous(self) -> "HexDirection":
        return HexDirection((self - 1) % 6)

    def next(self) -> "HexDirection":
        return HexDirection((self + 1) % 6)

    def previous2(self) -> "HexDirection":
        return HexDirection((self - 2) % 6)

    def next2(self) -> "HexDirection":
        return HexDirection((self + 2) % 6)


DIRECTIONS: Tuple[HexDirection, ...] = tuple(HexDirection)


class HexEdgeType(IntEnum):
    """Connection type between two adjacent cells."""

    FLAT = 0
    SLOPE = 1
    CLIFF = 2


def get_edge_type(elevation1: int, elevation2: int) -> HexEdgeType:
    """Classify the edge between two elevations."""
    if elevation1 == elevation2:
        return HexEdgeType.FLAT
    delta = elevation2 - elevation1
    if delta == 1 or delta == -1:
        return HexEdgeType.SLOPE
    return HexEdgeType.CLIFF


class HexCoordinates(NamedTuple):
    """Axial hex coordinates."""

    x: int
    z: int

    @property
    def y(self) -> int:
        return -self.x - self.z

    @classmethod
    def from_offset(cls, x: int, z: int) -> "HexCoordinates":
        """Convert offset (column, row) coordinates to axial."""
        return cls(x - z // 2, z)

    def to_offset(self) -> Tuple[int, int]:
        """Convert back to offset (column, row) coordinates."""
        return self.x + self.z // 2, self.z

    def distance_to(self, other: "HexCoordinates") -> int:
        """Number of steps between two cells."""
        return (
            abs(self.x - other.x)
            + abs(self.y - other.y)
            + abs(self.z - other.z)
        ) // 2

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

"""
Binary map files.

Layout (little endian)::

    int32   format version (header)
    int32   cell count x          (version >= 1, version 0 maps are 20x15)
    int32   cell count z
    cells   one record per cell in index order
    int32   unit count            (version >= 2)
    units   int32 x, int32 z (axial coordinates), float32 orientation

A cell record is one unsigned byte per field: terrain type, elevation + 127,
water level, urban, farm and plant levels, special index, walled flag,
incoming river, outgoing river, road bitmask and, from version 3, the
explored flag. Rivers are stored as ``128 | direction`` or 0 for none.
"""

import struct
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import structlog

from .hex_grid import NO_RIVER, HexGrid
from .units import UnitRoster

logger = structlog.get_logger()

MAP_FILE_VERSION = 3
LEGACY_MAP_SIZE = (20, 15)
ELEVATION_OFFSET = 127
RIVER_FLAG = 128

_HEADER = struct.Struct("<i")
_SIZE = struct.Struct("<ii")
_COUNT = struct.Struct("<i")
_UNIT = struct.Struct("<iif")

_ROAD_BITS = np.array([1 << d for d in range(6)], dtype=np.uint8)


class MapFormatError(ValueError):
    """Raised for unknown map versions and truncated or inconsistent map data."""


def _record_size(version: int) -> int:
    return 12 if version >= 3 else 11


def _encode_rivers(rivers: np.ndarray) -> np.ndarray:
    encoded = (rivers.astype(np.int16) | RIVER_FLAG).astype(np.uint8)
    encoded[rivers == NO_RIVER] = 0
    return encoded


def _decode_rivers(encoded: np.ndarray) -> np.ndarray:
    rivers = (encoded & 0x7F).astype(np.int8)
    rivers[(encoded & RIVER_FLAG) == 0] = NO_RIVER
    return rivers


def snapshot(grid: HexGrid, version: int = MAP_FILE_VERSION) -> bytes:
    """Pack every cell's persistent attributes into bytes, in cell index order."""
    records = np.zeros((grid.cell_count, _record_size(version)), dtype=np.uint8)
    records[:, 0] = grid.terrain_type
    records[:, 1] = (grid.elevation + ELEVATION_OFFSET).astype(np.uint8)
    records[:, 2] = grid.water_level.astype(np.uint8)
    records[:, 3] = grid.urban_level
    records[:, 4] = grid.farm_level
    records[:, 5] = grid.plant_level
    records[:, 6] = grid.special_index
    records[:, 7] = grid.walled
    records[:, 8] = _encode_rivers(grid.incoming_river)
    records[:, 9] = _encode_rivers(grid.outgoing_river)
    records[:, 10] = (grid.roads.astype(np.uint8) * _ROAD_BITS).sum(axis=1, dtype=np.uint8)
    if version >= 3:
        records[:, 11] = grid.explored
    return records.tobytes()


def encode_map(grid: HexGrid, roster: Optional[UnitRoster] = None) -> bytes:
    """Serialize a grid (and its units) in the current format."""
    parts = [
        _HEADER.pack(MAP_FILE_VERSION),
        _SIZE.pack(grid.cell_count_x, grid.cell_count_z),
        snapshot(grid),
    ]
    units = list(roster) if roster is not None else []
    parts.append(_COUNT.pack(len(units)))
    for unit in units:
        coordinates = grid.coordinates(unit.location)
        parts.append(_UNIT.pack(coordinates.x, coordinates.z, unit.orientation))
    return b"".join(parts)


def _parse(data: bytes) -> Tuple[int, int, int, np.ndarray, List[Tuple[int, int, float]]]:
    if len(data) < _HEADER.size:
        raise MapFormatError("Map data is too short for a header")
    (header,) = _HEADER.unpack_from(data, 0)
    if header < 0 or header > MAP_FILE_VERSION:
        raise MapFormatError(f"Unknown map format {header}")
    offset = _HEADER.size

    if header >= 1:
        if len(data) < offset + _SIZE.size:
            raise MapFormatError("Map data is truncated in the size block")
        x, z = _SIZE.unpack_from(data, offset)
        offset += _SIZE.size
    else:
        x, z = LEGACY_MAP_SIZE

    if x <= 0 or z <= 0:
        raise MapFormatError(f"Invalid map size {x}x{z}")
    record_size = _record_size(header)
    cell_bytes = x * z * record_size
    if len(data) < offset + cell_bytes:
        raise MapFormatError("Map data is truncated in the cell block")
    records = np.frombuffer(data, dtype=np.uint8, count=cell_bytes, offset=offset).reshape(x * z, record_size)
    offset += cell_bytes

    units = []
    if header >= 2:
        if len(data) < offset + _COUNT.size:
            raise MapFormatError("Map data is truncated in the unit count")
        (unit_count,) = _COUNT.unpack_from(data, offset)
        offset += _COUNT.size
        if unit_count < 0 or len(data) < offset + unit_count * _UNIT.size:
            raise MapFormatError("Map data is truncated in the unit block")
        for _ in range(unit_count):
            units.append(_UNIT.unpack_from(data, offset))
            offset += _UNIT.size

    return header, x, z, records, units


def _unit_locations(units: List[Tuple[int, int, float]], x: int, z: int) -> List[int]:
    """Cell index of every unit on an ``x`` by ``z`` map; off-map or stacked units are rejected."""
    locations = []
    seen = set()
    for unit_x, unit_z, _ in units:
        column = unit_x + unit_z // 2
        if not (0 <= unit_z < z and 0 <= column < x):
            raise MapFormatError(f"Unit at ({unit_x}, {unit_z}) lies outside the map")
        location = column + unit_z * x
        if location in seen:
            raise MapFormatError(f"More than one unit at ({unit_x}, {unit_z})")
        seen.add(location)
        locations.append(location)
    return locations


def decode_map(data: bytes, grid: HexGrid, roster: Optional[UnitRoster] = None) -> int:
    """
    Load map data into ``grid`` (and ``roster``), replacing their contents.

    The data is fully validated before anything is changed.

    Returns:
        The format version the data was written in

    Raises:
        MapFormatError: For newer or unknown versions and malformed data
        MapSizeError: If the stored size is not supported by the grid
    """
    header, x, z, records, units = _parse(data)
    locations = _unit_locations(units, x, z)
    grid.validate_size(x, z)

    if roster is not None:
        roster.clear()
    grid.create_map(x, z)

    grid.terrain_type[:] = records[:, 0]
    grid.elevation[:] = records[:, 1].astype(np.int32) - ELEVATION_OFFSET
    grid.water_level[:] = records[:, 2]
    grid.urban_level[:] = records[:, 3]
    grid.farm_level[:] = records[:, 4]
    grid.plant_level[:] = records[:, 5]
    grid.special_index[:] = records[:, 6]
    grid.walled[:] = records[:, 7] != 0
    grid.incoming_river[:] = _decode_rivers(records[:, 8])
    grid.outgoing_river[:] = _decode_rivers(records[:, 9])
    grid.roads[:] = (records[:, 10:11] & _ROAD_BITS) != 0
    if header >= 3:
        grid.explored[:] = records[:, 11] != 0

    if roster is not None:
        for location, (_, _, orientation) in zip(locations, units):
            roster.add_unit(location, orientation)

    logger.info("Map loaded", version=header, width=x, height=z, units=len(units))
    return header


def save_map(path: Union[str, Path], grid: HexGrid, roster: Optional[UnitRoster] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_map(grid, roster))
    logger.info("Map saved", path=str(path))
    return path


def load_map(path: Union[str, Path], grid: HexGrid, roster: Optional[UnitRoster] = None) -> int:
    return decode_map(Path(path).read_bytes(), grid, roster)

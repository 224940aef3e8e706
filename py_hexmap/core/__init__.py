"""
Core hex map functionality: cell store, search primitives and generation stages.
"""

from .hex_metrics import HexCoordinates, HexDirection, HexEdgeType
from .hex_grid import HexCell, HexGrid, MapSizeError
from .priority_queue import HexCellPriorityQueue
from .search import SearchContext
from .pathfinding import HexPath, HexPathfinder
from .regions import MapRegion, create_regions
from .units import HexUnit, UnitRoster

__all__ = ['HexCoordinates', 'HexDirection', 'HexEdgeType',
           'HexCell', 'HexGrid', 'MapSizeError',
           'HexCellPriorityQueue', 'SearchContext', 'HexPath', 'HexPathfinder',
           'MapRegion', 'create_regions', 'HexUnit', 'UnitRoster']

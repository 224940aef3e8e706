"""Tests for units, occupancy and visibility tracking."""

import numpy as np
import pytest
from py_hexmap.core.hex_grid import HexGrid
from py_hexmap.core.pathfinding import HexPathfinder
from py_hexmap.core.units import HexUnit, UnitRoster


class TestUnitRoster:
    """Test adding, removing and moving units."""

    @pytest.fixture
    def grid(self):
        grid = HexGrid()
        grid.create_map(10, 5)
        return grid

    @pytest.fixture
    def roster(self, grid):
        return UnitRoster(grid)

    def test_add_unit(self, grid, roster):
        location = grid.offset_index(2, 2)
        unit = roster.add_unit(location, orientation=450.0)

        assert len(roster) == 1
        assert unit.orientation == 90.0
        assert grid.occupied[location]
        visible = HexPathfinder(grid).get_visible_cells(location, HexUnit.VISION_RANGE)
        assert np.count_nonzero(grid.visibility) == len(visible)
        assert all(grid.explored[c] for c in visible)

    def test_cannot_stack_units(self, grid, roster):
        roster.add_unit(0)
        with pytest.raises(ValueError):
            roster.add_unit(0)

    def test_remove_unit_hides_cells(self, grid, roster):
        unit = roster.add_unit(grid.offset_index(5, 2))
        roster.remove_unit(unit)

        assert len(roster) == 0
        assert not grid.occupied.any()
        assert not grid.visibility.any()
        assert grid.explored.any()

    def test_overlapping_vision_is_counted(self, grid, roster):
        first = roster.add_unit(grid.offset_index(4, 2))
        roster.add_unit(grid.offset_index(5, 2))
        assert grid.visibility[grid.offset_index(4, 2)] == 2

        roster.remove_unit(first)
        assert grid.visibility[grid.offset_index(4, 2)] == 1

    def test_clear(self, grid, roster):
        roster.add_unit(0)
        roster.add_unit(grid.offset_index(9, 4))
        roster.clear()
        assert len(roster) == 0
        assert not grid.occupied.any()
        assert not grid.visibility.any()

    def test_travel(self, grid, roster):
        start = grid.offset_index(0, 2)
        target = grid.offset_index(9, 2)
        unit = roster.add_unit(start)
        path = unit.find_path(target)
        assert path is not None

        roster.travel(unit, path)

        assert unit.location == target
        assert grid.occupied[target]
        assert not grid.occupied[start]
        assert all(grid.explored[c] for c in path.cells)
        visible = HexPathfinder(grid).get_visible_cells(target, HexUnit.VISION_RANGE)
        assert np.count_nonzero(grid.visibility) == len(visible)

    def test_travel_needs_matching_start(self, grid, roster):
        unit = roster.add_unit(0)
        other = roster.pathfinder.find_path(5, 6, HexUnit.MOVEMENT_POINTS)
        with pytest.raises(ValueError):
            roster.travel(unit, other)

    def test_occupied_cells_are_not_destinations(self, grid, roster):
        unit = roster.add_unit(0)
        blocker = roster.add_unit(3)
        assert not unit.is_valid_destination(blocker.location)
        assert unit.find_path(blocker.location) is None

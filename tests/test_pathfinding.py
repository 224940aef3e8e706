"""Tests for pathfinding and visibility."""

import pytest
from py_hexmap.core.hex_grid import HexGrid
from py_hexmap.core.hex_metrics import HexDirection
from py_hexmap.core.pathfinding import HexPathfinder, turn_of


@pytest.fixture
def flat_grid():
    """4x4 flat dry map."""
    grid = HexGrid(chunk_size_x=1, chunk_size_z=1)
    grid.create_map(4, 4)
    return grid


@pytest.fixture
def pathfinder(flat_grid):
    return HexPathfinder(flat_grid)


class TestTurns:
    @pytest.mark.parametrize(
        "distance,speed,expected",
        [(0, 24, 0), (1, 24, 0), (24, 24, 0), (25, 24, 1), (48, 24, 1), (49, 24, 2)],
    )
    def test_turn_of(self, distance, speed, expected):
        assert turn_of(distance, speed) == expected


class TestFindPath:
    """Test path costs and blocking rules."""

    def test_flat_path(self, pathfinder):
        path = pathfinder.find_path(0, 3, 100)
        assert path is not None
        assert len(path) == 4
        assert path.cells[0] == 0
        assert path.cells[-1] == 3
        assert path.cost == 15
        assert path.turn_count == 1

    def test_path_to_self(self, pathfinder):
        path = pathfinder.find_path(5, 5, 24)
        assert path.cells == [5]
        assert path.cost == 0
        assert path.turn_count == 0

    def test_leftover_points_are_lost(self, pathfinder):
        path = pathfinder.find_path(0, 3, 7)
        assert path.distances == [0, 5, 12, 19]
        assert path.turns == [0, 0, 1, 2]
        assert path.turn_count == 3

    def test_slope_and_features_cost_more(self, flat_grid, pathfinder):
        flat_grid.elevation[1] = 1
        assert pathfinder.find_path(0, 1, 100).cost == 10

        flat_grid.elevation[1] = 0
        flat_grid.plant_level[1] = 2
        flat_grid.urban_level[1] = 1
        assert pathfinder.find_path(0, 1, 100).cost == 8

    def test_road_costs_one(self, flat_grid, pathfinder):
        assert flat_grid.add_road(0, HexDirection.E)
        assert pathfinder.find_path(0, 1, 100).cost == 1

    def test_cliffs_block(self, flat_grid, pathfinder):
        flat_grid.elevation[3] = 2
        assert pathfinder.find_path(0, 3, 100) is None

    def test_underwater_and_occupied_block(self, flat_grid, pathfinder):
        flat_grid.water_level[3] = 1
        assert pathfinder.find_path(0, 3, 100) is None

        flat_grid.water_level[3] = 0
        flat_grid.occupied[3] = True
        assert pathfinder.find_path(0, 3, 100) is None

    def test_walls_block_unless_road(self, flat_grid, pathfinder):
        flat_grid.walled[1] = True
        assert pathfinder.find_path(0, 1, 100) is None

        flat_grid.add_road(0, HexDirection.E)
        assert pathfinder.find_path(0, 1, 100).cost == 1

    def test_detour_around_water(self, flat_grid, pathfinder):
        flat_grid.water_level[1] = 1
        path = pathfinder.find_path(0, 2, 100)
        assert 1 not in path.cells
        assert path.cost == 5 * (len(path) - 1)

    def test_speed_must_be_positive(self, pathfinder):
        with pytest.raises(ValueError):
            pathfinder.find_path(0, 3, 0)

    def test_repeated_searches_are_independent(self, pathfinder):
        first = pathfinder.find_path(0, 15, 24)
        pathfinder.find_path(3, 12, 24)
        second = pathfinder.find_path(0, 15, 24)
        assert first.cost == second.cost
        assert len(first) == len(second)


class TestVisibility:
    @pytest.fixture
    def grid(self):
        grid = HexGrid()
        grid.create_map(5, 5)
        return grid

    def test_visible_cells(self, grid):
        pathfinder = HexPathfinder(grid)
        assert pathfinder.get_visible_cells(12, 0) == [12]

        visible = pathfinder.get_visible_cells(12, 1)
        assert visible[0] == 12
        assert sorted(visible[1:]) == sorted(n for _, n in grid.iter_neighbors(12))

    def test_visible_cells_in_range(self, grid):
        pathfinder = HexPathfinder(grid)
        visible = pathfinder.get_visible_cells(0, 2)
        assert all(grid.distance(0, c) <= 2 for c in visible)
        expected = [c for c in range(grid.cell_count) if grid.distance(0, c) <= 2]
        assert sorted(visible) == expected

    def test_increase_and_decrease(self, grid):
        pathfinder = HexPathfinder(grid)
        cells = pathfinder.increase_visibility(12, 1)
        assert all(grid.is_visible(c) and grid.explored[c] for c in cells)

        pathfinder.decrease_visibility(12, 1)
        assert not any(grid.is_visible(c) for c in cells)
        assert all(grid.explored[c] for c in cells)

"""Tests for erosion."""

import numpy as np
import pytest
from py_hexmap.config import MapGeneratorSettings
from py_hexmap.core.alea_prng import AleaPRNG
from py_hexmap.core.erosion import ErosionSimulator
from py_hexmap.core.hex_grid import HexGrid
from py_hexmap.core.land import LandSculptor
from py_hexmap.core.regions import create_regions
from py_hexmap.core.search import SearchContext


class TestErosion:
    """Test mass conservation and smoothing."""

    @pytest.fixture
    def spiky_grid(self):
        grid = HexGrid()
        grid.create_map(10, 10)
        for x, z, height in [(2, 2, 6), (5, 5, 8), (7, 3, 4), (6, 5, 5)]:
            grid.elevation[grid.offset_index(x, z)] = height
        return grid

    @pytest.fixture
    def sculpted_grid(self):
        settings = MapGeneratorSettings()
        grid = HexGrid()
        grid.create_map(30, 30)
        grid.water_level[:] = settings.water_level
        prng = AleaPRNG("erosion")
        regions = create_regions(30, 30, 1, 5, 5, 5, prng)
        LandSculptor(grid, settings, prng, SearchContext(grid.cell_count)).create_land(regions)
        return grid

    def count_erodible(self, simulator):
        return sum(simulator.is_erodible(c) for c in range(simulator.grid.cell_count))

    def test_is_erodible(self, spiky_grid):
        simulator = ErosionSimulator(spiky_grid, AleaPRNG("e"))
        assert simulator.is_erodible(spiky_grid.offset_index(2, 2))
        assert not simulator.is_erodible(spiky_grid.offset_index(0, 0))

    def test_mass_is_conserved(self, sculpted_grid):
        before = int(sculpted_grid.elevation.sum())
        ErosionSimulator(sculpted_grid, AleaPRNG("mass")).erode(50)
        assert int(sculpted_grid.elevation.sum()) == before

    def test_full_erosion_removes_all_steep_cells(self, spiky_grid):
        simulator = ErosionSimulator(spiky_grid, AleaPRNG("full"))
        before = int(spiky_grid.elevation.sum())
        steps = simulator.erode(100)
        assert steps > 0
        assert self.count_erodible(simulator) == 0
        assert int(spiky_grid.elevation.sum()) == before

    def test_partial_erosion_meets_target(self, sculpted_grid):
        simulator = ErosionSimulator(sculpted_grid, AleaPRNG("partial"))
        initial = self.count_erodible(simulator)
        simulator.erode(50)
        assert self.count_erodible(simulator) <= int(initial * 50 * 0.01)

    def test_zero_erosion_changes_nothing(self, sculpted_grid):
        before = sculpted_grid.elevation.copy()
        steps = ErosionSimulator(sculpted_grid, AleaPRNG("none")).erode(0)
        assert steps == 0
        np.testing.assert_array_equal(sculpted_grid.elevation, before)

    def test_bounds_preserved(self, sculpted_grid):
        settings = MapGeneratorSettings()
        ErosionSimulator(sculpted_grid, AleaPRNG("bounds")).erode(80)
        assert sculpted_grid.elevation.min() >= settings.elevation_minimum
        assert sculpted_grid.elevation.max() <= settings.elevation_maximum

"""Tests for the full generation pipeline."""

import numpy as np
import pytest
from py_hexmap.config import MapGeneratorSettings
from py_hexmap.core.biomes import SNOW
from py_hexmap.core.hex_grid import NO_RIVER, HexGrid, MapSizeError
from py_hexmap.core.map_format import snapshot
from py_hexmap.core.map_generator import HexMapGenerator
from py_hexmap.core.search import SearchContext


def generate(seed=12345, width=30, height=20, **overrides):
    settings = MapGeneratorSettings(use_fixed_seed=True, seed=seed, **overrides)
    grid = HexGrid()
    generator = HexMapGenerator(grid, settings)
    report = generator.generate_map(width, height)
    return grid, generator, report


class TestHexMapGenerator:
    """Test determinism, bounds and reporting."""

    @pytest.fixture(scope="class")
    def generated(self):
        return generate()

    def test_fixed_seed_is_deterministic(self, generated):
        grid, _, report = generated
        other, _, other_report = generate()
        assert snapshot(grid) == snapshot(other)
        assert report.river_count == other_report.river_count

    def test_different_seeds_differ(self, generated):
        grid, _, _ = generated
        other, _, _ = generate(seed=54321)
        assert snapshot(grid) != snapshot(other)

    def test_report(self, generated):
        grid, _, report = generated
        assert report.seed == 12345
        assert (report.width, report.height) == (30, 20)
        assert len(report.regions) == 1
        assert report.land_cells + report.land_budget_remaining == 300

    def test_report_counts_land_cells(self):
        grid, _, report = generate(erosion_percentage=0, river_percentage=0)
        land = np.count_nonzero(grid.elevation >= grid.water_level)
        assert report.land_cells == land
        assert report.river_count == 0
        assert report.river_budget_remaining == 0
        assert report.complete == (report.land_budget_remaining == 0)

    def test_elevation_and_attributes_in_range(self, generated):
        grid, generator, _ = generated
        settings = generator.settings
        assert grid.elevation.min() >= settings.elevation_minimum
        assert grid.elevation.max() <= settings.elevation_maximum
        assert grid.terrain_type.max() <= SNOW
        assert grid.plant_level.max() <= 3

    def test_rivers_are_linked(self, generated):
        grid, _, _ = generated
        for cell in np.flatnonzero(grid.outgoing_river != NO_RIVER):
            direction = int(grid.outgoing_river[cell])
            neighbor = grid.neighbors[cell, direction]
            assert grid.incoming_river[neighbor] == (direction + 3) % 6

    def test_snow_has_no_plants(self, generated):
        grid, _, _ = generated
        land = ~grid.underwater_mask()
        assert not np.any(grid.plant_level[land & (grid.terrain_type == SNOW)])

    def test_overlays(self, generated):
        grid, generator, _ = generated
        moisture = generator.moisture_overlay()
        assert moisture.shape == (grid.cell_count,)
        assert np.all((moisture >= 0.0) & (moisture <= 1.0))

        origins = generator.river_origin_overlay()
        assert set(np.unique(origins)).issubset({0.0, 0.25, 0.5, 1.0})
        assert np.all(origins[grid.elevation < generator.settings.water_level] == 0.0)

    def test_overlays_need_a_map(self):
        generator = HexMapGenerator(HexGrid())
        with pytest.raises(RuntimeError):
            generator.moisture_overlay()
        with pytest.raises(RuntimeError):
            generator.river_origin_overlay()

    def test_search_phases_reset(self):
        grid = HexGrid()
        context = SearchContext(0)
        settings = MapGeneratorSettings(use_fixed_seed=True, seed=7)
        HexMapGenerator(grid, settings, context).generate_map(20, 15)
        assert context.search_phase == [0] * grid.cell_count
        assert not context.frontier

    def test_invalid_size_leaves_grid(self, generated):
        grid, generator, _ = generated
        before = snapshot(grid)
        with pytest.raises(MapSizeError):
            generator.generate_map(31, 20)
        with pytest.raises(MapSizeError):
            generator.generate_map(0, 20)
        assert snapshot(grid) == before
        assert grid.cell_count_x == 30

    def test_multiple_regions(self):
        _, _, report = generate(width=40, height=30, region_count=4)
        assert len(report.regions) == 4

    def test_random_seed_is_reported(self):
        settings = MapGeneratorSettings(use_fixed_seed=False)
        report = HexMapGenerator(HexGrid(), settings).generate_map(20, 15)
        assert 0 <= report.seed <= 2**31 - 1

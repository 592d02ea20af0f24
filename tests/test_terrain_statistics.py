"""Tests for heightmap statistics."""

import numpy as np
import pytest

from py_terrain.core.heightmap_generator import HeightGrid
from py_terrain.core.terrain_statistics import compute_statistics


class TestTerrainStatistics:

    def test_summary(self):
        grid = HeightGrid(detail_exponent=0, values=np.array([-1.0, 0.0, 1.0, 2.0]))
        stats = compute_statistics(grid, water_level=0.5)

        assert stats.size == 2
        assert stats.cell_count == 4
        assert stats.min_height == -1.0
        assert stats.max_height == 2.0
        assert stats.mean_height == pytest.approx(0.5)
        assert stats.submerged_cells == 2
        assert stats.submerged_fraction == pytest.approx(0.5)
        assert stats.relief == 3.0

    def test_water_level_strictly_below(self):
        grid = HeightGrid(detail_exponent=0, values=np.zeros(4))

        assert compute_statistics(grid, water_level=0.0).submerged_cells == 0
        assert compute_statistics(grid, water_level=0.1).submerged_cells == 4

    def test_to_dict(self):
        grid = HeightGrid(detail_exponent=1, values=np.arange(9, dtype=np.float64))
        data = compute_statistics(grid).to_dict()

        assert data["size"] == 3
        assert data["submerged_fraction"] == 0.0
        assert data["relief"] == 8.0
        assert data["std_height"] == pytest.approx(np.std(np.arange(9)))

import numpy as np
import pytest

from directions import direction_index
from grid import SpatialGrid
from interaction import InterParticleForces


def _grid_with_cell(count, cx, cy):
    grid = SpatialGrid(200, 200)
    row, col = grid.cell_of(cx, cy)
    idx = grid.cell_index(row, col)
    grid.counts[idx] = count
    grid.sum_x[idx] = cx * count
    grid.sum_y[idx] = cy * count
    return grid


def test_attraction_toward_cell_centroid():
    grid = _grid_with_cell(3, 50, 50)
    bias = InterParticleForces().bias_contribution(40, 50, grid, True, False, 50.0)
    assert bias[direction_index("E")] == pytest.approx(1.5)
    assert bias[direction_index("W")] == 0.0


def test_repulsion_away_from_cell_centroid():
    grid = _grid_with_cell(3, 50, 50)
    bias = InterParticleForces().bias_contribution(40, 50, grid, False, True, 50.0)
    assert bias[direction_index("W")] == pytest.approx(1.5)
    assert bias[direction_index("E")] == 0.0


def test_attraction_and_repulsion_both_accumulate():
    grid = _grid_with_cell(3, 50, 50)
    bias = InterParticleForces().bias_contribution(40, 50, grid, True, True, 50.0)
    assert bias[direction_index("E")] == pytest.approx(1.5)
    assert bias[direction_index("W")] == pytest.approx(1.5)


def test_centroid_closer_than_one_pixel_is_skipped():
    grid = _grid_with_cell(4, 50, 50)
    bias = InterParticleForces().bias_contribution(50.5, 50, grid, True, True, 50.0)
    assert not bias.any()


def test_cells_outside_window_ignored():
    grid = _grid_with_cell(10, 190, 190)
    bias = InterParticleForces().bias_contribution(10, 10, grid, True, False, 50.0)
    assert not bias.any()


def test_disabled_returns_zeros():
    grid = _grid_with_cell(3, 50, 50)
    assert not InterParticleForces().bias_contribution(40, 50, grid, False, False, 50.0).any()


def test_rebuilt_grid_bias_is_finite_and_non_negative():
    rng = np.random.default_rng(5)
    positions = rng.integers(0, 200, size=(2000, 2)).astype(np.float64)
    grid = SpatialGrid(200, 200)
    grid.rebuild(positions)
    forces = InterParticleForces()
    for x, y in positions[:50]:
        bias = forces.bias_contribution(x, y, grid, True, True, 50.0)
        assert np.all(np.isfinite(bias))
        assert bias.min() >= 0.0

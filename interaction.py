# interaction.py
"""
Coarse inter-particle attraction and repulsion.

Instead of summing over every other particle, each particle looks at the
5x5 block of grid cells around its own and treats every occupied cell as a
single mass of `count` particles sitting at the cell centroid.
"""
import math
import numpy as np
from numba import jit

from constants import INTERACTION_MIN_DISTANCE, NEIGHBOR_RADIUS
from directions import DIRECTION_COUNT, DIRECTION_UNITS, accumulate_projection
from grid import SpatialGrid, cell_of, cell_window

# --- Data Contracts ---
#
# InterParticleForces.bias_contribution(x, y, grid, attract, repel, strength)
#   - Inputs: a position, a grid rebuilt from pre-tick positions, two
#     independent switches and the interaction strength.
#   - Outputs: np.ndarray (8,) of non-negative bias.
#   - Invariants: cells with count == 0 or a centroid closer than 1px
#     contribute nothing.

@jit(nopython=True)
def _interaction_bias_numba(
    px, py, counts, sum_x, sum_y, cols, rows, cell_size, radius,
    attract, repel, strength, units, weights
):
    row, col = cell_of(px, py, cell_size, cols, rows)
    r0, r1, c0, c1 = cell_window(row, col, radius, rows, cols)

    for nr in range(r0, r1):
        for nc in range(c0, c1):
            idx = nr * cols + nc
            count = counts[idx]
            if count == 0:
                continue

            gx = sum_x[idx] / count - px
            gy = sum_y[idx] / count - py
            dist = math.hypot(gx, gy)
            # Also keeps the particle's own cell from dominating.
            if dist < INTERACTION_MIN_DISTANCE:
                continue

            dir_x = gx / dist
            dir_y = gy / dist
            magnitude = (strength * count) / (dist * dist)

            if attract:
                accumulate_projection(weights, dir_x, dir_y, magnitude, units)
            if repel:
                accumulate_projection(weights, -dir_x, -dir_y, magnitude, units)


class InterParticleForces:
    """
    Derives a direction bias from the aggregated grid around a particle.
    """
    def __init__(self, radius: int = NEIGHBOR_RADIUS):
        self.radius = radius

    def bias_contribution(
        self, x: float, y: float, grid: SpatialGrid,
        attract: bool, repel: bool, strength: float
    ) -> np.ndarray:
        weights = np.zeros(DIRECTION_COUNT, dtype=np.float64)
        if not (attract or repel):
            return weights
        _interaction_bias_numba(
            float(x), float(y), grid.counts, grid.sum_x, grid.sum_y,
            grid.cols, grid.rows, grid.cell_size, self.radius,
            bool(attract), bool(repel), float(strength), DIRECTION_UNITS, weights
        )
        return weights

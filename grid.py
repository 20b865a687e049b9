# grid.py
"""
Coarse spatial aggregation grid.

Each cell keeps only a particle count and the running sums of its
particles' coordinates, which is enough to recover a centroid. Replacing
per-particle neighbour checks with one term per cell keeps the cost of
inter-particle forces bounded by the window size rather than the population.
"""
import logging
import math
import numpy as np
from numba import jit
from typing import List, Tuple

from constants import GRID_CELL_SIZE, NEIGHBOR_RADIUS

# --- Data Contracts ---
#
# class SpatialGrid:
#   - __init__(self, width: int, height: int, cell_size: float = GRID_CELL_SIZE)
#     - Invariants:
#       - cols == ceil(width / cell_size), rows == ceil(height / cell_size)
#       - counts, sum_x, sum_y are flat arrays of length rows * cols,
#         indexed by row * cols + col.
#
#   - rebuild(self, positions: np.ndarray) -> None:
#     - Side Effects: Clears and re-aggregates every cell.
#     - Invariants: counts.sum() == positions.shape[0] afterwards.

@jit(nopython=True)
def cell_of(px, py, cell_size, cols, rows):
    """Returns the (row, col) owning a point, clamped to the last row/column."""
    col = min(int(math.floor(px / cell_size)), cols - 1)
    row = min(int(math.floor(py / cell_size)), rows - 1)
    return row, col


@jit(nopython=True)
def cell_window(row, col, radius, rows, cols):
    """Returns the clipped (row_start, row_stop, col_start, col_stop) window."""
    return (
        max(row - radius, 0),
        min(row + radius + 1, rows),
        max(col - radius, 0),
        min(col + radius + 1, cols),
    )


@jit(nopython=True)
def _rebuild_grid_numba(positions, counts, sum_x, sum_y, cell_size, cols, rows):
    counts[:] = 0
    sum_x[:] = 0.0
    sum_y[:] = 0.0

    for i in range(positions.shape[0]):
        px = positions[i, 0]
        py = positions[i, 1]
        row, col = cell_of(px, py, cell_size, cols, rows)
        idx = row * cols + col
        counts[idx] += 1
        sum_x[idx] += px
        sum_y[idx] += py


class SpatialGrid:
    """
    Uniform bucket grid holding per-cell count and coordinate sums.
    """
    def __init__(self, width: int, height: int, cell_size: float = GRID_CELL_SIZE):
        self.cell_size = float(cell_size)
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        """Recomputes grid dimensions and reallocates the cell arrays."""
        self.cols = max(int(math.ceil(width / self.cell_size)), 1)
        self.rows = max(int(math.ceil(height / self.cell_size)), 1)
        total_cells = self.cols * self.rows
        self.counts = np.zeros(total_cells, dtype=np.int64)
        self.sum_x = np.zeros(total_cells, dtype=np.float64)
        self.sum_y = np.zeros(total_cells, dtype=np.float64)

        logging.info(
            f"Spatial grid sized to {self.cols}x{self.rows} cells, "
            f"cell size {self.cell_size:.0f}px."
        )

    def rebuild(self, positions: np.ndarray) -> None:
        """Aggregates all particles into their cells from scratch."""
        _rebuild_grid_numba(
            positions, self.counts, self.sum_x, self.sum_y,
            self.cell_size, self.cols, self.rows
        )

    def cell_index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def cell_of(self, x: float, y: float) -> Tuple[int, int]:
        row, col = cell_of(float(x), float(y), self.cell_size, self.cols, self.rows)
        return int(row), int(col)

    def centroid_of(self, cell_index: int) -> Tuple[float, float]:
        """
        Returns the mean position of the particles in a cell.

        Raises:
            ValueError: If the cell is empty.
        """
        count = self.counts[cell_index]
        if count == 0:
            raise ValueError(f"Cell {cell_index} is empty and has no centroid.")
        return self.sum_x[cell_index] / count, self.sum_y[cell_index] / count

    def neighbors_of(self, row: int, col: int, radius: int = NEIGHBOR_RADIUS) -> List[int]:
        """
        Lists the cell indices in the (2*radius+1)^2 window around a cell.

        Cells outside the grid are dropped, not wrapped.
        """
        r0, r1, c0, c1 = cell_window(row, col, radius, self.rows, self.cols)
        return [r * self.cols + c for r in range(r0, r1) for c in range(c0, c1)]

    def total_count(self) -> int:
        return int(self.counts.sum())

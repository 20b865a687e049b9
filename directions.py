# directions.py
"""
The eight compass directions a particle may step in, and the weight math
shared by every bias source.

Directions are stored in a fixed canonical order (NW, N, NE, W, E, SW, S, SE)
in screen coordinates, so "north" is negative y. The order matters: weighted
sampling scans it left to right and ties go to the earlier entry.
"""
import numpy as np
from numba import jit

# --- Data Contracts ---
#
# STEP_OFFSETS: int64 array of shape (8, 2). The integer pixel offset applied
#   when a direction is selected.
# DIRECTION_UNITS: float64 array of shape (8, 2). STEP_OFFSETS normalised to
#   unit length; used when projecting a bias direction onto the compass.
#
# accumulate_projection(weights, dir_x, dir_y, strength, units) -> None
#   - Side Effects: adds strength * dot to every slot whose dot > 0.
#   - Invariants: never subtracts from any slot.
#
# select_direction(weights, r) -> int
#   - Inputs: weights (8 non-negative floats), r in [0, sum(weights)).
#   - Outputs: the first index whose cumulative sum strictly exceeds r.

DIRECTION_NAMES = ("NW", "N", "NE", "W", "E", "SW", "S", "SE")
DIRECTION_COUNT = len(DIRECTION_NAMES)

STEP_OFFSETS = np.array(
    [
        [-1, -1], [0, -1], [1, -1],
        [-1, 0],           [1, 0],
        [-1, 1],  [0, 1],  [1, 1],
    ],
    dtype=np.int64,
)

DIRECTION_UNITS = STEP_OFFSETS / np.hypot(STEP_OFFSETS[:, 0], STEP_OFFSETS[:, 1])[:, np.newaxis]


def direction_index(name: str) -> int:
    """Returns the canonical index of a compass direction name."""
    return DIRECTION_NAMES.index(name.upper())


@jit(nopython=True)
def accumulate_projection(weights, dir_x, dir_y, strength, units):
    """
    Projects a bias direction onto the compass and adds it to the weights.

    Directions facing away from the bias (dot <= 0) receive nothing.
    """
    for k in range(units.shape[0]):
        dot = dir_x * units[k, 0] + dir_y * units[k, 1]
        if dot > 0.0:
            weights[k] += strength * dot


@jit(nopython=True)
def _select_direction_numba(weights, r):
    cumulative = 0.0
    for k in range(weights.shape[0]):
        cumulative += weights[k]
        if r < cumulative:
            return k
    # Only reachable when rounding leaves r at the total.
    return weights.shape[0] - 1


def select_direction(weights, r: float) -> int:
    """
    Linear weighted sampling over the canonical direction order.

    Args:
        weights: Eight non-negative weights.
        r (float): A draw from [0, sum(weights)).

    Returns:
        int: Index of the selected direction.
    """
    return int(_select_direction_numba(np.asarray(weights, dtype=np.float64), float(r)))

# counter.py
"""
Radius-based particle counter used by the overlay tool.
"""
import logging
import numpy as np


def count_in_radius(positions: np.ndarray, center_x: float, center_y: float, radius: float) -> int:
    """
    Counts particles within `radius` of a point, boundary included.

    A bounding-box test discards most particles before the distance check.
    """
    dx = positions[:, 0] - center_x
    dy = positions[:, 1] - center_y
    in_box = (np.abs(dx) <= radius) & (np.abs(dy) <= radius)
    dx = dx[in_box]
    dy = dy[in_box]
    return int(np.count_nonzero(dx * dx + dy * dy <= radius * radius))


class ParticleCounter:
    """
    Remembers the query circle and the last in-radius count.

    Recounts only when asked: after a tick, or when the cursor or radius
    changes.
    """
    def __init__(self, radius: int = 100):
        self.radius = radius
        # Off-canvas until the pointer first moves.
        self.center_x = -1000.0
        self.center_y = -1000.0
        self.count = 0

    def move_to(self, x: float, y: float) -> None:
        self.center_x = float(x)
        self.center_y = float(y)

    def update(self, positions: np.ndarray) -> int:
        self.count = count_in_radius(positions, self.center_x, self.center_y, self.radius)
        logging.debug(
            f"{self.count} particles within {self.radius}px of "
            f"({self.center_x:.0f}, {self.center_y:.0f})."
        )
        return self.count

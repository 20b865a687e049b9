# particle.py
"""
Manages the coordinates of all particles in the simulation.

This module defines the ParticleStore class, which owns the flat position
buffer that the step scheduler mutates in place and the renderer reads.
"""
import logging
import numpy as np
from typing import Optional, Tuple, Union

SeedLike = Optional[Union[int, np.random.SeedSequence]]

# --- Data Contracts ---
#
# class ParticleStore:
#   - __init__(self, seed: SeedLike = None):
#     - Side Effects: Creates a dedicated RNG from the seed.
#
#   - initialize(self, n: int, width: int, height: int) -> None:
#     - Side Effects: Replaces the position buffer wholesale.
#     - Invariants:
#       - self.positions is a NumPy array of shape (n, 2) of dtype float64.
#       - Every coordinate lies in [0, width-1] x [0, height-1] and is
#         integer-valued.
#
#   - get(i) -> (x, y), set(i, x, y) -> None:
#     - Raises IndexError when i is outside [0, n).

class ParticleStore:
    """
    A fixed-length, ordered buffer of particle coordinates.
    """
    def __init__(self, seed: SeedLike = None):
        """
        Args:
            seed (SeedLike): Seed or SeedSequence for the placement RNG. None draws
                fresh entropy from the OS.
        """
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.positions = np.zeros((0, 2), dtype=np.float64)
        self.width = 0
        self.height = 0

    def initialize(self, n: int, width: int, height: int) -> None:
        """
        Allocates n particles uniformly over the canvas.

        Draws are integer-valued; sub-pixel precision is not needed for a
        walk that moves in whole-pixel steps.
        """
        self.width = width
        self.height = height
        self.positions = self.rng.integers(
            low=0,
            high=[width, height],
            size=(n, 2)
        ).astype(np.float64)

        logging.info(
            f"ParticleStore initialized with {n} particles "
            f"over a {width}x{height} canvas."
        )
        logging.debug(f"Positions shape: {self.positions.shape}")

    def count(self) -> int:
        return self.positions.shape[0]

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self.count():
            raise IndexError(
                f"Particle index {i} out of range for {self.count()} particles."
            )

    def get(self, i: int) -> Tuple[float, float]:
        self._check_index(i)
        return float(self.positions[i, 0]), float(self.positions[i, 1])

    def set(self, i: int, x: float, y: float) -> None:
        self._check_index(i)
        self.positions[i, 0] = x
        self.positions[i, 1] = y

    def snapshot(self) -> np.ndarray:
        """Returns a read-only view of the position buffer."""
        view = self.positions.view()
        view.flags.writeable = False
        return view

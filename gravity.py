# gravity.py
"""
User-placed gravity emitters and the directional bias they produce.

This is a heuristic field, not Newtonian gravity: an emitter only tilts the
odds of a particle's next step toward (Attract) or away from (Repel) itself.
Strength falls off linearly with distance so that far emitters stay
noticeable.
"""
import enum
import logging
import math
import numpy as np
from dataclasses import dataclass
from numba import jit
from typing import List, Optional, Tuple

from constants import EMITTER_HIT_RADIUS, GRAVITY_MIN_DISTANCE, GRAVITY_SCALE
from directions import DIRECTION_COUNT, DIRECTION_UNITS, accumulate_projection

# --- Data Contracts ---
#
# class GravityField:
#   - add_emitter(kind: EmitterKind, x: float, y: float) -> GravityEmitter
#   - remove_nearest(x, y, hit_radius=15.0) -> Optional[GravityEmitter]
#     - Removes the FIRST emitter in list order within hit_radius.
#   - snapshot() -> (np.ndarray (m, 2) float64, np.ndarray (m,) float64)
#     - Copies of emitter positions and direction signs (+1 attract,
#       -1 repel), taken once per tick.
#   - bias_contribution(x, y, base_strength) -> np.ndarray (8,)
#     - Invariants: every entry >= 0; independent of emitter order.


class EmitterKind(enum.Enum):
    ATTRACT = "attract"
    REPEL = "repel"

    @property
    def sign(self) -> float:
        return 1.0 if self is EmitterKind.ATTRACT else -1.0


@dataclass(eq=False)
class GravityEmitter:
    kind: EmitterKind
    x: float
    y: float
    dragging: bool = False


@jit(nopython=True)
def _gravity_bias_numba(px, py, emitter_xy, emitter_sign, base_strength, units, weights):
    for e in range(emitter_xy.shape[0]):
        gx = emitter_xy[e, 0] - px
        gy = emitter_xy[e, 1] - py
        dist = math.hypot(gx, gy)
        if dist < GRAVITY_MIN_DISTANCE:
            dist = GRAVITY_MIN_DISTANCE

        dir_x = emitter_sign[e] * gx / dist
        dir_y = emitter_sign[e] * gy / dist
        strength = (base_strength * GRAVITY_SCALE) / dist
        accumulate_projection(weights, dir_x, dir_y, strength, units)


class GravityField:
    """
    Insertion-ordered collection of point emitters.
    """
    def __init__(self):
        self.emitters: List[GravityEmitter] = []
        self.dragged: Optional[GravityEmitter] = None

    def __len__(self) -> int:
        return len(self.emitters)

    def add_emitter(self, kind: EmitterKind, x: float, y: float) -> GravityEmitter:
        emitter = GravityEmitter(kind=kind, x=float(x), y=float(y))
        self.emitters.append(emitter)
        logging.info(f"Placed {kind.value} emitter at ({x:.1f}, {y:.1f}).")
        return emitter

    def remove_nearest(
        self, x: float, y: float, hit_radius: float = EMITTER_HIT_RADIUS
    ) -> Optional[GravityEmitter]:
        """
        Removes the first emitter (in list order) within hit_radius of (x, y).

        Returns:
            The removed emitter, or None if nothing was close enough.
        """
        for i, emitter in enumerate(self.emitters):
            if math.hypot(emitter.x - x, emitter.y - y) <= hit_radius:
                del self.emitters[i]
                if emitter is self.dragged:
                    self.end_drag()
                logging.info(
                    f"Removed {emitter.kind.value} emitter at "
                    f"({emitter.x:.1f}, {emitter.y:.1f})."
                )
                return emitter
        logging.debug(f"No emitter within {hit_radius}px of ({x:.1f}, {y:.1f}).")
        return None

    def clear(self) -> None:
        self.end_drag()
        removed = len(self.emitters)
        self.emitters = []
        logging.info(f"Cleared {removed} emitters.")

    def begin_drag(self, emitter: GravityEmitter) -> None:
        self.end_drag()
        emitter.dragging = True
        self.dragged = emitter

    def move_dragged(self, x: float, y: float) -> bool:
        """Moves the dragged emitter, if any. Returns True if one moved."""
        if self.dragged is None:
            return False
        self.dragged.x = float(x)
        self.dragged.y = float(y)
        return True

    def end_drag(self) -> None:
        if self.dragged is not None:
            self.dragged.dragging = False
        self.dragged = None

    def snapshot(self) -> Tuple[np.ndarray, np.ndarray]:
        xy = np.array([(e.x, e.y) for e in self.emitters], dtype=np.float64).reshape(-1, 2)
        sign = np.array([e.kind.sign for e in self.emitters], dtype=np.float64)
        return xy, sign

    def bias_contribution(self, x: float, y: float, base_strength: float) -> np.ndarray:
        """Returns the 8-direction bias all emitters exert on a position."""
        weights = np.zeros(DIRECTION_COUNT, dtype=np.float64)
        xy, sign = self.snapshot()
        _gravity_bias_numba(
            float(x), float(y), xy, sign, float(base_strength), DIRECTION_UNITS, weights
        )
        return weights

# commands.py
"""
Command objects consumed by Engine.apply().

Input handling translates pointer, keyboard and widget events into these
and never touches simulation state directly.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from constants import EMITTER_HIT_RADIUS
from gravity import EmitterKind


@dataclass(frozen=True)
class PlaceEmitter:
    """Adds an emitter and starts dragging it. kind=None uses the configured kind."""
    x: float
    y: float
    kind: Optional[EmitterKind] = None


@dataclass(frozen=True)
class MoveEmitter:
    """Moves the emitter currently being dragged."""
    x: float
    y: float


@dataclass(frozen=True)
class ReleaseEmitter:
    pass


@dataclass(frozen=True)
class RemoveEmitter:
    x: float
    y: float
    hit_radius: float = EMITTER_HIT_RADIUS


@dataclass(frozen=True)
class ClearEmitters:
    pass


@dataclass(frozen=True)
class SetConfig:
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TogglePause:
    pass


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class MoveCursor:
    """Moves the counter's query center."""
    x: float
    y: float


@dataclass(frozen=True)
class Resize:
    width: int
    height: int

# config.py
"""
Runtime configuration of the random-walk engine.

The engine never reads ambient globals: every tick receives an explicit
SimulationConfig. Values are validated here, at the boundary, so nothing
downstream has a failure mode for bad settings.
"""
import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from gravity import EmitterKind

# --- Data Contracts ---
#
# SimulationConfig.from_params(params: Dict[str, Any]) -> SimulationConfig
#   - Inputs: the "simulation_parameters" section of config.json.
#   - Outputs: a validated, immutable configuration.
#   - Invariants:
#     - particle_count >= 1, tick_interval_ms >= 0, counter_radius >= 1,
#       gravity_strength >= 0, interaction_strength >= 0
#       (out-of-range values are clamped with a warning).
#     - Values of the wrong type raise ValueError.
#
# SimulationConfig.with_changes(**changes) -> SimulationConfig
#   - Same validation as from_params, applied on top of the current values.

_INT_FIELDS = ("particle_count", "tick_interval_ms", "counter_radius")
_FLOAT_FIELDS = ("gravity_strength", "interaction_strength")
_BOOL_FIELDS = (
    "gravity_enabled", "particle_attract", "particle_repel",
    "counter_enabled", "show_emitters",
)
_MINIMUMS = {
    "particle_count": 1, "tick_interval_ms": 0, "counter_radius": 1,
    "gravity_strength": 0.0, "interaction_strength": 0.0,
}


@dataclass(frozen=True)
class SimulationConfig:
    particle_count: int = 100
    tick_interval_ms: int = 10
    gravity_enabled: bool = False
    gravity_strength: float = 200.0
    particle_attract: bool = False
    particle_repel: bool = False
    interaction_strength: float = 50.0
    counter_enabled: bool = False
    counter_radius: int = 100
    emitter_kind: EmitterKind = EmitterKind.ATTRACT
    show_emitters: bool = True
    seed: Optional[int] = None

    @property
    def interaction_enabled(self) -> bool:
        return self.particle_attract or self.particle_repel

    @classmethod
    def field_names(cls):
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "SimulationConfig":
        """Builds a validated configuration from a parameter dictionary."""
        config = cls().with_changes(**params)
        logging.info("Simulation configuration validated.")
        logging.debug(f"Configuration: {config}")
        return config

    def with_changes(self, **changes: Any) -> "SimulationConfig":
        """Returns a copy with the given fields replaced and validated."""
        known = set(self.field_names())
        validated = {}
        for key, value in changes.items():
            if key not in known:
                logging.warning(f"Ignoring unknown configuration key '{key}'.")
                continue
            validated[key] = _coerce(key, value)
        return dataclasses.replace(self, **validated)


def _reject(key: str, value: Any, expected: str) -> None:
    msg = f"Configuration error: '{key}' must be {expected}, got {value!r}."
    logging.critical(msg)
    raise ValueError(msg)


def _clamp(key: str, value):
    minimum = _MINIMUMS[key]
    if value < minimum:
        logging.warning(f"'{key}' of {value} is below {minimum}; clamping to {minimum}.")
        return type(value)(minimum)
    return value


def _coerce(key: str, value: Any) -> Any:
    if key in _INT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            _reject(key, value, "a number")
        return _clamp(key, int(value))

    if key in _FLOAT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            _reject(key, value, "a finite number")
        return _clamp(key, float(value))

    if key in _BOOL_FIELDS:
        if not isinstance(value, bool):
            _reject(key, value, "true or false")
        return value

    if key == "emitter_kind":
        if isinstance(value, EmitterKind):
            return value
        try:
            return EmitterKind(value)
        except ValueError:
            _reject(key, value, "one of " + ", ".join(k.value for k in EmitterKind))

    if key == "seed":
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            _reject(key, value, "an integer or null")
        return value

    return value

# engine.py
"""
Public API of the random-walk engine.

The Engine owns every core component, applies command objects coming from
the input layer and exposes read-only outputs for the renderer.
"""
import logging
import time
import numpy as np
from typing import Callable, Optional, Tuple

from clock import SimulationClock
from commands import (
    ClearEmitters, MoveCursor, MoveEmitter, PlaceEmitter, ReleaseEmitter,
    RemoveEmitter, Resize, Restart, SetConfig, TogglePause,
)
from config import SimulationConfig
from counter import ParticleCounter
from gravity import GravityEmitter, GravityField
from grid import SpatialGrid
from particle import ParticleStore
from simulation import Simulation

# --- Data Contracts ---
#
# class Engine:
#   - __init__(self, config, width, height, renderer=None, time_source=None):
#     - Inputs:
#       - config: A validated SimulationConfig.
#       - width, height: Canvas extents in pixels.
#       - renderer: Called with the engine after every frame or forced render.
#       - time_source: Returns the current time in milliseconds.
#     - Side Effects: Allocates particles and grid, renders once.
#
#   - apply(self, command) -> None:
#     - Raises TypeError for objects that are not engine commands.
#
#   - frame(self, now_ms=None) -> bool:
#     - Runs at most one tick, then renders. Returns True if it ticked.


def _perf_ms() -> float:
    return time.perf_counter() * 1000.0


def _canvas_extents(width: int, height: int) -> Tuple[int, int]:
    """Clamps canvas extents to at least one pixel per axis."""
    clamped = (max(int(width), 1), max(int(height), 1))
    if clamped != (width, height):
        logging.warning(f"Canvas {width}x{height} is degenerate; using {clamped[0]}x{clamped[1]}.")
    return clamped


class Engine:
    """
    Coordinates particles, emitters, the step scheduler and the clock.
    """
    def __init__(
        self,
        config: SimulationConfig,
        width: int,
        height: int,
        renderer: Optional[Callable[["Engine"], None]] = None,
        time_source: Optional[Callable[[], float]] = None,
    ):
        self.config = config
        self.width, self.height = _canvas_extents(width, height)
        self.renderer = renderer
        self.time_source = time_source if time_source is not None else _perf_ms

        # Placement and step draws get independent streams from one seed.
        placement_seed, step_seed = np.random.SeedSequence(config.seed).spawn(2)
        self.particles = ParticleStore(seed=placement_seed)
        self.grid = SpatialGrid(self.width, self.height)
        self.field = GravityField()
        self.simulation = Simulation(self.particles, self.field, self.grid, seed=step_seed)
        self.counter = ParticleCounter(radius=config.counter_radius)
        self.clock = SimulationClock(config.tick_interval_ms, self.tick, self._render)

        self._handlers = {
            PlaceEmitter: self._place_emitter,
            MoveEmitter: self._move_emitter,
            ReleaseEmitter: self._release_emitter,
            RemoveEmitter: self._remove_emitter,
            ClearEmitters: self._clear_emitters,
            SetConfig: self._set_config,
            TogglePause: self._toggle_pause,
            Restart: self._restart,
            MoveCursor: self._move_cursor,
            Resize: self._resize,
        }

        self.reset()
        logging.info(f"Engine initialized on a {self.width}x{self.height} canvas.")

    # --- Outputs ---

    @property
    def positions(self) -> np.ndarray:
        return self.particles.snapshot()

    @property
    def emitters(self) -> Tuple[GravityEmitter, ...]:
        return tuple(self.field.emitters)

    @property
    def running(self) -> bool:
        return self.clock.running

    # --- Lifecycle ---

    def reset(self) -> None:
        """Reallocates particles and grid from the current config, then renders once."""
        self.particles.initialize(self.config.particle_count, self.width, self.height)
        self.grid.resize(self.width, self.height)
        self._recount()
        self.clock.force_render()

    def tick(self) -> None:
        self.simulation.step(self.config)
        if self.config.counter_enabled:
            self.counter.update(self.particles.positions)

    def frame(self, now_ms: Optional[float] = None) -> bool:
        if now_ms is None:
            now_ms = self.time_source()
        return self.clock.frame(now_ms)

    def apply(self, command) -> None:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported engine command: {command!r}")
        handler(command)

    def _render(self) -> None:
        if self.renderer is not None:
            self.renderer(self)

    def _render_if_paused(self) -> None:
        # While running the next frame redraws anyway.
        if not self.clock.running:
            self.clock.force_render()

    def _recount(self) -> None:
        if self.config.counter_enabled:
            self.counter.update(self.particles.positions)

    # --- Command handlers ---

    def _place_emitter(self, command: PlaceEmitter) -> None:
        kind = command.kind if command.kind is not None else self.config.emitter_kind
        emitter = self.field.add_emitter(kind, command.x, command.y)
        self.field.begin_drag(emitter)
        self._render_if_paused()

    def _move_emitter(self, command: MoveEmitter) -> None:
        if self.field.move_dragged(command.x, command.y):
            self._render_if_paused()

    def _release_emitter(self, command: ReleaseEmitter) -> None:
        self.field.end_drag()

    def _remove_emitter(self, command: RemoveEmitter) -> None:
        if self.field.remove_nearest(command.x, command.y, command.hit_radius) is not None:
            self._render_if_paused()

    def _clear_emitters(self, command: ClearEmitters) -> None:
        self.field.clear()
        self._render_if_paused()

    def _set_config(self, command: SetConfig) -> None:
        previous = self.config
        self.config = previous.with_changes(**command.changes)

        if self.config.tick_interval_ms != previous.tick_interval_ms:
            self.clock.set_interval(self.config.tick_interval_ms)
        if self.config.counter_radius != previous.counter_radius:
            self.counter.radius = self.config.counter_radius
        if self.config.particle_count != previous.particle_count:
            logging.info(
                f"Particle count changed from {previous.particle_count} "
                f"to {self.config.particle_count}; reseeding."
            )
            self.reset()
            return
        if self.config.counter_enabled and (
            not previous.counter_enabled or self.config.counter_radius != previous.counter_radius
        ):
            self._recount()
        self._render_if_paused()

    def _toggle_pause(self, command: TogglePause) -> None:
        self.clock.toggle(self.time_source())

    def _restart(self, command: Restart) -> None:
        logging.info("Restart requested.")
        self.reset()

    def _move_cursor(self, command: MoveCursor) -> None:
        self.counter.move_to(command.x, command.y)
        if self.config.counter_enabled and not self.clock.running:
            self._recount()
            self.clock.force_render()

    def _resize(self, command: Resize) -> None:
        self.width, self.height = _canvas_extents(command.width, command.height)
        logging.info(f"Canvas resized to {self.width}x{self.height}.")
        self.reset()

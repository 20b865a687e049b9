# clock.py
"""
Frame-driven tick throttle.

The host calls frame() once per display frame. A tick runs only when the
configured minimum interval has elapsed since the last one; every frame
renders either way. Ticks are never interrupted, so pausing only stops
future ticks.
"""
import logging
from typing import Callable


class SimulationClock:
    """
    Owns the run/pause state and the minimum interval between ticks.
    """
    def __init__(
        self,
        interval_ms: int,
        on_tick: Callable[[], None],
        on_render: Callable[[], None],
    ):
        self.interval_ms = max(int(interval_ms), 0)
        self.on_tick = on_tick
        self.on_render = on_render
        self.running = False
        self.last_tick_ms = 0.0

    def start(self, now_ms: float) -> None:
        # Restart the interval from now so a long pause does not fire a
        # catch-up tick.
        self.running = True
        self.last_tick_ms = now_ms
        logging.info("Simulation resumed.")

    def pause(self) -> None:
        self.running = False
        logging.info("Simulation paused.")

    def toggle(self, now_ms: float) -> bool:
        """Flips between running and paused. Returns the new running state."""
        if self.running:
            self.pause()
        else:
            self.start(now_ms)
        return self.running

    def set_interval(self, interval_ms: int) -> None:
        self.interval_ms = max(int(interval_ms), 0)
        logging.debug(f"Tick interval set to {self.interval_ms}ms.")

    def frame(self, now_ms: float) -> bool:
        """
        Handles one host frame callback.

        Returns:
            bool: True if a tick was applied during this frame.
        """
        ticked = False
        if self.running and now_ms - self.last_tick_ms >= self.interval_ms:
            self.on_tick()
            self.last_tick_ms = now_ms
            ticked = True
        self.on_render()
        return ticked

    def force_render(self) -> None:
        self.on_render()

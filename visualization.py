# visualization.py
"""
Renders the random walk with Pygame and turns user input into engine commands.
"""
import logging
import pygame
import numpy as np
from typing import Any, Dict, List, Optional, Tuple

from commands import (
    ClearEmitters, MoveCursor, MoveEmitter, PlaceEmitter, ReleaseEmitter,
    RemoveEmitter, Restart, SetConfig, TogglePause,
)
from config import SimulationConfig
from constants import (
    ATTRACT_COLOR_ACTIVE, ATTRACT_COLOR_INACTIVE, BACKGROUND_COLOR,
    COUNTER_COLOR, DEFAULT_WINDOW_HEIGHT, DEFAULT_WINDOW_WIDTH,
    DRAG_OUTLINE_COLOR, EMITTER_DRAW_RADIUS, FPS, FULLSCREEN,
    PARTICLE_COLOR, REPEL_COLOR_ACTIVE, REPEL_COLOR_INACTIVE,
    UI_BACKGROUND_ALPHA, UI_PANEL_WIDTH,
)
from gravity import EmitterKind

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from engine import Engine


# --- Data Contracts ---
#
# class InputMapper:
#   - translate(self, event: pygame.event.Event, config: SimulationConfig) -> list:
#     - Inputs: a Pygame event and the current configuration.
#     - Outputs: zero or more engine commands.
#     - Side Effects: tracks whether an emitter is being dragged.
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - handle_events(self, engine: "Engine") -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Applies the commands produced by user input.
#
#   - render(self, engine: "Engine") -> None:
#     - Side Effects: Draws particles, emitters, counter and UI, then flips.

# Mouse-wheel step per notch for numeric parameters.
PARAM_STEPS = {
    "particle_count": 1000,
    "tick_interval_ms": 1,
    "gravity_strength": 10.0,
    "interaction_strength": 5.0,
    "counter_radius": 5,
}

TOGGLE_PARAMS = (
    "gravity_enabled", "particle_attract", "particle_repel",
    "counter_enabled", "show_emitters",
)

PARAM_NAME_MAP = {
    "particle_count": "Particle Count",
    "tick_interval_ms": "Tick Interval (ms)",
    "gravity_enabled": "Gravity",
    "gravity_strength": "Gravity Strength",
    "particle_attract": "Particle Attract",
    "particle_repel": "Particle Repel",
    "interaction_strength": "Interaction Strength",
    "counter_enabled": "Counter",
    "counter_radius": "Counter Radius",
    "show_emitters": "Show Emitters",
}

BUTTONS = ("toggle", "restart", "clear", "kind")


class InputMapper:
    """
    Translates pointer and keyboard events over the simulation area.
    """
    def __init__(self, sim_width: int, sim_height: int):
        self.sim_width = sim_width
        self.sim_height = sim_height
        self.dragging = False

    def in_sim_area(self, pos: Tuple[int, int]) -> bool:
        return 0 <= pos[0] < self.sim_width and 0 <= pos[1] < self.sim_height

    def translate(self, event: pygame.event.Event, config: SimulationConfig) -> list:
        commands: list = []

        if event.type == pygame.MOUSEBUTTONDOWN and self.in_sim_area(event.pos):
            x, y = event.pos
            if event.button == 1:
                commands.append(PlaceEmitter(x, y))
                self.dragging = True
            elif event.button == 3:
                commands.append(RemoveEmitter(x, y))

        elif event.type == pygame.MOUSEMOTION:
            x, y = event.pos
            if self.in_sim_area(event.pos):
                commands.append(MoveCursor(x, y))
            if self.dragging:
                commands.append(MoveEmitter(x, y))

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging:
            self.dragging = False
            commands.append(ReleaseEmitter())

        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_SPACE:
                commands.append(TogglePause())
            elif event.key == pygame.K_r:
                commands.append(Restart())
            elif event.key == pygame.K_g:
                commands.append(SetConfig({"gravity_enabled": not config.gravity_enabled}))
            elif event.key == pygame.K_c:
                commands.append(ClearEmitters())
            elif event.key == pygame.K_t:
                commands.append(SetConfig({"emitter_kind": _other_kind(config.emitter_kind)}))

        return commands


def _other_kind(kind: EmitterKind) -> EmitterKind:
    return EmitterKind.REPEL if kind is EmitterKind.ATTRACT else EmitterKind.ATTRACT


def adjusted_value(key: str, value: Any, notches: int) -> Any:
    """Returns a numeric parameter moved by `notches` wheel steps."""
    # Strengths, counts and intervals are never negative.
    return max(value + PARAM_STEPS[key] * notches, 0)


class Visualizer:
    """
    Renders the engine outputs and provides the control panel.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('window_width', DEFAULT_WINDOW_WIDTH)
            height = vis_params.get('window_height', DEFAULT_WINDOW_HEIGHT)
            self.screen = pygame.display.set_mode((width, height))

        # The simulation area is the total width minus the UI panel
        self.sim_width = width - UI_PANEL_WIDTH
        self.sim_height = height

        self.sim_surface = pygame.Surface((self.sim_width, self.sim_height))
        self.particle_pixel = self.sim_surface.map_rgb(PARTICLE_COLOR)

        self.ui_panel_surface = pygame.Surface((UI_PANEL_WIDTH, self.sim_height), pygame.SRCALPHA)
        self.ui_panel_surface.fill((40, 40, 40, UI_BACKGROUND_ALPHA))

        pygame.display.set_caption("Stochastic Gravity Walk")
        self.clock = pygame.time.Clock()

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        # --- Button Configuration ---
        panel_x = self.sim_width + 30
        panel_width = UI_PANEL_WIDTH - 60
        self.button_rects: Dict[str, pygame.Rect] = {}
        button_y = 20
        for name in BUTTONS:
            rect = pygame.Rect(panel_x, button_y, panel_width, 30)
            self.button_rects[name] = rect
            button_y = rect.bottom + 5
        self.params_top = button_y + 15

        # Filled while drawing; used for hit-testing wheel and clicks.
        self.param_rects: List[Tuple[str, pygame.Rect]] = []

        # --- UI Color Palette ---
        self.button_color = (80, 80, 80)
        self.button_hover_color = (110, 110, 110)
        self.text_color_title = (255, 255, 255)
        self.text_color_key = (200, 200, 200)
        self.text_color_value = (255, 255, 255)
        self.param_box_color = (60, 60, 60, 160)
        self.param_box_spacing = 4

        self.input = InputMapper(self.sim_width, self.sim_height)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    # --- Event handling ---

    def handle_events(self, engine: "Engine") -> bool:
        """
        Polls Pygame events and applies the resulting commands.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            for command in self._panel_commands(event, engine) + self.input.translate(event, engine.config):
                engine.apply(command)
        return True

    def _panel_commands(self, event: pygame.event.Event, engine: "Engine") -> list:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for name, rect in self.button_rects.items():
                if rect.collidepoint(event.pos):
                    return [self._button_command(name, engine)]
            key = self._param_at(event.pos)
            if key in TOGGLE_PARAMS:
                return [SetConfig({key: not getattr(engine.config, key)})]

        if event.type == pygame.MOUSEWHEEL:
            key = self._param_at(pygame.mouse.get_pos())
            if key in PARAM_STEPS:
                old_value = getattr(engine.config, key)
                # event.y is 1 for scroll up, -1 for scroll down
                new_value = adjusted_value(key, old_value, event.y)
                logging.info(f"{PARAM_NAME_MAP[key]} changed from {old_value} to {new_value}.")
                return [SetConfig({key: new_value})]
        return []

    def _param_at(self, pos: Tuple[int, int]) -> Optional[str]:
        for key, rect in self.param_rects:
            if rect.collidepoint(pos):
                return key
        return None

    def _button_command(self, name: str, engine: "Engine"):
        if name == "toggle":
            return TogglePause()
        if name == "restart":
            return Restart()
        if name == "clear":
            return ClearEmitters()
        return SetConfig({"emitter_kind": _other_kind(engine.config.emitter_kind)})

    def _button_label(self, name: str, engine: "Engine") -> str:
        if name == "toggle":
            return "Pause" if engine.running else "Start"
        if name == "restart":
            return "Restart"
        if name == "clear":
            return "Clear Emitters"
        return f"Place: {engine.config.emitter_kind.value.title()}"

    # --- Drawing ---

    def _draw_particles(self, positions: np.ndarray) -> None:
        if positions.shape[0] == 0:
            return
        xs = positions[:, 0].astype(np.intp)
        ys = positions[:, 1].astype(np.intp)
        pixels = pygame.surfarray.pixels2d(self.sim_surface)
        pixels[xs, ys] = self.particle_pixel
        # Release the surface lock before blitting.
        del pixels

    def _draw_emitters(self, engine: "Engine") -> None:
        active = engine.config.gravity_enabled
        for emitter in engine.emitters:
            if emitter.kind is EmitterKind.REPEL:
                color = REPEL_COLOR_ACTIVE if active else REPEL_COLOR_INACTIVE
            else:
                color = ATTRACT_COLOR_ACTIVE if active else ATTRACT_COLOR_INACTIVE
            center = (int(emitter.x), int(emitter.y))
            pygame.draw.circle(self.sim_surface, color, center, EMITTER_DRAW_RADIUS)
            if emitter.dragging:
                pygame.draw.circle(
                    self.sim_surface, DRAG_OUTLINE_COLOR, center, EMITTER_DRAW_RADIUS + 3, 1
                )

    def _draw_counter(self, engine: "Engine") -> None:
        counter = engine.counter
        center = (int(counter.center_x), int(counter.center_y))
        pygame.draw.circle(self.sim_surface, COUNTER_COLOR, center, counter.radius, 1)
        text_surf = self.font_main_bold.render(str(counter.count), True, COUNTER_COLOR)
        self.sim_surface.blit(text_surf, (center[0] + 8, center[1] - counter.radius - 18))

    def _draw_buttons(self, engine: "Engine", mouse_pos: Tuple[int, int]) -> None:
        for name, rect in self.button_rects.items():
            color = self.button_hover_color if rect.collidepoint(mouse_pos) else self.button_color
            pygame.draw.rect(self.screen, color, rect, border_radius=5)
            text_surf = self.font_main.render(self._button_label(name, engine), True, self.text_color_title)
            self.screen.blit(text_surf, text_surf.get_rect(center=rect.center))

    def _draw_simulation_parameters(self, engine: "Engine") -> None:
        """Renders parameters and readouts in individual transparent boxes."""
        box_v_padding = 8
        line_height = self.font_main.get_linesize()
        key_value_gap = 20

        panel_x = self.sim_width + 30
        panel_width = UI_PANEL_WIDTH - 60
        current_y = self.params_top

        key_max_width = (panel_width - key_value_gap) / 2 - box_v_padding
        value_max_width = key_max_width
        key_column_right_x = panel_x + box_v_padding + key_max_width
        value_column_left_x = key_column_right_x + key_value_gap

        entries = [(key, getattr(engine.config, key)) for key in PARAM_NAME_MAP]
        entries.append(("ticks", engine.simulation.step_count))
        entries.append(("emitters", len(engine.emitters)))
        if engine.config.counter_enabled:
            entries.append(("in_radius", engine.counter.count))

        self.param_rects = []
        for key, value in entries:
            display_key = PARAM_NAME_MAP.get(key, key.replace('_', ' ').title())
            if isinstance(value, bool):
                display_value = "On" if value else "Off"
            elif isinstance(value, float):
                display_value = f"{value:.2f}"
            else:
                display_value = str(value)

            key_surfs = self._render_text_wrapped(display_key, self.font_main_bold, key_max_width, self.text_color_key)
            value_surfs = self._render_text_wrapped(display_value, self.font_main, value_max_width, self.text_color_value)

            num_lines = max(len(key_surfs), len(value_surfs))
            box_height = num_lines * line_height + (box_v_padding * 2)

            box_rect = pygame.Rect(panel_x, current_y, panel_width, box_height)
            pygame.draw.rect(self.screen, self.param_box_color, box_rect, border_radius=6)
            self.param_rects.append((key, box_rect))

            text_start_y = current_y + box_v_padding
            line_y = text_start_y
            for surf in key_surfs:
                self.screen.blit(surf, surf.get_rect(topright=(key_column_right_x, line_y)))
                line_y += line_height

            line_y = text_start_y
            for surf in value_surfs:
                self.screen.blit(surf, surf.get_rect(topleft=(value_column_left_x, line_y)))
                line_y += line_height

            current_y += box_height + self.param_box_spacing

    def _render_text_wrapped(
        self, text: str, font: pygame.font.Font, max_width: int, color: tuple
    ) -> list:
        """
        Renders text, wrapping it to a new line if it exceeds max_width.
        Returns a list of rendered surfaces, one for each line.
        """
        words = text.split(' ')
        lines = []
        current_line = ""

        for word in words:
            test_line = f"{current_line} {word}".strip()
            if font.size(test_line)[0] <= max_width:
                current_line = test_line
            else:
                lines.append(current_line)
                current_line = word

        lines.append(current_line)
        return [font.render(line, True, color) for line in lines if line]

    def render(self, engine: "Engine") -> None:
        """Draws the current engine state and flips the display."""
        self.sim_surface.fill(BACKGROUND_COLOR)
        self._draw_particles(engine.positions)
        if engine.config.show_emitters:
            self._draw_emitters(engine)
        if engine.config.counter_enabled:
            self._draw_counter(engine)

        self.screen.blit(self.sim_surface, (0, 0))
        self.screen.blit(self.ui_panel_surface, (self.sim_width, 0))
        self._draw_buttons(engine, pygame.mouse.get_pos())
        self._draw_simulation_parameters(engine)

        pygame.display.flip()

    def wait_frame(self) -> None:
        """Caps the host loop at FPS."""
        self.clock.tick(FPS)

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()

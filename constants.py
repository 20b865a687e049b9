# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are tuned design constants of the random-walk engine and rendering
properties that are not part of the runtime configuration.
"""

# --- Engine design constants ---
# Side of one aggregation grid cell, in pixels.
GRID_CELL_SIZE = 20
# Half-width of the neighborhood window scanned around a particle's cell.
# 2 means a 5x5 window.
NEIGHBOR_RADIUS = 2
# Pointer distance (pixels) within which a right click removes an emitter.
EMITTER_HIT_RADIUS = 15.0
# Scale applied to the base gravity strength before the 1/dist falloff.
GRAVITY_SCALE = 5.0
# Emitters closer than this are treated as this far away.
GRAVITY_MIN_DISTANCE = 1.0
# Cell centroids closer than this are ignored by inter-particle forces.
INTERACTION_MIN_DISTANCE = 1.0
# Baseline weight of every direction before any bias is added.
BASE_DIRECTION_WEIGHT = 1.0

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a window of the configured size.
FULLSCREEN = False
DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 700
UI_PANEL_WIDTH = 300
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)
PARTICLE_COLOR = (255, 255, 255)
UI_BACKGROUND_ALPHA = 100

# --- Emitter rendering ---
EMITTER_DRAW_RADIUS = 3
ATTRACT_COLOR_ACTIVE = (255, 0, 0)
ATTRACT_COLOR_INACTIVE = (77, 0, 0)
REPEL_COLOR_ACTIVE = (0, 128, 255)
REPEL_COLOR_INACTIVE = (0, 51, 102)
DRAG_OUTLINE_COLOR = (255, 255, 255)

# --- Counter overlay ---
COUNTER_COLOR = (0, 255, 0)

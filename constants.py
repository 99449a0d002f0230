# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They are the
defaults for the particle network and the page host; `config.json` may
override most of them, but the identifiers (element id, attribute and
property names) are fixed by the page markup.
"""

# --- Page Identifiers ---
CANVAS_ID = "particles-canvas"
THEME_ATTRIBUTE = "data-theme"
PARTICLE_COLOR_PROPERTY = "--text-muted"
CONNECTOR_COLOR_PROPERTY = "--accent"
BACKGROUND_COLOR_PROPERTY = "--bg-primary"

# --- Themes ---
THEME_DARK = "dark"
THEME_LIGHT = "light"

# Fallbacks used when the active theme leaves a colour property empty.
DEFAULT_PARTICLE_COLOR = "#666666"
DEFAULT_CONNECTOR_COLOR = "#2563eb"
DEFAULT_BACKGROUND_COLOR = "#ffffff"

# --- Activation ---
# Viewports narrower than this are treated as mobile/tablet: no animation,
# and the light theme is the default.
MIN_ACTIVE_WIDTH = 1024  # Pixels

# --- Particle Network ---
PARTICLE_COUNT = 100
CONNECTION_DISTANCE = 150.0  # Pixels, particle-to-particle
POINTER_DISTANCE = 200.0     # Pixels, particle-to-pointer
MAX_SPEED = 0.25             # Pixels per frame, per axis
RADIUS_MIN = 1.0             # Pixels
RADIUS_MAX = 3.0             # Pixels
PARTICLE_ALPHA = 0.5

# Stroke widths. The inter-particle link is a hairline.
POINTER_LINK_WIDTH = 1.0
PARTICLE_LINK_WIDTH = 0.5
# Inter-particle links are drawn at half the strength of their distance falloff.
PARTICLE_LINK_STRENGTH = 0.5

# --- Host Window ---
FULLSCREEN = False
WINDOW_WIDTH = 1440
WINDOW_HEIGHT = 900
FPS = 60
TITLE = "Particle Network"
PREFERENCES_FILE = "preferences.json"

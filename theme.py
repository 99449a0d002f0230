# theme.py
"""
Theme handling for the particle network.

Two concerns live here:

1. `ThemeColorResolver` turns the document root's computed colour properties
   into the pair of colours the renderer uses, and re-resolves them only when
   the root's `data-theme` attribute is mutated.
2. The page-side theme collaborator: the persisted preference and the
   initial/toggled theme that produce that attribute mutation.
"""
import json
import logging
import os
from typing import Callable, NamedTuple, Optional

from constants import (
    THEME_ATTRIBUTE, THEME_DARK, THEME_LIGHT, MIN_ACTIVE_WIDTH,
    PARTICLE_COLOR_PROPERTY, CONNECTOR_COLOR_PROPERTY,
    DEFAULT_PARTICLE_COLOR, DEFAULT_CONNECTOR_COLOR,
)
from page import DocumentRoot, MutationRecord
from utils import parse_color

# --- Data Contracts ---
#
# class ThemeColorResolver:
#   - __init__(self, root: DocumentRoot):
#     - Side Effects: resolves the initial colours and subscribes to root
#       attribute mutations (once).
#   - resolve_colors(self) -> ThemeColors:
#     - Outputs: the current colour pair, defaults substituted for empty or
#       unparseable values. Pure with respect to the resolver's state.
#   - current_particle_color / current_connector_color -> str:
#     - Outputs: the colours stored by the last resolution. Never touch the root.
#
# class ThemePreferences:
#   - load(self) -> Optional[str]: the saved theme, None if nothing usable is stored.
#   - save(self, theme: str) -> None: writes the preference file.


class ThemeColors(NamedTuple):
    particle_color: str
    connector_color: str


class ThemeColorResolver:
    """
    Colour provider for the renderer, backed by the document root.
    """
    def __init__(self, root: DocumentRoot):
        self.root = root
        self.colors = self.resolve_colors()
        self._disconnect: Optional[Callable[[], None]] = root.observe(self._on_mutation)
        logging.info(
            f"Theme colours resolved: particle={self.colors.particle_color}, "
            f"connector={self.colors.connector_color}"
        )

    def _read(self, name: str, default: str) -> str:
        value = self.root.get_property_value(name)
        if not value:
            return default
        try:
            parse_color(value)
        except ValueError:
            logging.warning(f"Theme property {name} has unparseable colour {value!r}. Using {default}.")
            return default
        return value

    def resolve_colors(self) -> ThemeColors:
        return ThemeColors(
            particle_color=self._read(PARTICLE_COLOR_PROPERTY, DEFAULT_PARTICLE_COLOR),
            connector_color=self._read(CONNECTOR_COLOR_PROPERTY, DEFAULT_CONNECTOR_COLOR),
        )

    def _on_mutation(self, record: MutationRecord) -> None:
        if record.attribute_name != THEME_ATTRIBUTE:
            return
        self.colors = self.resolve_colors()
        logging.debug(
            f"Theme changed to {self.root.get_attribute(THEME_ATTRIBUTE)!r}. "
            f"Colours now particle={self.colors.particle_color}, "
            f"connector={self.colors.connector_color}"
        )

    def current_particle_color(self) -> str:
        return self.colors.particle_color

    def current_connector_color(self) -> str:
        return self.colors.connector_color

    def close(self) -> None:
        """Stops listening for theme changes."""
        if self._disconnect is not None:
            self._disconnect()
            self._disconnect = None


class ThemePreferences:
    """The user's saved theme, stored as a small JSON file."""
    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logging.warning(f"Could not read theme preferences from {self.path}: {e}. Ignoring them.")
            return None

        theme = data.get('theme') if isinstance(data, dict) else None
        if theme not in (THEME_DARK, THEME_LIGHT):
            return None
        return theme

    def save(self, theme: str) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump({'theme': theme}, f)
        logging.debug(f"Saved theme preference {theme!r} to {self.path}")


def default_theme(viewport_width: int) -> str:
    """Dark on desktop-sized viewports, light on mobile and tablet."""
    return THEME_DARK if viewport_width >= MIN_ACTIVE_WIDTH else THEME_LIGHT


def init_theme(root: DocumentRoot, preferences: ThemePreferences, viewport_width: int) -> str:
    """Applies the saved theme, or the default for this viewport, to the root."""
    theme = preferences.load() or default_theme(viewport_width)
    root.set_attribute(THEME_ATTRIBUTE, theme)
    logging.info(f"Initial theme: {theme}")
    return theme


def toggle_theme(root: DocumentRoot, preferences: ThemePreferences) -> str:
    """Switches between dark and light and remembers the choice."""
    current = root.get_attribute(THEME_ATTRIBUTE)
    new_theme = THEME_LIGHT if current == THEME_DARK else THEME_DARK
    root.set_attribute(THEME_ATTRIBUTE, new_theme)
    preferences.save(new_theme)
    logging.info(f"Theme toggled: {current} -> {new_theme}")
    return new_theme

# page.py
"""
The host page the particle network lives on.

A `Page` bundles what the engine needs from its surroundings: the window it
measures, the document root that carries the theme attribute and the computed
colour properties, and the drawing surfaces registered by id. The pygame host
builds one for the real window; the tests build one around fakes.
"""
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from constants import THEME_ATTRIBUTE

# --- Data Contracts ---
#
# class DocumentRoot:
#   - __init__(self, palettes: Dict[str, Dict[str, str]]):
#     - Inputs:
#       - palettes: theme name -> {custom property name -> colour string}.
#   - set_attribute(name, value) -> None:
#     - Side Effects: stores the value and synchronously notifies every
#       observer with a MutationRecord, whether or not the value changed.
#   - get_property_value(name) -> str:
#     - Outputs: the inline override if one was set, otherwise the value from
#       the active theme's palette, otherwise "". Always stripped.
#   - observe(callback) -> Callable[[], None]:
#     - Outputs: a function that removes the observer again.
#
# class Page:
#   - get_canvas(canvas_id) -> Optional[canvas]: None when no such surface exists.
#
# Window objects only need `inner_width` and `inner_height` attributes.


class MutationRecord(NamedTuple):
    """Describes one attribute change on the document root."""
    attribute_name: str
    old_value: Optional[str]


class DocumentRoot:
    """
    Attribute and computed-style store for the page's root element.
    """
    def __init__(self, palettes: Optional[Dict[str, Dict[str, str]]] = None):
        self.palettes = palettes if palettes is not None else {}
        self._attributes: Dict[str, str] = {}
        self._inline_style: Dict[str, str] = {}
        self._observers: List[Callable[[MutationRecord], None]] = []

    def get_attribute(self, name: str) -> Optional[str]:
        return self._attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        old_value = self._attributes.get(name)
        self._attributes[name] = value
        logging.debug(f"Root attribute {name!r} set: {old_value!r} -> {value!r}")

        record = MutationRecord(attribute_name=name, old_value=old_value)
        # Copy so observers may unsubscribe while being notified.
        for callback in list(self._observers):
            callback(record)

    def set_property(self, name: str, value: str) -> None:
        """Sets an inline custom property. Observers are not notified."""
        self._inline_style[name] = value

    def remove_property(self, name: str) -> None:
        self._inline_style.pop(name, None)

    def get_property_value(self, name: str) -> str:
        if name in self._inline_style:
            return self._inline_style[name].strip()
        theme = self._attributes.get(THEME_ATTRIBUTE)
        palette = self.palettes.get(theme, {}) if theme is not None else {}
        return palette.get(name, "").strip()

    def observe(self, callback: Callable[[MutationRecord], None]) -> Callable[[], None]:
        """Registers an attribute-mutation observer."""
        self._observers.append(callback)

        def disconnect() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return disconnect


class Page:
    """
    A window, its document root and the drawing surfaces placed on it.
    """
    def __init__(self, window: Any, root: DocumentRoot, canvases: Optional[Dict[str, Any]] = None):
        self.window = window
        self.root = root
        self.canvases = dict(canvases) if canvases else {}

    def get_canvas(self, canvas_id: str) -> Optional[Any]:
        return self.canvases.get(canvas_id)

    def add_canvas(self, canvas_id: str, canvas: Any) -> None:
        self.canvases[canvas_id] = canvas

# viewport.py
"""
Keeps the drawing surface the same size as the window.
"""
import logging
from typing import Any, NamedTuple


class SurfaceDimensions(NamedTuple):
    width: int
    height: int


class ViewportController:
    """
    Owns the surface's pixel dimensions.

    `resize()` copies the window's inner size onto the canvas. Resizing clears
    the canvas; nothing else is reinitialized, particles keep their positions.
    """
    def __init__(self, canvas: Any, window: Any):
        self.canvas = canvas
        self.window = window
        self.dimensions = SurfaceDimensions(0, 0)

    def resize(self) -> None:
        width, height = int(self.window.inner_width), int(self.window.inner_height)
        self.canvas.set_size(width, height)
        if (width, height) != self.dimensions:
            logging.debug(f"Surface resized: {self.dimensions.width}x{self.dimensions.height} -> {width}x{height}")
        self.dimensions = SurfaceDimensions(width, height)

    @property
    def width(self) -> int:
        return self.dimensions.width

    @property
    def height(self) -> int:
        return self.dimensions.height

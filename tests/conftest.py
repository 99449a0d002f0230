"""
Shared fixtures: a recording canvas, a fake window and page builders.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from typing import List, NamedTuple

import numpy as np
import pytest

from constants import CANVAS_ID, THEME_ATTRIBUTE
from page import DocumentRoot, Page


class Circle(NamedTuple):
    x: float
    y: float
    radius: float
    color: str
    alpha: float


class Line(NamedTuple):
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    alpha: float
    width: float


class RecordingCanvas:
    """Canvas double that remembers what the last frame drew."""

    def __init__(self):
        self.width = 0
        self.height = 0
        self.size_calls = 0
        self.clear_count = 0
        self.circles: List[Circle] = []
        self.lines: List[Line] = []

    def set_size(self, width, height):
        self.width = width
        self.height = height
        self.size_calls += 1
        self.clear()

    def clear(self):
        self.clear_count += 1
        self.circles = []
        self.lines = []

    def fill_circle(self, x, y, radius, color, alpha):
        self.circles.append(Circle(float(x), float(y), float(radius), color, float(alpha)))

    def stroke_line(self, x1, y1, x2, y2, color, alpha, width=1.0):
        self.lines.append(Line(float(x1), float(y1), float(x2), float(y2), color, float(alpha), float(width)))


class FakeWindow:
    def __init__(self, inner_width=1280, inner_height=800):
        self.inner_width = inner_width
        self.inner_height = inner_height


PALETTES = {
    "light": {"--bg-primary": "#ffffff", "--text-muted": "#64748b", "--accent": "#2563eb"},
    "dark": {"--bg-primary": "#0f172a", "--text-muted": "#94a3b8", "--accent": "#3b82f6"},
}


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def root():
    """Document root with no colour properties at all."""
    return DocumentRoot()


@pytest.fixture
def themed_root():
    r = DocumentRoot(PALETTES)
    r.set_attribute(THEME_ATTRIBUTE, "dark")
    return r


@pytest.fixture
def page(window, root, canvas):
    return Page(window, root, {CANVAS_ID: canvas})


def place_particles(particles, positions, velocities=None):
    """Replaces the particle arrays with hand-picked values."""
    positions = np.asarray(positions, dtype=np.float64)
    particles.particle_count = positions.shape[0]
    particles.positions = positions.copy()
    if velocities is None:
        particles.velocities = np.zeros_like(particles.positions)
    else:
        particles.velocities = np.asarray(velocities, dtype=np.float64).copy()
    particles.radii = np.full(particles.particle_count, 2.0)

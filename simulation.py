# simulation.py
"""
Drives the particle network, one frame at a time.

This module defines the ParticleNetwork class, which owns every piece of
engine state (particles, pointer, resolved colours, surface size) and, per
frame, advances and draws each particle and draws the connector lines
between particles and the pointer. `start_particles` is the entry point the
page calls; it applies the activation gate and wires the parts together.
"""
import logging
import numpy as np
from typing import Any, Dict, Optional, Tuple
from numba import jit

from constants import (
    CANVAS_ID, MIN_ACTIVE_WIDTH, CONNECTION_DISTANCE, POINTER_DISTANCE,
    POINTER_LINK_WIDTH, PARTICLE_LINK_WIDTH, PARTICLE_LINK_STRENGTH,
)
from page import Page
from particle import ParticleSystem
from theme import ThemeColorResolver
from viewport import ViewportController

# --- Data Contracts ---
#
# class ParticleNetwork:
#   - __init__(self, canvas, viewport, colors, particles, params):
#     - Inputs:
#       - canvas: drawing surface with clear / fill_circle / stroke_line.
#       - viewport: ViewportController holding the current surface size.
#       - colors: provider with current_particle_color() and
#         current_connector_color().
#       - particles: an initialized ParticleSystem.
#       - params: the "network" section of config.json
#         ("connection_distance", "pointer_distance").
#
#   - frame(self) -> int:
#     - Outputs: number of lines stroked this frame.
#     - Side Effects: clears the canvas; advances, draws and links every
#       particle in population order.
#     - Invariants:
#       - A pointer line is drawn iff the pointer is known and closer than
#         pointer_distance.
#       - A particle-to-particle line from i to j (i != j) is drawn iff their
#         distance is below connection_distance and the pointer is known and
#         at least one of the two is closer than pointer_distance to it.
#         Both orderings (i, j) and (j, i) are visited, so every such link is
#         stroked twice per frame.
#
# start_particles(page, params, min_active_width) -> Optional[ParticleNetwork]:
#   - Outputs: None if the window is narrower than min_active_width or the
#     page has no canvas with id CANVAS_ID; the running engine otherwise.


def pointer_link_alpha(distance: float, pointer_distance: float = POINTER_DISTANCE) -> float:
    """Opacity of a particle-to-pointer line: 1 at the pointer, 0 at the cutoff."""
    return 1.0 - distance / pointer_distance


def particle_link_alpha(distance: float, connection_distance: float = CONNECTION_DISTANCE) -> float:
    """Opacity of a particle-to-particle line, half as strong as a pointer line."""
    return (1.0 - distance / connection_distance) * PARTICLE_LINK_STRENGTH


@jit(nopython=True)
def _find_links_numba(
    index, positions, pointer_x, pointer_y,
    connection_distance, pointer_distance,
    out_indices, out_distances
):
    """
    Numba-jitted neighbour search for one particle.

    Writes the indices of every other particle that particle `index` should
    connect to, and the distances to them, into the output buffers and
    returns how many were written. Only called while the pointer is known.
    """
    particle_count = positions.shape[0]
    px = positions[index, 0]
    py = positions[index, 1]
    d1 = np.sqrt((px - pointer_x) ** 2 + (py - pointer_y) ** 2)
    count = 0

    for j in range(particle_count):
        if j == index:
            continue

        dx = px - positions[j, 0]
        dy = py - positions[j, 1]
        distance = np.sqrt(dx * dx + dy * dy)

        if distance < connection_distance:
            # Gate on the cursor: only particles near it form the network.
            d2 = np.sqrt((positions[j, 0] - pointer_x) ** 2 + (positions[j, 1] - pointer_y) ** 2)
            if d1 < pointer_distance or d2 < pointer_distance:
                out_indices[count] = j
                out_distances[count] = distance
                count += 1
    return count


class ParticleNetwork:
    """
    The animation engine: particle state plus the per-frame render step.
    """
    def __init__(self, canvas: Any, viewport: ViewportController, colors: Any,
                 particles: ParticleSystem, params: Optional[Dict[str, Any]] = None):
        params = params if params is not None else {}
        self.canvas = canvas
        self.viewport = viewport
        self.colors = colors
        self.particles = particles
        self.connection_distance = float(params.get('connection_distance', CONNECTION_DISTANCE))
        self.pointer_distance = float(params.get('pointer_distance', POINTER_DISTANCE))

        self.pointer: Optional[Tuple[float, float]] = None
        self.paused = False
        self.frame_count = 0

        # Rule 11: Performance - scratch buffers reused by every neighbour search.
        self._link_indices = np.empty(particles.particle_count, dtype=np.int64)
        self._link_distances = np.empty(particles.particle_count, dtype=np.float64)

        logging.info(
            f"Particle network ready: {particles.particle_count} particles, "
            f"connection distance {self.connection_distance:.0f}px, "
            f"pointer distance {self.pointer_distance:.0f}px."
        )

    # --- Host signal handlers ---

    def on_pointer_move(self, x: float, y: float) -> None:
        self.pointer = (float(x), float(y))

    def on_pointer_leave(self) -> None:
        self.pointer = None

    def on_resize(self) -> None:
        self.viewport.resize()

    def pause(self) -> None:
        if not self.paused:
            self.paused = True
            logging.info(f"Particle network paused at frame {self.frame_count}.")

    def resume(self) -> None:
        if self.paused:
            self.paused = False
            logging.info("Particle network resumed.")

    def close(self) -> None:
        """Detaches from the page; colour providers without a subscription have no close()."""
        close_colors = getattr(self.colors, 'close', None)
        if close_colors is not None:
            close_colors()
        logging.info(f"Particle network closed after {self.frame_count} frames.")

    # --- Frame step ---

    def frame(self) -> int:
        """
        Executes one simulation and render step.
        """
        canvas = self.canvas
        particles = self.particles
        positions = particles.positions
        width, height = self.viewport.dimensions
        particle_color = self.colors.current_particle_color()
        connector_color = self.colors.current_connector_color()
        pointer = self.pointer
        lines = 0

        canvas.clear()

        for i in range(particles.particle_count):
            particles.advance(i, width, height)
            particles.draw(canvas, i, particle_color)

            if pointer is None:
                # Without a pointer neither rule can draw anything.
                continue

            x, y = positions[i]
            pointer_x, pointer_y = pointer

            # 1. Connect to the pointer
            distance = np.hypot(pointer_x - x, pointer_y - y)
            if distance < self.pointer_distance:
                canvas.stroke_line(
                    x, y, pointer_x, pointer_y, connector_color,
                    pointer_link_alpha(distance, self.pointer_distance),
                    POINTER_LINK_WIDTH
                )
                lines += 1

            # 2. Connect to the other particles near the pointer
            count = _find_links_numba(
                i, positions, pointer_x, pointer_y,
                self.connection_distance, self.pointer_distance,
                self._link_indices, self._link_distances
            )
            for k in range(count):
                j = self._link_indices[k]
                canvas.stroke_line(
                    x, y, positions[j, 0], positions[j, 1], particle_color,
                    particle_link_alpha(self._link_distances[k], self.connection_distance),
                    PARTICLE_LINK_WIDTH
                )
            lines += count

        self.frame_count += 1
        return lines


def start_particles(page: Page, params: Optional[Dict[str, Any]] = None,
                    min_active_width: int = MIN_ACTIVE_WIDTH) -> Optional[ParticleNetwork]:
    """
    Starts the particle network on a page, if the page supports it.
    """
    params = params if params is not None else {}

    # Disabled on mobile/tablet to save battery.
    if page.window.inner_width < min_active_width:
        logging.info(
            f"Viewport width {page.window.inner_width}px is below {min_active_width}px. "
            "Particle network disabled."
        )
        return None

    canvas = page.get_canvas(CANVAS_ID)
    if canvas is None:
        return None

    viewport = ViewportController(canvas, page.window)
    viewport.resize()
    colors = ThemeColorResolver(page.root)
    particles = ParticleSystem(params, viewport.width, viewport.height)
    return ParticleNetwork(canvas, viewport, colors, particles, params)

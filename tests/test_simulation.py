"""
Tests for the frame driver and the engine's start-up gate.
"""

import math
from collections import Counter

import numpy as np
import pytest

from constants import CANVAS_ID, THEME_ATTRIBUTE
from page import DocumentRoot, Page
from particle import ParticleSystem
from simulation import (
    ParticleNetwork,
    particle_link_alpha,
    pointer_link_alpha,
    start_particles,
)
from theme import ThemeColorResolver
from viewport import ViewportController
from conftest import FakeWindow, RecordingCanvas, place_particles


class FixedColors:
    """Colour provider with constant colours."""

    def current_particle_color(self):
        return "#111111"

    def current_connector_color(self):
        return "#222222"


def build_network(positions, velocities=None, size=(800, 600), colors=None):
    canvas = RecordingCanvas()
    viewport = ViewportController(canvas, FakeWindow(*size))
    viewport.resize()
    particles = ParticleSystem({"particle_count": len(positions)}, *size)
    place_particles(particles, positions, velocities)
    network = ParticleNetwork(canvas, viewport, colors or FixedColors(), particles)
    return network, canvas


def pair_lines(canvas):
    return [line for line in canvas.lines if line.width == 0.5]


def pointer_lines(canvas):
    return [line for line in canvas.lines if line.width == 1.0]


class TestOpacity:

    def test_pointer_alpha_endpoints(self):
        assert pointer_link_alpha(0.0) == 1.0
        assert pointer_link_alpha(200.0) == 0.0

    def test_pointer_alpha_decreases_with_distance(self):
        alphas = [pointer_link_alpha(d) for d in np.linspace(0, 200, 101)]
        assert all(a > b for a, b in zip(alphas, alphas[1:]))

    def test_particle_alpha(self):
        assert particle_link_alpha(0.0) == 0.5
        assert particle_link_alpha(150.0) == 0.0
        assert particle_link_alpha(75.0) == pytest.approx(0.25)


class TestFrame:
    """One frame: clear, then advance, draw and link each particle."""

    def test_far_particles_draw_nothing(self):
        """800x600 surface, particles at opposite corners, pointer in the middle."""
        network, canvas = build_network([[10, 10], [780, 590]])
        network.on_pointer_move(400, 300)

        assert network.frame() == 0
        assert canvas.lines == []
        assert len(canvas.circles) == 2

    def test_frame_clears_first(self):
        network, canvas = build_network([[10, 10]])
        clears = canvas.clear_count
        network.frame()
        assert canvas.clear_count == clears + 1
        assert len(canvas.circles) == 1

    def test_particles_move_each_frame(self):
        network, canvas = build_network([[100, 100]], [[0.2, -0.1]])
        network.frame()
        network.frame()
        assert network.particles.positions[0] == pytest.approx([100.4, 99.8])
        assert canvas.circles[0].x == pytest.approx(100.4)
        assert network.frame_count == 2

    def test_no_pointer_no_lines(self):
        network, canvas = build_network([[100, 100], [110, 100]])
        assert network.frame() == 0
        assert canvas.lines == []

    def test_pointer_and_pair_lines(self):
        network, canvas = build_network([[100, 100], [150, 100]])
        network.on_pointer_move(100, 120)

        assert network.frame() == 4

        to_pointer = pointer_lines(canvas)
        assert len(to_pointer) == 2
        assert to_pointer[0].color == "#222222"
        assert to_pointer[0].alpha == pytest.approx(1 - 20 / 200)
        assert to_pointer[1].alpha == pytest.approx(1 - math.hypot(50, 20) / 200)
        assert (to_pointer[0].x2, to_pointer[0].y2) == (100.0, 120.0)

        pairs = pair_lines(canvas)
        assert len(pairs) == 2
        for line in pairs:
            assert line.color == "#111111"
            assert line.alpha == pytest.approx((1 - 50 / 150) * 0.5)
        # Drawn once from each end.
        assert {(line.x1, line.x2) for line in pairs} == {(100.0, 150.0), (150.0, 100.0)}

    def test_pair_needs_only_one_end_near_pointer(self):
        network, canvas = build_network([[100, 100], [240, 100]])
        network.on_pointer_move(0, 100)

        network.frame()
        assert len(pointer_lines(canvas)) == 1
        assert len(pair_lines(canvas)) == 2

    def test_close_pair_far_from_pointer(self):
        network, canvas = build_network([[600, 500], [620, 500]])
        network.on_pointer_move(50, 50)
        assert network.frame() == 0

    def test_pointer_cutoff_is_strict(self):
        network, canvas = build_network([[300, 100]])
        network.on_pointer_move(100, 100)
        assert network.frame() == 0

    def test_connection_cutoff_is_strict(self):
        network, canvas = build_network([[100, 100], [250, 100]])
        network.on_pointer_move(100, 100)
        network.frame()
        assert pair_lines(canvas) == []

    def test_pointer_leave_stops_links(self):
        network, canvas = build_network([[100, 100], [150, 100]])
        network.on_pointer_move(100, 120)
        network.frame()
        assert canvas.lines

        network.on_pointer_leave()
        assert network.pointer is None
        assert network.frame() == 0

    def test_zero_particles(self):
        network, canvas = build_network(np.empty((0, 2)))
        network.on_pointer_move(10, 10)
        assert network.frame() == 0
        assert canvas.circles == []

    def test_pair_rule_matches_brute_force(self):
        rng = np.random.default_rng(11)
        positions = rng.uniform([0, 0], [500, 400], size=(60, 2))
        pointer = (250.0, 200.0)
        network, canvas = build_network(positions, size=(500, 400))
        network.on_pointer_move(*pointer)

        network.frame()

        expected = Counter()
        for a in range(len(positions)):
            for b in range(len(positions)):
                if a == b:
                    continue
                pa, pb = positions[a], positions[b]
                close = math.dist(pa, pb) < 150
                near = math.dist(pa, pointer) < 200 or math.dist(pb, pointer) < 200
                if close and near:
                    expected[(pa[0], pa[1], pb[0], pb[1])] += 1

        drawn = Counter((l.x1, l.y1, l.x2, l.y2) for l in pair_lines(canvas))
        assert expected
        assert drawn == expected

    def test_later_particles_see_moved_earlier_particles(self):
        """Particle 1 is compared against particle 0's position after this frame's move."""
        network, canvas = build_network(
            [[100, 100], [249.9, 100]],
            [[-0.25, 0.0], [0.0, 0.0]],
        )
        network.on_pointer_move(100, 100)
        network.frame()
        # 0 -> 1 and 1 -> 0 are both measured after particle 0 moved away: 150.15px apart.
        assert pair_lines(canvas) == []


class TestThemeChange:

    def test_new_connector_colour_without_reseeding(self):
        root = DocumentRoot()
        resolver = ThemeColorResolver(root)
        network, canvas = build_network([[100, 100], [150, 100]], [[0.1, 0.0], [0.0, 0.1]], colors=resolver)
        network.on_pointer_move(100, 120)

        network.frame()
        assert pointer_lines(canvas)[0].color == "#2563eb"
        assert pair_lines(canvas)[0].color == "#666666"

        positions = network.particles.positions.copy()
        velocities = network.particles.velocities.copy()

        root.set_property("--accent", "#ff0000")
        root.set_attribute(THEME_ATTRIBUTE, "dark")
        network.frame()

        assert all(line.color == "#ff0000" for line in pointer_lines(canvas))
        np.testing.assert_allclose(network.particles.positions, positions + velocities)
        np.testing.assert_array_equal(network.particles.velocities, velocities)


class TestPause:

    def test_pause_and_resume(self):
        network, _ = build_network([[10, 10]])
        assert not network.paused
        network.pause()
        assert network.paused
        network.resume()
        assert not network.paused


class TestStartParticles:

    def test_narrow_viewport_never_starts(self, canvas):
        page = Page(FakeWindow(800, 600), DocumentRoot(), {CANVAS_ID: canvas})
        assert start_particles(page) is None
        assert canvas.size_calls == 0
        assert canvas.circles == []

    def test_missing_canvas_is_silent(self, caplog):
        page = Page(FakeWindow(1280, 800), DocumentRoot())
        with caplog.at_level("DEBUG"):
            assert start_particles(page) is None
        assert caplog.text == ""

    def test_custom_activation_width(self, canvas):
        page = Page(FakeWindow(800, 600), DocumentRoot(), {CANVAS_ID: canvas})
        assert start_particles(page, {}, min_active_width=640) is not None

    def test_starts_on_desktop(self, page, canvas):
        network = start_particles(page, {"seed": 5})
        assert network is not None
        assert (canvas.width, canvas.height) == (1280, 800)
        assert network.viewport.dimensions == (1280, 800)
        assert len(network.particles) == 100
        assert np.all(network.particles.positions <= [1280, 800])
        assert network.pointer is None

    def test_config_values_are_used(self, page):
        network = start_particles(page, {
            "particle_count": 12,
            "connection_distance": 80,
            "pointer_distance": 120,
        })
        assert len(network.particles) == 12
        assert network.connection_distance == 80.0
        assert network.pointer_distance == 120.0

    def test_resize_keeps_particles(self, page, window, canvas):
        network = start_particles(page, {"seed": 5})
        positions = network.particles.positions.copy()

        window.inner_width, window.inner_height = 1600, 900
        network.on_resize()

        assert (canvas.width, canvas.height) == (1600, 900)
        assert network.viewport.dimensions == (1600, 900)
        np.testing.assert_array_equal(network.particles.positions, positions)


class TestClose:

    def test_close_stops_theme_updates(self):
        root = DocumentRoot()
        resolver = ThemeColorResolver(root)
        network, _ = build_network([[10, 10]], colors=resolver)

        network.close()
        root.set_property("--accent", "#ff0000")
        root.set_attribute(THEME_ATTRIBUTE, "dark")
        assert network.colors.current_connector_color() == "#2563eb"

    def test_close_with_fixed_colours(self):
        network, _ = build_network([[10, 10]])
        network.close()
        network.close()

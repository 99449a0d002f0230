# particle.py
"""
Manages the state of all particles in the network.

This module defines the ParticleSystem class, which is responsible for
initializing and storing particle data (position, velocity, radius) in
NumPy arrays, moving a particle one frame forward, and drawing it.
"""
import logging
import numpy as np
from typing import Any, Dict, Optional

from constants import PARTICLE_COUNT, MAX_SPEED, RADIUS_MIN, RADIUS_MAX, PARTICLE_ALPHA

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], width: float, height: float):
#     - Inputs:
#       - params: the "network" section of config.json.
#         - "particle_count": int (default 100)
#         - "max_speed": float, per-axis speed bound (default 0.25)
#         - "radius_min" / "radius_max": float (default 1 / 3)
#         - "particle_alpha": float (default 0.5)
#         - "seed": Optional[int], None for an unseeded generator
#       - width, height: surface size the positions are spread over.
#     - Side Effects: Initializes the particle state arrays.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - self.radii is a NumPy array of shape (N,) of dtype float64.
#       - N never changes after construction.
#
#   - advance(self, index: int, width: float, height: float) -> None:
#     - Side Effects: moves particle `index` by its velocity, then reverses
#       the velocity on each axis whose new coordinate lies outside
#       [0, dimension]. Positions are not clamped, so a particle can sit up
#       to one step outside the surface before it turns around.
#
#   - draw(self, canvas, index: int, color: str) -> None:
#     - Side Effects: one filled circle on the canvas.

class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, params: Dict[str, Any], width: float, height: float):
        self.particle_count = int(params.get('particle_count', PARTICLE_COUNT))
        self.max_speed = float(params.get('max_speed', MAX_SPEED))
        self.radius_min = float(params.get('radius_min', RADIUS_MIN))
        self.radius_max = float(params.get('radius_max', RADIUS_MAX))
        self.alpha = float(params.get('particle_alpha', PARTICLE_ALPHA))
        self.seed: Optional[int] = params.get('seed')

        self.rng = np.random.default_rng(self.seed)

        self.positions = self.rng.uniform(
            low=[0, 0],
            high=[width, height],
            size=(self.particle_count, 2)
        )
        self.velocities = self.rng.uniform(
            low=-self.max_speed,
            high=self.max_speed,
            size=(self.particle_count, 2)
        )
        self.radii = self.rng.uniform(
            low=self.radius_min,
            high=self.radius_max,
            size=self.particle_count
        )

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} particles "
            f"over a {width}x{height} surface."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Radii shape: {self.radii.shape}"
        )

    def __len__(self) -> int:
        return self.particle_count

    def advance(self, index: int, width: float, height: float) -> None:
        pos = self.positions[index]
        vel = self.velocities[index]
        pos += vel

        # Bounce off edges. The check runs on the moved position.
        if pos[0] < 0 or pos[0] > width:
            vel[0] = -vel[0]
        if pos[1] < 0 or pos[1] > height:
            vel[1] = -vel[1]

    def draw(self, canvas, index: int, color: str) -> None:
        x, y = self.positions[index]
        canvas.fill_circle(x, y, self.radii[index], color, self.alpha)

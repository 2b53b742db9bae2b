"""
Particle Positions
==================
Per-frame placement of every shard in the swarm.

position(i) = direction(i, N) * radius(breath_phase, N) + wobble(i, time)

- direction: Fibonacci sphere point, fixed for a given N
- radius:    breath-driven orbit radius, held above the dynamic floor
- wobble:    bounded periodic offset (tangent-plane wobble + ambient float)
             whose phase/seed is derived from the particle index

Everything is a pure function of (i, N, breath_phase, time). There is no
per-particle mutable state, only the per-N ``SwarmLayout`` which caches
the static parts and owns scratch buffers so a frame runs with in-place
numpy operations and no new arrays.
"""

import logging
from functools import lru_cache
from typing import Optional

import numpy as np

from .config import DEFAULT_CONFIG, SwarmConfig
from .fibonacci import fibonacci_direction, fibonacci_directions
from .sizing import clamp_count, orbit_radius

logger = logging.getLogger(__name__)

DEFAULT_PARTICLE_COUNT = 42

# Per-particle seed multipliers
WOBBLE_SEED_STEP = np.e
AMBIENT_SEED_STEP = 137.508

# Secondary wobble axis runs slower and smaller than the primary one
SECONDARY_WOBBLE_RATE = 0.7
SECONDARY_WOBBLE_GAIN = 0.6

# Ambient float angular rates (rad/s) and seed scaling per world axis
AMBIENT_RATES = (0.4, 0.3, 0.35)
AMBIENT_SEED_SCALES = (1.0, 0.7, 1.3)

_Y_AXIS = np.array([0.0, 1.0, 0.0])
_X_AXIS = np.array([1.0, 0.0, 0.0])


def tangent_frame(direction: np.ndarray):
    """
    Two unit vectors perpendicular to ``direction`` (and each other).

    Directions on the Y axis fall back to +X for the first tangent.
    """
    tangent1 = np.cross(direction, _Y_AXIS)
    norm = np.linalg.norm(tangent1)
    if norm < 1e-6:
        tangent1 = _X_AXIS.copy()
    else:
        tangent1 = tangent1 / norm
    tangent2 = np.cross(direction, tangent1)
    return tangent1, tangent2


def wobble_offset(index: int,
                  direction: np.ndarray,
                  time: float,
                  config: SwarmConfig = DEFAULT_CONFIG) -> np.ndarray:
    """
    Ambient offset of one particle at ``time``.

    Periodic and bounded by ``config.ambient.max_displacement``.
    """
    ambient = config.ambient
    tangent1, tangent2 = tangent_frame(direction)

    wobble_phase = time * ambient.wobble_frequency * 2.0 * np.pi + index * WOBBLE_SEED_STEP
    wobble1 = np.sin(wobble_phase) * ambient.wobble_amplitude
    wobble2 = (np.cos(wobble_phase * SECONDARY_WOBBLE_RATE)
               * ambient.wobble_amplitude * SECONDARY_WOBBLE_GAIN)

    seed = index * AMBIENT_SEED_STEP
    drift = np.array([
        np.sin(time * AMBIENT_RATES[0] + seed * AMBIENT_SEED_SCALES[0]) * ambient.scale,
        np.sin(time * AMBIENT_RATES[1] + seed * AMBIENT_SEED_SCALES[1]) * ambient.y_scale,
        np.cos(time * AMBIENT_RATES[2] + seed * AMBIENT_SEED_SCALES[2]) * ambient.scale,
    ])

    return tangent1 * wobble1 + tangent2 * wobble2 + drift


def particle_position(index: int,
                      particle_count: int,
                      breath_phase: float,
                      time: float = 0.0,
                      config: SwarmConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Position of a single particle, O(1)"""
    count = clamp_count(particle_count)
    direction = fibonacci_direction(index, count)
    radius = orbit_radius(breath_phase, count, config)
    return direction * radius + wobble_offset(index, direction, time, config)


class SwarmLayout:
    """
    Static, per-N part of the swarm plus frame scratch space.

    Built once per particle count; ``fill`` then places every particle
    for a (breath_phase, time) pair in O(N) without allocating.
    """

    def __init__(self, particle_count: int, config: SwarmConfig = DEFAULT_CONFIG):
        self.particle_count = clamp_count(particle_count)
        self.config = config
        n = self.particle_count

        self.directions = fibonacci_directions(n)

        # Tangent frames for the wobble
        self.tangent1 = np.cross(self.directions, _Y_AXIS)
        norms = np.linalg.norm(self.tangent1, axis=1)
        degenerate = norms < 1e-6
        self.tangent1[degenerate] = _X_AXIS
        norms[degenerate] = 1.0
        self.tangent1 /= norms[:, None]
        self.tangent2 = np.cross(self.directions, self.tangent1)

        index = np.arange(n, dtype=np.float64)
        self.wobble_seed = index * WOBBLE_SEED_STEP
        ambient_seed = index * AMBIENT_SEED_STEP
        self.ambient_seeds = [ambient_seed * scale for scale in AMBIENT_SEED_SCALES]

        ambient = config.ambient
        self._wobble_rate = ambient.wobble_frequency * 2.0 * np.pi
        self._axis_amplitudes = (ambient.scale, ambient.y_scale, ambient.scale)
        self._axis_waves = (np.sin, np.sin, np.cos)

        # Frame scratch buffers
        self._phase = np.empty(n)
        self._coef = np.empty(n)
        self._vec = np.empty((n, 3))

        logger.debug("Built swarm layout for %d particles", n)

    def new_buffer(self) -> np.ndarray:
        """Output buffer of the right shape for ``fill``"""
        return np.empty((self.particle_count, 3), dtype=np.float64)

    def radius(self, breath_phase: float) -> float:
        return orbit_radius(breath_phase, self.particle_count, self.config)

    def fill(self, breath_phase: float, time: float, out: np.ndarray) -> np.ndarray:
        """Write every particle position into ``out`` and return it"""
        if out.shape != (self.particle_count, 3):
            raise ValueError(
                f"output buffer must have shape ({self.particle_count}, 3), got {out.shape}"
            )
        ambient = self.config.ambient
        phase, coef, vec = self._phase, self._coef, self._vec

        np.multiply(self.directions, self.radius(breath_phase), out=out)

        # Tangent-plane wobble
        np.add(self.wobble_seed, time * self._wobble_rate, out=phase)
        np.sin(phase, out=coef)
        coef *= ambient.wobble_amplitude
        np.multiply(self.tangent1, coef[:, None], out=vec)
        out += vec

        phase *= SECONDARY_WOBBLE_RATE
        np.cos(phase, out=coef)
        coef *= ambient.wobble_amplitude * SECONDARY_WOBBLE_GAIN
        np.multiply(self.tangent2, coef[:, None], out=vec)
        out += vec

        # Ambient float, one world axis at a time
        for axis in range(3):
            np.add(self.ambient_seeds[axis], time * AMBIENT_RATES[axis], out=phase)
            self._axis_waves[axis](phase, out=coef)
            coef *= self._axis_amplitudes[axis]
            out[:, axis] += coef

        return out


@lru_cache(maxsize=16)
def get_layout(particle_count: int, config: SwarmConfig = DEFAULT_CONFIG) -> SwarmLayout:
    """Shared layout for a (count, config) pair"""
    return SwarmLayout(particle_count, config)


def calculate_all_particle_positions(breath_phase: float,
                                     particle_count: int = DEFAULT_PARTICLE_COUNT,
                                     time: float = 0.0,
                                     config: SwarmConfig = DEFAULT_CONFIG,
                                     out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Positions of the whole swarm as an (N, 3) array.

    Deterministic: the same arguments always give the same coordinates.
    Pass ``out`` to reuse a buffer across frames.
    """
    layout = get_layout(clamp_count(particle_count), config)
    if out is None:
        out = layout.new_buffer()
    return layout.fill(breath_phase, time, out)

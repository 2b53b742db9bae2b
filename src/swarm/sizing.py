"""
Shard Size & Orbit Radius
=========================
Scalar laws that decide how big each shard is and how far from the
globe the swarm orbits.

- shard_size:  base / sqrt(N), clamped to [min, max]
- orbit_radius: linear in breath phase, exhale (0) -> MAX, inhale (1) -> MIN
- dynamic floor: raises the inhale radius when N is large enough that
  the Fibonacci spacing at MIN would make neighbouring shards overlap

Input policy (frame path, never raises):
- breath_phase is clamped to [0, 1]; +/-inf clamp to the bounds
- NaN breath phase propagates as a NaN radius
- particle_count is clamped to >= 1
"""

import math
from typing import Optional

from .config import DEFAULT_CONFIG, SwarmConfig


def clamp_unit(value: float) -> float:
    """Clamp to [0, 1], letting NaN through unchanged"""
    if math.isnan(value):
        return value
    return min(max(value, 0.0), 1.0)


def clamp_count(particle_count) -> int:
    """Particle counts below one are treated as a single particle"""
    return max(1, int(particle_count))


def shard_size(particle_count: int,
               base_size: float = DEFAULT_CONFIG.shard.base_size,
               min_size: float = DEFAULT_CONFIG.shard.min_size,
               max_size: float = DEFAULT_CONFIG.shard.max_size) -> float:
    """
    Shard radius for a swarm of ``particle_count`` shards.

    Doubling the count shrinks the size by sqrt(2) until a bound is hit.
    """
    count = clamp_count(particle_count)
    calculated = base_size / math.sqrt(count)
    return min(max(calculated, min_size), max_size)


def swarm_shard_size(particle_count: int, config: SwarmConfig = DEFAULT_CONFIG) -> float:
    shard = config.shard
    return shard_size(particle_count, shard.base_size, shard.min_size, shard.max_size)


def required_min_distance(particle_count: int, config: SwarmConfig = DEFAULT_CONFIG) -> float:
    """Minimum centre-to-centre distance between two shards"""
    return 2.0 * swarm_shard_size(particle_count, config) + config.shard.particle_margin


def required_surface_distance(particle_count: int, config: SwarmConfig = DEFAULT_CONFIG) -> float:
    """Minimum gap between a shard centre and the globe surface"""
    return swarm_shard_size(particle_count, config) + config.shard.globe_buffer


def dynamic_min_orbit_radius(particle_count: int, config: SwarmConfig = DEFAULT_CONFIG) -> float:
    """
    Smallest orbit radius that keeps both collision invariants true.

    Two constraints, the larger wins (and never below the configured
    inhale radius):

    1. Globe: the centre must clear the globe surface by the required
       surface distance even when the wobble pushes it straight inward.

    2. Spacing: on a sphere of radius r the Fibonacci nearest-neighbour
       chord is at least k * r * sqrt(4*pi/N) for N >= 3. Two neighbours
       can each be displaced by the wobble toward one another, so the
       nominal chord must exceed the required distance by twice the
       wobble bound. Below N = 3 the configured inhale radius dominates
       this term by a wide margin.
    """
    count = clamp_count(particle_count)
    wobble = config.ambient.max_displacement

    globe_constraint = (config.globe.radius
                        + required_surface_distance(count, config)
                        + wobble)

    spacing_per_radius = (config.ambient.fibonacci_spacing_factor
                          * math.sqrt(4.0 * math.pi / count))
    spacing_constraint = (required_min_distance(count, config) + 2.0 * wobble) / spacing_per_radius

    return max(config.min_orbit_radius, globe_constraint, spacing_constraint)


def expected_orbit_radius(breath_phase: float, config: SwarmConfig = DEFAULT_CONFIG) -> float:
    """Design-target orbit radius, without the dynamic floor"""
    phase = clamp_unit(breath_phase)
    max_radius = config.max_orbit_radius
    min_radius = config.min_orbit_radius
    return max_radius - phase * (max_radius - min_radius)


def expected_surface_distance(breath_phase: float, config: SwarmConfig = DEFAULT_CONFIG) -> float:
    """Design-target distance from the globe surface"""
    return expected_orbit_radius(breath_phase, config) - config.globe.radius


def orbit_radius(breath_phase: float,
                 particle_count: Optional[int] = None,
                 config: SwarmConfig = DEFAULT_CONFIG) -> float:
    """
    Orbit radius for a breath phase (0 = exhale -> MAX, 1 = inhale -> MIN).

    When ``particle_count`` is given the result never drops below the
    dynamic floor for that count.
    """
    radius = expected_orbit_radius(breath_phase, config)
    if particle_count is None or math.isnan(radius):
        return radius
    return max(radius, dynamic_min_orbit_radius(particle_count, config))

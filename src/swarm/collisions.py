"""
Collision Checks
================
Verification of the two spacing invariants for one swarm snapshot:

1. particle-particle: every pair at least 2 * shard_size + margin apart
2. particle-globe:    every centre at least shard_size + buffer above
                      the globe surface

A collision is a result, not an error: ``has_collision=True`` flags a
design-parameter regression for tests and monitoring. NaN coordinates
count as a collision.

Pairwise distances are O(N^2). This is verification tooling, not part
of the render path.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import DEFAULT_CONFIG, SwarmConfig
from .positions import DEFAULT_PARTICLE_COUNT, calculate_all_particle_positions
from .sizing import clamp_count, required_min_distance, required_surface_distance


@dataclass(frozen=True)
class CollisionResult:
    """Particle-particle spacing for one snapshot"""
    has_collision: bool
    min_distance: float                  # closest pair, centre to centre
    min_distance_pair: Tuple[int, int]
    required_min_distance: float         # 2 * shard_size + margin
    overlap_amount: float                # negative when clear


@dataclass(frozen=True)
class GlobeCollisionResult:
    """Particle-globe clearance for one snapshot"""
    has_collision: bool
    min_surface_distance: float          # closest centre to the globe surface
    closest_particle_index: int
    required_min_distance: float         # shard_size + globe buffer
    overlap_amount: float                # negative when clear


def find_min_particle_distance(positions: np.ndarray) -> Tuple[float, Tuple[int, int]]:
    """
    Closest pair of points.

    Returns (inf, (0, 0)) when there are fewer than two points.
    """
    count = len(positions)
    if count < 2:
        return float('inf'), (0, 0)

    diff = positions[:, None, :] - positions[None, :, :]
    dist_sq = np.einsum('ijk,ijk->ij', diff, diff)
    np.fill_diagonal(dist_sq, np.inf)

    flat = int(np.argmin(dist_sq))
    i, j = divmod(flat, count)
    if i > j:
        i, j = j, i
    return float(np.sqrt(dist_sq[i, j])), (i, j)


def particle_collision_result(positions: np.ndarray,
                              config: SwarmConfig = DEFAULT_CONFIG) -> CollisionResult:
    """Particle-particle check of an already computed snapshot"""
    required = required_min_distance(len(positions), config)
    min_distance, pair = find_min_particle_distance(positions)

    return CollisionResult(
        has_collision=not min_distance >= required,
        min_distance=min_distance,
        min_distance_pair=pair,
        required_min_distance=required,
        overlap_amount=required - min_distance,
    )


def globe_collision_result(positions: np.ndarray,
                           config: SwarmConfig = DEFAULT_CONFIG) -> GlobeCollisionResult:
    """Particle-globe check of an already computed snapshot"""
    required = required_surface_distance(len(positions), config)

    center_distances = np.sqrt(np.einsum('ij,ij->i', positions, positions))
    closest = int(np.argmin(center_distances))
    min_surface_distance = float(center_distances[closest]) - config.globe.radius

    return GlobeCollisionResult(
        has_collision=not min_surface_distance >= required,
        min_surface_distance=min_surface_distance,
        closest_particle_index=closest,
        required_min_distance=required,
        overlap_amount=required - min_surface_distance,
    )


def check_particle_collisions(breath_phase: float,
                              particle_count: int = DEFAULT_PARTICLE_COUNT,
                              time: float = 0.0,
                              config: SwarmConfig = DEFAULT_CONFIG) -> CollisionResult:
    """Two shards collide when their centres are closer than two radii plus the margin"""
    positions = calculate_all_particle_positions(
        breath_phase, clamp_count(particle_count), time, config
    )
    return particle_collision_result(positions, config)


def check_globe_collisions(breath_phase: float,
                           particle_count: int = DEFAULT_PARTICLE_COUNT,
                           time: float = 0.0,
                           config: SwarmConfig = DEFAULT_CONFIG) -> GlobeCollisionResult:
    """A shard collides with the globe when its centre sits within radius + buffer of the surface"""
    positions = calculate_all_particle_positions(
        breath_phase, clamp_count(particle_count), time, config
    )
    return globe_collision_result(positions, config)

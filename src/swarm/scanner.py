"""
Worst-Case Scanner
==================
Sweeps the collision checks over time and breath phase.

The wobble is periodic, but its worst alignment is not guaranteed to be
at t=0, so a single snapshot is not enough. The scanner samples:

- time:  one full wobble period at a fixed resolution
- phase: [0, 1] inclusive at a fixed resolution

and keeps the snapshot with the smallest clearance. All sweeps have
fixed iteration bounds; they are meant for tests and CI, not the frame
loop.

Also here:
- surface distance verification against the design targets
- nearest-neighbour distribution metrics of a snapshot
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from .collisions import (
    CollisionResult,
    GlobeCollisionResult,
    globe_collision_result,
    particle_collision_result,
)
from .config import DEFAULT_CONFIG, SwarmConfig
from .positions import DEFAULT_PARTICLE_COUNT, calculate_all_particle_positions, get_layout
from .sizing import clamp_count, clamp_unit, expected_surface_distance, orbit_radius

logger = logging.getLogger(__name__)

DEFAULT_TIME_POINTS = 20
DEFAULT_PHASE_COUNT = 10

# Breath phases that are always part of a sweep
KEY_PHASES = (0.0, 0.25, 0.5, 0.75, 1.0)


@dataclass(frozen=True)
class TimeScanResult:
    """Worst particle-particle snapshot over one wobble period"""
    worst: CollisionResult
    worst_time: float
    times: List[float]


@dataclass(frozen=True)
class ComprehensiveCollisionResult:
    """Worst snapshots over the whole breathing cycle"""
    particle: CollisionResult
    particle_phase: float
    particle_time: float
    globe: GlobeCollisionResult
    globe_phase: float
    globe_time: float
    phases: List[float]
    particle_count: int

    @property
    def has_collision(self) -> bool:
        return self.particle.has_collision or self.globe.has_collision


@dataclass(frozen=True)
class SurfaceDistanceResult:
    """Average shard height above the globe vs. what the design asks for"""
    avg_surface_distance: float
    expected_surface_distance: float   # including the dynamic floor
    design_surface_distance: float     # inhale/exhale ratio target only
    ratio: float                       # avg / expected
    within_tolerance: bool
    globe_radius: float
    floor_active: bool                 # dynamic floor raised the orbit


def wobble_sample_times(time_points: int, config: SwarmConfig = DEFAULT_CONFIG) -> List[float]:
    """``time_points`` evenly spaced times covering one wobble period"""
    points = max(1, int(time_points))
    period = config.ambient.wobble_period
    return [period * k / points for k in range(points)]


def sweep_phases(phase_count: int = DEFAULT_PHASE_COUNT) -> List[float]:
    """Evenly spaced phases over [0, 1] merged with the key phases"""
    steps = max(1, int(phase_count))
    dense = {k / steps for k in range(steps + 1)}
    return sorted(dense.union(KEY_PHASES))


def run_time_varying_collision_test(breath_phase: float,
                                    particle_count: int = DEFAULT_PARTICLE_COUNT,
                                    config: SwarmConfig = DEFAULT_CONFIG,
                                    time_points: int = DEFAULT_TIME_POINTS) -> TimeScanResult:
    """
    Particle-particle check at ``time_points`` samples of one wobble period.

    Returns the sample with the smallest pair distance and its time.
    """
    count = clamp_count(particle_count)
    layout = get_layout(count, config)
    buffer = layout.new_buffer()
    times = wobble_sample_times(time_points, config)

    worst = None
    worst_time = times[0]
    for time in times:
        layout.fill(breath_phase, time, buffer)
        result = particle_collision_result(buffer, config)
        if worst is None or result.min_distance < worst.min_distance:
            worst, worst_time = result, time

    logger.debug(
        "Time scan N=%d phase=%.3f: min distance %.4f at t=%.3f (required %.4f)",
        count, breath_phase, worst.min_distance, worst_time, worst.required_min_distance,
    )
    return TimeScanResult(worst=worst, worst_time=worst_time, times=times)


def run_comprehensive_collision_test(particle_count: int = DEFAULT_PARTICLE_COUNT,
                                     config: SwarmConfig = DEFAULT_CONFIG,
                                     phase_count: int = DEFAULT_PHASE_COUNT,
                                     time_points: int = DEFAULT_TIME_POINTS
                                     ) -> ComprehensiveCollisionResult:
    """
    Sweep the whole breathing cycle, each phase over one wobble period.

    Tracks the worst particle-particle and particle-globe snapshots
    separately, each annotated with the phase and time it occurred at.
    """
    count = clamp_count(particle_count)
    layout = get_layout(count, config)
    buffer = layout.new_buffer()
    phases = sweep_phases(phase_count)
    times = wobble_sample_times(time_points, config)

    worst_particle = worst_globe = None
    particle_at = globe_at = (phases[0], times[0])

    for phase in phases:
        for time in times:
            layout.fill(phase, time, buffer)

            particle = particle_collision_result(buffer, config)
            if worst_particle is None or particle.min_distance < worst_particle.min_distance:
                worst_particle, particle_at = particle, (phase, time)

            globe = globe_collision_result(buffer, config)
            if worst_globe is None or globe.min_surface_distance < worst_globe.min_surface_distance:
                worst_globe, globe_at = globe, (phase, time)

    result = ComprehensiveCollisionResult(
        particle=worst_particle,
        particle_phase=particle_at[0],
        particle_time=particle_at[1],
        globe=worst_globe,
        globe_phase=globe_at[0],
        globe_time=globe_at[1],
        phases=phases,
        particle_count=count,
    )

    if result.has_collision:
        logger.warning(
            "Collision in swarm of %d: particle overlap %.4f at phase %.2f, "
            "globe overlap %.4f at phase %.2f",
            count, worst_particle.overlap_amount, particle_at[0],
            worst_globe.overlap_amount, globe_at[0],
        )
    else:
        logger.debug(
            "Swarm of %d clear over %d phases x %d times",
            count, len(phases), len(times),
        )
    return result


def verify_surface_distance(breath_phase: float,
                            particle_count: int = DEFAULT_PARTICLE_COUNT,
                            config: SwarmConfig = DEFAULT_CONFIG,
                            tolerance: float = 0.2,
                            time: float = 0.0) -> SurfaceDistanceResult:
    """
    Compare the average shard height above the globe with the target.

    The design target is half a globe radius above the surface at full
    inhale and three globe radii at full exhale. Large swarms are pushed
    out by the dynamic floor, so the comparison uses the floored radius
    and reports the pure design target alongside it.
    """
    count = clamp_count(particle_count)
    positions = calculate_all_particle_positions(breath_phase, count, time, config)
    globe_radius = config.globe.radius

    avg_center_distance = float(np.mean(np.sqrt(np.einsum('ij,ij->i', positions, positions))))
    avg_surface_distance = avg_center_distance - globe_radius

    design = expected_surface_distance(breath_phase, config)
    expected = orbit_radius(breath_phase, count, config) - globe_radius
    ratio = avg_surface_distance / expected

    return SurfaceDistanceResult(
        avg_surface_distance=avg_surface_distance,
        expected_surface_distance=expected,
        design_surface_distance=design,
        ratio=ratio,
        within_tolerance=bool(abs(ratio - 1.0) <= tolerance),
        globe_radius=globe_radius,
        floor_active=expected > design,
    )


def nearest_neighbor_distances(positions: np.ndarray) -> np.ndarray:
    """Angular distance (radians) from each point to its nearest neighbour"""
    norms = np.linalg.norm(positions, axis=1)
    units = positions / norms[:, None]
    cosines = np.clip(units @ units.T, -1.0, 1.0)
    np.fill_diagonal(cosines, -1.0)
    return np.arccos(cosines.max(axis=1))


def distribution_metrics(positions: np.ndarray) -> Dict[str, float]:
    """
    Evenness of a snapshot as seen from the globe centre.

    cv: coefficient of variation of nearest-neighbour angles (0 = perfect)
    min_max_ratio: smallest / largest nearest-neighbour angle (1 = perfect)
    theoretical_optimal: sqrt(4*pi/N), the angle of an ideal even spread
    """
    distances = nearest_neighbor_distances(positions)
    mean = float(np.mean(distances))
    return {
        'cv': float(np.std(distances) / mean),
        'mean_distance': mean,
        'min_distance': float(np.min(distances)),
        'max_distance': float(np.max(distances)),
        'min_max_ratio': float(np.min(distances) / np.max(distances)),
        'theoretical_optimal': float(np.sqrt(4.0 * np.pi / len(positions))),
    }


def surface_distance_profile(particle_count: int = DEFAULT_PARTICLE_COUNT,
                             phases: Sequence[float] = KEY_PHASES,
                             config: SwarmConfig = DEFAULT_CONFIG) -> List[SurfaceDistanceResult]:
    """``verify_surface_distance`` for each phase, in the order given"""
    return [verify_surface_distance(clamp_unit(p), particle_count, config) for p in phases]

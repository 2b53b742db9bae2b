"""
Breathing Swarm
===============
Collision-free orbital placement and velocity engine for a swarm of
shards orbiting a breathing globe.

Submodules:
- config:     immutable constants and the YAML loader
- fibonacci:  golden-angle sphere directions
- sizing:     shard size, orbit radius and the dynamic floor
- positions:  per-frame particle placement
- kepler:     breath-modulated orbital speed
- collisions: spacing checks for one snapshot
- scanner:    worst-case sweeps over time and breath phase
- engine:     per-frame driver with reusable buffers
"""

__version__ = "0.1.0"

from .config import (
    GlobeConfig,
    ParticleOrbitConfig,
    ShardSizeConfig,
    AmbientMotionConfig,
    KeplerianConfig,
    SwarmConfig,
    DEFAULT_CONFIG,
    config_from_dict,
    load_config,
)

from .fibonacci import (
    GOLDEN_ANGLE,
    fibonacci_direction,
    fibonacci_directions,
)

from .sizing import (
    clamp_unit,
    clamp_count,
    shard_size,
    swarm_shard_size,
    required_min_distance,
    required_surface_distance,
    dynamic_min_orbit_radius,
    expected_orbit_radius,
    expected_surface_distance,
    orbit_radius,
)

from .positions import (
    DEFAULT_PARTICLE_COUNT,
    SwarmLayout,
    calculate_all_particle_positions,
    particle_position,
    wobble_offset,
)

from .kepler import (
    VelocityResult,
    calculate_keplerian_velocity,
    keplerian_speeds,
    orbit_base_speeds,
    mass_modulation,
)

from .collisions import (
    CollisionResult,
    GlobeCollisionResult,
    check_globe_collisions,
    check_particle_collisions,
    find_min_particle_distance,
)

from .scanner import (
    ComprehensiveCollisionResult,
    SurfaceDistanceResult,
    TimeScanResult,
    distribution_metrics,
    nearest_neighbor_distances,
    run_comprehensive_collision_test,
    run_time_varying_collision_test,
    surface_distance_profile,
    verify_surface_distance,
)

from .engine import OrbitalSwarm
from .logging_config import setup_logging

__all__ = [
    # Config
    'GlobeConfig',
    'ParticleOrbitConfig',
    'ShardSizeConfig',
    'AmbientMotionConfig',
    'KeplerianConfig',
    'SwarmConfig',
    'DEFAULT_CONFIG',
    'config_from_dict',
    'load_config',
    # Geometry
    'GOLDEN_ANGLE',
    'fibonacci_direction',
    'fibonacci_directions',
    'clamp_unit',
    'clamp_count',
    'shard_size',
    'swarm_shard_size',
    'required_min_distance',
    'required_surface_distance',
    'dynamic_min_orbit_radius',
    'expected_orbit_radius',
    'expected_surface_distance',
    'orbit_radius',
    # Positions
    'DEFAULT_PARTICLE_COUNT',
    'SwarmLayout',
    'calculate_all_particle_positions',
    'particle_position',
    'wobble_offset',
    # Velocity
    'VelocityResult',
    'calculate_keplerian_velocity',
    'keplerian_speeds',
    'orbit_base_speeds',
    'mass_modulation',
    # Diagnostics
    'CollisionResult',
    'GlobeCollisionResult',
    'check_globe_collisions',
    'check_particle_collisions',
    'find_min_particle_distance',
    'ComprehensiveCollisionResult',
    'SurfaceDistanceResult',
    'TimeScanResult',
    'distribution_metrics',
    'nearest_neighbor_distances',
    'run_comprehensive_collision_test',
    'run_time_varying_collision_test',
    'surface_distance_profile',
    'verify_surface_distance',
    # Engine
    'OrbitalSwarm',
    'setup_logging',
]

"""
Breathing Swarm - Diagnostic Report
===================================
Entry point for checking a swarm configuration offline.

For each particle count this reports:
1. Worst particle-particle spacing over the breathing cycle
2. Worst particle-globe clearance over the breathing cycle
3. Average surface distance at the key breath phases
4. Keplerian speed at the inhale/exhale orbit radii

Exit status is 1 when any collision is found.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from swarm import (
    DEFAULT_CONFIG,
    SwarmConfig,
    calculate_keplerian_velocity,
    dynamic_min_orbit_radius,
    load_config,
    orbit_radius,
    run_comprehensive_collision_test,
    setup_logging,
    surface_distance_profile,
    swarm_shard_size,
)
from swarm.scanner import DEFAULT_PHASE_COUNT, DEFAULT_TIME_POINTS, KEY_PHASES

logger = logging.getLogger("swarm.main")

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "swarm_params.yaml"
DEFAULT_COUNTS = [50, 100, 200, 300, 500]


def report_swarm(particle_count: int,
                 config: SwarmConfig = DEFAULT_CONFIG,
                 phase_count: int = DEFAULT_PHASE_COUNT,
                 time_points: int = DEFAULT_TIME_POINTS) -> bool:
    """Print the report for one particle count. Returns True when clear."""
    print("\n" + "=" * 60)
    print(f"SWARM OF {particle_count} SHARDS")
    print("=" * 60)

    print(f"Shard size:        {swarm_shard_size(particle_count, config):.4f}")
    print(f"Dynamic floor:     {dynamic_min_orbit_radius(particle_count, config):.4f}")
    print(f"Inhale radius:     {orbit_radius(1.0, particle_count, config):.4f}")
    print(f"Exhale radius:     {orbit_radius(0.0, particle_count, config):.4f}")

    result = run_comprehensive_collision_test(particle_count, config, phase_count, time_points)
    particle, globe = result.particle, result.globe

    status = "COLLISION" if particle.has_collision else "clear"
    print(f"\nParticle spacing:  {status}")
    print(f"  min distance {particle.min_distance:.4f} "
          f"(required {particle.required_min_distance:.4f}) "
          f"pair {particle.min_distance_pair} "
          f"at phase {result.particle_phase:.2f}, t={result.particle_time:.2f}s")

    status = "COLLISION" if globe.has_collision else "clear"
    print(f"Globe clearance:   {status}")
    print(f"  min surface distance {globe.min_surface_distance:.4f} "
          f"(required {globe.required_min_distance:.4f}) "
          f"particle {globe.closest_particle_index} "
          f"at phase {result.globe_phase:.2f}, t={result.globe_time:.2f}s")

    print("\nSurface distance by breath phase:")
    for phase, surface in zip(KEY_PHASES, surface_distance_profile(particle_count, KEY_PHASES, config)):
        floor = " (floor)" if surface.floor_active else ""
        print(f"  phase {phase:.2f}: avg {surface.avg_surface_distance:.3f} "
              f"expected {surface.expected_surface_distance:.3f}{floor} "
              f"ratio {surface.ratio:.3f}")

    print("\nKeplerian speed:")
    for phase in (0.0, 0.5, 1.0):
        radius = orbit_radius(phase, particle_count, config)
        velocity = calculate_keplerian_velocity(radius, phase, config=config)
        clamped = " (clamped)" if velocity.was_clamped else ""
        print(f"  phase {phase:.2f} r={radius:.3f}: {velocity.velocity:.4f} rad/s "
              f"x{velocity.velocity_ratio:.3f}{clamped}")

    return not result.has_collision


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Breathing swarm collision report")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML configuration file (defaults to config/swarm_params.yaml if present)")
    parser.add_argument("--particles", type=int, nargs="+", default=DEFAULT_COUNTS,
                        help="Particle counts to check")
    parser.add_argument("--phases", type=int, default=DEFAULT_PHASE_COUNT,
                        help="Breath phase steps over [0, 1]")
    parser.add_argument("--time-points", type=int, default=DEFAULT_TIME_POINTS,
                        help="Time samples per wobble period")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=str, default=None, help="Also log to this file")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    if args.config:
        config = load_config(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = DEFAULT_CONFIG
    logger.info("Globe radius %.2f, orbit %.2f..%.2f",
                config.globe.radius, config.min_orbit_radius, config.max_orbit_radius)

    clear = True
    for count in args.particles:
        clear = report_swarm(count, config, args.phases, args.time_points) and clear

    print("\n" + ("All swarms clear." if clear else "Collisions found."))
    return 0 if clear else 1


if __name__ == "__main__":
    sys.exit(main())

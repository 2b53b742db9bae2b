"""
Keplerian Velocity
==================
Apparent two-body orbital speed for the swarm.

    v = sqrt(GM / r)

normalised so the ratio is 1 at the reference radius with a neutral
breath. The "mass" of the globe breathes with the cycle:

    mass_modulation = 1 + c * (2 * breath_phase - 1)     # 0.4 .. 1.6 for c = 0.6

- Closer to the globe (smaller r) -> faster
- Inhale (breath_phase -> 1) -> heavier globe -> faster
- Ratio is clamped so particles neither stall far out nor run away close in

There is no particle-particle gravity.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .config import DEFAULT_CONFIG, SwarmConfig
from .sizing import clamp_count, clamp_unit


@dataclass(frozen=True)
class VelocityResult:
    """Outcome of one velocity query"""
    velocity: float              # base_speed * velocity_ratio
    velocity_ratio: float        # clamped to [min, max] velocity factor
    raw_velocity_ratio: float    # before clamping
    effective_gm: float          # breath-modulated GM
    was_clamped: bool


# Per-shard speed seed: frac(i * pi + ORBIT_SEED_OFFSET)
ORBIT_SEED_OFFSET = 0.1


def mass_modulation(breath_phase: float, config: SwarmConfig = DEFAULT_CONFIG) -> float:
    """Apparent globe mass multiplier, 1.0 at mid-breath"""
    phase = clamp_unit(breath_phase)
    return 1.0 + config.kepler.mass_modulation * (2.0 * phase - 1.0)


def orbit_base_speeds(particle_count: int,
                      base_speed: Optional[float] = None,
                      config: SwarmConfig = DEFAULT_CONFIG,
                      out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Reference-radius speed of every shard.

    Each shard drifts at ``base_speed`` shifted by up to
    +/- ``orbit_speed_variation``, with the shift fixed by its index.
    Only speeds vary; positions never depend on them.
    """
    kepler = config.kepler
    if base_speed is None:
        base_speed = kepler.base_orbit_speed
    count = clamp_count(particle_count)
    if out is None:
        out = np.empty(count, dtype=np.float64)
    elif out.shape != (count,):
        raise ValueError(f"output buffer must have shape ({count},), got {out.shape}")

    out[:] = np.arange(count)
    out *= np.pi
    out += ORBIT_SEED_OFFSET
    np.mod(out, 1.0, out=out)
    out -= 0.5
    out *= 2.0 * kepler.orbit_speed_variation
    out += base_speed
    return out


def calculate_keplerian_velocity(radius: float,
                                 breath_phase: float,
                                 base_speed: Optional[float] = None,
                                 config: SwarmConfig = DEFAULT_CONFIG) -> VelocityResult:
    """
    Orbital speed of a particle at ``radius`` from the globe centre.

    Args:
        radius: Distance from the globe centre
        breath_phase: 0 = exhaled, 1 = inhaled (clamped)
        base_speed: Speed at the reference radius, defaults to the
            configured base orbit speed

    A NaN radius or phase gives a NaN velocity. A radius of zero or
    below is treated as infinitely close and clamps to the max factor.
    """
    kepler = config.kepler
    if base_speed is None:
        base_speed = kepler.base_orbit_speed

    effective_gm = kepler.base_gm * mass_modulation(breath_phase, config)
    reference_factor = math.sqrt(kepler.base_gm / kepler.reference_radius)

    if math.isnan(radius) or math.isnan(effective_gm):
        nan = float('nan')
        return VelocityResult(nan, nan, nan, effective_gm, False)

    if radius <= 0:
        raw_ratio = math.inf
    else:
        raw_ratio = math.sqrt(effective_gm / radius) / reference_factor

    ratio = min(max(raw_ratio, kepler.min_velocity_factor), kepler.max_velocity_factor)

    return VelocityResult(
        velocity=base_speed * ratio,
        velocity_ratio=ratio,
        raw_velocity_ratio=raw_ratio,
        effective_gm=effective_gm,
        was_clamped=ratio != raw_ratio,
    )


def keplerian_speeds(radii: np.ndarray,
                     breath_phase: float,
                     base_speed: Optional[Union[float, np.ndarray]] = None,
                     config: SwarmConfig = DEFAULT_CONFIG,
                     out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Vectorised ``calculate_keplerian_velocity(...).velocity`` for a frame.

    ``base_speed`` may be one speed for the whole swarm or a per-shard
    array such as ``orbit_base_speeds``. Writes into ``out`` when
    supplied; ``out`` may be ``radii`` itself.
    """
    kepler = config.kepler
    if base_speed is None:
        base_speed = kepler.base_orbit_speed
    if out is None:
        out = np.empty_like(radii, dtype=np.float64)

    effective_gm = kepler.base_gm * mass_modulation(breath_phase, config)
    reference_factor = math.sqrt(kepler.base_gm / kepler.reference_radius)

    np.maximum(radii, 0.0, out=out)
    with np.errstate(divide='ignore'):
        np.divide(effective_gm, out, out=out)
    np.sqrt(out, out=out)
    out /= reference_factor
    np.clip(out, kepler.min_velocity_factor, kepler.max_velocity_factor, out=out)
    out *= base_speed
    return out

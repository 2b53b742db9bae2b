"""
Swarm Configuration
===================
Immutable physical constants for the breathing swarm.

All distances are world units and, where it makes sense, expressed
relative to the globe radius so the swarm keeps its proportions when the
globe is resized.

Sections:
- globe:   the central sphere (centred at the origin)
- orbit:   inhale/exhale distance from the globe surface
- shard:   particle size law and the spacing margins it must respect
- ambient: the wobble/float perturbation layered on top of the orbit
- kepler:  apparent two-body velocity law

Configuration is loaded once at process start (``load_config``) and never
mutated afterwards.
"""

import math
from dataclasses import dataclass, asdict, field, fields, replace
from pathlib import Path
from typing import Dict, Optional, Union

import yaml


@dataclass(frozen=True)
class GlobeConfig:
    """The central sphere"""
    radius: float = 1.5          # world units

    def __post_init__(self):
        if not self.radius > 0:
            raise ValueError(f"globe radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class ParticleOrbitConfig:
    """
    Orbit distances measured from the globe SURFACE, in globe radii.

    0.5 on inhale = half a globe radius above the surface,
    3.0 on exhale = three globe radii above the surface.
    """
    inhale_surface_ratio: float = 0.5
    exhale_surface_ratio: float = 3.0

    def __post_init__(self):
        if self.inhale_surface_ratio < 0:
            raise ValueError("inhale_surface_ratio must be non-negative")
        if self.exhale_surface_ratio < self.inhale_surface_ratio:
            raise ValueError("exhale_surface_ratio must not be below inhale_surface_ratio")

    def min_orbit_radius(self, globe: GlobeConfig) -> float:
        """Orbit radius (from the globe centre) at full inhale"""
        return globe.radius * (1 + self.inhale_surface_ratio)

    def max_orbit_radius(self, globe: GlobeConfig) -> float:
        """Orbit radius (from the globe centre) at full exhale"""
        return globe.radius * (1 + self.exhale_surface_ratio)


@dataclass(frozen=True)
class ShardSizeConfig:
    """Shard size law: size = base_size / sqrt(count), clamped"""
    base_size: float = 2.0
    min_size: float = 0.05
    max_size: float = 0.3
    particle_margin: float = 0.05    # gap between two shard surfaces
    globe_buffer: float = 0.03       # gap between a shard surface and the globe

    def __post_init__(self):
        if not 0 < self.min_size <= self.max_size:
            raise ValueError(
                f"shard size bounds must satisfy 0 < min <= max, "
                f"got [{self.min_size}, {self.max_size}]"
            )
        if self.base_size <= 0:
            raise ValueError("shard base_size must be positive")
        if self.particle_margin < 0 or self.globe_buffer < 0:
            raise ValueError("shard margins must be non-negative")


@dataclass(frozen=True)
class AmbientMotionConfig:
    """
    Subtle periodic motion layered on top of the base orbit.

    The wobble lives in the tangent plane of each particle; the ambient
    float is applied in world axes. Both are bounded, so
    ``max_displacement`` is a hard bound on how far any particle can be
    pushed away from its nominal orbit point.
    """
    scale: float = 0.04              # horizontal float amplitude
    y_scale: float = 0.02            # vertical float amplitude
    wobble_amplitude: float = 0.015  # tangent-plane wobble amplitude
    wobble_frequency: float = 0.35   # Hz
    # Lower bound of the Fibonacci nearest-neighbour chord relative to
    # sqrt(4*pi/N) on a unit sphere. Holds from N = 3 (the lattice sits
    # near 0.87 for N >= 6); N = 2 is tighter and relies on the inhale radius.
    fibonacci_spacing_factor: float = 0.8

    def __post_init__(self):
        if self.wobble_frequency <= 0:
            raise ValueError("wobble_frequency must be positive")
        if not 0 < self.fibonacci_spacing_factor <= 1:
            raise ValueError("fibonacci_spacing_factor must be in (0, 1]")

    @property
    def wobble_period(self) -> float:
        """Seconds per full wobble cycle"""
        return 1.0 / self.wobble_frequency

    @property
    def max_displacement(self) -> float:
        """Upper bound of |wobble offset| for any particle at any time"""
        tangential = abs(self.wobble_amplitude) * math.sqrt(1.0 + 0.6 ** 2)
        ambient = math.sqrt(2 * self.scale ** 2 + self.y_scale ** 2)
        return tangential + ambient


@dataclass(frozen=True)
class KeplerianConfig:
    """Apparent two-body velocity law: v = sqrt(GM / r)"""
    base_orbit_speed: float = 0.04     # rad/s drift at the reference radius
    base_gm: float = 1.2               # combined gravitational parameter
    reference_radius: float = 4.5      # radius where velocity ratio == 1
    min_velocity_factor: float = 0.3   # prevents stalling far out
    max_velocity_factor: float = 4.0   # prevents runaway speed close in
    mass_modulation: float = 0.6       # breath influence on apparent mass
    orbit_speed_variation: float = 0.02  # per-shard base speed spread (+/-)

    def __post_init__(self):
        if self.base_gm <= 0 or self.reference_radius <= 0:
            raise ValueError("base_gm and reference_radius must be positive")
        if not 0 < self.min_velocity_factor <= self.max_velocity_factor:
            raise ValueError("velocity factors must satisfy 0 < min <= max")
        if not 0 <= self.mass_modulation < 1:
            raise ValueError("mass_modulation must be in [0, 1)")
        if self.orbit_speed_variation < 0:
            raise ValueError("orbit_speed_variation must be non-negative")


@dataclass(frozen=True)
class SwarmConfig:
    """Complete, immutable configuration for the orbital engine"""
    globe: GlobeConfig = field(default_factory=GlobeConfig)
    orbit: ParticleOrbitConfig = field(default_factory=ParticleOrbitConfig)
    shard: ShardSizeConfig = field(default_factory=ShardSizeConfig)
    ambient: AmbientMotionConfig = field(default_factory=AmbientMotionConfig)
    kepler: KeplerianConfig = field(default_factory=KeplerianConfig)

    @property
    def min_orbit_radius(self) -> float:
        return self.orbit.min_orbit_radius(self.globe)

    @property
    def max_orbit_radius(self) -> float:
        return self.orbit.max_orbit_radius(self.globe)

    def to_dict(self) -> Dict:
        """Plain nested dict, the same layout ``load_config`` reads"""
        return asdict(self)


DEFAULT_CONFIG = SwarmConfig()

_SECTIONS = {
    'globe': GlobeConfig,
    'orbit': ParticleOrbitConfig,
    'shard': ShardSizeConfig,
    'ambient': AmbientMotionConfig,
    'kepler': KeplerianConfig,
}


def config_from_dict(data: Optional[Dict], base: SwarmConfig = DEFAULT_CONFIG) -> SwarmConfig:
    """
    Build a SwarmConfig from a nested dict, overriding ``base``.

    Missing sections or keys keep the base values. Unknown sections or
    keys raise ValueError so typos in a config file are not silently
    ignored.
    """
    if not data:
        return base
    if not isinstance(data, dict):
        raise ValueError(f"configuration must be a mapping, got {type(data).__name__}")

    overrides = {}
    for section, values in data.items():
        if section not in _SECTIONS:
            raise ValueError(f"unknown configuration section '{section}'")
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValueError(f"section '{section}' must be a mapping")

        known = {f.name for f in fields(_SECTIONS[section])}
        unknown = set(values) - known
        if unknown:
            raise ValueError(
                f"unknown keys in section '{section}': {', '.join(sorted(unknown))}"
            )

        current = getattr(base, section)
        overrides[section] = replace(current, **{k: float(v) for k, v in values.items()})

    return replace(base, **overrides)


def load_config(config_path: Optional[Union[str, Path]] = None) -> SwarmConfig:
    """Load configuration from a YAML file, or the defaults if no path is given"""
    if config_path is None:
        return DEFAULT_CONFIG

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return config_from_dict(data)

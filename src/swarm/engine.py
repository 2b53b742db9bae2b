"""
Orbital Swarm Engine
====================
Per-frame driver for the breathing swarm.

Each frame the caller supplies the current breath phase (from whatever
clock it runs) and the elapsed time; the engine writes positions and
orbital speeds into buffers it allocated once:

    swarm = OrbitalSwarm(particle_count=300)
    positions = swarm.update(breath_phase, time)   # same array every frame
    speeds = swarm.speeds

The renderer reads the buffers; the engine never renders and never
owns the clock.
"""

import logging
from typing import Dict, Optional

import numpy as np

from .config import DEFAULT_CONFIG, SwarmConfig
from .kepler import keplerian_speeds, orbit_base_speeds
from .positions import DEFAULT_PARTICLE_COUNT, SwarmLayout
from .sizing import clamp_count, swarm_shard_size

logger = logging.getLogger(__name__)


class OrbitalSwarm:
    """
    Owns the layout and output buffers for one swarm.

    Buffers are reused across frames; only ``resize`` allocates.
    """

    def __init__(self,
                 particle_count: int = DEFAULT_PARTICLE_COUNT,
                 config: SwarmConfig = DEFAULT_CONFIG,
                 base_speed: Optional[float] = None):
        self.config = config
        self.base_speed = (base_speed if base_speed is not None
                           else config.kepler.base_orbit_speed)
        self.breath_phase = 0.0
        self.time = 0.0
        self._allocate(particle_count)
        self.update(self.breath_phase, self.time)

    def _allocate(self, particle_count: int):
        self.layout = SwarmLayout(clamp_count(particle_count), self.config)
        self.positions = self.layout.new_buffer()
        self.radii = np.empty(self.layout.particle_count)
        self.speeds = np.empty(self.layout.particle_count)
        self.base_speeds = orbit_base_speeds(self.layout.particle_count, self.base_speed, self.config)
        self.shard_size = swarm_shard_size(self.layout.particle_count, self.config)

    @property
    def particle_count(self) -> int:
        return self.layout.particle_count

    def resize(self, particle_count: int) -> bool:
        """
        Change the particle count. Returns True if buffers were rebuilt.

        The previous buffers are dropped; callers holding them must
        re-read ``positions`` and ``speeds``.
        """
        count = clamp_count(particle_count)
        if count == self.particle_count:
            return False
        logger.info("Resizing swarm from %d to %d particles", self.particle_count, count)
        self._allocate(count)
        self.update(self.breath_phase, self.time)
        return True

    def update(self, breath_phase: float, time: float) -> np.ndarray:
        """
        Recompute the frame.

        Positions go to ``self.positions``, the distance of each particle
        from the globe centre to ``self.radii`` and its Keplerian speed,
        scaled from its own ``self.base_speeds`` entry, to
        ``self.speeds``. Returns ``self.positions``.
        """
        self.breath_phase = breath_phase
        self.time = time

        self.layout.fill(breath_phase, time, self.positions)

        np.einsum('ij,ij->i', self.positions, self.positions, out=self.radii)
        np.sqrt(self.radii, out=self.radii)

        keplerian_speeds(self.radii, breath_phase, self.base_speeds, self.config, out=self.speeds)
        return self.positions

    def get_status_report(self) -> Dict:
        """Summary of the current frame"""
        return {
            'particle_count': self.particle_count,
            'breath_phase': self.breath_phase,
            'time': self.time,
            'orbit_radius': self.layout.radius(self.breath_phase),
            'shard_size': self.shard_size,
            'min_radius': float(np.min(self.radii)),
            'max_radius': float(np.max(self.radii)),
            'mean_speed': float(np.mean(self.speeds)),
        }

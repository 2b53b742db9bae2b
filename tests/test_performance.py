"""
Test Suite: Frame Budget
========================
Timing and allocation guards for the per-frame path.

Tests:
- Fibonacci direction is O(1) in the particle count
- Position fill scales linearly and stays sub-microsecond per particle
- Position fill allocates no new arrays
- Scalar laws average under 10 microseconds per call
- A 1000-particle frame completes in under 5 ms
"""

import time
import tracemalloc

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from swarm import (
    OrbitalSwarm,
    SwarmLayout,
    calculate_keplerian_velocity,
    fibonacci_direction,
    orbit_radius,
)

# Best-of-N timing damps scheduler noise
REPEATS = 7


def best_time(func, calls: int) -> float:
    """Fastest wall time, in seconds, of ``calls`` back-to-back calls"""
    func()
    best = float('inf')
    for _ in range(REPEATS):
        start = time.perf_counter()
        for _ in range(calls):
            func()
        best = min(best, time.perf_counter() - start)
    return best


def time_fill(particle_count: int, calls: int = 50) -> float:
    layout = SwarmLayout(particle_count)
    out = layout.new_buffer()
    state = {'frame': 0}

    def frame():
        state['frame'] += 1
        layout.fill(0.5, state['frame'] / 60.0, out)

    return best_time(frame, calls) / calls


class TestFibonacciCost:

    def test_cost_independent_of_total(self):
        """Points 0..99 cost the same in a 100-point and a million-point lattice"""
        def small():
            for i in range(100):
                fibonacci_direction(i, 100)

        def large():
            for i in range(100):
                fibonacci_direction(i, 1_000_000)

        small_time = best_time(small, 10)
        large_time = best_time(large, 10)

        assert large_time < small_time * 2

    def test_sub_ten_microseconds(self):
        """Single direction query stays inside the per-call budget"""
        calls = 2000
        per_call = best_time(lambda: fibonacci_direction(17, 500), calls) / calls
        assert per_call < 10e-6


class TestPositionFill:

    def test_linear_scaling(self):
        """5x the particles costs well under 25x the time (quadratic)"""
        ratio = time_fill(1000) / time_fill(200)
        assert ratio < 10

    def test_sub_microsecond_per_particle(self):
        """Full fill of 1000 particles under 1 microsecond each"""
        assert time_fill(1000) / 1000 < 1e-6

    def test_no_array_allocation(self):
        """Fill writes into existing buffers without allocating N-sized arrays"""
        count = 4000
        layout = SwarmLayout(count)
        out = layout.new_buffer()
        layout.fill(0.3, 1.0, out)

        tracemalloc.start()
        try:
            before, _ = tracemalloc.get_traced_memory()
            layout.fill(0.7, 2.5, out)
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        # One temporary float array of length N would be 8 * N bytes
        assert peak - before < 8 * count


class TestScalarLaws:

    @pytest.mark.parametrize("query", [
        lambda: orbit_radius(0.4),
        lambda: orbit_radius(0.4, 300),
        lambda: calculate_keplerian_velocity(3.2, 0.6),
    ], ids=["orbit_radius", "orbit_radius_floored", "keplerian_velocity"])
    def test_sub_ten_microseconds(self, query):
        """Average call under 10 microseconds"""
        calls = 2000
        assert best_time(query, calls) / calls < 10e-6


class TestFrameBudget:

    def test_thousand_particle_frame(self):
        """OrbitalSwarm(1000).update averages under 5 ms per frame"""
        swarm = OrbitalSwarm(particle_count=1000)
        state = {'frame': 0}

        def frame():
            state['frame'] += 1
            t = state['frame'] / 60.0
            swarm.update(0.5 + 0.5 * np.sin(t), t)

        frames = 60
        assert best_time(frame, frames) / frames < 5e-3

    def test_frame_reuses_buffers(self):
        """No frame replaces the output arrays"""
        swarm = OrbitalSwarm(particle_count=1000)
        buffers = (swarm.positions, swarm.radii, swarm.speeds, swarm.base_speeds)

        for frame in range(30):
            swarm.update(frame / 29, frame / 60)

        assert all(a is b for a, b in zip(
            buffers, (swarm.positions, swarm.radii, swarm.speeds, swarm.base_speeds)))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

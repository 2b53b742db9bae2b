"""
Test Suite: Fibonacci Distribution
==================================
Unit tests for the golden-angle sphere directions.

Tests:
- Unit length and degenerate counts
- Scalar and vectorised generators agree
- Nearest-neighbour spacing bound used by the dynamic orbit floor
- Evenness of the spread
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from swarm import (
    DEFAULT_CONFIG,
    GOLDEN_ANGLE,
    distribution_metrics,
    dynamic_min_orbit_radius,
    fibonacci_direction,
    fibonacci_directions,
    find_min_particle_distance,
    required_min_distance,
)


def spacing_ratio(total):
    """Nearest-neighbour chord relative to sqrt(4*pi/N)"""
    min_chord, _ = find_min_particle_distance(fibonacci_directions(total))
    return min_chord / np.sqrt(4 * np.pi / total)


class TestFibonacciDirection:
    """Tests for the O(1) single-point generator"""

    @pytest.mark.parametrize("total", [2, 7, 42, 100, 999])
    def test_points_are_unit_vectors(self, total):
        """Every point lies on the unit sphere"""
        for index in range(0, total, max(1, total // 13)):
            point = fibonacci_direction(index, total)
            assert np.linalg.norm(point) == pytest.approx(1.0, abs=1e-12)

    @pytest.mark.parametrize("total", [1, 0, -3])
    def test_degenerate_count_returns_pole(self, total):
        """N <= 1 gives the +Y pole"""
        np.testing.assert_array_equal(fibonacci_direction(0, total), [0.0, 1.0, 0.0])

    def test_first_point_formula(self):
        """i=0: y = 1 - 1/N, theta = 0 so z = 0"""
        point = fibonacci_direction(0, 10)
        assert point[1] == pytest.approx(0.9)
        assert point[0] == pytest.approx(np.sqrt(1 - 0.81))
        assert point[2] == pytest.approx(0.0)

    def test_golden_angle_value(self):
        """Golden angle is ~137.5 degrees"""
        assert np.degrees(GOLDEN_ANGLE) == pytest.approx(137.5078, abs=1e-3)

    def test_height_decreases_with_index(self):
        """Points walk from the north pole to the south pole"""
        heights = [fibonacci_direction(i, 50)[1] for i in range(50)]
        assert all(a > b for a, b in zip(heights, heights[1:]))

    def test_returns_new_array_each_call(self):
        """Fresh array per call, same values"""
        a = fibonacci_direction(3, 100)
        b = fibonacci_direction(3, 100)
        assert a is not b
        np.testing.assert_array_equal(a, b)


class TestFibonacciDirections:
    """Tests for the vectorised generator"""

    def test_matches_scalar_generator(self):
        """Vectorised rows equal the single-point generator"""
        total = 137
        directions = fibonacci_directions(total)
        for i in range(total):
            np.testing.assert_allclose(directions[i], fibonacci_direction(i, total), atol=1e-12)

    def test_writes_into_supplied_buffer(self):
        """Output lands in the caller's buffer"""
        out = np.zeros((64, 3))
        result = fibonacci_directions(64, out=out)
        assert result is out
        np.testing.assert_allclose(np.linalg.norm(out, axis=1), 1.0)

    def test_rejects_wrong_buffer_shape(self):
        """Mis-sized buffer is a programming error"""
        with pytest.raises(ValueError):
            fibonacci_directions(10, out=np.zeros((9, 3)))

    def test_single_point_is_pole(self):
        """One point sits at the +Y pole"""
        np.testing.assert_array_equal(fibonacci_directions(1), [[0.0, 1.0, 0.0]])

    def test_balanced_between_hemispheres(self):
        """Half-step offset splits points evenly about the equator"""
        directions = fibonacci_directions(300)
        assert np.mean(directions[:, 1]) == pytest.approx(0.0, abs=1e-12)
        assert np.sum(directions[:, 1] > 0) == 150


class TestSpacing:
    """The dynamic orbit floor relies on a lower bound of the lattice spacing"""

    @pytest.mark.parametrize("total", [3, 4, 5, 6, 7, 8, 10, 13, 20, 33, 50,
                                       100, 200, 300, 500, 1000, 2000])
    def test_min_chord_respects_spacing_factor(self, total):
        """Chord >= k * sqrt(4*pi/N) from three points up"""
        factor = DEFAULT_CONFIG.ambient.fibonacci_spacing_factor
        assert spacing_ratio(total) >= factor

    @pytest.mark.parametrize("total", [6, 10, 42, 100, 1000])
    def test_lattice_ratio_settles_near_087(self, total):
        """From six points up the lattice sits near 0.87 * sqrt(4*pi/N)"""
        assert spacing_ratio(total) >= 0.86

    def test_two_points_tighter_than_factor(self):
        """N=2 falls below k; the inhale radius carries the spacing there"""
        config = DEFAULT_CONFIG
        assert spacing_ratio(2) == pytest.approx(0.758, abs=0.005)
        assert spacing_ratio(2) < config.ambient.fibonacci_spacing_factor

        assert dynamic_min_orbit_radius(2, config) == config.min_orbit_radius

        min_chord, _ = find_min_particle_distance(fibonacci_directions(2))
        wobble = config.ambient.max_displacement
        assert (min_chord * config.min_orbit_radius
                >= required_min_distance(2, config) + 2 * wobble)

    def test_min_chord_scales_with_inverse_sqrt(self):
        """Known pole spacing of the offset lattice: ~3.09 / sqrt(N)"""
        directions = fibonacci_directions(400)
        min_chord, _ = find_min_particle_distance(directions)
        assert min_chord * np.sqrt(400) == pytest.approx(3.09, abs=0.1)

    @pytest.mark.parametrize("total", [42, 100, 200])
    def test_even_distribution(self, total):
        """Low nearest-neighbour variation, no clumping"""
        metrics = distribution_metrics(fibonacci_directions(total) * 5.0)

        assert metrics['cv'] < 0.25
        assert metrics['min_max_ratio'] > 0.5
        assert metrics['theoretical_optimal'] == pytest.approx(np.sqrt(4 * np.pi / total))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

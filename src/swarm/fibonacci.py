"""
Fibonacci Sphere Distribution
=============================
Deterministic, low-discrepancy placement of N directions on the unit sphere.

Points are laid out on a golden-angle spiral with equal-area latitude
bands:

    y_i     = 1 - (2i + 1) / N
    theta_i = i * pi * (3 - sqrt(5))

The half-step offset keeps every point off the poles, which is where the
lattice is tightest. The nearest-neighbour chord on the unit sphere is
about 3.09 / sqrt(N) at the poles and larger everywhere else, i.e. about
0.87 * sqrt(4*pi/N) from N = 6 up. Tiny lattices are tighter relative to
that scale: 0.76 at N = 2, 0.82 at N = 3, 0.85 at N = 4.
"""

import math

import numpy as np
from typing import Optional

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))

# Direction used when there is nothing to distribute
POLE = (0.0, 1.0, 0.0)


def fibonacci_direction(index: int, total: int) -> np.ndarray:
    """
    Unit direction of point ``index`` out of ``total``.

    O(1): the other points are never generated. ``total <= 1`` returns
    the +Y pole. A new array is returned on every call.
    """
    if total <= 1:
        return np.array(POLE)

    y = 1.0 - (2.0 * index + 1.0) / total
    radius_at_y = math.sqrt(max(0.0, 1.0 - y * y))
    theta = GOLDEN_ANGLE * index

    return np.array([math.cos(theta) * radius_at_y, y, math.sin(theta) * radius_at_y])


def fibonacci_directions(total: int, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    All ``total`` directions as an (N, 3) array.

    Writes into ``out`` when supplied (it must already be (N, 3) float64).
    """
    count = max(1, int(total))
    if out is None:
        out = np.empty((count, 3), dtype=np.float64)
    elif out.shape != (count, 3):
        raise ValueError(f"output buffer must have shape ({count}, 3), got {out.shape}")

    if count == 1:
        out[0] = POLE
        return out

    index = np.arange(count, dtype=np.float64)
    y = 1.0 - (2.0 * index + 1.0) / count
    radius_at_y = np.sqrt(np.maximum(0.0, 1.0 - y * y))
    theta = GOLDEN_ANGLE * index

    out[:, 0] = np.cos(theta) * radius_at_y
    out[:, 1] = y
    out[:, 2] = np.sin(theta) * radius_at_y
    return out

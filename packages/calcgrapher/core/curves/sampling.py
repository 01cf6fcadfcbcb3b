"""Curve sampling infrastructure.

This module builds the evenly spaced x-grid shared by every curve and
projects sparse or functional descriptions of y onto that grid.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

import numpy as np


def build_x_grid(x_min: float, x_max: float, number_of_points: int) -> np.ndarray:
    """Generate number_of_points evenly spaced samples spanning [x_min, x_max].

    Both endpoints are included.

    Args:
        x_min: Left edge of the domain.
        x_max: Right edge of the domain. Must be greater than x_min.
        number_of_points: Number of samples. Must be >= 2.

    Returns:
        1-D float array of sample positions.

    Raises:
        ValueError: If number_of_points < 2 or x_min >= x_max.

    Example:
        >>> build_x_grid(0.0, 1.0, 5).tolist()
        [0.0, 0.25, 0.5, 0.75, 1.0]
    """
    if number_of_points < 2:
        raise ValueError("number_of_points must be >= 2")
    if x_min >= x_max:
        raise ValueError(f"x_min must be < x_max, got [{x_min}, {x_max}]")
    return np.linspace(x_min, x_max, number_of_points)


def sample_function(function: Callable[[float], float], x_grid: Sequence[float]) -> np.ndarray:
    """Evaluate a scalar function at every grid position."""
    return np.array([float(function(float(x))) for x in x_grid], dtype=float)


def interpolate_onto_grid(
    points: Iterable[tuple[float, float]],
    x_grid: Sequence[float],
) -> np.ndarray:
    """Linearly interpolate sparse (x, y) points onto a grid.

    Points are sorted by x and de-duplicated (the last y given for an x
    wins). The domain ends are padded with y=0 when the points do not
    already reach them, so the result is defined across the whole grid.

    Args:
        points: Sparse (x, y) pairs.
        x_grid: Strictly increasing grid positions.

    Returns:
        1-D float array of y values, one per grid position.

    Raises:
        ValueError: If points is empty.

    Example:
        >>> interpolate_onto_grid([(1.0, 2.0)], [0.0, 1.0, 2.0]).tolist()
        [0.0, 2.0, 0.0]
    """
    by_x = {float(x): float(y) for x, y in points}
    if not by_x:
        raise ValueError("points cannot be empty")

    x_min = float(x_grid[0])
    x_max = float(x_grid[-1])
    if min(by_x) > x_min:
        by_x[x_min] = 0.0
    if max(by_x) < x_max:
        by_x[x_max] = 0.0

    xs = sorted(by_x)
    ys = [by_x[x] for x in xs]
    return np.interp(np.asarray(x_grid, dtype=float), xs, ys)

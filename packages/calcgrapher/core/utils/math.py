"""Scalar helpers shared by grid lookup and the manipulation modes."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to the closed range [min_val, max_val].

    Grid lookups clamp indices with integer bounds, so integer inputs keep
    their type.

    Raises:
        ValueError: If min_val > max_val.

    Example:
        >>> clamp(120, 0, 100)
        100
    """
    if min_val > max_val:
        raise ValueError(f"Empty range [{min_val}, {max_val}]")
    return max(min_val, min(max_val, value))


def lerp(a: Number, b: Number, t: float) -> float:
    """Value a fraction t of the way from a to b.

    t outside [0, 1] extrapolates along the same line.
    """
    return float(a) + (float(b) - float(a)) * t


def round_symmetric(value: float) -> int:
    """Round half away from zero.

    Python's round() uses banker's rounding, which makes index lookups on a
    sample grid flip between neighbours for exact half-steps.

    Example:
        >>> round_symmetric(2.5)
        3
        >>> round_symmetric(-2.5)
        -3
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))

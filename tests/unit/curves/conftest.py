"""Shared pytest fixtures for curve tests."""

from __future__ import annotations

import math

import pytest

from calcgrapher.core.config.models import CurveConfig
from calcgrapher.core.curves.curve import Curve
from calcgrapher.core.curves.derivative import DerivativeCurve
from calcgrapher.core.curves.integral import IntegralCurve
from calcgrapher.core.curves.second_derivative import SecondDerivativeCurve
from calcgrapher.core.curves.transformed import TransformedCurve


@pytest.fixture
def small_config() -> CurveConfig:
    """Grid of [0, 10] with 101 points (delta_x = 0.1).

    The cusp threshold is raised to 65 degrees so a width-2 Gaussian hill,
    whose peak bends by about 61 degrees on this coarse grid, classifies as
    smooth while the corners of a triangle (79 and 157 degrees) remain cusps.
    """
    return CurveConfig(
        x_min=0.0,
        x_max=10.0,
        number_of_points=101,
        cusp_angle_threshold=math.radians(65.0),
    )


@pytest.fixture
def curve(small_config: CurveConfig) -> TransformedCurve:
    """Flat editable curve on the small grid."""
    return TransformedCurve(small_config, name="test")


@pytest.fixture
def derivative(curve: TransformedCurve) -> DerivativeCurve:
    """Derivative following the editable curve."""
    return DerivativeCurve(curve)


@pytest.fixture
def integral(curve: TransformedCurve) -> IntegralCurve:
    """Integral following the editable curve."""
    return IntegralCurve(curve)


@pytest.fixture
def second_derivative(curve: TransformedCurve) -> SecondDerivativeCurve:
    """Second derivative following the editable curve."""
    return SecondDerivativeCurve(curve)


@pytest.fixture
def step_curve(small_config: CurveConfig) -> Curve:
    """0 below x=5, 3 from x=5 on: a jump between samples 49 and 50."""
    return Curve(small_config, math_function=lambda x: 0.0 if x < 5.0 - 1e-9 else 3.0)


@pytest.fixture
def v_curve(small_config: CurveConfig) -> Curve:
    """|x - 5|: a corner at sample 50."""
    return Curve(small_config, math_function=lambda x: abs(x - 5.0))


@pytest.fixture
def steep_config(small_config: CurveConfig) -> CurveConfig:
    """Small grid whose jump threshold is above any slope used in these tests."""
    return small_config.model_copy(update={"discontinuity_slope_threshold": 1000.0})


@pytest.fixture
def square_curve(steep_config: CurveConfig) -> Curve:
    """x squared, smooth everywhere (its slope reaches 20 at x=10)."""
    return Curve(steep_config, math_function=lambda x: x * x)


@pytest.fixture
def change_counter():
    """Callable that counts how many times it is invoked."""

    class Counter:
        def __init__(self) -> None:
            self.count = 0

        def __call__(self) -> None:
            self.count += 1

    return Counter()

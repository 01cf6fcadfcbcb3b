"""Tests for IntegralCurve."""

from __future__ import annotations

import math

import numpy as np
import pytest

from calcgrapher.core.config.models import CurveConfig
from calcgrapher.core.curves.curve import Curve
from calcgrapher.core.curves.integral import IntegralCurve
from calcgrapher.core.curves.modes import CurveManipulationMode
from calcgrapher.core.curves.transformed import TransformedCurve


class TestIntegralValues:
    """Tests for trapezoidal integration."""

    def test_constant_integrates_to_line(self, small_config: CurveConfig) -> None:
        """The integral of 2 from x_min is 2x."""
        integral = IntegralCurve(Curve(small_config, math_function=lambda x: 2.0))
        xs, ys = integral.to_arrays()
        assert np.allclose(ys, 2.0 * xs)

    def test_starts_at_baseline(self, small_config: CurveConfig) -> None:
        """The first sample equals the baseline."""
        integral = IntegralCurve(Curve(small_config, math_function=lambda x: 1.0), baseline=1.5)
        assert integral.points[0].y == 1.5
        assert integral.points[-1].y == pytest.approx(11.5)

    def test_linear_is_exact(self, small_config: CurveConfig) -> None:
        """The trapezoid rule is exact for linear functions."""
        integral = IntegralCurve(Curve(small_config, math_function=lambda x: x))
        assert integral.get_y_at(4.0) == pytest.approx(8.0)

    def test_flat_curve_integral_is_zero(self, integral: IntegralCurve) -> None:
        """The integral of the initial flat curve is zero."""
        assert np.all(integral.to_arrays()[1] == 0.0)

    def test_hole_contributes_nothing(self, small_config: CurveConfig) -> None:
        """Intervals touching a hole are skipped; the sum continues past it."""
        source = Curve(
            small_config, math_function=lambda x: math.nan if abs(x - 5.0) < 1e-9 else 1.0
        )
        integral = IntegralCurve(source)

        assert integral.get_y_at(4.9) == pytest.approx(4.9)
        assert integral.get_y_at(5.0) == pytest.approx(4.9)
        assert integral.get_y_at(5.1) == pytest.approx(4.9)
        assert integral.points[-1].y == pytest.approx(9.8)
        assert np.all(np.isfinite(integral.to_arrays()[1]))


class TestIntegralTypes:
    """Tests for point types of the integral."""

    def test_jump_becomes_cusp(self, step_curve: Curve) -> None:
        """Discontinuous source points are corners in the integral."""
        integral = IntegralCurve(step_curve)
        assert [point.x for point in integral.cusps] == pytest.approx([4.9, 5.0])
        assert integral.discontinuities == []

    def test_corner_stays_smooth(self, v_curve: Curve) -> None:
        """A corner in the source integrates to a smooth curve."""
        integral = IntegralCurve(v_curve)
        assert all(point.is_smooth for point in integral.points)


class TestIntegralFollowsSource:
    """Tests for automatic recomputation."""

    def test_updates_on_shift(self, curve: TransformedCurve, integral: IntegralCurve) -> None:
        """Shifting the source to 1 makes the integral equal to x."""
        curve.manipulate(CurveManipulationMode.SHIFT, 0.0, (5.0, 1.0))
        assert integral.get_y_at(7.0) == pytest.approx(7.0)

    @pytest.mark.parametrize("shift", [-3.0, 0.5, 4.0])
    def test_baseline_fixed_under_shift(
        self, curve: TransformedCurve, integral: IntegralCurve, shift: float
    ) -> None:
        """The first sample stays at the baseline however far the source is shifted."""
        curve.manipulate(CurveManipulationMode.SHIFT, 0.0, (5.0, shift))
        assert integral.points[0].y == 0.0

    def test_reset_matches_source(self, curve: TransformedCurve, integral: IntegralCurve) -> None:
        """Resetting the integral after the source leaves them consistent."""
        curve.manipulate(CurveManipulationMode.SHIFT, 0.0, (5.0, 1.0))
        curve.reset()
        integral.reset()
        assert np.all(integral.to_arrays()[1] == 0.0)

    def test_detach_stops_updates(self, curve: TransformedCurve, integral: IntegralCurve) -> None:
        """A detached integral keeps its last values."""
        integral.detach()
        curve.manipulate(CurveManipulationMode.SHIFT, 0.0, (5.0, 1.0))
        assert integral.points[-1].y == 0.0

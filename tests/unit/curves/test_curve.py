"""Tests for the base Curve: grid, lookup, classification and change events."""

from __future__ import annotations

import math

import numpy as np
from pydantic import ValidationError
import pytest

from calcgrapher.core.config.models import CurveConfig
from calcgrapher.core.curves.curve import Curve
from calcgrapher.core.curves.errors import CurvePreconditionError
from calcgrapher.core.curves.models import PointState, PointType


class TestCurveGrid:
    """Tests for the fixed x-grid."""

    def test_default_grid_from_config(self) -> None:
        """A curve spans the configured range with the configured point count."""
        curve = Curve()
        assert curve.x_range == (0.0, 30.0)
        assert curve.number_of_points == 1251
        assert curve.points[0].x == 0.0
        assert curve.points[-1].x == 30.0

    def test_x_grid_monotone_and_evenly_spaced(self, small_config: CurveConfig) -> None:
        """x increases with a constant step of delta_x."""
        curve = Curve(small_config)
        xs, _ = curve.to_arrays()
        steps = np.diff(xs)
        assert np.all(steps > 0)
        assert np.allclose(steps, curve.delta_x, atol=1e-12)
        assert curve.delta_x == pytest.approx(0.1)

    def test_explicit_range_overrides_config(self) -> None:
        """x_range and number_of_points override the config's grid."""
        curve = Curve(x_range=(-2.0, 2.0), number_of_points=5)
        assert [point.x for point in curve.points] == pytest.approx([-2.0, -1.0, 0.0, 1.0, 2.0])
        assert curve.config.x_min == -2.0

    def test_invalid_range_raises(self) -> None:
        """An empty range is rejected."""
        with pytest.raises(ValidationError):
            Curve(x_range=(1.0, 1.0))

    def test_too_few_points_raises(self) -> None:
        """At least two points are required."""
        with pytest.raises(ValidationError):
            Curve(number_of_points=1)

    def test_initially_flat(self, small_config: CurveConfig) -> None:
        """Without an initial shape, every y is zero and smooth."""
        curve = Curve(small_config)
        assert all(point.y == 0.0 for point in curve.points)
        assert all(point.is_smooth for point in curve.points)

    def test_math_function_initial_shape(self, small_config: CurveConfig) -> None:
        """math_function is evaluated at every sample."""
        curve = Curve(small_config, math_function=lambda x: 2 * x + 1)
        assert curve.get_y_at(3.0) == pytest.approx(7.0)
        assert curve.points[-1].y == pytest.approx(21.0)

    def test_initial_points_interpolated_and_padded(self, small_config: CurveConfig) -> None:
        """Sparse points are interpolated, padded with zero at the domain ends."""
        curve = Curve(small_config, initial_points=[(5.0, 2.0)])
        assert curve.get_y_at(0.0) == pytest.approx(0.0)
        assert curve.get_y_at(2.5) == pytest.approx(1.0)
        assert curve.get_y_at(5.0) == pytest.approx(2.0)
        assert curve.get_y_at(10.0) == pytest.approx(0.0)

    def test_initial_points_deduplicated(self, small_config: CurveConfig) -> None:
        """The last y given for a repeated x wins."""
        curve = Curve(small_config, initial_points=[(0.0, 1.0), (10.0, 1.0), (0.0, 3.0)])
        assert curve.get_y_at(0.0) == pytest.approx(3.0)

    def test_both_initial_shapes_rejected(self, small_config: CurveConfig) -> None:
        """math_function and initial_points are mutually exclusive."""
        with pytest.raises(CurvePreconditionError):
            Curve(small_config, math_function=lambda x: x, initial_points=[(1.0, 1.0)])

    def test_points_view_is_read_only_tuple(self, small_config: CurveConfig) -> None:
        """points is a tuple with one entry per sample."""
        curve = Curve(small_config)
        assert isinstance(curve.points, tuple)
        assert len(curve.points) == 101

    def test_get_points_returns_states(self, small_config: CurveConfig) -> None:
        """get_points gives immutable PointState values."""
        curve = Curve(small_config, math_function=lambda x: x)
        states = curve.get_points()
        assert len(states) == 101
        assert isinstance(states[0], PointState)
        assert states[10].y == pytest.approx(1.0)


class TestClosestLookup:
    """Tests for nearest-sample lookup."""

    @pytest.mark.parametrize(
        ("x", "expected"),
        [
            (0.0, 0),
            (5.0, 50),
            (5.04, 50),
            (5.06, 51),
            (10.0, 100),
        ],
    )
    def test_closest_index(self, small_config: CurveConfig, x: float, expected: int) -> None:
        """The closest index rounds (x - x_min) / delta_x."""
        assert Curve(small_config).get_closest_index_at(x) == expected

    @pytest.mark.parametrize(("x", "expected"), [(-3.0, 0), (12.0, 100)])
    def test_closest_index_clamped(
        self, small_config: CurveConfig, x: float, expected: int
    ) -> None:
        """Positions outside the range clamp to the end samples."""
        assert Curve(small_config).get_closest_index_at(x) == expected

    def test_half_step_rounds_away_from_zero(self) -> None:
        """An exact half step rounds up, not to even."""
        curve = Curve(x_range=(0.0, 4.0), number_of_points=5)
        assert curve.get_closest_index_at(0.5) == 1
        assert curve.get_closest_index_at(2.5) == 3

    def test_non_finite_x_rejected(self, small_config: CurveConfig) -> None:
        """NaN positions are a caller error."""
        with pytest.raises(CurvePreconditionError):
            Curve(small_config).get_closest_index_at(math.nan)

    def test_closest_point_and_y(self, small_config: CurveConfig) -> None:
        """get_closest_point_at and get_y_at agree with the index lookup."""
        curve = Curve(small_config, math_function=lambda x: x * 10)
        point = curve.get_closest_point_at(3.01)
        assert point.x == pytest.approx(3.0)
        assert curve.get_y_at(3.01) == pytest.approx(30.0)


class TestClassification:
    """Tests for point-type classification."""

    def test_jump_is_discontinuous(self, step_curve: Curve) -> None:
        """Both samples on either side of a jump are discontinuous."""
        discontinuous = [point.x for point in step_curve.discontinuities]
        assert discontinuous == pytest.approx([4.9, 5.0])
        assert step_curve.cusps == []

    def test_corner_is_cusp(self, v_curve: Curve) -> None:
        """The vertex of |x - 5| is a cusp and nothing else is."""
        assert [point.x for point in v_curve.cusps] == pytest.approx([5.0])
        assert v_curve.discontinuities == []

    def test_straight_line_is_smooth(self, small_config: CurveConfig) -> None:
        """A steep but continuous line stays smooth."""
        curve = Curve(small_config, math_function=lambda x: 8 * x)
        assert all(point.is_smooth for point in curve.points)

    def test_threshold_is_configurable(self, small_config: CurveConfig) -> None:
        """Raising the discontinuity threshold stops a small jump from counting as one."""
        config = small_config.model_copy(update={"discontinuity_slope_threshold": 100.0})
        curve = Curve(config, math_function=lambda x: 0.0 if x < 4.95 else 3.0)
        assert curve.discontinuities == []

    def test_idempotent(self, v_curve: Curve, step_curve: Curve) -> None:
        """Classifying twice without mutation gives the same types."""
        for curve in (v_curve, step_curve):
            first = [point.point_type for point in curve.points]
            curve.classify()
            second = [point.point_type for point in curve.points]
            assert first == second

    def test_endpoints_untouched(self, small_config: CurveConfig) -> None:
        """The two end samples keep whatever type they have."""
        curve = Curve(small_config)
        curve.points[0].point_type = PointType.CUSP
        curve.points[-1].point_type = PointType.DISCONTINUOUS
        curve.classify()
        assert curve.points[0].is_cusp
        assert curve.points[-1].is_discontinuous

    def test_hole_keeps_previous_type(self, small_config: CurveConfig) -> None:
        """A hole is not reclassified."""
        curve = Curve(small_config)
        hole = curve.points[50]
        hole.y = math.nan
        hole.point_type = PointType.DISCONTINUOUS
        curve.classify()
        assert hole.is_discontinuous

    def test_both_neighbors_missing_keeps_previous_type(self, small_config: CurveConfig) -> None:
        """With no usable neighbor, a point keeps its previous classification."""
        curve = Curve(small_config)
        curve.points[49].y = math.nan
        curve.points[51].y = math.nan
        curve.points[50].point_type = PointType.CUSP
        curve.classify()
        assert curve.points[50].is_cusp

    def test_one_sided_jump_next_to_hole(self, small_config: CurveConfig) -> None:
        """The jump test still applies on the side that exists."""
        curve = Curve(small_config)
        curve.points[49].y = math.nan
        curve.points[51].y = 5.0
        curve.classify()
        assert curve.points[50].is_discontinuous

    def test_neighbor_of_hole_is_smooth_without_jump(self, small_config: CurveConfig) -> None:
        """A flat point next to a hole is smooth; the cusp test needs both sides."""
        curve = Curve(small_config)
        curve.points[50].y = math.nan
        curve.classify()
        assert curve.points[49].is_smooth
        assert curve.points[51].is_smooth


class TestChangeNotification:
    """Tests for on_changed subscriptions."""

    def test_listener_called_in_order(self, small_config: CurveConfig) -> None:
        """Listeners run synchronously in registration order."""
        curve = Curve(small_config)
        calls: list[str] = []
        curve.on_changed(lambda: calls.append("first"))
        curve.on_changed(lambda: calls.append("second"))

        curve.restore(curve.to_snapshot())

        assert calls == ["first", "second"]

    def test_cancel_stops_delivery(self, small_config: CurveConfig, change_counter) -> None:
        """A cancelled subscription receives no further events."""
        curve = Curve(small_config)
        subscription = curve.on_changed(change_counter)

        curve.restore(curve.to_snapshot())
        subscription.cancel()
        subscription.cancel()
        curve.restore(curve.to_snapshot())

        assert change_counter.count == 1
        assert not subscription.active


class TestArrays:
    """Tests for numpy views."""

    def test_to_arrays(self, small_config: CurveConfig) -> None:
        """to_arrays returns matching x and y arrays, with NaN for holes."""
        curve = Curve(small_config, math_function=lambda x: x)
        curve.points[3].y = math.nan
        xs, ys = curve.to_arrays()
        assert xs.shape == ys.shape == (101,)
        assert ys[10] == pytest.approx(1.0)
        assert np.isnan(ys[3])

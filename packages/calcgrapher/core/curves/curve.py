"""Base sampled curve.

A Curve owns a fixed-length array of CurvePoints evenly spaced across its
x-range. It provides nearest-sample lookup, point-type classification and a
synchronous change notification that fires once per batch of mutations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
import math

import numpy as np

from calcgrapher.core.config.models import CurveConfig
from calcgrapher.core.curves.errors import CurvePreconditionError, CurveStateError
from calcgrapher.core.curves.models import CurvePoint, CurveSnapshot, PointState, PointType
from calcgrapher.core.curves.sampling import build_x_grid, interpolate_onto_grid, sample_function
from calcgrapher.core.utils.logging import get_logger, log_performance
from calcgrapher.core.utils.math import clamp, round_symmetric

logger = get_logger(__name__)

# Model coordinates (x, y)
Position = tuple[float, float]
ChangeListener = Callable[[], None]

SNAPSHOT_X_TOLERANCE = 1e-9


class Subscription:
    """Handle returned by Curve.on_changed(); cancel() detaches the listener."""

    def __init__(self, curve: Curve, listener: ChangeListener) -> None:
        self._curve = curve
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop delivering change events. Safe to call more than once."""
        if self._active:
            self._curve._listeners.remove(self._listener)
            self._active = False


class Curve:
    """Fixed grid of CurvePoints with classification and change events.

    The grid comes from a CurveConfig; x_range and number_of_points override
    the config's grid when given. The initial shape is either all zeros, a
    math_function evaluated at each sample, or sparse initial_points linearly
    interpolated onto the grid.

    Args:
        config: Discretization and threshold constants.
        x_range: Optional (min, max) overriding config.x_min / config.x_max.
        number_of_points: Optional sample count overriding the config.
        math_function: Optional f(x) giving the initial y of every sample.
        initial_points: Optional sparse (x, y) pairs giving the initial shape.
        name: Label used in logs.

    Raises:
        CurvePreconditionError: If both math_function and initial_points are given.
        ValidationError: If the resulting grid configuration is invalid.

    Example:
        >>> curve = Curve(x_range=(0.0, 10.0), number_of_points=101)
        >>> curve.get_closest_index_at(5.04)
        50
    """

    def __init__(
        self,
        config: CurveConfig | None = None,
        *,
        x_range: tuple[float, float] | None = None,
        number_of_points: int | None = None,
        math_function: Callable[[float], float] | None = None,
        initial_points: Iterable[tuple[float, float]] | None = None,
        name: str = "curve",
    ) -> None:
        if math_function is not None and initial_points is not None:
            raise CurvePreconditionError("Pass either math_function or initial_points, not both")

        config = config or CurveConfig()
        overrides: dict[str, object] = {}
        if x_range is not None:
            overrides["x_min"], overrides["x_max"] = x_range
        if number_of_points is not None:
            overrides["number_of_points"] = number_of_points
        if overrides:
            config = CurveConfig.model_validate({**config.model_dump(), **overrides})

        self.config = config
        self.name = name
        self._logger = get_logger(__name__, curve=name)
        self._listeners: list[ChangeListener] = []

        x_grid = build_x_grid(config.x_min, config.x_max, config.number_of_points)
        if math_function is not None:
            ys = sample_function(math_function, x_grid)
        elif initial_points is not None:
            ys = interpolate_onto_grid(initial_points, x_grid)
        else:
            ys = np.zeros_like(x_grid)

        self._points = [
            CurvePoint(x=float(x), y=float(y), max_undo=config.max_undo)
            for x, y in zip(x_grid, ys)
        ]
        self.classify()
        logger.debug(
            "Created %s with %d points over [%s, %s]",
            name,
            config.number_of_points,
            config.x_min,
            config.x_max,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, x_range={self.x_range}, "
            f"number_of_points={self.number_of_points})"
        )

    # Grid

    @property
    def x_range(self) -> tuple[float, float]:
        return self.config.x_range

    @property
    def number_of_points(self) -> int:
        return self.config.number_of_points

    @property
    def delta_x(self) -> float:
        return self.config.delta_x

    @property
    def points(self) -> tuple[CurvePoint, ...]:
        """Live samples ordered by x, for the curve model itself.

        Renderers and other read-only consumers use get_points().
        """
        return tuple(self._points)

    def get_points(self) -> list[PointState]:
        """Read-only view of every sample, for renderers."""
        return [point.to_state() for point in self._points]

    def to_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Return (x, y) as numpy arrays. Holes appear as NaN in y."""
        xs = np.fromiter((point.x for point in self._points), dtype=float, count=len(self._points))
        ys = np.fromiter((point.y for point in self._points), dtype=float, count=len(self._points))
        return xs, ys

    def get_closest_index_at(self, x: float) -> int:
        """Index of the sample nearest to x, clamped to the valid range.

        Raises:
            CurvePreconditionError: If x is not finite.
        """
        if not math.isfinite(x):
            raise CurvePreconditionError(f"x must be finite, got {x}")
        index = round_symmetric((x - self.config.x_min) / self.delta_x)
        return int(clamp(index, 0, self.number_of_points - 1))

    def get_closest_point_at(self, x: float) -> CurvePoint:
        return self._points[self.get_closest_index_at(x)]

    def get_y_at(self, x: float) -> float:
        """y of the sample nearest to x (NaN for a hole)."""
        return self.get_closest_point_at(x).y

    @property
    def cusps(self) -> list[CurvePoint]:
        return [point for point in self._points if point.is_cusp]

    @property
    def discontinuities(self) -> list[CurvePoint]:
        return [point for point in self._points if point.is_discontinuous]

    # Classification

    def classify(self) -> None:
        """Classify every interior point as SMOOTH, CUSP or DISCONTINUOUS.

        Endpoints are left untouched. A side whose neighbor is a hole
        contributes neither a jump nor a slope; a point with no usable side
        keeps its previous type, as does a point that is itself a hole.
        """
        slope_threshold = self.config.discontinuity_slope_threshold
        angle_threshold = self.config.cusp_angle_threshold
        dx = self.delta_x
        points = self._points

        for i in range(1, len(points) - 1):
            point = points[i]
            if not point.exists:
                continue
            left, right = points[i - 1], points[i + 1]

            jumps: list[float] = []
            left_slope = right_slope = None
            if left.exists:
                jumps.append(abs(point.y - left.y))
                left_slope = left.get_slope(point)
            if right.exists:
                jumps.append(abs(right.y - point.y))
                right_slope = point.get_slope(right)
            if not jumps:
                continue

            if max(jumps) / dx >= slope_threshold:
                point.point_type = PointType.DISCONTINUOUS
            elif (
                left_slope is not None
                and right_slope is not None
                and abs(math.atan(left_slope) - math.atan(right_slope)) >= angle_threshold
            ):
                point.point_type = PointType.CUSP
            else:
                point.point_type = PointType.SMOOTH

    # Change notification

    def on_changed(self, listener: ChangeListener) -> Subscription:
        """Register a listener called synchronously after every batch mutation.

        Listeners run in registration order and must read the whole point
        array; events carry no diff.
        """
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _emit_changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    # Snapshot / restore

    def to_snapshot(self) -> CurveSnapshot:
        """Capture every sample's x, y and point type. Undo history is not captured."""
        return CurveSnapshot(points=tuple(self.get_points()))

    def restore(self, snapshot: CurveSnapshot) -> None:
        """Replace every sample's y and type from a snapshot of the same grid.

        Raises:
            CurveStateError: If the snapshot's length or x-values differ from this grid.
        """
        states = snapshot.points
        if len(states) != len(self._points):
            self._logger.warning("Rejected snapshot for %s: length mismatch", self.name)
            raise CurveStateError(
                message="Snapshot length does not match curve",
                expected=len(self._points),
                actual=len(states),
            )
        for index, (point, state) in enumerate(zip(self._points, states)):
            if abs(point.x - state.x) > SNAPSHOT_X_TOLERANCE:
                self._logger.warning(
                    "Rejected snapshot for %s: x mismatch at index %d", self.name, index
                )
                raise CurveStateError(
                    message=f"Snapshot x-grid does not match curve at index {index}",
                    expected=point.x,
                    actual=state.x,
                )

        for point, state in zip(self._points, states):
            point.y = state.y
            point.point_type = state.point_type
        self.classify()
        self._logger.debug("Restored %s from snapshot", self.name)
        self._emit_changed()


class DependentCurve(Curve, ABC):
    """A curve recomputed in full from a source curve on every change event.

    The listener is registered once at construction and the initial values
    are computed immediately, so the dependent curve is never stale.
    """

    def __init__(self, source: Curve, *, name: str | None = None) -> None:
        super().__init__(source.config, name=name or type(self).__name__)
        self.source = source
        self._subscription = source.on_changed(self.update)
        self.update()

    @log_performance
    def update(self) -> None:
        """Recompute from the source and notify listeners."""
        self._recompute()
        self._emit_changed()

    @abstractmethod
    def _recompute(self) -> None:
        """Rewrite every point's y and point type from the source."""

    def reset(self) -> None:
        """Match the source again, regardless of reset order."""
        self.update()

    def detach(self) -> None:
        """Stop following the source."""
        self._subscription.cancel()

    def restore(self, snapshot: CurveSnapshot) -> None:
        """Restore a detached curve from a snapshot.

        An attached curve only changes by recomputing from its source.

        Raises:
            CurveStateError: If the curve still follows its source, or the
                snapshot does not fit the grid.
        """
        if self._subscription.active:
            self._logger.warning("Rejected snapshot for %s: still follows its source", self.name)
            raise CurveStateError(
                message=f"{self.name} follows {self.source.name}; detach before restoring"
            )
        super().restore(snapshot)

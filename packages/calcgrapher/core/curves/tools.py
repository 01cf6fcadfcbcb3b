"""Ancillary read-outs that track one x coordinate across the curve family."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict

from calcgrapher.core.curves.curve import Curve
from calcgrapher.core.curves.errors import CurvePreconditionError
from calcgrapher.core.utils.logging import get_logger

logger = get_logger(__name__)


class TangentLine(BaseModel):
    """y = slope * x + intercept."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    slope: float
    intercept: float

    def at(self, x: float) -> float:
        return self.slope * x + self.intercept


class _XCoordinate:
    """An x coordinate constrained to a curve's range, with a reset value."""

    def __init__(self, x_range: tuple[float, float], initial_x: float) -> None:
        self.x_range = x_range
        self._validate(initial_x)
        self.initial_x = initial_x
        self._x = initial_x

    def _validate(self, x: float) -> None:
        x_min, x_max = self.x_range
        if not (math.isfinite(x) and x_min <= x <= x_max):
            logger.warning("Rejected x=%s outside [%s, %s]", x, x_min, x_max)
            raise CurvePreconditionError(f"x={x} outside range [{x_min}, {x_max}]")

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        self._validate(value)
        self._x = value

    def reset(self) -> None:
        self._x = self.initial_x


class AncillaryTool(_XCoordinate):
    """Reads every curve of the family at one x coordinate.

    Values are read on access, so they always reflect the curves' current
    points.

    Args:
        integral_curve: Integral of the original curve.
        original_curve: The edited curve.
        derivative_curve: First derivative of the original curve.
        second_derivative_curve: Second derivative of the original curve.
        initial_x: Starting x; defaults to the domain center.

    Raises:
        CurvePreconditionError: If x is set outside the curves' range.
    """

    def __init__(
        self,
        integral_curve: Curve,
        original_curve: Curve,
        derivative_curve: Curve,
        second_derivative_curve: Curve,
        initial_x: float | None = None,
    ) -> None:
        x_min, x_max = original_curve.x_range
        super().__init__(
            original_curve.x_range, (x_min + x_max) / 2 if initial_x is None else initial_x
        )
        self.integral_curve = integral_curve
        self.original_curve = original_curve
        self.derivative_curve = derivative_curve
        self.second_derivative_curve = second_derivative_curve

    @property
    def y_integral(self) -> float:
        return self.integral_curve.get_y_at(self.x)

    @property
    def y_original(self) -> float:
        return self.original_curve.get_y_at(self.x)

    @property
    def y_derivative(self) -> float:
        return self.derivative_curve.get_y_at(self.x)

    @property
    def y_second_derivative(self) -> float:
        return self.second_derivative_curve.get_y_at(self.x)

    def tangent_line(self) -> TangentLine:
        """Tangent to the original curve at the sample nearest x.

        Slope and intercept are NaN when the curve does not exist there.
        """
        point = self.original_curve.get_closest_point_at(self.x)
        slope = self.derivative_curve.get_y_at(self.x)
        return TangentLine(slope=slope, intercept=point.y - slope * point.x)


class ReferenceLine(_XCoordinate):
    """A vertical line the user can move; starts at the domain center."""

    def __init__(self, x_range: tuple[float, float], initial_x: float | None = None) -> None:
        x_min, x_max = x_range
        super().__init__(x_range, (x_min + x_max) / 2 if initial_x is None else initial_x)

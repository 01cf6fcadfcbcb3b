"""Second derivative of a curve, computed directly from the source."""

from __future__ import annotations

import math

from calcgrapher.core.curves.curve import DependentCurve
from calcgrapher.core.curves.models import PointType
from calcgrapher.core.utils.logging import get_logger

logger = get_logger(__name__)


class SecondDerivativeCurve(DependentCurve):
    """Finite-difference second derivative with a discontinuity correction.

    Every interior sample first gets the naive estimate
    (forward slope - backward slope) / delta_x, assuming the source is smooth.
    Samples whose source point is not smooth are then corrected by copying a
    neighbor's value, since a difference taken across a corner or jump is
    meaningless. Boundary samples copy their interior neighbor when the
    source is smooth there, else fall to zero.
    """

    def _recompute(self) -> None:
        source = self.source.points
        points = self._points
        count = len(points)
        dx = self.delta_x

        for i, point in enumerate(points):
            point.point_type = (
                PointType.SMOOTH if source[i].is_smooth else PointType.DISCONTINUOUS
            )
            if 0 < i < count - 1:
                backward = source[i - 1].get_slope(source[i])
                forward = source[i].get_slope(source[i + 1])
                point.y = (forward - backward) / dx

        points[0].y = points[1].y if source[1].is_smooth else 0.0
        points[-1].y = points[-2].y if source[-2].is_smooth else 0.0

        # Left-to-right, in place: an overwritten value feeds the next sample
        for i in range(1, count - 1):
            point = points[i]
            if not point.is_discontinuous:
                continue
            if points[i + 1].is_discontinuous:
                point.y = points[i - 1].y
            if points[i - 1].is_discontinuous:
                point.y = points[i + 1].y

        logger.debug(
            "Recomputed %s from %s (%d non-finite)",
            self.name,
            self.source.name,
            sum(1 for point in points if not math.isfinite(point.y)),
        )

"""First derivative of a curve."""

from __future__ import annotations

import math

from calcgrapher.core.curves.curve import DependentCurve
from calcgrapher.core.curves.models import CurvePoint, PointType
from calcgrapher.core.utils.logging import get_logger

logger = get_logger(__name__)


def _side_slope(point: CurvePoint, neighbor: CurvePoint) -> float | None:
    """Secant slope from point to neighbor, or None when that side is unusable.

    A side is unusable when either sample is a hole, or when both samples
    are non-smooth (the step crosses a corner or jump on both ends).
    """
    if not (point.exists and neighbor.exists):
        return None
    if not point.is_smooth and not neighbor.is_smooth:
        return None
    return point.get_slope(neighbor)


class DerivativeCurve(DependentCurve):
    """Central-difference derivative that respects cusps and discontinuities.

    For each sample, the backward and forward secant slopes of the source are
    averaged when both are usable, otherwise the usable one is taken. When
    neither is usable the previous derivative value is carried forward.
    Holes in the source stay holes. CUSP and DISCONTINUOUS source points map
    to DISCONTINUOUS derivative points.
    """

    def _recompute(self) -> None:
        source = self.source.points
        count = len(source)

        for i, point in enumerate(self._points):
            source_point = source[i]
            point.point_type = (
                PointType.SMOOTH if source_point.is_smooth else PointType.DISCONTINUOUS
            )
            if not source_point.exists:
                point.y = math.nan
                continue

            backward = _side_slope(source_point, source[i - 1]) if i > 0 else None
            forward = _side_slope(source_point, source[i + 1]) if i < count - 1 else None

            if backward is not None and forward is not None:
                point.y = (backward + forward) / 2
            elif backward is not None:
                point.y = backward
            elif forward is not None:
                point.y = forward
            elif i > 0:
                point.y = self._points[i - 1].y
            else:
                point.y = source_point.get_slope(source[1])

        logger.debug("Recomputed %s from %s", self.name, self.source.name)

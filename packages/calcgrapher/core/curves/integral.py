"""Running definite integral of a curve."""

from __future__ import annotations

import numpy as np

from calcgrapher.core.curves.curve import Curve, DependentCurve
from calcgrapher.core.curves.models import PointType
from calcgrapher.core.utils.logging import get_logger

logger = get_logger(__name__)


class IntegralCurve(DependentCurve):
    """Left-to-right trapezoidal sum of the source, starting at a fixed baseline.

    An interval touching a hole contributes nothing to the sum. A jump in
    the source becomes a corner in the integral: DISCONTINUOUS source points
    map to CUSP, everything else to SMOOTH.

    Args:
        source: Curve to integrate.
        baseline: Value of the integral at the domain minimum.
    """

    def __init__(self, source: Curve, *, baseline: float = 0.0, name: str | None = None) -> None:
        self.baseline = baseline
        super().__init__(source, name=name)

    def _recompute(self) -> None:
        xs, ys = self.source.to_arrays()
        areas = 0.5 * (ys[1:] + ys[:-1]) * np.diff(xs)
        areas[~np.isfinite(areas)] = 0.0
        totals = self.baseline + np.concatenate(([0.0], np.cumsum(areas)))

        for point, source_point, total in zip(self._points, self.source.points, totals):
            point.y = float(total)
            point.point_type = (
                PointType.CUSP if source_point.is_discontinuous else PointType.SMOOTH
            )
        logger.debug("Recomputed %s from %s", self.name, self.source.name)

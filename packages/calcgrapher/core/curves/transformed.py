"""Editable curve and its shape-manipulation algorithms.

TransformedCurve is the single mutable source of truth that dependent curves
follow. Every width-based and whole-curve manipulation is computed against
each point's last-saved y, so a drag gesture is expected to begin with a
save (begin_gesture) and every move event within it recomputes the shape
from the same baseline instead of compounding on the previous move.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
import math
from typing import TYPE_CHECKING

import numpy as np

from calcgrapher.core.curves.curve import Curve, Position
from calcgrapher.core.curves.errors import CurvePreconditionError
from calcgrapher.core.curves.models import PointType
from calcgrapher.core.curves.modes import CurveManipulationMode, get_mode_info
from calcgrapher.core.curves.sampling import interpolate_onto_grid, sample_function
from calcgrapher.core.utils.logging import get_logger, log_performance
from calcgrapher.core.utils.math import clamp, lerp, round_symmetric

if TYPE_CHECKING:
    from calcgrapher.core.curves.presets import PresetFunction

logger = get_logger(__name__)


class TransformedCurve(Curve):
    """A curve the user edits by dragging.

    Example:
        >>> curve = TransformedCurve(x_range=(0.0, 10.0), number_of_points=101)
        >>> curve.begin_gesture()
        >>> curve.manipulate(CurveManipulationMode.HILL, 2.0, (5.0, 3.0))
        >>> curve.get_y_at(5.0)
        3.0
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        # Last two freeform positions of the current gesture, oldest first
        self._drag_history: deque[Position] = deque(maxlen=2)

    # Save / undo / reset

    def save(self) -> None:
        """Push every point's current state onto its undo history."""
        for point in self._points:
            point.save()

    @property
    def can_undo(self) -> bool:
        return any(point.has_saved_state for point in self._points)

    def undo(self) -> None:
        """Restore every point to its most recent saved state.

        Does nothing when no state has been saved.
        """
        if not self.can_undo:
            logger.debug("Nothing to undo on %s", self.name)
            return
        for point in self._points:
            point.undo_to_last_save()
        self.classify()
        self._emit_changed()

    def erase(self) -> None:
        """Set every y to zero. Undoable."""
        self.save()
        for point in self._points:
            point.y = 0.0
            point.point_type = PointType.SMOOTH
        self._emit_changed()

    def reset(self) -> None:
        """Return every point to its initial state and clear all history."""
        for point in self._points:
            point.reset()
        self._drag_history.clear()
        self.classify()
        self._emit_changed()

    def begin_gesture(self) -> None:
        """Save the curve and forget freeform positions from the previous drag."""
        self.save()
        self._drag_history.clear()

    def end_gesture(self) -> None:
        self._drag_history.clear()

    # Manipulation entry point

    @log_performance
    def manipulate(
        self,
        mode: CurveManipulationMode | str,
        width: float,
        position: Position,
        previous_position: Position | None = None,
        prior_position: Position | None = None,
    ) -> None:
        """Apply one edit step at position and emit a single change event.

        Args:
            mode: Manipulation mode.
            width: Width in model x-units. Ignored by FREEFORM, TILT and SHIFT.
            position: Current drag position (x, y) in model coordinates.
            previous_position: FREEFORM only. Position of the previous drag
                event; taken from this gesture's history when omitted.
            prior_position: FREEFORM only. Position before previous_position,
                used to smooth the corner left at previous_position.

        Raises:
            CurvePreconditionError: If mode is unknown, position is not finite
                or lies outside the x-range, width is not positive for a
                width-based mode, or TILT is requested at x == 0.
        """
        try:
            mode = CurveManipulationMode(mode)
        except ValueError as e:
            raise CurvePreconditionError(f"Unsupported curve manipulation mode: {mode!r}") from e

        x, y = position
        x_min, x_max = self.x_range
        if not (math.isfinite(x) and math.isfinite(y)):
            raise CurvePreconditionError(f"Position must be finite, got {position}")
        if not x_min <= x <= x_max:
            logger.warning("Rejected %s at x=%s outside [%s, %s]", mode.value, x, x_min, x_max)
            raise CurvePreconditionError(f"x={x} outside curve range [{x_min}, {x_max}]")
        if get_mode_info(mode).has_adjustable_width and not width > 0:
            raise CurvePreconditionError(f"width must be > 0, got {width}")

        if mode is CurveManipulationMode.HILL:
            self.create_hill_at(width, position)
        elif mode is CurveManipulationMode.TRIANGLE:
            self.create_triangle_at(width, position)
        elif mode is CurveManipulationMode.PARABOLA:
            self.create_parabola_at(width, position)
        elif mode is CurveManipulationMode.PEDESTAL:
            self.create_pedestal_at(width, position)
        elif mode is CurveManipulationMode.SINUSOID:
            self.create_sinusoid_at(width, position)
        elif mode is CurveManipulationMode.FREEFORM:
            self.draw_freeform_to_position(position, previous_position, prior_position)
        elif mode is CurveManipulationMode.TILT:
            self.tilt_to_position(position)
        else:
            self.shift_to_position(position)

        self.classify()
        self._emit_changed()

    # Width-based shapes

    def create_hill_at(self, width: float, peak: Position) -> None:
        """Gaussian bump whose top passes through peak."""
        center = self.get_closest_point_at(peak[0]).x
        sigma = width / (2 * math.sqrt(2))
        for point in self._points:
            weight = math.exp(-(((point.x - center) / sigma) ** 2))
            point.y = weight * peak[1] + (1 - weight) * point.last_saved_y

    def create_triangle_at(self, width: float, peak: Position) -> None:
        """Piecewise-linear peak. Points only move outward in the drag direction."""
        closest = self.get_closest_point_at(peak[0])
        slope = self.config.max_y / (width / 2)
        self._apply_outward_peak(peak, lambda dx: slope * abs(dx), closest.x, closest.last_saved_y)

    def create_parabola_at(self, width: float, peak: Position) -> None:
        """Quadratic peak. Points only move outward in the drag direction."""
        closest = self.get_closest_point_at(peak[0])
        coefficient = self.config.max_y * (2 / width) ** 2
        self._apply_outward_peak(
            peak, lambda dx: coefficient * dx**2, closest.x, closest.last_saved_y
        )

    def _apply_outward_peak(
        self,
        peak: Position,
        drop: Callable[[float], float],
        center: float,
        center_saved_y: float,
    ) -> None:
        delta_y = peak[1] - center_saved_y
        direction = math.copysign(1.0, delta_y) if delta_y else 0.0
        for point in self._points:
            new_y = peak[1] - direction * drop(point.x - center)
            saved_y = point.last_saved_y
            if (delta_y > 0 and new_y > saved_y) or (delta_y < 0 and new_y < saved_y):
                point.y = new_y
            else:
                point.y = saved_y

    def create_pedestal_at(self, width: float, peak: Position) -> None:
        """Flat top of half-width width/2 with Gaussian^4 roll-off at both edges."""
        center = self.get_closest_point_at(peak[0]).x
        edge = self.config.edge_slope_factor
        half_width = width / 2
        for point in self._points:
            offset = point.x - center
            if abs(offset) < half_width:
                weight = 1.0
            elif edge == 0:
                weight = 0.0
            else:
                edge_x = center - half_width if offset <= 0 else center + half_width
                weight = math.exp(-(((point.x - edge_x) / edge) ** 4))
            point.y = weight * peak[1] + (1 - weight) * point.last_saved_y

    def create_sinusoid_at(self, width: float, position: Position) -> None:
        """Cosine wave of wavelength width through position.

        The wave spans seven half-wavelengths centred on the closest point;
        points outside that band keep their saved y. Inside the band the
        wave grows outward in each direction independently. Once a candidate
        is smaller in magnitude than the saved y, that point and every point
        beyond it keep their saved y.
        """
        index = self.get_closest_index_at(position[0])
        center = self._points[index].x
        wavenumber = 2 * math.pi / width
        half_band = 7 * width / 4

        def sweep(indices: range) -> None:
            frozen = False
            for i in indices:
                point = self._points[i]
                if abs(point.x - center) >= half_band:
                    frozen = True
                candidate = position[1] * math.cos(wavenumber * (center - point.x))
                if not frozen and abs(candidate) < abs(point.last_saved_y):
                    frozen = True
                point.y = point.last_saved_y if frozen else candidate

        sweep(range(index, len(self._points)))
        sweep(range(index - 1, -1, -1))

    # Position-based shapes

    def tilt_to_position(self, position: Position) -> None:
        """Rotate the curve about x=0 so the closest point follows the drag.

        Raises:
            CurvePreconditionError: If position x is 0.
        """
        x, y = position
        if x == 0:
            raise CurvePreconditionError("TILT is undefined at x == 0")
        max_tilt = self.config.max_tilt
        angle = clamp(math.atan(y / x), -max_tilt, max_tilt)
        delta_y = math.tan(angle) * x - self.get_closest_point_at(x).last_saved_y
        for point in self._points:
            point.y = point.last_saved_y + delta_y * point.x / x

    def shift_to_position(self, position: Position) -> None:
        """Translate the curve vertically so the closest point lands on position."""
        delta_y = position[1] - self.get_closest_point_at(position[0]).last_saved_y
        for point in self._points:
            point.y = point.last_saved_y + delta_y

    # Freeform

    def draw_freeform_to_position(
        self,
        position: Position,
        previous_position: Position | None = None,
        prior_position: Position | None = None,
    ) -> None:
        """Drag individual points to follow the pointer.

        The closest point is set to the drag y and points strictly between it
        and the previous drag point are linearly interpolated. When the
        previous point lies between the prior and current points, the kink
        left at it is smoothed with a few passes of a moving average.
        """
        if previous_position is None and self._drag_history:
            previous_position = self._drag_history[-1]
            if prior_position is None and len(self._drag_history) == 2:
                prior_position = self._drag_history[0]

        index = self.get_closest_index_at(position[0])
        self._points[index].y = position[1]

        if previous_position is None:
            self._drag_history.append(position)
            return

        min_spacing = self.config.freeform_min_x_spacing
        if abs(position[0] - previous_position[0]) < min_spacing:
            # Coalesced: the sample does not become the new previous position
            return

        previous_index = self.get_closest_index_at(previous_position[0])
        self._interpolate(index, position[1], previous_index, previous_position[1])

        # Corner: the previous point lies strictly between the prior and current x
        if (
            prior_position is not None
            and abs(prior_position[0] - previous_position[0]) >= min_spacing
            and (position[0] - previous_position[0])
            * (prior_position[0] - previous_position[0])
            < 0
        ):
            first = self.get_closest_index_at((position[0] + previous_position[0]) / 2)
            second = self.get_closest_index_at((prior_position[0] + previous_position[0]) / 2)
            self._smooth_between(min(first, second), max(first, second))

        self._drag_history.append(position)

    def _interpolate(self, start: int, start_y: float, end: int, end_y: float) -> None:
        """Linearly interpolate y for indices strictly between start and end."""
        if abs(end - start) < 2:
            return
        step = 1 if end > start else -1
        span = abs(end - start)
        for offset in range(1, span):
            point = self._points[start + step * offset]
            point.y = lerp(start_y, end_y, offset / span)
            point.point_type = PointType.SMOOTH

    def _smooth_between(self, lo: int, hi: int) -> None:
        """Moving-average passes over indices strictly between lo and hi.

        Neighbor lookups are clamped to [lo, hi]; holes are skipped.
        """
        if hi - lo < 2:
            return
        half = self.config.freeform_smoothing_points // 2
        for _ in range(self.config.freeform_smoothing_passes):
            ys = [point.y for point in self._points[lo : hi + 1]]
            for i in range(lo + 1, hi):
                window = [
                    ys[int(clamp(j, lo, hi)) - lo]
                    for j in range(i - half, i + half + 1)
                ]
                finite = [value for value in window if math.isfinite(value)]
                if finite:
                    self._points[i].y = sum(finite) / len(finite)

    # Whole-curve actions

    def smooth(self) -> None:
        """Centered moving average over config.smoothing_window, from saved values.

        Saves first, so the smoothing can be undone. Holes stay holes.
        """
        self.save()
        half = max(1, round_symmetric(self.config.smoothing_window / (2 * self.delta_x)))
        saved = np.array([point.last_saved_y for point in self._points], dtype=float)
        count = len(saved)
        for i, point in enumerate(self._points):
            if not math.isfinite(saved[i]):
                continue
            window = saved[max(0, i - half) : min(count, i + half + 1)]
            point.y = float(np.mean(window[np.isfinite(window)]))
        self.classify()
        self._emit_changed()

    def apply_preset_function(self, preset: PresetFunction) -> None:
        """Replace the curve with a preset function. Undoable.

        With x_positions, the function is evaluated only there and the rest
        of the grid is linearly interpolated.
        """
        self.save()
        x_grid, _ = self.to_arrays()
        if preset.x_positions:
            ys = interpolate_onto_grid(
                [(x, preset.math_function(x)) for x in preset.x_positions], x_grid
            )
        else:
            ys = sample_function(preset.math_function, x_grid)
        for point, y in zip(self._points, ys):
            point.y = float(y)
        self.classify()
        logger.debug("Applied preset %s to %s", preset.name, self.name)
        self._emit_changed()

    def freeform_icon_curve(self, y_min: float, y_max: float) -> None:
        """Draw a hill, triangle, parabola and pedestal side by side."""
        x_min, x_max = self.x_range
        length = x_max - x_min
        width = length / 4
        self.create_hill_at(width, (x_min + length / 5, y_min))
        self.save()
        self.create_triangle_at(width, (x_min + 2 * length / 5, y_max))
        self.save()
        self.create_parabola_at(width, (x_min + 3 * length / 5, y_min))
        self.save()
        self.create_pedestal_at(width, (x_min + 4 * length / 5, y_max))
        self.classify()
        self._emit_changed()

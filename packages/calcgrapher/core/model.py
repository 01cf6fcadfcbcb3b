"""Calculus grapher model - wires the editable curves to their derived curves.

The model owns:
- original_curve: the curve whose derivative, second derivative and integral are shown
- predict_curve: a scratch curve the user sketches a prediction on
- the derived curves, all following original_curve
- the current manipulation mode/width and the ancillary tools

Rendering and input translation live outside; they call manipulate(),
read points, and subscribe to curve change events.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from calcgrapher.core.config.models import AppConfig, CurveConfig
from calcgrapher.core.curves.curve import Position
from calcgrapher.core.curves.derivative import DerivativeCurve
from calcgrapher.core.curves.integral import IntegralCurve
from calcgrapher.core.curves.modes import ManipulationSettings
from calcgrapher.core.curves.second_derivative import SecondDerivativeCurve
from calcgrapher.core.curves.tools import AncillaryTool, ReferenceLine
from calcgrapher.core.curves.transformed import TransformedCurve
from calcgrapher.core.utils.logging import get_logger

logger = get_logger(__name__)


class CalculusGrapherModel:
    """Top-level model for one calculus grapher screen."""

    def __init__(self, config: AppConfig | CurveConfig | Path | str | None = None):
        """Build the curve family from configuration.

        Args:
            config: AppConfig, CurveConfig, config file path, or None (uses
                    the default path, falling back to defaults)

        Raises:
            TypeError: If config is the wrong type
            ValidationError: If the config file is invalid
        """
        self.curve_config = self._resolve_curve_config(config)

        self.manipulation = ManipulationSettings.from_config(self.curve_config)
        self.predict_mode_enabled = False

        self.original_curve = TransformedCurve(self.curve_config, name="original")
        self.predict_curve = TransformedCurve(self.curve_config, name="predict")

        self.derivative_curve = DerivativeCurve(self.original_curve, name="derivative")
        self.second_derivative_curve = SecondDerivativeCurve(
            self.original_curve, name="second_derivative"
        )
        self.integral_curve = IntegralCurve(self.original_curve, name="integral")

        self.reference_line = ReferenceLine(self.curve_config.x_range)
        self.ancillary_tool = AncillaryTool(
            self.integral_curve,
            self.original_curve,
            self.derivative_curve,
            self.second_derivative_curve,
        )

        logger.debug(
            "Model initialized: %d points over %s",
            self.curve_config.number_of_points,
            self.curve_config.x_range,
        )

    @staticmethod
    def _resolve_curve_config(value: Any) -> CurveConfig:
        if value is None:
            return AppConfig.load_or_default().curve
        elif isinstance(value, (Path, str)):
            return AppConfig.load_or_default(Path(value)).curve
        elif isinstance(value, AppConfig):
            return value.curve
        elif isinstance(value, CurveConfig):
            return value
        else:
            raise TypeError(
                f"Expected AppConfig, CurveConfig, Path, str, or None; got {type(value).__name__}"
            )

    @property
    def curve_to_transform(self) -> TransformedCurve:
        """The curve user drags edit: predict_curve in predict mode, else original_curve."""
        return self.predict_curve if self.predict_mode_enabled else self.original_curve

    def begin_gesture(self) -> None:
        self.curve_to_transform.begin_gesture()

    def end_gesture(self) -> None:
        self.curve_to_transform.end_gesture()

    def manipulate(
        self,
        position: Position,
        previous_position: Position | None = None,
        prior_position: Position | None = None,
    ) -> None:
        """Apply the selected mode and width at position to curve_to_transform."""
        self.curve_to_transform.manipulate(
            self.manipulation.mode,
            self.manipulation.width,
            position,
            previous_position,
            prior_position,
        )

    def reset(self) -> None:
        """Reset all."""
        self.manipulation.reset()
        self.reference_line.reset()
        self.original_curve.reset()
        self.predict_curve.reset()
        self.predict_mode_enabled = False
        self.ancillary_tool.reset()

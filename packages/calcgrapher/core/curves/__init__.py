"""Sampled curves, their manipulation algorithms and derived curves."""

from calcgrapher.core.curves.curve import Curve, DependentCurve, Position, Subscription
from calcgrapher.core.curves.derivative import DerivativeCurve
from calcgrapher.core.curves.errors import CurveError, CurvePreconditionError, CurveStateError
from calcgrapher.core.curves.integral import IntegralCurve
from calcgrapher.core.curves.models import CurvePoint, CurveSnapshot, PointState, PointType
from calcgrapher.core.curves.modes import (
    MODE_INFO,
    CurveManipulationMode,
    ManipulationSettings,
    ModeInfo,
    get_mode_info,
)
from calcgrapher.core.curves.presets import PresetCycler, PresetFunction, build_preset_functions
from calcgrapher.core.curves.second_derivative import SecondDerivativeCurve
from calcgrapher.core.curves.tools import AncillaryTool, ReferenceLine, TangentLine
from calcgrapher.core.curves.transformed import TransformedCurve

__all__ = [
    # Points
    "CurvePoint",
    "CurveSnapshot",
    "PointState",
    "PointType",
    # Curves
    "Curve",
    "DependentCurve",
    "DerivativeCurve",
    "IntegralCurve",
    "Position",
    "SecondDerivativeCurve",
    "Subscription",
    "TransformedCurve",
    # Manipulation
    "MODE_INFO",
    "CurveManipulationMode",
    "ManipulationSettings",
    "ModeInfo",
    "get_mode_info",
    "PresetCycler",
    "PresetFunction",
    "build_preset_functions",
    # Tools
    "AncillaryTool",
    "ReferenceLine",
    "TangentLine",
    # Errors
    "CurveError",
    "CurvePreconditionError",
    "CurveStateError",
]

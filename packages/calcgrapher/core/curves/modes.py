"""Manipulation modes and the user-facing mode/width settings."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from calcgrapher.core.config.models import CurveConfig


class CurveManipulationMode(str, Enum):
    """Shape-editing algorithm applied while dragging on a curve."""

    HILL = "hill"
    TRIANGLE = "triangle"
    PEDESTAL = "pedestal"
    PARABOLA = "parabola"
    SINUSOID = "sinusoid"
    FREEFORM = "freeform"
    TILT = "tilt"
    SHIFT = "shift"


class ModeInfo(BaseModel):
    """Static metadata attached to a manipulation mode."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tandem_prefix: str
    has_adjustable_width: bool


MODE_INFO: dict[CurveManipulationMode, ModeInfo] = {
    # Width-based modes
    CurveManipulationMode.HILL: ModeInfo(tandem_prefix="hill", has_adjustable_width=True),
    CurveManipulationMode.TRIANGLE: ModeInfo(tandem_prefix="triangle", has_adjustable_width=True),
    CurveManipulationMode.PEDESTAL: ModeInfo(tandem_prefix="pedestal", has_adjustable_width=True),
    CurveManipulationMode.PARABOLA: ModeInfo(tandem_prefix="parabola", has_adjustable_width=True),
    CurveManipulationMode.SINUSOID: ModeInfo(tandem_prefix="sinusoid", has_adjustable_width=True),
    # Whole-curve or point-wise modes
    CurveManipulationMode.FREEFORM: ModeInfo(tandem_prefix="freeform", has_adjustable_width=False),
    CurveManipulationMode.TILT: ModeInfo(tandem_prefix="tilt", has_adjustable_width=False),
    CurveManipulationMode.SHIFT: ModeInfo(tandem_prefix="shift", has_adjustable_width=False),
}


def get_mode_info(mode: CurveManipulationMode | str) -> ModeInfo:
    """Look up metadata for a mode.

    Args:
        mode: Mode enum member or its string value.

    Returns:
        ModeInfo for the mode.

    Raises:
        ValueError: If mode is not a known manipulation mode.
    """
    return MODE_INFO[CurveManipulationMode(mode)]


class ManipulationSettings(BaseModel):
    """Currently selected manipulation mode and width.

    Assignments are validated, so a width outside [width_min, width_max]
    is rejected at the point it is set.

    Example:
        >>> settings = ManipulationSettings.from_config(CurveConfig())
        >>> settings.mode = CurveManipulationMode.TRIANGLE
        >>> settings.width = 4.0
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    width_min: float = Field(default=2.0, gt=0.0, frozen=True)
    width_max: float = Field(default=20.0, gt=0.0, frozen=True)
    width_default: float = Field(default=6.0, gt=0.0, frozen=True)
    mode: CurveManipulationMode = CurveManipulationMode.HILL
    width: float = 6.0

    @field_validator("width")
    @classmethod
    def _validate_width(cls, value: float, info: ValidationInfo) -> float:
        width_min = info.data.get("width_min", 0.0)
        width_max = info.data.get("width_max", float("inf"))
        if not width_min <= value <= width_max:
            raise ValueError(f"width {value} outside [{width_min}, {width_max}]")
        return value

    @classmethod
    def from_config(cls, config: CurveConfig) -> ManipulationSettings:
        """Build settings using the width range of a CurveConfig."""
        return cls(
            width=config.width_default,
            width_min=config.width_min,
            width_max=config.width_max,
            width_default=config.width_default,
        )

    @property
    def has_adjustable_width(self) -> bool:
        return get_mode_info(self.mode).has_adjustable_width

    def reset(self) -> None:
        """Return to HILL at the default width."""
        self.mode = CurveManipulationMode.HILL
        self.width = self.width_default

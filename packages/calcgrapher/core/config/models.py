"""Configuration models for Calcgrapher."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CurveConfig(BaseModel):
    """Discretization and manipulation constants shared by every curve.

    Immutable after creation; curves capture the instance they were built with.

    Example:
        >>> cfg = CurveConfig(x_min=0.0, x_max=10.0, number_of_points=101)
        >>> round(cfg.delta_x, 12)
        0.1
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Sample grid
    x_min: float = Field(default=0.0, description="Left edge of the curve domain")
    x_max: float = Field(default=30.0, description="Right edge of the curve domain")
    number_of_points: int = Field(default=1251, ge=2, description="Samples across the domain")

    # Point classification
    discontinuity_slope_threshold: float = Field(
        default=12.0,
        gt=0.0,
        description="Jump/deltaX ratio (1/x-units) at or above which a point is discontinuous",
    )
    cusp_angle_threshold: float = Field(
        default=math.radians(25.0),
        gt=0.0,
        description="Difference (radians) between left and right secant angles marking a cusp",
    )

    # Shape manipulation
    max_y: float = Field(default=5.0, gt=0.0, description="Half-range of the y axis")
    typical_y: float = Field(default=4.0, gt=0.0, description="Amplitude of preset functions")
    edge_slope_factor: float = Field(
        default=1.5, ge=0.0, description="Width of the pedestal's rounded edges"
    )
    max_tilt_degrees: float = Field(default=45.0, ge=0.0, lt=90.0)
    smoothing_window: float = Field(
        default=1.0, gt=0.0, description="Model-x width of the smoothing moving average"
    )
    freeform_min_x_spacing: float = Field(
        default=0.01, ge=0.0, description="Freeform drag samples closer than this are coalesced"
    )
    freeform_smoothing_passes: int = Field(default=3, ge=0)
    freeform_smoothing_points: int = Field(default=5, ge=3)

    # Undo
    max_undo: int = Field(default=20, ge=1, description="Saved states kept per point")

    # Manipulation width
    width_min: float = Field(default=2.0, gt=0.0)
    width_max: float = Field(default=20.0, gt=0.0)
    width_default: float = Field(default=6.0, gt=0.0)

    @model_validator(mode="after")
    def _validate_ranges(self) -> Self:
        if self.x_min >= self.x_max:
            raise ValueError(f"x_min must be < x_max, got [{self.x_min}, {self.x_max}]")
        if not self.width_min <= self.width_default <= self.width_max:
            raise ValueError(
                f"width_default {self.width_default} outside [{self.width_min}, {self.width_max}]"
            )
        if self.freeform_smoothing_points % 2 == 0:
            raise ValueError("freeform_smoothing_points must be odd")
        return self

    @property
    def x_range(self) -> tuple[float, float]:
        """Domain as a (min, max) tuple."""
        return (self.x_min, self.x_max)

    @property
    def delta_x(self) -> float:
        """Spacing between adjacent samples."""
        return (self.x_max - self.x_min) / (self.number_of_points - 1)

    @property
    def max_tilt(self) -> float:
        """Maximum tilt angle in radians."""
        return math.radians(self.max_tilt_degrees)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file; stdout when None")


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    curve: CurveConfig = Field(default_factory=CurveConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path."""
        return Path("calcgrapher.yaml")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path, falling back to defaults when the file is missing.

        Raises:
            ValidationError: If config is invalid
        """
        from calcgrapher.core.config.loader import load_app_config

        return load_app_config(path)  # type: ignore[return-value]

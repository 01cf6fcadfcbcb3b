"""Curve point models.

This module defines the sample-level primitives shared by every curve:
- PointType: local shape classification of a sample
- CurvePoint: one mutable sample with a fixed x and a bounded undo history
- PointState: an immutable (x, y, point_type) view of a sample
- CurveSnapshot: an opaque capture of a whole curve for restore

A y value of NaN marks a hole: the function does not exist at that sample.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
import math
from pathlib import Path
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_serializer,
    field_validator,
    model_validator,
)

from calcgrapher.core.utils.json import read_json, write_json


class PointType(str, Enum):
    """Local shape of a curve at one sample."""

    SMOOTH = "smooth"  # Continuous and differentiable
    CUSP = "cusp"  # Continuous, not differentiable
    DISCONTINUOUS = "discontinuous"  # Jump


class PointState(BaseModel):
    """Immutable view of one sample.

    Holes are carried as NaN in memory and as null in JSON.

    Example:
        >>> state = PointState(x=1.0, y=None)
        >>> math.isnan(state.y)
        True
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    point_type: PointType = PointType.SMOOTH

    @field_validator("y", mode="before")
    @classmethod
    def _none_is_hole(cls, value: Any) -> Any:
        return math.nan if value is None else value

    @field_serializer("y", when_used="json")
    def _hole_is_null(self, value: float) -> float | None:
        return value if math.isfinite(value) else None


class CurvePoint(BaseModel):
    """A single mutable sample of a curve.

    x is fixed for the lifetime of the point. y and point_type are mutated
    in place by the owning curve. Each save() pushes the current state onto
    a history bounded by max_undo; the oldest entry is dropped when full.

    Attributes:
        x: Sample position (frozen).
        y: Sample value, NaN for a hole.
        point_type: Classification of the local shape.
        max_undo: Number of saved states retained.

    Example:
        >>> point = CurvePoint(x=0.5, y=1.0)
        >>> point.save()
        >>> point.y = 3.0
        >>> point.undo_to_last_save()
        >>> point.y
        1.0
    """

    model_config = ConfigDict(extra="forbid")

    x: float = Field(..., frozen=True)
    y: float = 0.0
    point_type: PointType = PointType.SMOOTH
    max_undo: int = Field(default=20, ge=1, frozen=True, repr=False)

    _initial_y: float = PrivateAttr(default=0.0)
    _initial_point_type: PointType = PrivateAttr(default=PointType.SMOOTH)
    _saved_states: deque[tuple[float, PointType]] = PrivateAttr()

    @model_validator(mode="after")
    def _validate_x(self) -> Self:
        if not math.isfinite(self.x):
            raise ValueError(f"x must be finite, got {self.x}")
        return self

    def model_post_init(self, __context: Any) -> None:
        self._initial_y = self.y
        self._initial_point_type = self.point_type
        self._saved_states = deque(maxlen=self.max_undo)

    @property
    def exists(self) -> bool:
        """False when the sample is a hole."""
        return math.isfinite(self.y)

    @property
    def is_smooth(self) -> bool:
        return self.point_type is PointType.SMOOTH

    @property
    def is_cusp(self) -> bool:
        return self.point_type is PointType.CUSP

    @property
    def is_discontinuous(self) -> bool:
        return self.point_type is PointType.DISCONTINUOUS

    @property
    def initial_y(self) -> float:
        return self._initial_y

    @property
    def has_saved_state(self) -> bool:
        return len(self._saved_states) > 0

    @property
    def last_saved_y(self) -> float:
        """The most recently saved y, or the initial y when nothing is saved."""
        if not self._saved_states:
            return self._initial_y
        return self._saved_states[-1][0]

    def get_slope(self, other: CurvePoint) -> float:
        """Slope of the secant line through this point and other.

        Returns NaN when either point is a hole.
        """
        return (other.y - self.y) / (other.x - self.x)

    def save(self) -> None:
        """Push the current y and point type onto the history."""
        self._saved_states.append((self.y, self.point_type))

    def undo_to_last_save(self) -> None:
        """Pop the most recent saved state and restore it.

        With an empty history the point returns to its initial state.
        """
        if self._saved_states:
            self.y, self.point_type = self._saved_states.pop()
        else:
            self.y = self._initial_y
            self.point_type = self._initial_point_type

    def reset(self) -> None:
        """Restore the initial state and clear the history."""
        self.y = self._initial_y
        self.point_type = self._initial_point_type
        self._saved_states.clear()

    def to_state(self) -> PointState:
        """Return an immutable view of this point."""
        return PointState(x=self.x, y=self.y, point_type=self.point_type)


class CurveSnapshot(BaseModel):
    """Opaque capture of a curve's samples.

    Undo histories are not captured. Restoring a snapshot is only accepted
    when its grid matches the target curve's grid exactly.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    points: tuple[PointState, ...] = Field(..., min_length=2)

    @model_validator(mode="after")
    def _validate_monotonic_x(self) -> Self:
        """Validate that x values are strictly increasing."""
        for previous, current in zip(self.points, self.points[1:]):
            if current.x <= previous.x:
                raise ValueError("CurveSnapshot.points must have strictly increasing x")
        return self

    def to_json(self, path: str | Path) -> None:
        """Write the snapshot to a JSON file (holes become null)."""
        write_json(path, self.model_dump(mode="json"))

    @classmethod
    def from_json(cls, path: str | Path) -> CurveSnapshot:
        """Read a snapshot written by to_json()."""
        return cls.model_validate(read_json(path))

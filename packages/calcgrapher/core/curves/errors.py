"""Exceptions raised by the curve model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class CurveErrorData(BaseModel):
    """Structured data describing a rejected curve operation.

    Args:
        message: Human-readable error description
        expected: What the curve required (grid length, x value, ...)
        actual: What the caller supplied
    """

    message: str
    expected: Any = None
    actual: Any = None


class CurveError(ValueError):
    """Base exception for curve model errors."""


class CurvePreconditionError(CurveError):
    """A caller violated an operation's precondition.

    Raised for out-of-range positions, TILT at x=0, unknown modes or
    non-positive widths. These indicate a caller bug, not user data.
    """


class CurveStateError(CurveError):
    """A snapshot could not be restored onto a curve's sample grid."""

    def __init__(self, *, message: str, expected: Any = None, actual: Any = None) -> None:
        self.data = CurveErrorData(message=message, expected=expected, actual=actual)
        self.message = self.data.message
        self.expected = self.data.expected
        self.actual = self.data.actual

        super().__init__(str(self))

    def __str__(self) -> str:
        """Format error for logging and display."""
        parts = [self.message]
        if self.expected is not None:
            parts.append(f"expected={self.expected}")
        if self.actual is not None:
            parts.append(f"actual={self.actual}")
        return " | ".join(parts)

"""Preset functions that can replace the editable curve in one step.

Each preset is a math function of x, optionally restricted to a set of
x_positions: the function is evaluated only there and the rest of the grid
is linearly interpolated, which turns a smooth function into a piecewise
linear one with cusps at the positions.
"""

from __future__ import annotations

from collections.abc import Callable
import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from calcgrapher.core.config.models import CurveConfig
from calcgrapher.core.utils.logging import get_logger

if TYPE_CHECKING:
    from calcgrapher.core.curves.transformed import TransformedCurve

logger = get_logger(__name__)

MathFunction = Callable[[float], float]


class PresetFunction(BaseModel):
    """A named math function, optionally sampled only at x_positions."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    math_function: MathFunction
    x_positions: tuple[float, ...] | None = Field(default=None, min_length=2)


def create_x_positions(spacing: float, x_min: float, x_max: float) -> tuple[float, ...]:
    """Equally spaced positions from x_min to x_max inclusive.

    Example:
        >>> create_x_positions(0.5, 0.0, 2.0)
        (0.0, 0.5, 1.0, 1.5, 2.0)
    """
    if spacing <= 0:
        raise ValueError(f"spacing must be > 0, got {spacing}")
    count = int(round((x_max - x_min) / spacing)) + 1
    return tuple(x_min + i * spacing for i in range(count))


def build_preset_functions(config: CurveConfig | None = None) -> list[PresetFunction]:
    """Build the built-in presets for a curve domain.

    Amplitudes use config.typical_y; frequencies are relative to the domain
    length so every preset fits the same number of periods on any domain.
    """
    config = config or CurveConfig()
    amplitude = config.typical_y
    length = config.x_max - config.x_min
    center = (config.x_min + config.x_max) / 2

    def sine(x: float) -> float:
        return amplitude * math.sin(2 * math.pi * 5 * x / length)

    def fast_sine(x: float) -> float:
        return amplitude * math.sin(2 * math.pi * 20 * x / length)

    def chirp(x: float) -> float:
        return amplitude * math.sin(
            2 * math.pi * 20 * x / length * math.sin((x - center) ** 2 / 10)
        )

    def cosine_of_square(x: float) -> float:
        return amplitude * math.cos((x - center) ** 2)

    def modulo_parabola(x: float) -> float:
        return ((x - center) ** 2 / 10) % amplitude

    def stepped_sine(x: float) -> float:
        return amplitude * math.floor(amplitude / 2 * math.sin(2 * math.pi * 5 * x / length))

    def positions(spacing: float) -> tuple[float, ...]:
        return create_x_positions(spacing, config.x_min, config.x_max)

    return [
        PresetFunction(name="sine", math_function=sine),
        PresetFunction(name="sine_piecewise", math_function=sine, x_positions=positions(0.25)),
        PresetFunction(name="fast_sine", math_function=fast_sine),
        PresetFunction(name="chirp", math_function=chirp),
        PresetFunction(name="cosine_of_square", math_function=cosine_of_square),
        PresetFunction(
            name="cosine_of_square_piecewise",
            math_function=cosine_of_square,
            x_positions=positions(1.0),
        ),
        PresetFunction(name="modulo_parabola", math_function=modulo_parabola),
        PresetFunction(
            name="modulo_parabola_piecewise",
            math_function=modulo_parabola,
            x_positions=positions(1.0),
        ),
        PresetFunction(name="stepped_sine", math_function=stepped_sine),
        PresetFunction(
            name="stepped_sine_piecewise", math_function=stepped_sine, x_positions=positions(1.0)
        ),
    ]


class PresetCycler:
    """Steps through presets with wrap-around, applying each to a curve.

    Example:
        >>> cycler = PresetCycler(curve)
        >>> cycler.next().name
        'sine_piecewise'
        >>> cycler.previous().name
        'sine'
    """

    def __init__(
        self, curve: TransformedCurve, presets: list[PresetFunction] | None = None
    ) -> None:
        self.curve = curve
        self.presets = presets if presets is not None else build_preset_functions(curve.config)
        if not self.presets:
            raise ValueError("presets cannot be empty")
        self.index = 0

    @property
    def current(self) -> PresetFunction:
        return self.presets[self.index]

    def apply_current(self) -> PresetFunction:
        """Apply the current preset to the curve without moving."""
        self.curve.apply_preset_function(self.current)
        return self.current

    def step(self, offset: int) -> PresetFunction:
        """Move by offset (negative goes back), wrap, and apply."""
        self.index = (self.index + offset) % len(self.presets)
        logger.debug("Preset %d/%d: %s", self.index, len(self.presets), self.current.name)
        return self.apply_current()

    def next(self) -> PresetFunction:
        return self.step(1)

    def previous(self) -> PresetFunction:
        return self.step(-1)

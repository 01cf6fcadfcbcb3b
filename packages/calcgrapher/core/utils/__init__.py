"""Shared utilities for Calcgrapher."""

from calcgrapher.core.utils.json import read_json, to_json_value, write_json
from calcgrapher.core.utils.math import clamp, lerp, round_symmetric

__all__ = [
    "clamp",
    "lerp",
    "read_json",
    "round_symmetric",
    "to_json_value",
    "write_json",
]

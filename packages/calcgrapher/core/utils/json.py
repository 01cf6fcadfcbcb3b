"""JSON utilities for curve data.

Curve samples use NaN for holes, which JSON cannot represent. Every
non-finite float is written as null, whether it is a Python float, a
numpy scalar, or an element of a numpy array.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import math
from pathlib import Path
from typing import Any

import numpy as np

from calcgrapher.core.utils.logging import get_logger

logger = get_logger(__name__)


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def to_json_value(obj: Any) -> Any:
    """Convert obj into plain JSON types, with holes as None.

    Handles:
    - float / numpy floating -> float, or None when NaN or infinite
    - numpy integer -> int
    - numpy arrays -> nested lists (same float rule per element)
    - pathlib.Path -> str
    - mappings, lists and tuples -> converted recursively

    Example:
        >>> to_json_value({"ys": np.array([0.0, np.nan])})
        {'ys': [0.0, None]}
    """
    if isinstance(obj, bool) or obj is None or isinstance(obj, (str, int)):
        return obj
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        return _finite_or_none(float(obj))
    if isinstance(obj, np.ndarray):
        return [to_json_value(item) for item in obj.tolist()]
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Mapping):
        return {str(key): to_json_value(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json_value(item) for item in obj]
    return str(obj)


def write_json(path: str | Path, obj: Any) -> None:
    """Write object to JSON file with pretty formatting.

    Args:
        path: Output file path
        obj: Object to serialize. Non-finite floats are written as null.
    """
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    path_obj.write_text(
        json.dumps(to_json_value(obj), indent=2, ensure_ascii=False, allow_nan=False),
        encoding="utf-8",
    )
    logger.debug("Wrote JSON to %s", path_obj)


def read_json(path: str | Path) -> dict[str, Any]:
    """Read and parse a JSON object file.

    Args:
        path: Input file path

    Returns:
        Parsed JSON as dictionary

    Raises:
        ValueError: If the top-level value is not an object.
    """
    data: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object, got {type(data).__name__}")
    return data

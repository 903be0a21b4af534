"""NaN/Inf scrubbing utilities for JSON-safe output."""

import math
from typing import Any

import numpy as np


def scrub_value(value: Any) -> Any:
    """Replace NaN/inf with None, unwrapping numpy scalars and nested containers."""
    if isinstance(value, dict):
        return {k: scrub_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [scrub_value(v) for v in value]
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (float, np.floating)):
        fv = float(value)
        return None if (math.isnan(fv) or math.isinf(fv)) else fv
    return value


def scrub_nan(records: list[dict]) -> list[dict]:
    """Replace NaN/inf with None in a list of dicts for valid JSON."""
    return [scrub_value(row) for row in records]


def safe_float(value: Any, default: float = 0.0) -> float:
    """Convert value to float, returning default for NaN/None/inf."""
    if value is None:
        return default
    try:
        f = float(value)
        return default if (math.isnan(f) or math.isinf(f)) else f
    except (TypeError, ValueError):
        return default

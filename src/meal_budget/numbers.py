"""Numeric coercion and rounding helpers shared by the services."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, independent of float banker's rounding."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def to_float(value: object, default: float = 0.0) -> float:
    """Coerce stored values to a finite float, falling back to ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not math.isfinite(result):
        return default
    return result


def non_negative(value: object) -> float:
    """Coerce to a float, mapping invalid and negative values to zero."""
    return max(to_float(value), 0.0)

"""Small numeric helpers shared across the scheduling engine."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up.

    Python's built-in ``round`` uses banker's rounding (``round(6.5) == 6``),
    which would make study-time estimates and scores drift by a point on
    exact halves.
    """
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))

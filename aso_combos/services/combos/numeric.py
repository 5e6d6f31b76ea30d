"""Numeric helpers shared by combo scoring modules."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))

"""Small numeric helpers shared by the model stages."""

from __future__ import annotations

import math


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_pct(value: float) -> float:
    """Clamp a percentage into [0, 100]."""
    return clamp(value, 0.0, 100.0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3).

    The builtin ``round`` rounds halves to even, which would make request
    counts depend on parity.
    """
    return int(math.floor(value + 0.5))

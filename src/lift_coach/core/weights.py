"""
Weight rounding and snapping helpers.

Every prescribed weight passes through here so that it lands either on a
weight the gym actually has or on the default 2.5 kg grid.
"""

import math
from typing import Sequence

from .config import DEFAULT_LADDER_HEADROOM_KG, DEFAULT_LADDER_MIN_TOP_KG, WEIGHT_STEP_KG


def round_half_up(value: float, step: float = WEIGHT_STEP_KG) -> float:
    """
    Round value to the nearest multiple of step, halves rounding up.

    Python's round() uses banker's rounding (round(22.5) == 22), which would
    make identical inputs round differently depending on parity.

    Examples:
        round_half_up(56.0)       -> 55.0
        round_half_up(68.0)       -> 67.5
        round_half_up(81.6, 0.5)  -> 81.5
    """
    if step <= 0:
        return value
    return math.floor(value / step + 0.5) * step


def nearest_weight(target: float, available: Sequence[float] | None = None) -> float:
    """
    Snap target to the closest available weight.

    Ties go to the first weight in the list.  Without a list, rounds to the
    nearest WEIGHT_STEP_KG.
    """
    if not available:
        return round_half_up(target)

    closest = available[0]
    min_diff = abs(target - closest)
    for w in available:
        diff = abs(target - w)
        if diff < min_diff:
            min_diff = diff
            closest = w
    return closest


def highest_below(weight: float, available: Sequence[float]) -> float | None:
    """Highest available weight strictly below weight, or None."""
    lower = [w for w in available if w < weight]
    return max(lower) if lower else None


def highest_at_or_below(weight: float, available: Sequence[float]) -> float | None:
    """Highest available weight at or below weight, or None."""
    lower = [w for w in available if w <= weight]
    return max(lower) if lower else None


def default_weight_ladder(current_weight_kg: float) -> list[float]:
    """
    Weights on a 2.5 kg grid from 0 up to max(current + 20, 300).

    Used when the user has not recorded which weights their gym has.
    """
    top = max(current_weight_kg + DEFAULT_LADDER_HEADROOM_KG, DEFAULT_LADDER_MIN_TOP_KG)
    steps = int(top // WEIGHT_STEP_KG)
    return [round(i * WEIGHT_STEP_KG, 2) for i in range(steps + 1)]

"""
Warm-up ramp generation.

Light working weights need little or no ramp; anything above 20 kg gets the
full empty-bar / 50 / 70 / 85 % progression.  Warm-up sets are never logged
in the session.
"""

from typing import Sequence

from .config import (
    WARMUP_FULL_RAMP,
    WARMUP_NONE_MAX_KG,
    WARMUP_SHORT_MAX_KG,
    WARMUP_SINGLE_BELOW_KG,
)
from .models import WarmupSet
from .weights import nearest_weight


def _snap(target: float, available_weights: Sequence[float] | None) -> float:
    if target <= 0:
        return 0.0
    return nearest_weight(target, available_weights)


def generate_warmup_sets(
    working_weight_kg: float,
    available_weights: Sequence[float] | None = None,
) -> list[WarmupSet]:
    """
    Build the warm-up ramp for a working weight.

    Tiers:
        <= 0 kg    no warm-up
        < 8 kg     one unloaded set of 10
        8 - 20 kg  unloaded x10, then 50% x8 unless 50% rounds to nothing
        > 20 kg    0% x10, 50% x8, 70% x5, 85% x3

    Args:
        working_weight_kg: First working-set weight
        available_weights: Weights the gym has; when empty, round to 2.5 kg

    Returns:
        Ordered list of WarmupSet
    """
    if working_weight_kg <= WARMUP_NONE_MAX_KG:
        return []

    if working_weight_kg < WARMUP_SINGLE_BELOW_KG:
        return [WarmupSet(weight_kg=0.0, reps=10, label="unloaded")]

    if working_weight_kg <= WARMUP_SHORT_MAX_KG:
        sets = [WarmupSet(weight_kg=0.0, reps=10, label="unloaded")]
        half = _snap(working_weight_kg * 0.5, available_weights)
        if half > 0:
            sets.append(WarmupSet(weight_kg=half, reps=8, label="50%"))
        return sets

    return [
        WarmupSet(
            weight_kg=_snap(working_weight_kg * fraction, available_weights),
            reps=reps,
            label=label,
        )
        for fraction, reps, label in WARMUP_FULL_RAMP
    ]

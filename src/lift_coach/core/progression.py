"""
Progression engine: last session's performance -> next prescription.

The cycle is deliberately simple and predictable:

    start at weight x target reps @ 2 RIR
    -> clean success below the rep ceiling: +1 rep
    -> reps reach target + 2 with good RIR: +weight, reps back to target
    -> missed reps or max effort: repeat the same weight and reps
    -> more than 25% of the planned reps missed: drop to the next lower weight

Only the PROGRAM target reps feed the calculation, never a previously
prescribed value from history.
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .config import (
    DELOAD_INTERVAL_WEEKS,
    GOOD_RIR,
    HYPERTROPHY_MIN_WEEKS,
    INCREMENT_COMPOUND_KG,
    INCREMENT_ISOLATION_KG,
    MODERATE_RIR,
    NEXT_WEIGHT_TOLERANCE_KG,
    PHASE_MIN_CONSISTENCY,
    PHASE_PAIN_HOLD_THRESHOLD,
    REGRESSION_DEFICIT_THRESHOLD,
    REP_CEILING_HEAVY,
    REP_CEILING_VOLUME,
    TOP_OF_RANGE_MARGIN,
    TRANSITION_MIN_WEEKS,
)
from .models import ExerciseCategory, ProgressionResult, SessionIntensity, TrainingPhase
from .weights import highest_below

logger = logging.getLogger(__name__)

REASON_NO_DATA = "No set data from the previous session"
REASON_REGRESSION = "Significant regression: lowering the load to rebuild"
REASON_CEILING = "Rep ceiling reached: no heavier weight available"
REASON_ADD_REP = "Good performance: add one rep"
REASON_ADD_REP_MODERATE = "Moderate effort: add one rep cautiously"
REASON_CONSOLIDATE = "Incomplete sets or maximal effort: repeat to consolidate"


@dataclass(frozen=True)
class ProgressionInput:
    """Everything the progression rule needs for one exercise."""

    program_target_reps: int
    program_target_sets: int
    last_weight_kg: float
    last_reps_per_set: Sequence[int]
    last_avg_rir: float
    available_weights: Sequence[float] = field(default_factory=tuple)
    phase: TrainingPhase = "hypertrophy"
    session_intensity: SessionIntensity | None = None
    exercise_category: ExerciseCategory | None = None


def rep_ceiling(
    phase: TrainingPhase,
    session_intensity: SessionIntensity | None = None,
) -> int:
    """
    Upper bound of the rep range before progression switches to weight.

    The session intensity (daily undulating periodization) wins over the
    phase: heavy -> 8, volume -> 12.  Otherwise strength phase -> 8, else 12.
    """
    if session_intensity == "heavy":
        return REP_CEILING_HEAVY
    if session_intensity == "volume":
        return REP_CEILING_VOLUME
    return REP_CEILING_HEAVY if phase == "strength" else REP_CEILING_VOLUME


def find_next_weight(
    current_weight_kg: float,
    available_weights: Sequence[float],
    exercise_category: ExerciseCategory | None = None,
) -> float:
    """
    Next load step above the current weight.

    Isolation lifts step by 1.25 kg, everything else by 2.5 kg.  Picks the
    lightest available weight within the step (plus a small tolerance), else
    the lightest weight above the current one.  Returns current_weight_kg
    when nothing heavier exists.
    """
    higher = sorted(w for w in available_weights if w > current_weight_kg)
    if not higher:
        return current_weight_kg

    increment = INCREMENT_ISOLATION_KG if exercise_category == "isolation" else INCREMENT_COMPOUND_KG
    target = current_weight_kg + increment

    for w in higher:
        if w <= target + NEXT_WEIGHT_TOLERANCE_KG:
            return w
    return higher[0]


def _round_reps(value: float) -> int:
    # Rep averages round half up (6.5 -> 7), never to even.
    return int(value + 0.5)


def calculate_progression(inp: ProgressionInput) -> ProgressionResult:
    """
    Calculate the next weight and reps from the last session.

    Rules are checked in order; the first match wins:
        1. no previous sets        -> maintain at program target
        2. > 25% of reps missed    -> decrease to the next lower weight
        3. top of range, RIR >= 2  -> increase weight, reps back to target
        4. target met, RIR >= 2    -> +1 rep (capped at the rep ceiling)
        5. target met, RIR in [1,2) -> +1 rep (same cap)
        6. otherwise               -> maintain

    Args:
        inp: ProgressionInput for one exercise

    Returns:
        ProgressionResult (deterministic for identical input)
    """
    target_reps = inp.program_target_reps
    last_weight = inp.last_weight_kg
    reps = list(inp.last_reps_per_set)

    if not reps:
        return ProgressionResult(
            next_weight_kg=last_weight,
            next_reps=target_reps,
            action="maintain",
            reason=REASON_NO_DATA,
        )

    total_actual = sum(reps)
    avg_reps = total_actual / len(reps)
    min_reps = min(reps)
    ceiling = rep_ceiling(inp.phase, inp.session_intensity)

    completed_target = min_reps >= target_reps
    good_rir = inp.last_avg_rir >= GOOD_RIR
    moderate_rir = inp.last_avg_rir >= MODERATE_RIR
    top_of_range = avg_reps >= target_reps + TOP_OF_RANGE_MARGIN

    total_expected = inp.program_target_sets * target_reps
    rep_deficit = 1 - total_actual / total_expected if total_expected > 0 else 0.0

    if rep_deficit > REGRESSION_DEFICIT_THRESHOLD:
        lower = highest_below(last_weight, inp.available_weights)
        logger.debug(
            "regression: deficit=%.3f, %s -> %s kg", rep_deficit, last_weight, lower
        )
        return ProgressionResult(
            next_weight_kg=lower if lower is not None else last_weight,
            next_reps=target_reps,
            action="decrease",
            reason=REASON_REGRESSION,
        )

    if completed_target and good_rir and top_of_range:
        next_weight = find_next_weight(last_weight, inp.available_weights, inp.exercise_category)
        if next_weight > last_weight:
            return ProgressionResult(
                next_weight_kg=next_weight,
                next_reps=target_reps,
                action="increase_weight",
                reason=f"Progression: moving up to {next_weight:g} kg",
            )
        return ProgressionResult(
            next_weight_kg=last_weight,
            next_reps=_round_reps(avg_reps),
            action="maintain",
            reason=REASON_CEILING,
        )

    if completed_target and good_rir:
        current = _round_reps(avg_reps)
        next_reps = min(current + 1, ceiling)
        if next_reps > current:
            return ProgressionResult(
                next_weight_kg=last_weight,
                next_reps=next_reps,
                action="increase_reps",
                reason=REASON_ADD_REP,
            )
        return ProgressionResult(
            next_weight_kg=last_weight,
            next_reps=current,
            action="maintain",
            reason=REASON_CEILING,
        )

    if completed_target and moderate_rir:
        current = _round_reps(avg_reps)
        next_reps = min(current + 1, ceiling)
        if next_reps > current:
            return ProgressionResult(
                next_weight_kg=last_weight,
                next_reps=next_reps,
                action="increase_reps",
                reason=REASON_ADD_REP_MODERATE,
            )
        return ProgressionResult(
            next_weight_kg=last_weight,
            next_reps=current,
            action="maintain",
            reason=REASON_CEILING,
        )

    return ProgressionResult(
        next_weight_kg=last_weight,
        next_reps=target_reps,
        action="maintain",
        reason=REASON_CONSOLIDATE,
    )


def should_deload(weeks_since_last_deload: int) -> bool:
    """True once DELOAD_INTERVAL_WEEKS of loading have accumulated."""
    return weeks_since_last_deload >= DELOAD_INTERVAL_WEEKS


@dataclass(frozen=True)
class PhaseInput:
    """Inputs for the block-level phase recommendation."""

    current_phase: str  # "hypertrophy" | "transition" | "strength"
    weeks_in_phase: int
    avg_pain_level: float
    progression_consistency: float  # fraction of sessions that progressed


def recommend_phase(inp: PhaseInput) -> str:
    """
    Recommend the training phase for the coming week.

    hypertrophy -> transition after 6+ weeks, transition -> strength after 4+
    weeks, both only with progression consistency >= 0.7.  Average pain
    above 2 always holds the current phase.
    """
    if inp.avg_pain_level > PHASE_PAIN_HOLD_THRESHOLD:
        return inp.current_phase

    consistent = inp.progression_consistency >= PHASE_MIN_CONSISTENCY

    if inp.current_phase == "hypertrophy" and inp.weeks_in_phase >= HYPERTROPHY_MIN_WEEKS and consistent:
        return "transition"

    if inp.current_phase == "transition" and inp.weeks_in_phase >= TRANSITION_MIN_WEEKS and consistent:
        return "strength"

    return inp.current_phase

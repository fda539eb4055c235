"""
Pain feedback: recent pain reports -> per-exercise overrides.

Four-tier model on the rolling maximum pain per body zone, applied to every
exercise contraindicated for that zone:

    0-2   OK            no adjustment
    3-4   discomfort    no_progression (hold last weight)
    5-6   pain          reduce_weight (x0.8 of the last pain-free weight)
    7-10  severe        skip the exercise

Pain reported during a set of a given exercise additionally forces
no_progression on that exercise.  When several rules hit one exercise the
most severe action wins: skip > reduce_weight > no_progression.
"""

from datetime import datetime, timedelta
from typing import Iterable, Mapping, Sequence

from .config import (
    PAIN_ACTION_PRIORITY,
    PAIN_NO_PROGRESSION_MIN,
    PAIN_REDUCE_WEIGHT_MIN,
    PAIN_SKIP_MIN,
    PAIN_WEIGHT_MULTIPLIER,
    PAIN_WINDOW_DAYS,
)
from .models import PainAction, PainAdjustment, PainFeedbackEntry, PainLog, PainTarget


def pain_tier(level: int) -> PainAction | None:
    """Action implied by a zone's max pain level, or None for 0-2."""
    if level >= PAIN_SKIP_MIN:
        return "skip"
    if level >= PAIN_REDUCE_WEIGHT_MIN:
        return "reduce_weight"
    if level >= PAIN_NO_PROGRESSION_MIN:
        return "no_progression"
    return None


def keep_most_severe(adjustments: Iterable[PainAdjustment]) -> list[PainAdjustment]:
    """
    Collapse adjustments to one per exercise, keeping the most severe.

    Among equally severe adjustments the first one seen is kept.  Output
    order follows the first appearance of each exercise.
    """
    kept: dict[str, PainAdjustment] = {}
    for adj in adjustments:
        existing = kept.get(adj.exercise_id)
        if existing is None or (
            PAIN_ACTION_PRIORITY[adj.action] > PAIN_ACTION_PRIORITY[existing.action]
        ):
            kept[adj.exercise_id] = adj
    return list(kept.values())


def _zone_adjustment(
    entry: PainFeedbackEntry,
    target: PainTarget,
    action: PainAction,
    reference_weights: Mapping[str, float] | None,
) -> PainAdjustment:
    level = entry.max_pain_level
    if action == "skip":
        return PainAdjustment(
            exercise_id=target.exercise_id,
            exercise_name=target.exercise_name,
            action="skip",
            reason=f"Severe pain ({level}/10) at {entry.zone}: exercise not advised",
        )
    if action == "reduce_weight":
        return PainAdjustment(
            exercise_id=target.exercise_id,
            exercise_name=target.exercise_name,
            action="reduce_weight",
            reason=f"Pain ({level}/10) at {entry.zone}: load reduced by 20%",
            weight_multiplier=PAIN_WEIGHT_MULTIPLIER,
            reference_weight_kg=(reference_weights or {}).get(target.exercise_id),
        )
    return PainAdjustment(
        exercise_id=target.exercise_id,
        exercise_name=target.exercise_name,
        action="no_progression",
        reason=f"Discomfort ({level}/10) at {entry.zone}: progression on hold",
    )


def calculate_pain_adjustments(
    pain_feedback: Sequence[PainFeedbackEntry],
    exercises: Sequence[PainTarget],
    reference_weights: Mapping[str, float] | None = None,
) -> list[PainAdjustment]:
    """
    Determine pain-driven adjustments for the exercises of a session.

    Args:
        pain_feedback: One rolling-window summary per body zone
        exercises: Session exercises with their contraindicated zones
        reference_weights: exercise_id -> last weight logged while pain-free.
            reduce_weight scales from this instead of the current prescription
            so repeated reductions do not spiral downwards.

    Returns:
        At most one PainAdjustment per exercise
    """
    if not pain_feedback:
        return []

    candidates: list[PainAdjustment] = []
    by_name = {}
    for ex in exercises:
        by_name.setdefault(ex.exercise_name, ex)

    for entry in pain_feedback:
        action = pain_tier(entry.max_pain_level)
        if action is not None:
            for ex in exercises:
                if entry.zone in ex.contraindications:
                    candidates.append(_zone_adjustment(entry, ex, action, reference_weights))

        for name in sorted(entry.during_exercises):
            ex = by_name.get(name)
            if ex is not None:
                candidates.append(
                    PainAdjustment(
                        exercise_id=ex.exercise_id,
                        exercise_name=ex.exercise_name,
                        action="no_progression",
                        reason="Pain reported during this exercise: no progression",
                    )
                )

    return keep_most_severe(candidates)


def build_pain_feedback(
    logs: Iterable[PainLog],
    now: datetime,
    window_days: int = PAIN_WINDOW_DAYS,
) -> list[PainFeedbackEntry]:
    """
    Reduce raw pain logs to one PainFeedbackEntry per zone.

    Only logs dated within window_days before now (inclusive) count.  The
    entry carries the maximum level in the window and the names of the
    exercises during which pain was reported mid-set.

    Returns:
        Entries sorted by zone name
    """
    cutoff = now - timedelta(days=window_days)
    max_level: dict[str, int] = {}
    during: dict[str, set[str]] = {}

    for log in logs:
        if log.date < cutoff or log.date > now:
            continue
        max_level[log.zone] = max(max_level.get(log.zone, 0), log.level)
        names = during.setdefault(log.zone, set())
        if log.context == "during_set" and log.exercise_name:
            names.add(log.exercise_name)

    return [
        PainFeedbackEntry(
            zone=zone,  # type: ignore[arg-type]
            max_pain_level=max_level[zone],
            during_exercises=frozenset(during[zone]),
        )
        for zone in sorted(max_level)
    ]

"""
Filler suggestions for when the next machine is occupied.

Priority cascade, first match wins:

    1. active-wait pool, not yet done, no region clash with the next lift
    2. catalog mobility / rehab-compatible core, not yet done, no clash
    3. active-wait pool again, ignoring what was already done
    4. first pool exercise even if it clashes (last resort)
    5. nothing available -> None
"""

import re
from typing import Sequence

from .body_regions import classify_exercise_name, classify_muscles, regions_clash
from .config import (
    FILLER_CATALOG_COUNT,
    FILLER_CATALOG_DURATION,
    FILLER_CATALOG_REPS,
    FILLER_REST_BETWEEN_SETS,
    FILLER_SECONDS_PER_SET,
)
from .models import CatalogExercise, FillerSuggestion, RehabExerciseInfo

_TIMED_REPS = re.compile(r"(\d+)\s*s")


def estimate_duration(sets: int, reps: str) -> str:
    """
    Human-readable duration of a rehab exercise, e.g. "3 min".

    Time-based reps ("30 sec", "45s") use the parsed seconds per set, other
    reps assume 45 s per set.  30 s rest between sets; never under 1 min.
    """
    match = _TIMED_REPS.search(reps)
    per_set = int(match.group(1)) if match else FILLER_SECONDS_PER_SET
    total = sets * per_set + max(sets - 1, 0) * FILLER_REST_BETWEEN_SETS
    minutes = int(total / 60 + 0.5)
    return f"{max(minutes, 1)} min"


def _pool_clashes(info: RehabExerciseInfo, next_muscles: Sequence[str]) -> bool:
    if not next_muscles:
        return False
    return regions_clash(classify_exercise_name(info.exercise_name), classify_muscles(next_muscles))


def _catalog_clashes(exercise: CatalogExercise, next_muscles: Sequence[str]) -> bool:
    if not next_muscles or not exercise.primary_muscles:
        return False
    return regions_clash(classify_muscles(exercise.primary_muscles), classify_muscles(next_muscles))


def _from_pool(info: RehabExerciseInfo) -> FillerSuggestion:
    return FillerSuggestion(
        name=info.exercise_name,
        sets=info.sets,
        reps=info.reps,
        duration=estimate_duration(info.sets, info.reps),
        notes=info.notes,
        is_rehab=True,
    )


def _from_catalog(exercise: CatalogExercise) -> FillerSuggestion:
    return FillerSuggestion(
        name=exercise.name,
        sets=1,
        reps=FILLER_CATALOG_REPS,
        duration=FILLER_CATALOG_DURATION,
        notes=exercise.instructions,
        is_rehab=False,
    )


def _is_fallback_candidate(exercise: CatalogExercise) -> bool:
    if exercise.category == "mobility" or "cooldown" in exercise.tags:
        return True
    return exercise.category == "core" and "rehab_compatible" in exercise.tags


def suggest_filler(
    active_wait_pool: Sequence[RehabExerciseInfo],
    next_exercise_muscles: Sequence[str],
    completed_fillers: Sequence[str],
    all_exercises: Sequence[CatalogExercise] | None = None,
) -> FillerSuggestion | None:
    """
    Suggest one exercise to do while equipment is occupied.

    Args:
        active_wait_pool: Rehab exercises placed for active waiting
        next_exercise_muscles: Primary muscles of the next main exercise
        completed_fillers: Names of fillers already done this session
        all_exercises: Exercise catalog for the mobility fallback

    Returns:
        A FillerSuggestion, or None when neither pool nor catalog has anything
    """
    done = set(completed_fillers)

    for info in active_wait_pool:
        if info.exercise_name not in done and not _pool_clashes(info, next_exercise_muscles):
            return _from_pool(info)

    for exercise in all_exercises or ():
        if (
            _is_fallback_candidate(exercise)
            and exercise.name not in done
            and not _catalog_clashes(exercise, next_exercise_muscles)
        ):
            return _from_catalog(exercise)

    for info in active_wait_pool:
        if not _pool_clashes(info, next_exercise_muscles):
            return _from_pool(info)

    if active_wait_pool:
        return _from_pool(active_wait_pool[0])

    return None


def suggest_filler_from_catalog(
    session_muscles: Sequence[str],
    completed_fillers: Sequence[str],
    catalog: Sequence[CatalogExercise],
    count: int = FILLER_CATALOG_COUNT,
) -> list[FillerSuggestion]:
    """Up to count mobility / cooldown fillers that avoid the session's region."""
    done = set(completed_fillers)
    candidates = [
        ex
        for ex in catalog
        if (ex.category == "mobility" or "cooldown" in ex.tags)
        and ex.name not in done
        and not _catalog_clashes(ex, session_muscles)
    ]
    return [_from_catalog(ex) for ex in candidates[:count]]

"""Cooldown selection: mobility work for the muscles trained this session."""

from typing import Sequence

from .config import COOLDOWN_MAX_EXERCISES
from .models import CatalogExercise


def select_cooldown_exercises(
    session_muscles: Sequence[str],
    catalog: Sequence[CatalogExercise],
    max_count: int = COOLDOWN_MAX_EXERCISES,
) -> list[CatalogExercise]:
    """
    Pick cooldown exercises from the catalog.

    Mobility or cooldown-tagged exercises whose primary muscles overlap the
    session's muscles come first (case-insensitive match), padded with
    general mobility exercises when there are fewer than max_count.
    """
    if not session_muscles:
        return []

    trained = {m.lower() for m in session_muscles}

    candidates = [
        ex
        for ex in catalog
        if (ex.category == "mobility" or "cooldown" in ex.tags)
        and any(m.lower() in trained for m in ex.primary_muscles)
    ]

    if len(candidates) < max_count:
        candidates.extend(
            ex for ex in catalog if ex.category == "mobility" and ex not in candidates
        )

    return candidates[:max_count]

"""
Session engine: one live training session.

The engine owns the session-local state (exercise list, pointer, logged
sets, machine-occupied flag) and composes the pure components around it.
An external driver owns the clock and persistence and walks the session
through its phases:

    exercise pending -> warm-up -> (log set -> rest -> next set)*
    -> exercise complete -> next exercise ... -> session complete

The engine does not store the phase.  The driver derives it from the read
predicates (is_current_exercise_complete, is_session_complete,
is_waiting_for_machine).  Nothing here raises on out-of-range access:
reads return None / 0 / False once the session is complete and mutations
become logged no-ops.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .config import (
    BODYWEIGHT_ESTIMATE_LOW_REPS,
    BODYWEIGHT_FRACTION_HEAVY,
    BODYWEIGHT_FRACTION_LIGHT,
    DELOAD_MIN_REPS,
    DELOAD_WEIGHT_FACTOR,
    PAIN_ROUNDING_STEP_KG,
)
from .models import (
    ExerciseCategory,
    ExerciseHistory,
    ExerciseHistoryEntry,
    PainAdjustment,
    ProgramExercise,
    ProgramSession,
    ProgressionResult,
    SessionExercise,
    SessionIntensity,
    SessionSet,
    SkipReason,
    TrainingPhase,
    WarmupSet,
)
from .pain_feedback import keep_most_severe
from .progression import ProgressionInput, calculate_progression
from .warmup import generate_warmup_sets
from .weights import default_weight_ladder, highest_at_or_below, nearest_weight, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionEngineOptions:
    """Construction options for a SessionEngine."""

    available_weights: Sequence[float] = field(default_factory=tuple)
    phase: TrainingPhase = "hypertrophy"
    session_intensity: SessionIntensity | None = None  # defaults to the session's tag
    bodyweight_kg: float | None = None  # enables first-time weight estimates
    exercise_categories: Mapping[str, ExerciseCategory] = field(default_factory=dict)
    exercise_names: Mapping[str, str] = field(default_factory=dict)


class SessionEngine:
    """
    Stateful orchestrator for a single training session.

    Args:
        program_session: Ordered exercises with targets, from the planner
        history: exercise_id -> what was done last time
        options: Weights, phase, intensity and lookup tables
    """

    def __init__(
        self,
        program_session: ProgramSession,
        history: ExerciseHistory,
        options: SessionEngineOptions | None = None,
    ) -> None:
        self._session = program_session
        self._history = dict(history)
        self._options = options or SessionEngineOptions()
        self._intensity = self._options.session_intensity or program_session.intensity
        self._program_rows: dict[str, ProgramExercise] = {}
        self._progression_results: dict[str, ProgressionResult] = {}
        self._current_index = 0
        self._occupied = False

        self._exercises: list[SessionExercise] = []
        for pe in program_session.exercises:
            self._program_rows.setdefault(pe.exercise_id, pe)
            weight, reps = self._prescribe(pe, pe.exercise_id)
            self._exercises.append(
                SessionExercise(
                    exercise_id=pe.exercise_id,
                    order=pe.order,
                    prescribed_sets=pe.sets,
                    prescribed_reps=reps,
                    prescribed_weight_kg=weight,
                    rest_seconds=pe.rest_seconds,
                    exercise_name=self._options.exercise_names.get(pe.exercise_id, ""),
                )
            )

    # ------------------------------------------------------------------
    # Prescription
    # ------------------------------------------------------------------

    def _weights_for(self, reference_kg: float) -> Sequence[float]:
        if self._options.available_weights:
            return self._options.available_weights
        return default_weight_ladder(reference_kg)

    def _prescribe(self, pe: ProgramExercise, exercise_id: str) -> tuple[float, int]:
        """(weight, reps) for an exercise trained under the program row pe."""
        prev = self._history.get(exercise_id)

        if prev is None:
            return self._first_time_weight(pe), pe.target_reps

        if self._options.phase == "deload":
            target = round_half_up(prev.last_weight_kg * DELOAD_WEIGHT_FACTOR, 0.5)
            snapped = highest_at_or_below(target, self._weights_for(prev.last_weight_kg))
            weight = snapped if snapped is not None else target
            logger.debug("%s: deload %s -> %s kg", exercise_id, prev.last_weight_kg, weight)
            return weight, max(pe.target_reps, DELOAD_MIN_REPS)

        result = self._run_progression(pe, exercise_id, prev)
        return result.next_weight_kg, result.next_reps

    def _first_time_weight(self, pe: ProgramExercise) -> float:
        bodyweight = self._options.bodyweight_kg
        if not bodyweight or bodyweight <= 0:
            return 0.0
        fraction = (
            BODYWEIGHT_FRACTION_HEAVY
            if pe.target_reps <= BODYWEIGHT_ESTIMATE_LOW_REPS
            else BODYWEIGHT_FRACTION_LIGHT
        )
        return nearest_weight(bodyweight * fraction, self._options.available_weights or None)

    def _run_progression(
        self,
        pe: ProgramExercise,
        exercise_id: str,
        prev: ExerciseHistoryEntry,
    ) -> ProgressionResult:
        cached = self._progression_results.get(exercise_id)
        if cached is not None:
            return cached

        result = calculate_progression(
            ProgressionInput(
                program_target_reps=pe.target_reps,
                program_target_sets=pe.sets,
                last_weight_kg=prev.last_weight_kg,
                last_reps_per_set=prev.last_reps,
                last_avg_rir=prev.last_avg_rir,
                available_weights=self._weights_for(prev.last_weight_kg),
                phase=self._options.phase,
                session_intensity=self._intensity,
                exercise_category=self._options.exercise_categories.get(exercise_id),
            )
        )
        logger.debug(
            "%s: %s -> %s kg x %d (%s)",
            exercise_id,
            prev.last_weight_kg,
            result.next_weight_kg,
            result.next_reps,
            result.action,
        )
        self._progression_results[exercise_id] = result
        return result

    def get_progression_result(self, exercise_id: str) -> ProgressionResult | None:
        """Progression computed at construction (None for new exercises or deload)."""
        return self._progression_results.get(exercise_id)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    def get_current_exercise(self) -> SessionExercise | None:
        if self.is_session_complete():
            return None
        return self._exercises[self._current_index]

    def get_current_exercise_index(self) -> int:
        return self._current_index

    def get_current_set_number(self) -> int:
        """1-based number of the next set to log; 0 once the session is complete."""
        current = self.get_current_exercise()
        if current is None:
            return 0
        return len(current.logged_sets) + 1

    def is_current_exercise_complete(self) -> bool:
        current = self.get_current_exercise()
        if current is None:
            return False
        return len(current.logged_sets) >= current.prescribed_sets

    def is_session_complete(self) -> bool:
        return self._current_index >= len(self._exercises)

    def is_waiting_for_machine(self) -> bool:
        return self._occupied

    def get_all_exercises(self) -> tuple[SessionExercise, ...]:
        return tuple(self._exercises)

    def get_remaining_exercises(self) -> tuple[SessionExercise, ...]:
        return tuple(self._exercises[self._current_index:])

    def warmup_for_current_exercise(self) -> list[WarmupSet]:
        current = self.get_current_exercise()
        if current is None:
            return []
        return generate_warmup_sets(
            current.prescribed_weight_kg,
            self._options.available_weights or None,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def log_set(self, session_set: SessionSet) -> None:
        """Append a completed set to the current exercise.  Does not advance."""
        current = self.get_current_exercise()
        if current is None:
            logger.warning("log_set ignored: session is complete")
            return
        current.logged_sets.append(session_set)

    def complete_exercise(self) -> None:
        """Mark the current exercise done and move to the next one."""
        current = self.get_current_exercise()
        if current is None:
            logger.warning("complete_exercise ignored: session is complete")
            return
        current.status = "completed"
        self._advance()
        logger.info("completed %s (%d sets)", current.exercise_id, len(current.logged_sets))

    def skip_current_exercise(self, reason: SkipReason) -> None:
        """Skip the current exercise (machine unavailable, pain, time ...)."""
        current = self.get_current_exercise()
        if current is None:
            logger.warning("skip_current_exercise ignored: session is complete")
            return
        current.status = "skipped"
        current.skipped_reason = reason
        self._advance()
        logger.info("skipped %s (%s)", current.exercise_id, reason)

    def _advance(self) -> None:
        self._current_index += 1
        self._occupied = False

    def mark_occupied(self) -> None:
        self._occupied = True

    def mark_machine_free(self) -> None:
        self._occupied = False

    def defer_current_exercise(self) -> bool:
        """
        Move the current exercise behind every remaining one.

        Used when its machine is occupied and the user would rather do the
        rest of the session first.  Logged sets stay with the exercise.

        Returns:
            False (and changes nothing) when fewer than two exercises remain
        """
        if len(self._exercises) - self._current_index < 2:
            return False
        deferred = self._exercises.pop(self._current_index)
        self._exercises.append(deferred)
        self._occupied = False
        logger.info("deferred %s to the end of the session", deferred.exercise_id)
        return True

    def substitute_current_exercise(
        self,
        new_exercise_id: str,
        exercise_name: str = "",
    ) -> SessionExercise | None:
        """
        Replace the current exercise with an alternative.

        The program row (sets, target reps, rest) of the replaced exercise is
        kept; weight and reps are prescribed from the alternative's own
        history.  Sets logged under the replaced exercise are dropped.
        An alternative that is still pending elsewhere in the session is
        refused, so exercise ids stay unique among pending exercises.

        Returns:
            The new SessionExercise, or None when the session is complete
            or the alternative is already pending
        """
        current = self.get_current_exercise()
        if current is None:
            logger.warning("substitute_current_exercise ignored: session is complete")
            return None
        if any(
            e is not current and e.exercise_id == new_exercise_id and not e.is_done
            for e in self._exercises
        ):
            logger.warning(
                "substitute_current_exercise ignored: %s is already pending", new_exercise_id
            )
            return None

        pe = self._program_rows.get(current.exercise_id) or ProgramExercise(
            exercise_id=current.exercise_id,
            order=current.order,
            sets=current.prescribed_sets,
            target_reps=current.prescribed_reps,
            rest_seconds=current.rest_seconds,
        )
        self._program_rows.setdefault(new_exercise_id, pe)
        weight, reps = self._prescribe(pe, new_exercise_id)

        replacement = SessionExercise(
            exercise_id=new_exercise_id,
            order=current.order,
            prescribed_sets=current.prescribed_sets,
            prescribed_reps=reps,
            prescribed_weight_kg=weight,
            rest_seconds=current.rest_seconds,
            exercise_name=exercise_name or self._options.exercise_names.get(new_exercise_id, ""),
            substituted_for=current.substituted_for or current.exercise_id,
        )
        self._exercises[self._current_index] = replacement
        self._occupied = False
        logger.info("substituted %s with %s", current.exercise_id, new_exercise_id)
        return replacement

    def apply_pain_adjustments(self, adjustments: Sequence[PainAdjustment]) -> None:
        """
        Apply pain overrides to the prescriptions.

        Only the most severe adjustment per exercise is applied, so the
        result does not depend on the order of the list:

            reduce_weight  -> (reference weight or current) x multiplier, 0.5 kg steps
            no_progression -> no heavier than last session's weight; reps untouched
            skip           -> removed from the session

        Must be called before further sets are logged for the affected
        exercises, since those sets reference the prescribed values.
        """
        effective = keep_most_severe(adjustments)
        by_id = {e.exercise_id: e for e in self._exercises}

        skipped: set[str] = set()
        for adj in effective:
            exercise = by_id.get(adj.exercise_id)
            if exercise is None:
                logger.warning("pain adjustment for unknown exercise %s ignored", adj.exercise_id)
                continue

            if adj.action == "skip":
                skipped.add(adj.exercise_id)
            elif adj.action == "reduce_weight" and adj.weight_multiplier:
                base = (
                    adj.reference_weight_kg
                    if adj.reference_weight_kg is not None
                    else exercise.prescribed_weight_kg
                )
                exercise.prescribed_weight_kg = round_half_up(
                    base * adj.weight_multiplier, PAIN_ROUNDING_STEP_KG
                )
            elif adj.action == "no_progression":
                # Reps come from the program target, never from history.
                prev = self._history.get(exercise.exercise_id)
                if prev is not None:
                    exercise.prescribed_weight_kg = min(
                        exercise.prescribed_weight_kg, prev.last_weight_kg
                    )

        if skipped:
            self._remove(skipped)

    def _remove(self, exercise_ids: set[str]) -> None:
        current = self.get_current_exercise()
        self._exercises = [e for e in self._exercises if e.exercise_id not in exercise_ids]
        if current is None:
            self._current_index = min(self._current_index, len(self._exercises))
        elif current.exercise_id in exercise_ids:
            self._current_index = 0
            self._occupied = False
        else:
            self._current_index = next(
                i for i, e in enumerate(self._exercises) if e is current
            )
        logger.info("removed %s for pain", ", ".join(sorted(exercise_ids)))

"""
Tests for SessionEngine: prescription at construction, the set/exercise
state machine, ad hoc actions and pain overrides.

Default fixture (hypertrophy, 2.5 kg weights 0-100):
    bench  40 kg x [8,8,8,8] @2  target 6  -> 42.5 x 6  (increase_weight)
    row    50 kg x [10,10,10] @2 target 10 -> 50 x 11   (increase_reps)
    curl   no history            target 12 -> 0 x 12
"""

import pytest

from lift_coach.core.models import (
    ExerciseHistoryEntry,
    PainAdjustment,
    ProgramExercise,
    ProgramSession,
    SessionSet,
)
from lift_coach.core.session_engine import SessionEngine, SessionEngineOptions

WEIGHTS = tuple(2.5 * i for i in range(41))


def _program(intensity=None) -> ProgramSession:
    return ProgramSession(
        name="Upper A",
        exercises=(
            ProgramExercise("bench", order=1, sets=4, target_reps=6, rest_seconds=180),
            ProgramExercise("row", order=2, sets=3, target_reps=10, rest_seconds=120),
            ProgramExercise("curl", order=3, sets=3, target_reps=12, rest_seconds=60),
        ),
        intensity=intensity,
    )


def _history() -> dict[str, ExerciseHistoryEntry]:
    return {
        "bench": ExerciseHistoryEntry(40.0, (8, 8, 8, 8), 2.0),
        "row": ExerciseHistoryEntry(50.0, (10, 10, 10), 2.0),
        "db_press": ExerciseHistoryEntry(20.0, (6, 6, 6, 6), 2.0),
    }


def _engine(**options) -> SessionEngine:
    options.setdefault("available_weights", WEIGHTS)
    return SessionEngine(_program(options.pop("intensity", None)), _history(), SessionEngineOptions(**options))


def _set(number: int, reps: int = 6, weight: float = 42.5) -> SessionSet:
    return SessionSet(
        set_number=number,
        prescribed_reps=reps,
        prescribed_weight_kg=weight,
        actual_reps=reps,
        actual_weight_kg=weight,
        reps_in_reserve=2,
    )


def _prescriptions(engine: SessionEngine) -> list[tuple[str, float, int]]:
    return [(e.exercise_id, e.prescribed_weight_kg, e.prescribed_reps) for e in engine.get_all_exercises()]


def _finish_current(engine: SessionEngine) -> None:
    current = engine.get_current_exercise()
    for n in range(1, current.prescribed_sets + 1):
        engine.log_set(_set(n))
    engine.complete_exercise()


class TestPrescription:
    def test_initial_prescriptions(self):
        engine = _engine()
        assert _prescriptions(engine) == [
            ("bench", 42.5, 6),
            ("row", 50.0, 11),
            ("curl", 0.0, 12),
        ]
        bench = engine.get_all_exercises()[0]
        assert bench.prescribed_sets == 4
        assert bench.rest_seconds == 180
        assert bench.status == "pending"

    def test_progression_results_cached(self):
        engine = _engine()
        assert engine.get_progression_result("bench").action == "increase_weight"
        assert engine.get_progression_result("row").action == "increase_reps"
        assert engine.get_progression_result("curl") is None

    def test_default_ladder_without_weights(self):
        engine = _engine(available_weights=())
        assert _prescriptions(engine)[0] == ("bench", 42.5, 6)

    def test_bodyweight_estimate_for_new_exercise(self):
        # 80 * 0.15 = 12 -> nearest 12.5 (target 12 > 6 reps)
        engine = _engine(bodyweight_kg=80.0)
        assert _prescriptions(engine)[2] == ("curl", 12.5, 12)

    def test_bodyweight_estimate_heavy_target(self):
        session = ProgramSession(
            name="Legs", exercises=(ProgramExercise("squat", 1, 5, 5, 180),)
        )
        # 80 * 0.25 = 20
        engine = SessionEngine(session, {}, SessionEngineOptions(bodyweight_kg=80.0))
        assert engine.get_all_exercises()[0].prescribed_weight_kg == 20.0

    def test_deload(self):
        # bench 40 * 0.6 = 24 -> highest available <= 24 is 22.5; row 50 * 0.6 = 30
        engine = _engine(phase="deload")
        assert _prescriptions(engine) == [
            ("bench", 22.5, 10),
            ("row", 30.0, 10),
            ("curl", 0.0, 12),
        ]
        assert engine.get_progression_result("bench") is None

    def test_session_tag_sets_intensity(self):
        # heavy ceiling 8 is below the row's 10 reps -> no rep increase
        engine = _engine(intensity="heavy")
        assert _prescriptions(engine)[1] == ("row", 50.0, 10)

    def test_option_overrides_session_tag(self):
        engine = _engine(intensity="heavy", session_intensity="volume")
        assert _prescriptions(engine)[1] == ("row", 50.0, 11)

    def test_names_from_options(self):
        engine = _engine(exercise_names={"bench": "Bench press"})
        assert engine.get_all_exercises()[0].exercise_name == "Bench press"


class TestStateMachine:
    def test_fresh_session(self):
        engine = _engine()
        assert engine.get_current_exercise().exercise_id == "bench"
        assert engine.get_current_exercise_index() == 0
        assert engine.get_current_set_number() == 1
        assert not engine.is_current_exercise_complete()
        assert not engine.is_session_complete()
        assert not engine.is_waiting_for_machine()

    def test_log_set_does_not_advance(self):
        engine = _engine()
        engine.log_set(_set(1))
        assert engine.get_current_exercise_index() == 0
        assert engine.get_current_set_number() == 2

    def test_exercise_complete_after_prescribed_sets(self):
        engine = _engine()
        for n in range(1, 5):
            engine.log_set(_set(n))
        assert engine.is_current_exercise_complete()
        engine.complete_exercise()
        assert engine.get_all_exercises()[0].status == "completed"
        assert engine.get_current_exercise().exercise_id == "row"
        assert engine.get_current_set_number() == 1

    def test_occupied_flag_is_independent(self):
        engine = _engine()
        engine.log_set(_set(1))
        engine.mark_occupied()
        assert engine.is_waiting_for_machine()
        assert engine.get_current_set_number() == 2
        engine.mark_machine_free()
        assert not engine.is_waiting_for_machine()

    def test_complete_clears_occupied(self):
        engine = _engine()
        engine.mark_occupied()
        engine.complete_exercise()
        assert not engine.is_waiting_for_machine()

    def test_completed_session_reads_are_safe(self):
        engine = _engine()
        for _ in range(3):
            _finish_current(engine)
        assert engine.is_session_complete()
        assert engine.get_current_exercise() is None
        assert engine.get_current_set_number() == 0
        assert not engine.is_current_exercise_complete()
        assert engine.get_remaining_exercises() == ()
        assert engine.warmup_for_current_exercise() == []

    def test_mutations_after_completion_are_no_ops(self):
        engine = _engine()
        for _ in range(3):
            _finish_current(engine)
        engine.log_set(_set(1))
        engine.complete_exercise()
        engine.skip_current_exercise("time")
        assert engine.get_current_exercise_index() == 3
        assert engine.substitute_current_exercise("db_press") is None

    def test_all_exercises_view_is_a_tuple(self):
        engine = _engine()
        view = engine.get_all_exercises()
        assert isinstance(view, tuple)
        assert len(view) == 3

    def test_warmup_for_current(self):
        engine = _engine()
        sets = engine.warmup_for_current_exercise()
        assert len(sets) == 4
        assert sets[0].weight_kg == 0.0


class TestAdHocActions:
    def test_skip(self):
        engine = _engine()
        engine.mark_occupied()
        engine.skip_current_exercise("occupied")
        bench = engine.get_all_exercises()[0]
        assert bench.status == "skipped"
        assert bench.skipped_reason == "occupied"
        assert engine.get_current_exercise().exercise_id == "row"
        assert not engine.is_waiting_for_machine()

    def test_defer_moves_current_to_end(self):
        engine = _engine()
        engine.log_set(_set(1))
        assert engine.defer_current_exercise()
        assert [e.exercise_id for e in engine.get_all_exercises()] == ["row", "curl", "bench"]
        assert engine.get_current_exercise().exercise_id == "row"
        assert len(engine.get_all_exercises()[-1].logged_sets) == 1

    def test_defer_last_remaining_is_refused(self):
        engine = _engine()
        _finish_current(engine)
        _finish_current(engine)
        assert not engine.defer_current_exercise()
        assert engine.get_current_exercise().exercise_id == "curl"

    def test_substitute(self):
        # db_press 20 x [6,6,6,6] @2, bench's target 6 -> 20 x 7
        engine = _engine()
        engine.log_set(_set(1))
        replacement = engine.substitute_current_exercise("db_press", "Dumbbell press")
        assert replacement.exercise_id == "db_press"
        assert replacement.exercise_name == "Dumbbell press"
        assert replacement.prescribed_weight_kg == 20.0
        assert replacement.prescribed_reps == 7
        assert replacement.prescribed_sets == 4
        assert replacement.substituted_for == "bench"
        assert replacement.logged_sets == []
        assert engine.get_current_exercise() is replacement

    def test_substitute_without_history(self):
        engine = _engine()
        replacement = engine.substitute_current_exercise("machine_press")
        assert replacement.prescribed_weight_kg == 0.0
        assert replacement.prescribed_reps == 6

    def test_substitute_into_pending_exercise_is_refused(self):
        engine = _engine()
        assert engine.substitute_current_exercise("row") is None
        assert [e.exercise_id for e in engine.get_all_exercises()] == ["bench", "row", "curl"]
        assert engine.get_current_exercise().exercise_id == "bench"

    def test_substitute_into_completed_exercise(self):
        # bench done; curl swapped for bench reuses bench's 42.5 kg prescription
        engine = _engine()
        _finish_current(engine)
        _finish_current(engine)
        replacement = engine.substitute_current_exercise("bench")
        assert replacement is not None
        assert replacement.prescribed_weight_kg == 42.5
        engine.apply_pain_adjustments(
            [PainAdjustment("bench", "reduce_weight", "pain", weight_multiplier=0.8)]
        )
        # 42.5 * 0.8 = 34 on the exercise being done now
        assert engine.get_current_exercise().prescribed_weight_kg == pytest.approx(34.0)

    def test_remaining_exercises(self):
        engine = _engine()
        _finish_current(engine)
        assert [e.exercise_id for e in engine.get_remaining_exercises()] == ["row", "curl"]


class TestPainAdjustments:
    def test_reduce_weight_from_reference(self):
        # 90 * 0.8 = 72, regardless of the progressed 42.5
        engine = _engine()
        engine.apply_pain_adjustments(
            [PainAdjustment("bench", "reduce_weight", "pain", weight_multiplier=0.8, reference_weight_kg=90.0)]
        )
        assert engine.get_all_exercises()[0].prescribed_weight_kg == 72.0

    def test_reduce_weight_from_current(self):
        # 42.5 * 0.8 = 34
        engine = _engine()
        engine.apply_pain_adjustments(
            [PainAdjustment("bench", "reduce_weight", "pain", weight_multiplier=0.8)]
        )
        assert engine.get_all_exercises()[0].prescribed_weight_kg == pytest.approx(34.0)

    def test_reduce_weight_rounds_to_half_kg(self):
        # 50 * 0.8 = 40 -> 40; 47.3 * 0.8 = 37.84 -> 38.0
        engine = _engine()
        engine.apply_pain_adjustments(
            [PainAdjustment("row", "reduce_weight", "pain", weight_multiplier=0.8, reference_weight_kg=47.3)]
        )
        assert engine.get_all_exercises()[1].prescribed_weight_kg == pytest.approx(38.0)

    def test_no_progression_restores_last_weight_only(self):
        engine = _engine()
        engine.apply_pain_adjustments(
            [
                PainAdjustment("bench", "no_progression", "pain"),
                PainAdjustment("row", "no_progression", "pain"),
            ]
        )
        assert _prescriptions(engine)[:2] == [("bench", 40.0, 6), ("row", 50.0, 11)]

    def test_no_progression_keeps_deload_weight(self):
        # deload bench 22.5 kg is below last session's 40 kg
        engine = _engine(phase="deload")
        engine.apply_pain_adjustments([PainAdjustment("bench", "no_progression", "pain")])
        assert engine.get_all_exercises()[0].prescribed_weight_kg == 22.5

    def test_skip_current_points_to_start_of_remainder(self):
        engine = _engine()
        engine.apply_pain_adjustments([PainAdjustment("bench", "skip", "pain")])
        assert [e.exercise_id for e in engine.get_all_exercises()] == ["row", "curl"]
        assert engine.get_current_exercise_index() == 0
        assert engine.get_current_exercise().exercise_id == "row"

    def test_skip_other_keeps_current_exercise(self):
        engine = _engine()
        _finish_current(engine)  # now on row, index 1
        engine.apply_pain_adjustments([PainAdjustment("bench", "skip", "pain")])
        assert engine.get_current_exercise().exercise_id == "row"
        assert engine.get_current_exercise_index() == 0

    def test_skip_later_exercise_keeps_index(self):
        engine = _engine()
        _finish_current(engine)
        engine.apply_pain_adjustments([PainAdjustment("curl", "skip", "pain")])
        assert engine.get_current_exercise_index() == 1
        assert engine.get_current_exercise().exercise_id == "row"

    def test_most_severe_applied_regardless_of_order(self):
        lighter = PainAdjustment("bench", "no_progression", "pain")
        heavier = PainAdjustment("bench", "skip", "pain")
        for order in ([lighter, heavier], [heavier, lighter]):
            engine = _engine()
            engine.apply_pain_adjustments(order)
            assert [e.exercise_id for e in engine.get_all_exercises()] == ["row", "curl"]

    def test_unknown_exercise_ignored(self):
        engine = _engine()
        engine.apply_pain_adjustments([PainAdjustment("squat", "skip", "pain")])
        assert len(engine.get_all_exercises()) == 3

    def test_skip_everything_completes_session(self):
        engine = _engine()
        engine.apply_pain_adjustments(
            [PainAdjustment(eid, "skip", "pain") for eid in ("bench", "row", "curl")]
        )
        assert engine.is_session_complete()
        assert engine.get_current_exercise() is None

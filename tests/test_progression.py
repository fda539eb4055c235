"""
Unit tests for the progression engine.

Expected values are hand-computed from the rule order documented in
lift_coach.core.progression:
    no data -> regression -> top of range -> +1 rep -> moderate +1 rep -> maintain
"""

import pytest

from lift_coach.core.progression import (
    REASON_ADD_REP,
    REASON_ADD_REP_MODERATE,
    REASON_CEILING,
    REASON_CONSOLIDATE,
    REASON_NO_DATA,
    REASON_REGRESSION,
    PhaseInput,
    ProgressionInput,
    calculate_progression,
    find_next_weight,
    recommend_phase,
    rep_ceiling,
    should_deload,
)

WEIGHTS = (37.5, 40.0, 42.5, 45.0)


def _inp(
    reps: list[int],
    *,
    target: int = 6,
    sets: int = 4,
    weight: float = 40.0,
    rir: float = 2.0,
    weights=WEIGHTS,
    **kwargs,
) -> ProgressionInput:
    return ProgressionInput(
        program_target_reps=target,
        program_target_sets=sets,
        last_weight_kg=weight,
        last_reps_per_set=reps,
        last_avg_rir=rir,
        available_weights=weights,
        **kwargs,
    )


class TestReferenceScenarios:
    def test_top_of_range_increases_weight(self):
        # avg 8 >= 6 + 2, min 8 >= 6, RIR 2 -> next weight above 40
        result = calculate_progression(_inp([8, 8, 8, 8]))
        assert result.next_weight_kg == 42.5
        assert result.next_reps == 6
        assert result.action == "increase_weight"

    def test_target_met_adds_one_rep(self):
        # avg 6 -> 7, ceiling 12 (hypertrophy)
        result = calculate_progression(_inp([6, 6, 6, 6]))
        assert result.next_weight_kg == 40.0
        assert result.next_reps == 7
        assert result.action == "increase_reps"
        assert result.reason == REASON_ADD_REP

    def test_regression_drops_to_next_lower_weight(self):
        # total 20 of 32 -> deficit 0.375 > 0.25
        result = calculate_progression(_inp([6, 5, 5, 4], target=8, rir=0))
        assert result.action == "decrease"
        assert result.next_weight_kg == 37.5
        assert result.next_reps == 8
        assert result.reason == REASON_REGRESSION


class TestRules:
    def test_no_previous_sets_maintains(self):
        result = calculate_progression(_inp([], target=10))
        assert result.action == "maintain"
        assert result.next_weight_kg == 40.0
        assert result.next_reps == 10
        assert result.reason == REASON_NO_DATA

    def test_regression_without_lower_weight_keeps_weight(self):
        result = calculate_progression(_inp([2, 2, 2, 2], weights=(40.0, 42.5)))
        assert result.action == "decrease"
        assert result.next_weight_kg == 40.0

    def test_regression_wins_over_good_rir(self):
        # Only 2 of 4 sets logged: 16 of 24 reps -> deficit 0.333
        result = calculate_progression(_inp([8, 8], rir=3))
        assert result.action == "decrease"

    def test_deficit_of_exactly_quarter_is_not_regression(self):
        # 18 of 24 -> deficit 0.25, not > 0.25
        result = calculate_progression(_inp([6, 6, 6], rir=0))
        assert result.action == "maintain"
        assert result.reason == REASON_CONSOLIDATE

    def test_ceiling_without_heavier_weight_maintains_at_rounded_average(self):
        # avg 8.5 rounds half up to 9
        result = calculate_progression(_inp([9, 9, 8, 8], weights=(37.5, 40.0)))
        assert result.action == "maintain"
        assert result.next_weight_kg == 40.0
        assert result.next_reps == 9
        assert result.reason == REASON_CEILING

    def test_rep_increase_capped_at_ceiling(self):
        # heavy ceiling 8; avg 8 is below target 7 + 2 so no weight jump
        result = calculate_progression(_inp([8, 8, 8, 8], target=7, session_intensity="heavy"))
        assert result.action == "maintain"
        assert result.next_reps == 8
        assert result.reason == REASON_CEILING

    def test_moderate_rir_adds_rep_cautiously(self):
        result = calculate_progression(_inp([6, 6, 6, 6], rir=1.5))
        assert result.action == "increase_reps"
        assert result.next_reps == 7
        assert result.reason == REASON_ADD_REP_MODERATE

    @pytest.mark.parametrize("target, reps", [(10, 12), (12, 14)])
    def test_moderate_rir_at_ceiling_maintains(self, target, reps):
        # hypertrophy ceiling 12; RIR 1.5 is below the weight-jump threshold
        result = calculate_progression(_inp([reps] * 4, target=target, rir=1.5))
        assert result.action == "maintain"
        assert result.next_reps == reps
        assert result.next_weight_kg == 40.0
        assert result.reason == REASON_CEILING

    def test_missed_target_maintains(self):
        # 22 of 24 -> deficit 0.083, min 5 < 6
        result = calculate_progression(_inp([6, 6, 5, 5]))
        assert result.action == "maintain"
        assert result.next_reps == 6
        assert result.next_weight_kg == 40.0

    def test_average_rounds_half_up(self):
        # avg 6.5 -> 7 -> next 8 (banker's rounding would give 6 -> 7)
        result = calculate_progression(_inp([7, 7, 6, 6]))
        assert result.next_reps == 8

    def test_empty_weight_list_never_raises(self):
        up = calculate_progression(_inp([8, 8, 8, 8], weights=()))
        down = calculate_progression(_inp([1, 1, 1, 1], weights=()))
        assert up.action == "maintain"
        assert up.next_weight_kg == 40.0
        assert down.action == "decrease"
        assert down.next_weight_kg == 40.0

    def test_program_target_is_only_rep_source(self):
        # Same performance, different program target -> different reps
        low = calculate_progression(_inp([8, 8, 8, 8], target=6))
        high = calculate_progression(_inp([8, 8, 8, 8], target=8))
        assert low.next_reps == 6
        assert high.next_reps == 9


class TestProperties:
    def test_pure(self):
        inp = _inp([8, 7, 7, 6], rir=1.5)
        assert calculate_progression(inp) == calculate_progression(inp)

    @pytest.mark.parametrize("reps", [[4, 4, 4, 4], [6, 3, 3, 3], [0, 0, 0, 0], [8]])
    def test_large_deficit_always_decreases(self, reps):
        result = calculate_progression(_inp(reps, target=8))
        assert result.action == "decrease"
        assert result.next_weight_kg < 40.0

    @pytest.mark.parametrize("reps", [[8, 8, 8, 8], [9, 8, 8, 8], [12, 10, 9, 8]])
    def test_top_of_range_always_increases_to_available_weight(self, reps):
        result = calculate_progression(_inp(reps, rir=3))
        assert result.action == "increase_weight"
        assert result.next_weight_kg in WEIGHTS


class TestHelpers:
    def test_rep_ceiling(self):
        assert rep_ceiling("hypertrophy") == 12
        assert rep_ceiling("strength") == 8
        assert rep_ceiling("strength", "volume") == 12
        assert rep_ceiling("hypertrophy", "heavy") == 8
        assert rep_ceiling("hypertrophy", "moderate") == 12

    def test_find_next_weight_picks_lightest_heavier(self):
        assert find_next_weight(40.0, [45.0, 50.0, 42.5]) == 42.5
        assert find_next_weight(10.0, [10.0, 11.25, 12.5], "isolation") == 11.25
        assert find_next_weight(45.0, WEIGHTS) == 45.0

    def test_should_deload(self):
        assert not should_deload(4)
        assert should_deload(5)
        assert should_deload(8)


class TestPhaseRecommendation:
    def test_hypertrophy_to_transition(self):
        inp = PhaseInput("hypertrophy", weeks_in_phase=6, avg_pain_level=1, progression_consistency=0.8)
        assert recommend_phase(inp) == "transition"

    def test_transition_to_strength(self):
        inp = PhaseInput("transition", weeks_in_phase=4, avg_pain_level=0, progression_consistency=0.7)
        assert recommend_phase(inp) == "strength"

    def test_pain_holds_phase(self):
        inp = PhaseInput("hypertrophy", weeks_in_phase=10, avg_pain_level=2.5, progression_consistency=1.0)
        assert recommend_phase(inp) == "hypertrophy"

    def test_inconsistent_progress_holds_phase(self):
        inp = PhaseInput("hypertrophy", weeks_in_phase=8, avg_pain_level=0, progression_consistency=0.5)
        assert recommend_phase(inp) == "hypertrophy"

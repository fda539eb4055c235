"""
Configuration constants for the training-session core.

All adjustable parameters are centralized here for easy tuning.
User-level defaults (gym weights, phase, bodyweight) live in settings.yaml,
see config_loader.py.
"""

from typing import Final

# =============================================================================
# WEIGHT GRANULARITY
# =============================================================================

WEIGHT_STEP_KG: Final[float] = 2.5  # Rounding step when no weight list is known
PAIN_ROUNDING_STEP_KG: Final[float] = 0.5  # Rounding step for pain-reduced weights
DEFAULT_LADDER_MIN_TOP_KG: Final[float] = 300.0  # Default ladder covers leg press etc.
DEFAULT_LADDER_HEADROOM_KG: Final[float] = 20.0  # Ladder extends past current weight

# =============================================================================
# PROGRESSION (history -> next prescription)
# =============================================================================

REGRESSION_DEFICIT_THRESHOLD: Final[float] = 0.25  # >25% missed reps -> decrease
GOOD_RIR: Final[float] = 2.0  # RIR at or above this is a clean success
MODERATE_RIR: Final[float] = 1.0  # RIR in [1, 2) allows a cautious rep increase
TOP_OF_RANGE_MARGIN: Final[int] = 2  # avg reps >= target + 2 -> add weight

REP_CEILING_HEAVY: Final[int] = 8  # heavy sessions / strength phase
REP_CEILING_VOLUME: Final[int] = 12  # volume sessions / hypertrophy phase

INCREMENT_COMPOUND_KG: Final[float] = 2.5
INCREMENT_ISOLATION_KG: Final[float] = 1.25
NEXT_WEIGHT_TOLERANCE_KG: Final[float] = 0.5  # Slack when snapping to the next weight

DELOAD_INTERVAL_WEEKS: Final[int] = 5  # Deload after this many weeks of loading

# =============================================================================
# PHASE RECOMMENDATION
# =============================================================================

PHASE_PAIN_HOLD_THRESHOLD: Final[float] = 2.0  # Average pain above this holds the phase
PHASE_MIN_CONSISTENCY: Final[float] = 0.7
HYPERTROPHY_MIN_WEEKS: Final[int] = 6
TRANSITION_MIN_WEEKS: Final[int] = 4

# =============================================================================
# SESSION CONSTRUCTION
# =============================================================================

DELOAD_WEIGHT_FACTOR: Final[float] = 0.6  # Deload weight = 60% of last weight
DELOAD_MIN_REPS: Final[int] = 10
BODYWEIGHT_ESTIMATE_LOW_REPS: Final[int] = 6  # target reps <= this -> heavier estimate
BODYWEIGHT_FRACTION_HEAVY: Final[float] = 0.25
BODYWEIGHT_FRACTION_LIGHT: Final[float] = 0.15
DEFAULT_REST_SECONDS: Final[int] = 120

# =============================================================================
# WARM-UP RAMP
# =============================================================================

WARMUP_NONE_MAX_KG: Final[float] = 0.0  # <= this: no warm-up
WARMUP_SINGLE_BELOW_KG: Final[float] = 8.0  # below this: one unloaded set
WARMUP_SHORT_MAX_KG: Final[float] = 20.0  # up to this: unloaded + 50%

# (fraction of working weight, reps, label)
WARMUP_FULL_RAMP: Final[list[tuple[float, int, str]]] = [
    (0.0, 10, "empty bar"),
    (0.5, 8, "50%"),
    (0.7, 5, "70%"),
    (0.85, 3, "85%"),
]

# =============================================================================
# PAIN TIERS (rolling max pain per zone, 0-10)
# =============================================================================

PAIN_NO_PROGRESSION_MIN: Final[int] = 3  # 3-4: hold progression
PAIN_REDUCE_WEIGHT_MIN: Final[int] = 5  # 5-6: reduce load
PAIN_SKIP_MIN: Final[int] = 7  # 7-10: skip the exercise
PAIN_WEIGHT_MULTIPLIER: Final[float] = 0.8
PAIN_WINDOW_DAYS: Final[int] = 7

# Higher number wins when several rules hit the same exercise
PAIN_ACTION_PRIORITY: Final[dict[str, int]] = {
    "skip": 3,
    "reduce_weight": 2,
    "no_progression": 1,
}

# =============================================================================
# REHAB INTEGRATION
# =============================================================================

MAX_WARMUP_REHAB: Final[int] = 8
MAX_COOLDOWN_REHAB: Final[int] = 5
MAX_ACTIVE_WAIT: Final[int] = 8

# =============================================================================
# FILLER / COOLDOWN
# =============================================================================

FILLER_SECONDS_PER_SET: Final[int] = 45
FILLER_REST_BETWEEN_SETS: Final[int] = 30
FILLER_CATALOG_DURATION: Final[str] = "2 min"
FILLER_CATALOG_REPS: Final[str] = "30 sec"
FILLER_CATALOG_COUNT: Final[int] = 3
COOLDOWN_MAX_EXERCISES: Final[int] = 3

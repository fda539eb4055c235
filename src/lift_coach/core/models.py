"""
Data models for lift-coach.

Dataclasses for the program template handed in by the planner, the
performance history read back from storage, the live session records the
SessionEngine mutates, and the rehab / pain / filler values derived around
them.  Enumerations are plain Literal aliases so that values read from YAML
need no conversion.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Literal, Mapping

from .config import DEFAULT_REST_SECONDS

BodyZone = Literal[
    "neck",
    "shoulder_left",
    "shoulder_right",
    "elbow_left",
    "elbow_right",
    "wrist_left",
    "wrist_right",
    "upper_back",
    "lower_back",
    "hip_left",
    "hip_right",
    "knee_left",
    "knee_right",
    "ankle_left",
    "ankle_right",
    "foot_left",
    "foot_right",
    "other",
]
BODY_ZONES: tuple[str, ...] = BodyZone.__args__  # type: ignore[attr-defined]

TrainingPhase = Literal["hypertrophy", "strength", "deload"]
SessionIntensity = Literal["heavy", "moderate", "volume"]
ExerciseCategory = Literal["compound", "isolation", "rehab", "mobility", "core"]
ProgressionAction = Literal["increase_weight", "increase_reps", "maintain", "decrease"]
ExerciseStatus = Literal["pending", "completed", "skipped"]
SkipReason = Literal["occupied", "pain", "no_weight", "time"]
Placement = Literal["warmup", "active_wait", "cooldown", "rest_day"]
PainAction = Literal["skip", "reduce_weight", "no_progression"]
PainContext = Literal["during_set", "end_session", "rest_day", "onboarding"]

PLACEMENTS: tuple[str, ...] = ("warmup", "active_wait", "cooldown", "rest_day")


# =============================================================================
# Program template (input, immutable)
# =============================================================================


@dataclass(frozen=True)
class ProgramExercise:
    """One row of a program session template."""

    exercise_id: str
    order: int
    sets: int
    target_reps: int
    rest_seconds: int
    is_rehab: bool = False

    def __post_init__(self) -> None:
        if self.sets < 0:
            raise ValueError("sets must be non-negative")
        if self.target_reps < 0:
            raise ValueError("target_reps must be non-negative")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")


@dataclass(frozen=True)
class ProgramSession:
    """A named, ordered list of exercises, as produced by the program generator."""

    name: str
    exercises: tuple[ProgramExercise, ...] = ()
    intensity: SessionIntensity | None = None


# =============================================================================
# Performance history (input, immutable)
# =============================================================================


@dataclass(frozen=True)
class ExerciseHistoryEntry:
    """
    What the athlete actually did the last time an exercise was trained.

    Deliberately carries no prescribed reps / sets / rest: the next
    prescription is derived from the current program target and past
    performance only, so a previously prescribed value can never leak back
    into the progression.  from_mapping() rejects such keys outright.
    """

    last_weight_kg: float
    last_reps: tuple[int, ...] = ()
    last_avg_rir: float = 0.0
    last_avg_rest_seconds: float | None = None

    _FORBIDDEN_KEYS: ClassVar[frozenset[str]] = frozenset(
        {
            "prescribed_reps",
            "prescribed_sets",
            "prescribed_rest_seconds",
            "prescribedReps",
            "prescribedSets",
            "prescribedRestSeconds",
        }
    )

    def __post_init__(self) -> None:
        if self.last_weight_kg < 0:
            raise ValueError("last_weight_kg must be non-negative")
        if any(r < 0 for r in self.last_reps):
            raise ValueError("last_reps must be non-negative")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExerciseHistoryEntry":
        """Build an entry from a storage row, refusing stale prescription fields."""
        stale = cls._FORBIDDEN_KEYS & set(data)
        if stale:
            raise ValueError(
                f"history entries must not carry prescribed values: {sorted(stale)}"
            )
        rest = data.get("last_avg_rest_seconds")
        return cls(
            last_weight_kg=float(data["last_weight_kg"]),
            last_reps=tuple(int(r) for r in data.get("last_reps", ())),
            last_avg_rir=float(data.get("last_avg_rir", 0.0)),
            last_avg_rest_seconds=float(rest) if rest is not None else None,
        )


ExerciseHistory = dict[str, ExerciseHistoryEntry]


@dataclass(frozen=True)
class ProgressionResult:
    """Next prescription for one exercise and the rule that produced it."""

    next_weight_kg: float
    next_reps: int
    action: ProgressionAction
    reason: str


# =============================================================================
# Live session records (mutable, owned by SessionEngine)
# =============================================================================


@dataclass
class SessionSet:
    """A single completed working set."""

    set_number: int
    prescribed_reps: int
    prescribed_weight_kg: float
    actual_reps: int
    actual_weight_kg: float
    reps_in_reserve: int | None = None
    pain_reported: bool = False
    pain_zone: BodyZone | None = None
    pain_level: int | None = None
    rest_prescribed_seconds: int = 0
    rest_actual_seconds: int | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.set_number < 1:
            raise ValueError("set_number starts at 1")
        if self.actual_reps < 0:
            raise ValueError("actual_reps must be non-negative")
        if self.actual_weight_kg < 0:
            raise ValueError("actual_weight_kg must be non-negative")
        if self.reps_in_reserve is not None and self.reps_in_reserve < 0:
            raise ValueError("reps_in_reserve must be non-negative")
        if self.pain_level is not None and not 0 <= self.pain_level <= 10:
            raise ValueError("pain_level must be within 0-10")


@dataclass
class SessionExercise:
    """
    Per-session record of one exercise.

    Created by SessionEngine from a ProgramExercise plus history, then
    mutated by log_set / complete_exercise / apply_pain_adjustments /
    substitute_current_exercise.
    """

    exercise_id: str
    order: int
    prescribed_sets: int
    prescribed_reps: int
    prescribed_weight_kg: float
    rest_seconds: int = DEFAULT_REST_SECONDS
    exercise_name: str = ""
    logged_sets: list[SessionSet] = field(default_factory=list)
    status: ExerciseStatus = "pending"
    skipped_reason: SkipReason | None = None
    substituted_for: str | None = None

    @property
    def is_done(self) -> bool:
        return self.status != "pending"


# =============================================================================
# Rehab catalog and integration output
# =============================================================================


@dataclass
class HealthCondition:
    """A reported health condition tied to a body zone."""

    body_zone: BodyZone
    label: str = ""
    is_active: bool = True
    diagnosis: str = ""


@dataclass(frozen=True)
class RehabExercise:
    """One corrective exercise inside a protocol, tagged with its placement."""

    exercise_name: str
    sets: int
    reps: str  # "15", "8-12" or time-based "30 sec"
    intensity: str
    notes: str
    placement: Placement

    def __post_init__(self) -> None:
        if self.placement not in PLACEMENTS:
            raise ValueError(f"Invalid placement: {self.placement}")
        if self.sets < 1:
            raise ValueError("sets must be at least 1")


@dataclass(frozen=True)
class RehabProtocol:
    """Structured corrective work for one condition at one body zone."""

    protocol_id: str
    target_zone: BodyZone
    condition_name: str
    priority: int  # lower = more urgent
    exercises: tuple[RehabExercise, ...] = ()
    frequency: str = "every_session"
    progression_criteria: str = ""


@dataclass(frozen=True)
class RehabExerciseInfo:
    """A rehab exercise placed into a session bucket."""

    exercise_name: str
    sets: int
    reps: str
    intensity: str
    notes: str
    protocol_name: str
    priority: int


@dataclass
class IntegratedRehab:
    """Rehab exercises bucketed by where they happen in the session."""

    warmup_rehab: list[RehabExerciseInfo] = field(default_factory=list)
    active_wait_pool: list[RehabExerciseInfo] = field(default_factory=list)
    cooldown_rehab: list[RehabExerciseInfo] = field(default_factory=list)

    def all_names(self) -> list[str]:
        return [
            info.exercise_name
            for bucket in (self.warmup_rehab, self.active_wait_pool, self.cooldown_rehab)
            for info in bucket
        ]


# =============================================================================
# Pain feedback
# =============================================================================


@dataclass
class PainLog:
    """A raw pain report as stored by the app."""

    zone: BodyZone
    level: int
    context: PainContext
    date: datetime
    exercise_name: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.level <= 10:
            raise ValueError("pain level must be within 0-10")


@dataclass(frozen=True)
class PainFeedbackEntry:
    """Rolling-window pain summary for one body zone."""

    zone: BodyZone
    max_pain_level: int
    during_exercises: frozenset[str] = frozenset()


@dataclass(frozen=True)
class PainTarget:
    """What the pain resolver needs to know about one session exercise."""

    exercise_id: str
    exercise_name: str
    contraindications: tuple[str, ...] = ()


@dataclass(frozen=True)
class PainAdjustment:
    """Override applied to one exercise because of reported pain."""

    exercise_id: str
    action: PainAction
    reason: str
    exercise_name: str = ""
    weight_multiplier: float | None = None
    reference_weight_kg: float | None = None


# =============================================================================
# Exercise catalog, fillers, warm-up
# =============================================================================


@dataclass
class CatalogExercise:
    """Knowledge-base entry for an exercise (used for conflict checks)."""

    name: str
    category: ExerciseCategory
    primary_muscles: list[str] = field(default_factory=list)
    secondary_muscles: list[str] = field(default_factory=list)
    contraindications: list[str] = field(default_factory=list)
    instructions: str = ""
    tags: list[str] = field(default_factory=list)
    exercise_id: str | None = None


@dataclass(frozen=True)
class FillerSuggestion:
    """A short exercise offered while equipment is occupied."""

    name: str
    sets: int
    reps: str
    duration: str  # e.g. "2 min"
    notes: str
    is_rehab: bool


@dataclass(frozen=True)
class WarmupSet:
    """One ramp-up set before the working sets.  Not tracked in the session."""

    weight_kg: float
    reps: int
    label: str

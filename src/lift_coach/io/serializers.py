"""
YAML serialization for session input documents.

Handles conversion between the plain dicts read from a session description
file and the core dataclasses, plus the dict form used for JSON output.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from ..core.config import DEFAULT_REST_SECONDS
from ..core.models import (
    BODY_ZONES,
    CatalogExercise,
    ExerciseHistory,
    ExerciseHistoryEntry,
    HealthCondition,
    PainLog,
    PainTarget,
    ProgramExercise,
    ProgramSession,
    ProgressionResult,
    SessionExercise,
)

_INTENSITIES = ("heavy", "moderate", "volume")
_CATEGORIES = ("compound", "isolation", "rehab", "mobility", "core")
_PAIN_CONTEXTS = ("during_set", "end_session", "rest_day", "onboarding")


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


@dataclass
class SessionDocument:
    """Everything needed to prepare one session, as read from a YAML file."""

    session: ProgramSession
    history: ExerciseHistory = field(default_factory=dict)
    conditions: list[HealthCondition] = field(default_factory=list)
    pain_logs: list[PainLog] = field(default_factory=list)
    reference_weights: dict[str, float] = field(default_factory=dict)
    catalog: list[CatalogExercise] = field(default_factory=list)
    now: datetime | None = None
    options: dict[str, Any] = field(default_factory=dict)

    def exercise_names(self) -> dict[str, str]:
        """exercise_id -> display name, from the catalog."""
        return {ex.exercise_id: ex.name for ex in self.catalog if ex.exercise_id}

    def exercise_categories(self) -> dict[str, str]:
        return {ex.exercise_id: ex.category for ex in self.catalog if ex.exercise_id}

    def pain_targets(self) -> list[PainTarget]:
        """Catalog contraindications for every exercise in the session."""
        by_id = {ex.exercise_id: ex for ex in self.catalog if ex.exercise_id}
        targets = []
        for pe in self.session.exercises:
            entry = by_id.get(pe.exercise_id)
            targets.append(
                PainTarget(
                    exercise_id=pe.exercise_id,
                    exercise_name=entry.name if entry else pe.exercise_id,
                    contraindications=tuple(entry.contraindications) if entry else (),
                )
            )
        return targets

    def session_muscles(self) -> list[str]:
        """Primary muscles of the session's exercises, in order, no repeats."""
        by_id = {ex.exercise_id: ex for ex in self.catalog if ex.exercise_id}
        muscles: list[str] = []
        for pe in self.session.exercises:
            entry = by_id.get(pe.exercise_id)
            for m in entry.primary_muscles if entry else ():
                if m not in muscles:
                    muscles.append(m)
        return muscles


def validate_zone(zone: Any) -> str:
    """
    Validate a body zone name.

    Raises:
        ValidationError: If zone is not a known body zone
    """
    if zone not in BODY_ZONES:
        raise ValidationError(f"Invalid body zone: {zone!r}. Must be one of {BODY_ZONES}")
    return zone


def validate_datetime(value: Any) -> datetime:
    """
    Normalize a YAML date / datetime / ISO string to a datetime.

    Raises:
        ValidationError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as e:
            raise ValidationError(f"Invalid date: {value}. Expected ISO format") from e
    raise ValidationError(f"Invalid date: {value!r}")


def _require(data: Any, key: str, where: str) -> Any:
    if not isinstance(data, dict):
        raise ValidationError(f"{where} must be a mapping, got {type(data).__name__}")
    if key not in data:
        raise ValidationError(f"{where} is missing '{key}'")
    return data[key]


def program_exercise_from_dict(data: dict[str, Any], order: int) -> ProgramExercise:
    """
    Convert a dict to ProgramExercise.

    Args:
        data: Mapping with exercise_id, sets, target_reps and optional
            rest_seconds / order / is_rehab
        order: Position used when the mapping has no explicit order

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    exercise_id = _require(data, "exercise_id", "session exercise")
    try:
        return ProgramExercise(
            exercise_id=str(exercise_id),
            order=int(data.get("order", order)),
            sets=int(_require(data, "sets", f"exercise {exercise_id}")),
            target_reps=int(_require(data, "target_reps", f"exercise {exercise_id}")),
            rest_seconds=int(data.get("rest_seconds", DEFAULT_REST_SECONDS)),
            is_rehab=bool(data.get("is_rehab", False)),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid exercise {exercise_id}: {e}") from e


def program_session_from_dict(data: dict[str, Any]) -> ProgramSession:
    """Convert a dict to ProgramSession."""
    raw_exercises = _require(data, "exercises", "session")
    if not isinstance(raw_exercises, list):
        raise ValidationError("session exercises must be a list")

    intensity = data.get("intensity")
    if intensity is not None and intensity not in _INTENSITIES:
        raise ValidationError(
            f"Invalid intensity: {intensity}. Must be one of {_INTENSITIES}"
        )

    return ProgramSession(
        name=str(data.get("name", "Session")),
        exercises=tuple(
            program_exercise_from_dict(e, i + 1) for i, e in enumerate(raw_exercises)
        ),
        intensity=intensity,
    )


def history_from_dict(data: dict[str, Any] | None) -> ExerciseHistory:
    """
    Convert {exercise_id: {...}} to ExerciseHistory.

    Raises:
        ValidationError: If an entry is malformed or carries prescribed values
    """
    history: ExerciseHistory = {}
    for exercise_id, raw in (data or {}).items():
        try:
            history[str(exercise_id)] = ExerciseHistoryEntry.from_mapping(raw)
        except KeyError as e:
            raise ValidationError(f"history for {exercise_id} is missing {e}") from e
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid history for {exercise_id}: {e}") from e
    return history


def condition_from_dict(data: dict[str, Any]) -> HealthCondition:
    """Convert a dict to HealthCondition."""
    zone = validate_zone(_require(data, "body_zone", "condition"))
    return HealthCondition(
        body_zone=zone,  # type: ignore[arg-type]
        label=str(data.get("label", "")),
        is_active=bool(data.get("is_active", True)),
        diagnosis=str(data.get("diagnosis", "")),
    )


def pain_log_from_dict(data: dict[str, Any]) -> PainLog:
    """Convert a dict to PainLog."""
    zone = validate_zone(_require(data, "zone", "pain log"))
    context = data.get("context", "end_session")
    if context not in _PAIN_CONTEXTS:
        raise ValidationError(f"Invalid pain context: {context}. Must be one of {_PAIN_CONTEXTS}")
    try:
        return PainLog(
            zone=zone,  # type: ignore[arg-type]
            level=int(_require(data, "level", "pain log")),
            context=context,
            date=validate_datetime(_require(data, "date", "pain log")),
            exercise_name=data.get("exercise_name"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid pain log: {e}") from e


def catalog_exercise_from_dict(data: dict[str, Any]) -> CatalogExercise:
    """Convert a dict to CatalogExercise."""
    name = _require(data, "name", "catalog exercise")
    category = data.get("category", "compound")
    if category not in _CATEGORIES:
        raise ValidationError(f"Invalid category for {name}: {category}")
    return CatalogExercise(
        name=str(name),
        category=category,
        primary_muscles=[str(m) for m in data.get("primary_muscles", [])],
        secondary_muscles=[str(m) for m in data.get("secondary_muscles", [])],
        contraindications=[str(z) for z in data.get("contraindications", [])],
        instructions=str(data.get("instructions", "")),
        tags=[str(t) for t in data.get("tags", [])],
        exercise_id=data.get("exercise_id"),
    )


def session_document_from_dict(data: dict[str, Any]) -> SessionDocument:
    """
    Convert a whole session description to a SessionDocument.

    Only 'session' is required; every other section defaults to empty.
    """
    session = program_session_from_dict(_require(data, "session", "document"))

    reference_weights: dict[str, float] = {}
    for exercise_id, weight in (data.get("reference_weights") or {}).items():
        try:
            reference_weights[str(exercise_id)] = float(weight)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid reference weight for {exercise_id}") from e

    now = data.get("now")
    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise ValidationError("options must be a mapping")

    return SessionDocument(
        session=session,
        history=history_from_dict(data.get("history")),
        conditions=[condition_from_dict(c) for c in data.get("conditions") or []],
        pain_logs=[pain_log_from_dict(p) for p in data.get("pain_logs") or []],
        reference_weights=reference_weights,
        catalog=[catalog_exercise_from_dict(c) for c in data.get("catalog") or []],
        now=validate_datetime(now) if now is not None else None,
        options=options,
    )


def load_session_document(path: Path) -> SessionDocument:
    """
    Read a session description YAML file.

    Raises:
        ValidationError: If the file is missing, unparsable or invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ValidationError(f"File not found: {path}") from e
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"{path} must contain a mapping at the top level")
    return session_document_from_dict(data)


def progression_result_to_dict(result: ProgressionResult) -> dict[str, Any]:
    """Convert ProgressionResult to a JSON-compatible dict."""
    return {
        "next_weight_kg": result.next_weight_kg,
        "next_reps": result.next_reps,
        "action": result.action,
        "reason": result.reason,
    }


def session_exercise_to_dict(exercise: SessionExercise) -> dict[str, Any]:
    """Convert a SessionExercise prescription to a JSON-compatible dict."""
    return {
        "exercise_id": exercise.exercise_id,
        "exercise_name": exercise.exercise_name,
        "order": exercise.order,
        "sets": exercise.prescribed_sets,
        "reps": exercise.prescribed_reps,
        "weight_kg": exercise.prescribed_weight_kg,
        "rest_seconds": exercise.rest_seconds,
        "status": exercise.status,
        "logged_sets": len(exercise.logged_sets),
    }

"""
YAML → RehabProtocol loader.

Loads rehab protocols from individual YAML files in the bundled
``src/lift_coach/protocols/`` directory.  Each file (e.g. lower_back_core.yaml)
holds one protocol: target zone, priority and its placed exercises.

User overrides: place matching files in ``~/.lift-coach/protocols/``.
A user file is deep-merged over the bundled protocol with the same stem, so
only changed keys need to be listed.  A user file with no bundled
counterpart is treated as a new protocol.

Usage (internal, called by registry.py):
    from .loader import load_protocols_from_yaml
    protocols = load_protocols_from_yaml()   # list or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

from ..config_loader import _deep_merge, _load_yaml_file
from ..models import BODY_ZONES, RehabExercise, RehabProtocol

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {"exercise_name", "sets", "reps", "placement"}
)

_REQUIRED_PROTOCOL_FIELDS: frozenset[str] = frozenset(
    {"target_zone", "condition_name", "priority", "exercises"}
)


def _exercise_from_dict(d: dict) -> RehabExercise:
    """Convert a raw dict to RehabExercise, raising ValueError on missing fields."""
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"RehabExercise missing fields: {sorted(missing)}")
    return RehabExercise(
        exercise_name=str(d["exercise_name"]),
        sets=int(d["sets"]),
        reps=str(d["reps"]),
        intensity=str(d.get("intensity", "light")),
        notes=str(d.get("notes", "")).strip(),
        placement=str(d["placement"]),  # type: ignore[arg-type]
    )


def protocol_from_dict(d: dict, protocol_id: str) -> RehabProtocol:
    """Convert a raw dict (from YAML) to a RehabProtocol.

    Raises ValueError if any required field is absent or the zone is unknown.
    """
    missing = _REQUIRED_PROTOCOL_FIELDS - set(d)
    if missing:
        raise ValueError(f"RehabProtocol missing fields: {sorted(missing)}")

    zone = str(d["target_zone"])
    if zone not in BODY_ZONES:
        raise ValueError(f"Unknown target_zone: {zone!r}")

    return RehabProtocol(
        protocol_id=str(d.get("protocol_id", protocol_id)),
        target_zone=zone,  # type: ignore[arg-type]
        condition_name=str(d["condition_name"]),
        priority=int(d["priority"]),
        exercises=tuple(_exercise_from_dict(e) for e in d["exercises"]),
        frequency=str(d.get("frequency", "every_session")),
        progression_criteria=str(d.get("progression_criteria", "")).strip(),
    )


def _get_bundled_protocols_dir() -> Path | None:
    """Return path to the bundled protocols/ data directory, or None if not found."""
    # loader.py lives at src/lift_coach/core/protocols/loader.py
    # three levels up → src/lift_coach/
    candidate = Path(__file__).parent.parent.parent / "protocols"
    return candidate if candidate.is_dir() else None


def _get_user_protocols_dir() -> Path | None:
    """Return ~/.lift-coach/protocols/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-coach" / "protocols"
    return p if p.is_dir() else None


def load_protocols_from_dir(
    bundled_dir: Path | None,
    user_dir: Path | None = None,
) -> list[RehabProtocol]:
    """Load every ``<protocol_id>.yaml`` from bundled_dir, merged with user_dir.

    Files are read in sorted stem order so the catalog order is stable.
    Invalid files are skipped with a warning.
    """
    stems: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            if p.stem not in stems:
                user_only.append(p)

    result: list[RehabProtocol] = []

    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
        try:
            result.append(protocol_from_dict(raw, stem))
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"lift-coach: skipping protocol '{stem}': {exc}",
                stacklevel=2,
            )

    for p in user_only:
        raw = _load_yaml_file(p)
        if not raw:
            continue
        try:
            result.append(protocol_from_dict(raw, p.stem))
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"lift-coach: skipping user protocol '{p.stem}': {exc}",
                stacklevel=2,
            )

    return result


def load_protocols_from_yaml() -> list[RehabProtocol] | None:
    """Return the bundled protocol catalog merged with user overrides.

    Returns None (rather than raising) when nothing could be loaded so the
    registry can report a single clear error.
    """
    bundled_dir = _get_bundled_protocols_dir()
    user_dir = _get_user_protocols_dir()
    if bundled_dir is None and user_dir is None:
        return None
    protocols = load_protocols_from_dir(bundled_dir, user_dir)
    return protocols or None

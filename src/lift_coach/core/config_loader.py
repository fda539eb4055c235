"""
YAML → user settings loader.

Loads session defaults from settings.yaml (bundled with the package) and
optionally merges user overrides from ~/.lift-coach/settings.yaml.

Usage:
    from lift_coach.core.config_loader import load_settings
    settings = load_settings()
    options = settings.engine_options()

A user file with parse errors or invalid values is reported with a warning
and the bundled default is used for the affected keys.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .session_engine import SessionEngineOptions


@dataclass(frozen=True)
class Settings:
    """Defaults for the options a driver does not pass explicitly."""

    available_weights: tuple[float, ...] = ()
    phase: str = "hypertrophy"
    session_intensity: str | None = None
    bodyweight_kg: float | None = None

    def engine_options(self, **overrides: Any) -> SessionEngineOptions:
        """SessionEngineOptions from these settings, with keyword overrides."""
        values: dict[str, Any] = {
            "available_weights": self.available_weights,
            "phase": self.phase,
            "session_intensity": self.session_intensity,
            "bodyweight_kg": self.bodyweight_kg,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return SessionEngineOptions(**values)


_PHASES = ("hypertrophy", "strength", "deload")
_INTENSITIES = ("heavy", "moderate", "volume")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; warn and return {} when it cannot be parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"lift-coach: cannot read {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _settings_from_dict(raw: dict) -> Settings:
    defaults = Settings()

    weights = raw.get("available_weights") or ()
    try:
        available = tuple(sorted(float(w) for w in weights))
    except (TypeError, ValueError):
        warnings.warn("lift-coach: available_weights must be a list of numbers", stacklevel=3)
        available = defaults.available_weights
    if any(w < 0 for w in available):
        warnings.warn("lift-coach: negative weights in available_weights ignored", stacklevel=3)
        available = tuple(w for w in available if w >= 0)

    phase = raw.get("phase", defaults.phase)
    if phase not in _PHASES:
        warnings.warn(f"lift-coach: unknown phase {phase!r}, using {defaults.phase}", stacklevel=3)
        phase = defaults.phase

    intensity = raw.get("session_intensity")
    if intensity is not None and intensity not in _INTENSITIES:
        warnings.warn(f"lift-coach: unknown session_intensity {intensity!r} ignored", stacklevel=3)
        intensity = None

    bodyweight = raw.get("bodyweight_kg")
    if bodyweight is not None:
        try:
            bodyweight = float(bodyweight)
        except (TypeError, ValueError):
            warnings.warn("lift-coach: bodyweight_kg must be a number", stacklevel=3)
            bodyweight = None

    return Settings(
        available_weights=available,
        phase=phase,
        session_intensity=intensity,
        bodyweight_kg=bodyweight,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_settings_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    candidate = Path(__file__).parent.parent / "settings.yaml"
    return candidate if candidate.exists() else None


def get_user_settings_path() -> Path | None:
    """Return ~/.lift-coach/settings.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-coach" / "settings.yaml"
    return p if p.exists() else None


def load_settings(user_path: Path | None = None) -> Settings:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_coach/settings.yaml
    2. user_path, or ~/.lift-coach/settings.yaml when not given

    Returns:
        Settings; the dataclass defaults when no YAML is available.
    """
    raw: dict[str, Any] = {}

    bundled = get_bundled_settings_path()
    if bundled is not None:
        raw = _deep_merge(raw, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_settings_path()
    if user is not None and user.exists():
        raw = _deep_merge(raw, _load_yaml_file(user))

    return _settings_from_dict(raw)

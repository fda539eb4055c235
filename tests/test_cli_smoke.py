"""
Minimal smoke tests for lift-coach CLI.

Tests basic functionality:
- App runs and shows help
- progress / warmup print prescriptions
- rehab lists protocol exercises
- prepare reads a session file and applies pain overrides
"""

import json
import textwrap

import pytest
from typer.testing import CliRunner

from lift_coach.cli.main import app

runner = CliRunner()

SESSION_YAML = textwrap.dedent("""\
    now: 2026-10-16T18:00:00
    session:
      name: Upper A
      intensity: heavy
      exercises:
        - exercise_id: bench
          sets: 4
          target_reps: 6
          rest_seconds: 180
        - exercise_id: row
          sets: 3
          target_reps: 10
    history:
      bench: {last_weight_kg: 40, last_reps: [8, 8, 8, 8], last_avg_rir: 2}
      row: {last_weight_kg: 50, last_reps: [10, 10, 10], last_avg_rir: 2}
    conditions:
      - body_zone: lower_back
    pain_logs:
      - {zone: lower_back, level: 6, context: end_session, date: 2026-10-15}
    catalog:
      - name: Bench press
        exercise_id: bench
        category: compound
        primary_muscles: [chest, triceps]
      - name: Barbell row
        exercise_id: row
        category: compound
        primary_muscles: [lats]
        contraindications: [lower_back]
    options:
      available_weights: [37.5, 40, 42.5, 45, 47.5, 50, 52.5]
""")


@pytest.fixture
def session_file(tmp_path):
    path = tmp_path / "session.yaml"
    path.write_text(SESSION_YAML)
    return path


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "prepare" in result.output

    def test_progress_json(self):
        result = runner.invoke(app, [
            "progress",
            "--weight", "40",
            "--reps", "8,8,8,8",
            "--target-reps", "6",
            "--weights", "37.5,40,42.5,45",
            "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["next_weight_kg"] == 42.5
        assert data["next_reps"] == 6
        assert data["action"] == "increase_weight"

    def test_progress_table(self):
        result = runner.invoke(app, [
            "progress", "--weight", "40", "--reps", "6,6,6,6", "--target-reps", "6",
        ])
        assert result.exit_code == 0
        assert "increase_reps" in result.output

    def test_progress_rejects_bad_reps(self):
        result = runner.invoke(app, [
            "progress", "--weight", "40", "--reps", "8,x", "--target-reps", "6",
        ])
        assert result.exit_code == 1

    def test_warmup(self):
        result = runner.invoke(app, ["warmup", "80"])
        assert result.exit_code == 0
        assert "67.5" in result.output

    def test_warmup_unloaded(self):
        result = runner.invoke(app, ["warmup", "0"])
        assert result.exit_code == 0
        assert "No warm-up" in result.output

    def test_verbose_flag(self):
        result = runner.invoke(app, ["--verbose", "warmup", "60"])
        assert result.exit_code == 0

    def test_rehab(self):
        result = runner.invoke(app, ["rehab", "--zone", "lower_back"])
        assert result.exit_code == 0
        assert "Dead bug" in result.output

    def test_rehab_unknown_zone(self):
        result = runner.invoke(app, ["rehab", "--zone", "elbow"])
        assert result.exit_code == 1

    def test_prepare_json(self, session_file):
        result = runner.invoke(app, ["prepare", str(session_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        # bench tops its range -> 42.5; row (heavy, maintain 50) reduced 50 * 0.8 = 40
        weights = {e["exercise_id"]: e["weight_kg"] for e in data["exercises"]}
        assert weights == {"bench": 42.5, "row": 40.0}
        assert [a["action"] for a in data["pain_adjustments"]] == ["reduce_weight"]
        assert data["rehab"]["warmup"] == ["Dead bug", "Bird dog", "Glute bridge"]
        assert data["filler"] == "Pallof press"
        assert data["progression"]["bench"]["action"] == "increase_weight"

    def test_prepare_table(self, session_file):
        result = runner.invoke(app, ["prepare", str(session_file)])
        assert result.exit_code == 0
        assert "Upper A" in result.output
        assert "2 exercises ready" in result.output
        assert "Pallof press" in result.output

    def test_prepare_missing_file(self, tmp_path):
        result = runner.invoke(app, ["prepare", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1

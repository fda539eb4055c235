"""Session commands: rehab, prepare."""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from ...core.config_loader import load_settings
from ...core.cooldown import select_cooldown_exercises
from ...core.filler import suggest_filler
from ...core.models import BODY_ZONES, HealthCondition, ProgramSession
from ...core.pain_feedback import build_pain_feedback, calculate_pain_adjustments
from ...core.rehab import integrate_rehab
from ...core.session_engine import SessionEngine
from ...io.serializers import (
    SessionDocument,
    ValidationError,
    load_session_document,
    progression_result_to_dict,
    session_exercise_to_dict,
)
from .. import views
from ..app import app


@app.command()
def rehab(
    zone: Annotated[
        list[str],
        typer.Option("--zone", "-z", help="Body zone with an active condition (repeatable)"),
    ],
) -> None:
    """
    Show the rehab exercises a session would include for the given zones.
    """
    unknown = [z for z in zone if z not in BODY_ZONES]
    if unknown:
        views.print_error(f"Unknown zone(s): {', '.join(unknown)}")
        views.print_info(f"Valid zones: {', '.join(BODY_ZONES)}")
        raise typer.Exit(1)

    conditions = [HealthCondition(body_zone=z) for z in zone]  # type: ignore[arg-type]
    try:
        result = integrate_rehab(ProgramSession(name="rehab"), conditions)
    except RuntimeError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_rehab(result)


def _engine_for(doc: SessionDocument) -> SessionEngine:
    overrides = dict(doc.options)
    if "available_weights" in overrides:
        overrides["available_weights"] = tuple(
            sorted(float(w) for w in overrides["available_weights"] or ())
        )
    options = load_settings().engine_options(
        exercise_names=doc.exercise_names(),
        exercise_categories=doc.exercise_categories(),
        **overrides,
    )
    return SessionEngine(doc.session, doc.history, options)


@app.command()
def prepare(
    file: Annotated[
        Path,
        typer.Argument(help="YAML session description (session, history, conditions, ...)"),
    ],
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Prepare a session: prescriptions, pain overrides, warm-ups and rehab.
    """
    try:
        doc = load_session_document(file)
        engine = _engine_for(doc)
    except (ValidationError, TypeError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    feedback = build_pain_feedback(doc.pain_logs, doc.now or datetime.now())
    adjustments = calculate_pain_adjustments(feedback, doc.pain_targets(), doc.reference_weights)
    engine.apply_pain_adjustments(adjustments)

    try:
        rehab_plan = integrate_rehab(doc.session, doc.conditions)
    except RuntimeError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    exercises = engine.get_all_exercises()
    first = engine.get_current_exercise()
    catalog_by_id = {ex.exercise_id: ex for ex in doc.catalog if ex.exercise_id}
    next_muscles = (
        catalog_by_id[first.exercise_id].primary_muscles
        if first is not None and first.exercise_id in catalog_by_id
        else []
    )
    filler = suggest_filler(rehab_plan.active_wait_pool, next_muscles, [], doc.catalog)
    cooldown = select_cooldown_exercises(doc.session_muscles(), doc.catalog)

    if json_out:
        progression = {}
        for ex in exercises:
            result = engine.get_progression_result(ex.exercise_id)
            if result is not None:
                progression[ex.exercise_id] = progression_result_to_dict(result)
        print(json.dumps({
            "session": doc.session.name,
            "exercises": [session_exercise_to_dict(ex) for ex in exercises],
            "progression": progression,
            "pain_adjustments": [
                {"exercise_id": a.exercise_id, "action": a.action, "reason": a.reason}
                for a in adjustments
            ],
            "rehab": {
                "warmup": [i.exercise_name for i in rehab_plan.warmup_rehab],
                "active_wait": [i.exercise_name for i in rehab_plan.active_wait_pool],
                "cooldown": [i.exercise_name for i in rehab_plan.cooldown_rehab],
            },
            "filler": filler.name if filler else None,
            "cooldown": [ex.name for ex in cooldown],
        }, indent=2))
        return

    views.console.print()
    views.console.print(f"[bold cyan]{doc.session.name}[/bold cyan]")
    if adjustments:
        views.console.print(views.format_pain_adjustments(adjustments))
    if not exercises:
        views.print_warning("Every exercise was removed for pain. Rest or do rehab only.")
    else:
        views.console.print(views.format_prescription_table(exercises))
        views.print_success(f"{len(exercises)} exercises ready")
        warmup_sets = engine.warmup_for_current_exercise()
        if warmup_sets and first is not None:
            views.console.print(
                views.format_warmup_table(
                    warmup_sets, title=f"Warm-up: {first.exercise_name or first.exercise_id}"
                )
            )
    views.print_rehab(rehab_plan)
    views.print_filler(filler)
    views.print_cooldown(cooldown)
    views.console.print()

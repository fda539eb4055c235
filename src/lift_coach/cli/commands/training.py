"""Single-exercise commands: progress, warmup."""

import json
from typing import Annotated, Optional

import typer

from ...core.config_loader import load_settings
from ...core.progression import ProgressionInput, calculate_progression
from ...core.warmup import generate_warmup_sets
from ...core.weights import default_weight_ladder
from ...io.serializers import ValidationError, progression_result_to_dict
from .. import views
from ..app import PhaseOption, WeightsOption, app, parse_number_list


@app.command()
def progress(
    weight: Annotated[
        float,
        typer.Option("--weight", help="Weight used last session (kg)"),
    ],
    reps: Annotated[
        str,
        typer.Option("--reps", "-r", help="Reps per set last session, e.g. 8,8,7,6"),
    ],
    target_reps: Annotated[
        int,
        typer.Option("--target-reps", "-t", help="Program target reps per set"),
    ],
    sets: Annotated[
        Optional[int],
        typer.Option("--sets", "-s", help="Program target sets (default: number of --reps values)"),
    ] = None,
    rir: Annotated[
        float,
        typer.Option("--rir", help="Average reps in reserve last session"),
    ] = 2.0,
    weights: WeightsOption = None,
    phase: PhaseOption = None,
    intensity: Annotated[
        Optional[str],
        typer.Option("--intensity", help="Session intensity: heavy, moderate, volume"),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Exercise category, e.g. compound or isolation"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Prescribe the next session for one exercise from last session's sets.
    """
    settings = load_settings()

    try:
        reps_per_set = [int(r) for r in parse_number_list(reps, "--reps")]
        available = parse_number_list(weights, "--weights") if weights else list(settings.available_weights)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if weight < 0 or any(r < 0 for r in reps_per_set):
        views.print_error("weight and reps must be non-negative")
        raise typer.Exit(1)

    result = calculate_progression(
        ProgressionInput(
            program_target_reps=target_reps,
            program_target_sets=sets if sets is not None else len(reps_per_set),
            last_weight_kg=weight,
            last_reps_per_set=reps_per_set,
            last_avg_rir=rir,
            available_weights=available or default_weight_ladder(weight),
            phase=phase or settings.phase,  # type: ignore[arg-type]
            session_intensity=intensity or settings.session_intensity,  # type: ignore[arg-type]
            exercise_category=category,  # type: ignore[arg-type]
        )
    )

    if json_out:
        print(json.dumps(progression_result_to_dict(result), indent=2))
        return

    views.console.print(views.format_progression_result(result))


@app.command()
def warmup(
    weight: Annotated[float, typer.Argument(help="Working weight (kg)")],
    weights: WeightsOption = None,
) -> None:
    """
    Show the warm-up ramp for a working weight.
    """
    try:
        available = parse_number_list(weights, "--weights") if weights else list(load_settings().available_weights)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    sets = generate_warmup_sets(weight, available or None)
    if not sets:
        views.print_info("No warm-up needed for an unloaded exercise.")
        return

    views.console.print(views.format_warmup_table(sets, title=f"Warm-up for {weight:g} kg"))

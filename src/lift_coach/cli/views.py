"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of prescriptions, warm-ups and rehab.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import (
    CatalogExercise,
    FillerSuggestion,
    IntegratedRehab,
    PainAdjustment,
    ProgressionResult,
    RehabExerciseInfo,
    SessionExercise,
    WarmupSet,
)

console = Console()

_ACTION_STYLES = {
    "increase_weight": "bold green",
    "increase_reps": "green",
    "maintain": "yellow",
    "decrease": "red",
}

_PAIN_STYLES = {
    "skip": "bold red",
    "reduce_weight": "red",
    "no_progression": "yellow",
}


def _fmt_kg(weight: float) -> str:
    """40.0 -> '40', 42.5 -> '42.5'."""
    return f"{weight:g}"


def format_progression_result(result: ProgressionResult) -> Table:
    """
    Create a Rich table for one progression decision.

    Args:
        result: Output of calculate_progression

    Returns:
        Rich Table object
    """
    table = Table(title="Next Session", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    style = _ACTION_STYLES.get(result.action, "")
    table.add_row("Weight", f"{_fmt_kg(result.next_weight_kg)} kg")
    table.add_row("Reps", str(result.next_reps))
    table.add_row("Action", f"[{style}]{result.action}[/{style}]" if style else result.action)
    table.add_row("Reason", result.reason)
    return table


def format_warmup_table(sets: list[WarmupSet], title: str = "Warm-up") -> Table:
    """Create a Rich table for a warm-up ramp."""
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Weight (kg)", justify="right", style="bold")
    table.add_column("Reps", justify="right")
    table.add_column("Label", style="dim")

    for i, s in enumerate(sets, 1):
        table.add_row(str(i), _fmt_kg(s.weight_kg), str(s.reps), s.label)
    return table


def format_prescription_table(exercises: tuple[SessionExercise, ...] | list[SessionExercise]) -> Table:
    """
    Create a Rich table of the session's prescriptions.

    Args:
        exercises: Session exercises in their current order

    Returns:
        Rich Table object
    """
    table = Table(title="Session")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Weight (kg)", justify="right", style="bold")
    table.add_column("Rest (s)", justify="right")

    for i, ex in enumerate(exercises, 1):
        table.add_row(
            str(i),
            ex.exercise_name or ex.exercise_id,
            str(ex.prescribed_sets),
            str(ex.prescribed_reps),
            _fmt_kg(ex.prescribed_weight_kg) if ex.prescribed_weight_kg > 0 else "-",
            str(ex.rest_seconds),
        )
    return table


def format_pain_adjustments(adjustments: list[PainAdjustment]) -> Table:
    """Create a Rich table listing pain-driven overrides."""
    table = Table(title="Pain Adjustments")
    table.add_column("Exercise", style="cyan")
    table.add_column("Action")
    table.add_column("Reason")

    for adj in adjustments:
        style = _PAIN_STYLES[adj.action]
        table.add_row(
            adj.exercise_name or adj.exercise_id,
            f"[{style}]{adj.action}[/{style}]",
            adj.reason,
        )
    return table


def _rehab_table(title: str, infos: list[RehabExerciseInfo]) -> Table:
    table = Table(title=title)
    table.add_column("Exercise", style="cyan")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Protocol", style="magenta")
    table.add_column("Notes", style="dim")

    for info in infos:
        table.add_row(info.exercise_name, str(info.sets), info.reps, info.protocol_name, info.notes)
    return table


def print_rehab(rehab: IntegratedRehab) -> None:
    """
    Print the three rehab buckets; empty buckets are left out.

    Args:
        rehab: Output of integrate_rehab
    """
    buckets = (
        ("Rehab: warm-up", rehab.warmup_rehab),
        ("Rehab: while waiting", rehab.active_wait_pool),
        ("Rehab: cooldown", rehab.cooldown_rehab),
    )
    shown = False
    for title, infos in buckets:
        if infos:
            console.print(_rehab_table(title, infos))
            shown = True
    if not shown:
        print_info("No rehab exercises for the active conditions.")


def print_filler(suggestion: FillerSuggestion | None) -> None:
    """Print the filler offered while the first machine is occupied."""
    if suggestion is None:
        print_info("No filler exercise available.")
        return
    source = "rehab" if suggestion.is_rehab else "mobility"
    console.print(
        f"If the machine is taken: [cyan]{suggestion.name}[/cyan] "
        f"{suggestion.sets} x {suggestion.reps} (~{suggestion.duration}, {source})"
    )


def print_cooldown(exercises: list[CatalogExercise]) -> None:
    if not exercises:
        return
    names = ", ".join(ex.name for ex in exercises)
    console.print(f"Cooldown: [cyan]{names}[/cyan]")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")

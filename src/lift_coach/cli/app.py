"""Shared Typer app object, shared option types, and parsing helpers."""

import logging
from typing import Annotated, Optional

import typer

from ..io.serializers import ValidationError

# Shared --weights option type used by the commands that snap to equipment
WeightsOption = Annotated[
    Optional[str],
    typer.Option(
        "--weights",
        "-w",
        help="Available weights in kg, comma-separated (default: settings.yaml)",
    ),
]

PhaseOption = Annotated[
    Optional[str],
    typer.Option("--phase", help="Training phase: hypertrophy, strength, deload"),
]

app = typer.Typer(
    name="lift-coach",
    help="Session-over-session weight/rep prescriptions and live session preparation.",
    no_args_is_help=True,
)


def parse_number_list(text: str, name: str) -> list[float]:
    """
    Parse "37.5,40, 42.5" into floats.

    Raises:
        ValidationError: If an item is not a number
    """
    items = [part.strip() for part in text.split(",") if part.strip()]
    try:
        return [float(item) for item in items]
    except ValueError as e:
        raise ValidationError(f"{name} must be comma-separated numbers, got {text!r}") from e


def configure_logging(verbose: bool) -> None:
    """Send library debug logs to stderr when --verbose is given."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )

"""
CLI entry point using Typer.

Provides commands for session preparation:
- progress: Next weight/reps for one exercise
- warmup: Warm-up ramp for a working weight
- rehab: Rehab exercises for active conditions
- prepare: Full session preparation from a YAML description
"""

from typing import Annotated

import typer

from .app import app, configure_logging
from .commands import session, training  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logs of every prescription decision"),
    ] = False,
) -> None:
    """
    Strength-training coach: progression, warm-ups, rehab and pain-aware sessions.
    """
    configure_logging(verbose)


if __name__ == "__main__":
    app()

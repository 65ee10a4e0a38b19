"""Shared Typer app object, shared option types, and engine utility."""

from typing import Annotated

import typer

from ..core.estimator import OneRepMaxEngine

# Shared selector options used across commands
LiftOption = Annotated[
    str,
    typer.Option("--lift", "-l", help="Lift: bench_press (default), squat, deadlift"),
]
EnduranceOption = Annotated[
    str,
    typer.Option(
        "--endurance", "-e", help="Endurance profile: explosive_low, average (default), high, very_high"
    ),
]
SpeedOption = Annotated[
    str,
    typer.Option("--speed", "-s", help="Last-rep speed: very_slow, normal (default), fast_explosive"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="onerm",
    help="One-rep max estimator using an exponential fatigue model.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_engine() -> OneRepMaxEngine:
    """Create an engine with the active model tables and no calibrations."""
    return OneRepMaxEngine()

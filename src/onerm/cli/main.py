"""
CLI entry point using Typer.

Provides commands for 1RM estimation:
- estimate: Estimate 1RM from one set (optionally calibrating first)
- calibrate: Derive a personal k value from two sets
- tables: Show the active model tables

Run without a command for an interactive session in which calibrations
persist until you quit.
"""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core.errors import EstimationError
from ..core.estimator import OneRepMaxEngine
from ..core.models import LiftType
from ..io.serializers import ValidationError, parse_set_string
from . import views
from .app import app, get_engine
from .commands import calibration, estimate  # noqa: F401  (registers commands)


def _configure_logging(verbose: bool) -> None:
    """Route library log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log model intermediates to stderr"),
    ] = False,
) -> None:
    """
    One-rep max estimator. Run without a command for interactive mode.
    """
    _configure_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return  # A sub-command was given — let it handle things

    _run_session(get_engine())


# ── Interactive session ─────────────────────────────────────────────────────

_MENU = {
    "1": ("estimate", "Estimate 1RM"),
    "2": ("calibrate", "Calibrate k from two sets"),
    "3": ("tables", "Show model tables and calibrations"),
    "4": ("reset", "Reset calibrations"),
    "0": ("quit", "Quit"),
}


def _run_session(engine: OneRepMaxEngine) -> None:
    """Menu loop sharing one engine, so calibrations apply to later estimates."""
    views.console.print()
    views.console.print("[bold cyan]onerm[/bold cyan] — 1RM estimator")

    last_estimate: tuple | None = None

    while True:
        views.console.print()
        for key, (_, desc) in _MENU.items():
            views.console.print(f"  \\[{key}] {desc}")
        views.console.print()

        try:
            choice = views.console.input("Choose [1]: ").strip() or "1"
        except EOFError:
            break

        chosen = _MENU.get(choice, (None,))[0]
        if chosen is None:
            views.print_error(f"Unknown choice: {choice}")
            continue
        if chosen == "quit":
            break

        try:
            if chosen == "estimate":
                last_estimate = _menu_estimate(engine)
            elif chosen == "calibrate":
                _menu_calibrate(engine)
                if last_estimate is not None:
                    views.print_info("Recalculating last estimate with the new k...")
                    views.print_result(engine.estimate_1rm(*last_estimate))
            elif chosen == "tables":
                views.print_tables(engine.tables, engine.calibrated_constants())
            elif chosen == "reset":
                if views.confirm_action("Forget all calibrations?"):
                    engine.reset_calibration()
                    views.print_success("Calibrations cleared.")
        except (EstimationError, ValidationError) as e:
            views.print_error(str(e))
        except EOFError:
            break

    views.print_info("Bye.")


def _ask(prompt: str, default: str | None = None) -> str:
    suffix = f" [{default}]" if default is not None else ""
    raw = views.console.input(f"{prompt}{suffix}: ").strip()
    return raw or (default or "")


def _ask_number(prompt: str, cast, default: str | None = None):
    raw = _ask(prompt, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValidationError(f"{prompt}: {raw!r} is not a valid number") from None


def _menu_estimate(engine: OneRepMaxEngine) -> tuple:
    """Prompt for one set, print the estimate and return its inputs."""
    weight = _ask_number("Weight (kg)", float)
    reps = _ask_number("Reps", int)
    rir = _ask_number("RIR", int, "0")
    lift = _ask("Lift", LiftType.BENCH_PRESS.value)
    endurance = _ask("Endurance profile", "average")
    speed = _ask("Last rep speed", "normal")

    inputs = (weight, reps, rir, lift, endurance, speed)
    views.print_result(engine.estimate_1rm(*inputs))
    return inputs


def _menu_calibrate(engine: OneRepMaxEngine) -> None:
    """Prompt for a lift and two sets, then calibrate."""
    lift = LiftType.parse(_ask("Lift", LiftType.BENCH_PRESS.value))
    w1, r1 = parse_set_string(_ask("First set (WEIGHTxREPS)"))
    w2, r2 = parse_set_string(_ask("Second set (WEIGHTxREPS)"))

    k = engine.calibrate(lift, w1, r1, w2, r2)
    views.print_calibration(lift, k, engine.tables.lift_constants[lift])


if __name__ == "__main__":
    app()

"""Estimation commands: estimate, tables."""

import json
from typing import Annotated, Optional

import typer

from ...core.errors import EstimationError
from ...io.serializers import (
    ValidationError,
    parse_calibration_pair,
    result_to_json,
    tables_to_dict,
)
from .. import views
from ..app import EnduranceOption, JsonOption, LiftOption, SpeedOption, app, get_engine


@app.command()
def estimate(
    weight: Annotated[float, typer.Argument(help="Weight lifted (kg)")],
    reps: Annotated[int, typer.Argument(help="Reps performed")],
    rir: Annotated[
        int,
        typer.Option("--rir", "-r", help="Reps in reserve (0-5)"),
    ] = 0,
    lift: LiftOption = "bench_press",
    endurance: EnduranceOption = "average",
    speed: SpeedOption = "normal",
    calibration: Annotated[
        Optional[str],
        typer.Option(
            "--calibrate",
            "-c",
            help="Calibrate the lift first from two sets, e.g. 200x5,180x8",
        ),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Estimate 1-rep max from one submaximal set.

    1RM = W × e^(k × (reps + RIR) / E) × CNS × V, rounded to 0.5 kg, with a
    confidence range that widens as the rep count grows.

    With --calibrate, a personal k is derived from the two sets and used
    instead of the lift's default for this estimate.
    """
    engine = get_engine()

    try:
        if calibration is not None:
            (w1, r1), (w2, r2) = parse_calibration_pair(calibration)
            engine.calibrate(lift, w1, r1, w2, r2)
        result = engine.estimate_1rm(weight, reps, rir, lift, endurance, speed)
    except (EstimationError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(result_to_json(result))
        return

    views.print_result(result)


@app.command()
def tables(json_out: JsonOption = False) -> None:
    """
    Show the active model tables.

    Values come from the bundled model.yaml merged with ~/.onerm/model.yaml
    (or $ONERM_HOME/model.yaml) when present.
    """
    engine = get_engine()

    if json_out:
        print(json.dumps(tables_to_dict(engine.tables), indent=2))
        return

    views.print_tables(engine.tables)

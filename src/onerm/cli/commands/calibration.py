"""Calibration command: derive a personal fatigue constant from two sets."""

import json
from typing import Annotated

import typer

from ...core.errors import EstimationError
from ...core.models import LiftType
from ...io.serializers import ValidationError, parse_set_string
from .. import views
from ..app import JsonOption, app, get_engine


@app.command()
def calibrate(
    lift: Annotated[str, typer.Argument(help="Lift: bench_press, squat, deadlift")],
    first_set: Annotated[str, typer.Argument(help="First set as WEIGHTxREPS, e.g. 200x5")],
    second_set: Annotated[str, typer.Argument(help="Second set as WEIGHTxREPS, e.g. 180x8")],
    json_out: JsonOption = False,
) -> None:
    """
    Derive a personal k value from two sets of the same lift.

    k = ln(W2 / W1) / (R1 - R2). Both sets should be taken at the same
    effort (e.g. both to failure) and with different rep counts.

    A one-shot calibration only lives for this command; use the
    interactive session (run without a command) or `estimate --calibrate`
    to apply it to an estimate.
    """
    engine = get_engine()

    try:
        w1, r1 = parse_set_string(first_set)
        w2, r2 = parse_set_string(second_set)
        k = engine.calibrate(lift, w1, r1, w2, r2)
    except (EstimationError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    parsed = LiftType.parse(lift)
    if json_out:
        print(json.dumps({"liftType": parsed.value, "kValue": k}, indent=2))
        return

    views.print_calibration(parsed, k, engine.tables.lift_constants[parsed])

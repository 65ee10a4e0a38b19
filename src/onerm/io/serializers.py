"""
JSON serialization for engine results and tables.

Handles conversion between result dataclasses and JSON-compatible dicts,
and parsing of compact set strings ("200x5") typed on the command line.
"""

import json
import re
from typing import Any

from ..core.models import EstimateResult, LiftType, ModelTables


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


_SET_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[xX*×]\s*(\d+)\s*$")


def parse_set_string(text: str) -> tuple[float, int]:
    """
    Parse one set written as WEIGHTxREPS.

    Accepts "200x5", "200 x 5", "102.5X3", "200*5", "200×5".

    Returns:
        (weight, reps)

    Raises:
        ValidationError: If the text is not in that form
    """
    m = _SET_RE.match(text)
    if not m:
        raise ValidationError(f"Invalid set: {text!r}. Expected WEIGHTxREPS, e.g. 100x5")
    return float(m.group(1)), int(m.group(2))


def parse_calibration_pair(text: str) -> tuple[tuple[float, int], tuple[float, int]]:
    """
    Parse two sets separated by a comma: "200x5,180x8".

    Raises:
        ValidationError: If there are not exactly two valid sets
    """
    parts = [p for p in text.split(",") if p.strip()]
    if len(parts) != 2:
        raise ValidationError(
            f"Invalid calibration: {text!r}. Expected two sets, e.g. 200x5,180x8"
        )
    return parse_set_string(parts[0]), parse_set_string(parts[1])


def result_to_dict(result: EstimateResult) -> dict[str, Any]:
    """
    Convert an EstimateResult to the caller-facing dict.

    Keys follow the display contract: estimated1RM, confidenceRange,
    confidencePercentage, warnings, details.
    """
    d = result.details
    return {
        "estimated1RM": result.estimated_1rm,
        "confidenceRange": [result.confidence_range[0], result.confidence_range[1]],
        "confidencePercentage": result.confidence_percentage,
        "warnings": list(result.warnings),
        "details": {
            "weight": d.weight,
            "reps": d.reps,
            "rir": d.rir,
            "rEff": d.effective_reps,
            "kValue": d.k,
            "kSource": d.k_source,
            "enduranceFactor": d.endurance_factor,
            "cnsMultiplier": d.cns_multiplier,
            "velocityMultiplier": d.velocity_multiplier,
            "exponent": d.exponent,
            "raw1RM": d.raw_1rm,
            "liftType": d.lift_type.value,
        },
    }


def result_to_json(result: EstimateResult, indent: int | None = 2) -> str:
    """Serialize an EstimateResult to a JSON string."""
    return json.dumps(result_to_dict(result), indent=indent)


def tables_to_dict(
    tables: ModelTables, calibrated: dict[LiftType, float] | None = None
) -> dict[str, Any]:
    """Convert ModelTables (and optional calibrations) to a JSON-compatible dict."""
    out: dict[str, Any] = {
        "lift_constants": {k.value: v for k, v in tables.lift_constants.items()},
        "rep_limits": {k.value: v for k, v in tables.rep_limits.items()},
        "endurance_factors": {k.value: v for k, v in tables.endurance_factors.items()},
        "velocity_multipliers": {k.value: v for k, v in tables.velocity_multipliers.items()},
    }
    if calibrated is not None:
        out["calibrated"] = {k.value: v for k, v in calibrated.items()}
    return out

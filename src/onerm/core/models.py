"""
Data models for onerm.

Closed selector enums (lift type, endurance profile, rep speed), the
immutable model tables, and the result records returned by the engine.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .errors import UnknownEnumValue, UnknownLiftType


class _Selector(str, Enum):
    """A string-valued enum that parses raw caller input once, at the boundary."""

    @classmethod
    def field_name(cls) -> str:
        """Snake-case field name derived from the class name, e.g. "rep_speed"."""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()

    @classmethod
    def _unknown(cls, value: object) -> UnknownEnumValue:
        return UnknownEnumValue(cls.field_name(), value, cls.values())

    @classmethod
    def parse(cls, value: "str | _Selector"):
        """
        Return the member for *value* (a member or its string value).

        Raises:
            UnknownEnumValue (or UnknownLiftType): if value is not recognized
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise cls._unknown(value) from None

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")


class LiftType(_Selector):
    BENCH_PRESS = "bench_press"
    SQUAT = "squat"
    DEADLIFT = "deadlift"

    @classmethod
    def _unknown(cls, value: object) -> UnknownEnumValue:
        return UnknownLiftType(value, cls.values())


class EnduranceProfile(_Selector):
    EXPLOSIVE_LOW = "explosive_low"
    AVERAGE = "average"
    HIGH = "high"
    VERY_HIGH = "very_high"


class RepSpeed(_Selector):
    VERY_SLOW = "very_slow"
    NORMAL = "normal"
    FAST_EXPLOSIVE = "fast_explosive"


@dataclass(frozen=True)
class ModelTables:
    """
    Constant tables used by the engine.

    Built once by core/engine/config_loader.py; every mapping is a
    read-only view so the tables cannot change after construction.
    """

    lift_constants: Mapping[LiftType, float]
    rep_limits: Mapping[LiftType, int]
    endurance_factors: Mapping[EnduranceProfile, float]
    velocity_multipliers: Mapping[RepSpeed, float]

    def __post_init__(self) -> None:
        # Freeze whatever mapping was passed in
        for name in ("lift_constants", "rep_limits", "endurance_factors", "velocity_multipliers"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))


@dataclass(frozen=True)
class ConfidenceInfo:
    """Symmetric confidence band for an estimate."""

    percentage: float   # e.g. 2.0 for ±2 %
    lower_error: float  # fraction, e.g. 0.02
    upper_error: float


@dataclass(frozen=True)
class EstimateDetails:
    """Every intermediate value used by one estimate (unrounded)."""

    weight: float
    reps: int
    rir: int
    effective_reps: int
    k: float
    k_source: str               # "default" | "calibrated"
    endurance_factor: float
    cns_multiplier: float
    velocity_multiplier: float
    exponent: float
    raw_1rm: float
    lift_type: LiftType


@dataclass(frozen=True)
class EstimateResult:
    """
    Output of OneRepMaxEngine.estimate_1rm.

    estimated_1rm and both confidence bounds are rounded to the nearest
    0.5; details keep the raw values.
    """

    estimated_1rm: float
    confidence_range: tuple[float, float]
    confidence_percentage: float
    warnings: tuple[str, ...]
    details: EstimateDetails

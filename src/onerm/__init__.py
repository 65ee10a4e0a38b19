"""
onerm: one-rep max estimation with an exponential fatigue model.

    from onerm import OneRepMaxEngine
    engine = OneRepMaxEngine()
    result = engine.estimate_1rm(100, 5, rir=1, lift_type="squat")
"""

from .core.errors import (
    EstimationError,
    InvalidInput,
    ModelConfigError,
    UnknownEnumValue,
    UnknownLiftType,
)
from .core.estimator import OneRepMaxEngine
from .core.models import EnduranceProfile, EstimateResult, LiftType, RepSpeed

__version__ = "0.1.0"

__all__ = [
    "OneRepMaxEngine",
    "EstimateResult",
    "LiftType",
    "EnduranceProfile",
    "RepSpeed",
    "EstimationError",
    "InvalidInput",
    "UnknownEnumValue",
    "UnknownLiftType",
    "ModelConfigError",
]

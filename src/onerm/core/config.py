"""
Configuration constants for the exponential fatigue 1RM model.

All adjustable parameters are centralized here for easy tuning.
The same tables are bundled as src/onerm/model.yaml and may be
overridden per user (see core/engine/config_loader.py).

Model:  1RM = W * e^(k * R_eff / E) * CNS * V
"""

from typing import Final

# =============================================================================
# FATIGUE CONSTANTS (k, per lift)
# =============================================================================

LIFT_CONSTANTS: Final[dict[str, float]] = {
    "bench_press": 0.035,
    "squat": 0.030,
    "deadlift": 0.025,
}

# =============================================================================
# REP LIMITS (accuracy warnings above these)
# =============================================================================

REP_LIMITS: Final[dict[str, int]] = {
    "bench_press": 12,
    "squat": 10,
    "deadlift": 8,
}

# =============================================================================
# ENDURANCE FACTORS (E, divides the exponent)
# =============================================================================

ENDURANCE_FACTORS: Final[dict[str, float]] = {
    "explosive_low": 0.9,
    "average": 1.0,
    "high": 1.1,
    "very_high": 1.2,
}

# =============================================================================
# VELOCITY MULTIPLIERS (V, last-rep bar speed)
# =============================================================================

VELOCITY_MULTIPLIERS: Final[dict[str, float]] = {
    "very_slow": 0.98,
    "normal": 1.00,
    "fast_explosive": 1.03,
}

# =============================================================================
# CNS FATIGUE MULTIPLIER (step function of effective reps)
# =============================================================================

# (upper bound of R_eff inclusive, multiplier); last band has no upper bound
CNS_BANDS: Final[tuple[tuple[int, float], ...]] = (
    (2, 1.05),
    (5, 1.02),
)
CNS_DEFAULT: Final[float] = 1.00

# =============================================================================
# CONFIDENCE BANDS (step function of raw reps, ± percent)
# =============================================================================

CONFIDENCE_BANDS: Final[tuple[tuple[int, float], ...]] = (
    (3, 1.0),
    (6, 2.0),
    (9, 4.0),
)
CONFIDENCE_DEFAULT_PCT: Final[float] = 7.0

# =============================================================================
# INPUT LIMITS
# =============================================================================

MIN_REPS: Final[int] = 1
RIR_MIN: Final[int] = 0
RIR_MAX: Final[int] = 5

# =============================================================================
# OUTPUT ROUNDING
# =============================================================================

ROUNDING_STEP: Final[float] = 0.5  # Results are reported to the nearest 0.5 kg

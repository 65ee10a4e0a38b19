"""
Exponential fatigue 1RM estimator.

Model:

    R_eff   = reps + RIR
    1RM     = W * e^(k * R_eff / E) * CNS * V

  k    lift-specific fatigue constant (or the lifter's calibrated value)
  E    endurance factor; a higher endurance profile dampens the exponent
  CNS  neural fatigue correction, > 1 only for very low effective reps
  V    last-rep bar speed correction

Personal calibration solves k from two sets taken at the same effort:

    W1 * e^(k * R1) = W2 * e^(k * R2)   =>   k = ln(W2 / W1) / (R1 - R2)

Confidence is a fixed ± band chosen by the raw rep count; wider bands for
longer sets, where the model extrapolates further.
"""

from __future__ import annotations

import logging
import math
from numbers import Real

from . import config
from .calibration import CalibrationStore
from .engine.config_loader import load_model_tables
from .errors import InvalidInput
from .models import (
    ConfidenceInfo,
    EnduranceProfile,
    EstimateDetails,
    EstimateResult,
    LiftType,
    ModelTables,
    RepSpeed,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def cns_multiplier(effective_reps: int) -> float:
    """
    CNS fatigue multiplier as a step function of effective reps.

    R_eff ≤ 2 → 1.05,  3–5 → 1.02,  ≥ 6 → 1.00.
    """
    for upper, multiplier in config.CNS_BANDS:
        if effective_reps <= upper:
            return multiplier
    return config.CNS_DEFAULT


def confidence_info(reps: int) -> ConfidenceInfo:
    """
    Confidence band from the raw rep count (RIR is not included).

    reps ≤ 3 → ±1 %,  4–6 → ±2 %,  7–9 → ±4 %,  ≥ 10 → ±7 %.
    """
    pct = config.CONFIDENCE_DEFAULT_PCT
    for upper, band_pct in config.CONFIDENCE_BANDS:
        if reps <= upper:
            pct = band_pct
            break
    err = pct / 100.0
    return ConfidenceInfo(percentage=pct, lower_error=err, upper_error=err)


def round_to_half(value: float) -> float:
    """
    Round to the nearest 0.5, ties going up.

    Computed as floor(2x + 0.5) / 2 so 100.25 → 100.5 and 100.75 → 101.0
    (the built-in round() would send both ties to the even neighbour).
    """
    step = config.ROUNDING_STEP
    return math.floor(value / step + 0.5) * step


def _check_weight(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput("weight", f"must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidInput("weight", f"must be positive, got {value!r}")
    return float(value)


def _check_reps(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput("reps", f"must be an integer, got {value!r}")
    if value < config.MIN_REPS:
        raise InvalidInput("reps", f"must be at least {config.MIN_REPS}, got {value}")
    return value


def _check_rir(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput("rir", f"must be an integer, got {value!r}")
    if not config.RIR_MIN <= value <= config.RIR_MAX:
        raise InvalidInput(
            "rir", f"must be between {config.RIR_MIN} and {config.RIR_MAX}, got {value}"
        )
    return value


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class OneRepMaxEngine:
    """
    1RM estimation engine.

    Holds immutable model tables and its own calibration store. Create one
    engine per user or session; calibrations live as long as the instance.
    """

    def __init__(
        self,
        tables: ModelTables | None = None,
        calibration: CalibrationStore | None = None,
    ):
        if tables is None:
            tables = load_model_tables()
        self.tables = tables
        self.calibration = calibration if calibration is not None else CalibrationStore()

    # -- parameter resolution ---------------------------------------------

    def resolve_fatigue_constant(self, lift_type: LiftType | str) -> float:
        """
        Return the calibrated k for the lift if one is set, else the default.

        Raises:
            UnknownLiftType: if lift_type is not a recognized lift
        """
        return self._fatigue_constant(LiftType.parse(lift_type))[0]

    def _fatigue_constant(self, lift: LiftType) -> tuple[float, str]:
        """(k, source) from a single read of the calibration store."""
        calibrated = self.calibration.get(lift)
        if calibrated is not None:
            return calibrated, "calibrated"
        return self.tables.lift_constants[lift], "default"

    def resolve_endurance_factor(self, profile: EnduranceProfile | str) -> float:
        """Endurance factor E. Raises UnknownEnumValue(field='endurance_profile')."""
        return self.tables.endurance_factors[EnduranceProfile.parse(profile)]

    def resolve_velocity_multiplier(self, speed: RepSpeed | str) -> float:
        """Velocity multiplier V. Raises UnknownEnumValue(field='rep_speed')."""
        return self.tables.velocity_multipliers[RepSpeed.parse(speed)]

    # -- estimation -------------------------------------------------------

    def estimate_1rm(
        self,
        weight: float,
        reps: int,
        rir: int = 0,
        lift_type: LiftType | str = LiftType.BENCH_PRESS,
        endurance_profile: EnduranceProfile | str = EnduranceProfile.AVERAGE,
        rep_speed: RepSpeed | str = RepSpeed.NORMAL,
    ) -> EstimateResult:
        """
        Estimate 1RM from a single submaximal set.

        Args:
            weight: Load lifted (kg), > 0
            reps: Reps performed, integer ≥ 1
            rir: Reps in reserve, integer 0–5
            lift_type: bench_press | squat | deadlift
            endurance_profile: explosive_low | average | high | very_high
            rep_speed: very_slow | normal | fast_explosive

        Returns:
            EstimateResult with values rounded to 0.5 and raw details

        Raises:
            InvalidInput: weight, reps or rir out of range (checked first),
                or a result too large to represent
            UnknownLiftType / UnknownEnumValue: unrecognized selector
        """
        weight = _check_weight(weight)
        reps = _check_reps(reps)
        rir = _check_rir(rir)

        r_eff = reps + rir

        lift = LiftType.parse(lift_type)
        k, k_source = self._fatigue_constant(lift)
        e_factor = self.resolve_endurance_factor(endurance_profile)
        v_mult = self.resolve_velocity_multiplier(rep_speed)
        cns = cns_multiplier(r_eff)

        exponent = k * r_eff / e_factor
        try:
            growth = math.exp(exponent)
        except OverflowError:
            raise InvalidInput("reps", f"result out of range for {r_eff} effective reps") from None
        raw = weight * growth * cns * v_mult

        conf = confidence_info(reps)
        lower = raw * (1 - conf.lower_error)
        upper = raw * (1 + conf.upper_error)
        # Rounding works on upper / step, which must stay finite too
        if not math.isfinite(upper / config.ROUNDING_STEP):
            raise InvalidInput("weight", f"result out of range for {weight!r}")

        warnings: list[str] = []
        if reps > self.tables.rep_limits[lift]:
            warnings.append(
                f"Accuracy may be low: {reps} reps exceeds recommended limit "
                f"for {lift.display_name}"
            )
        if k <= 0:
            warnings.append(
                f"Calibrated k for {lift.display_name} is not positive ({k:.6f}); "
                "estimate may not exceed the working weight"
            )

        details = EstimateDetails(
            weight=weight,
            reps=reps,
            rir=rir,
            effective_reps=r_eff,
            k=k,
            k_source=k_source,
            endurance_factor=e_factor,
            cns_multiplier=cns,
            velocity_multiplier=v_mult,
            exponent=exponent,
            raw_1rm=raw,
            lift_type=lift,
        )
        logger.debug("1RM estimate: %s", details)

        return EstimateResult(
            estimated_1rm=round_to_half(raw),
            confidence_range=(round_to_half(lower), round_to_half(upper)),
            confidence_percentage=conf.percentage,
            warnings=tuple(warnings),
            details=details,
        )

    # -- calibration ------------------------------------------------------

    def calibrate(
        self,
        lift_type: LiftType | str,
        w1: float,
        r1: int,
        w2: float,
        r2: int,
    ) -> float:
        """
        Derive and store a personal k from two sets of the same lift.

        Both sets are assumed to have been taken at the same effort
        (e.g. both to failure). The result replaces any earlier
        calibration for the lift and is used by later estimates.

        Raises:
            InvalidInput: non-positive weight, reps < 1, r1 == r2, or a
                weight ratio that under/overflows
            UnknownLiftType: unrecognized lift
        """
        w1 = _check_weight(w1)
        w2 = _check_weight(w2)
        r1 = _check_reps(r1)
        r2 = _check_reps(r2)
        if r1 == r2:
            raise InvalidInput("reps", "reps must differ between the two calibration sets")
        lift = LiftType.parse(lift_type)

        ratio = w2 / w1
        if ratio == 0 or not math.isfinite(ratio):
            raise InvalidInput("weight", f"weight ratio {w2!r}/{w1!r} is out of range")

        k = math.log(ratio) / (r1 - r2)
        self.calibration.set(lift, k)

        logger.info(
            "Calibrated %s: k=%.6f from %.1fx%d and %.1fx%d", lift.value, k, w1, r1, w2, r2
        )
        if k <= 0:
            logger.warning(
                "Calibrated k for %s is not positive (%.6f); check the two sets", lift.value, k
            )
        return k

    def calibrated_constants(self) -> dict[LiftType, float]:
        """Return a copy of every calibrated k."""
        return dict(self.calibration.snapshot())

    def reset_calibration(self) -> None:
        """Drop all calibrations; defaults apply again."""
        self.calibration.reset()
        logger.info("Calibration reset")

"""
Behaviour tests for OneRepMaxEngine: validation, lookups, warnings,
calibration state and result invariants.
"""

import math
import threading
from dataclasses import FrozenInstanceError

import pytest

from onerm import (
    EnduranceProfile,
    InvalidInput,
    LiftType,
    OneRepMaxEngine,
    RepSpeed,
    UnknownEnumValue,
    UnknownLiftType,
)
from onerm.core.calibration import CalibrationStore
from onerm.core.engine.config_loader import default_model_tables


@pytest.fixture
def engine() -> OneRepMaxEngine:
    return OneRepMaxEngine(tables=default_model_tables())


def _est(engine, weight=100, reps=5, rir=0, lift="bench_press", endurance="average", speed="normal"):
    return engine.estimate_1rm(weight, reps, rir, lift, endurance, speed)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class TestValidation:

    @pytest.mark.parametrize("weight", [-10, 0, 0.0, float("nan"), float("inf")])
    def test_bad_weight(self, engine, weight):
        with pytest.raises(InvalidInput) as exc:
            _est(engine, weight=weight)
        assert exc.value.field == "weight"

    @pytest.mark.parametrize("reps", [0, -3, 2.5, True])
    def test_bad_reps(self, engine, reps):
        with pytest.raises(InvalidInput) as exc:
            _est(engine, reps=reps)
        assert exc.value.field == "reps"

    @pytest.mark.parametrize("rir", [-1, 6, 1.5])
    def test_bad_rir(self, engine, rir):
        with pytest.raises(InvalidInput) as exc:
            _est(engine, rir=rir)
        assert exc.value.field == "rir"

    @pytest.mark.parametrize("rir", [0, 5])
    def test_rir_bounds_inclusive(self, engine, rir):
        assert _est(engine, rir=rir).details.rir == rir

    def test_negative_weight_squat(self, engine):
        with pytest.raises(InvalidInput, match="weight"):
            engine.estimate_1rm(-10, 5, 0, "squat", "average", "normal")

    def test_numeric_checks_run_before_lookups(self, engine):
        with pytest.raises(InvalidInput) as exc:
            engine.estimate_1rm(-10, 5, 0, "rowing", "nope", "nope")
        assert exc.value.field == "weight"

    def test_reps_beyond_exp_range(self, engine):
        # 0.035 * 100000 far exceeds the largest exponent a float can hold
        with pytest.raises(InvalidInput) as exc:
            _est(engine, reps=100000)
        assert exc.value.field == "reps"
        assert "out of range" in str(exc.value)

    @pytest.mark.parametrize("weight", [1e308, 9e307])
    def test_weight_too_large_to_round(self, engine, weight):
        with pytest.raises(InvalidInput) as exc:
            _est(engine, weight=weight, reps=1)
        assert exc.value.field == "weight"

    def test_large_but_representable_inputs(self, engine):
        result = _est(engine, weight=1e6, reps=200)
        assert math.isfinite(result.confidence_range[1])
        assert len(result.warnings) == 1

    def test_invalid_input_is_value_error(self, engine):
        with pytest.raises(ValueError):
            _est(engine, reps=0)


# ---------------------------------------------------------------------------
# Selector lookups
# ---------------------------------------------------------------------------

class TestLookups:

    def test_unknown_lift_type(self, engine):
        with pytest.raises(UnknownLiftType) as exc:
            engine.estimate_1rm(100, 5, 0, "rowing", "average", "normal")
        assert exc.value.value == "rowing"
        assert exc.value.field == "lift_type"
        assert "rowing" in str(exc.value)

    def test_unknown_endurance_profile(self, engine):
        with pytest.raises(UnknownEnumValue) as exc:
            _est(engine, endurance="marathon")
        assert not isinstance(exc.value, UnknownLiftType)
        assert exc.value.field == "endurance_profile"
        assert exc.value.value == "marathon"

    def test_unknown_rep_speed(self, engine):
        with pytest.raises(UnknownEnumValue) as exc:
            _est(engine, speed="grinding")
        assert exc.value.field == "rep_speed"

    def test_resolvers(self, engine):
        assert engine.resolve_fatigue_constant("squat") == 0.030
        assert engine.resolve_endurance_factor("high") == 1.1
        assert engine.resolve_velocity_multiplier("fast_explosive") == 1.03

    def test_resolvers_accept_enum_members(self, engine):
        assert engine.resolve_fatigue_constant(LiftType.DEADLIFT) == 0.025
        assert engine.resolve_endurance_factor(EnduranceProfile.EXPLOSIVE_LOW) == 0.9
        assert engine.resolve_velocity_multiplier(RepSpeed.VERY_SLOW) == 0.98

    def test_field_names_follow_class_names(self):
        assert LiftType.field_name() == "lift_type"
        assert EnduranceProfile.field_name() == "endurance_profile"
        assert RepSpeed.field_name() == "rep_speed"

    def test_parse_unknown_rep_speed_directly(self):
        with pytest.raises(UnknownEnumValue) as exc:
            RepSpeed.parse("grinding")
        assert not isinstance(exc.value, UnknownLiftType)
        assert exc.value.field == "rep_speed"
        assert "fast_explosive" in str(exc.value)

    def test_resolve_unknown_lift(self, engine):
        with pytest.raises(UnknownLiftType):
            engine.resolve_fatigue_constant("rowing")

    def test_estimate_with_enum_members(self, engine):
        by_enum = engine.estimate_1rm(
            100, 5, 0, LiftType.BENCH_PRESS, EnduranceProfile.AVERAGE, RepSpeed.NORMAL
        )
        assert by_enum == _est(engine)
        assert by_enum.details.lift_type is LiftType.BENCH_PRESS


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------

class TestWarnings:

    def test_reps_over_bench_limit_warns(self, engine):
        result = engine.estimate_1rm(100, 15, 0, "bench_press", "average", "normal")
        assert len(result.warnings) == 1
        assert "15 reps" in result.warnings[0]
        assert "bench press" in result.warnings[0]
        assert result.estimated_1rm > 100

    @pytest.mark.parametrize("lift,limit", [("bench_press", 12), ("squat", 10), ("deadlift", 8)])
    def test_limit_itself_does_not_warn(self, engine, lift, limit):
        assert _est(engine, reps=limit, lift=lift).warnings == ()
        assert len(_est(engine, reps=limit + 1, lift=lift).warnings) == 1

    def test_rir_does_not_count_toward_limit(self, engine):
        assert _est(engine, reps=8, rir=5, lift="deadlift").warnings == ()


# ---------------------------------------------------------------------------
# Result invariants
# ---------------------------------------------------------------------------

class TestResultInvariants:

    @pytest.mark.parametrize("lift", ["bench_press", "squat", "deadlift"])
    @pytest.mark.parametrize("endurance", ["explosive_low", "very_high"])
    @pytest.mark.parametrize("reps", [1, 4, 8, 15])
    def test_outputs_on_half_grid_and_ordered(self, engine, lift, endurance, reps):
        result = engine.estimate_1rm(87.3, reps, 1, lift, endurance, "fast_explosive")
        lower, upper = result.confidence_range
        for value in (result.estimated_1rm, lower, upper):
            assert (value * 2).is_integer()
        assert lower < result.estimated_1rm < upper

    def test_more_reps_strictly_higher_estimate(self, engine):
        results = [_est(engine, reps=r) for r in range(1, 21)]
        raws = [r.details.raw_1rm for r in results]
        rounded = [r.estimated_1rm for r in results]
        assert all(a < b for a, b in zip(raws, raws[1:]))
        assert all(a < b for a, b in zip(rounded, rounded[1:]))

    def test_result_is_immutable(self, engine):
        result = _est(engine)
        with pytest.raises(FrozenInstanceError):
            result.estimated_1rm = 0.0

    def test_details_keep_unrounded_values(self, engine):
        result = _est(engine, weight=101.3)
        assert result.details.weight == 101.3
        assert not (result.details.raw_1rm * 2).is_integer()


# ---------------------------------------------------------------------------
# Calibration state
# ---------------------------------------------------------------------------

class TestCalibration:

    def test_calibration_overrides_default(self, engine):
        k = engine.calibrate("deadlift", 200, 5, 180, 8)
        assert engine.resolve_fatigue_constant("deadlift") == k
        result = engine.estimate_1rm(180, 5, 0, "deadlift", "average", "normal")
        assert result.details.k == pytest.approx(0.035120, abs=1e-6)
        assert result.details.k != 0.025
        assert result.details.k_source == "calibrated"

    def test_other_lifts_keep_defaults(self, engine):
        engine.calibrate("deadlift", 200, 5, 180, 8)
        assert engine.resolve_fatigue_constant("squat") == 0.030
        assert _est(engine).details.k_source == "default"

    def test_idempotent(self, engine):
        k1 = engine.calibrate("squat", 140, 3, 120, 8)
        state1 = engine.calibrated_constants()
        k2 = engine.calibrate("squat", 140, 3, 120, 8)
        assert k1 == k2
        assert engine.calibrated_constants() == state1

    def test_overwrite_not_merge(self, engine):
        engine.calibrate("bench_press", 100, 5, 90, 8)
        second = engine.calibrate("bench_press", 100, 3, 80, 10)
        assert engine.resolve_fatigue_constant("bench_press") == second
        assert engine.calibrated_constants() == {LiftType.BENCH_PRESS: second}

    @pytest.mark.parametrize("w1,w2", [(100, 100), (100, 90), (50, 200)])
    def test_equal_reps_always_fail(self, engine, w1, w2):
        with pytest.raises(InvalidInput, match="differ") as exc:
            engine.calibrate("bench_press", w1, 5, w2, 5)
        assert exc.value.field == "reps"
        assert engine.calibrated_constants() == {}

    @pytest.mark.parametrize("w1,w2", [(0, 100), (100, -5)])
    def test_non_positive_weights(self, engine, w1, w2):
        with pytest.raises(InvalidInput) as exc:
            engine.calibrate("squat", w1, 3, w2, 8)
        assert exc.value.field == "weight"

    @pytest.mark.parametrize("r1,r2", [(0, 5), (5, 0)])
    def test_reps_below_one(self, engine, r1, r2):
        with pytest.raises(InvalidInput) as exc:
            engine.calibrate("squat", 100, r1, 90, r2)
        assert exc.value.field == "reps"

    def test_unknown_lift_rejected(self, engine):
        with pytest.raises(UnknownLiftType):
            engine.calibrate("rowing", 100, 5, 90, 8)
        assert engine.calibrated_constants() == {}

    def test_non_positive_k_is_stored_but_flagged(self, engine):
        # Heavier weight for more reps → negative k
        k = engine.calibrate("squat", 100, 5, 110, 8)
        assert k < 0
        result = _est(engine, lift="squat")
        assert result.details.k == k
        assert any("not positive" in w for w in result.warnings)

    @pytest.mark.parametrize("w1,w2", [(1e308, 1e-308), (1e-308, 1e308)])
    def test_weight_ratio_out_of_range(self, engine, w1, w2):
        with pytest.raises(InvalidInput) as exc:
            engine.calibrate("squat", w1, 1, w2, 2)
        assert exc.value.field == "weight"
        assert engine.calibrated_constants() == {}

    def test_reset(self, engine):
        engine.calibrate("squat", 140, 3, 120, 8)
        engine.reset_calibration()
        assert engine.calibrated_constants() == {}
        assert engine.resolve_fatigue_constant("squat") == 0.030

    def test_engines_do_not_share_calibrations(self):
        tables = default_model_tables()
        a = OneRepMaxEngine(tables=tables)
        b = OneRepMaxEngine(tables=tables)
        a.calibrate("squat", 140, 3, 120, 8)
        assert b.resolve_fatigue_constant("squat") == 0.030

    def test_shared_store(self):
        store = CalibrationStore()
        tables = default_model_tables()
        a = OneRepMaxEngine(tables=tables, calibration=store)
        b = OneRepMaxEngine(tables=tables, calibration=store)
        k = a.calibrate("squat", 140, 3, 120, 8)
        assert b.resolve_fatigue_constant("squat") == k


class TestCalibrationStore:

    def test_snapshot_is_read_only(self):
        store = CalibrationStore()
        store.set(LiftType.SQUAT, 0.04)
        with pytest.raises(TypeError):
            store.snapshot()[LiftType.SQUAT] = 1.0  # type: ignore[index]

    def test_concurrent_writers_leave_whole_values(self):
        store = CalibrationStore()
        values = [0.02 + i / 1000 for i in range(50)]

        def writer(v: float) -> None:
            for lift in LiftType:
                store.set(lift, v)

        threads = [threading.Thread(target=writer, args=(v,)) for v in values]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 3
        for lift in LiftType:
            assert store.get(lift) in values
        assert all(math.isfinite(v) for v in store.snapshot().values())

"""Tests for plan-level dial readings and the plan model."""

from datetime import date

import pytest
from pydantic import ValidationError

from autocall_logo.geometry import calculate_rotation_angle
from autocall_logo.models import BarrierMapping, DesignTokens, EaseFunction, PlanData
from autocall_logo.readings import DialReadings, barrier_angle_for, compute_readings


class TestComputeReadings:
    def test_sample(self, sample_plan):
        r = compute_readings(sample_plan)
        assert r.performance == pytest.approx(10.0)
        assert r.pointer_angle == pytest.approx(51.6)
        assert r.barrier_angle == pytest.approx(-91.875)
        assert r.rotation_angle == pytest.approx(
            calculate_rotation_angle(date(2023, 6, 15), date(2026, 10, 19))
        )

    def test_final_hurdle_on_performance_scale(self, sample_plan):
        # Latest observation hurdle 75% -> -25% performance
        assert compute_readings(sample_plan).final_hurdle_angle == pytest.approx(-68.4)

    def test_pointer_ease_token(self, sample_plan):
        plan = sample_plan.model_copy(update={
            "design_tokens": DesignTokens(pointer_ease=EaseFunction.LINEAR),
        })
        assert compute_readings(plan).pointer_angle == pytest.approx(42.0)

    def test_pointer_clamped(self, sample_plan):
        plan = sample_plan.model_copy(update={"current_level": 20000})
        assert compute_readings(plan).pointer_angle == pytest.approx(120)


class TestBarrierAngleFor:
    def test_piecewise_default(self, sample_plan):
        assert barrier_angle_for(sample_plan) == pytest.approx(-91.875)

    def test_linear_token(self, sample_plan):
        plan = sample_plan.model_copy(update={
            "design_tokens": DesignTokens(barrier_mapping=BarrierMapping.LINEAR),
        })
        assert barrier_angle_for(plan) == pytest.approx(-97.5)


class TestPerformanceLabel:
    def _readings(self, performance):
        return DialReadings(0, performance, 0, 0, 0)

    def test_positive(self):
        assert self._readings(10).performance_label == "+10.0%"

    def test_zero(self):
        assert self._readings(0).performance_label == "+0.0%"

    def test_negative(self):
        assert self._readings(-4.26).performance_label == "-4.3%"


class TestPlanData:
    def test_defaults(self):
        plan = PlanData(
            plan_name="P", tenor_years=5, start_date="2024-01-01",
            current_date="2025-01-01", initial_strike_level=100, current_level=100,
        )
        assert plan.barrier_percent == -30
        assert plan.observations == []
        assert plan.design_tokens.pointer_ease == EaseFunction.EASE_OUT_QUAD
        assert plan.resolved_final_hurdle_percent == 100

    def test_explicit_final_hurdle_wins(self, sample_plan):
        plan = sample_plan.model_copy(update={"final_hurdle_percent": 110})
        assert plan.resolved_final_hurdle_percent == 110

    def test_latest_observation(self, sample_plan):
        assert sample_plan.latest_observation.date == date(2033, 6, 14)

    def test_unknown_keys_ignored(self):
        plan = PlanData.model_validate({
            "plan_name": "P", "tenor_years": 5, "start_date": "2024-01-01",
            "current_date": "2025-01-01", "initial_strike_level": 100,
            "current_level": 100, "legacy_field": 1,
        })
        assert plan.plan_name == "P"

    def test_ease_token_from_json_name(self):
        tokens = DesignTokens.model_validate({"pointer_ease": "easeInQuad"})
        assert tokens.pointer_ease == EaseFunction.EASE_IN_QUAD

    @pytest.mark.parametrize("field,value", [
        ("tenor_years", 0),
        ("initial_strike_level", 0),
        ("start_date", "2024-13-45"),
    ])
    def test_invalid(self, field, value):
        raw = {
            "plan_name": "P", "tenor_years": 5, "start_date": "2024-01-01",
            "current_date": "2025-01-01", "initial_strike_level": 100, "current_level": 100,
        }
        raw[field] = value
        with pytest.raises(ValidationError):
            PlanData.model_validate(raw)

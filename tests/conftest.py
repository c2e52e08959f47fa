"""Shared test fixtures for autocall_logo tests."""

import json
from datetime import date

import pytest

from autocall_logo.models import Observation, PlanData


@pytest.fixture()
def sample_plan():
    """Ten-year plan, three years and four months in, up 10%."""
    return PlanData(
        plan_name="Mariana 10:10 – FTSE",
        tenor_years=10,
        start_date=date(2023, 6, 15),
        current_date=date(2026, 10, 19),
        initial_strike_level=7400,
        current_level=8140,
        barrier_percent=-35,
        counterparty="Morgan Stanley",
        bottom_arrow_target=45,
        observations=[
            Observation(date=date(2024, 6, 14), hurdle_percent=100),
            Observation(date=date(2025, 6, 16), hurdle_percent=100),
            Observation(date=date(2026, 6, 15), hurdle_percent=95),
            Observation(date=date(2027, 6, 15), hurdle_percent=95),
            Observation(date=date(2028, 6, 15), hurdle_percent=90),
            Observation(date=date(2033, 6, 14), hurdle_percent=75),
        ],
    )


@pytest.fixture()
def called_plan(sample_plan):
    """The sample plan, called at its second observation."""
    return sample_plan.model_copy(update={
        "is_called": True,
        "called_date": date(2025, 6, 16),
    })


@pytest.fixture()
def plan_file(tmp_path, sample_plan):
    """The sample plan written to a JSON file."""
    path = tmp_path / "input.json"
    path.write_text(json.dumps(sample_plan.model_dump(mode="json")), encoding="utf-8")
    return path

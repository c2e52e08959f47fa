"""Tests for the plan-year layout of the live dial."""

from datetime import date

import pytest

from autocall_logo.models import DesignTokens, Observation
from autocall_logo.plan_years import (
    CURRENT,
    FUTURE,
    PAST,
    BarPiece,
    YearBar,
    add_years,
    bar_arc,
    bar_extent,
    build_dial_layout,
    current_plan_year_index,
    days_in_plan_year,
    days_per_segment,
    plan_year_dates,
    plan_year_index_for,
    progress_in_plan_year,
    split_wrapped,
    tenor_end_date,
    total_tenor_days,
)


class TestCalendar:
    def test_add_years_leap_day_rolls_forward(self):
        assert add_years(date(2024, 2, 29), 1) == date(2025, 3, 1)

    def test_add_years_leap_to_leap(self):
        assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)

    def test_plan_year_dates(self):
        assert plan_year_dates(date(2023, 6, 15), 0) == (date(2023, 6, 15), date(2024, 6, 14))
        assert plan_year_dates(date(2023, 6, 15), 2) == (date(2025, 6, 15), date(2026, 6, 14))

    def test_days_in_plan_year_counts_leap_day(self):
        assert days_in_plan_year(date(2023, 6, 15), 0) == 366
        assert days_in_plan_year(date(2023, 6, 15), 1) == 365

    def test_tenor(self):
        start = date(2020, 1, 1)
        assert tenor_end_date(start, 10) == date(2030, 1, 1)
        assert total_tenor_days(start, 10) == 3653
        assert days_per_segment(start, 10) == pytest.approx(365.3)


class TestPlanYearIndex:
    def test_first_day(self):
        assert plan_year_index_for(date(2023, 6, 15), date(2023, 6, 15), 10) == 0

    def test_last_day_of_year(self):
        assert plan_year_index_for(date(2023, 6, 15), date(2024, 6, 14), 10) == 0
        assert plan_year_index_for(date(2023, 6, 15), date(2024, 6, 15), 10) == 1

    def test_outside_tenor(self):
        assert plan_year_index_for(date(2023, 6, 15), date(2023, 6, 14), 10) == -1
        assert plan_year_index_for(date(2023, 6, 15), date(2026, 6, 15), 3) == -1

    def test_current_falls_back_to_last_year(self):
        assert current_plan_year_index(date(2023, 6, 15), date(2040, 1, 1), 5) == 4


class TestProgress:
    def test_start_of_year(self):
        assert progress_in_plan_year(date(2023, 6, 15), 0, date(2023, 6, 15)) == 0

    def test_mid_year(self):
        start = date(2021, 1, 1)
        assert progress_in_plan_year(start, 0, date(2021, 7, 2)) == pytest.approx(182 / 365)

    def test_clamped(self):
        start = date(2021, 1, 1)
        assert progress_in_plan_year(start, 0, date(2030, 1, 1)) == 1
        assert progress_in_plan_year(start, 0, date(2020, 1, 1)) == 0


class TestBarGeometry:
    def test_bar_arc(self):
        assert bar_arc(3) == pytest.approx(33)
        assert bar_arc(0) == pytest.approx(36)

    def test_current_bar_straddles_twelve(self):
        assert bar_extent(2, 2, 0.5, 33, 3) == pytest.approx((-16.5, 16.5))

    def test_past_bar_clockwise(self):
        assert bar_extent(1, 2, 0.5, 33, 3) == pytest.approx((19.5, 52.5))
        assert bar_extent(0, 2, 0.5, 33, 3) == pytest.approx((55.5, 88.5))

    def test_future_bar_anticlockwise(self):
        assert bar_extent(3, 2, 0.5, 33, 3) == pytest.approx((-52.5, -19.5))

    def test_split_wrapped_past_six(self):
        assert split_wrapped(170, 203) == [(170, 180), (-180, -157)]

    def test_split_wrapped_before_six(self):
        assert split_wrapped(-200, -170) == [(-180, -170), (160, 180)]

    def test_split_wrapped_noop(self):
        assert split_wrapped(-20, 10) == [(-20, 10)]


class TestYearBar:
    def test_label(self):
        assert YearBar(0, 0, 33, PAST, 365).label == "Y1"

    def test_current_pieces(self):
        bar = YearBar(3, -10, 20, CURRENT, 365)
        assert bar.pieces() == [BarPiece(-10, 0, elapsed=False), BarPiece(0, 20, elapsed=True)]

    def test_current_at_start_of_year(self):
        bar = YearBar(0, -33, 0, CURRENT, 365)
        assert bar.pieces() == [BarPiece(-33, 0, elapsed=False)]

    def test_future_pieces_wrap(self):
        pieces = YearBar(8, -200, -167, FUTURE, 365).pieces()
        assert len(pieces) == 2
        assert not any(p.elapsed for p in pieces)


class TestBuildDialLayout:
    def test_current_year(self, sample_plan):
        layout = build_dial_layout(sample_plan)
        assert layout.current_year_index == 3
        assert layout.progress == pytest.approx(126 / 365)
        assert layout.end_date == date(2033, 6, 15)

    def test_bars(self, sample_plan):
        layout = build_dial_layout(sample_plan)
        assert len(layout.bars) == 10
        assert [b.status for b in layout.bars[:4]] == [PAST, PAST, PAST, CURRENT]
        assert all(b.status == FUTURE for b in layout.bars[4:])

    def test_bars_separated_by_gap(self, sample_plan):
        layout = build_dial_layout(sample_plan)
        ordered = sorted(layout.bars, key=lambda b: b.start_angle)
        for left, right in zip(ordered, ordered[1:]):
            assert right.start_angle - left.end_angle == pytest.approx(3)
        assert ordered[-1].end_angle - ordered[0].start_angle == pytest.approx(357)

    def test_short_tenor_draws_fewer_bars(self, sample_plan):
        plan = sample_plan.model_copy(update={"tenor_years": 5})
        assert len(build_dial_layout(plan).bars) == 5

    def test_first_day_current_bar_all_remaining(self, sample_plan):
        plan = sample_plan.model_copy(update={"current_date": date(2023, 6, 15)})
        layout = build_dial_layout(plan)
        assert layout.progress == 0
        assert layout.bars[0].status == CURRENT
        assert layout.bars[0].end_angle == 0

    def test_sub_degree_bars_skipped(self, sample_plan):
        plan = sample_plan.model_copy(update={"design_tokens": DesignTokens(gap_angle_deg=35.95)})
        assert build_dial_layout(plan).bars == []

    def test_markers(self, sample_plan):
        layout = build_dial_layout(sample_plan)
        assert len(layout.markers) == 6
        assert [m.is_past for m in layout.markers] == [True, True, True, False, False, False]
        assert [m.is_final for m in layout.markers] == [False] * 5 + [True]

    def test_marker_at_start_of_current_year(self, sample_plan):
        layout = build_dial_layout(sample_plan)
        marker = layout.markers[2]
        assert marker.angle == pytest.approx(layout.progress * layout.bar_arc)

    def test_marker_at_start_of_next_year(self, sample_plan):
        layout = build_dial_layout(sample_plan)
        marker = layout.markers[3]
        assert marker.angle == pytest.approx(-((1 - layout.progress) * layout.bar_arc + 3))

    def test_markers_normalized(self, sample_plan):
        for marker in build_dial_layout(sample_plan).markers:
            assert -180 < marker.angle <= 180

    def test_marker_outside_tenor_skipped(self, sample_plan):
        plan = sample_plan.model_copy(update={
            "observations": [*sample_plan.observations, Observation(date=date(2040, 1, 1))],
        })
        assert len(build_dial_layout(plan).markers) == 6

    def test_next_observation_angle(self, sample_plan):
        # Next observation is 2027-06-15 at a 95% hurdle
        assert build_dial_layout(sample_plan).next_observation_angle == pytest.approx(-30)

    def test_no_next_observation(self, sample_plan):
        plan = sample_plan.model_copy(update={"current_date": date(2033, 6, 14)})
        assert build_dial_layout(plan).next_observation_angle is None

    def test_final_index_angle_from_latest_observation(self, sample_plan):
        assert build_dial_layout(sample_plan).final_index_angle == pytest.approx(-80)

    def test_final_index_ignores_explicit_final_hurdle(self, sample_plan):
        plan = sample_plan.model_copy(update={"final_hurdle_percent": 130})
        assert build_dial_layout(plan).final_index_angle == pytest.approx(-80)

    def test_final_index_without_observations(self, sample_plan):
        plan = sample_plan.model_copy(update={"observations": [], "final_hurdle_percent": 130})
        assert build_dial_layout(plan).final_index_angle == 0

    def test_custom_gap(self, sample_plan):
        plan = sample_plan.model_copy(update={"design_tokens": DesignTokens(gap_angle_deg=0)})
        layout = build_dial_layout(plan)
        assert layout.bar_arc == pytest.approx(36)

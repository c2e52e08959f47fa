"""Plan-year layout of the live dial's outer ring.

Unlike the fixed-rate ring rotation in :mod:`autocall_logo.geometry`, plan
years here are calendar accurate: plan year ``i`` runs from the start date
plus ``i`` years to the day before the start date plus ``i + 1`` years.

The ring is drawn as if it always had ten bars. 12 o'clock is "now": the
current plan year's bar straddles it (elapsed share to the right, remaining
share to the left), past years stack clockwise, future years anticlockwise.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from autocall_logo.geometry import (
    days_between,
    map_hurdle_percent_to_angle,
    normalize_angle,
)
from autocall_logo.models import PlanData

logger = logging.getLogger(__name__)

MAX_DISPLAY_YEARS = 10
MIN_BAR_SPAN_DEG = 1.0

PAST = "past"
CURRENT = "current"
FUTURE = "future"


def add_years(d: date, years: int) -> date:
    """Add calendar years. 29 Feb rolls forward to 1 Mar in non-leap years."""
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return date(d.year + years, 3, 1)


def plan_year_dates(start: date, index: int) -> tuple[date, date]:
    """First and last day (inclusive) of plan year ``index``."""
    year_start = add_years(start, index)
    year_end = add_years(start, index + 1) - timedelta(days=1)
    return year_start, year_end


def days_in_plan_year(start: date, index: int) -> int:
    year_start, year_end = plan_year_dates(start, index)
    return (year_end - year_start).days + 1


def tenor_end_date(start: date, tenor_years: int) -> date:
    return add_years(start, tenor_years)


def total_tenor_days(start: date, tenor_years: int) -> int:
    return (tenor_end_date(start, tenor_years) - start).days


def days_per_segment(start: date, tenor_years: int) -> float:
    return total_tenor_days(start, tenor_years) / tenor_years


def plan_year_index_for(start: date, d: date, max_years: int) -> int:
    """Plan year containing ``d``, or -1 when it falls outside the tenor."""
    for i in range(max_years):
        year_start, year_end = plan_year_dates(start, i)
        if year_start <= d <= year_end:
            return i
    return -1


def current_plan_year_index(start: date, current: date, max_years: int) -> int:
    """Plan year containing ``current``; the last year when outside the tenor."""
    index = plan_year_index_for(start, current, max_years)
    if index >= 0:
        return index
    return max(0, max_years - 1)


def progress_in_plan_year(start: date, index: int, current: date) -> float:
    """Fraction of plan year ``index`` elapsed at ``current``, in [0, 1]."""
    year_start, _ = plan_year_dates(start, index)
    duration = days_between(year_start, add_years(year_start, 1))
    if duration <= 0:
        return 0.5
    return max(0.0, min(1.0, days_between(year_start, current) / duration))


def bar_arc(gap_angle: float) -> float:
    """Angular size of one bar when ten bars and ten gaps fill the circle."""
    return (360 - MAX_DISPLAY_YEARS * gap_angle) / MAX_DISPLAY_YEARS


def bar_extent(
    index: int,
    current_index: int,
    progress: float,
    arc: float,
    gap_angle: float,
) -> tuple[float, float]:
    """(start, end) angles of a bar; start is always the more negative edge."""
    if index == current_index:
        return -(1 - progress) * arc, progress * arc

    if index < current_index:
        years_ago = current_index - index
        start = progress * arc + gap_angle + (years_ago - 1) * (arc + gap_angle)
        return start, start + arc

    years_ahead = index - current_index
    end_offset = (1 - progress) * arc + gap_angle + (years_ahead - 1) * (arc + gap_angle)
    return -end_offset - arc, -end_offset


def split_wrapped(start: float, end: float) -> list[tuple[float, float]]:
    """Split a bar crossing 6 o'clock into pieces that stay within ±180."""
    if start <= 180 < end:
        return [(start, 180.0), (-180.0, end - 360)]
    if start < -180 <= end:
        return [(-180.0, end), (start + 360, 180.0)]
    return [(start, end)]


@dataclass
class BarPiece:
    start_angle: float
    end_angle: float
    elapsed: bool


@dataclass
class YearBar:
    index: int
    start_angle: float
    end_angle: float
    status: str
    actual_days: int

    @property
    def label(self) -> str:
        return f"Y{self.index + 1}"

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2

    def pieces(self) -> list[BarPiece]:
        """Drawable wedges; the current bar is split at 12 o'clock."""
        if self.status == CURRENT:
            parts = []
            if self.start_angle < 0:
                parts.append(BarPiece(self.start_angle, min(0.0, self.end_angle), elapsed=False))
            if self.end_angle > 0:
                parts.append(BarPiece(max(0.0, self.start_angle), self.end_angle, elapsed=True))
            return parts
        elapsed = self.status == PAST
        return [BarPiece(s, e, elapsed) for s, e in split_wrapped(self.start_angle, self.end_angle)]


@dataclass
class ObservationMarker:
    index: int
    date: date
    angle: float
    hurdle_percent: float
    triggered: bool
    is_past: bool
    is_final: bool


@dataclass
class DialLayout:
    current_year_index: int
    progress: float
    bar_arc: float
    end_date: date
    total_days: int
    days_per_segment: float
    bars: list[YearBar] = field(default_factory=list)
    markers: list[ObservationMarker] = field(default_factory=list)
    next_observation_angle: float | None = None
    final_index_angle: float = 0.0


def build_dial_layout(plan: PlanData) -> DialLayout:
    """Compute bar and marker angles for the live dial."""
    start = plan.start_date
    current = plan.current_date
    gap = plan.design_tokens.gap_angle_deg
    max_years = min(plan.tenor_years, MAX_DISPLAY_YEARS)
    arc = bar_arc(gap)

    current_index = current_plan_year_index(start, current, max_years)
    progress = progress_in_plan_year(start, current_index, current)

    layout = DialLayout(
        current_year_index=current_index,
        progress=progress,
        bar_arc=arc,
        end_date=tenor_end_date(start, plan.tenor_years),
        total_days=total_tenor_days(start, plan.tenor_years),
        days_per_segment=days_per_segment(start, plan.tenor_years),
    )

    for i in range(max_years):
        bar_start, bar_end = bar_extent(i, current_index, progress, arc, gap)
        if abs(bar_end - bar_start) < MIN_BAR_SPAN_DEG:
            continue
        if i == current_index:
            status = CURRENT
        elif i < current_index:
            status = PAST
        else:
            status = FUTURE
        layout.bars.append(YearBar(i, bar_start, bar_end, status, days_in_plan_year(start, i)))

    final_obs = plan.latest_observation
    for n, obs in enumerate(plan.observations):
        year_index = plan_year_index_for(start, obs.date, max_years)
        if year_index < 0:
            logger.debug("Observation %s outside tenor, not drawn", obs.date)
            continue
        year_start, _ = plan_year_dates(start, year_index)
        progress_in_year = (obs.date - year_start).days / days_in_plan_year(start, year_index)
        bar_start, bar_end = bar_extent(year_index, current_index, progress, arc, gap)
        # Start of the plan year sits at the bar's clockwise edge
        angle = normalize_angle(bar_end - progress_in_year * (bar_end - bar_start))
        layout.markers.append(ObservationMarker(
            index=n,
            date=obs.date,
            angle=angle,
            hurdle_percent=obs.hurdle_percent,
            triggered=obs.triggered,
            is_past=obs.date < current,
            is_final=obs is final_obs,
        ))

    upcoming = sorted((o for o in plan.observations if o.date > current), key=lambda o: o.date)
    if upcoming:
        layout.next_observation_angle = map_hurdle_percent_to_angle(upcoming[0].hurdle_percent)
    # The final-index arrow follows the latest observation, not the explicit final hurdle
    latest = plan.latest_observation
    layout.final_index_angle = map_hurdle_percent_to_angle(
        latest.hurdle_percent if latest is not None else 100.0
    )

    return layout

"""Geometry for the dynamic logo dial.

Angle convention everywhere: degrees, 0 = 12 o'clock, clockwise positive.
Dates are calendar dates interpreted as UTC midnight. Percentages are plain
numbers (37.5 means 37.5%).

Every function here is pure: numbers in, numbers or SVG path strings out.
"""

import logging
import math
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time, timezone
from typing import NamedTuple

from autocall_logo.models import EaseFunction

logger = logging.getLogger(__name__)

# --- Design tokens ---

VIEWBOX_SIZE = 1024
CENTER = VIEWBOX_SIZE / 2
R_OUTER = 420
W_RING = 64
R_BLUE = 330
TICK_STROKE = 2
TICK_LENGTH = 14
BARRIER_TICK_LENGTH = 20
MATURITY_MARK_LENGTH = 12
POINTER_HEIGHT = 300
CENTER_DOT_R = 48
BOTTOM_ARROW_WIDTH = 120

# Ten years of exactly 365 days make one full revolution
DAYS_IN_10_YEARS = 10 * 365
ANGLE_PER_DAY = 360 / DAYS_IN_10_YEARS
MS_PER_DAY = 24 * 60 * 60 * 1000

COLLISION_THRESHOLD_DEG = 5.0

# (percent, degrees) anchors; each step is one clock hour
PERFORMANCE_ANCHORS: tuple[tuple[float, float], ...] = (
    (-50, -120),
    (-30, -90),
    (-5, -30),
    (0, 0),
    (5, 30),
    (30, 90),
    (50, 120),
)

HURDLE_ANCHORS: tuple[tuple[float, float], ...] = (
    (50, -120),
    (70, -90),
    (85, -60),
    (95, -30),
    (100, 0),
    (105, 30),
    (115, 60),
    (130, 90),
    (150, 120),
)

DateLike = str | date | datetime


class Point(NamedTuple):
    x: float
    y: float


class PlacedAngle(NamedTuple):
    angle: float
    has_radial_offset: bool = False


class CollisionResult(NamedTuple):
    angle: float
    radial_offset: float


# --- Dates ---


def parse_date(value: DateLike) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    ISO ``YYYY-MM-DD`` strings and plain dates become UTC midnight. Naive
    datetimes are taken to be UTC. Malformed strings raise ``ValueError``;
    callers that accept user input guard for that themselves.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time(0), tzinfo=timezone.utc)
    return datetime.combine(date.fromisoformat(value), time(0), tzinfo=timezone.utc)


def days_between(start: DateLike, end: DateLike) -> float:
    """Signed (possibly fractional) number of days from ``start`` to ``end``."""
    delta = parse_date(end) - parse_date(start)
    return delta.total_seconds() * 1000 / MS_PER_DAY


def calculate_rotation_angle(start: DateLike, current: DateLike) -> float:
    """Ring rotation for the elapsed time. Not wrapped: 3650 days is 360."""
    return days_between(start, current) * ANGLE_PER_DAY


def calculate_observation_tick_angle(
    start: DateLike, observation: DateLike, current: DateLike,
) -> float:
    """Fixed position of an observation tick on the rotating ring.

    The tick reaches 12 o'clock once the ring rotation equals the angle of
    the observation date, so its resting position is the negated angle.
    ``current`` does not move the tick relative to the ring.
    """
    return -days_between(start, observation) * ANGLE_PER_DAY


def calculate_performance(initial_level: float, current_level: float) -> float:
    """Percentage change from the initial strike level."""
    return (current_level - initial_level) / initial_level * 100


def format_date(value: DateLike) -> str:
    """``2024-03-05`` -> ``05 Mar 2024``."""
    return parse_date(value).strftime("%d %b %Y")


# --- Easing ---


def ease_out_quad(t: float) -> float:
    return t * (2 - t)


def ease_in_quad(t: float) -> float:
    return t * t


def linear(t: float) -> float:
    return t


EASINGS: dict[str, Callable[[float], float]] = {
    EaseFunction.EASE_OUT_QUAD.value: ease_out_quad,
    EaseFunction.EASE_IN_QUAD.value: ease_in_quad,
    EaseFunction.LINEAR.value: linear,
}


def get_ease(name: str | EaseFunction | None) -> Callable[[float], float]:
    """Resolve a ``pointer_ease`` token. Unknown names use ease-out-quad."""
    if isinstance(name, EaseFunction):
        name = name.value
    if name is None:
        return ease_out_quad
    ease = EASINGS.get(name)
    if ease is None:
        logger.warning("Unknown ease function %r, using easeOutQuad", name)
        return ease_out_quad
    return ease


# --- Piecewise mappings ---


def _finite_or_none(value: object) -> float | None:
    if value is None:
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _interpolate(
    value: float,
    anchors: Sequence[tuple[float, float]],
    ease: Callable[[float], float],
) -> float:
    for (v1, a1), (v2, a2) in zip(anchors, anchors[1:]):
        if v1 <= value <= v2:
            t = (value - v1) / (v2 - v1)
            return a1 + ease(t) * (a2 - a1)
    return 0.0


def map_performance_to_angle(
    performance_percent: float | None,
    ease: Callable[[float], float] = ease_out_quad,
) -> float:
    """Map market performance to the pointer angle.

    -50% -> -120 (8:00), -30% -> -90, -5% -> -30, 0% -> 0 (12:00),
    +5% -> +30, +30% -> +90, +50% -> +120 (4:00). Inputs are clamped to
    [-50, 50] first; within each segment the position is eased before
    interpolating. Non-finite input maps to 0.
    """
    pct = _finite_or_none(performance_percent)
    if pct is None:
        return 0.0
    return _interpolate(_clamp(pct, -50, 50), PERFORMANCE_ANCHORS, ease)


def map_barrier_to_angle(barrier_percent: float | None) -> float:
    """Barrier angle on the same scale as the performance pointer."""
    return map_performance_to_angle(barrier_percent)


def map_barrier_to_angle_linear(barrier_percent: float | None) -> float:
    """Legacy closed form used by older static snapshots.

    Agrees with :func:`map_barrier_to_angle` only at -30% and -50%.
    """
    pct = _finite_or_none(barrier_percent)
    if pct is None:
        return 0.0
    return -(90 + (abs(pct) - 30) * 1.5)


def map_hurdle_percent_to_angle(hurdle_percent: float | None) -> float:
    """Map a hurdle level (100 = strike) to an angle, clamped to [50, 150].

    50% -> -120, 70% -> -90, 85% -> -60, 95% -> -30, 100% -> 0,
    105% -> +30, 115% -> +60, 130% -> +90, 150% -> +120. No easing.
    """
    pct = _finite_or_none(hurdle_percent)
    if pct is None:
        return 0.0
    return _interpolate(_clamp(pct, 50, 150), HURDLE_ANCHORS, linear)


# --- Coordinates & paths ---


def angle_to_coords(
    angle_deg: float,
    radius: float,
    cx: float = CENTER,
    cy: float = CENTER,
) -> Point:
    """Screen coordinates for a polar point (y axis points down)."""
    radians = math.radians(angle_deg - 90)
    return Point(cx + radius * math.cos(radians), cy + radius * math.sin(radians))


def _fmt(value: float) -> str:
    return f"{value:.3f}"


def describe_arc(
    cx: float, cy: float, radius: float, start_angle: float, end_angle: float,
) -> str:
    """SVG path for an arc of ``radius`` from ``start_angle`` to ``end_angle``."""
    start = angle_to_coords(start_angle, radius, cx, cy)
    end = angle_to_coords(end_angle, radius, cx, cy)

    large_arc = 1 if abs(end_angle - start_angle) > 180 else 0
    sweep = 1 if end_angle > start_angle else 0

    return (
        f"M {_fmt(start.x)} {_fmt(start.y)} "
        f"A {_fmt(radius)} {_fmt(radius)} 0 {large_arc} {sweep} {_fmt(end.x)} {_fmt(end.y)}"
    )


def _wedge_path(
    start_angle: float,
    end_angle: float,
    inner_radius: float,
    outer_radius: float,
    large_arc: int,
    cx: float,
    cy: float,
) -> str:
    inner_start = angle_to_coords(start_angle, inner_radius, cx, cy)
    inner_end = angle_to_coords(end_angle, inner_radius, cx, cy)
    outer_start = angle_to_coords(start_angle, outer_radius, cx, cy)
    outer_end = angle_to_coords(end_angle, outer_radius, cx, cy)

    # Inner arc clockwise, outer arc back anticlockwise
    return " ".join([
        f"M {_fmt(inner_start.x)} {_fmt(inner_start.y)}",
        f"A {_fmt(inner_radius)} {_fmt(inner_radius)} 0 {large_arc} 1 "
        f"{_fmt(inner_end.x)} {_fmt(inner_end.y)}",
        f"L {_fmt(outer_end.x)} {_fmt(outer_end.y)}",
        f"A {_fmt(outer_radius)} {_fmt(outer_radius)} 0 {large_arc} 0 "
        f"{_fmt(outer_start.x)} {_fmt(outer_start.y)}",
        "Z",
    ])


def generate_segment_path(
    segment_index: int,
    total_segments: int,
    inner_radius: float,
    outer_radius: float,
    gap_angle: float = 3,
    cx: float = CENTER,
    cy: float = CENTER,
) -> str:
    """Closed annular wedge for one of ``total_segments`` equal ring segments.

    Half of ``gap_angle`` is taken off each end of the segment.
    """
    segment_angle = 360 / total_segments
    start_angle = segment_index * segment_angle + gap_angle / 2
    end_angle = (segment_index + 1) * segment_angle - gap_angle / 2
    large_arc = 1 if segment_angle - gap_angle > 180 else 0
    return _wedge_path(start_angle, end_angle, inner_radius, outer_radius, large_arc, cx, cy)


def generate_partial_segment_path(
    start_angle: float,
    end_angle: float,
    inner_radius: float,
    outer_radius: float,
    cx: float = CENTER,
    cy: float = CENTER,
) -> str:
    """Closed annular wedge between two explicit angles (order-insensitive)."""
    if start_angle > end_angle:
        start_angle, end_angle = end_angle, start_angle
    large_arc = 1 if end_angle - start_angle > 180 else 0
    return _wedge_path(start_angle, end_angle, inner_radius, outer_radius, large_arc, cx, cy)


def direction_to_target(
    from_angle: float,
    from_radius: float,
    target_angle: float,
    target_radius: float,
    cx: float = CENTER,
    cy: float = CENTER,
) -> float:
    """Clock-convention bearing from one polar point towards another."""
    origin = angle_to_coords(from_angle, from_radius, cx, cy)
    target = angle_to_coords(target_angle, target_radius, cx, cy)
    return math.degrees(math.atan2(target.y - origin.y, target.x - origin.x)) + 90


# --- Angles ---


def normalize_angle(angle: float) -> float:
    """Reduce ``angle`` to (-180, 180]. Non-finite input maps to 0."""
    if not math.isfinite(angle):
        return 0.0
    angle = math.fmod(angle, 360)
    if angle > 180:
        angle -= 360
    elif angle <= -180:
        angle += 360
    return angle


def avoid_collision(
    angle: float,
    existing: Iterable[PlacedAngle],
    radial_offset: float = 6,
    angular_jitter: float = 2,
) -> CollisionResult:
    """Nudge an indicator away from indicators already placed near it.

    A clash (within 5 degrees) with an indicator that has not been pushed
    outwards is resolved radially; otherwise the angle is jittered away from
    it. Best effort: three or more clustered indicators can still overlap.
    """
    adjusted = angle
    offset = 0.0

    for placed in existing:
        diff = normalize_angle(angle - placed.angle)
        if abs(diff) < COLLISION_THRESHOLD_DEG:
            if not placed.has_radial_offset:
                offset = radial_offset
            else:
                adjusted += angular_jitter * (1 if diff > 0 else -1)

    return CollisionResult(adjusted, offset)


def is_segment_elapsed(segment_index: int, total_segments: int, rotation_angle: float) -> bool:
    """True once the segment's leading edge has rotated past 12 o'clock."""
    return rotation_angle >= (segment_index + 1) * (360 / total_segments)

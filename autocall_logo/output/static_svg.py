"""The 1024x1024 static snapshot logo, written by the nightly generation run.

The outer ring has one segment per tenor year on a ten-segment circle and
rotates with elapsed time; observation ticks ride on the blue ring.
"""

import logging

from autocall_logo.geometry import (
    BARRIER_TICK_LENGTH,
    CENTER,
    CENTER_DOT_R,
    R_BLUE,
    R_OUTER,
    TICK_LENGTH,
    VIEWBOX_SIZE,
    W_RING,
    angle_to_coords,
    calculate_observation_tick_angle,
    generate_segment_path,
    is_segment_elapsed,
)
from autocall_logo.models import PlanData
from autocall_logo.output.svg_common import (
    FONT_STACK,
    TAGLINE,
    WORDMARK,
    WORDMARK_FONT_STACK,
    aria_label,
    esc,
    escaped_colours,
    num,
    points,
)
from autocall_logo.readings import compute_readings

logger = logging.getLogger(__name__)

RING_SEGMENTS = 10
POINTER_LENGTH = 200
TRIGGERED_TICK_WIDTH = 4

# (angle, label) pairs around the rim, on the performance scale
SCALE_MARKERS = [
    (0, "0%"),
    (30, "+5%"),
    (90, "+30%"),
    (120, "+50%"),
    (-30, "-5%"),
    (-90, "-30%"),
    (-120, "-50%"),
]


def _scale_markers(colour: str) -> str:
    parts = []
    for angle, label in SCALE_MARKERS:
        p = angle_to_coords(angle, R_OUTER + 45)
        parts.append(
            f'<text x="{num(p.x)}" y="{num(p.y)}" fill="{colour}" font-size="12" '
            f'text-anchor="middle" dominant-baseline="middle" font-family="{FONT_STACK}">'
            f"{esc(label)}</text>"
        )
    return "\n  ".join(parts)


def _segments(plan: PlanData, rotation: float) -> str:
    colours = escaped_colours(plan.brand_colours)
    tokens = plan.design_tokens
    inner_r = R_OUTER - W_RING
    parts = []
    for i in range(min(plan.tenor_years, RING_SEGMENTS)):
        elapsed = is_segment_elapsed(i, RING_SEGMENTS, rotation)
        fill = colours.grey_mid if elapsed else colours.navy
        opacity = 0.5 if elapsed else 1
        path = generate_segment_path(i, RING_SEGMENTS, inner_r, R_OUTER, tokens.gap_angle_deg)
        parts.append(
            f'<path d="{path}" fill="{fill}" stroke="{colours.navy}" '
            f'stroke-width="{num(tokens.segment_outline_width)}" opacity="{opacity}"/>'
        )
    return "\n    ".join(parts)


def _ticks(plan: PlanData) -> str:
    colours = escaped_colours(plan.brand_colours)
    parts = []
    for obs in plan.observations:
        angle = calculate_observation_tick_angle(plan.start_date, obs.date, plan.current_date)
        inner = angle_to_coords(angle, R_BLUE - TICK_LENGTH)
        outer = angle_to_coords(angle, R_BLUE + TICK_LENGTH)
        width = TRIGGERED_TICK_WIDTH if obs.triggered else plan.design_tokens.tick_stroke_width
        colour = colours.green_accent if obs.triggered else colours.navy
        parts.append(
            f'<line x1="{num(inner.x)}" y1="{num(inner.y)}" x2="{num(outer.x)}" y2="{num(outer.y)}" '
            f'stroke="{colour}" stroke-width="{num(width)}" stroke-linecap="round"/>'
        )
    return "\n    ".join(parts)


def render_static_svg(plan: PlanData) -> str:
    """Render the snapshot logo for ``plan`` as an SVG document string."""
    colours = escaped_colours(plan.brand_colours)
    readings = compute_readings(plan)
    rotation = readings.rotation_angle
    performance = readings.performance

    barrier_inner = angle_to_coords(readings.barrier_angle, R_BLUE - BARRIER_TICK_LENGTH)
    barrier_outer = angle_to_coords(readings.barrier_angle, R_BLUE + BARRIER_TICK_LENGTH)
    barrier_label = angle_to_coords(readings.barrier_angle, R_BLUE - 40)

    tip = angle_to_coords(readings.pointer_angle, POINTER_LENGTH)
    head_left = angle_to_coords(readings.pointer_angle - 15, POINTER_LENGTH - 30)
    head_right = angle_to_coords(readings.pointer_angle + 15, POINTER_LENGTH - 30)
    pointer_label = angle_to_coords(readings.pointer_angle, POINTER_LENGTH + 30)

    final_point = angle_to_coords(readings.final_hurdle_angle, R_BLUE + 50)

    c = num(CENTER)
    perf_colour = colours.green_accent if performance >= 0 else colours.barrier_red
    called_mark = ""
    called_line = ""
    if plan.is_called:
        called_mark = (
            f'<text x="{c}" y="{c}" fill="white" font-size="16" font-weight="bold" '
            f'text-anchor="middle" dominant-baseline="middle">✓</text>'
        )
        if plan.called_date:
            called_line = (
                f'<text x="{c}" y="{num(CENTER + 100)}" fill="{colours.green_accent}" font-size="16" '
                f'font-weight="bold" text-anchor="middle" font-family="{FONT_STACK}">'
                f"Called: {plan.called_date.isoformat()}</text>"
            )
    perf_y = CENTER + (120 if plan.is_called else 100)

    svg = f"""<?xml version="1.0" encoding="UTF-8"?>
<svg viewBox="0 0 {VIEWBOX_SIZE} {VIEWBOX_SIZE}" xmlns="http://www.w3.org/2000/svg" role="img" aria-label="{aria_label(plan.plan_name, performance)}">
  <rect width="{VIEWBOX_SIZE}" height="{VIEWBOX_SIZE}" fill="white"/>

  <!-- Scale markers -->
  {_scale_markers(colours.grey_mid)}

  <!-- 12:00 marker -->
  <line x1="{c}" y1="{num(CENTER - R_OUTER - 10)}" x2="{c}" y2="{num(CENTER - R_OUTER - 30)}" stroke="{colours.green_accent}" stroke-width="4" stroke-linecap="round"/>

  <!-- Outer ring -->
  <g transform="rotate({num(rotation)}, {c}, {c})">
    {_segments(plan, rotation)}
  </g>

  <!-- Blue ring -->
  <g transform="rotate({num(rotation)}, {c}, {c})">
    <circle cx="{c}" cy="{c}" r="{R_BLUE}" fill="none" stroke="{colours.navy}" stroke-width="2" opacity="0.3"/>
    {_ticks(plan)}
  </g>

  <!-- Barrier -->
  <line x1="{num(barrier_inner.x)}" y1="{num(barrier_inner.y)}" x2="{num(barrier_outer.x)}" y2="{num(barrier_outer.y)}" stroke="{colours.barrier_red}" stroke-width="4" stroke-linecap="round"/>
  <text x="{num(barrier_label.x)}" y="{num(barrier_label.y)}" fill="{colours.barrier_red}" font-size="14" font-weight="bold" text-anchor="middle" dominant-baseline="middle">{num(plan.barrier_percent)}%</text>

  <!-- Final hurdle -->
  <circle cx="{num(final_point.x)}" cy="{num(final_point.y)}" r="12" fill="{colours.final_hurdle_purple}"/>
  <text x="{num(final_point.x)}" y="{num(final_point.y)}" fill="white" font-size="14" font-weight="bold" text-anchor="middle" dominant-baseline="middle">F</text>

  <!-- Pointer -->
  <line x1="{c}" y1="{c}" x2="{num(tip.x)}" y2="{num(tip.y)}" stroke="{colours.navy}" stroke-width="6" stroke-linecap="round"/>
  <polygon points="{points(tip, head_left, head_right)}" fill="{colours.navy}"/>
  <text x="{num(pointer_label.x)}" y="{num(pointer_label.y)}" fill="{colours.navy}" font-size="32" font-weight="bold" text-anchor="middle" dominant-baseline="middle">A</text>

  <!-- Centre dot -->
  <circle cx="{c}" cy="{c}" r="{CENTER_DOT_R}" fill="{colours.green_primary}"/>
  {called_mark}

  <!-- Data area -->
  <text x="{c}" y="{num(CENTER + 80)}" fill="{colours.navy}" font-size="14" text-anchor="middle" font-family="{FONT_STACK}">{esc(plan.counterparty)}</text>
  {called_line}
  <text x="{c}" y="{num(perf_y)}" fill="{perf_colour}" font-size="20" font-weight="bold" text-anchor="middle" font-family="{FONT_STACK}">{readings.performance_label}</text>

  <!-- Wordmark -->
  <text x="{c}" y="{num(CENTER + R_OUTER + 60)}" fill="{colours.navy}" font-size="36" font-weight="bold" text-anchor="middle" font-family="{WORDMARK_FONT_STACK}">{WORDMARK}</text>
  <text x="{c}" y="{num(CENTER + R_OUTER + 90)}" fill="{colours.grey_mid}" font-size="18" text-anchor="middle" font-family="{WORDMARK_FONT_STACK}">{TAGLINE}</text>
</svg>
"""
    logger.debug(
        "Static SVG for %s: rotation=%.2f pointer=%.2f barrier=%.2f",
        plan.plan_name, rotation, readings.pointer_angle, readings.barrier_angle,
    )
    return svg

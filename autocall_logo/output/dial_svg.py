"""Live dial: the full dynamic logo with plan-year ring, arrows and pointer.

``render_dial_svg`` is a pure function of the plan and the view options:
the same inputs always give the same markup. Animation is expressed with a
SMIL ``animateTransform`` on the blue ring (one revolution per ten years),
so the output stays a single self-contained SVG.

Layers, back to front:
    background, plan-year ring + observation arrows, "NOW" line (debug),
    radial marks, blue ring, level arrows, barrier, "A" pointer,
    bottom arrow, bottom-arrow bearings (debug), centre info, wordmark.
"""

import logging

from autocall_logo.geometry import (
    Point,
    angle_to_coords,
    direction_to_target,
    generate_partial_segment_path,
)
from autocall_logo.models import PlanData, RenderOptions
from autocall_logo.output.svg_common import (
    FONT_STACK,
    WORDMARK_FONT_STACK,
    aria_label,
    esc,
    escaped_colours,
    num,
    points,
)
from autocall_logo.plan_years import DialLayout, build_dial_layout
from autocall_logo.readings import DialReadings, compute_readings

logger = logging.getLogger(__name__)

# --- Dial proportions ---

VIEWBOX = 512
VIEWBOX_HEIGHT = 800
C = VIEWBOX / 2
R_OUTER = 220
R_OUTER_INNER = 180
R_BLUE = 155
BLUE_STROKE = 22
HEIGHT_RATIO = 1.17

RADIAL_MARK_ANGLES = [30, 60, 90, 120, 240, 270, 300, 330]
RADIAL_MARK_WIDTH = 10
RADIAL_MARK_HEIGHT = 14
INNER_MARK_RADIUS = R_BLUE - BLUE_STROKE / 2 - 18

LEVEL_ARROW_LENGTH = 20
BARRIER_TRIANGLE_SIZE = 10
BOTTOM_ARROW_RADIUS = (1100 - 846) * 0.28 + 10
TEN_YEARS_SECONDS = 10 * 365 * 24 * 60 * 60

# --- Fixed colours ---

WHITE = "#FFFFFF"
FUTURE_OBS_FILL = "#87CEEB"
NEXT_ARROW_STROKE = "#0A5C2F"
BARRIER_FILL = "#FFA000"
DEBUG_RED = "#FF0000"
DEBUG_ORANGE = "#FF9800"
FINAL_GRADIENT_STOPS = [("0%", "#FFEB3B"), ("50%", "#F9A825"), ("100%", "#0D47A1")]


def _xy(angle: float, radius: float, cx: float = C, cy: float = C) -> Point:
    return angle_to_coords(angle, radius, cx, cy)


def _defs() -> str:
    stops = "".join(
        f'<stop offset="{offset}" stop-color="{colour}"/>' for offset, colour in FINAL_GRADIENT_STOPS
    )
    return (
        '<defs><linearGradient id="finalObsGradient" x1="0%" y1="0%" x2="0%" y2="100%">'
        f"{stops}</linearGradient></defs>"
    )


def _outer_ring(plan: PlanData, layout: DialLayout, debug: bool) -> list[str]:
    colours = escaped_colours(plan.brand_colours)
    out = []

    for bar in layout.bars:
        for piece in bar.pieces():
            path = generate_partial_segment_path(
                piece.start_angle, piece.end_angle, R_OUTER_INNER, R_OUTER, C, C,
            )
            if piece.elapsed:
                out.append(f'<path d="{path}" fill="{colours.grey_mid}" opacity="0.6"/>')
            else:
                out.append(f'<path d="{path}" fill="{colours.green_primary}"/>')

    arrow_length = R_OUTER - R_OUTER_INNER
    for marker in layout.markers:
        a = marker.angle
        mid_radius = R_OUTER_INNER + arrow_length * 0.4
        shape = points(
            _xy(a, R_OUTER_INNER),
            _xy(a - 0.8, mid_radius),
            _xy(a - 2, R_OUTER),
            _xy(a + 2, R_OUTER),
            _xy(a + 0.8, mid_radius),
        )
        if marker.is_final:
            fill = "url(#finalObsGradient)"
        elif marker.is_past:
            fill = colours.grey_mid
        else:
            fill = FUTURE_OBS_FILL
        out.append(f'<polygon points="{shape}" fill="{fill}" stroke="{colours.navy}" stroke-width="1.5"/>')

    if debug:
        out.extend(_year_labels(plan, layout))
        out.append(_tenor_panel(plan, layout))
    return out


def _year_labels(plan: PlanData, layout: DialLayout) -> list[str]:
    colours = escaped_colours(plan.brand_colours)
    out = []
    for bar in layout.bars:
        p = _xy(bar.mid_angle, R_OUTER + 15)
        x, y = num(p.x), p.y
        out.append(
            f'<text x="{x}" y="{num(y)}" fill="{colours.navy}" font-size="10" '
            f'text-anchor="middle" dominant-baseline="middle">{bar.label}</text>'
        )
        out.append(
            f'<text x="{x}" y="{num(y + 12)}" fill="{colours.green_primary}" font-size="8" '
            f'text-anchor="middle" dominant-baseline="middle">{layout.days_per_segment:.2f} d/seg</text>'
        )
        out.append(
            f'<text x="{x}" y="{num(y + 22)}" fill="{colours.navy}" font-size="8" '
            f'text-anchor="middle" dominant-baseline="middle" opacity="0.7">'
            f"(actual: {bar.actual_days}d)</text>"
        )
    return out


def _tenor_panel(plan: PlanData, layout: DialLayout) -> str:
    colours = escaped_colours(plan.brand_colours)
    x = num(C)
    return (
        "<g>"
        f'<rect x="{num(C - 100)}" y="{num(C + 240)}" width="200" height="55" fill="white" '
        f'stroke="{colours.navy}" stroke-width="1" rx="4" opacity="0.95"/>'
        f'<text x="{x}" y="{num(C + 255)}" fill="{colours.navy}" font-size="9" font-weight="bold" '
        'text-anchor="middle">Outer Segment Calculation</text>'
        f'<text x="{x}" y="{num(C + 268)}" fill="{colours.navy}" font-size="8" text-anchor="middle">'
        f"Start: {plan.start_date.isoformat()} | End: {layout.end_date.isoformat()}</text>"
        f'<text x="{x}" y="{num(C + 280)}" fill="{colours.green_primary}" font-size="8" text-anchor="middle">'
        f"Total Days: {layout.total_days} | Tenor: {plan.tenor_years} yrs</text>"
        f'<text x="{x}" y="{num(C + 292)}" fill="{colours.green_primary}" font-size="9" font-weight="bold" '
        f'text-anchor="middle">Days per Segment: {layout.days_per_segment:.4f}</text>'
        "</g>"
    )


def _now_line() -> str:
    start = _xy(0, R_OUTER_INNER - 5)
    end = _xy(0, R_OUTER + 25)
    return (
        f'<g><line x1="{num(start.x)}" y1="{num(start.y)}" x2="{num(end.x)}" y2="{num(end.y)}" '
        f'stroke="{DEBUG_RED}" stroke-width="2" stroke-dasharray="4,2"/>'
        f'<text x="{num(end.x)}" y="{num(end.y - 8)}" fill="{DEBUG_RED}" font-size="10" '
        'font-weight="bold" text-anchor="middle">NOW</text></g>'
    )


def _radial_marks(plan: PlanData) -> str:
    green = escaped_colours(plan.brand_colours).green_primary
    marks = []
    for angle in RADIAL_MARK_ANGLES:
        p = _xy(angle, INNER_MARK_RADIUS)
        marks.append(
            f'<rect x="{num(p.x - RADIAL_MARK_WIDTH / 2)}" y="{num(p.y - RADIAL_MARK_HEIGHT / 2)}" '
            f'width="{RADIAL_MARK_WIDTH}" height="{RADIAL_MARK_HEIGHT}" '
            f'fill="{green}" '
            f'transform="rotate({angle}, {num(p.x)}, {num(p.y)})"/>'
        )
    return "<g>" + "".join(marks) + "</g>"


def _blue_ring(plan: PlanData, animate: bool) -> str:
    spin = ""
    if animate and not plan.is_called:
        spin = (
            f'<animateTransform attributeName="transform" type="rotate" '
            f'from="0 {num(C)} {num(C)}" to="360 {num(C)} {num(C)}" '
            f'dur="{TEN_YEARS_SECONDS}s" repeatCount="indefinite"/>'
        )
    return (
        f'<g><circle cx="{num(C)}" cy="{num(C)}" r="{R_BLUE}" fill="none" '
        f'stroke="{escaped_colours(plan.brand_colours).navy}" stroke-width="{BLUE_STROKE}"/>{spin}</g>'
    )


def _level_arrow(angle: float, fill: str, stroke: str, large: bool = False) -> str:
    """Notched arrow sitting on the blue ring, pointing at the centre."""
    length = LEVEL_ARROW_LENGTH * (1.4 if large else 1.0)
    width = 1.3 if large else 1.0
    outer_radius = R_BLUE + BLUE_STROKE / 2 + 2
    inner_radius = outer_radius - length
    notch_radius = inner_radius + length * 0.35
    shape = points(
        _xy(angle, inner_radius),
        _xy(angle - 1.2 * width, notch_radius),
        _xy(angle - 3 * width, outer_radius),
        _xy(angle + 3 * width, outer_radius),
        _xy(angle + 1.2 * width, notch_radius),
    )
    return f'<polygon points="{shape}" fill="{fill}" stroke="{stroke}" stroke-width="1.5"/>'


def _level_arrows(plan: PlanData, layout: DialLayout) -> str:
    colours = escaped_colours(plan.brand_colours)
    parts = []
    if layout.next_observation_angle is not None:
        parts.append(_level_arrow(layout.next_observation_angle, colours.green_accent, NEXT_ARROW_STROKE, large=True))
    parts.append(_level_arrow(layout.final_index_angle, WHITE, colours.green_primary))
    return "<g>" + "".join(parts) + "</g>"


def _barrier(readings: DialReadings) -> str:
    """Equilateral triangle inside the blue ring, tip pointing outwards."""
    a = readings.barrier_angle
    centre = _xy(a, INNER_MARK_RADIUS)
    shape = points(
        _xy(a, BARRIER_TRIANGLE_SIZE, centre.x, centre.y),
        _xy(a + 120, BARRIER_TRIANGLE_SIZE, centre.x, centre.y),
        _xy(a - 120, BARRIER_TRIANGLE_SIZE, centre.x, centre.y),
    )
    return f'<polygon points="{shape}" fill="{BARRIER_FILL}"/>'


def _pointer(plan: PlanData, readings: DialReadings) -> str:
    """The "A" glyph, rotated about the dial centre by the pointer angle."""
    navy = escaped_colours(plan.brand_colours).navy
    glyph = (
        f"M {num(C)} {num(C - 125)} "
        f"L {num(C + 72)} {num(C + 40)} L {num(C + 46)} {num(C + 40)} "
        f"L {num(C)} {num(C - 62)} "
        f"L {num(C - 46)} {num(C + 40)} L {num(C - 72)} {num(C + 40)} Z"
    )
    return (
        f'<g transform="rotate({num(readings.pointer_angle)}, {num(C)}, {num(C)})">'
        f'<path d="{glyph}" fill="{navy}"/>'
        f'<circle cx="{num(C - 1)}" cy="{num(C + 17.4)}" r="18" fill="{esc(plan.circle_fill)}" '
        f'stroke="{navy}" stroke-width="3"/>'
        "</g>"
    )


def _bottom_arrow_bearing(plan: PlanData, readings: DialReadings) -> tuple[float, float]:
    """(arrow centre angle, bearing to the target point on the blue ring)."""
    centre_angle = readings.pointer_angle + 180
    bearing = direction_to_target(
        centre_angle, BOTTOM_ARROW_RADIUS, plan.bottom_arrow_target, R_BLUE, C, C,
    )
    return centre_angle, bearing


def _bottom_arrow(plan: PlanData, readings: DialReadings) -> str:
    """Arrow below the "A" that moves with it and aims at ``bottom_arrow_target``."""
    colour = plan.bottom_arrow_color or plan.brand_colours.green_primary
    centre_angle, bearing = _bottom_arrow_bearing(plan, readings)
    centre = _xy(centre_angle, BOTTOM_ARROW_RADIUS)
    shape = points(
        _xy(bearing, 18, centre.x, centre.y),
        _xy(bearing + 140, 16, centre.x, centre.y),
        _xy(bearing + 180, 6, centre.x, centre.y),
        _xy(bearing - 140, 16, centre.x, centre.y),
    )
    return f'<polygon points="{shape}" fill="{esc(colour)}"/>'


def _bottom_arrow_debug(plan: PlanData, readings: DialReadings) -> str:
    centre_angle, bearing = _bottom_arrow_bearing(plan, readings)
    centre = _xy(centre_angle, BOTTOM_ARROW_RADIUS)
    target = _xy(plan.bottom_arrow_target, R_BLUE)
    actual_end = _xy(bearing, R_OUTER - BOTTOM_ARROW_RADIUS, centre.x, centre.y)
    return (
        "<g>"
        f'<line x1="{num(centre.x)}" y1="{num(centre.y)}" x2="{num(target.x)}" y2="{num(target.y)}" '
        f'stroke="{DEBUG_ORANGE}" stroke-width="1.5" stroke-dasharray="5,3"/>'
        f'<line x1="{num(centre.x)}" y1="{num(centre.y)}" x2="{num(actual_end.x)}" y2="{num(actual_end.y)}" '
        f'stroke="{escaped_colours(plan.brand_colours).green_accent}" stroke-width="1"/>'
        f'<circle cx="{num(target.x)}" cy="{num(target.y)}" r="4" fill="{DEBUG_ORANGE}"/>'
        "</g>"
    )


def _centre_info(plan: PlanData, readings: DialReadings) -> str:
    colours = escaped_colours(plan.brand_colours)
    perf_colour = colours.green_accent if readings.performance >= 0 else colours.barrier_red
    x = num(C)
    parts = [
        f'<text x="{x}" y="{num(C + 115)}" fill="{colours.navy}" font-size="11" '
        f'text-anchor="middle" font-family="{FONT_STACK}">{esc(plan.counterparty)}</text>',
        f'<text x="{x}" y="{num(C + 133)}" fill="{perf_colour}" font-size="14" font-weight="bold" '
        f'text-anchor="middle" font-family="{FONT_STACK}">{readings.performance_label}</text>',
    ]
    if plan.is_called and plan.called_date:
        parts.append(
            f'<text x="{x}" y="{num(C + 150)}" fill="{colours.green_accent}" font-size="11" '
            f'font-weight="bold" text-anchor="middle" font-family="{FONT_STACK}">'
            f"Called: {plan.called_date.isoformat()}</text>"
        )
    return "<g>" + "".join(parts) + "</g>"


def _wordmark(plan: PlanData) -> str:
    colours = escaped_colours(plan.brand_colours)
    return (
        f'<text x="{num(C)}" y="{VIEWBOX_HEIGHT - 240}" font-size="56" font-weight="bold" '
        f'text-anchor="middle" font-family="{WORDMARK_FONT_STACK}">'
        f'<tspan fill="{colours.navy}">Autocalls</tspan>'
        f'<tspan fill="{colours.green_primary}">.uk</tspan></text>'
    )


def render_dial_svg(plan: PlanData, options: RenderOptions | None = None) -> str:
    """Render the live dial for ``plan`` as an SVG document string."""
    if options is None:
        options = RenderOptions()

    readings = compute_readings(plan)
    layout = build_dial_layout(plan)

    layers = [
        _defs(),
        f'<rect width="{VIEWBOX}" height="{VIEWBOX_HEIGHT}" fill="{WHITE}"/>',
        "<g>" + "".join(_outer_ring(plan, layout, options.debug)) + "</g>",
    ]
    if options.debug:
        layers.append(_now_line())
    layers += [
        _radial_marks(plan),
        _blue_ring(plan, options.animate),
        _level_arrows(plan, layout),
        _barrier(readings),
        _pointer(plan, readings),
        _bottom_arrow(plan, readings),
    ]
    if options.debug:
        layers.append(_bottom_arrow_debug(plan, readings))
    layers += [_centre_info(plan, readings), _wordmark(plan)]

    logger.debug(
        "Dial for %s: year %d at %.1f%%, %d bars, %d markers",
        plan.plan_name, layout.current_year_index + 1, layout.progress * 100,
        len(layout.bars), len(layout.markers),
    )

    body = "\n  ".join(layers)
    return (
        f'<svg viewBox="0 0 {VIEWBOX} {VIEWBOX_HEIGHT}" width="{options.size}" '
        f'height="{num(options.size * HEIGHT_RATIO)}" xmlns="http://www.w3.org/2000/svg" '
        f'role="img" aria-label="{aria_label(plan.plan_name, readings.performance)}">\n'
        f"  {body}\n</svg>\n"
    )

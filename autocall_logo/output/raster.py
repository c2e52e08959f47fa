"""PNG preview of the static snapshot, drawn with Pillow.

Uses the same geometry as :mod:`autocall_logo.output.static_svg`, laid out
on the 1024-unit design grid and scaled to the requested pixel size.
"""

import logging
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFont

from autocall_logo.config import FontConfig
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
    is_segment_elapsed,
)
from autocall_logo.models import PlanData
from autocall_logo.output.static_svg import POINTER_LENGTH, RING_SEGMENTS, SCALE_MARKERS
from autocall_logo.output.svg_common import TAGLINE, WORDMARK
from autocall_logo.readings import compute_readings

logger = logging.getLogger(__name__)

ARC_STEPS = 24
WHITE = (255, 255, 255)


def _font(fonts: FontConfig, size: int, bold: bool = False) -> ImageFont.ImageFont:
    path = fonts.bold if bold else fonts.regular
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        logger.debug("Font %s not available, using Pillow default", path)
        return ImageFont.load_default(size=size)


def _blend(colour: str, opacity: float) -> tuple[int, int, int]:
    """Colour as it appears at ``opacity`` over a white background."""
    r, g, b = ImageColor.getrgb(colour)[:3]
    return tuple(int(round(255 + (c - 255) * opacity)) for c in (r, g, b))


class _Canvas:
    """Maps design-grid coordinates onto the pixel image."""

    def __init__(self, size: int) -> None:
        self.scale = size / VIEWBOX_SIZE
        self.image = Image.new("RGB", (size, size), WHITE)
        self.draw = ImageDraw.Draw(self.image)

    def xy(self, angle: float, radius: float) -> tuple[float, float]:
        p = angle_to_coords(angle, radius)
        return p.x * self.scale, p.y * self.scale

    def px(self, value: float) -> int:
        return max(1, int(round(value * self.scale)))

    def wedge(self, start: float, end: float, inner: float, outer: float) -> list[tuple[float, float]]:
        span = end - start
        outline = [self.xy(start + span * i / ARC_STEPS, outer) for i in range(ARC_STEPS + 1)]
        outline += [self.xy(end - span * i / ARC_STEPS, inner) for i in range(ARC_STEPS + 1)]
        return outline

    def circle(self, cx: float, cy: float, r: float, **kwargs) -> None:
        s = self.scale
        self.draw.ellipse([(cx - r) * s, (cy - r) * s, (cx + r) * s, (cy + r) * s], **kwargs)

    def text(self, x: float, y: float, label: str, font: ImageFont.ImageFont, fill) -> None:
        self.draw.text((x * self.scale, y * self.scale), label, font=font, fill=fill, anchor="mm")


def render_png(
    plan: PlanData,
    output_path: Path,
    size: int = 512,
    fonts: FontConfig | None = None,
) -> Path:
    """Render the snapshot of ``plan`` to a ``size`` x ``size`` PNG."""
    if fonts is None:
        fonts = FontConfig()
    colours = plan.brand_colours
    tokens = plan.design_tokens
    readings = compute_readings(plan)
    rotation = readings.rotation_angle

    canvas = _Canvas(size)
    draw = canvas.draw

    # --- Scale markers ---
    marker_font = _font(fonts, canvas.px(12))
    for angle, label in SCALE_MARKERS:
        p = angle_to_coords(angle, R_OUTER + 45)
        canvas.text(p.x, p.y, label, marker_font, colours.grey_mid)

    # --- 12:00 marker ---
    draw.line(
        [canvas.xy(0, R_OUTER + 10), canvas.xy(0, R_OUTER + 30)],
        fill=colours.green_accent, width=canvas.px(4),
    )

    # --- Outer ring (rotated) ---
    segment_angle = 360 / RING_SEGMENTS
    gap = tokens.gap_angle_deg
    for i in range(min(plan.tenor_years, RING_SEGMENTS)):
        elapsed = is_segment_elapsed(i, RING_SEGMENTS, rotation)
        fill = _blend(colours.grey_mid, 0.5) if elapsed else colours.navy
        start = i * segment_angle + gap / 2 + rotation
        end = (i + 1) * segment_angle - gap / 2 + rotation
        draw.polygon(canvas.wedge(start, end, R_OUTER - W_RING, R_OUTER), fill=fill, outline=colours.navy)

    # --- Blue ring and observation ticks (rotated) ---
    canvas.circle(CENTER, CENTER, R_BLUE, outline=_blend(colours.navy, 0.3), width=canvas.px(2))
    for obs in plan.observations:
        angle = calculate_observation_tick_angle(plan.start_date, obs.date, plan.current_date) + rotation
        width = 4 if obs.triggered else tokens.tick_stroke_width
        draw.line(
            [canvas.xy(angle, R_BLUE - TICK_LENGTH), canvas.xy(angle, R_BLUE + TICK_LENGTH)],
            fill=colours.green_accent if obs.triggered else colours.navy,
            width=canvas.px(width),
        )

    # --- Barrier ---
    draw.line(
        [
            canvas.xy(readings.barrier_angle, R_BLUE - BARRIER_TICK_LENGTH),
            canvas.xy(readings.barrier_angle, R_BLUE + BARRIER_TICK_LENGTH),
        ],
        fill=colours.barrier_red, width=canvas.px(4),
    )
    label = angle_to_coords(readings.barrier_angle, R_BLUE - 40)
    canvas.text(label.x, label.y, f"{plan.barrier_percent:g}%", _font(fonts, canvas.px(14), bold=True), colours.barrier_red)

    # --- Final hurdle badge ---
    final = angle_to_coords(readings.final_hurdle_angle, R_BLUE + 50)
    canvas.circle(final.x, final.y, 12, fill=colours.final_hurdle_purple)
    canvas.text(final.x, final.y, "F", _font(fonts, canvas.px(14), bold=True), WHITE)

    # --- Pointer ---
    a = readings.pointer_angle
    tip = canvas.xy(a, POINTER_LENGTH)
    draw.line([canvas.xy(0, 0), tip], fill=colours.navy, width=canvas.px(6))
    draw.polygon(
        [tip, canvas.xy(a - 15, POINTER_LENGTH - 30), canvas.xy(a + 15, POINTER_LENGTH - 30)],
        fill=colours.navy,
    )
    pointer_label = angle_to_coords(a, POINTER_LENGTH + 30)
    canvas.text(pointer_label.x, pointer_label.y, "A", _font(fonts, canvas.px(32), bold=True), colours.navy)

    # --- Centre dot and data area ---
    canvas.circle(CENTER, CENTER, CENTER_DOT_R, fill=colours.green_primary)
    canvas.text(CENTER, CENTER + 80, plan.counterparty, _font(fonts, canvas.px(14)), colours.navy)
    if plan.is_called and plan.called_date:
        canvas.text(
            CENTER, CENTER + 100, f"Called: {plan.called_date.isoformat()}",
            _font(fonts, canvas.px(16), bold=True), colours.green_accent,
        )
    perf_colour = colours.green_accent if readings.performance >= 0 else colours.barrier_red
    canvas.text(
        CENTER, CENTER + (120 if plan.is_called else 100), readings.performance_label,
        _font(fonts, canvas.px(20), bold=True), perf_colour,
    )

    # --- Wordmark ---
    canvas.text(CENTER, CENTER + R_OUTER + 60, WORDMARK, _font(fonts, canvas.px(36), bold=True), colours.navy)
    canvas.text(CENTER, CENTER + R_OUTER + 90, TAGLINE, _font(fonts, canvas.px(18)), colours.grey_mid)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    canvas.image.save(str(output_path), "PNG")
    logger.info("PNG saved to %s (%dx%d)", output_path, size, size)
    return output_path

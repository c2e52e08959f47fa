"""Small helpers shared by the SVG renderers."""

from autocall_logo.geometry import Point
from autocall_logo.models import BrandColours

FONT_STACK = "Inter, Segoe UI, sans-serif"
WORDMARK_FONT_STACK = "Inter, Segoe UI, Source Sans Pro, sans-serif"
WORDMARK = "Autocalls.uk"
TAGLINE = "Precision Investing"


def esc(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def num(value: float) -> str:
    """Compact coordinate: three decimals, trailing zeros dropped."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def points(*pts: Point) -> str:
    return " ".join(f"{num(p.x)},{num(p.y)}" for p in pts)


def aria_label(plan_name: str, performance: float) -> str:
    return esc(f"{plan_name} - Dynamic Logo showing {performance:.1f}% performance")


def escaped_colours(colours: BrandColours) -> BrandColours:
    """Brand colours made safe for use inside SVG attributes."""
    return colours.model_copy(update={k: esc(v) for k, v in colours.model_dump().items()})

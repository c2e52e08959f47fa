"""Plan JSON in, dated SVG (and PNG) snapshots out."""

import json
import logging
import random
import shutil
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from pydantic import ValidationError

from autocall_logo.config import FontConfig
from autocall_logo.models import Observation, PlanData
from autocall_logo.output.raster import render_png
from autocall_logo.output.static_svg import render_static_svg

logger = logging.getLogger(__name__)

LATEST_SVG = "latest.svg"
LATEST_PNG = "latest.png"

COUNTERPARTIES = [
    "Morgan Stanley", "Goldman Sachs", "JP Morgan", "Barclays",
    "HSBC", "Credit Suisse", "Deutsche Bank",
]
PLAN_NAMES = [
    "Mariana 10:10 – FTSE", "Atlantic 8:8 – S&P", "Pacific 5:5 – DAX",
    "Nordic 6:6 – OMX", "Alpine 7:7 – SMI",
]


@dataclass
class GenerationResult:
    svg_path: Path
    latest_path: Path | None = None
    png_path: Path | None = None

    def __repr__(self) -> str:
        parts = [f"GenerationResult({self.svg_path}"]
        if self.latest_path:
            parts.append(f", latest={self.latest_path.name}")
        if self.png_path:
            parts.append(f", png={self.png_path.name}")
        parts.append(")")
        return "".join(parts)


def load_plan(path: Path) -> PlanData:
    """Read and validate a plan record. Raises ValueError naming the file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e
    try:
        return PlanData.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid plan data in {path}: {e}") from e


def _refresh_latest(source: Path, latest: Path) -> Path | None:
    """Copy ``source`` over ``latest``; a failure here never aborts the run."""
    try:
        if latest.exists() or latest.is_symlink():
            latest.unlink()
        shutil.copyfile(source, latest)
    except OSError as e:
        logger.warning("Could not update %s: %s", latest, e)
        return None
    logger.info("Updated: %s", latest)
    return latest


def generate_static(
    plan: PlanData,
    output_dir: Path,
    today: date | None = None,
    png: bool = False,
    png_size: int = 512,
    fonts: FontConfig | None = None,
) -> GenerationResult:
    """Write ``logo_<date>.svg`` and refresh ``latest.svg`` in ``output_dir``."""
    if today is None:
        today = date.today()
    output_dir.mkdir(parents=True, exist_ok=True)

    svg_path = output_dir / f"logo_{today.isoformat()}.svg"
    svg_path.write_text(render_static_svg(plan), encoding="utf-8")
    logger.info("Generated: %s", svg_path)

    result = GenerationResult(svg_path=svg_path)
    result.latest_path = _refresh_latest(svg_path, output_dir / LATEST_SVG)

    if png:
        result.png_path = render_png(
            plan, output_dir / f"logo_{today.isoformat()}.png", size=png_size, fonts=fonts,
        )
        _refresh_latest(result.png_path, output_dir / LATEST_PNG)

    return result


def _random_date(rng: random.Random, start: date, end: date) -> date:
    return start + timedelta(days=rng.randint(0, (end - start).days))


def random_plan(rng: random.Random | None = None, base: PlanData | None = None) -> PlanData:
    """A random but valid plan, for previewing the dial across its range.

    Colours and design tokens are kept from ``base`` when given.
    """
    if rng is None:
        rng = random.Random()

    start = _random_date(rng, date(2020, 1, 1), date(2025, 6, 1))
    tenor = rng.randint(3, 10)
    plan_end = date(start.year + tenor, 12, 31)

    # Averaging two uniforms biases the current date towards mid-plan
    bias = (rng.random() + rng.random()) / 2
    current = start + timedelta(days=int(bias * (plan_end - start).days))

    strike = rng.randint(6500, 8499)
    level = int(strike * (0.7 + rng.random() * 0.6))

    observations = [
        Observation(
            date=date(start.year + i, rng.randint(1, 12), rng.randint(1, 28)),
            hurdle_percent=rng.randint(80, 109),
            triggered=rng.random() > 0.7,
        )
        for i in range(tenor)
    ]

    is_called = rng.random() > 0.8
    fields = {
        "plan_name": rng.choice(PLAN_NAMES),
        "tenor_years": tenor,
        "start_date": start,
        "current_date": current,
        "initial_strike_level": strike,
        "current_level": level,
        "barrier_percent": rng.randint(-50, 50),
        "observations": observations,
        "counterparty": rng.choice(COUNTERPARTIES),
        "is_called": is_called,
        "called_date": current if is_called else None,
        "bottom_arrow_color": f"hsl({rng.randint(0, 359)}, 70%, 50%)",
        "bottom_arrow_target": rng.randint(0, 359),
        "circle_fill": f"#{rng.randint(0, 0xFFFFFF):06x}",
    }
    if base is not None:
        fields["brand_colours"] = base.brand_colours
        fields["design_tokens"] = base.design_tokens
    return PlanData(**fields)

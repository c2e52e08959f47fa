"""Pydantic models for the plan record that drives the dial."""

import datetime
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class EaseFunction(str, Enum):
    EASE_OUT_QUAD = "easeOutQuad"
    EASE_IN_QUAD = "easeInQuad"
    LINEAR = "linear"


class BarrierMapping(str, Enum):
    PIECEWISE = "piecewise"
    LINEAR = "linear"


class Observation(BaseModel):
    date: datetime.date
    hurdle_percent: float = 100.0
    triggered: bool = False


class BrandColours(BaseModel):
    navy: str = "#0A255A"
    green_primary: str = "#007A3A"
    green_accent: str = "#0FA15A"
    barrier_red: str = "#C62828"
    final_hurdle_purple: str = "#5E35B1"
    grey_light: str = "#D9D9D9"
    grey_mid: str = "#A6A6A6"


class DesignTokens(BaseModel):
    gap_angle_deg: float = 3.0
    tick_stroke_width: float = 2.0
    segment_outline_width: float = 2.0
    pointer_ease: EaseFunction = EaseFunction.EASE_OUT_QUAD
    # Piecewise is canonical; linear reproduces older static snapshots.
    barrier_mapping: BarrierMapping = BarrierMapping.PIECEWISE


class PlanData(BaseModel):
    """One structured product, as read from the input JSON.

    Unknown keys are ignored so older input files keep loading.
    """

    plan_name: str
    tenor_years: int = Field(ge=1)
    start_date: datetime.date
    current_date: datetime.date
    initial_strike_level: float = Field(gt=0)
    current_level: float
    barrier_percent: float = -30.0
    observations: list[Observation] = Field(default_factory=list)
    final_hurdle_percent: float | None = None
    counterparty: str = ""
    is_called: bool = False
    called_date: datetime.date | None = None
    market_close_time_gmt: str | None = None
    bottom_arrow_color: str | None = None
    bottom_arrow_target: float = 0.0
    circle_fill: str = "#FFFFFF"
    brand_colours: BrandColours = Field(default_factory=BrandColours)
    design_tokens: DesignTokens = Field(default_factory=DesignTokens)

    @property
    def latest_observation(self) -> Observation | None:
        if not self.observations:
            return None
        return max(self.observations, key=lambda o: o.date)

    @property
    def resolved_final_hurdle_percent(self) -> float:
        """Explicit final hurdle, else the latest observation's, else 100."""
        if self.final_hurdle_percent is not None:
            return self.final_hurdle_percent
        latest = self.latest_observation
        if latest is not None:
            return latest.hurdle_percent
        return 100.0


@dataclass
class RenderOptions:
    """View state for the live dial."""

    animate: bool = True
    debug: bool = False
    size: int = 512

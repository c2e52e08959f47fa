"""The handful of angles every renderer needs from a plan."""

from dataclasses import dataclass

from autocall_logo.geometry import (
    calculate_performance,
    calculate_rotation_angle,
    get_ease,
    map_barrier_to_angle,
    map_barrier_to_angle_linear,
    map_performance_to_angle,
)
from autocall_logo.models import BarrierMapping, PlanData


@dataclass
class DialReadings:
    rotation_angle: float
    performance: float
    pointer_angle: float
    barrier_angle: float
    final_hurdle_angle: float

    @property
    def performance_label(self) -> str:
        sign = "+" if self.performance >= 0 else ""
        return f"{sign}{self.performance:.1f}%"


def barrier_angle_for(plan: PlanData) -> float:
    if plan.design_tokens.barrier_mapping == BarrierMapping.LINEAR:
        return map_barrier_to_angle_linear(plan.barrier_percent)
    return map_barrier_to_angle(plan.barrier_percent)


def compute_readings(plan: PlanData) -> DialReadings:
    performance = calculate_performance(plan.initial_strike_level, plan.current_level)
    ease = get_ease(plan.design_tokens.pointer_ease)
    return DialReadings(
        rotation_angle=calculate_rotation_angle(plan.start_date, plan.current_date),
        performance=performance,
        pointer_angle=map_performance_to_angle(performance, ease),
        barrier_angle=barrier_angle_for(plan),
        # The final hurdle is drawn on the performance scale (100% = 0%)
        final_hurdle_angle=map_performance_to_angle(plan.resolved_final_hurdle_percent - 100),
    )

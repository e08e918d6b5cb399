from __future__ import annotations

import math

from models.plan import LearningPlan, PlanProgress


def percent(part: int, total: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return int(math.floor(part * 100 / total + 0.5))


def plan_percent(plan: LearningPlan) -> int:
    return percent(len(plan.completed_sets), plan.total_days)


def days_left(plan: LearningPlan) -> int:
    return max(0, plan.total_days - len(plan.completed_sets))


def plan_progress(plan: LearningPlan) -> PlanProgress:
    return PlanProgress(
        plan_id=plan.id,
        percent=plan_percent(plan),
        days_left=days_left(plan),
        completed_sets=len(plan.completed_sets),
        total_days=plan.total_days,
        current_set_index=plan.current_set_index,
    )

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from ..core.constants import DEFAULT_PLANNING_FACTOR, PRIORITY_BUFFER_DAYS, WORKING_HOURS_PER_DAY
from ..core.enums import WORKWEEK, TaskPriority, Weekday
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DeadlinePlan:
    deadline: date
    pure_work_days: int
    planning_days: int
    buffer_days: int
    total_days: int

    def to_dict(self) -> dict:
        return {
            "deadline": self.deadline.isoformat(),
            "pure_work_days": self.pure_work_days,
            "planning_days": self.planning_days,
            "buffer_days": self.buffer_days,
            "total_days": self.total_days,
        }


def calculate_deadline(
    start_date: date,
    total_hours: float,
    *,
    hours_per_day: float = WORKING_HOURS_PER_DAY,
    working_days: Iterable[Weekday] = WORKWEEK,
    planning_factor: float = DEFAULT_PLANNING_FACTOR,
    priority: TaskPriority = TaskPriority.MEDIUM,
) -> DeadlinePlan:
    """Recommended deadline: work days, times a planning factor, plus a priority buffer.

    The deadline is the last working day counted from ``start_date`` inclusive.
    """
    if total_hours <= 0 or hours_per_day <= 0:
        raise ValidationError("Hours must be positive")
    allowed = frozenset(Weekday(int(d)) for d in working_days)
    if not allowed:
        raise ValidationError("At least one working day is required")

    pure = math.ceil(total_hours / hours_per_day)
    planning = math.ceil(pure * planning_factor)
    buffer = math.ceil(PRIORITY_BUFFER_DAYS[TaskPriority(priority).value])
    total = planning + buffer

    current = start_date
    counted = 0
    while True:
        if Weekday(current.weekday()) in allowed:
            counted += 1
            if counted >= total:
                break
        current += timedelta(days=1)

    return DeadlinePlan(
        deadline=current,
        pure_work_days=pure,
        planning_days=planning,
        buffer_days=buffer,
        total_days=total,
    )

from __future__ import annotations

import math
import uuid
from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import add_hours_to_time
from ..core.constants import WORKING_HOURS_PER_DAY
from ..core.enums import WORKWEEK, EntryStatus, Weekday
from ..core.exceptions import ValidationError
from .model import ScheduleEntryDraft

SPLIT_TOLERANCE_HOURS = 0.1


def default_split_hours(total_hours: float, *, hours_per_day: float = WORKING_HOURS_PER_DAY) -> list[float]:
    """Spread ``total_hours`` over ceil(total / hours_per_day) days.

    Whole hours are spread evenly with the remainder going to the first days;
    a fractional rest is added to the last part.
    """
    if total_hours <= 0:
        raise ValidationError("Hours to split must be positive")
    days = max(1, math.ceil(total_hours / hours_per_day))
    whole = int(total_hours)
    base, remainder = divmod(whole, days)
    parts = [float(base + (1 if i < remainder else 0)) for i in range(days)]
    parts[-1] = round(parts[-1] + (total_hours - whole), 4)
    return parts


def _working_dates(first: date, count: int, working_days: frozenset[Weekday]) -> list[date]:
    dates: list[date] = []
    current = first
    while len(dates) < count:
        if Weekday(current.weekday()) in working_days:
            dates.append(current)
        current += timedelta(days=1)
    return dates


def split_task(
    template: ScheduleEntryDraft,
    hours_per_part: Sequence[float],
    *,
    parent_task_id: Optional[str] = None,
    working_days: Iterable[Weekday] = WORKWEEK,
) -> list[ScheduleEntryDraft]:
    """Split one task over successive working days sharing ``parent_task_id``.

    The first part lands on the template's date, or the next working day after
    it. Every slot starts at the template's start time and lasts its own hours.
    """
    if not hours_per_part:
        raise ValidationError("At least one part is required")
    if any(h <= 0 for h in hours_per_part):
        raise ValidationError("Every part needs a positive number of hours")
    allowed = frozenset(Weekday(int(d)) for d in working_days)
    if not allowed:
        raise ValidationError("At least one working day is required")

    parent_task_id = parent_task_id or str(uuid.uuid4())
    total = round(float(sum(hours_per_part)), 4)
    count = len(hours_per_part)
    days = _working_dates(template.occurrence_date, count, allowed)
    return [
        replace(
            template,
            occurrence_date=day,
            end_time=add_hours_to_time(template.start_time, float(hours)),
            label=f"{template.label} (Part {index + 1}/{count})",
            planned_hours=float(hours),
            actual_hours=0.0,
            status=EntryStatus.PLANNED,
            parent_task_id=parent_task_id,
            sequence_index=index + 1,
            total_group_hours=total,
        )
        for index, (day, hours) in enumerate(zip(days, hours_per_part))
    ]


def check_split_total(parts_hours: Sequence[float], group_total: float, *, can_exceed: bool) -> None:
    """Parts must add up to the group total unless exceeding is allowed."""
    total = float(sum(parts_hours))
    if abs(total - float(group_total)) > SPLIT_TOLERANCE_HOURS and not can_exceed:
        raise ValidationError(
            f"Parts add up to {total:g}h but the task was planned at {float(group_total):g}h"
        )

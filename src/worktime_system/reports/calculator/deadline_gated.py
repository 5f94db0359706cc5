from __future__ import annotations

from datetime import date, tzinfo

from ...common.datetime_utils import local_date
from ...schedules.model import ScheduleEntryDraft
from .base import VarianceCalculator


class DeadlineGatedVarianceCalculator(VarianceCalculator):
    """actual - planned, counted only once the entry's deadline date is behind today."""

    def variance(self, entry: ScheduleEntryDraft, *, today: date, tz: tzinfo) -> float:
        if entry.deadline is None:
            return 0.0
        if local_date(entry.deadline, tz) >= today:
            return 0.0
        return float(entry.actual_hours) - float(entry.planned_hours)


class RawVarianceCalculator(VarianceCalculator):
    """Plain effort delta, ignoring deadlines."""

    def variance(self, entry: ScheduleEntryDraft, *, today: date, tz: tzinfo) -> float:
        return float(entry.actual_hours) - float(entry.planned_hours)

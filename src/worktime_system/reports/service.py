from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional

from ..common.datetime_utils import resolve_zone, today_in_zone
from ..core.constants import DAYS_PER_WEEK, DEFAULT_REFERENCE_TIMEZONE
from ..schedules.model import ScheduleEntry
from ..schedules.repository import ScheduleEntryRepository
from .calculator.base import VarianceCalculator
from .calculator.deadline_gated import DeadlineGatedVarianceCalculator
from .model import WeeklyReport

logger = logging.getLogger(__name__)


def compute_weekly_report(
    entries: Iterable[ScheduleEntry],
    owner_id: int,
    week_start: date,
    *,
    scope_id: Optional[int] = None,
    now: Optional[datetime] = None,
    tz: tzinfo | str | None = None,
    calculator: Optional[VarianceCalculator] = None,
) -> WeeklyReport:
    """Aggregate one owner's week, leaving automated standups out.

    ``week_start`` is used as given; callers wanting calendar weeks pass
    ``week_start_of(day)``.
    """
    zone = resolve_zone(tz)
    calculator = calculator or DeadlineGatedVarianceCalculator()
    week_end = week_start + timedelta(days=DAYS_PER_WEEK - 1)
    today = today_in_zone(now, zone)

    selected = [
        e
        for e in entries
        if e.owner_id == owner_id
        and not e.automated
        and week_start <= e.occurrence_date <= week_end
        and (scope_id is None or e.scope_id == scope_id)
    ]
    selected.sort(key=lambda e: (e.occurrence_date, e.start_time))

    planned = sum(float(e.planned_hours) for e in selected)
    actual = sum(float(e.actual_hours) for e in selected)
    variance = sum(calculator.variance(e, today=today, tz=zone) for e in selected)

    return WeeklyReport(
        owner_id=owner_id,
        scope_id=scope_id,
        week_start=week_start,
        week_end=week_end,
        total_planned=round(planned, 2),
        total_actual=round(actual, 2),
        variance_hours=round(variance, 2),
        entries=selected,
    )


class ReportService:
    def __init__(
        self,
        entries: ScheduleEntryRepository,
        *,
        calculator: Optional[VarianceCalculator] = None,
        reference_tz: str = DEFAULT_REFERENCE_TIMEZONE,
    ):
        self._entries = entries
        self._calculator = calculator or DeadlineGatedVarianceCalculator()
        self._reference_tz = reference_tz

    def weekly_report(
        self,
        *,
        owner_id: int,
        week_start: date,
        scope_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> WeeklyReport:
        rows = self._entries.list_entries(
            scope_id=scope_id,
            owner_id=owner_id,
            start=week_start,
            end=week_start + timedelta(days=DAYS_PER_WEEK - 1),
        )
        report = compute_weekly_report(
            rows,
            owner_id,
            week_start,
            scope_id=scope_id,
            now=now,
            tz=self._reference_tz,
            calculator=self._calculator,
        )
        logger.debug(
            "Weekly report owner=%s week=%s entries=%d variance=%.2f",
            owner_id,
            week_start,
            len(report.entries),
            report.variance_hours,
        )
        return report

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, timedelta
from typing import Iterator, Optional

from ..core.constants import DAYS_PER_WEEK, DEFAULT_MAX_OCCURRENCES
from ..core.enums import RecurrenceKind, Weekday
from ..schedules.model import RecurrenceInfo, ScheduleEntryDraft
from .model import RecurrenceRule


def _iter_rule_dates(rule: RecurrenceRule, start_date: date) -> Iterator[date]:
    if rule.kind == RecurrenceKind.WEEKLY and rule.weekdays:
        week_start = start_date - timedelta(days=start_date.weekday())
        offsets = sorted(int(d) for d in rule.weekdays)
        while True:
            for offset in offsets:
                day = week_start + timedelta(days=offset)
                if day >= start_date:
                    yield day
            week_start += timedelta(weeks=rule.interval)
    else:
        step = rule.interval if rule.kind == RecurrenceKind.DAILY else rule.interval * DAYS_PER_WEEK
        allowed = rule.weekdays if rule.kind == RecurrenceKind.DAILY else frozenset()
        current = start_date
        misses = 0
        # Weekdays repeat every 7 steps; 7 misses in a row means no match ever.
        while misses < DAYS_PER_WEEK:
            if allowed and Weekday(current.weekday()) not in allowed:
                misses += 1
            else:
                misses = 0
                yield current
            current += timedelta(days=step)


def expand_rule(rule: RecurrenceRule, start_date: date, *, limit: int = DEFAULT_MAX_OCCURRENCES) -> list[date]:
    """Ascending occurrence dates starting at ``start_date``.

    Stops at ``rule.end_date`` (inclusive) or after ``rule.max_count`` dates;
    ``limit`` caps open-ended rules.
    """
    max_count = int(rule.max_count) if rule.max_count else limit
    dates: list[date] = []
    for day in _iter_rule_dates(rule, start_date):
        if rule.end_date is not None and day > rule.end_date:
            break
        if len(dates) >= max_count:
            break
        dates.append(day)
    return dates


def generate_recurring_series(
    template: ScheduleEntryDraft,
    rule: RecurrenceRule,
    *,
    group_id: Optional[str] = None,
) -> list[ScheduleEntryDraft]:
    """Copy ``template`` onto every date of ``rule`` starting at its own date."""
    group_id = group_id or str(uuid.uuid4())
    info = RecurrenceInfo(
        is_recurring=True,
        kind=rule.kind,
        interval=rule.interval,
        weekdays=frozenset(Weekday(d) for d in rule.weekdays),
        end_date=rule.end_date,
        max_count=rule.max_count,
        parent_group_id=group_id,
    )
    return [
        replace(template, occurrence_date=day, recurrence=info)
        for day in expand_rule(rule, template.occurrence_date)
    ]

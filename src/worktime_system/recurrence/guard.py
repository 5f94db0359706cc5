from __future__ import annotations

from datetime import date, time
from typing import Iterable

from ..core.enums import Weekday
from ..schedules.model import ScheduleEntryDraft
from .model import RecurrenceConfig

OccurrenceKey = tuple[date, int, str, time, time]


def occurrence_key(entry: ScheduleEntryDraft) -> OccurrenceKey:
    """Structural identity of an occurrence. Owner is not part of it."""
    return (
        entry.occurrence_date,
        int(entry.scope_id),
        entry.label,
        entry.start_time.replace(second=0, microsecond=0),
        entry.end_time.replace(second=0, microsecond=0),
    )


def should_create(
    candidate: ScheduleEntryDraft,
    existing: Iterable[ScheduleEntryDraft],
    config: RecurrenceConfig,
) -> bool:
    """Decide whether ``candidate`` still has to be created.

    Evaluated against the caller's snapshot every time. For group recurrences
    call it once per day; for per-owner recurrences pass that owner's entries.
    """
    if not config.enabled:
        return False
    if Weekday(candidate.occurrence_date.weekday()) not in config.weekdays:
        return False
    key = occurrence_key(candidate)
    return not any(occurrence_key(e) == key for e in existing)

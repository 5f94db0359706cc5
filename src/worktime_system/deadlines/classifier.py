"""Deadline state of schedule entries.

Both "today" and the deadline's calendar date are taken in one reference
zone. Comparing a UTC deadline against a local "today" is what produces
off-by-one overdue flags, so callers pass the zone explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from ..common.datetime_utils import local_date, resolve_zone, today_in_zone
from ..core.enums import DeadlineKind, EntryStatus
from ..schedules.model import ScheduleEntryDraft


@dataclass(frozen=True)
class DeadlineStatus:
    overdue: bool = False
    due_soon: bool = False
    delay_days: int = 0

    def to_dict(self) -> dict:
        return {"overdue": self.overdue, "due_soon": self.due_soon, "delay_days": self.delay_days}


def deadline_date(entry: ScheduleEntryDraft, tz: tzinfo | str | None = None) -> Optional[date]:
    if entry.deadline is None:
        return None
    return local_date(entry.deadline, resolve_zone(tz))


def classify_deadline(
    entry: ScheduleEntryDraft,
    now: Optional[datetime] = None,
    *,
    tz: tzinfo | str | None = None,
) -> DeadlineStatus:
    zone = resolve_zone(tz)
    due = deadline_date(entry, zone)
    if due is None or entry.status == EntryStatus.COMPLETED:
        return DeadlineStatus()

    today = today_in_zone(now, zone)
    if due < today:
        return DeadlineStatus(overdue=True, delay_days=(today - due).days)
    return DeadlineStatus(due_soon=due == today + timedelta(days=1))


def days_until_deadline(
    entry: ScheduleEntryDraft,
    now: Optional[datetime] = None,
    *,
    tz: tzinfo | str | None = None,
) -> Optional[int]:
    """Signed day count until the deadline date (negative once passed)."""
    zone = resolve_zone(tz)
    due = deadline_date(entry, zone)
    if due is None:
        return None
    return (due - today_in_zone(now, zone)).days


def deadline_passed(
    entry: ScheduleEntryDraft,
    now: Optional[datetime] = None,
    *,
    tz: tzinfo | str | None = None,
) -> bool:
    remaining = days_until_deadline(entry, now, tz=tz)
    return remaining is not None and remaining < 0


def can_exceed_planned_hours(
    entry: ScheduleEntryDraft,
    now: Optional[datetime] = None,
    *,
    tz: tzinfo | str | None = None,
) -> bool:
    """Admin-assigned work under a hard deadline may only overrun once it has passed."""
    if entry.assigned_by_admin and entry.deadline_kind == DeadlineKind.HARD:
        return deadline_passed(entry, now, tz=tz)
    return True

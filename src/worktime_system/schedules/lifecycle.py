"""Status state machine for schedule entries.

planned -> in-progress -> completed, with planned -> completed allowed for
direct confirmation. Completed is terminal. Pausing is a flag on top of the
current status, so resuming lands back on the status the entry had.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, TypeVar

from ..common.datetime_utils import now_local
from ..common.validators import require_non_negative
from ..core.enums import EntryStatus, TaskStatus
from ..core.exceptions import InvalidTransitionError
from .model import ScheduleEntryDraft

E = TypeVar("E", bound=ScheduleEntryDraft)

ALLOWED_TRANSITIONS: dict[EntryStatus, frozenset[EntryStatus]] = {
    EntryStatus.PLANNED: frozenset({EntryStatus.IN_PROGRESS, EntryStatus.COMPLETED}),
    EntryStatus.IN_PROGRESS: frozenset({EntryStatus.COMPLETED}),
    EntryStatus.COMPLETED: frozenset(),
}


def can_transition(current: EntryStatus, target: EntryStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(entry: E, target: object, *, now: Optional[datetime] = None) -> E:
    """Move ``entry`` to ``target`` (any status token is normalized first)."""
    target_status = EntryStatus.parse(target)
    if target_status == entry.status:
        return entry
    if entry.is_paused:
        raise InvalidTransitionError("Resume the entry before changing its status")
    if not can_transition(entry.status, target_status):
        raise InvalidTransitionError(f"Cannot move from {entry.status.value} to {target_status.value}")

    if target_status == EntryStatus.COMPLETED:
        return replace(entry, status=target_status, completed_at=now or now_local())
    return replace(entry, status=target_status)


def start(entry: E, *, now: Optional[datetime] = None) -> E:
    return transition(entry, EntryStatus.IN_PROGRESS, now=now)


def complete(entry: E, *, now: Optional[datetime] = None) -> E:
    return transition(entry, EntryStatus.COMPLETED, now=now)


def pause(entry: E, *, now: Optional[datetime] = None) -> E:
    if entry.status == EntryStatus.COMPLETED:
        raise InvalidTransitionError("A completed entry cannot be paused")
    if entry.is_paused:
        raise InvalidTransitionError("Entry is already paused")
    return replace(entry, is_paused=True, paused_at=now or now_local(), resumed_at=None)


def resume(entry: E, *, now: Optional[datetime] = None) -> E:
    if not entry.is_paused:
        raise InvalidTransitionError("Entry is not paused")
    return replace(entry, is_paused=False, resumed_at=now or now_local())


def correct_actual_hours(entry: E, hours: float) -> E:
    """Data correction, allowed in every state including completed."""
    return replace(entry, actual_hours=require_non_negative(hours, "actual_hours"))


def derive_task_status(statuses: Iterable[object]) -> TaskStatus:
    parsed = [EntryStatus.parse(s) for s in statuses]
    if parsed and all(s == EntryStatus.COMPLETED for s in parsed):
        return TaskStatus.CLOSED
    if any(s == EntryStatus.IN_PROGRESS for s in parsed):
        return TaskStatus.IN_PROGRESS
    return TaskStatus.PLANNED

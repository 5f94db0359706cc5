from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_time
from ..core.constants import DEFAULT_ENTRY_CATEGORY
from ..core.enums import DeadlineKind, EntryStatus, RecurrenceKind, Weekday


@dataclass(frozen=True)
class RecurrenceInfo:
    """Recurrence metadata stamped on generated entries."""

    is_recurring: bool = False
    kind: Optional[RecurrenceKind] = None
    interval: Optional[int] = None
    weekdays: frozenset[Weekday] = frozenset()
    end_date: Optional[date] = None
    max_count: Optional[int] = None
    parent_group_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "is_recurring": self.is_recurring,
            "kind": self.kind.value if self.kind else None,
            "interval": self.interval,
            "weekdays": sorted(int(d) for d in self.weekdays),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "max_count": self.max_count,
            "parent_group_id": self.parent_group_id,
        }


@dataclass(frozen=True)
class ScheduleEntryDraft:
    """A schedule entry that has not been persisted yet."""

    owner_id: int
    scope_id: int
    occurrence_date: date
    start_time: time
    end_time: time
    label: str
    planned_hours: float
    actual_hours: float = 0.0
    status: EntryStatus = EntryStatus.PLANNED
    category: str = DEFAULT_ENTRY_CATEGORY
    task_id: Optional[int] = None
    parent_task_id: Optional[str] = None
    sequence_index: Optional[int] = None
    total_group_hours: Optional[float] = None
    is_paused: bool = False
    paused_at: Optional[datetime] = None
    resumed_at: Optional[datetime] = None
    recurrence: RecurrenceInfo = field(default_factory=RecurrenceInfo)
    deadline: Optional[date | datetime] = None
    deadline_kind: DeadlineKind = DeadlineKind.SOFT
    deadline_reason: Optional[str] = None
    assigned_by_admin: bool = False
    automated: bool = False
    completed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "scope_id": self.scope_id,
            "task_id": self.task_id,
            "occurrence_date": self.occurrence_date.isoformat(),
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
            "label": self.label,
            "planned_hours": self.planned_hours,
            "actual_hours": self.actual_hours,
            "status": self.status.value,
            "category": self.category,
            "parent_task_id": self.parent_task_id,
            "sequence_index": self.sequence_index,
            "total_group_hours": self.total_group_hours,
            "is_paused": self.is_paused,
            "paused_at": self.paused_at.isoformat() if self.paused_at else None,
            "resumed_at": self.resumed_at.isoformat() if self.resumed_at else None,
            "recurrence": self.recurrence.to_dict(),
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "deadline_kind": self.deadline_kind.value,
            "deadline_reason": self.deadline_reason,
            "assigned_by_admin": self.assigned_by_admin,
            "automated": self.automated,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass(frozen=True)
class ScheduleEntry(ScheduleEntryDraft):
    """Domain entity: a persisted schedule entry (time slot)."""

    entry_id: int = 0
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["id"] = self.entry_id
        d["created_at"] = self.created_at.isoformat() if self.created_at else None
        return d

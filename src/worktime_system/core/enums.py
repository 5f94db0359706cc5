from __future__ import annotations

from enum import Enum, IntEnum


class Weekday(IntEnum):
    """Day of week, Monday-based like ``date.weekday()``."""

    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @classmethod
    def from_sunday_based(cls, value: int) -> "Weekday":
        """Convert a Sunday=0 index (JS ``getDay``) to a Weekday."""
        return cls((int(value) + 6) % 7)


WORKWEEK = frozenset({Weekday.MON, Weekday.TUE, Weekday.WED, Weekday.THU, Weekday.FRI})


class EntryStatus(str, Enum):
    """Workflow status of a schedule entry."""

    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: object) -> "EntryStatus":
        """Normalize any stored/legacy status token.

        Unknown or empty tokens become PLANNED; this never raises.
        """
        if isinstance(value, cls):
            return value
        token = str(value or "").strip().lower().replace("_", "-").replace(" ", "-")
        return _STATUS_SYNONYMS.get(token, cls.PLANNED)


_STATUS_SYNONYMS: dict[str, EntryStatus] = {
    "planned": EntryStatus.PLANNED,
    "new": EntryStatus.PLANNED,
    "todo": EntryStatus.PLANNED,
    "запланировано": EntryStatus.PLANNED,
    "in-progress": EntryStatus.IN_PROGRESS,
    "inprogress": EntryStatus.IN_PROGRESS,
    "active": EntryStatus.IN_PROGRESS,
    "started": EntryStatus.IN_PROGRESS,
    "в-работе": EntryStatus.IN_PROGRESS,
    "completed": EntryStatus.COMPLETED,
    "complete": EntryStatus.COMPLETED,
    "done": EntryStatus.COMPLETED,
    "closed": EntryStatus.COMPLETED,
    "завершено": EntryStatus.COMPLETED,
    "выполнено": EntryStatus.COMPLETED,
}


class TaskStatus(str, Enum):
    """Status of the task an entry was planned from."""

    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class DeadlineKind(str, Enum):
    SOFT = "soft"
    HARD = "hard"

    @classmethod
    def parse(cls, value: object) -> "DeadlineKind":
        if isinstance(value, cls):
            return value
        return cls.HARD if str(value or "").strip().lower() == cls.HARD.value else cls.SOFT


class RecurrenceKind(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..schedules.model import ScheduleEntry


@dataclass(frozen=True)
class WeeklyReport:
    """Planned vs. actual hours of one owner over a Monday-to-Sunday window."""

    owner_id: int
    week_start: date
    week_end: date
    total_planned: float
    total_actual: float
    variance_hours: float
    scope_id: Optional[int] = None
    entries: list[ScheduleEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "scope_id": self.scope_id,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_planned": self.total_planned,
            "total_actual": self.total_actual,
            "variance_hours": self.variance_hours,
            "entries": [e.to_dict() for e in self.entries],
        }

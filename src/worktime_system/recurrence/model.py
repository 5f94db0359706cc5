from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import duration_hours, format_time
from ..core.constants import (
    DEFAULT_STANDUP_CATEGORY,
    DEFAULT_STANDUP_END,
    DEFAULT_STANDUP_LABEL,
    DEFAULT_STANDUP_START,
)
from ..core.enums import WORKWEEK, RecurrenceKind, Weekday
from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range [start, end]."""

    start: date
    end: date

    def __post_init__(self):
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise ConfigurationError("Window start and end dates are required")
        if self.start > self.end:
            raise ConfigurationError(f"Window start {self.start} is after end {self.end}")

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


def as_window(value: DateWindow | tuple[date, date]) -> DateWindow:
    """Accept a DateWindow or a (start, end) pair."""
    if isinstance(value, DateWindow):
        return value
    try:
        start, end = value
    except (TypeError, ValueError):
        raise ConfigurationError("Window must be a (start, end) pair")
    return DateWindow(start, end)


@dataclass(frozen=True)
class RecurrenceConfig:
    """Per-scope recurring meeting (standup) settings."""

    scope_id: int
    start_time: time = DEFAULT_STANDUP_START
    end_time: time = DEFAULT_STANDUP_END
    label: str = DEFAULT_STANDUP_LABEL
    category: str = DEFAULT_STANDUP_CATEGORY
    weekdays: frozenset[Weekday] = WORKWEEK
    enabled: bool = False

    def validate(self) -> None:
        if not self.label or not self.label.strip():
            raise ConfigurationError("Recurrence label is required")
        duration_hours(self.start_time, self.end_time)

    @property
    def planned_hours(self) -> float:
        return duration_hours(self.start_time, self.end_time)

    def matches(self, day: date) -> bool:
        return self.enabled and Weekday(day.weekday()) in self.weekdays

    def to_dict(self) -> dict:
        return {
            "scope_id": self.scope_id,
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
            "label": self.label,
            "category": self.category,
            "weekdays": sorted(int(d) for d in self.weekdays),
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class RecurrenceRule:
    """Fixed recurrence shape for recurring tasks: every N days/weeks."""

    kind: RecurrenceKind = RecurrenceKind.DAILY
    interval: int = 1
    weekdays: frozenset[Weekday] = field(default_factory=frozenset)
    end_date: Optional[date] = None
    max_count: Optional[int] = None

    def __post_init__(self):
        if int(self.interval) < 1:
            raise ConfigurationError("Recurrence interval must be at least 1")
        if self.max_count is not None and int(self.max_count) < 1:
            raise ConfigurationError("Recurrence count must be at least 1")

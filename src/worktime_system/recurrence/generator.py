"""Expansion of a per-scope recurrence config into dated schedule entry drafts."""

from __future__ import annotations

from datetime import date
from typing import Iterator, Sequence

from ..common.datetime_utils import iter_dates
from ..core.enums import EntryStatus, RecurrenceKind
from ..schedules.model import RecurrenceInfo, ScheduleEntryDraft
from .model import DateWindow, RecurrenceConfig, as_window


class OccurrenceSequence:
    """Finite, restartable, date-ordered drafts for one config and window.

    Iterating twice expands the window twice; nothing is cached.
    """

    def __init__(
        self,
        config: RecurrenceConfig,
        window: DateWindow,
        owners: Sequence[int],
        *,
        automated: bool = True,
    ):
        self._config = config
        self._window = window
        self._owners = tuple(owners)
        self._automated = automated
        self._planned_hours = config.planned_hours

    def __iter__(self) -> Iterator[ScheduleEntryDraft]:
        if not self._config.enabled or not self._config.weekdays or not self._owners:
            return
        for day in iter_dates(self._window.start, self._window.end):
            if not self._config.matches(day):
                continue
            for owner_id in self._owners:
                yield build_draft(
                    self._config,
                    day,
                    owner_id,
                    planned_hours=self._planned_hours,
                    automated=self._automated,
                )

    def __len__(self) -> int:
        return sum(1 for _ in self)


def build_draft(
    config: RecurrenceConfig,
    day: date,
    owner_id: int,
    *,
    planned_hours: float,
    automated: bool,
) -> ScheduleEntryDraft:
    return ScheduleEntryDraft(
        owner_id=int(owner_id),
        scope_id=config.scope_id,
        occurrence_date=day,
        start_time=config.start_time,
        end_time=config.end_time,
        label=config.label,
        planned_hours=planned_hours,
        actual_hours=planned_hours if automated else 0.0,
        status=EntryStatus.COMPLETED if automated else EntryStatus.PLANNED,
        category=config.category,
        recurrence=RecurrenceInfo(
            is_recurring=True,
            kind=RecurrenceKind.DAILY,
            interval=1,
            weekdays=frozenset(config.weekdays),
            parent_group_id=f"{config.scope_id}-{owner_id}",
        ),
        automated=automated,
    )


def generate_occurrences(
    config: RecurrenceConfig,
    window: DateWindow | tuple[date, date],
    owners: Sequence[int],
    *,
    automated: bool = True,
) -> OccurrenceSequence:
    """One draft per (matching day x owner), ascending by date.

    Raises ConfigurationError for an inverted window or an unusable time range.
    """
    window = as_window(window)
    config.validate()
    return OccurrenceSequence(config, window, owners, automated=automated)


def create_for_date(
    config: RecurrenceConfig,
    day: date,
    owners: Sequence[int],
    *,
    automated: bool = True,
) -> list[ScheduleEntryDraft]:
    """Drafts for one specific date (empty when the day does not match)."""
    return list(generate_occurrences(config, DateWindow(day, day), owners, automated=automated))

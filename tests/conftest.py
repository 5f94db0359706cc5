from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime, time
from typing import Optional

import pytest

from worktime_system.common.throttle import BatchThrottle
from worktime_system.core.enums import TaskStatus
from worktime_system.core.exceptions import PersistenceConflict
from worktime_system.recurrence.model import RecurrenceConfig
from worktime_system.recurrence.service import RecurrenceConfigService
from worktime_system.schedules.model import ScheduleEntry, ScheduleEntryDraft
from worktime_system.schedules.service import ScheduleService


class InMemoryEntries:
    """Mirrors the MySQL unique key (owner, date, scope, label, start, end) and the assignment cascade."""

    def __init__(self):
        self.rows: dict[int, ScheduleEntry] = {}
        self.task_status: dict[int, TaskStatus] = {}
        self.assignments: set[tuple[int, int]] = set()
        self.fail_on: set[date] = set()
        self.create_calls = 0
        self._id = 0

    @staticmethod
    def _key(e: ScheduleEntryDraft):
        return (e.owner_id, e.occurrence_date, e.scope_id, e.label, e.start_time, e.end_time)

    def list_entries(self, *, scope_id=None, owner_id=None, start=None, end=None):
        items = [
            e
            for e in self.rows.values()
            if (scope_id is None or e.scope_id == scope_id)
            and (owner_id is None or e.owner_id == owner_id)
            and (start is None or e.occurrence_date >= start)
            and (end is None or e.occurrence_date <= end)
        ]
        items.sort(key=lambda e: (e.occurrence_date, e.start_time, e.entry_id))
        return items

    def get(self, entry_id: int) -> Optional[ScheduleEntry]:
        return self.rows.get(entry_id)

    def create(self, draft: ScheduleEntryDraft) -> ScheduleEntry:
        self.create_calls += 1
        if draft.occurrence_date in self.fail_on:
            raise RuntimeError("connection lost")
        if any(self._key(e) == self._key(draft) for e in self.rows.values()):
            raise PersistenceConflict(f"{draft.label} on {draft.occurrence_date} exists")
        self._id += 1
        values = {f.name: getattr(draft, f.name) for f in fields(ScheduleEntryDraft)}
        entry = ScheduleEntry(**values, entry_id=self._id, created_at=datetime(2024, 1, 1, 9, 0))
        self.rows[entry.entry_id] = entry
        if entry.task_id is not None:
            self.assignments.add((entry.task_id, entry.owner_id))
        return entry

    def save(self, entry: ScheduleEntry) -> bool:
        if entry.entry_id not in self.rows:
            return False
        self.rows[entry.entry_id] = entry
        return True

    def delete(self, entry_id: int) -> Optional[ScheduleEntry]:
        entry = self.rows.pop(entry_id, None)
        if entry is None or entry.task_id is None:
            return entry
        still_used = any(e.task_id == entry.task_id and e.owner_id == entry.owner_id for e in self.rows.values())
        if not still_used:
            self.assignments.discard((entry.task_id, entry.owner_id))
        return entry

    def list_statuses_for_task(self, task_id: int):
        return [e.status.value for e in self.rows.values() if e.task_id == task_id]

    def update_task_status(self, task_id: int, status: TaskStatus) -> None:
        self.task_status[task_id] = status


class InMemoryConfigs:
    def __init__(self, *configs: RecurrenceConfig):
        self.configs = {c.scope_id: c for c in configs}
        self.saves = 0

    def get(self, scope_id: int) -> Optional[RecurrenceConfig]:
        return self.configs.get(scope_id)

    def save(self, config: RecurrenceConfig) -> None:
        self.saves += 1
        self.configs[config.scope_id] = config


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def standup_config() -> RecurrenceConfig:
    return RecurrenceConfig(scope_id=7, start_time=time(11, 30), end_time=time(12, 30), enabled=True)


@pytest.fixture
def entries_repo() -> InMemoryEntries:
    return InMemoryEntries()


@pytest.fixture
def configs_repo(standup_config) -> InMemoryConfigs:
    return InMemoryConfigs(standup_config)


@pytest.fixture
def schedule_service(entries_repo, configs_repo) -> ScheduleService:
    return ScheduleService(entries_repo, RecurrenceConfigService(configs_repo), throttle=BatchThrottle(0))


@pytest.fixture
def make_draft():
    def _make(**overrides) -> ScheduleEntryDraft:
        values = dict(
            owner_id=1,
            scope_id=7,
            occurrence_date=date(2024, 1, 2),
            start_time=time(9, 0),
            end_time=time(17, 0),
            label="Build report",
            planned_hours=8.0,
        )
        values.update(overrides)
        return ScheduleEntryDraft(**values)

    return _make

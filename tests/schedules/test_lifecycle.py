from __future__ import annotations

from datetime import date, datetime, time

import pytest

from worktime_system.core.enums import EntryStatus, TaskStatus
from worktime_system.core.exceptions import InvalidTransitionError, ValidationError
from worktime_system.schedules import lifecycle
from worktime_system.schedules.model import ScheduleEntry

NOW = datetime(2024, 1, 2, 15, 0)


def _entry(**overrides) -> ScheduleEntry:
    values = dict(
        entry_id=1,
        owner_id=1,
        scope_id=1,
        occurrence_date=date(2024, 1, 2),
        start_time=time(9, 0),
        end_time=time(13, 0),
        label="Write tests",
        planned_hours=4.0,
    )
    values.update(overrides)
    return ScheduleEntry(**values)


def test_full_path_stamps_completion():
    entry = lifecycle.start(_entry(), now=NOW)
    assert entry.status == EntryStatus.IN_PROGRESS
    assert entry.completed_at is None

    done = lifecycle.complete(entry, now=NOW)
    assert done.status == EntryStatus.COMPLETED
    assert done.completed_at == NOW


def test_planned_can_be_confirmed_directly():
    assert lifecycle.complete(_entry(), now=NOW).status == EntryStatus.COMPLETED


@pytest.mark.parametrize(
    "current, target",
    [
        (EntryStatus.COMPLETED, EntryStatus.IN_PROGRESS),
        (EntryStatus.COMPLETED, EntryStatus.PLANNED),
        (EntryStatus.IN_PROGRESS, EntryStatus.PLANNED),
    ],
)
def test_illegal_moves_raise(current, target):
    with pytest.raises(InvalidTransitionError):
        lifecycle.transition(_entry(status=current), target, now=NOW)


def test_same_status_is_a_no_op():
    entry = _entry(status=EntryStatus.COMPLETED)

    assert lifecycle.transition(entry, "done", now=NOW) is entry


def test_pause_and_resume_keep_status_and_plan():
    entry = lifecycle.start(_entry(), now=NOW)

    paused = lifecycle.pause(entry, now=datetime(2024, 1, 2, 10, 0))
    assert paused.is_paused is True
    assert paused.status == EntryStatus.IN_PROGRESS
    assert paused.paused_at == datetime(2024, 1, 2, 10, 0)
    assert paused.resumed_at is None

    resumed = lifecycle.resume(paused, now=datetime(2024, 1, 2, 11, 0))
    assert resumed.is_paused is False
    assert resumed.status == EntryStatus.IN_PROGRESS
    assert resumed.resumed_at == datetime(2024, 1, 2, 11, 0)
    assert resumed.planned_hours == 4.0


def test_pausing_again_clears_previous_resume():
    entry = lifecycle.resume(lifecycle.pause(_entry(), now=NOW), now=NOW)

    assert lifecycle.pause(entry, now=NOW).resumed_at is None


def test_status_changes_while_paused_raise():
    paused = lifecycle.pause(_entry(), now=NOW)

    with pytest.raises(InvalidTransitionError):
        lifecycle.start(paused, now=NOW)
    with pytest.raises(InvalidTransitionError):
        lifecycle.complete(paused, now=NOW)
    with pytest.raises(InvalidTransitionError):
        lifecycle.pause(paused, now=NOW)


def test_completed_cannot_pause_and_unpaused_cannot_resume():
    with pytest.raises(InvalidTransitionError):
        lifecycle.pause(_entry(status=EntryStatus.COMPLETED), now=NOW)
    with pytest.raises(InvalidTransitionError):
        lifecycle.resume(_entry(), now=NOW)


def test_actual_hours_correction_allowed_when_completed():
    entry = _entry(status=EntryStatus.COMPLETED, actual_hours=4.0)

    assert lifecycle.correct_actual_hours(entry, 5.5).actual_hours == 5.5
    with pytest.raises(ValidationError):
        lifecycle.correct_actual_hours(entry, -1)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("in_progress", EntryStatus.IN_PROGRESS),
        ("In Progress", EntryStatus.IN_PROGRESS),
        ("В работе", EntryStatus.IN_PROGRESS),
        ("Завершено", EntryStatus.COMPLETED),
        ("done", EntryStatus.COMPLETED),
        ("", EntryStatus.PLANNED),
        (None, EntryStatus.PLANNED),
        ("archived", EntryStatus.PLANNED),
    ],
)
def test_status_tokens_are_normalized(token, expected):
    assert EntryStatus.parse(token) == expected


@pytest.mark.parametrize(
    "statuses, expected",
    [
        (["completed", "completed"], TaskStatus.CLOSED),
        (["completed", "in-progress"], TaskStatus.IN_PROGRESS),
        (["completed", "planned"], TaskStatus.PLANNED),
        ([], TaskStatus.PLANNED),
    ],
)
def test_task_status_derivation(statuses, expected):
    assert lifecycle.derive_task_status(statuses) == expected


def test_timestamps_default_to_wall_clock(monkeypatch):
    monkeypatch.setattr(lifecycle, "now_local", lambda: NOW)

    paused = lifecycle.pause(_entry())
    assert paused.paused_at == NOW
    assert lifecycle.complete(lifecycle.resume(paused)).completed_at == NOW

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest

from worktime_system.common.datetime_utils import week_start_of
from worktime_system.reports.calculator.deadline_gated import RawVarianceCalculator
from worktime_system.reports.service import ReportService, compute_weekly_report
from worktime_system.schedules.model import ScheduleEntry

WEEK_START = date(2024, 3, 4)
NOW = datetime(2024, 3, 11, 10, 0, tzinfo=timezone.utc)


def _entry(entry_id: int, **overrides) -> ScheduleEntry:
    values = dict(
        entry_id=entry_id,
        owner_id=1,
        scope_id=1,
        occurrence_date=date(2024, 3, 5),
        start_time=time(9, 0),
        end_time=time(13, 0),
        label=f"Task {entry_id}",
        planned_hours=4.0,
        actual_hours=4.0,
    )
    values.update(overrides)
    return ScheduleEntry(**values)


def test_variance_counts_only_passed_deadlines():
    entries = [
        _entry(1, actual_hours=7.0, deadline=date(2024, 3, 6)),
        _entry(2, actual_hours=1.0, deadline=date(2024, 3, 20)),
        _entry(3, actual_hours=9.0),
    ]

    report = compute_weekly_report(entries, 1, WEEK_START, now=NOW, tz="UTC")

    assert report.variance_hours == 3.0
    assert report.total_planned == 12.0
    assert report.total_actual == 17.0
    assert report.week_end == date(2024, 3, 10)


def test_deadline_today_does_not_count():
    entries = [_entry(1, actual_hours=6.0, deadline=date(2024, 3, 11))]

    assert compute_weekly_report(entries, 1, WEEK_START, now=NOW, tz="UTC").variance_hours == 0.0


def test_standups_other_owners_and_other_weeks_are_excluded():
    entries = [
        _entry(1),
        _entry(2, automated=True, planned_hours=1.0, actual_hours=1.0),
        _entry(3, owner_id=2),
        _entry(4, occurrence_date=date(2024, 3, 11)),
        _entry(5, occurrence_date=date(2024, 3, 3)),
        _entry(6, occurrence_date=date(2024, 3, 10), planned_hours=2.0, actual_hours=0.0),
    ]

    report = compute_weekly_report(entries, 1, WEEK_START, now=NOW)

    assert [e.entry_id for e in report.entries] == [1, 6]
    assert report.total_planned == 6.0
    assert report.total_actual == 4.0


def test_scope_filter():
    entries = [_entry(1, scope_id=1), _entry(2, scope_id=2, planned_hours=2.0)]

    report = compute_weekly_report(entries, 1, WEEK_START, scope_id=2, now=NOW)

    assert report.total_planned == 2.0
    assert report.to_dict()["scope_id"] == 2


def test_totals_are_rounded():
    entries = [_entry(1, planned_hours=0.1, actual_hours=0.1), _entry(2, planned_hours=0.2, actual_hours=0.2)]

    report = compute_weekly_report(entries, 1, WEEK_START, now=NOW)

    assert report.total_planned == 0.3
    assert report.total_actual == 0.3


def test_variance_uses_reference_zone():
    entries = [_entry(1, actual_hours=6.0, deadline=datetime(2024, 3, 10, 22, 0, tzinfo=timezone.utc))]

    assert compute_weekly_report(entries, 1, WEEK_START, now=NOW, tz="UTC").variance_hours == 2.0
    assert compute_weekly_report(entries, 1, WEEK_START, now=NOW, tz="Europe/Moscow").variance_hours == 0.0


def test_calculator_is_pluggable():
    entries = [_entry(1, actual_hours=5.5)]

    report = compute_weekly_report(entries, 1, WEEK_START, now=NOW, calculator=RawVarianceCalculator())

    assert report.variance_hours == 1.5


def test_week_start_of():
    assert week_start_of(date(2024, 3, 10)) == WEEK_START
    assert week_start_of(WEEK_START) == WEEK_START


class FakeEntries:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def list_entries(self, *, scope_id=None, owner_id=None, start=None, end=None):
        self.last_args = {"scope_id": scope_id, "owner_id": owner_id, "start": start, "end": end}
        return self._rows


def test_service_reads_the_week_window():
    repo = FakeEntries([_entry(1, actual_hours=5.0, deadline=date(2024, 3, 1))])
    svc = ReportService(repo)

    report = svc.weekly_report(owner_id=1, week_start=WEEK_START, now=NOW)

    assert repo.last_args == {"scope_id": None, "owner_id": 1, "start": WEEK_START, "end": WEEK_START + timedelta(days=6)}
    assert report.variance_hours == pytest.approx(1.0)

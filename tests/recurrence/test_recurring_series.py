from __future__ import annotations

from datetime import date, time

import pytest

from worktime_system.core.enums import RecurrenceKind, Weekday
from worktime_system.core.exceptions import ConfigurationError
from worktime_system.recurrence.model import RecurrenceRule
from worktime_system.recurrence.series import expand_rule, generate_recurring_series
from worktime_system.schedules.model import ScheduleEntryDraft


def test_daily_every_other_day():
    rule = RecurrenceRule(kind=RecurrenceKind.DAILY, interval=2, max_count=3)

    assert expand_rule(rule, date(2024, 1, 1)) == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 5)]


def test_biweekly_on_weekdays_never_before_start():
    rule = RecurrenceRule(
        kind=RecurrenceKind.WEEKLY,
        interval=2,
        weekdays=frozenset({Weekday.MON, Weekday.WED}),
        max_count=4,
    )

    assert expand_rule(rule, date(2024, 1, 3)) == [
        date(2024, 1, 3),
        date(2024, 1, 15),
        date(2024, 1, 17),
        date(2024, 1, 29),
    ]


def test_weekly_without_weekdays_stops_at_end_date():
    rule = RecurrenceRule(kind=RecurrenceKind.WEEKLY, end_date=date(2024, 1, 22))

    assert expand_rule(rule, date(2024, 1, 1)) == [
        date(2024, 1, 1),
        date(2024, 1, 8),
        date(2024, 1, 15),
        date(2024, 1, 22),
    ]


def test_daily_rule_filtered_by_weekdays():
    rule = RecurrenceRule(kind=RecurrenceKind.DAILY, weekdays=frozenset({Weekday.SAT}), max_count=2)

    assert expand_rule(rule, date(2024, 1, 1)) == [date(2024, 1, 6), date(2024, 1, 13)]


def test_rule_that_can_never_match_is_empty():
    # Every 7th day from a Monday is always a Monday.
    rule = RecurrenceRule(kind=RecurrenceKind.DAILY, interval=7, weekdays=frozenset({Weekday.TUE}))

    assert expand_rule(rule, date(2024, 1, 1)) == []


def test_open_ended_rule_is_capped():
    rule = RecurrenceRule(kind=RecurrenceKind.DAILY)

    assert len(expand_rule(rule, date(2024, 1, 1))) == 100
    assert len(expand_rule(rule, date(2024, 1, 1), limit=5)) == 5


@pytest.mark.parametrize("kwargs", [{"interval": 0}, {"max_count": 0}])
def test_invalid_rule_raises(kwargs):
    with pytest.raises(ConfigurationError):
        RecurrenceRule(**kwargs)


def test_series_shares_group_and_rule_metadata():
    template = ScheduleEntryDraft(
        owner_id=3,
        scope_id=1,
        occurrence_date=date(2024, 1, 1),
        start_time=time(14, 0),
        end_time=time(15, 0),
        label="Code review",
        planned_hours=1.0,
    )
    rule = RecurrenceRule(kind=RecurrenceKind.DAILY, interval=1, max_count=3)

    series = generate_recurring_series(template, rule, group_id="grp-1")

    assert [d.occurrence_date.day for d in series] == [1, 2, 3]
    assert {d.recurrence.parent_group_id for d in series} == {"grp-1"}
    assert all(d.recurrence.is_recurring and d.recurrence.kind == RecurrenceKind.DAILY for d in series)
    assert all(d.label == "Code review" and d.owner_id == 3 for d in series)

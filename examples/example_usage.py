"""Example: drive the engine and the service layer without Flask.

Controllers are a thin layer; the scheduling rules live in services and pure functions.
"""

import importlib
from datetime import date, time

from worktime_system.config import get_settings_module
from worktime_system.container import build_container
from worktime_system.core.enums import WORKWEEK
from worktime_system.recurrence.generator import generate_occurrences
from worktime_system.recurrence.model import DateWindow, RecurrenceConfig


def main():
    config = RecurrenceConfig(scope_id=1, start_time=time(11, 30), end_time=time(12, 30), weekdays=WORKWEEK, enabled=True)
    drafts = generate_occurrences(config, DateWindow(date(2024, 1, 1), date(2024, 1, 7)), owners=[1, 2])
    print(f"{len(drafts)} standup drafts, {drafts_hours(drafts)}h planned")

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    report = container.report_service.weekly_report(owner_id=1, week_start=date(2024, 1, 1))
    print(report.to_dict())


def drafts_hours(drafts) -> float:
    return sum(d.planned_hours for d in drafts)


if __name__ == "__main__":
    main()

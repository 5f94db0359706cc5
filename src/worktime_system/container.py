from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .common.throttle import BatchThrottle
from .core.constants import DEFAULT_BATCH_WRITE_INTERVAL_SECONDS, DEFAULT_REFERENCE_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .recurrence.mysql_recurrence_repository import MySQLRecurrenceConfigRepository
from .recurrence.repository import RecurrenceConfigRepository
from .recurrence.service import RecurrenceConfigService
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleEntryRepository
from .schedules.repository import ScheduleEntryRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    entries_repo: ScheduleEntryRepository
    configs_repo: RecurrenceConfigRepository

    recurrence_service: RecurrenceConfigService
    schedule_service: ScheduleService
    report_service: ReportService

    reference_tz: str = DEFAULT_REFERENCE_TIMEZONE


def wire_services(
    *,
    entries_repo: ScheduleEntryRepository,
    configs_repo: RecurrenceConfigRepository,
    conn: Optional[DatabaseConnection] = None,
    reference_tz: str = DEFAULT_REFERENCE_TIMEZONE,
    batch_interval: float = DEFAULT_BATCH_WRITE_INTERVAL_SECONDS,
) -> Container:
    recurrence_service = RecurrenceConfigService(configs_repo)
    schedule_service = ScheduleService(
        entries_repo,
        recurrence_service,
        throttle=BatchThrottle(batch_interval),
        reference_tz=reference_tz,
    )
    report_service = ReportService(entries_repo, reference_tz=reference_tz)

    return Container(
        conn=conn,
        entries_repo=entries_repo,
        configs_repo=configs_repo,
        recurrence_service=recurrence_service,
        schedule_service=schedule_service,
        report_service=report_service,
        reference_tz=reference_tz,
    )


def build_container(
    *,
    db_config: dict,
    reference_tz: str = DEFAULT_REFERENCE_TIMEZONE,
    batch_interval: float = DEFAULT_BATCH_WRITE_INTERVAL_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_services(
        entries_repo=MySQLScheduleEntryRepository(conn),
        configs_repo=MySQLRecurrenceConfigRepository(conn),
        conn=conn,
        reference_tz=reference_tz,
        batch_interval=batch_interval,
    )

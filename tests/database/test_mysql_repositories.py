from __future__ import annotations

from datetime import date, time, timedelta

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from worktime_system.core.enums import EntryStatus, Weekday
from worktime_system.core.exceptions import PersistenceConflict
from worktime_system.database.bootstrap import SCHEMA_PATH, _iter_sql_statements, _strip_create_db_and_use
from worktime_system.database.mysql_base import decode_weekdays, encode_weekdays, is_duplicate_key, to_time_of_day
from worktime_system.recurrence.model import RecurrenceConfig
from worktime_system.recurrence.mysql_recurrence_repository import MySQLRecurrenceConfigRepository
from worktime_system.schedules.model import ScheduleEntryDraft
from worktime_system.schedules.mysql_schedule_repository import MySQLScheduleEntryRepository


class FakeCursor:
    def __init__(self, results=(), fail_with=None):
        self.results = list(results)
        self.fail_with = fail_with
        self.executed: list[tuple[str, tuple]] = []
        self.lastrowid = 1
        self.rowcount = 1

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))
        if self.fail_with is not None and sql.strip().upper().startswith("INSERT"):
            raise self.fail_with

    def fetchone(self):
        return self.results.pop(0) if self.results else None

    def fetchall(self):
        return self.results.pop(0) if self.results else []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = 0
        self.rolled_back = 0

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def close(self):
        pass


class FakeFactory:
    def __init__(self, cursor: FakeCursor):
        self.cursor = cursor
        self.connections: list[FakeConnection] = []

    def connect(self):
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn


def _row(**overrides) -> dict:
    row = {
        "entry_id": 11,
        "owner_id": 1,
        "scope_id": 7,
        "task_id": 5,
        "occurrence_date": date(2024, 1, 2),
        "start_time": timedelta(hours=11, minutes=30),
        "end_time": "12:30:00",
        "label": "Daily team standup",
        "planned_hours": 1,
        "actual_hours": 1,
        "status": "Завершено",
        "recurrence_kind": "daily",
        "recurrence_interval": 1,
        "recurrence_weekdays": "0,1,2,3,4",
        "is_recurring": 1,
        "automated": 1,
    }
    row.update(overrides)
    return row


def _draft() -> ScheduleEntryDraft:
    return ScheduleEntryDraft(
        owner_id=1,
        scope_id=7,
        occurrence_date=date(2024, 1, 2),
        start_time=time(11, 30),
        end_time=time(12, 30),
        label="Daily team standup",
        planned_hours=1.0,
    )


def test_row_mapping_normalizes_times_and_status():
    cursor = FakeCursor(results=[_row()])
    entry = MySQLScheduleEntryRepository(FakeFactory(cursor)).get(11)

    assert entry.start_time == time(11, 30)
    assert entry.end_time == time(12, 30)
    assert entry.status == EntryStatus.COMPLETED
    assert entry.recurrence.weekdays == frozenset(Weekday(d) for d in range(5))
    assert entry.automated is True


def test_duplicate_insert_becomes_conflict():
    dup = IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    factory = FakeFactory(FakeCursor(fail_with=dup))

    with pytest.raises(PersistenceConflict):
        MySQLScheduleEntryRepository(factory).create(_draft())

    assert factory.connections[0].rolled_back == 1


def test_other_insert_errors_propagate():
    factory = FakeFactory(FakeCursor(fail_with=IntegrityError(msg="FK", errno=errorcode.ER_NO_REFERENCED_ROW_2)))

    with pytest.raises(IntegrityError):
        MySQLScheduleEntryRepository(factory).create(_draft())


def test_delete_of_last_entry_removes_assignment():
    cursor = FakeCursor(results=[_row(), None])

    deleted = MySQLScheduleEntryRepository(FakeFactory(cursor)).delete(11)

    assert deleted.entry_id == 11
    statements = [sql for sql, _ in cursor.executed]
    assert statements[0].endswith("FOR UPDATE")
    assert statements[-1] == "DELETE FROM task_assignments WHERE task_id=%s AND owner_id=%s"


def test_delete_keeps_assignment_while_entries_remain():
    cursor = FakeCursor(results=[_row(), {"present": 1}])

    MySQLScheduleEntryRepository(FakeFactory(cursor)).delete(11)

    assert not any("task_assignments" in sql for sql, _ in cursor.executed)


def test_delete_missing_entry_returns_none():
    assert MySQLScheduleEntryRepository(FakeFactory(FakeCursor())).delete(11) is None


def test_recurrence_config_mapping_and_upsert():
    cursor = FakeCursor(
        results=[
            {
                "scope_id": 7,
                "start_time": timedelta(hours=9),
                "end_time": timedelta(hours=9, minutes=15),
                "label": "Standup",
                "category": "Meeting",
                "weekdays": "0,2,4",
                "enabled": 1,
            }
        ]
    )
    repo = MySQLRecurrenceConfigRepository(FakeFactory(cursor))

    config = repo.get(7)
    assert config == RecurrenceConfig(
        scope_id=7,
        start_time=time(9, 0),
        end_time=time(9, 15),
        label="Standup",
        category="Meeting",
        weekdays=frozenset({Weekday.MON, Weekday.WED, Weekday.FRI}),
        enabled=True,
    )

    repo.save(config)
    sql, params = cursor.executed[-1]
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert params[5] == "0,2,4"


def test_mysql_helpers():
    assert to_time_of_day(timedelta(hours=8, minutes=5)) == time(8, 5)
    assert to_time_of_day("08:30") == time(8, 30)
    assert is_duplicate_key(IntegrityError(errno=errorcode.ER_DUP_ENTRY))
    assert not is_duplicate_key(ValueError("x"))


def test_schema_file_splits_into_statements():
    sql = _strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))
    statements = list(_iter_sql_statements(sql))

    assert all(not s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    assert any("uq_occurrence (owner_id, occurrence_date, scope_id, label, start_time, end_time)" in s for s in statements)


def test_weekday_csv_codec():
    assert encode_weekdays({Weekday.FRI, Weekday.MON}) == "0,4"
    assert decode_weekdays(" 0, 4,9,x") == frozenset({Weekday.MON, Weekday.FRI})
    assert decode_weekdays(None) == frozenset()


def test_splitter_keeps_quoted_semicolons():
    sql = "-- seed\nINSERT INTO t VALUES ('a;b');\nUSE other;\nSELECT 1"

    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]

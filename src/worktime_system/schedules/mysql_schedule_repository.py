from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.constants import DEFAULT_ENTRY_CATEGORY
from ..core.enums import DeadlineKind, EntryStatus, RecurrenceKind, TaskStatus
from ..core.exceptions import PersistenceConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    decode_weekdays,
    encode_weekdays,
    fetch_row,
    fetch_rows,
    is_duplicate_key,
    to_time_of_day,
)
from .model import RecurrenceInfo, ScheduleEntry, ScheduleEntryDraft
from .repository import ScheduleEntryRepository

_COLUMNS = """
    entry_id, owner_id, scope_id, task_id, occurrence_date, start_time, end_time, label,
    planned_hours, actual_hours, status, category, parent_task_id, sequence_index,
    total_group_hours, is_paused, paused_at, resumed_at, is_recurring, recurrence_kind,
    recurrence_interval, recurrence_weekdays, recurrence_end_date, recurrence_count,
    parent_group_id, deadline, deadline_kind, deadline_reason, assigned_by_admin,
    automated, completed_at, created_at
"""


def _float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _deadline(value: Any) -> Optional[date | datetime]:
    # Date-only deadlines are stored at midnight.
    if isinstance(value, datetime) and value.hour == 0 and value.minute == 0 and value.second == 0:
        return value.date()
    return value


def _row_to_entry(r: dict) -> ScheduleEntry:
    return ScheduleEntry(
        entry_id=int(r["entry_id"]),
        owner_id=int(r["owner_id"]),
        scope_id=int(r["scope_id"]),
        task_id=int(r["task_id"]) if r.get("task_id") is not None else None,
        occurrence_date=r["occurrence_date"],
        start_time=to_time_of_day(r["start_time"]),
        end_time=to_time_of_day(r["end_time"]),
        label=r["label"],
        planned_hours=float(r["planned_hours"] or 0),
        actual_hours=float(r["actual_hours"] or 0),
        status=EntryStatus.parse(r.get("status")),
        category=r.get("category") or DEFAULT_ENTRY_CATEGORY,
        parent_task_id=r.get("parent_task_id"),
        sequence_index=r.get("sequence_index"),
        total_group_hours=_float(r.get("total_group_hours")),
        is_paused=bool(r.get("is_paused")),
        paused_at=r.get("paused_at"),
        resumed_at=r.get("resumed_at"),
        recurrence=RecurrenceInfo(
            is_recurring=bool(r.get("is_recurring")),
            kind=RecurrenceKind(r["recurrence_kind"]) if r.get("recurrence_kind") else None,
            interval=r.get("recurrence_interval"),
            weekdays=decode_weekdays(r.get("recurrence_weekdays")),
            end_date=r.get("recurrence_end_date"),
            max_count=r.get("recurrence_count"),
            parent_group_id=r.get("parent_group_id"),
        ),
        deadline=_deadline(r.get("deadline")),
        deadline_kind=DeadlineKind.parse(r.get("deadline_kind")),
        deadline_reason=r.get("deadline_reason"),
        assigned_by_admin=bool(r.get("assigned_by_admin")),
        automated=bool(r.get("automated")),
        completed_at=r.get("completed_at"),
        created_at=r.get("created_at"),
    )


class MySQLScheduleEntryRepository(ScheduleEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_entries(
        self,
        *,
        scope_id: Optional[int] = None,
        owner_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ScheduleEntry]:
        clauses = ["1=1"]
        params: list[object] = []
        if scope_id is not None:
            clauses.append("scope_id=%s")
            params.append(int(scope_id))
        if owner_id is not None:
            clauses.append("owner_id=%s")
            params.append(int(owner_id))
        if start is not None:
            clauses.append("occurrence_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("occurrence_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedule_entries WHERE {where} ORDER BY occurrence_date ASC, start_time ASC",
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetch_rows(cur)]

    def get(self, entry_id: int) -> Optional[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedule_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetch_row(cur)
            return _row_to_entry(r) if r else None

    def create(self, draft: ScheduleEntryDraft) -> ScheduleEntry:
        rec = draft.recurrence
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO schedule_entries(
                        owner_id, scope_id, task_id, occurrence_date, start_time, end_time, label,
                        planned_hours, actual_hours, status, category, parent_task_id, sequence_index,
                        total_group_hours, is_paused, paused_at, resumed_at, is_recurring, recurrence_kind,
                        recurrence_interval, recurrence_weekdays, recurrence_end_date, recurrence_count,
                        parent_group_id, deadline, deadline_kind, deadline_reason, assigned_by_admin,
                        automated, completed_at
                    ) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(draft.owner_id),
                        int(draft.scope_id),
                        draft.task_id,
                        draft.occurrence_date,
                        draft.start_time,
                        draft.end_time,
                        draft.label,
                        draft.planned_hours,
                        draft.actual_hours,
                        draft.status.value,
                        draft.category,
                        draft.parent_task_id,
                        draft.sequence_index,
                        draft.total_group_hours,
                        int(draft.is_paused),
                        draft.paused_at,
                        draft.resumed_at,
                        int(rec.is_recurring),
                        rec.kind.value if rec.kind else None,
                        rec.interval,
                        encode_weekdays(rec.weekdays) or None,
                        rec.end_date,
                        rec.max_count,
                        rec.parent_group_id,
                        draft.deadline,
                        draft.deadline_kind.value,
                        draft.deadline_reason,
                        int(draft.assigned_by_admin),
                        int(draft.automated),
                        draft.completed_at,
                    ),
                )
                entry_id = int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise PersistenceConflict(
                    f"Entry '{draft.label}' on {draft.occurrence_date} already exists for owner {draft.owner_id}"
                ) from exc
            raise

        created = self.get(entry_id)
        if created is None:
            raise RuntimeError(f"Schedule entry {entry_id} vanished after insert")
        return created

    def save(self, entry: ScheduleEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedule_entries
                SET status=%s, actual_hours=%s, planned_hours=%s, is_paused=%s, paused_at=%s,
                    resumed_at=%s, completed_at=%s
                WHERE entry_id=%s
                """,
                (
                    entry.status.value,
                    entry.actual_hours,
                    entry.planned_hours,
                    int(entry.is_paused),
                    entry.paused_at,
                    entry.resumed_at,
                    entry.completed_at,
                    int(entry.entry_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, entry_id: int) -> Optional[ScheduleEntry]:
        # One transaction: the entry and, when it was the last one, its assignment.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedule_entries WHERE entry_id=%s FOR UPDATE", (int(entry_id),))
            r = fetch_row(cur)
            if not r:
                return None
            entry = _row_to_entry(r)

            cur.execute("DELETE FROM schedule_entries WHERE entry_id=%s", (int(entry_id),))

            if entry.task_id is not None:
                cur.execute(
                    "SELECT 1 AS present FROM schedule_entries WHERE task_id=%s AND owner_id=%s LIMIT 1",
                    (entry.task_id, entry.owner_id),
                )
                if not fetch_row(cur):
                    cur.execute(
                        "DELETE FROM task_assignments WHERE task_id=%s AND owner_id=%s",
                        (entry.task_id, entry.owner_id),
                    )
            return entry

    def list_statuses_for_task(self, task_id: int) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status FROM schedule_entries WHERE task_id=%s", (int(task_id),))
            return [r["status"] for r in fetch_rows(cur)]

    def update_task_status(self, task_id: int, status: TaskStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE tasks SET status=%s, updated_at=NOW() WHERE task_id=%s",
                (status.value, int(task_id)),
            )

from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decode_weekdays, encode_weekdays, fetch_row, to_time_of_day
from .model import RecurrenceConfig
from .repository import RecurrenceConfigRepository


class MySQLRecurrenceConfigRepository(RecurrenceConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, scope_id: int) -> Optional[RecurrenceConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT scope_id, start_time, end_time, label, category, weekdays, enabled
                FROM recurrence_configs
                WHERE scope_id=%s
                """,
                (int(scope_id),),
            )
            r = fetch_row(cur)
            if not r:
                return None
            return RecurrenceConfig(
                scope_id=int(r["scope_id"]),
                start_time=to_time_of_day(r["start_time"]),
                end_time=to_time_of_day(r["end_time"]),
                label=r["label"],
                category=r["category"],
                weekdays=decode_weekdays(r.get("weekdays")),
                enabled=bool(r["enabled"]),
            )

    def save(self, config: RecurrenceConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO recurrence_configs(scope_id, start_time, end_time, label, category, weekdays, enabled)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    start_time=VALUES(start_time),
                    end_time=VALUES(end_time),
                    label=VALUES(label),
                    category=VALUES(category),
                    weekdays=VALUES(weekdays),
                    enabled=VALUES(enabled)
                """,
                (
                    int(config.scope_id),
                    config.start_time,
                    config.end_time,
                    config.label,
                    config.category,
                    encode_weekdays(config.weekdays),
                    int(config.enabled),
                ),
            )

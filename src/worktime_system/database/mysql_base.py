from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Any, Iterable, Iterator, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import parse_time_of_day
from ..core.enums import Weekday
from .connection import DatabaseConnection

Row = dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    """One connection, one transaction: commit on success, rollback on any error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetch_row(cur) -> Optional[Row]:
    return cur.fetchone() or None


def fetch_rows(cur) -> list[Row]:
    return list(cur.fetchall() or [])


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def to_time_of_day(value: Any) -> Optional[time]:
    """TIME columns come back as time, timedelta or 'HH:MM[:SS]' depending on the connector."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return (datetime.min + timedelta(seconds=seconds)).time()
    if isinstance(value, str):
        return parse_time_of_day(value)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def encode_weekdays(weekdays: Iterable[Weekday]) -> str:
    """Weekday sets are stored as a sorted CSV of Monday-based indexes, e.g. '0,1,2,3,4'."""
    return ",".join(str(int(d)) for d in sorted(weekdays))


def decode_weekdays(value: Optional[str]) -> frozenset[Weekday]:
    parts = (p.strip() for p in (value or "").split(","))
    return frozenset(Weekday(int(p)) for p in parts if p.isdigit() and int(p) < 7)

"""Schema bootstrap for the MySQL store (used by create_app and scripts/init_db.py)."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_DB_SELECTION = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
# Quoted strings are kept whole so a ';' inside them does not end a statement.
_SQL_TOKEN = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|;|[^;'\"]+|['\"]", re.S)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the file.
    return _DB_SELECTION.sub("", _LINE_COMMENT.sub("", sql))


def _iter_sql_statements(sql: str) -> Iterator[str]:
    pending: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token != ";":
            pending.append(token)
            continue
        statement = "".join(pending).strip()
        pending.clear()
        if statement:
            yield statement
    tail = "".join(pending).strip()
    if tail:
        yield tail


@contextmanager
def _session(target: DBConfig, *, with_database: bool = True):
    params = target.connect_kwargs(with_database=with_database)
    conn = mysql.connector.connect(**params, use_pure=True)
    try:
        yield conn, conn.cursor()
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _session(target, with_database=False) as (_, cur):
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    """Create the database and every table that is missing (CREATE ... IF NOT EXISTS)."""
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    with _session(target) as (_, cur):
        for statement in _iter_sql_statements(sql):
            cur.execute(statement)
    logger.info("Schema %s applied to %s@%s/%s", Path(schema_path).name, target.user, target.host, target.database)


def list_tables(db_config: dict) -> list[str]:
    with _session(DBConfig.from_dict(db_config)) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]

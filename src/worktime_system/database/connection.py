from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "worktime_db"

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(db_config.get("host") or defaults.host),
            port=int(db_config.get("port") or defaults.port),
            user=str(db_config.get("user") or defaults.user),
            password=str(db_config.get("password") or ""),
            database=str(db_config.get("database") or defaults.database),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"host": self.host, "port": self.port, "user": self.user, "password": self.password}
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Connection factory shared by the MySQL repositories.

    One factory per (host, port, user, database); every repository call opens
    a short-lived connection through ``connect()``.
    """

    _instances: ClassVar[dict[tuple, "DatabaseConnection"]] = {}

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        key = (config.host, config.port, config.user, config.database)
        if key not in cls._instances:
            cls._instances[key] = cls(config)
        return cls._instances[key]

    def connect(self):
        return mysql.connector.connect(**self.config.connect_kwargs())

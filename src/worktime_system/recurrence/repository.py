from __future__ import annotations

from typing import Optional, Protocol

from .model import RecurrenceConfig


class RecurrenceConfigRepository(Protocol):
    def get(self, scope_id: int) -> Optional[RecurrenceConfig]:
        raise NotImplementedError

    def save(self, config: RecurrenceConfig) -> None:
        """Insert or replace the config of ``config.scope_id``."""

        raise NotImplementedError

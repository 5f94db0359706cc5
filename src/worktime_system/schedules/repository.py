from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import ScheduleEntry, ScheduleEntryDraft


class ScheduleEntryRepository(Protocol):
    def list_entries(
        self,
        *,
        scope_id: Optional[int] = None,
        owner_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ScheduleEntry]:
        raise NotImplementedError

    def get(self, entry_id: int) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def create(self, draft: ScheduleEntryDraft) -> ScheduleEntry:
        """Persist a draft.

        Raises PersistenceConflict when the occurrence already exists.
        """

        raise NotImplementedError

    def save(self, entry: ScheduleEntry) -> bool:
        """Write back status, hours and pause fields of an existing entry."""

        raise NotImplementedError

    def delete(self, entry_id: int) -> Optional[ScheduleEntry]:
        """Delete an entry and cascade to its task assignment.

        The (task_id, owner_id) assignment is removed once its last entry is gone.
        Returns the deleted entry, or None if it did not exist.
        """

        raise NotImplementedError

    def list_statuses_for_task(self, task_id: int) -> Sequence[str]:
        raise NotImplementedError

    def update_task_status(self, task_id: int, status: TaskStatus) -> None:
        raise NotImplementedError

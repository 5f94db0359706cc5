from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from itertools import groupby
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import resolve_zone, to_zone_naive
from ..common.throttle import BatchThrottle
from ..common.validators import require_non_empty, require_non_negative
from ..core.constants import DEFAULT_REFERENCE_TIMEZONE
from ..core.exceptions import EntryNotFoundError, PersistenceConflict, ValidationError
from ..deadlines.classifier import DeadlineStatus, can_exceed_planned_hours, classify_deadline
from ..recurrence.generator import generate_occurrences
from ..recurrence.guard import should_create
from ..recurrence.model import DateWindow, RecurrenceRule, as_window
from ..recurrence.series import generate_recurring_series
from ..recurrence.service import RecurrenceConfigService
from . import lifecycle
from .model import ScheduleEntry, ScheduleEntryDraft
from .repository import ScheduleEntryRepository
from .splitting import check_split_total, default_split_hours, split_task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchFailure:
    draft: ScheduleEntryDraft
    error: str


@dataclass
class BatchResult:
    """Outcome of a multi-entry write. Conflicts and failures never abort the batch."""

    created: list[ScheduleEntry] = field(default_factory=list)
    skipped: list[ScheduleEntryDraft] = field(default_factory=list)
    conflicts: list[ScheduleEntryDraft] = field(default_factory=list)
    failures: list[BatchFailure] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "created": len(self.created),
            "skipped": len(self.skipped),
            "conflicts": len(self.conflicts),
            "failed": len(self.failures),
            "entries": [e.to_dict() for e in self.created],
            "errors": [
                {"occurrence_date": f.draft.occurrence_date.isoformat(), "owner_id": f.draft.owner_id, "error": f.error}
                for f in self.failures
            ],
        }


class ScheduleService:
    def __init__(
        self,
        entries: ScheduleEntryRepository,
        configs: RecurrenceConfigService,
        *,
        throttle: Optional[BatchThrottle] = None,
        reference_tz: str = DEFAULT_REFERENCE_TIMEZONE,
    ):
        self._entries = entries
        self._configs = configs
        self._throttle = throttle or BatchThrottle()
        self._reference_tz = reference_tz

    # ------------------------------------------------------------------
    # Batch creation
    # ------------------------------------------------------------------

    def _in_reference_zone(self, draft: ScheduleEntryDraft) -> ScheduleEntryDraft:
        # DATETIME columns drop offsets; stored deadlines are wall-clock time in the reference zone.
        if draft.deadline is None:
            return draft
        return replace(draft, deadline=to_zone_naive(draft.deadline, resolve_zone(self._reference_tz)))

    def _persist(self, draft: ScheduleEntryDraft, result: BatchResult) -> None:
        self._throttle.wait()
        try:
            result.created.append(self._entries.create(self._in_reference_zone(draft)))
        except PersistenceConflict as exc:
            logger.info("Skipping existing occurrence: %s", exc)
            result.conflicts.append(draft)
        except Exception as exc:
            logger.warning(
                "Failed to create entry '%s' on %s for owner %s",
                draft.label,
                draft.occurrence_date,
                draft.owner_id,
                exc_info=True,
            )
            result.failures.append(BatchFailure(draft=draft, error=str(exc) or exc.__class__.__name__))

    def create_entries(self, drafts: Iterable[ScheduleEntryDraft]) -> BatchResult:
        result = BatchResult()
        for draft in drafts:
            self._persist(draft, result)
        return result

    def reconcile_standups(
        self,
        *,
        scope_id: int,
        window: DateWindow | tuple[date, date],
        owners: Sequence[int],
        per_owner: bool = False,
    ) -> BatchResult:
        """Create the scope's missing recurring occurrences inside ``window``.

        Group mode checks each day once against the whole snapshot; per-owner
        mode checks each (owner, day) against that owner's entries.
        """
        window = as_window(window)
        config = self._configs.get(scope_id)
        drafts = generate_occurrences(config, window, owners)
        result = BatchResult()
        if not config.enabled:
            logger.info("Recurrence disabled for scope %s; nothing generated", scope_id)
            return result

        snapshot = list(self._entries.list_entries(scope_id=config.scope_id, start=window.start, end=window.end))
        for _, day_group in groupby(drafts, key=lambda d: d.occurrence_date):
            day_drafts = list(day_group)
            if per_owner:
                for draft in day_drafts:
                    owned = [e for e in snapshot if e.owner_id == draft.owner_id]
                    if should_create(draft, owned, config):
                        self._persist(draft, result)
                    else:
                        result.skipped.append(draft)
            elif should_create(day_drafts[0], snapshot, config):
                for draft in day_drafts:
                    self._persist(draft, result)
            else:
                result.skipped.extend(day_drafts)

        logger.info(
            "Scope %s %s..%s: created=%d skipped=%d conflicts=%d failed=%d",
            scope_id,
            window.start,
            window.end,
            len(result.created),
            len(result.skipped),
            len(result.conflicts),
            len(result.failures),
        )
        return result

    def create_standups_for_date(
        self, *, scope_id: int, day: date, owners: Sequence[int], per_owner: bool = False
    ) -> BatchResult:
        return self.reconcile_standups(scope_id=scope_id, window=DateWindow(day, day), owners=owners, per_owner=per_owner)

    def create_recurring_series(self, template: ScheduleEntryDraft, rule: RecurrenceRule) -> BatchResult:
        self._validate_draft(template)
        return self.create_entries(generate_recurring_series(template, rule))

    def split_task(
        self,
        template: ScheduleEntryDraft,
        hours_per_part: Optional[Sequence[float]] = None,
    ) -> BatchResult:
        self._validate_draft(template)
        parts = list(hours_per_part) if hours_per_part else default_split_hours(template.planned_hours)
        return self.create_entries(split_task(template, parts))

    # ------------------------------------------------------------------
    # Single entries
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_draft(draft: ScheduleEntryDraft) -> None:
        require_non_empty(draft.label, "label")
        require_non_negative(draft.planned_hours, "planned_hours")
        require_non_negative(draft.actual_hours, "actual_hours")

    def create_entry(self, draft: ScheduleEntryDraft) -> ScheduleEntry:
        self._validate_draft(draft)
        return self._entries.create(self._in_reference_zone(draft))

    def list_entries(
        self,
        *,
        scope_id: Optional[int] = None,
        owner_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ScheduleEntry]:
        return self._entries.list_entries(scope_id=scope_id, owner_id=owner_id, start=start, end=end)

    def get_entry(self, entry_id: int) -> ScheduleEntry:
        entry = self._entries.get(int(entry_id))
        if entry is None:
            raise EntryNotFoundError(f"Schedule entry {entry_id} not found")
        return entry

    def _store(self, entry: ScheduleEntry) -> ScheduleEntry:
        if not self._entries.save(entry):
            raise EntryNotFoundError(f"Schedule entry {entry.entry_id} not found")
        return entry

    def _sync_task_status(self, entry: ScheduleEntry) -> None:
        if entry.task_id is None:
            return
        statuses = self._entries.list_statuses_for_task(entry.task_id)
        self._entries.update_task_status(entry.task_id, lifecycle.derive_task_status(statuses))

    def update_status(self, entry_id: int, status: object, *, now: Optional[datetime] = None) -> ScheduleEntry:
        entry = self.get_entry(entry_id)
        updated = lifecycle.transition(entry, status, now=now)
        if updated is entry:
            return entry
        self._store(updated)
        self._sync_task_status(updated)
        return updated

    def pause(self, entry_id: int, *, now: Optional[datetime] = None) -> ScheduleEntry:
        return self._store(lifecycle.pause(self.get_entry(entry_id), now=now))

    def resume(self, entry_id: int, *, now: Optional[datetime] = None) -> ScheduleEntry:
        return self._store(lifecycle.resume(self.get_entry(entry_id), now=now))

    def correct_actual_hours(self, entry_id: int, hours: float) -> ScheduleEntry:
        return self._store(lifecycle.correct_actual_hours(self.get_entry(entry_id), hours))

    def resize_split_part(self, entry_id: int, planned_hours: float, *, now: Optional[datetime] = None) -> ScheduleEntry:
        """Change one part's planned hours while the parts keep matching the group total."""
        entry = self.get_entry(entry_id)
        planned_hours = require_non_negative(planned_hours, "planned_hours")
        if entry.parent_task_id is None or entry.total_group_hours is None:
            raise ValidationError("Entry is not part of a split task")

        siblings = [
            e
            for e in self._entries.list_entries(scope_id=entry.scope_id, owner_id=entry.owner_id)
            if e.parent_task_id == entry.parent_task_id and e.entry_id != entry.entry_id
        ]
        check_split_total(
            [e.planned_hours for e in siblings] + [planned_hours],
            entry.total_group_hours,
            can_exceed=can_exceed_planned_hours(entry, now, tz=self._reference_tz),
        )
        return self._store(replace(entry, planned_hours=planned_hours))

    def delete_entry(self, entry_id: int) -> ScheduleEntry:
        deleted = self._entries.delete(int(entry_id))
        if deleted is None:
            raise EntryNotFoundError(f"Schedule entry {entry_id} not found")
        logger.info("Deleted schedule entry %s (task=%s)", entry_id, deleted.task_id)
        return deleted

    def delete_standups(
        self,
        *,
        scope_id: int,
        window: DateWindow | tuple[date, date],
        label: Optional[str] = None,
    ) -> int:
        """Remove engine-generated standups of a scope inside ``window``."""
        window = as_window(window)
        deleted = 0
        for entry in self._entries.list_entries(scope_id=scope_id, start=window.start, end=window.end):
            if not entry.automated or (label is not None and entry.label != label):
                continue
            self._throttle.wait()
            if self._entries.delete(entry.entry_id) is not None:
                deleted += 1
        logger.info("Deleted %d standups for scope %s %s..%s", deleted, scope_id, window.start, window.end)
        return deleted

    def deadline_status(self, entry_id: int, *, now: Optional[datetime] = None) -> DeadlineStatus:
        return classify_deadline(self.get_entry(entry_id), now, tz=self._reference_tz)

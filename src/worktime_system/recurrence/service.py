from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from ..common.datetime_utils import parse_time_of_day
from ..common.validators import require_bool, require_non_empty
from ..core.enums import Weekday
from ..core.exceptions import ConfigurationError
from .model import RecurrenceConfig
from .repository import RecurrenceConfigRepository

logger = logging.getLogger(__name__)


class RecurrenceConfigService:
    """Per-scope recurrence settings, read through an injected repository."""

    def __init__(self, configs: RecurrenceConfigRepository):
        self._configs = configs

    def get(self, scope_id: int) -> RecurrenceConfig:
        """Return the scope's config, creating a disabled default on first read."""
        config = self._configs.get(int(scope_id))
        if config is None:
            config = RecurrenceConfig(scope_id=int(scope_id), enabled=False)
            self._configs.save(config)
            logger.info("Created disabled recurrence config for scope %s", scope_id)
        return config

    def update(
        self,
        scope_id: int,
        *,
        start_time: object = None,
        end_time: object = None,
        label: Optional[str] = None,
        category: Optional[str] = None,
        weekdays: Optional[Iterable[int]] = None,
        enabled: Optional[bool] = None,
    ) -> RecurrenceConfig:
        current = self.get(scope_id)
        changes: dict = {}
        if start_time is not None:
            changes["start_time"] = parse_time_of_day(start_time)
        if end_time is not None:
            changes["end_time"] = parse_time_of_day(end_time)
        if label is not None:
            changes["label"] = require_non_empty(label, "label")
        if category is not None:
            changes["category"] = require_non_empty(category, "category")
        if weekdays is not None:
            try:
                changes["weekdays"] = frozenset(Weekday(int(d)) for d in weekdays)
            except (TypeError, ValueError):
                raise ConfigurationError(f"Invalid weekday set: {weekdays!r}")
        if enabled is not None:
            changes["enabled"] = require_bool(enabled, "enabled")

        updated = replace(current, **changes)
        updated.validate()
        self._configs.save(updated)
        logger.info("Updated recurrence config for scope %s (enabled=%s)", scope_id, updated.enabled)
        return updated

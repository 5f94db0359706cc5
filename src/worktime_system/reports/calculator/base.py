from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, tzinfo

from ...schedules.model import ScheduleEntryDraft


class VarianceCalculator(ABC):
    """Variance policy for the weekly report (Strategy Pattern)."""

    @abstractmethod
    def variance(self, entry: ScheduleEntryDraft, *, today: date, tz: tzinfo) -> float:
        raise NotImplementedError

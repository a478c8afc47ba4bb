from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta


class RecurrenceStrategy(ABC):
    """Strategy Pattern: encapsulate how the next occurrence of a series is chosen."""

    # Series length used when the schedule does not give a recurrence end date.
    default_horizon_days: int = 30

    @abstractmethod
    def next_occurrence(self, current: datetime) -> datetime:
        raise NotImplementedError

    def default_end(self, start: datetime) -> datetime:
        return start + timedelta(days=self.default_horizon_days)

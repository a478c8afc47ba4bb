from __future__ import annotations

from datetime import datetime, timedelta

from ...core.constants import DEFAULT_RECURRENCE_HORIZON_DAYS
from .base import RecurrenceStrategy


class DailyStrategy(RecurrenceStrategy):
    """Every calendar day, weekends included."""

    default_horizon_days = DEFAULT_RECURRENCE_HORIZON_DAYS["daily"]

    def next_occurrence(self, current: datetime) -> datetime:
        return current + timedelta(days=1)

from __future__ import annotations

from datetime import datetime, timedelta

from ...core.constants import DEFAULT_RECURRENCE_HORIZON_DAYS
from .base import RecurrenceStrategy


class WeeklyStrategy(RecurrenceStrategy):
    """Same weekday and time, seven days later."""

    default_horizon_days = DEFAULT_RECURRENCE_HORIZON_DAYS["weekly"]

    def next_occurrence(self, current: datetime) -> datetime:
        return current + timedelta(days=7)

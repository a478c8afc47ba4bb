from __future__ import annotations

from datetime import datetime, timedelta

from ...core.constants import DEFAULT_RECURRENCE_HORIZON_DAYS
from .base import RecurrenceStrategy

SATURDAY = 5


class WeekdaysStrategy(RecurrenceStrategy):
    """Monday to Friday; Saturday and Sunday are skipped."""

    default_horizon_days = DEFAULT_RECURRENCE_HORIZON_DAYS["weekdays"]

    def next_occurrence(self, current: datetime) -> datetime:
        nxt = current + timedelta(days=1)
        while nxt.weekday() >= SATURDAY:
            nxt += timedelta(days=1)
        return nxt

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Recurrence
from .strategies.base import RecurrenceStrategy
from .strategies.daily_strategy import DailyStrategy
from .strategies.weekdays_strategy import WeekdaysStrategy
from .strategies.weekly_strategy import WeeklyStrategy


@dataclass
class RecurrenceStrategyFactory:
    """Factory Pattern: choose the stepping strategy for a recurrence kind."""

    def for_recurrence(self, recurrence: Recurrence) -> Optional[RecurrenceStrategy]:
        if recurrence == Recurrence.DAILY:
            return DailyStrategy()
        if recurrence == Recurrence.WEEKDAYS:
            return WeekdaysStrategy()
        if recurrence == Recurrence.WEEKLY:
            return WeeklyStrategy()
        return None

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .filters import ScheduleFilters
from .model import Schedule


class ScheduleRepository(Protocol):
    """One schedule book. Each book is its own store; ids never cross books."""

    def insert(self, schedule: Schedule) -> Schedule:
        raise NotImplementedError

    def get(self, schedule_id: str) -> Optional[Schedule]:
        raise NotImplementedError

    def update(self, schedule: Schedule) -> None:
        """Overwrite the schedule row and replace its assignment list."""

        raise NotImplementedError

    def delete(self, schedule_id: str) -> bool:
        raise NotImplementedError

    def delete_series(self, parent_schedule_id: str) -> int:
        """Delete every schedule whose parent_schedule_id matches. Returns the count."""

        raise NotImplementedError

    def find(self, filters: ScheduleFilters) -> Sequence[Schedule]:
        """Ordered by scheduled_date ascending, paged when ``filters.limit`` is set."""

        raise NotImplementedError

    def count(self, filters: ScheduleFilters) -> int:
        raise NotImplementedError

    def find_active_for_staff(
        self,
        *,
        staff_id: int,
        schedule_type: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[Schedule]:
        """Scheduled or in-progress schedules of ``schedule_type`` assigning ``staff_id`` in [start, end)."""

        raise NotImplementedError

    def schedule_id_exists(self, schedule_id: str) -> bool:
        raise NotImplementedError

    def recent(self, limit: int) -> Sequence[Schedule]:
        """Most recently created first."""

        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .model import Schedule


@dataclass(frozen=True)
class ScheduleFilters:
    """Query over a schedule book.

    ``start``/``end`` bound ``scheduled_date`` as [start, end). ``statuses`` is an
    any-of match and is combined with ``status`` when both are given.
    """

    schedule_type: Optional[str] = None
    status: Optional[str] = None
    statuses: tuple[str, ...] = ()
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    staff_id: Optional[int] = None
    priority: Optional[str] = None
    department: Optional[str] = None
    task_category: Optional[str] = None
    time_slot: Optional[str] = None
    week_number: Optional[int] = None
    parent_schedule_id: Optional[str] = None
    search: Optional[str] = None
    page: int = 1
    limit: Optional[int] = None

    @property
    def offset(self) -> int:
        if not self.limit:
            return 0
        return (max(self.page, 1) - 1) * self.limit

    def matches(self, schedule: Schedule) -> bool:
        if self.schedule_type and schedule.schedule_type.value != self.schedule_type:
            return False
        if self.status and schedule.status.value != self.status:
            return False
        if self.statuses and schedule.status.value not in self.statuses:
            return False
        if self.start and schedule.scheduled_date < self.start:
            return False
        if self.end and schedule.scheduled_date >= self.end:
            return False
        if self.staff_id is not None and int(self.staff_id) not in schedule.staff_ids:
            return False
        if self.priority and schedule.priority.value != self.priority:
            return False
        if self.department and schedule.department != self.department:
            return False
        if self.task_category and schedule.task_category != self.task_category:
            return False
        if self.time_slot and schedule.time_slot.value != self.time_slot:
            return False
        if self.week_number is not None and schedule.week_number != int(self.week_number):
            return False
        if self.parent_schedule_id and schedule.parent_schedule_id != self.parent_schedule_id:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = [schedule.task_title, schedule.schedule_id, schedule.task_description or ""]
            haystack.extend(a.staff_name for a in schedule.assignments)
            if not any(needle in h.lower() for h in haystack):
                return False
        return True

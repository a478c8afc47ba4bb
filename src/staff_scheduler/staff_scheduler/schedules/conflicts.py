from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import day_window, week_window
from ..core.enums import ScheduleType
from .model import Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaffConflict:
    staff_id: int
    staff_name: str
    schedule_type: ScheduleType
    window_start: datetime
    window_end: datetime
    conflicting_ids: tuple[str, ...]

    @property
    def reason(self) -> str:
        if self.schedule_type == ScheduleType.DAILY:
            return f"already has a daily schedule on {self.window_start.date().isoformat()}"
        return f"already has a weekly schedule in the week starting {self.window_start.date().isoformat()}"

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "reason": self.reason,
            "conflicting_schedules": list(self.conflicting_ids),
        }


def conflict_window(schedule_type: ScheduleType, moment: datetime) -> tuple[datetime, datetime]:
    """Daily schedules collide within a calendar day, weekly ones within a Monday-start week."""
    if schedule_type == ScheduleType.DAILY:
        return day_window(moment)
    return week_window(moment)


class ConflictDetector:
    """Finds active bookings of the same type that a new booking would overlap."""

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def conflicts_for(self, *, staff_id: int, schedule_type: ScheduleType, moment: datetime) -> Sequence[Schedule]:
        start, end = conflict_window(schedule_type, moment)
        return self._schedules.find_active_for_staff(
            staff_id=int(staff_id),
            schedule_type=schedule_type.value,
            start=start,
            end=end,
        )

    def check(
        self,
        *,
        staff_id: int,
        staff_name: str,
        schedule_type: ScheduleType,
        moment: datetime,
        exclude_id: Optional[str] = None,
    ):
        """Return a StaffConflict, or None when the staff member is free."""
        existing = [
            s
            for s in self.conflicts_for(staff_id=staff_id, schedule_type=schedule_type, moment=moment)
            if s.schedule_id != exclude_id
        ]
        if not existing:
            return None
        start, end = conflict_window(schedule_type, moment)
        conflict = StaffConflict(
            staff_id=int(staff_id),
            staff_name=staff_name,
            schedule_type=schedule_type,
            window_start=start,
            window_end=end,
            conflicting_ids=tuple(s.schedule_id for s in existing),
        )
        logger.info("Conflict for staff %s: %s", staff_id, conflict.reason)
        return conflict

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import (
    AssignmentEmailStatus,
    AssignmentStatus,
    Priority,
    Recurrence,
    RotationStatus,
    ScheduleEmailStatus,
    ScheduleStatus,
    ScheduleType,
    TimeSlot,
)


@dataclass(frozen=True)
class Assignment:
    """One staff member's share of a schedule.

    Name and email are copied from the staff record when the schedule is created
    and are not refreshed when the staff record changes later.
    """

    staff_id: int
    staff_name: str
    email: str
    department: Optional[str] = None
    status: AssignmentStatus = AssignmentStatus.PENDING
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hours_worked: Optional[float] = None
    rating: Optional[int] = None
    notes: Optional[str] = None
    feedback: Optional[str] = None
    completed_at: Optional[datetime] = None
    notification_sent: bool = False
    notification_sent_at: Optional[datetime] = None
    email_status: AssignmentEmailStatus = AssignmentEmailStatus.PENDING
    email_error: Optional[str] = None
    message_id: Optional[str] = None
    rotation_status: RotationStatus = RotationStatus.NEW

    def reset_progress(self, shift: timedelta = timedelta(0)) -> "Assignment":
        """Copy for a later occurrence: same person, planned times moved by ``shift``, no progress."""
        return Assignment(
            staff_id=self.staff_id,
            staff_name=self.staff_name,
            email=self.email,
            department=self.department,
            start_time=self.start_time + shift if self.start_time else None,
            end_time=self.end_time + shift if self.end_time else None,
            rotation_status=self.rotation_status,
        )

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "email": self.email,
            "department": self.department,
            "status": self.status.value,
            "start_time": to_iso(self.start_time),
            "end_time": to_iso(self.end_time),
            "hours_worked": self.hours_worked,
            "rating": self.rating,
            "notes": self.notes,
            "feedback": self.feedback,
            "completed_at": to_iso(self.completed_at),
            "notification_sent": self.notification_sent,
            "notification_sent_at": to_iso(self.notification_sent_at),
            "email_status": self.email_status.value,
            "email_error": self.email_error,
            "message_id": self.message_id,
            "rotation_status": self.rotation_status.value,
        }


@dataclass(frozen=True)
class Schedule:
    schedule_id: str
    schedule_type: ScheduleType
    task_id: int
    task_title: str
    scheduled_date: datetime
    end_date: datetime
    estimated_hours: float
    week_number: int
    assignments: tuple[Assignment, ...] = ()
    task_description: Optional[str] = None
    task_category: str = "general"
    priority: Priority = Priority.MEDIUM
    time_slot: TimeSlot = TimeSlot.FULL_DAY
    custom_start_time: Optional[time] = None
    custom_end_time: Optional[time] = None
    recurrence: Recurrence = Recurrence.ONCE
    recurrence_end_date: Optional[datetime] = None
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    department: str = "General"
    location: str = "Office"
    notes: Optional[str] = None
    parent_schedule_id: Optional[str] = None
    send_email: bool = True
    email_sent: bool = False
    email_status: ScheduleEmailStatus = ScheduleEmailStatus.NOT_SENT
    last_notification_sent: Optional[datetime] = None
    enable_rotation: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def month(self) -> int:
        return self.scheduled_date.month

    @property
    def year(self) -> int:
        return self.scheduled_date.year

    @property
    def staff_ids(self) -> list[int]:
        return [a.staff_id for a in self.assignments]

    def find_assignment(self, staff_id: int) -> Optional[Assignment]:
        for a in self.assignments:
            if a.staff_id == int(staff_id):
                return a
        return None

    def with_assignment(self, updated: Assignment) -> "Schedule":
        return replace(
            self,
            assignments=tuple(updated if a.staff_id == updated.staff_id else a for a in self.assignments),
        )

    def to_dict(self) -> dict:
        return {
            "schedule_id": self.schedule_id,
            "schedule_type": self.schedule_type.value,
            "task_id": self.task_id,
            "task_title": self.task_title,
            "task_description": self.task_description,
            "task_category": self.task_category,
            "assigned_staff": [a.to_dict() for a in self.assignments],
            "priority": self.priority.value,
            "estimated_hours": self.estimated_hours,
            "scheduled_date": to_iso(self.scheduled_date),
            "end_date": to_iso(self.end_date),
            "time_slot": self.time_slot.value,
            "custom_start_time": self.custom_start_time.strftime("%H:%M") if self.custom_start_time else None,
            "custom_end_time": self.custom_end_time.strftime("%H:%M") if self.custom_end_time else None,
            "recurrence": self.recurrence.value,
            "recurrence_end_date": to_iso(self.recurrence_end_date),
            "status": self.status.value,
            "department": self.department,
            "location": self.location,
            "notes": self.notes,
            "parent_schedule_id": self.parent_schedule_id,
            "week_number": self.week_number,
            "month": self.month,
            "year": self.year,
            "send_email": self.send_email,
            "email_sent": self.email_sent,
            "email_status": self.email_status.value,
            "last_notification_sent": to_iso(self.last_notification_sent),
            "enable_rotation": self.enable_rotation,
            "created_by": self.created_by,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
            "completed_at": to_iso(self.completed_at),
        }

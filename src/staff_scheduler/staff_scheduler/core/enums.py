from __future__ import annotations

from enum import Enum


class StaffRole(str, Enum):
    JUNIOR_IT_OFFICER = "Junior IT Officer"
    IT_OFFICER = "IT Officer"
    SENIOR_IT_OFFICER = "Senior IT Officer"
    DEVELOPER = "developer"
    DATABASE_ADMIN = "Database Admin"
    STAFF = "Staff"


class Department(str, Enum):
    IT_INFRASTRUCTURE = "IT Infrastructure"
    CORE_BANKING = "core banking"
    MOBILE_APPLICATION = "Mobile application and development"
    DIGITAL_CHANNEL = "digital channal"
    HR = "HR"


class StaffStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ON_LEAVE = "On Leave"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ScheduleType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class ScheduleStatus(str, Enum):
    """Lifecycle of a schedule. Only SCHEDULED and IN_PROGRESS block other bookings."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"


ACTIVE_SCHEDULE_STATUSES = (ScheduleStatus.SCHEDULED, ScheduleStatus.IN_PROGRESS)


class AssignmentStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TimeSlot(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    FULL_DAY = "full-day"
    CUSTOM = "custom"


class Recurrence(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKLY = "weekly"


class AssignmentEmailStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    SERVICE_UNAVAILABLE = "service_unavailable"


class ScheduleEmailStatus(str, Enum):
    """Aggregate delivery state of all assignment letters of one schedule."""

    NOT_SENT = "not_sent"
    PARTIAL_SENT = "partial_sent"
    ALL_SENT = "all_sent"
    FAILED = "failed"
    ERROR = "error"


class RotationStatus(str, Enum):
    NEW = "new"
    ROTATED = "rotated"
    MAINTAINED = "maintained"

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import parse_datetime, parse_hhmm, parse_optional_datetime
from ..common.validators import optional_max_length, parse_enum, parse_number, parse_positive_int
from ..core.constants import DEFAULT_LOCATION, MAX_ESTIMATED_HOURS, MIN_ESTIMATED_HOURS, TIME_SLOT_WINDOWS
from ..core.enums import Priority, Recurrence, ScheduleType, TimeSlot
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ScheduleDraft:
    """Validated request to create a schedule, before staff and task lookups."""

    task_id: int
    staff_ids: tuple[int, ...]
    schedule_type: ScheduleType
    scheduled_date: datetime
    estimated_hours: float
    end_date: datetime
    priority: Priority = Priority.MEDIUM
    time_slot: TimeSlot = TimeSlot.FULL_DAY
    custom_start_time: Optional[time] = None
    custom_end_time: Optional[time] = None
    recurrence: Recurrence = Recurrence.ONCE
    recurrence_end_date: Optional[datetime] = None
    department: Optional[str] = None
    location: str = DEFAULT_LOCATION
    notes: Optional[str] = None
    send_email: bool = True
    strict_availability: bool = True
    enable_rotation: bool = False

    def slot_bounds(self) -> tuple[time, time]:
        return slot_bounds(self.time_slot, self.custom_start_time, self.custom_end_time)


def slot_bounds(time_slot: TimeSlot, custom_start: Optional[time], custom_end: Optional[time]) -> tuple[time, time]:
    start, end, _ = TIME_SLOT_WINDOWS[time_slot.value]
    if time_slot == TimeSlot.CUSTOM:
        start = custom_start or start
        end = custom_end or end
    return start, end


def as_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _staff_ids(payload: dict) -> tuple[int, ...]:
    raw = payload.get("assigned_staff")
    if raw is None:
        raw = payload.get("staff_ids")
    if not isinstance(raw, list) or not raw:
        raise ValidationError("At least one staff member must be assigned")

    ids: list[int] = []
    for item in raw:
        value = item.get("staff_id") if isinstance(item, dict) else item
        staff_id = parse_positive_int(value, "Staff id")
        if staff_id not in ids:
            ids.append(staff_id)
    return tuple(ids)


def slot_hours(time_slot: TimeSlot, start: Optional[time], end: Optional[time]) -> float:
    if time_slot == TimeSlot.CUSTOM and start and end:
        minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
        if minutes <= 0:
            raise ValidationError("Custom end time must be after custom start time")
        return round(minutes / 60, 2)
    return TIME_SLOT_WINDOWS[time_slot.value][2]


def default_end_date(schedule_type: ScheduleType, scheduled: datetime, estimated_hours: float) -> datetime:
    if schedule_type == ScheduleType.DAILY:
        return scheduled + timedelta(hours=estimated_hours)
    return scheduled + timedelta(days=7)


def parse_schedule_payload(
    payload: dict,
    *,
    default_type: ScheduleType = ScheduleType.WEEKLY,
    strict_default: bool = True,
) -> ScheduleDraft:
    task_id = parse_positive_int(payload.get("task_id"), "Task id")
    staff_ids = _staff_ids(payload)
    schedule_type = parse_enum(ScheduleType, payload.get("schedule_type"), "Schedule type", default=default_type)
    scheduled = parse_datetime(payload.get("scheduled_date"), "Scheduled date")

    time_slot = parse_enum(TimeSlot, payload.get("time_slot"), "Time slot", default=TimeSlot.FULL_DAY)
    custom_start = parse_hhmm(payload.get("custom_start_time"), "Custom start time")
    custom_end = parse_hhmm(payload.get("custom_end_time"), "Custom end time")

    if payload.get("estimated_hours") in (None, ""):
        estimated = slot_hours(time_slot, custom_start, custom_end)
    else:
        estimated = parse_number(
            payload["estimated_hours"], "Estimated hours", minimum=MIN_ESTIMATED_HOURS, maximum=MAX_ESTIMATED_HOURS
        )

    end = parse_optional_datetime(payload.get("end_date"), "End date") or default_end_date(
        schedule_type, scheduled, estimated
    )
    if end < scheduled:
        raise ValidationError("End date cannot be before the scheduled date")

    recurrence = parse_enum(Recurrence, payload.get("recurrence"), "Recurrence", default=Recurrence.ONCE)
    recurrence_end = parse_optional_datetime(payload.get("recurrence_end_date"), "Recurrence end date")
    if recurrence_end and recurrence_end.date() < scheduled.date():
        raise ValidationError("Recurrence end date cannot be before the scheduled date")

    return ScheduleDraft(
        task_id=task_id,
        staff_ids=staff_ids,
        schedule_type=schedule_type,
        scheduled_date=scheduled,
        estimated_hours=float(estimated),
        end_date=end,
        priority=parse_enum(Priority, payload.get("priority"), "Priority", default=Priority.MEDIUM),
        time_slot=time_slot,
        custom_start_time=custom_start,
        custom_end_time=custom_end,
        recurrence=recurrence,
        recurrence_end_date=recurrence_end,
        department=(payload.get("department") or "").strip() or None,
        location=(payload.get("location") or "").strip() or DEFAULT_LOCATION,
        notes=optional_max_length(payload.get("notes"), "Notes", 1000),
        send_email=as_bool(payload.get("send_email"), True),
        strict_availability=as_bool(payload.get("strict_availability"), strict_default),
        enable_rotation=as_bool(payload.get("enable_rotation"), False),
    )

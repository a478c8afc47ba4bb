from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import day_window, parse_datetime, start_of_day
from ..common.validators import parse_enum
from ..core.constants import DAILY_BOOK_PREFIX
from ..core.enums import ACTIVE_SCHEDULE_STATUSES, AssignmentStatus, ScheduleStatus, ScheduleType, TimeSlot
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..schedules.draft import ScheduleDraft, as_bool, parse_schedule_payload, slot_hours
from ..schedules.filters import ScheduleFilters
from ..schedules.model import Schedule
from ..schedules.service import ScheduleService, staff_summary

logger = logging.getLogger(__name__)


class DailyScheduleService(ScheduleService):
    """The daily book: every booking is a daily one and recurrence series delete together."""

    default_type = ScheduleType.DAILY

    def _candidate_id(self, schedule: Schedule) -> str:
        stamp = int(self._clock().timestamp() * 1000) % 10000
        return f"{DAILY_BOOK_PREFIX}{schedule.scheduled_date:%y%m%d}{self._rng.randint(0, 9999):04d}{stamp:04d}"

    def _parse(self, payload: dict) -> ScheduleDraft:
        payload = dict(payload, schedule_type=ScheduleType.DAILY.value)
        return parse_schedule_payload(payload, default_type=ScheduleType.DAILY, strict_default=self._strict_default)

    def delete(self, schedule_id: str) -> dict:
        """Delete a schedule together with the rest of its recurrence series."""
        schedule = self.get(schedule_id)
        series_key = schedule.parent_schedule_id or schedule.schedule_id
        removed = self._schedules.delete_series(series_key)
        # a child is covered by delete_series; a parent is not
        if schedule.parent_schedule_id is None and self._schedules.delete(schedule.schedule_id):
            removed += 1
        if removed == 0:
            raise NotFoundError("Schedule not found")

        logger.info("Daily schedule %s deleted with its series (%d rows)", schedule_id, removed)
        return {
            "schedule_id": schedule.schedule_id,
            "task_title": schedule.task_title,
            "scheduled_date": schedule.scheduled_date.isoformat(),
            "deleted_at": self._clock().isoformat(),
            "deleted_count": removed,
        }

    def today(self, *, staff_id: Optional[int] = None) -> dict:
        start, end = day_window(self._clock())
        schedules = self._schedules.find(
            ScheduleFilters(staff_id=int(staff_id) if staff_id is not None else None, start=start, end=end)
        )
        return {
            "date": start.date().isoformat(),
            "schedules": schedules,
            "summary": {
                "total_tasks": len(schedules),
                "total_staff": len({sid for s in schedules for sid in s.staff_ids}),
                "total_hours": sum(s.estimated_hours for s in schedules),
                "pending": sum(1 for s in schedules if s.status == ScheduleStatus.SCHEDULED),
                "in_progress": sum(1 for s in schedules if s.status == ScheduleStatus.IN_PROGRESS),
                "completed": sum(1 for s in schedules if s.status == ScheduleStatus.COMPLETED),
            },
        }

    def date_range(self, *, start: datetime, end: datetime, filters: Optional[ScheduleFilters] = None) -> dict:
        if end < start:
            raise ValidationError("End date cannot be before start date")
        base = filters or ScheduleFilters()
        window_start = start_of_day(start)
        window_end = start_of_day(end) + timedelta(days=1)
        schedules = self._schedules.find(replace(base, start=window_start, end=window_end, page=1, limit=None))
        return {
            "schedules": schedules,
            "period": {
                "start": window_start.date().isoformat(),
                "end": start_of_day(end).date().isoformat(),
                "days": (window_end - window_start).days,
            },
        }

    def staff_daily_workload(self, staff_id: int, day: datetime) -> dict:
        staff = self._require_staff(staff_id)
        start, end = day_window(day)
        schedules = self._schedules.find(ScheduleFilters(staff_id=int(staff_id), start=start, end=end))

        lines = []
        completed = 0
        for s in schedules:
            assignment = s.find_assignment(staff_id)
            if assignment.status == AssignmentStatus.COMPLETED:
                completed += 1
            lines.append(
                {
                    "schedule_id": s.schedule_id,
                    "task_title": s.task_title,
                    "start_time": assignment.start_time.isoformat() if assignment.start_time else None,
                    "end_time": assignment.end_time.isoformat() if assignment.end_time else None,
                    "estimated_hours": s.estimated_hours,
                    "priority": s.priority.value,
                    "status": assignment.status.value,
                    "location": s.location,
                    "notes": assignment.notes or s.notes,
                }
            )
        return {
            "staff": staff_summary(staff),
            "date": start.date().isoformat(),
            "workload": {
                "total_schedules": len(schedules),
                "total_hours": sum(s.estimated_hours for s in schedules),
                "completed_tasks": completed,
                "pending_tasks": len(schedules) - completed,
            },
            "schedules": lines,
        }

    def check_staff_availability(
        self,
        staff_id: int,
        day: datetime,
        *,
        time_slot: Optional[str] = None,
    ) -> dict:
        staff = self._require_staff(staff_id)
        slot = parse_enum(TimeSlot, time_slot, "Time slot", default=TimeSlot.FULL_DAY)
        start, end = day_window(day)
        existing = self._schedules.find(
            ScheduleFilters(
                staff_id=int(staff_id),
                statuses=tuple(s.value for s in ACTIVE_SCHEDULE_STATUSES),
                start=start,
                end=end,
            )
        )

        busy_hours = []
        for s in existing:
            if s.time_slot == TimeSlot.CUSTOM and s.custom_start_time and s.custom_end_time:
                busy_hours.append(
                    {
                        "start": s.custom_start_time.strftime("%H:%M"),
                        "end": s.custom_end_time.strftime("%H:%M"),
                        "hours": slot_hours(s.time_slot, s.custom_start_time, s.custom_end_time),
                    }
                )
            else:
                busy_hours.append({"time_slot": s.time_slot.value, "hours": s.estimated_hours})

        available = not existing
        return {
            "staff": staff_summary(staff),
            "date": start.date().isoformat(),
            "time_slot": slot.value,
            "is_available": available,
            "busy_hours": busy_hours,
            "existing_schedules": [
                {
                    "schedule_id": s.schedule_id,
                    "task_title": s.task_title,
                    "time_slot": s.time_slot.value,
                    "status": s.status.value,
                }
                for s in existing
            ],
            "existing_count": len(existing),
            "recommendation": (
                "Staff is available for scheduling" if available else "Staff has existing schedules on this date"
            ),
        }

    def create_week_of_dailies(self, payload: dict, *, created_by: Optional[str] = None) -> dict:
        """Create one daily booking per day between ``start_date`` and ``end_date`` inclusive.

        A failing day is recorded and the loop moves on. Only when no day succeeds is
        the whole request rejected.
        """
        start = start_of_day(parse_datetime(payload.get("start_date"), "Start date"))
        end = start_of_day(parse_datetime(payload.get("end_date"), "End date"))
        if end < start:
            raise ValidationError("End date cannot be before start date")
        skip_weekends = as_bool(payload.get("skip_weekends"), False)
        clock_time = parse_datetime(payload.get("start_date"), "Start date").time()

        created: list[dict] = []
        errors: list[dict] = []
        day = start
        while day <= end:
            if skip_weekends and day.weekday() >= 5:
                day += timedelta(days=1)
                continue
            item = {
                k: v for k, v in payload.items() if k not in {"start_date", "end_date", "skip_weekends"}
            }
            item.update(
                scheduled_date=datetime.combine(day.date(), clock_time).isoformat(),
                schedule_type=ScheduleType.DAILY.value,
                recurrence="once",
            )
            try:
                result = self.create(item, created_by=created_by)
            except DomainError as e:
                logger.warning("Daily booking for %s failed: %s", day.date(), e.message)
                errors.append({"date": day.date().isoformat(), "error": e.message, "code": e.kind.value})
            else:
                created.append(result.to_dict())
            day += timedelta(days=1)

        if not created:
            raise ValidationError(
                "No daily schedules could be created for the given range", details={"errors": errors}
            )
        return {
            "created": created,
            "errors": errors,
            "summary": {
                "total_days": len(created) + len(errors),
                "successful_days": len(created),
                "failed_days": len(errors),
                "start_date": start.date().isoformat(),
                "end_date": end.date().isoformat(),
            },
        }

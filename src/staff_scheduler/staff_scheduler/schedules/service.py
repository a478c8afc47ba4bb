from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import (
    day_window,
    iso_week_number,
    now_local,
    parse_datetime,
    parse_hhmm,
    start_of_day,
    week_start_for,
)
from ..common.validators import optional_max_length, parse_enum, parse_number
from ..core.constants import (
    CALENDAR_COLORS,
    DAILY_PREFIX,
    DEFAULT_SCHEDULE_DEPARTMENT,
    MAX_ESTIMATED_HOURS,
    MIN_ESTIMATED_HOURS,
    ROTATION_LOOKBACK_DAYS,
    WEEKLY_PREFIX,
    WORK_DAY_END_HOUR,
    WORK_DAY_START_HOUR,
)
from ..core.enums import (
    ACTIVE_SCHEDULE_STATUSES,
    AssignmentStatus,
    Priority,
    Recurrence,
    RotationStatus,
    ScheduleStatus,
    ScheduleType,
    TimeSlot,
)
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..core.metrics import ServiceMetrics
from ..notifications.dispatcher import NotificationDispatcher, NotificationReport
from ..recurrence.expander import RecurrenceExpander
from ..staff.model import Staff
from ..staff.repository import StaffRepository
from ..tasks.model import Task
from ..tasks.repository import TaskRepository
from .conflicts import ConflictDetector, StaffConflict
from .draft import ScheduleDraft, default_end_date, parse_schedule_payload, slot_bounds, slot_hours
from .filters import ScheduleFilters
from .model import Assignment, Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "priority",
    "estimated_hours",
    "scheduled_date",
    "end_date",
    "time_slot",
    "custom_start_time",
    "custom_end_time",
    "status",
    "department",
    "location",
    "notes",
    "send_email",
    "task_description",
    "task_category",
}


@dataclass(frozen=True)
class CreateScheduleResult:
    schedule: Schedule
    notifications: Optional[NotificationReport] = None
    skipped_staff: tuple[StaffConflict, ...] = ()
    recurring: tuple[Schedule, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "schedule": self.schedule.to_dict(),
            "notifications": self.notifications.to_dict() if self.notifications else None,
            "unavailable_staff": [c.to_dict() for c in self.skipped_staff],
            "recurring_created": len(self.recurring),
            "recurring_schedule_ids": [s.schedule_id for s in self.recurring],
            "warnings": list(self.warnings),
        }


class ScheduleService:
    """Use case: book tasks onto staff in one schedule book."""

    default_type = ScheduleType.WEEKLY

    def __init__(
        self,
        schedules: ScheduleRepository,
        staff: StaffRepository,
        tasks: TaskRepository,
        *,
        notifier: Optional[NotificationDispatcher] = None,
        metrics: Optional[ServiceMetrics] = None,
        expander: Optional[RecurrenceExpander] = None,
        strict_availability_default: bool = True,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._schedules = schedules
        self._staff = staff
        self._tasks = tasks
        self._notifier = notifier or NotificationDispatcher(None, metrics=metrics)
        self._metrics = metrics or ServiceMetrics()
        self._expander = expander or RecurrenceExpander()
        self._conflicts = ConflictDetector(schedules)
        self._strict_default = strict_availability_default
        self._rng = rng or random.Random()
        self._clock = clock

    # --- id generation ---------------------------------------------------

    def _candidate_id(self, schedule: Schedule) -> str:
        prefix = DAILY_PREFIX if schedule.schedule_type == ScheduleType.DAILY else WEEKLY_PREFIX
        return f"{prefix}{schedule.scheduled_date:%y%m%d}{self._rng.randint(0, 9999):04d}"

    def _id_allocator(self) -> Callable[[Schedule], str]:
        issued: set[str] = set()

        def allocate(schedule: Schedule) -> str:
            while True:
                candidate = self._candidate_id(schedule)
                if candidate not in issued and not self._schedules.schedule_id_exists(candidate):
                    issued.add(candidate)
                    return candidate

        return allocate

    # --- lookups ---------------------------------------------------------

    def _require_task(self, task_id: int) -> Task:
        task = self._tasks.get_by_id(int(task_id))
        if not task:
            raise NotFoundError(f"Task with ID {task_id} not found")
        return task

    def _require_staff(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(int(staff_id))
        if not staff:
            raise NotFoundError(f"Staff member with ID {staff_id} not found")
        return staff

    def get(self, schedule_id: str) -> Schedule:
        schedule = self._schedules.get(schedule_id)
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    # --- creation --------------------------------------------------------

    def _screen_staff(self, draft: ScheduleDraft, members: Sequence[Staff]) -> tuple[list[Staff], list[StaffConflict]]:
        available: list[Staff] = []
        skipped: list[StaffConflict] = []
        for staff in members:
            conflict = self._conflicts.check(
                staff_id=staff.staff_id,
                staff_name=staff.full_name,
                schedule_type=draft.schedule_type,
                moment=draft.scheduled_date,
            )
            if conflict is None:
                available.append(staff)
                continue
            self._metrics.record(conflicts_prevented=1)
            if draft.strict_availability:
                raise ConflictError(
                    f"{staff.full_name} {conflict.reason}",
                    details={"unavailable_staff": [conflict.to_dict()]},
                )
            skipped.append(conflict)

        if skipped:
            self._metrics.record(staff_skipped=len(skipped))
            logger.warning("Skipped %d unavailable staff for %s booking", len(skipped), draft.schedule_type.value)
        if not available:
            raise ConflictError(
                "None of the selected staff are available",
                details={"unavailable_staff": [c.to_dict() for c in skipped]},
            )
        return available, skipped

    def _rotation_status(self, staff: Staff, category: str, moment: datetime) -> RotationStatus:
        previous = self._previous_same_category(staff.staff_id, category, moment)
        return RotationStatus.ROTATED if previous else RotationStatus.NEW

    def _build(self, draft: ScheduleDraft, task: Task, members: Sequence[Staff], created_by: Optional[str]) -> Schedule:
        slot_start, slot_end = draft.slot_bounds()
        day = draft.scheduled_date.date()
        assignments = tuple(
            Assignment(
                staff_id=int(s.staff_id),
                staff_name=s.full_name,
                email=s.email,
                department=s.department.value,
                start_time=datetime.combine(day, slot_start),
                end_time=datetime.combine(day, slot_end),
                rotation_status=(
                    self._rotation_status(s, task.category, draft.scheduled_date)
                    if draft.enable_rotation
                    else RotationStatus.NEW
                ),
            )
            for s in members
        )
        department = draft.department or task.department or (members[0].department.value if members else None)
        now = self._clock()
        return Schedule(
            schedule_id="",
            schedule_type=draft.schedule_type,
            task_id=int(task.task_id),
            task_title=task.title,
            task_description=task.description,
            task_category=task.category,
            assignments=assignments,
            priority=draft.priority,
            estimated_hours=draft.estimated_hours,
            scheduled_date=draft.scheduled_date,
            end_date=draft.end_date,
            time_slot=draft.time_slot,
            custom_start_time=draft.custom_start_time,
            custom_end_time=draft.custom_end_time,
            recurrence=draft.recurrence,
            recurrence_end_date=draft.recurrence_end_date,
            department=department or DEFAULT_SCHEDULE_DEPARTMENT,
            location=draft.location,
            notes=draft.notes,
            week_number=iso_week_number(draft.scheduled_date),
            send_email=draft.send_email,
            enable_rotation=draft.enable_rotation,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )

    def _parse(self, payload: dict) -> ScheduleDraft:
        return parse_schedule_payload(payload, default_type=self.default_type, strict_default=self._strict_default)

    def create(self, payload: dict, *, created_by: Optional[str] = None) -> CreateScheduleResult:
        draft = self._parse(payload)
        task = self._require_task(draft.task_id)
        members = [self._require_staff(sid) for sid in draft.staff_ids]
        available, skipped = self._screen_staff(draft, members)

        allocate = self._id_allocator()
        schedule = self._build(draft, task, available, created_by)
        schedule = self._schedules.insert(replace(schedule, schedule_id=allocate(schedule)))
        self._metrics.record(schedules_created=1)
        logger.info(
            "Created %s schedule %s for task %s with %d staff",
            schedule.schedule_type.value,
            schedule.schedule_id,
            task.task_code,
            len(schedule.assignments),
        )

        warnings = [f"{c.staff_name} was not assigned: {c.reason}" for c in skipped]
        if draft.enable_rotation:
            warnings.extend(
                f"{a.staff_name} worked on a similar {task.category} task last week"
                for a in schedule.assignments
                if a.rotation_status == RotationStatus.ROTATED
            )

        children: list[Schedule] = []
        if schedule.recurrence != Recurrence.ONCE:
            for child in self._expander.expand(schedule, new_id=allocate):
                children.append(self._schedules.insert(child))
            self._metrics.record(schedules_created=len(children))

        report = None
        if schedule.send_email:
            schedule, report = self._notifier.dispatch(schedule)
            self._schedules.update(schedule)
            warnings.extend(report.warnings)

        return CreateScheduleResult(
            schedule=schedule,
            notifications=report,
            skipped_staff=tuple(skipped),
            recurring=tuple(children),
            warnings=tuple(warnings),
        )

    def bulk_create(self, payloads: Sequence[dict], *, created_by: Optional[str] = None) -> dict:
        if not isinstance(payloads, list) or not payloads:
            raise ValidationError("schedules must be a non-empty list")

        created: list[dict] = []
        failed: list[dict] = []
        for index, payload in enumerate(payloads):
            try:
                result = self.create(payload if isinstance(payload, dict) else {}, created_by=created_by)
            except DomainError as e:
                failed.append({"index": index, "error": e.message, "code": e.kind.value})
                continue
            created.append(result.to_dict())
        return {
            "created": created,
            "failed": failed,
            "summary": {"total": len(payloads), "created": len(created), "failed": len(failed)},
        }

    # --- notifications ---------------------------------------------------

    def notify(self, schedule_id: str) -> NotificationReport:
        schedule, report = self._notifier.dispatch(self.get(schedule_id))
        self._schedules.update(schedule)
        return report

    def test_email_service(self) -> dict:
        return self._notifier.verify()

    # --- updates ---------------------------------------------------------

    def update(self, schedule_id: str, changes: dict) -> Schedule:
        current = self.get(schedule_id)
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if not changes:
            raise ValidationError("No valid fields to update")

        updates: dict = {}
        if "priority" in changes:
            updates["priority"] = parse_enum(Priority, changes["priority"], "Priority")
        if "estimated_hours" in changes:
            updates["estimated_hours"] = parse_number(
                changes["estimated_hours"], "Estimated hours", minimum=MIN_ESTIMATED_HOURS, maximum=MAX_ESTIMATED_HOURS
            )
        if "time_slot" in changes:
            updates["time_slot"] = parse_enum(TimeSlot, changes["time_slot"], "Time slot")
        if "custom_start_time" in changes:
            updates["custom_start_time"] = parse_hhmm(changes["custom_start_time"], "Custom start time")
        if "custom_end_time" in changes:
            updates["custom_end_time"] = parse_hhmm(changes["custom_end_time"], "Custom end time")
        if "status" in changes:
            status = parse_enum(ScheduleStatus, changes["status"], "Status")
            updates["status"] = status
            if status == ScheduleStatus.COMPLETED and current.status != ScheduleStatus.COMPLETED:
                updates["completed_at"] = self._clock()
        for text_field in ("department", "location", "task_category"):
            if text_field in changes:
                value = (changes[text_field] or "").strip()
                if not value:
                    raise ValidationError(f"{text_field} cannot be empty")
                updates[text_field] = value
        if "notes" in changes:
            updates["notes"] = optional_max_length(changes["notes"], "Notes", 1000)
        if "task_description" in changes:
            updates["task_description"] = optional_max_length(changes["task_description"], "Description", 1000)
        if "send_email" in changes:
            updates["send_email"] = bool(changes["send_email"])

        if "scheduled_date" in changes:
            moved = parse_datetime(changes["scheduled_date"], "Scheduled date")
            updates["scheduled_date"] = moved
            updates["week_number"] = iso_week_number(moved)
            shift = moved - current.scheduled_date
            updates["assignments"] = tuple(
                replace(
                    a,
                    start_time=a.start_time + shift if a.start_time else None,
                    end_time=a.end_time + shift if a.end_time else None,
                )
                for a in current.assignments
            )
            for a in current.assignments:
                conflict = self._conflicts.check(
                    staff_id=a.staff_id,
                    staff_name=a.staff_name,
                    schedule_type=current.schedule_type,
                    moment=moved,
                    exclude_id=current.schedule_id,
                )
                if conflict:
                    raise ConflictError(
                        f"{a.staff_name} {conflict.reason}", details={"unavailable_staff": [conflict.to_dict()]}
                    )

        slot_changed = bool({"time_slot", "custom_start_time", "custom_end_time"} & set(changes))
        if slot_changed:
            slot = updates.get("time_slot", current.time_slot)
            custom_start = updates.get("custom_start_time", current.custom_start_time)
            custom_end = updates.get("custom_end_time", current.custom_end_time)
            if "estimated_hours" not in changes:
                updates["estimated_hours"] = slot_hours(slot, custom_start, custom_end)
            slot_start, slot_end = slot_bounds(slot, custom_start, custom_end)
            day = updates.get("scheduled_date", current.scheduled_date).date()
            updates["assignments"] = tuple(
                replace(a, start_time=datetime.combine(day, slot_start), end_time=datetime.combine(day, slot_end))
                for a in updates.get("assignments", current.assignments)
            )

        if "end_date" in changes:
            updates["end_date"] = parse_datetime(changes["end_date"], "End date")
        elif "scheduled_date" in changes or "estimated_hours" in updates:
            updates["end_date"] = default_end_date(
                current.schedule_type,
                updates.get("scheduled_date", current.scheduled_date),
                updates.get("estimated_hours", current.estimated_hours),
            )

        updated = replace(current, **updates, updated_at=self._clock())
        if updated.end_date < updated.scheduled_date:
            raise ValidationError("End date cannot be before the scheduled date")
        self._schedules.update(updated)
        logger.info("Schedule %s updated (%s)", schedule_id, ", ".join(sorted(changes)))
        return updated

    def update_assignment(self, schedule_id: str, staff_id: int, changes: dict) -> Schedule:
        """Apply a partial update to one assignment.

        ``completed_at`` is stamped only on the transition into COMPLETED, so
        repeating the same update leaves the record unchanged.
        """
        schedule = self.get(schedule_id)
        assignment = schedule.find_assignment(staff_id)
        if assignment is None:
            raise NotFoundError("Assignment not found for this staff member")

        updates: dict = {}
        if changes.get("status") is not None:
            status = parse_enum(AssignmentStatus, changes["status"], "Status")
            updates["status"] = status
            if status == AssignmentStatus.COMPLETED and assignment.status != AssignmentStatus.COMPLETED:
                updates["completed_at"] = self._clock()
        if "notes" in changes:
            updates["notes"] = optional_max_length(changes["notes"], "Notes", 1000)
        if "feedback" in changes:
            updates["feedback"] = optional_max_length(changes["feedback"], "Feedback", 1000)
        if changes.get("hours_worked") is not None:
            updates["hours_worked"] = parse_number(changes["hours_worked"], "Hours worked", minimum=0, maximum=24)
        if changes.get("rating") is not None:
            rating = parse_number(changes["rating"], "Rating", minimum=1, maximum=5)
            if rating != int(rating):
                raise ValidationError("Rating must be a whole number between 1 and 5")
            updates["rating"] = int(rating)
        if "start_time" in changes:
            updates["start_time"] = parse_datetime(changes["start_time"], "Start time") if changes["start_time"] else None
        if "end_time" in changes:
            updates["end_time"] = parse_datetime(changes["end_time"], "End time") if changes["end_time"] else None

        if not updates:
            raise ValidationError("No valid fields to update")

        updated = schedule.with_assignment(replace(assignment, **updates))
        updated = replace(updated, updated_at=self._clock())
        self._schedules.update(updated)
        return updated

    # --- deletion --------------------------------------------------------

    def delete(self, schedule_id: str) -> dict:
        schedule = self.get(schedule_id)
        if not self._schedules.delete(schedule_id):
            raise NotFoundError("Schedule not found")
        logger.info("Schedule %s deleted", schedule_id)
        return {
            "schedule_id": schedule.schedule_id,
            "task_title": schedule.task_title,
            "scheduled_date": schedule.scheduled_date.isoformat(),
            "deleted_at": self._clock().isoformat(),
            "deleted_count": 1,
        }

    # --- queries ---------------------------------------------------------

    def list_schedules(self, filters: ScheduleFilters) -> dict:
        items = list(self._schedules.find(filters))
        total = self._schedules.count(filters)
        limit = filters.limit or max(total, 1)
        return {
            "items": items,
            "pagination": {
                "page": max(filters.page, 1),
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if total else 0,
            },
        }

    def search(self, term: str, *, limit: int = 20) -> Sequence[Schedule]:
        if not term or not term.strip():
            raise ValidationError("Search term is required")
        return self._schedules.find(ScheduleFilters(search=term.strip(), limit=limit))

    def upcoming(self, *, days: int = 7, schedule_type: Optional[str] = None) -> Sequence[Schedule]:
        if days <= 0:
            raise ValidationError("days must be positive")
        now = self._clock()
        return self._schedules.find(
            ScheduleFilters(
                schedule_type=_type_filter(schedule_type),
                status=ScheduleStatus.SCHEDULED.value,
                start=now,
                end=now + timedelta(days=days),
            )
        )

    def staff_workload(self, staff_id: int, *, start: datetime, end: datetime) -> dict:
        staff = self._require_staff(staff_id)
        schedules = self._schedules.find(
            ScheduleFilters(staff_id=int(staff_id), start=start_of_day(start), end=start_of_day(end) + timedelta(days=1))
        )
        completed = sum(1 for s in schedules if s.status == ScheduleStatus.COMPLETED)
        return {
            "staff": staff_summary(staff),
            "workload": {
                "total_schedules": len(schedules),
                "total_hours": sum(s.estimated_hours for s in schedules),
                "completed_schedules": completed,
                "pending_schedules": len(schedules) - completed,
                "schedules": [_schedule_line(s) for s in schedules],
            },
        }

    def date_availability(
        self,
        day: datetime,
        *,
        department: Optional[str] = None,
        schedule_type: Optional[str] = None,
    ) -> dict:
        start, end = day_window(day)
        schedules = self._schedules.find(
            ScheduleFilters(
                schedule_type=_type_filter(schedule_type),
                statuses=tuple(s.value for s in ACTIVE_SCHEDULE_STATUSES),
                department=department,
                start=start,
                end=end,
            )
        )
        busy = {sid for s in schedules for sid in s.staff_ids}
        free = [s for s in self._staff.list_all(department=department) if s.staff_id not in busy]
        return {
            "date": start.date().isoformat(),
            "scheduled_tasks": len(schedules),
            "scheduled_staff": len(busy),
            "available_staff": [staff_summary(s) for s in free],
        }

    def recommended_times(
        self,
        day: datetime,
        *,
        duration: float,
        department: Optional[str] = None,
        schedule_type: Optional[str] = "daily",
    ) -> dict:
        hours = parse_number(duration, "Duration", minimum=MIN_ESTIMATED_HOURS, maximum=MAX_ESTIMATED_HOURS)
        start, end = day_window(day)
        schedules = self._schedules.find(
            ScheduleFilters(schedule_type=_type_filter(schedule_type), department=department, start=start, end=end)
        )

        busy: set[int] = set()
        for s in schedules:
            first = s.scheduled_date.hour
            busy.update(range(first, first + math.ceil(s.estimated_hours)))

        span = math.ceil(hours)
        recommendations = []
        hour = WORK_DAY_START_HOUR
        while hour + hours <= WORK_DAY_END_HOUR:
            if not any(h in busy for h in range(hour, hour + span)):
                recommendations.append(
                    {"time": f"{hour:02d}:00", "display": f"{hour}:00 - {_clock_label(hour + hours)}", "available": True}
                )
            hour += 1

        if not recommendations:
            recommendations = [
                {"time": "09:00", "display": "9:00 AM - 11:00 AM", "available": True},
                {"time": "13:00", "display": "1:00 PM - 3:00 PM", "available": True},
                {"time": "15:00", "display": "3:00 PM - 5:00 PM", "available": True},
            ]
        return {"date": start.date().isoformat(), "duration": hours, "recommendations": recommendations[:3]}

    def staff_weekly_schedule(self, staff_id: int, *, week: int, year: int) -> dict:
        staff = self._require_staff(staff_id)
        start = week_start_for(int(week), int(year))
        statuses = (ScheduleStatus.SCHEDULED.value, ScheduleStatus.IN_PROGRESS.value, ScheduleStatus.COMPLETED.value)
        schedules = self._schedules.find(
            ScheduleFilters(staff_id=int(staff_id), statuses=statuses, start=start, end=start + timedelta(days=7))
        )
        return {
            "staff_name": staff.full_name,
            "week_number": int(week),
            "year": int(year),
            "schedules": [_schedule_line(s) for s in schedules],
            "weekly_summary": {
                "total_tasks": len(schedules),
                "total_hours": sum(s.estimated_hours for s in schedules),
                "daily_tasks": sum(1 for s in schedules if s.schedule_type == ScheduleType.DAILY),
                "weekly_tasks": sum(1 for s in schedules if s.schedule_type == ScheduleType.WEEKLY),
            },
        }

    def _previous_same_category(self, staff_id: int, category: str, moment: datetime) -> Optional[Schedule]:
        found = self._schedules.find(
            ScheduleFilters(
                staff_id=int(staff_id),
                task_category=category,
                status=ScheduleStatus.COMPLETED.value,
                start=moment - timedelta(days=ROTATION_LOOKBACK_DAYS),
                end=moment,
                limit=1,
            )
        )
        return found[0] if found else None

    def check_consecutive_week(self, staff_id: int, category: str, day: datetime) -> dict:
        """Advisory only; creation never rejects a booking because of it."""
        previous = self._previous_same_category(int(staff_id), category, day)
        return {
            "available": previous is None,
            "reason": f'Worked on similar "{previous.task_title}" task last week' if previous else None,
            "previous_task": (
                {"title": previous.task_title, "category": previous.task_category, "schedule_id": previous.schedule_id}
                if previous
                else None
            ),
        }

    def calendar_view(
        self,
        *,
        start: datetime,
        end: datetime,
        department: Optional[str] = None,
        schedule_type: Optional[str] = None,
    ) -> dict:
        if end < start:
            raise ValidationError("End date cannot be before start date")
        schedules = self._schedules.find(
            ScheduleFilters(
                schedule_type=_type_filter(schedule_type),
                department=department,
                start=start_of_day(start),
                end=start_of_day(end) + timedelta(days=1),
            )
        )
        events = []
        for s in schedules:
            label = "[Daily]" if s.schedule_type == ScheduleType.DAILY else "[Weekly]"
            events.append(
                {
                    "id": s.schedule_id,
                    "title": f"{label} {s.task_title}",
                    "start": s.scheduled_date.isoformat(),
                    "end": s.end_date.isoformat(),
                    "color": CALENDAR_COLORS[s.schedule_type.value],
                    "extended_props": {
                        "schedule_type": s.schedule_type.value,
                        "priority": s.priority.value,
                        "status": s.status.value,
                        "department": s.department,
                        "staff": [a.staff_name for a in s.assignments],
                        "estimated_hours": s.estimated_hours,
                    },
                }
            )
        daily = sum(1 for s in schedules if s.schedule_type == ScheduleType.DAILY)
        return {
            "events": events,
            "summary": {"daily": daily, "weekly": len(schedules) - daily, "total": len(schedules)},
        }

    def health(self) -> dict:
        now = self._clock()
        today_start, today_end = day_window(now)
        return {
            "status": "operational",
            "total_schedules": self._schedules.count(ScheduleFilters()),
            "today_schedules": self._schedules.count(ScheduleFilters(start=today_start, end=today_end)),
            "upcoming_schedules": self._schedules.count(
                ScheduleFilters(status=ScheduleStatus.SCHEDULED.value, start=now)
            ),
            "completed_schedules": self._schedules.count(ScheduleFilters(status=ScheduleStatus.COMPLETED.value)),
            "email_service": "configured" if self._notifier.available else "not_configured",
            "metrics": self._metrics.snapshot(),
        }


def _type_filter(schedule_type: Optional[str]) -> Optional[str]:
    if not schedule_type or schedule_type == "all":
        return None
    return parse_enum(ScheduleType, schedule_type, "Schedule type").value


def staff_summary(staff: Staff) -> dict:
    return {
        "staff_id": staff.staff_id,
        "name": staff.full_name,
        "email": staff.email,
        "department": staff.department.value,
    }


def _schedule_line(s: Schedule) -> dict:
    return {
        "schedule_id": s.schedule_id,
        "task_title": s.task_title,
        "task_category": s.task_category,
        "schedule_type": s.schedule_type.value,
        "scheduled_date": s.scheduled_date.isoformat(),
        "estimated_hours": s.estimated_hours,
        "priority": s.priority.value,
        "status": s.status.value,
    }


def _clock_label(hour: float) -> str:
    whole = int(hour)
    minutes = int(round((hour - whole) * 60))
    return f"{whole}:{minutes:02d}"

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import (
    ACTIVE_SCHEDULE_STATUSES,
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
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .filters import ScheduleFilters
from .model import Assignment, Schedule
from .repository import ScheduleRepository

_SCHEDULE_COLUMNS = (
    "schedule_id",
    "schedule_type",
    "task_id",
    "task_title",
    "task_description",
    "task_category",
    "priority",
    "estimated_hours",
    "scheduled_date",
    "end_date",
    "time_slot",
    "custom_start_time",
    "custom_end_time",
    "recurrence",
    "recurrence_end_date",
    "status",
    "department",
    "location",
    "notes",
    "parent_schedule_id",
    "week_number",
    "send_email",
    "email_sent",
    "email_status",
    "last_notification_sent",
    "enable_rotation",
    "created_by",
    "completed_at",
)

_ASSIGNMENT_COLUMNS = (
    "staff_id",
    "staff_name",
    "email",
    "department",
    "status",
    "start_time",
    "end_time",
    "hours_worked",
    "rating",
    "notes",
    "feedback",
    "completed_at",
    "notification_sent",
    "notification_sent_at",
    "email_status",
    "email_error",
    "message_id",
    "rotation_status",
)

# Table pairs this repository may be bound to.
BOOKS = {
    "schedules": "schedule_assignments",
    "daily_schedules": "daily_schedule_assignments",
}


def _schedule_values(s: Schedule) -> tuple:
    return (
        s.schedule_id,
        s.schedule_type.value,
        int(s.task_id),
        s.task_title,
        s.task_description,
        s.task_category,
        s.priority.value,
        float(s.estimated_hours),
        s.scheduled_date,
        s.end_date,
        s.time_slot.value,
        s.custom_start_time,
        s.custom_end_time,
        s.recurrence.value,
        s.recurrence_end_date,
        s.status.value,
        s.department,
        s.location,
        s.notes,
        s.parent_schedule_id,
        int(s.week_number),
        int(s.send_email),
        int(s.email_sent),
        s.email_status.value,
        s.last_notification_sent,
        int(s.enable_rotation),
        s.created_by,
        s.completed_at,
    )


def _assignment_values(schedule_id: str, position: int, a: Assignment) -> tuple:
    return (
        schedule_id,
        position,
        int(a.staff_id),
        a.staff_name,
        a.email,
        a.department,
        a.status.value,
        a.start_time,
        a.end_time,
        a.hours_worked,
        a.rating,
        a.notes,
        a.feedback,
        a.completed_at,
        int(a.notification_sent),
        a.notification_sent_at,
        a.email_status.value,
        a.email_error,
        a.message_id,
        a.rotation_status.value,
    )


def _row_to_assignment(r: dict) -> Assignment:
    return Assignment(
        staff_id=int(r["staff_id"]),
        staff_name=r["staff_name"],
        email=r["email"],
        department=r.get("department"),
        status=AssignmentStatus(r["status"]),
        start_time=r.get("start_time"),
        end_time=r.get("end_time"),
        hours_worked=float(r["hours_worked"]) if r.get("hours_worked") is not None else None,
        rating=int(r["rating"]) if r.get("rating") is not None else None,
        notes=r.get("notes"),
        feedback=r.get("feedback"),
        completed_at=r.get("completed_at"),
        notification_sent=bool(r.get("notification_sent")),
        notification_sent_at=r.get("notification_sent_at"),
        email_status=AssignmentEmailStatus(r["email_status"]),
        email_error=r.get("email_error"),
        message_id=r.get("message_id"),
        rotation_status=RotationStatus(r.get("rotation_status") or "new"),
    )


def _row_to_schedule(r: dict, assignments: Sequence[Assignment]) -> Schedule:
    return Schedule(
        schedule_id=r["schedule_id"],
        schedule_type=ScheduleType(r["schedule_type"]),
        task_id=int(r["task_id"]),
        task_title=r["task_title"],
        task_description=r.get("task_description"),
        task_category=r.get("task_category") or "general",
        assignments=tuple(assignments),
        priority=Priority(r["priority"]),
        estimated_hours=float(r["estimated_hours"]),
        scheduled_date=r["scheduled_date"],
        end_date=r["end_date"],
        time_slot=TimeSlot(r["time_slot"]),
        custom_start_time=normalize_mysql_time(r.get("custom_start_time")),
        custom_end_time=normalize_mysql_time(r.get("custom_end_time")),
        recurrence=Recurrence(r["recurrence"]),
        recurrence_end_date=r.get("recurrence_end_date"),
        status=ScheduleStatus(r["status"]),
        department=r["department"],
        location=r["location"],
        notes=r.get("notes"),
        parent_schedule_id=r.get("parent_schedule_id"),
        week_number=int(r["week_number"]),
        send_email=bool(r["send_email"]),
        email_sent=bool(r["email_sent"]),
        email_status=ScheduleEmailStatus(r["email_status"]),
        last_notification_sent=r.get("last_notification_sent"),
        enable_rotation=bool(r["enable_rotation"]),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        completed_at=r.get("completed_at"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    """Schedule book stored in a schedule table plus its assignment table."""

    def __init__(self, conn_factory: DatabaseConnection, *, table: str = "schedules"):
        if table not in BOOKS:
            raise ValueError(f"Unknown schedule table: {table}")
        self._conn_factory = conn_factory
        self._table = table
        self._assignments = BOOKS[table]

    # --- helpers ---------------------------------------------------------

    def _where(self, f: ScheduleFilters) -> tuple[str, list[object]]:
        clauses = ["1=1"]
        params: list[object] = []

        def eq(column: str, value) -> None:
            clauses.append(f"s.{column}=%s")
            params.append(value)

        if f.schedule_type:
            eq("schedule_type", f.schedule_type)
        if f.status:
            eq("status", f.status)
        if f.statuses:
            clauses.append(f"s.status IN ({in_clause(f.statuses)})")
            params.extend(f.statuses)
        if f.start:
            clauses.append("s.scheduled_date >= %s")
            params.append(f.start)
        if f.end:
            clauses.append("s.scheduled_date < %s")
            params.append(f.end)
        if f.priority:
            eq("priority", f.priority)
        if f.department:
            eq("department", f.department)
        if f.task_category:
            eq("task_category", f.task_category)
        if f.time_slot:
            eq("time_slot", f.time_slot)
        if f.week_number is not None:
            eq("week_number", int(f.week_number))
        if f.parent_schedule_id:
            eq("parent_schedule_id", f.parent_schedule_id)
        if f.staff_id is not None:
            clauses.append(
                f"EXISTS (SELECT 1 FROM {self._assignments} a WHERE a.schedule_id=s.schedule_id AND a.staff_id=%s)"
            )
            params.append(int(f.staff_id))
        if f.search:
            like = f"%{f.search}%"
            clauses.append(
                "(s.task_title LIKE %s OR s.schedule_id LIKE %s OR s.task_description LIKE %s"
                f" OR EXISTS (SELECT 1 FROM {self._assignments} a"
                " WHERE a.schedule_id=s.schedule_id AND a.staff_name LIKE %s))"
            )
            params.extend([like, like, like, like])
        return " AND ".join(clauses), params

    def _load_assignments(self, cur, schedule_ids: Sequence[str]) -> dict[str, list[Assignment]]:
        out: dict[str, list[Assignment]] = {sid: [] for sid in schedule_ids}
        if not schedule_ids:
            return out
        cur.execute(
            f"""
            SELECT schedule_id, {", ".join(_ASSIGNMENT_COLUMNS)}
            FROM {self._assignments}
            WHERE schedule_id IN ({in_clause(schedule_ids)})
            ORDER BY schedule_id, position
            """,
            tuple(schedule_ids),
        )
        for r in fetchall(cur):
            out[r["schedule_id"]].append(_row_to_assignment(r))
        return out

    def _select(self, cur, where: str, params: Sequence[object], *, suffix: str = "") -> list[Schedule]:
        cols = ", ".join(f"s.{c}" for c in _SCHEDULE_COLUMNS)
        cur.execute(
            f"SELECT {cols}, s.created_at, s.updated_at FROM {self._table} s WHERE {where} {suffix}",
            tuple(params),
        )
        rows = fetchall(cur)
        assignments = self._load_assignments(cur, [r["schedule_id"] for r in rows])
        return [_row_to_schedule(r, assignments[r["schedule_id"]]) for r in rows]

    def _insert_assignments(self, cur, schedule: Schedule) -> None:
        if not schedule.assignments:
            return
        placeholders = in_clause(range(len(_ASSIGNMENT_COLUMNS) + 2))
        cur.executemany(
            f"""
            INSERT INTO {self._assignments}(schedule_id, position, {", ".join(_ASSIGNMENT_COLUMNS)})
            VALUES({placeholders})
            """,
            [_assignment_values(schedule.schedule_id, i, a) for i, a in enumerate(schedule.assignments)],
        )

    # --- repository API --------------------------------------------------

    def insert(self, schedule: Schedule) -> Schedule:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {self._table}({", ".join(_SCHEDULE_COLUMNS)})
                VALUES({in_clause(_SCHEDULE_COLUMNS)})
                """,
                _schedule_values(schedule),
            )
            self._insert_assignments(cur, schedule)
            return self._select(cur, "s.schedule_id=%s", [schedule.schedule_id])[0]

    def get(self, schedule_id: str) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            found = self._select(cur, "s.schedule_id=%s", [schedule_id])
            return found[0] if found else None

    def update(self, schedule: Schedule) -> None:
        set_clause = ", ".join(f"{c}=%s" for c in _SCHEDULE_COLUMNS[1:])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {self._table} SET {set_clause} WHERE schedule_id=%s",
                _schedule_values(schedule)[1:] + (schedule.schedule_id,),
            )
            cur.execute(f"DELETE FROM {self._assignments} WHERE schedule_id=%s", (schedule.schedule_id,))
            self._insert_assignments(cur, schedule)

    def delete(self, schedule_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {self._table} WHERE schedule_id=%s", (schedule_id,))
            return cur.rowcount > 0

    def delete_series(self, parent_schedule_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {self._table} WHERE parent_schedule_id=%s", (parent_schedule_id,))
            return int(cur.rowcount)

    def find(self, filters: ScheduleFilters) -> Sequence[Schedule]:
        where, params = self._where(filters)
        suffix = "ORDER BY s.scheduled_date ASC, s.id ASC"
        if filters.limit:
            suffix += " LIMIT %s OFFSET %s"
            params.extend([int(filters.limit), int(filters.offset)])
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur, where, params, suffix=suffix)

    def count(self, filters: ScheduleFilters) -> int:
        where, params = self._where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM {self._table} s WHERE {where}", tuple(params))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def find_active_for_staff(
        self,
        *,
        staff_id: int,
        schedule_type: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[Schedule]:
        return self.find(
            ScheduleFilters(
                schedule_type=schedule_type,
                statuses=tuple(s.value for s in ACTIVE_SCHEDULE_STATUSES),
                staff_id=int(staff_id),
                start=start,
                end=end,
            )
        )

    def schedule_id_exists(self, schedule_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT 1 AS found FROM {self._table} WHERE schedule_id=%s", (schedule_id,))
            return fetchone(cur) is not None

    def recent(self, limit: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur, "1=1", [int(limit)], suffix="ORDER BY s.created_at DESC, s.id DESC LIMIT %s")

from __future__ import annotations

import io
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

import pandas as pd

from ..common.datetime_utils import now_local, start_of_day, week_window
from ..core.constants import RECENT_SCHEDULES_LIMIT
from ..core.enums import ScheduleStatus
from ..core.exceptions import ValidationError
from ..schedules.filters import ScheduleFilters
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository


def _frame(schedules: Sequence[Schedule]) -> pd.DataFrame:
    columns = [
        "schedule_id",
        "task_title",
        "schedule_type",
        "scheduled_date",
        "date",
        "estimated_hours",
        "priority",
        "status",
        "department",
        "staff_count",
    ]
    rows = [
        {
            "schedule_id": s.schedule_id,
            "task_title": s.task_title,
            "schedule_type": s.schedule_type.value,
            "scheduled_date": s.scheduled_date,
            "date": s.scheduled_date.strftime("%Y-%m-%d"),
            "estimated_hours": float(s.estimated_hours),
            "priority": s.priority.value,
            "status": s.status.value,
            "department": s.department,
            "staff_count": len(s.assignments),
        }
        for s in schedules
    ]
    return pd.DataFrame(rows, columns=columns)


def _counts(df: pd.DataFrame, column: str) -> dict:
    if df.empty:
        return {}
    return {str(k): int(v) for k, v in df[column].value_counts().sort_index().items()}


class ScheduleReportService:
    """Aggregates over one schedule book. Nothing is cached; every call re-reads the store."""

    def __init__(self, schedules: ScheduleRepository, *, clock: Callable[[], datetime] = now_local):
        self._schedules = schedules
        self._clock = clock

    def _in_range(
        self,
        start: datetime,
        end: datetime,
        *,
        department: Optional[str] = None,
        schedule_type: Optional[str] = None,
    ) -> Sequence[Schedule]:
        if end < start:
            raise ValidationError("End date cannot be before start date")
        return self._schedules.find(
            ScheduleFilters(
                schedule_type=None if schedule_type in (None, "", "all") else schedule_type,
                department=department,
                start=start_of_day(start),
                end=start_of_day(end) + timedelta(days=1),
            )
        )

    def daily_statistics(self, *, start: datetime, end: datetime) -> dict:
        df = _frame(self._in_range(start, end))
        days: list[dict] = []
        if not df.empty:
            by_status = (
                df.groupby(["date", "status"])
                .agg(schedules=("schedule_id", "size"), total_hours=("estimated_hours", "sum"), staff_count=("staff_count", "sum"))
                .reset_index()
            )
            for day, group in by_status.groupby("date", sort=True):
                days.append(
                    {
                        "date": day,
                        "statuses": [
                            {
                                "status": r.status,
                                "count": int(r.schedules),
                                "total_hours": float(r.total_hours),
                                "staff_count": int(r.staff_count),
                            }
                            for r in group.itertuples(index=False)
                        ],
                        "total_schedules": int(group["schedules"].sum()),
                        "total_hours": float(group["total_hours"].sum()),
                        "total_staff": int(group["staff_count"].sum()),
                    }
                )

        total_schedules = sum(d["total_schedules"] for d in days)
        total_hours = sum(d["total_hours"] for d in days)
        day_count = max(len(days), 1)
        return {
            "period": {"start_date": f"{start:%Y-%m-%d}", "end_date": f"{end:%Y-%m-%d}", "days": len(days)},
            "summary": {
                "total_schedules": total_schedules,
                "total_hours": total_hours,
                "total_staff": sum(d["total_staff"] for d in days),
                "average_daily_schedules": total_schedules / day_count,
                "average_daily_hours": total_hours / day_count,
            },
            "daily_stats": days,
        }

    def report(
        self,
        *,
        start: datetime,
        end: datetime,
        department: Optional[str] = None,
        schedule_type: Optional[str] = None,
    ) -> dict:
        df = _frame(self._in_range(start, end, department=department, schedule_type=schedule_type))
        rows = df.drop(columns=["date"]).to_dict(orient="records")
        for row in rows:
            row["scheduled_date"] = row["scheduled_date"].isoformat()
        return {
            "period": {"start_date": f"{start:%Y-%m-%d}", "end_date": f"{end:%Y-%m-%d}"},
            "stats": {
                "total_schedules": int(len(df)),
                "total_hours": float(df["estimated_hours"].sum()) if not df.empty else 0.0,
                "by_status": _counts(df, "status"),
                "by_priority": _counts(df, "priority"),
                "by_schedule_type": _counts(df, "schedule_type"),
                "by_department": _counts(df, "department"),
            },
            "schedules": rows,
        }

    def export_report_xlsx(
        self,
        *,
        start: datetime,
        end: datetime,
        department: Optional[str] = None,
        schedule_type: Optional[str] = None,
    ) -> bytes:
        df = _frame(self._in_range(start, end, department=department, schedule_type=schedule_type))
        df = df.drop(columns=["date"])
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Schedules")
            summary = df.groupby("status").agg(schedules=("schedule_id", "size"), hours=("estimated_hours", "sum"))
            summary.reset_index().to_excel(writer, index=False, sheet_name="By status")
        return output.getvalue()

    def overview(self) -> dict:
        now = self._clock()
        week_start, week_end = week_window(now)
        recent = self._schedules.recent(RECENT_SCHEDULES_LIMIT)
        return {
            "counts": {
                "total": self._schedules.count(ScheduleFilters()),
                "upcoming": self._schedules.count(ScheduleFilters(status=ScheduleStatus.SCHEDULED.value, start=now)),
                "in_progress": self._schedules.count(ScheduleFilters(status=ScheduleStatus.IN_PROGRESS.value)),
                "this_week": self._schedules.count(ScheduleFilters(start=week_start, end=week_end)),
            },
            "recent_schedules": [
                {
                    "schedule_id": s.schedule_id,
                    "task_title": s.task_title,
                    "schedule_type": s.schedule_type.value,
                    "scheduled_date": s.scheduled_date.isoformat(),
                    "staff_count": len(s.assignments),
                }
                for s in recent
            ],
        }

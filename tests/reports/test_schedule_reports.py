from __future__ import annotations

import io
from datetime import datetime

import pandas as pd
import pytest

from src.staff_scheduler.staff_scheduler.core.exceptions import ValidationError
from src.staff_scheduler.staff_scheduler.reports.service import ScheduleReportService


@pytest.fixture
def booked(schedule_service, schedule_repo):
    def create(day, staff, **kw):
        payload = {
            "task_id": 1,
            "assigned_staff": staff,
            "schedule_type": "daily",
            "scheduled_date": f"{day}T09:00:00",
            "send_email": False,
        }
        payload.update(kw)
        return schedule_service.create(payload).schedule

    create("2024-06-03", [1, 2], estimated_hours=4)
    done = create("2024-06-03", [3], estimated_hours=2, priority="high")
    schedule_service.update(done.schedule_id, {"status": "completed"})
    create("2024-06-04", [1], estimated_hours=6, task_id=2)
    create("2024-06-20", [1], estimated_hours=1)
    return schedule_repo


def test_daily_statistics_groups_by_day_and_status(booked, clock):
    reports = ScheduleReportService(booked, clock=clock)

    stats = reports.daily_statistics(start=datetime(2024, 6, 3), end=datetime(2024, 6, 9))

    assert stats["period"]["days"] == 2
    first, second = stats["daily_stats"]
    assert first["date"] == "2024-06-03"
    assert first["total_schedules"] == 2
    assert first["total_hours"] == 6.0
    assert first["total_staff"] == 3
    assert {s["status"]: s["count"] for s in first["statuses"]} == {"completed": 1, "scheduled": 1}
    assert second["total_hours"] == 6.0
    assert stats["summary"]["total_schedules"] == 3
    assert stats["summary"]["average_daily_hours"] == 6.0


def test_daily_statistics_of_empty_range_divides_by_one(schedule_repo, clock):
    stats = ScheduleReportService(schedule_repo, clock=clock).daily_statistics(
        start=datetime(2024, 1, 1), end=datetime(2024, 1, 7)
    )

    assert stats["daily_stats"] == []
    assert stats["summary"]["average_daily_schedules"] == 0


def test_report_breakdowns(booked, clock):
    reports = ScheduleReportService(booked, clock=clock)

    report = reports.report(start=datetime(2024, 6, 1), end=datetime(2024, 6, 30))

    assert report["stats"]["total_schedules"] == 4
    assert report["stats"]["total_hours"] == 13.0
    assert report["stats"]["by_status"] == {"completed": 1, "scheduled": 3}
    assert report["stats"]["by_priority"] == {"high": 1, "medium": 3}
    assert report["stats"]["by_schedule_type"] == {"daily": 4}
    assert report["stats"]["by_department"] == {"HR": 1, "IT Infrastructure": 2, "core banking": 1}
    assert len(report["schedules"]) == 4
    assert report["schedules"][0]["scheduled_date"] == "2024-06-03T09:00:00"

    with pytest.raises(ValidationError):
        reports.report(start=datetime(2024, 6, 30), end=datetime(2024, 6, 1))


def test_report_filters_by_department(booked, clock):
    report = ScheduleReportService(booked, clock=clock).report(
        start=datetime(2024, 6, 1), end=datetime(2024, 6, 30), department="HR"
    )

    assert report["stats"]["total_schedules"] == 1


def test_export_report_writes_two_sheets(booked, clock):
    content = ScheduleReportService(booked, clock=clock).export_report_xlsx(
        start=datetime(2024, 6, 1), end=datetime(2024, 6, 30)
    )

    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None, engine="openpyxl")
    assert set(sheets) == {"Schedules", "By status"}
    assert len(sheets["Schedules"]) == 4


def test_overview_counts(booked, clock):
    overview = ScheduleReportService(booked, clock=clock).overview()

    assert overview["counts"] == {"total": 4, "upcoming": 3, "in_progress": 0, "this_week": 3}
    assert len(overview["recent_schedules"]) == 4

from __future__ import annotations

from datetime import datetime

import pytest

from src.staff_scheduler.staff_scheduler.core.enums import ScheduleType
from src.staff_scheduler.staff_scheduler.core.exceptions import ConflictError, NotFoundError, ValidationError


def _daily(**overrides):
    payload = {
        "task_id": 1,
        "assigned_staff": [{"staff_id": 1}],
        "scheduled_date": "2024-06-03T09:00:00",
        "send_email": False,
    }
    payload.update(overrides)
    return payload


def test_daily_book_forces_daily_type_and_day_prefix(daily_service):
    s = daily_service.create(_daily(schedule_type="weekly")).schedule

    assert s.schedule_type == ScheduleType.DAILY
    assert s.schedule_id.startswith("DAY240603")
    assert s.estimated_hours == 8.0
    assert s.end_date == datetime(2024, 6, 3, 17, 0)


def test_same_day_conflict_in_daily_book(daily_service):
    daily_service.create(_daily())

    with pytest.raises(ConflictError, match="already has a daily schedule on 2024-06-03"):
        daily_service.create(_daily(scheduled_date="2024-06-03T14:00:00"))

    other_day = daily_service.create(_daily(scheduled_date="2024-06-04T09:00:00")).schedule
    assert other_day.scheduled_date.day == 4


def test_deleting_parent_removes_whole_series(daily_service, schedule_repo):
    parent = daily_service.create(
        _daily(recurrence="daily", recurrence_end_date="2024-06-05")
    ).schedule
    unrelated = daily_service.create(_daily(assigned_staff=[2])).schedule
    assert len(schedule_repo.rows) == 4

    summary = daily_service.delete(parent.schedule_id)

    assert summary["deleted_count"] == 3
    assert list(schedule_repo.rows) == [unrelated.schedule_id]


def test_deleting_child_removes_its_siblings_but_keeps_parent(daily_service, schedule_repo):
    result = daily_service.create(_daily(recurrence="daily", recurrence_end_date="2024-06-05"))
    parent = result.schedule
    child = result.recurring[0]

    summary = daily_service.delete(child.schedule_id)

    assert summary["deleted_count"] == 2
    assert list(schedule_repo.rows) == [parent.schedule_id]
    with pytest.raises(NotFoundError):
        daily_service.delete(child.schedule_id)


def test_staff_daily_workload(daily_service):
    daily_service.create(_daily(notes="Bring the rack keys"))

    workload = daily_service.staff_daily_workload(1, datetime(2024, 6, 3))

    assert workload["workload"] == {
        "total_schedules": 1,
        "total_hours": 8.0,
        "completed_tasks": 0,
        "pending_tasks": 1,
    }
    line = workload["schedules"][0]
    assert line["start_time"] == "2024-06-03T09:00:00"
    assert line["end_time"] == "2024-06-03T17:00:00"
    assert line["notes"] == "Bring the rack keys"


def test_today_summary(daily_service):
    daily_service.create(_daily(assigned_staff=[1, 2], time_slot="morning"))
    s = daily_service.create(_daily(assigned_staff=[3], time_slot="afternoon")).schedule
    daily_service.update(s.schedule_id, {"status": "in-progress"})
    daily_service.create(_daily(scheduled_date="2024-06-04T09:00:00"))

    today = daily_service.today()

    assert today["date"] == "2024-06-03"
    assert today["summary"] == {
        "total_tasks": 2,
        "total_staff": 3,
        "total_hours": 7.0,
        "pending": 1,
        "in_progress": 1,
        "completed": 0,
    }
    assert len(daily_service.today(staff_id=3)["schedules"]) == 1


def test_date_range_reports_period(daily_service):
    daily_service.create(_daily())
    daily_service.create(_daily(scheduled_date="2024-06-05T09:00:00"))
    daily_service.create(_daily(scheduled_date="2024-06-09T09:00:00"))

    result = daily_service.date_range(start=datetime(2024, 6, 3), end=datetime(2024, 6, 5))

    assert len(result["schedules"]) == 2
    assert result["period"] == {"start": "2024-06-03", "end": "2024-06-05", "days": 3}
    with pytest.raises(ValidationError):
        daily_service.date_range(start=datetime(2024, 6, 5), end=datetime(2024, 6, 3))


def test_check_staff_availability(daily_service):
    free = daily_service.check_staff_availability(2, datetime(2024, 6, 3))
    assert free["is_available"] is True
    assert free["recommendation"] == "Staff is available for scheduling"

    daily_service.create(
        _daily(assigned_staff=[2], time_slot="custom", custom_start_time="10:00", custom_end_time="12:30")
    )
    busy = daily_service.check_staff_availability(2, datetime(2024, 6, 3), time_slot="morning")

    assert busy["is_available"] is False
    assert busy["existing_count"] == 1
    assert busy["busy_hours"] == [{"start": "10:00", "end": "12:30", "hours": 2.5}]
    assert busy["recommendation"] == "Staff has existing schedules on this date"


def test_week_of_dailies_skips_weekends_and_collects_errors(daily_service):
    daily_service.create(_daily(scheduled_date="2024-06-05T09:00:00"))

    result = daily_service.create_week_of_dailies(
        {
            "task_id": 1,
            "assigned_staff": [1],
            "start_date": "2024-06-03T09:00:00",
            "end_date": "2024-06-09",
            "skip_weekends": True,
            "send_email": False,
        }
    )

    summary = result["summary"]
    assert summary["total_days"] == 5
    assert summary["successful_days"] == 4
    assert summary["failed_days"] == 1
    assert result["errors"][0]["date"] == "2024-06-05"
    created_days = [c["schedule"]["scheduled_date"][:10] for c in result["created"]]
    assert created_days == ["2024-06-03", "2024-06-04", "2024-06-06", "2024-06-07"]


def test_week_of_dailies_fails_when_nothing_created(daily_service):
    with pytest.raises(ValidationError) as exc:
        daily_service.create_week_of_dailies(
            {"task_id": 1, "assigned_staff": [1], "start_date": "2024-06-08", "end_date": "2024-06-09", "skip_weekends": True}
        )

    assert exc.value.details == {"errors": []}

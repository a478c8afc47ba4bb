from __future__ import annotations

from datetime import datetime

import pytest

from src.staff_scheduler.staff_scheduler.core.enums import (
    AssignmentEmailStatus,
    AssignmentStatus,
    ScheduleEmailStatus,
    ScheduleStatus,
    ScheduleType,
)
from src.staff_scheduler.staff_scheduler.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.staff_scheduler.staff_scheduler.schedules.filters import ScheduleFilters


def _payload(**overrides):
    payload = {
        "task_id": 1,
        "assigned_staff": [1, 2],
        "scheduled_date": "2024-06-03T09:00:00",
        "estimated_hours": 8,
    }
    payload.update(overrides)
    return payload


def test_create_weekly_schedule_assigns_staff_and_sends_letters(schedule_service, sender, metrics):
    result = schedule_service.create(_payload())

    s = result.schedule
    assert s.schedule_id.startswith("WKS240603")
    assert s.schedule_type == ScheduleType.WEEKLY
    assert s.staff_ids == [1, 2]
    assert s.week_number == 23
    assert s.email_status == ScheduleEmailStatus.ALL_SENT
    assert all(a.email_status == AssignmentEmailStatus.SENT for a in s.assignments)
    assert len(sender.sent) == 2
    assert "Server patching" in sender.sent[0][2]
    assert metrics.snapshot()["schedules_created"] == 1


def test_daily_type_is_prefixed_dys_in_the_schedule_book(schedule_service):
    result = schedule_service.create(_payload(schedule_type="daily", send_email=False))

    assert result.schedule.schedule_id.startswith("DYS240603")
    assert result.notifications is None


def test_weekly_conflict_within_same_iso_week_is_rejected_in_strict_mode(schedule_service, metrics):
    schedule_service.create(_payload(assigned_staff=[1], send_email=False))

    with pytest.raises(ConflictError) as exc:
        schedule_service.create(_payload(assigned_staff=[1], scheduled_date="2024-06-07T09:00:00", send_email=False))

    assert "weekly schedule in the week starting 2024-06-03" in exc.value.message
    assert exc.value.details["unavailable_staff"][0]["staff_id"] == 1
    assert metrics.snapshot()["conflicts_prevented"] == 1


def test_weekly_booking_in_following_week_is_free(schedule_service):
    schedule_service.create(_payload(assigned_staff=[1], send_email=False))
    result = schedule_service.create(_payload(assigned_staff=[1], scheduled_date="2024-06-10T09:00:00", send_email=False))

    assert result.schedule.week_number == 24


def test_non_strict_mode_skips_busy_staff_with_warning(schedule_service, metrics):
    schedule_service.create(_payload(assigned_staff=[1], send_email=False))

    result = schedule_service.create(_payload(assigned_staff=[1, 2], strict_availability=False, send_email=False))

    assert result.schedule.staff_ids == [2]
    assert [c.staff_id for c in result.skipped_staff] == [1]
    assert result.warnings and "Abebe Kebede was not assigned" in result.warnings[0]
    assert metrics.snapshot()["staff_skipped"] == 1


def test_non_strict_mode_with_everyone_busy_still_fails(schedule_service):
    schedule_service.create(_payload(assigned_staff=[1], send_email=False))

    with pytest.raises(ConflictError, match="None of the selected staff"):
        schedule_service.create(_payload(assigned_staff=[1], strict_availability=False, send_email=False))


def test_cancelled_schedule_does_not_block(schedule_service):
    first = schedule_service.create(_payload(assigned_staff=[1], send_email=False)).schedule
    schedule_service.update(first.schedule_id, {"status": "cancelled"})

    second = schedule_service.create(_payload(assigned_staff=[1], send_email=False)).schedule

    assert second.schedule_id != first.schedule_id


def test_daily_and_weekly_bookings_do_not_collide(schedule_service):
    schedule_service.create(_payload(assigned_staff=[1], send_email=False))
    result = schedule_service.create(_payload(assigned_staff=[1], schedule_type="daily", send_email=False))

    assert result.schedule.schedule_type == ScheduleType.DAILY


def test_unknown_task_and_staff_are_not_found(schedule_service):
    with pytest.raises(NotFoundError):
        schedule_service.create(_payload(task_id=99))
    with pytest.raises(NotFoundError):
        schedule_service.create(_payload(assigned_staff=[1, 42]))


@pytest.mark.parametrize(
    "overrides",
    [
        {"assigned_staff": []},
        {"scheduled_date": "not-a-date"},
        {"estimated_hours": 30},
        {"priority": "critical"},
        {"end_date": "2024-06-01T09:00:00"},
        {"recurrence": "weekly", "recurrence_end_date": "2024-05-01"},
    ],
)
def test_invalid_payloads_are_rejected(schedule_service, overrides):
    with pytest.raises(ValidationError):
        schedule_service.create(_payload(**overrides))


def test_update_assignment_completion_is_idempotent(schedule_service, clock):
    s = schedule_service.create(_payload(send_email=False)).schedule

    first = schedule_service.update_assignment(s.schedule_id, 1, {"status": "completed", "hours_worked": 7.5, "rating": 4})
    second = schedule_service.update_assignment(s.schedule_id, 1, {"status": "completed"})

    a1 = first.find_assignment(1)
    a2 = second.find_assignment(1)
    assert a1.status == AssignmentStatus.COMPLETED
    assert a1.completed_at == clock()
    assert a2.completed_at == a1.completed_at
    assert a2.hours_worked == 7.5
    assert second.find_assignment(2).status == AssignmentStatus.PENDING


def test_update_assignment_rejects_unknown_staff_and_bad_rating(schedule_service):
    s = schedule_service.create(_payload(send_email=False)).schedule

    with pytest.raises(NotFoundError):
        schedule_service.update_assignment(s.schedule_id, 3, {"status": "completed"})
    with pytest.raises(ValidationError):
        schedule_service.update_assignment(s.schedule_id, 1, {"rating": 2.5})
    with pytest.raises(ValidationError):
        schedule_service.update_assignment(s.schedule_id, 1, {"status": "done"})


def test_update_moves_assignment_times_and_rechecks_conflicts(schedule_service):
    s = schedule_service.create(_payload(assigned_staff=[1], send_email=False)).schedule
    schedule_service.create(_payload(assigned_staff=[1], scheduled_date="2024-06-10T09:00:00", send_email=False))

    moved = schedule_service.update(s.schedule_id, {"scheduled_date": "2024-06-04T09:00:00"})
    assert moved.find_assignment(1).start_time.day == 4

    with pytest.raises(ConflictError):
        schedule_service.update(s.schedule_id, {"scheduled_date": "2024-06-12T09:00:00"})


def test_update_rejects_unknown_fields_and_stamps_completion(schedule_service, clock):
    s = schedule_service.create(_payload(send_email=False)).schedule

    with pytest.raises(ValidationError):
        schedule_service.update(s.schedule_id, {"schedule_id": "X"})

    done = schedule_service.update(s.schedule_id, {"status": "completed"})
    assert done.status == ScheduleStatus.COMPLETED
    assert done.completed_at == clock()


def test_delete_returns_summary_and_missing_id_is_not_found(schedule_service, schedule_repo):
    s = schedule_service.create(_payload(send_email=False)).schedule

    summary = schedule_service.delete(s.schedule_id)

    assert summary["deleted_count"] == 1
    assert s.schedule_id not in schedule_repo.rows
    with pytest.raises(NotFoundError):
        schedule_service.delete(s.schedule_id)


def test_bulk_create_collects_failures(schedule_service):
    result = schedule_service.bulk_create(
        [_payload(assigned_staff=[1], send_email=False), _payload(assigned_staff=[1], send_email=False), {"task_id": 1}],
    )

    assert result["summary"] == {"total": 3, "created": 1, "failed": 2}
    assert [f["code"] for f in result["failed"]] == ["CONFLICT", "VALIDATION_ERROR"]


def test_list_schedules_paginates(schedule_service):
    for day in ("2024-06-03", "2024-06-10", "2024-06-17"):
        schedule_service.create(_payload(assigned_staff=[1], scheduled_date=f"{day}T09:00:00", send_email=False))

    page = schedule_service.list_schedules(ScheduleFilters(staff_id=1, page=2, limit=2))

    assert [s.scheduled_date.day for s in page["items"]] == [17]
    assert page["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


def test_staff_weekly_schedule_summarizes_week(schedule_service):
    schedule_service.create(_payload(assigned_staff=[1], send_email=False))
    schedule_service.create(_payload(assigned_staff=[1], schedule_type="daily", estimated_hours=2, send_email=False))

    week = schedule_service.staff_weekly_schedule(1, week=23, year=2024)

    assert week["weekly_summary"] == {"total_tasks": 2, "total_hours": 10.0, "daily_tasks": 1, "weekly_tasks": 1}


def test_consecutive_week_check_is_advisory(schedule_service):
    s = schedule_service.create(_payload(assigned_staff=[1], send_email=False)).schedule
    schedule_service.update(s.schedule_id, {"status": "completed"})

    check = schedule_service.check_consecutive_week(1, "maintenance", datetime(2024, 6, 8, 9, 0))
    assert check["available"] is False
    assert "Server patching" in check["reason"]

    result = schedule_service.create(
        _payload(assigned_staff=[1], scheduled_date="2024-06-10T09:00:00", enable_rotation=True, send_email=False)
    )
    assert result.schedule.assignments[0].rotation_status.value == "rotated"
    assert any("similar maintenance task" in w for w in result.warnings)

from __future__ import annotations

from datetime import datetime

import pytest

from src.staff_scheduler.staff_scheduler.core.enums import AssignmentEmailStatus, ScheduleEmailStatus, ScheduleType
from src.staff_scheduler.staff_scheduler.core.exceptions import ServiceUnavailableError
from src.staff_scheduler.staff_scheduler.core.metrics import ServiceMetrics
from src.staff_scheduler.staff_scheduler.notifications.dispatcher import NotificationDispatcher
from src.staff_scheduler.staff_scheduler.schedules.model import Assignment, Schedule
from src.staff_scheduler.staff_scheduler.schedules.service import ScheduleService

SENT_AT = datetime(2024, 6, 3, 8, 0)


def _schedule(*assignments):
    return Schedule(
        schedule_id="WKS2406030001",
        schedule_type=ScheduleType.WEEKLY,
        task_id=1,
        task_title="Server patching",
        scheduled_date=datetime(2024, 6, 3, 9, 0),
        end_date=datetime(2024, 6, 10, 9, 0),
        estimated_hours=8.0,
        week_number=23,
        assignments=assignments,
        notes="Use the change window",
    )


def _assignment(staff_id, email, **kw):
    return Assignment(staff_id=staff_id, staff_name=f"Staff {staff_id}", email=email, **kw)


class UnreachableSender:
    def send_bulk(self, recipients, subject, template_fn):
        raise ServiceUnavailableError("Email service unavailable: connection refused")

    def verify(self):
        raise ServiceUnavailableError("Email service unavailable: connection refused")


class ExplodingSender:
    def send_bulk(self, recipients, subject, template_fn):
        raise RuntimeError("transport exploded")

    def verify(self):
        raise RuntimeError("transport exploded")


def test_all_letters_sent(sender):
    metrics = ServiceMetrics()
    dispatcher = NotificationDispatcher(sender, metrics=metrics, clock=lambda: SENT_AT)

    schedule, report = dispatcher.dispatch(_schedule(_assignment(1, "a@bank.test"), _assignment(2, "b@bank.test")))

    assert report.status == ScheduleEmailStatus.ALL_SENT
    assert report.sent == 2
    assert schedule.email_sent is True
    assert schedule.last_notification_sent == SENT_AT
    assert all(a.notification_sent and a.message_id for a in schedule.assignments)
    email, subject, body = sender.sent[0]
    assert email == "a@bank.test"
    assert subject == "New weekly assignment: Server patching on 2024-06-03"
    assert "Staff 1" in body
    assert "Use the change window" in body
    assert metrics.snapshot()["emails_sent"] == 2


def test_partial_failure_is_recorded_per_assignment(sender_factory):
    sender = sender_factory(fail_for={"b@bank.test"})
    metrics = ServiceMetrics()
    dispatcher = NotificationDispatcher(sender, metrics=metrics, clock=lambda: SENT_AT)

    schedule, report = dispatcher.dispatch(_schedule(_assignment(1, "a@bank.test"), _assignment(2, "b@bank.test")))

    assert report.status == ScheduleEmailStatus.PARTIAL_SENT
    assert (report.sent, report.failed) == (1, 1)
    failed = schedule.find_assignment(2)
    assert failed.email_status == AssignmentEmailStatus.FAILED
    assert failed.email_error == "mailbox unavailable"
    assert failed.notification_sent is False
    assert schedule.email_sent is False
    assert report.warnings == ("Email to b@bank.test failed: mailbox unavailable",)
    assert metrics.snapshot()["emails_failed"] == 1


def test_no_sender_marks_assignments_service_unavailable():
    dispatcher = NotificationDispatcher(None)

    schedule, report = dispatcher.dispatch(_schedule(_assignment(1, "a@bank.test")))

    assert report.status == ScheduleEmailStatus.FAILED
    assert report.unavailable == 1
    assert schedule.assignments[0].email_status == AssignmentEmailStatus.SERVICE_UNAVAILABLE
    assert report.warnings
    with pytest.raises(ServiceUnavailableError):
        dispatcher.verify()


def test_unreachable_transport_downgrades_instead_of_raising():
    dispatcher = NotificationDispatcher(UnreachableSender())

    schedule, report = dispatcher.dispatch(_schedule(_assignment(1, "a@bank.test")))

    assert schedule.email_status == ScheduleEmailStatus.FAILED
    assert schedule.assignments[0].email_error == "Email service unavailable: connection refused"
    assert report.unavailable == 1


def test_already_sent_assignments_are_not_sent_twice(sender):
    dispatcher = NotificationDispatcher(sender, clock=lambda: SENT_AT)
    done = _assignment(1, "a@bank.test", notification_sent=True, email_status=AssignmentEmailStatus.SENT)

    schedule, report = dispatcher.dispatch(_schedule(done, _assignment(2, "b@bank.test")))

    assert [e for e, _, _ in sender.sent] == ["b@bank.test"]
    assert report.skipped == 1
    assert schedule.email_status == ScheduleEmailStatus.ALL_SENT

    again, second = dispatcher.dispatch(schedule)
    assert len(sender.sent) == 1
    assert second.skipped == 2
    assert again == schedule


def test_schedule_creation_survives_missing_email_service(schedule_repo, staff_repo, task_repo, clock):
    service = ScheduleService(schedule_repo, staff_repo, task_repo, clock=clock)
    result = service.create({"task_id": 1, "assigned_staff": [1], "scheduled_date": "2024-06-03T09:00:00"})

    assert result.schedule.email_status == ScheduleEmailStatus.FAILED
    assert result.notifications.unavailable == 1
    assert any("not sent" in w for w in result.warnings)
    assert schedule_repo.get(result.schedule.schedule_id).email_status == ScheduleEmailStatus.FAILED


def test_unexpected_transport_error_downgrades_instead_of_raising():
    metrics = ServiceMetrics()
    dispatcher = NotificationDispatcher(ExplodingSender(), metrics=metrics)

    schedule, report = dispatcher.dispatch(_schedule(_assignment(1, "a@bank.test"), _assignment(2, "b@bank.test")))

    assert report.status == ScheduleEmailStatus.FAILED
    assert report.unavailable == 2
    assert "transport exploded" in report.warnings[0]
    assert schedule.email_sent is False
    assert metrics.snapshot()["emails_failed"] == 2


def test_schedule_creation_survives_transport_that_always_raises(schedule_repo, staff_repo, task_repo, clock):
    service = ScheduleService(
        schedule_repo,
        staff_repo,
        task_repo,
        notifier=NotificationDispatcher(ExplodingSender(), clock=clock),
        clock=clock,
    )

    result = service.create(
        {"task_id": 1, "assigned_staff": [1, 2], "scheduled_date": "2024-06-03T09:00:00", "recurrence": "weekly"}
    )

    assert len(schedule_repo.rows) == 1 + result.recurring_created
    stored = schedule_repo.get(result.schedule.schedule_id)
    assert stored.email_status == ScheduleEmailStatus.FAILED
    assert all(a.email_status == AssignmentEmailStatus.SERVICE_UNAVAILABLE for a in stored.assignments)
    assert any("transport exploded" in w for w in result.warnings)

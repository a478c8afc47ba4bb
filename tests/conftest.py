from __future__ import annotations

import random
from dataclasses import replace
from datetime import date, datetime

import pytest

from src.staff_scheduler.staff_scheduler.core.enums import Department, StaffStatus
from src.staff_scheduler.staff_scheduler.core.metrics import ServiceMetrics
from src.staff_scheduler.staff_scheduler.daily_schedules.service import DailyScheduleService
from src.staff_scheduler.staff_scheduler.notifications.dispatcher import NotificationDispatcher
from src.staff_scheduler.staff_scheduler.notifications.email_sender import BulkSendResult, SendResult
from src.staff_scheduler.staff_scheduler.schedules.filters import ScheduleFilters
from src.staff_scheduler.staff_scheduler.schedules.service import ScheduleService
from src.staff_scheduler.staff_scheduler.staff.model import Staff
from src.staff_scheduler.staff_scheduler.tasks.model import Task

NOW = datetime(2024, 6, 3, 8, 0, 0)


class FakeStaffRepo:
    def __init__(self, members=()):
        self._next_id = 1
        self._rows: dict[int, Staff] = {}
        for m in members:
            self.add(m)

    def add(self, staff):
        created = replace(staff, staff_id=self._next_id)
        self._rows[self._next_id] = created
        self._next_id += 1
        return created

    def get_by_id(self, staff_id):
        return self._rows.get(int(staff_id))

    def get_by_email(self, email):
        return next((s for s in self._rows.values() if s.email == email), None)

    def employee_id_exists(self, employee_id):
        return any(s.employee_id == employee_id for s in self._rows.values())

    def list_all(self, *, department=None, status=None, search=None):
        out = list(self._rows.values())
        if department:
            out = [s for s in out if s.department.value == department]
        if status:
            out = [s for s in out if s.status.value == status]
        if search:
            out = [s for s in out if search.lower() in s.full_name.lower()]
        return out

    def update(self, staff):
        if staff.staff_id not in self._rows:
            return False
        self._rows[staff.staff_id] = staff
        return True

    def delete(self, staff_id):
        return self._rows.pop(int(staff_id), None) is not None


class FakeTaskRepo:
    def __init__(self, tasks=()):
        self._next_id = 1
        self._rows: dict[int, Task] = {}
        for t in tasks:
            self.add(t)

    def add(self, task):
        created = replace(task, task_id=self._next_id)
        self._rows[self._next_id] = created
        self._next_id += 1
        return created

    def get_by_id(self, task_id):
        return self._rows.get(int(task_id))

    def task_code_exists(self, task_code):
        return any(t.task_code == task_code for t in self._rows.values())

    def list_all(self, *, status=None, search=None):
        out = list(self._rows.values())
        if status:
            out = [t for t in out if t.status.value == status]
        if search:
            out = [t for t in out if search.lower() in t.title.lower()]
        return out

    def update(self, task):
        self._rows[task.task_id] = task
        return True

    def delete(self, task_id):
        return self._rows.pop(int(task_id), None) is not None


class FakeScheduleRepo:
    def __init__(self):
        self.rows: dict[str, object] = {}

    def insert(self, schedule):
        self.rows[schedule.schedule_id] = schedule
        return schedule

    def get(self, schedule_id):
        return self.rows.get(schedule_id)

    def update(self, schedule):
        self.rows[schedule.schedule_id] = schedule

    def delete(self, schedule_id):
        return self.rows.pop(schedule_id, None) is not None

    def delete_series(self, parent_schedule_id):
        doomed = [k for k, s in self.rows.items() if s.parent_schedule_id == parent_schedule_id]
        for k in doomed:
            del self.rows[k]
        return len(doomed)

    def _matching(self, filters):
        return sorted((s for s in self.rows.values() if filters.matches(s)), key=lambda s: s.scheduled_date)

    def find(self, filters):
        found = self._matching(filters)
        if filters.limit:
            return found[filters.offset : filters.offset + filters.limit]
        return found

    def count(self, filters):
        return len(self._matching(replace(filters, limit=None)))

    def find_active_for_staff(self, *, staff_id, schedule_type, start, end):
        return self.find(
            ScheduleFilters(
                staff_id=staff_id,
                schedule_type=schedule_type,
                statuses=("scheduled", "in-progress"),
                start=start,
                end=end,
            )
        )

    def schedule_id_exists(self, schedule_id):
        return schedule_id in self.rows

    def recent(self, limit):
        return sorted(self.rows.values(), key=lambda s: s.created_at or datetime.min, reverse=True)[:limit]


class RecordingSender:
    """Collects outgoing letters; addresses listed in ``fail_for`` are rejected."""

    def __init__(self, fail_for=()):
        self.sent: list = []
        self.fail_for = set(fail_for)
        self.verified = 0

    def send_bulk(self, recipients, subject, template_fn):
        results = []
        for r in recipients:
            body = template_fn(r)
            if r.email in self.fail_for:
                results.append(SendResult(key=r.key, email=r.email, success=False, error="mailbox unavailable"))
                continue
            self.sent.append((r.email, subject, body))
            results.append(SendResult(key=r.key, email=r.email, success=True, message_id=f"<{len(self.sent)}@test>"))
        return BulkSendResult(results=tuple(results))

    def verify(self):
        self.verified += 1


def make_staff(first, last, *, department=Department.IT_INFRASTRUCTURE, status=StaffStatus.ACTIVE):
    return Staff(
        staff_id=None,
        employee_id=f"EMP2024{first[:2].upper()}{last[:2].upper()}",
        first_name=first,
        last_name=last,
        email=f"{first.lower()}.{last.lower()}@bank.test",
        department=department,
        status=status,
        hire_date=date(2024, 1, 15),
    )


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def staff_repo():
    return FakeStaffRepo(
        [
            make_staff("Abebe", "Kebede"),
            make_staff("Sara", "Tesfaye"),
            make_staff("Dawit", "Alemu", department=Department.CORE_BANKING),
        ]
    )


@pytest.fixture
def task_repo():
    return FakeTaskRepo(
        [
            Task(task_id=None, task_code="TASK2400001", title="Server patching", category="maintenance"),
            Task(task_id=None, task_code="TASK2400002", title="Backup review", category="audit", department="HR"),
        ]
    )


@pytest.fixture
def schedule_repo():
    return FakeScheduleRepo()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def metrics():
    return ServiceMetrics()


@pytest.fixture
def schedule_service(schedule_repo, staff_repo, task_repo, sender, metrics, clock):
    return ScheduleService(
        schedule_repo,
        staff_repo,
        task_repo,
        notifier=NotificationDispatcher(sender, metrics=metrics, clock=clock),
        metrics=metrics,
        rng=random.Random(7),
        clock=clock,
    )


@pytest.fixture
def daily_service(schedule_repo, staff_repo, task_repo, sender, metrics, clock):
    return DailyScheduleService(
        schedule_repo,
        staff_repo,
        task_repo,
        notifier=NotificationDispatcher(sender, metrics=metrics, clock=clock),
        metrics=metrics,
        rng=random.Random(11),
        clock=clock,
    )


@pytest.fixture
def sender_factory():
    return RecordingSender


@pytest.fixture
def daily_schedule_repo():
    return FakeScheduleRepo()

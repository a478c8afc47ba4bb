from __future__ import annotations

import random

import pytest

from src.staff_scheduler.staff_scheduler.core.enums import StaffStatus
from src.staff_scheduler.staff_scheduler.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.staff_scheduler.staff_scheduler.staff.service import StaffService


@pytest.fixture
def svc(staff_repo):
    return StaffService(staff_repo, rng=random.Random(3))


def test_add_employee_normalizes_contact_details(svc):
    staff = svc.add_employee(
        first_name="Hana",
        last_name="Girma",
        email="Hana.Girma@Bank.Test",
        phone="0911223344",
        department="HR",
        hire_date="2024-05-01",
    )

    assert staff.staff_id == 4
    assert staff.employee_id.startswith("EMP")
    assert len(staff.employee_id) == 11
    assert staff.email == "hana.girma@bank.test"
    assert staff.phone == "+251911223344"
    assert staff.department.value == "HR"
    assert staff.hire_date.isoformat() == "2024-05-01"


def test_duplicate_email_is_a_conflict(svc):
    with pytest.raises(ConflictError):
        svc.add_employee(first_name="Abebe", last_name="Kebede", email="abebe.kebede@bank.test")


@pytest.mark.parametrize(
    "fields",
    [
        {"first_name": "A", "last_name": "Girma", "email": "x@bank.test"},
        {"first_name": "Hana", "last_name": "Girma", "email": "abebé@bank.test"},
        {"first_name": "Hana", "last_name": "Girma", "email": "not-an-email"},
        {"first_name": "Hana", "last_name": "Girma", "email": "x@bank.test", "phone": "12"},
        {"first_name": "Hana", "last_name": "Girma", "email": "x@bank.test", "department": "Sales"},
    ],
)
def test_invalid_employee_fields(svc, fields):
    with pytest.raises(ValidationError):
        svc.add_employee(**fields)


def test_check_email(svc):
    assert svc.check_email("abebe.kebede@bank.test")["available"] is False
    assert svc.check_email("new.person@bank.test")["exists"] is False


def test_update_employee_keeps_email_unique(svc):
    with pytest.raises(ConflictError):
        svc.update_employee(1, {"email": "sara.tesfaye@bank.test"})

    updated = svc.update_employee(1, {"email": "abebe.k@bank.test", "role": "IT Officer"})
    assert updated.email == "abebe.k@bank.test"
    assert updated.role.value == "IT Officer"

    with pytest.raises(ValidationError):
        svc.update_employee(1, {})


def test_deactivate_and_delete(svc):
    assert svc.soft_delete_employee(2).status == StaffStatus.INACTIVE
    assert svc.get_employee(2).status == StaffStatus.INACTIVE

    svc.delete_employee(2)
    with pytest.raises(NotFoundError):
        svc.get_employee(2)


def test_stats_by_department(svc):
    svc.soft_delete_employee(3)

    stats = svc.stats()

    assert stats["total"] == 3
    assert stats["active"] == 2
    assert stats["inactive"] == 1
    assert stats["by_department"] == {"IT Infrastructure": 2, "core banking": 1}

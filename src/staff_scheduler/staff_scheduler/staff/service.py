from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import replace
from datetime import timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local, parse_datetime
from ..common.validators import normalize_phone, parse_enum, require_email, require_length
from ..core.constants import RECENT_HIRE_DAYS
from ..core.enums import Department, StaffRole, StaffStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Staff
from .repository import StaffRepository

logger = logging.getLogger(__name__)


class StaffService:
    """Use case: manage the staff directory."""

    def __init__(self, staff: StaffRepository, *, rng: Optional[random.Random] = None):
        self._staff = staff
        self._rng = rng or random.Random()

    def _generate_employee_id(self, year: int) -> str:
        while True:
            candidate = f"EMP{year}{self._rng.randint(0, 9999):04d}"
            if not self._staff.employee_id_exists(candidate):
                return candidate

    def add_employee(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        phone: Optional[str] = None,
        role: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[str] = None,
        hire_date=None,
    ) -> Staff:
        email = require_email(email)
        if self._staff.get_by_email(email):
            raise ConflictError("Employee with this email already exists")

        today = now_local()
        staff = Staff(
            staff_id=None,
            employee_id=self._generate_employee_id(today.year),
            first_name=require_length(first_name, "First name", 2, 50),
            last_name=require_length(last_name, "Last name", 2, 50),
            email=email,
            phone=normalize_phone(phone),
            role=parse_enum(StaffRole, role, "Role", default=StaffRole.STAFF),
            department=parse_enum(Department, department, "Department", default=Department.IT_INFRASTRUCTURE),
            status=parse_enum(StaffStatus, status, "Status", default=StaffStatus.ACTIVE),
            hire_date=parse_datetime(hire_date, "Hire date").date() if hire_date else today.date(),
        )
        created = self._staff.add(staff)
        logger.info("Employee %s created (%s)", created.employee_id, created.email)
        return created

    def list_employees(
        self,
        *,
        department: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Staff]:
        return self._staff.list_all(department=department, status=status, search=search)

    def get_employee(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(int(staff_id))
        if not staff:
            raise NotFoundError("Employee not found")
        return staff

    def check_email(self, email: str) -> dict:
        email = require_email(email)
        exists = self._staff.get_by_email(email) is not None
        return {
            "email": email,
            "exists": exists,
            "available": not exists,
            "message": "Email already registered" if exists else "Email is available",
        }

    def update_employee(self, staff_id: int, changes: dict) -> Staff:
        current = self.get_employee(staff_id)
        updates: dict = {}

        if "email" in changes:
            email = require_email(changes["email"])
            other = self._staff.get_by_email(email)
            if other and other.staff_id != current.staff_id:
                raise ConflictError("Email already in use by another employee")
            updates["email"] = email
        if "first_name" in changes:
            updates["first_name"] = require_length(changes["first_name"], "First name", 2, 50)
        if "last_name" in changes:
            updates["last_name"] = require_length(changes["last_name"], "Last name", 2, 50)
        if "phone" in changes:
            updates["phone"] = normalize_phone(changes["phone"])
        if "role" in changes:
            updates["role"] = parse_enum(StaffRole, changes["role"], "Role")
        if "department" in changes:
            updates["department"] = parse_enum(Department, changes["department"], "Department")
        if "status" in changes:
            updates["status"] = parse_enum(StaffStatus, changes["status"], "Status")
        if "hire_date" in changes:
            updates["hire_date"] = parse_datetime(changes["hire_date"], "Hire date").date()

        if not updates:
            raise ValidationError("No valid fields to update")

        updated = replace(current, **updates, updated_at=now_local())
        self._staff.update(updated)
        return updated

    def soft_delete_employee(self, staff_id: int) -> Staff:
        current = self.get_employee(staff_id)
        updated = replace(current, status=StaffStatus.INACTIVE, updated_at=now_local())
        self._staff.update(updated)
        logger.info("Employee %s deactivated", current.employee_id)
        return updated

    def delete_employee(self, staff_id: int) -> Staff:
        current = self.get_employee(staff_id)
        if not self._staff.delete(int(staff_id)):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s deleted", current.employee_id)
        return current

    def stats(self) -> dict:
        staff = list(self._staff.list_all())
        by_status = Counter(s.status.value for s in staff)
        cutoff = now_local().date() - timedelta(days=RECENT_HIRE_DAYS)
        recent = [s for s in staff if s.hire_date and s.hire_date >= cutoff]
        return {
            "total": len(staff),
            "active": by_status.get(StaffStatus.ACTIVE.value, 0),
            "inactive": by_status.get(StaffStatus.INACTIVE.value, 0),
            "on_leave": by_status.get(StaffStatus.ON_LEAVE.value, 0),
            "by_department": dict(Counter(s.department.value for s in staff)),
            "by_role": dict(Counter(s.role.value for s in staff)),
            "recent_hires": len(recent),
        }


from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Department, StaffRole, StaffStatus


@dataclass(frozen=True)
class Staff:
    staff_id: Optional[int]
    employee_id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: StaffRole = StaffRole.STAFF
    department: Department = Department.IT_INFRASTRUCTURE
    status: StaffStatus = StaffStatus.ACTIVE
    hire_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "employee_id": self.employee_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role.value,
            "department": self.department.value,
            "status": self.status.value,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import Department, StaffRole, StaffStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Staff
from .repository import StaffRepository

_COLUMNS = """
    staff_id, employee_id, first_name, last_name, email, phone,
    role, department, status, hire_date, created_at, updated_at
"""


def _row_to_staff(r: dict) -> Staff:
    return Staff(
        staff_id=int(r["staff_id"]),
        employee_id=r["employee_id"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        phone=r.get("phone"),
        role=StaffRole(r["role"]),
        department=Department(r["department"]),
        status=StaffStatus(r["status"]),
        hire_date=r.get("hire_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, staff: Staff) -> Staff:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO staff(employee_id, first_name, last_name, email, phone, role, department, status, hire_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    staff.employee_id,
                    staff.first_name,
                    staff.last_name,
                    staff.email,
                    staff.phone,
                    staff.role.value,
                    staff.department.value,
                    staff.status.value,
                    staff.hire_date,
                ),
            )
            return replace(staff, staff_id=int(cur.lastrowid))

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE staff_id=%s", (int(staff_id),))
            r = fetchone(cur)
            return _row_to_staff(r) if r else None

    def get_by_email(self, email: str) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE email=%s", (email.lower(),))
            r = fetchone(cur)
            return _row_to_staff(r) if r else None

    def employee_id_exists(self, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM staff WHERE employee_id=%s", (employee_id,))
            return fetchone(cur) is not None

    def list_all(
        self,
        *,
        department: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Staff]:
        clauses = ["1=1"]
        params: list[object] = []
        if department:
            clauses.append("department=%s")
            params.append(department)
        if status:
            clauses.append("status=%s")
            params.append(status)
        if search:
            like = f"%{search}%"
            clauses.append("(first_name LIKE %s OR last_name LIKE %s OR email LIKE %s OR employee_id LIKE %s)")
            params.extend([like, like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM staff WHERE {' AND '.join(clauses)} ORDER BY created_at DESC, staff_id DESC",
                tuple(params),
            )
            return [_row_to_staff(r) for r in fetchall(cur)]

    def update(self, staff: Staff) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff
                SET first_name=%s, last_name=%s, email=%s, phone=%s, role=%s, department=%s, status=%s, hire_date=%s
                WHERE staff_id=%s
                """,
                (
                    staff.first_name,
                    staff.last_name,
                    staff.email,
                    staff.phone,
                    staff.role.value,
                    staff.department.value,
                    staff.status.value,
                    staff.hire_date,
                    int(staff.staff_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, staff_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM staff WHERE staff_id=%s", (int(staff_id),))
            return cur.rowcount > 0

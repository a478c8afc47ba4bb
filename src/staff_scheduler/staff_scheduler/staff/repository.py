from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Staff


class StaffRepository(Protocol):
    def add(self, staff: Staff) -> Staff:
        """Persist a new staff member and return it with its staff_id set."""

        raise NotImplementedError

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Staff]:
        raise NotImplementedError

    def employee_id_exists(self, employee_id: str) -> bool:
        raise NotImplementedError

    def list_all(
        self,
        *,
        department: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Staff]:
        raise NotImplementedError

    def update(self, staff: Staff) -> bool:
        raise NotImplementedError

    def delete(self, staff_id: int) -> bool:
        raise NotImplementedError

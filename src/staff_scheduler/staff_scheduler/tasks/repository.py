from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Task


class TaskRepository(Protocol):
    def add(self, task: Task) -> Task:
        raise NotImplementedError

    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def task_code_exists(self, task_code: str) -> bool:
        raise NotImplementedError

    def list_all(self, *, status: Optional[str] = None, search: Optional[str] = None) -> Sequence[Task]:
        """Newest first; ``search`` matches title, description or task code."""

        raise NotImplementedError

    def update(self, task: Task) -> bool:
        raise NotImplementedError

    def delete(self, task_id: int) -> bool:
        raise NotImplementedError

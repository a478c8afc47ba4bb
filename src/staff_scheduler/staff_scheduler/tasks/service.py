from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_max_length, parse_enum, require_length
from ..core.constants import DEFAULT_TASK_CATEGORY
from ..core.enums import TaskStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)


class TaskService:
    """Use case: manage the catalog of schedulable tasks."""

    def __init__(self, tasks: TaskRepository, *, rng: Optional[random.Random] = None):
        self._tasks = tasks
        self._rng = rng or random.Random()

    def _generate_task_code(self) -> str:
        yy = now_local().strftime("%y")
        while True:
            candidate = f"TASK{yy}{self._rng.randint(0, 99999):05d}"
            if not self._tasks.task_code_exists(candidate):
                return candidate

    def create_task(
        self,
        *,
        title: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Task:
        task = Task(
            task_id=None,
            task_code=self._generate_task_code(),
            title=require_length(title, "Title", 3, 200),
            description=optional_max_length(description, "Description", 1000),
            category=(category or "").strip() or DEFAULT_TASK_CATEGORY,
            department=(department or "").strip() or None,
            status=parse_enum(TaskStatus, status, "Status", default=TaskStatus.PENDING),
        )
        created = self._tasks.add(task)
        logger.info("Task %s created", created.task_code)
        return created

    def list_tasks(self, *, status: Optional[str] = None, search: Optional[str] = None) -> Sequence[Task]:
        if status:
            parse_enum(TaskStatus, status, "Status")
        return self._tasks.list_all(status=status, search=search)

    def get_task(self, task_id: int) -> Task:
        task = self._tasks.get_by_id(int(task_id))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def update_task(self, task_id: int, changes: dict) -> Task:
        current = self.get_task(task_id)
        updates: dict = {}
        if "title" in changes:
            updates["title"] = require_length(changes["title"], "Title", 3, 200)
        if "description" in changes:
            updates["description"] = optional_max_length(changes["description"], "Description", 1000)
        if "category" in changes:
            updates["category"] = (changes["category"] or "").strip() or DEFAULT_TASK_CATEGORY
        if "department" in changes:
            updates["department"] = (changes["department"] or "").strip() or None
        if "status" in changes:
            updates["status"] = parse_enum(TaskStatus, changes["status"], "Status")
        if not updates:
            raise ValidationError("No valid fields to update")

        updated = replace(current, **updates, updated_at=now_local())
        self._tasks.update(updated)
        return updated

    def delete_task(self, task_id: int) -> Task:
        current = self.get_task(task_id)
        if not self._tasks.delete(int(task_id)):
            raise NotFoundError("Task not found")
        logger.info("Task %s deleted", current.task_code)
        return current

    def stats(self) -> dict:
        tasks = list(self._tasks.list_all())
        by_status = Counter(t.status.value for t in tasks)
        return {"total": len(tasks), "by_status": {s.value: by_status.get(s.value, 0) for s in TaskStatus}}

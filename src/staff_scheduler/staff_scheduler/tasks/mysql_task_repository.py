from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Task
from .repository import TaskRepository

_COLUMNS = "task_id, task_code, title, description, category, department, status, created_at, updated_at"


def _row_to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        task_code=r["task_code"],
        title=r["title"],
        description=r.get("description"),
        category=r.get("category") or "general",
        department=r.get("department"),
        status=TaskStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, task: Task) -> Task:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(task_code, title, description, category, department, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (task.task_code, task.title, task.description, task.category, task.department, task.status.value),
            )
            return replace(task, task_id=int(cur.lastrowid))

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (int(task_id),))
            r = fetchone(cur)
            return _row_to_task(r) if r else None

    def task_code_exists(self, task_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM tasks WHERE task_code=%s", (task_code,))
            return fetchone(cur) is not None

    def list_all(self, *, status: Optional[str] = None, search: Optional[str] = None) -> Sequence[Task]:
        clauses = ["1=1"]
        params: list[object] = []
        if status:
            clauses.append("status=%s")
            params.append(status)
        if search:
            like = f"%{search}%"
            clauses.append("(title LIKE %s OR description LIKE %s OR task_code LIKE %s)")
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE {' AND '.join(clauses)} ORDER BY created_at DESC, task_id DESC",
                tuple(params),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def update(self, task: Task) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks SET title=%s, description=%s, category=%s, department=%s, status=%s
                WHERE task_id=%s
                """,
                (task.title, task.description, task.category, task.department, task.status.value, int(task.task_id)),
            )
            return cur.rowcount > 0

    def delete(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (int(task_id),))
            return cur.rowcount > 0

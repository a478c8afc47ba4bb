from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.task_service

    @app.route("/api/tasks", methods=["POST"], endpoint="tasks_create")
    def tasks_create():
        p = json_body()
        task = svc.create_task(
            title=p.get("title"),
            description=p.get("description"),
            category=p.get("category"),
            department=p.get("department"),
            status=p.get("status"),
        )
        return ok(task.to_dict(), message="Task created successfully", status=201)

    @app.route("/api/tasks", methods=["GET"], endpoint="tasks_list")
    def tasks_list():
        items = svc.list_tasks(status=request.args.get("status") or None, search=request.args.get("search") or None)
        return ok([t.to_dict() for t in items], count=len(items))

    @app.route("/api/tasks/stats", methods=["GET"], endpoint="tasks_stats")
    def tasks_stats():
        return ok(svc.stats())

    @app.route("/api/tasks/<int:task_id>", methods=["GET"], endpoint="tasks_get")
    def tasks_get(task_id: int):
        return ok(svc.get_task(task_id).to_dict())

    @app.route("/api/tasks/<int:task_id>", methods=["PUT", "PATCH"], endpoint="tasks_update")
    def tasks_update(task_id: int):
        return ok(svc.update_task(task_id, json_body()).to_dict(), message="Task updated successfully")

    @app.route("/api/tasks/<int:task_id>", methods=["DELETE"], endpoint="tasks_delete")
    def tasks_delete(task_id: int):
        task = svc.delete_task(task_id)
        return ok({"task_id": task.task_id, "task_code": task.task_code}, message="Task deleted successfully")

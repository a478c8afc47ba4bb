from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.staff_service

    @app.route("/api/staff", methods=["POST"], endpoint="staff_create")
    def staff_create():
        p = json_body()
        staff = svc.add_employee(
            first_name=p.get("first_name"),
            last_name=p.get("last_name"),
            email=p.get("email"),
            phone=p.get("phone"),
            role=p.get("role"),
            department=p.get("department"),
            status=p.get("status"),
            hire_date=p.get("hire_date"),
        )
        return ok(staff.to_dict(), message="Employee added successfully", status=201)

    @app.route("/api/staff", methods=["GET"], endpoint="staff_list")
    def staff_list():
        items = svc.list_employees(
            department=request.args.get("department") or None,
            status=request.args.get("status") or None,
            search=request.args.get("search") or None,
        )
        return ok([s.to_dict() for s in items], count=len(items))

    @app.route("/api/staff/check-email", methods=["GET"], endpoint="staff_check_email")
    def staff_check_email():
        return ok(svc.check_email(request.args.get("email", "")))

    @app.route("/api/staff/stats", methods=["GET"], endpoint="staff_stats")
    def staff_stats():
        return ok(svc.stats())

    @app.route("/api/staff/<int:staff_id>", methods=["GET"], endpoint="staff_get")
    def staff_get(staff_id: int):
        return ok(svc.get_employee(staff_id).to_dict())

    @app.route("/api/staff/<int:staff_id>", methods=["PUT", "PATCH"], endpoint="staff_update")
    def staff_update(staff_id: int):
        staff = svc.update_employee(staff_id, json_body())
        return ok(staff.to_dict(), message="Employee updated successfully")

    @app.route("/api/staff/<int:staff_id>/deactivate", methods=["PATCH", "POST"], endpoint="staff_deactivate")
    def staff_deactivate(staff_id: int):
        staff = svc.soft_delete_employee(staff_id)
        return ok(staff.to_dict(), message="Employee deactivated")

    @app.route("/api/staff/<int:staff_id>", methods=["DELETE"], endpoint="staff_delete")
    def staff_delete(staff_id: int):
        staff = svc.delete_employee(staff_id)
        return ok({"staff_id": staff.staff_id, "employee_id": staff.employee_id}, message="Employee deleted")

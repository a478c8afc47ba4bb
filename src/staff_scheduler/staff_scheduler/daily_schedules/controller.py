from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_datetime, parse_optional_datetime
from ..common.http import arg_int, json_body, ok
from ..container import Container
from ..schedules.controller import date_range_from_args, filters_from_args, register_common_routes


def register(app: Flask, container: Container) -> None:
    svc = container.daily_schedule_service
    reports = container.daily_reports
    prefix = "/api/daily-schedules"

    register_common_routes(app, svc, prefix=prefix, name="daily")

    @app.route(f"{prefix}/today", methods=["GET"], endpoint="daily_today")
    def daily_today():
        result = svc.today(staff_id=arg_int("staff_id"))
        items = [s.to_dict() for s in result["schedules"]]
        return ok(items, count=len(items), date=result["date"], summary=result["summary"])

    @app.route(f"{prefix}/range", methods=["GET"], endpoint="daily_range")
    def daily_range():
        start = parse_datetime(request.args.get("start_date"), "start_date")
        end = parse_datetime(request.args.get("end_date"), "end_date")
        result = svc.date_range(start=start, end=end, filters=filters_from_args(request.args))
        items = [s.to_dict() for s in result["schedules"]]
        return ok(items, count=len(items), period=result["period"])

    @app.route(f"{prefix}/stats", methods=["GET"], endpoint="daily_stats")
    def daily_stats():
        start, end = date_range_from_args(request.args)
        return ok(reports.daily_statistics(start=start, end=end))

    @app.route(f"{prefix}/week", methods=["POST"], endpoint="daily_week")
    def daily_week():
        result = svc.create_week_of_dailies(json_body(), created_by=request.headers.get("X-User-Id"))
        summary = result["summary"]
        return ok(
            result,
            message=f"Created {summary['successful_days']} daily schedules ({summary['failed_days']} failed)",
            status=201,
        )

    @app.route(f"{prefix}/staff/<int:staff_id>/workload", methods=["GET"], endpoint="daily_staff_workload")
    def daily_staff_workload(staff_id: int):
        day = parse_optional_datetime(request.args.get("date"), "date") or now_local()
        return ok(svc.staff_daily_workload(staff_id, day))

    @app.route(f"{prefix}/availability/<int:staff_id>", methods=["GET"], endpoint="daily_staff_availability")
    def daily_staff_availability(staff_id: int):
        day = parse_optional_datetime(request.args.get("date"), "date") or now_local()
        return ok(svc.check_staff_availability(staff_id, day, time_slot=request.args.get("time_slot") or None))

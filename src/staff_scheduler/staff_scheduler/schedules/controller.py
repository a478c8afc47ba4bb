from __future__ import annotations

import io
from datetime import timedelta

from flask import Flask, request, send_file

from ..common.datetime_utils import day_window, now_local, parse_datetime, parse_optional_datetime, start_of_day
from ..common.http import arg_int, json_body, ok
from ..core.constants import DEFAULT_PAGE_SIZE, DEFAULT_UPCOMING_DAYS
from ..core.exceptions import ValidationError
from ..container import Container
from .filters import ScheduleFilters
from .service import ScheduleService


def filters_from_args(args, *, default_limit: int = DEFAULT_PAGE_SIZE) -> ScheduleFilters:
    """Translate query-string parameters into a ScheduleFilters."""
    start = parse_optional_datetime(args.get("start_date"), "start_date")
    end = parse_optional_datetime(args.get("end_date"), "end_date")
    if args.get("date"):
        start, end = day_window(parse_datetime(args.get("date"), "date"))
    elif end is not None:
        end = start_of_day(end) + timedelta(days=1)

    schedule_type = args.get("schedule_type")
    limit = arg_int("limit", default_limit)
    if limit is not None and limit <= 0:
        raise ValidationError("limit must be positive")
    return ScheduleFilters(
        schedule_type=None if schedule_type in (None, "", "all") else schedule_type,
        status=args.get("status") or None,
        start=start,
        end=end,
        staff_id=arg_int("staff_id"),
        priority=args.get("priority") or None,
        department=args.get("department") or None,
        task_category=args.get("task_category") or None,
        time_slot=args.get("time_slot") or None,
        week_number=arg_int("week_number"),
        search=args.get("search") or None,
        page=arg_int("page", 1),
        limit=limit,
    )


def date_range_from_args(args) -> tuple:
    today = start_of_day(now_local())
    start = parse_optional_datetime(args.get("start_date"), "start_date") or today - timedelta(days=30)
    end = parse_optional_datetime(args.get("end_date"), "end_date") or today
    if end < start:
        raise ValidationError("end_date cannot be before start_date")
    return start, end


def register_common_routes(app: Flask, svc: ScheduleService, *, prefix: str, name: str) -> None:
    """Routes shared by both schedule books."""

    def created_by() -> str | None:
        return request.headers.get("X-User-Id") or json_body().get("created_by")

    @app.route(f"{prefix}", methods=["POST"], endpoint=f"{name}_create")
    def create():
        result = svc.create(json_body(), created_by=created_by())
        data = result.to_dict()
        message = "Schedule created successfully"
        if result.warnings:
            message += " with warnings"
        return ok(data, message=message, status=201, warnings=data["warnings"])

    @app.route(f"{prefix}", methods=["GET"], endpoint=f"{name}_list")
    def list_all():
        page = svc.list_schedules(filters_from_args(request.args))
        return ok([s.to_dict() for s in page["items"]], count=len(page["items"]), pagination=page["pagination"])

    @app.route(f"{prefix}/<schedule_id>", methods=["GET"], endpoint=f"{name}_get")
    def get(schedule_id: str):
        return ok(svc.get(schedule_id).to_dict())

    @app.route(f"{prefix}/<schedule_id>", methods=["PUT", "PATCH"], endpoint=f"{name}_update")
    def update(schedule_id: str):
        return ok(svc.update(schedule_id, json_body()).to_dict(), message="Schedule updated successfully")

    @app.route(f"{prefix}/<schedule_id>", methods=["DELETE"], endpoint=f"{name}_delete")
    def delete(schedule_id: str):
        return ok(svc.delete(schedule_id), message="Schedule deleted successfully")

    @app.route(
        f"{prefix}/<schedule_id>/assignments/<int:staff_id>",
        methods=["PATCH", "PUT"],
        endpoint=f"{name}_assignment_update",
    )
    @app.route(
        f"{prefix}/<schedule_id>/assignments/<int:staff_id>/status",
        methods=["PATCH", "PUT"],
        endpoint=f"{name}_assignment_status",
    )
    def update_assignment(schedule_id: str, staff_id: int):
        schedule = svc.update_assignment(schedule_id, staff_id, json_body())
        return ok(
            {"schedule_id": schedule.schedule_id, "assignment": schedule.find_assignment(staff_id).to_dict()},
            message="Assignment status updated successfully",
        )

    @app.route(f"{prefix}/<schedule_id>/notify", methods=["POST"], endpoint=f"{name}_notify")
    def notify(schedule_id: str):
        report = svc.notify(schedule_id)
        return ok(report.to_dict(), message="Notifications processed", warnings=list(report.warnings))

    @app.route(f"{prefix}/health", methods=["GET"], endpoint=f"{name}_health")
    def health():
        return ok(svc.health(), message="Schedule service is operational")


def register(app: Flask, container: Container) -> None:
    svc = container.schedule_service
    reports = container.schedule_reports
    prefix = "/api/schedules"

    register_common_routes(app, svc, prefix=prefix, name="schedules")

    @app.route(f"{prefix}/upcoming", methods=["GET"], endpoint="schedules_upcoming")
    def schedules_upcoming():
        items = svc.upcoming(
            days=arg_int("days", DEFAULT_UPCOMING_DAYS),
            schedule_type=request.args.get("schedule_type") or None,
        )
        return ok([s.to_dict() for s in items], count=len(items))

    @app.route(f"{prefix}/search", methods=["GET"], endpoint="schedules_search")
    def schedules_search():
        items = svc.search(request.args.get("q", ""), limit=arg_int("limit", 20))
        return ok([s.to_dict() for s in items], count=len(items))

    @app.route(f"{prefix}/staff/<int:staff_id>/workload", methods=["GET"], endpoint="schedules_staff_workload")
    def schedules_staff_workload(staff_id: int):
        start, end = date_range_from_args(request.args)
        return ok(svc.staff_workload(staff_id, start=start, end=end))

    @app.route(
        f"{prefix}/staff/<int:staff_id>/weekly/<int:week>/<int:year>",
        methods=["GET"],
        endpoint="schedules_staff_weekly",
    )
    def schedules_staff_weekly(staff_id: int, week: int, year: int):
        return ok(svc.staff_weekly_schedule(staff_id, week=week, year=year))

    @app.route(f"{prefix}/availability/<day>", methods=["GET"], endpoint="schedules_date_availability")
    def schedules_date_availability(day: str):
        return ok(
            svc.date_availability(
                parse_datetime(day, "date"),
                department=request.args.get("department") or None,
                schedule_type=request.args.get("schedule_type") or None,
            )
        )

    @app.route(f"{prefix}/recommendations/times", methods=["GET"], endpoint="schedules_recommended_times")
    def schedules_recommended_times():
        return ok(
            svc.recommended_times(
                parse_datetime(request.args.get("date"), "date"),
                duration=request.args.get("duration", 2),
                department=request.args.get("department") or None,
                schedule_type=request.args.get("schedule_type") or "daily",
            )
        )

    @app.route(
        f"{prefix}/check/consecutive/<int:staff_id>/<category>/<day>",
        methods=["GET"],
        endpoint="schedules_check_consecutive",
    )
    def schedules_check_consecutive(staff_id: int, category: str, day: str):
        return ok(svc.check_consecutive_week(staff_id, category, parse_datetime(day, "date")))

    @app.route(f"{prefix}/calendar/view", methods=["GET"], endpoint="schedules_calendar")
    def schedules_calendar():
        start, end = date_range_from_args(request.args)
        return ok(
            svc.calendar_view(
                start=start,
                end=end,
                department=request.args.get("department") or None,
                schedule_type=request.args.get("schedule_type") or None,
            )
        )

    @app.route(f"{prefix}/bulk/create", methods=["POST"], endpoint="schedules_bulk_create")
    def schedules_bulk_create():
        body = json_body()
        result = svc.bulk_create(body.get("schedules"), created_by=request.headers.get("X-User-Id"))
        status = 201 if result["created"] else 400
        return ok(result, message=f"{len(result['created'])} schedules created", status=status)

    @app.route(f"{prefix}/report", methods=["GET"], endpoint="schedules_report")
    def schedules_report():
        start, end = date_range_from_args(request.args)
        return ok(
            reports.report(
                start=start,
                end=end,
                department=request.args.get("department") or None,
                schedule_type=request.args.get("schedule_type") or None,
            )
        )

    @app.route(f"{prefix}/report/export", methods=["GET"], endpoint="schedules_report_export")
    def schedules_report_export():
        start, end = date_range_from_args(request.args)
        content = reports.export_report_xlsx(
            start=start,
            end=end,
            department=request.args.get("department") or None,
            schedule_type=request.args.get("schedule_type") or None,
        )
        return send_file(
            io.BytesIO(content),
            download_name=f"schedule_report_{start:%Y%m%d}_{end:%Y%m%d}.xlsx",
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    @app.route(f"{prefix}/stats/overview", methods=["GET"], endpoint="schedules_overview")
    def schedules_overview():
        return ok(reports.overview())

    @app.route(f"{prefix}/test-email", methods=["GET"], endpoint="schedules_test_email")
    def schedules_test_email():
        return ok(svc.test_email_service(), message="Email service is reachable")

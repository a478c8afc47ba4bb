from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.constants import CALENDAR_COLORS
from ..schedules.model import Assignment, Schedule
from .email_sender import Recipient

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).resolve().parent / "templates")),
    autoescape=select_autoescape(["html"]),
)


def letter_subject(schedule: Schedule) -> str:
    return f"New {schedule.schedule_type.value} assignment: {schedule.task_title} on {schedule.scheduled_date:%Y-%m-%d}"


def letter_context(schedule: Schedule, assignment: Assignment) -> dict:
    start = assignment.start_time or schedule.scheduled_date
    end = assignment.end_time or schedule.end_date
    return {
        "subject": letter_subject(schedule),
        "accent": CALENDAR_COLORS[schedule.schedule_type.value],
        "schedule_type": schedule.schedule_type.value,
        "staff_name": assignment.staff_name,
        "task_title": schedule.task_title,
        "task_description": schedule.task_description,
        "date": schedule.scheduled_date.strftime("%A, %B %d, %Y"),
        "start_time": start.strftime("%H:%M"),
        "end_time": end.strftime("%H:%M"),
        "estimated_hours": f"{schedule.estimated_hours:g}",
        "priority": schedule.priority.value,
        "location": schedule.location,
        "department": assignment.department or schedule.department,
        "schedule_id": schedule.schedule_id,
        "notes": schedule.notes,
    }


def recipient_for(schedule: Schedule, assignment: Assignment) -> Recipient:
    return Recipient(
        key=assignment.staff_id,
        email=assignment.email,
        name=assignment.staff_name,
        context=letter_context(schedule, assignment),
    )


def render_letter(recipient: Recipient) -> str:
    return _env.get_template("assignment_letter.html").render(**recipient.context)

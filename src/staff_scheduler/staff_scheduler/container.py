from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.metrics import ServiceMetrics
from .daily_schedules.service import DailyScheduleService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.dispatcher import NotificationDispatcher
from .notifications.email_sender import MailConfig, EmailSender
from .notifications.smtp_sender import SmtpEmailSender
from .recurrence.expander import RecurrenceExpander
from .recurrence.factory import RecurrenceStrategyFactory
from .reports.service import ScheduleReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository
from .staff.service import StaffService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    staff_repo: StaffRepository
    tasks_repo: TaskRepository
    schedules_repo: ScheduleRepository
    daily_schedules_repo: ScheduleRepository

    metrics: ServiceMetrics
    notifier: NotificationDispatcher

    staff_service: StaffService
    task_service: TaskService
    schedule_service: ScheduleService
    daily_schedule_service: DailyScheduleService
    schedule_reports: ScheduleReportService
    daily_reports: ScheduleReportService


def wire(
    *,
    conn: Optional[DatabaseConnection],
    staff_repo: StaffRepository,
    tasks_repo: TaskRepository,
    schedules_repo: ScheduleRepository,
    daily_schedules_repo: ScheduleRepository,
    sender: Optional[EmailSender] = None,
    strict_availability_default: bool = True,
) -> Container:
    """Assemble services around already-built repositories and an optional email sender."""
    metrics = ServiceMetrics()
    notifier = NotificationDispatcher(sender, metrics=metrics)
    expander = RecurrenceExpander(RecurrenceStrategyFactory())

    common = dict(
        notifier=notifier,
        metrics=metrics,
        expander=expander,
        strict_availability_default=strict_availability_default,
    )
    return Container(
        conn=conn,
        staff_repo=staff_repo,
        tasks_repo=tasks_repo,
        schedules_repo=schedules_repo,
        daily_schedules_repo=daily_schedules_repo,
        metrics=metrics,
        notifier=notifier,
        staff_service=StaffService(staff_repo),
        task_service=TaskService(tasks_repo),
        schedule_service=ScheduleService(schedules_repo, staff_repo, tasks_repo, **common),
        daily_schedule_service=DailyScheduleService(daily_schedules_repo, staff_repo, tasks_repo, **common),
        schedule_reports=ScheduleReportService(schedules_repo),
        daily_reports=ScheduleReportService(daily_schedules_repo),
    )


def build_container(
    *,
    db_config: dict,
    mail_config: Optional[dict] = None,
    email_delay_seconds: float = 0.5,
    strict_availability_default: bool = True,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    sender = None
    if mail_config:
        mail = MailConfig.from_dict(mail_config)
        if mail.is_configured:
            sender = SmtpEmailSender(mail, delay_seconds=email_delay_seconds)

    return wire(
        conn=conn,
        staff_repo=MySQLStaffRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn, table="schedules"),
        daily_schedules_repo=MySQLScheduleRepository(conn, table="daily_schedules"),
        sender=sender,
        strict_availability_default=strict_availability_default,
    )

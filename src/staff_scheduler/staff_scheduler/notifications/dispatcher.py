from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import AssignmentEmailStatus, ScheduleEmailStatus
from ..core.exceptions import ServiceUnavailableError
from ..core.metrics import ServiceMetrics
from ..schedules.model import Assignment, Schedule
from .email_sender import BulkSendResult, EmailSender
from .letters import letter_subject, recipient_for, render_letter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationReport:
    status: ScheduleEmailStatus
    sent: int = 0
    failed: int = 0
    unavailable: int = 0
    skipped: int = 0
    results: tuple[dict, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "sent": self.sent,
            "failed": self.failed,
            "unavailable": self.unavailable,
            "skipped": self.skipped,
            "results": list(self.results),
            "warnings": list(self.warnings),
        }


def aggregate_status(assignments) -> ScheduleEmailStatus:
    sent = sum(1 for a in assignments if a.email_status == AssignmentEmailStatus.SENT)
    if assignments and sent == len(assignments):
        return ScheduleEmailStatus.ALL_SENT
    if sent:
        return ScheduleEmailStatus.PARTIAL_SENT
    return ScheduleEmailStatus.FAILED


class NotificationDispatcher:
    """Sends assignment letters and records per-assignment delivery state.

    Assignments already marked as sent are left alone, so dispatching the same
    schedule twice does not send duplicates.
    """

    def __init__(
        self,
        sender: Optional[EmailSender],
        *,
        metrics: Optional[ServiceMetrics] = None,
        clock: Callable = now_local,
    ):
        self._sender = sender
        self._metrics = metrics
        self._clock = clock

    @property
    def available(self) -> bool:
        return self._sender is not None

    def verify(self) -> dict:
        if self._sender is None:
            raise ServiceUnavailableError("Email service is not configured")
        self._sender.verify()
        return {"status": "ok"}

    def dispatch(self, schedule: Schedule) -> tuple[Schedule, NotificationReport]:
        pending = [a for a in schedule.assignments if not a.notification_sent]
        skipped = len(schedule.assignments) - len(pending)
        if not pending:
            return schedule, NotificationReport(status=schedule.email_status, skipped=skipped)

        if self._sender is None:
            return self._mark_unavailable(schedule, pending, skipped, "Email service is not configured")

        recipients = [recipient_for(schedule, a) for a in pending]
        try:
            bulk = self._sender.send_bulk(recipients, letter_subject(schedule), render_letter)
        except ServiceUnavailableError as e:
            return self._mark_unavailable(schedule, pending, skipped, e.message)
        except Exception as e:
            logger.exception("Email transport failed for %s", schedule.schedule_id)
            return self._mark_unavailable(schedule, pending, skipped, f"Email transport error: {e}")

        return self._apply_results(schedule, bulk, skipped)

    def _apply_results(self, schedule: Schedule, bulk: BulkSendResult, skipped: int) -> tuple[Schedule, NotificationReport]:
        now = self._clock()
        updated: list[Assignment] = []
        results: list[dict] = []
        for a in schedule.assignments:
            res = bulk.for_key(a.staff_id)
            if res is None:
                updated.append(a)
                continue
            if res.success:
                a = replace(
                    a,
                    notification_sent=True,
                    notification_sent_at=now,
                    email_status=AssignmentEmailStatus.SENT,
                    message_id=res.message_id,
                    email_error=None,
                )
            else:
                a = replace(a, email_status=AssignmentEmailStatus.FAILED, email_error=res.error)
            updated.append(a)
            results.append(
                {"staff_id": a.staff_id, "email": a.email, "status": a.email_status.value, "message_id": res.message_id, "error": res.error}
            )

        status = aggregate_status(updated)
        schedule = replace(
            schedule,
            assignments=tuple(updated),
            email_status=status,
            email_sent=status == ScheduleEmailStatus.ALL_SENT,
            last_notification_sent=now if bulk.sent_count else schedule.last_notification_sent,
        )
        warnings = tuple(f"Email to {r['email']} failed: {r['error']}" for r in results if r["status"] == "failed")
        if self._metrics:
            self._metrics.record(emails_sent=bulk.sent_count, emails_failed=bulk.failed_count)
        logger.info(
            "Notifications for %s: %d sent, %d failed (%s)",
            schedule.schedule_id,
            bulk.sent_count,
            bulk.failed_count,
            status.value,
        )
        report = NotificationReport(
            status=status,
            sent=bulk.sent_count,
            failed=bulk.failed_count,
            skipped=skipped,
            results=tuple(results),
            warnings=warnings,
        )
        return schedule, report

    def _mark_unavailable(
        self, schedule: Schedule, pending: list[Assignment], skipped: int, reason: str
    ) -> tuple[Schedule, NotificationReport]:
        pending_ids = {a.staff_id for a in pending}
        assignments = tuple(
            replace(a, email_status=AssignmentEmailStatus.SERVICE_UNAVAILABLE, email_error=reason)
            if a.staff_id in pending_ids
            else a
            for a in schedule.assignments
        )
        status = aggregate_status(assignments)
        logger.warning("Notifications for %s not sent: %s", schedule.schedule_id, reason)
        if self._metrics:
            self._metrics.record(emails_failed=len(pending))
        schedule = replace(schedule, assignments=assignments, email_status=status, email_sent=False)
        report = NotificationReport(
            status=status,
            unavailable=len(pending),
            skipped=skipped,
            results=tuple(
                {"staff_id": a.staff_id, "email": a.email, "status": a.email_status.value, "message_id": None, "error": reason}
                for a in assignments
                if a.staff_id in pending_ids
            ),
            warnings=(f"Email notifications were not sent: {reason}",),
        )
        return schedule, report

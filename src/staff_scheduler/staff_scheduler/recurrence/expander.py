from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from ..common.datetime_utils import iso_week_number
from ..core.constants import MAX_RECURRING_INSTANCES
from ..core.enums import ScheduleEmailStatus, ScheduleStatus
from ..schedules.model import Schedule
from .factory import RecurrenceStrategyFactory

logger = logging.getLogger(__name__)


class RecurrenceExpander:
    """Materializes the child occurrences of a recurring schedule.

    Children start one step after the parent and stop at the recurrence end date
    (inclusive, compared by calendar date) or after MAX_RECURRING_INSTANCES.
    """

    def __init__(
        self,
        factory: Optional[RecurrenceStrategyFactory] = None,
        *,
        max_instances: int = MAX_RECURRING_INSTANCES,
    ):
        self._factory = factory or RecurrenceStrategyFactory()
        self._max_instances = max_instances

    def expand(self, parent: Schedule, *, new_id: Callable[[Schedule], str]) -> list[Schedule]:
        strategy = self._factory.for_recurrence(parent.recurrence)
        if strategy is None:
            return []

        until = parent.recurrence_end_date or strategy.default_end(parent.scheduled_date)
        duration = parent.end_date - parent.scheduled_date
        children: list[Schedule] = []

        current = parent.scheduled_date
        while len(children) < self._max_instances:
            current = strategy.next_occurrence(current)
            if current.date() > until.date():
                break
            draft = replace(
                parent,
                scheduled_date=current,
                end_date=current + duration,
                week_number=iso_week_number(current),
                parent_schedule_id=parent.schedule_id,
                status=ScheduleStatus.SCHEDULED,
                assignments=tuple(a.reset_progress(current - parent.scheduled_date) for a in parent.assignments),
                email_sent=False,
                email_status=ScheduleEmailStatus.NOT_SENT,
                last_notification_sent=None,
                completed_at=None,
                created_at=None,
                updated_at=None,
            )
            children.append(replace(draft, schedule_id=new_id(draft)))

        logger.info(
            "Expanded %s recurrence of %s into %d occurrences", parent.recurrence.value, parent.schedule_id, len(children)
        )
        return children


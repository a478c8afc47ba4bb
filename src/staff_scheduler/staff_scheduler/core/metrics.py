from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ServiceMetrics:
    """Counters owned by the container and shared by the schedule services."""

    schedules_created: int = 0
    conflicts_prevented: int = 0
    staff_skipped: int = 0
    emails_sent: int = 0
    emails_failed: int = 0
    started_at: datetime = field(default_factory=datetime.now)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, **increments: int) -> None:
        with self._lock:
            for name, value in increments.items():
                setattr(self, name, getattr(self, name) + int(value))

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "schedules_created": self.schedules_created,
                "conflicts_prevented": self.conflicts_prevented,
                "staff_skipped": self.staff_skipped,
                "emails_sent": self.emails_sent,
                "emails_failed": self.emails_failed,
                "uptime_seconds": int((datetime.now() - self.started_at).total_seconds()),
            }

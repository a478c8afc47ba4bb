"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

MAX_RECURRING_INSTANCES = 50

# Horizon (days) used when a recurring schedule has no explicit end date.
DEFAULT_RECURRENCE_HORIZON_DAYS = {
    "daily": 30,
    "weekdays": 90,
    "weekly": 365,
}

# (start, end, hours) per time slot.
TIME_SLOT_WINDOWS = {
    "morning": (time(9, 0), time(12, 0), 3.0),
    "afternoon": (time(13, 0), time(17, 0), 4.0),
    "full-day": (time(9, 0), time(17, 0), 8.0),
    "custom": (time(9, 0), time(17, 0), 8.0),
}

WORK_DAY_START_HOUR = 9
WORK_DAY_END_HOUR = 17

MIN_ESTIMATED_HOURS = 0.5
MAX_ESTIMATED_HOURS = 24.0

DEFAULT_LOCATION = "Office"
DEFAULT_SCHEDULE_DEPARTMENT = "General"
DEFAULT_TASK_CATEGORY = "general"

DEFAULT_PAGE_SIZE = 50
DEFAULT_UPCOMING_DAYS = 7
RECENT_HIRE_DAYS = 30
RECENT_SCHEDULES_LIMIT = 5
ROTATION_LOOKBACK_DAYS = 7

WEEKLY_PREFIX = "WKS"
DAILY_PREFIX = "DYS"
DAILY_BOOK_PREFIX = "DAY"

CALENDAR_COLORS = {
    "weekly": "#4F46E5",
    "daily": "#10B981",
}

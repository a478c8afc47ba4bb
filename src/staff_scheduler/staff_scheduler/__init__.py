"""Staff Scheduler package.

Organized by feature modules (staff, tasks, schedules, daily_schedules, ...)
with a thin Flask JSON controller layer on top of service/repository layers.
"""

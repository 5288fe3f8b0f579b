"""
Scheduled notification jobs, plus the on-demand single-pair reminder.

Each job is run-to-completion and safe to invoke repeatedly: the dedup
ledger decides what has already gone out.
"""

import logging

from .overdue import OverdueAlertJob, send_overdue_alerts
from .single import SingleReminderResult, send_task_reminder, was_reminded_today
from .volunteer import VolunteerReminderJob, send_volunteer_reminders

logger = logging.getLogger(__name__)


def run_daily_notifications(engine, today=None):
    """
    Volunteer reminders, then overdue escalation, under one shared deadline.
    Returns (reminder_summary, overdue_summary).
    """
    deadline = engine.start_deadline()
    reminders = send_volunteer_reminders(engine, today=today, deadline=deadline)
    overdue = send_overdue_alerts(engine, today=today, deadline=deadline)

    logger.info(
        "Daily run: sent %s reminder emails and %s overdue alerts",
        reminders.sent, overdue.sent,
    )
    return reminders, overdue


__all__ = [
    "OverdueAlertJob",
    "SingleReminderResult",
    "VolunteerReminderJob",
    "run_daily_notifications",
    "send_overdue_alerts",
    "send_task_reminder",
    "send_volunteer_reminders",
    "was_reminded_today",
]

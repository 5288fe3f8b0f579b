"""
Reminder engine service layer.

    eligibility -> who is due a notification
    ledger      -> what has already been claimed / sent
    dispatcher  -> bounded, fault-isolated fan-out
    reminders   -> the volunteer reminder and overdue alert jobs
    senders     -> SMTP (Django mail) or Brevo delivery
    assignment  -> notice sent when a task is assigned
"""

# =====================================================
# ENGINE
# =====================================================
from .engine import ReminderEngine

# =====================================================
# JOBS
# =====================================================
from .reminders import (
    run_daily_notifications,
    send_overdue_alerts,
    send_task_reminder,
    send_volunteer_reminders,
    was_reminded_today,
)

__all__ = [
    "ReminderEngine",
    "run_daily_notifications",
    "send_overdue_alerts",
    "send_task_reminder",
    "send_volunteer_reminders",
    "was_reminded_today",
]

"""
notifications/services/reminders/single.py

On-demand reminder for one (task, volunteer) pair.

Shares the daily reminder key with the scheduled job, so a pair reminded
here is skipped by the scheduled run the same day and vice versa.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError
from django.utils import timezone

from notifications.exceptions import LedgerError, RecordNotFound
from notifications.services.messages import build_volunteer_reminder
from volunteers.models import Task, TaskAssignment, Volunteer

logger = logging.getLogger(__name__)

TASK_COMPLETED = "Email not sent: Task is already completed"
NO_EMAIL_ADDRESS = "Email not sent: Volunteer has no email address"
ALREADY_SENT_TODAY = "Email already sent today for this task"


@dataclass
class SingleReminderResult:
    sent: bool
    message: str
    delivery_id: str = ""


def _load_pair(task_id, volunteer_id):
    task = Task.objects.filter(pk=task_id).first()
    if task is None:
        raise RecordNotFound("Task not found")

    volunteer = Volunteer.objects.filter(pk=volunteer_id).first()
    if volunteer is None:
        raise RecordNotFound("Volunteer not found")

    if not TaskAssignment.objects.filter(task=task, volunteer=volunteer).exists():
        raise RecordNotFound("Task is not assigned to this volunteer")

    return task, volunteer


def was_reminded_today(ledger, task_id, volunteer_id, today=None):
    return ledger.was_notified(task_id, volunteer_id, on=today)


def send_task_reminder(engine, task_id, volunteer_id, today=None):
    """
    Remind one volunteer about one task, at most once per calendar day.

    Raises RecordNotFound for unknown ids, LedgerError when the claim cannot
    be made, and whatever the sender raises (the claim is released first).
    """
    today = today or timezone.localdate()
    task, volunteer = _load_pair(task_id, volunteer_id)

    if task.is_completed:
        return SingleReminderResult(sent=False, message=TASK_COMPLETED)

    if not (volunteer.email or "").strip():
        return SingleReminderResult(sent=False, message=NO_EMAIL_ADDRESS)

    ledger = engine.reminder_ledger
    claim = ledger.claim(task.pk, volunteer.pk, on=today)
    if claim is None:
        logger.info("Single reminder skipped (already sent today): task %s -> %s", task.pk, volunteer.email)
        return SingleReminderResult(sent=False, message=ALREADY_SENT_TODAY)

    try:
        message = build_volunteer_reminder(volunteer, [task])
        delivery_id = engine.sender.send(message)
    except Exception:
        try:
            ledger.release(claim)
        except LedgerError as exc:
            logger.error("Could not release reminder claim %s: %s", claim.entry_id, exc)
        raise

    try:
        Volunteer.objects.filter(pk=volunteer.pk).update(last_reminder_sent=timezone.now())
    except DatabaseError as exc:
        logger.warning("Failed to update last_reminder_sent for %s: %s", volunteer.email, exc)

    try:
        ledger.record(claim, delivery_id)
    except LedgerError as exc:
        logger.warning(
            "Reminder sent to %s for task %s but ledger record failed: %s",
            volunteer.email, task.pk, exc,
        )

    logger.info("Single reminder sent to %s for task %s (delivery id %s)", volunteer.email, task.pk, delivery_id)
    return SingleReminderResult(
        sent=True,
        message=f"Email successfully sent to {volunteer.email}",
        delivery_id=delivery_id or "",
    )

"""
notifications/services/assignment.py

Immediate email to a volunteer when a task is assigned to them.

The notice takes the (task, volunteer, today) reminder key, so the daily
reminder does not repeat it the same day. Failures are logged and never
propagate to the code that saved the assignment.
"""

import logging

from django.conf import settings

from notifications.exceptions import ReminderEngineError
from notifications.services.ledger import ReminderLedger
from notifications.services.messages import build_assignment_email
from notifications.services.senders import get_sender
from volunteers.models import TaskAssignment

logger = logging.getLogger(__name__)


def assignment_emails_enabled():
    return bool(getattr(settings, "SEND_ASSIGNMENT_EMAILS", False))


# ============================================================
# ASSIGNMENT NOTICE (EMAIL)
# ============================================================

def send_assignment_email(assignment_id, *, sender=None, ledger=None, today=None):
    """
    Returns the delivery id, or None when nothing was sent.
    """
    assignment = (
        TaskAssignment.objects
        .select_related("task", "volunteer")
        .filter(pk=assignment_id)
        .first()
    )
    if assignment is None:
        logger.info("Assignment %s no longer exists; notice not sent", assignment_id)
        return None

    task, volunteer = assignment.task, assignment.volunteer

    if task.is_completed or assignment.completed:
        logger.info("Assignment notice skipped (task completed): task %s", task.pk)
        return None

    if not (volunteer.email or "").strip():
        logger.info("Assignment notice skipped (no email): volunteer %s", volunteer.pk)
        return None

    ledger = ledger or ReminderLedger()

    try:
        sender = sender or get_sender()
        claim = ledger.claim(task.pk, volunteer.pk, on=today)
    except ReminderEngineError as exc:
        logger.error("Assignment notice for task %s not sent: %s", task.pk, exc)
        return None

    if claim is None:
        logger.info("Assignment notice skipped (already emailed today): %s", volunteer.email)
        return None

    try:
        delivery_id = sender.send(build_assignment_email(volunteer, task))
    except Exception as exc:
        logger.error("Assignment notice to %s failed: %s", volunteer.email, exc)
        try:
            ledger.release(claim)
        except ReminderEngineError as release_exc:
            logger.error("Could not release reminder claim %s: %s", claim.entry_id, release_exc)
        return None

    try:
        ledger.record(claim, delivery_id)
    except ReminderEngineError as exc:
        # Delivered but not recorded: the claim still blocks a repeat today.
        logger.warning("Assignment notice sent to %s but ledger record failed: %s", volunteer.email, exc)

    logger.info("Assignment notice sent to %s for task %s", volunteer.email, task.pk)
    return delivery_id

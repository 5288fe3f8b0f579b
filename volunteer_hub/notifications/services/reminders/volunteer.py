"""
notifications/services/reminders/volunteer.py

Consolidated reminder to each volunteer listing every incomplete task.

Run shape (run-to-completion, no retries inside a run):
    resolve  -> every volunteer with their incomplete tasks
    filter   -> drop no-email / nothing open / already notified today
    dispatch -> claim (task, volunteer, today) keys, send one message,
                stamp last_reminder_sent, record the delivery id
    summarize

A failed send voids its claims, so the next scheduled run picks the
volunteer up again.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError
from django.utils import timezone

from notifications.exceptions import LedgerError
from notifications.models import NotificationKind
from notifications.services.dispatcher import dispatch
from notifications.services.messages import build_volunteer_reminder
from notifications.services.summary import (
    ALREADY_CLAIMED,
    ALREADY_NOTIFIED,
    LEDGER_UNAVAILABLE,
    NO_EMAIL,
    NO_INCOMPLETE_TASKS,
    DeliveryOutcome,
    JobSummary,
)
from volunteers.models import Volunteer

logger = logging.getLogger(__name__)


@dataclass
class PendingReminder:
    volunteer: Volunteer
    tasks: list


class VolunteerReminderJob:

    def __init__(self, engine):
        self.engine = engine
        self.ledger = engine.reminder_ledger

    # ============================================================
    # FILTER
    # ============================================================

    def pending_tasks(self, group, today):
        """
        Tasks in the group without a reminder today.
        Raises LedgerError when any lookup cannot be completed.
        """
        return [
            task for task in group.tasks
            if not self.ledger.was_notified(task.pk, group.volunteer.pk, on=today)
        ]

    def select(self, groups, summary, today):
        pending = []

        for group in groups:
            summary.processed += 1
            volunteer = group.volunteer

            if not group.has_email:
                summary.skip(NO_EMAIL)
                logger.info("Skipped (no email): volunteer %s", volunteer.pk)
                continue

            if not group.tasks:
                summary.skip(NO_INCOMPLETE_TASKS)
                logger.info("Skipped (no incomplete tasks): %s", volunteer.email)
                continue

            try:
                tasks = self.pending_tasks(group, today)
            except LedgerError as exc:
                summary.skip(LEDGER_UNAVAILABLE)
                logger.error("Skipped (ledger lookup failed) %s: %s", volunteer.email, exc)
                continue

            if not tasks:
                summary.skip(ALREADY_NOTIFIED)
                logger.info("Skipped (already reminded today): %s", volunteer.email)
                continue

            pending.append(PendingReminder(volunteer=volunteer, tasks=tasks))

        return pending

    # ============================================================
    # DELIVER (RUNS ON DISPATCHER WORKERS)
    # ============================================================

    def _release_all(self, claims):
        for claim in claims:
            try:
                self.ledger.release(claim)
            except LedgerError as exc:
                logger.error("Could not release reminder claim %s: %s", claim.entry_id, exc)

    def deliver(self, item, today):
        volunteer = item.volunteer
        claims = []
        lost = False

        try:
            for task in item.tasks:
                claim = self.ledger.claim(task.pk, volunteer.pk, on=today)
                if claim is None:
                    lost = True
                    break
                claims.append((task, claim))
        except LedgerError as exc:
            self._release_all(c for _, c in claims)
            logger.error("Skipped (ledger claim failed) %s: %s", volunteer.email, exc)
            return DeliveryOutcome.skipped(LEDGER_UNAVAILABLE)

        # All or nothing: another run holding any key owns this volunteer.
        if lost:
            self._release_all(c for _, c in claims)
            logger.info("Skipped (claimed by another run): %s", volunteer.email)
            return DeliveryOutcome.skipped(ALREADY_CLAIMED)

        try:
            message = build_volunteer_reminder(volunteer, [task for task, _ in claims])
            delivery_id = self.engine.sender.send(message)
        except Exception:
            self._release_all(c for _, c in claims)
            raise

        now = timezone.now()
        try:
            Volunteer.objects.filter(pk=volunteer.pk).update(last_reminder_sent=now)
        except DatabaseError as exc:
            logger.warning("Failed to update last_reminder_sent for %s: %s", volunteer.email, exc)

        for task, claim in claims:
            try:
                self.ledger.record(claim, delivery_id)
            except LedgerError as exc:
                # Delivered but not recorded: the claim still blocks a re-send today.
                logger.warning(
                    "Reminder sent to %s for task %s but ledger record failed: %s",
                    volunteer.email, task.pk, exc,
                )

        logger.info(
            "Reminder sent to %s for %s task(s) (delivery id %s)",
            volunteer.email, len(claims), delivery_id,
        )
        return DeliveryOutcome.delivered()

    # ============================================================
    # RUN
    # ============================================================

    def run(self, today=None, deadline=None):
        if deadline is None:
            deadline = self.engine.start_deadline()
        today = today or timezone.localdate()
        summary = JobSummary(kind=NotificationKind.REMINDER)

        logger.info("Starting volunteer reminder job for %s", today)

        groups = self.engine.resolver.reminder_groups()
        pending = self.select(groups, summary, today)

        report = dispatch(
            pending,
            lambda item: self.deliver(item, today),
            concurrency=self.engine.concurrency,
            deadline=deadline,
            name="volunteer-reminders",
        )

        for result in report.results:
            volunteer = result.item.volunteer
            if not result.ok:
                summary.add_error(
                    volunteer_id=volunteer.pk,
                    email=volunteer.email,
                    error=result.error,
                )
            elif result.outcome.sent:
                summary.sent += 1
            else:
                summary.skip(result.outcome.reason)

        summary.not_started = len(report.not_started)
        summary.timed_out = report.timed_out
        summary.finish()

        logger.info(
            "Volunteer reminder job done in %sms: processed=%s sent=%s failed=%s skipped=%s",
            summary.duration_ms, summary.processed, summary.sent, summary.failed, summary.skipped,
        )
        return summary


def send_volunteer_reminders(engine, today=None, deadline=None):
    return VolunteerReminderJob(engine).run(today=today, deadline=deadline)

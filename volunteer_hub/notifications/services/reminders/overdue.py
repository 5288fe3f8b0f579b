"""
notifications/services/reminders/overdue.py

Escalates past-due work to every configured admin recipient.

Each (task, volunteer) pair is fanned out into one alert per admin, and each
(task, volunteer, admin) triple is deduplicated on its own: a pair already
alerted to some admins still goes to the ones that are missing.
"""

import logging
from dataclasses import dataclass

from django.utils import timezone

from notifications.exceptions import LedgerError
from notifications.models import NotificationKind
from notifications.services.dispatcher import dispatch
from notifications.services.messages import build_overdue_alert
from notifications.services.summary import (
    ALREADY_CLAIMED,
    ALREADY_NOTIFIED,
    LEDGER_UNAVAILABLE,
    NO_ADMIN_RECIPIENTS,
    DeliveryOutcome,
    JobSummary,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingAlert:
    task: object
    volunteer: object
    admin_email: str


class OverdueAlertJob:

    def __init__(self, engine):
        self.engine = engine
        self.ledger = engine.overdue_ledger

    def select(self, pairs, summary):
        admins = self.engine.admin_recipients
        pending = []

        if not admins:
            logger.error(
                "No admin recipients configured (ADMIN_ALERT_EMAILS); "
                "%s overdue assignments not escalated", len(pairs),
            )
            for _ in pairs:
                summary.processed += 1
                summary.skip(NO_ADMIN_RECIPIENTS)
            return pending

        for pair in pairs:
            for admin_email in admins:
                summary.processed += 1

                try:
                    alerted = self.ledger.was_notified(
                        pair.task.pk, pair.volunteer.pk, admin_email=admin_email,
                    )
                except LedgerError as exc:
                    summary.skip(LEDGER_UNAVAILABLE)
                    logger.error(
                        "Skipped overdue alert (ledger lookup failed) task %s -> %s: %s",
                        pair.task.pk, admin_email, exc,
                    )
                    continue

                if alerted:
                    summary.skip(ALREADY_NOTIFIED)
                    logger.debug(
                        "Overdue alert already sent: task %s, volunteer %s -> %s",
                        pair.task.pk, pair.volunteer.pk, admin_email,
                    )
                    continue

                pending.append(
                    PendingAlert(task=pair.task, volunteer=pair.volunteer, admin_email=admin_email)
                )

        return pending

    def deliver(self, item):
        try:
            claim = self.ledger.claim(
                item.task.pk, item.volunteer.pk, admin_email=item.admin_email,
            )
        except LedgerError as exc:
            logger.error("Skipped overdue alert (ledger claim failed) -> %s: %s", item.admin_email, exc)
            return DeliveryOutcome.skipped(LEDGER_UNAVAILABLE)

        if claim is None:
            return DeliveryOutcome.skipped(ALREADY_CLAIMED)

        message = build_overdue_alert(item.task, item.volunteer, item.admin_email)

        try:
            delivery_id = self.engine.sender.send(message)
        except Exception:
            try:
                self.ledger.release(claim)
            except LedgerError as exc:
                logger.error("Could not release overdue claim %s: %s", claim.entry_id, exc)
            raise

        try:
            self.ledger.record(claim, delivery_id)
        except LedgerError as exc:
            logger.warning(
                "Overdue alert sent to %s for task %s but ledger record failed: %s",
                item.admin_email, item.task.pk, exc,
            )

        logger.info(
            "Overdue alert sent to %s for task %s (volunteer %s, delivery id %s)",
            item.admin_email, item.task.pk, item.volunteer.pk, delivery_id,
        )
        return DeliveryOutcome.delivered()

    def run(self, today=None, deadline=None):
        if deadline is None:
            deadline = self.engine.start_deadline()
        today = today or timezone.localdate()
        summary = JobSummary(kind=NotificationKind.OVERDUE_ALERT)

        logger.info("Starting overdue alert job for %s", today)

        pairs = self.engine.resolver.overdue_pairs(today=today)
        pending = self.select(pairs, summary)

        report = dispatch(
            pending,
            self.deliver,
            concurrency=self.engine.concurrency,
            deadline=deadline,
            name="overdue-alerts",
        )

        for result in report.results:
            if not result.ok:
                summary.add_error(
                    volunteer_id=result.item.volunteer.pk,
                    email=result.item.admin_email,
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
            "Overdue alert job done in %sms: %s overdue pairs, sent=%s failed=%s skipped=%s",
            summary.duration_ms, len(pairs), summary.sent, summary.failed, summary.skipped,
        )
        return summary


def send_overdue_alerts(engine, today=None, deadline=None):
    return OverdueAlertJob(engine).run(today=today, deadline=deadline)

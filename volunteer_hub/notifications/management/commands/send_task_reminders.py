"""
notifications/management/commands/send_task_reminders.py

Scheduled command (APScheduler job, system cron, or by hand).

- Consolidated reminder to every volunteer with incomplete tasks
- Optional overdue escalation to the configured admins (--overdue)

Idempotent: the dedup ledger makes repeated runs on the same day send
nothing new.
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from notifications.exceptions import ReminderEngineError
from notifications.services import (
    ReminderEngine,
    send_overdue_alerts,
    send_volunteer_reminders,
)


class Command(BaseCommand):
    help = "Send volunteer task reminders (and optionally overdue admin alerts)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--overdue",
            action="store_true",
            help="Also send overdue task alerts to admins",
        )
        parser.add_argument(
            "--skip-reminders",
            action="store_true",
            help="Do not send volunteer reminders (use with --overdue)",
        )

    def handle(self, *args, **options):
        now = timezone.now()

        self.stdout.write(
            self.style.NOTICE(
                f"[{now:%Y-%m-%d %H:%M:%S}] Starting scheduled task reminders"
            )
        )

        try:
            engine = ReminderEngine.from_settings()
            deadline = engine.start_deadline()

            summaries = []
            if not options["skip_reminders"]:
                summaries.append(send_volunteer_reminders(engine, deadline=deadline))
            if options["overdue"]:
                summaries.append(send_overdue_alerts(engine, deadline=deadline))
        except ReminderEngineError as exc:
            raise CommandError(str(exc)) from exc

        for summary in summaries:
            style = self.style.SUCCESS if summary.success and not summary.failed else self.style.WARNING
            self.stdout.write(style(summary.describe()))

        self.stdout.write(
            self.style.SUCCESS(
                f"[{now:%Y-%m-%d %H:%M:%S}] Completed: "
                f"{sum(s.sent for s in summaries)} emails sent, "
                f"{sum(s.failed for s in summaries)} failed"
            )
        )

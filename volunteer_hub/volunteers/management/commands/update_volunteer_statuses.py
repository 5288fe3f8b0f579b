"""
volunteers/management/commands/update_volunteer_statuses.py

Recompute Active / Inactive for every volunteer from assignment activity.
Safe to run repeatedly: unchanged volunteers are not written.
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from volunteers.services import update_volunteer_statuses


class Command(BaseCommand):
    help = "Mark volunteers Active or Inactive based on task activity"

    def handle(self, *args, **options):
        now = timezone.now()

        self.stdout.write(
            self.style.NOTICE(
                f"[{now:%Y-%m-%d %H:%M:%S}] Starting volunteer status update"
            )
        )

        result = update_volunteer_statuses(now=now)

        for change in result.changes:
            self.stdout.write(
                f"  {change.volunteer_name}: {change.previous_status} -> "
                f"{change.new_status} ({change.reason})"
            )

        for error in result.errors:
            self.stdout.write(self.style.ERROR(f"  {error}"))

        style = self.style.SUCCESS if result.success else self.style.WARNING
        self.stdout.write(
            style(
                f"[{now:%Y-%m-%d %H:%M:%S}] Completed: "
                f"{result.checked} checked, {result.changed} changed"
            )
        )

"""
notifications/services/eligibility.py

Answers "who needs a notification right now?" from the record store.

- reminder:      every volunteer, with the incomplete tasks assigned to them
                 (one consolidated message per volunteer)
- overdue_alert: every (task, volunteer) pair whose task is incomplete and
                 due strictly before today

Store failures are fatal for the run: nothing partial is returned.
"""

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError
from django.db.models import F, Prefetch
from django.utils import timezone

from notifications.exceptions import ResolutionError
from notifications.models import NotificationKind
from volunteers.models import Task, TaskAssignment, Volunteer

logger = logging.getLogger(__name__)


@dataclass
class ReminderGroup:
    """A volunteer and every incomplete task assigned to them."""

    volunteer: Volunteer
    tasks: list = field(default_factory=list)

    @property
    def has_email(self):
        return bool(self.volunteer.email)


@dataclass(frozen=True)
class OverduePair:
    task: Task
    volunteer: Volunteer


def _open_assignments():
    return (
        TaskAssignment.objects
        .select_related("task")
        .exclude(task__status=Task.Status.COMPLETED)
        .order_by(F("task__due_date").asc(nulls_last=True), "task_id")
    )


class EligibilityResolver:
    """
    Read-only view over Volunteer / Task / TaskAssignment.
    """

    def resolve(self, kind, *, today=None):
        if kind == NotificationKind.REMINDER:
            return self.reminder_groups()
        if kind == NotificationKind.OVERDUE_ALERT:
            return self.overdue_pairs(today=today)
        raise ValueError(f"Unknown notification kind: {kind!r}")

    def reminder_groups(self):
        """
        One group per volunteer, including volunteers with nothing open,
        so the orchestrator can account for them as skipped.
        """
        try:
            volunteers = list(
                Volunteer.objects
                .prefetch_related(
                    Prefetch(
                        "assignments",
                        queryset=_open_assignments(),
                        to_attr="open_assignments",
                    )
                )
                .order_by("id")
            )
        except DatabaseError as exc:
            logger.error("Reminder eligibility query failed: %s", exc)
            raise ResolutionError(f"Failed to fetch task assignments: {exc}") from exc

        groups = [
            ReminderGroup(
                volunteer=volunteer,
                tasks=[a.task for a in volunteer.open_assignments],
            )
            for volunteer in volunteers
        ]

        logger.info(
            "Resolved %s volunteers, %s with incomplete tasks",
            len(groups), sum(1 for g in groups if g.tasks),
        )
        return groups

    def overdue_pairs(self, *, today=None):
        """
        Date-only comparison: a task due today is not overdue,
        a task without a due date never is.
        """
        today = today or timezone.localdate()

        try:
            assignments = list(
                _open_assignments()
                .select_related("volunteer")
                .filter(
                    task__due_date__isnull=False,
                    task__due_date__lt=today,
                )
            )
        except DatabaseError as exc:
            logger.error("Overdue eligibility query failed: %s", exc)
            raise ResolutionError(f"Failed to fetch overdue assignments: {exc}") from exc

        pairs = [OverduePair(task=a.task, volunteer=a.volunteer) for a in assignments]
        logger.info("Resolved %s overdue task assignments (today=%s)", len(pairs), today)
        return pairs

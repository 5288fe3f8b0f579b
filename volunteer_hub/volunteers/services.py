"""
volunteers/services.py

Activity-based volunteer status maintenance.

Rules:
- Active while any assigned task is not Completed
- Active while assigned to something within the inactivity window
- Inactive otherwise
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.db import DatabaseError
from django.db.models import Exists, OuterRef
from django.utils import timezone

from .models import Task, TaskAssignment, Volunteer

logger = logging.getLogger(__name__)


@dataclass
class StatusChange:
    volunteer_id: int
    volunteer_name: str
    previous_status: str
    new_status: str
    reason: str


@dataclass
class StatusUpdateResult:
    checked: int = 0
    changes: list = field(default_factory=list)
    errors: list = field(default_factory=list)

    @property
    def changed(self):
        return len(self.changes)

    @property
    def success(self):
        return not self.errors

    def as_dict(self):
        return {
            "success": self.success,
            "totalVolunteersChecked": self.checked,
            "totalStatusChanges": self.changed,
            "statusChanges": [
                {
                    "volunteerId": c.volunteer_id,
                    "volunteerName": c.volunteer_name,
                    "previousStatus": c.previous_status,
                    "newStatus": c.new_status,
                    "reason": c.reason,
                }
                for c in self.changes
            ],
            "errors": self.errors,
        }


def desired_status(*, has_incomplete_tasks, has_recent_assignment):
    """Return (status, reason) for a volunteer's current activity."""
    if has_incomplete_tasks:
        return Volunteer.Status.ACTIVE, "Has ongoing incomplete tasks"
    if has_recent_assignment:
        return Volunteer.Status.ACTIVE, "Recent task assignment"
    return Volunteer.Status.INACTIVE, "No recent assignments and no incomplete tasks"


def update_volunteer_statuses(now=None):
    """
    Recompute every volunteer's status and write only the ones that changed.

    A failure on one volunteer is recorded and does not stop the others.
    A failure to load the volunteer list is fatal and propagates.
    """
    now = now or timezone.now()
    cutoff = now - timedelta(days=settings.VOLUNTEER_INACTIVE_AFTER_DAYS)
    result = StatusUpdateResult()

    incomplete = TaskAssignment.objects.filter(
        volunteer=OuterRef("pk"),
    ).exclude(task__status=Task.Status.COMPLETED)

    recent = TaskAssignment.objects.filter(
        volunteer=OuterRef("pk"),
        assigned_at__gte=cutoff,
    )

    volunteers = list(
        Volunteer.objects.annotate(
            has_incomplete=Exists(incomplete),
            has_recent=Exists(recent),
        )
    )
    result.checked = len(volunteers)

    for volunteer in volunteers:
        new_status, reason = desired_status(
            has_incomplete_tasks=volunteer.has_incomplete,
            has_recent_assignment=volunteer.has_recent,
        )

        if volunteer.status == new_status:
            continue

        try:
            Volunteer.objects.filter(pk=volunteer.pk).update(status=new_status)
        except DatabaseError as exc:
            logger.error("Failed to update status for volunteer %s: %s", volunteer.pk, exc)
            result.errors.append(f"Failed to update volunteer {volunteer.pk}: {exc}")
            continue

        result.changes.append(
            StatusChange(
                volunteer_id=volunteer.pk,
                volunteer_name=volunteer.full_name,
                previous_status=volunteer.status,
                new_status=new_status,
                reason=reason,
            )
        )
        logger.info(
            "Volunteer %s (%s): %s -> %s (%s)",
            volunteer.pk, volunteer.full_name, volunteer.status, new_status, reason,
        )

    logger.info(
        "Volunteer status job checked %s volunteers, changed %s",
        result.checked, result.changed,
    )
    return result

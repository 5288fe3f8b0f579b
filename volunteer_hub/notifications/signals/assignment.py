# notifications/signals/assignment.py

from functools import partial

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from notifications.services.assignment import assignment_emails_enabled, send_assignment_email
from volunteers.models import TaskAssignment


@receiver(post_save, sender=TaskAssignment)
def task_assigned_email(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return

    if not assignment_emails_enabled():
        return

    # Send only once the assignment row is committed.
    transaction.on_commit(partial(send_assignment_email, instance.pk))

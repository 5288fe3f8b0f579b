from django.db import models
from django.utils import timezone

from volunteers.models import Task, Volunteer


class NotificationKind(models.TextChoices):
    REMINDER = "reminder", "Volunteer reminder"
    OVERDUE_ALERT = "overdue_alert", "Overdue admin alert"


class LedgerEntry(models.Model):
    """
    An append-only "already notified" fact.

    A row is written as a CLAIM before the send, promoted to SENT with the
    provider's delivery id afterwards, or VOIDED when the send fails outright
    so that the next run may claim the key again.
    """

    class Status(models.TextChoices):
        CLAIMED = "claimed", "Claimed"
        SENT = "sent", "Sent"
        VOID = "void", "Void"

    # Rows in these states block a new send for the same key.
    BLOCKING_STATUSES = (Status.CLAIMED, Status.SENT)

    # =====================================================
    # CORE RELATIONSHIPS
    # =====================================================
    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        related_name="+",
    )

    volunteer = models.ForeignKey(
        Volunteer,
        on_delete=models.CASCADE,
        related_name="+",
    )

    # =====================================================
    # STATE
    # =====================================================
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.CLAIMED,
        db_index=True
    )

    claimed_at = models.DateTimeField(default=timezone.now)

    sent_at = models.DateTimeField(null=True, blank=True)

    delivery_id = models.CharField(
        max_length=255,
        blank=True,
        help_text="Opaque message id returned by the provider"
    )

    class Meta:
        abstract = True

    @property
    def is_blocking(self):
        return self.status in self.BLOCKING_STATUSES


class ReminderLedgerEntry(LedgerEntry):
    """
    One volunteer reminder per (task, volunteer) per calendar day.
    """

    sent_on = models.DateField(
        default=timezone.localdate,
        help_text="Calendar day (project time zone) the dedup window covers"
    )

    class Meta:
        ordering = ["-claimed_at"]
        verbose_name = "reminder ledger entry"
        verbose_name_plural = "reminder ledger entries"
        constraints = [
            models.UniqueConstraint(
                fields=["task", "volunteer", "sent_on"],
                name="unique_reminder_per_pair_per_day",
            ),
        ]
        indexes = [
            models.Index(fields=["volunteer", "sent_on"], name="reminder_volunteer_day_idx"),
        ]

    def __str__(self):
        return f"reminder | task={self.task_id} volunteer={self.volunteer_id} | {self.sent_on} | {self.status}"


class OverdueAlertLedgerEntry(LedgerEntry):
    """
    One overdue alert per (task, volunteer, admin recipient), ever.
    """

    admin_email = models.EmailField()

    class Meta:
        ordering = ["-claimed_at"]
        verbose_name = "overdue alert ledger entry"
        verbose_name_plural = "overdue alert ledger entries"
        constraints = [
            models.UniqueConstraint(
                fields=["task", "volunteer", "admin_email"],
                name="unique_overdue_alert_per_admin",
            ),
        ]
        indexes = [
            models.Index(fields=["task", "volunteer"], name="overdue_task_volunteer_idx"),
        ]

    def __str__(self):
        return f"overdue | task={self.task_id} volunteer={self.volunteer_id} -> {self.admin_email} | {self.status}"

from django.db import models
from django.utils import timezone


class Volunteer(models.Model):
    """
    A person who can be assigned tasks.
    Volunteers without an email address never receive reminders.
    """

    class Status(models.TextChoices):
        ACTIVE = "Active", "Active"
        INACTIVE = "Inactive", "Inactive"

    full_name = models.CharField(max_length=200)

    email = models.EmailField(
        null=True,
        blank=True,
        help_text="Reminder recipient address"
    )

    role = models.CharField(max_length=100, blank=True)
    place = models.CharField(max_length=150, blank=True)

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True
    )

    joining_date = models.DateField(default=timezone.localdate)

    # Best-effort stamp written after a reminder goes out.
    # Informational only: dedup is decided by the reminder ledger.
    last_reminder_sent = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["full_name"]

    def __str__(self):
        return f"{self.full_name} <{self.email}>" if self.email else self.full_name


class Task(models.Model):

    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        COMPLETED = "Completed", "Completed"

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    due_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Calendar date only; time of day is never considered"
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    created_at = models.DateTimeField(default=timezone.now)

    volunteers = models.ManyToManyField(
        Volunteer,
        through="TaskAssignment",
        related_name="tasks",
    )

    class Meta:
        ordering = ["due_date", "id"]
        indexes = [
            models.Index(fields=["status", "due_date"], name="task_status_due_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def is_completed(self):
        return self.status == self.Status.COMPLETED

    def is_overdue(self, today=None):
        """
        Past due means the due date is strictly before today.
        A task due today is not overdue yet.
        """
        if self.is_completed or self.due_date is None:
            return False
        today = today or timezone.localdate()
        return self.due_date < today


class TaskAssignment(models.Model):
    """
    Joins one Task to one Volunteer.
    The reminder engine only reads these rows.
    """

    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        related_name="assignments"
    )

    volunteer = models.ForeignKey(
        Volunteer,
        on_delete=models.CASCADE,
        related_name="assignments"
    )

    assigned_at = models.DateTimeField(default=timezone.now, db_index=True)
    completed = models.BooleanField(default=False)

    class Meta:
        ordering = ["-assigned_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["task", "volunteer"],
                name="unique_task_volunteer_assignment",
            ),
        ]

    def __str__(self):
        return f"{self.task} -> {self.volunteer.full_name}"

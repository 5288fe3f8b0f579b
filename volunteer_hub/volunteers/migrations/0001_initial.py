import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Volunteer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=200)),
                ("email", models.EmailField(blank=True, help_text="Reminder recipient address", max_length=254, null=True)),
                ("role", models.CharField(blank=True, max_length=100)),
                ("place", models.CharField(blank=True, max_length=150)),
                ("status", models.CharField(choices=[("Active", "Active"), ("Inactive", "Inactive")], db_index=True, default="Active", max_length=10)),
                ("joining_date", models.DateField(default=django.utils.timezone.localdate)),
                ("last_reminder_sent", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "ordering": ["full_name"],
            },
        ),
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("due_date", models.DateField(blank=True, db_index=True, help_text="Calendar date only; time of day is never considered", null=True)),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("Completed", "Completed")], db_index=True, default="Pending", max_length=20)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "ordering": ["due_date", "id"],
                "indexes": [models.Index(fields=["status", "due_date"], name="task_status_due_idx")],
            },
        ),
        migrations.CreateModel(
            name="TaskAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("assigned_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("completed", models.BooleanField(default=False)),
                ("task", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="assignments", to="volunteers.task")),
                ("volunteer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="assignments", to="volunteers.volunteer")),
            ],
            options={
                "ordering": ["-assigned_at"],
                "constraints": [models.UniqueConstraint(fields=("task", "volunteer"), name="unique_task_volunteer_assignment")],
            },
        ),
        migrations.AddField(
            model_name="task",
            name="volunteers",
            field=models.ManyToManyField(related_name="tasks", through="volunteers.TaskAssignment", to="volunteers.volunteer"),
        ),
    ]

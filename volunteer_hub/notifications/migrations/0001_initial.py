import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("volunteers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ReminderLedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("claimed", "Claimed"), ("sent", "Sent"), ("void", "Void")], db_index=True, default="claimed", max_length=10)),
                ("claimed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("delivery_id", models.CharField(blank=True, help_text="Opaque message id returned by the provider", max_length=255)),
                ("sent_on", models.DateField(default=django.utils.timezone.localdate, help_text="Calendar day (project time zone) the dedup window covers")),
                ("task", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="volunteers.task")),
                ("volunteer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="volunteers.volunteer")),
            ],
            options={
                "verbose_name": "reminder ledger entry",
                "verbose_name_plural": "reminder ledger entries",
                "ordering": ["-claimed_at"],
                "indexes": [models.Index(fields=["volunteer", "sent_on"], name="reminder_volunteer_day_idx")],
                "constraints": [models.UniqueConstraint(fields=("task", "volunteer", "sent_on"), name="unique_reminder_per_pair_per_day")],
            },
        ),
        migrations.CreateModel(
            name="OverdueAlertLedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("claimed", "Claimed"), ("sent", "Sent"), ("void", "Void")], db_index=True, default="claimed", max_length=10)),
                ("claimed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("delivery_id", models.CharField(blank=True, help_text="Opaque message id returned by the provider", max_length=255)),
                ("admin_email", models.EmailField(max_length=254)),
                ("task", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="volunteers.task")),
                ("volunteer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="volunteers.volunteer")),
            ],
            options={
                "verbose_name": "overdue alert ledger entry",
                "verbose_name_plural": "overdue alert ledger entries",
                "ordering": ["-claimed_at"],
                "indexes": [models.Index(fields=["task", "volunteer"], name="overdue_task_volunteer_idx")],
                "constraints": [models.UniqueConstraint(fields=("task", "volunteer", "admin_email"), name="unique_overdue_alert_per_admin")],
            },
        ),
    ]

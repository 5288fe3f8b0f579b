"""
System checks for the reminder engine.

    manage.py check             -> settings problems
    manage.py check --database  -> ledger tables present
"""

from django.conf import settings
from django.core.checks import Error, Tags, Warning, register
from django.db import DatabaseError

from notifications.services.ledger import missing_ledger_tables
from notifications.services.senders import SENDERS


@register()
def check_trigger_secret(app_configs, **kwargs):
    if getattr(settings, "CRON_SECRET_KEY", ""):
        return []
    return [
        Warning(
            "CRON_SECRET_KEY is not set.",
            hint="Every trigger endpoint will answer 500 until a secret is configured.",
            id="notifications.W001",
        )
    ]


@register()
def check_admin_recipients(app_configs, **kwargs):
    if getattr(settings, "ADMIN_ALERT_EMAILS", None):
        return []
    return [
        Warning(
            "ADMIN_ALERT_EMAILS is empty.",
            hint="Overdue task alerts will be skipped until at least one admin address is set.",
            id="notifications.W002",
        )
    ]


@register()
def check_sender(app_configs, **kwargs):
    name = (getattr(settings, "NOTIFICATION_SENDER", "") or "smtp").strip().lower()

    if name not in SENDERS:
        return [
            Error(
                f"Unknown NOTIFICATION_SENDER '{name}'.",
                hint=f"Choose one of: {', '.join(sorted(SENDERS))}.",
                id="notifications.E001",
            )
        ]

    if name == "brevo" and not getattr(settings, "BREVO_API_KEY", ""):
        return [
            Error(
                "NOTIFICATION_SENDER is 'brevo' but BREVO_API_KEY is not set.",
                id="notifications.E002",
            )
        ]

    return []


@register(Tags.database)
def check_ledger_tables(app_configs, databases=None, **kwargs):
    errors = []

    for alias in databases or []:
        try:
            missing = missing_ledger_tables(alias)
        except DatabaseError as exc:
            errors.append(
                Error(
                    f"Could not inspect ledger tables on '{alias}': {exc}",
                    id="notifications.E003",
                )
            )
            continue

        if missing:
            errors.append(
                Error(
                    f"Ledger tables missing on '{alias}': {', '.join(missing)}.",
                    hint="Run 'manage.py migrate notifications'.",
                    id="notifications.E004",
                )
            )

    return errors

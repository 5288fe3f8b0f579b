"""
notifications/services/engine.py

The collaborators a job run needs, built once from settings and handed to
the orchestrators explicitly.
"""

import logging
from dataclasses import dataclass

from django.conf import settings

from .dispatcher import deadline_after
from .eligibility import EligibilityResolver
from .ledger import OverdueAlertLedger, ReminderLedger, verify_ledger_tables
from .senders import get_sender

logger = logging.getLogger(__name__)


def admin_recipients_from_settings():
    seen = []
    for email in getattr(settings, "ADMIN_ALERT_EMAILS", None) or []:
        email = email.strip().lower()
        if email and email not in seen:
            seen.append(email)
    return tuple(seen)


@dataclass
class ReminderEngine:
    resolver: EligibilityResolver
    sender: object
    reminder_ledger: ReminderLedger
    overdue_ledger: OverdueAlertLedger
    concurrency: int = 5
    timeout: float = None
    admin_recipients: tuple = ()

    @classmethod
    def from_settings(cls, *, sender=None, verify=True):
        """
        Fails fast with a ConfigurationError (missing ledger tables, unknown
        or unconfigured sender) before any work is done.
        """
        if verify:
            verify_ledger_tables()

        concurrency = int(getattr(settings, "REMINDER_SEND_CONCURRENCY", 5) or 1)
        if concurrency < 1:
            logger.warning("REMINDER_SEND_CONCURRENCY=%s is below 1; using 1", concurrency)
            concurrency = 1

        return cls(
            resolver=EligibilityResolver(),
            sender=sender or get_sender(),
            reminder_ledger=ReminderLedger(),
            overdue_ledger=OverdueAlertLedger(),
            concurrency=concurrency,
            timeout=getattr(settings, "REMINDER_JOB_TIMEOUT_SECONDS", None) or None,
            admin_recipients=admin_recipients_from_settings(),
        )

    def start_deadline(self):
        """
        One overall budget per invocation. Callers running several jobs pass
        the same deadline to each.
        """
        return deadline_after(self.timeout)

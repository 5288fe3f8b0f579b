"""
notifications/services/ledger.py

Dedup ledger: the persisted "already notified" facts for each notification
kind.

A send goes through three steps:

    claim   -> atomic insert-if-absent on the unique key (or re-activation of
               a VOID row). Only the run that wins the claim may send.
    record  -> promote the claim to SENT with the provider's delivery id.
    release -> void the claim when the send failed outright, so the next
               scheduled run can try again.

Losing the claim (unique constraint hit) means another run owns the key;
callers treat that as a skip, never as an error.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, IntegrityError, connections, transaction
from django.utils import timezone

from notifications.exceptions import LedgerError, LedgerUnavailable
from notifications.models import (
    LedgerEntry,
    NotificationKind,
    OverdueAlertLedgerEntry,
    ReminderLedgerEntry,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Claim:
    """Proof that this run owns one ledger key."""

    kind: str
    entry_id: int
    task_id: int
    volunteer_id: int
    admin_email: str = ""


class DedupLedger:
    kind = None
    model = None

    def key(self, task_id, volunteer_id, **extra):
        raise NotImplementedError

    def _claim_for(self, entry_id, lookup):
        return Claim(
            kind=self.kind,
            entry_id=entry_id,
            task_id=lookup["task_id"],
            volunteer_id=lookup["volunteer_id"],
            admin_email=lookup.get("admin_email", ""),
        )

    # ============================================================
    # LOOKUP
    # ============================================================

    def was_notified(self, task_id, volunteer_id, **extra):
        """
        True when a CLAIMED or SENT row exists for the key.
        Raises LedgerError when the lookup cannot be completed; callers
        must then skip the send (fail closed).
        """
        lookup = self.key(task_id, volunteer_id, **extra)
        try:
            return (
                self.model.objects
                .filter(status__in=LedgerEntry.BLOCKING_STATUSES, **lookup)
                .exists()
            )
        except DatabaseError as exc:
            raise LedgerError(f"{self.kind} ledger lookup failed for {lookup}: {exc}") from exc

    # ============================================================
    # CLAIM / RELEASE / RECORD
    # ============================================================

    def claim(self, task_id, volunteer_id, **extra):
        """
        Returns a Claim, or None when another run already holds the key.
        """
        lookup = self.key(task_id, volunteer_id, **extra)
        now = timezone.now()

        try:
            with transaction.atomic():
                entry = self.model.objects.create(
                    status=LedgerEntry.Status.CLAIMED,
                    claimed_at=now,
                    **lookup,
                )
            return self._claim_for(entry.pk, lookup)
        except IntegrityError:
            pass
        except DatabaseError as exc:
            raise LedgerError(f"{self.kind} ledger claim failed for {lookup}: {exc}") from exc

        # Key already present: only a voided row may be taken over.
        try:
            with transaction.atomic():
                reclaimed = (
                    self.model.objects
                    .filter(status=LedgerEntry.Status.VOID, **lookup)
                    .update(
                        status=LedgerEntry.Status.CLAIMED,
                        claimed_at=now,
                        sent_at=None,
                        delivery_id="",
                    )
                )
                if not reclaimed:
                    return None
                entry_id = self.model.objects.filter(**lookup).values_list("pk", flat=True).get()
        except DatabaseError as exc:
            raise LedgerError(f"{self.kind} ledger re-claim failed for {lookup}: {exc}") from exc

        return self._claim_for(entry_id, lookup)

    def release(self, claim):
        """Void a claim whose send never went out."""
        try:
            self.model.objects.filter(
                pk=claim.entry_id,
                status=LedgerEntry.Status.CLAIMED,
            ).update(status=LedgerEntry.Status.VOID)
        except DatabaseError as exc:
            raise LedgerError(f"{self.kind} ledger release failed for entry {claim.entry_id}: {exc}") from exc

    def record(self, claim, delivery_id):
        """Mark the claim as delivered."""
        try:
            updated = self.model.objects.filter(
                pk=claim.entry_id,
                status=LedgerEntry.Status.CLAIMED,
            ).update(
                status=LedgerEntry.Status.SENT,
                sent_at=timezone.now(),
                delivery_id=delivery_id or "",
            )
        except DatabaseError as exc:
            raise LedgerError(f"{self.kind} ledger record failed for entry {claim.entry_id}: {exc}") from exc

        if not updated:
            raise LedgerError(f"{self.kind} ledger entry {claim.entry_id} is no longer claimed")


class ReminderLedger(DedupLedger):
    """Calendar-day window keyed on (task, volunteer)."""

    kind = NotificationKind.REMINDER
    model = ReminderLedgerEntry

    def key(self, task_id, volunteer_id, *, on=None):
        return {
            "task_id": task_id,
            "volunteer_id": volunteer_id,
            "sent_on": on or timezone.localdate(),
        }


class OverdueAlertLedger(DedupLedger):
    """No window: one alert per (task, volunteer, admin) for good."""

    kind = NotificationKind.OVERDUE_ALERT
    model = OverdueAlertLedgerEntry

    def key(self, task_id, volunteer_id, *, admin_email):
        return {
            "task_id": task_id,
            "volunteer_id": volunteer_id,
            "admin_email": admin_email.strip().lower(),
        }


LEDGER_MODELS = (ReminderLedgerEntry, OverdueAlertLedgerEntry)


def missing_ledger_tables(using="default"):
    with connections[using].cursor() as cursor:
        existing = set(connections[using].introspection.table_names(cursor))
    return [m._meta.db_table for m in LEDGER_MODELS if m._meta.db_table not in existing]


def verify_ledger_tables(using="default"):
    """
    Capability check run once before a job touches the ledger.
    """
    try:
        missing = missing_ledger_tables(using)
    except DatabaseError as exc:
        raise LedgerUnavailable(f"Could not inspect ledger tables: {exc}") from exc

    if missing:
        raise LedgerUnavailable(
            f"Ledger tables missing: {', '.join(missing)}. Run 'manage.py migrate notifications'."
        )

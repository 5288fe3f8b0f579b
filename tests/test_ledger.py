# tests/test_ledger.py

from datetime import date, timedelta

import pytest

from notifications.exceptions import LedgerError, LedgerUnavailable
from notifications.models import LedgerEntry, OverdueAlertLedgerEntry, ReminderLedgerEntry
from notifications.services import ledger as ledger_module
from notifications.services.ledger import (
    OverdueAlertLedger,
    ReminderLedger,
    missing_ledger_tables,
    verify_ledger_tables,
)

pytestmark = pytest.mark.django_db

TODAY = date(2026, 3, 10)


@pytest.fixture()
def pair(make_volunteer, make_task):
    return make_task(title="Sort donations"), make_volunteer(full_name="Ana")


def test_claim_is_exclusive_per_key(pair):
    task, volunteer = pair
    ledger = ReminderLedger()

    first = ledger.claim(task.pk, volunteer.pk, on=TODAY)
    second = ledger.claim(task.pk, volunteer.pk, on=TODAY)

    assert first is not None
    assert first.task_id == task.pk
    assert second is None
    assert ledger.was_notified(task.pk, volunteer.pk, on=TODAY)
    assert ReminderLedgerEntry.objects.count() == 1


def test_reminder_window_is_one_calendar_day(pair):
    task, volunteer = pair
    ledger = ReminderLedger()

    ledger.claim(task.pk, volunteer.pk, on=TODAY)

    assert not ledger.was_notified(task.pk, volunteer.pk, on=TODAY + timedelta(days=1))
    assert ledger.claim(task.pk, volunteer.pk, on=TODAY + timedelta(days=1)) is not None


def test_record_marks_entry_sent(pair):
    task, volunteer = pair
    ledger = ReminderLedger()

    claim = ledger.claim(task.pk, volunteer.pk, on=TODAY)
    ledger.record(claim, "msg-123")

    entry = ReminderLedgerEntry.objects.get(pk=claim.entry_id)
    assert entry.status == LedgerEntry.Status.SENT
    assert entry.delivery_id == "msg-123"
    assert entry.sent_at is not None
    assert ledger.was_notified(task.pk, volunteer.pk, on=TODAY)


def test_release_voids_and_allows_reclaim(pair):
    task, volunteer = pair
    ledger = ReminderLedger()

    claim = ledger.claim(task.pk, volunteer.pk, on=TODAY)
    ledger.release(claim)

    assert ReminderLedgerEntry.objects.get(pk=claim.entry_id).status == LedgerEntry.Status.VOID
    assert not ledger.was_notified(task.pk, volunteer.pk, on=TODAY)

    again = ledger.claim(task.pk, volunteer.pk, on=TODAY)

    assert again is not None
    assert again.entry_id == claim.entry_id
    assert ReminderLedgerEntry.objects.get(pk=claim.entry_id).status == LedgerEntry.Status.CLAIMED
    assert ledger.claim(task.pk, volunteer.pk, on=TODAY) is None


def test_release_does_not_void_a_sent_entry(pair):
    task, volunteer = pair
    ledger = ReminderLedger()

    claim = ledger.claim(task.pk, volunteer.pk, on=TODAY)
    ledger.record(claim, "msg-1")
    ledger.release(claim)

    assert ReminderLedgerEntry.objects.get(pk=claim.entry_id).status == LedgerEntry.Status.SENT


def test_record_requires_a_live_claim(pair):
    task, volunteer = pair
    ledger = ReminderLedger()

    claim = ledger.claim(task.pk, volunteer.pk, on=TODAY)
    ledger.release(claim)

    with pytest.raises(LedgerError):
        ledger.record(claim, "msg-1")


def test_overdue_key_is_per_admin_and_case_insensitive(pair):
    task, volunteer = pair
    ledger = OverdueAlertLedger()

    assert ledger.claim(task.pk, volunteer.pk, admin_email="Boss@Example.org") is not None

    assert ledger.was_notified(task.pk, volunteer.pk, admin_email="boss@example.org")
    assert ledger.claim(task.pk, volunteer.pk, admin_email="boss@example.org ") is None
    assert not ledger.was_notified(task.pk, volunteer.pk, admin_email="other@example.org")
    assert OverdueAlertLedgerEntry.objects.get().admin_email == "boss@example.org"


def test_tables_present_after_migrate():
    assert missing_ledger_tables() == []
    verify_ledger_tables()


def test_verify_raises_when_tables_missing(monkeypatch):
    monkeypatch.setattr(
        ledger_module, "missing_ledger_tables", lambda using="default": ["notifications_reminderledgerentry"]
    )

    with pytest.raises(LedgerUnavailable, match="notifications_reminderledgerentry"):
        verify_ledger_tables()

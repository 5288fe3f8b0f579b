# tests/test_admin.py

import pytest

from notifications.models import LedgerEntry, OverdueAlertLedgerEntry, ReminderLedgerEntry

pytestmark = pytest.mark.django_db


@pytest.fixture()
def ledger_rows(make_volunteer, make_task):
    task, volunteer = make_task(title="File report"), make_volunteer(full_name="Ana")
    reminder = ReminderLedgerEntry.objects.create(
        task=task, volunteer=volunteer, status=LedgerEntry.Status.SENT
    )
    alert = OverdueAlertLedgerEntry.objects.create(
        task=task, volunteer=volunteer, admin_email="lead@example.org"
    )
    return reminder, alert


@pytest.mark.parametrize(
    "url",
    [
        "/admin/notifications/reminderledgerentry/",
        "/admin/notifications/overduealertledgerentry/",
        "/admin/volunteers/volunteer/",
        "/admin/volunteers/task/",
    ],
)
def test_changelists_render(admin_client, ledger_rows, url):
    assert admin_client.get(url).status_code == 200


def test_void_action_allows_resend(admin_client, ledger_rows):
    reminder, _ = ledger_rows

    response = admin_client.post(
        "/admin/notifications/reminderledgerentry/",
        {"action": "mark_as_void", "_selected_action": [reminder.pk]},
    )

    assert response.status_code == 302
    reminder.refresh_from_db()
    assert reminder.status == LedgerEntry.Status.VOID

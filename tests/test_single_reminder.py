# tests/test_single_reminder.py

from datetime import date, timedelta

import pytest

from notifications.exceptions import RecordNotFound, SendError
from notifications.models import LedgerEntry, ReminderLedgerEntry
from notifications.services.reminders import send_task_reminder, send_volunteer_reminders
from notifications.services.reminders.single import (
    ALREADY_SENT_TODAY,
    NO_EMAIL_ADDRESS,
    TASK_COMPLETED,
)
from notifications.services.summary import ALREADY_NOTIFIED
from volunteers.models import Task

from .fakes import FakeSender

pytestmark = pytest.mark.django_db

TODAY = date(2026, 3, 10)


@pytest.fixture()
def pair(make_volunteer, make_task, assign):
    volunteer = make_volunteer(full_name="Ana", email="ana@example.org")
    task = make_task(title="Sort donations", due_date=TODAY + timedelta(days=2))
    assign(task, volunteer)
    return task, volunteer


def test_sends_once_and_records_delivery(pair, engine, fake_sender):
    task, volunteer = pair

    result = send_task_reminder(engine, task.pk, volunteer.pk, today=TODAY)

    assert result.sent
    assert result.delivery_id == "fake-1"
    assert result.message == "Email successfully sent to ana@example.org"
    assert fake_sender.sent[0].subject == "Task Reminder – Sort donations"

    entry = ReminderLedgerEntry.objects.get(task=task, volunteer=volunteer, sent_on=TODAY)
    assert entry.status == LedgerEntry.Status.SENT
    assert entry.delivery_id == "fake-1"

    volunteer.refresh_from_db()
    assert volunteer.last_reminder_sent is not None


def test_second_request_same_day_is_not_sent(pair, engine, fake_sender):
    task, volunteer = pair
    send_task_reminder(engine, task.pk, volunteer.pk, today=TODAY)

    again = send_task_reminder(engine, task.pk, volunteer.pk, today=TODAY)

    assert not again.sent
    assert again.message == ALREADY_SENT_TODAY
    assert len(fake_sender.sent) == 1


def test_scheduled_run_skips_pair_reminded_on_demand(pair, engine, fake_sender):
    task, volunteer = pair
    send_task_reminder(engine, task.pk, volunteer.pk, today=TODAY)

    summary = send_volunteer_reminders(engine, today=TODAY)

    assert summary.sent == 0
    assert summary.skip_reasons == {ALREADY_NOTIFIED: 1}
    assert len(fake_sender.sent) == 1


def test_completed_task_is_not_reminded(pair, engine, fake_sender):
    task, volunteer = pair
    Task.objects.filter(pk=task.pk).update(status=Task.Status.COMPLETED)

    result = send_task_reminder(engine, task.pk, volunteer.pk, today=TODAY)

    assert not result.sent
    assert result.message == TASK_COMPLETED
    assert fake_sender.sent == []
    assert not ReminderLedgerEntry.objects.exists()


def test_volunteer_without_email_is_not_reminded(make_volunteer, make_task, assign, engine, fake_sender):
    volunteer = make_volunteer(full_name="Silent", email="")
    task = make_task(title="Quiet work")
    assign(task, volunteer)

    result = send_task_reminder(engine, task.pk, volunteer.pk, today=TODAY)

    assert not result.sent
    assert result.message == NO_EMAIL_ADDRESS
    assert not ReminderLedgerEntry.objects.exists()


def test_unknown_or_unassigned_pair_raises(pair, make_volunteer, engine):
    task, volunteer = pair
    stranger = make_volunteer(full_name="Ben", email="ben@example.org")

    with pytest.raises(RecordNotFound, match="Task not found"):
        send_task_reminder(engine, task.pk + 100, volunteer.pk, today=TODAY)
    with pytest.raises(RecordNotFound, match="Volunteer not found"):
        send_task_reminder(engine, task.pk, stranger.pk + 100, today=TODAY)
    with pytest.raises(RecordNotFound, match="not assigned"):
        send_task_reminder(engine, task.pk, stranger.pk, today=TODAY)


def test_send_failure_releases_claim_and_reraises(pair, make_engine):
    task, volunteer = pair
    failing = FakeSender(fail_for={"ana@example.org"})

    with pytest.raises(SendError, match="Provider rejected"):
        send_task_reminder(make_engine(sender=failing), task.pk, volunteer.pk, today=TODAY)

    entry = ReminderLedgerEntry.objects.get(task=task, volunteer=volunteer)
    assert entry.status == LedgerEntry.Status.VOID

    recovered = FakeSender()
    result = send_task_reminder(make_engine(sender=recovered), task.pk, volunteer.pk, today=TODAY)

    assert result.sent
    assert recovered.recipients == ["ana@example.org"]

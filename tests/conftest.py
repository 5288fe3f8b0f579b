# tests/conftest.py

import pytest

from notifications.services.eligibility import EligibilityResolver
from notifications.services.engine import ReminderEngine
from notifications.services.ledger import OverdueAlertLedger, ReminderLedger
from volunteers.models import Task, TaskAssignment, Volunteer

from .fakes import FakeSender


@pytest.fixture(autouse=True)
def engine_settings(settings):
    """
    Deterministic engine configuration for every test.

    Concurrency 1 keeps dispatcher work on the test thread, inside the
    test transaction.
    """
    settings.CRON_SECRET_KEY = ""
    settings.REMINDER_SEND_CONCURRENCY = 1
    settings.REMINDER_JOB_TIMEOUT_SECONDS = 0
    settings.ADMIN_ALERT_EMAILS = []
    settings.NOTIFICATION_SENDER = "smtp"
    settings.ENABLE_SCHEDULER = False
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.SEND_ASSIGNMENT_EMAILS = False
    return settings


@pytest.fixture()
def fake_sender():
    return FakeSender()


@pytest.fixture()
def make_engine(fake_sender):
    def _make(**overrides):
        options = {
            "resolver": EligibilityResolver(),
            "sender": fake_sender,
            "reminder_ledger": ReminderLedger(),
            "overdue_ledger": OverdueAlertLedger(),
            "concurrency": 1,
            "timeout": None,
            "admin_recipients": (),
        }
        options.update(overrides)
        return ReminderEngine(**options)

    return _make


@pytest.fixture()
def engine(make_engine):
    return make_engine()


# ============================================================
# RECORD STORE FACTORIES
# ============================================================

@pytest.fixture()
def make_volunteer(db):
    def _make(full_name="Volunteer", email="volunteer@example.org", **fields):
        return Volunteer.objects.create(full_name=full_name, email=email, **fields)

    return _make


@pytest.fixture()
def make_task(db):
    def _make(title="Task", due_date=None, status=Task.Status.PENDING, **fields):
        return Task.objects.create(title=title, due_date=due_date, status=status, **fields)

    return _make


@pytest.fixture()
def assign(db):
    def _assign(task, volunteer, **fields):
        return TaskAssignment.objects.create(task=task, volunteer=volunteer, **fields)

    return _assign

# tests/test_commands.py

from datetime import timedelta
from io import StringIO

import pytest
from django.core import mail
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

pytestmark = pytest.mark.django_db


@pytest.fixture()
def overdue_assignment(make_volunteer, make_task, assign):
    volunteer = make_volunteer(full_name="Ana", email="ana@example.org")
    assign(make_task(title="File report", due_date=timezone.localdate() - timedelta(days=1)), volunteer)
    return volunteer


def _run(*args):
    out = StringIO()
    call_command("send_task_reminders", *args, stdout=out)
    return out.getvalue()


def test_sends_volunteer_reminders(overdue_assignment):
    output = _run()

    assert "Completed: 1 emails sent, 0 failed" in output
    assert [m.to for m in mail.outbox] == [["ana@example.org"]]


def test_overdue_flag_also_alerts_admins(overdue_assignment, settings):
    settings.ADMIN_ALERT_EMAILS = ["lead@example.org"]

    output = _run("--overdue")

    assert "Completed: 2 emails sent, 0 failed" in output
    assert sorted(m.to[0] for m in mail.outbox) == ["ana@example.org", "lead@example.org"]


def test_skip_reminders_sends_only_alerts(overdue_assignment, settings):
    settings.ADMIN_ALERT_EMAILS = ["lead@example.org"]

    _run("--overdue", "--skip-reminders")

    assert [m.to for m in mail.outbox] == [["lead@example.org"]]


def test_configuration_error_becomes_command_error(settings):
    settings.NOTIFICATION_SENDER = "carrier-pigeon"

    with pytest.raises(CommandError, match="carrier-pigeon"):
        _run()

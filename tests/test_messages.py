# tests/test_messages.py

from datetime import date
from types import SimpleNamespace

from notifications.services.messages import (
    build_overdue_alert,
    build_volunteer_reminder,
    format_due_date,
)


def _volunteer(**fields):
    return SimpleNamespace(**{"full_name": "Ana", "email": "ana@example.org", **fields})


def _task(title, due_date=None):
    return SimpleNamespace(title=title, due_date=due_date, status="Pending")


def test_single_task_subject_names_the_task():
    message = build_volunteer_reminder(_volunteer(), [_task("Sort donations", date(2026, 3, 12))])

    assert message.to_email == "ana@example.org"
    assert message.subject == "Task Reminder – Sort donations"
    assert "1 incomplete task:" in message.text_body
    assert "Thursday, 12 March 2026" in message.text_body


def test_consolidated_reminder_lists_every_task():
    tasks = [_task("Sort donations"), _task("Call sponsors"), _task("Print posters")]

    message = build_volunteer_reminder(_volunteer(), tasks)

    assert message.subject == "Task Reminder – 3 incomplete tasks"
    for task in tasks:
        assert task.title in message.text_body
        assert task.title in message.html_body
    assert "No due date set" in message.text_body


def test_html_body_escapes_user_content():
    message = build_volunteer_reminder(
        _volunteer(full_name="<b>Ana</b>"), [_task("<script>alert(1)</script>")]
    )

    assert "<script>" not in message.html_body
    assert "&lt;script&gt;" in message.html_body
    assert "&lt;b&gt;Ana&lt;/b&gt;" in message.html_body


def test_overdue_alert_goes_to_admin():
    message = build_overdue_alert(
        _task("File report", date(2026, 3, 9)), _volunteer(), "lead@example.org"
    )

    assert message.to_email == "lead@example.org"
    assert message.to_name == "Admin"
    assert message.subject == "Overdue Task Alert – File report"
    assert "Ana" in message.text_body
    assert "ana@example.org" in message.text_body


def test_format_due_date():
    assert format_due_date(None) == "No due date set"
    assert format_due_date(date(2026, 1, 5)) == "Monday, 05 January 2026"

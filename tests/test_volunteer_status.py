# tests/test_volunteer_status.py

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from volunteers.models import Task, Volunteer
from volunteers.services import desired_status, update_volunteer_statuses

pytestmark = pytest.mark.django_db


@pytest.fixture()
def now():
    return timezone.now()


def test_desired_status_rules():
    assert desired_status(has_incomplete_tasks=True, has_recent_assignment=False)[0] == "Active"
    assert desired_status(has_incomplete_tasks=False, has_recent_assignment=True)[0] == "Active"
    assert desired_status(has_incomplete_tasks=False, has_recent_assignment=False)[0] == "Inactive"


def test_statuses_follow_activity(make_volunteer, make_task, assign, now):
    busy = make_volunteer(full_name="Busy", status=Volunteer.Status.INACTIVE)
    assign(make_task(title="Open"), busy, assigned_at=now - timedelta(days=60))

    recent = make_volunteer(full_name="Recent", status=Volunteer.Status.INACTIVE)
    assign(
        make_task(title="Finished", status=Task.Status.COMPLETED),
        recent,
        assigned_at=now - timedelta(days=2),
    )

    idle = make_volunteer(full_name="Idle", status=Volunteer.Status.ACTIVE)
    assign(
        make_task(title="Long done", status=Task.Status.COMPLETED),
        idle,
        assigned_at=now - timedelta(days=30),
    )

    never = make_volunteer(full_name="Never assigned", status=Volunteer.Status.ACTIVE)

    result = update_volunteer_statuses(now=now)

    statuses = dict(Volunteer.objects.values_list("full_name", "status"))
    assert statuses == {
        "Busy": "Active",
        "Recent": "Active",
        "Idle": "Inactive",
        "Never assigned": "Inactive",
    }
    assert result.checked == 4
    assert result.changed == 4
    assert result.success
    assert {c.volunteer_id for c in result.changes} == {busy.pk, recent.pk, idle.pk, never.pk}


def test_unchanged_volunteers_are_not_reported(make_volunteer, make_task, assign, now):
    volunteer = make_volunteer(status=Volunteer.Status.ACTIVE)
    assign(make_task(), volunteer)

    result = update_volunteer_statuses(now=now)

    assert result.checked == 1
    assert result.changes == []
    assert result.as_dict()["totalStatusChanges"] == 0


def test_command_prints_changes(make_volunteer):
    make_volunteer(full_name="Idle", status=Volunteer.Status.ACTIVE)
    out = StringIO()

    call_command("update_volunteer_statuses", stdout=out)

    output = out.getvalue()
    assert "Idle: Active -> Inactive" in output
    assert "1 checked, 1 changed" in output

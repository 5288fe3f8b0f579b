"""
notifications/services/messages.py

Email content for the two scheduled notification kinds.
"""

from dataclasses import dataclass

from django.utils.html import format_html, format_html_join


@dataclass(frozen=True)
class OutboundEmail:
    to_email: str
    to_name: str
    subject: str
    text_body: str
    html_body: str = ""


def format_due_date(due_date):
    if due_date is None:
        return "No due date set"
    return f"{due_date:%A, %d %B %Y}"


# ============================================================
# VOLUNTEER REMINDER (ONE MESSAGE, ALL OPEN TASKS)
# ============================================================

def build_volunteer_reminder(volunteer, tasks):
    count = len(tasks)
    task_word = "task" if count == 1 else "tasks"

    subject = (
        f"Task Reminder – {tasks[0].title}"
        if count == 1
        else f"Task Reminder – {count} incomplete tasks"
    )

    lines = "\n".join(
        f"  - {task.title} (due: {format_due_date(task.due_date)}, status: {task.status})"
        for task in tasks
    )

    text_body = (
        f"Hello {volunteer.full_name},\n\n"
        f"This is a friendly reminder that you have {count} incomplete {task_word}:\n\n"
        f"{lines}\n\n"
        f"Please make sure they are completed by their due dates. "
        f"If you have any questions or need assistance, please reach out to your coordinator.\n\n"
        f"Thank you for your dedication!\n\n"
        f"— Volunteer Management System"
    )

    rows = format_html_join(
        "\n",
        "<tr><td><strong>{}</strong></td><td>{}</td><td>{}</td></tr>",
        (
            (task.title, format_due_date(task.due_date), task.status)
            for task in tasks
        ),
    )

    html_body = format_html(
        "<html><body>"
        "<h2>Task Reminder</h2>"
        "<p>Hello <strong>{}</strong>,</p>"
        "<p>This is a friendly reminder that you have {} incomplete {}:</p>"
        "<table><thead><tr><th>Task</th><th>Due Date</th><th>Status</th></tr></thead>"
        "<tbody>{}</tbody></table>"
        "<p>Please make sure they are completed by their due dates.</p>"
        "<p>Thank you for your dedication!</p>"
        "<p><small>This is an automated reminder from the Volunteer Management System.</small></p>"
        "</body></html>",
        volunteer.full_name,
        count,
        task_word,
        rows,
    )

    return OutboundEmail(
        to_email=volunteer.email,
        to_name=volunteer.full_name,
        subject=subject,
        text_body=text_body,
        html_body=html_body,
    )


# ============================================================
# OVERDUE ALERT (ONE PER TASK/VOLUNTEER, PER ADMIN)
# ============================================================

def build_overdue_alert(task, volunteer, admin_email):
    subject = f"Overdue Task Alert – {task.title}"
    volunteer_email = volunteer.email or "no email on file"

    text_body = (
        f"Hello Admin,\n\n"
        f"The following task is OVERDUE and still incomplete:\n\n"
        f"  Task:       {task.title}\n"
        f"  Volunteer:  {volunteer.full_name}\n"
        f"  Email:      {volunteer_email}\n"
        f"  Due Date:   {format_due_date(task.due_date)}\n\n"
        f"Please follow up with the assigned volunteer to ensure timely completion.\n\n"
        f"— Volunteer Management System"
    )

    html_body = format_html(
        "<html><body>"
        "<h2>Overdue Task Alert</h2>"
        "<p>Hello Admin,</p>"
        "<p>The following task is <strong>OVERDUE</strong> and still incomplete:</p>"
        "<ul>"
        "<li><strong>Task:</strong> {}</li>"
        "<li><strong>Volunteer:</strong> {}</li>"
        "<li><strong>Email:</strong> {}</li>"
        "<li><strong>Due Date:</strong> {}</li>"
        "</ul>"
        "<p>Please follow up with the assigned volunteer to ensure timely completion.</p>"
        "<p><small>This is an automated message from the Volunteer Management System.</small></p>"
        "</body></html>",
        task.title,
        volunteer.full_name,
        volunteer_email,
        format_due_date(task.due_date),
    )

    return OutboundEmail(
        to_email=admin_email,
        to_name="Admin",
        subject=subject,
        text_body=text_body,
        html_body=html_body,
    )


# ============================================================
# ASSIGNMENT NOTICE (SENT WHEN A TASK IS ASSIGNED)
# ============================================================

def build_assignment_email(volunteer, task):
    subject = f"New Task Assigned – {task.title}"
    due = format_due_date(task.due_date)

    text_body = (
        f"Hello {volunteer.full_name},\n\n"
        f"You have been assigned a new task:\n\n"
        f"  Task:      {task.title}\n"
        f"  Due Date:  {due}\n\n"
        f"Please review the details and make sure it is completed by its due date. "
        f"If you have any questions, please reach out to your coordinator.\n\n"
        f"Thank you for volunteering!\n\n"
        f"— Volunteer Management System"
    )

    html_body = format_html(
        "<html><body>"
        "<h2>New Task Assigned</h2>"
        "<p>Hello <strong>{}</strong>,</p>"
        "<p>You have been assigned a new task:</p>"
        "<ul>"
        "<li><strong>Task:</strong> {}</li>"
        "<li><strong>Due Date:</strong> {}</li>"
        "</ul>"
        "<p>Please make sure it is completed by its due date.</p>"
        "<p>Thank you for volunteering!</p>"
        "<p><small>This is an automated message from the Volunteer Management System.</small></p>"
        "</body></html>",
        volunteer.full_name,
        task.title,
        due,
    )

    return OutboundEmail(
        to_email=volunteer.email,
        to_name=volunteer.full_name,
        subject=subject,
        text_body=text_body,
        html_body=html_body,
    )

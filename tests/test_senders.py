# tests/test_senders.py

import smtplib
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.core import mail

from notifications.exceptions import ConfigurationError, SendError
from notifications.services.messages import OutboundEmail
from notifications.services.senders import BrevoSender, DjangoMailSender, get_sender

MESSAGE = OutboundEmail(
    to_email="ana@example.org",
    to_name="Ana",
    subject="Task Reminder – Sort donations",
    text_body="Hello Ana",
    html_body="<p>Hello Ana</p>",
)


def _response(status_code=201, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload if payload is not None else {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


# ============================================================
# DJANGO MAIL
# ============================================================

def test_django_sender_uses_mail_backend():
    sender = DjangoMailSender(from_email="Volunteer Management System <noreply@volunteerapp.com>")

    delivery_id = sender.send(MESSAGE)

    assert len(mail.outbox) == 1
    email = mail.outbox[0]
    assert email.to == ["ana@example.org"]
    assert email.subject == MESSAGE.subject
    assert email.alternatives[0][1] == "text/html"
    assert email.extra_headers["Message-ID"] == delivery_id
    assert delivery_id.endswith("@volunteerapp.com>")


def test_django_sender_wraps_smtp_errors():
    sender = DjangoMailSender()

    with patch(
        "notifications.services.senders.EmailMultiAlternatives.send",
        side_effect=smtplib.SMTPRecipientsRefused({"ana@example.org": (550, b"no such user")}),
    ):
        with pytest.raises(SendError, match="ana@example.org"):
            sender.send(MESSAGE)


def test_django_sender_rejects_silent_drop():
    with patch("notifications.services.senders.EmailMultiAlternatives.send", return_value=0):
        with pytest.raises(SendError):
            DjangoMailSender().send(MESSAGE)


# ============================================================
# BREVO
# ============================================================

def test_brevo_requires_api_key(settings):
    settings.BREVO_API_KEY = ""

    with pytest.raises(ConfigurationError, match="BREVO_API_KEY"):
        BrevoSender()


def test_brevo_posts_message_and_returns_message_id():
    sender = BrevoSender(
        api_key="xkeysib-test",
        api_url="https://api.brevo.test/v3/smtp/email",
        from_email="Volunteer Management System <noreply@volunteerapp.com>",
        timeout=5,
    )

    with patch(
        "notifications.services.senders.requests.post",
        return_value=_response(payload={"messageId": "<brevo-1@smtp-relay>"}),
    ) as post:
        delivery_id = sender.send(MESSAGE)

    assert delivery_id == "<brevo-1@smtp-relay>"
    post.assert_called_once()
    args, kwargs = post.call_args
    assert args == ("https://api.brevo.test/v3/smtp/email",)
    assert kwargs["headers"]["api-key"] == "xkeysib-test"
    assert kwargs["timeout"] == 5
    assert kwargs["json"] == {
        "sender": {"name": "Volunteer Management System", "email": "noreply@volunteerapp.com"},
        "to": [{"email": "ana@example.org", "name": "Ana"}],
        "subject": "Task Reminder – Sort donations",
        "textContent": "Hello Ana",
        "htmlContent": "<p>Hello Ana</p>",
    }


def test_brevo_http_error_becomes_send_error():
    sender = BrevoSender(api_key="xkeysib-test")

    with patch(
        "notifications.services.senders.requests.post",
        return_value=_response(status_code=400, text='{"code":"invalid_parameter"}'),
    ):
        with pytest.raises(SendError, match="Brevo API error: 400"):
            sender.send(MESSAGE)


def test_brevo_transport_error_becomes_send_error():
    sender = BrevoSender(api_key="xkeysib-test")

    with patch(
        "notifications.services.senders.requests.post",
        side_effect=requests.ConnectionError("connection reset"),
    ):
        with pytest.raises(SendError, match="connection reset"):
            sender.send(MESSAGE)


# ============================================================
# SELECTION
# ============================================================

def test_get_sender_by_name(settings):
    settings.BREVO_API_KEY = "xkeysib-test"

    assert isinstance(get_sender("smtp"), DjangoMailSender)
    assert isinstance(get_sender(" Brevo "), BrevoSender)


def test_get_sender_defaults_to_setting(settings):
    settings.NOTIFICATION_SENDER = "smtp"

    assert isinstance(get_sender(), DjangoMailSender)


def test_unknown_sender_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="carrier-pigeon"):
        get_sender("carrier-pigeon")

"""
notifications/services/senders.py

Notification providers. A sender takes one OutboundEmail and returns the
provider's delivery id, or raises SendError.
"""

import logging
import smtplib
from email.utils import make_msgid, parseaddr

import requests
from django.conf import settings
from django.core.mail import BadHeaderError, EmailMultiAlternatives

from notifications.exceptions import ConfigurationError, SendError

logger = logging.getLogger(__name__)


def _sender_identity(from_email):
    name, address = parseaddr(from_email)
    return name or "Volunteer Management System", address


class DjangoMailSender:
    """
    Sends through the configured Django email backend (SMTP in production).
    The delivery id is the Message-ID header we generate.
    """

    name = "smtp"

    def __init__(self, from_email=None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL
        _, address = _sender_identity(self.from_email)
        self.domain = address.rpartition("@")[2] or "localhost"

    def send(self, message):
        message_id = make_msgid(domain=self.domain)

        email = EmailMultiAlternatives(
            subject=message.subject,
            body=message.text_body,
            from_email=self.from_email,
            to=[message.to_email],
            headers={"Message-ID": message_id},
        )
        if message.html_body:
            email.attach_alternative(message.html_body, "text/html")

        try:
            sent = email.send(fail_silently=False)
        except (BadHeaderError, smtplib.SMTPException, OSError) as exc:
            raise SendError(f"Email to {message.to_email} failed: {exc}") from exc

        if not sent:
            raise SendError(f"Email backend did not accept the message to {message.to_email}")

        return message_id


class BrevoSender:
    """
    Brevo (Sendinblue) transactional email API.
    """

    name = "brevo"

    def __init__(self, api_key=None, api_url=None, from_email=None, timeout=None):
        self.api_key = api_key or settings.BREVO_API_KEY
        if not self.api_key:
            raise ConfigurationError(
                "Brevo API key not found. Set BREVO_API_KEY or choose NOTIFICATION_SENDER=smtp."
            )
        self.api_url = api_url or settings.BREVO_API_URL
        self.timeout = timeout or settings.BREVO_TIMEOUT_SECONDS
        self.sender_name, self.sender_email = _sender_identity(
            from_email or settings.DEFAULT_FROM_EMAIL
        )

    def build_payload(self, message):
        payload = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": message.to_email, "name": message.to_name}],
            "subject": message.subject,
            "textContent": message.text_body,
        }
        if message.html_body:
            payload["htmlContent"] = str(message.html_body)
        return payload

    def send(self, message):
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "api-key": self.api_key,
        }

        try:
            response = requests.post(
                self.api_url,
                json=self.build_payload(message),
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise SendError(
                f"Brevo API error: {exc.response.status_code} - {exc.response.text}"
            ) from exc
        except requests.RequestException as exc:
            raise SendError(f"Brevo request to {message.to_email} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        message_id = data.get("messageId") or (data.get("messageIds") or [""])[0]
        if not message_id:
            logger.warning("Brevo accepted message to %s without a messageId", message.to_email)
        return message_id


SENDERS = {
    DjangoMailSender.name: DjangoMailSender,
    BrevoSender.name: BrevoSender,
}


def get_sender(name=None):
    name = (name or settings.NOTIFICATION_SENDER or "smtp").strip().lower()
    try:
        sender_class = SENDERS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown NOTIFICATION_SENDER {name!r}; expected one of {sorted(SENDERS)}"
        ) from None
    return sender_class()

"""
notifications/gate.py

Shared-secret check in front of every job trigger.

Both values are reduced to fixed-size digests before the constant-time
comparison, so neither the position of the first differing byte nor a
difference in length changes the running time.
"""

import hashlib
import logging

from django.conf import settings
from django.utils.crypto import constant_time_compare

from notifications.exceptions import TriggerNotConfigured

logger = logging.getLogger(__name__)


def _digest(value):
    return hashlib.sha256(value.encode("utf-8")).digest()


def secrets_match(provided, expected):
    return constant_time_compare(_digest(provided), _digest(expected))


class TriggerGate:

    def __init__(self, expected_secret=None):
        if expected_secret is None:
            expected_secret = getattr(settings, "CRON_SECRET_KEY", "")
        self.expected_secret = (expected_secret or "").strip()

    @property
    def configured(self):
        return bool(self.expected_secret)

    def check(self, provided_secret):
        """
        True only for a matching secret.

        Raises TriggerNotConfigured when no secret is configured: the gate
        never opens without one.
        """
        if not self.configured:
            logger.error("Trigger secret is not configured; refusing request")
            raise TriggerNotConfigured(
                "CRON_SECRET_KEY is not set; trigger endpoints reject every request."
            )

        if not provided_secret:
            logger.warning("Trigger rejected: no secret provided")
            return False

        if not secrets_match(str(provided_secret), self.expected_secret):
            logger.warning("Trigger rejected: invalid secret")
            return False

        return True

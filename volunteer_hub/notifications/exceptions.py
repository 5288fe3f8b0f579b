"""
Error taxonomy for the reminder engine.

Per-item send failures are handled inside the dispatcher.
Everything here that escapes a job run is fatal for that run.
"""

from django.core.exceptions import ImproperlyConfigured


class ReminderEngineError(Exception):
    """Base class for reminder engine failures."""


class ConfigurationError(ReminderEngineError, ImproperlyConfigured):
    """Required settings or credentials are missing or invalid."""


class TriggerNotConfigured(ConfigurationError):
    """No trigger secret is configured; every trigger request is refused."""


class LedgerUnavailable(ConfigurationError):
    """The dedup ledger tables are missing from the database."""


class ResolutionError(ReminderEngineError):
    """The record store could not produce the candidate pairs."""


class LedgerError(ReminderEngineError):
    """A ledger lookup or write could not be completed."""


class SendError(ReminderEngineError):
    """The notification provider rejected or failed a single message."""


class RecordNotFound(ReminderEngineError):
    """A task, volunteer or assignment named by a caller does not exist."""

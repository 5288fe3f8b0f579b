"""
notifications/services/summary.py

Per-run accounting shared by both orchestrators.
"""

import time
from collections import Counter
from dataclasses import dataclass, field

from django.utils import timezone


# Skip reasons
NO_EMAIL = "no_email"
NO_INCOMPLETE_TASKS = "no_incomplete_tasks"
ALREADY_NOTIFIED = "already_notified"
ALREADY_CLAIMED = "already_claimed"
LEDGER_UNAVAILABLE = "ledger_unavailable"
NO_ADMIN_RECIPIENTS = "no_admin_recipients"


@dataclass(frozen=True)
class DeliveryOutcome:
    sent: bool
    reason: str = ""

    @classmethod
    def delivered(cls):
        return cls(sent=True)

    @classmethod
    def skipped(cls, reason):
        return cls(sent=False, reason=reason)


@dataclass
class JobSummary:
    kind: str
    timestamp: object = field(default_factory=timezone.now)
    processed: int = 0
    sent: int = 0
    failed: int = 0
    skip_reasons: Counter = field(default_factory=Counter)
    errors: list = field(default_factory=list)
    not_started: int = 0
    timed_out: bool = False
    duration_ms: int = 0
    _started: float = field(default_factory=time.monotonic, repr=False)

    @property
    def skipped(self):
        return sum(self.skip_reasons.values())

    @property
    def success(self):
        """The batch ran to completion (per-item failures allowed)."""
        return not self.timed_out and not self.not_started

    def skip(self, reason):
        self.skip_reasons[reason] += 1

    def add_error(self, *, volunteer_id, email, error):
        self.failed += 1
        self.errors.append({
            "volunteerId": volunteer_id,
            "email": email or "unknown",
            "error": str(error),
        })

    def finish(self):
        self.duration_ms = int((time.monotonic() - self._started) * 1000)
        return self

    def as_dict(self):
        data = {
            "timestamp": self.timestamp.isoformat(),
            "totalTasksProcessed": self.processed,
            "totalEmailsSent": self.sent,
            "totalEmailsFailed": self.failed,
            "totalSkipped": self.skipped,
            "skipReasons": dict(self.skip_reasons),
            "durationMs": self.duration_ms,
        }
        if self.errors:
            data["errors"] = self.errors
        if self.timed_out:
            data["timedOut"] = True
            data["notStarted"] = self.not_started
        return data

    def describe(self):
        lines = [
            f"{self.kind} job summary:",
            f"- Timestamp: {self.timestamp.isoformat()}",
            f"- Processed: {self.processed}",
            f"- Sent: {self.sent}",
            f"- Failed: {self.failed}",
            f"- Skipped: {self.skipped}",
            f"- Status: {'Success' if self.success else 'Incomplete'}",
        ]
        if self.errors:
            lines.append(f"- Errors: {', '.join(e['error'] for e in self.errors)}")
        return "\n".join(lines)

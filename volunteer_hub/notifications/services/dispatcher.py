"""
notifications/services/dispatcher.py

Bounded, fault-isolated fan-out of blocking work (provider calls, ledger
writes) over a fixed number of worker threads.

- exactly `concurrency` workers pull from one shared cursor
- the cursor advance is guarded by a lock: no item is taken twice or skipped
- every exception raised by the worker is caught, logged and reported;
  it never reaches the other items or the caller
- past the deadline, workers stop pulling new items; calls already in
  flight are allowed to finish

Worker 0 runs on the calling thread, so concurrency=1 never leaves it.
"""

import logging
import threading
import time
from dataclasses import dataclass, field

from django.db import connections

logger = logging.getLogger(__name__)


@dataclass
class ItemResult:
    index: int
    item: object
    outcome: object = None
    error: BaseException = None

    @property
    def ok(self):
        return self.error is None


@dataclass
class DispatchReport:
    results: list = field(default_factory=list)
    not_started: list = field(default_factory=list)
    timed_out: bool = False

    @property
    def attempted(self):
        return len(self.results)

    @property
    def succeeded(self):
        return [r for r in self.results if r.ok]

    @property
    def failed(self):
        return [r for r in self.results if not r.ok]


class _Cursor:
    """Hands out each index exactly once across threads."""

    def __init__(self, size, deadline=None):
        self._size = size
        self._next = 0
        self._deadline = deadline
        self._lock = threading.Lock()
        self.expired = False

    def take(self):
        """
        Next index, or None when exhausted. Past the deadline an unclaimed
        index is left in place and the cursor is marked expired.
        """
        with self._lock:
            if self._next >= self._size:
                return None
            if self._deadline is not None and time.monotonic() >= self._deadline:
                self.expired = True
                return None
            index = self._next
            self._next += 1
            return index

    def remaining(self):
        with self._lock:
            start, self._next = self._next, self._size
            return range(start, self._size)


def deadline_after(timeout):
    """Monotonic deadline `timeout` seconds from now, or None for no limit."""
    return time.monotonic() + timeout if timeout else None


def dispatch(items, worker, *, concurrency=1, timeout=None, deadline=None, name="dispatch"):
    """
    Run `worker(item)` once for every item using `concurrency` workers.

    `deadline` is an absolute `time.monotonic()` value shared with the caller;
    `timeout` starts a fresh one here when no deadline is given.

    Returns a DispatchReport once every started item has finished. Items
    never started because the deadline passed are listed in `not_started`.
    """
    items = list(items)
    concurrency = max(1, int(concurrency))
    if deadline is None:
        deadline = deadline_after(timeout)

    cursor = _Cursor(len(items), deadline)
    results = [None] * len(items)

    def run_worker():
        while True:
            index = cursor.take()
            if index is None:
                return

            item = items[index]
            try:
                outcome = worker(item)
            except Exception as exc:
                logger.exception("[%s] item %s failed: %s", name, index, exc)
                results[index] = ItemResult(index=index, item=item, error=exc)
            else:
                results[index] = ItemResult(index=index, item=item, outcome=outcome)

    def run_thread():
        try:
            run_worker()
        finally:
            # Spawned threads own their DB connections.
            connections.close_all()

    threads = [
        threading.Thread(target=run_thread, name=f"{name}-worker-{n}", daemon=True)
        for n in range(1, min(concurrency, len(items)))
    ]
    for thread in threads:
        thread.start()

    run_worker()

    for thread in threads:
        thread.join()

    report = DispatchReport()
    for index in cursor.remaining():
        report.not_started.append(items[index])
    report.timed_out = cursor.expired
    report.results = [r for r in results if r is not None]

    if report.timed_out:
        logger.warning(
            "[%s] deadline reached: %s attempted, %s not started",
            name, report.attempted, len(report.not_started),
        )

    logger.debug(
        "[%s] %s items, %s workers: %s ok, %s failed",
        name, len(items), concurrency, len(report.succeeded), len(report.failed),
    )
    return report

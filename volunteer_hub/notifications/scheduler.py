import logging
import threading

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from django.conf import settings
from django.core.management import call_command
from django.utils import timezone

logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "send_task_reminders"
STATUS_JOB_ID = "update_volunteer_statuses"

# ============================================================
# GLOBAL SAFETY LOCK
# Prevents scheduler from starting more than once
# ============================================================
_scheduler = None
_lock = threading.Lock()


def parse_crontab(expression):
    """
    Five-field crontab -> CronTrigger in the project time zone.
    Raises ValueError for a malformed expression.
    """
    return CronTrigger.from_crontab(expression, timezone=settings.TIME_ZONE)


def start_scheduler(*, force=False, reminder_cron=None):
    """
    Start APScheduler safely.

    - Respects ENABLE_SCHEDULER unless forced (manual reschedule)
    - Prevents double start (Django autoreload, imports)
    - Single-process only: the external cron endpoints remain the
      source of truth in multi-process deployments
    """
    global _scheduler

    # --------------------------------------------
    # DEV / PROD TOGGLE
    # --------------------------------------------
    if not force and not getattr(settings, "ENABLE_SCHEDULER", False):
        logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    with _lock:
        # --------------------------------------------
        # SAFETY LOCK (NO DOUBLE START)
        # --------------------------------------------
        if _scheduler is not None:
            logger.info("APScheduler already running, skipping initialization")
            return _scheduler

        reminder_cron = reminder_cron or settings.REMINDER_CRON
        reminder_trigger = parse_crontab(reminder_cron)

        logger.info("Starting APScheduler...")

        scheduler = BackgroundScheduler(timezone=settings.TIME_ZONE)

        scheduler.add_job(
            run_scheduled_reminders,
            trigger=reminder_trigger,
            id=REMINDER_JOB_ID,
            replace_existing=True,
            max_instances=1,      # Prevent overlapping runs
            coalesce=True,        # Merge missed runs if server was down
        )

        status_cron = getattr(settings, "VOLUNTEER_STATUS_CRON", "")
        if status_cron:
            scheduler.add_job(
                run_scheduled_status_update,
                trigger=parse_crontab(status_cron),
                id=STATUS_JOB_ID,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )

        scheduler.start()
        _scheduler = scheduler

    logger.info("APScheduler started: task reminders scheduled at '%s'", reminder_cron)
    return _scheduler


def stop_scheduler():
    global _scheduler

    with _lock:
        if _scheduler is None:
            return
        _scheduler.shutdown(wait=False)
        _scheduler = None

    logger.info("APScheduler stopped")


def is_scheduler_running():
    return _scheduler is not None and _scheduler.running


def reschedule_reminders(expression):
    """
    Move the reminder job to a new crontab, starting the scheduler if
    it is not running yet.
    """
    trigger = parse_crontab(expression)

    if _scheduler is None:
        logger.info("Scheduler not initialized, initializing with '%s'", expression)
        start_scheduler(force=True, reminder_cron=expression)
        return

    _scheduler.reschedule_job(REMINDER_JOB_ID, trigger=trigger)
    logger.info("Reminder job rescheduled to '%s'", expression)


def run_scheduled_reminders():
    """
    Wrapper job that calls the Django management command.
    Keeps all business logic out of the scheduler.
    """
    now = timezone.now()
    logger.info(f"Running scheduled task reminders at {now:%Y-%m-%d %H:%M:%S}")

    call_command("send_task_reminders", "--overdue")


def run_scheduled_status_update():
    call_command("update_volunteer_statuses")

"""
Trigger endpoints for external schedulers.

Every job endpoint is gated by the shared cron secret and always answers
with a JSON summary:
    200 -> the run completed (per-item failures are listed, not fatal)
    400 -> malformed request (bad ids, missing schedule, unknown action)
    401 -> missing or wrong secret
    404 -> task, volunteer or assignment not found
    500 -> configuration problem or the run could not be carried out
"""

import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from notifications.exceptions import (
    ConfigurationError,
    LedgerError,
    RecordNotFound,
    ReminderEngineError,
    TriggerNotConfigured,
)
from notifications.gate import TriggerGate
from notifications.scheduler import is_scheduler_running, reschedule_reminders
from notifications.services import (
    ReminderEngine,
    run_daily_notifications,
    send_task_reminder,
    send_volunteer_reminders,
    was_reminded_today,
)
from notifications.services.ledger import ReminderLedger
from notifications.services.reminders.single import NO_EMAIL_ADDRESS

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def _json_body(request):
    if request.method != "POST" or not request.body:
        return {}
    try:
        body = json.loads(request.body)
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error(message, status, **extra):
    return JsonResponse({"success": False, "message": message, **extra}, status=status)


def _authenticate(request, param, body):
    """
    Returns an error response, or None when the caller may proceed.
    The query string wins over the JSON body.
    """
    provided = request.GET.get(param) or body.get(param)

    try:
        allowed = TriggerGate().check(provided)
    except TriggerNotConfigured:
        return _error("Cron service not configured", 500)

    if not allowed:
        return _error("Authentication failed: invalid secret key", 401)
    return None


def _build_engine():
    """Returns (engine, None) or (None, error response)."""
    try:
        return ReminderEngine.from_settings(), None
    except ConfigurationError as exc:
        logger.error("Reminder engine misconfigured: %s", exc)
        return None, _error("Cron service not configured", 500, error=str(exc))


def _reminder_payload(summary):
    if summary.success and not summary.failed:
        message = "Reminders sent successfully"
    elif summary.success:
        message = "Job completed with errors"
    else:
        message = "Job stopped before all reminders were attempted"

    return {
        "success": summary.success,
        "message": message,
        "data": summary.as_dict(),
    }


# ============================================================
# REMINDER RUN (GET / POST)
# ============================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def run_reminders(request):
    body = _json_body(request)

    denied = _authenticate(request, "secret", body)
    if denied:
        return denied

    engine, error = _build_engine()
    if error:
        return error

    logger.info("Authenticated reminder trigger received. Starting reminder job...")

    try:
        summary = send_volunteer_reminders(engine)
    except ReminderEngineError as exc:
        logger.error("Reminder job failed: %s", exc)
        return _error("Job execution failed", 500, error=str(exc))
    except Exception as exc:
        logger.exception("Unexpected error in reminder job")
        return _error("Internal server error", 500, error=str(exc))

    return JsonResponse(_reminder_payload(summary), status=200)


# ============================================================
# DAILY RUN: REMINDERS + OVERDUE ALERTS
# ============================================================

@csrf_exempt
@require_GET
def daily_run(request):
    denied = _authenticate(request, "key", {})
    if denied:
        return denied

    engine, error = _build_engine()
    if error:
        return error

    try:
        reminders, overdue = run_daily_notifications(engine)
    except ReminderEngineError as exc:
        logger.error("Daily run failed: %s", exc)
        return _error("Job execution failed", 500, error=str(exc))
    except Exception as exc:
        logger.exception("Unexpected error in daily run")
        return _error("Internal server error", 500, error=str(exc))

    return JsonResponse(
        {
            "success": reminders.success and overdue.success,
            "message": (
                f"Sent {reminders.sent} reminder emails and "
                f"{overdue.sent} overdue alerts"
            ),
            "reminderEmailsSent": reminders.sent,
            "overdueAlertsSent": overdue.sent,
            "totalEmailsSent": reminders.sent + overdue.sent,
            "data": {
                "reminders": reminders.as_dict(),
                "overdueAlerts": overdue.as_dict(),
            },
        },
        status=200,
    )


# ============================================================
# SINGLE TASK REMINDER (POST sends, GET checks)
# ============================================================

def _pair_ids(source):
    """Returns (task_id, volunteer_id), or None when either is missing or invalid."""
    try:
        task_id = int(source.get("taskId") or 0)
        volunteer_id = int(source.get("volunteerId") or 0)
    except (TypeError, ValueError):
        return None
    if task_id < 1 or volunteer_id < 1:
        return None
    return task_id, volunteer_id


@csrf_exempt
@require_http_methods(["GET", "POST"])
def send_task_reminder_view(request):
    body = _json_body(request)

    denied = _authenticate(request, "secret", body)
    if denied:
        return denied

    if request.method == "GET":
        return _reminder_status(request)

    ids = _pair_ids(body)
    if ids is None:
        return _error("Missing or invalid taskId or volunteerId", 400)

    engine, error = _build_engine()
    if error:
        return error

    try:
        result = send_task_reminder(engine, *ids)
    except RecordNotFound as exc:
        return _error(str(exc), 404)
    except Exception as exc:
        logger.exception("Error sending task reminder for task %s, volunteer %s", *ids)
        return _error("Failed to send email", 500, error=str(exc))

    if not result.sent and result.message == NO_EMAIL_ADDRESS:
        return _error(result.message, 400)

    payload = {"success": result.sent, "message": result.message}
    if result.sent:
        payload["messageId"] = result.delivery_id
    return JsonResponse(payload, status=200)


def _reminder_status(request):
    ids = _pair_ids(request.GET)
    if ids is None:
        return _error("Missing taskId or volunteerId", 400)

    try:
        sent = was_reminded_today(ReminderLedger(), *ids)
    except LedgerError as exc:
        logger.error("Could not check reminder status: %s", exc)
        return _error("Failed to check email status", 500, error=str(exc))

    return JsonResponse({"success": True, "emailSentToday": sent}, status=200)


# ============================================================
# MANUAL TRIGGER / RESCHEDULE
# ============================================================

@csrf_exempt
@require_POST
def manual_trigger(request):
    body = _json_body(request)

    denied = _authenticate(request, "secret", body)
    if denied:
        return denied

    action = body.get("action") or "trigger"

    if action == "trigger":
        engine, error = _build_engine()
        if error:
            return error

        logger.info("Manually triggering task reminder job")
        try:
            summary = send_volunteer_reminders(engine)
        except ReminderEngineError as exc:
            logger.error("Manual reminder job failed: %s", exc)
            return _error("Failed to execute job", 500, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error in manual reminder job")
            return _error("Internal server error", 500, error=str(exc))

        return JsonResponse(
            {
                "success": summary.success,
                "message": "Job executed successfully",
                "result": summary.as_dict(),
            },
            status=200,
        )

    if action == "reschedule":
        schedule = (body.get("schedule") or "").strip()
        if not schedule:
            return _error("Missing schedule parameter", 400)

        try:
            reschedule_reminders(schedule)
        except ValueError as exc:
            return _error(f"Invalid schedule: {exc}", 400)

        return JsonResponse(
            {"success": True, "message": f"Cron job rescheduled to: {schedule}"},
            status=200,
        )

    return _error("Unknown action", 400)


# ============================================================
# STATUS / HEALTH
# ============================================================

@require_GET
def manual_status(request):
    running = is_scheduler_running()
    return JsonResponse(
        {
            "success": True,
            "running": running,
            "message": (
                "Cron job scheduler is running"
                if running
                else "Cron job scheduler is not running"
            ),
        }
    )


@require_GET
def health(request):
    return HttpResponse("OK", content_type="text/plain")

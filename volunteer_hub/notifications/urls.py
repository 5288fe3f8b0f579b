from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    path("reminders/run", views.run_reminders, name="run_reminders"),
    path("daily-run", views.daily_run, name="daily_run"),
    path("send-task-reminder", views.send_task_reminder_view, name="send_task_reminder"),
    path("manual-trigger", views.manual_trigger, name="manual_trigger"),
    path("manual-status", views.manual_status, name="manual_status"),
    path("health", views.health, name="health"),
]

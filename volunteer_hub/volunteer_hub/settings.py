"""
Django settings for the volunteer_hub project.

Every deploy-specific value is read from the environment (or a .env file)
through python-decouple.
"""

from pathlib import Path

from decouple import config, Csv

BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config("SECRET_KEY", default="django-insecure-change-me-in-production")

DEBUG = config("DEBUG", default=False, cast=bool)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())


# =============================================================================
# APPLICATIONS
# =============================================================================
DJANGO_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

LOCAL_APPS = [
    "volunteers",
    "notifications",
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "volunteer_hub.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "volunteer_hub.wsgi.application"


# =============================================================================
# DATABASE
# =============================================================================
DATABASES = {
    "default": {
        "ENGINE": config("DB_ENGINE", default="django.db.backends.sqlite3"),
        "NAME": config("DB_NAME", default=str(BASE_DIR / "db.sqlite3")),
        "USER": config("DB_USER", default=""),
        "PASSWORD": config("DB_PASSWORD", default=""),
        "HOST": config("DB_HOST", default=""),
        "PORT": config("DB_PORT", default=""),
    }
}

# A file-backed SQLite test database lets threaded tests wait on locks
# instead of failing on the shared in-memory cache.
if DATABASES["default"]["ENGINE"] == "django.db.backends.sqlite3":
    DATABASES["default"]["TEST"] = {
        "NAME": config("DB_TEST_NAME", default=str(BASE_DIR / "test_db.sqlite3")),
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# =============================================================================
# INTERNATIONALIZATION & TIMEZONE
# =============================================================================
# "Today" for reminder dedup and overdue checks is the calendar date here.
LANGUAGE_CODE = "en-us"
TIME_ZONE = config("TIME_ZONE", default="UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


# =============================================================================
# EMAIL
# =============================================================================
EMAIL_BACKEND = config(
    "EMAIL_BACKEND",
    default="django.core.mail.backends.console.EmailBackend",
)
EMAIL_HOST = config("EMAIL_HOST", default="localhost")
EMAIL_PORT = config("EMAIL_PORT", default=587, cast=int)
EMAIL_USE_TLS = config("EMAIL_USE_TLS", default=True, cast=bool)
EMAIL_HOST_USER = config("EMAIL_HOST_USER", default="")
EMAIL_HOST_PASSWORD = config("EMAIL_HOST_PASSWORD", default="")
EMAIL_TIMEOUT = config("EMAIL_TIMEOUT", default=30, cast=int)

DEFAULT_FROM_EMAIL = config(
    "DEFAULT_FROM_EMAIL",
    default="Volunteer Management System <noreply@volunteerapp.com>",
)


# =============================================================================
# REMINDER ENGINE
# =============================================================================
# Shared secret for the cron trigger endpoints. Empty means every trigger
# request is rejected.
CRON_SECRET_KEY = config("CRON_SECRET_KEY", default="") or config("CRON_SECRET", default="")

# Worker count for the bounded dispatcher (minimum 1).
REMINDER_SEND_CONCURRENCY = config("REMINDER_SEND_CONCURRENCY", default=5, cast=int)

# Workers stop pulling new items once a run exceeds this budget.
REMINDER_JOB_TIMEOUT_SECONDS = config("REMINDER_JOB_TIMEOUT_SECONDS", default=240, cast=float)

# Overdue alert recipients; falls back to the single ADMIN_EMAIL.
ADMIN_ALERT_EMAILS = config("ADMIN_ALERT_EMAILS", default="", cast=Csv()) or config(
    "ADMIN_EMAIL", default="", cast=Csv()
)

# "smtp" sends through Django's email backend, "brevo" through the Brevo API.
NOTIFICATION_SENDER = config("NOTIFICATION_SENDER", default="smtp")
BREVO_API_KEY = config("BREVO_API_KEY", default="")
BREVO_API_URL = config("BREVO_API_URL", default="https://api.brevo.com/v3/smtp/email")
BREVO_TIMEOUT_SECONDS = config("BREVO_TIMEOUT_SECONDS", default=15, cast=float)

# Email the volunteer as soon as a task is assigned to them.
SEND_ASSIGNMENT_EMAILS = config("SEND_ASSIGNMENT_EMAILS", default=True, cast=bool)


# =============================================================================
# SCHEDULER (APScheduler)
# =============================================================================
ENABLE_SCHEDULER = config("ENABLE_SCHEDULER", default=False, cast=bool)

# Daily at 11:50 UTC by default.
REMINDER_CRON = config("REMINDER_CRON", default="50 11 * * *")
VOLUNTEER_STATUS_CRON = config("VOLUNTEER_STATUS_CRON", default="0 2 * * *")

VOLUNTEER_INACTIVE_AFTER_DAYS = config("VOLUNTEER_INACTIVE_AFTER_DAYS", default=7, cast=int)


# =============================================================================
# LOGGING
# =============================================================================
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {threadName} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "notifications": {
            "handlers": ["console"],
            "level": config("ENGINE_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
        "volunteers": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apscheduler": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

"""Django settings for the example schedule sync project.

Reads secrets from the environment (or a ``.env`` file next to this module)
and publishes the schedule to Redis as plain JSON under bare keys, the
layout the deconf presentation service reads.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "example-dev-key-not-for-production")
DEBUG = False

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "deconf_schedule",
]

DATABASES = {}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        "KEY_FUNCTION": "deconf_schedule.store.raw_key",
        "OPTIONS": {"serializer": "deconf_schedule.store.JSONSerializer"},
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "deconf_schedule": {"handlers": ["console"], "level": os.environ.get("LOG_LEVEL", "INFO")},
        "pretalx_client": {"handlers": ["console"], "level": os.environ.get("LOG_LEVEL", "INFO")},
    },
}

DECONF_SCHEDULE = {
    "pretalx": {
        "base_url": os.environ.get("PRETALX_BASE_URL", "https://pretalx.com"),
        "event_slug": os.environ.get("PRETALX_EVENT_SLUG", ""),
        "token": os.environ.get("PRETALX_API_TOKEN", ""),
        "questions": {
            "affiliation": 101,
            "pulse_photo": 102,
            "recommendations": 103,
            "links": [104, 105],
        },
        "asl_tag_id": 11,
        "cc_tag_id": 12,
    },
    "session_types": [
        {"id": "1", "title": {"en": "Workshop"}, "layout": "workshop", "icon": ["fas", "tools"]},
        {"id": "2", "title": {"en": "Talk"}, "layout": "plenary", "icon": ["fas", "comment"]},
        {"id": "3", "title": {"en": "Discussion"}, "layout": "plenary", "icon": ["fas", "users"]},
    ],
}

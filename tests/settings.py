"""Minimal Django settings for running deconf-schedule tests."""

DATABASES = {"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}}
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "deconf_schedule",
]
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "deconf-schedule-tests",
    }
}
SECRET_KEY = "test-secret-key-not-for-production"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True

DECONF_SCHEDULE = {
    "pretalx": {
        "base_url": "https://pretalx.example.com",
        "event_slug": "test-event",
        "token": "tok",
    },
    "lock": {"release_delay_seconds": 0},
}

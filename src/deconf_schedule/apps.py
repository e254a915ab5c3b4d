"""Django app configuration for the schedule sync app."""

from django.apps import AppConfig


class DeconfScheduleConfig(AppConfig):
    """Configuration for the schedule sync app."""

    name = "deconf_schedule"
    label = "deconf_schedule"
    verbose_name = "Deconf Schedule Sync"

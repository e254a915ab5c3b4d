"""Management command to sync the Pretalx schedule into the shared store.

Usage::

    manage.py sync_schedule

Exits non-zero when another process holds the sync lock or when Pretalx
cannot be reached.
"""

from django.core.management.base import BaseCommand, CommandError

from deconf_schedule.sync import ScheduleSyncService


class Command(BaseCommand):
    """Fetch the schedule from Pretalx and publish it."""

    help = "Fetch the schedule from Pretalx and publish it to the shared store"

    def handle(self, **options: object) -> None:
        """Execute the sync command."""
        try:
            service = ScheduleSyncService()
            result = service.run()
        except (RuntimeError, ValueError) as exc:
            raise CommandError(str(exc)) from exc

        msg = (
            f"Published {result.sessions} sessions, "
            f"{result.slots} slots, "
            f"{result.speakers} speakers, "
            f"{result.themes} themes, "
            f"{result.tracks} tracks, "
            f"{result.types} types, "
            f"{result.facilitators} facilitators"
        )
        if result.dropped:
            msg += f" ({len(result.dropped)} submissions dropped)"
        self.stdout.write(self.style.SUCCESS(msg))

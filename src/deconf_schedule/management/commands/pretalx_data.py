"""Management command to dump raw Pretalx data as JSON.

Handy for finding the question and tag IDs the sync configuration needs.

Usage::

    manage.py pretalx_data questions
    manage.py pretalx_data submissions > submissions.json
"""

import dataclasses
import json
from typing import TYPE_CHECKING

from django.core.management.base import BaseCommand, CommandError
from django.core.serializers.json import DjangoJSONEncoder

from deconf_schedule.settings import ScheduleConfig, get_config
from deconf_schedule.sync import speaker_questions, submission_questions
from pretalx_client.client import PretalxClient

if TYPE_CHECKING:
    import argparse

_RESOURCES = ("questions", "event", "submissions", "speakers", "tags")


class Command(BaseCommand):
    """Print Pretalx event data as JSON."""

    help = "Print Pretalx event data (questions, event, submissions, speakers, tags) as JSON"

    def add_arguments(self, parser: "argparse.ArgumentParser") -> None:
        """Register command-line arguments.

        Args:
            parser: The argument parser to add arguments to.
        """
        parser.add_argument("resource", choices=_RESOURCES, help="Which Pretalx data to print.")

    def handle(self, **options: object) -> None:
        """Fetch the requested resource and write it to stdout."""
        config = get_config()
        pretalx = config.pretalx
        if not pretalx.event_slug:
            msg = "DECONF_SCHEDULE['pretalx']['event_slug'] is not configured"
            raise CommandError(msg)

        client = PretalxClient(pretalx.event_slug, base_url=pretalx.base_url, api_token=pretalx.token or "")
        resource = str(options["resource"])
        try:
            data = self._fetch(client, resource, config)
        except RuntimeError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(json.dumps(data, indent=2, cls=DjangoJSONEncoder))

    def _fetch(self, client: PretalxClient, resource: str, config: ScheduleConfig) -> object:
        if resource == "questions":
            return client.fetch_questions()
        if resource == "event":
            return client.fetch_event()
        if resource == "submissions":
            questions = submission_questions(config)
            return [dataclasses.asdict(s) for s in client.fetch_submissions(questions=questions)]
        if resource == "speakers":
            questions = speaker_questions(config)
            return [dataclasses.asdict(s) for s in client.fetch_speakers(questions=questions)]
        return [dataclasses.asdict(t) for t in client.fetch_tags()]

"""HTTP client for the Pretalx REST API.

:class:`PretalxClient` reads one event: its submissions, speakers and tags,
plus the lookup tables and metadata needed to configure a sync.  List
endpoints are followed page by page until exhausted, and every request
failure surfaces as a :class:`RuntimeError` naming the URL.

Results come back as the typed records in :mod:`pretalx_client.models`.
"""

import logging
from collections.abc import Iterator, Sequence
from typing import Any
from urllib.parse import urlencode

import httpx

from pretalx_client.adapters.normalization import localized
from pretalx_client.models import (
    PretalxSpeaker,
    PretalxSubmission,
    PretalxTag,
)

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


class PretalxClient:
    """Read-only client for a single Pretalx event.

    Args:
        event_slug: The Pretalx event slug (e.g. ``"mozfest-2026"``).
        base_url: Root URL of the Pretalx instance, with or without a
            trailing ``/api``. Defaults to ``"https://pretalx.com"``.
        api_token: Organiser API token. Without one Pretalx only serves
            public data: no speaker emails and no unconfirmed submissions.

    Example::

        client = PretalxClient("mozfest-2026", api_token="abc123")
        submissions = client.fetch_submissions(questions=[12, 13])
        speakers = client.fetch_speakers(questions=[14])
        tags = client.fetch_tags()
    """

    def __init__(
        self,
        event_slug: str,
        *,
        base_url: str = "https://pretalx.com",
        api_token: str = "",
    ) -> None:
        """Initialize the client for one Pretalx event.

        Args:
            event_slug: The Pretalx event slug.
            base_url: Root URL of the Pretalx instance.
            api_token: Optional organiser API token.
        """
        self.event_slug = event_slug
        self.base_url = base_url.rstrip("/").removesuffix("/api")
        self.api_token = api_token
        self.api_url = f"{self.base_url}/api/events/{self.event_slug}/"

        self.headers: dict[str, str] = {"Accept": "application/json"}
        if self.api_token:
            self.headers["Authorization"] = f"Token {self.api_token}"

    def _url(self, endpoint: str, **params: object) -> str:
        """Build an event-scoped endpoint URL, dropping empty query params."""
        url = f"{self.api_url}{endpoint}"
        query = {key: value for key, value in params.items() if value not in (None, "")}
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def _http(self) -> httpx.Client:
        return httpx.Client(timeout=REQUEST_TIMEOUT, headers=self.headers)

    @staticmethod
    def _get_json(http: httpx.Client, url: str) -> Any:
        """GET *url* and decode the JSON body.

        Raises:
            RuntimeError: On an HTTP error status or a transport failure.
        """
        logger.debug("Fetching %s", url)
        try:
            response = http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"Pretalx API request failed: {exc.response.status_code} for URL {exc.request.url}"
            raise RuntimeError(msg) from exc
        except httpx.RequestError as exc:
            msg = f"Pretalx API connection error for URL {url}: {exc}"
            raise RuntimeError(msg) from exc
        return response.json()

    def _iter_results(self, url: str) -> Iterator[dict[str, Any]]:
        """Yield every result of a list endpoint, following ``next`` links.

        Endpoints that answer with a bare JSON list are treated as a single
        page.
        """
        next_url: str | None = url
        with self._http() as http:
            while next_url is not None:
                page = self._get_json(http, next_url)
                if isinstance(page, list):
                    yield from page
                    return
                yield from page.get("results", [])
                next_url = page.get("next")

    def _get_paginated(self, url: str) -> list[dict[str, Any]]:
        """Collect all results of a paginated endpoint into one list.

        Args:
            url: The first page's URL.

        Returns:
            Result dicts from every page, in API order.

        Raises:
            RuntimeError: If any page request fails.
        """
        results = list(self._iter_results(url))
        logger.debug("Collected %d results from %s", len(results), url)
        return results

    def fetch_event(self) -> dict[str, Any]:
        """Fetch the event's metadata (name, dates, timezone, locales).

        Raises:
            RuntimeError: If the request fails.
        """
        with self._http() as http:
            return self._get_json(http, self.api_url)

    def fetch_questions(self) -> list[dict[str, Any]]:
        """Fetch the event's custom questions, to look up configured IDs."""
        return self._get_paginated(self._url("questions/"))

    def _fetch_lookup(self, endpoint: str) -> dict[int, str]:
        """Fetch an ``{id: display name}`` table from an endpoint of named objects."""
        return {
            int(item["id"]): localized(item.get("name"))
            for item in self._get_paginated(self._url(endpoint))
            if item.get("id") is not None
        }

    def fetch_rooms(self) -> dict[int, str]:
        """Fetch room names by ID."""
        return self._fetch_lookup("rooms/")

    def fetch_submission_types(self) -> dict[int, str]:
        """Fetch submission type names by ID."""
        return self._fetch_lookup("submission-types/")

    def fetch_tracks(self) -> dict[int, str]:
        """Fetch track names by ID."""
        return self._fetch_lookup("tracks/")

    def fetch_submissions(
        self,
        *,
        questions: Sequence[int] = (),
        state: str = "",
        submission_types: dict[int, str] | None = None,
        tracks: dict[int, str] | None = None,
        rooms: dict[int, str] | None = None,
    ) -> list[PretalxSubmission]:
        """Fetch the event's submissions.

        Args:
            questions: IDs of the custom questions whose answers should be
                embedded in each submission.
            state: Only return submissions in this state when set.
            submission_types: ``{id: name}`` table for integer type references.
            tracks: ``{id: name}`` table for integer track references.
            rooms: ``{id: name}`` table for integer room references.

        Returns:
            The submissions, in API order.
        """
        url = self._url("submissions/", state=state, questions=_join_ids(questions))
        return [
            PretalxSubmission.from_api(item, submission_types=submission_types, tracks=tracks, rooms=rooms)
            for item in self._iter_results(url)
        ]

    def fetch_speakers(self, *, questions: Sequence[int] = ()) -> list[PretalxSpeaker]:
        """Fetch the event's speakers, embedding answers to *questions*."""
        url = self._url("speakers/", questions=_join_ids(questions))
        return [PretalxSpeaker.from_api(item) for item in self._iter_results(url)]

    def fetch_tags(self) -> list[PretalxTag]:
        """Fetch the event's tags. Most instances require an organiser token."""
        return [PretalxTag.from_api(item) for item in self._iter_results(self._url("tags/"))]


def _join_ids(ids: Sequence[int]) -> str:
    return ",".join(str(i) for i in ids)

"""Slug profile for Pretalx instances that do not expose numeric IDs."""

from deconf_schedule.ids import UNKNOWN_ID, slugify
from deconf_schedule.profiles.base import IdentifierProfile
from deconf_schedule.records import Localised, SessionType
from pretalx_client.models import PretalxSubmission, PretalxTag


class SlugIdProfile(IdentifierProfile):
    """Slug display names; unresolved references fall back to ``"unknown"``.

    Slugs change when a title is edited upstream, so this profile is only
    meant for events where the numeric IDs are unavailable.
    """

    name = "slug"

    def type_id(self, submission: PretalxSubmission) -> str:
        return slugify(submission.submission_type) or UNKNOWN_ID

    def track_id(self, submission: PretalxSubmission) -> str:
        if submission.slot is None:
            return UNKNOWN_ID
        return slugify(submission.slot.room_name) or UNKNOWN_ID

    def track_title(self, submission: PretalxSubmission, default_language: str = "en") -> Localised:
        if self.track_id(submission) == UNKNOWN_ID:
            return {default_language: "Unknown"}
        return super().track_title(submission, default_language)

    def room_key(self, submission: PretalxSubmission) -> str | None:
        track = self.track_id(submission)
        return None if track == UNKNOWN_ID else track

    def theme_id(self, tag: PretalxTag) -> str | None:
        return slugify(tag.tag) or None

    def session_theme_ids(self, submission: PretalxSubmission, tags_by_id: dict[int, PretalxTag]) -> list[str]:
        labels = list(submission.tags)
        labels.extend(tags_by_id[tag_id].tag for tag_id in submission.tag_ids if tag_id in tags_by_id)
        # dict.fromkeys keeps first-seen order while dropping repeats
        return list(dict.fromkeys(slug for slug in map(slugify, labels) if slug))

    def unconfigured_type(self, type_id: str) -> str:  # noqa: ARG002
        return UNKNOWN_ID

    def fallback_session_types(self) -> list[SessionType]:
        return [
            SessionType(
                id=UNKNOWN_ID,
                title={"en": "Unknown"},
                layout="plenary",
                icon_group="fas",
                icon_name="question",
            )
        ]

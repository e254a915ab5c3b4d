"""Identifier profile hooks for turning Pretalx references into schedule IDs."""

from deconf_schedule.ids import composite_id, external_id
from deconf_schedule.records import Localised, SessionType
from pretalx_client.models import PretalxSubmission, PretalxTag


class IdentifierProfile:
    """Base profile: resolve references through numeric Pretalx IDs.

    A reference that cannot be resolved comes back as ``None`` and the
    submission carrying it is dropped by the mapper.
    """

    name = "numeric"

    def type_id(self, submission: PretalxSubmission) -> str | None:
        """Return the session type ID for *submission*."""
        return external_id(submission.submission_type_id)

    def track_id(self, submission: PretalxSubmission) -> str | None:
        """Return the track ID for *submission*, derived from its room."""
        if submission.slot is None:
            return None
        return external_id(submission.slot.room_id)

    def track_title(self, submission: PretalxSubmission, default_language: str = "en") -> Localised:
        """Return the localized title of the track *submission* is in."""
        if submission.slot is None or not submission.slot.room:
            return {default_language: ""}
        return dict(submission.slot.room)

    def room_key(self, submission: PretalxSubmission) -> str | None:
        """Return the room component of *submission*'s slot ID."""
        return self.track_id(submission)

    def slot_id(self, submission: PretalxSubmission) -> str | None:
        """Return the ID of *submission*'s slot, or ``None`` when unscheduled."""
        slot = submission.slot
        room = self.room_key(submission)
        if slot is None or not slot.start or not slot.end or room is None:
            return None
        return composite_id(room, slot.start, slot.end)

    def theme_id(self, tag: PretalxTag) -> str | None:
        """Return the theme ID for *tag*."""
        return external_id(tag.id)

    def session_theme_ids(self, submission: PretalxSubmission, tags_by_id: dict[int, PretalxTag]) -> list[str]:  # noqa: ARG002
        """Return the theme IDs for the tags on *submission*."""
        return [str(tag_id) for tag_id in submission.tag_ids]

    def unconfigured_type(self, type_id: str) -> str | None:  # noqa: ARG002
        """Return the type ID to use when *type_id* is not a known session type.

        ``None`` means the submission is dropped.
        """
        return None

    def fallback_session_types(self) -> list[SessionType]:
        """Return session types this profile needs beyond configuration."""
        return []

"""Frozen records parsed from Pretalx API payloads.

Provides :class:`PretalxSubmission`, :class:`PretalxSpeaker`,
:class:`PretalxSlot`, :class:`PretalxTag` and their nested
:class:`PretalxAnswer` / :class:`PretalxResource` records as frozen
dataclasses that parse raw API dicts into well-typed Python objects.

Each ``from_api()`` classmethod accepts both the legacy API shape (inline
localized objects plus ``*_id`` siblings) and the current shape (bare
integer IDs), so callers never deal with raw dicts.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 -- used at runtime by dataclass fields
from typing import Any

from pretalx_client.adapters.normalization import (
    localized,
    resolve_id,
    resolve_id_or_localized,
)
from pretalx_client.adapters.schedule import normalize_slot

logger = logging.getLogger(__name__)


class SubmissionState(enum.StrEnum):
    """Pretalx submission lifecycle states."""

    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CONFIRMED = "confirmed"
    WITHDRAWN = "withdrawn"
    CANCELED = "canceled"
    DRAFT = "draft"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class PretalxAnswer:
    """An answer to a custom Pretalx question.

    Attributes:
        question_id: ID of the question this answers.
        question: Resolved display text of the question, when inlined.
        answer: The free-text answer.
    """

    question_id: int | None
    answer: str = ""
    question: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PretalxAnswer":
        """Construct a ``PretalxAnswer`` from a raw answer dict.

        The ``question`` key is either an integer ID or an inline object
        with ``id`` and a localized ``question`` text.
        """
        question_raw = data.get("question")
        question_text = ""
        if isinstance(question_raw, dict):
            question_text = localized(question_raw.get("question"))
        return cls(
            question_id=resolve_id(question_raw),
            answer=str(data.get("answer") or ""),
            question=question_text,
        )


@dataclass(frozen=True, slots=True)
class PretalxResource:
    """A resource attached to a submission (slides, recordings, links).

    Attributes:
        resource: URL or file path of the resource.
        description: Human-readable label.
    """

    resource: str
    description: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PretalxResource":
        """Construct a ``PretalxResource`` from a raw resource dict."""
        return cls(
            resource=str(data.get("resource") or data.get("link") or ""),
            description=str(data.get("description") or ""),
        )


@dataclass(frozen=True, slots=True)
class PretalxTag:
    """A tag from the Pretalx ``/tags/`` endpoint.

    Attributes:
        id: Numeric tag ID, ``None`` on instances that do not expose it.
        tag: The tag label.
        color: Hex colour configured for the tag.
    """

    id: int | None
    tag: str
    color: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PretalxTag":
        """Construct a ``PretalxTag`` from a raw tag dict."""
        return cls(
            id=resolve_id(data.get("id")),
            tag=localized(data.get("tag")),
            color=data.get("color") or "",
        )


@dataclass(frozen=True, slots=True)
class PretalxSlot:
    """The scheduled slot of a submission.

    Attributes:
        room: Room name as a ``{language: name}`` dict.
        room_id: Numeric room ID, when the API exposes one.
        start: Start as sent by the API (ISO 8601), empty if unscheduled.
        end: End as sent by the API (ISO 8601), empty if unscheduled.
        start_dt: ``start`` parsed, ``None`` when empty or malformed.
        end_dt: ``end`` parsed, ``None`` when empty or malformed.
    """

    room: dict[str, str]
    room_id: int | None
    start: str
    end: str
    start_dt: datetime | None = field(default=None, repr=False)
    end_dt: datetime | None = field(default=None, repr=False)

    @property
    def room_name(self) -> str:
        """Return the display name of the room."""
        return localized(self.room)

    @classmethod
    def from_api(
        cls,
        data: dict[str, Any],
        *,
        rooms: dict[int, str] | None = None,
    ) -> "PretalxSlot":
        """Parse the ``slot`` object embedded in a submission.

        See :func:`~pretalx_client.adapters.schedule.normalize_slot` for how
        the legacy and current room shapes are handled.
        """
        normalized = normalize_slot(data, rooms=rooms)
        return cls(
            room=normalized["room"],
            room_id=normalized["room_id"],
            start=normalized["start"],
            end=normalized["end"],
            start_dt=normalized["start_dt"],
            end_dt=normalized["end_dt"],
        )


@dataclass(frozen=True, slots=True)
class PretalxSpeaker:
    """A person giving one or more submissions.

    Attributes:
        code: Pretalx speaker code, unique within the event.
        name: Public display name.
        biography: Biography as Markdown.
        avatar_url: Avatar image URL, empty if none was uploaded.
        email: Email address. Pretalx only includes it for organiser tokens.
        submissions: Codes of the speaker's submissions.
        answers: Answers to the custom questions requested with the fetch.
    """

    code: str
    name: str
    biography: str = ""
    avatar_url: str = ""
    email: str = ""
    submissions: list[str] = field(default_factory=list)
    answers: list[PretalxAnswer] = field(default_factory=list)

    def answer_for(self, question_id: int | None) -> str:
        """Return the answer to *question_id*, or an empty string."""
        return _answer_for(self.answers, question_id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PretalxSpeaker":
        """Parse one item of the ``/speakers/`` endpoint."""
        # Avatar key varies across Pretalx instances
        avatar = data.get("avatar_url") or data.get("avatar") or ""
        return cls(
            code=data.get("code", ""),
            name=data.get("name", ""),
            biography=data.get("biography") or "",
            avatar_url=avatar,
            email=data.get("email") or "",
            submissions=list(data.get("submissions") or []),
            answers=_parse_answers(data.get("answers")),
        )


@dataclass(frozen=True, slots=True)
class PretalxSubmission:
    """A proposal submitted to the event, scheduled or not.

    Attributes:
        code: Pretalx submission code, unique within the event.
        title: Title in the submission's own language.
        abstract: One-paragraph summary.
        description: Long-form description, shown as session content.
        content_locale: Language the talk is given in (e.g. ``"en"``).
        submission_type: Submission type name.
        submission_type_id: Numeric submission type ID, when exposed.
        track: Track name.
        track_id: Numeric track ID, when exposed.
        duration: Length in minutes, when set.
        state: Lifecycle state; see :class:`SubmissionState`.
        speaker_codes: Codes of the submission's speakers.
        tag_ids: Numeric tag IDs.
        tags: Tag labels, when the API inlines them.
        do_not_record: Whether the speakers opted out of recording.
        is_featured: Whether the talk is featured.
        resources: Attached resources.
        answers: Answers to the custom questions requested with the fetch.
        slot: Scheduled slot, or ``None`` when unscheduled.
    """

    code: str
    title: str
    abstract: str = ""
    description: str = ""
    content_locale: str = "en"
    submission_type: str = ""
    submission_type_id: int | None = None
    track: str = ""
    track_id: int | None = None
    duration: int | None = None
    state: str = ""
    speaker_codes: list[str] = field(default_factory=list)
    tag_ids: list[int] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    do_not_record: bool = False
    is_featured: bool = False
    resources: list[PretalxResource] = field(default_factory=list)
    answers: list[PretalxAnswer] = field(default_factory=list)
    slot: PretalxSlot | None = None

    def answer_for(self, question_id: int | None) -> str:
        """Return the answer to *question_id*, or an empty string."""
        return _answer_for(self.answers, question_id)

    @classmethod
    def from_api(
        cls,
        data: dict[str, Any],
        *,
        submission_types: dict[int, str] | None = None,
        tracks: dict[int, str] | None = None,
        rooms: dict[int, str] | None = None,
    ) -> "PretalxSubmission":
        """Parse one item of the ``/submissions/`` endpoint.

        The lookup tables turn the integer references of the current API
        into names; they are not needed for the legacy shape, which inlines
        the names.

        Args:
            data: The raw submission.
            submission_types: Submission type names by ID.
            tracks: Track names by ID.
            rooms: Room names by ID, passed on to the slot.
        """
        speakers_raw = data.get("speakers") or []
        speaker_codes = [s["code"] if isinstance(s, dict) else str(s) for s in speakers_raw]

        sub_type_raw = data.get("submission_type")
        track_raw = data.get("track")

        # Legacy API inlines tag labels in ``tags`` next to ``tag_ids``; the
        # current API puts the integer IDs directly in ``tags``.
        tags_raw = data.get("tags") or []
        tag_ids = [t for t in (resolve_id(raw) for raw in data.get("tag_ids") or []) if t is not None]
        if not tag_ids:
            tag_ids = [t for t in (resolve_id(raw) for raw in tags_raw) if t is not None]
        tag_names = [localized(t) for t in tags_raw if isinstance(t, (str, dict)) and resolve_id(t) is None]

        slot_raw = data.get("slot")
        slot = PretalxSlot.from_api(slot_raw, rooms=rooms) if isinstance(slot_raw, dict) and slot_raw else None

        return cls(
            code=data.get("code", ""),
            title=localized(data.get("title")),
            abstract=data.get("abstract") or "",
            description=data.get("description") or "",
            content_locale=data.get("content_locale") or "en",
            submission_type=resolve_id_or_localized(sub_type_raw, submission_types),
            submission_type_id=resolve_id(data.get("submission_type_id"), sub_type_raw),
            track=resolve_id_or_localized(track_raw, tracks),
            track_id=resolve_id(data.get("track_id"), track_raw),
            duration=data.get("duration"),
            state=data.get("state") or "",
            speaker_codes=speaker_codes,
            tag_ids=tag_ids,
            tags=tag_names,
            do_not_record=data.get("do_not_record") is True,
            is_featured=data.get("is_featured") is True,
            resources=[PretalxResource.from_api(r) for r in data.get("resources") or [] if isinstance(r, dict)],
            answers=_parse_answers(data.get("answers")),
            slot=slot,
        )


def _parse_answers(raw: object) -> list[PretalxAnswer]:
    """Parse a raw ``answers`` list, skipping entries that are not objects."""
    if not isinstance(raw, list):
        return []
    return [PretalxAnswer.from_api(item) for item in raw if isinstance(item, dict)]


def _answer_for(answers: list[PretalxAnswer], question_id: int | None) -> str:
    if question_id is None:
        return ""
    return next((a.answer for a in answers if a.question_id == question_id), "")

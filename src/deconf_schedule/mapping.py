"""Map Pretalx records onto the canonical schedule.

Provides :class:`ScheduleMapper`, which turns fetched submissions, speakers
and tags into a :class:`~deconf_schedule.records.ScheduleRecord`.  How
Pretalx references become schedule IDs is delegated to an
:class:`~deconf_schedule.profiles.IdentifierProfile`.

A submission whose type or track cannot be resolved is left out of the
sessions and logged; one bad upstream record never aborts a run.
"""

import logging
import re
from collections.abc import Iterable

from deconf_schedule.ids import session_id
from deconf_schedule.profiles import IdentifierProfile, resolve_identifier_profile
from deconf_schedule.records import (
    LocalisedLink,
    ScheduleRecord,
    Session,
    SessionType,
    SessionVisibility,
    Slot,
    Speaker,
    Theme,
    Track,
)
from deconf_schedule.settings import ScheduleConfig
from pretalx_client.models import PretalxSpeaker, PretalxSubmission, PretalxTag

logger = logging.getLogger(__name__)

ASL_LANGUAGE = "asl"
CC_LANGUAGE = "cc"

_URL_PREFIX_RE = re.compile(r"^https?://", re.IGNORECASE)
_URL_IN_TEXT_RE = re.compile(r"https?://\S+", re.IGNORECASE)


class ScheduleMapper:
    """Builds schedule records from Pretalx data.

    Args:
        config: The schedule configuration (question IDs, tag IDs, session
            types, language defaults).
        profile: Identifier profile to use. Defaults to the one named by
            ``config.pretalx.id_strategy``.
    """

    def __init__(self, config: ScheduleConfig, profile: IdentifierProfile | None = None) -> None:
        self.config = config
        self.profile = profile or resolve_identifier_profile(config.pretalx.id_strategy)
        self.language = config.default_language

    # -- Session types, themes, tracks, slots, speakers -------------------

    def map_session_types(self) -> list[SessionType]:
        """Build session types from static configuration.

        Profile fallback types (e.g. ``"unknown"``) are appended unless the
        configuration already defines a type with the same ID.
        """
        types = [
            SessionType(
                id=entry.id,
                title=dict(entry.title),
                layout=entry.layout,
                icon_group=entry.icon[0],
                icon_name=entry.icon[1],
            )
            for entry in self.config.session_types
        ]
        known = {t.id for t in types}
        types.extend(t for t in self.profile.fallback_session_types() if t.id not in known)
        return types

    def map_themes(self, tags: Iterable[PretalxTag]) -> list[Theme]:
        """Build one theme per tag, skipping tags without a usable ID."""
        themes: dict[str, Theme] = {}
        for tag in tags:
            theme_id = self.profile.theme_id(tag)
            if theme_id is None or theme_id in themes:
                continue
            themes[theme_id] = Theme(id=theme_id, title={self.language: tag.tag})
        return list(themes.values())

    def map_tracks(self, submissions: Iterable[PretalxSubmission]) -> list[Track]:
        """Build one track per distinct room, in first-seen order."""
        tracks: dict[str, Track] = {}
        for submission in submissions:
            track_id = self.profile.track_id(submission)
            if track_id is None or track_id in tracks:
                continue
            tracks[track_id] = Track(id=track_id, title=self.profile.track_title(submission, self.language))
        return list(tracks.values())

    def map_slots(self, submissions: Iterable[PretalxSubmission]) -> list[Slot]:
        """Build one slot per distinct scheduled time range and room."""
        slots: dict[str, Slot] = {}
        for submission in submissions:
            slot_id = self.profile.slot_id(submission)
            if slot_id is None or slot_id in slots or submission.slot is None:
                continue
            slot = submission.slot
            slots[slot_id] = Slot(
                id=slot_id,
                start=slot.start_dt.isoformat() if slot.start_dt else slot.start,
                end=slot.end_dt.isoformat() if slot.end_dt else slot.end,
            )
        return list(slots.values())

    def map_speakers(self, speakers: Iterable[PretalxSpeaker]) -> list[Speaker]:
        """Build public speaker profiles.

        The affiliation question answer becomes the speaker's role. The
        photo question answer is used as headshot when Pretalx has no avatar.
        """
        questions = self.config.pretalx.questions
        result: list[Speaker] = []
        for speaker in speakers:
            headshot = speaker.avatar_url
            if not headshot:
                photo = speaker.answer_for(questions.pulse_photo).strip()
                headshot = photo if _URL_PREFIX_RE.match(photo) else ""
            result.append(
                Speaker(
                    id=speaker.code,
                    name=speaker.name,
                    role={self.language: speaker.answer_for(questions.affiliation).strip()},
                    bio={self.language: speaker.biography},
                    headshot=headshot,
                )
            )
        return result

    # -- Sessions ----------------------------------------------------------

    def host_languages(self, submission: PretalxSubmission) -> list[str]:
        """Return the languages a session is hosted in.

        Starts from the content locale, adds ``asl``/``cc`` markers for the
        configured accessibility tags, then strips trailing locale variant
        suffixes (``"en-mozilla"`` becomes ``"en"``).
        """
        pretalx = self.config.pretalx
        languages = [submission.content_locale]
        if pretalx.asl_tag_id is not None and pretalx.asl_tag_id in submission.tag_ids:
            languages.append(ASL_LANGUAGE)
        if pretalx.cc_tag_id is not None and pretalx.cc_tag_id in submission.tag_ids:
            languages.append(CC_LANGUAGE)
        return [self._strip_locale_suffix(language) for language in languages]

    def _strip_locale_suffix(self, language: str) -> str:
        for suffix in self.config.host_language_suffixes:
            language = language.removesuffix(suffix)
        return language

    def resource_links(self, submission: PretalxSubmission) -> list[LocalisedLink]:
        """Return the submission's resources that are web URLs."""
        return [
            LocalisedLink(url=resource.resource, title=resource.description, language=self.language)
            for resource in submission.resources
            if _URL_PREFIX_RE.match(resource.resource)
        ]

    def answer_links(self, submission: PretalxSubmission, question_ids: Iterable[int | None]) -> list[LocalisedLink]:
        """Return URLs found in the answers to *question_ids*, in question order."""
        links: list[LocalisedLink] = []
        for question_id in question_ids:
            if question_id is None:
                continue
            for answer in submission.answers:
                if answer.question_id != question_id:
                    continue
                links.extend(
                    LocalisedLink(url=url, title=answer.question or url, language=self.language)
                    for url in _URL_IN_TEXT_RE.findall(answer.answer)
                )
        return links

    def map_session(
        self,
        submission: PretalxSubmission,
        *,
        tags_by_id: dict[int, PretalxTag] | None = None,
        type_ids: set[str] | None = None,
    ) -> Session | None:
        """Build the session for one submission.

        Args:
            submission: The Pretalx submission.
            tags_by_id: Tags keyed by ID, used by profiles that resolve tag
                labels.
            type_ids: Session type IDs that exist. When given, a submission
                whose type is not among them takes the profile's
                unconfigured type, or is dropped if the profile has none.

        Returns:
            The session, or ``None`` when the type or track is unresolved.
        """
        session_type = self.profile.type_id(submission)
        track = self.profile.track_id(submission)
        if session_type is None or track is None:
            logger.warning(
                "Dropping submission %s: unresolved %s",
                submission.code,
                "type" if session_type is None else "track",
            )
            return None
        if type_ids is not None and session_type not in type_ids:
            fallback = self.profile.unconfigured_type(session_type)
            if fallback is None or fallback not in type_ids:
                logger.warning("Dropping submission %s: session type %s is not configured", submission.code, session_type)
                return None
            logger.debug(
                "Submission %s: session type %s is not configured, using %s",
                submission.code,
                session_type,
                fallback,
            )
            session_type = fallback

        questions = self.config.pretalx.questions
        links = [*self.answer_links(submission, questions.links), *self.resource_links(submission)]

        return Session(
            id=session_id(submission.code),
            type=session_type,
            title={self.language: submission.title},
            content={self.language: submission.description},
            track=track,
            state=submission.state,
            slot=self.profile.slot_id(submission),
            themes=self.profile.session_theme_ids(submission, tags_by_id or {}),
            host_languages=self.host_languages(submission),
            links=links,
            recommendations=self.answer_links(submission, [questions.recommendations]),
            speakers=list(submission.speaker_codes),
            visibility=SessionVisibility.PRIVATE,
            host_organisation={self.language: ""},
            is_recorded=not submission.do_not_record,
            is_featured=submission.is_featured,
        )

    def partition_sessions(
        self,
        submissions: Iterable[PretalxSubmission],
        tags: Iterable[PretalxTag] = (),
    ) -> tuple[list[Session], list[str]]:
        """Map submissions, separating sessions from dropped submission codes.

        Returns:
            A ``(sessions, dropped_codes)`` tuple, both in input order.
        """
        tags_by_id = {tag.id: tag for tag in tags if tag.id is not None}
        type_ids = {t.id for t in self.map_session_types()}
        sessions: list[Session] = []
        dropped: list[str] = []
        for submission in submissions:
            session = self.map_session(submission, tags_by_id=tags_by_id, type_ids=type_ids)
            if session is None:
                dropped.append(submission.code)
            else:
                sessions.append(session)
        if dropped:
            logger.info("Dropped %d submissions with unresolved type or track", len(dropped))
        return sessions, dropped

    def map_sessions(
        self,
        submissions: Iterable[PretalxSubmission],
        tags: Iterable[PretalxTag] = (),
    ) -> list[Session]:
        """Map submissions to sessions, silently leaving out unresolvable ones."""
        sessions, _dropped = self.partition_sessions(submissions, tags)
        return sessions

    def build_schedule(
        self,
        submissions: Iterable[PretalxSubmission],
        speakers: Iterable[PretalxSpeaker],
        tags: Iterable[PretalxTag],
    ) -> ScheduleRecord:
        """Build the full schedule from one fetch of Pretalx data."""
        submissions = list(submissions)
        tags = list(tags)
        sessions, dropped = self.partition_sessions(submissions, tags)
        return ScheduleRecord(
            sessions=sessions,
            slots=self.map_slots(submissions),
            speakers=self.map_speakers(speakers),
            themes=self.map_themes(tags),
            tracks=self.map_tracks(submissions),
            types=self.map_session_types(),
            dropped=dropped,
        )

"""Canonical schedule records published for the presentation service.

These are the normalized shapes the deconf front end reads.  Field names are
snake_case in Python; :meth:`to_dict` renders the camelCase JSON the
presentation service expects.
"""

import enum
from dataclasses import dataclass, field
from typing import Any

Localised = dict[str, str]

SCHEDULE_SECTIONS = ("sessions", "slots", "speakers", "themes", "tracks", "types")


class SessionVisibility(enum.StrEnum):
    """Who can see a session on the schedule."""

    PRIVATE = "private"
    PUBLIC = "public"


@dataclass(frozen=True, slots=True)
class LocalisedLink:
    """A link attached to a session."""

    url: str
    title: str = ""
    type: str = "url"
    language: str = "en"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "url": self.url, "title": self.title, "language": self.language}


@dataclass(frozen=True, slots=True)
class Session:
    """A schedulable session built from one Pretalx submission."""

    id: str
    type: str
    title: Localised
    content: Localised
    track: str
    state: str
    slot: str | None = None
    themes: list[str] = field(default_factory=list)
    host_languages: list[str] = field(default_factory=list)
    links: list[LocalisedLink] = field(default_factory=list)
    recommendations: list[LocalisedLink] = field(default_factory=list)
    speakers: list[str] = field(default_factory=list)
    visibility: SessionVisibility = SessionVisibility.PRIVATE
    host_organisation: Localised = field(default_factory=lambda: {"en": ""})
    cover_image: str = ""
    enable_interpretation: bool = False
    hide_from_schedule: bool = False
    is_recorded: bool = True
    is_official: bool = False
    is_featured: bool = False
    proxy_url: str | None = None
    participant_cap: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "title": dict(self.title),
            "content": dict(self.content),
            "track": self.track,
            "themes": list(self.themes),
            "coverImage": self.cover_image,
            "links": [link.to_dict() for link in self.links],
            "hostLanguages": list(self.host_languages),
            "enableInterpretation": self.enable_interpretation,
            "speakers": list(self.speakers),
            "hostOrganisation": dict(self.host_organisation),
            "isRecorded": self.is_recorded,
            "isOfficial": self.is_official,
            "isFeatured": self.is_featured,
            "visibility": str(self.visibility),
            "state": self.state,
            "participantCap": self.participant_cap,
            "hideFromSchedule": self.hide_from_schedule,
            "recommendations": [link.to_dict() for link in self.recommendations],
        }
        # Optional keys are omitted rather than published as null
        if self.slot is not None:
            data["slot"] = self.slot
        if self.proxy_url is not None:
            data["proxyUrl"] = self.proxy_url
        return data


@dataclass(frozen=True, slots=True)
class Slot:
    """A concrete time range a session is scheduled in."""

    id: str
    start: str
    end: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "start": self.start, "end": self.end}


@dataclass(frozen=True, slots=True)
class Speaker:
    """A public speaker profile."""

    id: str
    name: str
    role: Localised
    bio: Localised
    headshot: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": dict(self.role),
            "bio": dict(self.bio),
            "headshot": self.headshot,
        }


@dataclass(frozen=True, slots=True)
class Track:
    """A room or stream sessions are grouped by."""

    id: str
    title: Localised

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": dict(self.title)}


@dataclass(frozen=True, slots=True)
class Theme:
    """A topic label, one per Pretalx tag."""

    id: str
    title: Localised

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": dict(self.title)}


@dataclass(frozen=True, slots=True)
class SessionType:
    """A kind of session, sourced from static configuration."""

    id: str
    title: Localised
    layout: str
    icon_group: str
    icon_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": dict(self.title),
            "layout": self.layout,
            "iconGroup": self.icon_group,
            "iconName": self.icon_name,
        }


@dataclass(frozen=True, slots=True)
class ScheduleRecord:
    """Everything one sync run produces.

    Attributes:
        sessions: Sessions that resolved a type and a track.
        slots: Distinct slots referenced by sessions.
        speakers: Public speaker profiles.
        themes: One theme per tag.
        tracks: One track per distinct room, first-seen order.
        types: Configured session types.
        dropped: Codes of submissions excluded for data-quality gaps.
            Diagnostic only, never published.
    """

    sessions: list[Session] = field(default_factory=list)
    slots: list[Slot] = field(default_factory=list)
    speakers: list[Speaker] = field(default_factory=list)
    themes: list[Theme] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)
    types: list[SessionType] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)

    def sections(self) -> dict[str, list[dict[str, Any]]]:
        """Return each published section as JSON-serializable data."""
        return {name: [item.to_dict() for item in getattr(self, name)] for name in SCHEDULE_SECTIONS}

"""Typed configuration for deconf-schedule.

Reads a single ``DECONF_SCHEDULE`` dict from Django settings and exposes it
as composed, frozen dataclasses with sensible defaults.

Usage::

    from deconf_schedule.settings import get_config

    config = get_config()
    config.pretalx.event_slug
    config.lock.max_duration
    config.session_types
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.test.signals import setting_changed

IDENTIFIER_STRATEGIES = ("numeric", "slug")


@dataclass(frozen=True, slots=True)
class PretalxQuestionsConfig:
    """IDs of the Pretalx custom questions the sync reads answers from."""

    affiliation: int | None = None
    pulse_photo: int | None = None
    recommendations: int | None = None
    links: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class PretalxConfig:
    """Pretalx API access and field interpretation."""

    base_url: str = "https://pretalx.com"
    event_slug: str = ""
    token: str | None = None
    questions: PretalxQuestionsConfig = field(default_factory=PretalxQuestionsConfig)
    asl_tag_id: int | None = None
    cc_tag_id: int | None = None
    id_strategy: str = "numeric"


@dataclass(frozen=True, slots=True)
class SessionTypeConfig:
    """A statically configured session type."""

    id: str
    title: Mapping[str, str]
    layout: str = "plenary"
    icon: tuple[str, str] = ("fas", "question")


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Where the published schedule lives."""

    cache_alias: str = "default"
    key_prefix: str = "schedule"


@dataclass(frozen=True, slots=True)
class LockConfig:
    """Cross-process lock guarding a sync run."""

    key: str = "pretalx/lock"
    max_duration_seconds: int = 600
    release_delay_seconds: float = 1.0

    @property
    def max_duration(self) -> timedelta:
        """Return the maximum lock hold time as a ``timedelta``."""
        return timedelta(seconds=self.max_duration_seconds)


@dataclass(frozen=True, slots=True)
class ScheduleConfig:
    """Top-level deconf-schedule configuration."""

    pretalx: PretalxConfig = field(default_factory=PretalxConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    lock: LockConfig = field(default_factory=LockConfig)
    session_types: tuple[SessionTypeConfig, ...] = ()
    default_language: str = "en"
    host_language_suffixes: tuple[str, ...] = ("-mozilla",)


def _require_mapping(value: object, label: str) -> Mapping:
    if not isinstance(value, Mapping):
        msg = f"{label} must be a mapping (dict-like object)"
        raise TypeError(msg)
    return value


def _optional_int(value: object, label: str) -> int | None:
    """Coerce a configured Pretalx ID to ``int``.

    Numeric strings, as read from environment variables, are accepted and a
    blank string means unset.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    msg = f"{label} must be an integer ID, got {value!r}"
    raise ValueError(msg)


def _build_pretalx(raw: Mapping) -> PretalxConfig:
    data = dict(_require_mapping(raw, "DECONF_SCHEDULE['pretalx']"))
    label = "DECONF_SCHEDULE['pretalx']['questions']"
    questions = dict(_require_mapping(data.pop("questions", {}), label))
    for name in ("affiliation", "pulse_photo", "recommendations"):
        if name in questions:
            questions[name] = _optional_int(questions[name], f"{label}['{name}']")
    if "links" in questions:
        questions["links"] = tuple(
            _optional_int(item, f"{label}['links'][{idx}]") for idx, item in enumerate(questions["links"])
        )
    for name in ("asl_tag_id", "cc_tag_id"):
        if name in data:
            data[name] = _optional_int(data[name], f"DECONF_SCHEDULE['pretalx']['{name}']")
    return PretalxConfig(questions=PretalxQuestionsConfig(**questions), **data)


def _build_session_types(raw: object) -> tuple[SessionTypeConfig, ...]:
    if not isinstance(raw, (list, tuple)):
        msg = "DECONF_SCHEDULE['session_types'] must be a list"
        raise TypeError(msg)
    types: list[SessionTypeConfig] = []
    for idx, item in enumerate(raw):
        data = dict(_require_mapping(item, f"DECONF_SCHEDULE['session_types'][{idx}]"))
        missing = {"id", "title"} - data.keys()
        if missing:
            msg = f"DECONF_SCHEDULE['session_types'][{idx}] is missing required fields: {', '.join(sorted(missing))}"
            raise ValueError(msg)
        data["id"] = str(data["id"])
        if "icon" in data:
            data["icon"] = tuple(data["icon"])
        types.append(SessionTypeConfig(**data))
    return tuple(types)


@functools.lru_cache(maxsize=1)
def get_config() -> ScheduleConfig:
    """Build and return the schedule sync configuration.

    Reads ``settings.DECONF_SCHEDULE`` (a plain dict) and returns a frozen
    :class:`ScheduleConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw_data = dict(_require_mapping(getattr(settings, "DECONF_SCHEDULE", {}), "DECONF_SCHEDULE"))

    pretalx = _build_pretalx(raw_data.pop("pretalx", {}))
    store_data = _require_mapping(raw_data.pop("store", {}), "DECONF_SCHEDULE['store']")
    lock_data = _require_mapping(raw_data.pop("lock", {}), "DECONF_SCHEDULE['lock']")
    session_types = _build_session_types(raw_data.pop("session_types", ()))
    if "host_language_suffixes" in raw_data:
        raw_data["host_language_suffixes"] = tuple(raw_data["host_language_suffixes"])

    config = ScheduleConfig(
        pretalx=pretalx,
        store=StoreConfig(**dict(store_data)),
        lock=LockConfig(**dict(lock_data)),
        session_types=session_types,
        **raw_data,
    )
    _validate_schedule_config(config)
    return config


def _validate_schedule_config(config: ScheduleConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    if config.pretalx.id_strategy not in IDENTIFIER_STRATEGIES:
        msg = (
            f"DECONF_SCHEDULE['pretalx']['id_strategy'] must be one of "
            f"{', '.join(IDENTIFIER_STRATEGIES)}, got {config.pretalx.id_strategy!r}"
        )
        raise ValueError(msg)
    if not isinstance(config.store.key_prefix, str) or not config.store.key_prefix.strip():
        msg = "DECONF_SCHEDULE['store']['key_prefix'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.lock.key, str) or not config.lock.key.strip():
        msg = "DECONF_SCHEDULE['lock']['key'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.lock.max_duration_seconds, int) or config.lock.max_duration_seconds <= 0:
        msg = "DECONF_SCHEDULE['lock']['max_duration_seconds'] must be a positive integer"
        raise ValueError(msg)
    if not isinstance(config.lock.release_delay_seconds, (int, float)) or config.lock.release_delay_seconds < 0:
        msg = "DECONF_SCHEDULE['lock']['release_delay_seconds'] must be a non-negative number"
        raise ValueError(msg)
    if not isinstance(config.default_language, str) or not config.default_language.strip():
        msg = "DECONF_SCHEDULE['default_language'] must be a non-empty string"
        raise ValueError(msg)

    seen: set[str] = set()
    for session_type in config.session_types:
        if len(session_type.icon) != 2:  # noqa: PLR2004
            msg = f"Session type {session_type.id!r} icon must be a (group, name) pair"
            raise ValueError(msg)
        if session_type.id in seen:
            msg = f"DECONF_SCHEDULE['session_types'] has duplicate id: {session_type.id}"
            raise ValueError(msg)
        seen.add(session_type.id)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "DECONF_SCHEDULE":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="deconf_schedule.settings.clear_config_cache")

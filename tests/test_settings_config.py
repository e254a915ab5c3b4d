from datetime import timedelta

import pytest
from django.test import override_settings

from deconf_schedule.settings import SessionTypeConfig, get_config


def test_defaults_from_test_settings() -> None:
    config = get_config()

    assert config.pretalx.event_slug == "test-event"
    assert config.pretalx.id_strategy == "numeric"
    assert config.store.key_prefix == "schedule"
    assert config.lock.key == "pretalx/lock"
    assert config.lock.max_duration == timedelta(minutes=10)
    assert config.lock.release_delay_seconds == 0
    assert config.host_language_suffixes == ("-mozilla",)


def test_get_config_parses_nested_sections() -> None:
    raw = {
        "pretalx": {
            "event_slug": "mozfest",
            "questions": {"affiliation": 1, "pulse_photo": 2, "recommendations": 3, "links": [4, 5]},
            "asl_tag_id": 11,
            "id_strategy": "slug",
        },
        "store": {"key_prefix": "mozfest"},
        "lock": {"max_duration_seconds": 60},
        "session_types": [{"id": 1, "title": {"en": "Workshop"}, "icon": ["fas", "tools"]}],
        "host_language_suffixes": ["-mozilla", "-festival"],
    }
    with override_settings(DECONF_SCHEDULE=raw):
        config = get_config()

    assert config.pretalx.questions.links == (4, 5)
    assert config.pretalx.asl_tag_id == 11
    assert config.store.key_prefix == "mozfest"
    assert config.lock.max_duration == timedelta(seconds=60)
    assert config.session_types == (SessionTypeConfig(id="1", title={"en": "Workshop"}, icon=("fas", "tools")),)
    assert config.host_language_suffixes == ("-mozilla", "-festival")


def test_get_config_rejects_non_mapping_root() -> None:
    with override_settings(DECONF_SCHEDULE=["bad"]):
        with pytest.raises(TypeError, match="must be a mapping"):
            get_config()


def test_get_config_rejects_non_mapping_nested_sections() -> None:
    with override_settings(DECONF_SCHEDULE={"pretalx": ["bad"]}):
        with pytest.raises(TypeError, match=r"DECONF_SCHEDULE\['pretalx'\] must be a mapping"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"lock": "bad"}):
        with pytest.raises(TypeError, match=r"DECONF_SCHEDULE\['lock'\] must be a mapping"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"session_types": {"id": "1"}}):
        with pytest.raises(TypeError, match=r"DECONF_SCHEDULE\['session_types'\] must be a list"):
            get_config()


def test_get_config_validates_primitive_values() -> None:
    with override_settings(DECONF_SCHEDULE={"pretalx": {"id_strategy": "uuid"}}):
        with pytest.raises(ValueError, match="id_strategy"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"store": {"key_prefix": " "}}):
        with pytest.raises(ValueError, match="key_prefix"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"lock": {"key": ""}}):
        with pytest.raises(ValueError, match=r"\['lock'\]\['key'\]"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"lock": {"max_duration_seconds": 0}}):
        with pytest.raises(ValueError, match="positive integer"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"lock": {"release_delay_seconds": -1}}):
        with pytest.raises(ValueError, match="non-negative"):
            get_config()


def test_get_config_validates_session_types() -> None:
    with override_settings(DECONF_SCHEDULE={"session_types": [{"id": "1"}]}):
        with pytest.raises(ValueError, match="missing required fields: title"):
            get_config()

    duplicate = [{"id": "1", "title": {"en": "A"}}, {"id": 1, "title": {"en": "B"}}]
    with override_settings(DECONF_SCHEDULE={"session_types": duplicate}):
        with pytest.raises(ValueError, match="duplicate id: 1"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"session_types": [{"id": "1", "title": {}, "icon": ["fas"]}]}):
        with pytest.raises(ValueError, match="icon"):
            get_config()


def test_get_config_cache_clears_on_setting_changed() -> None:
    with override_settings(DECONF_SCHEDULE={"store": {"key_prefix": "one"}}):
        assert get_config().store.key_prefix == "one"

    with override_settings(DECONF_SCHEDULE={"store": {"key_prefix": "two"}}):
        assert get_config().store.key_prefix == "two"


def test_get_config_coerces_numeric_string_ids() -> None:
    raw = {
        "pretalx": {
            "asl_tag_id": "11",
            "cc_tag_id": " 12 ",
            "questions": {"affiliation": "101", "pulse_photo": "", "links": ["104", 105]},
        }
    }
    with override_settings(DECONF_SCHEDULE=raw):
        config = get_config()

    assert config.pretalx.asl_tag_id == 11
    assert config.pretalx.cc_tag_id == 12
    assert config.pretalx.questions.affiliation == 101
    assert config.pretalx.questions.pulse_photo is None
    assert config.pretalx.questions.links == (104, 105)


def test_get_config_rejects_non_numeric_ids() -> None:
    with override_settings(DECONF_SCHEDULE={"pretalx": {"asl_tag_id": "asl"}}):
        with pytest.raises(ValueError, match=r"\['asl_tag_id'\] must be an integer ID"):
            get_config()

    with override_settings(DECONF_SCHEDULE={"pretalx": {"questions": {"recommendations": True}}}):
        with pytest.raises(ValueError, match=r"\['recommendations'\] must be an integer ID"):
            get_config()

"""Tests for ScheduleMapper."""

import json
import logging

import pytest

from deconf_schedule.mapping import ScheduleMapper
from deconf_schedule.profiles import SlugIdProfile
from deconf_schedule.records import LocalisedLink, SessionVisibility
from deconf_schedule.settings import SessionTypeConfig, get_config
from pretalx_client.models import PretalxAnswer, PretalxResource
from tests.test_schedule.factories import END, START, make_config, make_slot, make_speaker, make_submission, make_tags


@pytest.fixture
def mapper():
    return ScheduleMapper(make_config())


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class TestMapSession:
    """Tests for ScheduleMapper.map_session()."""

    @pytest.mark.unit
    def test_fields(self, mapper):
        submission = make_submission(
            "ABC",
            tag_ids=[20],
            speaker_codes=["SPK1", "SPK2"],
            do_not_record=True,
            is_featured=True,
        )

        session = mapper.map_session(submission)

        assert session.id == "ABC"
        assert session.type == "1"
        assert session.track == "3"
        assert session.slot == f"3__{START}__{END}"
        assert session.title == {"en": "Talk ABC"}
        assert session.content == {"en": "About ABC"}
        assert session.state == "confirmed"
        assert session.themes == ["20"]
        assert session.speakers == ["SPK1", "SPK2"]
        assert session.visibility == SessionVisibility.PRIVATE
        assert session.is_recorded is False
        assert session.is_featured is True

    @pytest.mark.unit
    def test_missing_track_returns_none(self, mapper, caplog):
        with caplog.at_level(logging.WARNING, logger="deconf_schedule.mapping"):
            assert mapper.map_session(make_submission("NOROOM", slot=None)) is None

        assert "NOROOM" in caplog.text

    @pytest.mark.unit
    def test_missing_type_returns_none(self, mapper):
        assert mapper.map_session(make_submission(submission_type_id=None)) is None

    @pytest.mark.unit
    def test_type_outside_known_types_returns_none(self, mapper):
        submission = make_submission(submission_type_id=7)

        assert mapper.map_session(submission, type_ids={"1", "2"}) is None
        assert mapper.map_session(submission) is not None

    @pytest.mark.unit
    def test_unscheduled_time_keeps_session_without_slot(self, mapper):
        session = mapper.map_session(make_submission(slot=make_slot(start="", end="")))

        assert session is not None
        assert session.slot is None
        assert "slot" not in session.to_dict()


class TestHostLanguages:
    """Tests for ScheduleMapper.host_languages()."""

    @pytest.mark.unit
    def test_locale_suffix_stripped(self, mapper):
        assert mapper.host_languages(make_submission(content_locale="en-mozilla")) == ["en"]

    @pytest.mark.unit
    def test_accessibility_tags_add_markers(self, mapper):
        submission = make_submission(content_locale="es-mozilla", tag_ids=[12, 11, 20])

        assert mapper.host_languages(submission) == ["es", "asl", "cc"]

    @pytest.mark.unit
    def test_markers_skipped_when_tags_not_configured(self):
        mapper = ScheduleMapper(make_config(asl_tag_id=None, cc_tag_id=None))

        assert mapper.host_languages(make_submission(tag_ids=[11, 12])) == ["en"]


class TestLinks:
    """Tests for answer and resource links."""

    @pytest.mark.unit
    def test_answer_and_resource_links(self, mapper):
        submission = make_submission(
            answers=[
                PretalxAnswer(question_id=104, answer="See https://a.example/x and http://b.example", question="Links"),
                PretalxAnswer(question_id=999, answer="https://ignored.example"),
            ],
            resources=[
                PretalxResource(resource="https://slides.example/deck", description="Slides"),
                PretalxResource(resource="/media/upload.pdf", description="Upload"),
            ],
        )

        session = mapper.map_session(submission)

        assert session.links == [
            LocalisedLink(url="https://a.example/x", title="Links"),
            LocalisedLink(url="http://b.example", title="Links"),
            LocalisedLink(url="https://slides.example/deck", title="Slides"),
        ]

    @pytest.mark.unit
    def test_recommendations_from_recommendation_question(self, mapper):
        submission = make_submission(answers=[PretalxAnswer(question_id=103, answer="https://read.example")])

        session = mapper.map_session(submission)

        assert session.recommendations == [LocalisedLink(url="https://read.example", title="https://read.example")]
        assert session.links == []


# ---------------------------------------------------------------------------
# Catalogues
# ---------------------------------------------------------------------------


class TestCatalogues:
    """Tests for the types, themes, tracks, slots and speakers sections."""

    @pytest.mark.unit
    def test_session_types_from_configuration(self, mapper):
        types = mapper.map_session_types()

        assert [t.to_dict() for t in types] == [
            {"id": "1", "title": {"en": "Workshop"}, "layout": "workshop", "iconGroup": "fas", "iconName": "tools"},
            {"id": "2", "title": {"en": "Talk"}, "layout": "plenary", "iconGroup": "fas", "iconName": "question"},
        ]

    @pytest.mark.unit
    def test_themes_one_per_tag(self, mapper):
        themes = mapper.map_themes(make_tags())

        assert [(t.id, t.title) for t in themes] == [
            ("11", {"en": "ASL"}),
            ("12", {"en": "Captions"}),
            ("20", {"en": "Open Data"}),
        ]

    @pytest.mark.unit
    def test_tracks_distinct_in_first_seen_order(self, mapper):
        submissions = [
            make_submission("A", slot=make_slot(room="Studio", room_id=5)),
            make_submission("B", slot=make_slot(room="Main Hall", room_id=3)),
            make_submission("C", slot=make_slot(room="Studio", room_id=5)),
            make_submission("D", slot=None),
        ]

        tracks = mapper.map_tracks(submissions)

        assert [(t.id, t.title) for t in tracks] == [("5", {"en": "Studio"}), ("3", {"en": "Main Hall"})]

    @pytest.mark.unit
    def test_slots_deduplicated(self, mapper):
        submissions = [make_submission("A"), make_submission("B"), make_submission("C", slot=None)]

        slots = mapper.map_slots(submissions)

        assert [s.to_dict() for s in slots] == [{"id": f"3__{START}__{END}", "start": START, "end": END}]

    @pytest.mark.unit
    def test_speakers_role_and_headshot_from_answers(self, mapper):
        speakers = [
            make_speaker(
                "SPK1",
                answers=[
                    PretalxAnswer(question_id=101, answer=" Mozilla "),
                    PretalxAnswer(question_id=102, answer="https://img.example/1.png"),
                ],
            ),
            make_speaker("SPK2", avatar_url="https://avatar.example/2.png"),
            make_speaker("SPK3", answers=[PretalxAnswer(question_id=102, answer="not a url")]),
        ]

        result = mapper.map_speakers(speakers)

        assert result[0].role == {"en": "Mozilla"}
        assert result[0].headshot == "https://img.example/1.png"
        assert result[1].headshot == "https://avatar.example/2.png"
        assert result[2].headshot == ""
        assert result[2].role == {"en": ""}


# ---------------------------------------------------------------------------
# Full schedule
# ---------------------------------------------------------------------------


class TestBuildSchedule:
    """Tests for ScheduleMapper.build_schedule()."""

    @pytest.mark.unit
    def test_submission_without_track_dropped_order_preserved(self, mapper):
        submissions = [make_submission("A"), make_submission("B", slot=None), make_submission("C")]

        record = mapper.build_schedule(submissions, [make_speaker()], make_tags())

        assert [s.id for s in record.sessions] == ["A", "C"]
        assert record.dropped == ["B"]
        assert len(record.speakers) == 1
        assert len(record.themes) == 3

    @pytest.mark.unit
    def test_sections_are_json_and_stable_across_runs(self, mapper):
        submissions = [make_submission("A", tag_ids=[11]), make_submission("B", content_locale="en-mozilla")]
        speakers = [make_speaker()]

        first = mapper.build_schedule(submissions, speakers, make_tags()).sections()
        second = mapper.build_schedule(submissions, speakers, make_tags()).sections()

        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)
        assert list(first) == ["sessions", "slots", "speakers", "themes", "tracks", "types"]

    @pytest.mark.unit
    def test_every_reference_resolves(self, mapper):
        submissions = [
            make_submission("A", tag_ids=[20]),
            make_submission("B", submission_type_id=2, slot=make_slot(room="Studio", room_id=5)),
            make_submission("C", submission_type_id=9),
        ]

        record = mapper.build_schedule(submissions, [], make_tags())

        type_ids = {t.id for t in record.types}
        track_ids = {t.id for t in record.tracks}
        slot_ids = {s.id for s in record.slots}
        theme_ids = {t.id for t in record.themes}
        assert [s.id for s in record.sessions] == ["A", "B"]
        for session in record.sessions:
            assert session.type in type_ids
            assert session.track in track_ids
            assert session.slot in slot_ids
            assert set(session.themes) <= theme_ids

    @pytest.mark.unit
    def test_slug_profile_falls_back_to_unknown(self):
        config = make_config(id_strategy="slug")
        config = type(config)(
            pretalx=config.pretalx,
            session_types=(SessionTypeConfig(id="workshop", title={"en": "Workshop"}),),
        )
        mapper = ScheduleMapper(config)
        assert isinstance(mapper.profile, SlugIdProfile)

        record = mapper.build_schedule(
            [make_submission("A"), make_submission("B", submission_type="", slot=None)],
            [],
            make_tags(),
        )

        assert [(s.id, s.type, s.track) for s in record.sessions] == [
            ("A", "workshop", "main-hall"),
            ("B", "unknown", "unknown"),
        ]
        assert [t.id for t in record.types] == ["workshop", "unknown"]
        assert [t.id for t in record.tracks] == ["main-hall", "unknown"]
        assert [t.id for t in record.themes] == ["asl", "captions", "open-data"]

    @pytest.mark.unit
    def test_slug_profile_maps_unconfigured_type_to_unknown(self, caplog):
        config = make_config(id_strategy="slug")
        config = type(config)(
            pretalx=config.pretalx,
            session_types=(SessionTypeConfig(id="workshop", title={"en": "Workshop"}),),
        )
        mapper = ScheduleMapper(config)

        with caplog.at_level(logging.WARNING, logger="deconf_schedule.mapping"):
            record = mapper.build_schedule(
                [make_submission("A"), make_submission("B", submission_type="Panel Discussion")],
                [],
                make_tags(),
            )

        assert [(s.id, s.type) for s in record.sessions] == [("A", "workshop"), ("B", "unknown")]
        assert record.dropped == []
        assert "Dropping submission" not in caplog.text

    @pytest.mark.unit
    def test_numeric_profile_drops_unconfigured_type(self, mapper):
        record = mapper.build_schedule([make_submission("A"), make_submission("B", submission_type_id=9)], [], [])

        assert [s.id for s in record.sessions] == ["A"]
        assert record.dropped == ["B"]


@pytest.mark.unit
def test_string_tag_ids_from_settings_still_add_markers(settings):
    settings.DECONF_SCHEDULE = {"pretalx": {"event_slug": "test-event", "asl_tag_id": "11", "cc_tag_id": "12"}}
    mapper = ScheduleMapper(get_config())

    assert mapper.host_languages(make_submission(tag_ids=[11, 12])) == ["en", "asl", "cc"]

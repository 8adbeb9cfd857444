"""Tests for the Schedule entity store.

Tests cover:
- Building from import records (persons, time map, links)
- first() including tie-breaks
- Id resolution and foreign ids
- relative() stepping through the time map
"""

from datetime import datetime, timedelta, timezone
import uuid

import pytest

from fahrplan.models import EventId, ImportedEvent, ImportedLink, ImportedPerson, PersonId
from fahrplan.services.schedule import ForeignIdError, Schedule, ScheduleError


BASE = datetime(2023, 12, 27, 10, 0, tzinfo=timezone.utc)


def record(title: str, start_minutes: int, duration_minutes: int = 30, **extra) -> ImportedEvent:
    """Create an import record starting `start_minutes` after 10:00 UTC."""
    return ImportedEvent(
        guid=uuid.uuid5(uuid.NAMESPACE_URL, title),
        date=BASE + timedelta(minutes=start_minutes),
        duration=timedelta(minutes=duration_minutes),
        title=title,
        **extra,
    )


@pytest.fixture
def ada():
    return ImportedPerson(guid=uuid.UUID(int=1), name="Ada")


@pytest.fixture
def grace():
    return ImportedPerson(guid=uuid.UUID(int=2), name="Grace")


@pytest.fixture
def schedule(ada, grace):
    """Three start times: 10:00 (A, B), 10:30 (C), 11:00 (D)."""
    return Schedule.from_records([
        record("C", 30),
        record("A", 0, persons=(ada, grace)),
        record("D", 60, persons=(grace,)),
        record("B", 0, links=(ImportedLink(label="slides", href="https://example.com"),)),
    ])


def at(minutes: int) -> datetime:
    return BASE + timedelta(minutes=minutes)


def titles(schedule: Schedule, ids) -> list[str]:
    return [schedule.resolve_event(event_id).title for event_id in ids]


class TestFromRecords:
    """Tests for building a Schedule."""

    def test_counts(self, schedule):
        """All events are stored."""
        assert len(schedule) == 4

    def test_time_map_sorted_by_start(self, schedule):
        """Time map keys are the distinct starts in ascending order."""
        assert list(schedule.time_map) == [at(0), at(30), at(60)]
        assert schedule.timestamps() == (at(0), at(30), at(60))

    def test_time_map_keeps_import_order(self, schedule):
        """Events starting together keep their import order."""
        assert titles(schedule, schedule.events_at(at(0))) == ["A", "B"]

    def test_time_map_ids_resolve(self, schedule):
        """Every id in the time map is a known event."""
        for ids in schedule.time_map.values():
            for event_id in ids:
                assert event_id in schedule

    def test_time_map_is_read_only(self, schedule):
        """The exposed time map cannot be changed."""
        with pytest.raises(TypeError):
            schedule.time_map[at(90)] = ()

    def test_persons_deduplicated(self, schedule):
        """A speaker of several events is stored once."""
        names = [person.name for person in schedule.persons()]
        assert names == ["Ada", "Grace"]

    def test_persons_of_event(self, schedule):
        """Speakers resolve in schedule order."""
        event_a = next(e for e in schedule.events() if e.title == "A")
        assert [p.name for p in schedule.persons_of(event_a)] == ["Ada", "Grace"]

    def test_links_converted(self, schedule):
        """Links become a label -> href mapping."""
        event_b = next(e for e in schedule.events() if e.title == "B")
        assert event_b.links == {"slides": "https://example.com"}

    def test_events_in_time_order(self, schedule):
        """events() yields by start time, then import order."""
        assert [e.title for e in schedule.events()] == ["A", "B", "C", "D"]

    def test_duplicate_guid_rejected(self):
        """Two records with the same guid are a construction failure."""
        with pytest.raises(ScheduleError):
            Schedule.from_records([record("A", 0), record("A", 30)])

    def test_empty(self):
        """An empty import gives an empty schedule."""
        schedule = Schedule.from_records([])
        assert len(schedule) == 0
        assert schedule.first() is None
        assert schedule.timestamps() == ()

    def test_same_instant_in_other_offset_shares_row(self):
        """Starts are compared as instants, not by their offset."""
        cet = timezone(timedelta(hours=1))
        schedule = Schedule.from_records([
            record("A", 0),
            ImportedEvent(
                guid=uuid.uuid4(),
                date=datetime(2023, 12, 27, 11, 0, tzinfo=cet),
                duration=timedelta(minutes=30),
                title="B",
            ),
        ])
        assert len(schedule.time_map) == 1


class TestFirst:
    """Tests for first()."""

    def test_earliest_start(self, schedule):
        """first() returns the event with the earliest start."""
        assert schedule.first().title == "A"

    def test_tie_goes_to_import_order(self):
        """Ties on start go to the event imported first."""
        schedule = Schedule.from_records([record("late", 30), record("Y", 0), record("X", 0)])
        assert schedule.first().title == "Y"


class TestResolve:
    """Tests for id resolution."""

    def test_resolve_event(self, schedule):
        """Known ids resolve to their event."""
        event = schedule.first()
        assert schedule.resolve_event(event.id) is event

    def test_resolve_person(self, schedule):
        """Known person ids resolve."""
        assert schedule.resolve_person(PersonId(uuid.UUID(int=1))).name == "Ada"

    def test_foreign_event_id(self, schedule):
        """Ids from elsewhere fail loudly."""
        with pytest.raises(ForeignIdError):
            schedule.resolve_event(EventId(uuid.uuid4()))

    def test_foreign_person_id(self, schedule):
        """Person ids from elsewhere fail loudly."""
        with pytest.raises(ForeignIdError):
            schedule.resolve_person(PersonId(uuid.uuid4()))

    def test_foreign_id_is_lookup_error(self):
        """ForeignIdError is a LookupError."""
        assert issubclass(ForeignIdError, LookupError)

    def test_find_event_by_prefix(self, schedule):
        """find_event() accepts a full guid or a unique prefix."""
        event = schedule.first()
        assert schedule.find_event(str(event.id)) is event
        assert schedule.find_event(str(event.id)[:8].upper()) is event

    def test_find_event_unknown(self, schedule):
        """find_event() returns None when nothing matches."""
        assert schedule.find_event("zzzz") is None


class TestRelative:
    """Tests for relative()."""

    def test_zero_returns_same_row(self, schedule):
        """relative(0, T) returns row T."""
        ts, ids = schedule.relative(0, at(30))
        assert ts == at(30)
        assert titles(schedule, ids) == ["C"]

    def test_zero_for_unknown_timestamp(self, schedule):
        """relative(0, T) is None when T is not a start."""
        assert schedule.relative(0, at(15)) is None

    def test_step_forward(self, schedule):
        """Positive steps move to later rows."""
        assert schedule.relative(1, at(0))[0] == at(30)
        assert schedule.relative(2, at(0))[0] == at(60)

    def test_step_backward(self, schedule):
        """Negative steps move to earlier rows."""
        assert schedule.relative(-1, at(60))[0] == at(30)
        assert schedule.relative(-2, at(60))[0] == at(0)

    def test_before_first(self, schedule):
        """relative(-1, earliest) is None."""
        assert schedule.relative(-1, at(0)) is None

    def test_after_last(self, schedule):
        """Stepping past the last row is None."""
        assert schedule.relative(1, at(60)) is None
        assert schedule.relative(5, at(0)) is None

    def test_from_between_rows(self, schedule):
        """Steps from a non-start count from its insertion point."""
        assert schedule.relative(1, at(15))[0] == at(30)
        assert schedule.relative(-1, at(15))[0] == at(0)

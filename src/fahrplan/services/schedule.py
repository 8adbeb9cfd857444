"""Schedule - the immutable store of all events and persons.

Responsible for:
- Deduplicating persons referenced by imported events
- Indexing events by their start time (the time map)
- Resolving ids handed out by this schedule
- Stepping through the time map for navigation
"""

from bisect import bisect_left, bisect_right
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from fahrplan.models import (
    Conference,
    Event,
    EventId,
    ImportedEvent,
    Person,
    PersonId,
)
from fahrplan.utils.logging import get_logger

logger = get_logger(__name__)


class ScheduleError(Exception):
    """Base exception for schedules that cannot be used."""
    pass


class EmptyScheduleError(ScheduleError):
    """Raised when a schedule contains no events."""
    pass


class ForeignIdError(LookupError):
    """Raised when resolving an id that was not handed out by this schedule."""
    pass


TimeMapEntry = tuple[datetime, tuple[EventId, ...]]


class Schedule:
    """All events and persons of one conference, indexed by start time.

    Built once from import records and never modified afterwards; every
    mapping it exposes is a read-only view.
    """

    def __init__(
        self,
        events: Mapping[EventId, Event],
        persons: Mapping[PersonId, Person],
        time_map: Mapping[datetime, tuple[EventId, ...]],
        conference: Optional[Conference] = None,
    ):
        """Initialize the schedule.

        Prefer `Schedule.from_records`; this constructor expects already
        consistent mappings.

        Args:
            events: event id -> Event
            persons: person id -> Person
            time_map: start -> event ids starting then, in import order
            conference: Optional conference metadata
        """
        self._events = dict(events)
        self._persons = dict(persons)
        self._timestamps = sorted(time_map)
        self._time_map = {ts: tuple(time_map[ts]) for ts in self._timestamps}
        self.conference = conference

    @classmethod
    def from_records(
        cls,
        records: Iterable[ImportedEvent],
        conference: Optional[Conference] = None,
    ) -> "Schedule":
        """Build a schedule from imported event records.

        Args:
            records: Imported events in source order
            conference: Optional conference metadata

        Returns:
            The built Schedule

        Raises:
            ScheduleError: If two records share the same guid
        """
        events: dict[EventId, Event] = {}
        persons: dict[PersonId, Person] = {}
        time_map: dict[datetime, list[EventId]] = {}

        for record in records:
            event_id = EventId(record.guid)
            if event_id in events:
                raise ScheduleError(f"Duplicate event guid: {record.guid}")

            person_ids = []
            for imported in record.persons:
                person_id = PersonId(imported.guid)
                persons[person_id] = Person(id=person_id, name=imported.name)
                person_ids.append(person_id)

            event = Event(
                id=event_id,
                start=record.date,
                duration=record.duration,
                title=record.title,
                subtitle=record.subtitle,
                abstract=record.abstract,
                description=record.description,
                room=record.room,
                track=record.track,
                type=record.type,
                language=record.language,
                url=record.url,
                feedback_url=record.feedback_url,
                links={link.label: link.href for link in record.links},
                persons=tuple(person_ids),
            )
            events[event_id] = event
            time_map.setdefault(event.start, []).append(event_id)

        logger.info(
            f"Built schedule with {len(events)} events, {len(persons)} persons "
            f"and {len(time_map)} distinct start times"
        )
        return cls(
            events,
            persons,
            {ts: tuple(ids) for ts, ids in time_map.items()},
            conference=conference,
        )

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    @property
    def time_map(self) -> Mapping[datetime, tuple[EventId, ...]]:
        """Read-only view of start -> event ids, ordered by start."""
        return MappingProxyType(self._time_map)

    def timestamps(self) -> tuple[datetime, ...]:
        """All distinct start times in ascending order."""
        return tuple(self._timestamps)

    def events_at(self, point: datetime) -> tuple[EventId, ...]:
        """Ids of events starting exactly at `point`, in import order."""
        return self._time_map.get(point, ())

    def events(self) -> Iterator[Event]:
        """Iterate over all events ordered by start, then import order."""
        for ts in self._timestamps:
            for event_id in self._time_map[ts]:
                yield self._events[event_id]

    def persons(self) -> Iterator[Person]:
        """Iterate over all persons ordered by name."""
        return iter(sorted(self._persons.values(), key=lambda p: p.name))

    def first(self) -> Optional[Event]:
        """Get the earliest event, or None if the schedule has no events.

        Ties on the start time go to the event imported first.
        """
        if not self._timestamps:
            return None
        return self.resolve_event(self._time_map[self._timestamps[0]][0])

    def resolve_event(self, event_id: EventId) -> Event:
        """Get the Event for an id from this schedule.

        Raises:
            ForeignIdError: If the id is not from this schedule
        """
        try:
            return self._events[event_id]
        except KeyError:
            raise ForeignIdError(f"Event {event_id} is not part of this schedule") from None

    def resolve_person(self, person_id: PersonId) -> Person:
        """Get the Person for an id from this schedule.

        Raises:
            ForeignIdError: If the id is not from this schedule
        """
        try:
            return self._persons[person_id]
        except KeyError:
            raise ForeignIdError(f"Person {person_id} is not part of this schedule") from None

    def persons_of(self, event: Event) -> list[Person]:
        """Get the speakers of an event in schedule order."""
        return [self.resolve_person(person_id) for person_id in event.persons]

    def find_event(self, value: str) -> Optional[Event]:
        """Find an event by its guid or a unique guid prefix."""
        value = value.strip().lower()
        matches = [e for e in self._events.values() if str(e.id).startswith(value)]
        if len(matches) == 1:
            return matches[0]
        return None

    def relative(self, n: int, from_: datetime) -> Optional[TimeMapEntry]:
        """Get the time map entry `n` entries away from `from_`.

        Negative `n` steps to earlier entries, positive to later ones.
        With `n == 0` the entry at `from_` itself is returned if it exists.
        If `from_` is not a start time, steps are counted from where it
        would be inserted.

        Returns:
            (start, event ids) or None if the step leaves the schedule
        """
        if n == 0:
            ids = self._time_map.get(from_)
            return (from_, ids) if ids is not None else None

        if n > 0:
            index = bisect_right(self._timestamps, from_) + n - 1
        else:
            index = bisect_left(self._timestamps, from_) + n

        if not 0 <= index < len(self._timestamps):
            return None
        ts = self._timestamps[index]
        return ts, self._time_map[ts]

"""Data models for the Fahrplan schedule viewer.

All entities use Pydantic for validation and are frozen once built.
ID formats:
- Event: guid attribute of <event> (UUID)
- Person: guid attribute of <person> (UUID)
"""

from fahrplan.models.base import EventId, FahrplanModel, PersonId, ensure_utc, utc_now
from fahrplan.models.event import Event
from fahrplan.models.person import Person, join_names
from fahrplan.models.conference import Conference, Track
from fahrplan.models.records import ImportedEvent, ImportedLink, ImportedPerson
from fahrplan.models.coord import TimeCoord

__all__ = [
    # Base
    "FahrplanModel",
    "EventId",
    "PersonId",
    "utc_now",
    "ensure_utc",
    # Event
    "Event",
    # Person
    "Person",
    "join_names",
    # Conference
    "Conference",
    "Track",
    # Import records
    "ImportedEvent",
    "ImportedLink",
    "ImportedPerson",
    # Selection
    "TimeCoord",
]

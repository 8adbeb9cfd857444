"""Import records - the flat shape a schedule source is decoded into.

These mirror what the source format provides, before persons are
deduplicated and events are indexed by time.
"""

from datetime import timedelta
from typing import Optional
import uuid

from pydantic import AwareDatetime, Field

from fahrplan.models.base import FahrplanModel


class ImportedPerson(FahrplanModel):
    """A speaker reference as it appears inside an event."""

    guid: uuid.UUID
    name: str


class ImportedLink(FahrplanModel):
    """A link attached to an event."""

    label: str
    href: str


class ImportedEvent(FahrplanModel):
    """One event record from the schedule source."""

    guid: uuid.UUID
    date: AwareDatetime
    duration: timedelta

    title: str
    subtitle: str = ""
    abstract: str = ""
    description: str = ""
    room: str = ""
    track: str = ""
    type: str = ""
    language: str = ""
    url: str = ""
    feedback_url: Optional[str] = None

    persons: tuple[ImportedPerson, ...] = Field(default_factory=tuple)
    links: tuple[ImportedLink, ...] = Field(default_factory=tuple)

"""Event entity - a single talk or session on the schedule."""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import AwareDatetime, Field, field_validator

from fahrplan.models.base import EventId, FahrplanModel, PersonId


class Event(FahrplanModel):
    """A scheduled event with a fixed start time and duration.

    The id is the `guid` attribute of the schedule, not the numeric `id`.
    """

    id: EventId
    start: AwareDatetime
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
    feedback_url: Optional[str] = Field(
        None, description="None if the schedule does not provide one"
    )
    links: dict[str, str] = Field(
        default_factory=dict, description="label -> href, in schedule order"
    )

    persons: tuple[PersonId, ...] = Field(
        default_factory=tuple, description="Speakers, in schedule order"
    )

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: timedelta) -> timedelta:
        """Ensure duration is not negative."""
        if value < timedelta(0):
            raise ValueError("duration must be >= 0")
        return value

    @property
    def end(self) -> datetime:
        """End of the event (start + duration)."""
        return self.start + self.duration

    def is_running_at(self, point: datetime) -> bool:
        """Check whether the event has started and not yet ended at `point`."""
        return self.start <= point < self.end

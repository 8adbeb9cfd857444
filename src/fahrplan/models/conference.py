"""Conference entity - metadata from the schedule header."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from fahrplan.models.base import FahrplanModel


class Track(FahrplanModel):
    """A track with its display colour (e.g. "#d9334f")."""

    name: str
    color: Optional[str] = None


class Conference(FahrplanModel):
    """Conference the schedule belongs to."""

    acronym: str = ""
    title: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    url: Optional[str] = None
    tracks: tuple[Track, ...] = Field(default_factory=tuple)

    def track_color(self, name: str) -> Optional[str]:
        """Get the colour configured for a track, if any."""
        for track in self.tracks:
            if track.name == name:
                return track.color
        return None

"""Base model class and identifier types shared by all Fahrplan models."""

from datetime import datetime, timezone
from typing import NewType
import uuid

from pydantic import BaseModel, ConfigDict


# Ids are the `guid` attributes of the schedule, never its numeric `id`s
EventId = NewType("EventId", uuid.UUID)
PersonId = NewType("PersonId", uuid.UUID)


class FahrplanModel(BaseModel):
    """Immutable schedule record.

    A schedule is read once and never changed afterwards, so every
    model is frozen and can be shared freely between views.
    """

    model_config = ConfigDict(frozen=True)

    def to_json(self, indent: int = 2) -> str:
        """Dump the record as pretty-printed JSON."""
        return self.model_dump_json(indent=indent)


def utc_now() -> datetime:
    """Current point in time, timezone-aware in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Express a datetime in UTC.

    Naive datetimes are taken to be UTC already; None passes through.
    """
    if dt is None:
        return None
    return dt.astimezone(timezone.utc) if dt.tzinfo else dt.replace(tzinfo=timezone.utc)

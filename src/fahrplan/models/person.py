"""Person entity - a speaker appearing in one or more events."""

from fahrplan.models.base import FahrplanModel, PersonId


class Person(FahrplanModel):
    """A speaker, identified by the schedule's person guid."""

    id: PersonId
    name: str


def join_names(names: list[str]) -> str:
    """Join names as "A, B and C"."""
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"

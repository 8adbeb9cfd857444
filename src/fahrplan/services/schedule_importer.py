"""Schedule Importer - decodes schedule.xml into import records.

Responsible for:
- Reading the XML with clear errors for missing or malformed files
- Extracting conference metadata and tracks
- Turning every <event> of every <day>/<room> into an ImportedEvent

Anywhere an id is mentioned, the `guid` attribute is meant, not `id`.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional
import uuid
import xml.etree.ElementTree as ET

from pydantic import ValidationError

from fahrplan.models import (
    Conference,
    ImportedEvent,
    ImportedLink,
    ImportedPerson,
    Track,
)
from fahrplan.services.schedule import EmptyScheduleError, Schedule, ScheduleError
from fahrplan.utils.logging import get_logger
from fahrplan.utils.time_utils import parse_duration

logger = get_logger(__name__)

# Namespace for ids derived from a person's numeric id when it has no guid
PERSON_NAMESPACE = uuid.UUID("6ba7b811-9dad-11d1-80b4-00c04fd430c8")


class ScheduleImportError(ScheduleError):
    """Raised when a schedule source cannot be decoded."""
    pass


@dataclass
class ImportResult:
    """Everything decoded from one schedule source."""

    events: list[ImportedEvent] = field(default_factory=list)
    conference: Optional[Conference] = None
    version: Optional[str] = None


class ScheduleImporter:
    """Decodes schedule.xml files."""

    def import_file(self, file_path: Path | str) -> ImportResult:
        """Decode a schedule file.

        Args:
            file_path: Path to schedule.xml

        Returns:
            ImportResult with all events in source order

        Raises:
            ScheduleImportError: If the file is missing or cannot be decoded
        """
        path = Path(file_path)
        if not path.exists():
            raise ScheduleImportError(f"Schedule file does not exist: {path}")

        try:
            logger.debug(f"Parsing schedule file: {path}")
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise ScheduleImportError(f"Malformed XML in {path}: {e}") from e

        return self._import_root(root)

    def import_string(self, xml_str: str) -> ImportResult:
        """Decode a schedule from an XML string.

        Raises:
            ScheduleImportError: If the content cannot be decoded
        """
        try:
            root = ET.fromstring(xml_str)
        except ET.ParseError as e:
            raise ScheduleImportError(f"Malformed XML string: {e}") from e

        return self._import_root(root)

    def _import_root(self, root: ET.Element) -> ImportResult:
        if root.tag != "schedule":
            raise ScheduleImportError(f"Expected <schedule> root element, got <{root.tag}>")

        result = ImportResult(version=_text(root, "version") or None)

        conference = root.find("conference")
        if conference is not None:
            result.conference = self._import_conference(conference)

        for day in root.iter("day"):
            for room in day.iter("room"):
                for event in room.iter("event"):
                    result.events.append(self._import_event(event, room))

        logger.info(f"Imported {len(result.events)} events")
        return result

    def _import_conference(self, element: ET.Element) -> Conference:
        tracks = tuple(
            Track(name=track.get("name", track.text or ""), color=track.get("color"))
            for track in element.iter("track")
        )
        try:
            return Conference(
                acronym=_text(element, "acronym"),
                title=_text(element, "title"),
                start=_optional_datetime(element, "start"),
                end=_optional_datetime(element, "end"),
                url=_text(element, "url") or None,
                tracks=tracks,
            )
        except (ValidationError, ValueError) as e:
            raise ScheduleImportError(f"Invalid conference metadata: {e}") from e

    def _import_event(self, element: ET.Element, room: ET.Element) -> ImportedEvent:
        guid = element.get("guid")
        if not guid:
            raise ScheduleImportError(
                f"Event {element.get('id', '?')} has no guid attribute"
            )

        try:
            date = datetime.fromisoformat(_text(element, "date"))
            duration = parse_duration(_text(element, "duration"))
            feedback = element.find("feedback_url")
            return ImportedEvent(
                guid=uuid.UUID(guid),
                date=date,
                duration=duration,
                title=_text(element, "title"),
                subtitle=_text(element, "subtitle"),
                abstract=_text(element, "abstract"),
                description=_text(element, "description"),
                room=_text(element, "room") or room.get("name", ""),
                track=_text(element, "track"),
                type=_text(element, "type"),
                language=_text(element, "language"),
                url=_text(element, "url"),
                feedback_url=(feedback.text or "").strip() if feedback is not None else None,
                persons=tuple(self._import_persons(element)),
                links=tuple(self._import_links(element)),
            )
        except (ValidationError, ValueError) as e:
            raise ScheduleImportError(f"Invalid event {guid}: {e}") from e

    def _import_persons(self, element: ET.Element) -> list[ImportedPerson]:
        persons = []
        for person in element.findall("persons/person"):
            guid = person.get("guid")
            if guid:
                person_id = uuid.UUID(guid)
            elif person.get("id"):
                person_id = uuid.uuid5(PERSON_NAMESPACE, person.get("id"))
            else:
                raise ValueError("person has neither guid nor id attribute")
            persons.append(ImportedPerson(guid=person_id, name=(person.text or "").strip()))
        return persons

    def _import_links(self, element: ET.Element) -> list[ImportedLink]:
        return [
            ImportedLink(label=(link.text or "").strip(), href=link.get("href", ""))
            for link in element.findall("links/link")
        ]


def _text(element: ET.Element, tag: str) -> str:
    """Stripped text of a direct child, empty if missing."""
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _optional_datetime(element: ET.Element, tag: str) -> Optional[datetime]:
    value = _text(element, tag)
    return datetime.fromisoformat(value) if value else None


def load_schedule(file_path: Path | str) -> Schedule:
    """Import a schedule file and build the Schedule from it.

    Raises:
        ScheduleImportError: If the file cannot be decoded
        EmptyScheduleError: If the file contains no events
        ScheduleError: If the decoded events are inconsistent
    """
    result = ScheduleImporter().import_file(file_path)
    if not result.events:
        raise EmptyScheduleError(f"Schedule is empty, nothing to display: {file_path}")
    return Schedule.from_records(result.events, conference=result.conference)

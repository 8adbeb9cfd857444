"""Grid Layout Engine - projects concurrent events onto stable columns.

Responsible for:
- Assigning every running event a column that stays fixed while it runs
- Capping the number of columns at a configured width
- Recording one fixed-width row per start time of the schedule

Events that find no free column at their start are left out of the grid
for their whole duration. The earliest declared event wins scarce columns.
"""

import heapq
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from fahrplan.models import EventId, TimeCoord
from fahrplan.services.schedule import Schedule
from fahrplan.utils.logging import get_logger

logger = get_logger(__name__)

GridRow = tuple[Optional[EventId], ...]


@dataclass(frozen=True)
class Grid:
    """Column layout of a schedule, one row per start time."""

    width: int
    rows: Mapping[datetime, GridRow]
    dropped: frozenset[EventId] = field(default_factory=frozenset)

    def __len__(self) -> int:
        return len(self.rows)

    def timestamps(self) -> tuple[datetime, ...]:
        """Row keys in ascending order."""
        return tuple(self.rows)

    def row(self, point: datetime) -> GridRow:
        """Get the slots of a row."""
        return self.rows[point]

    def occupied(self, point: datetime) -> list[int]:
        """Indices of non-empty slots of a row."""
        return [column for column, slot in enumerate(self.rows[point]) if slot is not None]

    def first_occupied(self, point: datetime) -> Optional[int]:
        """Lowest non-empty column of a row, or None for an empty row."""
        occupied = self.occupied(point)
        return occupied[0] if occupied else None

    def last_occupied(self, point: datetime) -> Optional[int]:
        """Highest non-empty column of a row, or None for an empty row."""
        occupied = self.occupied(point)
        return occupied[-1] if occupied else None

    def event_at(self, coord: TimeCoord) -> Optional[EventId]:
        """Get the event shown at a coordinate, None for an empty slot."""
        row = self.rows.get(coord.row)
        if row is None or not 0 <= coord.column < self.width:
            return None
        return row[coord.column]

    def column_of(self, event_id: EventId, point: datetime) -> Optional[int]:
        """Column an event occupies in a row, None if it is not shown there."""
        try:
            return self.rows[point].index(event_id)
        except (KeyError, ValueError):
            return None

    def is_valid(self, coord: TimeCoord) -> bool:
        """Check that a coordinate points at an existing row and column."""
        return coord.row in self.rows and 0 <= coord.column < self.width


class GridLayoutEngine:
    """Builds a Grid from a Schedule with a sweep over its start times."""

    def __init__(self, width: int):
        """Initialize the engine.

        Args:
            width: Maximum number of concurrently shown events (>= 1)
        """
        if width < 1:
            raise ValueError("Grid width must be at least 1")
        self.width = width

    def build(self, schedule: Schedule) -> Grid:
        """Lay out all events of a schedule.

        Args:
            schedule: The schedule to lay out

        Returns:
            Grid with one row per start time
        """
        slots: list[Optional[EventId]] = [None] * self.width
        # (end, column, event) of occupied slots, earliest end first
        running: list[tuple[datetime, int, EventId]] = []
        free_columns = list(range(self.width))
        rows: dict[datetime, GridRow] = {}
        dropped: set[EventId] = set()

        for point, event_ids in schedule.time_map.items():
            while running and running[0][0] <= point:
                _, column, _ = heapq.heappop(running)
                slots[column] = None
                heapq.heappush(free_columns, column)

            for event_id in event_ids:
                if not free_columns:
                    dropped.add(event_id)
                    continue
                column = heapq.heappop(free_columns)
                slots[column] = event_id
                end = schedule.resolve_event(event_id).end
                heapq.heappush(running, (end, column, event_id))

            rows[point] = tuple(slots)

        if dropped:
            logger.info(
                f"{len(dropped)} events did not fit into {self.width} columns "
                f"and are not shown in the grid"
            )
        logger.debug(f"Laid out {len(rows)} grid rows with width {self.width}")

        return Grid(
            width=self.width,
            rows=MappingProxyType(rows),
            dropped=frozenset(dropped),
        )

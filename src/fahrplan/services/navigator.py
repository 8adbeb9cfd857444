"""Navigator - moves the selection through the grid.

Left/right walks through the occupied columns of a row. Once the column
leaves the row's occupied range, the selection moves to the previous row
(landing on its first event) or the next row (landing on its last event).
Up/below steps directly to
the neighbouring row and keeps the column. A step that would leave the
schedule leaves the selection where it is.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from fahrplan.models import Event, TimeCoord
from fahrplan.services.grid_layout import Grid
from fahrplan.services.schedule import EmptyScheduleError, Schedule


class To(str, Enum):
    """Direction of a selection step."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    BELOW = "below"


class Navigator:
    """Computes selection steps on a schedule and its grid."""

    def __init__(self, schedule: Schedule, grid: Grid):
        self.schedule = schedule
        self.grid = grid

    def initial(self) -> TimeCoord:
        """Coordinate of the earliest event.

        Raises:
            EmptyScheduleError: If the schedule has no events
        """
        first = self.schedule.first()
        if first is None:
            raise EmptyScheduleError("Schedule is empty, nothing to display")
        column = self.grid.column_of(first.id, first.start)
        return TimeCoord(row=first.start, column=column or 0)

    def step(self, coord: TimeCoord, to: To) -> TimeCoord:
        """Move a coordinate one step.

        Args:
            coord: Current, valid coordinate
            to: Direction to move in

        Returns:
            The new coordinate, or `coord` itself if there is nowhere to go
        """
        match to:
            case To.LEFT:
                return self._step_horizontal(coord, -1)
            case To.RIGHT:
                return self._step_horizontal(coord, 1)
            case To.UP:
                return self._step_vertical(coord, -1)
            case To.BELOW:
                return self._step_vertical(coord, 1)

    def resolve(self, coord: TimeCoord) -> Event:
        """Event to show for a coordinate.

        An empty slot falls back to the first event starting in that row.
        """
        event_id = self.grid.event_at(coord)
        if event_id is None:
            event_id = self.schedule.events_at(coord.row)[0]
        return self.schedule.resolve_event(event_id)

    def _step_horizontal(self, coord: TimeCoord, delta: int) -> TimeCoord:
        occupied = self.grid.occupied(coord.row)
        column = coord.column + delta
        if occupied and occupied[0] <= column <= occupied[-1]:
            return coord.with_column(column)

        target = self._neighbour_row(coord, delta)
        if target is None:
            return coord
        return TimeCoord(row=target, column=self._edge_column(target, delta))

    def _step_vertical(self, coord: TimeCoord, delta: int) -> TimeCoord:
        target = self._neighbour_row(coord, delta)
        if target is None:
            return coord
        return TimeCoord(row=target, column=coord.column)

    def _neighbour_row(self, coord: TimeCoord, delta: int) -> Optional[datetime]:
        entry = self.schedule.relative(delta, coord.row)
        return entry[0] if entry is not None else None

    def _edge_column(self, row: datetime, delta: int) -> int:
        # stepping left lands on the first event of the new row, right on the last
        column: Optional[int]
        if delta < 0:
            column = self.grid.first_occupied(row)
        else:
            column = self.grid.last_occupied(row)
        return column if column is not None else 0

"""Overview over all events of the schedule, one row per start time."""

import curses
from datetime import datetime
from typing import Optional

from fahrplan.config import Settings
from fahrplan.services.navigator import To
from fahrplan.services.store import (
    Action,
    Mode,
    Scroll,
    Select,
    State,
    SwitchTo,
    VerticalDirection,
)
from fahrplan.ui.text import put, truncate
from fahrplan.utils.time_utils import format_point

TIME_LABEL_WIDTH = 18


def visible_rows(height: int) -> int:
    """Grid rows that fit between header and footer."""
    return max(height - 2, 1)


def visible_window(state: State, height: int) -> tuple[int, int]:
    """Rows to draw as [top, bottom), starting at the scroll position.

    The Store moves the scroll position along with the selection, so
    page keys may scroll the selected row out of view until the next
    selection step.
    """
    count = len(state.grid)
    top = min(state.grid_state.scroll_at, max(count - 1, 0))
    return top, min(top + max(height, 1), count)


def cell_label(state: State, row: datetime, column: int) -> Optional[str]:
    """Text of a grid cell, None for an empty slot.

    Events that started in an earlier row are marked as continuing.
    """
    event_id = state.grid.row(row)[column]
    if event_id is None:
        return None
    event = state.schedule.resolve_event(event_id)
    if event.start < row:
        return f"┆ {event.title}"
    return f"{event.title} ({event.room})" if event.room else event.title


class View:
    """Draws the grid and handles grid-specific keys."""

    def __init__(self, state: State, settings: Settings):
        self.state = state
        self.settings = settings

    def draw(self, win) -> None:
        height, width = win.getmaxyx()
        conference = self.state.schedule.conference
        header = conference.title if conference and conference.title else "Fahrplan"
        put(win, 0, 0, truncate(f" {header}", width), curses.A_BOLD)

        cell_width = self.settings.column_width
        top, bottom = visible_window(self.state, visible_rows(height))
        timestamps = self.state.grid.timestamps()

        for y, row in enumerate(timestamps[top:bottom], start=1):
            put(win, y, 0, format_point(row).rjust(TIME_LABEL_WIDTH - 1), curses.A_DIM)
            for column in range(self.state.grid.width):
                x = TIME_LABEL_WIDTH + column * (cell_width + 1)
                label = cell_label(self.state, row, column)
                attr = curses.A_DIM if label and label.startswith("┆") else 0
                if row == self.state.selection.row and column == self.state.selection.column:
                    attr |= curses.A_REVERSE
                text = truncate(label or "·", cell_width).ljust(cell_width)
                put(win, y, x, text, attr)

        footer = "q quit  ←/→ h/l select  ↑/↓ j/k row  enter details  pgup/pgdn scroll"
        put(win, height - 1, 0, truncate(footer, width - 1), curses.A_DIM)

    def process(self, key: int) -> Optional[Action]:
        if key in (curses.KEY_ENTER, 10, 13):
            return SwitchTo(Mode.SINGLE)
        if key in (curses.KEY_DOWN, ord("j")):
            return Select(To.BELOW)
        if key in (curses.KEY_UP, ord("k")):
            return Select(To.UP)
        if key == curses.KEY_NPAGE:
            return Scroll(VerticalDirection.DOWN)
        if key == curses.KEY_PPAGE:
            return Scroll(VerticalDirection.UP)
        return None

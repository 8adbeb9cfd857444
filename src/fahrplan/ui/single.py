"""One specific event with all its details, laid out like the first page of a paper."""

import curses
from datetime import datetime
from typing import Optional

from fahrplan.config import Settings
from fahrplan.models import Event, join_names
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
from fahrplan.ui.text import put, truncate, wrap
from fahrplan.utils.time_utils import format_duration, format_point

ITALIC = getattr(curses, "A_ITALIC", curses.A_NORMAL)


def metadata_rows(event: Event, now: Optional[datetime] = None) -> list[tuple[str, str]]:
    """Label/value pairs for the metadata column."""
    return [
        ("where", event.room),
        ("when", format_point(event.start, now)),
        ("+", format_duration(event.duration)),
        ("=", format_point(event.end, now)),
        ("", ""),
        ("track", event.track),
        ("type", event.type),
        ("lang", event.language),
    ]


def body_lines(event: Event, width: int) -> list[tuple[str, int]]:
    """Scrollable text of the detail page as (line, attribute) pairs."""
    lines: list[tuple[str, int]] = [("abstract", curses.A_DIM)]
    lines.extend((line, 0) for line in wrap(event.abstract, width))
    lines.extend([("", 0), ("description", curses.A_DIM)])
    lines.extend((line, 0) for line in wrap(event.description, width))

    if event.links:
        lines.extend([("", 0), ("links", curses.A_DIM)])
        lines.extend((f"{label}: {href}", 0) for label, href in event.links.items())
    if event.url:
        lines.extend([("", 0), ("url", curses.A_DIM), (event.url, 0)])
    if event.feedback_url is not None:
        lines.extend([("feedback", curses.A_DIM), (event.feedback_url, 0)])
    return lines


class View:
    """Draws the selected event and handles detail-specific keys."""

    def __init__(self, state: State, settings: Settings):
        self.state = state
        self.settings = settings

    def draw(self, win) -> None:
        height, width = win.getmaxyx()
        event = self.state.selected_event()
        meta_width = max(width // 4, 16)

        self._draw_metadata(win, event, meta_width)
        self._draw_content(win, event, meta_width + 2, width - meta_width - 3, height)

    def _draw_metadata(self, win, event: Event, width: int) -> None:
        label_width = 7
        for y, (label, value) in enumerate(metadata_rows(event), start=4):
            put(win, y, 0, label.rjust(label_width - 1), curses.A_DIM)
            put(win, y, label_width, truncate(value, width - label_width))

    def _draw_content(self, win, event: Event, x: int, width: int, height: int) -> None:
        width = max(width, 1)
        speakers = [person.name for person in self.state.schedule.persons_of(event)]
        header = [
            (event.title, curses.A_BOLD),
            (event.subtitle, ITALIC),
            ("", 0),
            (f"by {join_names(speakers)}" if speakers else "", curses.A_DIM),
        ]
        for y, (line, attr) in enumerate(header, start=1):
            line = truncate(line, width)
            put(win, y, x + max((width - len(line)) // 2, 0), line, attr)

        top = len(header) + 2
        lines = body_lines(event, width)
        offset = min(self.state.single_state.scroll_at, max(len(lines) - 1, 0))
        for y, (line, attr) in enumerate(lines[offset:offset + height - top], start=top):
            put(win, y, x, line, attr)

    def process(self, key: int) -> Optional[Action]:
        if key in (27, curses.KEY_BACKSPACE, 127, ord("g")):
            return SwitchTo(Mode.GRID)
        if key in (curses.KEY_DOWN, ord("j")):
            return Scroll(VerticalDirection.DOWN)
        if key in (curses.KEY_UP, ord("k")):
            return Scroll(VerticalDirection.UP)
        if key == curses.KEY_NPAGE:
            return Select(To.BELOW)
        if key == curses.KEY_PPAGE:
            return Select(To.UP)
        return None

"""Terminal UI - drawing and input handling on top of curses.

For each Mode there is one view module which draws a frame of that mode
and maps mode-specific keys to actions. All state lives in the Store; the
UI only reads it and sends back at most one action per frame, plus a
Resize whenever the terminal height changes.
"""

import curses
from typing import Optional, Union

from fahrplan.config import Settings
from fahrplan.services.navigator import To
from fahrplan.services.store import (
    Action,
    Exit,
    Mode,
    Resize,
    Scroll,
    Select,
    State,
    Store,
    VerticalDirection,
)
from fahrplan.ui import grid, single
from fahrplan.utils.logging import get_logger

logger = get_logger(__name__)

# Not every curses build defines the wheel-down button
WHEEL_UP = getattr(curses, "BUTTON4_PRESSED", 0x80000)
WHEEL_DOWN = getattr(curses, "BUTTON5_PRESSED", 0x200000)

View = Union[grid.View, single.View]


def view_for(state: State, settings: Settings) -> View:
    """Create the view for the active mode."""
    match state.mode:
        case Mode.GRID:
            return grid.View(state, settings)
        case Mode.SINGLE:
            return single.View(state, settings)


def map_global_key(key: int) -> Optional[Action]:
    """Keys that mean the same thing in every view."""
    if key == ord("q"):
        return Exit()
    if key in (curses.KEY_LEFT, ord("h")):
        return Select(To.LEFT)
    if key in (curses.KEY_RIGHT, ord("l")):
        return Select(To.RIGHT)
    return None


def map_mouse(bstate: int) -> Optional[Action]:
    """Mouse wheel scrolls whatever view is active."""
    if bstate & WHEEL_UP:
        return Scroll(VerticalDirection.UP)
    if bstate & WHEEL_DOWN:
        return Scroll(VerticalDirection.DOWN)
    return None


class Ui:
    """Runs the draw/input loop until an Exit action is dispatched."""

    def __init__(self, store: Store, settings: Settings):
        self.store = store
        self.settings = settings

    def run(self) -> None:
        """Take over the terminal; restores it on exit or error."""
        curses.wrapper(self._main)

    def _main(self, stdscr) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.keypad(True)
        stdscr.timeout(self.settings.frame_timeout_ms)
        curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)

        try:
            while True:
                action = self.frame(stdscr)
                if action is None:
                    continue
                self.store.dispatch(action)
                if isinstance(action, Exit):
                    break
        except KeyboardInterrupt:
            logger.debug("Interrupted")

    def frame(self, stdscr) -> Optional[Action]:
        """Draw one frame and wait up to one frame timeout for input."""
        rows = grid.visible_rows(stdscr.getmaxyx()[0])
        if rows != self.store.state.grid_state.visible_rows:
            self.store.dispatch(Resize(rows))

        view = view_for(self.store.state, self.settings)
        stdscr.erase()
        view.draw(stdscr)
        stdscr.refresh()

        key = stdscr.getch()
        if key == -1:
            return None
        if key == curses.KEY_MOUSE:
            try:
                _, _, _, _, bstate = curses.getmouse()
            except curses.error:
                return None
            return map_mouse(bstate)

        return map_global_key(key) or view.process(key)

"""Store - application state and the only place it is changed.

The UI reads `Store.state` once per frame and sends back at most one
action, which `Store.dispatch` applies before the next frame is drawn.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from fahrplan.models import Event, TimeCoord
from fahrplan.services.grid_layout import Grid, GridLayoutEngine
from fahrplan.services.navigator import Navigator, To
from fahrplan.services.schedule import Schedule
from fahrplan.utils.logging import get_logger

logger = get_logger(__name__)


class Mode(str, Enum):
    """Which view is active."""
    GRID = "grid"
    SINGLE = "single"


class VerticalDirection(str, Enum):
    """Scroll direction."""
    DOWN = "down"
    UP = "up"


@dataclass(frozen=True)
class Exit:
    """Leave the application."""


@dataclass(frozen=True)
class Select:
    """Move the selection one step."""

    to: To


@dataclass(frozen=True)
class SwitchTo:
    """Activate a view."""

    mode: Mode


@dataclass(frozen=True)
class Scroll:
    """Scroll the active view."""

    direction: VerticalDirection


@dataclass(frozen=True)
class Resize:
    """The grid view now has room for `rows` rows."""

    rows: int


Action = Union[Exit, Select, SwitchTo, Scroll, Resize]


@dataclass
class GridState:
    """Grid view state."""

    # Index of the topmost visible row
    scroll_at: int = 0
    row_count: int = 1
    # Rows the grid view has room for, as last reported by the UI
    visible_rows: int = 1

    def apply(self, action: Action) -> None:
        match action:
            case Scroll(direction=VerticalDirection.DOWN):
                self.scroll_at = min(self.scroll_at + 1, max(self.row_count - 1, 0))
            case Scroll(direction=VerticalDirection.UP):
                self.scroll_at = max(self.scroll_at - 1, 0)
            case Resize(rows=rows):
                self.visible_rows = max(rows, 1)
            case _:
                pass

    def follow(self, index: int) -> None:
        """Scroll just far enough for row `index` to be visible."""
        if index < self.scroll_at:
            self.scroll_at = index
        elif index >= self.scroll_at + self.visible_rows:
            self.scroll_at = index - self.visible_rows + 1


@dataclass
class SingleState:
    """Detail view state."""

    # Line offset into the event text
    scroll_at: int = 0

    def apply(self, action: Action) -> None:
        match action:
            case Scroll(direction=VerticalDirection.DOWN):
                self.scroll_at += 1
            case Scroll(direction=VerticalDirection.UP):
                self.scroll_at = max(self.scroll_at - 1, 0)
            case _:
                pass


@dataclass
class State:
    """Everything the UI needs to draw a frame."""

    schedule: Schedule
    grid: Grid
    selection: TimeCoord
    mode: Mode = Mode.GRID
    grid_state: GridState = field(default_factory=GridState)
    single_state: SingleState = field(default_factory=SingleState)

    def selected_event(self) -> Event:
        """The event under the selection."""
        return Navigator(self.schedule, self.grid).resolve(self.selection)

    def mode_state(self) -> Union[GridState, SingleState]:
        """State of the active view."""
        match self.mode:
            case Mode.GRID:
                return self.grid_state
            case Mode.SINGLE:
                return self.single_state


class Store:
    """Owns the State and applies actions to it."""

    def __init__(self, schedule: Schedule, grid: Optional[Grid] = None, columns: int = 4):
        """Initialize the store.

        Args:
            schedule: The schedule to browse
            grid: Prebuilt grid; built with `columns` if omitted
            columns: Grid width used when building the grid

        Raises:
            EmptyScheduleError: If the schedule has no events
        """
        if grid is None:
            grid = GridLayoutEngine(columns).build(schedule)
        self.navigator = Navigator(schedule, grid)
        self._state = State(
            schedule=schedule,
            grid=grid,
            selection=self.navigator.initial(),
            grid_state=GridState(row_count=len(grid)),
        )

    @property
    def state(self) -> State:
        """Current state, to be read but not modified."""
        return self._state

    def dispatch(self, action: Action) -> None:
        """Apply one action to the state."""
        logger.debug(f"Dispatching {action}")
        state = self._state

        match action:
            case SwitchTo(mode=mode):
                state.mode = mode
            case Select(to=to):
                state.selection = self.navigator.step(state.selection, to)
            case Scroll():
                state.mode_state().apply(action)
            case _:
                state.grid_state.apply(action)
                state.single_state.apply(action)

        # the grid window follows the selection, but not explicit scrolling
        if isinstance(action, (Select, Resize)):
            state.grid_state.follow(state.grid.timestamps().index(state.selection.row))

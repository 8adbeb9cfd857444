"""Services for the Fahrplan schedule viewer.

Components:
- ScheduleImporter: Decode schedule.xml into import records
- Schedule: Immutable store of events and persons indexed by start time
- GridLayoutEngine: Project concurrent events onto stable columns
- Navigator: Move the selection through the grid
- Store: Application state and action dispatch
"""

from fahrplan.services.schedule import (
    EmptyScheduleError,
    ForeignIdError,
    Schedule,
    ScheduleError,
)
from fahrplan.services.grid_layout import Grid, GridLayoutEngine
from fahrplan.services.navigator import Navigator, To
from fahrplan.services.schedule_importer import (
    ImportResult,
    ScheduleImporter,
    ScheduleImportError,
    load_schedule,
)
from fahrplan.services.store import (
    Action,
    Exit,
    GridState,
    Mode,
    Resize,
    Scroll,
    Select,
    SingleState,
    State,
    Store,
    SwitchTo,
    VerticalDirection,
)

__all__ = [
    "Schedule",
    "ScheduleError",
    "EmptyScheduleError",
    "ForeignIdError",
    "Grid",
    "GridLayoutEngine",
    "Navigator",
    "To",
    "ImportResult",
    "ScheduleImporter",
    "ScheduleImportError",
    "load_schedule",
    "Action",
    "Exit",
    "GridState",
    "Mode",
    "Resize",
    "Scroll",
    "Select",
    "SingleState",
    "State",
    "Store",
    "SwitchTo",
    "VerticalDirection",
]

"""Selection coordinate shared by all views."""

from pydantic import AwareDatetime, Field

from fahrplan.models.base import FahrplanModel


class TimeCoord(FahrplanModel):
    """A cell of the grid: start time row and column within that row."""

    row: AwareDatetime
    column: int = Field(..., ge=0)

    def with_column(self, column: int) -> "TimeCoord":
        """Same row, different column."""
        return TimeCoord(row=self.row, column=column)

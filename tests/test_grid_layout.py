"""Tests for the GridLayoutEngine.

Tests cover:
- Column capacity
- Column stability while an event runs
- Dropping of events that do not fit
- Equivalence with the straightforward full-scan layout
"""

from datetime import datetime, timedelta, timezone
import random
import uuid

import pytest

from fahrplan.models import ImportedEvent, TimeCoord
from fahrplan.services.grid_layout import Grid, GridLayoutEngine
from fahrplan.services.schedule import Schedule


BASE = datetime(2023, 12, 27, 10, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return BASE + timedelta(minutes=minutes)


def record(title: str, start_minutes: int, duration_minutes: int) -> ImportedEvent:
    return ImportedEvent(
        guid=uuid.uuid5(uuid.NAMESPACE_URL, title),
        date=at(start_minutes),
        duration=timedelta(minutes=duration_minutes),
        title=title,
    )


def build(records, width: int) -> tuple[Schedule, Grid]:
    schedule = Schedule.from_records(records)
    return schedule, GridLayoutEngine(width).build(schedule)


def row_titles(schedule: Schedule, grid: Grid, minutes: int) -> list:
    return [
        schedule.resolve_event(slot).title if slot is not None else None
        for slot in grid.row(at(minutes))
    ]


def shown_at(event, point: datetime) -> bool:
    """Whether an event belongs in the row at `point`; zero-length events only in their own row."""
    return event.start == point or event.is_running_at(point)


def full_scan_layout(schedule: Schedule, width: int) -> dict:
    """Reference layout: rescan every slot at every start time."""
    slots = [None] * width
    rows = {}
    for point, event_ids in schedule.time_map.items():
        slots = [slot if slot is not None and slot[1] > point else None for slot in slots]
        for event_id in event_ids:
            for column, slot in enumerate(slots):
                if slot is None:
                    slots[column] = (event_id, schedule.resolve_event(event_id).end)
                    break
        rows[point] = tuple(slot[0] if slot is not None else None for slot in slots)
    return rows


class TestEngine:
    """Tests for engine construction."""

    def test_width_must_be_positive(self):
        """A grid needs at least one column."""
        with pytest.raises(ValueError):
            GridLayoutEngine(0)

    def test_one_row_per_start(self):
        """Rows are exactly the start times of the schedule."""
        schedule, grid = build([record("A", 0, 30), record("B", 15, 30)], 2)
        assert grid.timestamps() == schedule.timestamps()
        assert len(grid) == 2

    def test_rows_have_fixed_width(self):
        """Every row has exactly `width` slots."""
        _, grid = build([record("A", 0, 30), record("B", 15, 30)], 3)
        for point in grid.timestamps():
            assert len(grid.row(point)) == 3


class TestLayout:
    """Tests for column assignment."""

    def test_first_free_column(self):
        """New events take the lowest free column."""
        schedule, grid = build(
            [record("A", 0, 60), record("B", 0, 30), record("C", 30, 60)], 3
        )
        assert row_titles(schedule, grid, 0) == ["A", "B", None]
        # B ended at 10:30, C takes its column
        assert row_titles(schedule, grid, 30) == ["A", "C", None]

    def test_column_is_stable(self):
        """A running event keeps its column even when lower ones free up."""
        schedule, grid = build(
            [record("A", 0, 30), record("B", 0, 90), record("C", 60, 30)], 2
        )
        assert row_titles(schedule, grid, 0) == ["A", "B"]
        assert row_titles(schedule, grid, 60) == ["C", "B"]

    def test_end_equal_to_start_frees_column(self):
        """An event ending at T no longer occupies its column at T."""
        schedule, grid = build([record("A", 0, 30), record("B", 30, 30)], 1)
        assert row_titles(schedule, grid, 30) == ["B"]

    def test_capacity_drop_example(self):
        """W=1: B overlaps A and is dropped for its whole lifetime."""
        schedule, grid = build(
            [record("A", 0, 30), record("B", 15, 30), record("C", 30, 30)], 1
        )
        assert row_titles(schedule, grid, 0) == ["A"]
        assert row_titles(schedule, grid, 15) == ["A"]
        assert row_titles(schedule, grid, 30) == ["C"]
        dropped_titles = {schedule.resolve_event(e).title for e in grid.dropped}
        assert dropped_titles == {"B"}

    def test_earliest_declared_wins(self):
        """When columns are scarce, import order decides."""
        schedule, grid = build(
            [record("first", 0, 30), record("second", 0, 30), record("third", 0, 30)], 2
        )
        assert row_titles(schedule, grid, 0) == ["first", "second"]
        assert {schedule.resolve_event(e).title for e in grid.dropped} == {"third"}

    def test_zero_duration_event(self):
        """A zero-length event shows in its own row only."""
        schedule, grid = build([record("A", 0, 0), record("B", 15, 30)], 1)
        assert row_titles(schedule, grid, 0) == ["A"]
        assert row_titles(schedule, grid, 15) == ["B"]


class TestGridQueries:
    """Tests for Grid helpers."""

    @pytest.fixture
    def layout(self):
        return build([record("A", 0, 60), record("B", 30, 30), record("C", 45, 5)], 4)

    def test_occupied(self, layout):
        schedule, grid = layout
        assert grid.occupied(at(0)) == [0]
        assert grid.occupied(at(45)) == [0, 1, 2]
        assert grid.first_occupied(at(45)) == 0
        assert grid.last_occupied(at(45)) == 2

    def test_event_at(self, layout):
        schedule, grid = layout
        assert schedule.resolve_event(grid.event_at(TimeCoord(row=at(30), column=1))).title == "B"
        assert grid.event_at(TimeCoord(row=at(30), column=3)) is None
        assert grid.event_at(TimeCoord(row=at(30), column=9)) is None
        assert grid.event_at(TimeCoord(row=at(31), column=0)) is None

    def test_column_of(self, layout):
        schedule, grid = layout
        event_b = next(e for e in schedule.events() if e.title == "B")
        assert grid.column_of(event_b.id, at(45)) == 1
        assert grid.column_of(event_b.id, at(0)) is None

    def test_is_valid(self, layout):
        _, grid = layout
        assert grid.is_valid(TimeCoord(row=at(0), column=3))
        assert not grid.is_valid(TimeCoord(row=at(0), column=4))
        assert not grid.is_valid(TimeCoord(row=at(1), column=0))


class TestProperties:
    """Invariants checked on generated schedules."""

    @pytest.fixture(params=[1, 2, 3, 5])
    def width(self, request):
        return request.param

    @pytest.fixture(params=[0, 1, 2, 3, 4])
    def generated(self, request):
        rng = random.Random(request.param)
        records = [
            record(f"event-{i}", rng.randrange(0, 480, 15), rng.choice([0, 15, 30, 45, 60, 120]))
            for i in range(60)
        ]
        return Schedule.from_records(records)

    def test_matches_full_scan(self, generated, width):
        """Heap-based layout equals rescanning every slot."""
        grid = GridLayoutEngine(width).build(generated)
        assert dict(grid.rows) == full_scan_layout(generated, width)

    def test_capacity(self, generated, width):
        """No row shows more than `width` events."""
        grid = GridLayoutEngine(width).build(generated)
        for point in grid.timestamps():
            assert len(grid.occupied(point)) <= width

    def test_shown_events_are_running(self, generated, width):
        """Every event in a row is running at that row's time."""
        grid = GridLayoutEngine(width).build(generated)
        for point in grid.timestamps():
            for event_id in grid.row(point):
                if event_id is not None:
                    assert shown_at(generated.resolve_event(event_id), point)

    def test_column_stability(self, generated, width):
        """An event keeps its column in every row while it runs."""
        grid = GridLayoutEngine(width).build(generated)
        for event in generated.events():
            if event.id in grid.dropped:
                continue
            columns = {
                grid.column_of(event.id, point)
                for point in grid.timestamps()
                if shown_at(event, point)
            }
            assert len(columns) == 1
            assert None not in columns

    def test_dropped_never_shown(self, generated, width):
        """Dropped events appear in no row."""
        grid = GridLayoutEngine(width).build(generated)
        for point in grid.timestamps():
            assert not set(grid.row(point)) & grid.dropped

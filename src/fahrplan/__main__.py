"""CLI Runner for the Fahrplan schedule viewer.

Usage:
    fahrplan view schedule.xml
    fahrplan grid schedule.xml [--limit 20]
    fahrplan events schedule.xml [--track "Science"]
    fahrplan show schedule.xml <event guid or guid prefix> [--json]

The schedule can be downloaded e.g. from
https://fahrplan.events.ccc.de/congress/2023/fahrplan/schedule.xml
"""

import sys
from typing import Optional

import click
from rich.color import Color, ColorParseError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fahrplan import __version__
from fahrplan.config import Settings, get_settings
from fahrplan.models import join_names
from fahrplan.services.schedule import Schedule, ScheduleError
from fahrplan.utils.logging import configure_logging
from fahrplan.utils.time_utils import format_duration, format_point

console = Console()


def load(path: str) -> Schedule:
    """Load a schedule or exit with an error message."""
    from fahrplan.services.schedule_importer import load_schedule

    try:
        schedule = load_schedule(path)
    except ScheduleError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    return schedule


def track_style(schedule: Schedule, track: str) -> str:
    """Rich style for a track, using the conference's track colour if known."""
    if schedule.conference is None:
        return ""
    color = schedule.conference.track_color(track)
    if not color:
        return ""
    try:
        Color.parse(color)
    except ColorParseError:
        return ""
    return color


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--columns", "-c", type=click.IntRange(min=1), default=None,
              help="Maximum number of concurrent events in the grid")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, columns: Optional[int]):
    """Fahrplan - terminal viewer for conference schedules.

    Browse a schedule.xml as a grid of concurrent events or event by event.
    """
    settings = get_settings()
    updates = {}
    if verbose:
        updates["log_level"] = "DEBUG"
    if columns is not None:
        updates["grid_columns"] = columns
    ctx.obj = settings.model_copy(update=updates)


@cli.command("view")
@click.argument("schedule", type=click.Path(dir_okay=False))
@click.pass_obj
def view_schedule(settings: Settings, schedule: str):
    """Browse a schedule interactively."""
    from fahrplan.services.store import Store
    from fahrplan.ui import Ui

    # the terminal belongs to the UI, so only a log file may receive output
    configure_logging(settings.log_level, settings.log_file, console=False)

    store = Store(load(schedule), columns=settings.grid_columns)
    Ui(store, settings).run()


@cli.command("grid")
@click.argument("schedule", type=click.Path(dir_okay=False))
@click.option("--limit", default=None, type=int, help="Maximum rows to show")
@click.pass_obj
def show_grid(settings: Settings, schedule: str, limit: Optional[int]):
    """Print the grid of concurrent events."""
    from fahrplan.services.grid_layout import GridLayoutEngine

    configure_logging(settings.log_level, settings.log_file)
    loaded = load(schedule)
    grid = GridLayoutEngine(settings.grid_columns).build(loaded)

    title = loaded.conference.title if loaded.conference else None
    table = Table(title=escape(title or "Schedule"))
    table.add_column("Start", style="cyan", no_wrap=True)
    for column in range(grid.width):
        table.add_column(f"#{column + 1}")

    for index, row in enumerate(grid.timestamps()):
        if limit is not None and index >= limit:
            break
        cells = []
        for event_id in grid.row(row):
            if event_id is None:
                cells.append("")
                continue
            event = loaded.resolve_event(event_id)
            style = track_style(loaded, event.track)
            title = escape(event.title)
            text = title if event.start == row else f"[dim]┆ {title}[/dim]"
            cells.append(f"[{style}]{text}[/{style}]" if style else text)
        table.add_row(format_point(row), *cells)

    console.print(table)
    if grid.dropped:
        console.print(
            f"[yellow]{len(grid.dropped)} events do not fit into {grid.width} columns; "
            f"use --columns or the events command to see them[/yellow]"
        )


@cli.command("events")
@click.argument("schedule", type=click.Path(dir_okay=False))
@click.option("--track", "-t", default=None, help="Only show events of this track")
@click.pass_obj
def list_events(settings: Settings, schedule: str, track: Optional[str]):
    """List all events in time order."""
    configure_logging(settings.log_level, settings.log_file)
    loaded = load(schedule)

    table = Table(title="Events")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Start", no_wrap=True)
    table.add_column("Duration")
    table.add_column("Room")
    table.add_column("Title")
    table.add_column("Speakers")

    for event in loaded.events():
        if track is not None and event.track != track:
            continue
        speakers = [person.name for person in loaded.persons_of(event)]
        style = track_style(loaded, event.track)
        table.add_row(
            str(event.id)[:8],
            format_point(event.start),
            format_duration(event.duration),
            escape(event.room),
            f"[{style}]{escape(event.title)}[/{style}]" if style else escape(event.title),
            escape(join_names(speakers)) or "-",
        )

    console.print(table)


@cli.command("show")
@click.argument("schedule", type=click.Path(dir_okay=False))
@click.argument("event_id")
@click.option("--json", "as_json", is_flag=True, help="Print the event as JSON")
@click.pass_obj
def show_event(settings: Settings, schedule: str, event_id: str, as_json: bool):
    """Show one event, given its guid or a unique guid prefix."""
    configure_logging(settings.log_level, settings.log_file)
    loaded = load(schedule)

    event = loaded.find_event(event_id)
    if event is None:
        console.print(f"[red]Event not found:[/red] {event_id}")
        sys.exit(1)

    if as_json:
        click.echo(event.to_json())
        return

    speakers = [person.name for person in loaded.persons_of(event)]
    console.print(f"[bold]{escape(event.title)}[/bold]")
    if event.subtitle:
        console.print(f"[italic]{escape(event.subtitle)}[/italic]")
    if speakers:
        console.print(f"by {escape(join_names(speakers))}")
    console.print(f"  Where: {escape(event.room)}")
    console.print(f"  When: {format_point(event.start)} - {format_point(event.end)} "
                  f"({format_duration(event.duration)})")
    console.print(f"  Track: {escape(event.track) or '-'}")
    console.print(f"  Type: {escape(event.type) or '-'}")
    if event.abstract:
        console.print(f"\n{escape(event.abstract)}")
    if event.description:
        console.print(f"\n{escape(event.description)}")
    for label, href in event.links.items():
        console.print(f"  [cyan]{escape(label)}[/cyan] {escape(href)}")
    if event.feedback_url is not None:
        console.print(f"  Feedback: {escape(event.feedback_url)}")


def main():
    cli()


if __name__ == "__main__":
    main()

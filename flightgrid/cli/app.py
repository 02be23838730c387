"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pendulum import Date
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.api_client import ApiSchedulerSource
from ..adapters.fixture_source import FixtureSchedulerSource
from ..config import AppConfig, get_default_config_path
from ..domain.day_boundary import get_selected_day_range_utc, local_today, parse_date_key
from ..domain.exceptions import SchedulerError
from ..domain.time_grid import format_time_label, format_time_range_label, resolve_timezone
from ..services.scheduler_view import DayView, SchedulerSourceProtocol, SchedulerViewService

app = typer.Typer(
    name="flightgrid",
    help="Resource timeline for instructors and aircraft",
    add_completion=False
)

console = Console()

CELL_GLYPHS = {
    "booked": "[bold blue]█[/bold blue]",
    "available": "[green]·[/green]",
    "unavailable": "[dim red]░[/dim red]",
}

ConfigOption = Annotated[
    Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
FixtureOption = Annotated[
    Optional[Path], typer.Option("--fixture", "-f", help="Read scheduler data from a JSON fixture")
]
ApiUrlOption = Annotated[
    Optional[str], typer.Option("--api-url", help="Base URL of the operations API")
]
TimezoneOption = Annotated[
    Optional[str], typer.Option("--tz", help="IANA timezone of the viewer. Defaults to config, then local")
]
DateArgument = Annotated[
    Optional[str], typer.Argument(help="Local calendar day (YYYY-MM-DD). Defaults to today")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the given config, or the default one if it exists."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _build_source(
    config: AppConfig,
    fixture: Optional[Path],
    api_url: Optional[str],
) -> SchedulerSourceProtocol:
    if fixture is not None:
        return FixtureSchedulerSource(fixture)
    if api_url is not None:
        if config.api is None:
            return ApiSchedulerSource(base_url=api_url)
        return ApiSchedulerSource(
            base_url=api_url,
            token=config.api.token,
            timeout_seconds=config.api.timeout_seconds,
        )
    if config.fixture_path is not None:
        return FixtureSchedulerSource(config.fixture_path)
    if config.api is not None:
        return ApiSchedulerSource(
            base_url=config.api.base_url,
            token=config.api.token,
            timeout_seconds=config.api.timeout_seconds,
        )
    raise SchedulerError(
        "No data source configured. Pass --fixture or --api-url, "
        "or set fixture_path / api in config.yaml."
    )


def _resolve_day(date_str: Optional[str], tz) -> Date:
    if date_str:
        return parse_date_key(date_str)
    return local_today(tz)


def _load_view(
    *,
    config_file: Optional[Path],
    fixture: Optional[Path],
    api_url: Optional[str],
    tz_name: Optional[str],
    date_str: Optional[str],
) -> tuple[SchedulerViewService, DayView]:
    config = _load_config(config_file)
    tz = resolve_timezone(tz_name or config.timezone)
    source = _build_source(config, fixture, api_url)

    service = SchedulerViewService(
        source=source,
        config=config.timeline.to_timeline_config(),
        tz=tz,
        min_width_pct=config.timeline.min_width_pct,
    )
    day = _resolve_day(date_str, tz)
    view = asyncio.run(service.load_day(day))
    return service, view


def _render_grid(view: DayView) -> Table:
    table = Table(
        title=f"{view.day.format('ddd, DD MMM YYYY')} ({view.grid.start.timezone_name})",
        show_header=True,
        header_style="bold cyan",
        pad_edge=False,
        padding=(0, 0),
    )
    table.add_column("Resource", style="bold", no_wrap=True)
    for slot in view.grid.slots:
        table.add_column(format_time_label(slot) if slot.minute == 0 else "", justify="center")

    for title, rows in (("Instructors", view.instructor_rows), ("Aircraft", view.aircraft_rows)):
        table.add_row(f"[dim]{title}[/dim]", *([""] * view.grid.slot_count))
        for row in rows:
            cells = [CELL_GLYPHS[row.cell_state(view.grid, i)] for i in range(view.grid.slot_count)]
            table.add_row(row.resource.label, *cells)

    return table


def _render_bookings(view: DayView) -> Table:
    table = Table(title="Bookings", show_header=True, header_style="bold cyan")
    table.add_column("Resource", style="bold yellow")
    table.add_column("Time")
    table.add_column("Student")
    table.add_column("Status")
    table.add_column("Left %", justify="right")
    table.add_column("Width %", justify="right")

    for row in view.rows:
        for placed in row.bookings:
            booking = placed.booking
            time_label = format_time_range_label(booking.starts_at, booking.ends_at)
            if placed.layout.is_clipped_start:
                time_label = f"◂ {time_label}"
            if placed.layout.is_clipped_end:
                time_label = f"{time_label} ▸"
            table.add_row(
                row.resource.label,
                time_label,
                booking.student_name,
                booking.status.value,
                f"{placed.layout.left_pct:.2f}",
                f"{placed.rendered_width_pct:.2f}",
            )

    return table


@app.command()
def day(
    date: DateArgument = None,
    config_file: ConfigOption = None,
    fixture: FixtureOption = None,
    api_url: ApiUrlOption = None,
    tz: TimezoneOption = None,
):
    """
    Show the resource timeline for one day.

    Examples:

        flightgrid day 2025-03-14 --fixture schedule.json

        flightgrid day --api-url https://ops.example.com --tz Pacific/Auckland
    """
    try:
        _, view = _load_view(
            config_file=config_file, fixture=fixture, api_url=api_url, tz_name=tz, date_str=date
        )
    except (SchedulerError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    console.print(_render_grid(view))
    console.print()
    if any(row.bookings for row in view.rows):
        console.print(_render_bookings(view))
    else:
        console.print("[yellow]No bookings in the visible window.[/yellow]")
    console.print()


@app.command()
def click(
    resource_id: Annotated[str, typer.Argument(help="Instructor or aircraft id of the clicked row")],
    pointer_x: Annotated[float, typer.Argument(help="Pointer offset from the row's left edge (px)")],
    width: Annotated[float, typer.Argument(help="Row width (px)")],
    date: DateArgument = None,
    config_file: ConfigOption = None,
    fixture: FixtureOption = None,
    api_url: ApiUrlOption = None,
    tz: TimezoneOption = None,
):
    """
    Resolve a click on an empty part of a row to a draft booking slot.
    """
    try:
        service, view = _load_view(
            config_file=config_file, fixture=fixture, api_url=api_url, tz_name=tz, date_str=date
        )
        row = view.find_row(resource_id)
        if row is None:
            raise SchedulerError(f"Unknown resource: {resource_id}")
        selection = service.handle_row_click(view, row.resource, pointer_x, width)
    except (SchedulerError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if selection is None:
        console.print(f"[yellow]✗ {row.resource.label} is not rostered at that time.[/yellow]")
        raise typer.Exit(2)

    console.print(
        f"[green]✓ Draft booking:[/green] {row.resource.label} @ "
        f"{format_time_range_label(selection.start, selection.end)} (slot {selection.index})"
    )


@app.command(name="range")
def day_range(
    date: DateArgument = None,
    config_file: ConfigOption = None,
    tz: TimezoneOption = None,
):
    """
    Print the UTC query range covering a local calendar day.
    """
    try:
        config = _load_config(config_file)
        zone = resolve_timezone(tz or config.timezone)
        selected = _resolve_day(date, zone)
    except (SchedulerError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    result = get_selected_day_range_utc(selected, zone)
    console.print(f"start_date={result.start_utc_iso}")
    console.print(f"end_date={result.end_utc_iso}")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]flightgrid[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

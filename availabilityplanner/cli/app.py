"""
Operator CLI using Typer.
"""

import asyncio
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.assignment_client import AssignmentClient
from ..adapters.credentials import CredentialStore
from ..adapters.mock_clients import InMemoryScheduleStore, StaticAssignmentSource
from ..adapters.persistence import SchedulePersistenceAdapter
from ..adapters.schedule_client import ScheduleClient
from ..config import AppConfig, get_default_config_path
from ..domain.calendar import WEEKDAY_NAMES, format_time, month_bounds
from ..domain.exceptions import AvailabilityError
from ..domain.reconciler import DayStatus, DayView
from ..logging_config import configure_logging
from ..services.availability_engine import AvailabilityEngine

app = typer.Typer(
    name="availabilityplanner",
    help="Manage the weekly availability template and inspect the availability calendar",
    add_completion=False
)

console = Console()

DEFAULT_MOCK_FILE = Path("mock_availability.json")

STATUS_STYLES = {
    DayStatus.BUSY: "bold magenta",
    DayStatus.PAST: "dim",
    DayStatus.AVAILABLE: "green",
    DayStatus.UNAVAILABLE: "red",
    DayStatus.UNSET: "white",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use a local JSON file instead of the backend.")]
MockFileOption = Annotated[Path, typer.Option("--mock-file", help="JSON file used in mock mode.")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config = AppConfig.load_from_yaml(config_file or get_default_config_path())
    configure_logging(config.log_level)
    return config


def _build_engine(config: AppConfig, mock: bool, mock_file: Path) -> AvailabilityEngine:
    """Wire the engine to either the backend or the mock JSON file."""
    if mock:
        store = InMemoryScheduleStore(data_file=mock_file)
        assignments = StaticAssignmentSource.from_file(mock_file)
    else:
        token = CredentialStore().get_token()
        store = ScheduleClient(
            config.api.base_url,
            access_token=token,
            timeout=config.api.timeout_seconds,
            schedule_path=config.api.schedule_path,
            update_path=config.api.schedule_update_path,
            update_method=config.api.schedule_update_method,
        )
        assignments = AssignmentClient(
            config.api.base_url,
            access_token=token,
            timeout=config.api.timeout_seconds,
            assignments_path=config.api.assignments_path,
        )

    return AvailabilityEngine.from_config(config, SchedulePersistenceAdapter(store), assignments)


def _template_table(engine: AvailabilityEngine) -> Table:
    table = Table(title="Weekly template", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim")
    table.add_column("Day", style="bold yellow")
    table.add_column("Available")
    table.add_column("Hours")

    for day_of_week, slot in enumerate(engine.template):
        hours = f"{format_time(slot.start)} - {format_time(slot.end)}" if slot.enabled else "-"
        table.add_row(
            str(day_of_week),
            WEEKDAY_NAMES[day_of_week],
            "[green]yes[/green]" if slot.enabled else "[red]no[/red]",
            hours,
        )
    return table


def _format_cell(view: DayView) -> str:
    style = STATUS_STYLES[view.status]
    text = f"[{style}]{view.date.day:>2}[/]"
    if view.status is DayStatus.BUSY:
        return f"{text}\n[magenta]busy[/magenta]"
    if view.status is DayStatus.AVAILABLE:
        count = len(view.intervals)
        return f"{text}\n[green]{count} slot{'s' if count > 1 else ''}[/green]"
    if view.status is DayStatus.UNAVAILABLE:
        return f"{text}\n[red]off[/red]"
    return text


def _month_table(year: int, month: int, views: List[DayView]) -> Table:
    first, _ = month_bounds(year, month)
    table = Table(title=first.strftime("%B %Y"), show_header=True, header_style="bold cyan")
    for name in WEEKDAY_NAMES:
        table.add_column(name[:3], justify="center")

    # Sunday-first grid
    offset = first.isoweekday() % 7
    cells: List[str] = [""] * offset + [_format_cell(view) for view in views]
    while len(cells) % 7:
        cells.append("")
    for index in range(0, len(cells), 7):
        table.add_row(*cells[index:index + 7])
    return table


def _parse_month(value: str) -> Tuple[int, int]:
    try:
        year_text, month_text = value.split("-")
        year, month = int(year_text), int(month_text)
        month_bounds(year, month)
    except ValueError:
        console.print(f"[red]Invalid month '{value}', expected YYYY-MM[/red]")
        raise typer.Exit(1)
    return year, month


@app.command()
def template(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    mock_file: MockFileOption = DEFAULT_MOCK_FILE,
):
    """
    Show the stored weekly template.
    """
    try:
        config = _load_config(config_file)
        engine = _build_engine(config, mock, mock_file)
        asyncio.run(engine.load_template())

        console.print()
        console.print(_template_table(engine))
        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (AvailabilityError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def set_day(
    day_of_week: Annotated[int, typer.Argument(help="Day of week, 0 = Sunday ... 6 = Saturday")],
    enable: Annotated[bool, typer.Option("--enable/--disable", help="Whether the worker is available that day.")] = True,
    start: Annotated[Optional[str], typer.Option("--start", help="Start time (HH:MM)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End time (HH:MM)")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    mock_file: MockFileOption = DEFAULT_MOCK_FILE,
):
    """
    Change one weekday of the template and save it.

    Examples:

        availabilityplanner set-day 1 --start 09:00 --end 17:00

        availabilityplanner set-day 0 --disable --mock
    """
    try:
        config = _load_config(config_file)
        engine = _build_engine(config, mock, mock_file)

        async def _update():
            await engine.load_template()
            engine.set_template_day(day_of_week, enable, start, end)
            await engine.save_template()

        asyncio.run(_update())

        console.print(f"[green]✓ {WEEKDAY_NAMES[day_of_week]} saved[/green]")
        console.print(_template_table(engine))

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (AvailabilityError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def month(
    month_value: Annotated[str, typer.Argument(metavar="YYYY-MM", help="Month to project, e.g. 2025-08")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    mock_file: MockFileOption = DEFAULT_MOCK_FILE,
):
    """
    Project the weekly template onto a month and show the calendar with busy dates.
    """
    year, month_number = _parse_month(month_value)

    try:
        config = _load_config(config_file)
        engine = _build_engine(config, mock, mock_file)

        async def _prepare():
            await engine.load_template()
            await engine.refresh_assignments()

        asyncio.run(_prepare())
        result = engine.apply_template_to_month(year, month_number)
        views = engine.month_view(year, month_number)

        console.print()
        console.print(_month_table(year, month_number, views))
        console.print(f"[dim]{len(result.applied)} date(s) projected from the weekly template[/dim]")

        busy = [view for view in views if view.is_busy]
        for view in busy:
            labels = ", ".join(view.labels) or "job assignment"
            console.print(f"  [magenta]{view.date.isoformat()}[/magenta] {labels}")
        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (AvailabilityError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def upcoming(
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="How many dates to list")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    mock_file: MockFileOption = DEFAULT_MOCK_FILE,
):
    """
    List the next available dates from this month's and next month's projection.
    """
    try:
        config = _load_config(config_file)
        engine = _build_engine(config, mock, mock_file)
        asyncio.run(engine.load_template())

        today = engine.today
        engine.apply_template_to_month(today.year, today.month)
        following = (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
        engine.apply_template_to_month(*following)

        records = list(engine.upcoming(limit))
        if not records:
            console.print("[yellow]No upcoming availability set.[/yellow]")
            return

        console.print(f"[bold green]Next {len(records)} available date(s):[/bold green]")
        for record in records:
            console.print(f"  {record.date.strftime('%a, %b %d')}  {record.summary()}")

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (AvailabilityError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def set_token(
    token: Annotated[str, typer.Argument(help="Backend access token")],
):
    """
    Store the backend access token.
    """
    store = CredentialStore()
    store.set_token(token)
    if store.insecure_storage_warning:
        console.print(f"[yellow]{store.insecure_storage_warning}[/yellow]")
    console.print(f"[green]✓ Token stored ({store.backend}).[/green]")


@app.command()
def clear_token():
    """
    Forget the stored backend access token.
    """
    CredentialStore().clear()
    console.print("[green]✓ Token removed.[/green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]availabilityplanner[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

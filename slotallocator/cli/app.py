"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from pendulum import Date, DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.schedule_source import JsonScheduleSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SlotAllocatorError
from ..domain.models import SlotStatus
from ..domain.selection import ToggleOutcome
from ..services.slot_engine import SlotEngine, SlotEngineService

app = typer.Typer(
    name="slotallocator",
    help="Inspect bookable appointment slots for a clinic schedule date",
    add_completion=False
)

console = Console()

STATUS_STYLES = {
    SlotStatus.AVAILABLE: "green",
    SlotStatus.OCCUPIED: "dark_orange",
    SlotStatus.CURRENT: "magenta",
    SlotStatus.PAST: "dim",
}

OUTCOME_MESSAGES = {
    ToggleOutcome.SELECTED: "[green]✓ Selected[/green]",
    ToggleOutcome.CLEARED: "[cyan]○ Cleared[/cyan]",
    ToggleOutcome.BLOCKED: "[red]✗ Blocked[/red]",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", help="Schedule JSON file. Defaults to the bundled mock data.")]
DurationOption = Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")]
BufferOption = Annotated[Optional[int], typer.Option("--buffer", "-b", help="Buffer time in minutes")]
GranularityOption = Annotated[Optional[int], typer.Option("--granularity", "-g", help="Minutes per slot")]
NowOption = Annotated[Optional[str], typer.Option("--now", help="Clock override (YYYY-MM-DD HH:mm)")]
EditingOption = Annotated[Optional[str], typer.Option("--editing", "-e", help="Appointment id being edited")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _parse_date(value: str, tz: str) -> Date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _parse_now(value: Optional[str], tz: str) -> DateTime:
    if not value:
        return pendulum.now(tz)
    try:
        return pendulum.from_format(value, "YYYY-MM-DD HH:mm", tz=tz)
    except ValueError as e:
        console.print(f"[red]Could not parse --now '{value}': {e}[/red]")
        raise typer.Exit(1)


def _build_engine(
    *,
    schedule_date: str,
    config_file: Optional[Path],
    data_file: Optional[Path],
    duration: Optional[int],
    buffer: Optional[int],
    granularity: Optional[int],
    now: Optional[str],
    editing: Optional[str],
) -> tuple[AppConfig, SlotEngine]:
    """
    Load config and schedule data, then build the engine for one date.

    Configuration or data problems are reported and end the command.
    """
    try:
        config = AppConfig.load_or_default(config_file or get_default_config_path())
        source = JsonScheduleSource(data_file or config.data_file)
    except (SlotAllocatorError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    tz = config.timezone
    day = _parse_date(schedule_date, tz)
    clock = _parse_now(now, tz)

    editing_range = None
    if editing:
        editing_range = source.get_editing_range(editing)
        if editing_range is None:
            console.print(f"[yellow]⚠ Appointment '{editing}' not found, ignoring --editing[/yellow]")

    service = SlotEngineService(
        lookup=source,
        service=config.defaults.to_service_spec(
            service_duration=duration,
            buffer_time=buffer,
            granularity=granularity,
        ),
    )
    engine = asyncio.run(
        service.load_day(schedule_date=day, now=clock, editing_range=editing_range)
    )
    return config, engine


def _print_summary(engine: SlotEngine) -> None:
    hours = engine.day.working_hours
    console.print(f"\n[bold cyan]🦷 Slots for {engine.day.schedule_date.format('dddd, DD.MM.YYYY')}[/bold cyan]")
    console.print(f"   Working hours: {hours if hours else 'closed'}")
    console.print(
        f"   Service: {engine.service.service_duration} min + {engine.service.buffer_time} min buffer "
        f"= {engine.service.slots_needed} slot(s) of {engine.service.granularity} min"
    )
    console.print()


def _print_slot_table(engine: SlotEngine, show_occupied: bool, highlight: List[str] | None = None) -> None:
    slots = engine.schedule.visible(show_occupied)
    if not slots:
        console.print("[yellow]⚠ No time slots available.[/yellow]\n")
        return

    highlight = highlight or []
    selection = engine.selection

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Slot", style="bold")
    table.add_column("24h", style="dim")
    table.add_column("Status")
    table.add_column("")

    for slot in slots:
        style = STATUS_STYLES[slot.status]
        marker = ""
        if selection is not None and selection.contains(slot.label):
            marker = "[bold blue]■ selected[/bold blue]"
        elif slot.label in highlight:
            marker = "[blue]□ preview[/blue]"

        table.add_row(
            slot.display_label,
            slot.label,
            f"[{style}]{slot.status.value}[/{style}]",
            marker,
        )

    console.print(table)
    console.print()


@app.command()
def slots(
    schedule_date: Annotated[str, typer.Argument(help="Schedule date (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    duration: DurationOption = None,
    buffer: BufferOption = None,
    granularity: GranularityOption = None,
    now: NowOption = None,
    editing: EditingOption = None,
    show_occupied: Annotated[bool, typer.Option("--show-occupied", help="Also list occupied and past slots.")] = False,
    verbose: VerboseOption = False,
):
    """
    Show the classified slots of a date.

    Examples:

        slotallocator slots 2026-10-19
        slotallocator slots 2026-10-20 --duration 45 --buffer 15 --show-occupied
        slotallocator slots 2026-10-20 --editing APT-1001
    """
    _configure_logging(verbose)
    config, engine = _build_engine(
        schedule_date=schedule_date,
        config_file=config_file,
        data_file=data_file,
        duration=duration,
        buffer=buffer,
        granularity=granularity,
        now=now,
        editing=editing,
    )

    _print_summary(engine)
    _print_slot_table(engine, show_occupied or config.defaults.show_occupied)


@app.command()
def preview(
    schedule_date: Annotated[str, typer.Argument(help="Schedule date (YYYY-MM-DD)")],
    slot: Annotated[str, typer.Argument(help="Hovered slot, e.g. '14:00' or '2:00 PM'")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    duration: DurationOption = None,
    buffer: BufferOption = None,
    granularity: GranularityOption = None,
    now: NowOption = None,
    editing: EditingOption = None,
    verbose: VerboseOption = False,
):
    """
    Show which slots a click on SLOT would select, without selecting.
    """
    _configure_logging(verbose)
    _, engine = _build_engine(
        schedule_date=schedule_date,
        config_file=config_file,
        data_file=data_file,
        duration=duration,
        buffer=buffer,
        granularity=granularity,
        now=now,
        editing=editing,
    )

    _print_summary(engine)
    result = engine.preview(slot)

    if result.is_invalid:
        console.print(
            f"[red]✗ Cannot select {slot}: not enough consecutive available slots "
            f"({engine.service.total_duration} minutes = {engine.service.slots_needed} slots needed)[/red]\n"
        )
        return

    console.print(
        f"[green]✓ Would select {len(result.slots)} consecutive slots "
        f"({result.run.to_selection()}) for {engine.service.total_duration} minutes total[/green]\n"
    )
    _print_slot_table(engine, show_occupied=True, highlight=result.slots)


@app.command()
def select(
    schedule_date: Annotated[str, typer.Argument(help="Schedule date (YYYY-MM-DD)")],
    clicks: Annotated[List[str], typer.Argument(help="Slots clicked in order")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    duration: DurationOption = None,
    buffer: BufferOption = None,
    granularity: GranularityOption = None,
    now: NowOption = None,
    editing: EditingOption = None,
    verbose: VerboseOption = False,
):
    """
    Replay slot clicks and print the resulting selection.

    Examples:

        slotallocator select 2026-10-19 10:30 10:30 14:00 --duration 45 --buffer 15
    """
    _configure_logging(verbose)
    _, engine = _build_engine(
        schedule_date=schedule_date,
        config_file=config_file,
        data_file=data_file,
        duration=duration,
        buffer=buffer,
        granularity=granularity,
        now=now,
        editing=editing,
    )

    _print_summary(engine)

    for click in clicks:
        result = engine.toggle(click)
        console.print(f"  {click:>8}  {OUTCOME_MESSAGES[result.outcome]}")

    console.print()
    if engine.selection is None:
        console.print("[yellow]No selection.[/yellow]\n")
    else:
        console.print(f"[bold green]Selection:[/bold green] {engine.selection}")
        console.print(f"   Payload: {engine.selection.to_payload()}\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotallocator[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

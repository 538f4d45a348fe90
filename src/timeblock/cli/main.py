import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from datetime import date, datetime
import logging
import uuid
from zoneinfo import ZoneInfo

from ..config.manager import ConfigManager
from ..models.event import Event, get_event_type, recompute_derived_fields
from ..models.drag import Viewport
from ..services.drag_service import DragRescheduleEngine
from ..services.event_geometry import calculate_event_duration, layout_event
from ..services.indicator_service import IndicatorService
from ..utils.time_utils import (
    MONTH_NAMES, calculate_event_offset, format_header_date, parse_time_to_hour, parse_time_to_minutes,
)
from ..utils.week_utils import DAY_NAMES, get_calendar_days, get_week_days

console = Console()
config_manager = ConfigManager()


def configure_logging():
    level = 'DEBUG' if config_manager.get('development.debug') else config_manager.get('development.log_level', 'INFO')
    logging.basicConfig(level=getattr(logging, level, logging.INFO))


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


def build_event(start: str, end: str, day: date, type_name: str = 'Other') -> Event:
    event_type = get_event_type(type_name)
    now = datetime.now(ZoneInfo(config_manager.get('app.timezone')))
    event = Event(
        id=str(uuid.uuid4()),
        type=event_type.name,
        color=event_type.color,
        title=event_type.name,
        date=day,
        start_time=start,
        end_time=end,
        created_at=now,
        updated_at=now,
    )
    return recompute_derived_fields(event)


@click.group()
@click.option('--config', '-c', help='Path to .env file')
def cli(config):
    """Timeblock - week view calendar tools"""
    global config_manager
    if config:
        config_manager = ConfigManager(config)
    configure_logging()


@cli.command()
@click.argument('time_str')
def parse(time_str):
    """Show how a clock string is parsed"""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Input", style="dim")
    table.add_column("Hour (24h)")
    table.add_column("Minutes since midnight")
    table.add_column("Offset")
    table.add_row(
        time_str,
        str(parse_time_to_hour(time_str)),
        str(parse_time_to_minutes(time_str)),
        f"{calculate_event_offset(time_str):.2f}",
    )
    console.print(table)


@cli.command()
@click.argument('day', required=False)
def week(day):
    """Show the week strip around DAY (YYYY-MM-DD, default today)"""
    selected = parse_date(day) if day else date.today()
    table = Table(show_header=True, header_style="bold magenta", title=format_header_date(selected))
    days = get_week_days(selected, selected)
    for week_day in days:
        table.add_column(week_day.weekday_name, justify="center")
    table.add_row(*[
        f"[bold reverse]{d.day_of_month}[/bold reverse]" if d.is_selected else str(d.day_of_month)
        for d in days
    ])
    console.print(table)


@cli.command()
@click.argument('year', type=int, required=False)
@click.argument('month', type=int, required=False)
def month(year, month):
    """Show the date picker grid for a month"""
    today = date.today()
    year = year or today.year
    month = month or today.month
    if not 1 <= month <= 12:
        raise click.BadParameter(f"Month must be 1-12, got {month}")

    cells = get_calendar_days(year, month)
    table = Table(show_header=True, header_style="bold magenta", title=f"{MONTH_NAMES[month - 1]} {year}")
    for name in DAY_NAMES:
        table.add_column(name, justify="right")
    for start in range(0, len(cells), 7):
        row = cells[start:start + 7]
        row = row + [None] * (7 - len(row))
        table.add_row(*["" if cell is None else str(cell) for cell in row])
    console.print(table)


@cli.command()
@click.argument('start')
@click.argument('end')
def layout(start, end):
    """Show duration and pixel placement of an event from START to END"""
    event = build_event(start, end, date.today())
    box = layout_event(event)
    console.print(Panel(
        f"Duration: {calculate_event_duration(start, end):g} h\n"
        f"Top: {box.top_px:g}px\n"
        f"Height: {box.height_px:g}px",
        title=f"{event.start_time} - {event.end_time}",
    ))


@cli.command()
@click.argument('start')
@click.argument('end')
@click.option('--delta-y', '-y', type=float, required=True, help='Vertical drag distance in pixels')
@click.option('--date', 'day', default=None, help='Day of the event (YYYY-MM-DD)')
def drag(start, end, delta_y, day):
    """Simulate dragging an event from START to END by DELTA_Y pixels"""
    selected = parse_date(day) if day else date.today()
    event = build_event(start, end, selected)
    engine = DragRescheduleEngine(
        timezone=config_manager.get('app.timezone'),
        timeout_seconds=config_manager.get('drag.timeout_seconds'),
    )
    viewport = Viewport(width=config_manager.get('viewport.width'), height=config_manager.get('viewport.height'))

    start_y = viewport.height / 2
    engine.pointer_down(event, viewport.width / 2, start_y)
    engine.pointer_move(viewport.width / 2, start_y + delta_y, viewport, selected)
    outcome = engine.pointer_up(start_y + delta_y, selected)

    if outcome is None or outcome.kind == 'tap':
        console.print("[yellow]No movement, the event would open instead[/yellow]")
        return
    console.print(f"[green]✓[/green] {outcome.message}")
    console.print(f"   {outcome.snapshot.start_time} - {outcome.snapshot.end_time}  ->  "
                  f"[bold]{outcome.event.start_time} - {outcome.event.end_time}[/bold]")


@cli.command()
def indicators():
    """Show the default weekly key indicators"""
    service = IndicatorService()
    table = Table(show_header=True, header_style="bold magenta", title="Weekly Key Indicators")
    table.add_column("Progress", justify="right")
    table.add_column("Indicator")
    for indicator in service.indicators:
        table.add_row(service.display(indicator), indicator.label)
    console.print(table)


if __name__ == '__main__':
    cli()

"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..adapters.config_catalog import ConfigCatalog
from ..domain.booking_evaluator import format_duration
from ..domain.exceptions import BookingError
from ..domain.models import (
    WEEKDAY_NAMES,
    BookingWindow,
    EndCondition,
    Frequency,
    RecurrenceRule,
    weekday_index,
)
from ..domain.recurrence import RecurrenceExpander
from ..services.booking_preview import BookingPreviewService

app = typer.Typer(
    name="coworkbooking",
    help="Preview recurring bookings, booking costs and service prices for coworking spaces",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
StartOption = Annotated[str, typer.Option("--start", help="Booking start (YYYY-MM-DD HH:mm)")]
EndOption = Annotated[str, typer.Option("--end", help="Booking end (YYYY-MM-DD HH:mm)")]
FrequencyOption = Annotated[Optional[Frequency], typer.Option("--repeat", "-r", help="Repeat DAILY, WEEKLY or MONTHLY")]
IntervalOption = Annotated[int, typer.Option("--interval", "-i", help="Repeat every N days/weeks/months")]
DaysOption = Annotated[Optional[List[int]], typer.Option("--day", help="Weekday for weekly repeats (0=Sunday ... 6=Saturday), repeatable")]
UntilOption = Annotated[Optional[str], typer.Option("--until", help="Last date of the series (YYYY-MM-DD)")]
CountOption = Annotated[Optional[int], typer.Option("--count", help="Total occurrences, first booking included")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Coworking booking previews.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path], required: bool = True) -> AppConfig:
    """Load the YAML config, falling back to defaults when it is optional and absent."""
    config_path = config_file or get_default_config_path()
    if not required and not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _parse_datetime(value: str, tz: str, label: str) -> DateTime:
    try:
        return pendulum.parse(value, tz=tz)
    except ValueError as e:
        console.print(f"[red]Could not parse {label}: {e}[/red]")
        raise typer.Exit(1)


def _build_rule(
    *,
    frequency: Optional[Frequency],
    interval: int,
    days: Optional[List[int]],
    until: Optional[str],
    count: Optional[int],
    tz: str,
) -> Optional[RecurrenceRule]:
    """Translate the repeat options into a rule, or None when no repeat was requested."""
    if frequency is None:
        return None

    if until is not None and count is not None:
        console.print("[red]Error: --until and --count cannot be used together.[/red]")
        raise typer.Exit(1)

    if until is not None:
        end_condition = EndCondition.BY_DATE
        end_date = _parse_datetime(until, tz, "--until").date()
    elif count is not None:
        end_condition = EndCondition.BY_COUNT
        end_date = None
    else:
        end_condition = EndCondition.NEVER
        end_date = None

    return RecurrenceRule(
        enabled=True,
        frequency=frequency,
        interval=interval,
        days_of_week=frozenset(days or []),
        end_condition=end_condition,
        end_date=end_date,
        occurrence_count=count,
    )


def _print_occurrences(occurrences, truncated: bool) -> None:
    if not occurrences:
        console.print("[yellow]No further occurrences.[/yellow]")
        return

    console.print(f"[bold green]Next {len(occurrences)} occurrence(s):[/bold green]")
    for occurrence in occurrences:
        weekday = WEEKDAY_NAMES[weekday_index(occurrence)]
        console.print(f"  {weekday}, {occurrence.format('DD.MM.YYYY HH:mm')}")
    if truncated:
        console.print("  [dim]... more occurrences follow[/dim]")


@app.command()
def recurrence(
    start: StartOption,
    end: EndOption,
    frequency: Annotated[Frequency, typer.Option("--repeat", "-r", help="Repeat DAILY, WEEKLY or MONTHLY")] = Frequency.WEEKLY,
    interval: IntervalOption = 1,
    days: DaysOption = None,
    until: UntilOption = None,
    count: CountOption = None,
    max_preview: Annotated[Optional[int], typer.Option("--max-preview", help="Number of dates to show")] = None,
    config_file: ConfigOption = None,
):
    """
    Preview the dates of a recurring booking.

    Examples:

        coworkbooking recurrence --start "2024-11-25 10:00" --end "2024-11-25 12:00" --repeat WEEKLY --day 1 --day 3

        coworkbooking recurrence --start "2024-01-31 09:00" --end "2024-01-31 10:00" --repeat MONTHLY --count 6
    """
    try:
        config = _load_config(config_file, required=False)
        tz = config.timezone

        window = BookingWindow(
            anchor_start=_parse_datetime(start, tz, "--start"),
            anchor_end=_parse_datetime(end, tz, "--end"),
        )
        rule = _build_rule(
            frequency=frequency,
            interval=interval,
            days=days,
            until=until,
            count=count,
            tz=tz,
        )
        if max_preview is None:
            max_preview = config.defaults.max_preview
        expander = RecurrenceExpander(max_preview=max_preview)
        result = expander.preview(rule, window)

        console.print(f"\n[bold cyan]Repeats {rule.describe()}[/bold cyan] from {window}\n")
        _print_occurrences(result.occurrences, result.truncated)
        console.print()

    except (BookingError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def evaluate(
    space_id: Annotated[str, typer.Argument(help="Id of a configured space")],
    start: StartOption,
    end: EndOption,
    attendees: Annotated[int, typer.Option("--attendees", "-a", help="Number of attendees")] = 1,
    setup: Annotated[int, typer.Option("--setup", help="Setup time in minutes (0-120)")] = 0,
    cleanup: Annotated[int, typer.Option("--cleanup", help="Cleanup time in minutes (0-120)")] = 0,
    frequency: FrequencyOption = None,
    interval: IntervalOption = 1,
    days: DaysOption = None,
    until: UntilOption = None,
    count: CountOption = None,
    config_file: ConfigOption = None,
):
    """
    Evaluate a booking for a space: duration, cost and rule violations.

    Examples:

        coworkbooking evaluate sala-a --start "2024-11-25 10:00" --end "2024-11-25 12:00" --attendees 6

        coworkbooking evaluate sala-a --start "2024-11-25 10:00" --end "2024-11-25 12:00" --repeat WEEKLY --count 4
    """
    try:
        config = _load_config(config_file)
        tz = config.timezone
        currency = config.defaults.currency

        window = BookingWindow(
            anchor_start=_parse_datetime(start, tz, "--start"),
            anchor_end=_parse_datetime(end, tz, "--end"),
            setup_minutes=setup,
            cleanup_minutes=cleanup,
        )
        rule = _build_rule(
            frequency=frequency,
            interval=interval,
            days=days,
            until=until,
            count=count,
            tz=tz,
        )

        service = BookingPreviewService(
            space_catalog=ConfigCatalog(config),
            expander=RecurrenceExpander(max_preview=config.defaults.max_preview),
        )
        preview = service.preview_booking(
            space_id=space_id,
            window=window,
            attendee_count=attendees,
            rule=rule,
        )
        evaluation = preview.evaluation

        console.print(f"\n[bold cyan]Booking {window}[/bold cyan] in [bold]{space_id}[/bold]")
        console.print(f"   Duration: {format_duration(evaluation.duration_minutes)}")
        console.print(f"   Cost: {evaluation.total_cost:.2f} {currency}")
        console.print()

        if evaluation.is_valid:
            console.print("[green]✓ Booking satisfies all space rules[/green]")
        else:
            for violation in evaluation.violations:
                console.print(f"[red]✗ {violation.message}[/red]")

        if rule is not None:
            console.print(f"\n[bold]Repeats {rule.describe()}[/bold]")
            _print_occurrences(preview.recurrence.occurrences, preview.recurrence.truncated)
            console.print(f"   Projected cost: {preview.projected_cost:.2f} {currency}")

        console.print()

        if not evaluation.is_valid:
            raise typer.Exit(2)

    except (BookingError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def price(
    service_id: Annotated[str, typer.Argument(help="Id of a configured service")],
    quantity: Annotated[int, typer.Argument(help="Requested quantity")],
    custom_price: Annotated[Optional[float], typer.Option("--custom-price", help="Override the unit price")] = None,
    config_file: ConfigOption = None,
):
    """
    Resolve the unit price of a service for a quantity, applying pricing tiers.
    """
    try:
        config = _load_config(config_file)
        catalog = ConfigCatalog(config)
        service = BookingPreviewService(space_catalog=catalog, service_catalog=catalog)

        item = service.add_line_item(service_id, quantity, custom_price=custom_price)
        currency = config.defaults.currency

        console.print(f"\n[bold cyan]{item.service_name}[/bold cyan] x {item.quantity}")
        label = "custom" if item.custom_price_applied else "tier"
        console.print(f"   Unit price ({label}): {item.unit_price:.2f} {currency}")
        console.print(f"   Total: {item.total:.2f} {currency}\n")

    except (BookingError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_spaces(config_file: ConfigOption = None):
    """
    List all configured spaces.
    """
    try:
        config = _load_config(config_file)

        if not config.spaces:
            console.print("[yellow]No spaces defined in the config file.[/yellow]")
            return

        table = Table(title="Configured spaces", show_header=True, header_style="bold cyan")
        table.add_column("Id", style="bold yellow")
        table.add_column("Name")
        table.add_column("Capacity", justify="right")
        table.add_column("Rate / h", justify="right")
        table.add_column("Duration", style="dim")

        for space in config.spaces:
            rate = f"{space.hourly_rate:.2f}" if space.hourly_rate is not None else "-"
            duration = format_duration(space.min_booking_minutes)
            if space.max_booking_minutes is not None:
                duration += f" - {format_duration(space.max_booking_minutes)}"
            table.add_row(space.id, space.name, str(space.capacity), rate, duration)

        console.print()
        console.print(table)
        console.print()

    except (BookingError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_services(config_file: ConfigOption = None):
    """
    List all configured services and their pricing tiers.
    """
    try:
        config = _load_config(config_file)

        if not config.services:
            console.print("[yellow]No services defined in the config file.[/yellow]")
            return

        table = Table(title="Configured services", show_header=True, header_style="bold cyan")
        table.add_column("Id", style="bold yellow")
        table.add_column("Name")
        table.add_column("Price", justify="right")
        table.add_column("Tiers", style="dim")

        for service in config.services:
            tiers = ", ".join(
                f"{tier.min_quantity}+ {tier.discount_type.value}" for tier in service.pricing_tiers
            )
            table.add_row(service.id, service.name, f"{service.price:.2f} / {service.unit}", tiers or "-")

        console.print()
        console.print(table)
        console.print()

    except (BookingError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]coworkbooking[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

"""
Main CLI application using Typer.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_store import JsonBookingStore
from ..adapters.rest_store import RestBookingStore
from ..config import AppConfig, StoreConfig
from ..domain.exceptions import SalonSlotsError
from ..domain.models import WEEKDAY_KEYS
from ..services.booking_availability import BookingAvailabilityService, BookingStoreProtocol

app = typer.Typer(
    name="salonslots",
    help="Query appointment availability and commissions for salon tenants",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Salon booking availability tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_store(config: StoreConfig) -> BookingStoreProtocol:
    """Create the booking store selected in the configuration."""
    if config.backend == "rest":
        return RestBookingStore(
            base_url=config.base_url,
            api_key=config.api_key,
            timezone=config.timezone,
        )
    return JsonBookingStore(data_file=config.data_file)


def _build_service(config_file: Optional[Path]) -> tuple[AppConfig, BookingAvailabilityService]:
    config = AppConfig.load_or_default(config_file)
    service = BookingAvailabilityService(
        store=build_store(config.store),
        step_minutes=config.defaults.slot_step_minutes,
    )
    return config, service


def _parse_date(value: Optional[str], tz: str) -> date:
    """Parse a YYYY-MM-DD option, defaulting to today in the tenant timezone."""
    if not value:
        return pendulum.today(tz).date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def slots(
    tenant: Annotated[str, typer.Argument(help="Tenant id or slug")],
    service_id: Annotated[str, typer.Argument(help="Service id")],
    employee_id: Annotated[str, typer.Argument(help="Professional id")],
    on_date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    config_file: ConfigOption = None,
):
    """
    List bookable start times for a service with one professional.

    Examples:

        salonslots slots studio-bella s-corte e-ana --date 2025-03-10
    """
    try:
        _, service = _build_service(config_file)
        tenant_record = service.require_tenant(tenant)
        day = _parse_date(on_date, tenant_record.timezone)

        available = service.available_slots(
            tenant_ref=tenant_record.id,
            service_id=service_id,
            employee_id=employee_id,
            on_date=day,
        )
    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    weekday = WEEKDAY_KEYS[day.isoweekday() % 7].capitalize()
    console.print(f"\n[bold cyan]{tenant_record.name or tenant_record.id}[/bold cyan] - {weekday}, {day.isoformat()}")
    console.print(f"Scheduling mode: {tenant_record.scheduling_type.value}\n")

    if not available:
        console.print("[yellow]No available slots for this selection.[/yellow]\n")
        return

    console.print(f"[bold green]{len(available)} available slot(s):[/bold green]")
    console.print("  " + "  ".join(available) + "\n")


@app.command()
def follow_up(
    tenant: Annotated[str, typer.Argument(help="Tenant id or slug")],
    service_id: Annotated[str, typer.Argument(help="Booked service id")],
    employee_id: Annotated[str, typer.Argument(help="Professional id")],
    booked_time: Annotated[str, typer.Argument(help="Booked start time (HH:MM)")],
    on_date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    config_file: ConfigOption = None,
):
    """
    Suggest a second service right after a booking.
    """
    try:
        _, service = _build_service(config_file)
        tenant_record = service.require_tenant(tenant)
        day = _parse_date(on_date, tenant_record.timezone)

        suggestion = service.follow_up(
            tenant_ref=tenant_record.id,
            service_id=service_id,
            employee_id=employee_id,
            on_date=day,
            booked_time=booked_time,
        )
    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if suggestion is None:
        console.print("[yellow]No follow-up service fits after this booking.[/yellow]")
        return

    console.print(
        f"[bold green]Suggestion:[/bold green] {suggestion.service.name} at {suggestion.time} "
        f"({suggestion.service.duration} min, {suggestion.service.price:.2f})"
    )


@app.command()
def tenants(config_file: ConfigOption = None):
    """
    List all tenants.
    """
    try:
        _, service = _build_service(config_file)
        records = service.tenants()
    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not records:
        console.print("[yellow]No tenants found.[/yellow]")
        return

    table = Table(title="Tenants", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Slug", style="bold yellow")
    table.add_column("Name")
    table.add_column("Scheduling")

    for record in records:
        table.add_row(record.id, record.slug, record.name, record.scheduling_type.value)

    console.print()
    console.print(table)
    console.print()


@app.command()
def services(
    tenant: Annotated[str, typer.Argument(help="Tenant id or slug")],
    config_file: ConfigOption = None,
):
    """
    List the service catalog of a tenant.
    """
    try:
        _, service = _build_service(config_file)
        records = service.services(tenant)
    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(title="Services", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Duration", justify="right")
    table.add_column("Buffers", justify="right")
    table.add_column("Price", justify="right")

    for record in records:
        table.add_row(
            record.id,
            record.name,
            f"{record.duration} min",
            f"{record.buffer_before}/{record.buffer_after} min",
            f"{record.price:.2f}",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def staff(
    tenant: Annotated[str, typer.Argument(help="Tenant id or slug")],
    config_file: ConfigOption = None,
):
    """
    List professionals of a tenant with their working days.
    """
    try:
        _, service = _build_service(config_file)
        records = service.staff(tenant)
    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(title="Professionals", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Working hours")

    for record in records:
        days = []
        for index, shifts in sorted(record.working_hours.shifts.items()):
            if not shifts:
                continue
            ranges = ", ".join(f"{s.start:%H:%M}-{s.end:%H:%M}" for s in shifts)
            days.append(f"{WEEKDAY_KEYS[index][:3]} {ranges}")
        table.add_row(record.id, record.name, "\n".join(days) or "-")

    console.print()
    console.print(table)
    console.print()


@app.command()
def commissions(
    tenant: Annotated[str, typer.Argument(help="Tenant id or slug")],
    config_file: ConfigOption = None,
):
    """
    Show commissions per professional from completed appointments.
    """
    try:
        config, service = _build_service(config_file)
        summaries = service.commissions(
            tenant_ref=tenant,
            settings=config.commission.to_settings(),
        )
    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(title="Commissions", show_header=True, header_style="bold cyan")
    table.add_column("Professional", style="bold yellow")
    table.add_column("Services", justify="right")
    table.add_column("Gross", justify="right")
    table.add_column("Fees", justify="right")
    table.add_column("Base", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Commission", justify="right", style="bold green")

    for summary in summaries:
        table.add_row(
            summary.employee_name or summary.employee_id,
            str(summary.appointment_count),
            f"{summary.total_service_value:.2f}",
            f"{summary.total_deductions:.2f}",
            f"{summary.base_value:.2f}",
            f"{summary.commission_rate:g}%",
            f"{summary.commission:.2f}",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

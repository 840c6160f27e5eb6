from __future__ import annotations

import asyncio
from datetime import datetime

import typer
from rich.console import Console
from rich.markup import escape

from blueplug.cli.common import load_settings_or_exit
from blueplug.config import Settings
from blueplug.core import watch as watch_readings
from blueplug.errors import TransportError
from blueplug.models import DeviceReading


def format_reading(reading: DeviceReading) -> str:
    measurement = reading.measurement
    return (
        f"[green]{escape(reading.identity.name)}[/green]\t"
        f"{measurement.kind.value} {measurement.value:g}{measurement.unit}"
    )


async def _print_readings(settings: Settings, console: Console) -> None:
    async for reading in watch_readings(settings):
        timestamp = datetime.now().strftime("%H:%M:%S")
        console.print(f"[dim]{timestamp}[/dim] {format_reading(reading)}")


async def _watch(settings: Settings, console: Console, duration: float | None) -> None:
    try:
        await asyncio.wait_for(_print_readings(settings, console), timeout=duration)
    except TimeoutError:
        pass


def watch(
    duration: float | None = typer.Option(
        None,
        "--duration",
        "-d",
        min=0.1,
        help="Stop after this many seconds (default: run until interrupted)",
    ),
) -> None:
    """Print sensor readings as they are received."""
    console = Console()
    settings = load_settings_or_exit()

    console.print("Listening for sensor advertisements...")
    console.print("Press Ctrl+C to stop.\n")

    try:
        asyncio.run(_watch(settings, console, duration))
    except KeyboardInterrupt:
        console.print("\n[green]Stopped.[/green]")
    except TransportError as exc:
        console.print(f"[red]Bluetooth error:[/red] {exc}")
        raise typer.Exit(1) from None


def register(app: typer.Typer) -> None:
    app.command()(watch)

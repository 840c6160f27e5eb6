from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from blueplug.core.decoders import (
    VENDOR_COMPANY_IDS,
    decode_vendor,
    envelope_measurements,
    normalize_uuid,
    parse_envelope,
)
from blueplug.errors import DecodeError
from blueplug.models import Measurement


def _parse_hex(value: str) -> bytes:
    cleaned = value.replace(":", "").replace(" ", "").removeprefix("0x")
    return bytes.fromhex(cleaned)


def _company_id(selector: str) -> int | None:
    try:
        return int(selector, 16)
    except ValueError:
        return None


def _measurement_table(measurements: list[Measurement]) -> Table:
    table = Table(title="Measurements")
    table.add_column("Kind", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Unit")
    for measurement in measurements:
        table.add_row(
            measurement.kind.value, f"{measurement.value:g}", measurement.unit
        )
    return table


def decode(
    selector: str = typer.Argument(
        ..., help="Service UUID (e.g. fcd2) or manufacturer company id (e.g. 0x0499)"
    ),
    payload: str = typer.Argument(..., help="Payload bytes as hex"),
    manufacturer: bool = typer.Option(
        False,
        "--manufacturer",
        "-m",
        help="Treat SELECTOR as a hex manufacturer company id (e.g. 0x0499)",
    ),
) -> None:
    """Decode a single advertisement payload.

    SELECTOR is a service UUID, or a company id for manufacturer data. Known
    sensor vendors (Ruuvi, 0x0499) are recognised without --manufacturer.
    """
    console = Console()

    try:
        data = _parse_hex(payload)
    except ValueError:
        console.print(f"[red]Invalid hex payload:[/red] {payload}")
        raise typer.Exit(1) from None

    company_id = _company_id(selector)
    if manufacturer or company_id in VENDOR_COMPANY_IDS:
        if company_id is None:
            console.print(f"[red]Invalid company id:[/red] {selector}")
            raise typer.Exit(1)
        try:
            measurements = decode_vendor(company_id, data)
        except DecodeError as exc:
            console.print(f"[red]Decode failed:[/red] {exc}")
            raise typer.Exit(1) from None
    else:
        try:
            service_uuid = normalize_uuid(selector)
        except ValueError:
            console.print(f"[red]Invalid service UUID:[/red] {selector}")
            raise typer.Exit(1) from None
        try:
            envelope = parse_envelope(service_uuid, data)
        except DecodeError as exc:
            console.print(f"[red]Decode failed:[/red] {exc}")
            raise typer.Exit(1) from None
        if envelope is None:
            console.print(f"No decoder for service {service_uuid}")
            raise typer.Exit(1)

        elements = Table(title=f"Envelope ({envelope.format})")
        elements.add_column("Element", style="cyan")
        elements.add_column("Value", justify="right")
        elements.add_column("Unit")
        for element in envelope:
            elements.add_row(element.name, str(element.value), element.unit)
        console.print(elements)
        try:
            measurements = envelope_measurements(envelope)
        except DecodeError as exc:
            console.print(f"[red]Decode failed:[/red] {exc}")
            raise typer.Exit(1) from None

    if not measurements:
        console.print("No measurements.")
        return
    console.print(_measurement_table(measurements))


def register(app: typer.Typer) -> None:
    app.command()(decode)

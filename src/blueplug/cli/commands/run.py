from __future__ import annotations

import asyncio
import logging

import aiomqtt
import typer
from rich.console import Console

from blueplug.cli.common import load_settings_or_exit
from blueplug.config import with_mqtt_overrides
from blueplug.core import run_bridge
from blueplug.errors import TransportError

logger = logging.getLogger(__name__)


def run(
    client_id: str | None = typer.Option(
        None, "--client-id", help="MQTT client identifier"
    ),
    mqtt_addr: str | None = typer.Option(
        None, "--mqtt-addr", help="MQTT broker host name or address"
    ),
    mqtt_port: int | None = typer.Option(
        None, "--mqtt-port", min=1, max=65535, help="MQTT broker port"
    ),
) -> None:
    """Publish sensor readings to MQTT until interrupted."""
    console = Console(stderr=True)

    settings = with_mqtt_overrides(
        load_settings_or_exit(),
        host=mqtt_addr,
        port=mqtt_port,
        client_id=client_id,
    )
    logger.info(
        "Bridge settings: broker=%s:%d, qos=%d, scanning=%s",
        settings.mqtt.host,
        settings.mqtt.port,
        settings.mqtt.qos,
        settings.scanning.mode,
    )

    try:
        asyncio.run(run_bridge(settings))
    except KeyboardInterrupt:
        console.print("\n[green]Stopped.[/green]")
    except TransportError as exc:
        console.print(f"[red]Bluetooth error:[/red] {exc}")
        raise typer.Exit(1) from None
    except aiomqtt.MqttError as exc:
        console.print(f"[red]MQTT error:[/red] {exc}")
        raise typer.Exit(1) from None


def register(app: typer.Typer) -> None:
    app.command()(run)

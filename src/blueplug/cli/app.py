from __future__ import annotations

from typing import Annotated

import typer

from blueplug.utils.logging import setup_logging

from .commands import config as config_cmd
from .commands.decode import register as register_decode
from .commands.run import register as register_run
from .commands.watch import register as register_watch

app = typer.Typer(
    help="blueplug - BLE environmental sensors to MQTT", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")

register_run(app)
register_watch(app)
register_decode(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level (default: $LOGLEVEL or INFO)"),
    ] = None,
) -> None:
    """blueplug CLI."""
    setup_logging(log_level)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"blueplug version {get_version('blueplug')}")
        raise typer.Exit()

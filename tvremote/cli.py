#!/usr/bin/env python3

from __future__ import annotations
import asyncio
import signal
from contextlib import suppress
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ssap.log import get_logger, set_log_level
from ssap.utils import ws_url
from tvremote.commands import COMMAND_NAMES, INITIALIZE_KEY, Dispatcher, lookup
from tvremote.config import resolve_settings
from tvremote.credentials import CredentialStore
from tvremote.errors import ConfigError, RemoteError
from tvremote.router import Outcome
from tvremote.session import RemoteSession

app = typer.Typer(help="Control an LG webOS TV over SSAP, one command per run")
console = Console()
logger = get_logger(__name__)

USAGE = (
    "Usage: tvremote run --cmd COMMAND [--arg ARG] [--payload JSON] [--addr HOST:PORT]\n"
    "                    [--key-file PATH] [--use-socks5-proxy HOST:PORT]\n\n"
    "Run 'tvremote commands' for the command list and examples."
)


async def _drive(session: RemoteSession) -> Outcome:
    """Run the session, turning Ctrl-C into a bounded graceful close."""
    interrupted = asyncio.Event()
    loop = asyncio.get_running_loop()
    with suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, interrupted.set)
    try:
        return await session.run(interrupted)
    finally:
        with suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGINT)


def execute(
    command: str,
    argument: str,
    payload: str,
    addr: str,
    key_file: Path,
    socks5_proxy: Optional[str],
) -> Outcome:
    """Validate, connect and run one command. Raises RemoteError on failure."""
    dispatcher = Dispatcher(command, argument, payload)
    try:
        url = ws_url(addr)
    except ValueError as e:
        raise ConfigError(str(e))

    session = RemoteSession(url, CredentialStore(key_file), dispatcher, proxy=socks5_proxy)
    return asyncio.run(_drive(session))


@app.command()
def run(
    cmd: str = typer.Option("", "--cmd", help=f"Command: {', '.join(COMMAND_NAMES)}"),
    arg: str = typer.Option("", "--arg", help="Argument for command"),
    payload: str = typer.Option("", "--payload", help="Optional JSON payload for launch command"),
    addr: Optional[str] = typer.Option(None, "--addr", help="TV address (host:port) (env TVREMOTE_ADDR)"),
    key_file: Optional[Path] = typer.Option(None, "--key-file", help="Path to file containing Client Key (env TVREMOTE_KEY_FILE)"),
    socks5_proxy: Optional[str] = typer.Option(None, "--use-socks5-proxy", help="SOCKS5 proxy address (e.g., 127.0.0.1:1080)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file (env TVREMOTE_CONFIG)"),
):
    """Send one command to the TV, pairing first if needed."""
    if not cmd:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1)

    try:
        settings = resolve_settings(
            addr=addr,
            key_file=key_file,
            socks5_proxy=socks5_proxy,
            log_level=log_level,
            config_path=config,
        )
        if settings.log_level:
            set_log_level(settings.log_level)
        outcome = execute(cmd, arg, payload, settings.addr, settings.key_file, settings.socks5_proxy)
    except RemoteError as e:
        logger.error("%s", e, extra={"command": cmd})
        raise typer.Exit(code=e.exit_code)

    if outcome.output is not None:
        typer.echo(outcome.output)
    raise typer.Exit(code=outcome.exit_code)


@app.command("commands")
def list_commands():
    """List the supported commands with usage examples."""
    table = Table(title="Commands")
    table.add_column("Command")
    table.add_column("Endpoint")
    table.add_column("Example")
    for name in COMMAND_NAMES:
        if name == INITIALIZE_KEY:
            table.add_row(name, "(pairing only)", f"--cmd {name}")
            continue
        command = lookup(name)
        example = f"--cmd {name} {command.example}".rstrip()
        table.add_row(name, command.uri, example)
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

# -*- coding: utf-8 -*-
from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from pathexec import VERSION
from pathexec.cache import PathExecutableCache
from pathexec.config import Settings
from pathexec.constants import (
    CLI_CONFIG_HELP,
    CLI_DEBUG_HELP,
    CLI_DURATION_HELP,
    CLI_INTERVAL_HELP,
    CLI_JSON_HELP,
    CLI_LIST_COMMAND_HELP,
    CLI_MAIN_INTRODUCTION,
    CLI_SHELL_HELP,
    CLI_STRICT_PRECEDENCE_HELP,
    CLI_WATCH_COMMAND_HELP,
    DEFAULT_WATCH_INTERVAL,
)
from pathexec.environment import ShellType
from pathexec.error_handlers import handle_cmd_exception
from pathexec.errors import PathNotResolvedError
from pathexec.lifecycle import DisposableScope
from pathexec.meta import get_version
from pathexec.models import CacheEntry
from pathexec.watcher import WatchRegistry, watch_path_directories

LOG = logging.getLogger(__name__)

console = Console()
app = typer.Typer(
    rich_markup_mode="rich",
    name="pathexec",
    help=CLI_MAIN_INTRODUCTION,
    add_completion=False,
    no_args_is_help=True,
)


def configure_logger(debug: bool) -> bool:
    level = logging.CRITICAL

    if debug:
        level = logging.DEBUG

    logging.basicConfig(format="%(asctime)s %(name)s => %(message)s", level=level)
    return debug


def print_version(value: bool) -> None:
    if value:
        typer.echo(f"pathexec, version {get_version() or VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", help=CLI_DEBUG_HELP, callback=configure_logger, is_eager=True
    ),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=print_version, is_eager=True
    ),
) -> None:
    """
    List the executables reachable through PATH.
    """


def build_cache(strict_precedence: bool, config: Optional[Path]) -> PathExecutableCache:
    settings = Settings.from_file(config) if config else Settings()
    LOG.debug("Using config %s", settings.config_path)
    return PathExecutableCache(settings=settings, strict_precedence=strict_precedence)


def render_entry(entry: CacheEntry, output_json: bool) -> None:
    if output_json:
        typer.echo(json.dumps(entry.to_list(), indent=2))
        return

    table = Table(title="Executables on PATH")
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Location", overflow="fold")

    for item in entry.to_list():
        table.add_row(item["label"], item["kind"], item["documentation"])

    console.print(table)
    console.print(f"{len(entry.candidates)} executables found.")


@app.command("list", help=CLI_LIST_COMMAND_HELP)
@handle_cmd_exception
def list_executables(
    ctx: typer.Context,
    shell: Optional[ShellType] = typer.Option(None, "--shell", help=CLI_SHELL_HELP),
    output_json: bool = typer.Option(False, "--json", help=CLI_JSON_HELP),
    strict_precedence: bool = typer.Option(
        False, "--strict-precedence", help=CLI_STRICT_PRECEDENCE_HELP
    ),
    config: Optional[Path] = typer.Option(None, "--config", help=CLI_CONFIG_HELP),
) -> None:
    with build_cache(strict_precedence, config) as cache:
        entry = asyncio.run(cache.get_executables_in_path(os.environ, shell))

    if entry is None:
        raise PathNotResolvedError()

    render_entry(entry, output_json)


async def watch_executables(
    cache: PathExecutableCache,
    registry: WatchRegistry,
    shell: Optional[ShellType],
    interval: float,
    duration: Optional[float],
) -> None:
    """
    Print the executables that appear or disappear while watching PATH.
    """
    with DisposableScope() as scope:
        entry = await cache.get_executables_in_path(os.environ, shell)
        if entry is None:
            raise PathNotResolvedError()

        watched = watch_path_directories(
            scope, os.environ, cache, registry, platform=cache.platform
        )
        console.print(
            f"Watching {len(watched)} directories, "
            f"{len(entry.labels)} executables found."
        )

        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration if duration else None
        labels = entry.labels

        while deadline is None or loop.time() < deadline:
            await asyncio.sleep(interval)

            # Picks up edits to the Windows executable extensions
            if cache.settings is not None:
                cache.settings.reload()

            if cache.cached_entry is not None:
                continue

            entry = await cache.get_executables_in_path(os.environ, shell)
            if entry is None:
                raise PathNotResolvedError()

            for label in sorted(entry.labels - labels):
                console.print(f"[green]+ {label}[/green]")
            for label in sorted(labels - entry.labels):
                console.print(f"[red]- {label}[/red]")

            labels = entry.labels


@app.command("watch", help=CLI_WATCH_COMMAND_HELP)
@handle_cmd_exception
def watch(
    ctx: typer.Context,
    shell: Optional[ShellType] = typer.Option(None, "--shell", help=CLI_SHELL_HELP),
    strict_precedence: bool = typer.Option(
        False, "--strict-precedence", help=CLI_STRICT_PRECEDENCE_HELP
    ),
    config: Optional[Path] = typer.Option(None, "--config", help=CLI_CONFIG_HELP),
    interval: float = typer.Option(
        DEFAULT_WATCH_INTERVAL, "--interval", min=0.05, help=CLI_INTERVAL_HELP
    ),
    duration: Optional[float] = typer.Option(None, "--duration", help=CLI_DURATION_HELP),
) -> None:
    registry = WatchRegistry()

    try:
        with build_cache(strict_precedence, config) as cache:
            asyncio.run(
                watch_executables(cache, registry, shell, interval, duration)
            )
    except KeyboardInterrupt:
        console.print("Stopped watching.")
    finally:
        registry.stop()


cli = typer.main.get_command(app)

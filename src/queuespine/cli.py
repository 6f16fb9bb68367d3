"""CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from queuespine.core.config import get_settings
from queuespine.core.persistence import SnapshotPersistence
from queuespine.models.snapshot import QueueSnapshot
from queuespine.storage.factory import (
    SELECTORS,
    StorageOptions,
    create_storage_driver,
)

app = typer.Typer(
    name="queuespine",
    help="In-process message queue with priorities, delays and dead-lettering",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override QUEUESPINE_LOG_LEVEL"),
) -> None:
    """Configure logging for every command."""
    level = (log_level or get_settings().log_level).upper()
    if level not in logging.getLevelNamesMapping():
        raise typer.BadParameter(f"Unknown log level {level!r}", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def version() -> None:
    """Show version."""
    from queuespine import __version__

    console.print(f"queuespine {__version__}")


@app.command()
def info() -> None:
    """Show system information and effective settings."""
    import sys

    from queuespine import __version__

    settings = get_settings()
    console.print(f"[bold]QueueSpine[/bold] {__version__}")
    console.print(f"Python {sys.version}")
    console.print(f"Storage driver: {settings.storage_driver}")
    console.print(f"Storage dir: {settings.storage_dir}")
    console.print(
        f"Retries: {settings.max_retries} (delay {settings.retry_delay}s)"
    )


@app.command()
def drivers() -> None:
    """List storage driver selectors."""
    table = Table(title="Storage drivers")
    table.add_column("Selector", style="cyan")
    table.add_column("Driver")
    for selector, driver_type in sorted(SELECTORS.items()):
        table.add_row(selector, driver_type)
    console.print(table)


async def _load_snapshot(queue_id: str, driver: str, storage_dir: Path) -> QueueSnapshot | None:
    storage = create_storage_driver(driver, StorageOptions(data_dir=storage_dir))
    try:
        return await SnapshotPersistence(storage, queue_id).load()
    finally:
        close = getattr(storage, "close", None)
        if close is not None:
            await close()


@app.command()
def inspect(
    queue_id: str = typer.Argument(..., help="Queue id whose snapshot to load"),
    driver: str | None = typer.Option(None, "--driver", "-d", help="Storage driver selector"),
    storage_dir: Path | None = typer.Option(None, "--storage-dir", help="Storage directory"),
) -> None:
    """Show the messages in a persisted queue snapshot."""
    settings = get_settings()
    snapshot = asyncio.run(
        _load_snapshot(
            queue_id,
            driver or settings.storage_driver,
            storage_dir or settings.storage_dir,
        )
    )
    if snapshot is None:
        console.print(f"[red]No snapshot found for queue {queue_id}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Queue {snapshot.queue_id}")
    table.add_column("Collection", style="cyan")
    table.add_column("ID")
    table.add_column("Status")
    table.add_column("Priority", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Delay until")
    for name, messages in (
        ("ready", snapshot.messages),
        ("delayed", snapshot.delayed_messages),
        ("dead-letter", snapshot.dead_letter_messages),
    ):
        for message in messages:
            table.add_row(
                name,
                message.id,
                message.status.value,
                str(message.priority),
                str(message.processing_attempts),
                message.delay_until.isoformat() if message.delay_until else "-",
            )
    console.print(table)
    console.print(f"{snapshot.message_count()} message(s)")


if __name__ == "__main__":
    app()

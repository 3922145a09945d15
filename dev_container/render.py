"""Rich UI helpers for terminal output."""

from __future__ import annotations

import shlex
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import ContainerState, Identity, WorktreeSlot


console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

# Set from the --verbose flag
VERBOSE = False

_STATE_STYLES = {
    ContainerState.RUNNING: "green",
    ContainerState.STOPPED: "yellow",
    ContainerState.ABSENT: "red",
}


def set_verbose(value: bool) -> None:
    global VERBOSE
    VERBOSE = value


def info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]{escape(message)}[/cyan]")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{escape(message)}[/yellow]")


def error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error: {escape(message)}[/red]")


def debug(message: str) -> None:
    if VERBOSE:
        err_console.print(f"[dim]{escape(message)}[/dim]")


def command(cmd: Sequence[str]) -> None:
    debug(f"$ {shlex.join(cmd)}")


def show_slots(rows: Sequence[tuple[WorktreeSlot, ContainerState]]) -> None:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("PORT", no_wrap=True)
    table.add_column("BRANCH", no_wrap=True)
    table.add_column("STATUS", no_wrap=True)
    for slot, state in rows:
        style = _STATE_STYLES[state]
        table.add_row(str(slot.port), escape(slot.branch), f"[{style}]{state.value}[/{style}]")
    console.print(table)


def _summary(heading: str, rows: Sequence[tuple[str, str]]) -> None:
    console.print()
    console.print(heading)
    for label, value in rows:
        console.print(f"  {label + ':':<11}[yellow]{escape(value)}[/yellow]")
    console.print()


def show_create_summary(identity: Identity, container_port: int) -> None:
    _summary(
        "[cyan]Will create:[/cyan]",
        [
            ("Branch", identity.branch),
            ("Worktree", identity.display_path),
            ("Container", identity.container_name),
            ("Port", f"{identity.port} → {container_port}"),
        ],
    )


def show_kill_summary(identity: Identity) -> None:
    _summary(
        "[red]Will kill:[/red]",
        [
            ("Container", identity.container_name),
            ("Worktree", str(identity.worktree_path)),
            ("Port", str(identity.port)),
        ],
    )


def show_port_mapping(port: int, container_port: int) -> None:
    console.print()
    console.print(f"Port [yellow]{port}[/yellow] → container:{container_port}")
    console.print()

"""Shared consoles and message helpers."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

MSG_AGENT_NOT_RUNNING = "agent is not running"
MSG_SSH_PATH_MISSING = "SSH path does not exist: {path}"


def print_success(msg: str) -> None:
    console.print(f"[green]✓[/] {msg}")


def print_error(msg: str) -> None:
    err_console.print(f"[red]✗[/] {msg}")


def print_warning(msg: str) -> None:
    err_console.print(f"[yellow]![/] {msg}")


def print_hint(msg: str) -> None:
    err_console.print(f"[dim]Hint: {msg}[/]")


def setup_logging(*, verbose: bool = False) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )

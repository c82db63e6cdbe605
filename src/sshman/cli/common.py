"""Shared CLI helpers, options, and utilities."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.markup import escape

from sshman.agent import AgentManager
from sshman.config import load_settings
from sshman.console import (
    MSG_AGENT_NOT_RUNNING,
    MSG_SSH_PATH_MISSING,
    print_error,
)
from sshman.errors import ConfigError, SshmanError
from sshman.executor import SubprocessExecutor
from sshman.keygen import KeyGenerator

if TYPE_CHECKING:
    from collections.abc import Generator

    from sshman.config import Settings
    from sshman.executor import CommandExecutor


# --- Shared CLI Options ---
KeyNameArg = Annotated[
    str,
    typer.Argument(help="Key file name, e.g. id_ed25519_work"),
]
SshPathOption = Annotated[
    Path | None,
    typer.Option("--ssh-path", "-p", help="Path to SSH directory [default: ~/.ssh]"),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to settings file"),
]


def get_executor() -> CommandExecutor:
    """Executor used by all commands."""
    return SubprocessExecutor()


def get_agent_manager() -> AgentManager:
    return AgentManager(get_executor())


def get_key_generator() -> KeyGenerator:
    return KeyGenerator(get_executor())


def load_settings_or_exit(config_path: Path | None) -> Settings:
    """Load settings or exit with a friendly error message."""
    try:
        return load_settings(config_path)
    except (FileNotFoundError, ConfigError) as e:
        print_error(escape(str(e)))
        raise typer.Exit(1) from e


@dataclass
class GlobalOptions:
    """Options given before the command name, stored on ``ctx.obj``."""

    ssh_path: Path | None = None
    config: Path | None = None


def resolve_ssh_path(
    ctx: typer.Context,
    ssh_path: Path | None,
    config_path: Path | None,
) -> tuple[Path, Settings]:
    """Pick the key directory and check it exists.

    Options on the command beat the global ones, which beat settings.
    """
    options = ctx.obj if isinstance(ctx.obj, GlobalOptions) else GlobalOptions()
    ssh_path = ssh_path or options.ssh_path
    settings = load_settings_or_exit(config_path or options.config)
    path = ssh_path.expanduser() if ssh_path else settings.ssh_path
    if not path.is_dir():
        print_error(escape(MSG_SSH_PATH_MISSING.format(path=path)))
        raise typer.Exit(1)
    return path, settings


def require_agent(manager: AgentManager) -> None:
    """Exit unless an SSH agent is reachable."""
    if not manager.is_running():
        print_error(MSG_AGENT_NOT_RUNNING)
        raise typer.Exit(1)


@contextlib.contextmanager
def exit_on_error() -> Generator[None, None, None]:
    """Turn sshman errors into a single red message and exit code 1."""
    try:
        yield
    except SshmanError as e:
        print_error(escape(str(e)))
        raise typer.Exit(1) from e


def display_path(path: Path) -> str:
    """Show ``path`` with the home directory replaced by ``~``."""
    home = str(Path.home())
    text = str(path)
    if text == home or text.startswith(home + "/"):
        return "~" + text[len(home) :]
    return text

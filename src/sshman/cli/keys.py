"""Key commands: create, delete, list."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from sshman.cli.app import app
from sshman.cli.common import (
    ConfigOption,
    KeyNameArg,
    SshPathOption,
    display_path,
    exit_on_error,
    get_agent_manager,
    get_key_generator,
    resolve_ssh_path,
)
from sshman.console import console, print_error, print_hint, print_success, print_warning
from sshman.discovery import PUBLIC_KEY_SUFFIX, find_private_keys, mark_loaded
from sshman.errors import SshmanError
from sshman.keygen import KeyAlgorithm, KeyConfig

logger = logging.getLogger(__name__)


@app.command(rich_help_panel="Keys")
def create(
    ctx: typer.Context,
    key_type: Annotated[
        KeyAlgorithm | None,
        typer.Option("--type", "-t", help="Type of the SSH key [default: ed25519]"),
    ] = None,
    email: Annotated[
        str | None,
        typer.Option("--email", help="Email for the public key comment"),
    ] = None,
    purpose: Annotated[
        str | None,
        typer.Option("--purpose", help="Purpose of the SSH key (work, personal, etc.)"),
    ] = None,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """Create a new SSH key pair (ssh-keygen) and add it to the agent."""
    path, settings = resolve_ssh_path(ctx, ssh_path, config)

    comment = email or settings.email
    if not comment:
        print_error("Email is required. Use [bold]--email[/] or set email in sshman.yaml")
        raise typer.Exit(1)

    try:
        key_config = KeyConfig(
            algorithm=key_type or settings.key_type,
            comment=comment,
            label=purpose,
            directory=path,
        )
    except ValidationError as e:
        print_error(escape(str(e)))
        raise typer.Exit(1) from e

    with exit_on_error():
        key_name = get_key_generator().generate(key_config)
    print_success(f"SSH key {escape(f'[{key_name}]')} created!")

    if not settings.auto_add:
        return

    manager = get_agent_manager()
    if not manager.is_running():
        return
    try:
        manager.add(path, key_name)
    except SshmanError as e:
        print_warning(escape(f"Failed to add key to ssh-agent: {e}"))
        print_hint(escape(f"add it manually with: ssh-add {path / key_name}"))
    else:
        print_success("SSH key automatically added to ssh-agent")


@app.command(rich_help_panel="Keys")
def delete(
    ctx: typer.Context,
    key_name: KeyNameArg,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """Delete an SSH key pair and remove it from the agent."""
    path, _ = resolve_ssh_path(ctx, ssh_path, config)
    label = escape(f"[{key_name}]")

    manager = get_agent_manager()
    if manager.is_running():
        try:
            manager.remove(path, key_name)
        except SshmanError as e:
            logger.debug("Not removed from agent: %s", e)
        else:
            print_success(f"SSH key {label} removed from agent")

    private_key = path / key_name
    public_key = path / f"{key_name}{PUBLIC_KEY_SUFFIX}"
    for kind, key_path in (("private", private_key), ("public", public_key)):
        try:
            key_path.unlink()
        except OSError as e:
            print_error(escape(f"failed to delete {kind} key: {e}"))
            raise typer.Exit(1) from e
        print_success(f"SSH {kind} key {label} deleted successfully")

    print_warning("You may need to manually remove the key from your SSH config file")


@app.command(name="list", rich_help_panel="Keys")
def list_keys(
    ctx: typer.Context,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """List SSH keys in the SSH directory and whether the agent has them loaded."""
    path, _ = resolve_ssh_path(ctx, ssh_path, config)

    with exit_on_error():
        private_keys = find_private_keys(path)
        if not private_keys:
            print_success(escape(f"No SSH keys found in {display_path(path)}"))
            return
        keys = mark_loaded(private_keys, get_agent_manager().list_keys())

    table = Table(show_header=True, header_style="bold")
    table.add_column("NAME", style="cyan")
    table.add_column("TYPE")
    table.add_column("STATUS")
    table.add_column("PATH", style="dim")

    for key in keys:
        status = f"[green]{key.status}[/]" if key.loaded else f"[yellow]{key.status}[/]"
        table.add_row(escape(key.name), key.key_type.value, status, escape(display_path(key.path)))

    console.print(table)

"""Agent commands: add, remove, list, clear."""

from __future__ import annotations

import typer
from rich.markup import escape

from sshman.cli.common import (
    ConfigOption,
    KeyNameArg,
    SshPathOption,
    exit_on_error,
    get_agent_manager,
    require_agent,
    resolve_ssh_path,
)
from sshman.console import console, print_success

agent_app = typer.Typer(
    name="agent",
    help="Add, remove, list, or clear SSH keys in the agent",
    no_args_is_help=True,
)


@agent_app.command()
def add(
    ctx: typer.Context,
    key_name: KeyNameArg,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """Add an SSH key to the agent."""
    path, _ = resolve_ssh_path(ctx, ssh_path, config)
    manager = get_agent_manager()
    require_agent(manager)

    with exit_on_error():
        manager.add(path, key_name)
    print_success(f"SSH key {escape(f'[{key_name}]')} added to agent")


@agent_app.command()
def remove(
    ctx: typer.Context,
    key_name: KeyNameArg,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """Remove an SSH key from the agent."""
    path, _ = resolve_ssh_path(ctx, ssh_path, config)
    manager = get_agent_manager()
    require_agent(manager)

    with exit_on_error():
        manager.remove(path, key_name)
    print_success(f"SSH key {escape(f'[{key_name}]')} removed from agent")


@agent_app.command(name="list")
def list_loaded(
    ctx: typer.Context,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """List the public keys loaded in the agent."""
    resolve_ssh_path(ctx, ssh_path, config)
    with exit_on_error():
        keys = get_agent_manager().list_keys()

    if not keys:
        print_success("No SSH keys loaded in agent")
        return

    for key in keys:
        console.print(key, markup=False, soft_wrap=True)


@agent_app.command()
def clear(
    ctx: typer.Context,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """Remove all SSH keys from the agent."""
    path, _ = resolve_ssh_path(ctx, ssh_path, config)
    manager = get_agent_manager()
    require_agent(manager)

    with exit_on_error():
        manager.clear(path)
    print_success(f"All SSH keys removed from {manager.kind.value}")

"""Shared Typer app instance."""

from __future__ import annotations

from typing import Annotated

import typer

from sshman import __version__
from sshman.cli.common import ConfigOption, GlobalOptions, SshPathOption
from sshman.console import setup_logging

__all__ = ["app"]


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sshman {__version__}")
        raise typer.Exit


app = typer.Typer(
    name="sshman",
    help="sshman - manage SSH keys and the agents that hold them",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log every external command"),
    ] = False,
    ssh_path: SshPathOption = None,
    config: ConfigOption = None,
) -> None:
    """sshman - manage SSH keys and the agents that hold them."""
    setup_logging(verbose=verbose)
    ctx.obj = GlobalOptions(ssh_path=ssh_path, config=config)

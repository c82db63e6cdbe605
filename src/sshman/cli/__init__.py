"""CLI interface using Typer."""

from __future__ import annotations

from sshman.cli import keys  # noqa: F401  # registers create/delete/list
from sshman.cli.agent import agent_app
from sshman.cli.app import app

__all__ = ["app"]

app.add_typer(agent_app, name="agent", rich_help_panel="Agent")


if __name__ == "__main__":
    app()

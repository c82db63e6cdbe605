"""Local command execution for ssh-add, ssh-keygen and gpg-connect-agent."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

from .errors import CommandError

logger = logging.getLogger(__name__)


class CommandExecutor(Protocol):
    """Runs external commands.

    Both methods raise `CommandError` when the command exits non-zero or
    cannot be started.
    """

    def run(self, name: str, *args: str) -> None:
        """Run a command, discarding its output."""
        ...

    def run_capture(self, name: str, *args: str) -> bytes:
        """Run a command and return its standard output."""
        ...


@dataclass
class CommandResult:
    """Result of a command execution."""

    name: str
    args: list[str]
    exit_code: int
    stdout: bytes = b""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def check(self) -> CommandResult:
        """Raise `CommandError` if the command failed."""
        if not self.success:
            raise CommandError(self.name, self.args, self.exit_code, self.stderr)
        return self


class SubprocessExecutor:
    """`CommandExecutor` backed by `subprocess.run`.

    Stdin is inherited so ssh-add and ssh-keygen can prompt for passphrases.
    Stderr is always captured and becomes part of the `CommandError` message.
    """

    def _execute(self, name: str, args: list[str], *, capture: bool) -> CommandResult:
        logger.debug("Running %s %s", name, " ".join(args))
        try:
            proc = subprocess.run(
                [name, *args],
                check=False,
                stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.debug("Could not start %s: %s", name, e)
            raise CommandError(name, args, None, str(e)) from e

        stderr = proc.stderr.decode(errors="replace").strip() if proc.stderr else ""
        logger.debug("%s exited with status %d", name, proc.returncode)
        return CommandResult(
            name=name,
            args=args,
            exit_code=proc.returncode,
            stdout=proc.stdout or b"",
            stderr=stderr,
        )

    def run(self, name: str, *args: str) -> None:
        self._execute(name, list(args), capture=False).check()

    def run_capture(self, name: str, *args: str) -> bytes:
        return self._execute(name, list(args), capture=True).check().stdout

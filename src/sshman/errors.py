"""Exceptions raised by sshman."""

from __future__ import annotations


class SshmanError(Exception):
    """Base class for all sshman errors."""


class CommandError(SshmanError):
    """An external command failed.

    ``exit_code`` is the process exit status, or ``None`` when the process
    could not be started at all (missing executable, permission denied).
    """

    def __init__(
        self,
        name: str,
        args: list[str],
        exit_code: int | None,
        stderr: str = "",
    ) -> None:
        self.name = name
        self.command_args = list(args)
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(self._format())

    def _format(self) -> str:
        if self.exit_code is None:
            msg = f"could not start {self.name}"
        else:
            msg = f"{self.name} exited with status {self.exit_code}"
        if self.stderr:
            msg = f"{msg}: {self.stderr}"
        return msg


class KeyNotFoundError(SshmanError):
    """A referenced key file does not exist."""


class KeyExistsError(SshmanError):
    """A key with the requested name already exists."""


class AgentNotRunningError(SshmanError):
    """No SSH agent is reachable."""

    def __init__(self, msg: str = "agent is not running") -> None:
        super().__init__(msg)


class ExternalToolError(SshmanError):
    """An external tool failed or produced output that could not be parsed."""


class TraversalError(SshmanError):
    """A key directory could not be walked."""


class ConfigError(SshmanError):
    """The settings file is invalid."""

"""Load and unload keys in ssh-agent or gpg-agent's SSH emulation."""

from __future__ import annotations

import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from .discovery import PUBLIC_KEY_SUFFIX, find_public_keys
from .errors import (
    AgentNotRunningError,
    CommandError,
    ExternalToolError,
    KeyNotFoundError,
)
from .executor import SubprocessExecutor
from .parsing import parse_agent_keys, parse_fingerprint, parse_keygrips

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .executor import CommandExecutor

logger = logging.getLogger(__name__)

AUTH_SOCK_ENV = "SSH_AUTH_SOCK"

SSH_ADD = "ssh-add"
SSH_KEYGEN = "ssh-keygen"
GPG_CONNECT_AGENT = "gpg-connect-agent"

GPG_KEYINFO = "keyinfo --ssh-list --ssh-fpr --with-ssh"
GPG_BYE = "/bye"

# ssh-add -l exits 2 when it cannot reach an agent
_EXIT_NO_AGENT = 2
# ssh-add -L exits 1 when the agent holds no identities
_EXIT_NO_IDENTITIES = 1


class AgentKind(StrEnum):
    """Which agent is behind SSH_AUTH_SOCK."""

    NATIVE = "ssh-agent"
    GPG = "gpg-agent"


def detect_agent_kind(environ: Mapping[str, str] | None = None) -> AgentKind:
    """Detect the agent kind from the SSH_AUTH_SOCK path.

    Evaluated on every call so switching agents mid-session is picked up.
    """
    env = os.environ if environ is None else environ
    sock = env.get(AUTH_SOCK_ENV, "")
    return AgentKind.GPG if "gpg-agent" in sock else AgentKind.NATIVE


class AgentManager:
    """Add, remove, list and clear keys in the running SSH agent."""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.executor: CommandExecutor = executor or SubprocessExecutor()
        self.environ = environ

    @property
    def kind(self) -> AgentKind:
        return detect_agent_kind(self.environ)

    def is_running(self) -> bool:
        """Check whether an agent is reachable.

        Only exit status 2 of `ssh-add -l` means "no agent"; status 1 ("no
        identities") still counts as running.
        """
        try:
            self.executor.run(SSH_ADD, "-l")
        except CommandError as e:
            if e.exit_code is None:
                return False
            return e.exit_code != _EXIT_NO_AGENT
        return True

    def add(self, directory: Path, key_name: str) -> None:
        """Add a private key to the agent.

        ssh-add is used for both agent kinds; gpg-agent accepts it too.
        """
        key_path = Path(directory) / key_name
        if not key_path.exists():
            msg = f"SSH key [{key_name}] does not exist"
            raise KeyNotFoundError(msg)

        try:
            self.executor.run(SSH_ADD, str(key_path))
        except CommandError as e:
            msg = f"failed to add key to agent: {e}"
            raise ExternalToolError(msg) from e

    def remove(self, directory: Path, key_name: str) -> None:
        """Remove a key from the agent."""
        directory = Path(directory)
        if self.kind is AgentKind.GPG:
            public_key_path = directory / f"{key_name}{PUBLIC_KEY_SUFFIX}"
            if not public_key_path.exists():
                msg = f"public key [{key_name}] does not exist"
                raise KeyNotFoundError(msg)
            self._remove_from_gpg_agent(public_key_path)
            return

        try:
            self.executor.run(SSH_ADD, "-d", str(directory / key_name))
        except CommandError as e:
            msg = f"failed to remove key from agent: {e}"
            raise ExternalToolError(msg) from e

    def list_keys(self) -> list[str]:
        """Return the public keys loaded in the agent, one `ssh-add -L` line each.

        The reachability probe is the ssh-add one for both agent kinds.
        """
        if not self.is_running():
            raise AgentNotRunningError

        try:
            output = self.executor.run_capture(SSH_ADD, "-L")
        except CommandError as e:
            if e.exit_code == _EXIT_NO_IDENTITIES:
                return []
            msg = f"failed to list agent keys: {e}"
            raise ExternalToolError(msg) from e

        return parse_agent_keys(output)

    def clear(self, directory: Path) -> None:
        """Remove all keys from the agent.

        gpg-agent has no "delete all", so every public key in ``directory`` is
        removed one by one and the first failure aborts the rest.
        """
        if self.kind is AgentKind.GPG:
            for public_key_path in find_public_keys(Path(directory)):
                self._remove_from_gpg_agent(public_key_path)
            return

        try:
            self.executor.run(SSH_ADD, "-D")
        except CommandError as e:
            msg = f"failed to clear agent: {e}"
            raise ExternalToolError(msg) from e

    def _remove_from_gpg_agent(self, public_key_path: Path) -> None:
        """Delete every gpg-agent entry whose fingerprint matches the public key."""
        try:
            output = self.executor.run_capture(SSH_KEYGEN, "-lf", str(public_key_path))
        except CommandError as e:
            msg = f"failed to get fingerprint of public key {public_key_path.name}: {e}"
            raise ExternalToolError(msg) from e
        fingerprint = parse_fingerprint(output)

        try:
            keyinfo = self.executor.run_capture(GPG_CONNECT_AGENT, GPG_KEYINFO, GPG_BYE)
        except CommandError as e:
            msg = f"failed to list SSH keys in GPG agent: {e}"
            raise ExternalToolError(msg) from e

        keygrips = parse_keygrips(keyinfo, fingerprint)
        if not keygrips:
            logger.debug("%s (%s) is not loaded in gpg-agent", public_key_path.name, fingerprint)

        for keygrip in keygrips:
            try:
                self.executor.run(GPG_CONNECT_AGENT, f"delete_key --force {keygrip}", GPG_BYE)
            except CommandError as e:
                msg = f"failed to remove key {public_key_path.name} from GPG agent: {e}"
                raise ExternalToolError(msg) from e

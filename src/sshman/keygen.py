"""Create new SSH key pairs with ssh-keygen."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import CommandError, ExternalToolError, KeyExistsError
from .executor import CommandExecutor, SubprocessExecutor

SSH_KEYGEN = "ssh-keygen"
RSA_BITS = 4096


class KeyAlgorithm(StrEnum):
    """Key types sshman can create (ssh-keygen -t names)."""

    ED25519 = "ed25519"
    RSA = "rsa"


class KeyConfig(BaseModel):
    """Everything needed to generate one key pair."""

    model_config = ConfigDict(frozen=True)

    algorithm: KeyAlgorithm = KeyAlgorithm.ED25519
    comment: str  # usually an email address
    label: str | None = None  # "purpose", e.g. work or personal
    directory: Path

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "comment must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("label")
    @classmethod
    def blank_label_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v

    @property
    def key_name(self) -> str:
        return key_name(self.algorithm, self.label)

    @property
    def key_path(self) -> Path:
        return self.directory / self.key_name


def key_name(algorithm: KeyAlgorithm | str, label: str | None = None) -> str:
    """Build the key file stem: ``id_<algorithm>`` or ``id_<algorithm>_<label>``."""
    name = f"id_{KeyAlgorithm(algorithm).value}"
    if label:
        name += f"_{label}"
    return name


def keygen_args(config: KeyConfig) -> list[str]:
    """Build the ssh-keygen arguments for ``config``."""
    args = ["-t", config.algorithm.value, "-f", str(config.key_path)]
    if config.algorithm is KeyAlgorithm.RSA:
        args += ["-b", str(RSA_BITS)]
    args += ["-C", config.comment]
    return args


class KeyGenerator:
    """Generate key pairs, refusing to overwrite an existing key."""

    def __init__(self, executor: CommandExecutor | None = None) -> None:
        self.executor: CommandExecutor = executor or SubprocessExecutor()

    def generate(self, config: KeyConfig) -> str:
        """Create the key pair and return its name.

        Only the private key path is checked for collisions. ssh-keygen is
        not run when it already exists.
        """
        name = config.key_name
        if config.key_path.exists():
            msg = (
                f"SSH key [{name}] already exists. "
                "Please choose a different purpose or delete the existing key"
            )
            raise KeyExistsError(msg)

        try:
            self.executor.run(SSH_KEYGEN, *keygen_args(config))
        except CommandError as e:
            msg = f"failed to create SSH key: {e}"
            raise ExternalToolError(msg) from e

        return name

"""Find SSH keys on disk and match them against the agent."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import TraversalError
from .parsing import public_key_material

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

PUBLIC_KEY_SUFFIX = ".pub"

# Files that live in ~/.ssh but are never keys
RESERVED_NAMES = frozenset({"config", "known_hosts", "authorized_keys"})

# Only the start of a file is inspected for a PEM/OpenSSH header
_SNIFF_BYTES = 100
_BEGIN_MARKER = "-----BEGIN"
_PRIVATE_MARKERS = ("PRIVATE KEY", "OPENSSH PRIVATE KEY")

STATUS_LOADED = "Loaded"
STATUS_NOT_LOADED = "Not Loaded"


class KeyType(StrEnum):
    """Key algorithm as guessed from the file name."""

    ED25519 = "ED25519"
    RSA = "RSA"
    ECDSA = "ECDSA"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class DiscoveredKey:
    """A private key found on disk."""

    path: Path
    key_type: KeyType
    loaded: bool

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def status(self) -> str:
        return STATUS_LOADED if self.loaded else STATUS_NOT_LOADED


def _walk_files(directory: Path) -> Iterator[Path]:
    """Yield every file below ``directory``, sorted by name per directory."""

    def on_error(error: OSError) -> None:
        msg = f"failed to walk {error.filename or directory}: {error.strerror or error}"
        raise TraversalError(msg) from error

    for root, dirnames, filenames in os.walk(directory, onerror=on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            yield Path(root) / filename


def is_private_key_file(path: Path) -> bool:
    """Check whether the first bytes of ``path`` look like a private key."""
    if not path.is_file():
        return False
    try:
        with path.open("rb") as f:
            head = f.read(_SNIFF_BYTES)
    except OSError as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return False

    content = head.decode(errors="replace")
    return _BEGIN_MARKER in content and any(m in content for m in _PRIVATE_MARKERS)


def find_private_keys(directory: Path) -> list[Path]:
    """Find all SSH private key files below ``directory``.

    Public keys and the reserved files (config, known_hosts, authorized_keys)
    are skipped; everything else is classified by its content, not its name.
    """
    return [
        path
        for path in _walk_files(directory)
        if not path.name.endswith(PUBLIC_KEY_SUFFIX)
        and path.name not in RESERVED_NAMES
        and is_private_key_file(path)
    ]


def find_public_keys(directory: Path) -> list[Path]:
    """Find all ``*.pub`` files below ``directory``."""
    return [path for path in _walk_files(directory) if path.name.endswith(PUBLIC_KEY_SUFFIX)]


def infer_key_type(path: Path) -> KeyType:
    """Guess the key algorithm from the file name."""
    name = path.name
    if "ed25519" in name:
        return KeyType.ED25519
    if "rsa" in name:
        return KeyType.RSA
    if "ecdsa" in name:
        return KeyType.ECDSA
    return KeyType.UNKNOWN


def read_public_key(path: Path) -> str | None:
    """Read a public key file, or None if it can't be read."""
    try:
        return path.read_text().strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read public key file %s: %s", path, e)
        return None


def mark_loaded(private_keys: Iterable[Path], loaded_keys: Iterable[str]) -> list[DiscoveredKey]:
    """Mark which of ``private_keys`` the agent has loaded.

    A key counts as loaded when its companion ``.pub`` file holds the same
    key type and blob as one of the ``ssh-add -L`` lines in ``loaded_keys``.
    """
    loaded = {m for line in loaded_keys if (m := public_key_material(line)) is not None}

    keys = []
    for private_key in private_keys:
        public_key = read_public_key(private_key.with_name(private_key.name + PUBLIC_KEY_SUFFIX))
        material = public_key_material(public_key) if public_key else None
        keys.append(
            DiscoveredKey(
                path=private_key,
                key_type=infer_key_type(private_key),
                loaded=material is not None and material in loaded,
            )
        )
    return keys


def discover_keys(directory: Path, loaded_keys: Iterable[str]) -> list[DiscoveredKey]:
    """Find private keys below ``directory`` and mark which ones are loaded."""
    return mark_loaded(find_private_keys(directory), loaded_keys)

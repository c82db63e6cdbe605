"""Parsers for ssh-add, ssh-keygen and gpg-connect-agent output.

These are tied to the tools' text formats; keep all token splitting here.
"""

from __future__ import annotations

from .errors import ExternalToolError

# `ssh-keygen -lf` prints "<bits> <fingerprint> <comment> (<type>)"
_FINGERPRINT_TOKEN = 1
# `gpg-connect-agent keyinfo` prints "S KEYINFO <keygrip> <fingerprint> ..."
_KEYGRIP_TOKEN = 2


def _decode(output: bytes | str) -> str:
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output


def parse_fingerprint(output: bytes | str) -> str:
    """Extract the fingerprint from `ssh-keygen -lf` output.

    Only the first line is considered:
    - 256 SHA256:abc123 me@example.com (ED25519) -> SHA256:abc123
    """
    text = _decode(output).strip()
    first_line = text.splitlines()[0] if text else ""
    tokens = first_line.split()
    if len(tokens) <= _FINGERPRINT_TOKEN:
        msg = f"unexpected ssh-keygen fingerprint output: {first_line!r}"
        raise ExternalToolError(msg)
    return tokens[_FINGERPRINT_TOKEN]


def parse_keygrips(output: bytes | str, fingerprint: str) -> list[str]:
    """Return the keygrip of every key-info line mentioning ``fingerprint``.

    Lines without a third token are skipped.
    """
    keygrips = []
    for line in _decode(output).strip().splitlines():
        if fingerprint not in line:
            continue
        tokens = line.split()
        if len(tokens) > _KEYGRIP_TOKEN:
            keygrips.append(tokens[_KEYGRIP_TOKEN])
    return keygrips


def parse_agent_keys(output: bytes | str) -> list[str]:
    """Split `ssh-add -L` output into one entry per loaded key."""
    return [line for line in _decode(output).strip().splitlines() if line.strip()]


def public_key_material(line: str) -> tuple[str, str] | None:
    """Return ``(key type, base64 blob)`` of an OpenSSH public key line.

    The trailing comment is ignored so a key matches regardless of how the
    agent labels it.
    """
    tokens = line.split()
    if len(tokens) < 2:  # noqa: PLR2004
        return None
    return tokens[0], tokens[1]

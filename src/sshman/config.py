"""Settings loading and Pydantic models."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .keygen import KeyAlgorithm

CONFIG_ENV = "SSHMAN_CONFIG"
SSH_PATH_ENV = "SSHMAN_SSH_PATH"
CONFIG_FILENAME = "sshman.yaml"


def default_ssh_path() -> Path:
    return Path.home() / ".ssh"


def xdg_config_home() -> Path:
    """Get XDG config directory, respecting XDG_CONFIG_HOME env var."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


class Settings(BaseModel):
    """User settings."""

    ssh_path: Path = Field(default_factory=default_ssh_path)
    key_type: KeyAlgorithm = KeyAlgorithm.ED25519
    email: str | None = None  # default comment for new keys
    auto_add: bool = True  # add new keys to a running agent

    @field_validator("ssh_path")
    @classmethod
    def expand_home(cls, v: Path) -> Path:
        return v.expanduser()


def config_search_paths() -> list[Path]:
    """Get search paths for the settings file."""
    return [Path(CONFIG_FILENAME), xdg_config_home() / "sshman" / CONFIG_FILENAME]


def find_config_path(path: Path | None = None) -> Path | None:
    """Find the settings file.

    Search order:
    1. Explicit path if provided
    2. SSHMAN_CONFIG environment variable
    3. ./sshman.yaml
    4. $XDG_CONFIG_HOME/sshman/sshman.yaml
    """
    if path:
        return path
    if env_path := os.environ.get(CONFIG_ENV):
        return Path(env_path)
    for p in config_search_paths():
        if p.exists():
            return p
    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when no file exists.

    An explicitly requested file (argument or SSHMAN_CONFIG) must exist.
    SSHMAN_SSH_PATH overrides ``ssh_path`` from the file.
    """
    config_path = find_config_path(path)
    raw: dict[str, object] = {}

    if config_path is not None:
        if not config_path.exists():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)
        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in {config_path}: {e}"
            raise ConfigError(msg) from e
        except OSError as e:
            msg = f"Cannot read config file {config_path}: {e}"
            raise ConfigError(msg) from e
        if data is not None and not isinstance(data, dict):
            msg = f"Invalid config file {config_path}: expected a mapping"
            raise ConfigError(msg)
        raw = data or {}

    if ssh_path := os.environ.get(SSH_PATH_ENV):
        raw["ssh_path"] = ssh_path

    try:
        return Settings(**raw)
    except ValidationError as e:
        msg = f"Invalid settings ({config_path or SSH_PATH_ENV}): {e}"
        raise ConfigError(msg) from e

"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from sshman.config import (
    Settings,
    config_search_paths,
    find_config_path,
    load_settings,
)
from sshman.errors import ConfigError
from sshman.keygen import KeyAlgorithm


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with no settings visible."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("SSHMAN_CONFIG", raising=False)
    monkeypatch.delenv("SSHMAN_SSH_PATH", raising=False)
    return tmp_path


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.ssh_path == Path.home() / ".ssh"
        assert settings.key_type is KeyAlgorithm.ED25519
        assert settings.email is None
        assert settings.auto_add is True

    def test_expands_home(self) -> None:
        settings = Settings(ssh_path=Path("~/keys"))
        assert settings.ssh_path == Path.home() / "keys"


class TestFindConfigPath:
    """Tests for the settings search order."""

    def test_nothing_found(self, isolated: Path) -> None:
        assert find_config_path() is None

    def test_explicit_path_wins(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SSHMAN_CONFIG", "/from/env.yaml")
        assert find_config_path(Path("/explicit.yaml")) == Path("/explicit.yaml")

    def test_env_before_search_paths(
        self, isolated: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (isolated / "sshman.yaml").write_text("email: local@example.com\n")
        monkeypatch.setenv("SSHMAN_CONFIG", "/from/env.yaml")
        assert find_config_path() == Path("/from/env.yaml")

    def test_cwd_before_xdg(self, isolated: Path) -> None:
        xdg_file = isolated / "xdg" / "sshman" / "sshman.yaml"
        xdg_file.parent.mkdir(parents=True)
        xdg_file.write_text("{}\n")
        (isolated / "sshman.yaml").write_text("{}\n")
        assert find_config_path() == Path("sshman.yaml")

    def test_xdg(self, isolated: Path) -> None:
        xdg_file = isolated / "xdg" / "sshman" / "sshman.yaml"
        xdg_file.parent.mkdir(parents=True)
        xdg_file.write_text("{}\n")
        assert find_config_path() == xdg_file

    def test_search_paths(self, isolated: Path) -> None:
        assert config_search_paths() == [
            Path("sshman.yaml"),
            isolated / "xdg" / "sshman" / "sshman.yaml",
        ]


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self, isolated: Path) -> None:
        assert load_settings() == Settings()

    def test_explicit_file(self, isolated: Path) -> None:
        path = isolated / "custom.yaml"
        path.write_text(
            "ssh_path: /srv/keys\nkey_type: rsa\nemail: me@example.com\nauto_add: false\n"
        )

        settings = load_settings(path)

        assert settings.ssh_path == Path("/srv/keys")
        assert settings.key_type is KeyAlgorithm.RSA
        assert settings.email == "me@example.com"
        assert settings.auto_add is False

    def test_env_file(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = isolated / "env.yaml"
        path.write_text("email: env@example.com\n")
        monkeypatch.setenv("SSHMAN_CONFIG", str(path))
        assert load_settings().email == "env@example.com"

    def test_xdg_file(self, isolated: Path) -> None:
        xdg_file = isolated / "xdg" / "sshman" / "sshman.yaml"
        xdg_file.parent.mkdir(parents=True)
        xdg_file.write_text("email: xdg@example.com\n")
        assert load_settings().email == "xdg@example.com"

    def test_missing_explicit_file(self, isolated: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(isolated / "missing.yaml")

    def test_missing_env_file(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SSHMAN_CONFIG", str(isolated / "missing.yaml"))
        with pytest.raises(FileNotFoundError):
            load_settings()

    def test_empty_file(self, isolated: Path) -> None:
        path = isolated / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_not_a_mapping(self, isolated: Path) -> None:
        path = isolated / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="expected a mapping"):
            load_settings(path)

    def test_invalid_key_type(self, isolated: Path) -> None:
        path = isolated / "bad.yaml"
        path.write_text("key_type: dsa\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    def test_ssh_path_env_overrides_file(
        self, isolated: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = isolated / "custom.yaml"
        path.write_text("ssh_path: /from/file\n")
        monkeypatch.setenv("SSHMAN_SSH_PATH", "/from/env")
        assert load_settings(path).ssh_path == Path("/from/env")

    def test_tilde_in_file(self, isolated: Path) -> None:
        path = isolated / "custom.yaml"
        path.write_text("ssh_path: ~/work-keys\n")
        assert load_settings(path).ssh_path == Path.home() / "work-keys"

    def test_malformed_yaml(self, isolated: Path) -> None:
        path = isolated / "broken.yaml"
        path.write_text("ssh_path: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML") as exc_info:
            load_settings(path)
        assert exc_info.value.__cause__ is not None

    def test_directory_instead_of_file(self, isolated: Path) -> None:
        path = isolated / "conf.d"
        path.mkdir()
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_settings(path)

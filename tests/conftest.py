"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import FakeExecutor


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def ssh_dir(tmp_path: Path) -> Path:
    """Empty SSH directory."""
    path = tmp_path / ".ssh"
    path.mkdir()
    return path


@pytest.fixture
def native_agent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSH_AUTH_SOCK", "/tmp/ssh-XXXXXXabcdef/agent.12345")


@pytest.fixture
def gpg_agent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSH_AUTH_SOCK", "/run/user/1000/gnupg/S.gpg-agent.ssh")

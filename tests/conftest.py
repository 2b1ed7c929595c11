"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from alpi.core.ledger import StateLedger
from alpi.models.stack import StackConfig


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point HOME and the XDG directories into a temporary tree.

    Also pretends the tests run as a normal user so the root guard never
    trips inside containers.
    """
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USER", "tester")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    with patch("alpi.core.guards.os.geteuid", return_value=1000):
        yield home


@pytest.fixture
def home(isolated_environment: Path) -> Path:
    """Temporary home directory."""
    return isolated_environment


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Dotfiles repository with one mapped app and a scripts directory.

    Layout::

        repo/app/a.conf
        repo/app/sub/b.conf
        repo/local/bin/hello
    """
    root = tmp_path / "repo"
    (root / "app" / "sub").mkdir(parents=True)
    (root / "app" / "a.conf").write_text("a\n")
    (root / "app" / "sub" / "b.conf").write_text("b\n")
    (root / "local" / "bin").mkdir(parents=True)
    (root / "local" / "bin" / "hello").write_text("#!/bin/sh\necho hello\n")
    return root


@pytest.fixture
def stack(repo: Path) -> StackConfig:
    """Minimal stack mapping ``app`` to ``app-dst`` without packages."""
    return StackConfig(
        name="desktop",
        ledger_name="alpi-test",
        repo_url="https://example.invalid/dots.git",
        repo_dir=str(repo),
        config_dirs={"app": "app-dst"},
        scripts_dir="local/bin",
    )


@pytest.fixture
def ledger(tmp_path: Path) -> StateLedger:
    """Ledger in a temporary data directory."""
    return StateLedger(tmp_path / "data" / "alpi-test" / "state")

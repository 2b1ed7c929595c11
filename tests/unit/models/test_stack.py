"""Unit tests for stack configuration models."""

from pathlib import Path

import pytest
from alpi.models.stack import (
    DEFAULT_WAYLAND_EXPORTS,
    SessionConfig,
    StackConfig,
    default_apps_stack,
    default_desktop_stack,
    default_stacks,
    resolve_home_path,
)
from pydantic import ValidationError


class TestResolveHomePath:
    """Tests for resolve_home_path."""

    def test_tilde_prefix(self, tmp_path: Path) -> None:
        """'~/x' resolves under the given home."""
        assert resolve_home_path("~/.config", tmp_path) == tmp_path / ".config"

    def test_bare_tilde(self, tmp_path: Path) -> None:
        """'~' is the home itself."""
        assert resolve_home_path("~", tmp_path) == tmp_path

    def test_absolute_unchanged(self, tmp_path: Path) -> None:
        """Absolute paths are not rebased."""
        assert resolve_home_path("/opt/dots", tmp_path) == Path("/opt/dots")

    def test_relative_goes_under_home(self, tmp_path: Path) -> None:
        """Relative paths are taken relative to home."""
        assert resolve_home_path(".local/bin", tmp_path) == tmp_path / ".local" / "bin"


class TestDefaultStacks:
    """Tests for the built-in stacks."""

    def test_desktop_mapping(self) -> None:
        """The desktop stack maps the six niri app directories."""
        stack = default_desktop_stack()

        assert stack.mapping.sources == ["niri", "foot", "waybar", "wofi", "mako", "environment.d"]
        assert stack.scripts_dir == "local/bin"
        assert stack.ledger_name == "alpi-niri"

    def test_desktop_session_defaults(self) -> None:
        """The desktop stack manages the bash profile."""
        stack = default_desktop_stack()

        assert stack.session is not None
        assert stack.session.exports == DEFAULT_WAYLAND_EXPORTS
        assert stack.session.tty == "/dev/tty1"

    def test_apps_stack_has_no_repo(self) -> None:
        """The apps stack deploys no dotfiles."""
        stack = default_apps_stack()

        assert stack.repo_path(Path("/home/u")) is None
        assert stack.session is None
        assert stack.qutebrowser is True
        assert stack.lazyvim is True

    def test_packages_official_first(self) -> None:
        """packages lists official packages before AUR ones."""
        stack = default_desktop_stack()

        assert stack.packages[-2:] == ["niri", "ttf-jetbrains-mono-nerd"]
        assert stack.packages[0] == "git"

    def test_default_stacks_keys(self) -> None:
        """Both stacks are registered by name."""
        assert set(default_stacks()) == {"desktop", "apps"}

    def test_paths_resolve_against_home(self, tmp_path: Path) -> None:
        """Repository, config root, bin and profile resolve under home."""
        stack = default_desktop_stack()

        assert stack.repo_path(tmp_path) == tmp_path / ".cache" / "alpi" / "niri"
        assert stack.config_root_path(tmp_path) == tmp_path / ".config"
        assert stack.bin_path(tmp_path) == tmp_path / ".local" / "bin"
        assert stack.profile_path(tmp_path) == tmp_path / ".bash_profile"


class TestStackValidation:
    """Tests for StackConfig validators."""

    def test_rejects_escaping_destination(self) -> None:
        """Config dirs must stay under the config root."""
        with pytest.raises(ValidationError):
            StackConfig(name="x", ledger_name="x", config_dirs={"app": "../../etc"})

    def test_rejects_package_with_whitespace(self) -> None:
        """Package identifiers are single tokens."""
        with pytest.raises(ValidationError):
            StackConfig(name="x", ledger_name="x", pacman_packages=["foo bar"])

    def test_rejects_unknown_field(self) -> None:
        """Unknown keys are configuration mistakes."""
        with pytest.raises(ValidationError):
            StackConfig(name="x", ledger_name="x", colour="red")  # type: ignore[call-arg]

    def test_rejects_multiline_export(self) -> None:
        """Export lines are matched verbatim and must be single lines."""
        with pytest.raises(ValidationError):
            SessionConfig(exports=["export A=1\nexport B=2"])

    def test_frozen(self) -> None:
        """Stacks are immutable once built."""
        stack = default_apps_stack()

        with pytest.raises(ValidationError):
            stack.name = "other"  # type: ignore[misc]

"""Stack configuration models.

A stack is one provisioning layer: the niri desktop (compositor, bar,
launcher and their dotfiles) or the application layer on top of it. Each
stack is described by an immutable :class:`StackConfig` that is handed to
the orchestrator, verifier and uninstaller; nothing reads package lists or
the config mapping from module globals.
"""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from alpi.models.mapping import ConfigMapping, validate_relative_name

SESSION_BEGIN_MARKER = "# >>> ALPI-NIRI SESSION SELECTOR"
SESSION_END_MARKER = "# <<< ALPI-NIRI SESSION SELECTOR"

DEFAULT_PATH_LINE = 'export PATH="$HOME/.local/bin:$PATH"'

DEFAULT_WAYLAND_EXPORTS = [
    "export XDG_SESSION_TYPE=wayland",
    "export MOZ_ENABLE_WAYLAND=1",
    "export QT_QPA_PLATFORM=wayland",
    "export ELECTRON_OZONE_PLATFORM_HINT=wayland",
    "export GDK_BACKEND=wayland",
    "export SDL_VIDEODRIVER=wayland",
]


def resolve_home_path(value: str, home: Path) -> Path:
    """Resolve a configured path against a home directory.

    ``~/x`` and relative values land under ``home``; absolute values are
    returned unchanged.

    Args:
        value: Path as written in the configuration.
        home: Target home directory.

    Returns:
        Absolute path.
    """
    if value == "~":
        return home
    if value.startswith("~/"):
        return home / value[2:]
    path = Path(value)
    if path.is_absolute():
        return path
    return home / path


class SessionConfig(BaseModel):
    """Bash profile settings for starting niri from a TTY.

    Attributes:
        profile: Profile file that receives the exports and selector.
        path_line: PATH export that makes ``~/.local/bin`` reachable.
        exports: Wayland environment export lines.
        start_command: Command launched by the session selector.
        tty: TTY on which the selector triggers.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    profile: Annotated[str, Field(description="Profile file")] = "~/.bash_profile"
    path_line: Annotated[str, Field(description="PATH export line")] = DEFAULT_PATH_LINE
    exports: Annotated[
        list[str],
        Field(default_factory=lambda: list(DEFAULT_WAYLAND_EXPORTS)),
    ]
    start_command: Annotated[str, Field(description="Session launcher")] = (
        "$HOME/.local/bin/start-niri"
    )
    tty: Annotated[str, Field(description="Selector TTY")] = "/dev/tty1"

    @field_validator("exports")
    @classmethod
    def validate_single_line(cls, v: list[str]) -> list[str]:
        """Export lines are matched verbatim and must be single lines."""
        for line in v:
            if "\n" in line:
                msg = f"Export line must not contain a newline: {line!r}"
                raise ValueError(msg)
        return v


class StackConfig(BaseModel):
    """Declarative description of one provisioning stack.

    Attributes:
        name: Stack identifier (``desktop`` or ``apps``).
        title: Human-readable name used in banners.
        ledger_name: Directory name of the state ledger under XDG data home.
        repo_url: Git repository providing the dotfiles, if any.
        repo_dir: Local clone of ``repo_url``.
        config_root: Root for mapped config directories.
        config_dirs: Repository subdirectory to ``config_root`` subdirectory map.
        scripts_dir: Repository directory whose immediate files go to ``bin_dir``.
        bin_dir: Flat destination for executable scripts.
        pacman_packages: Packages from the official repositories.
        aur_packages: Packages built from the AUR via yay.
        commands: Commands expected on PATH after install.
        services: systemd units to enable.
        groups: Supplementary groups the user should belong to.
        session: Bash profile settings, None to leave the profile alone.
        qutebrowser: Manage qutebrowser config blocks and userscript.
        lazyvim: Bootstrap LazyVim when no neovim config exists.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Annotated[str, Field(description="Stack identifier")]
    title: Annotated[str, Field(description="Display name")] = ""
    ledger_name: Annotated[str, Field(description="Ledger directory name")]
    repo_url: Annotated[str | None, Field(description="Dotfiles repository")] = None
    repo_dir: Annotated[str | None, Field(description="Local repository clone")] = None
    config_root: Annotated[str, Field(description="Config root")] = "~/.config"
    config_dirs: Annotated[dict[str, str], Field(default_factory=dict)]
    scripts_dir: Annotated[str | None, Field(description="Scripts dir in repo")] = None
    bin_dir: Annotated[str, Field(description="Scripts destination")] = "~/.local/bin"
    pacman_packages: Annotated[list[str], Field(default_factory=list)]
    aur_packages: Annotated[list[str], Field(default_factory=list)]
    commands: Annotated[list[str], Field(default_factory=list)]
    services: Annotated[list[str], Field(default_factory=list)]
    groups: Annotated[list[str], Field(default_factory=list)]
    session: SessionConfig | None = None
    qutebrowser: bool = False
    lazyvim: bool = False

    @field_validator("config_dirs")
    @classmethod
    def validate_config_dirs(cls, v: dict[str, str]) -> dict[str, str]:
        """Mapping names must be relative and must not escape their root."""
        for source, destination in v.items():
            validate_relative_name(source, "Source")
            validate_relative_name(destination, "Destination")
        return v

    @field_validator("scripts_dir")
    @classmethod
    def validate_scripts_dir(cls, v: str | None) -> str | None:
        """Scripts directory is a relative path inside the repository."""
        if v is None:
            return v
        return validate_relative_name(v, "Scripts")

    @field_validator("pacman_packages", "aur_packages")
    @classmethod
    def validate_packages(cls, v: list[str]) -> list[str]:
        """Package identifiers are non-empty and contain no whitespace."""
        for pkg in v:
            if not pkg or any(ch.isspace() for ch in pkg):
                msg = f"Invalid package identifier: {pkg!r}"
                raise ValueError(msg)
        return v

    @property
    def mapping(self) -> ConfigMapping:
        """The config mapping as an immutable value."""
        return ConfigMapping.from_dict(self.config_dirs)

    @property
    def packages(self) -> list[str]:
        """All package identifiers, official repositories first."""
        return [*self.pacman_packages, *self.aur_packages]

    @property
    def display_name(self) -> str:
        """Title if set, otherwise the stack name."""
        return self.title or self.name

    def repo_path(self, home: Path) -> Path | None:
        """Local repository root for ``home``, None if the stack has no repo."""
        if self.repo_dir is None:
            return None
        return resolve_home_path(self.repo_dir, home)

    def config_root_path(self, home: Path) -> Path:
        """Root directory for mapped config directories."""
        return resolve_home_path(self.config_root, home)

    def bin_path(self, home: Path) -> Path:
        """Destination directory for scripts."""
        return resolve_home_path(self.bin_dir, home)

    def profile_path(self, home: Path) -> Path | None:
        """Bash profile path, None if the stack does not manage the session."""
        if self.session is None:
            return None
        return resolve_home_path(self.session.profile, home)


def default_desktop_stack() -> StackConfig:
    """Built-in niri desktop stack."""
    return StackConfig(
        name="desktop",
        title="alpi-niri - NIRUCON Wayland Edition",
        ledger_name="alpi-niri",
        repo_url="https://github.com/nirucon/niri",
        repo_dir="~/.cache/alpi/niri",
        config_dirs={
            "niri": "niri",
            "foot": "foot",
            "waybar": "waybar",
            "wofi": "wofi",
            "mako": "mako",
            "environment.d": "environment.d",
        },
        scripts_dir="local/bin",
        pacman_packages=[
            "git",
            "base-devel",
            "wayland",
            "wayland-protocols",
            "xorg-xwayland",
            "foot",
            "waybar",
            "swaylock",
            "swayidle",
            "swaybg",
            "slurp",
            "grim",
            "wl-clipboard",
            "mako",
            "wofi",
            "kanshi",
            "xdg-desktop-portal",
            "xdg-desktop-portal-gnome",
            "qt5-wayland",
            "qt6-wayland",
            "libinput",
            "polkit-gnome",
            "ttf-dejavu",
            "noto-fonts",
            "ttf-nerd-fonts-symbols-mono",
            "playerctl",
            "pipewire",
            "pipewire-alsa",
            "pipewire-pulse",
            "wireplumber",
            "networkmanager",
            "bash-completion",
            "brightnessctl",
            "wdisplays",
        ],
        aur_packages=["niri", "ttf-jetbrains-mono-nerd"],
        commands=[
            "niri",
            "waybar",
            "foot",
            "swaylock",
            "swayidle",
            "swaybg",
            "slurp",
            "grim",
            "mako",
            "wofi",
            "kanshi",
            "playerctl",
        ],
        services=["NetworkManager"],
        groups=["input", "video", "seat"],
        session=SessionConfig(),
    )


def default_apps_stack() -> StackConfig:
    """Built-in application layer stack."""
    return StackConfig(
        name="apps",
        title="arch-apps-install - NIRUCON Edition",
        ledger_name="alpi-apps",
        pacman_packages=[
            "qutebrowser",
            "python-adblock",
            "htop",
            "btop",
            "fastfetch",
            "tree",
            "less",
            "rsync",
            "unzip",
            "zip",
            "tar",
            "curl",
            "wget",
            "jq",
            "fzf",
            "ripgrep",
            "fd",
            "zoxide",
            "bat",
            "eza",
            "yazi",
            "lazygit",
            "bash-completion",
            "bc",
            "neovim",
            "python-pynvim",
            "git",
            "base-devel",
            "nodejs",
            "npm",
            "python",
            "python-pip",
            "pcmanfm",
            "gvfs",
            "gvfs-mtp",
            "gvfs-gphoto2",
            "udisks2",
            "udiskie",
            "7zip",
            "poppler",
            "mpv",
            "yt-dlp",
            "cmus",
            "cava",
            "playerctl",
            "imagemagick",
            "gimp",
            "sxiv",
            "resvg",
            "grim",
            "slurp",
            "wl-clipboard",
            "ttf-dejavu",
            "noto-fonts",
            "noto-fonts-emoji",
            "ttf-nerd-fonts-symbols-mono",
            "lxappearance",
            "materia-gtk-theme",
            "papirus-icon-theme",
            "qt5ct",
            "qt6ct",
            "qt5-base",
            "qt6-base",
            "kvantum",
            "openssh",
            "networkmanager",
            "blueman",
            "libnotify",
            "swaybg",
            "nextcloud-client",
            "xdg-utils",
        ],
        aur_packages=[
            "ttf-jetbrains-mono-nerd",
            "brave-bin",
            "spotify",
            "localsend-bin",
            "reversal-icon-theme-git",
            "fresh-editor-bin",
        ],
        commands=[
            "btop",
            "htop",
            "fastfetch",
            "tree",
            "rsync",
            "fzf",
            "rg",
            "fd",
            "zoxide",
            "bat",
            "eza",
            "yazi",
            "lazygit",
            "jq",
            "nvim",
            "fresh",
            "mpv",
            "yt-dlp",
            "cmus",
            "cava",
            "playerctl",
            "gimp",
            "qutebrowser",
            "brave",
            "pcmanfm",
            "udiskie",
        ],
        qutebrowser=True,
        lazyvim=True,
    )


def default_stacks() -> dict[str, StackConfig]:
    """Built-in stacks keyed by name."""
    return {
        "desktop": default_desktop_stack(),
        "apps": default_apps_stack(),
    }

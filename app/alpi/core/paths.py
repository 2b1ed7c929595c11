"""XDG-compliant path management for alpi.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and ledger storage.

XDG defaults:
- Config: ~/.config/alpi/
- Data:   ~/.local/share/<ledger name>/  (one ledger per stack)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "alpi"

# Ledger file name inside each stack's data directory
LEDGER_FILENAME = "state"


def _get_xdg_base(env_var: str, default_subdir: str) -> Path:
    """Get an XDG base directory respecting the environment override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the base directory (not application-specific).
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base)
    return Path.home() / default_subdir


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/alpi/ (or XDG_CONFIG_HOME/alpi/).
    """
    return _get_xdg_base("XDG_CONFIG_HOME", ".config") / APP_NAME


def get_data_dir(ledger_name: str) -> Path:
    """Get the data directory holding a stack's ledger.

    Args:
        ledger_name: Stack ledger name (e.g., "alpi-niri").

    Returns:
        Path to ~/.local/share/<ledger_name>/ (or XDG_DATA_HOME/<ledger_name>/).
    """
    return _get_xdg_base("XDG_DATA_HOME", ".local/share") / ledger_name


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/alpi/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_ledger_path(ledger_name: str) -> Path:
    """Get the ledger file path for a stack.

    Returns:
        Path to ~/.local/share/<ledger_name>/state.
    """
    return get_data_dir(ledger_name) / LEDGER_FILENAME

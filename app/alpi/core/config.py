"""Configuration file I/O.

The optional ``config.toml`` holds one table per stack::

    [desktop]
    repo_url = "https://github.com/me/niri-dots"
    groups = ["input", "video"]

    [desktop.session]
    tty = "/dev/tty2"

    [apps]
    aur_packages = ["brave-bin"]

Each table is merged key by key over the built-in stack and validated with
Pydantic, so a config file only needs to name what it changes.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from alpi.core.paths import get_config_path
from alpi.models.stack import StackConfig, default_stacks


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when config content does not match the schema."""


_NESTED_TABLES = frozenset({"session"})


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Lists and the ``config_dirs`` map replace the default outright; nested
    model tables such as ``session`` are merged key by key.
    """
    merged = dict(base)
    for key, value in override.items():
        if key in _NESTED_TABLES and isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def stacks_from_dict(data: dict[str, Any]) -> dict[str, StackConfig]:
    """Build stack configurations from parsed TOML data.

    Args:
        data: Mapping of stack name to override table.

    Returns:
        Stack configurations keyed by name, built-in stacks included.

    Raises:
        ConfigValidationError: If a table is unknown or its content invalid.
    """
    stacks = default_stacks()
    unknown = sorted(set(data) - set(stacks))
    if unknown:
        msg = f"Unknown stack table(s): {', '.join(unknown)}"
        raise ConfigValidationError(msg)

    for name, override in data.items():
        if not isinstance(override, dict):
            msg = f"[{name}] must be a table"
            raise ConfigValidationError(msg)
        if override.get("name", name) != name:
            msg = f"[{name}] cannot rename the stack"
            raise ConfigValidationError(msg)
        base = stacks[name].model_dump()
        # A configured session table replaces a disabled (None) one outright
        if base.get("session") is None and isinstance(override.get("session"), dict):
            base["session"] = {}
        try:
            stacks[name] = StackConfig.model_validate(_merge(base, override))
        except ValidationError as e:
            msg = f"Invalid [{name}] configuration: {e}"
            raise ConfigValidationError(msg) from e
    return stacks


def load_config(path: Path | None = None) -> dict[str, StackConfig]:
    """Load stack configurations, falling back to built-in defaults.

    Args:
        path: Config file. If None, uses the default config path.

    Returns:
        Stack configurations keyed by name.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file cannot be read.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return default_stacks()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    return stacks_from_dict(data)


def stacks_to_dict(stacks: dict[str, StackConfig]) -> dict[str, Any]:
    """Convert stacks to a dictionary suitable for TOML serialization.

    TOML has no null, so unset optional fields are omitted.
    """
    return {
        name: stack.model_dump(exclude_none=True, exclude={"name"})
        for name, stack in stacks.items()
    }


def save_config(stacks: dict[str, StackConfig], path: Path | None = None) -> Path:
    """Save stack configurations to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        stacks: Stack configurations to save.
        path: Target file. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = stacks_to_dict(stacks)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def require_config(config_path: Path | None = None) -> dict[str, StackConfig]:
    """Load configuration or exit with a helpful error message.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    import typer

    from alpi.utils.formatting import print_error, print_info

    path = config_path or get_config_path()
    try:
        return load_config(path)
    except ConfigError as e:
        print_error(f"Failed to load config {path}: {e}")
        print_info("Run 'alpi init --force' to rewrite the default configuration.")
        raise typer.Exit(code=1) from e

"""Config Mapping: repository subdirectory to config subdirectory table."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import PurePosixPath


def validate_relative_name(name: str, what: str) -> str:
    """Reject empty, absolute or parent-escaping mapping names.

    Args:
        name: Directory name, possibly nested (``waybar/scripts``).
        what: Human-readable role of the name for error messages.

    Returns:
        The name with surrounding slashes stripped.

    Raises:
        ValueError: If the name is empty, absolute or contains ``..``.
    """
    if not name or not name.strip():
        msg = f"{what} name cannot be empty"
        raise ValueError(msg)
    if name.startswith("/"):
        msg = f"{what} name must be relative: {name}"
        raise ValueError(msg)
    if ".." in PurePosixPath(name).parts:
        msg = f"{what} name must not contain '..': {name}"
        raise ValueError(msg)
    return name.strip("/")


@dataclass(frozen=True, slots=True)
class MappingEntry:
    """A single source subdirectory to destination subdirectory pair."""

    source: str
    destination: str


@dataclass(frozen=True, slots=True)
class ConfigMapping:
    """Immutable, ordered collection of mapping entries.

    Every source name is unique. Iteration order is the declaration order,
    so repeated runs walk the repository the same way.
    """

    entries: tuple[MappingEntry, ...] = ()

    def __post_init__(self) -> None:
        """Validate names and source uniqueness."""
        seen: set[str] = set()
        for entry in self.entries:
            validate_relative_name(entry.source, "Source")
            validate_relative_name(entry.destination, "Destination")
            if entry.source in seen:
                msg = f"Duplicate source directory in config mapping: {entry.source}"
                raise ValueError(msg)
            seen.add(entry.source)

    @classmethod
    def from_dict(cls, mapping: Mapping[str, str]) -> "ConfigMapping":
        """Build a mapping from ``{source: destination}`` pairs."""
        return cls(
            entries=tuple(
                MappingEntry(source=src.strip("/"), destination=dst.strip("/"))
                for src, dst in mapping.items()
            )
        )

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def sources(self) -> list[str]:
        """Source subdirectory names in declaration order."""
        return [entry.source for entry in self.entries]

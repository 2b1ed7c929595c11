"""Sync orchestration over a stack's config mapping.

Each mapping entry ``repo/<src>/`` is deployed recursively into
``<config root>/<dst>/``. The scripts directory (``repo/local/bin`` by
default) is deployed flat into ``~/.local/bin`` and every deployed script is
made executable. A missing source directory is warned about and skipped;
one absent app folder never aborts the whole sync.
"""

import logging
import stat
from pathlib import Path

from alpi.core.mapper import DirectoryMapping, map_directory
from alpi.core.synchronizer import SymlinkSynchronizer
from alpi.models.mode import ExecutionMode
from alpi.models.results import DeployReport, SyncResult
from alpi.models.stack import StackConfig

logger = logging.getLogger(__name__)

_EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def make_executable(path: Path) -> None:
    """Add execute permission for user, group and others (``chmod +x``).

    Raises:
        OSError: If permissions cannot be changed.
    """
    current = path.stat().st_mode
    path.chmod(current | _EXECUTABLE_BITS)


class SyncOrchestrator:
    """Drives path mapping and symlink sync for one stack.

    The orchestrator is built from immutable configuration: the stack's
    config mapping and scripts directory, resolved against ``home``.

    Attributes:
        stack: Stack configuration.
        home: Target home directory.
    """

    def __init__(
        self,
        stack: StackConfig,
        home: Path,
        synchronizer: SymlinkSynchronizer,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            stack: Stack whose mapping is deployed.
            home: Home directory destinations are resolved against.
            synchronizer: Synchronizer that owns symlink creation.
        """
        self._stack = stack
        self._home = home
        self._synchronizer = synchronizer

    @property
    def stack(self) -> StackConfig:
        """Stack configuration."""
        return self._stack

    @property
    def home(self) -> Path:
        """Target home directory."""
        return self._home

    def config_mappings(self) -> list[DirectoryMapping]:
        """Recursive mappings for every config mapping entry."""
        repo = self._stack.repo_path(self._home)
        if repo is None:
            return []
        config_root = self._stack.config_root_path(self._home)
        return [
            map_directory(
                repo / entry.source,
                config_root / entry.destination,
                label=entry.source,
            )
            for entry in self._stack.mapping
        ]

    def scripts_mapping(self) -> DirectoryMapping | None:
        """Flat mapping of the scripts directory, None if the stack has none."""
        repo = self._stack.repo_path(self._home)
        if repo is None or self._stack.scripts_dir is None:
            return None
        return map_directory(
            repo / self._stack.scripts_dir,
            self._stack.bin_path(self._home),
            recursive=False,
            label=self._stack.scripts_dir,
        )

    def plan(self) -> list[DirectoryMapping]:
        """Every mapping this stack deploys, scripts last."""
        mappings = self.config_mappings()
        scripts = self.scripts_mapping()
        if scripts is not None:
            mappings.append(scripts)
        return mappings

    def expected_destinations(self) -> list[Path]:
        """Every destination path a deploy would create."""
        return [mapped.destination for mapping in self.plan() for mapped in mapping]

    def managed_roots(self) -> list[Path]:
        """Destination roots of the config mapping (scripts dir excluded).

        These are the directories the uninstaller may prune once empty.
        """
        config_root = self._stack.config_root_path(self._home)
        return [config_root / entry.destination for entry in self._stack.mapping]

    def deploy(self, mode: ExecutionMode) -> DeployReport:
        """Sync every mapped file.

        Args:
            mode: Apply or preview.

        Returns:
            DeployReport with per-file results and missing source dirs.
        """
        results: list[SyncResult] = []
        missing: list[Path] = []

        for mapping in self.config_mappings():
            logger.info("Syncing: %s -> %s", mapping.source_root, mapping.destination_root)
            if mapping.source_missing:
                missing.append(mapping.source_root)
                continue
            for mapped in mapping:
                result = self._synchronizer.sync(mapped.source, mapped.destination, mode=mode)
                results.append(result)

        scripts = self.scripts_mapping()
        if scripts is not None:
            if scripts.source_missing:
                missing.append(scripts.source_root)
            else:
                logger.info("Syncing: %s -> %s", scripts.source_root, scripts.destination_root)
                for mapped in scripts:
                    result = self._synchronizer.sync(mapped.source, mapped.destination, mode=mode)
                    results.append(result)
                    if result.success and not mode.is_preview:
                        self._mark_executable(mapped.source)

        return DeployReport(results=tuple(results), missing_sources=tuple(missing))

    def _mark_executable(self, source: Path) -> None:
        """Ensure a deployed script is executable; the symlink inherits this."""
        try:
            make_executable(source)
        except OSError as e:
            logger.warning("Could not make %s executable: %s", source, e)

"""Addon repository: the cache, sync and removal operations behind one object."""

from __future__ import annotations

from pathlib import Path

from coop.config.schemas import AddonSpec, CopyStrategyName
from coop.core.cache import AddonCache
from coop.core.copier import CopyStrategy
from coop.core.project import AddonPaths
from coop.core.remover import AddonRemover, AddonStatus
from coop.core.sync import AddonSynchronizer
from coop.utils.shell import CommandRunner, SubprocessRunner


class AddonRepo:
    """Manages addon cache entries and installed addon copies.

    Operations touching different addon names may run concurrently. Calls for
    the same addon name must be serialized by the caller.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        copy_strategy: CopyStrategyName | CopyStrategy = "auto",
    ):
        """Initialize the repository.

        Args:
            runner: Runner for external commands (defaults to SubprocessRunner)
            copy_strategy: Strategy used to copy files out of the cache
        """
        self.runner: CommandRunner = runner or SubprocessRunner()
        self.cache = AddonCache(self.runner)
        self.synchronizer = AddonSynchronizer(self.runner, copy_strategy)
        self.remover = AddonRemover(self.runner)

    def load_cache(self, paths: AddonPaths) -> dict[str, Path]:
        """Map each cached addon's origin URL to its cache directory."""
        return self.cache.load(paths)

    def cache_addon(self, spec: AddonSpec, paths: AddonPaths) -> Path:
        """Clone an addon into the cache unless it is already there."""
        return self.cache.cache_addon(spec, paths)

    def delete_addon(self, spec: AddonSpec, paths: AddonPaths) -> bool:
        """Delete an installed addon if it has no local changes."""
        return self.remover.delete(spec, paths)

    def copy_addon_from_cache(self, spec: AddonSpec, paths: AddonPaths) -> Path:
        """Install the requested revision of a cached addon."""
        return self.synchronizer.copy_from_cache(spec, paths)

    def addon_status(self, spec: AddonSpec, paths: AddonPaths) -> AddonStatus:
        """Report whether an installed addon is missing, clean or modified."""
        return self.remover.status(spec, paths)

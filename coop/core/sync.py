"""Synchronizes a cached addon into the project's addons directory."""

from __future__ import annotations

import logging
from pathlib import Path

from coop.config.schemas import AddonSpec, CopyStrategyName
from coop.core.copier import CopyStrategy, select_copy_strategy
from coop.core.errors import AddonError
from coop.core.project import AddonPaths
from coop.utils.filesystem import (
    ensure_directory,
    is_repository_root,
    remove_directory,
    resolve_subfolder,
)
from coop.utils.shell import CommandRunner

logger = logging.getLogger(__name__)

TRACKING_COMMIT_MESSAGE = "Initial commit"

# The tracking commit must not depend on the user's git identity or signing setup
TRACKING_GIT_CONFIG = (
    "-c",
    "user.name=coop",
    "-c",
    "user.email=coop@localhost",
    "-c",
    "commit.gpgsign=false",
)


class AddonSynchronizer:
    """Installs a pinned revision of a cached addon.

    The cache entry is checked out at the requested reference, its files are
    copied into the install directory, and a fresh tracking repository with a
    single commit is created there so later local edits can be detected.
    """

    def __init__(
        self,
        runner: CommandRunner,
        copy_strategy: CopyStrategyName | CopyStrategy = "auto",
    ):
        """Initialize the synchronizer.

        Args:
            runner: Runner used for git and copy commands
            copy_strategy: Strategy name to select, or a strategy instance
        """
        self._runner = runner
        if isinstance(copy_strategy, CopyStrategy):
            self._copier = copy_strategy
        else:
            self._copier = select_copy_strategy(runner, copy_strategy)

    @property
    def copier(self) -> CopyStrategy:
        return self._copier

    def checkout(self, spec: AddonSpec, cache_entry: Path) -> None:
        """Move the cache entry to the requested reference.

        Forced checkout must succeed. Pulling and updating submodules are
        best effort: a tag or commit checkout leaves HEAD detached, and
        offline work should still install what the cache already holds.

        Raises:
            ShellError: If the reference does not resolve
        """
        logger.info("Checking out '%s' for addon '%s'", spec.checkout, spec.name)
        self._runner.run(cache_entry, "git", "checkout", "-f", spec.checkout)

        pull = self._runner.run_unchecked(cache_entry, "git", "pull")
        if not pull.success:
            logger.debug("Skipping pull for addon '%s': %s", spec.name, pull.output)

        submodules = self._runner.run_unchecked(
            cache_entry, "git", "submodule", "update", "--init", "--recursive"
        )
        if not submodules.success:
            logger.debug(
                "Skipping submodule update for addon '%s': %s", spec.name, submodules.output
            )

    def init_tracking_repo(self, install_dir: Path) -> None:
        """Replace any tracking history with a single commit of the current files.

        Raises:
            ShellError: If git fails
        """
        remove_directory(install_dir / ".git")
        self._runner.run(install_dir, "git", "init")
        # Ignored files are tracked too, so the whole install is one known state
        self._runner.run(install_dir, "git", "add", "-A", "--force")
        self._runner.run(
            install_dir,
            "git",
            *TRACKING_GIT_CONFIG,
            "commit",
            "--allow-empty",
            "-m",
            TRACKING_COMMIT_MESSAGE,
        )

    def copy_from_cache(self, spec: AddonSpec, paths: AddonPaths) -> Path:
        """Install an addon from its cache entry.

        Args:
            spec: Addon to install
            paths: Engine paths

        Returns:
            Path to the install directory

        Raises:
            ShellError: If checkout, copy or tracking repository setup fails
            AddonError: If the addon is not cached, or the configured subfolder
                does not exist
        """
        cache_entry = paths.cache_path(spec.name)
        if not cache_entry.is_dir():
            raise AddonError(
                f"Addon '{spec.name}' is not cached at {cache_entry}. "
                "Cache it before installing.",
                spec.name,
            )
        # A forced checkout outside the clone would reset the enclosing project
        if not is_repository_root(cache_entry):
            raise AddonError(
                f"Cache entry for addon '{spec.name}' at {cache_entry} is not a git "
                "repository. Delete it so the addon can be cloned again.",
                spec.name,
            )
        self.checkout(spec, cache_entry)

        source = resolve_subfolder(cache_entry, spec.subfolder)
        if not source.is_dir():
            raise AddonError(
                f"Subfolder '{spec.subfolder}' not found in addon '{spec.name}' "
                f"at '{spec.checkout}'",
                spec.name,
            )

        install_dir = paths.install_path(spec.name)
        ensure_directory(paths.addons_root)
        logger.info("Copying addon '%s' from %s to %s", spec.name, source, install_dir)
        self._copier.copy(source, install_dir, paths.project_root)

        self.init_tracking_repo(install_dir)
        logger.info("Installed addon '%s' (%s)", spec.name, spec.checkout)
        return install_dir

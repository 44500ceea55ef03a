"""Conflict-safe removal of installed addons."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from coop.config.schemas import AddonSpec
from coop.core.errors import AddonConflictError
from coop.core.project import AddonPaths
from coop.utils.filesystem import is_repository_root, remove_directory
from coop.utils.shell import CommandRunner

logger = logging.getLogger(__name__)

AddonStatus = Literal["missing", "clean", "modified"]


class AddonRemover:
    """Deletes installed addons only when they are untouched since install.

    Each installed addon carries its own tracking repository whose single
    commit matches the installed files. Any entry in its porcelain status,
    including untracked and ignored files, counts as a local modification.
    """

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def _check(self, install_dir: Path) -> tuple[bool, str, str | None]:
        """Return (clean, raw status, reason) for an existing install directory."""
        # Without its own .git, git would answer for an enclosing repository
        if not is_repository_root(install_dir):
            return False, "", "The addon has no change-tracking repository."

        result = self._runner.run_unchecked(
            install_dir, "git", "status", "--porcelain", "--ignored"
        )
        if not result.success:
            return False, result.output, "Unable to read the addon's change-tracking status."

        return not result.stdout.strip(), result.stdout, None

    def status(self, spec: AddonSpec, paths: AddonPaths) -> AddonStatus:
        """Report whether an installed addon is missing, clean or modified.

        Args:
            spec: Addon to inspect
            paths: Engine paths
        """
        install_dir = paths.install_path(spec.name)
        if not install_dir.exists():
            return "missing"
        clean, _, _ = self._check(install_dir)
        return "clean" if clean else "modified"

    def delete(self, spec: AddonSpec, paths: AddonPaths) -> bool:
        """Delete an installed addon if it has no local changes.

        Args:
            spec: Addon to delete
            paths: Engine paths

        Returns:
            True if the directory was deleted, False if it did not exist

        Raises:
            AddonConflictError: If the addon has local changes
        """
        install_dir = paths.install_path(spec.name)
        if not install_dir.exists():
            logger.debug("Addon '%s' is not installed", spec.name)
            return False

        clean, status, reason = self._check(install_dir)
        if not clean:
            logger.warning("Refusing to delete modified addon '%s'", spec.name)
            raise AddonConflictError(spec.name, install_dir, status=status, reason=reason)

        logger.info("Deleting addon '%s' from %s", spec.name, install_dir)
        remove_directory(install_dir)
        return True

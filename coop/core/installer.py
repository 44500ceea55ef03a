"""Addon installation orchestrator.

This module contains the AddonInstaller which runs the per-addon sequence:
cache the addon, remove the previously installed copy if it is unmodified,
then copy the requested revision into place.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from coop.config.schemas import AddonSpec
from coop.core.errors import AddonConflictError, AddonError
from coop.core.project import Project
from coop.core.repo import AddonRepo
from coop.utils.shell import ShellError

logger = logging.getLogger("coop.installer")


@dataclass
class InstallResult:
    """Result of an addon installation."""

    addon_name: str
    checkout: str
    success: bool
    message: str = ""
    conflict: bool = False


@dataclass
class InstallSummary:
    """Summary of an installation operation."""

    results: list[InstallResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def all_successful(self) -> bool:
        return all(r.success for r in self.results)


class AddonInstaller:
    """Installs a project's configured addons."""

    def __init__(self, project: Project, repo: AddonRepo | None = None):
        """Initialize the installer.

        Args:
            project: The project to install addons into
            repo: Addon repository (defaults to one using the project's copy strategy)
        """
        self.project = project
        self.repo = repo or AddonRepo(copy_strategy=project.copy_strategy)

    def install(self, names: list[str] | None = None, jobs: int = 1) -> InstallSummary:
        """Install addons.

        Args:
            names: Addons to install, or None for every configured addon
            jobs: Number of addons to install in parallel

        Returns:
            InstallSummary with results for each addon, in configuration order

        Raises:
            AddonError: If a requested name is not configured
        """
        specs = self._select(names)
        if not specs:
            logger.info("No addons to install")
            return InstallSummary()

        logger.info("Starting installation of %d addon(s)", len(specs))

        # Addon names are unique, so parallel sequences never share a directory
        if jobs > 1 and len(specs) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                results = list(pool.map(self.install_addon, specs))
        else:
            results = [self.install_addon(spec) for spec in specs]

        summary = InstallSummary(results=results)
        logger.info(
            "Installation complete: %d succeeded, %d failed",
            summary.success_count,
            summary.failure_count,
        )
        return summary

    def _select(self, names: list[str] | None) -> list[AddonSpec]:
        if not names:
            return self.project.addons

        specs = []
        for name in names:
            spec = self.project.get_addon(name)
            if spec is None:
                raise AddonError(f"Addon not configured: {name}", name)
            specs.append(spec)
        return specs

    def install_addon(self, spec: AddonSpec) -> InstallResult:
        """Run the cache, remove, copy sequence for one addon.

        Failures are recorded in the result rather than raised, so one
        broken addon does not stop the others.
        """
        paths = self.project.paths
        try:
            self.repo.cache_addon(spec, paths)
            self.repo.delete_addon(spec, paths)
            self.repo.copy_addon_from_cache(spec, paths)
        except AddonConflictError as e:
            return InstallResult(spec.name, spec.checkout, False, str(e), conflict=True)
        except (AddonError, ShellError, OSError) as e:
            logger.error("Failed to install addon '%s': %s", spec.name, e)
            return InstallResult(spec.name, spec.checkout, False, str(e))

        return InstallResult(
            spec.name, spec.checkout, True, f"Installed {spec.name} ({spec.checkout})"
        )

"""Addon cache: one git clone per addon name under the cache root.

Cache structure:
    cache_root/
        <addon-name>/     # Full clone of the addon repository (with submodules)

The cache is keyed by addon name. The URL of an entry is only known by asking
git for the entry's origin, so the index is rebuilt from disk on every call
and stays correct if the cache directory is edited by hand.
"""

from __future__ import annotations

import logging
from pathlib import Path

from coop.config.schemas import AddonSpec
from coop.core.errors import CacheError, CacheMismatchError
from coop.core.project import AddonPaths
from coop.utils.filesystem import ensure_directory, is_repository_root, list_subdirectories
from coop.utils.shell import CommandRunner

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Normalize a git URL for comparison.

    Trailing slashes and a trailing ".git" are not significant to git hosts.
    """
    normalized = url.strip().rstrip("/")
    if normalized.endswith(".git"):
        normalized = normalized[: -len(".git")]
    return normalized


class AddonCache:
    """Maintains the shared cache of addon clones."""

    def __init__(self, runner: CommandRunner):
        """Initialize the cache.

        Args:
            runner: Runner used for git commands
        """
        self._runner = runner

    def get_origin(self, directory: Path) -> str:
        """Query the origin URL of a git clone.

        Raises:
            CacheError: If the directory is not the root of its own repository
            ShellError: If git cannot read the origin
        """
        # Git would otherwise report the origin of an enclosing project repository
        if not is_repository_root(directory):
            raise CacheError(
                f"Cache entry {directory} is not a git repository. "
                "Delete it so the addon can be cloned again.",
                directory.name,
            )
        result = self._runner.run(directory, "git", "remote", "get-url", "origin")
        return result.stdout.strip()

    def load(self, paths: AddonPaths) -> dict[str, Path]:
        """Build the cache index.

        Args:
            paths: Engine paths

        Returns:
            Mapping of origin URL to cache entry directory

        Raises:
            CacheError: If a subdirectory is not a git repository, or two
                entries share an origin URL
            ShellError: If git cannot read an entry's origin
        """
        ensure_directory(paths.cache_root)

        index: dict[str, Path] = {}
        for directory in list_subdirectories(paths.cache_root):
            url = self.get_origin(directory)
            if url in index:
                raise CacheError(
                    f"Cache entries {index[url].name} and {directory.name} "
                    f"both clone {url}"
                )
            index[url] = directory

        logger.debug("Loaded %d cache entries from %s", len(index), paths.cache_root)
        return index

    def cache_addon(self, spec: AddonSpec, paths: AddonPaths) -> Path:
        """Ensure an addon has a clone in the cache.

        Clones on first use only. An existing entry is reused after checking
        that its origin matches the requested URL.

        Args:
            spec: Addon to cache
            paths: Engine paths

        Returns:
            Path to the cache entry

        Raises:
            ShellError: If the clone or origin query fails
            CacheError: If the existing entry is not a git repository
            CacheMismatchError: If the existing entry clones a different URL
        """
        entry = paths.cache_path(spec.name)
        if entry.exists():
            origin = self.get_origin(entry)
            if normalize_url(origin) != normalize_url(spec.url):
                raise CacheMismatchError(spec.name, entry, spec.url, origin)
            logger.debug("Addon '%s' already cached at %s", spec.name, entry)
            return entry

        ensure_directory(paths.cache_root)
        logger.info("Caching addon '%s' from %s", spec.name, spec.url)
        self._runner.run(
            paths.cache_root, "git", "clone", spec.url, "--recurse-submodules", spec.name
        )
        return entry

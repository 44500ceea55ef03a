"""Exceptions raised by the addon engine."""

from pathlib import Path


class AddonError(Exception):
    """Base exception for addon cache and install errors."""

    def __init__(self, message: str, addon_name: str | None = None):
        self.addon_name = addon_name
        super().__init__(message)


class AddonConflictError(AddonError):
    """Raised when an installed addon has local changes and cannot be removed."""

    def __init__(self, addon_name: str, path: Path, status: str = "", reason: str | None = None):
        self.path = path
        self.status = status
        message = (
            f"Cannot delete modified addon '{addon_name}' at {path}. "
            "Please back up or discard your changes and delete the addon manually."
        )
        if reason:
            message += f"\n{reason}"
        if status.strip():
            message += f"\n{status.rstrip()}"
        super().__init__(message, addon_name)


class CacheError(AddonError):
    """Raised when the addon cache is in an inconsistent state."""


class CacheMismatchError(CacheError):
    """Raised when a cached clone's origin differs from the requested URL."""

    def __init__(self, addon_name: str, path: Path, expected_url: str, actual_url: str):
        self.path = path
        self.expected_url = expected_url
        self.actual_url = actual_url
        super().__init__(
            f"Cached addon '{addon_name}' at {path} was cloned from {actual_url}, "
            f"but the configuration requests {expected_url}. "
            "Delete the cache entry to re-clone it.",
            addon_name,
        )

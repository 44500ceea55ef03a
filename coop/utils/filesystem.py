"""Filesystem utilities for Coop."""

import os
import shutil
import stat
import sys
from pathlib import Path

from coop.utils.platform import get_path_separator


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def list_subdirectories(path: Path) -> list[Path]:
    """List the immediate subdirectories of a directory, sorted by name.

    Args:
        path: Directory to scan

    Returns:
        Subdirectory paths; plain files are skipped
    """
    return sorted(p for p in path.iterdir() if p.is_dir())


def copy_directory(src: Path, dest: Path, exclude: tuple[str, ...] = ()) -> Path:
    """Copy a directory tree into a destination, merging with existing content.

    Args:
        src: Source directory path
        dest: Destination directory path
        exclude: File or directory names to skip at every depth

    Returns:
        Path to the destination directory
    """
    ignore = shutil.ignore_patterns(*exclude) if exclude else None
    shutil.copytree(src, dest, ignore=ignore, dirs_exist_ok=True)
    return dest


def _make_writable_and_retry(func, path, _exc) -> None:  # type: ignore[no-untyped-def]
    # git marks object files read-only; Windows refuses to unlink them
    os.chmod(path, stat.S_IWRITE)
    func(path)


def remove_directory(path: Path) -> bool:
    """Remove a directory and its contents, including read-only files.

    Args:
        path: Directory path to remove

    Returns:
        True if the directory was removed, False if it didn't exist
    """
    if not path.exists():
        return False
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_make_writable_and_retry)
    else:
        shutil.rmtree(path, onerror=_make_writable_and_retry)
    return True


def resolve_subfolder(root: Path, subfolder: str) -> Path:
    """Join a subfolder onto a root directory.

    The root marker ("/") and empty strings mean the root itself. Leading and
    trailing separators on the subfolder are ignored.

    Args:
        root: Base directory
        subfolder: Subfolder relative to root

    Returns:
        The joined path
    """
    stripped = subfolder.strip().strip("/\\")
    if not stripped:
        return root
    return root.joinpath(*[part for part in stripped.replace("\\", "/").split("/") if part])


def with_trailing_separator(path: Path, separator: str | None = None) -> str:
    """Render a directory path with exactly one trailing separator.

    rsync and robocopy treat ``src/`` as "the contents of src".

    Args:
        path: Directory path
        separator: Separator to append (defaults to the platform separator)

    Returns:
        Path string ending in the separator
    """
    sep = separator or get_path_separator()
    return str(path).rstrip("/\\") + sep


def is_repository_root(path: Path) -> bool:
    """Check whether a directory is the root of its own git repository.

    A clone has a ``.git`` directory and a submodule checkout a ``.git`` file.
    Git run anywhere else searches parent directories and answers for
    whatever repository encloses the path.

    Args:
        path: Directory to check

    Returns:
        True if the directory has its own ``.git`` entry
    """
    return (path / ".git").exists()

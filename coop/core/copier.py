"""Copy strategies for moving addon files from the cache into a project.

Every strategy copies the full source tree into the destination, skipping
``.git`` entries at any depth. None of them remove destination files that no
longer exist at the source.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from coop.config.schemas import CopyStrategyName
from coop.utils.filesystem import copy_directory, with_trailing_separator
from coop.utils.platform import get_path_separator
from coop.utils.shell import CommandRunner, raise_for_result

logger = logging.getLogger(__name__)

EXCLUDED_NAMES = (".git",)

# robocopy exit codes below 8 report success (1 = files copied, 2 = extras, ...)
ROBOCOPY_FAILURE_THRESHOLD = 8


class CopyStrategy(ABC):
    """Copies a directory tree, excluding version-control metadata."""

    name: str = ""

    @abstractmethod
    def copy(self, source: Path, dest: Path, cwd: Path) -> None:
        """Copy the contents of source into dest.

        Args:
            source: Directory whose contents are copied
            dest: Destination directory (created if missing)
            cwd: Working directory for external tools

        Raises:
            ShellError: If the copy fails
        """
        ...


class RsyncCopyStrategy(CopyStrategy):
    """Copies with ``rsync -a``."""

    name = "rsync"

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def copy(self, source: Path, dest: Path, cwd: Path) -> None:
        """Copy with rsync, excluding .git at every depth."""
        args = ["rsync", "-a", with_trailing_separator(source, "/"), str(dest)]
        for excluded in EXCLUDED_NAMES:
            args.extend(["--exclude", excluded])
        self._runner.run(cwd, *args)


class RobocopyCopyStrategy(CopyStrategy):
    """Mirrors with ``robocopy /e``."""

    name = "robocopy"

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def copy(self, source: Path, dest: Path, cwd: Path) -> None:
        """Copy with robocopy, treating exit codes below 8 as success."""
        args = ["robocopy", with_trailing_separator(source, "\\"), str(dest), "/e"]
        # /xd skips .git directories; /xf skips the .git files submodules leave behind
        args.extend(["/xd", *EXCLUDED_NAMES, "/xf", *EXCLUDED_NAMES])
        result = self._runner.run_unchecked(cwd, *args)
        if result.exit_code >= ROBOCOPY_FAILURE_THRESHOLD:
            raise_for_result(result, cwd)


class PythonCopyStrategy(CopyStrategy):
    """Copies in-process with ``shutil.copytree``."""

    name = "python"

    def copy(self, source: Path, dest: Path, cwd: Path) -> None:
        """Copy in-process, skipping .git entries."""
        copy_directory(source, dest, exclude=EXCLUDED_NAMES)


def select_copy_strategy(
    runner: CommandRunner,
    preference: CopyStrategyName = "auto",
    separator: str | None = None,
) -> CopyStrategy:
    """Choose the copy strategy.

    "auto" picks robocopy on platforms whose path separator is a backslash
    and rsync everywhere else.

    Args:
        runner: Runner for external copy tools
        preference: Configured strategy name
        separator: Path separator override (defaults to the platform's)

    Returns:
        The copy strategy to use
    """
    if preference == "auto":
        sep = separator if separator is not None else get_path_separator()
        preference = "robocopy" if sep == "\\" else "rsync"

    if preference == "robocopy":
        strategy: CopyStrategy = RobocopyCopyStrategy(runner)
    elif preference == "rsync":
        strategy = RsyncCopyStrategy(runner)
    elif preference == "python":
        strategy = PythonCopyStrategy()
    else:
        raise ValueError(f"Unknown copy strategy: {preference}")

    logger.debug("Using %s copy strategy", strategy.name)
    return strategy

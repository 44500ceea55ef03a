"""External command execution.

All git, rsync and robocopy invocations go through a ``CommandRunner`` so the
engine never calls ``subprocess`` directly. Tests substitute a runner that
records calls and returns canned results.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class ShellError(Exception):
    """A required external command failed."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        cwd: Path | None = None,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command or []
        self.cwd = cwd
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


@dataclass
class ShellResult:
    """Outcome of an external command."""

    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Combined diagnostic text, stderr first."""
        return "\n".join(part.strip() for part in (self.stderr, self.stdout) if part.strip())


class CommandRunner(Protocol):
    """Runs external commands in a working directory."""

    def run(self, cwd: Path, *args: str) -> ShellResult:
        """Run a command, raising ShellError on non-zero exit."""
        ...

    def run_unchecked(self, cwd: Path, *args: str) -> ShellResult:
        """Run a command, returning the result whatever the exit code."""
        ...


def format_command(args: list[str] | tuple[str, ...]) -> str:
    """Render a command line for log and error messages."""
    return " ".join(f'"{a}"' if " " in a else a for a in args)


class SubprocessRunner:
    """CommandRunner backed by ``subprocess.run``."""

    def __init__(self, timeout: float | None = None):
        """Initialize the runner.

        Args:
            timeout: Optional per-command timeout in seconds
        """
        self._timeout = timeout

    def run_unchecked(self, cwd: Path, *args: str) -> ShellResult:
        cmd = list(args)
        # subprocess reports a missing cwd as a missing executable
        if not Path(cwd).is_dir():
            raise ShellError(
                f"Working directory does not exist: {cwd}",
                command=cmd,
                cwd=cwd,
            )
        logger.debug("Running in %s: %s", cwd, format_command(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            logger.error("%s is not installed or not in PATH", cmd[0])
            raise ShellError(
                f"{cmd[0]} is not installed or not in PATH",
                command=cmd,
                cwd=cwd,
            ) from e
        except subprocess.TimeoutExpired as e:
            logger.error("Command timed out after %ss: %s", self._timeout, format_command(cmd))
            raise ShellError(
                f"Command timed out after {self._timeout}s: {format_command(cmd)}",
                command=cmd,
                cwd=cwd,
            ) from e

        return ShellResult(
            command=cmd,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def run(self, cwd: Path, *args: str) -> ShellResult:
        result = self.run_unchecked(cwd, *args)
        if not result.success:
            raise_for_result(result, cwd)
        return result


def raise_for_result(result: ShellResult, cwd: Path) -> None:
    """Raise ShellError describing a failed command.

    Args:
        result: The failed command result
        cwd: Working directory the command ran in

    Raises:
        ShellError: Always
    """
    command = format_command(result.command)
    logger.error("Command failed (exit %d): %s", result.exit_code, command)
    message = f"Command failed (exit {result.exit_code}): {command}"
    if result.output:
        message += f"\n{result.output}"
    raise ShellError(
        message,
        command=result.command,
        cwd=cwd,
        exit_code=result.exit_code,
        stdout=result.stdout,
        stderr=result.stderr,
    )

"""Test doubles for coop.

Usage::

    from coop.testing import FakeRunner

    runner = FakeRunner()
    runner.on("git", "remote", "get-url", "origin", stdout="https://example.com/foo.git\\n")
    runner.on("git", "pull", exit_code=1, stderr="You are not currently on a branch.")
    repo = AddonRepo(runner=runner, copy_strategy="python")
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from coop.utils.shell import ShellResult, raise_for_result

Effect = Callable[[Path, tuple[str, ...]], None]


@dataclass
class RecordedCall:
    """A command recorded by FakeRunner."""

    cwd: Path
    args: tuple[str, ...]


@dataclass
class _Response:
    prefix: tuple[str, ...]
    cwd: Path | None
    stdout: str
    stderr: str
    exit_code: int
    effect: Effect | None


class FakeRunner:
    """Drop-in CommandRunner that records calls and returns canned results.

    Responses are matched by argument prefix and optionally by working
    directory; the most recently registered match wins. Unmatched commands
    succeed with no output. An ``effect`` callback runs on match, e.g. to
    create the directory a clone would have produced.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._responses: list[_Response] = []

    def on(
        self,
        *prefix: str,
        cwd: Path | None = None,
        stdout: str = "",
        stderr: str = "",
        exit_code: int = 0,
        effect: Effect | None = None,
    ) -> FakeRunner:
        self._responses.append(_Response(prefix, cwd, stdout, stderr, exit_code, effect))
        return self

    def run_unchecked(self, cwd: Path, *args: str) -> ShellResult:
        cwd = Path(cwd)
        self.calls.append(RecordedCall(cwd, args))
        for response in reversed(self._responses):
            if args[: len(response.prefix)] != response.prefix:
                continue
            if response.cwd is not None and Path(response.cwd) != cwd:
                continue
            if response.effect is not None:
                response.effect(cwd, args)
            return ShellResult(list(args), response.exit_code, response.stdout, response.stderr)
        return ShellResult(list(args), 0)

    def run(self, cwd: Path, *args: str) -> ShellResult:
        result = self.run_unchecked(cwd, *args)
        if not result.success:
            raise_for_result(result, cwd)
        return result

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [call.args for call in self.calls]

    def calls_with(self, *words: str) -> list[RecordedCall]:
        """Recorded calls whose arguments contain every given word."""
        return [call for call in self.calls if all(w in call.args for w in words)]

"""Tests for coop.core.installer module."""

from pathlib import Path

import pytest

from coop.core.copier import PythonCopyStrategy
from coop.core.errors import AddonError
from coop.core.installer import AddonInstaller, InstallResult, InstallSummary
from coop.core.project import Project
from coop.core.repo import AddonRepo
from coop.testing import FakeRunner


def _fake_clone(cwd: Path, args: tuple[str, ...]) -> None:
    """Create a cache entry laid out like a typical addon repository."""
    name = args[-1]
    entry = cwd / name
    (entry / ".git").mkdir(parents=True)
    (entry / "README.md").write_text(f"# {name}\n")
    (entry / "addons" / name).mkdir(parents=True)
    (entry / "addons" / name / "plugin.cfg").write_text(f"[plugin]\nname={name}\n")


class _FailingCopy(PythonCopyStrategy):
    """Copies normally except into the install directories of the given addons."""

    def __init__(self, failing: set[str]):
        self._failing = failing

    def copy(self, source: Path, dest: Path, cwd: Path) -> None:
        if dest.name in self._failing:
            raise PermissionError(13, "Permission denied", str(dest))
        super().copy(source, dest, cwd)


@pytest.fixture
def cloning_runner(runner: FakeRunner) -> FakeRunner:
    runner.on("git", "clone", effect=_fake_clone)
    return runner


@pytest.fixture
def installer(project_with_addons: Project, cloning_runner: FakeRunner) -> AddonInstaller:
    repo = AddonRepo(runner=cloning_runner, copy_strategy=project_with_addons.copy_strategy)
    return AddonInstaller(project_with_addons, repo)


class TestInstallSummary:
    """Tests for InstallSummary."""

    def test_counts(self):
        summary = InstallSummary(
            results=[
                InstallResult("foo", "v1.0", True),
                InstallResult("bar", "main", False, "boom"),
            ]
        )

        assert summary.success_count == 1
        assert summary.failure_count == 1
        assert not summary.all_successful

    def test_empty_is_successful(self):
        assert InstallSummary().all_successful


class TestAddonInstaller:
    """Tests for AddonInstaller."""

    def test_installs_all_configured_addons(
        self, installer: AddonInstaller, project_with_addons: Project, runner: FakeRunner
    ):
        """Every addon is cached and copied, in configuration order."""
        summary = installer.install()

        assert summary.all_successful
        assert [r.addon_name for r in summary.results] == ["foo", "bar"]
        assert summary.results[0].message == "Installed foo (v1.0)"

        addons_root = project_with_addons.paths.addons_root
        assert (addons_root / "foo" / "README.md").exists()
        assert (addons_root / "bar" / "plugin.cfg").exists()
        assert not (addons_root / "bar" / "README.md").exists()
        assert len(runner.calls_with("clone")) == 2

    def test_installs_selected_addons(self, installer: AddonInstaller, runner: FakeRunner):
        """Only the named addons are processed."""
        summary = installer.install(["bar"])

        assert [r.addon_name for r in summary.results] == ["bar"]
        assert [c.args[-1] for c in runner.calls_with("clone")] == ["bar"]

    def test_unknown_name_raises(self, installer: AddonInstaller, runner: FakeRunner):
        """Requesting an unconfigured addon fails before any work."""
        with pytest.raises(AddonError, match="Addon not configured: baz"):
            installer.install(["foo", "baz"])

        assert runner.calls == []

    def test_parallel_install_keeps_order(
        self, installer: AddonInstaller, project_with_addons: Project
    ):
        """Parallel installs report results in configuration order."""
        summary = installer.install(jobs=4)

        assert summary.all_successful
        assert [r.addon_name for r in summary.results] == ["foo", "bar"]
        assert (project_with_addons.paths.addons_root / "foo").is_dir()
        assert (project_with_addons.paths.addons_root / "bar").is_dir()

    def test_conflict_is_reported_and_others_continue(
        self,
        installer: AddonInstaller,
        project_with_addons: Project,
        runner: FakeRunner,
    ):
        """A modified install is kept and the remaining addons still install."""
        foo_dir = project_with_addons.paths.install_path("foo")
        (foo_dir / ".git").mkdir(parents=True)
        (foo_dir / "local.gd").write_text("# my change\n")
        runner.on("git", "status", "--porcelain", cwd=foo_dir, stdout="?? local.gd\n")

        summary = installer.install()

        foo, bar = summary.results
        assert not foo.success
        assert foo.conflict
        assert "foo" in foo.message
        assert (foo_dir / "local.gd").exists()
        assert bar.success
        assert summary.failure_count == 1

    def test_command_failure_is_recorded(
        self, installer: AddonInstaller, runner: FakeRunner
    ):
        """Git failures become failed results instead of exceptions."""
        runner.on("git", "checkout", exit_code=1, stderr="error: pathspec 'v1.0' did not match")

        summary = installer.install(["foo"])

        result = summary.results[0]
        assert not result.success
        assert not result.conflict
        assert "did not match" in result.message

    def test_filesystem_failure_is_recorded(
        self, project_with_addons: Project, cloning_runner: FakeRunner
    ):
        """OS errors while copying fail one addon and the others still install."""
        repo = AddonRepo(runner=cloning_runner, copy_strategy=_FailingCopy({"foo"}))

        summary = AddonInstaller(project_with_addons, repo).install(jobs=2)

        foo, bar = summary.results
        assert not foo.success
        assert not foo.conflict
        assert "Permission denied" in foo.message
        assert bar.success
        assert (project_with_addons.paths.addons_root / "bar" / "plugin.cfg").exists()

    def test_no_addons(self, temp_project: Path, runner: FakeRunner):
        """An empty configuration installs nothing."""
        project = Project.init(temp_project)

        summary = AddonInstaller(project, AddonRepo(runner=runner)).install()

        assert summary.results == []
        assert runner.calls == []

"""Shared fixtures for Coop tests."""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml

from coop.config.schemas import AddonSpec
from coop.core.project import AddonPaths, Project
from coop.testing import FakeRunner


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="coop_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def temp_project(temp_dir: Path) -> Path:
    """Create a temporary project directory."""
    project_dir = temp_dir / "test-project"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def paths(temp_project: Path) -> AddonPaths:
    """Engine paths inside the temporary project."""
    return AddonPaths(
        project_root=temp_project,
        addons_root=temp_project / "addons",
        cache_root=temp_project / ".addons",
    )


@pytest.fixture
def runner() -> FakeRunner:
    """A recording command runner."""
    return FakeRunner()


@pytest.fixture
def foo_spec() -> AddonSpec:
    """The addon from the basic install scenario."""
    return AddonSpec(
        name="foo",
        url="https://example.com/foo.git",
        checkout="v1.0",
        subfolder="/",
    )


@pytest.fixture
def populated_cache_entry(paths: AddonPaths) -> Path:
    """A cache entry for 'foo' with a nested addon folder and git metadata."""
    entry = paths.cache_path("foo")
    (entry / ".git").mkdir(parents=True)
    (entry / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (entry / "README.md").write_text("# foo\n")
    (entry / "addons" / "foo").mkdir(parents=True)
    (entry / "addons" / "foo" / "plugin.cfg").write_text("[plugin]\nname=foo\n")
    return entry


@pytest.fixture
def project_with_addons(temp_project: Path) -> Project:
    """Project with two addons configured in addons.yaml."""
    config = {
        "path": "addons",
        "cache": ".addons",
        "copy_strategy": "python",
        "addons": {
            "foo": {"url": "https://example.com/foo.git", "checkout": "v1.0"},
            "bar": {
                "url": "https://example.com/bar.git",
                "checkout": "main",
                "subfolder": "addons/bar",
            },
        },
    }
    (temp_project / "addons.yaml").write_text(yaml.safe_dump(config, sort_keys=False))
    return Project.load(temp_project)

"""Project model representing a Coop-managed project."""

from dataclasses import dataclass
from pathlib import Path

from coop.config.parser import (
    CONFIG_FILENAMES,
    find_config_file,
    find_project_root,
    load_project_config,
    save_project_config,
)
from coop.config.schemas import AddonSpec, CopyStrategyName, ProjectConfig


@dataclass(frozen=True)
class AddonPaths:
    """Directories the addon engine works in."""

    project_root: Path
    addons_root: Path  # Installed addons
    cache_root: Path  # Cached git clones

    def cache_path(self, name: str) -> Path:
        """Get the cache entry directory for an addon."""
        return self.cache_root / name

    def install_path(self, name: str) -> Path:
        """Get the install directory for an addon."""
        return self.addons_root / name


class Project:
    """Represents a Coop-managed project.

    A project is defined by its addons.yaml (or addons.json) configuration file.
    """

    def __init__(self, root: Path, config: ProjectConfig, config_path: Path | None = None):
        """Initialize a Project.

        Args:
            root: Path to the project root directory
            config: Parsed project configuration
            config_path: Path of the file the configuration was loaded from
        """
        self._root = root.resolve()
        self._config = config
        self._config_path = config_path or self._root / CONFIG_FILENAMES[0]

    @classmethod
    def load(cls, path: Path | None = None) -> "Project":
        """Load a project from disk.

        Args:
            path: Path to the project root, or None to search from cwd

        Returns:
            Loaded Project instance

        Raises:
            FileNotFoundError: If no project is found
        """
        if path is None:
            path = find_project_root()
            if path is None:
                raise FileNotFoundError(
                    "No addons.yaml or addons.json found in current directory "
                    "or any parent directory"
                )
        else:
            path = path.resolve()

        config_path = find_config_file(path)
        if config_path is None:
            raise FileNotFoundError(f"No addons.yaml or addons.json found in {path}")

        config = load_project_config(config_path)
        return cls(path, config, config_path)

    @classmethod
    def init(cls, path: Path) -> "Project":
        """Initialize a new project with an empty addons.yaml.

        Args:
            path: Path to the project root directory

        Returns:
            New Project instance

        Raises:
            FileExistsError: If a configuration file already exists
        """
        path = path.resolve()
        existing = find_config_file(path)
        if existing is not None:
            raise FileExistsError(f"Project already initialized: {existing}")

        project = cls(path, ProjectConfig())
        project.save()
        return project

    def save(self) -> None:
        """Save the project configuration to disk."""
        save_project_config(self._config_path, self._config)

    @property
    def root(self) -> Path:
        """Get the project root directory."""
        return self._root

    @property
    def config(self) -> ProjectConfig:
        """Get the underlying configuration."""
        return self._config

    @property
    def config_path(self) -> Path:
        """Get the configuration file path."""
        return self._config_path

    @property
    def copy_strategy(self) -> CopyStrategyName:
        return self._config.copy_strategy

    @property
    def paths(self) -> AddonPaths:
        """Get the engine paths, resolved against the project root."""
        return AddonPaths(
            project_root=self._root,
            addons_root=(self._root / self._config.path).resolve(),
            cache_root=(self._root / self._config.cache).resolve(),
        )

    @property
    def addons(self) -> list[AddonSpec]:
        """Get the configured addons, in configuration order."""
        return self._config.get_addon_specs()

    def get_addon(self, name: str) -> AddonSpec | None:
        """Get the spec for a configured addon.

        Args:
            name: Addon name

        Returns:
            AddonSpec or None if not configured
        """
        entry = self._config.addons.get(name)
        if entry is None:
            return None
        return AddonSpec.from_entry(name, entry)

    def __repr__(self) -> str:
        return f"Project(root={self._root!r}, config={self._config_path.name!r})"

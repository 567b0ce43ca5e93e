"""Project model representing the host project being modified."""

from pathlib import Path

from splice.config.parser import (
    CONFIG_FILE,
    find_project_root,
    load_package_manifest,
    load_project_config,
    save_project_config,
)
from splice.config.schemas import PackageManifest, ProjectConfig
from splice.utils.filesystem import resolve_project_path


class Project:
    """Represents a host project directory.

    A project is identified by its root directory. ``splice.yaml`` is
    optional; ``package.json`` supplies the dependencies it already declares.
    """

    def __init__(
        self,
        root: Path,
        config: ProjectConfig | None = None,
        package_manifest: PackageManifest | None = None,
    ):
        """Initialize a Project.

        Args:
            root: Path to the project root directory
            config: Parsed project configuration (defaults if omitted)
            package_manifest: Parsed package.json (empty if omitted)
        """
        self._root = root.resolve()
        self._config = config or ProjectConfig()
        self._package_manifest = package_manifest or PackageManifest()

    @classmethod
    def load(cls, path: Path | None = None) -> "Project":
        """Load a project from disk.

        Args:
            path: Path to the project root, or None to search from cwd

        Returns:
            Loaded Project instance

        Raises:
            FileNotFoundError: If no project is found
            ConfigError: If splice.yaml or package.json is invalid
        """
        if path is None:
            path = find_project_root()
            if path is None:
                raise FileNotFoundError(
                    "No splice.yaml or package.json found in current directory "
                    "or any parent directory"
                )
        else:
            path = path.resolve()
            if not path.is_dir():
                raise FileNotFoundError(f"Project directory does not exist: {path}")

        return cls(path, load_project_config(path), load_package_manifest(path))

    @classmethod
    def init(cls, path: Path, config: ProjectConfig | None = None) -> "Project":
        """Write a splice.yaml into ``path``.

        Raises:
            FileExistsError: If splice.yaml already exists
        """
        path = path.resolve()
        config_path = path / CONFIG_FILE
        if config_path.exists():
            raise FileExistsError(f"Project already initialized: {config_path}")

        project = cls(path, config or ProjectConfig(), load_package_manifest(path))
        project.save()
        return project

    def save(self) -> None:
        """Save the project configuration to disk."""
        save_project_config(self._root, self._config)

    @property
    def root(self) -> Path:
        """Get the project root directory."""
        return self._root

    @property
    def config(self) -> ProjectConfig:
        """Get the underlying configuration."""
        return self._config

    @property
    def package_manifest(self) -> PackageManifest:
        return self._package_manifest

    def declared_dependencies(self) -> set[str]:
        """Package names already declared in package.json."""
        return self._package_manifest.declared()

    def resolve_path(self, file_path: str | Path) -> Path:
        """Resolve a plan path against the project root.

        Absolute paths are kept as they are.
        """
        return resolve_project_path(self._root, file_path)

    def __repr__(self) -> str:
        return f"Project(root={self._root!r})"

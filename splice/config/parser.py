"""Configuration and plan file parsing utilities."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from splice.config.schemas import (
    ConfirmationResult,
    InstallationPlan,
    PackageManifest,
    ProjectConfig,
)

CONFIG_FILE = "splice.yaml"
PACKAGE_MANIFEST_FILE = "package.json"


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def load_json(path: Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e

    if not isinstance(result, dict):
        raise ConfigError(f"JSON file must contain an object: {path}", path)
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
            if result is None:
                return {}
            if not isinstance(result, dict):
                raise ConfigError(f"YAML file must contain a mapping: {path}", path)
            return result
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def save_yaml(path: Path, data: dict[str, Any]) -> None:
    """Save data to a YAML file.

    Args:
        path: Path to write to
        data: Data to serialize
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_document(path: Path) -> dict[str, Any]:
    """Load a JSON or YAML document, chosen by file extension."""
    if path.suffix.lower() in (".yaml", ".yml"):
        return load_yaml(path)
    return load_json(path)


def load_project_config(project_root: Path) -> ProjectConfig:
    """Load project configuration from splice.yaml.

    A missing file yields the default configuration.

    Args:
        project_root: Path to the project root directory

    Returns:
        Parsed ProjectConfig

    Raises:
        ConfigError: If the file exists but is invalid
    """
    config_path = project_root / CONFIG_FILE
    if not config_path.exists():
        return ProjectConfig()

    data = load_yaml(config_path)

    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid project config: {e}", config_path) from e


def save_project_config(project_root: Path, config: ProjectConfig) -> None:
    """Save project configuration to splice.yaml.

    Args:
        project_root: Path to the project root directory
        config: ProjectConfig to save
    """
    save_yaml(project_root / CONFIG_FILE, config.model_dump(exclude_none=True))


def load_package_manifest(project_root: Path) -> PackageManifest:
    """Load the host project's package.json.

    A project without package.json declares no dependencies.

    Raises:
        ConfigError: If package.json exists but is invalid
    """
    manifest_path = project_root / PACKAGE_MANIFEST_FILE
    if not manifest_path.exists():
        return PackageManifest()

    data = load_json(manifest_path)

    try:
        return PackageManifest.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid package manifest: {e}", manifest_path) from e


def load_plan(path: Path) -> InstallationPlan:
    """Load an installation plan from a JSON or YAML file.

    The file may hold either a bare plan or a full confirmation document,
    in which case its ``plan`` entry is used.

    Raises:
        ConfigError: If the file is missing or invalid
    """
    data = load_document(path)
    if "plan" in data and isinstance(data["plan"], dict):
        data = data["plan"]

    try:
        return InstallationPlan.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installation plan: {e}", path) from e


def load_confirmation(path: Path) -> ConfirmationResult:
    """Load a confirmation document (approved flag, selected items, plan).

    Raises:
        ConfigError: If the file is missing or invalid
    """
    data = load_document(path)

    try:
        return ConfirmationResult.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid confirmation: {e}", path) from e


def find_project_root(start_path: Path | None = None) -> Path | None:
    """Find the project root by looking for splice.yaml or package.json.

    Args:
        start_path: Directory to start searching from (defaults to cwd)

    Returns:
        Path to project root, or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()
    while True:
        if (current / CONFIG_FILE).exists() or (current / PACKAGE_MANIFEST_FILE).exists():
            return current
        if current == current.parent:
            return None
        current = current.parent

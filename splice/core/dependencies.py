"""Dependency collection and the package manager install boundary."""

import logging
import os
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from splice.config.schemas import InstallationPlan, PackageManagerName
from splice.core.errors import DependencyInstallError
from splice.core.models import DependencySet
from splice.core.planner import resolve_item
from splice.utils.package_manager import (
    build_install_command,
    detect_package_manager,
    is_package_manager_available,
    supports_legacy_peer_deps,
)

logger = logging.getLogger("splice.installer")


@dataclass
class InstallOptions:
    """Options passed through to the package manager invocation."""

    package_manager: PackageManagerName | None = None
    legacy_peer_deps: bool = False
    extra_args: list[str] = field(default_factory=list)
    yes: bool = False


def collect_dependencies(
    plan: InstallationPlan,
    selected_items: list[str],
    declared: Iterable[str] = (),
) -> DependencySet:
    """Compute the packages implied by the selected plan items.

    Args:
        plan: The approved plan
        selected_items: Item identifiers chosen for this run
        declared: Package names the host project already declares

    Returns:
        DependencySet of packages still missing from the host project
    """
    runtime: set[str] = set(plan.dependencies)
    dev: set[str] = set(plan.dev_dependencies)

    for item_id in selected_items:
        item = resolve_item(plan, item_id)
        if item is None:
            continue
        runtime.update(item.recommendation.dependencies)
        dev.update(item.recommendation.dev_dependencies)

    already = set(declared)
    runtime -= already
    # A package needed at runtime must not also go to devDependencies
    dev -= already | runtime

    return DependencySet(
        dependencies=tuple(sorted(runtime)),
        dev_dependencies=tuple(sorted(dev)),
    )


def _run_install(cmd: list[str], packages: list[str], cwd: Path, yes: bool) -> None:
    env = dict(os.environ)
    if yes:
        env["CI"] = "1"

    logger.debug("Running install command: %s", " ".join(cmd))
    try:
        subprocess.run(cmd, cwd=cwd, env=env, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        logger.error("Install command failed: %s - %s", " ".join(cmd), stderr)
        raise DependencyInstallError(
            f"Failed to install dependencies: {' '.join(cmd)}\n{stderr}".rstrip(),
            packages=packages,
            returncode=e.returncode,
            stderr=stderr,
        ) from e
    except OSError as e:
        raise DependencyInstallError(
            f"Failed to install dependencies: could not run {cmd[0]}: {e}",
            packages=packages,
        ) from e


def install_dependencies(
    deps: DependencySet,
    project_root: Path,
    options: InstallOptions | None = None,
) -> DependencySet:
    """Install a dependency set with the project's package manager.

    Runtime packages are installed first, then development packages.

    Args:
        deps: Packages to install
        project_root: Directory to run the package manager in
        options: Package manager selection and flags

    Returns:
        The dependency set that was installed

    Raises:
        DependencyInstallError: If the package manager is missing or fails
    """
    options = options or InstallOptions()
    if deps.is_empty():
        logger.info("No dependencies to install")
        return deps

    manager = options.package_manager or detect_package_manager(project_root)
    if not is_package_manager_available(manager):
        raise DependencyInstallError(
            f"Failed to install dependencies: {manager} is not installed or not in PATH",
            packages=deps.all(),
        )
    if options.legacy_peer_deps and not supports_legacy_peer_deps(manager):
        logger.debug("%s has no legacy peer deps mode, ignoring the flag", manager)

    batches = [(list(deps.dependencies), False), (list(deps.dev_dependencies), True)]
    for packages, dev in batches:
        if not packages:
            continue
        cmd = build_install_command(
            manager,
            packages,
            dev=dev,
            legacy_peer_deps=options.legacy_peer_deps,
            extra_args=options.extra_args,
        )
        kind = "dev dependencies" if dev else "dependencies"
        logger.info("Installing %d %s with %s", len(packages), kind, manager)
        _run_install(cmd, packages, project_root, options.yes)

    return deps

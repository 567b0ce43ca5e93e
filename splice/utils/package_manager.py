"""JavaScript package manager detection and command construction."""

import shutil
from pathlib import Path

from splice.config.schemas import PackageManagerName

# Checked in order; the first lockfile found decides.
LOCKFILES: list[tuple[str, PackageManagerName]] = [
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
]

INSTALL_COMMANDS: dict[PackageManagerName, list[str]] = {
    "npm": ["install"],
    "yarn": ["add"],
    "pnpm": ["add"],
    "bun": ["add"],
}

DEV_FLAGS: dict[PackageManagerName, str] = {
    "npm": "--save-dev",
    "yarn": "--dev",
    "pnpm": "--save-dev",
    "bun": "--dev",
}


def detect_package_manager(project_root: Path) -> PackageManagerName:
    """Detect the package manager from the lockfile in the project root.

    Returns:
        The package manager name, "npm" when no lockfile is present
    """
    for lockfile, name in LOCKFILES:
        if (project_root / lockfile).exists():
            return name
    return "npm"


def is_package_manager_available(name: PackageManagerName) -> bool:
    """Check whether the package manager executable is on PATH."""
    return shutil.which(name) is not None


def supports_legacy_peer_deps(name: PackageManagerName) -> bool:
    """Only npm understands --legacy-peer-deps."""
    return name == "npm"


def build_install_command(
    name: PackageManagerName,
    packages: list[str],
    dev: bool = False,
    legacy_peer_deps: bool = False,
    extra_args: list[str] | None = None,
) -> list[str]:
    """Build the argv for installing ``packages``.

    Example: build_install_command("npm", ["zod"], dev=True)
        -> ["npm", "install", "--save-dev", "zod"]
    """
    cmd = [name, *INSTALL_COMMANDS[name]]
    if dev:
        cmd.append(DEV_FLAGS[name])
    if legacy_peer_deps and supports_legacy_peer_deps(name):
        cmd.append("--legacy-peer-deps")
    cmd.extend(extra_args or [])
    cmd.extend(packages)
    return cmd

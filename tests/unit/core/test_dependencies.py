"""Tests for splice.core.dependencies module."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from splice.config.schemas import InstallationPlan
from splice.core.dependencies import (
    InstallOptions,
    collect_dependencies,
    install_dependencies,
)
from splice.core.errors import DependencyInstallError
from splice.core.models import DependencySet


class TestCollectDependencies:
    """Tests for collect_dependencies function."""

    def test_plan_level_and_selected_items(self, sample_plan: InstallationPlan):
        """Plan-level deps always apply; item deps only when selected."""
        deps = collect_dependencies(sample_plan, ["tool-0"])

        assert deps.dependencies == ("@tambo-ai/react", "zod")
        assert deps.dev_dependencies == ("@types/node",)

    def test_unselected_items_contribute_nothing(self, sample_plan: InstallationPlan):
        """zod belongs to the tool, which is not selected."""
        deps = collect_dependencies(sample_plan, ["component-0"])

        assert "zod" not in deps.all()

    def test_declared_packages_are_excluded(self, sample_plan: InstallationPlan):
        """Packages in package.json are not installed again."""
        deps = collect_dependencies(
            sample_plan, ["tool-0"], declared={"@tambo-ai/react", "@types/node"}
        )

        assert deps.dependencies == ("zod",)
        assert deps.dev_dependencies == ()

    def test_runtime_wins_over_dev(self):
        """A package needed at runtime is not also installed as dev."""
        plan = InstallationPlan(dependencies=["zod"], dev_dependencies=["zod", "vitest"])

        deps = collect_dependencies(plan, [])

        assert deps.dependencies == ("zod",)
        assert deps.dev_dependencies == ("vitest",)

    def test_duplicates_collapse(self, sample_plan: InstallationPlan):
        """A package named by several items is installed once."""
        deps = collect_dependencies(sample_plan, ["provider-setup", "tool-0", "tool-0"])

        assert deps.dependencies.count("@tambo-ai/react") == 1

    def test_empty_plan(self):
        """An empty plan needs nothing."""
        assert collect_dependencies(InstallationPlan(), []).is_empty()


class TestInstallDependencies:
    """Tests for install_dependencies function."""

    @pytest.fixture
    def deps(self) -> DependencySet:
        return DependencySet(dependencies=("zod",), dev_dependencies=("@types/node",))

    def test_empty_set_runs_nothing(self, temp_dir: Path):
        """No packages means no subprocess."""
        with patch("splice.core.dependencies.subprocess.run") as mock_run:
            result = install_dependencies(DependencySet(), temp_dir)

        assert result.is_empty()
        mock_run.assert_not_called()

    def test_runtime_then_dev(self, temp_dir: Path, deps: DependencySet):
        """Runtime and dev packages are installed in two invocations."""
        with (
            patch("splice.core.dependencies.is_package_manager_available", return_value=True),
            patch("splice.core.dependencies.subprocess.run") as mock_run,
        ):
            result = install_dependencies(deps, temp_dir, InstallOptions(package_manager="npm"))

        assert result == deps
        commands = [c.args[0] for c in mock_run.call_args_list]
        assert commands == [
            ["npm", "install", "zod"],
            ["npm", "install", "--save-dev", "@types/node"],
        ]
        assert mock_run.call_args.kwargs["cwd"] == temp_dir

    def test_detects_manager_from_lockfile(self, temp_dir: Path):
        """Without an explicit manager the lockfile decides."""
        (temp_dir / "pnpm-lock.yaml").write_text("")

        with (
            patch("splice.core.dependencies.is_package_manager_available", return_value=True),
            patch("splice.core.dependencies.subprocess.run") as mock_run,
        ):
            install_dependencies(DependencySet(dependencies=("zod",)), temp_dir)

        assert mock_run.call_args.args[0] == ["pnpm", "add", "zod"]

    def test_legacy_peer_deps_and_yes(self, temp_dir: Path):
        """npm gets --legacy-peer-deps; --yes runs non-interactively."""
        options = InstallOptions(package_manager="npm", legacy_peer_deps=True, yes=True)

        with (
            patch("splice.core.dependencies.is_package_manager_available", return_value=True),
            patch("splice.core.dependencies.subprocess.run") as mock_run,
        ):
            install_dependencies(DependencySet(dependencies=("zod",)), temp_dir, options)

        assert mock_run.call_args.args[0] == ["npm", "install", "--legacy-peer-deps", "zod"]
        assert mock_run.call_args.kwargs["env"]["CI"] == "1"

    def test_missing_package_manager(self, temp_dir: Path, deps: DependencySet):
        """A package manager that is not on PATH fails before running anything."""
        with (
            patch("splice.core.dependencies.is_package_manager_available", return_value=False),
            patch("splice.core.dependencies.subprocess.run") as mock_run,
        ):
            with pytest.raises(DependencyInstallError, match="not installed or not in PATH"):
                install_dependencies(deps, temp_dir, InstallOptions(package_manager="bun"))

        mock_run.assert_not_called()

    def test_failing_install(self, temp_dir: Path, deps: DependencySet):
        """A non-zero exit becomes DependencyInstallError with stderr attached."""
        failure = subprocess.CalledProcessError(
            1, ["npm", "install", "zod"], stderr="npm ERR! 404 Not Found"
        )

        with (
            patch("splice.core.dependencies.is_package_manager_available", return_value=True),
            patch("splice.core.dependencies.subprocess.run", side_effect=failure),
        ):
            with pytest.raises(DependencyInstallError) as exc_info:
                install_dependencies(deps, temp_dir, InstallOptions(package_manager="npm"))

        error = exc_info.value
        assert error.returncode == 1
        assert error.packages == ["zod"]
        assert "404 Not Found" in error.stderr
        assert str(error).startswith("Failed to install dependencies")
        assert error.__cause__ is failure

    def test_executable_vanishes(self, temp_dir: Path, deps: DependencySet):
        """An OSError launching the manager is reported as an install failure."""
        with (
            patch("splice.core.dependencies.is_package_manager_available", return_value=True),
            patch(
                "splice.core.dependencies.subprocess.run",
                side_effect=FileNotFoundError(2, "No such file"),
            ),
        ):
            with pytest.raises(DependencyInstallError, match="could not run npm"):
                install_dependencies(deps, temp_dir, InstallOptions(package_manager="npm"))

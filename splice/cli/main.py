"""Main CLI application for Splice."""

import logging
from pathlib import Path
from typing import Annotated, get_args

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from splice import __version__
from splice.config.parser import ConfigError, load_plan
from splice.config.schemas import (
    ConfirmationResult,
    InstallationPlan,
    PackageManagerName,
    ProjectConfig,
)
from splice.core.dependencies import InstallOptions
from splice.core.errors import ExecutionError, ExecutionRejectedError
from splice.core.executor import CodeExecutor, RunState
from splice.core.models import ExecutionResult
from splice.core.planner import resolve_item
from splice.core.project import Project
from splice.template.generator import TemplateContentGenerator

app = typer.Typer(
    name="splice",
    help="Apply approved multi-file code changes to a project, all or nothing",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

logger = logging.getLogger("splice")


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setLevel(level)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def get_project(path: Path | None = None) -> Project:
    """Get the current project, raising an error if not found."""
    try:
        return Project.load(path)
    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def get_plan(plan_file: Path) -> InstallationPlan:
    """Load a plan file, exiting with an error if it is invalid."""
    try:
        return load_plan(plan_file)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def plan_item_ids(plan: InstallationPlan) -> list[str]:
    """All selectable item identifiers in plan order."""
    ids: list[str] = []
    if plan.provider_setup is not None:
        ids.append("provider-setup")
    ids += [f"component-{i}" for i in range(len(plan.component_recommendations))]
    ids += [f"tool-{i}" for i in range(len(plan.tool_recommendations))]
    ids += [f"interactable-{i}" for i in range(len(plan.interactable_recommendations))]
    if plan.chat_widget_setup is not None:
        ids.append("chat-widget")
    return ids


def print_summary(result: ExecutionResult, project: Project) -> None:
    """Print the outcome of a successful run."""

    def rel(path: Path) -> str:
        try:
            return escape(str(path.relative_to(project.root)))
        except ValueError:
            return escape(str(path))

    print_success("Execution completed successfully")
    console.print("\nSummary:")
    console.print(f"  Files created: {len(result.files_created)}")
    for path in result.files_created:
        console.print(f"    [green]+[/green] {rel(path)}")
    console.print(f"  Files modified: {len(result.files_modified)}")
    for path in result.files_modified:
        console.print(f"    [yellow]~[/yellow] {rel(path)}")
    console.print(f"  Dependencies installed: {len(result.dependencies_installed)}")

    if result.errors:
        console.print()
        for error in result.errors:
            print_warning(f"{rel(error.file_path)}: {error.issue} - {escape(error.suggestion)}")


@app.callback()
def callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug)",
        ),
    ] = 0,
) -> None:
    """Splice - transactional installer for approved code changes."""
    setup_logging(verbose)


@app.command()
def version() -> None:
    """Show the Splice version."""
    console.print(f"splice {__version__}")


@app.command()
def init(
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Project directory (defaults to current directory)"),
    ] = None,
    package_manager: Annotated[
        str | None,
        typer.Option("--package-manager", help="npm, yarn, pnpm or bun (detected when omitted)"),
    ] = None,
    legacy_peer_deps: Annotated[
        bool,
        typer.Option("--legacy-peer-deps", help="Install with relaxed peer dependency resolution"),
    ] = False,
) -> None:
    """Create a splice.yaml in the project directory."""
    path = Path.cwd() if path is None else path.resolve()

    if not path.is_dir():
        print_error(f"Directory does not exist: {path}")
        raise typer.Exit(1)

    # Validate package manager
    available = get_args(PackageManagerName)
    if package_manager is not None and package_manager not in available:
        print_error(f"Unknown package manager: {package_manager}")
        console.print(f"Available: {', '.join(available)}")
        raise typer.Exit(1)

    try:
        Project.init(
            path,
            ProjectConfig(package_manager=package_manager, legacy_peer_deps=legacy_peer_deps),
        )
    except FileExistsError as e:
        print_error(f"Project already initialized in {path}")
        raise typer.Exit(1) from e
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    print_success(f"Created {path / 'splice.yaml'}")


@app.command()
def items(
    plan_file: Annotated[Path, typer.Argument(help="Plan file (JSON or YAML)")],
) -> None:
    """List the selectable items of a plan."""
    plan = get_plan(plan_file)
    item_ids = plan_item_ids(plan)

    if not item_ids:
        console.print("Plan has no items")
        return

    table = Table(title="Plan items")
    table.add_column("Item", style="cyan")
    table.add_column("Kind")
    table.add_column("Target")
    table.add_column("Dependencies")

    for item_id in item_ids:
        item = resolve_item(plan, item_id)
        if item is None:
            continue
        rec = item.recommendation
        deps = [*rec.dependencies, *(f"{d} (dev)" for d in rec.dev_dependencies)]
        table.add_row(item_id, item.kind.value, escape(rec.file_path), ", ".join(deps) or "-")

    console.print(table)


@app.command()
def apply(
    plan_file: Annotated[Path, typer.Argument(help="Plan file (JSON or YAML)")],
    select: Annotated[
        list[str] | None,
        typer.Option("--select", "-s", help="Item to apply (repeatable, defaults to all)"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Apply without asking for confirmation"),
    ] = False,
    legacy_peer_deps: Annotated[
        bool | None,
        typer.Option(
            "--legacy-peer-deps/--no-legacy-peer-deps",
            help="Relaxed peer dependency resolution (overrides splice.yaml)",
        ),
    ] = None,
    skip_install: Annotated[
        bool,
        typer.Option("--skip-install", help="Write files but do not install dependencies"),
    ] = False,
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Project directory (defaults to search from cwd)"),
    ] = None,
) -> None:
    """Apply a plan to the project.

    Backs up every file it will overwrite, writes the files, installs the
    dependencies, and restores the project if any step fails.
    """
    project = get_project(path)
    plan = get_plan(plan_file)

    selected = list(select) if select else plan_item_ids(plan)
    if not selected:
        console.print("Nothing to apply")
        return

    console.print(f"Applying {len(selected)} item(s) to {project.root}:")
    for item_id in selected:
        console.print(f"  - {item_id}")

    approved = yes or typer.confirm("Proceed?", default=True)
    confirmation = ConfirmationResult(approved=approved, selected_items=selected, plan=plan)

    if skip_install:
        project.config.install = False
    config = project.config
    options = InstallOptions(
        package_manager=config.package_manager,
        legacy_peer_deps=config.legacy_peer_deps if legacy_peer_deps is None else legacy_peer_deps,
        extra_args=list(config.install_args),
        yes=yes,
    )

    def on_progress(state: RunState, message: str) -> None:
        if state is RunState.ROLLING_BACK:
            print_warning(message)

    executor = CodeExecutor(
        project,
        TemplateContentGenerator(config.provider),
        install_options=options,
        on_progress=on_progress,
    )

    try:
        with console.status("Executing plan..."):
            result = executor.execute(confirmation)
    except ExecutionRejectedError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ExecutionError as e:
        error_console.print(e.format(), style="red", markup=False)
        raise typer.Exit(1) from e

    print_summary(result, project)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

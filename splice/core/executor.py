"""Code execution orchestrator.

This module contains the CodeExecutor which applies a confirmed plan to a
project: plan the file operations, back up what will be overwritten, write,
install dependencies and verify. Any failure after planning rolls the
project back before the classified error reaches the caller.
"""

import logging
from collections.abc import Callable
from enum import Enum

from splice.config.schemas import ConfirmationResult
from splice.core.backup import cleanup_backups
from splice.core.dependencies import InstallOptions, collect_dependencies, install_dependencies
from splice.core.errors import (
    ExecutionError,
    ExecutionRejectedError,
    FileOperationError,
    categorize_execution_error,
    format_execution_error,
)
from splice.core.models import BackupManifest, DependencySet, ExecutionResult, FileOperation
from splice.core.planner import ContentGenerator, GeneratorFunc, build_operations
from splice.core.project import Project
from splice.core.rollback import rollback
from splice.core.sequencer import backup_existing_files, write_operations
from splice.core.verifier import verify_execution

logger = logging.getLogger("splice.executor")


class RunState(str, Enum):
    """Stages of one execution run."""

    PLANNING = "planning"
    BACKING_UP = "backing-up"
    WRITING = "writing"
    INSTALLING = "installing"
    VERIFYING = "verifying"
    DONE = "done"
    ROLLING_BACK = "rolling-back"
    FAILED = "failed"


TRANSITIONS: dict[RunState, set[RunState]] = {
    RunState.PLANNING: {RunState.BACKING_UP, RunState.FAILED},
    RunState.BACKING_UP: {RunState.WRITING, RunState.ROLLING_BACK},
    RunState.WRITING: {RunState.INSTALLING, RunState.ROLLING_BACK},
    RunState.INSTALLING: {RunState.VERIFYING, RunState.ROLLING_BACK},
    RunState.VERIFYING: {RunState.DONE, RunState.ROLLING_BACK},
    RunState.ROLLING_BACK: {RunState.FAILED},
    RunState.DONE: set(),
    RunState.FAILED: set(),
}

STATE_MESSAGES = {
    RunState.PLANNING: "Preparing file changes...",
    RunState.BACKING_UP: "Creating backups...",
    RunState.WRITING: "Writing files...",
    RunState.INSTALLING: "Installing dependencies...",
    RunState.VERIFYING: "Verifying changes...",
    RunState.DONE: "Execution completed successfully",
    RunState.ROLLING_BACK: "Restoring backups...",
    RunState.FAILED: "Execution failed",
}

ProgressCallback = Callable[[RunState, str], None]


class CodeExecutor:
    """Applies a confirmed plan to a project with all-or-nothing safety.

    One executor instance runs one plan at a time; it assumes exclusive
    access to the project directory for the duration of the run.
    """

    def __init__(
        self,
        project: Project,
        generator: ContentGenerator | GeneratorFunc,
        install_options: InstallOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ):
        """Initialize the executor.

        Args:
            project: The project to modify
            generator: Produces file content for each selected item
            install_options: Overrides for the dependency install; defaults
                come from the project config
            on_progress: Called with each state change and a status line
        """
        self.project = project
        self.generator = generator
        self.install_options = install_options or InstallOptions(
            package_manager=project.config.package_manager,
            legacy_peer_deps=project.config.legacy_peer_deps,
            extra_args=list(project.config.install_args),
        )
        self.on_progress = on_progress
        self.state = RunState.PLANNING

    def _transition(self, state: RunState) -> None:
        if state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid state transition: {self.state.value} -> {state.value}")
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state
        logger.info(STATE_MESSAGES[state])
        if self.on_progress is not None:
            try:
                self.on_progress(state, STATE_MESSAGES[state])
            except Exception as e:
                logger.warning("Progress callback failed on %s: %s", state.value, e)

    def execute(self, confirmation: ConfirmationResult) -> ExecutionResult:
        """Execute a confirmed plan.

        Args:
            confirmation: Approval flag, selected items and the plan

        Returns:
            ExecutionResult; ``errors`` holds verification warnings

        Raises:
            ExecutionRejectedError: If the plan was not approved
            ExecutionError: If the run failed; the project has been rolled
                back and the original exception is chained
        """
        if not confirmation.approved:
            raise ExecutionRejectedError("Cannot execute: plan was not approved")

        self.state = RunState.PLANNING
        plan = confirmation.plan
        selected = confirmation.selected_items
        logger.info(STATE_MESSAGES[RunState.PLANNING])

        try:
            operations = build_operations(plan, selected, self.generator, self.project.root)
            deps = collect_dependencies(plan, selected, self.project.declared_dependencies())
        except Exception as e:
            # Nothing has touched the filesystem yet
            self._transition(RunState.FAILED)
            error = categorize_execution_error(e)
            logger.error(format_execution_error(error))
            raise error from e

        logger.info(
            "Planned %d file operation(s) and %d package(s)", len(operations), len(deps.all())
        )

        manifest = BackupManifest.create()
        written: list[FileOperation] = []

        try:
            self._transition(RunState.BACKING_UP)
            backup_existing_files(operations, manifest)

            self._transition(RunState.WRITING)
            written = write_operations(operations)

            self._transition(RunState.INSTALLING)
            installed = self._install(deps)
        except Exception as e:
            if isinstance(e, FileOperationError):
                written = e.completed
            raise self._fail(e, manifest, written) from _original(e)

        self._transition(RunState.VERIFYING)
        errors = verify_execution(operations) if self.project.config.verify else []

        cleanup_backups(manifest)
        self._transition(RunState.DONE)

        result = ExecutionResult(
            success=True,
            files_created=[op.file_path for op in operations if op.is_new],
            files_modified=[op.file_path for op in operations if not op.is_new],
            dependencies_installed=installed.all(),
            errors=errors,
        )
        logger.info(
            "Created %d, modified %d, installed %d, %d warning(s)",
            len(result.files_created),
            len(result.files_modified),
            len(result.dependencies_installed),
            len(result.errors),
        )
        return result

    def _install(self, deps: DependencySet) -> DependencySet:
        if not self.project.config.install:
            logger.info("Dependency install disabled, skipping %d package(s)", len(deps.all()))
            return DependencySet()
        return install_dependencies(deps, self.project.root, self.install_options)

    def _fail(
        self,
        err: BaseException,
        manifest: BackupManifest,
        written: list[FileOperation],
    ) -> ExecutionError:
        """Roll back, then classify the error that stopped the run."""
        self._transition(RunState.ROLLING_BACK)
        report = rollback(manifest, [op.file_path for op in written if op.is_new])
        if not report.clean:
            logger.error(
                "Could not fully roll back: %s", ", ".join(str(p) for p in report.failed)
            )

        self._transition(RunState.FAILED)
        error = categorize_execution_error(err)
        logger.error(format_execution_error(error))
        return error


def _original(err: BaseException) -> BaseException:
    if isinstance(err, FileOperationError):
        return err.cause
    return err

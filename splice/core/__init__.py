"""Core execution pipeline for Splice.

The public entry point is ``CodeExecutor``; the stage functions are
re-exported for callers that drive the pipeline themselves.
"""

from splice.core.backup import cleanup_backups, create_backup, restore_backups
from splice.core.dependencies import InstallOptions, collect_dependencies, install_dependencies
from splice.core.errors import (
    DependencyInstallError,
    ErrorCategory,
    ExecutionError,
    ExecutionRejectedError,
    FileOperationError,
    categorize_execution_error,
    format_execution_error,
)
from splice.core.executor import CodeExecutor, RunState
from splice.core.models import (
    BackupManifest,
    DependencySet,
    ExecutionResult,
    FileOperation,
    VerificationError,
)
from splice.core.planner import ItemKind, RecommendationDescriptor, build_operations
from splice.core.rollback import RollbackReport, rollback
from splice.core.sequencer import execute_file_operations
from splice.core.verifier import verify_execution

__all__ = [
    "BackupManifest",
    "CodeExecutor",
    "DependencyInstallError",
    "DependencySet",
    "ErrorCategory",
    "ExecutionError",
    "ExecutionRejectedError",
    "ExecutionResult",
    "FileOperation",
    "FileOperationError",
    "InstallOptions",
    "ItemKind",
    "RecommendationDescriptor",
    "RollbackReport",
    "RunState",
    "VerificationError",
    "build_operations",
    "categorize_execution_error",
    "cleanup_backups",
    "collect_dependencies",
    "create_backup",
    "execute_file_operations",
    "format_execution_error",
    "install_dependencies",
    "restore_backups",
    "rollback",
    "verify_execution",
]

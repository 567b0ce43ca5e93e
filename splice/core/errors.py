"""Error taxonomy and classification for execution failures.

Lower layers raise plain exceptions (``OSError``, ``DependencyInstallError``,
``FileOperationError``). The orchestrator is the one place that turns them
into a classified ``ExecutionError`` with suggestions for the user.
"""

import errno
from enum import Enum
from pathlib import Path

from splice.core.models import FileOperation


class ErrorCategory(str, Enum):
    """Reporting categories for execution problems."""

    FILESYSTEM = "filesystem"
    DEPENDENCY_INSTALL = "dependency-install"
    PERMISSION = "permission"
    VERIFICATION_WARNING = "verification-warning"
    UNKNOWN = "unknown"


class ExecutionError(Exception):
    """A classified, fatal execution failure.

    Raised by the orchestrator after rollback has been attempted. The
    triggering exception is kept in ``cause`` and chained as ``__cause__``.
    """

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        cause: BaseException | None = None,
        file_path: Path | None = None,
        suggestions: list[str] | None = None,
    ):
        self.category = category
        self.message = message
        self.cause = cause
        self.file_path = file_path
        self.suggestions = suggestions or []
        super().__init__(message)

    def format(self) -> str:
        """Render the user-facing message."""
        return format_execution_error(self)


class ExecutionRejectedError(Exception):
    """The plan was not approved, so nothing was executed."""


class DependencyInstallError(Exception):
    """The package manager failed to install dependencies."""

    def __init__(
        self,
        message: str,
        packages: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ):
        self.packages = packages or []
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class FileOperationError(Exception):
    """A write failed partway through a batch of operations."""

    def __init__(
        self,
        operation: FileOperation,
        completed: list[FileOperation],
        cause: BaseException,
    ):
        self.operation = operation
        self.completed = completed
        self.cause = cause
        super().__init__(f"Failed to write {operation.file_path}: {cause}")


_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM, errno.EROFS}
_INSTALL_HINTS = ("failed to install", "install failed", "npm err", "dependency")


def _permission_suggestions(file_path: Path | None) -> list[str]:
    suggestions = ["Check file and directory permissions"]
    if file_path is not None:
        suggestions.append(f"Run: chmod u+w {file_path}")
    suggestions.append("Check if file is locked by another process")
    return suggestions


def _filesystem_suggestions(err: OSError, file_path: Path | None) -> list[str]:
    if err.errno == errno.ENOSPC:
        return [
            "Free up disk space",
            "Check available space with: df -h",
            "Remove temporary files or unused dependencies",
        ]
    if err.errno == errno.ENOENT:
        parent = file_path.parent if file_path is not None else None
        return [
            "Parent directory does not exist",
            f"Check directory path: {parent}" if parent else "Check the target directory path",
            "Verify project structure is intact",
        ]
    return [
        "Check error message for details",
        "Verify file path and permissions",
        "Try running the command again",
    ]


def _install_suggestions() -> list[str]:
    return [
        "Check network connection",
        "Verify package name and version",
        "Try clearing package manager cache",
        "Check registry configuration",
    ]


def categorize_execution_error(
    err: BaseException, file_path: Path | None = None
) -> ExecutionError:
    """Classify a raw failure.

    Args:
        err: The exception that stopped the run
        file_path: Path involved in the failure, if known

    Returns:
        ExecutionError describing the category, cause and suggestions
    """
    if isinstance(err, ExecutionError):
        return err

    if isinstance(err, FileOperationError):
        file_path = file_path or err.operation.file_path
        return categorize_execution_error(err.cause, file_path)

    message = str(err) or err.__class__.__name__

    if isinstance(err, DependencyInstallError):
        return ExecutionError(
            ErrorCategory.DEPENDENCY_INSTALL,
            message,
            cause=err,
            suggestions=_install_suggestions(),
        )

    if isinstance(err, OSError):
        if file_path is None and err.filename:
            file_path = Path(err.filename)
        if isinstance(err, PermissionError) or err.errno in _PERMISSION_ERRNOS:
            return ExecutionError(
                ErrorCategory.PERMISSION,
                err.strerror or message,
                cause=err,
                file_path=file_path,
                suggestions=_permission_suggestions(file_path),
            )
        return ExecutionError(
            ErrorCategory.FILESYSTEM,
            err.strerror or message,
            cause=err,
            file_path=file_path,
            suggestions=_filesystem_suggestions(err, file_path),
        )

    lowered = message.lower()
    if any(hint in lowered for hint in _INSTALL_HINTS):
        return ExecutionError(
            ErrorCategory.DEPENDENCY_INSTALL,
            message,
            cause=err,
            suggestions=_install_suggestions(),
        )

    return ExecutionError(
        ErrorCategory.UNKNOWN,
        message,
        cause=err,
        file_path=file_path,
        suggestions=[
            "Check error message for details",
            "Verify file path and permissions",
            "Try running the command again",
        ],
    )


def format_execution_error(error: ExecutionError) -> str:
    """Format a classified error for display.

    Example:
        Execution failed during permission
          File: /app/layout.tsx
          Cause: Permission denied

        Suggestions:
          1. Check file and directory permissions
    """
    lines = [f"Execution failed during {error.category.value}"]
    if error.file_path is not None:
        lines.append(f"  File: {error.file_path}")
    lines.append(f"  Cause: {error.message}")

    if error.suggestions:
        lines.append("")
        lines.append("Suggestions:")
        for index, suggestion in enumerate(error.suggestions, start=1):
            lines.append(f"  {index}. {suggestion}")

    return "\n".join(lines)

"""Sequential execution of file operations."""

import logging

from splice.core.backup import create_backup
from splice.core.errors import FileOperationError
from splice.core.models import BackupManifest, FileOperation
from splice.utils.filesystem import write_file_atomic

logger = logging.getLogger("splice.sequencer")


def backup_existing_files(operations: list[FileOperation], manifest: BackupManifest) -> int:
    """Back up every target that existed when the plan was built.

    Returns:
        Number of backups recorded in the manifest

    Raises:
        OSError: If a backup cannot be written
    """
    for operation in operations:
        if not operation.is_new:
            create_backup(operation.file_path, manifest)
    return len(manifest)


def write_operations(operations: list[FileOperation]) -> list[FileOperation]:
    """Write operations strictly in order, stopping at the first failure.

    Returns:
        The operations that were written

    Raises:
        FileOperationError: On the first failing write; carries the
            operations completed before it
    """
    completed: list[FileOperation] = []
    for operation in operations:
        try:
            write_file_atomic(operation.file_path, operation.content)
        except Exception as e:
            logger.error("Write failed for %s: %s", operation.file_path, e)
            raise FileOperationError(operation, completed, e) from e
        completed.append(operation)
        logger.info(
            "%s %s",
            "Created" if operation.is_new else "Updated",
            operation.file_path,
        )
    return completed


def execute_file_operations(
    operations: list[FileOperation], manifest: BackupManifest
) -> list[FileOperation]:
    """Back up existing targets, then write every operation in order.

    All backups are taken before the first write so that any file that
    could need restoring already has a backup when a write fails. Rolling
    back is left to the caller.

    Args:
        operations: File operations in execution order
        manifest: Backup manifest of the current run

    Returns:
        The operations that were written

    Raises:
        OSError: If a backup fails (nothing has been written yet)
        FileOperationError: If a write fails
    """
    backup_existing_files(operations, manifest)
    return write_operations(operations)

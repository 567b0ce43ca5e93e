"""Post-write sanity checks.

Verification only reports. It never raises and never triggers a rollback;
the files are considered written once the sequencer has succeeded.
"""

import logging

from splice.core.models import FileOperation, VerificationError

logger = logging.getLogger("splice.verifier")


def verify_operation(operation: FileOperation) -> list[VerificationError]:
    """Check one written file."""
    path = operation.file_path
    if not path.is_file():
        return [
            VerificationError(
                file_path=path,
                issue="missing",
                suggestion="The file was not found after writing; re-run the installer",
            )
        ]

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [
            VerificationError(
                file_path=path,
                issue="unreadable",
                suggestion=f"Could not read the written file ({e}); check its encoding and permissions",
            )
        ]

    if not content.strip():
        return [
            VerificationError(
                file_path=path,
                issue="empty",
                suggestion="The file is empty; check the generated content",
            )
        ]

    return [
        VerificationError(
            file_path=path,
            issue="missing-marker",
            suggestion=f"File written but does not contain expected '{marker}'; review it manually",
        )
        for marker in operation.expected_markers
        if marker not in content
    ]


def verify_execution(operations: list[FileOperation]) -> list[VerificationError]:
    """Check every written file.

    Args:
        operations: Operations that were written

    Returns:
        Problems found, empty when everything looks right
    """
    errors: list[VerificationError] = []
    for operation in operations:
        errors.extend(verify_operation(operation))

    for error in errors:
        logger.warning("Verification: %s (%s)", error.file_path, error.issue)
    return errors

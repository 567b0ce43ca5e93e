"""Single-generation backups of files about to be overwritten.

Backups live next to the original as ``.<name>.backup.<timestamp>`` and are
tracked in a run-scoped ``BackupManifest`` that the caller passes in.
"""

import logging
import shutil
from pathlib import Path

from splice.core.models import BackupManifest

logger = logging.getLogger("splice.backup")


def backup_path_for(path: Path, manifest: BackupManifest) -> Path:
    """Backup location for ``path`` in this run."""
    return path.parent / f".{path.name}.backup.{manifest.timestamp}"


def create_backup(path: Path, manifest: BackupManifest) -> Path | None:
    """Back up a file before it is overwritten.

    Args:
        path: File that is about to be written
        manifest: Manifest of the current run

    Returns:
        The backup path, or None if there was nothing to back up

    Raises:
        OSError: If the existing file cannot be copied
    """
    if path in manifest.backups:
        return manifest.backups[path]
    if not path.is_file():
        return None

    backup = backup_path_for(path, manifest)
    shutil.copy2(path, backup)
    manifest.backups[path] = backup
    logger.debug("Backed up %s to %s", path, backup)
    return backup


def restore_backups(manifest: BackupManifest) -> list[Path]:
    """Copy every backup back onto its original path.

    Restoration is best effort: a missing backup or a failed copy is logged
    and skipped so that the remaining files still get restored.

    Returns:
        Original paths that were restored
    """
    restored: list[Path] = []
    for original, backup in reversed(list(manifest.backups.items())):
        if not backup.exists():
            logger.warning("Backup for %s is missing (%s), skipping", original, backup)
            continue
        try:
            original.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(backup, original)
        except OSError as e:
            logger.error("Could not restore %s from %s: %s", original, backup, e)
            continue
        restored.append(original)
        logger.debug("Restored %s from backup", original)
    return restored


def cleanup_backups(manifest: BackupManifest) -> None:
    """Delete every backup file and empty the manifest.

    Errors are logged and ignored; calling this twice is harmless.
    """
    for original, backup in manifest.backups.items():
        try:
            backup.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove backup of %s (%s): %s", original, backup, e)
    manifest.backups.clear()

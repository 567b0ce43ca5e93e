"""Undo a failed run: restore backups and remove files the run created."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from splice.core.backup import cleanup_backups, restore_backups
from splice.core.models import BackupManifest
from splice.utils.filesystem import remove_file

logger = logging.getLogger("splice.rollback")


@dataclass
class RollbackReport:
    """What a rollback managed to undo."""

    restored: list[Path] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.failed


def rollback(manifest: BackupManifest, created_files: Iterable[Path] = ()) -> RollbackReport:
    """Put the project back the way it was before the run.

    Backed-up files are restored, then files the run created are deleted,
    then the backups themselves are removed. Nothing here raises: rollback
    runs while another error is already propagating.

    Args:
        manifest: Backup manifest of the failed run
        created_files: Paths written by the run that did not exist before

    Returns:
        RollbackReport listing restored, removed and failed paths
    """
    report = RollbackReport()
    expected = set(manifest.backups)

    try:
        report.restored = restore_backups(manifest)
    except Exception as e:
        logger.error("Restoring backups failed: %s", e)
    report.failed.extend(p for p in expected if p not in report.restored)

    for path in created_files:
        try:
            if not remove_file(path):
                continue
        except OSError as e:
            logger.error("Could not remove created file %s: %s", path, e)
            report.failed.append(path)
            continue
        report.removed.append(path)
        logger.debug("Removed created file %s", path)

    # Backups of files that could not be restored stay on disk for manual recovery
    kept = {p: manifest.backups.pop(p) for p in list(manifest.backups) if p in report.failed}
    cleanup_backups(manifest)
    if kept:
        manifest.backups.update(kept)
        logger.warning(
            "Rollback incomplete for %d file(s); their backups were kept", len(report.failed)
        )

    logger.info(
        "Rollback restored %d file(s) and removed %d created file(s)",
        len(report.restored),
        len(report.removed),
    )
    return report

"""Filesystem utilities for Splice."""

import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger("splice.filesystem")

TEMP_SUFFIX = ".tmp"
DEFAULT_FILE_MODE = 0o666


def current_umask() -> int:
    """Return the process umask without changing it."""
    mask = os.umask(0)
    os.umask(mask)
    return mask


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_file_atomic(path: Path, content: str | bytes) -> Path:
    """Write a file so that readers never observe partial content.

    The content goes to a temporary file in the target's own directory,
    which is then renamed over the target. Either the target holds exactly
    ``content`` afterwards, or it is left as it was and the temporary file
    is gone.

    An existing target keeps its permission bits. A new file gets the
    usual ``0o666`` minus the process umask. A symlinked target is written
    through, leaving the link in place.

    Args:
        path: Target file path
        content: Full file content (text is encoded as UTF-8)

    Returns:
        The target path

    Raises:
        OSError: If the parent directory cannot be created or written to,
            or the write/rename fails
    """
    data = content.encode("utf-8") if isinstance(content, str) else content
    # Write through symlinks so the link itself survives the rename
    target = path.resolve() if path.is_symlink() else path
    parent = ensure_directory(target.parent)

    fd, temp_name = tempfile.mkstemp(dir=parent, prefix=f".{target.name}.", suffix=TEMP_SUFFIX)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if target.exists():
            shutil.copymode(target, temp_path)
        else:
            os.chmod(temp_path, DEFAULT_FILE_MODE & ~current_umask())
        os.replace(temp_path, target)
    except BaseException:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as cleanup_error:
            logger.warning("Could not remove temp file %s: %s", temp_path, cleanup_error)
        raise

    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path


def read_text_file(path: Path) -> str:
    """Read a text file.

    Args:
        path: Path to the file

    Returns:
        File contents as a string
    """
    return path.read_text(encoding="utf-8")


def read_existing_text(path: Path) -> str | None:
    """Read a text file if it can be read.

    Returns:
        File contents, or None if the file is absent or unreadable
    """
    try:
        return read_text_file(path)
    except (OSError, UnicodeDecodeError):
        return None


def remove_file(path: Path) -> bool:
    """Remove a file.

    Args:
        path: File path to remove

    Returns:
        True if the file was removed, False if it didn't exist
    """
    if not path.exists():
        return False
    path.unlink()
    return True


def resolve_project_path(project_root: Path, file_path: str | Path) -> Path:
    """Resolve a path against a project root.

    Absolute paths are kept; ``..`` segments are collapsed without
    following symlinks.

    Example: resolve_project_path(Path("/app"), "src/../lib/x.ts") -> /app/lib/x.ts
    """
    path = Path(file_path).expanduser()
    if not path.is_absolute():
        path = project_root / path
    return Path(os.path.normpath(path))

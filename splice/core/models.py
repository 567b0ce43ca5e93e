"""Runtime records passed between the execution stages."""

import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class FileOperation:
    """One file to write.

    ``is_new`` is decided when the plan is built, from whether the target
    could be read at that moment. It must not be recomputed later because
    the run itself may have created the file by then.
    """

    file_path: Path
    content: str
    is_new: bool
    item_id: str = ""
    expected_markers: tuple[str, ...] = ()


@dataclass
class BackupManifest:
    """Run-scoped record of backups: original path -> backup path."""

    timestamp: str
    backups: dict[Path, Path] = field(default_factory=dict)

    @classmethod
    def create(cls) -> "BackupManifest":
        """Create an empty manifest with a collision-free timestamp token."""
        return cls(timestamp=f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}")

    def __len__(self) -> int:
        return len(self.backups)


@dataclass(frozen=True)
class DependencySet:
    """Packages to install, split by runtime and development use."""

    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()

    def all(self) -> list[str]:
        """Flatten to a single list, runtime packages first."""
        return [*self.dependencies, *self.dev_dependencies]

    def is_empty(self) -> bool:
        return not self.dependencies and not self.dev_dependencies


@dataclass(frozen=True)
class VerificationError:
    """A non-fatal problem found after a file was written."""

    file_path: Path
    issue: str
    suggestion: str


@dataclass
class ExecutionResult:
    """Outcome of one execution run."""

    success: bool
    files_created: list[Path] = field(default_factory=list)
    files_modified: list[Path] = field(default_factory=list)
    dependencies_installed: list[str] = field(default_factory=list)
    errors: list[VerificationError] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.errors)

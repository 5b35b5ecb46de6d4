"""Data models for the livetree package."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import hashlib
import os
import stat


class EntryType(Enum):
    """Kinds of tracked filesystem objects."""
    FILE = "file"
    DIRECTORY = "directory"


class ChangeType(Enum):
    """Types of canonical change events."""
    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"
    MOVED = "moved"


class RawEventType(Enum):
    """Types of raw notifications accepted from the OS watch facility."""
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"


@dataclass(frozen=True)
class RawFSEvent:
    """
    Raw notification from the filesystem watcher before classification.

    The kind of the affected object is deliberately not carried: it can be
    stale by delivery time, so the classifier re-stats the disk instead.

    Attributes:
        event_type: Raw notification type
        src_path: Path the notification refers to (old path for MOVED)
        dest_path: New path, for MOVED notifications only
    """
    event_type: RawEventType
    src_path: Path
    dest_path: Optional[Path] = None


@dataclass(frozen=True)
class Entry:
    """One tracked filesystem object as stored in the entry table."""
    entry_type: EntryType
    content_hash: Optional[str] = None

    def __post_init__(self):
        if self.entry_type is EntryType.DIRECTORY and self.content_hash is not None:
            raise ValueError("directories do not carry a content hash")


@dataclass(frozen=True)
class DirectoryEntry:
    """
    Externally visible snapshot of one entry.

    Attributes:
        path: Path relative to the watch root
        full_path: Absolute path
        entry_type: Kind of the entry
    """
    path: Path
    full_path: Path
    entry_type: EntryType


@dataclass(frozen=True)
class ChangeEvent:
    """
    A canonical change event, delivered once per logical transition.

    Attributes:
        change_type: The type of change
        entry_type: Kind of the affected entry
        path: Path relative to the watch root
        full_path: Absolute path
        old_path: For MOVED events, the previous relative path
        old_full_path: For MOVED events, the previous absolute path
    """
    change_type: ChangeType
    entry_type: EntryType
    path: Path
    full_path: Path
    old_path: Optional[Path] = None
    old_full_path: Optional[Path] = None

    def __post_init__(self):
        if not self.full_path.is_absolute():
            raise ValueError(f"full_path must be absolute: {self.full_path}")
        if self.old_full_path is not None and not self.old_full_path.is_absolute():
            raise ValueError(f"old_full_path must be absolute: {self.old_full_path}")
        is_move = self.change_type is ChangeType.MOVED
        if is_move != (self.old_full_path is not None):
            raise ValueError("old path is required for MOVED events and only for them")

    @property
    def content_changed(self) -> bool:
        """Whether consumers should refetch the file content."""
        return self.entry_type is EntryType.FILE and self.change_type in (
            ChangeType.CREATED,
            ChangeType.CHANGED,
        )

    @classmethod
    def create(
        cls,
        root: Path,
        change_type: ChangeType,
        entry_type: EntryType,
        full_path: Path,
        old_full_path: Optional[Path] = None,
    ) -> "ChangeEvent":
        """Create an event, deriving relative paths from the watch root."""
        return cls(
            change_type=change_type,
            entry_type=entry_type,
            path=full_path.relative_to(root),
            full_path=full_path,
            old_path=old_full_path.relative_to(root) if old_full_path is not None else None,
            old_full_path=old_full_path,
        )


def stat_entry_type(path: Path, follow_symlinks: bool = False) -> Optional[EntryType]:
    """
    Determine the current kind of a path on disk.

    Args:
        path: Path to check
        follow_symlinks: Whether symbolic links are resolved

    Returns:
        FILE or DIRECTORY, or None if the path is absent or of another kind
    """
    try:
        st = os.stat(path) if follow_symlinks else os.lstat(path)
    except (OSError, ValueError):
        return None

    if stat.S_ISREG(st.st_mode):
        return EntryType.FILE
    if stat.S_ISDIR(st.st_mode):
        return EntryType.DIRECTORY
    return None


def compute_file_hash(path: Path, algorithm: str = "sha256") -> Optional[str]:
    """
    Compute hash of file contents.

    Args:
        path: Path to the file
        algorithm: Hash algorithm to use (default: sha256)

    Returns:
        Hex digest of the hash, or None if file cannot be read
    """
    if not path.exists() or path.is_dir():
        return None

    try:
        hasher = hashlib.new(algorithm)
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                hasher.update(chunk)
        return hasher.hexdigest()
    except (IOError, OSError, PermissionError):
        return None

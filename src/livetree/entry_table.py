"""The authoritative in-memory snapshot of the watched tree."""

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .models import DirectoryEntry, Entry, EntryType


class EntryTable:
    """
    Mapping from canonical absolute path to Entry.

    Holds at most one entry per path. Entries are immutable, so callers
    can never change table state through a returned reference; updates go
    through set() and pop().

    Not thread-safe on its own: the owning watcher serializes all access.
    """

    def __init__(self):
        self._entries: Dict[Path, Entry] = {}

    def get(self, path: Path) -> Optional[Entry]:
        """Return the entry stored at path, if any."""
        return self._entries.get(path)

    def set(self, path: Path, entry: Entry) -> None:
        """Insert or replace the entry at path."""
        self._entries[path] = entry

    def pop(self, path: Path) -> Optional[Entry]:
        """Remove and return the entry at path, if any."""
        return self._entries.pop(path, None)

    def paths(self) -> List[Path]:
        """Snapshot of all tracked paths, in insertion order."""
        return list(self._entries)

    def items(self) -> List[Tuple[Path, Entry]]:
        """Snapshot of all (path, entry) pairs, in insertion order."""
        return list(self._entries.items())

    def files(self) -> List[Path]:
        """Snapshot of all tracked file paths."""
        return [
            path for path, entry in self._entries.items()
            if entry.entry_type is EntryType.FILE
        ]

    def load(
        self,
        pairs: Iterable[Tuple[Path, EntryType]],
        hasher: Callable[[Path], Optional[str]],
    ) -> int:
        """
        Replace the table contents from an enumeration.

        Files whose hash cannot be computed (vanished or unreadable during
        the scan) are left out; reconciliation picks them up later.

        Args:
            pairs: (path, entry type) pairs from a tree enumeration
            hasher: Function computing the content hash of a file

        Returns:
            Number of entries loaded
        """
        self._entries.clear()

        for path, entry_type in pairs:
            if entry_type is EntryType.FILE:
                content_hash = hasher(path)
                if content_hash is None:
                    continue
                self._entries[path] = Entry(entry_type, content_hash)
            else:
                self._entries[path] = Entry(entry_type)

        return len(self._entries)

    def snapshot(self, root: Path) -> List[DirectoryEntry]:
        """
        Project the table into directory entries.

        Args:
            root: Watch root used to derive relative paths

        Returns:
            List of DirectoryEntry snapshots
        """
        return [
            DirectoryEntry(
                path=path.relative_to(root),
                full_path=path,
                entry_type=entry.entry_type,
            )
            for path, entry in self._entries.items()
        ]

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def __contains__(self, path: Path) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

"""Full-tree reconciliation of the entry table against the live filesystem."""

import logging
from pathlib import Path
from typing import List, Optional, Set

from .config import WatcherConfig
from .entry_table import EntryTable
from .enumerator import iter_entries
from .models import ChangeEvent, ChangeType, Entry, EntryType, compute_file_hash

logger = logging.getLogger(__name__)


class Reconciler:
    """
    Repairs structural drift between the entry table and the disk.

    OS watch facilities drop and reorder notifications, especially for bulk
    operations and nested renames. A reconciliation pass enumerates the live
    tree and synthesizes the same canonical events the classifier would
    have produced: paths that appeared, disappeared or changed kind.

    Content drift is not repaired: a file whose kind still matches the table
    is never re-hashed here. An in-place edit whose notification was lost
    stays invisible until the next notification for that path.
    """

    def __init__(
        self,
        table: EntryTable,
        root: Path,
        config: Optional[WatcherConfig] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            table: Entry table to repair
            root: Absolute watch root
            config: Watcher configuration
        """
        self.table = table
        self.root = root
        self.config = config or WatcherConfig()

    def _hash(self, path: Path) -> Optional[str]:
        return compute_file_hash(path, self.config.hash_algorithm)

    def _event(self, change_type: ChangeType, entry_type: EntryType, path: Path) -> ChangeEvent:
        return ChangeEvent.create(self.root, change_type, entry_type, path)

    def baseline(self) -> int:
        """
        Populate the table from a fresh enumeration without emitting events.

        Returns:
            Number of entries loaded
        """
        count = self.table.load(iter_entries(self.root, self.config), self._hash)
        logger.info(f"Baseline scan of {self.root}: {count} entries")
        return count

    def reconcile(self) -> List[ChangeEvent]:
        """
        Diff a fresh enumeration against the table and repair it.

        Returns:
            Synthesized events, in emission order
        """
        events = []
        live: Set[Path] = set()

        for path, entry_type in iter_entries(self.root, self.config):
            existing = self.table.get(path)
            if existing is not None and existing.entry_type is entry_type:
                live.add(path)
                continue

            if entry_type is EntryType.FILE:
                content_hash = self._hash(path)
                if content_hash is None:
                    # Vanished mid-scan; treated as absent below.
                    continue
                entry = Entry(EntryType.FILE, content_hash)
            else:
                entry = Entry(EntryType.DIRECTORY)

            live.add(path)
            if existing is not None:
                events.append(self._event(ChangeType.DELETED, existing.entry_type, path))
            self.table.set(path, entry)
            events.append(self._event(ChangeType.CREATED, entry_type, path))

        for path, entry in self.table.items():
            if path not in live:
                self.table.pop(path)
                events.append(self._event(ChangeType.DELETED, entry.entry_type, path))

        if events:
            logger.info(f"Reconciliation of {self.root} repaired {len(events)} event(s)")
        return events

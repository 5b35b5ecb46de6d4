"""Classification of raw OS notifications into canonical change events."""

import logging
from pathlib import Path
from typing import List, Optional

from .config import WatcherConfig
from .entry_table import EntryTable
from .exceptions import IncompleteRenameError, UnsupportedNotificationError
from .models import (
    ChangeEvent,
    ChangeType,
    Entry,
    EntryType,
    RawEventType,
    RawFSEvent,
    compute_file_hash,
    stat_entry_type,
)

logger = logging.getLogger(__name__)


class ChangeClassifier:
    """
    Turns raw, untrustworthy notifications into canonical events.

    The notification's own claim about what happened is only a hint: the
    current disk state is re-stated, and file content is hashed so that
    notifications which did not actually change anything are suppressed.
    Every call mutates the entry table to match what it reports.

    Whenever an entry has to make room for another one at the same path
    (a type flip, or a move onto an occupied path), the DELETED event for
    the old occupant comes strictly before the event for the new one.
    """

    def __init__(
        self,
        table: EntryTable,
        root: Path,
        config: Optional[WatcherConfig] = None,
    ):
        """
        Initialize the classifier.

        Args:
            table: Entry table to mutate
            root: Absolute watch root
            config: Watcher configuration
        """
        self.table = table
        self.root = root
        self.config = config or WatcherConfig()

    def classify(self, raw_event: RawFSEvent) -> List[ChangeEvent]:
        """
        Classify one raw notification.

        Args:
            raw_event: The raw notification from the watch facility

        Returns:
            Zero, one or two canonical events, in emission order

        Raises:
            UnsupportedNotificationError: If the notification type is unknown
            IncompleteRenameError: If a rename lacks its old or new path
        """
        event_type = raw_event.event_type

        if event_type is RawEventType.MOVED:
            if raw_event.src_path is None or raw_event.dest_path is None:
                raise IncompleteRenameError(
                    f"Rename without both paths: {raw_event.src_path} -> {raw_event.dest_path}"
                )
            return self._handle_move(raw_event.src_path, raw_event.dest_path)
        if event_type is RawEventType.DELETED:
            return self._handle_delete(raw_event.src_path)
        if event_type is RawEventType.CREATED:
            return self._handle_create(raw_event.src_path)
        if event_type is RawEventType.MODIFIED:
            return self._handle_modify(raw_event.src_path)

        raise UnsupportedNotificationError(f"Unsupported notification type: {event_type!r}")

    def _event(
        self,
        change_type: ChangeType,
        entry_type: EntryType,
        path: Path,
        old_path: Optional[Path] = None,
    ) -> ChangeEvent:
        return ChangeEvent.create(self.root, change_type, entry_type, path, old_path)

    def _ignored(self, path: Path) -> bool:
        return path == self.root or self.config.should_ignore(path, self.root)

    def _current_type(self, path: Path) -> Optional[EntryType]:
        return stat_entry_type(path, self.config.follow_symlinks)

    def _hash(self, path: Path) -> Optional[str]:
        return compute_file_hash(path, self.config.hash_algorithm)

    def _store(self, path: Path, entry_type: EntryType) -> Optional[Entry]:
        """Build a fresh entry for path; None if a file vanished before hashing."""
        if entry_type is EntryType.DIRECTORY:
            return Entry(EntryType.DIRECTORY)

        content_hash = self._hash(path)
        if content_hash is None:
            return None
        return Entry(EntryType.FILE, content_hash)

    def _handle_modify(self, path: Path) -> List[ChangeEvent]:
        """Handle a modified notification."""
        if self._ignored(path):
            return []

        entry_type = self._current_type(path)
        if entry_type is None:
            logger.debug(f"Dropping modify for vanished path: {path}")
            return []

        existing = self.table.get(path)
        if existing is None or existing.entry_type is not entry_type:
            return self._insert_created(path, entry_type)

        if entry_type is EntryType.DIRECTORY:
            return []

        content_hash = self._hash(path)
        if content_hash is None:
            logger.debug(f"Dropping modify for file that vanished before hashing: {path}")
            return []

        if existing.content_hash == content_hash:
            logger.debug(f"Content unchanged, suppressing: {path}")
            return []

        self.table.set(path, Entry(EntryType.FILE, content_hash))
        return [self._event(ChangeType.CHANGED, EntryType.FILE, path)]

    def _handle_create(self, path: Path) -> List[ChangeEvent]:
        """Handle a created notification."""
        if self._ignored(path):
            return []

        entry_type = self._current_type(path)
        if entry_type is None:
            logger.debug(f"Dropping create for vanished path: {path}")
            return []

        return self._insert_created(path, entry_type)

    def _insert_created(self, path: Path, entry_type: EntryType) -> List[ChangeEvent]:
        """
        Store a new entry at path, replacing an occupant of the other kind.

        A path already tracked with the same kind was reported earlier (by
        reconciliation or a previous notification): a directory yields
        nothing, a file yields CHANGED only if its content differs.
        """
        entry = self._store(path, entry_type)
        if entry is None:
            logger.debug(f"Dropping create for file that vanished before hashing: {path}")
            return []

        events = []
        existing = self.table.get(path)
        if existing is not None and existing.entry_type is entry_type:
            if existing.content_hash == entry.content_hash:
                logger.debug(f"Already tracked, suppressing create: {path}")
                return []
            self.table.set(path, entry)
            return [self._event(ChangeType.CHANGED, EntryType.FILE, path)]

        if existing is not None:
            self.table.pop(path)
            events.append(self._event(ChangeType.DELETED, existing.entry_type, path))

        self.table.set(path, entry)
        events.append(self._event(ChangeType.CREATED, entry_type, path))
        return events

    def _handle_delete(self, path: Path) -> List[ChangeEvent]:
        """Handle a deleted notification."""
        if self._ignored(path):
            return []

        existing = self.table.pop(path)
        if existing is None:
            logger.debug(f"Dropping delete for untracked path: {path}")
            return []

        return [self._event(ChangeType.DELETED, existing.entry_type, path)]

    def _handle_move(self, old_path: Path, path: Path) -> List[ChangeEvent]:
        """Handle a rename notification."""
        if old_path == path:
            return []

        if self._ignored(path):
            # Moved out of sight: to consumers this is a deletion.
            return self._handle_delete(old_path)

        entry_type = self._current_type(path)
        if entry_type is None:
            logger.debug(f"Dropping move to vanished path: {old_path} -> {path}")
            return []

        moved = None if self._ignored(old_path) else self.table.pop(old_path)
        if moved is None:
            return self._insert_created(path, entry_type)

        events = []
        occupant = self.table.pop(path)
        if occupant is not None:
            events.append(self._event(ChangeType.DELETED, occupant.entry_type, path))

        self.table.set(path, moved)
        events.append(self._event(ChangeType.MOVED, moved.entry_type, path, old_path))
        return events

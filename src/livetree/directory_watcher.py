"""The directory watcher: entry table, classification, reconciliation, fanout."""

import logging
import threading
from pathlib import Path
from typing import List, Optional

from .classifier import ChangeClassifier
from .config import WatcherConfig
from .entry_table import EntryTable
from .exceptions import RootNotFoundError
from .fanout import Listener, SubscriberFanout
from .fs_watcher import FSWatch
from .models import ChangeEvent, ChangeType, DirectoryEntry, EntryType, RawFSEvent
from .reconciler import Reconciler

logger = logging.getLogger(__name__)


class DirectoryWatcher:
    """
    Watches one directory tree and publishes canonical change events.

    Construction performs a baseline scan that fills the entry table
    without emitting anything, then starts the OS watch. Raw notifications
    are classified into canonical events; get_entries() and reload_all()
    reconcile against the disk first, repairing any notifications the OS
    dropped.

    A single reentrant lock serializes every table access together with
    the delivery of the events it produced, so a reconciliation and a live
    notification never interleave. Listeners run while the lock is held.
    """

    def __init__(
        self,
        root: Path,
        config: Optional[WatcherConfig] = None,
        observe: bool = True,
    ):
        """
        Initialize the watcher.

        Args:
            root: Directory to watch
            config: Watcher configuration
            observe: Whether to start the OS watch (False for manual feeding)

        Raises:
            RootNotFoundError: If root does not exist or is not a directory
        """
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise RootNotFoundError(f"Root folder does not exist: {self.root}")

        self.config = config or WatcherConfig()
        self._table = EntryTable()
        self._classifier = ChangeClassifier(self._table, self.root, self.config)
        self._reconciler = Reconciler(self._table, self.root, self.config)
        self._fanout = SubscriberFanout()
        self._lock = threading.RLock()
        self._disposed = False

        with self._lock:
            self._reconciler.baseline()

        self._watch = FSWatch(self.root, self.handle, self.config)
        if observe:
            self._watch.start()

    def subscribe(self, listener: Listener) -> bool:
        """
        Attach a listener to the canonical event stream.

        The listener only receives events raised after attachment; use
        get_entries() to learn the current state.
        """
        return self._fanout.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        """Detach a listener."""
        return self._fanout.unsubscribe(listener)

    def handle(self, raw_event: RawFSEvent) -> List[ChangeEvent]:
        """
        Classify one raw notification and deliver the resulting events.

        Args:
            raw_event: Raw notification from the watch facility

        Returns:
            The canonical events that were delivered
        """
        with self._lock:
            if self._disposed:
                return []

            logger.debug(
                f"Notification: {raw_event.event_type.value} - {raw_event.src_path}"
                + (f" -> {raw_event.dest_path}" if raw_event.dest_path else "")
            )
            events = self._classifier.classify(raw_event)
            self._dispatch(events)
            return events

    def update_all(self) -> List[ChangeEvent]:
        """
        Reconcile the entry table with the disk and deliver repair events.

        Returns:
            The synthesized events
        """
        with self._lock:
            events = self._reconciler.reconcile()
            self._dispatch(events)
            return events

    def get_entries(self) -> List[DirectoryEntry]:
        """
        Get a snapshot of the watched tree.

        Reconciles first, so the snapshot reflects the disk even when
        notifications were lost.

        Returns:
            List of DirectoryEntry snapshots (order unspecified)
        """
        with self._lock:
            self.update_all()
            return self._table.snapshot(self.root)

    def reload_all(self) -> None:
        """
        Reconcile, then emit CHANGED for every known file.

        Makes every listener treat all current file contents as freshly
        changed.
        """
        with self._lock:
            self.update_all()
            files = self._table.files()
            logger.info(f"Reloading {len(files)} file(s) under {self.root}")
            for path in files:
                self._fanout.dispatch(
                    ChangeEvent.create(self.root, ChangeType.CHANGED, EntryType.FILE, path)
                )

    def _dispatch(self, events: List[ChangeEvent]) -> None:
        for event in events:
            logger.debug(f"Emitting {event.change_type.value} {event.entry_type.value}: {event.path}")
            self._fanout.dispatch(event)

    def dispose(self) -> None:
        """Release the OS watch. Idempotent."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True

        self._watch.stop()

    def close(self) -> None:
        """Alias of dispose()."""
        self.dispose()

    @property
    def is_disposed(self) -> bool:
        """Check if the watcher has been disposed."""
        return self._disposed

    def __len__(self) -> int:
        """Return the number of tracked entries."""
        with self._lock:
            return len(self._table)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

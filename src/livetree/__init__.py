"""
livetree

Watches a directory tree and produces a deduplicated stream of canonical
change events for downstream consumers.

Features:
- Baseline scan of the tree into an in-memory entry table
- Canonical events: CREATED, CHANGED, DELETED, MOVED, per entry kind
- Content hashing to suppress notifications that changed nothing
- Type flips reported as DELETED followed by CREATED
- Full-tree reconciliation to repair dropped or reordered notifications
- Synchronous fanout to attached listeners
"""

from .models import (
    EntryType,
    ChangeType,
    RawEventType,
    RawFSEvent,
    Entry,
    DirectoryEntry,
    ChangeEvent,
    compute_file_hash,
    stat_entry_type,
)

from .config import WatcherConfig

from .exceptions import (
    WatcherError,
    RootNotFoundError,
    NotificationError,
    UnsupportedNotificationError,
    IncompleteRenameError,
)

from .entry_table import EntryTable
from .enumerator import iter_entries
from .classifier import ChangeClassifier
from .reconciler import Reconciler
from .fanout import SubscriberFanout
from .fs_watcher import FSWatch, FSEventHandler
from .directory_watcher import DirectoryWatcher


__all__ = [
    # Models
    "EntryType",
    "ChangeType",
    "RawEventType",
    "RawFSEvent",
    "Entry",
    "DirectoryEntry",
    "ChangeEvent",
    "compute_file_hash",
    "stat_entry_type",
    # Config
    "WatcherConfig",
    # Exceptions
    "WatcherError",
    "RootNotFoundError",
    "NotificationError",
    "UnsupportedNotificationError",
    "IncompleteRenameError",
    # Components
    "EntryTable",
    "iter_entries",
    "ChangeClassifier",
    "Reconciler",
    "SubscriberFanout",
    "FSWatch",
    "FSEventHandler",
    # Main entry point
    "DirectoryWatcher",
]

__version__ = "0.1.0"

"""File system watching using the watchdog library."""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from .config import WatcherConfig
from .models import RawEventType, RawFSEvent

logger = logging.getLogger(__name__)


def _as_path(value) -> Optional[Path]:
    if not value:
        return None
    return Path(os.fsdecode(value))


class FSEventHandler(FileSystemEventHandler):
    """Handler that converts watchdog events to RawFSEvent."""

    def __init__(self, callback: Callable[[RawFSEvent], None]):
        super().__init__()
        self.callback = callback

    def _emit(self, event_type: RawEventType, src_path: Path, dest_path: Optional[Path] = None):
        """Emit a RawFSEvent to the callback."""
        self.callback(RawFSEvent(event_type, src_path, dest_path))

    def on_created(self, event):
        self._emit(RawEventType.CREATED, _as_path(event.src_path))

    def on_deleted(self, event):
        self._emit(RawEventType.DELETED, _as_path(event.src_path))

    def on_modified(self, event):
        self._emit(RawEventType.MODIFIED, _as_path(event.src_path))

    def on_moved(self, event):
        self._emit(
            RawEventType.MOVED,
            _as_path(event.src_path),
            _as_path(event.dest_path),
        )


class FSWatch:
    """
    Owns the watchdog observer for one root directory.

    Notifications are delivered to the callback on the observer's thread.
    """

    def __init__(
        self,
        root: Path,
        callback: Callable[[RawFSEvent], None],
        config: Optional[WatcherConfig] = None,
    ):
        """
        Initialize the watch.

        Args:
            root: Directory to watch
            callback: Callback function for raw filesystem events
            config: Watcher configuration
        """
        self.root = root
        self.config = config or WatcherConfig()
        self.handler = FSEventHandler(callback)
        self._observer: Optional[Observer] = None
        self._lock = threading.Lock()

    def start(self) -> bool:
        """
        Start watching the root directory.

        Returns:
            True if watching started, False if already watching
        """
        with self._lock:
            if self._observer is not None:
                return False

            observer = Observer(timeout=self.config.observer_timeout)
            observer.schedule(
                self.handler,
                str(self.root),
                recursive=self.config.recursive,
            )
            observer.start()
            self._observer = observer
            logger.info(f"Started watching {self.root}")
            return True

    def stop(self) -> bool:
        """
        Stop watching. Safe to call repeatedly and from the observer thread.

        Returns:
            True if watching stopped, False if not watching
        """
        with self._lock:
            observer = self._observer
            self._observer = None

        if observer is None:
            return False

        observer.stop()
        if threading.current_thread() is not observer:
            observer.join(timeout=self.config.stop_timeout)
        logger.info(f"Stopped watching {self.root}")
        return True

    @property
    def is_running(self) -> bool:
        """Check if the observer is running."""
        with self._lock:
            return self._observer is not None

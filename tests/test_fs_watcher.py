"""Tests for filesystem watcher module."""

import pytest
import time
import threading
from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    DirModifiedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from src.livetree.config import WatcherConfig
from src.livetree.models import RawEventType, RawFSEvent
from src.livetree.fs_watcher import FSEventHandler, FSWatch


class TestFSEventHandler:
    """Tests for FSEventHandler class."""

    def _dispatch(self, event):
        received = []
        handler = FSEventHandler(received.append)
        handler.dispatch(event)
        return received

    def test_created(self, tmp_path):
        received = self._dispatch(FileCreatedEvent(str(tmp_path / "a.txt")))
        assert received == [RawFSEvent(RawEventType.CREATED, tmp_path / "a.txt")]

    def test_directory_created(self, tmp_path):
        received = self._dispatch(DirCreatedEvent(str(tmp_path / "d")))
        assert received == [RawFSEvent(RawEventType.CREATED, tmp_path / "d")]

    def test_deleted(self, tmp_path):
        received = self._dispatch(FileDeletedEvent(str(tmp_path / "a.txt")))
        assert received == [RawFSEvent(RawEventType.DELETED, tmp_path / "a.txt")]

    def test_modified(self, tmp_path):
        received = self._dispatch(FileModifiedEvent(str(tmp_path / "a.txt")))
        assert received == [RawFSEvent(RawEventType.MODIFIED, tmp_path / "a.txt")]

    def test_directory_modified(self, tmp_path):
        received = self._dispatch(DirModifiedEvent(str(tmp_path)))
        assert received == [RawFSEvent(RawEventType.MODIFIED, tmp_path)]

    def test_moved(self, tmp_path):
        received = self._dispatch(FileMovedEvent(str(tmp_path / "a.txt"), str(tmp_path / "b.txt")))
        assert received == [
            RawFSEvent(RawEventType.MOVED, tmp_path / "a.txt", tmp_path / "b.txt")
        ]

    def test_bytes_paths(self, tmp_path):
        received = self._dispatch(FileCreatedEvent(str(tmp_path / "a.txt").encode()))
        assert received == [RawFSEvent(RawEventType.CREATED, tmp_path / "a.txt")]

    def test_closed_not_forwarded(self, tmp_path):
        assert self._dispatch(FileClosedEvent(str(tmp_path / "a.txt"))) == []


class TestFSWatch:
    """Tests for FSWatch class."""

    def test_start_and_stop(self, tmp_path):
        watch = FSWatch(tmp_path, lambda event: None)

        assert watch.start() is True
        assert watch.is_running
        assert watch.stop() is True
        assert not watch.is_running

    def test_start_twice(self, tmp_path):
        watch = FSWatch(tmp_path, lambda event: None)

        watch.start()
        assert watch.start() is False

        watch.stop()

    def test_stop_not_running(self, tmp_path):
        watch = FSWatch(tmp_path, lambda event: None)
        assert watch.stop() is False

    def test_detects_file_creation(self, tmp_path):
        events = []
        lock = threading.Lock()

        def callback(event):
            with lock:
                events.append(event)

        watch = FSWatch(tmp_path, callback, WatcherConfig())
        watch.start()

        # Give watcher time to start
        time.sleep(0.2)

        test_file = tmp_path / "test.txt"
        test_file.write_text("hello")

        time.sleep(0.5)

        watch.stop()

        with lock:
            create_events = [
                e for e in events
                if e.event_type == RawEventType.CREATED and e.src_path.name == "test.txt"
            ]

        assert len(create_events) >= 1

    def test_detects_file_move(self, tmp_path):
        old = tmp_path / "old.txt"
        old.write_text("x")
        events = []
        lock = threading.Lock()

        def callback(event):
            with lock:
                events.append(event)

        watch = FSWatch(tmp_path, callback)
        watch.start()
        time.sleep(0.2)

        old.rename(tmp_path / "new.txt")

        time.sleep(0.5)
        watch.stop()

        with lock:
            moves = [e for e in events if e.event_type == RawEventType.MOVED]

        assert len(moves) >= 1
        assert moves[0].src_path.name == "old.txt"
        assert moves[0].dest_path.name == "new.txt"

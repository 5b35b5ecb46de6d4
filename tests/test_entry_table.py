"""Tests for entry table module."""

import pytest
from pathlib import Path

from src.livetree.entry_table import EntryTable
from src.livetree.models import Entry, EntryType


class TestEntryTable:
    """Tests for EntryTable class."""

    def test_empty(self):
        table = EntryTable()
        assert len(table) == 0
        assert table.paths() == []

    def test_set_and_get(self, tmp_path):
        table = EntryTable()
        entry = Entry(EntryType.FILE, "h1")

        table.set(tmp_path / "a.txt", entry)

        assert table.get(tmp_path / "a.txt") == entry
        assert tmp_path / "a.txt" in table
        assert len(table) == 1

    def test_set_replaces(self, tmp_path):
        table = EntryTable()
        table.set(tmp_path / "a", Entry(EntryType.FILE, "h1"))
        table.set(tmp_path / "a", Entry(EntryType.DIRECTORY))

        assert table.get(tmp_path / "a") == Entry(EntryType.DIRECTORY)
        assert len(table) == 1

    def test_get_missing(self, tmp_path):
        assert EntryTable().get(tmp_path / "missing") is None

    def test_pop(self, tmp_path):
        table = EntryTable()
        table.set(tmp_path / "a", Entry(EntryType.DIRECTORY))

        assert table.pop(tmp_path / "a") == Entry(EntryType.DIRECTORY)
        assert table.pop(tmp_path / "a") is None
        assert len(table) == 0

    def test_files(self, tmp_path):
        table = EntryTable()
        table.set(tmp_path / "d", Entry(EntryType.DIRECTORY))
        table.set(tmp_path / "d" / "f", Entry(EntryType.FILE, "h"))

        assert table.files() == [tmp_path / "d" / "f"]

    def test_items_is_snapshot(self, tmp_path):
        table = EntryTable()
        table.set(tmp_path / "a", Entry(EntryType.DIRECTORY))
        table.set(tmp_path / "b", Entry(EntryType.DIRECTORY))

        for path, _ in table.items():
            table.pop(path)

        assert len(table) == 0

    def test_load(self, tmp_path):
        table = EntryTable()
        table.set(tmp_path / "stale", Entry(EntryType.DIRECTORY))
        pairs = [
            (tmp_path / "a.txt", EntryType.FILE),
            (tmp_path / "d", EntryType.DIRECTORY),
        ]

        count = table.load(pairs, lambda path: f"hash-of-{path.name}")

        assert count == 2
        assert tmp_path / "stale" not in table
        assert table.get(tmp_path / "a.txt") == Entry(EntryType.FILE, "hash-of-a.txt")
        assert table.get(tmp_path / "d") == Entry(EntryType.DIRECTORY)

    def test_load_skips_unhashable_files(self, tmp_path):
        table = EntryTable()

        count = table.load([(tmp_path / "gone.txt", EntryType.FILE)], lambda path: None)

        assert count == 0

    def test_snapshot(self, tmp_path):
        table = EntryTable()
        table.set(tmp_path / "d", Entry(EntryType.DIRECTORY))
        table.set(tmp_path / "d" / "f.lua", Entry(EntryType.FILE, "h"))

        snapshot = {e.path: e for e in table.snapshot(tmp_path)}

        assert set(snapshot) == {Path("d"), Path("d/f.lua")}
        assert snapshot[Path("d/f.lua")].full_path == tmp_path / "d" / "f.lua"
        assert snapshot[Path("d/f.lua")].entry_type == EntryType.FILE
        assert snapshot[Path("d")].entry_type == EntryType.DIRECTORY

    def test_clear(self, tmp_path):
        table = EntryTable()
        table.set(tmp_path / "a", Entry(EntryType.DIRECTORY))
        table.clear()
        assert len(table) == 0

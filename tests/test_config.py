"""Tests for config module."""

import pytest
from pathlib import Path

from src.livetree.config import WatcherConfig
from src.liveserver.config import ServerConfig


ROOT = Path("/watched")


class TestWatcherConfig:
    """Tests for WatcherConfig class."""

    def test_default_values(self):
        config = WatcherConfig()
        assert config.hash_algorithm == "sha256"
        assert config.recursive is True
        assert config.follow_symlinks is False
        assert config.observer_timeout == 1.0
        assert config.stop_timeout == 5.0

    def test_custom_values(self):
        config = WatcherConfig(hash_algorithm="md5", recursive=False, ignore_patterns=[])
        assert config.hash_algorithm == "md5"
        assert config.recursive is False
        assert config.ignore_patterns == []

    def test_ignore_patterns_default(self):
        config = WatcherConfig()
        assert "*.swp" in config.ignore_patterns
        assert ".git" in config.ignore_patterns
        assert "__pycache__" in config.ignore_patterns

    def test_should_ignore_swap_files(self):
        config = WatcherConfig()
        assert config.should_ignore(ROOT / "file.lua.swp", ROOT) is True
        assert config.should_ignore(ROOT / "sub" / "file.swo", ROOT) is True
        assert config.should_ignore(ROOT / "file.lua~", ROOT) is True

    def test_should_ignore_inside_ignored_directory(self):
        config = WatcherConfig()
        assert config.should_ignore(ROOT / ".git", ROOT) is True
        assert config.should_ignore(ROOT / ".git" / "objects" / "ab", ROOT) is True
        assert config.should_ignore(ROOT / "pkg" / "__pycache__" / "m.pyc", ROOT) is True

    def test_should_not_ignore_regular_files(self):
        config = WatcherConfig()
        assert config.should_ignore(ROOT / "startup.lua", ROOT) is False
        assert config.should_ignore(ROOT / "lib" / "util.lua", ROOT) is False
        assert config.should_ignore(ROOT / ".gitignore", ROOT) is False

    def test_root_itself_not_ignored(self):
        config = WatcherConfig()
        assert config.should_ignore(ROOT, ROOT) is False

    def test_paths_outside_root_ignored(self):
        config = WatcherConfig()
        assert config.should_ignore(Path("/elsewhere/a.lua"), ROOT) is True

    def test_custom_patterns(self):
        config = WatcherConfig(ignore_patterns=["*.log", "build"])
        assert config.should_ignore(ROOT / "app.log", ROOT) is True
        assert config.should_ignore(ROOT / "build" / "out.lua", ROOT) is True
        assert config.should_ignore(ROOT / "file.swp", ROOT) is False


class TestServerConfig:
    """Tests for ServerConfig class."""

    def test_defaults(self, tmp_path):
        config = ServerConfig(root_dir=tmp_path)
        assert config.lua_dir is None
        assert config.text_extensions == frozenset({".lua"})

    def test_frozen(self, tmp_path):
        config = ServerConfig(root_dir=tmp_path)
        with pytest.raises(AttributeError):
            config.root_dir = tmp_path / "other"

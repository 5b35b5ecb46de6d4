"""Configuration for the livetree package."""

import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class WatcherConfig:
    """
    Configuration options for the directory watcher.

    Attributes:
        hash_algorithm: Algorithm for content hashing (any hashlib name)
        recursive: Whether to watch directories recursively
        follow_symlinks: Whether to follow symbolic links
        ignore_patterns: Glob patterns for path components to ignore
        observer_timeout: Polling timeout passed to the watchdog observer
        stop_timeout: Seconds to wait for the observer thread on dispose
    """
    hash_algorithm: str = "sha256"
    recursive: bool = True
    follow_symlinks: bool = False
    ignore_patterns: List[str] = field(default_factory=lambda: [
        "*.swp",
        "*.swo",
        "*~",
        ".git",
        ".hg",
        ".svn",
        "__pycache__",
        ".DS_Store",
        "Thumbs.db",
    ])
    observer_timeout: float = 1.0
    stop_timeout: float = 5.0

    def should_ignore(self, path: Path, root: Path) -> bool:
        """
        Check if a path should be ignored based on ignore patterns.

        Every component of the path relative to the root is matched, so
        anything below an ignored directory is ignored as well.

        Args:
            path: Path to check
            root: Watch root the path belongs to

        Returns:
            True if the path should be ignored
        """
        try:
            parts = path.relative_to(root).parts
        except ValueError:
            return True

        for part in parts:
            for pattern in self.ignore_patterns:
                if fnmatch.fnmatch(part, pattern):
                    return True

        return False

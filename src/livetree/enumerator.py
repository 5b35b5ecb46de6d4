"""Lazy depth-first enumeration of a directory tree."""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import WatcherConfig
from .models import EntryType

logger = logging.getLogger(__name__)


def _scan(directory: Path, root: Path, config: WatcherConfig) -> List[Tuple[Path, EntryType]]:
    """List one directory: files first, then subdirectories, each sorted by name."""
    files = []
    directories = []

    try:
        with os.scandir(directory) as it:
            for dir_entry in it:
                path = directory / dir_entry.name
                if config.should_ignore(path, root):
                    continue
                try:
                    if dir_entry.is_file(follow_symlinks=config.follow_symlinks):
                        files.append((path, EntryType.FILE))
                    elif dir_entry.is_dir(follow_symlinks=config.follow_symlinks):
                        directories.append((path, EntryType.DIRECTORY))
                except OSError:
                    continue
    except (FileNotFoundError, NotADirectoryError, PermissionError) as e:
        logger.debug(f"Skipping unreadable directory {directory}: {e}")
        return []

    files.sort(key=lambda item: item[0].name)
    directories.sort(key=lambda item: item[0].name)
    return files + directories


def iter_entries(
    root: Path,
    config: Optional[WatcherConfig] = None,
) -> Iterator[Tuple[Path, EntryType]]:
    """
    Enumerate a tree lazily, depth first.

    For each directory its files are yielded first, then each subdirectory
    followed immediately by that subdirectory's own contents. The root
    itself is not yielded. Ignored paths are pruned together with their
    subtrees.

    Args:
        root: Directory to enumerate
        config: Watcher configuration (ignore patterns, symlink policy)

    Yields:
        (absolute path, entry type) pairs
    """
    config = config or WatcherConfig()
    stack = [iter(_scan(root, root, config))]

    while stack:
        item = next(stack[-1], None)
        if item is None:
            stack.pop()
            continue

        yield item

        path, entry_type = item
        if entry_type is EntryType.DIRECTORY:
            stack.append(iter(_scan(path, root, config)))

"""File lookup helpers for serving the watched tree."""

from pathlib import Path
from typing import Iterable, Optional


def resolve_under(base_dir: Path, name: str) -> Optional[Path]:
    """
    Resolve a request path below a base directory.

    Args:
        base_dir: Directory requests are relative to
        name: Relative request path ("/"-separated)

    Returns:
        The absolute path, or None if it would escape base_dir
    """
    base = base_dir.resolve()
    candidate = (base / name.lstrip("/")).resolve()
    try:
        candidate.relative_to(base)
    except ValueError:
        return None
    if candidate == base:
        return None
    return candidate


def find_file(base_dir: Path, name: str) -> Optional[Path]:
    """
    Find the file a request refers to.

    An exact match wins. Otherwise a file in the same directory whose name
    without extension equals the requested name is accepted, so clients
    may ask for "startup" and get "startup.lua".

    Args:
        base_dir: Directory to search
        name: Relative request path

    Returns:
        Path of the matching file, or None
    """
    candidate = resolve_under(base_dir, name)
    if candidate is None:
        return None

    if candidate.is_file():
        return candidate

    directory = candidate.parent
    if not directory.is_dir():
        return None

    for path in sorted(directory.iterdir()):
        if path.is_file() and path.stem == candidate.name:
            return path

    return None


def is_text_file(path: Path, text_extensions: Iterable[str]) -> bool:
    """Check whether a file is served as text."""
    return path.suffix.lower() in {ext.lower() for ext in text_extensions}

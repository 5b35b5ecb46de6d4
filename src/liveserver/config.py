"""Configuration for the live server."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration options for the live server.

    Attributes:
        root_dir: Watched directory served over HTTP
        lua_dir: Optional directory of client scripts served as a fallback
        text_extensions: Extensions served as UTF-8 text instead of bytes
    """
    root_dir: Path
    lua_dir: Optional[Path] = None
    text_extensions: FrozenSet[str] = field(default_factory=lambda: frozenset({".lua"}))

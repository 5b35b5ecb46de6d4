"""Wire encoding of tree snapshots and change events."""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

from src.livetree import ChangeEvent, DirectoryEntry


class InboundPacketType(Enum):
    """Requests a client may send over the WebSocket."""
    GET_TREE = "get_tree"
    RELOAD_ALL = "reload_all"


class OutboundPacketType(Enum):
    """Packets the server pushes over the WebSocket."""
    ENTRY_TREE = "entry_tree"
    ENTRY_CHANGED = "entry_changed"


class PacketError(ValueError):
    """Inbound packet is malformed or of an unknown type."""
    pass


@dataclass(frozen=True)
class InboundPacket:
    """A parsed client request."""
    type: InboundPacketType
    data: Any = None


def _wire_path(path: Optional[Path]) -> Optional[str]:
    return path.as_posix() if path is not None else None


def entry_to_dict(entry: DirectoryEntry) -> dict:
    """Encode a directory entry as {entry_type, path}."""
    return {
        "entry_type": entry.entry_type.value,
        "path": _wire_path(entry.path),
    }


def change_to_dict(event: ChangeEvent) -> dict:
    """Encode a change event for clients."""
    return {
        "change_type": event.change_type.value,
        "entry_type": event.entry_type.value,
        "path": _wire_path(event.path),
        "old_path": _wire_path(event.old_path),
        "content_changed": event.content_changed,
    }


def tree_packet(entries: Iterable[DirectoryEntry]) -> dict:
    """Build an entry_tree packet."""
    return {
        "type": OutboundPacketType.ENTRY_TREE.value,
        "data": [entry_to_dict(entry) for entry in entries],
    }


def changed_packet(event: ChangeEvent) -> dict:
    """Build an entry_changed packet."""
    return {
        "type": OutboundPacketType.ENTRY_CHANGED.value,
        "data": change_to_dict(event),
    }


def parse_inbound(text: str) -> InboundPacket:
    """
    Parse a client request.

    Args:
        text: Raw text frame

    Returns:
        The parsed packet

    Raises:
        PacketError: If the frame is not a JSON object with a known type
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise PacketError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise PacketError("Packet must be a JSON object")

    try:
        packet_type = InboundPacketType(payload.get("type"))
    except ValueError:
        raise PacketError(f"Unknown packet type: {payload.get('type')!r}")

    return InboundPacket(type=packet_type, data=payload.get("data"))

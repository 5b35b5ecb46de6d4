"""
Live server package.

Serves the watched tree over HTTP and pushes canonical change events to
connected WebSocket clients.
"""

from .config import ServerConfig
from .packets import (
    InboundPacket,
    InboundPacketType,
    OutboundPacketType,
    PacketError,
    change_to_dict,
    changed_packet,
    entry_to_dict,
    parse_inbound,
    tree_packet,
)
from .files import find_file, is_text_file, resolve_under
from .api_server import create_app, LiveServerService


__all__ = [
    "ServerConfig",
    "InboundPacket",
    "InboundPacketType",
    "OutboundPacketType",
    "PacketError",
    "change_to_dict",
    "changed_packet",
    "entry_to_dict",
    "parse_inbound",
    "tree_packet",
    "find_file",
    "is_text_file",
    "resolve_under",
    "create_app",
    "LiveServerService",
]

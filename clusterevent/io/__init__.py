"""
Wire-level protocol implementation.

This module contains the lowest-level communication components:
- FrameCodec, Frame, FrameHeader - Length-prefixed message framing
- SocketTransport - Raw TCP communication
- write_all - Partial-write handling
- ConnectionManager - Connection management
"""

from .frame import Frame, FrameHeader, FrameCodec, FrameConst, encode, decode_header
from .transport import SocketTransport, StreamTransport, ConnectionState
from .chunk import write_all
from .connection import ConnectionManager

__all__ = [
    "Frame",
    "FrameHeader",
    "FrameCodec",
    "FrameConst",
    "encode",
    "decode_header",
    "SocketTransport",
    "StreamTransport",
    "ConnectionState",
    "write_all",
    "ConnectionManager",
]

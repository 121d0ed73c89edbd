"""
Cluster Event Sender

A Python library for pushing JSON cluster events to a remote TCP listener.

This library provides two layers of abstraction:

1. **io**: Wire-level protocol implementation (framing, TCP transport, partial writes, connection)
2. **api**: Event models and the session that delivers them using io

Wire format:
    [4 bytes body length (uint32, network byte order)] [UTF-8 JSON body]

Example usage:
    import clusterevent

    with clusterevent.EventSenderSession(name="Sender") as session:
        event = clusterevent.ClusterEvent(type="custom", name="fade_in", parameters="1.0")
        ok = session.send_event_to("127.0.0.1", 41003, event)
"""

# Session (recommended for most users)
from .api import EventSenderSession, ClusterEvent, JsonSerializable

# Low-level components
from .io import ConnectionManager, ConnectionState, SocketTransport, FrameCodec, Frame, FrameHeader, FrameConst, encode, decode_header, write_all

# Configuration
from .config import SenderConfig, load_config

# Exceptions
from .exceptions import (
    ClusterEventError,
    ClusterConfigurationError,
    ClusterConnectionError,
    AddressParseError,
    ConnectionRetryExhaustedError,
    ClusterSendError,
    TransportError,
    ZeroProgressError,
    ProtocolViolationError,
    SerializationError,
    ClusterFrameError,
    EncodingError,
    TruncatedHeaderError,
)

# Utilities
from .utils import run_with_keyboard_interrupt

__version__ = "0.1.0"

__all__ = [
    # Session
    "EventSenderSession",
    "ClusterEvent",
    "JsonSerializable",

    # Low-level components
    "ConnectionManager",
    "ConnectionState",
    "SocketTransport",
    "FrameCodec",
    "Frame",
    "FrameHeader",
    "FrameConst",
    "encode",
    "decode_header",
    "write_all",

    # Configuration
    "SenderConfig",
    "load_config",

    # Exceptions
    "ClusterEventError",
    "ClusterConfigurationError",
    "ClusterConnectionError",
    "AddressParseError",
    "ConnectionRetryExhaustedError",
    "ClusterSendError",
    "TransportError",
    "ZeroProgressError",
    "ProtocolViolationError",
    "SerializationError",
    "ClusterFrameError",
    "EncodingError",
    "TruncatedHeaderError",

    # Utilities
    "run_with_keyboard_interrupt",
]

"""
Cluster event sender exceptions.

This module defines all custom exceptions used throughout the library.
"""


class ClusterEventError(Exception):
    """Base exception for cluster event sender errors"""
    pass


class ClusterConfigurationError(ClusterEventError):
    """Raised when configuration is invalid"""
    pass


# Connection

class ClusterConnectionError(ClusterEventError):
    """Raised when a connection to the listener can't be established"""
    pass


class AddressParseError(ClusterConnectionError):
    """Raised when the address or port is malformed"""
    pass


class ConnectionRetryExhaustedError(ClusterConnectionError):
    """Raised when every connection attempt failed"""
    pass


# Sending

class ClusterSendError(ClusterEventError):
    """Raised when bytes can't be pushed to the stream"""
    pass


class TransportError(ClusterSendError):
    """Raised when the underlying send call fails"""
    pass


class ZeroProgressError(ClusterSendError):
    """Raised when a send reports no bytes written, peer closed or stalled"""
    pass


class ProtocolViolationError(ClusterSendError):
    """Raised when a send reports more bytes written than were requested"""
    pass


# Framing

class SerializationError(ClusterEventError):
    """Raised when an event can't be converted to JSON"""
    pass


class ClusterFrameError(ClusterEventError):
    """Base for frame codec errors"""
    pass


class EncodingError(ClusterFrameError):
    """Raised when a body doesn't fit the header length field or the buffer"""
    pass


class TruncatedHeaderError(ClusterFrameError):
    """Raised when fewer bytes than a header are supplied"""
    pass

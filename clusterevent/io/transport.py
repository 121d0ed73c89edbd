"""
Stream socket transport.

This module wraps a blocking TCP socket behind the small interface the
connection manager and chunk sender rely on:
- connect(host, port) -> bool
- send(data) -> bytes written (raises OSError on failure)
- close()
- connection_state() -> ConnectionState, read from the live socket; a
  socket in error reads as DISCONNECTED
"""

import logging
import select
import socket
from enum import Enum
from typing import Optional, Protocol


class ConnectionState(Enum):
    DISCONNECTED = 0
    CONNECTING = 1
    CONNECTED = 2


class StreamTransport(Protocol):
    def connect(self, host: str, port: int) -> bool: ...
    def send(self, data: bytes | memoryview) -> int: ...
    def close(self) -> None: ...
    def connection_state(self) -> ConnectionState: ...


class SocketTransport:
    """
    TCP transport over a blocking socket.

    A fresh socket is created for every connect(); a socket whose connect
    failed is closed and never reused.
    """

    def __init__(self,
                 description: str = "Sender",
                 connect_timeout: Optional[float] = None,
                 logger: Optional[logging.Logger] = None):
        self.description = description
        self.connect_timeout = connect_timeout
        self.logger = logger or logging.getLogger(__name__)
        self._sock: Optional[socket.socket] = None

    def connect(self, host: str, port: int) -> bool:
        self.close()
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        if self.connect_timeout is not None:
            sock.settimeout(self.connect_timeout)
        try:
            sock.connect((host, port))
        except OSError as e:
            self.logger.debug(f"{self.description} connect to {host}:{port} failed: {e}")
            sock.close()
            return False
        # Sends are blocking
        sock.settimeout(None)
        self._sock = sock
        return True

    def send(self, data: bytes | memoryview) -> int:
        if self._sock is None:
            raise ConnectionError(f"{self.description} has no socket")
        return self._sock.send(data)

    def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass # already reset by peer
        self._sock.close()
        self._sock = None

    def connection_state(self) -> ConnectionState:
        sock = self._sock
        if sock is None:
            return ConnectionState.DISCONNECTED
        try:
            sock.getpeername()
        except OSError:
            return ConnectionState.DISCONNECTED
        try:
            readable, _, errored = select.select([sock], [], [sock], 0)
        except (OSError, ValueError):
            return ConnectionState.DISCONNECTED
        if errored:
            return ConnectionState.DISCONNECTED
        if readable:
            # Readable with nothing to read means the peer closed its end
            try:
                peek = sock.recv(1, socket.MSG_PEEK)
            except OSError:
                return ConnectionState.DISCONNECTED
            if not peek:
                return ConnectionState.DISCONNECTED
        return ConnectionState.CONNECTED

    def peer(self) -> str:
        if self._sock is None:
            return "unconnected"
        try:
            host, port = self._sock.getpeername()[:2]
        except OSError:
            return "unconnected"
        return f"{host}:{port}"
